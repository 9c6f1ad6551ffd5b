"""
Tests for mapping application types and extras to dependency blocks.
"""

import pytest

from lightsail_deploy.api.exceptions import InternalInconsistencyError
from lightsail_deploy.constants import (
    ApplicationType,
    BucketAccess,
    DatabaseKind,
    DB_PASSWORD_PLACEHOLDER,
)
from lightsail_deploy.core.dependency_resolver import DependencyResolver, resolve
from lightsail_deploy.models.request import BucketOptions, DatabaseOptions


class TestBaseDependencies:
    """Each type gets its own stack plus git and the firewall."""

    @pytest.mark.parametrize("app_type,expected", [
        (ApplicationType.LAMP, ["apache", "firewall", "git", "php"]),
        (ApplicationType.NGINX, ["firewall", "git", "nginx"]),
        (ApplicationType.NODEJS, ["firewall", "git", "nodejs", "pm2"]),
        (ApplicationType.PYTHON, ["firewall", "git", "gunicorn", "python"]),
        (ApplicationType.REACT, ["firewall", "git", "nginx", "nodejs"]),
        (ApplicationType.DOCKER, ["docker", "firewall", "git"]),
    ])
    def test_type_dependencies(self, app_type, expected):
        """Test that names come back sorted and all enabled."""
        dependencies = resolve(app_type)

        assert dependencies.names() == expected
        assert dependencies.enabled_names() == expected

    def test_iteration_is_sorted(self):
        dependencies = resolve(ApplicationType.PYTHON)
        assert [block.name for block in dependencies] == sorted(dependencies.names())

    def test_git_without_lfs(self):
        git = resolve(ApplicationType.NGINX).get("git")
        assert git.config == {"install_lfs": False}

    def test_unknown_type_is_internal_error(self):
        with pytest.raises(InternalInconsistencyError):
            DependencyResolver().resolve("cobol")

    def test_pm2_named_after_app(self):
        dependencies = resolve(ApplicationType.NODEJS, app_slug="my-node-app")
        assert dependencies.get("pm2").config["app_name"] == "my-node-app"

    def test_profiles_are_not_mutated(self):
        """Test that editing one result does not leak into the next."""
        first = resolve(ApplicationType.LAMP)
        first.get("php").config["extensions"].append("gd")

        second = resolve(ApplicationType.LAMP)
        assert "gd" not in second.get("php").config["extensions"]


class TestFirewall:

    @pytest.mark.parametrize("app_type,ports", [
        (ApplicationType.LAMP, ["22", "80", "443", "8080"]),
        (ApplicationType.NODEJS, ["22", "80", "443", "3000"]),
        (ApplicationType.PYTHON, ["22", "80", "443", "5000"]),
        (ApplicationType.REACT, ["22", "80", "443"]),
        (ApplicationType.NGINX, ["22", "80", "443"]),
        (ApplicationType.DOCKER, ["22", "80", "443"]),
    ])
    def test_ports(self, app_type, ports):
        firewall = resolve(app_type).get("firewall")

        assert firewall.enabled is True
        assert firewall.config["allowed_ports"] == ports
        assert firewall.config["deny_all_other"] is True


class TestDatabase:

    def test_no_database_by_default(self):
        dependencies = resolve(ApplicationType.NODEJS, database=DatabaseOptions())

        assert "mysql" not in dependencies
        assert "postgresql" not in dependencies

    def test_local_mysql(self):
        database = DatabaseOptions(kind=DatabaseKind.MYSQL, database_name="shop")
        block = resolve(ApplicationType.LAMP, database=database).get("mysql")

        assert block.enabled is True
        assert block.external is False
        assert block.rds is None
        assert block.config["create_database"] == "shop"
        assert block.config["user_password"] == DB_PASSWORD_PLACEHOLDER
        assert "root_password" in block.config

    def test_external_postgresql(self):
        """Test that an RDS database is recorded but not installed."""
        database = DatabaseOptions(kind=DatabaseKind.POSTGRESQL, external=True,
                                   rds_name="prod-pg", database_name="api")
        block = resolve(ApplicationType.PYTHON, database=database,
                        region="eu-west-1").get("postgresql")

        assert block.enabled is False
        assert block.external is True
        assert block.rds["database_name"] == "prod-pg"
        assert block.rds["region"] == "eu-west-1"
        assert block.rds["master_database"] == "api"
        assert "postgres_password" in block.config

    def test_external_block_serializes_rds(self):
        database = DatabaseOptions(kind=DatabaseKind.MYSQL, external=True, rds_name="db")
        data = resolve(ApplicationType.NODEJS, database=database).to_dict()["mysql"]

        assert list(data) == ["enabled", "external", "config", "rds"]


class TestBucket:

    def test_bucket_block(self):
        bucket = BucketOptions(enabled=True, name="assets", access_level=BucketAccess.READ_ONLY)
        block = resolve(ApplicationType.NGINX, bucket=bucket).get("bucket")

        assert block.enabled is True
        assert block.config == {
            "name": "assets",
            "access_level": "read_only",
            "bundle_id": "small_1_0",
        }

    def test_disabled_bucket_has_no_block(self):
        assert "bucket" not in resolve(ApplicationType.NGINX, bucket=BucketOptions())
