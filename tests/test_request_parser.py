"""
Tests for turning raw parameters into a DeploymentRequest.
"""

import pytest

from lightsail_deploy.api.exceptions import (
    InsufficientResourcesError,
    InvalidEnumError,
    MissingRequiredError,
    ValidationError,
)
from lightsail_deploy.constants import (
    ApplicationType,
    BucketAccess,
    BucketSize,
    DatabaseKind,
    ErrorCode,
    TrustScope,
)
from lightsail_deploy.core.request_parser import (
    is_automated,
    params_from_environment,
    parse_request,
    request_from_environment,
)
from lightsail_deploy.models.request import CreateRole, ExistingRole


class TestDefaults:
    """Unset optional keys take their documented defaults."""

    def test_minimal_request(self, nodejs_params):
        """Test that only type, name and instance are needed."""
        request = parse_request(nodejs_params)

        assert request.app_type == ApplicationType.NODEJS
        assert request.app_name == "My Node App"
        assert request.instance_name == "node-prod"
        assert request.aws_region == "us-east-1"
        assert request.blueprint_id == "ubuntu_22_04"
        assert request.bundle_id == "micro_3_0"
        assert request.app_version == "1.0.0"
        assert request.database.kind == DatabaseKind.NONE
        assert request.bucket.enabled is False
        assert request.github_repo is None

    def test_default_auth_creates_role(self, nodejs_params):
        """Test that without an ARN a role is planned with main-branch trust."""
        request = parse_request(nodejs_params)

        assert isinstance(request.auth, CreateRole)
        assert request.auth.role_name == "GitHubActions-nodejs-deployment"
        assert request.auth.trust_scope == TrustScope.MAIN_BRANCH_ONLY

    def test_empty_strings_count_as_unset(self, nodejs_params):
        """Test that blank values fall back to defaults."""
        nodejs_params.update({"AWS_REGION": "", "BUNDLE_ID": "  "})
        request = parse_request(nodejs_params)

        assert request.aws_region == "us-east-1"
        assert request.bundle_id == "micro_3_0"

    def test_external_database_default_rds_name(self, nodejs_params):
        """Test that an external database without a name gets a derived one."""
        nodejs_params.update({"DATABASE_TYPE": "mysql", "DB_EXTERNAL": "yes"})
        request = parse_request(nodejs_params)

        assert request.database.external is True
        assert request.database.rds_name == "nodejs-mysql-db"
        assert request.database.database_name == "app_db"

    def test_bucket_defaults(self, nodejs_params):
        """Test that an enabled bucket defaults to read_write and small."""
        nodejs_params.update({"ENABLE_BUCKET": "true", "BUCKET_NAME": "assets"})
        request = parse_request(nodejs_params)

        assert request.bucket.enabled is True
        assert request.bucket.access_level == BucketAccess.READ_WRITE
        assert request.bucket.size == BucketSize.SMALL

    def test_slug(self, nodejs_params):
        """Test that the slug is lower-cased with dashes."""
        request = parse_request(nodejs_params)
        assert request.slug == "my-node-app"


class TestRejection:
    """Invalid values fail with the offending field named."""

    @pytest.mark.parametrize("key,field", [
        ("APP_TYPE", "app_type"),
        ("APP_NAME", "app_name"),
        ("INSTANCE_NAME", "instance_name"),
    ])
    def test_missing_required(self, nodejs_params, key, field):
        """Test that each required key is reported when absent."""
        del nodejs_params[key]

        with pytest.raises(MissingRequiredError) as exc_info:
            parse_request(nodejs_params)

        assert exc_info.value.field == field
        assert exc_info.value.error_code == ErrorCode.MISSING_REQUIRED_PARAMETER

    def test_unknown_app_type(self, nodejs_params):
        """Test that an unknown type lists the allowed ones."""
        nodejs_params["APP_TYPE"] = "rails"

        with pytest.raises(InvalidEnumError) as exc_info:
            parse_request(nodejs_params)

        assert exc_info.value.field == "app_type"
        assert "docker" in exc_info.value.allowed

    def test_app_type_is_case_insensitive(self, nodejs_params):
        """Test that APP_TYPE=NodeJS is accepted."""
        nodejs_params["APP_TYPE"] = "NodeJS"
        assert parse_request(nodejs_params).app_type == ApplicationType.NODEJS

    def test_invalid_bundle_is_not_defaulted(self, nodejs_params):
        """Test that a bad bundle fails rather than silently becoming micro."""
        nodejs_params["BUNDLE_ID"] = "huge_9_0"

        with pytest.raises(InvalidEnumError) as exc_info:
            parse_request(nodejs_params)

        assert exc_info.value.field == "bundle_id"

    def test_invalid_blueprint(self, nodejs_params):
        nodejs_params["BLUEPRINT_ID"] = "windows_2022"

        with pytest.raises(InvalidEnumError) as exc_info:
            parse_request(nodejs_params)

        assert exc_info.value.field == "blueprint_id"

    def test_invalid_database(self, nodejs_params):
        nodejs_params["DATABASE_TYPE"] = "oracle"

        with pytest.raises(InvalidEnumError) as exc_info:
            parse_request(nodejs_params)

        assert exc_info.value.field == "database.kind"

    def test_invalid_flag(self, nodejs_params):
        nodejs_params.update({"DATABASE_TYPE": "mysql", "DB_EXTERNAL": "maybe"})

        with pytest.raises(InvalidEnumError) as exc_info:
            parse_request(nodejs_params)

        assert exc_info.value.field == "database.external"

    def test_bucket_requires_name(self, nodejs_params):
        """Test that an enabled bucket needs an explicit name."""
        nodejs_params["ENABLE_BUCKET"] = "true"

        with pytest.raises(MissingRequiredError) as exc_info:
            parse_request(nodejs_params)

        assert exc_info.value.field == "bucket.name"

    def test_invalid_bucket_access(self, nodejs_params):
        nodejs_params.update({
            "ENABLE_BUCKET": "true",
            "BUCKET_NAME": "assets",
            "BUCKET_ACCESS": "public",
        })

        with pytest.raises(InvalidEnumError) as exc_info:
            parse_request(nodejs_params)

        assert exc_info.value.field == "bucket.access_level"

    def test_invalid_trust_scope(self, nodejs_params):
        nodejs_params["TRUST_SCOPE"] = "tags_only"

        with pytest.raises(InvalidEnumError) as exc_info:
            parse_request(nodejs_params)

        assert exc_info.value.field == "auth.trust_scope"

    def test_malformed_role_arn(self, nodejs_params):
        nodejs_params["AWS_ROLE_ARN"] = "not-an-arn"

        with pytest.raises(ValidationError) as exc_info:
            parse_request(nodejs_params)

        assert exc_info.value.field == "auth.arn"

    def test_malformed_repository(self, nodejs_params):
        nodejs_params["GITHUB_REPO"] = "just-a-name"

        with pytest.raises(ValidationError) as exc_info:
            parse_request(nodejs_params)

        assert exc_info.value.field == "github_repo"


class TestDockerBundle:
    """Docker needs at least 2GB of memory."""

    @pytest.mark.parametrize("bundle", ["nano_3_0", "micro_3_0"])
    def test_small_bundles_rejected(self, bundle):
        """Test that the size check happens before anything is built."""
        params = {
            "APP_TYPE": "docker",
            "APP_NAME": "Containers",
            "INSTANCE_NAME": "docker-prod",
            "BUNDLE_ID": bundle,
        }

        with pytest.raises(InsufficientResourcesError) as exc_info:
            parse_request(params)

        error = exc_info.value
        assert error.field == "bundle_id"
        assert error.minimum == "small_3_0"
        assert error.error_code == ErrorCode.INSUFFICIENT_RESOURCES

    def test_default_bundle_rejected_for_docker(self):
        """Test that the micro default is not enough for Docker."""
        params = {"APP_TYPE": "docker", "APP_NAME": "Containers", "INSTANCE_NAME": "d"}

        with pytest.raises(InsufficientResourcesError):
            parse_request(params)

    def test_small_bundle_accepted(self):
        params = {
            "APP_TYPE": "docker",
            "APP_NAME": "Containers",
            "INSTANCE_NAME": "docker-prod",
            "BUNDLE_ID": "small_3_0",
        }
        assert parse_request(params).bundle_id == "small_3_0"


class TestAuth:

    def test_existing_role(self, python_rds_params):
        request = parse_request(python_rds_params)

        assert isinstance(request.auth, ExistingRole)
        assert request.auth.mode == "existing_role"
        assert request.auth.arn == "arn:aws:iam::123456789012:role/Deployer"

    def test_create_role_with_custom_name_and_scope(self, nodejs_params):
        nodejs_params.update({"ROLE_NAME": "NodeDeployer", "TRUST_SCOPE": "any_branch"})
        request = parse_request(nodejs_params)

        assert request.auth == CreateRole("NodeDeployer", TrustScope.ANY_BRANCH)


class TestEnvironment:
    """Automated mode reads environment variables."""

    def test_is_automated_requires_all_triggers(self):
        assert is_automated({"APP_TYPE": "nodejs", "APP_NAME": "x", "INSTANCE_NAME": "y"})
        assert not is_automated({"APP_TYPE": "nodejs", "APP_NAME": "x"})
        assert not is_automated({"APP_TYPE": "nodejs", "APP_NAME": "x", "INSTANCE_NAME": " "})

    def test_params_from_environment_ignores_other_variables(self):
        environ = {"APP_TYPE": "react", "HOME": "/root", "PATH": "/bin"}
        assert params_from_environment(environ) == {"APP_TYPE": "react"}

    def test_request_from_environment(self, monkeypatch):
        monkeypatch.setenv("APP_TYPE", "react")
        monkeypatch.setenv("APP_NAME", "Dashboard")
        monkeypatch.setenv("INSTANCE_NAME", "dash")
        monkeypatch.setenv("AWS_REGION", "eu-west-1")

        request = request_from_environment()

        assert request.app_type == ApplicationType.REACT
        assert request.aws_region == "eu-west-1"
