"""
Tests for descriptor validation.
"""

import copy

import pytest

from lightsail_deploy.api.exceptions import InvalidEnumError, MissingRequiredError
from lightsail_deploy.core.validation_engine import ValidationEngine, validate

from conftest import build_descriptor


@pytest.fixture
def engine():
    return ValidationEngine()


@pytest.fixture
def document(lamp_bucket_descriptor):
    """Mutable copy of a valid descriptor tree."""
    return copy.deepcopy(lamp_bucket_descriptor.to_dict())


class TestValidDescriptors:

    @pytest.mark.parametrize("params", [
        {"APP_TYPE": "lamp", "DATABASE_TYPE": "mysql"},
        {"APP_TYPE": "nginx"},
        {"APP_TYPE": "nodejs", "DATABASE_TYPE": "postgresql", "DB_EXTERNAL": "true"},
        {"APP_TYPE": "python", "ENABLE_BUCKET": "true", "BUCKET_NAME": "files"},
        {"APP_TYPE": "react", "AWS_ROLE_ARN": "arn:aws:iam::123456789012:role/R"},
        {"APP_TYPE": "docker", "BUNDLE_ID": "medium_3_0", "GITHUB_REPO": "acme/app"},
    ])
    def test_built_descriptors_pass(self, params):
        """Test that everything the builder produces validates cleanly."""
        params.update({"APP_NAME": "App", "INSTANCE_NAME": "app-prod"})
        result = validate(build_descriptor(params))

        assert result.is_valid, str(result)
        assert result.errors == []

    def test_loaded_document_passes(self, engine, document):
        assert engine.validate_document(document).is_valid


class TestCompleteness:

    def test_empty_document(self, engine):
        result = engine.validate_document({})

        assert not result.is_valid
        assert result.fields == ["<document>"]

    def test_missing_sections_all_reported(self, engine, document):
        """Test that every missing section is listed, not just the first."""
        del document["aws"]
        del document["monitoring"]

        result = engine.validate_document(document)

        assert MissingRequiredError("aws") in result.errors
        assert MissingRequiredError("monitoring") in result.errors

    def test_schema_errors_use_dotted_paths(self, engine, document):
        document["lightsail"]["instance_name"] = ""

        result = engine.validate_document(document)

        assert "lightsail.instance_name" in result.fields

    def test_unknown_app_type(self, engine, document):
        document["application"]["type"] = "rails"

        result = engine.validate_document(document)

        assert any(isinstance(error, InvalidEnumError) for error in result.errors)


class TestConsistency:

    def test_disabled_base_dependency(self, engine, document):
        document["dependencies"]["apache"]["enabled"] = False

        result = engine.validate_document(document)

        assert "dependencies.apache.enabled" in result.fields

    def test_missing_git(self, engine, document):
        del document["dependencies"]["git"]
        assert "dependencies.git" in engine.validate_document(document).fields

    def test_firewall_missing_app_port(self, engine, document):
        document["dependencies"]["firewall"]["config"]["allowed_ports"] = ["22", "80", "443"]

        result = engine.validate_document(document)

        assert "dependencies.firewall.config.allowed_ports" in result.fields

    def test_firewall_must_deny_others(self, engine, document):
        document["dependencies"]["firewall"]["config"]["deny_all_other"] = False

        result = engine.validate_document(document)

        assert "dependencies.firewall.config.deny_all_other" in result.fields

    def test_db_variables_without_database(self, engine, nodejs_descriptor):
        document = nodejs_descriptor.to_dict()
        document["application"]["environment_variables"]["DB_HOST"] = "localhost"

        result = engine.validate_document(document)

        assert "application.environment_variables" in result.fields

    def test_external_database_installed_locally(self, engine, python_rds_descriptor):
        document = python_rds_descriptor.to_dict()
        document["dependencies"]["postgresql"]["enabled"] = True

        result = engine.validate_document(document)

        assert "dependencies.postgresql.enabled" in result.fields

    def test_external_database_warns_about_endpoint(self, engine, python_rds_descriptor):
        """Test that the RDS endpoint placeholder is reported as a warning only."""
        result = engine.validate(python_rds_descriptor)

        assert result.is_valid
        assert any("prod-pg" in warning for warning in result.warnings)

    def test_two_database_engines(self, engine, document):
        document["dependencies"]["postgresql"] = {"enabled": True, "config": {}}

        result = engine.validate_document(document)

        assert "dependencies" in result.fields

    def test_bucket_name_mismatch(self, engine, document):
        document["application"]["environment_variables"]["BUCKET_NAME"] = "other"

        result = engine.validate_document(document)

        assert "application.environment_variables.BUCKET_NAME" in result.fields

    def test_bucket_sections_disagree(self, engine, document):
        del document["dependencies"]["bucket"]

        result = engine.validate_document(document)

        assert "lightsail.bucket" in result.fields

    def test_existing_role_without_arn(self, engine, python_rds_descriptor):
        document = python_rds_descriptor.to_dict()
        del document["github_actions"]["auth"]["role_arn"]

        result = engine.validate_document(document)

        assert "github_actions.auth.role_arn" in result.fields

    def test_errors_are_collected(self, engine, document):
        """Test that independent problems are all reported in one pass."""
        document["dependencies"]["git"] = None
        document["dependencies"]["firewall"]["config"]["deny_all_other"] = False
        document["application"]["environment_variables"]["BUCKET_NAME"] = "other"

        fields = engine.validate_document(document).fields

        assert "dependencies.firewall.config.deny_all_other" in fields
        assert "application.environment_variables.BUCKET_NAME" in fields
        assert len(fields) >= 2


def test_result_string_lists_fields(engine, document):
    del document["backup"]["retention_days"]
    document["lightsail"]["bundle_id"] = ""

    text = str(engine.validate_document(document))

    assert "Errors:" in text
    assert "lightsail.bundle_id" in text
