"""
Pytest configuration and fixtures for lightsail-deploy tests.
"""

from datetime import datetime

import pytest

from lightsail_deploy.constants import REQUEST_ENV_VARS
from lightsail_deploy.core.dependency_resolver import DependencyResolver
from lightsail_deploy.core.descriptor_builder import DescriptorBuilder
from lightsail_deploy.core.request_parser import parse_request
from lightsail_deploy.services.collaborators import (
    IdentityCollaborator,
    RepositoryVariableCollaborator,
)

FIXED_TIME = datetime(2024, 5, 1, 12, 0, 0)
ACCOUNT_ID = "123456789012"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep automation variables from the host out of every test."""
    for key in REQUEST_ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def nodejs_params():
    """Minimal automated-mode parameters for a Node.js app."""
    return {
        "APP_TYPE": "nodejs",
        "APP_NAME": "My Node App",
        "INSTANCE_NAME": "node-prod",
    }


@pytest.fixture
def python_rds_params():
    """Python app with an external PostgreSQL database."""
    return {
        "APP_TYPE": "python",
        "APP_NAME": "Flask API",
        "INSTANCE_NAME": "flask-prod",
        "DATABASE_TYPE": "postgresql",
        "DB_EXTERNAL": "true",
        "DB_RDS_NAME": "prod-pg",
        "DB_NAME": "api",
        "AWS_ROLE_ARN": f"arn:aws:iam::{ACCOUNT_ID}:role/Deployer",
    }


@pytest.fixture
def lamp_bucket_params():
    """LAMP app with a local MySQL database and a read-only bucket."""
    return {
        "APP_TYPE": "lamp",
        "APP_NAME": "Shop",
        "INSTANCE_NAME": "shop-prod",
        "DATABASE_TYPE": "mysql",
        "ENABLE_BUCKET": "true",
        "BUCKET_NAME": "shop-assets",
        "BUCKET_ACCESS": "read_only",
        "GITHUB_REPO": "acme/shop",
    }


def build_descriptor(params):
    """Parse, resolve and build with a fixed timestamp."""
    request = parse_request(params)
    dependencies = DependencyResolver().resolve_request(request)
    return DescriptorBuilder().build(request, dependencies, generated_at=FIXED_TIME)


@pytest.fixture
def nodejs_descriptor(nodejs_params):
    return build_descriptor(nodejs_params)


@pytest.fixture
def python_rds_descriptor(python_rds_params):
    return build_descriptor(python_rds_params)


@pytest.fixture
def lamp_bucket_descriptor(lamp_bucket_params):
    return build_descriptor(lamp_bucket_params)


class FakeIdentity(IdentityCollaborator):
    """Records ensure_role calls and returns a predictable ARN."""

    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def account_id(self):
        return ACCOUNT_ID

    def ensure_role(self, role_name, repository, account_id, trust_policy, policy_arns):
        if self.fail:
            raise RuntimeError("AccessDenied")
        self.calls.append({
            "role_name": role_name,
            "repository": repository,
            "account_id": account_id,
            "trust_policy": trust_policy,
            "policy_arns": policy_arns,
        })
        return f"arn:aws:iam::{account_id}:role/{role_name}"


class FakeVariables(RepositoryVariableCollaborator):
    """Stores variables in a dict."""

    def __init__(self, fail=False):
        self.fail = fail
        self.variables = {}

    def set_variable(self, name, value):
        if self.fail:
            raise RuntimeError("gh: not authenticated")
        self.variables[name] = value


@pytest.fixture
def fake_identity():
    return FakeIdentity()


@pytest.fixture
def fake_variables():
    return FakeVariables()
