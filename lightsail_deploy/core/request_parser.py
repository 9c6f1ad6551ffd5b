"""Turn raw key/value parameters into a validated DeploymentRequest"""

import logging
import os
import re
from enum import Enum
from typing import Mapping, Optional, Sequence, Type

from ..api.exceptions import (
    InsufficientResourcesError,
    InvalidEnumError,
    MissingRequiredError,
    ValidationError,
)
from ..constants import (
    ApplicationType,
    BucketAccess,
    BucketSize,
    DatabaseKind,
    EnvVar,
    TrustScope,
    AUTOMATION_TRIGGER_VARS,
    BLUEPRINT_IDS,
    BUNDLE_IDS,
    DEFAULT_APP_VERSION,
    DEFAULT_AWS_REGION,
    DEFAULT_BLUEPRINT_ID,
    DEFAULT_BUNDLE_ID,
    DEFAULT_DATABASE_NAME,
    DEFAULT_ROLE_NAME_PATTERN,
    DOCKER_EXCLUDED_BUNDLE_IDS,
    FALSE_VALUES,
    REQUEST_ENV_VARS,
    TRUE_VALUES,
)
from ..models.request import (
    BucketOptions,
    CreateRole,
    DatabaseOptions,
    DeploymentRequest,
    ExistingRole,
)

logger = logging.getLogger(__name__)

ROLE_ARN_PATTERN = re.compile(r"^arn:aws:iam::\d{12}:role/[\w+=,.@/-]+$")
GITHUB_REPO_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")

# Input key -> request field path reported in errors
FIELD_NAMES = {
    EnvVar.APP_TYPE: "app_type",
    EnvVar.APP_NAME: "app_name",
    EnvVar.APP_VERSION: "app_version",
    EnvVar.INSTANCE_NAME: "instance_name",
    EnvVar.AWS_REGION: "aws_region",
    EnvVar.BLUEPRINT_ID: "blueprint_id",
    EnvVar.BUNDLE_ID: "bundle_id",
    EnvVar.DATABASE_TYPE: "database.kind",
    EnvVar.DB_EXTERNAL: "database.external",
    EnvVar.DB_RDS_NAME: "database.rds_name",
    EnvVar.DB_NAME: "database.database_name",
    EnvVar.ENABLE_BUCKET: "bucket.enabled",
    EnvVar.BUCKET_NAME: "bucket.name",
    EnvVar.BUCKET_ACCESS: "bucket.access_level",
    EnvVar.BUCKET_BUNDLE: "bucket.size",
    EnvVar.AWS_ROLE_ARN: "auth.arn",
    EnvVar.ROLE_NAME: "auth.role_name",
    EnvVar.TRUST_SCOPE: "auth.trust_scope",
    EnvVar.GITHUB_REPO: "github_repo",
    EnvVar.EXPECTED_CONTENT: "expected_content",
}


class RequestParser:
    """Validate raw parameters and build a DeploymentRequest

    Keys are the automation environment variable names (APP_TYPE,
    BUNDLE_ID, ...). Empty strings count as unset. An unset optional key
    takes its documented default; a key that is set to something invalid
    always fails, it is never replaced by a default.
    """

    def __init__(self, params: Mapping[str, Optional[str]]):
        self.params = params

    def parse(self) -> DeploymentRequest:
        """
        Parse parameters into a request

        Returns:
            DeploymentRequest

        Raises:
            ValidationError: (or a subclass) naming the offending field
        """
        app_type = self._enum(EnvVar.APP_TYPE, ApplicationType)

        request = DeploymentRequest(
            app_type=app_type,
            app_name=self._required(EnvVar.APP_NAME),
            instance_name=self._required(EnvVar.INSTANCE_NAME),
            auth=self._auth(app_type),
            aws_region=self._get(EnvVar.AWS_REGION, DEFAULT_AWS_REGION),
            blueprint_id=self._choice(EnvVar.BLUEPRINT_ID, BLUEPRINT_IDS, DEFAULT_BLUEPRINT_ID),
            bundle_id=self._bundle(app_type),
            database=self._database(app_type),
            bucket=self._bucket(),
            app_version=self._get(EnvVar.APP_VERSION, DEFAULT_APP_VERSION),
            github_repo=self._github_repo(),
            expected_content=self._get(EnvVar.EXPECTED_CONTENT),
        )

        logger.debug("Parsed request for %s (%s)", request.app_name, app_type.value)
        return request

    def _get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self.params.get(key)
        if value is None:
            return default
        value = str(value).strip()
        return value if value else default

    def _required(self, key: str) -> str:
        value = self._get(key)
        if value is None:
            raise MissingRequiredError(FIELD_NAMES[key])
        return value

    def _choice(self, key: str, allowed: Sequence[str], default: str) -> str:
        value = self._get(key, default)
        if value not in allowed:
            raise InvalidEnumError(FIELD_NAMES[key], value, allowed)
        return value

    def _enum(self, key: str, enum_cls: Type[Enum], default: Optional[Enum] = None):
        value = self._get(key)
        if value is None:
            if default is None:
                raise MissingRequiredError(FIELD_NAMES[key])
            return default

        try:
            return enum_cls(value.lower())
        except ValueError:
            raise InvalidEnumError(FIELD_NAMES[key], value,
                                   [member.value for member in enum_cls]) from None

    def _flag(self, key: str, default: bool = False) -> bool:
        value = self._get(key)
        if value is None:
            return default
        if value.lower() in TRUE_VALUES:
            return True
        if value.lower() in FALSE_VALUES:
            return False
        raise InvalidEnumError(FIELD_NAMES[key], value, ["true", "false"])

    def _bundle(self, app_type: ApplicationType) -> str:
        bundle_id = self._choice(EnvVar.BUNDLE_ID, BUNDLE_IDS, DEFAULT_BUNDLE_ID)

        if app_type == ApplicationType.DOCKER and bundle_id in DOCKER_EXCLUDED_BUNDLE_IDS:
            minimum = next(b for b in BUNDLE_IDS if b not in DOCKER_EXCLUDED_BUNDLE_IDS)
            raise InsufficientResourcesError(FIELD_NAMES[EnvVar.BUNDLE_ID], bundle_id, minimum)

        return bundle_id

    def _database(self, app_type: ApplicationType) -> DatabaseOptions:
        kind = self._enum(EnvVar.DATABASE_TYPE, DatabaseKind, DatabaseKind.NONE)
        if kind == DatabaseKind.NONE:
            return DatabaseOptions()

        external = self._flag(EnvVar.DB_EXTERNAL)
        rds_name = ""
        if external:
            rds_name = self._get(EnvVar.DB_RDS_NAME) or DatabaseOptions.default_rds_name(app_type, kind)

        return DatabaseOptions(
            kind=kind,
            external=external,
            rds_name=rds_name,
            database_name=self._get(EnvVar.DB_NAME, DEFAULT_DATABASE_NAME),
        )

    def _bucket(self) -> BucketOptions:
        if not self._flag(EnvVar.ENABLE_BUCKET):
            return BucketOptions()

        return BucketOptions(
            enabled=True,
            name=self._required(EnvVar.BUCKET_NAME),
            access_level=self._enum(EnvVar.BUCKET_ACCESS, BucketAccess, BucketAccess.READ_WRITE),
            size=self._enum(EnvVar.BUCKET_BUNDLE, BucketSize, BucketSize.SMALL),
        )

    def _auth(self, app_type: ApplicationType):
        arn = self._get(EnvVar.AWS_ROLE_ARN)
        if arn is not None:
            if not ROLE_ARN_PATTERN.match(arn):
                raise ValidationError(FIELD_NAMES[EnvVar.AWS_ROLE_ARN],
                                      f"Not an IAM role ARN: {arn!r}")
            return ExistingRole(arn=arn)

        return CreateRole(
            role_name=self._get(EnvVar.ROLE_NAME,
                                DEFAULT_ROLE_NAME_PATTERN.format(app_type=app_type.value)),
            trust_scope=self._enum(EnvVar.TRUST_SCOPE, TrustScope, TrustScope.MAIN_BRANCH_ONLY),
        )

    def _github_repo(self) -> Optional[str]:
        repo = self._get(EnvVar.GITHUB_REPO)
        if repo is not None and not GITHUB_REPO_PATTERN.match(repo):
            raise ValidationError(FIELD_NAMES[EnvVar.GITHUB_REPO],
                                  f"Expected owner/name, got {repo!r}")
        return repo


def parse_request(params: Mapping[str, Optional[str]]) -> DeploymentRequest:
    """Parse raw parameters into a DeploymentRequest"""
    return RequestParser(params).parse()


def is_automated(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Check if every automation trigger variable is set"""
    environ = os.environ if environ is None else environ
    return all((environ.get(key) or "").strip() for key in AUTOMATION_TRIGGER_VARS)


def params_from_environment(environ: Optional[Mapping[str, str]] = None) -> dict:
    """Collect the request keys present in the environment"""
    environ = os.environ if environ is None else environ
    return {key: environ[key] for key in REQUEST_ENV_VARS if key in environ}


def request_from_environment(environ: Optional[Mapping[str, str]] = None) -> DeploymentRequest:
    """Build a request from environment variables (automated mode)"""
    return parse_request(params_from_environment(environ))
