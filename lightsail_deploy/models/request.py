"""Deployment request models"""

import re
from dataclasses import dataclass, field
from typing import Optional, Union

from ..api.exceptions import MissingRequiredError, ValidationError
from ..constants import (
    ApplicationType,
    BucketAccess,
    BucketSize,
    DatabaseKind,
    TrustScope,
    CONFIG_FILE_PATTERN,
    DEFAULT_APP_VERSION,
    DEFAULT_AWS_REGION,
    DEFAULT_BLUEPRINT_ID,
    DEFAULT_BUNDLE_ID,
    DEFAULT_DATABASE_NAME,
    RDS_NAME_PATTERN,
)


@dataclass(frozen=True)
class DatabaseOptions:
    """Database choice for a deployment"""

    kind: DatabaseKind = DatabaseKind.NONE
    external: bool = False
    rds_name: str = ""
    database_name: str = DEFAULT_DATABASE_NAME

    def __post_init__(self):
        if self.kind == DatabaseKind.NONE:
            return
        if not self.database_name:
            raise MissingRequiredError("database.database_name")
        if self.external and not self.rds_name:
            raise MissingRequiredError("database.rds_name")

    @property
    def enabled(self) -> bool:
        """Check if a database engine was chosen"""
        return self.kind != DatabaseKind.NONE

    @staticmethod
    def default_rds_name(app_type: ApplicationType, kind: DatabaseKind) -> str:
        """Derive the RDS instance name used when none is given"""
        return RDS_NAME_PATTERN.format(app_type=app_type.value, database_kind=kind.value)


@dataclass(frozen=True)
class BucketOptions:
    """Lightsail object storage bucket attached to the instance"""

    enabled: bool = False
    name: str = ""
    access_level: BucketAccess = BucketAccess.READ_WRITE
    size: BucketSize = BucketSize.SMALL

    def __post_init__(self):
        if self.enabled and not self.name:
            raise MissingRequiredError("bucket.name")


@dataclass(frozen=True)
class ExistingRole:
    """Use an IAM role that already trusts GitHub OIDC"""

    arn: str

    def __post_init__(self):
        if not self.arn:
            raise MissingRequiredError("auth.arn")

    @property
    def mode(self) -> str:
        return "existing_role"


@dataclass(frozen=True)
class CreateRole:
    """Create (or update) an IAM role for GitHub OIDC"""

    role_name: str
    trust_scope: TrustScope = TrustScope.MAIN_BRANCH_ONLY

    def __post_init__(self):
        if not self.role_name:
            raise MissingRequiredError("auth.role_name")

    @property
    def mode(self) -> str:
        return "create_role"


AuthMode = Union[ExistingRole, CreateRole]


@dataclass(frozen=True)
class DeploymentRequest:
    """Validated user intent for one deployment

    Built once per invocation by the request parser (from prompts or
    environment variables) and never mutated afterwards.
    """

    app_type: ApplicationType
    app_name: str
    instance_name: str
    auth: AuthMode
    aws_region: str = DEFAULT_AWS_REGION
    blueprint_id: str = DEFAULT_BLUEPRINT_ID
    bundle_id: str = DEFAULT_BUNDLE_ID
    database: DatabaseOptions = field(default_factory=DatabaseOptions)
    bucket: BucketOptions = field(default_factory=BucketOptions)
    app_version: str = DEFAULT_APP_VERSION
    github_repo: Optional[str] = None
    expected_content: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.app_type, ApplicationType):
            raise ValidationError("app_type", f"Not an application type: {self.app_type!r}")

        for name in ("app_name", "instance_name", "aws_region", "blueprint_id", "bundle_id"):
            if not getattr(self, name):
                raise MissingRequiredError(name)

        if not isinstance(self.auth, (ExistingRole, CreateRole)):
            raise ValidationError(
                "auth", "Exactly one of an existing role ARN or a role to create is required"
            )

    @property
    def config_filename(self) -> str:
        """Name of the deployment descriptor file for this request"""
        return CONFIG_FILE_PATTERN.format(app_type=self.app_type.value)

    @property
    def slug(self) -> str:
        """Lower-cased application name used in paths and container names"""
        slug = re.sub(r"[^a-z0-9]+", "-", self.app_name.lower()).strip("-")
        return slug or self.app_type.value
