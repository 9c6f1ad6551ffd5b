"""Dependency resolution for deployment descriptors"""

import copy
import logging
from typing import Any, Dict, Optional

from .app_profiles import get_profile
from ..api.exceptions import InternalInconsistencyError
from ..constants import (
    ApplicationType,
    DatabaseKind,
    BASE_FIREWALL_PORTS,
    DB_POSTGRES_PASSWORD_PLACEHOLDER,
    DB_PASSWORD_PLACEHOLDER,
    DB_ROOT_PASSWORD_PLACEHOLDER,
    DB_USER,
    DEFAULT_AWS_REGION,
)
from ..models.descriptor import DependencyBlock, DependencySet
from ..models.request import BucketOptions, DatabaseOptions, DeploymentRequest

logger = logging.getLogger(__name__)


class DependencyResolver:
    """Map an application type plus optional extras to a DependencySet"""

    DATABASE_VERSIONS = {
        DatabaseKind.MYSQL: "8.0",
        DatabaseKind.POSTGRESQL: "13",
    }

    RDS_ENVIRONMENT = {
        DatabaseKind.MYSQL: {"DB_CONNECTION_TIMEOUT": "30", "DB_CHARSET": "utf8mb4"},
        DatabaseKind.POSTGRESQL: {"DB_CONNECTION_TIMEOUT": "30"},
    }

    def resolve(self,
                app_type: ApplicationType,
                database: Optional[DatabaseOptions] = None,
                bucket: Optional[BucketOptions] = None,
                region: str = DEFAULT_AWS_REGION,
                app_slug: Optional[str] = None) -> DependencySet:
        """
        Build the dependency set for a deployment

        Args:
            app_type: Application type
            database: Database choice (None means no database)
            bucket: Bucket choice (None means no bucket)
            region: AWS region recorded in the RDS block
            app_slug: Lower-cased application name for process manager naming

        Returns:
            DependencySet sorted by dependency name

        Raises:
            InternalInconsistencyError: If the application type has no profile
        """
        profile = get_profile(app_type)
        if profile is None:
            raise InternalInconsistencyError(
                f"No dependency profile for application type {app_type!r}"
            )

        dependencies = DependencySet()

        for name, options in profile.base_dependencies.items():
            config = copy.deepcopy(options)
            if name == "pm2" and app_slug:
                config["app_name"] = app_slug
            dependencies.add(DependencyBlock(name=name, enabled=True, config=config))

        if database is not None and database.enabled:
            dependencies.add(self._database_block(database, region))

        if bucket is not None and bucket.enabled:
            dependencies.add(self._bucket_block(bucket))

        dependencies.add(DependencyBlock(name="git", config={"install_lfs": False}))
        dependencies.add(self._firewall_block(profile.extra_port))

        logger.debug("Resolved %s dependencies: %s", app_type.value, dependencies.names())
        return dependencies

    def resolve_request(self, request: DeploymentRequest) -> DependencySet:
        """Resolve dependencies for a validated request"""
        return self.resolve(
            request.app_type,
            database=request.database,
            bucket=request.bucket,
            region=request.aws_region,
            app_slug=request.slug,
        )

    def _database_block(self, database: DatabaseOptions, region: str) -> DependencyBlock:
        """Engine block; installed locally only when the database is not external"""
        config: Dict[str, Any] = {"version": self.DATABASE_VERSIONS[database.kind]}

        if database.kind == DatabaseKind.MYSQL:
            config["root_password"] = DB_ROOT_PASSWORD_PLACEHOLDER
        else:
            config["postgres_password"] = DB_POSTGRES_PASSWORD_PLACEHOLDER

        config.update({
            "create_database": database.database_name,
            "create_user": DB_USER,
            "user_password": DB_PASSWORD_PLACEHOLDER,
        })

        rds = None
        if database.external:
            rds = {
                "database_name": database.rds_name,
                "region": region,
                "master_database": database.database_name,
                "environment": dict(self.RDS_ENVIRONMENT[database.kind]),
            }

        return DependencyBlock(
            name=database.kind.value,
            enabled=not database.external,
            external=database.external,
            config=config,
            rds=rds,
        )

    @staticmethod
    def _bucket_block(bucket: BucketOptions) -> DependencyBlock:
        return DependencyBlock(
            name="bucket",
            config={
                "name": bucket.name,
                "access_level": bucket.access_level.value,
                "bundle_id": bucket.size.value,
            },
        )

    @staticmethod
    def _firewall_block(extra_port: Optional[str]) -> DependencyBlock:
        ports = list(BASE_FIREWALL_PORTS)
        if extra_port and extra_port not in ports:
            ports.append(extra_port)

        return DependencyBlock(
            name="firewall",
            config={
                "allowed_ports": ports,
                "deny_all_other": True,
            },
        )


def resolve(app_type: ApplicationType,
            database: Optional[DatabaseOptions] = None,
            bucket: Optional[BucketOptions] = None,
            **options) -> DependencySet:
    """Module level shortcut for DependencyResolver().resolve()"""
    return DependencyResolver().resolve(app_type, database, bucket, **options)
