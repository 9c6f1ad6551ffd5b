"""Descriptor builder: request + dependencies -> deployment descriptor"""

import logging
from datetime import datetime
from typing import Any, Dict, Optional

from .app_profiles import AppProfile, get_profile
from .dependency_resolver import DependencyResolver
from .trust_policy import trust_condition
from ..api.exceptions import InternalInconsistencyError
from ..constants import (
    ARTIFACT_RETENTION_DAYS,
    BACKUP_RETENTION_DAYS,
    COMMAND_EXECUTION_TIMEOUT,
    DB_PASSWORD_PLACEHOLDER,
    DB_USER,
    DEFAULT_RETRY_COUNT,
    DOCKER_COMMAND_EXECUTION_TIMEOUT,
    FILE_PERMISSIONS,
    HEALTH_CHECK_INITIAL_WAIT,
    HEALTH_CHECK_MAX_ATTEMPTS,
    HEALTH_CHECK_TIMEOUT,
    HEALTH_CHECK_WAIT_BETWEEN_ATTEMPTS,
    MANAGED_POLICY_ARNS,
    PACKAGE_DIR_PATTERN,
    RDS_ENDPOINT_PLACEHOLDER,
    ROLE_ARN_VARIABLE,
    SSH_CONNECTION_TIMEOUT,
    SSH_RETRY_COUNT,
)
from ..models.descriptor import DependencySet, DeploymentDescriptor
from ..models.request import CreateRole, DeploymentRequest

logger = logging.getLogger(__name__)


class DescriptorBuilder:
    """Assemble a DeploymentDescriptor from a request and its dependencies

    Pure: no I/O, and the same request always produces an equal descriptor.
    """

    def build(self,
              request: DeploymentRequest,
              dependencies: DependencySet,
              generated_at: Optional[datetime] = None) -> DeploymentDescriptor:
        """
        Build the descriptor

        Args:
            request: Validated deployment request
            dependencies: Output of the dependency resolver for this request
            generated_at: Timestamp for the header comment (defaults to now)

        Returns:
            DeploymentDescriptor
        """
        profile = get_profile(request.app_type)
        if profile is None:
            raise InternalInconsistencyError(
                f"No profile for application type {request.app_type!r}"
            )

        descriptor = DeploymentDescriptor(
            title=f"{request.app_name} Deployment Configuration",
            config_filename=request.config_filename,
            aws={"region": request.aws_region},
            lightsail=self._lightsail_section(request),
            application=self._application_section(request),
            dependencies=dependencies,
            deployment=self._deployment_section(request, profile),
            github_actions=self._github_actions_section(request, profile),
            monitoring=self._monitoring_section(request, profile),
            security={"file_permissions": dict(FILE_PERMISSIONS)},
            backup={
                "enabled": True,
                "retention_days": BACKUP_RETENTION_DAYS,
                "backup_location": f"/var/backups/{request.slug}-deployments",
            },
            generated_at=generated_at or datetime.now(),
        )

        logger.debug("Built descriptor %s", descriptor.config_filename)
        return descriptor

    def _lightsail_section(self, request: DeploymentRequest) -> Dict[str, Any]:
        section: Dict[str, Any] = {
            "instance_name": request.instance_name,
            "static_ip": "",
            "bundle_id": request.bundle_id,
            "blueprint_id": request.blueprint_id,
        }

        if request.bucket.enabled:
            section["bucket"] = {
                "enabled": True,
                "name": request.bucket.name,
                "access_level": request.bucket.access_level.value,
                "bundle_id": request.bucket.size.value,
            }

        return section

    def _application_section(self, request: DeploymentRequest) -> Dict[str, Any]:
        return {
            "name": request.slug,
            "version": request.app_version,
            "type": request.app_type.value,
            "package_files": [PACKAGE_DIR_PATTERN.format(app_type=request.app_type.value)],
            "package_fallback": True,
            "environment_variables": self.environment_variables(request),
        }

    def environment_variables(self, request: DeploymentRequest) -> Dict[str, str]:
        """
        Environment block written to the instance's .env file

        Layers, later ones winning: APP_ENV, database settings, type-specific
        variables, bucket settings.
        """
        profile = get_profile(request.app_type)
        env = {"APP_ENV": "production"}

        database = request.database
        if database.enabled:
            env.update({
                "DB_TYPE": database.kind.value,
                "DB_HOST": RDS_ENDPOINT_PLACEHOLDER if database.external else "localhost",
                "DB_NAME": database.database_name,
                "DB_USER": DB_USER,
                "DB_PASSWORD": DB_PASSWORD_PLACEHOLDER,
            })
            if database.external:
                env["DB_RDS_NAME"] = database.rds_name

        env.update(profile.environment)
        if profile.uses_docker:
            env["COMPOSE_PROJECT_NAME"] = request.slug

        if request.bucket.enabled:
            env["BUCKET_NAME"] = request.bucket.name
            env["AWS_REGION"] = request.aws_region

        return env

    def _deployment_section(self, request: DeploymentRequest,
                            profile: AppProfile) -> Dict[str, Any]:
        section: Dict[str, Any] = {}

        if profile.uses_docker:
            section.update({
                "use_docker": True,
                "docker_app_path": f"/opt/{request.slug}-app",
                "docker_compose_file": "docker-compose.yml",
            })

        section["timeouts"] = {
            "ssh_connection": SSH_CONNECTION_TIMEOUT,
            "command_execution": (DOCKER_COMMAND_EXECUTION_TIMEOUT if profile.uses_docker
                                  else COMMAND_EXECUTION_TIMEOUT),
            "health_check": HEALTH_CHECK_TIMEOUT,
        }
        section["retries"] = {
            "max_attempts": DEFAULT_RETRY_COUNT,
            "ssh_connection": SSH_RETRY_COUNT,
        }
        section["steps"] = {
            "pre_deployment": {
                "common": {
                    "enabled": True,
                    "update_packages": True,
                    "create_directories": True,
                    "backup_enabled": True,
                },
                "dependencies": {
                    "enabled": True,
                    "install_system_deps": True,
                    "configure_services": True,
                },
            },
            "post_deployment": {
                "common": {
                    "enabled": True,
                    "verify_extraction": True,
                    "create_env_file": True,
                    "cleanup_temp_files": True,
                },
                "dependencies": {
                    "enabled": True,
                    "configure_application": True,
                    "set_permissions": True,
                    "restart_services": True,
                },
            },
            "verification": {
                "enabled": True,
                "health_check": True,
                "external_connectivity": True,
                "endpoints_to_test": list(profile.verify_endpoints),
            },
        }
        return section

    def _github_actions_section(self, request: DeploymentRequest,
                                profile: AppProfile) -> Dict[str, Any]:
        test_job: Dict[str, Any] = {"enabled": True}
        if profile.uses_docker:
            test_job["docker_test"] = True
        else:
            test_job["language_specific_tests"] = True

        return {
            "triggers": {
                "push_branches": ["main", "master"],
                "pull_request_branches": ["main", "master"],
                "workflow_dispatch": True,
            },
            "jobs": {
                "test": test_job,
                "deployment": {
                    "deploy_on_push": True,
                    "deploy_on_pr": False,
                    "artifact_retention_days": ARTIFACT_RETENTION_DAYS,
                    "create_summary": True,
                },
            },
            "auth": self._auth_section(request),
        }

    @staticmethod
    def _auth_section(request: DeploymentRequest) -> Dict[str, Any]:
        auth = request.auth
        section: Dict[str, Any] = {"mode": auth.mode}

        if isinstance(auth, CreateRole):
            section["role_name"] = auth.role_name
            section["trust_scope"] = auth.trust_scope.value
            if request.github_repo:
                section["trust_condition"] = trust_condition(request.github_repo,
                                                             auth.trust_scope)
            section["managed_policies"] = list(MANAGED_POLICY_ARNS)
        else:
            section["role_arn"] = auth.arn

        section["role_arn_variable"] = ROLE_ARN_VARIABLE
        return section

    def _monitoring_section(self, request: DeploymentRequest,
                            profile: AppProfile) -> Dict[str, Any]:
        expected = request.expected_content or profile.health_marker or request.app_name

        section: Dict[str, Any] = {
            "health_check": {
                "endpoint": "/",
                "expected_content": expected,
                "max_attempts": HEALTH_CHECK_MAX_ATTEMPTS,
                "wait_between_attempts": HEALTH_CHECK_WAIT_BETWEEN_ATTEMPTS,
                "initial_wait": HEALTH_CHECK_INITIAL_WAIT,
            },
        }

        if profile.uses_docker:
            section["docker_health"] = {
                "check_containers": True,
                "required_containers": [f"{request.slug}-web"],
            }

        return section


def build(request: DeploymentRequest,
          dependencies: Optional[DependencySet] = None,
          generated_at: Optional[datetime] = None) -> DeploymentDescriptor:
    """Resolve (when not given) and build in one call"""
    if dependencies is None:
        dependencies = DependencyResolver().resolve_request(request)
    return DescriptorBuilder().build(request, dependencies, generated_at)
