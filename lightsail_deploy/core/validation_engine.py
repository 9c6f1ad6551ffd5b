# lightsail_deploy/core/validation_engine.py
"""Validation engine for deployment descriptors"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import jsonschema

from .app_profiles import get_profile
from .emitter import DescriptorEmitter
from ..api.exceptions import (
    InvalidEnumError,
    MissingRequiredError,
    SerializationError,
    ValidationError,
)
from ..constants import (
    ApplicationType,
    DatabaseKind,
    BASE_FIREWALL_PORTS,
    RDS_ENDPOINT_PLACEHOLDER,
)
from ..models.descriptor import DeploymentDescriptor
from ..templates import DESCRIPTOR_SCHEMA, load_schema

logger = logging.getLogger(__name__)

REQUIRED_SECTIONS = [
    "aws",
    "lightsail",
    "application",
    "dependencies",
    "deployment",
    "github_actions",
    "monitoring",
]

DATABASE_BLOCKS = [kind.value for kind in DatabaseKind if kind != DatabaseKind.NONE]


@dataclass
class ValidationResult:
    """Validation result container"""
    is_valid: bool = True
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    info: List[str] = field(default_factory=list)

    def add_error(self, error: ValidationError) -> None:
        """Add error"""
        self.errors.append(error)
        self.is_valid = False

    def add_warning(self, message: str) -> None:
        """Add warning message"""
        self.warnings.append(message)

    def add_success(self, message: str) -> None:
        """Add success info message"""
        self.info.append(f"✓ {message}")

    @property
    def fields(self) -> List[str]:
        """Field paths of all errors, in the order found"""
        return [error.field for error in self.errors]

    def __str__(self) -> str:
        """String representation"""
        lines = []

        if self.errors:
            lines.append("Errors:")
            for error in self.errors:
                lines.append(f"  ✗ {error.field}: {error}")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  ⚠ {warning}")

        if self.info:
            lines.append("Info:")
            for info in self.info:
                lines.append(f"  {info}")

        if self.is_valid and not self.errors and not self.warnings:
            lines.append("✓ All validations passed")

        return '\n'.join(lines)


def _section(document: Dict[str, Any], *path: str) -> Dict[str, Any]:
    """Walk nested mappings, returning {} where a level is missing or not a mapping"""
    current: Any = document
    for key in path:
        if not isinstance(current, dict):
            return {}
        current = current.get(key)
    return current if isinstance(current, dict) else {}


class ValidationEngine:
    """Check a descriptor for completeness and internal consistency

    Every check runs regardless of earlier failures so the result lists
    all problems at once.
    """

    def __init__(self, emitter: Optional[DescriptorEmitter] = None):
        self.emitter = emitter or DescriptorEmitter()
        self._schema = load_schema(DESCRIPTOR_SCHEMA)

    def validate(self, descriptor: DeploymentDescriptor) -> ValidationResult:
        """
        Validate a built descriptor

        Args:
            descriptor: Descriptor to validate

        Returns:
            ValidationResult holding every violation found
        """
        result = self.validate_document(descriptor.to_dict())

        try:
            self.emitter.check_round_trip(descriptor.to_dict(), self.emitter.render(descriptor))
        except SerializationError as e:
            result.add_error(ValidationError("<document>", str(e)))
        else:
            result.add_success("Descriptor round-trips through YAML")

        return result

    def validate_document(self, document: Dict[str, Any]) -> ValidationResult:
        """
        Validate a descriptor tree (e.g. one loaded from disk)

        Args:
            document: Parsed descriptor

        Returns:
            ValidationResult holding every violation found
        """
        result = ValidationResult()

        if not document:
            result.add_error(ValidationError("<document>", "Descriptor is empty"))
            return result

        self._check_sections(document, result)
        self._check_schema(document, result)
        self._check_auth(document, result)
        self._check_type_dependencies(document, result)
        self._check_firewall(document, result)
        self._check_database(document, result)
        self._check_bucket(document, result)

        if result.is_valid:
            logger.debug("Descriptor passed validation")
        else:
            logger.debug("Descriptor has %d validation error(s)", len(result.errors))

        return result

    def _check_sections(self, document: Dict[str, Any], result: ValidationResult) -> None:
        for name in REQUIRED_SECTIONS:
            if name not in document or document[name] is None:
                result.add_error(MissingRequiredError(name))

    def _check_schema(self, document: Dict[str, Any], result: ValidationResult) -> None:
        validator = jsonschema.Draft7Validator(self._schema)
        errors = sorted(validator.iter_errors(document),
                        key=lambda e: [str(part) for part in e.absolute_path])
        for error in errors:
            path = ".".join(str(part) for part in error.absolute_path) or "<document>"
            result.add_error(ValidationError(path, error.message))

    def _check_auth(self, document: Dict[str, Any], result: ValidationResult) -> None:
        if "github_actions" not in document:
            return

        auth = _section(document, "github_actions", "auth")
        if not auth:
            result.add_error(MissingRequiredError("github_actions.auth"))
            return

        mode = auth.get("mode")
        if mode == "existing_role" and not auth.get("role_arn"):
            result.add_error(MissingRequiredError("github_actions.auth.role_arn"))
        elif mode == "create_role" and not auth.get("role_name"):
            result.add_error(MissingRequiredError("github_actions.auth.role_name"))

    def _check_type_dependencies(self, document: Dict[str, Any], result: ValidationResult) -> None:
        app_type = _section(document, "application").get("type")
        if app_type is None:
            return

        try:
            profile = get_profile(ApplicationType(app_type))
        except ValueError:
            result.add_error(InvalidEnumError(
                "application.type", app_type, [t.value for t in ApplicationType]
            ))
            return

        dependencies = _section(document, "dependencies")
        for name in sorted(profile.base_dependencies):
            block = dependencies.get(name)
            if not isinstance(block, dict):
                result.add_error(MissingRequiredError(f"dependencies.{name}"))
            elif block.get("enabled") is not True:
                result.add_error(ValidationError(
                    f"dependencies.{name}.enabled",
                    f"{name} is required by {app_type} applications and must be enabled",
                ))

        if "git" not in dependencies:
            result.add_error(MissingRequiredError("dependencies.git"))

    def _check_firewall(self, document: Dict[str, Any], result: ValidationResult) -> None:
        dependencies = _section(document, "dependencies")
        firewall = dependencies.get("firewall")

        if not isinstance(firewall, dict):
            result.add_error(MissingRequiredError("dependencies.firewall"))
            return

        if firewall.get("enabled") is not True:
            result.add_error(ValidationError("dependencies.firewall.enabled",
                                             "Firewall must be enabled"))

        config = _section(firewall, "config")
        if config.get("deny_all_other") is not True:
            result.add_error(ValidationError("dependencies.firewall.config.deny_all_other",
                                             "Firewall must deny all other ports"))

        ports = [str(port) for port in config.get("allowed_ports") or []]
        expected = list(BASE_FIREWALL_PORTS)

        app_type = _section(document, "application").get("type")
        try:
            extra_port = get_profile(ApplicationType(app_type)).extra_port
        except ValueError:
            extra_port = None
        if extra_port:
            expected.append(extra_port)

        missing = [port for port in expected if port not in ports]
        if missing:
            result.add_error(ValidationError(
                "dependencies.firewall.config.allowed_ports",
                f"Missing required ports: {', '.join(missing)}",
            ))

    def _check_database(self, document: Dict[str, Any], result: ValidationResult) -> None:
        dependencies = _section(document, "dependencies")
        env = _section(document, "application", "environment_variables")

        # Blocks left disabled and not external describe no database at all
        active = []
        for kind in DATABASE_BLOCKS:
            block = dependencies.get(kind)
            if isinstance(block, dict) and (block.get("enabled") or block.get("external")):
                active.append(kind)

        if len(active) > 1:
            result.add_error(ValidationError(
                "dependencies",
                f"Only one database engine may be configured, found: {', '.join(active)}",
            ))

        for kind in active:
            block = dependencies[kind]
            external = bool(block.get("external"))
            prefix = f"dependencies.{kind}"

            if external and block.get("enabled"):
                result.add_error(ValidationError(
                    f"{prefix}.enabled",
                    "External databases must not be installed on the instance",
                ))
            if external and not isinstance(block.get("rds"), dict):
                result.add_error(MissingRequiredError(f"{prefix}.rds"))
            if not external and "rds" in block:
                result.add_error(ValidationError(
                    f"{prefix}.rds", "RDS settings given for a local database"
                ))

            if env.get("DB_TYPE") != kind:
                result.add_error(ValidationError(
                    "application.environment_variables.DB_TYPE",
                    f"Expected {kind!r}, found {env.get('DB_TYPE')!r}",
                ))

            if external:
                rds = block.get("rds")
                rds_name = rds.get("database_name") if isinstance(rds, dict) else None
                result.add_warning(
                    f"{prefix}: DB_HOST is filled in from RDS instance {rds_name!r} at deploy time"
                )

            expected_host = RDS_ENDPOINT_PLACEHOLDER if external else "localhost"
            if env.get("DB_HOST") != expected_host:
                result.add_error(ValidationError(
                    "application.environment_variables.DB_HOST",
                    f"Expected {expected_host!r}, found {env.get('DB_HOST')!r}",
                ))

        if not active:
            stray = sorted(key for key in env if key.startswith("DB_"))
            if stray:
                result.add_error(ValidationError(
                    "application.environment_variables",
                    f"Database variables set without a database: {', '.join(stray)}",
                ))

    def _check_bucket(self, document: Dict[str, Any], result: ValidationResult) -> None:
        bucket_section = _section(document, "lightsail", "bucket")
        bucket_block = _section(document, "dependencies", "bucket")
        env = _section(document, "application", "environment_variables")

        section_enabled = bool(bucket_section.get("enabled"))
        block_enabled = bool(bucket_block.get("enabled"))

        if section_enabled != block_enabled:
            result.add_error(ValidationError(
                "lightsail.bucket",
                "lightsail.bucket and dependencies.bucket disagree on whether a bucket is enabled",
            ))

        if not section_enabled:
            if "BUCKET_NAME" in env:
                result.add_error(ValidationError(
                    "application.environment_variables.BUCKET_NAME",
                    "BUCKET_NAME set without an enabled bucket",
                ))
            return

        name = bucket_section.get("name")
        if env.get("BUCKET_NAME") != name:
            result.add_error(ValidationError(
                "application.environment_variables.BUCKET_NAME",
                f"Expected {name!r}, found {env.get('BUCKET_NAME')!r}",
            ))

        block_name = _section(bucket_block, "config").get("name")
        if block_enabled and block_name != name:
            result.add_error(ValidationError(
                "dependencies.bucket.config.name",
                f"Expected {name!r}, found {block_name!r}",
            ))


def validate(descriptor: DeploymentDescriptor) -> ValidationResult:
    """Validate a descriptor, collecting every violation"""
    return ValidationEngine().validate(descriptor)
