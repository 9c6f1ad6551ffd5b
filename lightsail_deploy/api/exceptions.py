"""Exception definitions for lightsail-deploy"""

from typing import Iterable, List, Optional

from ..constants import ErrorCode


class LightsailDeployError(Exception):
    """Base exception for lightsail-deploy"""

    def __init__(self, message: str, error_code: str = None):
        super().__init__(message)
        self.error_code = error_code


class ValidationError(LightsailDeployError):
    """Bad or missing input field"""

    def __init__(self, field: str, message: str,
                 error_code: str = ErrorCode.VALIDATION_FAILED):
        super().__init__(message, error_code)
        self.field = field

    def __eq__(self, other):
        if not isinstance(other, ValidationError):
            return NotImplemented
        return (type(self) is type(other)
                and self.field == other.field
                and str(self) == str(other))

    def __hash__(self):
        return hash((type(self).__name__, self.field, str(self)))

    def __repr__(self):
        return f"{type(self).__name__}({self.field!r}, {str(self)!r})"


class MissingRequiredError(ValidationError):
    """Required field was not supplied"""

    def __init__(self, field: str):
        super().__init__(field, f"Missing required value: {field}",
                         ErrorCode.MISSING_REQUIRED_PARAMETER)


class InvalidEnumError(ValidationError):
    """Value is not one of the allowed choices"""

    def __init__(self, field: str, value, allowed: Iterable[str]):
        self.value = value
        self.allowed = list(allowed)
        message = (
            f"Invalid {field}: {value!r}. "
            f"Must be one of: {', '.join(self.allowed)}"
        )
        super().__init__(field, message, ErrorCode.INVALID_CHOICE)


class InsufficientResourcesError(ValidationError):
    """Instance bundle too small for the application type"""

    def __init__(self, field: str, value: str, minimum: str):
        self.value = value
        self.minimum = minimum
        message = (
            f"Docker applications require minimum {minimum} bundle (2GB RAM). "
            f"Current: {value}"
        )
        super().__init__(field, message, ErrorCode.INSUFFICIENT_RESOURCES)


class InternalInconsistencyError(LightsailDeployError):
    """Validated data reached a stage with no rule for it"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.INTERNAL_INCONSISTENCY)


class SerializationError(LightsailDeployError):
    """Descriptor does not survive a round trip through YAML"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.SERIALIZATION_FAILED)


class DescriptorInvalidError(LightsailDeployError):
    """Built descriptor failed post-build validation"""

    def __init__(self, errors: List[ValidationError]):
        self.errors = list(errors)
        lines = [f"Deployment descriptor is invalid ({len(self.errors)} problem(s)):"]
        lines.extend(f"  - {error.field}: {error}" for error in self.errors)
        super().__init__("\n".join(lines), ErrorCode.DESCRIPTOR_INVALID)


class ConfigError(LightsailDeployError):
    """Configuration file could not be read"""

    def __init__(self, message: str):
        super().__init__(message, ErrorCode.CONFIG_FORMAT_ERROR)


class FileExistsError(LightsailDeployError):
    """File already exists error"""

    def __init__(self, file_path: str):
        message = f"File already exists: {file_path}"
        super().__init__(message, ErrorCode.FILE_ALREADY_EXISTS)
        self.file_path = file_path


class CollaboratorError(LightsailDeployError):
    """External identity or repository operation failed"""

    def __init__(self, message: str, collaborator: Optional[str] = None):
        super().__init__(message, ErrorCode.COLLABORATOR_FAILED)
        self.collaborator = collaborator


class UserCancelledError(LightsailDeployError):
    """User cancelled the operation"""

    def __init__(self):
        super().__init__("Operation cancelled by user")
