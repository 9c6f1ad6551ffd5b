# lightsail_deploy/api/__init__.py
"""API layer for lightsail-deploy"""

from .exceptions import (
    LightsailDeployError,
    ValidationError,
    MissingRequiredError,
    InvalidEnumError,
    InsufficientResourcesError,
    InternalInconsistencyError,
    SerializationError,
    DescriptorInvalidError,
    ConfigError,
    FileExistsError,
    CollaboratorError,
    UserCancelledError,
)
from .generator import Generator, generate, validate_file, describe

__all__ = [
    # Main classes
    "Generator",

    # Convenience functions
    "generate",
    "validate_file",
    "describe",

    # Exceptions
    "LightsailDeployError",
    "ValidationError",
    "MissingRequiredError",
    "InvalidEnumError",
    "InsufficientResourcesError",
    "InternalInconsistencyError",
    "SerializationError",
    "DescriptorInvalidError",
    "ConfigError",
    "FileExistsError",
    "CollaboratorError",
    "UserCancelledError",
]
