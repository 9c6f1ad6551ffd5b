"""Lightsail Deploy - Deployment configuration generator for AWS Lightsail.

This tool turns a short description of a web application into the YAML
descriptor and GitHub Actions workflow used to deploy it to a Lightsail
instance, authenticating through GitHub OIDC.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Exceptions
from .api.exceptions import (
    LightsailDeployError,
    ValidationError,
    MissingRequiredError,
    InvalidEnumError,
    InsufficientResourcesError,
    InternalInconsistencyError,
    SerializationError,
    DescriptorInvalidError,
    ConfigError,
    CollaboratorError,
)

# Core API
from .api.generator import Generator, generate, validate_file, describe

# Data models
from .models.request import (
    DeploymentRequest,
    DatabaseOptions,
    BucketOptions,
    ExistingRole,
    CreateRole,
)
from .models.descriptor import DeploymentDescriptor, DependencySet, DependencyBlock
from .models.result import SetupResult

# Pipeline stages
from .core.request_parser import parse_request
from .core.dependency_resolver import resolve
from .core.descriptor_builder import build
from .core.validation_engine import validate
from .core.emitter import emit, parse, write_descriptor
from .core.workflow_generator import render_workflow
from .core.app_scaffold import render_app

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "Generator",

    # Core API functions
    "generate",
    "validate_file",
    "describe",
    "parse_request",
    "resolve",
    "build",
    "validate",
    "emit",
    "parse",
    "write_descriptor",
    "render_workflow",
    "render_app",

    # Data models
    "DeploymentRequest",
    "DatabaseOptions",
    "BucketOptions",
    "ExistingRole",
    "CreateRole",
    "DeploymentDescriptor",
    "DependencySet",
    "DependencyBlock",
    "SetupResult",

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
    "CollaboratorError",
]
