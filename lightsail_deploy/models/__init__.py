# lightsail_deploy/models/__init__.py
"""Data models for lightsail-deploy"""

from .request import (
    AuthMode,
    BucketOptions,
    CreateRole,
    DatabaseOptions,
    DeploymentRequest,
    ExistingRole,
)
from .descriptor import DependencyBlock, DependencySet, DeploymentDescriptor
from .result import SetupResult

__all__ = [
    # Request models
    "AuthMode",
    "BucketOptions",
    "CreateRole",
    "DatabaseOptions",
    "DeploymentRequest",
    "ExistingRole",

    # Descriptor models
    "DependencyBlock",
    "DependencySet",
    "DeploymentDescriptor",

    # Result models
    "SetupResult",
]
