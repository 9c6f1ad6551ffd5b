# lightsail_deploy/cli/commands/__init__.py
"""CLI commands"""

from . import generate
from . import validate
from . import types

__all__ = [
    "generate",
    "validate",
    "types",
]
