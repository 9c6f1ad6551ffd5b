# lightsail_deploy/cli/decorators/__init__.py
"""CLI decorators"""

from .dual_mode import dual_mode_command, CommandOptions

__all__ = [
    'dual_mode_command',
    'CommandOptions',
]
