# lightsail_deploy/utils/__init__.py
"""Utility functions for lightsail-deploy"""

from .file_utils import atomic_write, ensure_parent_dir
from .template_utils import render_template

__all__ = [
    "atomic_write",
    "ensure_parent_dir",
    "render_template",
]
