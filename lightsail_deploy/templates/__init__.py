# lightsail_deploy/templates/__init__.py
"""Built-in templates for lightsail-deploy"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

# Template directory path
TEMPLATES_DIR = Path(__file__).parent


def get_template_path(category: str, name: str) -> Optional[Path]:
    """
    Get path to a template file

    Args:
        category: Template category (workflows, schemas)
        name: Template name

    Returns:
        Path to template file or None if not found
    """
    template_path = TEMPLATES_DIR / category / name

    if template_path.exists():
        return template_path

    return None


def load_template(category: str, name: str) -> Optional[str]:
    """
    Load template content

    Args:
        category: Template category
        name: Template name

    Returns:
        Template content or None if not found
    """
    template_path = get_template_path(category, name)

    if template_path:
        return template_path.read_text(encoding='utf-8')

    return None


def list_templates(category: str, name: str) -> List[Path]:
    """Template files (``*.tmpl``) below a template directory, sorted by path"""
    base = TEMPLATES_DIR / category / name
    if not base.is_dir():
        return []
    return sorted(base.rglob(f"*{TEMPLATE_SUFFIX}"))


def load_schema(name: str) -> Dict[str, Any]:
    """Load a bundled JSON schema"""
    content = load_template("schemas", name)
    if content is None:
        raise FileNotFoundError(f"Schema not found: {name}")
    return json.loads(content)


TEMPLATE_SUFFIX = ".tmpl"
APP_TEMPLATES = "apps"
WORKFLOW_TEMPLATE = "deploy.yml.tmpl"
DESCRIPTOR_SCHEMA = "descriptor.schema.json"

__all__ = [
    'TEMPLATES_DIR',
    'get_template_path',
    'load_template',
    'list_templates',
    'load_schema',
    'TEMPLATE_SUFFIX',
    'APP_TEMPLATES',
    'WORKFLOW_TEMPLATE',
    'DESCRIPTOR_SCHEMA',
]
