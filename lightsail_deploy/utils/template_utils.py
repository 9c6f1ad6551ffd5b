"""Template processing utilities"""

import string
from typing import Any, Dict


def render_template(template: str,
                    variables: Dict[str, Any],
                    safe: bool = False) -> str:
    """
    Render template with variables

    Templates use ``string.Template`` syntax; write ``$$`` for a literal
    dollar sign (GitHub expressions such as ``$${{ vars.X }}``).

    Args:
        template: Template string
        variables: Variables to substitute
        safe: Use safe substitution (ignore missing vars)

    Returns:
        Rendered string

    Raises:
        KeyError: If a placeholder has no value and safe is False
    """
    tmpl = string.Template(template)

    if safe:
        return tmpl.safe_substitute(variables)
    else:
        return tmpl.substitute(variables)
