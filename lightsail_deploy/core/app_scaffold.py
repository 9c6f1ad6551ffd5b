"""Sample application packaged by the generated deployment"""

import html
import json
import logging
from typing import Any, Dict, Optional

from ..api.exceptions import InternalInconsistencyError
from ..constants import PACKAGE_DIR_PATTERN
from ..models.descriptor import DeploymentDescriptor
from ..templates import APP_TEMPLATES, TEMPLATE_SUFFIX, TEMPLATES_DIR, list_templates
from ..utils.template_utils import render_template

logger = logging.getLogger(__name__)


class AppScaffold:
    """Render the example-{type}-app/ directory the descriptor packages

    Every home page carries the descriptor's health-check text, so the
    first deployment of an untouched sample passes verification.
    """

    @staticmethod
    def package_dir(descriptor: DeploymentDescriptor) -> str:
        """Repository-relative package directory, with a trailing slash"""
        return PACKAGE_DIR_PATTERN.format(app_type=descriptor.app_type)

    @staticmethod
    def variables(descriptor: DeploymentDescriptor,
                  app_name: Optional[str] = None) -> Dict[str, Any]:
        """Template values, escaped for the places the templates use them"""
        application = descriptor.application
        expected = descriptor.monitoring["health_check"]["expected_content"]
        name = app_name or application["name"]

        return {
            "app_title": html.escape(name, quote=False),
            "app_title_attr": html.escape(name),
            "health_text": html.escape(expected, quote=False),
            "app_slug": application["name"],
            "app_version_json": json.dumps(application["version"]),
        }

    def render(self,
               descriptor: DeploymentDescriptor,
               app_name: Optional[str] = None) -> Dict[str, str]:
        """
        Render the sample application

        Args:
            descriptor: Descriptor whose package directory is filled
            app_name: Display name for the pages (defaults to the
                descriptor's application name)

        Returns:
            Repository-relative path to file content, in path order

        Raises:
            InternalInconsistencyError: If no sample exists for the type
        """
        templates = list_templates(APP_TEMPLATES, descriptor.app_type)
        if not templates:
            raise InternalInconsistencyError(
                f"No sample application for type {descriptor.app_type!r}"
            )

        base = TEMPLATES_DIR / APP_TEMPLATES / descriptor.app_type
        package_dir = self.package_dir(descriptor)
        variables = self.variables(descriptor, app_name)

        files = {}
        for template_path in templates:
            relative = template_path.relative_to(base).as_posix()[:-len(TEMPLATE_SUFFIX)]
            # nginx, PHP and JS ``$`` expressions pass through untouched
            files[package_dir + relative] = render_template(
                template_path.read_text(encoding="utf-8"), variables, safe=True
            )

        logger.debug("Rendered %d sample files for %s", len(files), descriptor.app_type)
        return files


def render_app(descriptor: DeploymentDescriptor,
               app_name: Optional[str] = None) -> Dict[str, str]:
    """Module level shortcut for AppScaffold().render()"""
    return AppScaffold().render(descriptor, app_name)
