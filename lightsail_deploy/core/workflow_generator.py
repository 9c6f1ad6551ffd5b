# lightsail_deploy/core/workflow_generator.py
"""GitHub Actions workflow that hands the descriptor to the reusable deploy workflow"""

import json
import logging
import re
from typing import Any, Dict, Optional

import yaml

from .app_profiles import get_profile
from ..api.exceptions import InternalInconsistencyError, SerializationError
from ..constants import (
    ApplicationType,
    PACKAGE_DIR_PATTERN,
    REUSABLE_WORKFLOW_PATH,
    ROLE_ARN_VARIABLE,
    WORKFLOW_FILE_PATTERN,
)
from ..models.descriptor import DeploymentDescriptor
from ..templates import WORKFLOW_TEMPLATE, load_template
from ..utils.template_utils import render_template

logger = logging.getLogger(__name__)

SUMMARY_INDENT = " " * 12


def _yaml_string(value: str) -> str:
    # JSON strings are valid double-quoted YAML scalars
    return json.dumps(value, ensure_ascii=False)


def _shell_safe(value: str) -> str:
    return re.sub(r'["`$\\]', "", value)


class WorkflowGenerator:
    """Render .github/workflows/deploy-{type}.yml for a descriptor"""

    def __init__(self):
        self._template = load_template("workflows", WORKFLOW_TEMPLATE)
        if self._template is None:
            raise InternalInconsistencyError(f"Workflow template missing: {WORKFLOW_TEMPLATE}")

    @staticmethod
    def workflow_path(descriptor: DeploymentDescriptor) -> str:
        """Repository-relative path of the workflow file"""
        return WORKFLOW_FILE_PATTERN.format(app_type=descriptor.app_type)

    def render(self, descriptor: DeploymentDescriptor, app_name: Optional[str] = None) -> str:
        """
        Render the workflow

        The deploy job passes exactly ``descriptor.config_filename`` to the
        reusable workflow; the rendered text is parsed back to confirm it.

        Args:
            descriptor: Descriptor the workflow deploys
            app_name: Display name for the workflow and summary (defaults
                to the application name in the descriptor)

        Returns:
            Workflow YAML text

        Raises:
            SerializationError: If the rendered workflow is not valid YAML or
                does not reference the descriptor file
        """
        app_name = app_name or descriptor.application["name"]
        app_type = descriptor.app_type
        profile = get_profile(ApplicationType(app_type))

        summary_lines = "\n".join(
            f'{SUMMARY_INDENT}echo "{line}" >> $GITHUB_STEP_SUMMARY'
            for line in profile.summary_lines
        )

        text = render_template(self._template, {
            "workflow_name": _yaml_string(f"{app_name} Deployment"),
            "deploy_job_name": _yaml_string(f"Deploy {app_name}"),
            "summary_title": _shell_safe(f"{app_name} Deployment"),
            "package_dir": PACKAGE_DIR_PATTERN.format(app_type=app_type),
            "config_file": descriptor.config_filename,
            "workflow_file": self.workflow_path(descriptor),
            "reusable_workflow": REUSABLE_WORKFLOW_PATH,
            "aws_region": descriptor.aws["region"],
            "role_variable": ROLE_ARN_VARIABLE,
            "summary_lines": summary_lines,
        })

        self.check(text, descriptor.config_filename)
        logger.debug("Rendered workflow for %s", descriptor.config_filename)
        return text

    @staticmethod
    def check(text: str, config_filename: str) -> Dict[str, Any]:
        """Parse a workflow and confirm its deploy job uses config_filename"""
        try:
            workflow = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise SerializationError(f"Invalid workflow YAML: {e}") from e

        deploy = ((workflow or {}).get("jobs") or {}).get("deploy") or {}
        if deploy.get("uses") != REUSABLE_WORKFLOW_PATH:
            raise SerializationError("Workflow does not use the reusable deployment workflow")

        referenced = (deploy.get("with") or {}).get("config_file")
        if referenced != config_filename:
            raise SerializationError(
                f"Workflow references {referenced!r}, expected {config_filename!r}"
            )

        return workflow


def render_workflow(descriptor: DeploymentDescriptor, app_name: Optional[str] = None) -> str:
    """Render the GitHub Actions workflow for a descriptor"""
    return WorkflowGenerator().render(descriptor, app_name)
