"""Generator API for producing deployment files"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from ..core.emitter import DescriptorEmitter
from ..core.request_parser import parse_request, request_from_environment
from ..core.validation_engine import ValidationEngine, ValidationResult
from ..models.descriptor import DeploymentDescriptor
from ..models.request import DeploymentRequest
from ..models.result import SetupResult
from ..services.collaborators import IdentityCollaborator, RepositoryVariableCollaborator
from ..services.setup_service import DeploymentSetupService
from .exceptions import ConfigError, SerializationError

logger = logging.getLogger(__name__)


class Generator:
    """Generator class for deployment configuration"""

    def __init__(self,
                 identity: Optional[IdentityCollaborator] = None,
                 variables: Optional[RepositoryVariableCollaborator] = None):
        """
        Initialize generator

        Args:
            identity: Creates IAM roles (optional)
            variables: Sets repository variables (optional)
        """
        self.service = DeploymentSetupService(identity=identity, variables=variables)
        self.emitter: DescriptorEmitter = self.service.emitter
        self.validation_engine: ValidationEngine = self.service.validator

    def generate(self,
                 request: Union[DeploymentRequest, Mapping[str, Any], None] = None,
                 output_dir: Union[str, Path] = ".",
                 **options) -> SetupResult:
        """
        Generate the deployment descriptor and workflow

        Args:
            request: A DeploymentRequest, raw parameters keyed by environment
                variable name, or None to read the environment
            output_dir: Repository root to write into
            **options: Other options
                - force: Overwrite existing files (default True)
                - include_workflow: Write the workflow file (default True)
                - include_app: Write the sample application when missing (default True)
                - account_id: AWS account ID for trust policies

        Returns:
            SetupResult

        Raises:
            ValidationError: If the parameters are invalid
            DescriptorInvalidError: If the built descriptor is inconsistent
            FileExistsError: If a file exists and force is False
        """
        if request is None:
            request = request_from_environment()
        elif not isinstance(request, DeploymentRequest):
            request = parse_request(request)

        return self.service.run(
            request,
            Path(output_dir),
            force=options.get('force', True),
            include_workflow=options.get('include_workflow', True),
            include_app=options.get('include_app', True),
            account_id=options.get('account_id'),
        )

    def preview(self, request: Union[DeploymentRequest, Mapping[str, Any]]) -> DeploymentDescriptor:
        """Build and validate a descriptor without writing files"""
        if not isinstance(request, DeploymentRequest):
            request = parse_request(request)
        return self.service.prepare(request)

    def validate_file(self, config_path: Union[str, Path]) -> ValidationResult:
        """
        Validate a descriptor file on disk

        Args:
            config_path: Path to deployment-{type}.config.yml

        Returns:
            ValidationResult

        Raises:
            ConfigError: If the file is missing or is not a YAML mapping
        """
        config_path = Path(config_path)
        if not config_path.is_file():
            raise ConfigError(f"Configuration file not found: {config_path}")

        try:
            document = self.emitter.load(config_path)
        except SerializationError as e:
            raise ConfigError(f"Cannot read {config_path}: {e}") from e

        logger.debug("Validating %s", config_path)
        return self.validation_engine.validate_document(document)


# Convenience functions
def generate(request: Union[DeploymentRequest, Mapping[str, Any], None] = None,
             output_dir: Union[str, Path] = ".",
             **options) -> SetupResult:
    """Generate deployment files (convenience function)"""
    generator = Generator(
        identity=options.pop('identity', None),
        variables=options.pop('variables', None),
    )
    return generator.generate(request, output_dir, **options)


def validate_file(config_path: Union[str, Path]) -> ValidationResult:
    """Validate a descriptor file (convenience function)"""
    return Generator().validate_file(config_path)


def describe(request: Union[DeploymentRequest, Mapping[str, Any]]) -> Dict[str, Any]:
    """Descriptor tree for a request, without writing files"""
    return Generator().preview(request).to_dict()
