# lightsail_deploy/services/setup_service.py
"""Generate deployment files and wire up GitHub OIDC for one request"""

import json
import logging
import time
from pathlib import Path
from typing import Dict, Optional, Union

from .collaborators import IdentityCollaborator, RepositoryVariableCollaborator
from ..api.exceptions import (
    CollaboratorError,
    DescriptorInvalidError,
    FileExistsError,
    LightsailDeployError,
    MissingRequiredError,
)
from ..constants import (
    MANAGED_POLICY_ARNS,
    ROLE_ARN_VARIABLE,
    TRUST_POLICY_FILE_PATTERN,
)
from ..core.app_scaffold import AppScaffold
from ..core.dependency_resolver import DependencyResolver
from ..core.descriptor_builder import DescriptorBuilder
from ..core.emitter import DescriptorEmitter
from ..core.trust_policy import build_trust_policy, role_arn
from ..core.validation_engine import ValidationEngine
from ..core.workflow_generator import WorkflowGenerator
from ..models.descriptor import DeploymentDescriptor
from ..models.request import CreateRole, DeploymentRequest, ExistingRole
from ..models.result import SetupResult
from ..utils.file_utils import atomic_write

logger = logging.getLogger(__name__)


class DeploymentSetupService:
    """Run the generation pipeline and hand its output to collaborators"""

    def __init__(self,
                 identity: Optional[IdentityCollaborator] = None,
                 variables: Optional[RepositoryVariableCollaborator] = None):
        self.identity = identity
        self.variables = variables
        self.resolver = DependencyResolver()
        self.builder = DescriptorBuilder()
        self.emitter = DescriptorEmitter()
        self.validator = ValidationEngine(self.emitter)
        self.workflows = WorkflowGenerator()
        self.scaffold = AppScaffold()

    def prepare(self, request: DeploymentRequest) -> DeploymentDescriptor:
        """
        Resolve, build and validate a descriptor without writing anything

        Raises:
            DescriptorInvalidError: If post-build validation finds problems
        """
        dependencies = self.resolver.resolve_request(request)
        descriptor = self.builder.build(request, dependencies)

        validation = self.validator.validate(descriptor)
        if not validation.is_valid:
            raise DescriptorInvalidError(validation.errors)
        for warning in validation.warnings:
            logger.info(warning)

        return descriptor

    def run(self,
            request: DeploymentRequest,
            output_dir: Path,
            force: bool = True,
            include_workflow: bool = True,
            account_id: Optional[str] = None,
            include_app: bool = True) -> SetupResult:
        """
        Generate deployment files for a request

        Every file is rendered and checked in memory, and conflicts are
        looked for, before anything is written, so a failure leaves the
        output directory untouched. The sample application is only
        written when its directory does not exist yet; an existing one
        belongs to the user and is never touched.

        Args:
            request: Validated deployment request
            output_dir: Repository root to write into
            force: Overwrite existing generated files
            include_workflow: Also write the GitHub Actions workflow
            account_id: AWS account ID (asked from the identity collaborator
                when omitted)
            include_app: Also write the example-{type}-app/ sample

        Returns:
            SetupResult

        Raises:
            DescriptorInvalidError: If the descriptor fails validation
            SerializationError: If a file fails to round-trip
            FileExistsError: If a generated file exists and force is False
            CollaboratorError: If an identity or repository call fails
        """
        start_time = time.time()
        output_dir = Path(output_dir)

        descriptor = self.prepare(request)

        if (self.identity is not None and isinstance(request.auth, CreateRole)
                and not request.github_repo):
            raise MissingRequiredError("github_repo")

        config_path = output_dir / descriptor.config_filename
        generated: Dict[Path, Union[str, bytes]] = {
            config_path: self.emitter.emit(descriptor),
        }

        workflow_path = None
        if include_workflow:
            workflow_path = output_dir / self.workflows.workflow_path(descriptor)
            generated[workflow_path] = self.workflows.render(descriptor, request.app_name)

        trust_policy_path = None
        if self._writes_trust_policy(request, account_id):
            trust_policy_path = output_dir / TRUST_POLICY_FILE_PATTERN.format(
                role_name=request.auth.role_name
            )
            policy = build_trust_policy(account_id, request.github_repo,
                                        request.auth.trust_scope)
            generated[trust_policy_path] = json.dumps(policy, indent=2) + "\n"

        app_dir = None
        app_files: Dict[Path, Union[str, bytes]] = {}
        if include_app:
            package_dir = output_dir / self.scaffold.package_dir(descriptor)
            if package_dir.exists():
                logger.info("Keeping existing application directory %s", package_dir)
            else:
                app_dir = package_dir
                app_files = {
                    output_dir / relative: content
                    for relative, content in self.scaffold.render(descriptor,
                                                                  request.app_name).items()
                }

        if not force:
            for target in generated:
                if target.exists():
                    raise FileExistsError(str(target))

        for path, content in list(generated.items()) + list(app_files.items()):
            atomic_write(path, content)
            logger.info("Wrote %s", path)

        result = SetupResult(
            success=True,
            app_type=request.app_type.value,
            config_path=config_path,
            workflow_path=workflow_path,
            trust_policy_path=trust_policy_path,
            app_dir=app_dir,
            app_files=list(app_files),
        )

        self._configure_auth(request, account_id, result)

        result.next_steps.extend([
            f"Replace the CHANGE_ME passwords in {descriptor.config_filename}",
            "Commit the generated files and push to main to trigger a deployment",
        ])
        result.duration = time.time() - start_time
        return result

    def _writes_trust_policy(self, request: DeploymentRequest,
                             account_id: Optional[str]) -> bool:
        # Without an identity collaborator the policy is applied by hand
        return (self.identity is None and isinstance(request.auth, CreateRole)
                and bool(account_id) and bool(request.github_repo))

    def _configure_auth(self,
                        request: DeploymentRequest,
                        account_id: Optional[str],
                        result: SetupResult) -> None:
        auth = request.auth

        if isinstance(auth, ExistingRole):
            result.role_arn = auth.arn
        elif isinstance(auth, CreateRole):
            if self.identity is not None:
                result.role_arn = self._ensure_role(request, auth, account_id)
            elif result.trust_policy_path is not None:
                result.role_arn = role_arn(account_id, auth.role_name)
                result.next_steps.append(
                    f"Create IAM role {auth.role_name} with trust policy "
                    f"{result.trust_policy_path.name} and attach {', '.join(MANAGED_POLICY_ARNS)}"
                )
            else:
                result.warnings.append(
                    f"IAM role {auth.role_name} was not created; "
                    "an AWS account ID and GitHub repository are needed"
                )
                result.next_steps.append(
                    f"Create IAM role {auth.role_name} trusted by GitHub OIDC"
                )

        if result.role_arn and self.variables is not None:
            try:
                self.variables.set_variable(ROLE_ARN_VARIABLE, result.role_arn)
            except LightsailDeployError:
                raise
            except Exception as e:
                raise CollaboratorError(
                    f"Failed to set {ROLE_ARN_VARIABLE}: {e}", "repository"
                ) from e
            result.role_variable_set = True
            logger.info("Set repository variable %s", ROLE_ARN_VARIABLE)
        else:
            result.next_steps.append(
                f"Set repository variable {ROLE_ARN_VARIABLE}"
                + (f" to {result.role_arn}" if result.role_arn else "")
            )

    def _ensure_role(self, request: DeploymentRequest, auth: CreateRole,
                     account_id: Optional[str]) -> str:
        try:
            account_id = account_id or self.identity.account_id()
            policy = build_trust_policy(account_id, request.github_repo, auth.trust_scope)
            arn = self.identity.ensure_role(
                auth.role_name,
                request.github_repo,
                account_id,
                policy,
                list(MANAGED_POLICY_ARNS),
            )
        except LightsailDeployError:
            raise
        except Exception as e:
            raise CollaboratorError(f"Failed to set up IAM role {auth.role_name}: {e}",
                                    "identity") from e

        logger.info("IAM role ready: %s", arn)
        return arn

