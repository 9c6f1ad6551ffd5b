# lightsail_deploy/services/__init__.py
"""Business logic services for lightsail-deploy"""

from .collaborators import IdentityCollaborator, RepositoryVariableCollaborator
from .setup_service import DeploymentSetupService

__all__ = [
    "IdentityCollaborator",
    "RepositoryVariableCollaborator",
    "DeploymentSetupService",
]
