# lightsail_deploy/services/collaborators.py
"""Interfaces to the cloud identity and source hosting services"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List


class IdentityCollaborator(ABC):
    """Creates or updates the IAM role GitHub Actions assumes"""

    @abstractmethod
    def ensure_role(self,
                    role_name: str,
                    repository: str,
                    account_id: str,
                    trust_policy: Dict[str, Any],
                    policy_arns: List[str]) -> str:
        """
        Create the role, or update its trust policy if it already exists

        Args:
            role_name: IAM role name
            repository: GitHub repository as owner/name
            account_id: AWS account ID
            trust_policy: Federated trust policy document
            policy_arns: Managed policies to attach

        Returns:
            The role ARN
        """
        pass

    @abstractmethod
    def account_id(self) -> str:
        """AWS account ID of the current credentials"""
        pass


class RepositoryVariableCollaborator(ABC):
    """Sets repository-level configuration variables"""

    @abstractmethod
    def set_variable(self, name: str, value: str) -> None:
        """
        Set a repository variable

        Args:
            name: Variable name
            value: Variable value
        """
        pass
