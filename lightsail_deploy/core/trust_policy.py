"""GitHub OIDC trust policy documents"""

from typing import Any, Dict

from ..constants import (
    TrustScope,
    OIDC_AUDIENCE,
    OIDC_PROVIDER_ARN_PATTERN,
    OIDC_PROVIDER_HOST,
    ROLE_ARN_PATTERN,
)


def trust_condition(repository: str, scope: TrustScope) -> str:
    """Subject claim pattern a GitHub token must match to assume the role"""
    if scope == TrustScope.MAIN_BRANCH_ONLY:
        return f"repo:{repository}:ref:refs/heads/main"
    return f"repo:{repository}:*"


def build_trust_policy(account_id: str, repository: str, scope: TrustScope) -> Dict[str, Any]:
    """
    Build the federated trust policy for a GitHub Actions role

    Args:
        account_id: AWS account owning the OIDC provider
        repository: GitHub repository as owner/name
        scope: Which refs may assume the role

    Returns:
        IAM policy document as a dictionary
    """
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {
                    "Federated": OIDC_PROVIDER_ARN_PATTERN.format(account_id=account_id),
                },
                "Action": "sts:AssumeRoleWithWebIdentity",
                "Condition": {
                    "StringEquals": {
                        f"{OIDC_PROVIDER_HOST}:aud": OIDC_AUDIENCE,
                    },
                    "StringLike": {
                        f"{OIDC_PROVIDER_HOST}:sub": trust_condition(repository, scope),
                    },
                },
            }
        ],
    }


def role_arn(account_id: str, role_name: str) -> str:
    """ARN of a role in the given account"""
    return ROLE_ARN_PATTERN.format(account_id=account_id, role_name=role_name)
