"""Interactive utilities for CLI commands"""

import time
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt
from rich.table import Table

from ...constants import (
    ApplicationType,
    BucketAccess,
    BucketSize,
    DatabaseKind,
    EnvVar,
    TrustScope,
    BLUEPRINT_IDS,
    BUNDLE_IDS,
    DEFAULT_APP_VERSION,
    DEFAULT_AWS_REGION,
    DEFAULT_BLUEPRINT_ID,
    DEFAULT_BUNDLE_ID,
    DEFAULT_DATABASE_NAME,
    DEFAULT_ROLE_NAME_PATTERN,
    DOCKER_EXCLUDED_BUNDLE_IDS,
    RDS_NAME_PATTERN,
    TRUE_VALUES,
)
from ...api.exceptions import UserCancelledError
from ...core.app_profiles import get_profile


def _values(enum_cls) -> List[str]:
    return [member.value for member in enum_cls]


def _is_set(params: Dict[str, Any], key: str) -> bool:
    return str(params.get(key) or "").lower() in TRUE_VALUES


class SetupWizard:
    """Interactive wizard collecting deployment parameters

    Returns the same key/value mapping automated mode reads from the
    environment, so both modes go through the same request parser.
    Values already present in ``params`` are used as prompt defaults.
    """

    def __init__(self, console: Console = None):
        self.console = console or Console()

    def run(self, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Run interactive setup wizard"""
        params = dict(params or {})
        stamp = int(time.time())

        self.console.print("\n[bold cyan]Lightsail Deployment Setup Wizard[/bold cyan]\n")

        # Application
        app_type = Prompt.ask(
            "Application type",
            choices=_values(ApplicationType),
            default=params.get(EnvVar.APP_TYPE) or ApplicationType.NODEJS.value,
        )
        params[EnvVar.APP_TYPE] = app_type

        params[EnvVar.APP_NAME] = Prompt.ask(
            "Application name",
            default=params.get(EnvVar.APP_NAME) or f"{app_type.capitalize()} Application",
        )
        params[EnvVar.APP_VERSION] = Prompt.ask(
            "Application version",
            default=params.get(EnvVar.APP_VERSION) or DEFAULT_APP_VERSION,
        )

        # Instance
        self.console.print("\n[bold]Lightsail Instance:[/bold]")
        params[EnvVar.INSTANCE_NAME] = Prompt.ask(
            "Instance name",
            default=params.get(EnvVar.INSTANCE_NAME) or f"{app_type}-app-{stamp}",
        )
        params[EnvVar.AWS_REGION] = Prompt.ask(
            "AWS region",
            default=params.get(EnvVar.AWS_REGION) or DEFAULT_AWS_REGION,
        )
        params[EnvVar.BLUEPRINT_ID] = Prompt.ask(
            "Operating system blueprint",
            choices=BLUEPRINT_IDS,
            default=params.get(EnvVar.BLUEPRINT_ID) or DEFAULT_BLUEPRINT_ID,
        )
        params[EnvVar.BUNDLE_ID] = self._ask_bundle(app_type, params.get(EnvVar.BUNDLE_ID))

        # Database
        self.console.print("\n[bold]Database:[/bold]")
        database = Prompt.ask(
            "Database",
            choices=_values(DatabaseKind),
            default=params.get(EnvVar.DATABASE_TYPE) or self._default_database(app_type),
        )
        params[EnvVar.DATABASE_TYPE] = database

        if database != DatabaseKind.NONE.value:
            external = Confirm.ask("Use an external RDS database?",
                                   default=_is_set(params, EnvVar.DB_EXTERNAL))
            params[EnvVar.DB_EXTERNAL] = "true" if external else "false"
            if external:
                params[EnvVar.DB_RDS_NAME] = Prompt.ask(
                    "RDS instance name",
                    default=params.get(EnvVar.DB_RDS_NAME)
                    or RDS_NAME_PATTERN.format(app_type=app_type, database_kind=database),
                )
            params[EnvVar.DB_NAME] = Prompt.ask(
                "Database name",
                default=params.get(EnvVar.DB_NAME) or DEFAULT_DATABASE_NAME,
            )

        # Bucket
        self.console.print("\n[bold]Object Storage:[/bold]")
        if Confirm.ask("Enable a Lightsail bucket?",
                       default=_is_set(params, EnvVar.ENABLE_BUCKET)):
            params[EnvVar.ENABLE_BUCKET] = "true"
            params[EnvVar.BUCKET_NAME] = Prompt.ask(
                "Bucket name",
                default=params.get(EnvVar.BUCKET_NAME) or f"{app_type}-bucket-{stamp}",
            )
            params[EnvVar.BUCKET_ACCESS] = Prompt.ask(
                "Access level",
                choices=_values(BucketAccess),
                default=params.get(EnvVar.BUCKET_ACCESS) or BucketAccess.READ_WRITE.value,
            )
            params[EnvVar.BUCKET_BUNDLE] = Prompt.ask(
                "Bucket size",
                choices=_values(BucketSize),
                default=params.get(EnvVar.BUCKET_BUNDLE) or BucketSize.SMALL.value,
            )
        else:
            params[EnvVar.ENABLE_BUCKET] = "false"

        # GitHub OIDC
        self.console.print("\n[bold]GitHub Actions Authentication:[/bold]")
        if Confirm.ask("Do you already have an IAM role for GitHub Actions?",
                       default=bool(params.get(EnvVar.AWS_ROLE_ARN))):
            params[EnvVar.AWS_ROLE_ARN] = self._ask_required(
                "IAM role ARN", params.get(EnvVar.AWS_ROLE_ARN)
            )
        else:
            params.pop(EnvVar.AWS_ROLE_ARN, None)
            params[EnvVar.ROLE_NAME] = Prompt.ask(
                "IAM role name",
                default=params.get(EnvVar.ROLE_NAME)
                or DEFAULT_ROLE_NAME_PATTERN.format(app_type=app_type),
            )
            params[EnvVar.TRUST_SCOPE] = Prompt.ask(
                "Which branches may deploy",
                choices=_values(TrustScope),
                default=params.get(EnvVar.TRUST_SCOPE) or TrustScope.MAIN_BRANCH_ONLY.value,
            )

        repo = Prompt.ask(
            "GitHub repository (owner/name, optional)",
            default=params.get(EnvVar.GITHUB_REPO) or "",
        )
        if repo:
            params[EnvVar.GITHUB_REPO] = repo

        self._show_summary(params)
        return params

    def confirm(self, message: str = "Proceed with setup?") -> None:
        """
        Ask for final confirmation

        Raises:
            UserCancelledError: If the user declines
        """
        if not Confirm.ask(f"\n{message}", default=True):
            raise UserCancelledError()

    @staticmethod
    def _ask_required(prompt: str, default: Optional[str] = None) -> str:
        value = ""
        while not value.strip():
            if default:
                value = Prompt.ask(prompt, default=default)
            else:
                value = Prompt.ask(prompt)
        return value.strip()

    def _ask_bundle(self, app_type: str, current: Optional[str]) -> str:
        choices = list(BUNDLE_IDS)
        if app_type == ApplicationType.DOCKER.value:
            self.console.print("[yellow]Docker applications need at least 2GB RAM[/yellow]")
            choices = [b for b in BUNDLE_IDS if b not in DOCKER_EXCLUDED_BUNDLE_IDS]

        default = current if current in choices else None
        if default is None:
            default = DEFAULT_BUNDLE_ID if DEFAULT_BUNDLE_ID in choices else choices[0]

        return Prompt.ask("Instance size", choices=choices, default=default)

    @staticmethod
    def _default_database(app_type: str) -> str:
        if app_type == ApplicationType.LAMP.value:
            return DatabaseKind.MYSQL.value
        return DatabaseKind.NONE.value

    def _show_summary(self, params: Dict[str, Any]) -> None:
        """Show configuration summary"""
        table = Table(title="Deployment Configuration Summary")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="green")

        app_type = params[EnvVar.APP_TYPE]
        profile = get_profile(ApplicationType(app_type))

        table.add_row("Application", f"{params[EnvVar.APP_NAME]} ({profile.label})")
        table.add_row("Version", params[EnvVar.APP_VERSION])
        table.add_row("Instance", params[EnvVar.INSTANCE_NAME])
        table.add_row("Region", params[EnvVar.AWS_REGION])
        table.add_row("Blueprint", params[EnvVar.BLUEPRINT_ID])
        table.add_row("Bundle", params[EnvVar.BUNDLE_ID])

        database = params.get(EnvVar.DATABASE_TYPE, DatabaseKind.NONE.value)
        if database != DatabaseKind.NONE.value and params.get(EnvVar.DB_EXTERNAL) == "true":
            database = f"{database} (RDS: {params[EnvVar.DB_RDS_NAME]})"
        table.add_row("Database", database)

        if params.get(EnvVar.ENABLE_BUCKET) == "true":
            table.add_row("Bucket", f"{params[EnvVar.BUCKET_NAME]} "
                                    f"({params[EnvVar.BUCKET_ACCESS]}, {params[EnvVar.BUCKET_BUNDLE]})")

        if params.get(EnvVar.AWS_ROLE_ARN):
            table.add_row("IAM role", params[EnvVar.AWS_ROLE_ARN])
        else:
            table.add_row("IAM role", f"{params[EnvVar.ROLE_NAME]} (to create, "
                                      f"{params[EnvVar.TRUST_SCOPE]})")

        if params.get(EnvVar.GITHUB_REPO):
            table.add_row("Repository", params[EnvVar.GITHUB_REPO])

        self.console.print(table)
