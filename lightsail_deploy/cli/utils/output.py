# lightsail_deploy/cli/utils/output.py
"""Output formatting utilities"""

from pathlib import Path
from typing import Iterable, List, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ...api.exceptions import LightsailDeployError, ValidationError
from ...constants import (
    EMOJI_ARROW,
    EMOJI_ERROR,
    EMOJI_INFO,
    EMOJI_SUCCESS,
    EMOJI_WARNING,
    MSG_APP_WRITTEN,
    MSG_CONFIG_WRITTEN,
    MSG_ROLE_VARIABLE_SET,
)
from ...core.app_profiles import PROFILES
from ...core.validation_engine import ValidationResult
from ...models.result import SetupResult

console = Console()


def print_success(message: str) -> None:
    console.print(f"[green]{EMOJI_SUCCESS}[/green] {message}")


def print_error(message: str) -> None:
    console.print(f"[red]{EMOJI_ERROR}[/red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]{EMOJI_WARNING}[/yellow] {message}")


def print_info(message: str) -> None:
    console.print(f"[blue]{EMOJI_INFO}[/blue] {message}")


def _display_path(path: Path, base: Optional[Path] = None) -> str:
    if base is not None:
        try:
            return str(Path(path).resolve().relative_to(Path(base).resolve()))
        except ValueError:
            pass
    return str(path)


def format_setup_result(result: SetupResult, base: Optional[Path] = None) -> None:
    """Format and display a generate operation result"""
    lines = [
        f"[green]{EMOJI_SUCCESS}[/green] Deployment configuration generated!",
        "",
        f"[bold]Type:[/bold] {result.app_type}",
    ]

    for path in (result.config_path, result.workflow_path, result.trust_policy_path):
        if path is not None:
            lines.append(MSG_CONFIG_WRITTEN.format(path=_display_path(path, base)))
    if result.app_dir is not None:
        lines.append(MSG_APP_WRITTEN.format(path=_display_path(result.app_dir, base),
                                            count=len(result.app_files)))

    if result.role_arn:
        lines.append(f"[bold]IAM role:[/bold] {result.role_arn}")
    if result.role_variable_set:
        lines.append(MSG_ROLE_VARIABLE_SET)

    console.print(Panel("\n".join(lines), title="Generate Result", border_style="green"))

    for warning in result.warnings:
        print_warning(warning)

    if result.next_steps:
        console.print("\n[bold]Next steps:[/bold]")
        for i, step in enumerate(result.next_steps, 1):
            console.print(f"  {i}. {step}")


def print_validation_errors(errors: Iterable[ValidationError], title: str = "Validation Errors") -> None:
    """Show validation errors as a table of field and message"""
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("Field", style="cyan")
    table.add_column("Problem", style="red")

    for error in errors:
        table.add_row(error.field, str(error))

    console.print(table)


def print_validation_result(result: ValidationResult, config_path: Optional[Path] = None) -> None:
    """Display the outcome of validating a descriptor"""
    name = str(config_path) if config_path else "Descriptor"

    if result.is_valid:
        print_success(f"{name} is valid")
    else:
        print_error(f"{name} has {len(result.errors)} problem(s)")
        print_validation_errors(result.errors)

    for warning in result.warnings:
        print_warning(warning)


def print_exception(error: LightsailDeployError) -> None:
    """Display a lightsail-deploy error with its code"""
    code = f" [dim]({error.error_code})[/dim]" if error.error_code else ""

    if isinstance(error, ValidationError):
        print_error(f"{error.field}: {error}{code}")
    else:
        print_error(f"{error}{code}")

    errors: List[ValidationError] = getattr(error, "errors", None) or []
    if errors:
        print_validation_errors(errors)


def format_types_table() -> Table:
    """Table of supported application types"""
    table = Table(title="Application Types", box=box.ROUNDED)
    table.add_column("Type", style="cyan")
    table.add_column("Stack", style="green")
    table.add_column("Dependencies")
    table.add_column("Extra Port", justify="right")
    table.add_column("Health Check")

    for app_type, profile in PROFILES.items():
        table.add_row(
            app_type.value,
            profile.label,
            ", ".join(sorted(profile.base_dependencies)),
            profile.extra_port or "-",
            profile.health_marker or f"{EMOJI_ARROW} app name",
        )

    return table
