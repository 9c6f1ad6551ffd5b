"""Generate command implementation"""

import logging
from pathlib import Path

import click

from ..decorators import dual_mode_command
from ..utils.interactive import SetupWizard
from ..utils.output import console, format_setup_result, print_exception, print_info
from ...api.exceptions import LightsailDeployError, UserCancelledError
from ...constants import EMOJI_ROCKET, EnvVar
from ...core.request_parser import is_automated, params_from_environment, parse_request
from ...services.setup_service import DeploymentSetupService

logger = logging.getLogger(__name__)

# Command option -> request parameter key
OPTION_KEYS = {
    'app_type': EnvVar.APP_TYPE,
    'app_name': EnvVar.APP_NAME,
    'app_version': EnvVar.APP_VERSION,
    'instance_name': EnvVar.INSTANCE_NAME,
    'region': EnvVar.AWS_REGION,
    'blueprint': EnvVar.BLUEPRINT_ID,
    'bundle': EnvVar.BUNDLE_ID,
    'database': EnvVar.DATABASE_TYPE,
    'db_external': EnvVar.DB_EXTERNAL,
    'rds_name': EnvVar.DB_RDS_NAME,
    'db_name': EnvVar.DB_NAME,
    'bucket': EnvVar.ENABLE_BUCKET,
    'bucket_name': EnvVar.BUCKET_NAME,
    'bucket_access': EnvVar.BUCKET_ACCESS,
    'bucket_size': EnvVar.BUCKET_BUNDLE,
    'role_arn': EnvVar.AWS_ROLE_ARN,
    'role_name': EnvVar.ROLE_NAME,
    'trust_scope': EnvVar.TRUST_SCOPE,
    'repo': EnvVar.GITHUB_REPO,
    'expected_content': EnvVar.EXPECTED_CONTENT,
}


def collect_params(environ=None, **options) -> dict:
    """Environment settings overlaid with explicitly given command options"""
    params = params_from_environment(environ)

    for option, key in OPTION_KEYS.items():
        value = options.get(option)
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        params[key] = value

    return params


@click.command()
@click.option('--auto', '-a', is_flag=True,
              help='Automated mode: no prompts, settings from options and environment')
@click.option('--output-dir', '-o', type=click.Path(file_okay=False, path_type=Path),
              default='.', show_default=True, help='Repository root to write into')
@click.option('--keep-existing', is_flag=True,
              help='Fail instead of overwriting existing files')
@click.option('--no-workflow', is_flag=True, help='Only write the deployment descriptor')
@click.option('--no-app', is_flag=True, help='Do not write the example-{type}-app/ sample application')
@click.option('--account-id', help='AWS account ID, used to write the IAM trust policy')
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation prompt')
@click.option('--type', '-t', 'app_type', help='Application type (lamp, nginx, nodejs, python, react, docker)')
@click.option('--name', '-n', 'app_name', help='Application name')
@click.option('--app-version', help='Application version')
@click.option('--instance', '-i', 'instance_name', help='Lightsail instance name')
@click.option('--region', '-r', help='AWS region')
@click.option('--blueprint', help='Lightsail blueprint ID')
@click.option('--bundle', help='Lightsail bundle ID')
@click.option('--database', help='Database engine (mysql, postgresql, none)')
@click.option('--db-external/--db-local', default=None, help='Use an external RDS database')
@click.option('--rds-name', help='RDS instance name')
@click.option('--db-name', help='Database name')
@click.option('--bucket/--no-bucket', default=None, help='Attach a Lightsail bucket')
@click.option('--bucket-name', help='Bucket name')
@click.option('--bucket-access', help='Bucket access level (read_only, read_write)')
@click.option('--bucket-size', help='Bucket bundle (small_1_0, medium_1_0, large_1_0)')
@click.option('--role-arn', help='Existing IAM role ARN for GitHub Actions')
@click.option('--role-name', help='IAM role to create for GitHub Actions')
@click.option('--trust-scope', help='Branches allowed to assume the role (any_branch, main_branch_only)')
@click.option('--repo', help='GitHub repository as owner/name')
@click.option('--expected-content', help='Text the health check expects on the home page')
@dual_mode_command
def generate(ctx, auto, output_dir, keep_existing, no_workflow, no_app, account_id, yes,
             **options):
    """Generate the deployment descriptor and GitHub Actions workflow

    Runs an interactive wizard unless --auto is given or APP_TYPE,
    APP_NAME and INSTANCE_NAME are all set in the environment.

    Examples:
        lightsail-deploy generate
        lightsail-deploy generate --auto -t nodejs -n "My App" -i my-app
        APP_TYPE=lamp APP_NAME=Shop INSTANCE_NAME=shop lightsail-deploy generate
    """
    params = collect_params(**options)
    automated = auto or is_automated()

    if automated:
        print_info("Running in automated mode")
    else:
        wizard = SetupWizard(console)
        try:
            params = wizard.run(params)
            if not yes:
                wizard.confirm()
        except UserCancelledError as e:
            console.print(f"[yellow]{e}[/yellow]")
            ctx.exit(0)

    try:
        request = parse_request(params)

        console.print(f"\n{EMOJI_ROCKET} Generating {request.app_type.value} deployment for "
                      f"[bold]{request.app_name}[/bold]...")

        service = DeploymentSetupService()
        result = service.run(
            request,
            output_dir,
            force=not keep_existing,
            include_workflow=not no_workflow,
            include_app=not no_app,
            account_id=account_id,
        )
    except LightsailDeployError as e:
        logger.debug("Generation failed", exc_info=True)
        print_exception(e)
        ctx.exit(1)

    format_setup_result(result, base=output_dir)
