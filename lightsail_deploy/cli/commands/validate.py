"""Validate command implementation"""

from pathlib import Path

import click

from ..utils.output import print_exception, print_validation_result
from ...api.exceptions import LightsailDeployError
from ...api.generator import Generator


@click.command()
@click.argument('config_file', type=click.Path(path_type=Path))
@click.pass_context
def validate(ctx, config_file):
    """Validate an existing deployment descriptor

    Every problem is reported, not just the first one.

    Examples:
        lightsail-deploy validate deployment-nodejs.config.yml
    """
    try:
        result = Generator().validate_file(config_file)
    except LightsailDeployError as e:
        print_exception(e)
        ctx.exit(1)

    print_validation_result(result, config_file)

    if not result.is_valid:
        ctx.exit(1)
