"""Application types command"""

import click

from ..utils.output import console, format_types_table


@click.command()
def types():
    """List supported application types

    Shows the software installed for each type, the extra firewall port it
    opens and the text its health check looks for.
    """
    console.print(format_types_table())
