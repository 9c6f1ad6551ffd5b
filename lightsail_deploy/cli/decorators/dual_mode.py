# lightsail_deploy/cli/decorators/dual_mode.py
"""Dual-mode decorator for supporting both CLI and programmatic usage"""

import functools
from typing import Callable, Optional

import click


class CommandOptions:
    """Stand-in for the CLI context object outside of a click invocation"""

    def __init__(self, verbose: bool = False, debug: bool = False, quiet: bool = False):
        self.verbose = verbose
        self.debug = debug
        self.quiet = quiet


def dual_mode_command(name: Optional[str] = None):
    """
    Decorator to support both CLI and programmatic calls

    Under click the running context is passed as the first argument;
    called directly, the function gets a minimal synthetic context whose
    ``obj`` carries default verbosity settings.

    Args:
        name: Optional command name for programmatic calls

    Example:
        @click.command()
        @click.option('--force', is_flag=True)
        @dual_mode_command
        def my_command(ctx, force):
            # Can be called as:
            # 1. CLI: lightsail-deploy my-command --force
            # 2. Code: my_command.callback(force=True)
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if args and isinstance(args[0], click.Context):
                return func(*args, **kwargs)

            ctx = click.get_current_context(silent=True)
            if ctx is None:
                # Programmatic mode - create minimal context
                ctx = click.Context(click.Command(name or func.__name__))

            if ctx.obj is None:
                ctx.obj = CommandOptions()

            return func(ctx, *args, **kwargs)

        return wrapper

    # Handle both @dual_mode_command and @dual_mode_command()
    if callable(name):
        func = name
        name = None
        return decorator(func)
    return decorator
