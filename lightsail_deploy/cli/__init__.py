"""Command line interface for lightsail-deploy"""

from .main import cli, main

__all__ = ["cli", "main"]
