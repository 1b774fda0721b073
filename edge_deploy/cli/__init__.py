"""Command line interface for edge-deploy"""

from .main import cli, main

__all__ = ["cli", "main"]
