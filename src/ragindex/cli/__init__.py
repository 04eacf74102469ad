# src/ragindex/cli/__init__.py
"""CLI package for ragindex.

This package provides the command-line interface using Typer.
The CLI is a thin wrapper around the commands layer.
"""

from ragindex.cli.app import app, configure_logging, console

__all__ = ["app", "configure_logging", "console"]
