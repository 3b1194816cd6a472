"""
LTL CLI - Command Line Interface Package

This package provides the ``ltl`` command line tool.

Modules:
    cli: Main CLI application
"""

from ltl_cli.cli import main, cli

__version__ = "1.0.0"

__all__ = [
    "main",
    "cli",
]
