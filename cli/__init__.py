"""
CLI module for CodeView.

The command-line host providing render, inspect, stats, and related commands.
"""

from cli.main import app

__all__ = ["app"]
