"""CLI commands for the trade journal.

This package provides the command-line interface: user login, trade
entry and listing, and the analytics report and heatmap.
"""

from tradejournal.cli.main import cli, main

__all__ = ["cli", "main"]
