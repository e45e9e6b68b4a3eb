"""Shared helpers for CLI commands."""

import functools

import click
from rich.console import Console
from rich.panel import Panel

from tradejournal.errors import TradeJournalError

console = Console()


def get_config() -> dict:
    """Load configuration, or an empty dict when none exists yet."""
    from tradejournal.config import load_config

    return load_config() or {}


def get_data_store(config: dict):
    """Get the data store instance."""
    from tradejournal.config import get_db_path
    from tradejournal.db.store import DataStore

    return DataStore(get_db_path(config))


def get_current_user(config: dict) -> str:
    from tradejournal.auth import ConfigAuthProvider

    return ConfigAuthProvider(config).current_user()


def error_panel(message: str, title: str = "Error") -> None:
    console.print(Panel(
        f"[red]{message}[/red]",
        title=f"[bold red]{title}[/bold red]",
        border_style="red",
    ))


def handle_errors(func):
    """Render journal errors as a panel and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except TradeJournalError as e:
            error_panel(str(e))
            raise SystemExit(1)
        except ValueError as e:
            error_panel(str(e), title="Invalid input")
            raise SystemExit(1)

    return wrapper


def pnl_markup(value: float, currency: str = "$") -> str:
    """Colour a P&L figure green/red with an explicit sign."""
    color = "green" if value >= 0 else "red"
    sign = "+" if value >= 0 else "-"
    return f"[{color}]{sign}{currency}{abs(value):,.2f}[/{color}]"


DATETIME_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M"]

datetime_option = click.DateTime(formats=DATETIME_FORMATS)
