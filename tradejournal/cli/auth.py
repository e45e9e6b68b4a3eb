"""User commands for the trade journal CLI.

The journal is single-machine: "logging in" records which user's trades
the other commands operate on.
"""

import click
from rich.panel import Panel

from tradejournal.cli.context import console, get_config, get_current_user, handle_errors


@click.command()
@click.argument("user_id")
@handle_errors
def login(user_id: str) -> None:
    """Set the current user.

    Creates the config file on first use.

    \b
    Examples:
      tradejournal login alice
    """
    from tradejournal.config import default_config, save_config

    user_id = user_id.strip()
    if not user_id:
        raise click.BadParameter("User ID cannot be empty", param_hint="USER_ID")

    config = get_config() or default_config()
    config.setdefault("user", {})["id"] = user_id
    config_path = save_config(config)

    console.print(Panel(
        f"[green]Logged in as[/green] [bold]{user_id}[/bold]\n\n"
        f"[dim]Config: {config_path}[/dim]",
        title="[bold cyan]Login[/bold cyan]",
        border_style="cyan",
    ))


@click.command()
@handle_errors
def logout() -> None:
    """Clear the current user."""
    from tradejournal.config import save_config

    config = get_config()
    if not config.get("user", {}).get("id"):
        console.print("[dim]No user is logged in.[/dim]")
        return

    config["user"]["id"] = ""
    save_config(config)
    console.print("[green]Logged out.[/green]")


@click.command()
@handle_errors
def whoami() -> None:
    """Show the current user."""
    console.print(get_current_user(get_config()))
