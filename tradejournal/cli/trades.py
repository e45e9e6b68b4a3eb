"""Trade entry commands for the trade journal CLI.

Handles adding, editing, deleting and listing backtest trades for the
current user.
"""

from datetime import datetime
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table

from tradejournal.cli.context import (
    console,
    datetime_option,
    get_config,
    get_current_user,
    get_data_store,
    handle_errors,
    pnl_markup,
)
from tradejournal.db.store import SORTABLE_COLUMNS, TradeFilter
from tradejournal.models import Direction, TradeRecord, TradeResult

RESULT_CHOICES = [r.value for r in TradeResult]
DIRECTION_CHOICES = [d.value for d in Direction]


def _trade_panel(trade: TradeRecord) -> Panel:
    """Render one trade with all of its fields."""
    result_color = {
        TradeResult.WIN: "green",
        TradeResult.LOSS: "red",
        TradeResult.BREAK_EVEN: "yellow",
    }[trade.result]

    lines = [
        f"[bold]{trade.asset_pair or '-'}[/bold] {trade.direction.value}  "
        f"[{result_color}]{trade.result.value}[/{result_color}]",
        f"[dim]{trade.date_time.strftime('%Y-%m-%d %H:%M')}[/dim]\n",
        f"Entry:      {trade.entry_price:,.5g}",
        f"Exit:       {trade.exit_price:,.5g}",
        f"Stop Loss:  {trade.stop_loss_price:,.5g}",
        f"Risk:       {trade.risk_per_trade:.2f}%\n",
        f"P&L:        {pnl_markup(trade.pnl_absolute)}",
        f"R-Multiple: {trade.r_multiple:+.2f}R\n",
        f"Strategy:   {trade.strategy_used or '-'}",
        f"Tags:       {', '.join(trade.setup_tags) or '-'}",
    ]
    if trade.notes:
        lines.append(f"\n[dim]{trade.notes}[/dim]")
    if trade.screenshot_url:
        lines.append(f"[dim]{trade.screenshot_url}[/dim]")

    return Panel(
        "\n".join(lines),
        title=f"[bold cyan]Trade #{trade.id}[/bold cyan]",
        border_style="cyan",
    )


@click.command()
@click.option("--date", "date_time", type=datetime_option, default=None,
              help="Trade time (YYYY-MM-DD[ HH:MM[:SS]]). Defaults to now.")
@click.option("--asset", "asset_pair", required=True, help="Asset or pair, e.g. EURUSD.")
@click.option("--direction", type=click.Choice(DIRECTION_CHOICES, case_sensitive=False),
              default="Long", show_default=True)
@click.option("--result", type=click.Choice(RESULT_CHOICES, case_sensitive=False), required=True)
@click.option("--entry", "entry_price", type=click.FloatRange(min=0), default=0.0)
@click.option("--exit", "exit_price", type=click.FloatRange(min=0), default=0.0)
@click.option("--stop", "stop_loss_price", type=click.FloatRange(min=0), default=0.0)
@click.option("--risk", "risk_per_trade", type=click.FloatRange(0, 100), default=0.0,
              help="Risk per trade in percent.")
@click.option("--pnl", "pnl_absolute", type=float, default=0.0, help="Profit/loss amount.")
@click.option("--r", "r_multiple", type=float, default=0.0, help="R-multiple.")
@click.option("--strategy", "strategy_used", default="", help="Strategy name.")
@click.option("--tag", "tags", multiple=True, help="Setup tag (repeatable).")
@click.option("--notes", default="", help="Free-text notes.")
@click.option("--screenshot", "screenshot_url", default="", help="Link to a chart screenshot.")
@handle_errors
def add(date_time: Optional[datetime], tags: tuple[str, ...], **fields) -> None:
    """Record a new trade.

    \b
    Examples:
      tradejournal add --asset EURUSD --result Win --pnl 120 --r 2
      tradejournal add --asset BTCUSD --direction Short --result Loss \\
          --pnl -80 --r -1 --strategy Breakout --tag london --tag trend
    """
    config = get_config()
    user_id = get_current_user(config)
    store = get_data_store(config)

    trade = TradeRecord(
        user_id=user_id,
        date_time=date_time or datetime.now(),
        setup_tags=list(tags),
        **fields,
    )
    trade_id = store.add_trade(trade)

    console.print(f"[green]Added trade #{trade_id}[/green] "
                  f"{trade.asset_pair} {trade.result.value} {pnl_markup(trade.pnl_absolute)}")


@click.command()
@click.argument("trade_id", type=int)
@handle_errors
def show(trade_id: int) -> None:
    """Show one trade."""
    from tradejournal.errors import TradeNotFoundError

    config = get_config()
    store = get_data_store(config)
    trade = store.get_trade(get_current_user(config), trade_id)
    if trade is None:
        raise TradeNotFoundError(trade_id)

    console.print(_trade_panel(trade))


@click.command()
@click.argument("trade_id", type=int)
@click.option("--date", "date_time", type=datetime_option, default=None)
@click.option("--asset", "asset_pair", default=None)
@click.option("--direction", type=click.Choice(DIRECTION_CHOICES, case_sensitive=False), default=None)
@click.option("--result", type=click.Choice(RESULT_CHOICES, case_sensitive=False), default=None)
@click.option("--entry", "entry_price", type=click.FloatRange(min=0), default=None)
@click.option("--exit", "exit_price", type=click.FloatRange(min=0), default=None)
@click.option("--stop", "stop_loss_price", type=click.FloatRange(min=0), default=None)
@click.option("--risk", "risk_per_trade", type=click.FloatRange(0, 100), default=None)
@click.option("--pnl", "pnl_absolute", type=float, default=None)
@click.option("--r", "r_multiple", type=float, default=None)
@click.option("--strategy", "strategy_used", default=None)
@click.option("--tag", "tags", multiple=True, help="Replace tags (repeatable).")
@click.option("--clear-tags", is_flag=True, default=False, help="Remove all tags.")
@click.option("--notes", default=None)
@click.option("--screenshot", "screenshot_url", default=None)
@handle_errors
def edit(trade_id: int, tags: tuple[str, ...], clear_tags: bool, **fields) -> None:
    """Change fields of an existing trade.

    Only the options given are changed.

    \b
    Examples:
      tradejournal edit 12 --result Loss --pnl -40
      tradejournal edit 12 --tag reversal --tag asia
    """
    changes = {name: value for name, value in fields.items() if value is not None}
    if clear_tags:
        changes["setup_tags"] = []
    elif tags:
        changes["setup_tags"] = list(tags)

    if not changes:
        console.print("[dim]Nothing to change.[/dim]")
        return

    config = get_config()
    store = get_data_store(config)
    trade = store.update_trade(get_current_user(config), trade_id, **changes)
    console.print(_trade_panel(trade))


@click.command()
@click.argument("trade_id", type=int)
@handle_errors
def delete(trade_id: int) -> None:
    """Delete one trade."""
    config = get_config()
    store = get_data_store(config)
    store.delete_trade(get_current_user(config), trade_id)
    console.print(f"[green]Deleted trade #{trade_id}[/green]")


@click.command(name="delete-all")
@click.option("--yes", is_flag=True, default=False, help="Skip the confirmation prompt.")
@handle_errors
def delete_all(yes: bool) -> None:
    """Delete every trade for the current user."""
    config = get_config()
    user_id = get_current_user(config)

    if not yes:
        click.confirm(f"Delete ALL trades for {user_id}?", abort=True)

    deleted = get_data_store(config).delete_all_trades(user_id)
    console.print(f"[green]Deleted {deleted} trades.[/green]")


@click.command()
@click.option("--asset", "asset_pair", default=None, help="Filter by asset (substring).")
@click.option("--strategy", "strategy_used", default=None, help="Filter by strategy (substring).")
@click.option("--result", type=click.Choice(RESULT_CHOICES, case_sensitive=False), default=None)
@click.option("--tag", "setup_tag", default=None, help="Only trades with this tag.")
@click.option("--sort-by", type=click.Choice(sorted(SORTABLE_COLUMNS)), default="date_time", show_default=True)
@click.option("--order", "sort_order", type=click.Choice(["asc", "desc"]), default="desc",
              show_default=True)
@click.option("--page", type=click.IntRange(min=1), default=1, show_default=True)
@click.option("--limit", type=click.IntRange(min=1), default=50, show_default=True)
@handle_errors
def trades(
    asset_pair: Optional[str],
    strategy_used: Optional[str],
    result: Optional[str],
    setup_tag: Optional[str],
    sort_by: str,
    sort_order: str,
    page: int,
    limit: int,
) -> None:
    """List trades with optional filters.

    \b
    Examples:
      tradejournal trades
      tradejournal trades --strategy breakout --result Win
      tradejournal trades --sort-by pnl_absolute --order asc --page 2
    """
    config = get_config()
    store = get_data_store(config)
    listing = store.filter_trades(
        get_current_user(config),
        TradeFilter(
            asset_pair=asset_pair,
            strategy_used=strategy_used,
            result=result,
            setup_tag=setup_tag,
        ),
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )

    if not listing.trades:
        console.print(Panel(
            "[dim]No trades found[/dim]",
            title="[bold]Trades[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Trades",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("ID", justify="right", style="dim")
    table.add_column("Date/Time", style="dim")
    table.add_column("Asset", style="bold")
    table.add_column("Dir", justify="center")
    table.add_column("Result", justify="center")
    table.add_column("P&L", justify="right")
    table.add_column("R", justify="right")
    table.add_column("Strategy")
    table.add_column("Tags", max_width=24)

    for trade in listing.trades:
        result_color = "green" if trade.result == TradeResult.WIN else (
            "red" if trade.result == TradeResult.LOSS else "yellow"
        )
        table.add_row(
            str(trade.id),
            trade.date_time.strftime("%Y-%m-%d %H:%M"),
            trade.asset_pair,
            trade.direction.value,
            f"[{result_color}]{trade.result.value}[/{result_color}]",
            pnl_markup(trade.pnl_absolute),
            f"{trade.r_multiple:+.2f}",
            trade.strategy_used or "-",
            ", ".join(trade.setup_tags) or "-",
        )

    console.print(table)
    console.print(f"[dim]Page {listing.page} of {listing.pages} ({listing.total} trades)[/dim]")
