"""Analytics commands for the trade journal CLI.

Displays the performance report and the daily activity heatmap.
"""

import json
from datetime import date
from typing import Optional

import click
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tradejournal.analytics.heatmap import DAY_LABELS, HeatmapCell, HeatmapGrid, HeatmapWindow
from tradejournal.cli.context import console, get_config, get_data_store, handle_errors, pnl_markup
from tradejournal.models import MetricSource, Report

EMPTY_STYLE = "grey23"
NEUTRAL_STYLE = "grey62"
WIN_STYLES = ["green1", "green3", "green4", "dark_green"]
LOSS_STYLES = ["light_coral", "red1", "red3", "dark_red"]


def _get_service(config: dict, metric_source: Optional[MetricSource] = None):
    """Build the analytics service for the configured user and store."""
    from tradejournal.analytics.service import AnalyticsService
    from tradejournal.auth import ConfigAuthProvider

    if metric_source is None:
        metric_source = MetricSource(config.get("analytics", {}).get("metric_source", "pnl"))
    return AnalyticsService(get_data_store(config), ConfigAuthProvider(config), metric_source)


def _intensity(total: int) -> int:
    """Shade index for a day's trade count."""
    if total >= 5:
        return 3
    if total >= 3:
        return 2
    if total >= 2:
        return 1
    return 0


def cell_style(cell: Optional[HeatmapCell]) -> str:
    """Colour for a heatmap cell, by outcome and trade count."""
    if cell is None or cell.contribution is None or cell.contribution.total == 0:
        return EMPTY_STYLE
    day = cell.contribution
    if day.outcome == "win":
        return WIN_STYLES[_intensity(day.total)]
    if day.outcome == "loss":
        return LOSS_STYLES[_intensity(day.total)]
    return NEUTRAL_STYLE


def render_heatmap(grid: HeatmapGrid) -> Text:
    """Render the grid as coloured squares, two characters per week."""
    text = Text()

    header = [" "] * (grid.weeks * 2)
    for label in grid.month_labels:
        pos = label.week * 2
        for i, ch in enumerate(label.label):
            if pos + i < len(header):
                header[pos + i] = ch
    text.append("   " + "".join(header).rstrip() + "\n", style="dim")

    for weekday, row in enumerate(grid.rows):
        text.append(f"{DAY_LABELS[weekday]}  ", style="dim")
        for cell in row:
            if cell is None:
                text.append("  ")
            else:
                text.append("■ ", style=cell_style(cell))
        text.append("\n")
    return text


def _format_profit_factor(report: Report) -> str:
    if report.profit_factor.is_infinite:
        return "∞"
    return f"{report.profit_factor.as_float():.2f}"


def _rate_table(title: str, label: str, rates: dict[str, float]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column(label, style="bold")
    table.add_column("Win Rate", justify="right")
    for name, rate in sorted(rates.items(), key=lambda item: item[1], reverse=True):
        color = "green" if rate >= 50 else "red"
        table.add_row(name or "(none)", f"[{color}]{rate:.1f}%[/{color}]")
    return table


def _print_report(report: Report) -> None:
    if report.total_trades == 0:
        console.print(Panel(
            "[dim]No trades recorded yet[/dim]\n\n"
            "[dim]Run 'tradejournal add' to log a trade[/dim]",
            title="[bold]Performance Report[/bold]",
            border_style="dim",
        ))
        return

    expectancy = (
        f"{report.expectancy:+.2f}R"
        if report.metric_source == MetricSource.R_MULTIPLE
        else pnl_markup(report.expectancy)
    )
    output_lines = [
        "[bold]Overview:[/bold]",
        f"  Total Trades:   {report.total_trades} "
        f"({report.winning_trades}W / {report.losing_trades}L / {report.break_even_trades}BE)",
        f"  Win Rate:       {report.win_rate:.1f}%",
        f"  Expectancy:     {expectancy}",
        f"  Profit Factor:  {_format_profit_factor(report)}\n",
        "[bold]P&L:[/bold]",
        f"  Total:          {pnl_markup(report.total_pnl)}",
        f"  Average:        {pnl_markup(report.average_pnl)}",
        f"  Avg Win:        {pnl_markup(report.average_win_pnl)}",
        f"  Avg Loss:       {pnl_markup(report.average_loss_pnl)}",
        f"  Largest Win:    {pnl_markup(report.largest_win_pnl)}",
        f"  Largest Loss:   {pnl_markup(report.largest_loss_pnl)}\n",
        "[bold]R-Multiple:[/bold]",
        f"  Average:        {report.average_r_multiple:+.2f}R",
        f"  Avg Win:        {report.average_win_r:+.2f}R",
        f"  Avg Loss:       {report.average_loss_r:+.2f}R",
        f"  Largest Win:    {report.largest_win:+.2f}R",
        f"  Largest Loss:   {report.largest_loss:+.2f}R",
    ]
    if report.equity_curve:
        first, last = report.equity_curve[0], report.equity_curve[-1]
        peak = max(point.cumulative_pnl for point in report.equity_curve)
        output_lines += [
            "\n[bold]Equity Curve:[/bold]",
            f"  {first.date:%Y-%m-%d} → {last.date:%Y-%m-%d}",
            f"  Final:          {pnl_markup(last.cumulative_pnl)} ({last.cumulative_r:+.2f}R)",
            f"  Peak:           {pnl_markup(peak)}",
        ]

    console.print(Panel(
        "\n".join(output_lines),
        title="[bold cyan]Performance Report[/bold cyan]",
        border_style="cyan",
    ))

    dist = Table(title="R-Multiple Distribution", show_header=True, header_style="bold cyan")
    dist.add_column("Range", style="bold")
    dist.add_column("Trades", justify="right")
    dist.add_column("", no_wrap=True)
    for bucket in report.r_multiple_distribution:
        dist.add_row(bucket.range, str(bucket.count), "█" * bucket.count)
    console.print(dist)

    console.print(_rate_table("Win Rate by Strategy", "Strategy", report.win_rate_by_strategy))
    if report.win_rate_by_tag:
        console.print(_rate_table("Win Rate by Tag", "Tag", report.win_rate_by_tag))


@click.command()
@click.option(
    "--source",
    type=click.Choice([s.value for s in MetricSource]),
    default=None,
    help="Metric source for expectancy: pnl or r (default from config).",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the report as JSON.")
@handle_errors
def report(source: Optional[str], as_json: bool) -> None:
    """Show performance analytics for all of your trades.

    \b
    Examples:
      tradejournal report
      tradejournal report --source r
      tradejournal report --json
    """
    config = get_config()
    service = _get_service(config, MetricSource(source) if source else None)
    result = service.report()

    if as_json:
        click.echo(json.dumps(result.to_json_dict(), indent=2))
        return

    _print_report(result)


@click.command()
@click.option("--year", type=int, default=None, help="Show a full calendar year instead of the last 53 weeks.")
@click.option("--weekends/--no-weekends", default=None, help="Show Saturday and Sunday rows.")
@handle_errors
def heatmap(year: Optional[int], weekends: Optional[bool]) -> None:
    """Show a calendar heatmap of daily trading outcomes.

    Green days had more wins than losses, red days more losses; darker
    squares mean more trades.

    \b
    Examples:
      tradejournal heatmap
      tradejournal heatmap --year 2024 --no-weekends
    """
    config = get_config()
    analytics_config = config.get("analytics", {})

    if year is not None:
        window = HeatmapWindow.CALENDAR_YEAR
    else:
        window = HeatmapWindow(analytics_config.get("heatmap_window", "trailing"))
    if weekends is None:
        weekends = bool(analytics_config.get("show_weekends", True))

    service = _get_service(config)
    grid = service.heatmap(window=window, today=date.today(), year=year, show_weekends=weekends)

    active = [c for c in grid.cells() if c.contribution is not None]
    if window == HeatmapWindow.CALENDAR_YEAR:
        title = f"Trading Activity {year or date.today().year}"
    else:
        title = "Trading Activity (last 53 weeks)"

    console.print(Panel(
        render_heatmap(grid),
        title=f"[bold cyan]{title}[/bold cyan]",
        subtitle=f"[dim]{len(active)} active days[/dim]",
        border_style="cyan",
        expand=False,
    ))
