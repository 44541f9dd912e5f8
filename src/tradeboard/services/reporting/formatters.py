"""Rich console formatters for performance reports.

Provides terminal display of processed strategy metrics with tables,
colors, and formatting using the Rich library.
"""

from decimal import Decimal
from typing import Literal

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tradeboard.libraries.performance.metrics import calculate_drawdown_periods
from tradeboard.libraries.performance.models import DrawdownPeriod, MonthlyReturn, ProcessedMetrics, ProcessedTrade

DetailLevel = Literal["summary", "standard", "full"]


def _format_pct(value: Decimal, precision: int = 2) -> str:
    """Format a fraction as a percentage (0.0125 -> 1.25%)."""
    return f"{float(value) * 100:.{precision}f}%"


def _format_currency(value: Decimal, precision: int = 2) -> str:
    """Format currency value."""
    return f"${float(value):,.{precision}f}"


def _format_ratio(value: Decimal, precision: int = 2) -> str:
    return f"{float(value):.{precision}f}"


def _get_color(value: Decimal) -> str:
    """Get color based on positive/negative value."""
    if value > 0:
        return "green"
    elif value < 0:
        return "red"
    return "white"


def _create_summary_table(metrics: ProcessedMetrics) -> Table:
    """Create summary metrics table."""
    table = Table(title="📊 Performance Summary", show_header=False, box=None, padding=(0, 2))

    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Strategy", metrics.strategy_name)
    table.add_row("Parameters", metrics.strategy_params or "—")
    if metrics.equity_curve:
        table.add_row("Period", f"{metrics.equity_curve[0].date} to {metrics.equity_curve[-1].date}")
    table.add_row("", "")  # Spacer

    table.add_row("Initial Capital", _format_currency(metrics.initial_capital))
    table.add_row("Final Capital", _format_currency(metrics.final_capital))

    total_return_color = _get_color(metrics.total_return)
    table.add_row(
        "Total Return",
        f"[{total_return_color}]{_format_pct(metrics.total_return)}[/{total_return_color}]",
    )

    annual_color = _get_color(metrics.annual_return)
    table.add_row("Annual Return", f"[{annual_color}]{_format_pct(metrics.annual_return)}[/{annual_color}]")

    return table


def _create_risk_table(metrics: ProcessedMetrics) -> Table:
    """Create risk metrics table."""
    table = Table(title="⚠️  Risk Metrics", show_header=False, box=None, padding=(0, 2))

    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    sharpe_color = (
        "green" if metrics.sharpe_ratio > Decimal("1.0") else "yellow" if metrics.sharpe_ratio > Decimal("0") else "red"
    )
    table.add_row("Sharpe Ratio", f"[{sharpe_color}]{_format_ratio(metrics.sharpe_ratio)}[/{sharpe_color}]")
    table.add_row("Max Drawdown", f"[red]{_format_pct(metrics.max_drawdown)}[/red]")
    table.add_row("Drawdown Points", str(len(metrics.drawdowns)))

    return table


def _create_trade_stats_table(metrics: ProcessedMetrics) -> Table:
    """Create trade statistics table."""
    table = Table(title="💼 Trade Statistics", show_header=False, box=None, padding=(0, 2))

    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("Round Trips", f"{metrics.round_trip_count:,}")
    table.add_row("Winning Trades", f"[green]{metrics.winning_trades:,}[/green]")
    table.add_row("Losing Trades", f"[red]{metrics.losing_trades:,}[/red]")

    win_rate_color = (
        "green" if metrics.win_rate > Decimal("0.5") else "yellow" if metrics.win_rate > Decimal("0.4") else "red"
    )
    table.add_row("Win Rate", f"[{win_rate_color}]{_format_pct(metrics.win_rate)}[/{win_rate_color}]")

    pf_color = (
        "green" if metrics.profit_factor > Decimal("2.0") else "yellow" if metrics.profit_factor > Decimal("1.0") else "red"
    )
    table.add_row("Profit Factor", f"[{pf_color}]{_format_ratio(metrics.profit_factor)}[/{pf_color}]")
    table.add_row("Win/Loss Ratio", _format_ratio(metrics.win_loss_ratio))

    avg_color = _get_color(metrics.avg_profit)
    table.add_row("Avg Profit", f"[{avg_color}]{_format_currency(metrics.avg_profit)}[/{avg_color}]")

    total_color = _get_color(metrics.total_pnl)
    table.add_row("Total P&L", f"[{total_color}]{_format_currency(metrics.total_pnl)}[/{total_color}]")

    return table


def _create_monthly_table(monthly_returns: list[MonthlyReturn]) -> Table | None:
    """Create monthly returns table."""
    if not monthly_returns:
        return None

    table = Table(title="📅 Monthly Returns", box=None, padding=(0, 1))

    table.add_column("Month", style="cyan")
    table.add_column("Return", justify="right")

    for entry in monthly_returns:
        color = _get_color(entry.monthly_return)
        table.add_row(entry.month, f"[{color}]{_format_pct(entry.monthly_return)}[/{color}]")

    return table


def _create_drawdown_table(drawdowns: list[DrawdownPeriod]) -> Table | None:
    """Create top drawdowns table (periods expected deepest-first)."""
    if not drawdowns:
        return None

    table = Table(title=f"📉 Top {len(drawdowns)} Drawdowns", box=None, padding=(0, 1))

    table.add_column("Rank", justify="right", style="dim")
    table.add_column("Depth", justify="right", style="red")
    table.add_column("Start", style="cyan")
    table.add_column("End", style="cyan")
    table.add_column("Duration", justify="right")
    table.add_column("Recovery", justify="right")
    table.add_column("Status", justify="center")

    for i, dd in enumerate(drawdowns, 1):
        status = "✅" if dd.recovered else "🔴"
        recovery_str = f"{dd.recovery} pts" if dd.recovered else "—"

        table.add_row(
            str(i),
            _format_pct(dd.depth),
            dd.start,
            dd.end,
            f"{dd.duration} pts",
            recovery_str,
            status,
        )

    return table


def _create_trades_table(trades: list[ProcessedTrade]) -> Table | None:
    """Create round-trip list table."""
    if not trades:
        return None

    table = Table(title="🧾 Trade List", box=None, padding=(0, 1))

    table.add_column("#", justify="right", style="dim")
    table.add_column("Exit Date", style="cyan")
    table.add_column("Side")
    table.add_column("Entry", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("P&L", justify="right")
    table.add_column("Capital", justify="right")

    for trade in trades:
        color = _get_color(trade.pnl)
        table.add_row(
            str(trade.id),
            trade.date,
            trade.type.upper(),
            _format_currency(trade.entry_price),
            str(trade.size),
            f"[{color}]{_format_currency(trade.pnl)}[/{color}]",
            _format_currency(trade.running_capital),
        )

    return table


def display_performance_report(
    metrics: ProcessedMetrics,
    detail_level: DetailLevel = "standard",
    console: Console | None = None,
    max_drawdowns: int = 5,
) -> None:
    """
    Display strategy metrics in Rich-formatted console output.

    Args:
        metrics: Processed strategy metrics
        detail_level: Level of detail to display:
            - "summary": Returns and capital only
            - "standard": Summary + risk + trade stats
            - "full": Everything including monthly returns, top drawdowns and trade list
        console: Rich Console instance (creates new if None)
        max_drawdowns: Number of drawdown periods shown in "full" mode

    Example:
        >>> metrics = compute_metrics(trades, Decimal("10000"), dataset)
        >>> display_performance_report(metrics, detail_level="full")
    """
    if console is None:
        console = Console()

    console.print()

    console.print(_create_summary_table(metrics))
    console.print()

    if detail_level in ["standard", "full"]:
        console.print(_create_risk_table(metrics))
        console.print()

        if metrics.round_trip_count > 0:
            console.print(_create_trade_stats_table(metrics))
            console.print()

    if detail_level == "full":
        monthly = _create_monthly_table(metrics.monthly_returns)
        if monthly:
            console.print(monthly)
            console.print()

        periods = calculate_drawdown_periods(metrics.equity_curve, limit=max_drawdowns)
        drawdown_table = _create_drawdown_table(periods)
        if drawdown_table:
            console.print(drawdown_table)
            console.print()

        trades_table = _create_trades_table(metrics.trades)
        if trades_table:
            console.print(trades_table)
            console.print()

    summary_text = Text()
    summary_text.append(f"🏁 {metrics.strategy_name}: ", style="bold")
    summary_text.append(
        f"{_format_currency(metrics.initial_capital)} → {_format_currency(metrics.final_capital)}", style="bold cyan"
    )
    summary_text.append(f" ({_format_pct(metrics.total_return)})", style=f"bold {_get_color(metrics.total_return)}")

    console.print(Panel(summary_text, border_style="green" if metrics.total_return > 0 else "red"))
    console.print()
