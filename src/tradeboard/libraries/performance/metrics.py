"""Performance metrics calculation functions.

Pure functions for turning paired trades and equity curves into summary
statistics and derived series. All functions are stateless and testable.

Philosophy:
- Pure functions: same inputs always produce same outputs
- No side effects: don't modify inputs or global state
- Degenerate inputs (no trades, no losses, zero variance) resolve to
  documented defaults instead of raising

Several formulas are deliberate simplifications that dashboard consumers rely
on exactly as they are:
- Sharpe uses per-trade returns annualized with a fixed 252 factor
- Monthly return is monthly P&L over initial capital (not time-weighted)
- Clusters bucket by P&L sign, not by similarity

Usage:
    >>> from tradeboard.libraries.performance import metrics
    >>> metrics.calculate_total_return(Decimal("1000"), Decimal("1010"))
    Decimal('0.01')
"""

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from tradeboard.libraries.performance.models import (
    DrawdownPeriod,
    DrawdownPoint,
    EquityPoint,
    MonthlyReturn,
    ProcessedTrade,
    RawTrade,
    TradeCluster,
)

MS_PER_DAY = 86_400_000
DEFAULT_ANNUALIZATION_FACTOR = 252
DEFAULT_DRAWDOWN_THRESHOLD = Decimal("0.02")

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def to_datetime(epoch_ms: int) -> datetime:
    """Convert epoch milliseconds to an aware UTC datetime."""
    return _EPOCH + timedelta(milliseconds=epoch_ms)


def format_date(epoch_ms: int) -> str:
    """Format epoch milliseconds as YYYY-MM-DD (UTC)."""
    return to_datetime(epoch_ms).strftime("%Y-%m-%d")


def format_month(epoch_ms: int) -> str:
    """Format epoch milliseconds as "MMM yyyy" (UTC), e.g. "Jan 2022"."""
    dt = to_datetime(epoch_ms)
    return f"{_MONTH_ABBR[dt.month - 1]} {dt.year}"


def pair_round_trips(trades: Sequence[RawTrade]) -> list[tuple[RawTrade, RawTrade]]:
    """
    Pair trades positionally into (entry, exit) round trips.

    Trades at indices 2i and 2i+1 form one round trip. A trailing trade
    without a partner is dropped.

    Example:
        >>> len(pair_round_trips([buy, sell, buy]))
        1
    """
    return [(trades[i], trades[i + 1]) for i in range(0, len(trades) - 1, 2)]


def calculate_trade_pnl(entry: RawTrade, exit: RawTrade) -> Decimal:
    """
    Calculate round-trip P&L.

    Long (buy entry): (exit - entry) * quantity
    Short (sell entry): (entry - exit) * quantity

    Quantity is taken from the entry leg.
    """
    if entry.side == "buy":
        return (exit.price - entry.price) * entry.quantity
    return (entry.price - exit.price) * entry.quantity


def calculate_total_return(initial_capital: Decimal, final_capital: Decimal) -> Decimal:
    """
    Calculate total return as a fraction.

    Example:
        >>> calculate_total_return(Decimal("1000"), Decimal("1010"))
        Decimal('0.01')
    """
    if initial_capital == Decimal("0"):
        return Decimal("0")
    return (final_capital - initial_capital) / initial_capital


def calculate_trading_days(trades: Sequence[RawTrade]) -> int:
    """
    Whole days (rounded up) between the first and last raw trade.

    Uses input order, so unordered input can yield a negative span.
    """
    if not trades:
        return 0
    elapsed = trades[-1].time - trades[0].time
    return -(-elapsed // MS_PER_DAY)


def calculate_annual_return(total_return: Decimal, trading_days: int) -> Decimal:
    """
    Linearly annualize a total return: total_return * 365 / trading_days.

    Returns 0 when no time has elapsed.
    """
    if trading_days == 0:
        return Decimal("0")
    return total_return * Decimal(365) / Decimal(trading_days)


def calculate_avg_profit(total_pnl: Decimal, round_trips: int) -> Decimal:
    """Average P&L per round trip (0 without round trips)."""
    if round_trips == 0:
        return Decimal("0")
    return total_pnl / Decimal(round_trips)


def calculate_win_rate(winning_trades: int, losing_trades: int) -> Decimal:
    """
    Win rate as a fraction of decided trades.

    Breakeven trades count toward neither side.
    """
    decided = winning_trades + losing_trades
    if decided == 0:
        return Decimal("0")
    return Decimal(winning_trades) / Decimal(decided)


def calculate_profit_factor(gross_profit: Decimal, gross_loss: Decimal) -> Decimal:
    """
    Gross profit / gross loss (loss as a positive amount).

    Defaults to 1 when there are no losses.
    """
    if gross_loss <= Decimal("0"):
        return Decimal("1")
    return gross_profit / gross_loss


def calculate_win_loss_ratio(
    gross_profit: Decimal,
    winning_trades: int,
    gross_loss: Decimal,
    losing_trades: int,
) -> Decimal:
    """
    Average win / average loss.

    Without losing trades the average loss is taken as 1, so the ratio equals
    the average win.
    """
    avg_win = gross_profit / Decimal(winning_trades) if winning_trades > 0 else Decimal("0")
    avg_loss = gross_loss / Decimal(losing_trades) if losing_trades > 0 else Decimal("1")
    if avg_loss <= Decimal("0"):
        return Decimal("1")
    return avg_win / avg_loss


def calculate_sharpe_ratio(
    pnls: Sequence[Decimal],
    initial_capital: Decimal,
    annualization_factor: int = DEFAULT_ANNUALIZATION_FACTOR,
) -> Decimal:
    """
    Per-trade Sharpe ratio.

    Each round trip's return is pnl / initial_capital. Sharpe is
    mean / population std dev, scaled by sqrt(annualization_factor)
    regardless of actual trade frequency. Dividing every return by the same
    capital leaves the ratio unchanged, so it is computed on the exact pnls.

    Returns:
        Sharpe ratio, or 0 for no trades or zero variance
    """
    if not pnls or initial_capital == Decimal("0"):
        return Decimal("0")

    count = Decimal(len(pnls))
    mean_pnl = sum(pnls, Decimal("0")) / count
    variance = sum(((p - mean_pnl) ** 2 for p in pnls), Decimal("0")) / count
    std_dev = variance.sqrt()

    if std_dev == Decimal("0"):
        return Decimal("0")

    ratio = mean_pnl / std_dev
    if initial_capital < Decimal("0"):
        ratio = -ratio
    return ratio * Decimal(annualization_factor).sqrt()


def calculate_monthly_returns(
    exits: Iterable[tuple[int, Decimal]],
    initial_capital: Decimal,
) -> list[MonthlyReturn]:
    """
    Aggregate round-trip P&L by calendar month of the exit.

    Args:
        exits: (exit epoch ms, pnl) per round trip
        initial_capital: Denominator for every month

    Returns:
        One MonthlyReturn per month, in order of first appearance
    """
    monthly_pnl: dict[str, Decimal] = {}
    for exit_time, pnl in exits:
        month = format_month(exit_time)
        monthly_pnl[month] = monthly_pnl.get(month, Decimal("0")) + pnl

    if initial_capital == Decimal("0"):
        return [MonthlyReturn(month=m, monthly_return=Decimal("0")) for m in monthly_pnl]

    return [MonthlyReturn(month=m, monthly_return=pnl / initial_capital) for m, pnl in monthly_pnl.items()]


def calculate_drawdown_points(
    equity_curve: Sequence[EquityPoint],
    threshold: Decimal = DEFAULT_DRAWDOWN_THRESHOLD,
) -> list[DrawdownPoint]:
    """
    Emit every equity point that sits more than `threshold` below its peak.

    Contiguous declines are not merged; each qualifying point is reported.

    Example:
        >>> curve = [EquityPoint(date="2022-01-01", value=Decimal("1000")),
        ...          EquityPoint(date="2022-01-02", value=Decimal("950"))]
        >>> calculate_drawdown_points(curve)[0].value
        Decimal('-0.05')
    """
    if len(equity_curve) < 2:
        return []

    points: list[DrawdownPoint] = []
    peak = equity_curve[0].value

    for point in equity_curve:
        if point.value > peak:
            peak = point.value
        elif peak > Decimal("0"):
            drawdown = (peak - point.value) / peak
            if drawdown > threshold:
                points.append(DrawdownPoint(name=point.date, value=-drawdown))

    return points


def calculate_trade_clusters(trades: Sequence[ProcessedTrade]) -> list[TradeCluster]:
    """
    Bucket round trips by P&L sign.

    cluster: 0 win, 1 loss, 2 breakeven
    x: index mod 5 (holding-time placeholder)
    y: pnl / entry price
    z: |pnl| * 10
    """
    clusters: list[TradeCluster] = []
    for index, trade in enumerate(trades):
        if trade.pnl > Decimal("0"):
            cluster = 0
        elif trade.pnl < Decimal("0"):
            cluster = 1
        else:
            cluster = 2

        clusters.append(
            TradeCluster(
                x=index % 5,
                y=trade.pnl / trade.entry_price,
                z=abs(trade.pnl) * Decimal(10),
                cluster=cluster,
            )
        )
    return clusters


def calculate_drawdown_periods(
    equity_curve: Sequence[EquityPoint],
    limit: int | None = None,
) -> list[DrawdownPeriod]:
    """
    Group contiguous declines of the equity curve into drawdown periods.

    A period starts at the first point below the running peak and ends at the
    last point before a new peak (or at the end of the curve, unrecovered).
    Durations are counted in equity points; recovery is the number of points
    from the trough to the new peak.

    Args:
        equity_curve: Equity points in processing order
        limit: Keep only the N deepest periods (None keeps all)

    Returns:
        Periods sorted deepest first
    """
    if len(equity_curve) < 2:
        return []

    periods: list[DrawdownPeriod] = []
    peak = equity_curve[0].value
    in_drawdown = False
    start_index = 0
    trough_index = 0
    depth = Decimal("0")

    for i in range(1, len(equity_curve)):
        value = equity_curve[i].value
        if value > peak:
            peak = value
            if in_drawdown:
                periods.append(
                    DrawdownPeriod(
                        start=equity_curve[start_index].date,
                        end=equity_curve[i - 1].date,
                        duration=i - start_index,
                        depth=depth,
                        recovery=i - trough_index,
                        recovered=True,
                    )
                )
                in_drawdown = False
                depth = Decimal("0")
        elif value < peak and peak > Decimal("0"):
            drawdown = (value - peak) / peak
            if not in_drawdown:
                in_drawdown = True
                start_index = i
                trough_index = i
                depth = drawdown
            elif drawdown < depth:
                trough_index = i
                depth = drawdown

    if in_drawdown:
        periods.append(
            DrawdownPeriod(
                start=equity_curve[start_index].date,
                end=equity_curve[-1].date,
                duration=len(equity_curve) - start_index,
                depth=depth,
                recovery=0,
                recovered=False,
            )
        )

    periods.sort(key=lambda p: p.depth)
    if limit is not None:
        periods = periods[:limit]
    return periods
