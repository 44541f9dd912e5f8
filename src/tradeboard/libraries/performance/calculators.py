"""Stateful performance calculators for incremental updates.

Calculators hold the running state of a single metrics computation. The
engine creates fresh instances per call, so no state survives between calls.

Usage:
    >>> from tradeboard.libraries.performance.calculators import CapitalCalculator
    >>> calc = CapitalCalculator(Decimal("1000"))
    >>> calc.apply(Decimal("-50"))
    >>> calc.max_drawdown
    Decimal('0.05')
"""

from decimal import Decimal

from tradeboard.libraries.performance.metrics import format_date
from tradeboard.libraries.performance.models import EquityPoint


class CapitalCalculator:
    """
    Tracks running capital, running P&L and the high-water mark.

    Each applied round trip moves capital by its P&L. If capital exceeds the
    peak, the peak is raised; otherwise the drawdown from the peak is measured
    and the maximum kept.
    """

    def __init__(self, initial_capital: Decimal) -> None:
        self._initial_capital = initial_capital
        self._running_capital = initial_capital
        self._running_pnl = Decimal("0")
        self._peak_capital = initial_capital
        self._max_drawdown = Decimal("0")

    def apply(self, pnl: Decimal) -> None:
        """
        Apply one round trip's P&L.

        Args:
            pnl: Signed round-trip P&L
        """
        self._running_pnl += pnl
        self._running_capital += pnl

        if self._running_capital > self._peak_capital:
            self._peak_capital = self._running_capital
        elif self._peak_capital > Decimal("0"):
            current_drawdown = (self._peak_capital - self._running_capital) / self._peak_capital
            if current_drawdown > self._max_drawdown:
                self._max_drawdown = current_drawdown

    @property
    def initial_capital(self) -> Decimal:
        return self._initial_capital

    @property
    def running_capital(self) -> Decimal:
        return self._running_capital

    @property
    def running_pnl(self) -> Decimal:
        return self._running_pnl

    @property
    def peak_capital(self) -> Decimal:
        """High-water mark."""
        return self._peak_capital

    @property
    def max_drawdown(self) -> Decimal:
        """Largest decline from the high-water mark, as a fraction."""
        return self._max_drawdown


class EquityCurveCalculator:
    """
    Builds the equity curve in processing order.

    The curve is not re-sorted by time: unordered input produces an unordered
    curve.
    """

    def __init__(self) -> None:
        self._points: list[EquityPoint] = []

    def update(self, epoch_ms: int, value: Decimal) -> None:
        """Append a point labelled with the formatted date of `epoch_ms`."""
        self._points.append(EquityPoint(date=format_date(epoch_ms), value=value))

    def get_curve(self) -> list[EquityPoint]:
        return self._points.copy()

    def __len__(self) -> int:
        return len(self._points)


class TradeStatisticsCalculator:
    """
    Tracks win/loss counts and gross amounts.

    Breakeven round trips (pnl == 0) are counted in total_trades only.
    """

    def __init__(self) -> None:
        self._total_trades = 0
        self._winning_trades = 0
        self._losing_trades = 0
        self._gross_profit = Decimal("0")
        self._gross_loss = Decimal("0")
        self._pnls: list[Decimal] = []

    def add_trade(self, pnl: Decimal) -> None:
        """
        Add a completed round trip.

        Args:
            pnl: Signed round-trip P&L
        """
        self._total_trades += 1
        self._pnls.append(pnl)

        if pnl > Decimal("0"):
            self._winning_trades += 1
            self._gross_profit += pnl
        elif pnl < Decimal("0"):
            self._losing_trades += 1
            self._gross_loss += abs(pnl)

    @property
    def total_trades(self) -> int:
        return self._total_trades

    @property
    def winning_trades(self) -> int:
        return self._winning_trades

    @property
    def losing_trades(self) -> int:
        return self._losing_trades

    @property
    def gross_profit(self) -> Decimal:
        """Total profit from winning trades."""
        return self._gross_profit

    @property
    def gross_loss(self) -> Decimal:
        """Total loss from losing trades (as positive number)."""
        return self._gross_loss

    @property
    def total_pnl(self) -> Decimal:
        return sum(self._pnls, Decimal("0"))

    @property
    def pnls(self) -> list[Decimal]:
        """Per-trade P&L in order."""
        return self._pnls.copy()
