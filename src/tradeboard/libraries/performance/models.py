"""Performance data models.

Pydantic models for the raw trade input and the processed metrics output.
Raw models are parsed eagerly from the string-typed values found in uploaded
performance files; output models are consumed by the dashboard session,
the console report and the JSON writer.
"""

from decimal import Decimal
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

TradeSide = Literal["buy", "sell"]


class RawTrade(BaseModel):
    """
    One executed trade as found in a performance file.

    Prices and quantities arrive as decimal strings and are parsed to Decimal.
    Time is epoch milliseconds.
    """

    model_config = ConfigDict(frozen=True)

    quantity: Decimal = Field(gt=0, allow_inf_nan=False)
    side: TradeSide
    price: Decimal = Field(gt=0, allow_inf_nan=False)
    time: int


class PerformanceDataset(BaseModel):
    """
    Top-level performance document.

    `trades` maps a strategy label (usually its parameter string, e.g.
    "rolling_window=330,multiplier=0.14") to an embedded JSON document, or an
    already-decoded object, whose own `trades` maps symbol to raw trades. A
    null strategy value means the strategy has no trades.
    """

    model_config = ConfigDict(populate_by_name=True)

    initial_capital: Decimal = Field(
        gt=0,
        allow_inf_nan=False,
        validation_alias=AliasChoices("initial_capital", "initialCapital"),
    )
    trades: dict[str, str | dict[str, Any] | None]
    candle_topics: list[str] = Field(default_factory=list)


class ProcessedTrade(BaseModel):
    """A closed round trip (entry leg + exit leg)."""

    model_config = ConfigDict(frozen=True)

    id: int  # 1-based
    date: str  # Exit date, YYYY-MM-DD
    type: TradeSide  # Entry side
    entry_price: Decimal
    size: Decimal
    pnl: Decimal
    running_pnl: Decimal
    running_capital: Decimal

    @property
    def is_winner(self) -> bool:
        return self.pnl > Decimal("0")

    @property
    def is_loser(self) -> bool:
        return self.pnl < Decimal("0")


class EquityPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: str
    value: Decimal


class MonthlyReturn(BaseModel):
    """Summed round-trip P&L for one calendar month over initial capital."""

    model_config = ConfigDict(frozen=True)

    month: str  # "Jan 2022"
    monthly_return: Decimal


class DrawdownPoint(BaseModel):
    """Equity point sitting more than the threshold below its running peak."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: Decimal  # Negative fraction


class TradeCluster(BaseModel):
    """
    Heuristic cluster assignment for one round trip.

    Bucketed by P&L sign (0 = win, 1 = loss, 2 = breakeven); x and z are
    display proxies, not measured holding time or size.
    """

    model_config = ConfigDict(frozen=True)

    x: int
    y: Decimal
    z: Decimal
    cluster: Literal[0, 1, 2]


class DrawdownPeriod(BaseModel):
    """
    Contiguous decline below an equity peak.

    Durations are counted in equity points. Depth is a negative fraction.
    """

    model_config = ConfigDict(frozen=True)

    start: str
    end: str
    duration: int
    depth: Decimal
    recovery: int  # 0 if not yet recovered
    recovered: bool


class ProcessedMetrics(BaseModel):
    """
    Complete metrics for one strategy.

    Ratios are fractions (0.01 == 1%), money values are in account currency.
    """

    strategy_name: str
    strategy_params: str
    initial_capital: Decimal

    # Returns
    total_return: Decimal
    annual_return: Decimal

    # Risk
    sharpe_ratio: Decimal
    max_drawdown: Decimal

    # Trade statistics
    avg_profit: Decimal
    win_rate: Decimal
    profit_factor: Decimal
    win_loss_ratio: Decimal

    trades: list[ProcessedTrade] = Field(default_factory=list)
    equity_curve: list[EquityPoint] = Field(default_factory=list)
    monthly_returns: list[MonthlyReturn] = Field(default_factory=list)
    drawdowns: list[DrawdownPoint] = Field(default_factory=list)
    trade_clusters: list[TradeCluster] = Field(default_factory=list)

    @property
    def round_trip_count(self) -> int:
        return len(self.trades)

    @property
    def total_pnl(self) -> Decimal:
        """Cumulative P&L at the last round trip."""
        if not self.trades:
            return Decimal("0")
        return self.trades[-1].running_pnl

    @property
    def final_capital(self) -> Decimal:
        return self.initial_capital + self.total_pnl

    @property
    def winning_trades(self) -> int:
        return sum(1 for t in self.trades if t.is_winner)

    @property
    def losing_trades(self) -> int:
        return sum(1 for t in self.trades if t.is_loser)
