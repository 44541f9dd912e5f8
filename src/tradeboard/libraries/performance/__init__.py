"""Performance metrics library for trade analysis.

This library turns a performance document into dashboard metrics:

1. **Models** (`models.py`): Pydantic data structures
   - RawTrade, PerformanceDataset: parsed input
   - ProcessedTrade, EquityPoint, MonthlyReturn, DrawdownPoint, TradeCluster
   - DrawdownPeriod: grouped declines for the top-drawdowns view
   - ProcessedMetrics: complete result

2. **Extraction** (`extraction.py`): document -> ordered RawTrade list

3. **Metrics** (`metrics.py`): Pure calculation functions
   - Returns: total, annualized, monthly
   - Risk: Sharpe, drawdown points, drawdown periods
   - Trade stats: win rate, profit factor, win/loss ratio, clusters

4. **Calculators** (`calculators.py`): Per-call running state
   - CapitalCalculator, EquityCurveCalculator, TradeStatisticsCalculator

5. **Engine** (`engine.py`): MetricsEngine / compute_metrics

6. **Filters** (`filters.py`): Inclusive date-range view over a result

Usage:
    >>> from tradeboard.libraries.performance import extract_trades, compute_metrics
    >>> trades = extract_trades(document)
    >>> result = compute_metrics(trades, document["initial_capital"], document)
"""

from tradeboard.libraries.performance.calculators import (
    CapitalCalculator,
    EquityCurveCalculator,
    TradeStatisticsCalculator,
)
from tradeboard.libraries.performance.engine import MetricsEngine, compute_metrics
from tradeboard.libraries.performance.extraction import (
    FieldParseError,
    MalformedInputError,
    PerformanceDataError,
    describe_strategy,
    extract_trades,
    parse_dataset,
    parse_trades,
)
from tradeboard.libraries.performance.filters import filter_metrics
from tradeboard.libraries.performance.metrics import (
    calculate_annual_return,
    calculate_avg_profit,
    calculate_drawdown_periods,
    calculate_drawdown_points,
    calculate_monthly_returns,
    calculate_profit_factor,
    calculate_sharpe_ratio,
    calculate_total_return,
    calculate_trade_clusters,
    calculate_trade_pnl,
    calculate_trading_days,
    calculate_win_loss_ratio,
    calculate_win_rate,
    pair_round_trips,
)
from tradeboard.libraries.performance.models import (
    DrawdownPeriod,
    DrawdownPoint,
    EquityPoint,
    MonthlyReturn,
    PerformanceDataset,
    ProcessedMetrics,
    ProcessedTrade,
    RawTrade,
    TradeCluster,
)

__all__ = [
    # Models
    "RawTrade",
    "PerformanceDataset",
    "ProcessedTrade",
    "EquityPoint",
    "MonthlyReturn",
    "DrawdownPoint",
    "TradeCluster",
    "DrawdownPeriod",
    "ProcessedMetrics",
    # Extraction
    "PerformanceDataError",
    "MalformedInputError",
    "FieldParseError",
    "extract_trades",
    "parse_dataset",
    "parse_trades",
    "describe_strategy",
    # Metrics (pure functions)
    "pair_round_trips",
    "calculate_trade_pnl",
    "calculate_total_return",
    "calculate_trading_days",
    "calculate_annual_return",
    "calculate_avg_profit",
    "calculate_win_rate",
    "calculate_profit_factor",
    "calculate_win_loss_ratio",
    "calculate_sharpe_ratio",
    "calculate_monthly_returns",
    "calculate_drawdown_points",
    "calculate_trade_clusters",
    "calculate_drawdown_periods",
    # Calculators (stateful)
    "CapitalCalculator",
    "EquityCurveCalculator",
    "TradeStatisticsCalculator",
    # Engine
    "MetricsEngine",
    "compute_metrics",
    # Filters
    "filter_metrics",
]
