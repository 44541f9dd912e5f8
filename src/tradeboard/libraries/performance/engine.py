"""Metrics engine: raw trades in, ProcessedMetrics out.

Single pass over positionally paired round trips, threading fresh
calculators through the fold, followed by the derived series and summary
ratios.

Usage:
    >>> from tradeboard.libraries.performance.engine import compute_metrics
    >>> result = compute_metrics(trades, Decimal("1000"))
    >>> result.total_return
    Decimal('0.01')
"""

from collections.abc import Mapping, Sequence
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog

from tradeboard.libraries.performance import metrics
from tradeboard.libraries.performance.calculators import (
    CapitalCalculator,
    EquityCurveCalculator,
    TradeStatisticsCalculator,
)
from tradeboard.libraries.performance.extraction import MalformedInputError, describe_strategy, parse_trades
from tradeboard.libraries.performance.models import PerformanceDataset, ProcessedMetrics, ProcessedTrade, RawTrade
from tradeboard.system.config import AnalysisConfig

logger = structlog.get_logger(__name__)


def _to_capital(initial_capital: Decimal | int | float | str) -> Decimal:
    try:
        capital = initial_capital if isinstance(initial_capital, Decimal) else Decimal(str(initial_capital))
    except InvalidOperation as e:
        raise MalformedInputError(f"Invalid initial_capital: {initial_capital!r}", key="initial_capital") from e
    if not capital.is_finite() or capital <= Decimal("0"):
        raise MalformedInputError(
            f"initial_capital must be a positive number, got {initial_capital!r}", key="initial_capital"
        )
    return capital


class MetricsEngine:
    """
    Computes ProcessedMetrics from a raw trade sequence.

    Stateless between calls: every compute() builds its own accumulators, so
    one engine can be reused across datasets.
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self._config = config or AnalysisConfig()

    @property
    def config(self) -> AnalysisConfig:
        return self._config

    def compute(
        self,
        trades: Sequence[RawTrade | Mapping[str, Any]],
        initial_capital: Decimal | int | float | str,
        dataset: Mapping[str, Any] | PerformanceDataset | None = None,
    ) -> ProcessedMetrics:
        """
        Compute metrics for one trade sequence.

        Args:
            trades: Trades in input order (RawTrade or raw mappings)
            initial_capital: Starting capital, must be positive
            dataset: Source document, used only for strategy display strings

        Returns:
            ProcessedMetrics; all-zero scalars and empty series for no trades

        Raises:
            MalformedInputError: If initial_capital is not positive
            FieldParseError: If a raw trade field cannot be parsed
        """
        capital = _to_capital(initial_capital)
        raw_trades = parse_trades(trades)
        strategy_name, strategy_params = describe_strategy(dataset, self._config.default_strategy_name)

        capital_calc = CapitalCalculator(capital)
        equity_calc = EquityCurveCalculator()
        stats_calc = TradeStatisticsCalculator()
        processed: list[ProcessedTrade] = []
        exits: list[tuple[int, Decimal]] = []

        if raw_trades:
            equity_calc.update(raw_trades[0].time, capital)

        for entry, exit in metrics.pair_round_trips(raw_trades):
            pnl = metrics.calculate_trade_pnl(entry, exit)
            capital_calc.apply(pnl)
            stats_calc.add_trade(pnl)

            processed.append(
                ProcessedTrade(
                    id=len(processed) + 1,
                    date=metrics.format_date(exit.time),
                    type=entry.side,
                    entry_price=entry.price,
                    size=entry.quantity,
                    pnl=pnl,
                    running_pnl=capital_calc.running_pnl,
                    running_capital=capital_calc.running_capital,
                )
            )
            equity_calc.update(exit.time, capital_calc.running_capital)
            exits.append((exit.time, pnl))

        equity_curve = equity_calc.get_curve()
        total_return = metrics.calculate_total_return(capital, capital_calc.running_capital)
        trading_days = metrics.calculate_trading_days(raw_trades)

        result = ProcessedMetrics(
            strategy_name=strategy_name,
            strategy_params=strategy_params,
            initial_capital=capital,
            total_return=total_return,
            annual_return=metrics.calculate_annual_return(total_return, trading_days),
            sharpe_ratio=metrics.calculate_sharpe_ratio(
                stats_calc.pnls, capital, self._config.annualization_factor
            ),
            max_drawdown=capital_calc.max_drawdown,
            avg_profit=metrics.calculate_avg_profit(stats_calc.total_pnl, stats_calc.total_trades),
            win_rate=metrics.calculate_win_rate(stats_calc.winning_trades, stats_calc.losing_trades),
            profit_factor=(
                metrics.calculate_profit_factor(stats_calc.gross_profit, stats_calc.gross_loss)
                if processed
                else Decimal("0")
            ),
            win_loss_ratio=metrics.calculate_win_loss_ratio(
                stats_calc.gross_profit,
                stats_calc.winning_trades,
                stats_calc.gross_loss,
                stats_calc.losing_trades,
            ),
            trades=processed,
            equity_curve=equity_curve,
            monthly_returns=metrics.calculate_monthly_returns(exits, capital),
            drawdowns=metrics.calculate_drawdown_points(equity_curve, self._config.drawdown_threshold),
            trade_clusters=metrics.calculate_trade_clusters(processed),
        )

        if len(raw_trades) % 2 == 1:
            logger.debug("metrics.unpaired_trade_dropped", trade_index=len(raw_trades) - 1)

        logger.info(
            "metrics.computed",
            strategy=strategy_params or strategy_name,
            raw_trades=len(raw_trades),
            round_trips=len(processed),
            total_return=str(total_return),
        )
        return result


def compute_metrics(
    trades: Sequence[RawTrade | Mapping[str, Any]],
    initial_capital: Decimal | int | float | str,
    dataset: Mapping[str, Any] | PerformanceDataset | None = None,
    config: AnalysisConfig | None = None,
) -> ProcessedMetrics:
    """Compute metrics with a one-off MetricsEngine."""
    return MetricsEngine(config).compute(trades, initial_capital, dataset)
