"""Dashboard service: owns the metrics currently on display.

Each load() runs the whole pipeline (parse -> extract -> compute) on its own
input and only then swaps the result in, so:
- a later load supersedes an earlier one (last write wins)
- a failed load leaves the previous metrics in place
"""

import threading
from collections.abc import Mapping
from datetime import date
from typing import Any

import structlog

from tradeboard.libraries.performance.engine import MetricsEngine
from tradeboard.libraries.performance.extraction import PerformanceDataError, extract_trades, parse_dataset
from tradeboard.libraries.performance.filters import filter_metrics
from tradeboard.libraries.performance.metrics import calculate_drawdown_periods
from tradeboard.libraries.performance.models import DrawdownPeriod, PerformanceDataset, ProcessedMetrics
from tradeboard.system.config import AnalysisConfig

logger = structlog.get_logger(__name__)


class DashboardService:
    """
    Holds at most one computed ProcessedMetrics.

    Example:
        >>> service = DashboardService()
        >>> service.load(document)
        >>> service.view(start="2022-01-01", end="2022-03-31").equity_curve
    """

    def __init__(self, config: AnalysisConfig | None = None) -> None:
        self._config = config or AnalysisConfig()
        self._engine = MetricsEngine(self._config)
        self._current: ProcessedMetrics | None = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def current(self) -> ProcessedMetrics | None:
        return self._current

    @property
    def generation(self) -> int:
        return self._generation

    def load(self, dataset: Mapping[str, Any] | PerformanceDataset) -> ProcessedMetrics:
        with self._lock:
            self._generation += 1
            generation = self._generation

        try:
            parsed = parse_dataset(dataset)
            trades = extract_trades(parsed)
            result = self._engine.compute(trades, parsed.initial_capital, parsed)
        except PerformanceDataError as e:
            logger.error(
                "dashboard.load_failed",
                generation=generation,
                error=str(e),
                kept_previous=self._current is not None,
            )
            raise

        with self._lock:
            if generation != self._generation:
                # A newer load was started meanwhile; it owns the display
                logger.warning("dashboard.load_superseded", generation=generation, latest=self._generation)
                return result
            self._current = result

        logger.info("dashboard.loaded", generation=generation, round_trips=result.round_trip_count)
        return result

    def view(self, start: date | str | None = None, end: date | str | None = None) -> ProcessedMetrics:
        return filter_metrics(self._require_current(), start, end)

    def top_drawdowns(self, limit: int | None = None) -> list[DrawdownPeriod]:
        if limit is None:
            limit = self._config.max_drawdowns
        return calculate_drawdown_periods(self._require_current().equity_curve, limit)

    def clear(self) -> None:
        self._current = None

    def _require_current(self) -> ProcessedMetrics:
        if self._current is None:
            raise LookupError("No metrics loaded")
        return self._current
