"""
DashboardService Protocol Interface.

Contract for the component that owns the currently displayed metrics:
it recomputes on new data, keeps the last good result on failure and serves
date-filtered views.
"""

from collections.abc import Mapping
from datetime import date
from typing import Any, Protocol

from tradeboard.libraries.performance.models import DrawdownPeriod, PerformanceDataset, ProcessedMetrics


class IDashboardService(Protocol):
    """Protocol interface for DashboardService."""

    @property
    def current(self) -> ProcessedMetrics | None:
        """Most recent successfully computed metrics."""
        ...

    @property
    def generation(self) -> int:
        """Number of load() calls so far."""
        ...

    def load(self, dataset: Mapping[str, Any] | PerformanceDataset) -> ProcessedMetrics:
        """
        Extract and compute metrics for a dataset.

        Replaces the current metrics only when the computation succeeds.

        Raises:
            PerformanceDataError: Extraction or parse failure (current metrics kept)
        """
        ...

    def view(self, start: date | str | None = None, end: date | str | None = None) -> ProcessedMetrics:
        """Current metrics narrowed to an inclusive date window."""
        ...

    def top_drawdowns(self, limit: int | None = None) -> list[DrawdownPeriod]:
        """Deepest drawdown periods of the current equity curve."""
        ...

    def clear(self) -> None:
        """Drop the current metrics."""
        ...
