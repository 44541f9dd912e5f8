"""Date-range filtering of computed metrics.

Narrows the dated series of an existing ProcessedMetrics to an inclusive
[start, end] window without recomputing anything from raw trades. Scalar
metrics and trade clusters are carried over unchanged.
"""

from datetime import date, datetime

from tradeboard.libraries.performance.models import ProcessedMetrics

_MONTHS = {abbr: i for i, abbr in enumerate(
    ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"), start=1
)}

DateLike = date | datetime | str


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def _month_start(label: str) -> date | None:
    """First day of a "MMM yyyy" label, or None if the label is not of that shape."""
    parts = label.split(" ")
    if len(parts) != 2 or parts[0] not in _MONTHS or not parts[1].isdigit():
        return None
    return date(int(parts[1]), _MONTHS[parts[0]], 1)


def _in_window(day: date, start: date | None, end: date | None) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def filter_metrics(
    metrics: ProcessedMetrics,
    start: DateLike | None = None,
    end: DateLike | None = None,
) -> ProcessedMetrics:
    """
    Restrict dated series to an inclusive date window.

    Args:
        metrics: Computed metrics
        start: Inclusive lower bound (date, datetime or YYYY-MM-DD), optional
        end: Inclusive upper bound, optional

    Returns:
        A copy with equity_curve, drawdowns and trades filtered by date and
        monthly_returns filtered by the first day of each month. The input
        itself when neither bound is given.

    Raises:
        ValueError: If start is after end or a bound is not a valid date
    """
    if start is None and end is None:
        return metrics

    start_date = _as_date(start) if start is not None else None
    end_date = _as_date(end) if end is not None else None
    if start_date is not None and end_date is not None and start_date > end_date:
        raise ValueError(f"Start date {start_date} is after end date {end_date}")

    def keep(label: str) -> bool:
        return _in_window(date.fromisoformat(label), start_date, end_date)

    def keep_month(label: str) -> bool:
        month_start = _month_start(label)
        # Unrecognised labels are kept
        return month_start is None or _in_window(month_start, start_date, end_date)

    return metrics.model_copy(
        update={
            "equity_curve": [p for p in metrics.equity_curve if keep(p.date)],
            "drawdowns": [d for d in metrics.drawdowns if keep(d.name)],
            "trades": [t for t in metrics.trades if keep(t.date)],
            "monthly_returns": [m for m in metrics.monthly_returns if keep_month(m.month)],
        }
    )
