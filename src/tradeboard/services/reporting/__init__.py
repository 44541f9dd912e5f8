"""Reporting service for processed strategy metrics."""

from tradeboard.services.reporting.formatters import display_performance_report
from tradeboard.services.reporting.writers import write_json_report

__all__ = [
    "display_performance_report",
    "write_json_report",
]
