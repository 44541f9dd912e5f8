"""Dashboard session: owns the currently displayed strategy metrics."""

from tradeboard.services.dashboard.interface import IDashboardService
from tradeboard.services.dashboard.service import DashboardService

__all__ = [
    "DashboardService",
    "IDashboardService",
]
