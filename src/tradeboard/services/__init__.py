"""tradeboard services package.

Each service is independently testable; the dashboard session is described
by a Protocol interface so callers can depend on the contract only.
"""

from tradeboard.services.dashboard import DashboardService, IDashboardService
from tradeboard.services.data import load_dataset, load_dataset_from_text

__all__: list[str] = [
    "DashboardService",
    "IDashboardService",
    "load_dataset",
    "load_dataset_from_text",
]
