"""
tradeboard - Trading performance analysis

Turns executed-trade performance files into dashboard metrics.
"""

from importlib.metadata import version

try:
    __version__ = version("tradeboard")
except Exception:
    __version__ = "0.0.0.dev"  # Fallback for development


__all__ = [
    "__version__",
]
