"""Performance file loading."""

from tradeboard.services.data.loader import load_dataset, load_dataset_from_text

__all__ = [
    "load_dataset",
    "load_dataset_from_text",
]
