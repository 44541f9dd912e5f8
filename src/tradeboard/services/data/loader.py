"""Performance file loading.

Reads performance documents from disk into PerformanceDataset.

Supported formats:
  - .json: {"initial_capital": ..., "trades": {"<strategy>": "<embedded JSON>"}}
  - .csv: one trade per row with columns quantity,side,price,time and
    optional strategy,symbol columns. CSV carries no capital, so
    initial_capital must be supplied by the caller.

Example:
    >>> dataset = load_dataset(Path("results/btc.json"))
    >>> dataset = load_dataset(Path("trades.csv"), initial_capital=Decimal("10000"))
"""

import csv
import io
import json
from decimal import Decimal
from pathlib import Path
from typing import Any, Literal

import structlog

from tradeboard.libraries.performance.extraction import MalformedInputError, parse_dataset
from tradeboard.libraries.performance.models import PerformanceDataset

logger = structlog.get_logger(__name__)

SUPPORTED_FORMATS = ("json", "csv")
CSV_REQUIRED_COLUMNS = ("quantity", "side", "price", "time")
DEFAULT_CSV_STRATEGY = "csv"
DEFAULT_CSV_SYMBOL = "UNKNOWN"

FileFormat = Literal["json", "csv"]


def load_dataset(path: Path | str, initial_capital: Decimal | None = None) -> PerformanceDataset:
    """
    Load a performance file.

    Args:
        path: .json or .csv file
        initial_capital: Overrides the file's capital (required for CSV)

    Returns:
        PerformanceDataset

    Raises:
        MalformedInputError: Unsupported extension, unreadable or invalid content
    """
    path = Path(path)
    fmt = path.suffix.lower().lstrip(".")
    if fmt not in SUPPORTED_FORMATS:
        supported = " or ".join(f".{f}" for f in SUPPORTED_FORMATS)
        raise MalformedInputError(f"Unsupported file format: .{fmt}. Please upload {supported}", key=str(path))

    try:
        text = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise MalformedInputError(f"Error reading file {path}: {e}", key=str(path)) from e

    dataset = load_dataset_from_text(text, fmt, initial_capital)  # type: ignore[arg-type]
    logger.info(
        "loader.dataset_loaded",
        path=str(path),
        format=fmt,
        strategies=len(dataset.trades),
        initial_capital=str(dataset.initial_capital),
    )
    return dataset


def load_dataset_from_text(
    text: str,
    fmt: FileFormat,
    initial_capital: Decimal | None = None,
) -> PerformanceDataset:
    """
    Decode performance data from already-read text.

    Raises:
        MalformedInputError: Invalid JSON/CSV or missing required fields
    """
    # Excel and some editors prefix a byte-order mark
    text = text.removeprefix("\ufeff")

    if fmt == "json":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedInputError(f"Invalid JSON format: {e.msg} (line {e.lineno})") from e
        if not isinstance(payload, dict):
            raise MalformedInputError(f"Performance data must be an object, got {type(payload).__name__}")
        if initial_capital is not None:
            payload = {**payload, "initial_capital": initial_capital}
            payload.pop("initialCapital", None)
        return parse_dataset(payload)

    if fmt == "csv":
        if initial_capital is None:
            raise MalformedInputError("Missing required field: initial_capital (CSV files carry none)", key="initial_capital")
        return parse_dataset({"initial_capital": initial_capital, "trades": _csv_to_trades(text)})

    raise MalformedInputError(f"Unsupported file format: .{fmt}")


def _csv_to_trades(text: str) -> dict[str, dict[str, Any]]:
    """Group CSV rows into the strategy -> {"trades": {symbol: [...]}} shape."""
    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames is None:
        raise MalformedInputError("CSV processing error: file is empty")

    columns = [name.strip() for name in reader.fieldnames]
    missing = [c for c in CSV_REQUIRED_COLUMNS if c not in columns]
    if missing:
        raise MalformedInputError(f"CSV processing error: missing columns {missing}", key=missing[0])

    grouped: dict[str, dict[str, Any]] = {}
    for row in reader:
        # Surplus cells land under the None key
        values = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}
        if not any(values.values()):
            continue

        strategy = values.get("strategy") or DEFAULT_CSV_STRATEGY
        symbol = values.get("symbol") or DEFAULT_CSV_SYMBOL
        trade = {column: values[column] for column in CSV_REQUIRED_COLUMNS}
        grouped.setdefault(strategy, {"trades": {}})["trades"].setdefault(symbol, []).append(trade)

    return grouped
