"""Trade extraction from performance documents.

Turns the nested performance document into a flat, ordered list of RawTrade.
Only the first strategy label and its first symbol are consumed.

Two outcomes are kept apart on purpose:
- "no trades" (empty mappings, missing keys, non-list symbol value) returns []
- "bad input" (malformed embedded JSON, unparseable trade fields) raises

Usage:
    >>> from tradeboard.libraries.performance.extraction import extract_trades
    >>> trades = extract_trades({"initial_capital": 10000, "trades": {...}})
"""

import json
from collections.abc import Mapping, Sequence
from typing import Any

import structlog
from pydantic import ValidationError

from tradeboard.libraries.performance.models import PerformanceDataset, RawTrade

logger = structlog.get_logger(__name__)


class PerformanceDataError(Exception):
    """Base exception for performance data errors."""

    pass


class MalformedInputError(PerformanceDataError):
    """Input document cannot be interpreted (bad JSON, missing required field)."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key


class FieldParseError(PerformanceDataError):
    """A trade field failed numeric or enum parsing."""

    def __init__(self, field: str, trade_index: int, value: Any, reason: str = ""):
        self.field = field
        self.trade_index = trade_index
        self.round_trip_index = trade_index // 2
        self.value = value
        message = (
            f"Invalid '{field}' in trade {trade_index} (round trip {self.round_trip_index}): {value!r}"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


def parse_dataset(payload: Mapping[str, Any] | PerformanceDataset) -> PerformanceDataset:
    """
    Validate a decoded performance document.

    Args:
        payload: Decoded top-level JSON object

    Returns:
        PerformanceDataset

    Raises:
        MalformedInputError: If initial_capital or trades is missing or invalid
    """
    if isinstance(payload, PerformanceDataset):
        return payload
    if not isinstance(payload, Mapping):
        raise MalformedInputError(f"Performance data must be an object, got {type(payload).__name__}")

    try:
        return PerformanceDataset.model_validate(dict(payload))
    except ValidationError as e:
        error = e.errors()[0]
        loc = error["loc"][0] if error["loc"] else "document"
        field = "initial_capital" if loc in ("initial_capital", "initialCapital") else str(loc)
        if error["type"] == "missing":
            raise MalformedInputError(f"Missing required field: {field}", key=field) from e
        raise MalformedInputError(f"Invalid field {field}: {error['msg']}", key=field) from e


def parse_trades(items: Sequence[Any]) -> list[RawTrade]:
    """
    Parse raw trade mappings into RawTrade models.

    RawTrade instances pass through unchanged.

    Raises:
        FieldParseError: On the first trade with an unparseable field
    """
    parsed: list[RawTrade] = []
    for index, item in enumerate(items):
        if isinstance(item, RawTrade):
            parsed.append(item)
            continue
        if not isinstance(item, Mapping):
            raise FieldParseError("trade", index, item, "expected an object")
        try:
            parsed.append(RawTrade.model_validate(dict(item)))
        except ValidationError as e:
            error = e.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else "trade"
            raise FieldParseError(field, index, item.get(field), error["msg"]) from e
    return parsed


def _first_strategy(dataset: Mapping[str, Any] | PerformanceDataset) -> tuple[str | None, Any]:
    """Return (strategy key, decoded strategy document) or (None, None)."""
    trades = dataset.trades if isinstance(dataset, PerformanceDataset) else dataset.get("trades")
    if not isinstance(trades, Mapping) or not trades:
        return None, None

    strategy_key = next(iter(trades))
    strategy_data = trades[strategy_key]
    if not strategy_data:
        return strategy_key, None

    if isinstance(strategy_data, (str, bytes)):
        try:
            strategy_data = json.loads(strategy_data)
        except json.JSONDecodeError as e:
            raise MalformedInputError(
                f"Malformed trade data for strategy '{strategy_key}': {e.msg}",
                key=strategy_key,
            ) from e

    return strategy_key, strategy_data


def _first_symbol(strategy_data: Any) -> tuple[str | None, Any]:
    """Return (symbol, raw trade list) or (None, None)."""
    if not isinstance(strategy_data, Mapping):
        return None, None
    symbols = strategy_data.get("trades")
    if not isinstance(symbols, Mapping) or not symbols:
        return None, None
    symbol = next(iter(symbols))
    return symbol, symbols[symbol]


def extract_trades(dataset: Mapping[str, Any] | PerformanceDataset) -> list[RawTrade]:
    """
    Extract the ordered trade list of the first strategy and first symbol.

    Args:
        dataset: PerformanceDataset or decoded document

    Returns:
        Parsed trades in input order; empty if the document holds none

    Raises:
        MalformedInputError: If the embedded strategy JSON cannot be parsed
        FieldParseError: If a trade field cannot be parsed
    """
    strategy_key, strategy_data = _first_strategy(dataset)
    if strategy_key is None:
        logger.warning("extraction.no_trades", reason="empty trades mapping")
        return []
    if strategy_data is None:
        logger.warning("extraction.no_trades", reason="no data for strategy", strategy=strategy_key)
        return []

    symbol, raw_trades = _first_symbol(strategy_data)
    if symbol is None:
        logger.warning("extraction.no_trades", reason="no symbols in strategy data", strategy=strategy_key)
        return []
    if not isinstance(raw_trades, list):
        logger.warning("extraction.no_trades", reason="symbol trades not a list", strategy=strategy_key, symbol=symbol)
        return []

    trades = parse_trades(raw_trades)
    logger.debug("extraction.trades_found", strategy=strategy_key, symbol=symbol, count=len(trades))
    return trades


def describe_strategy(
    dataset: Mapping[str, Any] | PerformanceDataset | None,
    default_name: str = "Trading Strategy",
) -> tuple[str, str]:
    """
    Derive display strings for a dataset.

    Returns:
        (strategy_name, strategy_params): name from the first symbol
        (e.g. "BTCUSDT Strategy"), params from the first strategy label
    """
    if dataset is None:
        return default_name, ""

    try:
        strategy_key, strategy_data = _first_strategy(dataset)
    except MalformedInputError:
        return default_name, ""
    if strategy_key is None:
        return default_name, ""

    symbol, _ = _first_symbol(strategy_data)
    name = f"{symbol} Strategy" if symbol else default_name
    return name, strategy_key
