"""Root conftest for all tests - setup sys.path and shared performance fixtures."""

import json
import sys
from pathlib import Path

import pytest

# Add src to sys.path so tests run without an editable install
src_root = Path(__file__).parent.parent / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

DAY_MS = 86_400_000
JAN_3_2022_MS = 1_641_168_000_000  # 2022-01-03T00:00:00Z


def make_trade(side: str, quantity: str, price: str, time: int) -> dict[str, str | int]:
    """Raw trade mapping as found in performance files (string-typed numbers)."""
    return {"quantity": quantity, "side": side, "price": price, "time": time}


def make_document(
    trades: list[dict],
    initial_capital: int | str = 1000,
    strategy: str = "rolling_window=330,multiplier=0.14",
    symbol: str = "BTCUSDT",
) -> dict:
    """Performance document with the strategy data embedded as a JSON string."""
    return {
        "initial_capital": initial_capital,
        "trades": {strategy: json.dumps({"trades": {symbol: trades}})},
        "candle_topics": [f"{symbol}-1h"],
    }


@pytest.fixture
def t0() -> int:
    return JAN_3_2022_MS


@pytest.fixture
def winning_round_trip(t0) -> list[dict]:
    """Buy 1 @ 100, sell 1 @ 110 a day later."""
    return [make_trade("buy", "1", "100", t0), make_trade("sell", "1", "110", t0 + DAY_MS)]


@pytest.fixture
def mixed_document(t0) -> dict:
    """Four round trips across January and February 2022 plus a trailing unpaired trade."""
    trades = [
        make_trade("buy", "1", "100", t0),
        make_trade("sell", "1", "110", t0 + DAY_MS),  # +10
        make_trade("sell", "2", "110", t0 + 2 * DAY_MS),
        make_trade("buy", "2", "140", t0 + 3 * DAY_MS),  # -60
        make_trade("buy", "1", "120", t0 + 31 * DAY_MS),
        make_trade("sell", "1", "120", t0 + 32 * DAY_MS),  # 0
        make_trade("buy", "0.5", "100", t0 + 33 * DAY_MS),
        make_trade("sell", "0.5", "200", t0 + 34 * DAY_MS),  # +50
        make_trade("buy", "1", "100", t0 + 35 * DAY_MS),
    ]
    return make_document(trades)
