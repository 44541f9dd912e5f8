"""Unit tests for performance data models."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from tradeboard.libraries.performance.models import (
    DrawdownPeriod,
    PerformanceDataset,
    ProcessedMetrics,
    ProcessedTrade,
    RawTrade,
    TradeCluster,
)


def _processed_trade(id: int, pnl: str, running_pnl: str) -> ProcessedTrade:
    return ProcessedTrade(
        id=id,
        date="2022-01-04",
        type="buy",
        entry_price=Decimal("100"),
        size=Decimal("1"),
        pnl=Decimal(pnl),
        running_pnl=Decimal(running_pnl),
        running_capital=Decimal("1000") + Decimal(running_pnl),
    )


def _metrics(trades: list[ProcessedTrade]) -> ProcessedMetrics:
    zero = Decimal("0")
    return ProcessedMetrics(
        strategy_name="BTCUSDT Strategy",
        strategy_params="window=10",
        initial_capital=Decimal("1000"),
        total_return=zero,
        annual_return=zero,
        sharpe_ratio=zero,
        max_drawdown=zero,
        avg_profit=zero,
        win_rate=zero,
        profit_factor=zero,
        win_loss_ratio=zero,
        trades=trades,
    )


class TestRawTrade:
    """Test RawTrade parsing."""

    def test_parses_string_numbers_to_decimal(self):
        """Decimal strings from performance files become exact Decimals."""
        trade = RawTrade.model_validate({"quantity": "0.015", "side": "buy", "price": "41234.56", "time": 1})

        assert trade.quantity == Decimal("0.015")
        assert trade.price == Decimal("41234.56")
        assert trade.side == "buy"

    def test_rejects_unknown_side(self):
        """Only buy and sell are valid sides."""
        with pytest.raises(ValidationError):
            RawTrade.model_validate({"quantity": "1", "side": "hold", "price": "1", "time": 1})

    @pytest.mark.parametrize("price", ["abc", "0", "-5", "NaN", "Infinity"])
    def test_rejects_invalid_price(self, price):
        """Non-numeric, non-positive and non-finite prices are rejected."""
        with pytest.raises(ValidationError):
            RawTrade.model_validate({"quantity": "1", "side": "buy", "price": price, "time": 1})

    def test_is_immutable(self):
        """RawTrade is frozen."""
        trade = RawTrade(quantity=Decimal("1"), side="sell", price=Decimal("10"), time=0)

        with pytest.raises(ValidationError):
            trade.price = Decimal("11")  # type: ignore[misc]


class TestPerformanceDataset:
    """Test PerformanceDataset field aliases and validation."""

    def test_accepts_snake_case_capital(self):
        dataset = PerformanceDataset.model_validate({"initial_capital": "10000", "trades": {}})

        assert dataset.initial_capital == Decimal("10000")
        assert dataset.candle_topics == []

    def test_accepts_camel_case_capital(self):
        """initialCapital, as written by the trading bot, is accepted too."""
        dataset = PerformanceDataset.model_validate({"initialCapital": 5000, "trades": {"s": "{}"}})

        assert dataset.initial_capital == Decimal("5000")
        assert dataset.trades == {"s": "{}"}

    def test_rejects_non_positive_capital(self):
        with pytest.raises(ValidationError):
            PerformanceDataset.model_validate({"initial_capital": 0, "trades": {}})


class TestProcessedMetrics:
    """Test derived ProcessedMetrics properties."""

    def test_empty_metrics_properties(self):
        """No round trips: zero P&L and final capital equals initial capital."""
        metrics = _metrics([])

        assert metrics.round_trip_count == 0
        assert metrics.total_pnl == Decimal("0")
        assert metrics.final_capital == Decimal("1000")
        assert metrics.winning_trades == 0
        assert metrics.losing_trades == 0

    def test_properties_follow_trades(self):
        """Totals come from the last trade's running P&L; breakeven counts as neither."""
        metrics = _metrics(
            [
                _processed_trade(1, "10", "10"),
                _processed_trade(2, "-4", "6"),
                _processed_trade(3, "0", "6"),
            ]
        )

        assert metrics.round_trip_count == 3
        assert metrics.total_pnl == Decimal("6")
        assert metrics.final_capital == Decimal("1006")
        assert metrics.winning_trades == 1
        assert metrics.losing_trades == 1

    def test_json_dump_keeps_decimal_precision(self):
        """Decimals serialize as strings."""
        metrics = _metrics([_processed_trade(1, "0.123456789", "0.123456789")])

        dumped = metrics.model_dump(mode="json")

        assert dumped["trades"][0]["pnl"] == "0.123456789"
        assert dumped["initial_capital"] == "1000"


class TestSupportingModels:
    def test_trade_cluster_rejects_unknown_cluster(self):
        with pytest.raises(ValidationError):
            TradeCluster(x=0, y=Decimal("0"), z=Decimal("0"), cluster=3)  # type: ignore[arg-type]

    def test_drawdown_period_fields(self):
        period = DrawdownPeriod(
            start="2022-01-06",
            end="2022-02-06",
            duration=3,
            depth=Decimal("-0.05"),
            recovery=0,
            recovered=False,
        )

        assert period.depth < 0
        assert not period.recovered
