"""Unit tests for performance calculators.

Tests CapitalCalculator, EquityCurveCalculator and TradeStatisticsCalculator.
"""

from decimal import Decimal

import pytest

from tradeboard.libraries.performance.calculators import (
    CapitalCalculator,
    EquityCurveCalculator,
    TradeStatisticsCalculator,
)

T0 = 1_641_168_000_000  # 2022-01-03T00:00:00Z
DAY_MS = 86_400_000


class TestCapitalCalculator:
    """Test CapitalCalculator functionality."""

    @pytest.fixture
    def calculator(self) -> CapitalCalculator:
        return CapitalCalculator(Decimal("1000"))

    def test_initial_state(self, calculator):
        assert calculator.initial_capital == Decimal("1000")
        assert calculator.running_capital == Decimal("1000")
        assert calculator.running_pnl == Decimal("0")
        assert calculator.peak_capital == Decimal("1000")
        assert calculator.max_drawdown == Decimal("0")

    def test_gain_raises_peak(self, calculator):
        # Act
        calculator.apply(Decimal("10"))

        # Assert
        assert calculator.running_capital == Decimal("1010")
        assert calculator.running_pnl == Decimal("10")
        assert calculator.peak_capital == Decimal("1010")
        assert calculator.max_drawdown == Decimal("0")

    def test_loss_measures_drawdown_from_peak(self, calculator):
        # Act
        calculator.apply(Decimal("-10"))

        # Assert
        assert calculator.running_capital == Decimal("990")
        assert calculator.peak_capital == Decimal("1000")
        assert calculator.max_drawdown == Decimal("0.01")

    def test_max_drawdown_keeps_deepest(self, calculator):
        """A later shallower decline does not lower the recorded maximum."""
        # Arrange & Act
        for pnl in ("100", "-220", "220", "-110"):
            calculator.apply(Decimal(pnl))

        # Assert
        assert calculator.peak_capital == Decimal("1100")
        assert calculator.max_drawdown == Decimal("0.2")

    def test_running_capital_equals_initial_plus_running_pnl(self, calculator):
        for pnl in ("12.5", "-3.25", "0", "7"):
            calculator.apply(Decimal(pnl))
            assert calculator.running_capital == calculator.initial_capital + calculator.running_pnl


class TestEquityCurveCalculator:
    """Test EquityCurveCalculator functionality."""

    def test_points_in_processing_order(self):
        # Arrange
        calculator = EquityCurveCalculator()

        # Act
        calculator.update(T0 + DAY_MS, Decimal("1010"))
        calculator.update(T0, Decimal("1000"))

        # Assert
        curve = calculator.get_curve()
        assert len(calculator) == 2
        assert [p.date for p in curve] == ["2022-01-04", "2022-01-03"]
        assert curve[0].value == Decimal("1010")

    def test_get_curve_returns_copy(self):
        calculator = EquityCurveCalculator()
        calculator.update(T0, Decimal("1000"))

        calculator.get_curve().clear()

        assert len(calculator) == 1


class TestTradeStatisticsCalculator:
    """Test TradeStatisticsCalculator functionality."""

    def test_counts_and_gross_amounts(self):
        # Arrange
        calculator = TradeStatisticsCalculator()

        # Act
        for pnl in ("10", "-4", "0", "6"):
            calculator.add_trade(Decimal(pnl))

        # Assert
        assert calculator.total_trades == 4
        assert calculator.winning_trades == 2
        assert calculator.losing_trades == 1
        assert calculator.gross_profit == Decimal("16")
        assert calculator.gross_loss == Decimal("4")
        assert calculator.total_pnl == Decimal("12")
        assert calculator.pnls == [Decimal("10"), Decimal("-4"), Decimal("0"), Decimal("6")]

    def test_empty(self):
        calculator = TradeStatisticsCalculator()

        assert calculator.total_trades == 0
        assert calculator.total_pnl == Decimal("0")
        assert calculator.pnls == []
