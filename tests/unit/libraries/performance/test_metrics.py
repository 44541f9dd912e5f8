"""Unit tests for pure performance metric functions."""

from decimal import Decimal

import pytest

from tradeboard.libraries.performance import metrics
from tradeboard.libraries.performance.models import EquityPoint, ProcessedTrade, RawTrade

DAY_MS = 86_400_000
T0 = 1_641_168_000_000  # 2022-01-03T00:00:00Z


def _raw(side: str, price: str, time: int = T0, quantity: str = "1") -> RawTrade:
    return RawTrade(quantity=Decimal(quantity), side=side, price=Decimal(price), time=time)  # type: ignore[arg-type]


def _curve(*values: str) -> list[EquityPoint]:
    return [EquityPoint(date=f"2022-01-{i + 1:02d}", value=Decimal(v)) for i, v in enumerate(values)]


def _processed(pnl: str, entry_price: str = "100") -> ProcessedTrade:
    return ProcessedTrade(
        id=1,
        date="2022-01-04",
        type="buy",
        entry_price=Decimal(entry_price),
        size=Decimal("1"),
        pnl=Decimal(pnl),
        running_pnl=Decimal(pnl),
        running_capital=Decimal("1000") + Decimal(pnl),
    )


class TestDateFormatting:
    def test_format_date_is_utc(self):
        assert metrics.format_date(T0) == "2022-01-03"
        assert metrics.format_date(T0 + DAY_MS - 1) == "2022-01-03"

    def test_format_month(self):
        assert metrics.format_month(T0) == "Jan 2022"
        assert metrics.format_month(T0 + 31 * DAY_MS) == "Feb 2022"

    def test_to_datetime_is_aware(self):
        assert metrics.to_datetime(0).tzinfo is not None


class TestPairing:
    """Test positional round-trip pairing."""

    def test_pairs_in_strides_of_two(self):
        trades = [_raw("buy", "1"), _raw("sell", "2"), _raw("sell", "3"), _raw("buy", "4")]

        pairs = metrics.pair_round_trips(trades)

        assert [(e.price, x.price) for e, x in pairs] == [(Decimal("1"), Decimal("2")), (Decimal("3"), Decimal("4"))]

    def test_trailing_trade_dropped(self):
        trades = [_raw("buy", "1"), _raw("sell", "2"), _raw("buy", "3")]

        assert len(metrics.pair_round_trips(trades)) == 1

    @pytest.mark.parametrize("count", [0, 1])
    def test_fewer_than_two_trades(self, count):
        assert metrics.pair_round_trips([_raw("buy", "1")] * count) == []

    def test_sides_are_not_matched(self):
        """Two buys in a row still form one round trip."""
        pairs = metrics.pair_round_trips([_raw("buy", "1"), _raw("buy", "2")])

        assert len(pairs) == 1


class TestTradePnl:
    def test_long_profit(self):
        assert metrics.calculate_trade_pnl(_raw("buy", "100"), _raw("sell", "110")) == Decimal("10")

    def test_short_profit(self):
        assert metrics.calculate_trade_pnl(_raw("sell", "110", quantity="2"), _raw("buy", "100")) == Decimal("20")

    def test_quantity_from_entry_leg(self):
        entry = _raw("buy", "100", quantity="3")
        exit = _raw("sell", "90", quantity="99")

        assert metrics.calculate_trade_pnl(entry, exit) == Decimal("-30")


class TestReturns:
    def test_total_return(self):
        assert metrics.calculate_total_return(Decimal("1000"), Decimal("1010")) == Decimal("0.01")

    def test_trading_days_rounds_up(self):
        trades = [_raw("buy", "1", T0), _raw("sell", "1", T0 + DAY_MS + 1)]

        assert metrics.calculate_trading_days(trades) == 2

    def test_trading_days_exact_and_same_timestamp(self):
        assert metrics.calculate_trading_days([_raw("buy", "1", T0), _raw("sell", "1", T0 + 3 * DAY_MS)]) == 3
        assert metrics.calculate_trading_days([_raw("buy", "1", T0), _raw("sell", "1", T0)]) == 0
        assert metrics.calculate_trading_days([]) == 0

    def test_trading_days_follows_input_order(self):
        """Unordered input is not corrected."""
        trades = [_raw("buy", "1", T0 + 2 * DAY_MS), _raw("sell", "1", T0)]

        assert metrics.calculate_trading_days(trades) == -2

    def test_annual_return(self):
        assert metrics.calculate_annual_return(Decimal("0.01"), 1) == Decimal("3.65")

    def test_annual_return_zero_days(self):
        assert metrics.calculate_annual_return(Decimal("0.5"), 0) == Decimal("0")


class TestTradeStatistics:
    def test_avg_profit(self):
        assert metrics.calculate_avg_profit(Decimal("30"), 3) == Decimal("10")
        assert metrics.calculate_avg_profit(Decimal("30"), 0) == Decimal("0")

    def test_win_rate_excludes_breakeven(self):
        assert metrics.calculate_win_rate(1, 1) == Decimal("0.5")
        assert metrics.calculate_win_rate(0, 0) == Decimal("0")

    def test_profit_factor(self):
        assert metrics.calculate_profit_factor(Decimal("30"), Decimal("10")) == Decimal("3")
        assert metrics.calculate_profit_factor(Decimal("0"), Decimal("10")) == Decimal("0")

    def test_profit_factor_defaults_to_one_without_losses(self):
        assert metrics.calculate_profit_factor(Decimal("30"), Decimal("0")) == Decimal("1")

    def test_win_loss_ratio(self):
        assert metrics.calculate_win_loss_ratio(Decimal("30"), 3, Decimal("20"), 4) == Decimal("2")

    def test_win_loss_ratio_without_losses_equals_avg_win(self):
        """Average loss is taken as 1 when nothing lost."""
        assert metrics.calculate_win_loss_ratio(Decimal("30"), 2, Decimal("0"), 0) == Decimal("15")

    def test_win_loss_ratio_without_wins(self):
        assert metrics.calculate_win_loss_ratio(Decimal("0"), 0, Decimal("10"), 1) == Decimal("0")


class TestSharpeRatio:
    def test_no_trades(self):
        assert metrics.calculate_sharpe_ratio([], Decimal("1000")) == Decimal("0")

    def test_zero_variance(self):
        assert metrics.calculate_sharpe_ratio([Decimal("10"), Decimal("10")], Decimal("1000")) == Decimal("0")

    @pytest.mark.parametrize("count", [3, 6, 7, 9, 11])
    def test_zero_variance_when_capital_does_not_divide_pnl(self, count):
        """10 / 3 is inexact, identical trades still have no variance."""
        assert metrics.calculate_sharpe_ratio([Decimal("10")] * count, Decimal("3")) == Decimal("0")

    def test_population_std_and_252_factor(self):
        """Returns 0.03 and 0.01: mean 0.02, population std 0.01, so sharpe = 2 * sqrt(252)."""
        sharpe = metrics.calculate_sharpe_ratio([Decimal("30"), Decimal("10")], Decimal("1000"))

        assert sharpe == Decimal("2") * Decimal(252).sqrt()

    def test_custom_annualization_factor(self):
        sharpe = metrics.calculate_sharpe_ratio([Decimal("30"), Decimal("10")], Decimal("1000"), 4)

        assert sharpe == Decimal("4")

    def test_negative_mean(self):
        assert metrics.calculate_sharpe_ratio([Decimal("-30"), Decimal("-10")], Decimal("1000")) < 0


class TestMonthlyReturns:
    def test_groups_by_exit_month_in_first_seen_order(self):
        exits = [
            (T0 + 31 * DAY_MS, Decimal("20")),  # Feb
            (T0, Decimal("10")),  # Jan
            (T0 + 32 * DAY_MS, Decimal("-5")),  # Feb
        ]

        result = metrics.calculate_monthly_returns(exits, Decimal("1000"))

        assert [(m.month, m.monthly_return) for m in result] == [
            ("Feb 2022", Decimal("0.015")),
            ("Jan 2022", Decimal("0.01")),
        ]

    def test_same_month_different_year(self):
        exits = [(T0, Decimal("10")), (T0 + 365 * DAY_MS, Decimal("10"))]

        assert [m.month for m in metrics.calculate_monthly_returns(exits, Decimal("1000"))] == ["Jan 2022", "Jan 2023"]

    def test_no_exits(self):
        assert metrics.calculate_monthly_returns([], Decimal("1000")) == []


class TestDrawdownPoints:
    def test_emits_each_point_beyond_threshold(self):
        """Contiguous declines are reported point by point."""
        points = metrics.calculate_drawdown_points(_curve("1000", "950", "900", "1000", "1100", "1089"))

        assert [(p.name, p.value) for p in points] == [
            ("2022-01-02", Decimal("-0.05")),
            ("2022-01-03", Decimal("-0.1")),
        ]

    def test_threshold_is_strict(self):
        assert metrics.calculate_drawdown_points(_curve("1000", "980")) == []
        assert len(metrics.calculate_drawdown_points(_curve("1000", "979"))) == 1

    def test_custom_threshold(self):
        assert len(metrics.calculate_drawdown_points(_curve("1000", "990"), Decimal("0.005"))) == 1

    def test_single_point_curve(self):
        assert metrics.calculate_drawdown_points(_curve("1000")) == []


class TestTradeClusters:
    def test_cluster_by_pnl_sign(self):
        clusters = metrics.calculate_trade_clusters([_processed("10"), _processed("-20", "200"), _processed("0")])

        assert [c.cluster for c in clusters] == [0, 1, 2]
        assert [c.x for c in clusters] == [0, 1, 2]
        assert clusters[1].y == Decimal("-0.1")
        assert clusters[1].z == Decimal("200")

    def test_x_wraps_every_five(self):
        clusters = metrics.calculate_trade_clusters([_processed("1")] * 7)

        assert [c.x for c in clusters] == [0, 1, 2, 3, 4, 0, 1]


class TestDrawdownPeriods:
    """Test grouping of declines into periods."""

    def test_recovered_and_open_periods_sorted_deepest_first(self):
        curve = _curve("1000", "950", "900", "1100", "1045", "1000")

        periods = metrics.calculate_drawdown_periods(curve)

        assert len(periods) == 2
        deepest, shallow = periods
        assert deepest.depth == Decimal("-0.1")
        assert deepest.start == "2022-01-02"
        assert deepest.end == "2022-01-03"
        assert deepest.duration == 2
        assert deepest.recovery == 1
        assert deepest.recovered is True

        assert shallow.start == "2022-01-05"
        assert shallow.end == "2022-01-06"
        assert shallow.recovered is False
        assert shallow.recovery == 0

    def test_recovery_counted_from_trough(self):
        curve = _curve("1000", "950", "900", "950", "1100")

        (period,) = metrics.calculate_drawdown_periods(curve)

        assert period.duration == 3
        assert period.recovery == 2

    def test_flat_at_peak_opens_no_period(self):
        assert metrics.calculate_drawdown_periods(_curve("1000", "1000", "1100", "1100")) == []

    def test_limit(self):
        curve = _curve("1000", "950", "1100", "900", "1200", "1190", "1300")

        periods = metrics.calculate_drawdown_periods(curve, limit=2)

        assert len(periods) == 2
        assert periods[0].start == "2022-01-04"

    def test_no_decline(self):
        assert metrics.calculate_drawdown_periods(_curve("1000", "1010", "1020")) == []
        assert metrics.calculate_drawdown_periods(_curve("1000")) == []
