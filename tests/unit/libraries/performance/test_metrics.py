"""Tests for aggregate performance metrics."""

from decimal import Decimal

from tradejournal.journal.models import TradeStatus
from tradejournal.libraries.performance.metrics import (
    calculate_profit_factor,
    compute_performance_metrics,
    hold_time_days,
    parse_timestamp,
    realized_trades,
)
from tradejournal.libraries.performance.models import PerformanceMetrics


class TestEmptyInput:
    """No qualifying trades."""

    def test_empty_list_gives_zero_metrics(self):
        metrics = compute_performance_metrics([])

        assert metrics == PerformanceMetrics()
        assert metrics.total_pnl == Decimal("0")
        assert metrics.total_trades == 0
        assert metrics.profit_factor == Decimal("0")
        assert metrics.average_hold_time == Decimal("0")

    def test_only_open_trades_gives_zero_metrics(self, make_trade):
        trades = [make_trade(), make_trade(ticker="MSFT")]

        assert compute_performance_metrics(trades) == PerformanceMetrics()

    def test_closed_trade_without_pnl_is_ignored(self, make_trade):
        trade = make_trade(status=TradeStatus.CLOSED, exit_price=Decimal("110"), exit_date="2025-01-12T00:00:00Z")

        assert realized_trades([trade]) == []
        assert compute_performance_metrics([trade]).total_trades == 0


class TestMixedResults:
    """Wins, losses and a scratch trade."""

    def test_counts_and_totals(self, make_trade):
        trades = [make_trade(pnl=Decimal(p)) for p in ("100", "-50", "30", "-10", "0")]

        metrics = compute_performance_metrics(trades)

        assert metrics.total_trades == 5
        assert metrics.winning_trades == 2
        assert metrics.losing_trades == 2
        assert metrics.win_rate == Decimal("40")
        assert metrics.total_pnl == Decimal("70")
        assert metrics.best_trade == Decimal("100")
        assert metrics.worst_trade == Decimal("-50")

    def test_averages_and_profit_factor(self, make_trade):
        trades = [make_trade(pnl=Decimal(p)) for p in ("100", "-50", "30", "-10", "0")]

        metrics = compute_performance_metrics(trades)

        assert metrics.average_win == Decimal("65")
        assert metrics.average_loss == Decimal("30")
        assert abs(metrics.profit_factor - Decimal("2.1667")) < Decimal("0.0001")
        assert not metrics.has_unbounded_profit_factor

    def test_open_trades_are_excluded(self, make_trade):
        trades = [make_trade(pnl=Decimal("40")), make_trade(), make_trade(pnl=Decimal("-10"))]

        metrics = compute_performance_metrics(trades)

        assert metrics.total_trades == 2
        assert metrics.total_pnl == Decimal("30")

    def test_win_rate_within_bounds(self, make_trade):
        trades = [make_trade(pnl=Decimal(p)) for p in ("1", "2", "-3")]

        metrics = compute_performance_metrics(trades)

        assert Decimal("0") <= metrics.win_rate <= Decimal("100")
        assert metrics.winning_trades + metrics.losing_trades <= metrics.total_trades
        assert metrics.worst_trade <= metrics.best_trade


class TestProfitFactor:
    """Profit factor edge cases."""

    def test_wins_without_losses_is_infinite(self, make_trade):
        trades = [make_trade(pnl=Decimal("25")), make_trade(pnl=Decimal("75"))]

        metrics = compute_performance_metrics(trades)

        assert metrics.profit_factor == Decimal("Infinity")
        assert metrics.has_unbounded_profit_factor
        assert metrics.average_loss == Decimal("0")
        assert metrics.win_rate == Decimal("100")

    def test_only_losses_is_zero(self, make_trade):
        metrics = compute_performance_metrics([make_trade(pnl=Decimal("-20"))])

        assert metrics.profit_factor == Decimal("0")
        assert metrics.average_win == Decimal("0")

    def test_only_scratch_trades(self, make_trade):
        metrics = compute_performance_metrics([make_trade(pnl=Decimal("0"))])

        assert metrics.total_trades == 1
        assert metrics.win_rate == Decimal("0")
        assert metrics.profit_factor == Decimal("0")

    def test_calculate_profit_factor_directly(self):
        assert calculate_profit_factor(Decimal("90"), Decimal("30")) == Decimal("3")
        assert calculate_profit_factor(Decimal("5"), Decimal("0")) == Decimal("Infinity")
        assert calculate_profit_factor(Decimal("0"), Decimal("0")) == Decimal("0")

    def test_infinite_profit_factor_survives_serialization(self, make_trade):
        metrics = compute_performance_metrics([make_trade(pnl=Decimal("10"))])

        restored = PerformanceMetrics.model_validate(metrics.model_dump())

        assert restored.profit_factor == Decimal("Infinity")


class TestHoldTime:
    """Entry-to-exit duration in days."""

    def test_fractional_days(self):
        assert hold_time_days("2025-01-01T00:00:00Z", "2025-01-02T12:00:00Z") == Decimal("1.5")

    def test_offsets_are_respected(self):
        # Same instant written in two offsets
        assert hold_time_days("2025-01-01T10:00:00+02:00", "2025-01-01T08:00:00Z") == Decimal("0")

    def test_naive_timestamps_are_utc(self):
        assert parse_timestamp("2025-03-01T09:30:00").utcoffset().total_seconds() == 0

    def test_average_over_trades(self, make_trade):
        trades = [
            make_trade(pnl=Decimal("5"), entry_date="2025-01-01T00:00:00Z", exit_date="2025-01-02T00:00:00Z"),
            make_trade(pnl=Decimal("5"), entry_date="2025-01-01T00:00:00Z", exit_date="2025-01-04T00:00:00Z"),
        ]

        assert compute_performance_metrics(trades).average_hold_time == Decimal("2")

    def test_trades_without_exit_date_are_left_out_of_average(self, make_trade):
        trades = [
            make_trade(pnl=Decimal("5"), entry_date="2025-01-01T00:00:00Z", exit_date="2025-01-03T00:00:00Z"),
            make_trade(pnl=Decimal("5"), exit_date=None),
        ]

        metrics = compute_performance_metrics(trades)

        assert metrics.total_trades == 2
        assert metrics.average_hold_time == Decimal("2")
