"""Tests for the journal service write path and portfolio summary."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError

from tradejournal.journal.models import (
    AssetClass,
    CryptoParams,
    Direction,
    FutureParams,
    Tag,
    TradeSetup,
    TradeStatus,
)
from tradejournal.journal.repository import InMemoryJournalRepository
from tradejournal.journal.service import JournalService, PortfolioSummary, RecordNotFoundError


def _fixed_clock() -> datetime:
    return datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def repository(portfolio):
    repo = InMemoryJournalRepository()
    repo.save_portfolio(portfolio)
    return repo


@pytest.fixture
def service(repository):
    return JournalService(repository, clock=_fixed_clock)


class TestRecordTrade:
    def test_open_trade_is_stored_without_pnl(self, service, repository, make_trade):
        stored = service.record_trade(make_trade(trade_id="t-1"))

        assert stored.pnl is None
        assert repository.get_trade("t-1") == stored
        assert stored.created_at == "2025-03-01T12:00:00Z"
        assert stored.updated_at == "2025-03-01T12:00:00Z"

    def test_closed_trade_is_enriched(self, service, make_trade):
        trade = make_trade(status=TradeStatus.CLOSED, exit_price=Decimal("105"), exit_date="2025-01-11T15:00:00Z")

        stored = service.record_trade(trade)

        assert stored.pnl == Decimal("50")
        assert stored.pnl_percentage == Decimal("5")

    def test_stale_cached_pnl_is_replaced(self, service, make_trade):
        trade = make_trade(pnl=Decimal("12345"), exit_price=Decimal("101"))

        assert service.record_trade(trade).pnl == Decimal("10")

    def test_existing_created_at_is_kept(self, service, make_trade):
        stored = service.record_trade(make_trade(created_at="2024-12-31T00:00:00Z"))

        assert stored.created_at == "2024-12-31T00:00:00Z"


class TestUpdateTrade:
    def test_close_trade_computes_pnl(self, service, make_trade):
        service.record_trade(make_trade(trade_id="t-1"))

        closed = service.close_trade("t-1", Decimal("110"), "2025-01-12T15:00:00Z")

        assert closed.status == TradeStatus.CLOSED
        assert closed.pnl == Decimal("100")
        assert closed.exit_date == "2025-01-12T15:00:00Z"

    def test_price_change_refreshes_pnl(self, service, make_trade):
        service.record_trade(make_trade(trade_id="t-1"))
        service.close_trade("t-1", Decimal("110"), "2025-01-12T15:00:00Z")

        updated = service.update_trade("t-1", quantity=Decimal("20"))

        assert updated.pnl == Decimal("200")

    def test_reopening_clears_pnl(self, service, make_trade):
        service.record_trade(make_trade(trade_id="t-1", pnl=Decimal("0")))

        reopened = service.update_trade("t-1", status=TradeStatus.OPEN)

        assert reopened.pnl is None
        assert reopened.pnl_percentage is None

    def test_flat_asset_changes(self, service, make_trade):
        service.record_trade(make_trade(trade_id="t-1", ticker="ES", entry_price=Decimal("5800"), quantity=Decimal("1")))

        updated = service.update_trade("t-1", asset_class="future", tick_value=Decimal("12.50"), tick_size=Decimal("0.25"))
        closed = service.close_trade("t-1", Decimal("5801"), "2025-01-12T15:00:00Z")

        assert updated.asset == FutureParams(tick_value=Decimal("12.50"), tick_size=Decimal("0.25"))
        assert closed.pnl == Decimal("50")

    def test_asset_param_change_keeps_class(self, service, make_trade):
        asset = FutureParams(tick_value=Decimal("5"), tick_size=Decimal("0.25"))
        service.record_trade(make_trade(trade_id="t-1", asset=asset))

        updated = service.update_trade("t-1", tick_value=Decimal("12.50"))

        assert updated.asset_class == AssetClass.FUTURE
        assert updated.asset == FutureParams(tick_value=Decimal("12.50"), tick_size=Decimal("0.25"))

    def test_trade_id_cannot_change(self, service, repository, make_trade):
        service.record_trade(make_trade(trade_id="t-1"))

        service.update_trade("t-1", trade_id="t-2", ticker="MSFT")

        assert repository.get_trade("t-1").ticker == "MSFT"
        assert repository.get_trade("t-2") is None

    def test_invalid_change_raises(self, service, make_trade):
        service.record_trade(make_trade(trade_id="t-1"))

        with pytest.raises(ValidationError):
            service.update_trade("t-1", confidence=9)

    def test_unknown_trade_raises(self, service):
        with pytest.raises(RecordNotFoundError, match="Trade not found: nope"):
            service.update_trade("nope", ticker="X")

    def test_delete(self, service, repository, make_trade):
        service.record_trade(make_trade(trade_id="t-1"))

        service.delete_trade("t-1")

        assert repository.list_trades() == []
        with pytest.raises(RecordNotFoundError):
            service.delete_trade("t-1")


class TestSetupsAndTransactions:
    def test_record_setup_stamps_ratio(self, service, repository):
        setup = TradeSetup(
            setup_id="s-1",
            portfolio_id="p-main",
            ticker="AMZN",
            direction=Direction.LONG,
            entry_price=Decimal("100"),
            stop_loss=Decimal("90"),
            target_price=Decimal("130"),
            position_size=Decimal("10"),
        )

        stored = service.record_setup(setup)

        assert stored.risk_reward_ratio == Decimal("3")
        assert repository.get_setup("s-1") == stored

    def test_deposits_and_withdrawals_append(self, service, repository):
        service.add_deposit("p-main", Decimal("500"), "2025-01-05")
        service.add_deposit("p-main", Decimal("250"), "2025-01-06", note="bonus")
        service.add_withdrawal("p-main", Decimal("100"), "2025-01-07")

        stored = repository.get_portfolio("p-main")

        assert [t.amount for t in stored.deposits] == [Decimal("500"), Decimal("250")]
        assert stored.deposits[1].note == "bonus"
        assert [t.amount for t in stored.withdrawals] == [Decimal("100")]
        assert len({t.transaction_id for t in stored.deposits}) == 2

    def test_unknown_portfolio_raises(self, service):
        with pytest.raises(RecordNotFoundError):
            service.add_deposit("p-missing", Decimal("1"), "2025-01-01")


class TestPortfolioSummary:
    def test_summary(self, service, repository, make_trade):
        repository.save_tag(Tag(tag_id="tag-1", name="Breakout"))
        service.record_trade(
            make_trade(
                trade_id="t-1",
                status=TradeStatus.CLOSED,
                exit_price=Decimal("130"),
                exit_date="2025-01-12T15:00:00Z",
                tags=["tag-1"],
            )
        )
        service.record_trade(
            make_trade(
                trade_id="t-2",
                status=TradeStatus.CLOSED,
                exit_price=Decimal("95"),
                exit_date="2025-01-12T18:00:00Z",
                tags=["tag-9"],
            )
        )
        service.record_trade(make_trade(trade_id="t-3"))
        service.record_trade(make_trade(trade_id="t-4", portfolio_id="p-other", pnl=Decimal("1000")))
        service.add_deposit("p-main", Decimal("500"), "2025-01-01")
        service.add_withdrawal("p-main", Decimal("100"), "2025-01-02")

        summary = service.portfolio_summary("p-main")

        assert isinstance(summary, PortfolioSummary)
        assert summary.balance == Decimal("10650")
        assert summary.metrics.total_trades == 2
        assert summary.metrics.total_pnl == Decimal("250")
        assert [(d.date, d.pnl, d.trade_count) for d in summary.daily_pnl] == [("2025-01-12", Decimal("250"), 2)]
        assert [p.cumulative for p in summary.cumulative_pnl] == [Decimal("300"), Decimal("250")]
        assert [s.label for s in summary.tag_performance] == ["Breakout", "Unknown"]
        assert [s.key for s in summary.asset_performance] == ["stock"]

    def test_portfolio_trades_filters_by_owner(self, service, make_trade):
        service.record_trade(make_trade(trade_id="t-1"))
        service.record_trade(make_trade(trade_id="t-2", portfolio_id="p-other"))

        assert [t.trade_id for t in service.portfolio_trades("p-main")] == ["t-1"]

    def test_refresh_trades_fixes_stale_cache(self, service, repository, make_trade):
        repository.save_trade(make_trade(trade_id="t-1", pnl=Decimal("999"), exit_price=Decimal("101")))
        repository.save_trade(make_trade(trade_id="t-2"))

        changed = service.refresh_trades()

        assert changed == 1
        assert repository.get_trade("t-1").pnl == Decimal("10")

    def test_unknown_portfolio_raises(self, service):
        with pytest.raises(RecordNotFoundError):
            service.portfolio_summary("p-missing")

    def test_refresh_trades_leaves_undefined_percentage_alone(self, service, make_trade):
        service.record_trade(
            make_trade(
                trade_id="t-1",
                status=TradeStatus.CLOSED,
                entry_price=Decimal("0"),
                exit_price=Decimal("0"),
                exit_date="2025-01-12T15:00:00Z",
            )
        )

        assert service.get_trade("t-1").pnl_percentage.is_nan()
        assert service.refresh_trades() == 0

    def test_segments_cover_closed_trades_only(self, service, make_trade):
        service.record_trade(make_trade(trade_id="t-1", pnl=Decimal("5"), tags=["tag-1"]))
        service.record_trade(make_trade(trade_id="t-2", tags=["tag-open"], asset=CryptoParams()))

        summary = service.portfolio_summary("p-main")

        assert [s.key for s in summary.tag_performance] == ["tag-1"]
        assert [s.key for s in summary.asset_performance] == ["stock"]

    def test_asset_segments_keep_first_appearance_order(self, service, make_trade):
        service.record_trade(
            make_trade(
                trade_id="t-1",
                asset=CryptoParams(),
                status=TradeStatus.CLOSED,
                exit_price=Decimal("90"),
                exit_date="2025-01-12T15:00:00Z",
            )
        )
        service.record_trade(
            make_trade(
                trade_id="t-2",
                status=TradeStatus.CLOSED,
                exit_price=Decimal("120"),
                exit_date="2025-01-13T15:00:00Z",
            )
        )

        summary = service.portfolio_summary("p-main")

        assert [s.key for s in summary.asset_performance] == ["crypto", "stock"]
        assert summary.asset_performance[0].metrics.total_pnl == Decimal("-100")
