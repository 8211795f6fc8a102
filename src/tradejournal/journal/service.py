"""Journal service.

Write path of the journal: every trade and setup passes through enrichment
before it reaches the repository, so the cached P&L and risk/reward fields
always agree with the record they sit on. Also assembles the read-side
portfolio summary from the performance library.
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict

from tradejournal.journal.interface import IJournalRepository
from tradejournal.journal.models import (
    Portfolio,
    Trade,
    TradeSetup,
    TradeStatus,
    Transaction,
    asset_params_for,
)
from tradejournal.libraries.performance.balance import compute_portfolio_balance
from tradejournal.libraries.performance.grouping import group_by_asset_class, group_by_tag, segment_performance
from tradejournal.libraries.performance.metrics import compute_performance_metrics
from tradejournal.libraries.performance.models import (
    CumulativePnLPoint,
    DailyPnL,
    PerformanceMetrics,
    SegmentPerformance,
)
from tradejournal.libraries.performance.pnl import enrich_setup, enrich_trade, is_enriched
from tradejournal.libraries.performance.series import compute_cumulative_pnl, compute_daily_pnl
from tradejournal.system import LoggerFactory

logger = LoggerFactory.get_logger()

_ASSET_UPDATE_KEYS = frozenset({"asset_class", "multiplier", "tick_value", "tick_size", "pip_value"})


class JournalError(Exception):
    """Base error for journal operations."""

    pass


class RecordNotFoundError(JournalError):
    """Raised when a record id is not in the repository."""

    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class PortfolioSummary(BaseModel):
    """
    Everything the dashboard shows for one portfolio.

    Attributes:
        portfolio: The portfolio record
        balance: Derived current balance
        metrics: Performance over the portfolio's trades
        daily_pnl: Realized P&L per exit day
        cumulative_pnl: Running P&L in exit order
        tag_performance: Metrics per tag, labelled with tag names
        asset_performance: Metrics per asset class
    """

    portfolio: Portfolio
    balance: Decimal
    metrics: PerformanceMetrics
    daily_pnl: list[DailyPnL]
    cumulative_pnl: list[CumulativePnLPoint]
    tag_performance: list[SegmentPerformance]
    asset_performance: list[SegmentPerformance]

    model_config = ConfigDict(frozen=True)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp(moment: datetime) -> str:
    return moment.isoformat().replace("+00:00", "Z")


class JournalService:
    """
    Record and read journal data through an injected repository.

    Example:
        >>> service = JournalService(InMemoryJournalRepository())
        >>> trade = service.record_trade(trade)
        >>> trade = service.close_trade(trade.trade_id, Decimal("110"), "2025-03-04T15:00:00Z")
        >>> trade.pnl
        Decimal('99')
    """

    def __init__(self, repository: IJournalRepository, clock: Callable[[], datetime] = _utc_now):
        """
        Initialize the service.

        Args:
            repository: Storage backend
            clock: Source of the current time for created/updated stamps
        """
        self._repository = repository
        self._clock = clock

    @property
    def repository(self) -> IJournalRepository:
        return self._repository

    # ==================== Trades ====================

    def get_trade(self, trade_id: str) -> Trade:
        """Trade by id. Raises RecordNotFoundError for unknown ids."""
        trade = self._repository.get_trade(trade_id)
        if trade is None:
            raise RecordNotFoundError("Trade", trade_id)
        return trade

    def record_trade(self, trade: Trade) -> Trade:
        """Enrich and store a new trade."""
        now = _timestamp(self._clock())
        stamped = trade.model_copy(update={"created_at": trade.created_at or now, "updated_at": now})
        enriched = enrich_trade(stamped)
        self._repository.save_trade(enriched)

        logger.info(
            "journal.trade_recorded",
            trade_id=enriched.trade_id,
            ticker=enriched.ticker,
            portfolio_id=enriched.portfolio_id,
            pnl=str(enriched.pnl) if enriched.pnl is not None else None,
        )
        return enriched

    def update_trade(self, trade_id: str, **changes: Any) -> Trade:
        """
        Apply field changes to a stored trade.

        The merged record is validated again and re-enriched, so changing a
        price, quantity, status or asset parameter refreshes the cached P&L.
        Asset changes may be given flat (asset_class, tick_value, ...).

        Raises:
            RecordNotFoundError: If the trade does not exist
            pydantic.ValidationError: If the merged record is invalid
        """
        current = self.get_trade(trade_id)
        merged = current.model_dump()

        asset_changes = {key: changes.pop(key) for key in list(changes) if key in _ASSET_UPDATE_KEYS}
        if asset_changes:
            params = {k: v for k, v in merged["asset"].items() if k != "asset_class"}
            params.update(asset_changes)
            asset_class = params.pop("asset_class", current.asset_class)
            merged["asset"] = asset_params_for(asset_class, **params).model_dump()

        merged.update(changes)
        merged["trade_id"] = trade_id
        merged["updated_at"] = _timestamp(self._clock())

        enriched = enrich_trade(Trade.model_validate(merged))
        self._repository.save_trade(enriched)

        logger.info(
            "journal.trade_updated",
            trade_id=trade_id,
            ticker=enriched.ticker,
            fields=sorted(set(changes) | set(asset_changes)),
        )
        return enriched

    def close_trade(self, trade_id: str, exit_price: Decimal, exit_date: str) -> Trade:
        """Mark a trade closed at the given exit and compute its P&L."""
        return self.update_trade(
            trade_id,
            exit_price=exit_price,
            exit_date=exit_date,
            status=TradeStatus.CLOSED,
        )

    def delete_trade(self, trade_id: str) -> None:
        """Remove a trade. Raises RecordNotFoundError for unknown ids."""
        self.get_trade(trade_id)
        self._repository.delete_trade(trade_id)
        logger.info("journal.trade_deleted", trade_id=trade_id)

    def refresh_trades(self) -> int:
        """
        Re-enrich every stored trade.

        Used after loading records written elsewhere, whose cached P&L may be
        missing or stale.

        Returns:
            Number of trades whose cached values changed
        """
        changed = 0
        for trade in self._repository.list_trades():
            if not is_enriched(trade):
                self._repository.save_trade(enrich_trade(trade))
                changed += 1

        logger.debug("journal.trades_refreshed", changed=changed)
        return changed

    def portfolio_trades(self, portfolio_id: str) -> list[Trade]:
        """Trades belonging to a portfolio, in repository order."""
        return [t for t in self._repository.list_trades() if t.portfolio_id == portfolio_id]

    # ==================== Setups ====================

    def record_setup(self, setup: TradeSetup) -> TradeSetup:
        """Store a setup with its risk/reward ratio computed."""
        stamped = setup.model_copy(update={"created_at": setup.created_at or _timestamp(self._clock())})
        enriched = enrich_setup(stamped)
        self._repository.save_setup(enriched)

        logger.info(
            "journal.setup_recorded",
            setup_id=enriched.setup_id,
            ticker=enriched.ticker,
            risk_reward=str(enriched.risk_reward_ratio),
        )
        return enriched

    # ==================== Portfolios ====================

    def get_portfolio(self, portfolio_id: str) -> Portfolio:
        """Portfolio by id. Raises RecordNotFoundError for unknown ids."""
        portfolio = self._repository.get_portfolio(portfolio_id)
        if portfolio is None:
            raise RecordNotFoundError("Portfolio", portfolio_id)
        return portfolio

    def add_deposit(self, portfolio_id: str, amount: Decimal, date: str, note: str | None = None) -> Portfolio:
        """Append a deposit to a portfolio's history."""
        portfolio = self.get_portfolio(portfolio_id)
        transaction = Transaction(transaction_id=uuid.uuid4().hex, amount=amount, date=date, note=note)
        updated = portfolio.model_copy(update={"deposits": [*portfolio.deposits, transaction]})
        self._repository.save_portfolio(updated)

        logger.info("journal.deposit_added", portfolio_id=portfolio_id, amount=str(amount))
        return updated

    def add_withdrawal(self, portfolio_id: str, amount: Decimal, date: str, note: str | None = None) -> Portfolio:
        """Append a withdrawal to a portfolio's history."""
        portfolio = self.get_portfolio(portfolio_id)
        transaction = Transaction(transaction_id=uuid.uuid4().hex, amount=amount, date=date, note=note)
        updated = portfolio.model_copy(update={"withdrawals": [*portfolio.withdrawals, transaction]})
        self._repository.save_portfolio(updated)

        logger.info("journal.withdrawal_added", portfolio_id=portfolio_id, amount=str(amount))
        return updated

    def portfolio_summary(self, portfolio_id: str) -> PortfolioSummary:
        """
        Build the analytics summary of one portfolio.

        Segments cover closed trades only. Tag segments are labelled with tag
        names from the repository (tag ids without a stored tag are labelled
        "Unknown") and ranked by total P&L; asset-class segments stay in order
        of first appearance.
        """
        portfolio = self.get_portfolio(portfolio_id)
        trades = self.portfolio_trades(portfolio_id)
        closed = [t for t in trades if t.is_closed]
        tag_names = {tag.tag_id: tag.name for tag in self._repository.list_tags()}

        return PortfolioSummary(
            portfolio=portfolio,
            balance=compute_portfolio_balance(portfolio, trades),
            metrics=compute_performance_metrics(trades),
            daily_pnl=compute_daily_pnl(trades),
            cumulative_pnl=compute_cumulative_pnl(trades),
            tag_performance=segment_performance(group_by_tag(closed), labels=tag_names),
            asset_performance=segment_performance(group_by_asset_class(closed), rank_by_pnl=False),
        )
