"""Journal repository interface (Protocol).

Defines the storage contract the journal service depends on. Any key-value
backed store can satisfy it; the service receives one explicitly instead of
reaching for a process-wide store.
"""

from typing import Protocol

from tradejournal.journal.models import Portfolio, Tag, Trade, TradeSetup, UserSettings


class IJournalRepository(Protocol):
    """
    Storage for journal records.

    Lookups return None for unknown ids; deletes of unknown ids are no-ops.
    List methods return records in insertion order.

    Example:
        >>> repository: IJournalRepository = InMemoryJournalRepository()
        >>> repository.save_trade(trade)
        >>> repository.get_trade(trade.trade_id)
    """

    # ==================== Trades ====================

    def list_trades(self) -> list[Trade]:
        """All trades."""
        ...

    def get_trade(self, trade_id: str) -> Trade | None:
        """Trade by id."""
        ...

    def save_trade(self, trade: Trade) -> None:
        """Insert or replace a trade."""
        ...

    def delete_trade(self, trade_id: str) -> None:
        """Remove a trade."""
        ...

    # ==================== Setups ====================

    def list_setups(self) -> list[TradeSetup]:
        """All setups."""
        ...

    def get_setup(self, setup_id: str) -> TradeSetup | None:
        """Setup by id."""
        ...

    def save_setup(self, setup: TradeSetup) -> None:
        """Insert or replace a setup."""
        ...

    def delete_setup(self, setup_id: str) -> None:
        """Remove a setup."""
        ...

    # ==================== Portfolios ====================

    def list_portfolios(self) -> list[Portfolio]:
        """All portfolios."""
        ...

    def get_portfolio(self, portfolio_id: str) -> Portfolio | None:
        """Portfolio by id."""
        ...

    def save_portfolio(self, portfolio: Portfolio) -> None:
        """Insert or replace a portfolio."""
        ...

    def delete_portfolio(self, portfolio_id: str) -> None:
        """Remove a portfolio."""
        ...

    # ==================== Tags & settings ====================

    def list_tags(self) -> list[Tag]:
        """All tags."""
        ...

    def save_tag(self, tag: Tag) -> None:
        """Insert or replace a tag."""
        ...

    def get_settings(self) -> UserSettings:
        """Journal settings (defaults when never saved)."""
        ...

    def save_settings(self, settings: UserSettings) -> None:
        """Replace journal settings."""
        ...
