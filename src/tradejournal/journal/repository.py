"""In-memory journal repository and JSON snapshots.

A JournalSnapshot is the complete, versioned record set of one journal. It
can be read from a JSON file and loaded into an InMemoryJournalRepository.
"""

from pathlib import Path

from pydantic import BaseModel, Field

from tradejournal.journal.models import Portfolio, Tag, Trade, TradeSetup, UserSettings

SNAPSHOT_VERSION = "1.0"


class JournalSnapshot(BaseModel):
    """Complete journal record set."""

    version: str = SNAPSHOT_VERSION
    trades: list[Trade] = Field(default_factory=list)
    setups: list[TradeSetup] = Field(default_factory=list)
    portfolios: list[Portfolio] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)
    settings: UserSettings = Field(default_factory=UserSettings)
    active_portfolio_id: str | None = None


def load_snapshot(path: str | Path) -> JournalSnapshot:
    """
    Read a journal snapshot from a JSON file.

    Raises:
        FileNotFoundError: If the file does not exist
        pydantic.ValidationError: If the content is not a valid snapshot
    """
    snapshot_path = Path(path)
    if not snapshot_path.exists():
        raise FileNotFoundError(f"Journal snapshot not found: {snapshot_path}")
    return JournalSnapshot.model_validate_json(snapshot_path.read_text(encoding="utf-8"))


class InMemoryJournalRepository:
    """
    Dictionary-backed journal repository.

    Implements IJournalRepository. Records are immutable, so stored objects
    are shared with callers without copying.

    Example:
        >>> repository = InMemoryJournalRepository.from_snapshot(load_snapshot("journal.json"))
        >>> len(repository.list_trades())
        42
    """

    def __init__(self) -> None:
        self._trades: dict[str, Trade] = {}
        self._setups: dict[str, TradeSetup] = {}
        self._portfolios: dict[str, Portfolio] = {}
        self._tags: dict[str, Tag] = {}
        self._settings: UserSettings = UserSettings()

    @classmethod
    def from_snapshot(cls, snapshot: JournalSnapshot) -> "InMemoryJournalRepository":
        """Build a repository holding every record of a snapshot."""
        repository = cls()
        for trade in snapshot.trades:
            repository.save_trade(trade)
        for setup in snapshot.setups:
            repository.save_setup(setup)
        for portfolio in snapshot.portfolios:
            repository.save_portfolio(portfolio)
        for tag in snapshot.tags:
            repository.save_tag(tag)
        repository.save_settings(snapshot.settings)
        return repository

    def to_snapshot(self) -> JournalSnapshot:
        """Export every record as a snapshot."""
        return JournalSnapshot(
            trades=self.list_trades(),
            setups=self.list_setups(),
            portfolios=self.list_portfolios(),
            tags=self.list_tags(),
            settings=self._settings,
        )

    # ==================== Trades ====================

    def list_trades(self) -> list[Trade]:
        return list(self._trades.values())

    def get_trade(self, trade_id: str) -> Trade | None:
        return self._trades.get(trade_id)

    def save_trade(self, trade: Trade) -> None:
        self._trades[trade.trade_id] = trade

    def delete_trade(self, trade_id: str) -> None:
        self._trades.pop(trade_id, None)

    # ==================== Setups ====================

    def list_setups(self) -> list[TradeSetup]:
        return list(self._setups.values())

    def get_setup(self, setup_id: str) -> TradeSetup | None:
        return self._setups.get(setup_id)

    def save_setup(self, setup: TradeSetup) -> None:
        self._setups[setup.setup_id] = setup

    def delete_setup(self, setup_id: str) -> None:
        self._setups.pop(setup_id, None)

    # ==================== Portfolios ====================

    def list_portfolios(self) -> list[Portfolio]:
        return list(self._portfolios.values())

    def get_portfolio(self, portfolio_id: str) -> Portfolio | None:
        return self._portfolios.get(portfolio_id)

    def save_portfolio(self, portfolio: Portfolio) -> None:
        self._portfolios[portfolio.portfolio_id] = portfolio

    def delete_portfolio(self, portfolio_id: str) -> None:
        self._portfolios.pop(portfolio_id, None)

    # ==================== Tags & settings ====================

    def list_tags(self) -> list[Tag]:
        return list(self._tags.values())

    def save_tag(self, tag: Tag) -> None:
        self._tags[tag.tag_id] = tag

    def get_settings(self) -> UserSettings:
        return self._settings

    def save_settings(self, settings: UserSettings) -> None:
        self._settings = settings
