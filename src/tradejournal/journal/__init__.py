"""Journal records and storage.

Key components:
- Models: Trade, TradeSetup, Portfolio, Transaction, Tag, UserSettings
- IJournalRepository: Storage protocol
- InMemoryJournalRepository / JournalSnapshot: Dictionary store and JSON snapshots

The write-path service lives in ``tradejournal.journal.service``.

Example:
    >>> from tradejournal.journal import InMemoryJournalRepository, load_snapshot
    >>> from tradejournal.journal.service import JournalService
    >>>
    >>> repository = InMemoryJournalRepository.from_snapshot(load_snapshot("data/journal.json"))
    >>> service = JournalService(repository)
    >>> summary = service.portfolio_summary("p-main")
    >>> print(f"Balance: ${summary.balance}")
"""

from tradejournal.journal.interface import IJournalRepository
from tradejournal.journal.models import (
    AssetClass,
    AssetParams,
    CryptoParams,
    Direction,
    ForexParams,
    FutureParams,
    OptionParams,
    Portfolio,
    SetupStatus,
    StockParams,
    Tag,
    TagCategory,
    Trade,
    TradeSetup,
    TradeStatus,
    Transaction,
    UserSettings,
    asset_params_for,
)
from tradejournal.journal.repository import InMemoryJournalRepository, JournalSnapshot, load_snapshot

__all__ = [
    # Storage
    "IJournalRepository",
    "InMemoryJournalRepository",
    "JournalSnapshot",
    "load_snapshot",
    # Records
    "Trade",
    "TradeSetup",
    "Portfolio",
    "Transaction",
    "Tag",
    "UserSettings",
    # Asset parameters
    "AssetParams",
    "StockParams",
    "CryptoParams",
    "OptionParams",
    "FutureParams",
    "ForexParams",
    "asset_params_for",
    # Enums
    "AssetClass",
    "Direction",
    "TradeStatus",
    "SetupStatus",
    "TagCategory",
]
