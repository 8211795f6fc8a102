"""
TradeJournal - Trading Journal Analytics

Public API for computing trade P&L and performance analytics from journal records.
"""

from importlib.metadata import version

try:
    __version__ = version("tradejournal")
except Exception:
    __version__ = "0.0.0.dev"  # Fallback for development


__all__ = [
    "__version__",
]
