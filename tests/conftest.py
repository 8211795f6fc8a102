"""Root conftest for all tests - shared journal record factories."""

from decimal import Decimal
from itertools import count
from typing import Any, Callable

import pytest

from tradejournal.journal.models import Direction, Portfolio, Trade, TradeStatus


@pytest.fixture
def make_trade() -> Callable[..., Trade]:
    """
    Factory for trades with sensible defaults.

    Passing pnl without status creates a closed trade carrying that P&L,
    which is all the aggregate metrics look at.
    """
    ids = count(1)

    def factory(**overrides: Any) -> Trade:
        number = next(ids)
        fields: dict[str, Any] = {
            "trade_id": f"t-{number:03d}",
            "portfolio_id": "p-main",
            "ticker": "AAPL",
            "direction": Direction.LONG,
            "entry_date": "2025-01-10T14:30:00Z",
            "entry_price": Decimal("100"),
            "quantity": Decimal("10"),
        }
        if "pnl" in overrides and "status" not in overrides:
            fields["status"] = TradeStatus.CLOSED
            fields["exit_date"] = "2025-01-15T20:00:00Z"
            fields["exit_price"] = Decimal("100")
        fields.update(overrides)
        return Trade(**fields)

    return factory


@pytest.fixture
def portfolio() -> Portfolio:
    """Main portfolio with a 10,000 starting balance."""
    return Portfolio(portfolio_id="p-main", name="Main", initial_balance=Decimal("10000"))
