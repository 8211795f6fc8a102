"""Portfolio balance projection.

Current balance is always derived, never stored:

    balance = initial_balance + realized P&L + deposits - withdrawals

where realized P&L counts closed trades carrying a P&L.
"""

from decimal import Decimal
from typing import Sequence

from tradejournal.journal.models import Portfolio, Trade, Transaction
from tradejournal.libraries.performance.metrics import realized_trades


def realized_pnl(trades: Sequence[Trade]) -> Decimal:
    """Sum of P&L over closed trades carrying a P&L."""
    return sum((t.pnl for t in realized_trades(trades) if t.pnl is not None), Decimal("0"))


def sum_transactions(transactions: Sequence[Transaction]) -> Decimal:
    """Total amount of a deposit or withdrawal history."""
    return sum((t.amount for t in transactions), Decimal("0"))


def compute_balance(
    initial_balance: Decimal,
    trades: Sequence[Trade],
    deposits: Decimal = Decimal("0"),
    withdrawals: Decimal = Decimal("0"),
) -> Decimal:
    """
    Project account balance.

    Args:
        initial_balance: Starting balance
        trades: Trades to count (caller selects the portfolio's trades)
        deposits: Total deposited
        withdrawals: Total withdrawn

    Returns:
        initial_balance + realized P&L + deposits - withdrawals

    Example:
        >>> # Closed trades with realized P&L totalling 250
        >>> compute_balance(Decimal("10000"), trades, Decimal("500"), Decimal("100"))
        Decimal('10650')
    """
    return initial_balance + realized_pnl(trades) + deposits - withdrawals


def compute_portfolio_balance(portfolio: Portfolio, trades: Sequence[Trade]) -> Decimal:
    """
    Project a portfolio's balance from its own records.

    Only trades whose portfolio_id matches the portfolio are counted, and the
    deposit and withdrawal histories are summed from the portfolio.
    """
    own_trades = [t for t in trades if t.portfolio_id == portfolio.portfolio_id]
    return compute_balance(
        initial_balance=portfolio.initial_balance,
        trades=own_trades,
        deposits=sum_transactions(portfolio.deposits),
        withdrawals=sum_transactions(portfolio.withdrawals),
    )
