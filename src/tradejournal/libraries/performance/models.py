"""Performance analytics data models.

Pydantic models for computed analytics. None of these are persisted; they
are rebuilt from journal records every time they are needed.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class PerformanceMetrics(BaseModel):
    """
    Aggregate statistics over a set of closed trades.

    Attributes:
        total_pnl: Sum of realized P&L
        total_trades: Closed trades with a realized P&L
        winning_trades: Trades with P&L > 0
        losing_trades: Trades with P&L < 0 (zero P&L is neither)
        win_rate: winning_trades / total_trades as percentage (0-100)
        average_win: Mean P&L of winners
        average_loss: Mean absolute P&L of losers (positive)
        profit_factor: Gross profit / gross loss; Decimal('Infinity') when
            there are wins and no losses
        best_trade: Largest P&L
        worst_trade: Smallest P&L
        average_hold_time: Mean entry-to-exit time in days
    """

    total_pnl: Decimal = Decimal("0")
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: Decimal = Decimal("0")
    average_win: Decimal = Decimal("0")
    average_loss: Decimal = Decimal("0")
    profit_factor: Decimal = Field(default=Decimal("0"), allow_inf_nan=True)
    best_trade: Decimal = Decimal("0")
    worst_trade: Decimal = Decimal("0")
    average_hold_time: Decimal = Decimal("0")

    model_config = ConfigDict(frozen=True)

    @property
    def has_unbounded_profit_factor(self) -> bool:
        """Profit factor is the no-losses sentinel."""
        return self.profit_factor.is_infinite()


class DailyPnL(BaseModel):
    """P&L of all trades exiting on one calendar day (YYYY-MM-DD)."""

    date: str
    pnl: Decimal
    trade_count: int

    model_config = ConfigDict(frozen=True)


class CumulativePnLPoint(BaseModel):
    """Running P&L total after one trade, keyed by that trade's exit timestamp."""

    date: str
    cumulative: Decimal

    model_config = ConfigDict(frozen=True)


class SegmentPerformance(BaseModel):
    """
    Metrics for one cohort of trades.

    Used for comparative analytics (per tag, per asset class, per portfolio).

    Attributes:
        key: Group key (tag id, asset class, portfolio id)
        label: Display name for the key
        metrics: Performance of the cohort
    """

    key: str
    label: str
    metrics: PerformanceMetrics

    model_config = ConfigDict(frozen=True)
