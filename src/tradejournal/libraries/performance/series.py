"""P&L time series.

Pure functions deriving daily and cumulative P&L from closed trades.

The calendar day of a trade is the part of its exit_date before "T". No
timezone conversion is applied, so a trade is filed under the day written in
its own timestamp.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Sequence

from tradejournal.journal.models import Trade
from tradejournal.libraries.performance.models import CumulativePnLPoint, DailyPnL


def _dated_realized_trades(trades: Sequence[Trade]) -> list[Trade]:
    return [t for t in trades if t.is_closed and t.exit_date and t.pnl is not None]


def exit_day(trade: Trade) -> str:
    """Calendar-day key (YYYY-MM-DD) of a trade's exit timestamp."""
    assert trade.exit_date is not None
    return trade.exit_date.split("T")[0]


def compute_daily_pnl(trades: Sequence[Trade]) -> list[DailyPnL]:
    """
    Sum realized P&L per exit day.

    Args:
        trades: Any journal trades; closed trades with exit date and P&L count

    Returns:
        One DailyPnL per day with exits, ascending by date

    Example:
        >>> # Two trades exiting 2025-01-15 with P&L +20 and -5
        >>> compute_daily_pnl(trades)
        [DailyPnL(date='2025-01-15', pnl=Decimal('15'), trade_count=2)]
    """
    pnl_by_day: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    count_by_day: dict[str, int] = defaultdict(int)

    for trade in _dated_realized_trades(trades):
        day = exit_day(trade)
        pnl_by_day[day] += trade.pnl  # type: ignore[operator]
        count_by_day[day] += 1

    return [
        DailyPnL(date=day, pnl=pnl_by_day[day], trade_count=count_by_day[day])
        for day in sorted(pnl_by_day)
    ]


def compute_cumulative_pnl(trades: Sequence[Trade]) -> list[CumulativePnLPoint]:
    """
    Running total of realized P&L in exit order.

    Trades are ordered by their full exit timestamp string (stable for ties)
    and each trade adds one point, so several exits on one day give several
    points.

    Example:
        >>> # Exits in order with P&L +10, -5, +20
        >>> [p.cumulative for p in compute_cumulative_pnl(trades)]
        [Decimal('10'), Decimal('5'), Decimal('25')]
    """
    ordered = sorted(_dated_realized_trades(trades), key=lambda t: t.exit_date or "")

    points: list[CumulativePnLPoint] = []
    cumulative = Decimal("0")
    for trade in ordered:
        cumulative += trade.pnl  # type: ignore[operator]
        points.append(CumulativePnLPoint(date=trade.exit_date or "", cumulative=cumulative))

    return points
