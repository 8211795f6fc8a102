"""Performance metrics calculation functions.

Pure functions that aggregate journal trades into summary statistics.
Only closed trades carrying a realized P&L are counted; everything else
(open trades, closed trades never enriched) is ignored.

Edge cases:
- No qualifying trades: every field is zero, including profit_factor
- Wins but no losses: profit_factor is Decimal('Infinity')
- Zero-P&L trades count towards total_trades but are neither wins nor losses

Usage:
    >>> from tradejournal.libraries.performance.metrics import compute_performance_metrics
    >>> metrics = compute_performance_metrics(trades)
    >>> metrics.win_rate
    Decimal('40.0')
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Sequence

from tradejournal.journal.models import Trade
from tradejournal.libraries.performance.models import PerformanceMetrics

SECONDS_PER_DAY = Decimal("86400")


def realized_trades(trades: Sequence[Trade]) -> list[Trade]:
    """Closed trades that carry a realized P&L, in input order."""
    return [t for t in trades if t.is_closed and t.pnl is not None]


def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 timestamp or date.

    Values without a UTC offset (including bare dates) are read as UTC.
    """
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def hold_time_days(entry_date: str, exit_date: str) -> Decimal:
    """
    Calculate time between entry and exit in (fractional) days.

    Example:
        >>> hold_time_days("2025-01-01T00:00:00Z", "2025-01-02T12:00:00Z")
        Decimal('1.5')
    """
    delta = parse_timestamp(exit_date) - parse_timestamp(entry_date)
    seconds = Decimal(delta.days * 86400 + delta.seconds) + Decimal(delta.microseconds) / Decimal("1000000")
    return seconds / SECONDS_PER_DAY


def calculate_profit_factor(total_wins: Decimal, total_losses: Decimal) -> Decimal:
    """
    Calculate profit factor from gross profit and gross loss magnitudes.

    Args:
        total_wins: Sum of winning P&L (positive)
        total_losses: Sum of absolute losing P&L (positive)

    Returns:
        total_wins / total_losses; Decimal('Infinity') if there are wins but
        no losses; 0 if there are neither

    Example:
        >>> calculate_profit_factor(Decimal("130"), Decimal("60"))
        Decimal('2.166666666666666666666666667')
    """
    if total_losses > 0:
        return total_wins / total_losses
    if total_wins > 0:
        return Decimal("Infinity")
    return Decimal("0")


def compute_performance_metrics(trades: Sequence[Trade]) -> PerformanceMetrics:
    """
    Calculate aggregate performance statistics.

    Args:
        trades: Any journal trades; only closed trades with a realized P&L count

    Returns:
        PerformanceMetrics for the qualifying trades

    Example:
        >>> # Realized P&L of +100, -50, +30, -10, 0
        >>> metrics = compute_performance_metrics(trades)
        >>> (metrics.total_trades, metrics.winning_trades, metrics.losing_trades)
        (5, 2, 2)
        >>> metrics.total_pnl
        Decimal('70')
    """
    closed = realized_trades(trades)

    if not closed:
        return PerformanceMetrics()

    pnls: list[Decimal] = [t.pnl for t in closed if t.pnl is not None]
    wins = [pnl for pnl in pnls if pnl > 0]
    losses = [pnl for pnl in pnls if pnl < 0]

    total_pnl = sum(pnls, Decimal("0"))
    total_wins = sum(wins, Decimal("0"))
    total_losses = abs(sum(losses, Decimal("0")))

    win_rate = Decimal(len(wins)) / Decimal(len(closed)) * Decimal("100")
    average_win = total_wins / Decimal(len(wins)) if wins else Decimal("0")
    average_loss = total_losses / Decimal(len(losses)) if losses else Decimal("0")

    hold_times = [hold_time_days(t.entry_date, t.exit_date) for t in closed if t.exit_date]
    average_hold_time = sum(hold_times, Decimal("0")) / Decimal(len(hold_times)) if hold_times else Decimal("0")

    return PerformanceMetrics(
        total_pnl=total_pnl,
        total_trades=len(closed),
        winning_trades=len(wins),
        losing_trades=len(losses),
        win_rate=win_rate,
        average_win=average_win,
        average_loss=average_loss,
        profit_factor=calculate_profit_factor(total_wins, total_losses),
        best_trade=max(pnls),
        worst_trade=min(pnls),
        average_hold_time=average_hold_time,
    )
