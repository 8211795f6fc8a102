"""Rich table formatters for CLI output."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from rich.table import Table

from tradejournal.journal.models import Trade
from tradejournal.libraries.performance.metrics import parse_timestamp
from tradejournal.libraries.performance.models import DailyPnL, PerformanceMetrics, SegmentPerformance

CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "CA$",
    "AUD": "A$",
}

HIDDEN_AMOUNT = "***"


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_currency(amount: Decimal, currency: str = "USD", hide_amounts: bool = False) -> str:
    """
    Format a money amount with two decimals and a thousands separator.

    Example:
        >>> format_currency(Decimal("-1234.5"))
        '-$1,234.50'
        >>> format_currency(Decimal("10"), "CHF")
        'CHF 10.00'
    """
    if hide_amounts:
        return HIDDEN_AMOUNT

    sign = "-" if amount < 0 else ""
    digits = f"{abs(amount):,.2f}"
    symbol = CURRENCY_SYMBOLS.get(currency.upper())
    if symbol is None:
        return f"{sign}{currency.upper()} {digits}"
    return f"{sign}{symbol}{digits}"


def format_percentage(value: Decimal, decimals: int = 2) -> str:
    """
    Format a percentage with an explicit sign for non-negative values.

    Example:
        >>> format_percentage(Decimal("10"))
        '+10.00%'
    """
    if value.is_nan():
        return "n/a"
    if value.is_infinite():
        return "+∞%" if value > 0 else "-∞%"
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.{decimals}f}%"


def format_profit_factor(value: Decimal) -> str:
    """Profit factor with two decimals, "∞" for the no-losses case."""
    if value.is_infinite():
        return "∞"
    return f"{value:.2f}"


def format_duration(days: Decimal) -> str:
    """
    Compact holding period: hours under a day, then days, weeks and months.

    Example:
        >>> format_duration(Decimal("0.5"))
        '12h'
        >>> format_duration(Decimal("45"))
        '2mo'
    """
    if days < 1:
        return f"{_round_half_up(days * 24)}h"
    if days < 7:
        return f"{_round_half_up(days)}d"
    if days < 30:
        return f"{_round_half_up(days / 7)}w"
    return f"{_round_half_up(days / 30)}mo"


def pnl_style(pnl: Decimal) -> str:
    """Rich style for a P&L value."""
    if pnl > 0:
        return "green"
    if pnl < 0:
        return "red"
    return "dim"


def create_metrics_table(
    metrics: PerformanceMetrics,
    title: str = "Performance",
    currency: str = "USD",
    hide_amounts: bool = False,
) -> Table:
    """
    Create a Rich table of aggregate performance metrics.

    Args:
        metrics: Computed metrics
        title: Table title
        currency: Currency code for money values
        hide_amounts: Mask money values

    Returns:
        Two-column Rich Table
    """
    table = Table(title=title)
    table.add_column("Metric", style="cyan", no_wrap=True)
    table.add_column("Value", style="white", justify="right")

    table.add_row(
        "Total P&L",
        format_currency(metrics.total_pnl, currency, hide_amounts),
        style=pnl_style(metrics.total_pnl),
    )
    table.add_row("Trades", str(metrics.total_trades))
    table.add_row("Winners / Losers", f"{metrics.winning_trades} / {metrics.losing_trades}")
    table.add_row("Win Rate", f"{metrics.win_rate:.1f}%")
    table.add_row("Average Win", format_currency(metrics.average_win, currency, hide_amounts))
    table.add_row("Average Loss", format_currency(metrics.average_loss, currency, hide_amounts))
    table.add_row("Profit Factor", format_profit_factor(metrics.profit_factor))
    table.add_row("Best Trade", format_currency(metrics.best_trade, currency, hide_amounts))
    table.add_row("Worst Trade", format_currency(metrics.worst_trade, currency, hide_amounts))
    table.add_row("Avg Hold Time", format_duration(metrics.average_hold_time) if metrics.total_trades else "-")
    return table


def create_daily_pnl_table(daily: Sequence[DailyPnL], currency: str = "USD", hide_amounts: bool = False) -> Table:
    """Create a Rich table with one row per exit day."""
    table = Table(title="Daily P&L")
    table.add_column("Date", style="cyan", no_wrap=True)
    table.add_column("Trades", style="magenta", justify="right")
    table.add_column("P&L", justify="right")

    for day in daily:
        table.add_row(
            day.date,
            str(day.trade_count),
            format_currency(day.pnl, currency, hide_amounts),
            style=pnl_style(day.pnl),
        )
    return table


def create_segment_table(
    title: str,
    segments: Sequence[SegmentPerformance],
    currency: str = "USD",
    hide_amounts: bool = False,
) -> Table:
    """Create a Rich table comparing trade cohorts."""
    table = Table(title=title)
    table.add_column("Segment", style="cyan", no_wrap=True)
    table.add_column("Trades", style="magenta", justify="right")
    table.add_column("Win Rate", justify="right")
    table.add_column("Profit Factor", justify="right")
    table.add_column("Total P&L", justify="right")

    for segment in segments:
        metrics = segment.metrics
        table.add_row(
            segment.label,
            str(metrics.total_trades),
            f"{metrics.win_rate:.1f}%",
            format_profit_factor(metrics.profit_factor),
            format_currency(metrics.total_pnl, currency, hide_amounts),
            style=pnl_style(metrics.total_pnl),
        )
    return table


def create_recent_trades_table(
    trades: Sequence[Trade],
    currency: str = "USD",
    hide_amounts: bool = False,
    date_format: str = "%m/%d/%Y",
) -> Table:
    """Create a Rich table of closed trades in the order given."""
    table = Table(title="Recent Trades")
    table.add_column("Exit", style="dim", no_wrap=True)
    table.add_column("Ticker", style="cyan", no_wrap=True)
    table.add_column("Side", style="white")
    table.add_column("Asset", style="white")
    table.add_column("P&L", justify="right")
    table.add_column("Return", justify="right")

    for trade in trades:
        pnl = trade.pnl if trade.pnl is not None else Decimal("0")
        table.add_row(
            parse_timestamp(trade.exit_date).strftime(date_format) if trade.exit_date else "-",
            trade.ticker,
            trade.direction.value,
            trade.asset_class.value,
            format_currency(pnl, currency, hide_amounts),
            format_percentage(trade.pnl_percentage) if trade.pnl_percentage is not None else "-",
            style=pnl_style(pnl),
        )
    return table
