"""CLI UI components - table builders and value formatters."""

from tradejournal.cli.ui.formatters import (
    create_daily_pnl_table,
    create_metrics_table,
    create_recent_trades_table,
    create_segment_table,
    format_currency,
    format_duration,
    format_percentage,
    format_profit_factor,
)

__all__ = [
    "create_metrics_table",
    "create_daily_pnl_table",
    "create_segment_table",
    "create_recent_trades_table",
    "format_currency",
    "format_percentage",
    "format_profit_factor",
    "format_duration",
]
