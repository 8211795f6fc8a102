"""Trade list filtering and sorting.

Pure functions behind the journal's trade list: criteria filtering, sort
orders and relative date-range presets. Date bounds are compared as ISO
strings against entry_date.
"""

import calendar
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field

from tradejournal.journal.models import AssetClass, Direction, Trade, TradeStatus

SortKey = Literal["date", "ticker", "pnl", "pnl_percentage"]
DateRangePreset = Literal["today", "week", "month", "year", "all"]


class TradeFilter(BaseModel):
    """
    Trade list criteria. Unset criteria match everything.

    Attributes:
        asset_class: Only this asset class
        status: Only open or only closed trades
        direction: Only long or only short trades
        date_from: entry_date >= date_from (string comparison)
        date_to: entry_date <= date_to (string comparison)
        tags: Trade carries at least one of these tag ids
        search_query: Case-insensitive substring of ticker or notes
    """

    asset_class: AssetClass | None = None
    status: TradeStatus | None = None
    direction: Direction | None = None
    date_from: str | None = None
    date_to: str | None = None
    tags: list[str] = Field(default_factory=list)
    search_query: str | None = None

    model_config = ConfigDict(frozen=True)

    def matches(self, trade: Trade) -> bool:
        """Check whether a trade satisfies every set criterion."""
        if self.asset_class is not None and trade.asset_class != self.asset_class:
            return False
        if self.status is not None and trade.status != self.status:
            return False
        if self.direction is not None and trade.direction != self.direction:
            return False
        if self.date_from and trade.entry_date < self.date_from:
            return False
        if self.date_to and trade.entry_date > self.date_to:
            return False
        if self.tags and not any(tag in trade.tags for tag in self.tags):
            return False
        if self.search_query:
            query = self.search_query.lower()
            in_ticker = query in trade.ticker.lower()
            in_notes = trade.notes is not None and query in trade.notes.lower()
            if not (in_ticker or in_notes):
                return False
        return True


def filter_trades(trades: Sequence[Trade], filters: TradeFilter) -> list[Trade]:
    """Trades matching the filter, in input order."""
    return [t for t in trades if filters.matches(t)]


def sort_trades(trades: Sequence[Trade], sort_by: SortKey, ascending: bool = True) -> list[Trade]:
    """
    Sort trades into a new list.

    Args:
        trades: Trades to sort
        sort_by: "date" (exit date, else entry date), "ticker" (case-insensitive),
            "pnl" or "pnl_percentage" (missing values sort as 0, NaN last)
        ascending: Sort direction

    Returns:
        Sorted copy; trades comparing equal keep their input order
    """
    if sort_by == "date":
        return sorted(trades, key=lambda t: t.exit_date or t.entry_date, reverse=not ascending)
    if sort_by == "ticker":
        return sorted(trades, key=lambda t: t.ticker.casefold(), reverse=not ascending)
    if sort_by == "pnl":
        return sorted(trades, key=lambda t: t.pnl if t.pnl is not None else Decimal("0"), reverse=not ascending)
    if sort_by == "pnl_percentage":
        # NaN has no order; those trades go last in either direction
        undefined = [t for t in trades if t.pnl_percentage is not None and t.pnl_percentage.is_nan()]
        ordered = sorted(
            (t for t in trades if t.pnl_percentage is None or not t.pnl_percentage.is_nan()),
            key=lambda t: t.pnl_percentage if t.pnl_percentage is not None else Decimal("0"),
            reverse=not ascending,
        )
        return ordered + undefined
    raise ValueError(f"Unknown sort key: {sort_by}")


def _iso_midnight(day: date) -> str:
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.000Z")


def _shift_months(day: date, months: int) -> date:
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def date_range_filter(preset: DateRangePreset, today: date) -> TradeFilter:
    """
    Build an entry-date filter for a relative range ending today.

    Args:
        preset: "today", "week" (last 7 days), "month" (since the same day last
            month), "year" (since the same day last year) or "all"
        today: Reference day

    Returns:
        TradeFilter with date_from (and date_to for "today") set

    Example:
        >>> date_range_filter("week", date(2025, 3, 15)).date_from
        '2025-03-08T00:00:00.000Z'
    """
    if preset == "today":
        return TradeFilter(date_from=_iso_midnight(today), date_to=_iso_midnight(today + timedelta(days=1)))
    if preset == "week":
        return TradeFilter(date_from=_iso_midnight(today - timedelta(days=7)))
    if preset == "month":
        return TradeFilter(date_from=_iso_midnight(_shift_months(today, -1)))
    if preset == "year":
        return TradeFilter(date_from=_iso_midnight(_shift_months(today, -12)))
    return TradeFilter()
