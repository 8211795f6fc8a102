"""Trade grouping and cohort comparison.

Grouping functions re-bucket trades without dropping or deduplicating any:
a trade with several tags appears in each of its tag groups. Within a group,
trades keep their input order, and groups appear in order of first sight.
"""

from typing import Hashable, Mapping, Sequence, TypeVar

from tradejournal.journal.models import AssetClass, Trade
from tradejournal.libraries.performance.metrics import compute_performance_metrics
from tradejournal.libraries.performance.models import SegmentPerformance

K = TypeVar("K", bound=Hashable)

UNKNOWN_LABEL = "Unknown"


def group_by_tag(trades: Sequence[Trade]) -> dict[str, list[Trade]]:
    """Map each tag id to the trades carrying it."""
    grouped: dict[str, list[Trade]] = {}
    for trade in trades:
        for tag_id in trade.tags:
            grouped.setdefault(tag_id, []).append(trade)
    return grouped


def group_by_asset_class(trades: Sequence[Trade]) -> dict[AssetClass, list[Trade]]:
    """Map each asset class to its trades."""
    grouped: dict[AssetClass, list[Trade]] = {}
    for trade in trades:
        grouped.setdefault(trade.asset_class, []).append(trade)
    return grouped


def group_by_portfolio(trades: Sequence[Trade]) -> dict[str, list[Trade]]:
    """Map each portfolio id to its trades."""
    grouped: dict[str, list[Trade]] = {}
    for trade in trades:
        grouped.setdefault(trade.portfolio_id, []).append(trade)
    return grouped


def _key_text(key: Hashable) -> str:
    if isinstance(key, AssetClass):
        return key.value
    return str(key)


def segment_performance(
    groups: Mapping[K, Sequence[Trade]],
    labels: Mapping[str, str] | None = None,
    rank_by_pnl: bool = True,
) -> list[SegmentPerformance]:
    """
    Calculate performance metrics for each group.

    Args:
        groups: Output of one of the group_by_* functions
        labels: Optional display names by group key (e.g. tag id -> tag name).
            When given, keys missing from it are labelled "Unknown"; when
            omitted, the key itself is the label.
        rank_by_pnl: Order segments by total P&L; when False they keep
            group order

    Returns:
        One SegmentPerformance per group, highest total P&L first
        (groups with equal totals keep their input order)

    Example:
        >>> segments = segment_performance(group_by_tag(trades), labels={"tag-1": "Breakout"})
        >>> [(s.label, s.metrics.total_pnl) for s in segments]
        [('Breakout', Decimal('250')), ('Unknown', Decimal('-40'))]
    """
    segments: list[SegmentPerformance] = []
    for key, members in groups.items():
        key_text = _key_text(key)
        if labels is None:
            label = key_text
        else:
            label = labels.get(key_text, UNKNOWN_LABEL)
        segments.append(
            SegmentPerformance(
                key=key_text,
                label=label,
                metrics=compute_performance_metrics(members),
            )
        )

    if not rank_by_pnl:
        return segments
    return sorted(segments, key=lambda s: s.metrics.total_pnl, reverse=True)
