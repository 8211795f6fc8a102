"""Trade performance analytics library.

1. **Models** (`models.py`): Pydantic result structures
   - PerformanceMetrics, DailyPnL, CumulativePnLPoint, SegmentPerformance

2. **P&L** (`pnl.py`): Per-trade arithmetic
   - compute_trade_pnl (per asset class), compute_pnl_percentage,
     compute_risk_reward, enrich_trade, enrich_setup

3. **Metrics** (`metrics.py`): Aggregate statistics
   - compute_performance_metrics

4. **Series** (`series.py`): Time series
   - compute_daily_pnl, compute_cumulative_pnl

5. **Grouping** (`grouping.py`): Cohorts
   - group_by_tag, group_by_asset_class, group_by_portfolio, segment_performance

6. **Balance** (`balance.py`): compute_balance, compute_portfolio_balance

7. **Filters** (`filters.py`): TradeFilter, filter_trades, sort_trades, date_range_filter

Design Principles:
    - Pure functions: no state, inputs never mutated
    - Decimal precision for money
    - Explicit edge cases: empty input gives zero results, division by zero
      gives Decimal infinities/NaN, missing asset parameters use fallback formulas
"""

from tradejournal.libraries.performance.balance import (
    compute_balance,
    compute_portfolio_balance,
    realized_pnl,
    sum_transactions,
)
from tradejournal.libraries.performance.filters import (
    TradeFilter,
    date_range_filter,
    filter_trades,
    sort_trades,
)
from tradejournal.libraries.performance.grouping import (
    group_by_asset_class,
    group_by_portfolio,
    group_by_tag,
    segment_performance,
)
from tradejournal.libraries.performance.metrics import compute_performance_metrics
from tradejournal.libraries.performance.models import (
    CumulativePnLPoint,
    DailyPnL,
    PerformanceMetrics,
    SegmentPerformance,
)
from tradejournal.libraries.performance.pnl import (
    compute_pnl_percentage,
    compute_risk_reward,
    compute_trade_pnl,
    enrich_setup,
    enrich_trade,
    is_enriched,
)
from tradejournal.libraries.performance.series import compute_cumulative_pnl, compute_daily_pnl

__all__ = [
    # Models
    "PerformanceMetrics",
    "DailyPnL",
    "CumulativePnLPoint",
    "SegmentPerformance",
    # P&L
    "compute_trade_pnl",
    "compute_pnl_percentage",
    "compute_risk_reward",
    "enrich_trade",
    "is_enriched",
    "enrich_setup",
    # Aggregation
    "compute_performance_metrics",
    # Series
    "compute_daily_pnl",
    "compute_cumulative_pnl",
    # Grouping
    "group_by_tag",
    "group_by_asset_class",
    "group_by_portfolio",
    "segment_performance",
    # Balance
    "compute_balance",
    "compute_portfolio_balance",
    "realized_pnl",
    "sum_transactions",
    # Filters
    "TradeFilter",
    "filter_trades",
    "sort_trades",
    "date_range_filter",
]
