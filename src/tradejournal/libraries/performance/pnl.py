"""Per-trade P&L arithmetic.

Pure functions for realized P&L, percentage return and risk/reward.
No input validation is done here: negative prices or quantities go through
the formulas unchanged, and division by zero produces Decimal infinities or
NaN rather than raising.

Sign convention (every asset class):
    long:  price_diff = exit - entry
    short: price_diff = entry - exit

Per-asset formulas:
    stock / crypto:  price_diff * quantity - fees
    option:          price_diff * quantity * multiplier - fees   (multiplier defaults to 100)
    future:          (price_diff / tick_size) * tick_value * quantity - fees
                     falls back to price_diff * quantity - fees without both tick parameters
    forex:           (price_diff * 10000) * quantity * pip_value - fees
                     falls back to price_diff * quantity - fees without a pip value

Usage:
    >>> from decimal import Decimal
    >>> from tradejournal.journal.models import FutureParams
    >>> compute_trade_pnl(
    ...     entry_price=Decimal("5800.00"),
    ...     exit_price=Decimal("5810.00"),
    ...     quantity=Decimal("2"),
    ...     direction="long",
    ...     fees=Decimal("4.50"),
    ...     asset=FutureParams(tick_value=Decimal("12.50"), tick_size=Decimal("0.25")),
    ... )
    Decimal('995.50')
"""

from decimal import Decimal, DivisionByZero, InvalidOperation, localcontext
from typing import Callable

from tradejournal.journal.models import (
    AssetClass,
    AssetParams,
    Direction,
    ForexParams,
    FutureParams,
    OptionParams,
    Trade,
    TradeSetup,
)

DEFAULT_OPTION_MULTIPLIER = Decimal("100")

# Price difference to pips under 4-decimal quoting
PIPS_PER_UNIT = Decimal("10000")


def ieee_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """
    Divide with IEEE-754 semantics instead of raising.

    x / 0 gives Decimal('Infinity') or Decimal('-Infinity'); 0 / 0 gives Decimal('NaN').
    """
    with localcontext() as ctx:
        ctx.traps[DivisionByZero] = False
        ctx.traps[InvalidOperation] = False
        return Decimal(numerator) / Decimal(denominator)


def price_difference(entry_price: Decimal, exit_price: Decimal, direction: Direction | str) -> Decimal:
    """Signed per-unit move in the trade's favour."""
    if direction == Direction.LONG:
        return exit_price - entry_price
    return entry_price - exit_price


def _simple_pnl(price_diff: Decimal, quantity: Decimal, fees: Decimal, asset: AssetParams | None) -> Decimal:
    return price_diff * quantity - fees


def _option_pnl(price_diff: Decimal, quantity: Decimal, fees: Decimal, asset: AssetParams | None) -> Decimal:
    assert isinstance(asset, OptionParams)
    multiplier = asset.multiplier or DEFAULT_OPTION_MULTIPLIER
    return price_diff * quantity * multiplier - fees


def _future_pnl(price_diff: Decimal, quantity: Decimal, fees: Decimal, asset: AssetParams | None) -> Decimal:
    assert isinstance(asset, FutureParams)
    if not (asset.tick_value and asset.tick_size):
        return price_diff * quantity - fees
    ticks = price_diff / asset.tick_size
    return ticks * asset.tick_value * quantity - fees


def _forex_pnl(price_diff: Decimal, quantity: Decimal, fees: Decimal, asset: AssetParams | None) -> Decimal:
    assert isinstance(asset, ForexParams)
    if not asset.pip_value:
        return price_diff * quantity - fees
    return (price_diff * PIPS_PER_UNIT) * quantity * asset.pip_value - fees


PnLRule = Callable[[Decimal, Decimal, Decimal, "AssetParams | None"], Decimal]

PNL_RULES: dict[AssetClass, PnLRule] = {
    AssetClass.STOCK: _simple_pnl,
    AssetClass.CRYPTO: _simple_pnl,
    AssetClass.OPTION: _option_pnl,
    AssetClass.FUTURE: _future_pnl,
    AssetClass.FOREX: _forex_pnl,
}


def compute_trade_pnl(
    entry_price: Decimal,
    exit_price: Decimal,
    quantity: Decimal,
    direction: Direction | str,
    fees: Decimal = Decimal("0"),
    asset: AssetParams | None = None,
) -> Decimal:
    """
    Calculate realized P&L for a round trip.

    Args:
        entry_price: Entry price per unit
        exit_price: Exit price per unit
        quantity: Units traded (shares, contracts, lots)
        direction: "long" or "short"
        fees: Total fees, subtracted once
        asset: Asset-class variant with its parameters (None = plain formula)

    Returns:
        Signed P&L in account currency

    Example:
        >>> compute_trade_pnl(Decimal("100"), Decimal("110"), Decimal("10"), "long", Decimal("1"))
        Decimal('99')
        >>> compute_trade_pnl(Decimal("2.50"), Decimal("3.00"), Decimal("2"), "long", asset=OptionParams())
        Decimal('100.00')
    """
    price_diff = price_difference(entry_price, exit_price, direction)

    if asset is None:
        return _simple_pnl(price_diff, quantity, fees, None)

    rule = PNL_RULES[AssetClass(asset.asset_class)]
    return rule(price_diff, quantity, fees, asset)


def compute_pnl_percentage(entry_price: Decimal, exit_price: Decimal, direction: Direction | str) -> Decimal:
    """
    Calculate percentage return relative to entry price.

    Args:
        entry_price: Entry price per unit
        exit_price: Exit price per unit
        direction: "long" or "short"

    Returns:
        Return as percentage (e.g. 10 for 10%). A zero entry price gives
        Decimal('Infinity'), Decimal('-Infinity') or Decimal('NaN').

    Example:
        >>> compute_pnl_percentage(Decimal("100"), Decimal("110"), "long")
        Decimal('10.0')
    """
    price_diff = price_difference(entry_price, exit_price, direction)
    return ieee_divide(price_diff, entry_price) * Decimal("100")


def compute_risk_reward(
    entry_price: Decimal,
    stop_loss: Decimal,
    target_price: Decimal,
    direction: Direction | str,
) -> Decimal:
    """
    Calculate reward-to-risk ratio of a planned trade.

    Args:
        entry_price: Planned entry
        stop_loss: Planned stop
        target_price: Planned target
        direction: "long" or "short"

    Returns:
        reward / risk, or 0 when the stop is not on the losing side of entry

    Example:
        >>> compute_risk_reward(Decimal("100"), Decimal("90"), Decimal("130"), "long")
        Decimal('3')
    """
    if direction == Direction.LONG:
        risk = entry_price - stop_loss
        reward = target_price - entry_price
    else:
        risk = stop_loss - entry_price
        reward = entry_price - target_price

    if risk <= 0:
        return Decimal("0")

    return reward / risk


# ==================== Record helpers ====================


def trade_pnl(trade: Trade) -> Decimal | None:
    """Realized P&L of a trade, or None unless it is closed with an exit price."""
    if not trade.is_closed or trade.exit_price is None:
        return None
    return compute_trade_pnl(
        entry_price=trade.entry_price,
        exit_price=trade.exit_price,
        quantity=trade.quantity,
        direction=trade.direction,
        fees=trade.fees,
        asset=trade.asset,
    )


def trade_pnl_percentage(trade: Trade) -> Decimal | None:
    """Percentage return of a trade, or None unless it is closed with an exit price."""
    if not trade.is_closed or trade.exit_price is None:
        return None
    return compute_pnl_percentage(trade.entry_price, trade.exit_price, trade.direction)


def same_amount(a: Decimal | None, b: Decimal | None) -> bool:
    """Equality for cached amounts where NaN equals NaN."""
    if a is None or b is None:
        return a is b
    if a.is_nan() or b.is_nan():
        return a.is_nan() and b.is_nan()
    return a == b


def is_enriched(trade: Trade) -> bool:
    """True when the cached P&L fields already hold their computed values."""
    return same_amount(trade.pnl, trade_pnl(trade)) and same_amount(
        trade.pnl_percentage, trade_pnl_percentage(trade)
    )


def enrich_trade(trade: Trade) -> Trade:
    """
    Return a copy of the trade with its cached P&L fields brought up to date.

    Closed trades with an exit price get pnl and pnl_percentage; any other
    trade has both cleared. Enriching an enriched trade changes nothing
    (is_enriched holds for the result, including a NaN percentage).
    """
    return trade.model_copy(
        update={
            "pnl": trade_pnl(trade),
            "pnl_percentage": trade_pnl_percentage(trade),
        }
    )


def enrich_setup(setup: TradeSetup) -> TradeSetup:
    """Return a copy of the setup with its risk/reward ratio recomputed."""
    ratio = compute_risk_reward(setup.entry_price, setup.stop_loss, setup.target_price, setup.direction)
    return setup.model_copy(update={"risk_reward_ratio": ratio})


def setup_risk_amount(setup: TradeSetup) -> Decimal:
    """Currency at risk if the stop is hit: |entry - stop| * position size."""
    return abs(setup.entry_price - setup.stop_loss) * setup.position_size


def setup_reward_amount(setup: TradeSetup) -> Decimal:
    """Currency gained if the target is hit: |target - entry| * position size."""
    return abs(setup.target_price - setup.entry_price) * setup.position_size
