"""Data models for journal records.

Defines the records the journal stores and the analytics consume:
- Trade: A logged trade with its asset-specific parameters
- TradeSetup: A planned trade with entry, stop and target
- Portfolio / Transaction: Account with deposit and withdrawal history
- Tag: Grouping label attached to trades
- UserSettings: Journal-wide defaults

Records are immutable. Updating a record means building a new one with
model_copy(update=...) or model_validate().
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AssetClass(str, Enum):
    """Traded asset class."""

    STOCK = "stock"
    OPTION = "option"
    FUTURE = "future"
    CRYPTO = "crypto"
    FOREX = "forex"


class Direction(str, Enum):
    """Trade direction."""

    LONG = "long"
    SHORT = "short"


class TradeStatus(str, Enum):
    """Trade lifecycle status."""

    OPEN = "open"
    CLOSED = "closed"


class SetupStatus(str, Enum):
    """Trade setup lifecycle status."""

    ACTIVE = "active"
    CONVERTED = "converted"
    CANCELLED = "cancelled"


class TagCategory(str, Enum):
    """Tag category."""

    STRATEGY = "strategy"
    SETUP = "setup"
    CONDITION = "condition"
    MISTAKE = "mistake"
    OTHER = "other"


# ==================== Asset parameters ====================


class StockParams(BaseModel):
    """Stock trade: P&L is price difference times shares."""

    asset_class: Literal["stock"] = "stock"

    model_config = ConfigDict(frozen=True)


class CryptoParams(BaseModel):
    """Crypto trade: P&L is price difference times units."""

    asset_class: Literal["crypto"] = "crypto"

    model_config = ConfigDict(frozen=True)


class OptionParams(BaseModel):
    """
    Option trade.

    Attributes:
        multiplier: Contract multiplier (100 when unset)
    """

    asset_class: Literal["option"] = "option"
    multiplier: Decimal | None = None

    model_config = ConfigDict(frozen=True)


class FutureParams(BaseModel):
    """
    Futures trade.

    Attributes:
        tick_value: Currency value of one tick (e.g. 12.50 for ES)
        tick_size: Minimum price increment (e.g. 0.25 for ES)

    Both are needed for tick-based P&L; with either missing the plain
    price-difference formula applies.
    """

    asset_class: Literal["future"] = "future"
    tick_value: Decimal | None = None
    tick_size: Decimal | None = None

    model_config = ConfigDict(frozen=True)


class ForexParams(BaseModel):
    """
    Forex trade.

    Attributes:
        pip_value: Currency value of one pip per lot
    """

    asset_class: Literal["forex"] = "forex"
    pip_value: Decimal | None = None

    model_config = ConfigDict(frozen=True)


AssetParams = Annotated[
    Union[StockParams, OptionParams, FutureParams, ForexParams, CryptoParams],
    Field(discriminator="asset_class"),
]

_ASSET_PARAM_FIELDS: dict[str, tuple[str, ...]] = {
    AssetClass.STOCK.value: (),
    AssetClass.CRYPTO.value: (),
    AssetClass.OPTION.value: ("multiplier",),
    AssetClass.FUTURE.value: ("tick_value", "tick_size"),
    AssetClass.FOREX.value: ("pip_value",),
}
_FLAT_PARAM_KEYS = ("multiplier", "tick_value", "tick_size", "pip_value")
_ASSET_VARIANTS: dict[str, type[BaseModel]] = {
    AssetClass.STOCK.value: StockParams,
    AssetClass.CRYPTO.value: CryptoParams,
    AssetClass.OPTION.value: OptionParams,
    AssetClass.FUTURE.value: FutureParams,
    AssetClass.FOREX.value: ForexParams,
}


def asset_params_for(asset_class: AssetClass | str, **params: Any) -> AssetParams:
    """
    Build the asset variant for an asset class from loose keyword parameters.

    Parameters that do not belong to the asset class are ignored.

    Example:
        >>> asset_params_for("future", tick_value=Decimal("12.5"), tick_size=Decimal("0.25"))
        FutureParams(asset_class='future', tick_value=Decimal('12.5'), tick_size=Decimal('0.25'))
    """
    key = AssetClass(asset_class).value
    relevant = {name: params[name] for name in _ASSET_PARAM_FIELDS[key] if params.get(name) is not None}
    return _ASSET_VARIANTS[key](**relevant)  # type: ignore[return-value]


# ==================== Records ====================


class Trade(BaseModel):
    """
    A logged trade.

    Attributes:
        trade_id: Unique identifier
        portfolio_id: Owning portfolio
        asset: Asset-class variant carrying only that class's parameters
        ticker: Instrument symbol
        direction: Long or short
        entry_date: ISO-8601 timestamp of entry
        entry_price: Entry price per unit
        exit_date: ISO-8601 timestamp of exit (None while open)
        exit_price: Exit price per unit (None while open)
        quantity: Shares, contracts, lots or units
        fees: Total fees for the round trip
        status: Open or closed
        pnl: Realized P&L (set by enrichment when closed)
        pnl_percentage: Percentage return (set by enrichment when closed)
        tags: Tag ids
        confidence: Trader confidence, 1-5

    Example:
        >>> trade = Trade(
        ...     trade_id="t-001",
        ...     portfolio_id="p-main",
        ...     asset=FutureParams(tick_value=Decimal("12.50"), tick_size=Decimal("0.25")),
        ...     ticker="ES",
        ...     direction=Direction.LONG,
        ...     entry_date="2025-03-03T14:30:00Z",
        ...     entry_price=Decimal("5800.00"),
        ...     quantity=Decimal("2"),
        ... )

    The flat record shape with top-level ``asset_class``, ``tick_value``,
    ``tick_size``, ``multiplier`` and ``pip_value`` keys is also accepted.
    """

    trade_id: str
    portfolio_id: str
    asset: AssetParams = Field(default_factory=StockParams)
    ticker: str
    direction: Direction
    entry_date: str
    entry_price: Decimal
    exit_date: str | None = None
    exit_price: Decimal | None = None
    quantity: Decimal
    fees: Decimal = Decimal("0")
    status: TradeStatus = TradeStatus.OPEN

    # Cached computed values
    pnl: Decimal | None = None
    pnl_percentage: Decimal | None = Field(default=None, allow_inf_nan=True)

    tags: list[str] = Field(default_factory=list)
    confidence: int | None = Field(default=None, ge=1, le=5)
    notes: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def lift_flat_asset_fields(cls, data: Any) -> Any:
        """Accept the flat record shape and fold it into the asset variant."""
        if not isinstance(data, dict) or "asset" in data or "asset_class" not in data:
            return data

        data = dict(data)
        asset_class = data.pop("asset_class")
        params = {key: data.pop(key) for key in _FLAT_PARAM_KEYS if key in data}
        data["asset"] = asset_params_for(asset_class, **params).model_dump()
        return data

    @property
    def asset_class(self) -> AssetClass:
        """Asset class of this trade."""
        return AssetClass(self.asset.asset_class)

    @property
    def is_closed(self) -> bool:
        """Trade is closed."""
        return self.status == TradeStatus.CLOSED


class TradeSetup(BaseModel):
    """
    A planned trade.

    Attributes:
        setup_id: Unique identifier
        portfolio_id: Owning portfolio
        ticker: Instrument symbol
        asset_class: Asset class
        direction: Long or short
        entry_price: Planned entry
        stop_loss: Planned stop
        target_price: Planned target
        position_size: Planned quantity
        risk_reward_ratio: Reward per unit of risk (derived)
        status: Active, converted or cancelled
        converted_trade_id: Trade created from this setup
    """

    setup_id: str
    portfolio_id: str
    ticker: str
    asset_class: AssetClass = AssetClass.STOCK
    direction: Direction
    entry_price: Decimal
    stop_loss: Decimal
    target_price: Decimal
    position_size: Decimal
    risk_reward_ratio: Decimal = Decimal("0")
    notes: str | None = None
    status: SetupStatus = SetupStatus.ACTIVE
    converted_trade_id: str | None = None
    created_at: str | None = None

    model_config = ConfigDict(frozen=True)


class Transaction(BaseModel):
    """Deposit or withdrawal."""

    transaction_id: str
    amount: Decimal
    date: str
    note: str | None = None

    model_config = ConfigDict(frozen=True)


class Portfolio(BaseModel):
    """
    Trading account.

    The current balance is never stored; it is derived from the initial
    balance, realized trade P&L and the transaction history.
    """

    portfolio_id: str
    name: str
    description: str | None = None
    initial_balance: Decimal
    currency: str = "USD"
    created_at: str | None = None
    deposits: list[Transaction] = Field(default_factory=list)
    withdrawals: list[Transaction] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class Tag(BaseModel):
    """Trade label. Only its id matters to analytics."""

    tag_id: str
    name: str
    color: str = "#6b7280"
    category: TagCategory = TagCategory.OTHER

    model_config = ConfigDict(frozen=True)


class UserSettings(BaseModel):
    """Journal-wide defaults."""

    default_asset_class: AssetClass = AssetClass.STOCK
    default_position_size: Decimal = Decimal("100")
    default_risk_amount: Decimal = Decimal("100")
    currency: str = "USD"
    date_format: str = "%m/%d/%Y"
    hide_amounts: bool = False
    default_tags: list[str] = Field(default_factory=list)
    favorite_tickers: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)
