"""Pydantic schemas at the pricing boundary.

Inputs arrive as raw strings from chain/indexer reads; outputs leave as
fixed-point decimal strings so no consumer re-parses through float.
"""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_validator

from src.pm_common.amounts import to_decimal
from src.pm_common.errors import InvalidAmountError


def _parse_amount(value: object) -> Decimal:
    try:
        return to_decimal(value)
    except InvalidAmountError as exc:
        raise ValueError(exc.message) from exc


def amount_str(value: Decimal) -> str:
    return format(value, "f")


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


class MarketParams(BaseModel):
    """Raw market parameters; domain rules are enforced by create_market_state."""

    model_config = ConfigDict(frozen=True)

    liquidity: Decimal
    outcomes: tuple[Decimal, ...]

    @field_validator("liquidity", mode="before")
    @classmethod
    def parse_liquidity(cls, v: object) -> Decimal:
        return _parse_amount(v)

    @field_validator("outcomes", mode="before")
    @classmethod
    def parse_outcomes(cls, v: object) -> tuple[Decimal, ...]:
        if isinstance(v, (str, bytes)) or not isinstance(v, (list, tuple)):
            raise ValueError("outcomes must be a list of amounts")
        return tuple(_parse_amount(item) for item in v)


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------


class OpenQuote(BaseModel):
    outcome: int
    quantity: str
    cost: str
    max_cost: str                   # cost widened by slippage; transaction upper bound
    price_before: str
    price_after: str
    potential_winnings: str
    risk_adjusted_return: str


class CloseQuote(BaseModel):
    outcome: int
    quantity: str
    proceeds: str
    min_proceeds: str               # proceeds narrowed by slippage; transaction lower bound
    price_before: str
    price_after: str | None         # None when the close empties the market


class BudgetQuote(BaseModel):
    outcome: int
    max_cost: str
    quantity: str
    cost: str
