"""Decimal amount utilities for the CLMSR pricing engine.

All liquidity, quantities, costs and prices are ``Decimal``. No float.
Amounts leaving the engine carry ``AMOUNT_DECIMALS`` fractional digits,
matching the on-chain token (RBTC, 18 decimals) so off-chain previews
agree with the contract's fixed-point results.
"""

from contextlib import AbstractContextManager
from decimal import (
    Context,
    Decimal,
    DivisionByZero,
    InvalidOperation,
    Overflow,
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    localcontext,
)

from config.settings import settings
from src.pm_common.errors import InvalidAmountError

ZERO = Decimal(0)
ONE = Decimal(1)

# Largest amount an on-chain uint256 can carry in base units
MAX_UINT256 = 2**256 - 1


def decimal_context() -> AbstractContextManager[Context]:
    """Private high-precision context; never touches the caller's context."""
    ctx = Context(
        prec=settings.DECIMAL_PRECISION,
        rounding=ROUND_HALF_EVEN,
        traps=[InvalidOperation, DivisionByZero, Overflow],
    )
    return localcontext(ctx)


def _scaled_context(value: Decimal, places: int) -> AbstractContextManager[Context]:
    """Context wide enough to hold ``value`` with ``places`` fractional digits."""
    ctx = Context(
        prec=max(settings.DECIMAL_PRECISION, value.adjusted() + places + 2),
        rounding=ROUND_HALF_EVEN,
        traps=[InvalidOperation, DivisionByZero, Overflow],
    )
    return localcontext(ctx)


def to_decimal(value: object) -> Decimal:
    """Parse a str/int/Decimal amount. Floats are rejected to keep results exact."""
    if isinstance(value, (bool, float)):
        raise InvalidAmountError(value)
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int):
        result = Decimal(value)
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise InvalidAmountError(value) from None
    else:
        raise InvalidAmountError(value)
    if not result.is_finite():
        raise InvalidAmountError(value)
    return result


def quantize_amount(
    value: Decimal,
    rounding: str = ROUND_HALF_EVEN,
    decimals: int | None = None,
) -> Decimal:
    """Round to the token scale (``AMOUNT_DECIMALS`` unless overridden)."""
    places = settings.AMOUNT_DECIMALS if decimals is None else decimals
    with _scaled_context(value, places):
        return value.quantize(ONE.scaleb(-places), rounding=rounding)


def max_amount(decimals: int | None = None) -> Decimal:
    """Largest token amount representable as uint256 base units."""
    places = settings.AMOUNT_DECIMALS if decimals is None else decimals
    return from_base_units(MAX_UINT256, places)


def format_value(value: Decimal, decimals: int = 6) -> str:
    """Fixed-point display string: Decimal('10.5170918') -> '10.517092'."""
    return format(quantize_amount(value, ROUND_HALF_UP, decimals), "f")


def to_base_units(value: object, decimals: int = 18) -> int:
    """Convert a decimal amount to integer base units (wei).

    Extra fractional digits are truncated, never rounded up.
    '1.5' -> 1500000000000000000
    """
    amount = to_decimal(value)
    with _scaled_context(amount, decimals):
        truncated = amount.quantize(ONE.scaleb(-decimals), rounding=ROUND_DOWN)
        return int(truncated.scaleb(decimals))


def from_base_units(units: int, decimals: int = 18) -> Decimal:
    """Convert integer base units back to a decimal amount."""
    amount = Decimal(units)
    with _scaled_context(amount, 0):
        return amount.scaleb(-decimals)


def format_base_units(units: int, decimals: int = 6) -> str:
    """Render base units without trailing zeros: 1500000 (6 dp) -> '1.5'."""
    text = format(from_base_units(units, decimals), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _validate_bps(bps: int) -> None:
    if not (0 <= bps <= 10000):
        raise ValueError(f"Basis points must be between 0 and 10000, got {bps}")


def widen_by_bps(amount: Decimal, bps: int) -> Decimal:
    """Upper transaction bound: amount * (1 + bps/10000), rounded up."""
    _validate_bps(bps)
    with decimal_context():
        widened = amount * (10000 + bps) / 10000
    return quantize_amount(widened, ROUND_CEILING)


def narrow_by_bps(amount: Decimal, bps: int) -> Decimal:
    """Lower transaction bound: amount * (1 - bps/10000), rounded down."""
    _validate_bps(bps)
    with decimal_context():
        narrowed = amount * (10000 - bps) / 10000
    return quantize_amount(narrowed, ROUND_FLOOR)
