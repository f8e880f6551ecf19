"""Precision-safe decimal helpers for the scoring-rule cost function.

Must be called inside ``decimal_context()``; results carry the context's
full precision and are quantized by the caller.
"""

from collections.abc import Iterable
from decimal import Decimal, getcontext

from src.pm_common.amounts import ZERO

# Below this magnitude exp(x) - 1 loses digits to cancellation; sum the series
_SERIES_CUTOFF = Decimal("0.5")


def expm1(x: Decimal) -> Decimal:
    """exp(x) - 1 without catastrophic cancellation for small |x|.

    Small trades against deep liquidity give exponents near zero, where
    ``x.exp() - 1`` would keep only a handful of significant digits.
    """
    if x == ZERO:
        return ZERO
    if abs(x) >= _SERIES_CUTOFF:
        return x.exp() - 1

    # Taylor series: x + x^2/2! + x^3/3! + ...
    eps = Decimal(10) ** -(getcontext().prec + 2)
    total = term = x
    n = 1
    while True:
        n += 1
        term = term * x / n
        if abs(term) <= abs(total) * eps:
            return +total
        total += term


def decimal_sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)
