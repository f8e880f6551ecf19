"""Derived previews composed from the core CLMSR operations."""

from collections.abc import Iterable
from decimal import Decimal

from src.pm_common.amounts import ZERO, decimal_context, quantize_amount
from src.pm_pricing.domain.models import MarketState, Position
from src.pm_pricing.engine.clmsr import calculate_open_cost, calculate_price


def calculate_multi_position_cost(state: MarketState, positions: Iterable[Position]) -> Decimal:
    """Sum of open costs, each priced against the same unmodified ``state``.

    Legs are independent, not sequential: two legs on the same outcome do
    not see each other's price impact. Use apply_open between legs to
    price a sequential multi-leg trade.
    """
    with decimal_context():
        return sum((calculate_open_cost(state, p) for p in positions), ZERO)


def calculate_potential_winnings(state: MarketState, position: Position) -> Decimal:
    """Expected payout at current prices. Not the guaranteed claim value."""
    price = calculate_price(state, position.outcome)
    with decimal_context():
        winnings = position.quantity * price
    return quantize_amount(winnings)


def calculate_risk_adjusted_return(state: MarketState, position: Position) -> Decimal:
    """(potential winnings - cost) / cost; 0 when cost is non-positive."""
    cost = calculate_open_cost(state, position)
    winnings = calculate_potential_winnings(state, position)
    if cost <= ZERO:
        return ZERO
    with decimal_context():
        ratio = (winnings - cost) / cost
    return quantize_amount(ratio)
