"""CLMSR (Continuous Logarithmic Market Scoring Rule) pricing engine.

Pure functions over an immutable MarketState. For a single-outcome trade
that moves the outcome sum from S_old to S_new:

    open cost  = b * (exp((S_new - S_old) / b) - 1)
    proceeds   = b * (exp((S_old - S_new) / b) - 1)
    price_i    = q_i / sum(q)

Rounding to the token scale:
    costs     -> ROUND_CEILING (the market never undercharges)
    proceeds  -> ROUND_FLOOR   (the market never overpays)
    prices    -> ROUND_HALF_EVEN

Cost and proceeds are strictly increasing in quantity only down to the
token scale: quantities closer together than 1e-18 can round to the same
amount (1e-20 and 2e-20 both cost 1e-18). Amounts that would not fit in
uint256 base units raise TradeTooLargeError.
"""

import logging
from collections.abc import Mapping
from decimal import ROUND_CEILING, ROUND_FLOOR, Decimal, Overflow

from config.settings import settings
from src.pm_common.amounts import (
    ZERO,
    decimal_context,
    max_amount,
    quantize_amount,
    to_decimal,
)
from src.pm_common.errors import (
    InsufficientOutcomeLiquidityError,
    InsufficientOutcomesError,
    InvalidAmountError,
    InvalidOutcomeError,
    InvalidQuantityError,
    LiquidityTooLowError,
    MarketNotSeededError,
    NegativeOutcomeError,
    TradeTooLargeError,
)
from src.pm_pricing.domain.models import MarketState, Position
from src.pm_pricing.engine.math_utils import decimal_sum, expm1

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------


def ensure_outcome_in_range(state: MarketState, outcome: int) -> None:
    """Raise InvalidOutcomeError(5101) unless 0 <= outcome < len(outcomes)."""
    count = len(state.outcomes)
    if isinstance(outcome, bool) or not isinstance(outcome, int) or not (0 <= outcome < count):
        raise InvalidOutcomeError(outcome, count)


def ensure_positive_quantity(quantity: Decimal) -> None:
    if not quantity > ZERO:
        raise InvalidQuantityError(quantity)


def _ensure_positive_liquidity(state: MarketState) -> None:
    if not state.liquidity > ZERO:
        raise LiquidityTooLowError(state.liquidity, settings.MIN_LIQUIDITY)


# ---------------------------------------------------------------------------
# State transitions (return a fresh MarketState)
# ---------------------------------------------------------------------------


def apply_open(state: MarketState, position: Position) -> MarketState:
    """State after adding position.quantity to its outcome."""
    ensure_outcome_in_range(state, position.outcome)
    ensure_positive_quantity(position.quantity)
    with decimal_context():
        return state.with_outcomes(
            q + position.quantity if i == position.outcome else q
            for i, q in enumerate(state.outcomes)
        )


def apply_decrease(state: MarketState, position: Position) -> MarketState:
    """State after removing position.quantity from its outcome.

    The holdings check runs here, before any exponential is evaluated.
    """
    ensure_outcome_in_range(state, position.outcome)
    ensure_positive_quantity(position.quantity)
    available = state.outcomes[position.outcome]
    if available < position.quantity:
        raise InsufficientOutcomeLiquidityError(position.outcome, available, position.quantity)
    with decimal_context():
        return state.with_outcomes(
            q - position.quantity if i == position.outcome else q
            for i, q in enumerate(state.outcomes)
        )


# ---------------------------------------------------------------------------
# Cost / proceeds / claim
# ---------------------------------------------------------------------------


def _scoring_rule_amount(
    liquidity: Decimal, sum_delta: Decimal, position: Position
) -> Decimal:
    """b * (exp(delta / b) - 1), unrounded. Must run inside decimal_context()."""
    try:
        amount = liquidity * expm1(sum_delta / liquidity)
    except Overflow:
        raise TradeTooLargeError(position.outcome, position.quantity) from None
    if amount > max_amount():
        raise TradeTooLargeError(position.outcome, position.quantity)
    return amount


def calculate_open_cost(state: MarketState, position: Position) -> Decimal:
    """Cost of adding position.quantity to outcomes[position.outcome]."""
    new_state = apply_open(state, position)
    _ensure_positive_liquidity(state)
    with decimal_context():
        old_sum = decimal_sum(state.outcomes)
        new_sum = decimal_sum(new_state.outcomes)
        cost = _scoring_rule_amount(state.liquidity, new_sum - old_sum, position)
    return quantize_amount(cost, ROUND_CEILING)


def calculate_increase_cost(state: MarketState, position: Position) -> Decimal:
    """Increasing an existing position is the same trade as opening one."""
    return calculate_open_cost(state, position)


def calculate_decrease_proceeds(state: MarketState, position: Position) -> Decimal:
    """Proceeds of removing position.quantity from outcomes[position.outcome]."""
    new_state = apply_decrease(state, position)
    _ensure_positive_liquidity(state)
    with decimal_context():
        old_sum = decimal_sum(state.outcomes)
        new_sum = decimal_sum(new_state.outcomes)
        proceeds = _scoring_rule_amount(state.liquidity, old_sum - new_sum, position)
    return quantize_amount(proceeds, ROUND_FLOOR)


def calculate_close_proceeds(state: MarketState, position: Position) -> Decimal:
    """Closing sells the full held quantity carried by ``position``."""
    return calculate_decrease_proceeds(state, position)


def calculate_claim(state: MarketState, position: Position) -> Decimal:
    """Settlement payout: the winning quantity, 1:1. Independent of liquidity."""
    ensure_outcome_in_range(state, position.outcome)
    return position.quantity


# ---------------------------------------------------------------------------
# Price / totals
# ---------------------------------------------------------------------------


def calculate_total_liquidity(state: MarketState) -> Decimal:
    with decimal_context():
        return decimal_sum(state.outcomes)


def calculate_price(state: MarketState, outcome: int) -> Decimal:
    """Outcome's share of total accumulated quantity, in [0, 1]."""
    ensure_outcome_in_range(state, outcome)
    total = calculate_total_liquidity(state)
    if total == ZERO:
        raise MarketNotSeededError()
    with decimal_context():
        price = state.outcomes[outcome] / total
    return quantize_amount(price)


# ---------------------------------------------------------------------------
# Validation / construction
# ---------------------------------------------------------------------------


def validate_market_state(state: MarketState) -> bool:
    """Structural re-check for states from untrusted sources.

    liquidity > 0, at least 2 outcomes, no negative outcome. MIN_LIQUIDITY
    is a construction rule and is not checked here.
    """
    if not state.liquidity > ZERO:
        return False
    if len(state.outcomes) < 2:
        return False
    return all(q >= ZERO for q in state.outcomes)


def _param(params: object, name: str) -> object:
    if isinstance(params, Mapping):
        return params[name]
    return getattr(params, name)


def create_market_state(params: object) -> MarketState:
    """Build a validated MarketState from raw string/Decimal params.

    ``params`` is a MarketParams model or a mapping with ``liquidity`` and
    ``outcomes`` keys.
    """
    raw_outcomes = _param(params, "outcomes")
    if isinstance(raw_outcomes, (str, bytes)):
        raise InvalidAmountError(raw_outcomes)

    liquidity = to_decimal(_param(params, "liquidity"))
    outcomes = tuple(to_decimal(v) for v in raw_outcomes)

    minimum = to_decimal(settings.MIN_LIQUIDITY)
    if liquidity < minimum:
        raise LiquidityTooLowError(liquidity, minimum)
    if len(outcomes) < 2:
        raise InsufficientOutcomesError(len(outcomes))
    for index, value in enumerate(outcomes):
        if value < ZERO:
            raise NegativeOutcomeError(index, value)

    logger.debug("Market state created: liquidity=%s, outcomes=%d", liquidity, len(outcomes))
    return MarketState(liquidity=liquidity, outcomes=outcomes)
