"""Budget-bounded quantity search over the CLMSR open cost.

Open cost is strictly increasing and convex in quantity, so the largest
affordable quantity is found by bisection on [0, max_cost * multiplier].
The iteration cap bounds latency deterministically even when numeric noise
near the budget boundary prevents the interval from closing.
"""

import logging
from decimal import ROUND_FLOOR, Decimal

from config.settings import settings
from src.pm_common.amounts import ZERO, decimal_context, quantize_amount, to_decimal
from src.pm_common.errors import PricingError
from src.pm_pricing.domain.models import MarketState, Position
from src.pm_pricing.engine.clmsr import calculate_open_cost, ensure_outcome_in_range

logger = logging.getLogger(__name__)


def _within_budget(state: MarketState, outcome: int, quantity: Decimal, budget: Decimal) -> bool:
    try:
        cost = calculate_open_cost(state, Position(outcome=outcome, quantity=quantity))
    except PricingError as exc:
        # A rejected midpoint counts as over budget; the search stays total
        logger.debug("Search midpoint %s rejected: %s", quantity, exc.message)
        return False
    return cost <= budget


def calculate_quantity_from_cost(
    state: MarketState,
    outcome: int,
    max_cost: Decimal | str | int,
    *,
    tolerance: Decimal | str | None = None,
    max_iterations: int | None = None,
    upper_bound_multiplier: int | None = None,
) -> Decimal:
    """Largest quantity whose open cost stays within ``max_cost``.

    Returns 0 without searching when ``max_cost <= 0``, and 0 when even a
    minimal trade exceeds the budget. The result is rounded down to the
    token scale, so its cost never exceeds the budget.
    """
    ensure_outcome_in_range(state, outcome)
    budget = to_decimal(max_cost)
    if budget <= ZERO:
        return ZERO

    tol = to_decimal(settings.SEARCH_TOLERANCE if tolerance is None else tolerance)
    cap = settings.SEARCH_MAX_ITERATIONS if max_iterations is None else max_iterations
    multiplier = (
        settings.SEARCH_UPPER_BOUND_MULTIPLIER
        if upper_bound_multiplier is None
        else upper_bound_multiplier
    )

    with decimal_context():
        low = ZERO
        high = budget * multiplier
        best = ZERO
        iterations = 0
        while high - low > tol and iterations < cap:
            mid = (low + high) / 2
            if _within_budget(state, outcome, mid, budget):
                best = mid
                low = mid
            else:
                high = mid
            iterations += 1

    if iterations >= cap and high - low > tol:
        logger.warning(
            "Quantity search hit iteration cap: outcome=%d, budget=%s, interval=%s",
            outcome,
            budget,
            high - low,
        )
    else:
        logger.debug(
            "Quantity search converged: outcome=%d, budget=%s, quantity=%s, iterations=%d",
            outcome,
            budget,
            best,
            iterations,
        )
    return quantize_amount(best, ROUND_FLOOR)
