"""PricingApplicationService — thin composition layer over the CLMSR engine.

Stateless: every call rebuilds the MarketState from the params it is given.
"""

import logging
from decimal import Decimal

from config.settings import settings
from src.pm_common.amounts import ZERO, narrow_by_bps, to_decimal, widen_by_bps
from src.pm_pricing.application.schemas import (
    BudgetQuote,
    CloseQuote,
    MarketParams,
    OpenQuote,
    amount_str,
)
from src.pm_pricing.domain.models import Position
from src.pm_pricing.engine.clmsr import (
    apply_decrease,
    apply_open,
    calculate_close_proceeds,
    calculate_open_cost,
    calculate_price,
    calculate_total_liquidity,
    create_market_state,
)
from src.pm_pricing.engine.composite import (
    calculate_potential_winnings,
    calculate_risk_adjusted_return,
)
from src.pm_pricing.engine.search import calculate_quantity_from_cost

logger = logging.getLogger(__name__)


class PricingApplicationService:
    def __init__(self, slippage_bps: int | None = None) -> None:
        self._slippage_bps = settings.SLIPPAGE_BPS if slippage_bps is None else slippage_bps

    def quote_open(
        self, params: MarketParams, outcome: int, quantity: Decimal | str | int
    ) -> OpenQuote:
        state = create_market_state(params)
        position = Position(outcome=outcome, quantity=quantity)
        cost = calculate_open_cost(state, position)
        after = apply_open(state, position)

        quote = OpenQuote(
            outcome=outcome,
            quantity=amount_str(position.quantity),
            cost=amount_str(cost),
            max_cost=amount_str(widen_by_bps(cost, self._slippage_bps)),
            price_before=amount_str(calculate_price(state, outcome)),
            price_after=amount_str(calculate_price(after, outcome)),
            potential_winnings=amount_str(calculate_potential_winnings(state, position)),
            risk_adjusted_return=amount_str(calculate_risk_adjusted_return(state, position)),
        )
        logger.info(
            "Open quote: liquidity=%s, outcome=%d, quantity=%s, cost=%s",
            state.liquidity,
            outcome,
            quote.quantity,
            quote.cost,
        )
        return quote

    def quote_close(
        self, params: MarketParams, outcome: int, quantity: Decimal | str | int
    ) -> CloseQuote:
        state = create_market_state(params)
        position = Position(outcome=outcome, quantity=quantity)
        proceeds = calculate_close_proceeds(state, position)
        after = apply_decrease(state, position)

        # Closing the last outstanding quantity leaves no price to report
        price_after = None
        if calculate_total_liquidity(after) > ZERO:
            price_after = amount_str(calculate_price(after, outcome))

        quote = CloseQuote(
            outcome=outcome,
            quantity=amount_str(position.quantity),
            proceeds=amount_str(proceeds),
            min_proceeds=amount_str(narrow_by_bps(proceeds, self._slippage_bps)),
            price_before=amount_str(calculate_price(state, outcome)),
            price_after=price_after,
        )
        logger.info(
            "Close quote: liquidity=%s, outcome=%d, quantity=%s, proceeds=%s",
            state.liquidity,
            outcome,
            quote.quantity,
            quote.proceeds,
        )
        return quote

    def quote_budget(
        self, params: MarketParams, outcome: int, max_cost: Decimal | str | int
    ) -> BudgetQuote:
        state = create_market_state(params)
        budget = to_decimal(max_cost)
        quantity = calculate_quantity_from_cost(state, outcome, budget)
        cost = ZERO
        if quantity > ZERO:
            cost = calculate_open_cost(state, Position(outcome=outcome, quantity=quantity))

        logger.info(
            "Budget quote: liquidity=%s, outcome=%d, budget=%s, quantity=%s",
            state.liquidity,
            outcome,
            budget,
            quantity,
        )
        return BudgetQuote(
            outcome=outcome,
            max_cost=amount_str(budget),
            quantity=amount_str(quantity),
            cost=amount_str(cost),
        )
