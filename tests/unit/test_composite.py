"""Tests for pm_pricing.engine.composite: derived previews."""

from decimal import Decimal

import pytest

from src.pm_common.errors import InvalidOutcomeError, InvalidQuantityError, MarketNotSeededError
from src.pm_pricing.domain.models import MarketState, Position
from src.pm_pricing.engine.clmsr import apply_open, calculate_open_cost
from src.pm_pricing.engine.composite import (
    calculate_multi_position_cost,
    calculate_potential_winnings,
    calculate_risk_adjusted_return,
)


def _pos(outcome: int, quantity: str) -> Position:
    return Position(outcome=outcome, quantity=Decimal(quantity))


class TestMultiPositionCost:
    def test_sum_of_independent_costs(self, skewed_state: MarketState) -> None:
        legs = [_pos(0, "5"), _pos(2, "12.5")]
        expected = sum(calculate_open_cost(skewed_state, p) for p in legs)
        assert calculate_multi_position_cost(skewed_state, legs) == expected

    def test_same_outcome_legs_do_not_compound(self, balanced_state: MarketState) -> None:
        single = calculate_open_cost(balanced_state, _pos(0, "10"))
        assert calculate_multi_position_cost(balanced_state, [_pos(0, "10")] * 2) == 2 * single

    def test_independent_is_not_sequential(self, balanced_state: MarketState) -> None:
        # A combined 20-unit trade costs more than two independent 10-unit legs
        combined = calculate_open_cost(balanced_state, _pos(0, "20"))
        legs = calculate_multi_position_cost(balanced_state, [_pos(0, "10"), _pos(0, "10")])
        assert legs < combined

    def test_sequential_legs_via_apply_open(self, balanced_state: MarketState) -> None:
        first = _pos(0, "10")
        second = _pos(1, "10")
        sequential = calculate_open_cost(balanced_state, first) + calculate_open_cost(
            apply_open(balanced_state, first), second
        )
        assert sequential > 0

    def test_empty(self, balanced_state: MarketState) -> None:
        assert calculate_multi_position_cost(balanced_state, []) == 0

    def test_invalid_leg_propagates(self, balanced_state: MarketState) -> None:
        with pytest.raises(InvalidOutcomeError):
            calculate_multi_position_cost(balanced_state, [_pos(0, "1"), _pos(9, "1")])


class TestPotentialWinnings:
    def test_quantity_times_price(self, balanced_state: MarketState) -> None:
        assert calculate_potential_winnings(balanced_state, _pos(0, "10")) == Decimal("5")

    def test_skewed(self, skewed_state: MarketState) -> None:
        # price of outcome 2 = 60 / 100
        assert calculate_potential_winnings(skewed_state, _pos(2, "25")) == Decimal("15")

    def test_unseeded_market(self) -> None:
        state = MarketState(liquidity=Decimal("1"), outcomes=(Decimal(0), Decimal(0)))
        with pytest.raises(MarketNotSeededError):
            calculate_potential_winnings(state, _pos(0, "1"))


class TestRiskAdjustedReturn:
    def test_concrete(self, balanced_state: MarketState) -> None:
        # (5 - 10.517...) / 10.517... ~= -0.52458
        ratio = calculate_risk_adjusted_return(balanced_state, _pos(0, "10"))
        assert Decimal("-0.5246") < ratio < Decimal("-0.5245")

    def test_zero_cost_guard(
        self, balanced_state: MarketState, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(
            "src.pm_pricing.engine.composite.calculate_open_cost",
            lambda state, position: Decimal(0),
        )
        assert calculate_risk_adjusted_return(balanced_state, _pos(0, "10")) == 0

    def test_invalid_quantity_propagates(self, balanced_state: MarketState) -> None:
        with pytest.raises(InvalidQuantityError):
            calculate_risk_adjusted_return(balanced_state, _pos(0, "0"))
