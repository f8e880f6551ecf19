"""Domain models for pm_pricing — immutable values, no business logic.

A MarketState is rebuilt from chain data for every quote. Operations that
imply a new state return a new MarketState; nothing is mutated in place.
Amounts are normalized to Decimal on construction; floats are rejected.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

from src.pm_common.amounts import to_decimal
from src.pm_common.errors import InvalidAmountError


@dataclass(frozen=True)
class MarketState:
    liquidity: Decimal              # scoring-rule parameter b
    outcomes: tuple[Decimal, ...]   # cumulative quantity sold per outcome bucket

    def __post_init__(self) -> None:
        if isinstance(self.outcomes, (str, bytes)):
            raise InvalidAmountError(self.outcomes)
        object.__setattr__(self, "liquidity", to_decimal(self.liquidity))
        # Copy into a tuple so callers cannot alias the outcome sequence
        object.__setattr__(self, "outcomes", tuple(to_decimal(q) for q in self.outcomes))

    @property
    def outcome_count(self) -> int:
        return len(self.outcomes)

    def with_outcomes(self, outcomes: Iterable[Decimal]) -> "MarketState":
        return MarketState(liquidity=self.liquidity, outcomes=tuple(outcomes))


@dataclass(frozen=True)
class Position:
    """Hypothetical or real holding, always evaluated against a MarketState."""

    outcome: int        # zero-based index into MarketState.outcomes
    quantity: Decimal

    def __post_init__(self) -> None:
        object.__setattr__(self, "quantity", to_decimal(self.quantity))
