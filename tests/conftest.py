"""Shared test fixtures."""

from decimal import Decimal

import pytest

from src.pm_pricing.domain.models import MarketState


@pytest.fixture
def balanced_state() -> MarketState:
    """b = 100 with two equally seeded outcomes."""
    return MarketState(liquidity=Decimal("100"), outcomes=(Decimal("50"), Decimal("50")))


@pytest.fixture
def skewed_state() -> MarketState:
    """Three-bucket market with uneven accumulated quantity."""
    return MarketState(
        liquidity=Decimal("250"),
        outcomes=(Decimal("10"), Decimal("30"), Decimal("60")),
    )
