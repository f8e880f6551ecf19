"""Unified error codes and custom exceptions.

Error code ranges:
  3xxx: Market state
  5xxx: Position
  6xxx: Amount parsing

Every pricing error is a rejected operation with a clear cause; the API
layer surfaces ``message`` to the user with ``http_status``.
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


class PricingError(AppError):
    """Base for precondition violations raised by the pricing engine."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(code, message, 422)


# --- 3xxx: Market state ---

class LiquidityTooLowError(PricingError):
    def __init__(self, liquidity: object, minimum: object) -> None:
        super().__init__(3101, f"Liquidity must be at least {minimum}, got {liquidity}")


class InsufficientOutcomesError(PricingError):
    def __init__(self, count: int) -> None:
        super().__init__(3102, f"Market must have at least 2 outcomes, got {count}")


class NegativeOutcomeError(PricingError):
    def __init__(self, index: int, value: object) -> None:
        super().__init__(3103, f"Outcome {index} quantity cannot be negative: {value}")


class MarketNotSeededError(PricingError):
    def __init__(self) -> None:
        super().__init__(3104, "Market has zero total quantity; price is undefined")


# --- 5xxx: Position ---

class InvalidOutcomeError(PricingError):
    def __init__(self, outcome: int, count: int) -> None:
        super().__init__(5101, f"Invalid outcome index {outcome} for market with {count} outcomes")


class InvalidQuantityError(PricingError):
    def __init__(self, quantity: object) -> None:
        super().__init__(5102, f"Quantity must be positive, got {quantity}")


class InsufficientOutcomeLiquidityError(PricingError):
    def __init__(self, outcome: int, available: object, requested: object) -> None:
        super().__init__(
            5103,
            f"Insufficient position size to sell: outcome {outcome} holds {available}, "
            f"requested {requested}",
        )


class TradeTooLargeError(PricingError):
    def __init__(self, outcome: int, quantity: object) -> None:
        super().__init__(
            5104,
            f"Trade of {quantity} on outcome {outcome} exceeds the largest settleable amount",
        )


# --- 6xxx: Amounts ---

class InvalidAmountError(PricingError):
    def __init__(self, value: object) -> None:
        super().__init__(6001, f"Invalid decimal amount: {value!r}")
