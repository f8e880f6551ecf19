from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CLMSR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Amount scale: fractional digits of the payment token (RBTC = 18)
    AMOUNT_DECIMALS: int = 18
    DISPLAY_DECIMALS: int = 6

    # Significant digits of the internal decimal context
    DECIMAL_PRECISION: int = 60

    # Markets below this liquidity floor are rejected at construction
    MIN_LIQUIDITY: str = "0.001"

    # Quantity-from-cost binary search
    SEARCH_TOLERANCE: str = "0.000001"
    SEARCH_MAX_ITERATIONS: int = 100
    SEARCH_UPPER_BOUND_MULTIPLIER: int = 10

    # Slippage allowance applied to transaction bounds in quotes
    SLIPPAGE_BPS: int = 50


settings = Settings()
