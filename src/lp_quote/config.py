from decimal import Decimal
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.constants import (
    DEFAULT_RATE_MIN_PLACES,
    DEFAULT_REFRESH_INTERVAL_S,
    DEFAULT_SLIPPAGE,
    DEFAULT_THROTTLE_S,
)


BASE_DIR = Path(__file__).resolve().parents[2]


class QuoteSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LP_QUOTE_",
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Refresh cadence
    refresh_interval_seconds: float = Field(
        default=DEFAULT_REFRESH_INTERVAL_S,
        gt=0,
        description="Period of the reserve refresh timer",
    )
    throttle_seconds: float = Field(
        default=DEFAULT_THROTTLE_S,
        ge=0,
        description="Window in which refresh triggers collapse into one",
    )

    # Quoting
    slippage: Decimal = Field(
        default=DEFAULT_SLIPPAGE,
        description="Tolerance added on top of the derived side for submission",
    )
    rate_min_places: int = Field(
        default=DEFAULT_RATE_MIN_PLACES,
        ge=0,
        description="Minimum fractional digits of the displayed exchange rate",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("slippage")
    @classmethod
    def _slippage_in_range(cls, v: Decimal) -> Decimal:
        if not v.is_finite() or v < 0 or v >= 1:
            raise ValueError(f"slippage must be in [0, 1): {v}")
        return v


settings = QuoteSettings()
