"""
Centralized configuration with environment variable overrides.

Cache padding, discount tiers, calendar horizon and business hours are
configurable here. Nothing is hardcoded in scheduling or pricing logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def _safe_float(env_var: str, default: str) -> float:
    """Parse a float from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return float(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid float for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class AvailabilityConfig:
    """Availability cache settings."""

    month_padding_days: int = _safe_int("MONTH_PADDING_DAYS", "7")


@dataclass(frozen=True)
class PricingConfig:
    """Recurring-booking discount tiers (inclusive lower bounds)."""

    monthly_threshold: int = _safe_int("DISCOUNT_TIER_MONTHLY", "30")
    monthly_multiplier: float = _safe_float("DISCOUNT_MULTIPLIER_MONTHLY", "0.85")
    biweekly_threshold: int = _safe_int("DISCOUNT_TIER_BIWEEKLY", "14")
    biweekly_multiplier: float = _safe_float("DISCOUNT_MULTIPLIER_BIWEEKLY", "0.90")
    weekly_threshold: int = _safe_int("DISCOUNT_TIER_WEEKLY", "7")
    weekly_multiplier: float = _safe_float("DISCOUNT_MULTIPLIER_WEEKLY", "0.95")

    @property
    def tiers(self) -> list[tuple[int, float]]:
        """Discount tiers in descending threshold order."""
        return [
            (self.monthly_threshold, self.monthly_multiplier),
            (self.biweekly_threshold, self.biweekly_multiplier),
            (self.weekly_threshold, self.weekly_multiplier),
        ]


@dataclass(frozen=True)
class CalendarConfig:
    """Calendar display and selection settings."""

    default_time_zone: str = os.getenv("DEFAULT_TIME_ZONE", "Africa/Casablanca")
    business_hour_start: int = _safe_int("BUSINESS_HOUR_START", "9")
    business_hour_end: int = _safe_int("BUSINESS_HOUR_END", "17")
    booking_horizon_days: int = _safe_int("BOOKING_HORIZON_DAYS", "365")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    availability: AvailabilityConfig = field(default_factory=AvailabilityConfig)
    pricing: PricingConfig = field(default_factory=PricingConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if config.availability.month_padding_days < 0:
        raise ValueError(
            f"MONTH_PADDING_DAYS must be >= 0, got {config.availability.month_padding_days}"
        )

    thresholds = [threshold for threshold, _ in config.pricing.tiers]
    if thresholds != sorted(thresholds, reverse=True) or len(set(thresholds)) != len(thresholds):
        raise ValueError(
            f"Discount tier thresholds must be strictly descending, got {thresholds}"
        )
    for tier_name, multiplier in [
        ("DISCOUNT_MULTIPLIER_MONTHLY", config.pricing.monthly_multiplier),
        ("DISCOUNT_MULTIPLIER_BIWEEKLY", config.pricing.biweekly_multiplier),
        ("DISCOUNT_MULTIPLIER_WEEKLY", config.pricing.weekly_multiplier),
    ]:
        if not 0.0 < multiplier <= 1.0:
            raise ValueError(f"{tier_name} must be in (0.0, 1.0], got {multiplier}")

    start = config.calendar.business_hour_start
    end = config.calendar.business_hour_end
    if not 0 <= start < end <= 24:
        raise ValueError(
            f"BUSINESS_HOUR_START/END must satisfy 0 <= start < end <= 24, got {start}-{end}"
        )
    if config.calendar.booking_horizon_days < 1:
        raise ValueError(
            f"BOOKING_HORIZON_DAYS must be >= 1, got {config.calendar.booking_horizon_days}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    logger.info(
        "Configuration loaded (time zone '%s', padding %d days)",
        config.calendar.default_time_zone,
        config.availability.month_padding_days,
    )
    return config


# Singleton instance
settings = load_config()
