"""
Centralized configuration with environment variable overrides.

Slot spacing, the booking horizon, and meeting length limits are
configurable here. Nothing is hardcoded in the scheduling logic.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from meetslot.logging_context import RequestIdFilter

load_dotenv()

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60

LOG_FORMAT = "%(asctime)s [%(name)s] [%(request_id)s] %(levelname)s: %(message)s"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class SchedulingConfig:
    """Slot generation and booking window settings."""

    slot_step_minutes: int = _safe_int("SLOT_STEP_MINUTES", "15")
    lookahead_days: int = _safe_int("BOOKING_LOOKAHEAD_DAYS", "60")
    max_booking_minutes: int = _safe_int("MAX_BOOKING_MINUTES", "480")


@dataclass(frozen=True)
class MeetingTypeDefaults:
    """Defaults applied when a host creates a meeting type."""

    color: str = os.getenv("DEFAULT_MEETING_COLOR", "#3b82f6")
    duration_minutes: int = _safe_int("DEFAULT_MEETING_DURATION", "30")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    scheduling: SchedulingConfig = field(default_factory=SchedulingConfig)
    meeting_types: MeetingTypeDefaults = field(default_factory=MeetingTypeDefaults)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    service_name: str = os.getenv("SERVICE_NAME", "meetslot")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    step = config.scheduling.slot_step_minutes
    if step < 1:
        raise ValueError(f"SLOT_STEP_MINUTES must be >= 1, got {step}")
    if MINUTES_PER_DAY % step != 0:
        raise ValueError(
            f"SLOT_STEP_MINUTES must divide a day evenly, got {step}"
        )
    if config.scheduling.lookahead_days < 0:
        raise ValueError(
            f"BOOKING_LOOKAHEAD_DAYS must be >= 0, got {config.scheduling.lookahead_days}"
        )
    if config.scheduling.max_booking_minutes < step:
        raise ValueError(
            "MAX_BOOKING_MINUTES must be >= SLOT_STEP_MINUTES, "
            f"got {config.scheduling.max_booking_minutes}"
        )

    default_duration = config.meeting_types.duration_minutes
    if not 0 < default_duration <= config.scheduling.max_booking_minutes:
        raise ValueError(
            "DEFAULT_MEETING_DURATION must be between 1 and MAX_BOOKING_MINUTES, "
            f"got {default_duration}"
        )


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    # request_id must be on every record the root handlers format
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())
    logger.info("Configuration loaded for '%s'", config.service_name)
    return config


# Singleton instance
settings = load_config()
