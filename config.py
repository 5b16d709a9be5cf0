"""Configuration management with environment variable support."""

import logging
import os
from dataclasses import dataclass, field


def _parse_seed() -> int | None:
    """Parse BLACKJACK_SEED environment variable."""
    seed = os.getenv("BLACKJACK_SEED", "").strip()
    return int(seed) if seed else None


@dataclass(frozen=True)
class GameConfig:
    """Default game configuration."""

    min_bet: int = field(default_factory=lambda: int(os.getenv("MIN_BET", "5")))
    max_bet: int = field(default_factory=lambda: int(os.getenv("MAX_BET", "150")))
    dealer_stands_on: int = 17


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    rng_seed: int | None = field(default_factory=_parse_seed)
    settlement_timeout: float = field(
        default_factory=lambda: float(os.getenv("SETTLEMENT_TIMEOUT", "5.0"))
    )

    game: GameConfig = field(default_factory=GameConfig)


def configure_logging(app_config: AppConfig | None = None) -> None:
    """Set up root logging from the configured level."""
    app_config = app_config or config
    level = logging.DEBUG if app_config.debug else getattr(logging, app_config.log_level, logging.INFO)
    logging.basicConfig(level=level)


# Global configuration instance
config = AppConfig()
