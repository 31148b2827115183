"""Configuration management for the market data client."""

import math
import os
from dataclasses import dataclass
from urllib.parse import urlparse

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DEFAULT_ENDPOINT = "https://api.itbit.com/v1"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class MarketConfig:
    """Exchange endpoint configuration."""

    endpoint: str = DEFAULT_ENDPOINT
    timeout_seconds: float = 10.0
    default_pair: str = "XBTUSD"


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file_path: str | None = None


class Config:
    """Main application configuration."""

    def __init__(self):
        self.market = MarketConfig(
            endpoint=os.getenv("MARKET_ENDPOINT", DEFAULT_ENDPOINT),
            timeout_seconds=_float_env("MARKET_TIMEOUT_SECONDS", 10.0),
            default_pair=os.getenv("MARKET_PAIR", "XBTUSD"),
        )

        self.logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO").upper(),
            file_path=os.getenv("LOG_FILE") or None,
        )

    def validate(self) -> bool:
        """
        Validate configuration.

        Returns:
            True if configuration is valid

        Raises:
            ValueError if configuration is invalid
        """
        parsed = urlparse(self.market.endpoint)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(
                f"Invalid MARKET_ENDPOINT: {self.market.endpoint!r}. Use an http(s) URL"
            )

        timeout = self.market.timeout_seconds
        if not math.isfinite(timeout) or timeout <= 0:
            raise ValueError(
                f"Invalid MARKET_TIMEOUT_SECONDS: {timeout}. Must be a positive number"
            )

        if not self.market.default_pair:
            raise ValueError("MARKET_PAIR must not be empty")

        if self.logging.level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid LOG_LEVEL: {self.logging.level}. Use one of {', '.join(LOG_LEVELS)}"
            )

        return True


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        # Reported by Config.validate()
        return math.nan


# Global config instance
config = Config()
