"""Tests for configuration management."""

import math
import os
from unittest.mock import patch

import pytest

from src.utils.config import DEFAULT_ENDPOINT, Config, LoggingConfig, MarketConfig


def test_market_config_defaults():
    """Test that market config defaults to the production endpoint."""
    config = MarketConfig()
    assert config.endpoint == DEFAULT_ENDPOINT
    assert config.timeout_seconds == 10.0
    assert config.default_pair == "XBTUSD"


def test_logging_config_defaults():
    config = LoggingConfig()
    assert config.level == "INFO"
    assert config.file_path is None


def test_config_reads_environment():
    """Test that config picks up endpoint, timeout and logging from the environment."""
    with patch.dict(
        os.environ,
        {
            "MARKET_ENDPOINT": "http://localhost:8080/v1",
            "MARKET_TIMEOUT_SECONDS": "2.5",
            "MARKET_PAIR": "XBTEUR",
            "LOG_LEVEL": "debug",
            "LOG_FILE": "/tmp/market.log",
        },
    ):
        config = Config()

    assert config.market.endpoint == "http://localhost:8080/v1"
    assert config.market.timeout_seconds == 2.5
    assert config.market.default_pair == "XBTEUR"
    assert config.logging.level == "DEBUG"
    assert config.logging.file_path == "/tmp/market.log"
    assert config.validate() is True


def test_config_blank_timeout_uses_default():
    with patch.dict(os.environ, {"MARKET_TIMEOUT_SECONDS": "  "}):
        config = Config()

    assert config.market.timeout_seconds == 10.0


def test_config_validation_invalid_endpoint():
    """Test that config validation fails for a non-http endpoint."""
    with patch.dict(os.environ, {"MARKET_ENDPOINT": "ftp://exchange.test"}):
        config = Config()

        with pytest.raises(ValueError, match="MARKET_ENDPOINT"):
            config.validate()


def test_config_validation_endpoint_without_host():
    with patch.dict(os.environ, {"MARKET_ENDPOINT": "https://"}):
        config = Config()

        with pytest.raises(ValueError, match="MARKET_ENDPOINT"):
            config.validate()


@pytest.mark.parametrize("raw", ["0", "-1", "soon"])
def test_config_validation_invalid_timeout(raw):
    """Test that config validation fails unless the timeout is a positive number."""
    with patch.dict(os.environ, {"MARKET_TIMEOUT_SECONDS": raw}):
        config = Config()

        with pytest.raises(ValueError, match="MARKET_TIMEOUT_SECONDS"):
            config.validate()


def test_config_unparseable_timeout_is_nan():
    with patch.dict(os.environ, {"MARKET_TIMEOUT_SECONDS": "soon"}):
        config = Config()

    assert math.isnan(config.market.timeout_seconds)


def test_config_validation_invalid_log_level():
    with patch.dict(os.environ, {"LOG_LEVEL": "LOUD"}):
        config = Config()

        with pytest.raises(ValueError, match="LOG_LEVEL"):
            config.validate()


def test_config_validation_empty_pair():
    with patch.dict(os.environ, {"MARKET_PAIR": ""}):
        config = Config()
        config.market.default_pair = ""

        with pytest.raises(ValueError, match="MARKET_PAIR"):
            config.validate()
