"""Decoding helpers for the exchange's string-encoded wire values."""

import math
import re
from datetime import UTC, datetime
from typing import Any

from src.utils.errors import DecodeError, MarketErrorCode

# Plain decimal or scientific notation with ASCII digits only. Rejects "nan",
# "inf", "1_000" and non-ASCII digits, which float() would otherwise accept.
_DECIMAL_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)

# YYYY-MM-DDTHH:MM:SS.fffffffZ; the exchange sends seven fractional digits.
_TIMESTAMP_PATTERN = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?Z", re.ASCII
)


def parse_decimal_string(value: Any, field: str | None = None) -> float:
    """
    Parse a price or amount transmitted as a JSON string.

    Args:
        value: Raw JSON value, expected to be a string such as "618.00000000"
        field: Wire field name, used in the error

    Returns:
        The value as a float

    Raises:
        DecodeError: If the value is not a string holding a finite number
    """
    if not isinstance(value, str):
        raise DecodeError(
            f"Expected numeric string for {field or 'value'}, got {type(value).__name__}",
            field=field,
            error_code=MarketErrorCode.INVALID_NUMBER,
        )

    text = value.strip()
    if not _DECIMAL_PATTERN.fullmatch(text):
        raise DecodeError(
            f"Invalid numeric string for {field or 'value'}: {value!r}",
            field=field,
            error_code=MarketErrorCode.INVALID_NUMBER,
        )

    number = float(text)
    if not math.isfinite(number):
        raise DecodeError(
            f"Numeric value out of range for {field or 'value'}: {value!r}",
            field=field,
            error_code=MarketErrorCode.INVALID_NUMBER,
        )
    return number


def parse_exchange_timestamp(value: Any, field: str | None = None) -> datetime:
    """
    Parse an exchange timestamp such as "2014-06-24T20:42:35.6160000Z".

    Digits beyond microsecond resolution are truncated.

    Args:
        value: Raw JSON value
        field: Wire field name, used in the error

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        DecodeError: If the value is not a timestamp in the exchange format
    """
    match = _TIMESTAMP_PATTERN.fullmatch(value) if isinstance(value, str) else None
    if match is None:
        raise DecodeError(
            f"Invalid timestamp for {field or 'value'}: {value!r}",
            field=field,
            error_code=MarketErrorCode.INVALID_TIMESTAMP,
        )

    year, month, day, hour, minute, second, fraction = match.groups()
    microsecond = int((fraction or "").ljust(6, "0")[:6])

    try:
        return datetime(
            int(year),
            int(month),
            int(day),
            int(hour),
            int(minute),
            int(second),
            microsecond,
            tzinfo=UTC,
        )
    except ValueError as e:
        raise DecodeError(
            f"Invalid timestamp for {field or 'value'}: {value!r} ({e})",
            field=field,
            error_code=MarketErrorCode.INVALID_TIMESTAMP,
        ) from e


def require_field(payload: dict[str, Any], field: str) -> Any:
    """Return payload[field], raising DecodeError when it is absent."""
    if field not in payload:
        raise DecodeError(f"Missing required field: {field}", field=field)
    return payload[field]


def require_object(value: Any, context: str) -> dict[str, Any]:
    """Ensure a decoded JSON value is an object."""
    if not isinstance(value, dict):
        raise DecodeError(
            f"Expected JSON object for {context}, got {type(value).__name__}",
            field=context,
        )
    return value


def require_list(value: Any, context: str) -> list[Any]:
    """Ensure a decoded JSON value is an array."""
    if not isinstance(value, list):
        raise DecodeError(
            f"Expected JSON array for {context}, got {type(value).__name__}",
            field=context,
        )
    return value
