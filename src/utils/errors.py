"""Error types raised by the market data client."""

from typing import Any


class MarketErrorCode:
    """Standard error codes for market data failures."""

    # Transport errors
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    HTTP_STATUS_ERROR = "HTTP_STATUS_ERROR"

    # Decode errors
    INVALID_JSON = "INVALID_JSON"
    INVALID_SHAPE = "INVALID_SHAPE"
    INVALID_NUMBER = "INVALID_NUMBER"
    INVALID_TIMESTAMP = "INVALID_TIMESTAMP"


class MarketDataError(Exception):
    """Base class for every failure surfaced by the market service."""

    default_code = MarketErrorCode.TRANSPORT_ERROR

    def __init__(self, message: str, error_code: str | None = None):
        """
        Initialize the error.

        Args:
            message: Human-readable error message
            error_code: Standard error code from MarketErrorCode
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.default_code

    def details(self) -> dict[str, Any]:
        """Additional fields included in to_dict()."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for structured output."""
        response: dict[str, Any] = {
            "error": self.error_code,
            "message": self.message,
        }
        details = {k: v for k, v in self.details().items() if v is not None}
        if details:
            response["details"] = details
        return response


class TransportError(MarketDataError):
    """The request could not be sent, failed in flight, or got a non-2xx status."""

    default_code = MarketErrorCode.TRANSPORT_ERROR

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        error_code: str | None = None,
    ):
        if error_code is None and status_code is not None:
            error_code = MarketErrorCode.HTTP_STATUS_ERROR
        super().__init__(message, error_code)
        self.url = url
        self.status_code = status_code

    def details(self) -> dict[str, Any]:
        return {"url": self.url, "status_code": self.status_code}


class DecodeError(MarketDataError):
    """The response body does not decode into the expected record."""

    default_code = MarketErrorCode.INVALID_SHAPE

    def __init__(
        self,
        message: str,
        field: str | None = None,
        error_code: str | None = None,
    ):
        super().__init__(message, error_code)
        self.field = field

    def details(self) -> dict[str, Any]:
        return {"field": self.field}
