"""Market service for the exchange's public market data endpoints."""

from collections.abc import Callable
from typing import Any, TypeVar
from urllib.parse import quote

import requests

from src.models.market_data import OrderBook, PriceLevel, RecentTrade, RecentTradesResponse, TickerInfo
from src.utils.config import config
from src.utils.errors import DecodeError, MarketDataError, MarketErrorCode, TransportError
from src.utils.logger import get_logger
from src.utils.parsing import (
    parse_decimal_string,
    parse_exchange_timestamp,
    require_field,
    require_list,
    require_object,
)
from src.utils.trace_context import get_current_trace

T = TypeVar("T")

# Wire name -> TickerInfo attribute for every string-encoded number
TICKER_NUMERIC_FIELDS: dict[str, str] = {
    "bid": "bid",
    "bidAmt": "bid_amt",
    "ask": "ask",
    "askAmt": "ask_amt",
    "lastPrice": "last_price",
    "lastAmt": "last_amt",
    "volume24h": "volume_24h",
    "volumeToday": "volume_today",
    "high24h": "high_24h",
    "low24h": "low_24h",
    "highToday": "high_today",
    "lowToday": "low_today",
    "openToday": "open_today",
    "vwapToday": "vwap_today",
    "vwap24h": "vwap_24h",
}


def decode_ticker(payload: Any) -> TickerInfo:
    """
    Decode a ticker response body.

    Args:
        payload: Parsed JSON body of /markets/{pair}/ticker

    Returns:
        TickerInfo with numeric fields as floats and the server time in UTC

    Raises:
        DecodeError: If a field is missing or malformed
    """
    body = require_object(payload, "ticker")

    pair = require_field(body, "pair")
    if not isinstance(pair, str):
        raise DecodeError(f"Expected string for pair, got {type(pair).__name__}", field="pair")

    numbers = {
        attr: parse_decimal_string(require_field(body, wire), wire)
        for wire, attr in TICKER_NUMERIC_FIELDS.items()
    }

    return TickerInfo(
        pair=pair,
        server_time_utc=parse_exchange_timestamp(
            require_field(body, "serverTimeUTC"), "serverTimeUTC"
        ),
        **numbers,
    )


def _decode_levels(value: Any, side: str) -> tuple[PriceLevel, ...]:
    # null means an empty side
    if value is None:
        return ()

    levels = []
    for index, level in enumerate(require_list(value, side)):
        location = f"{side}[{index}]"
        if not isinstance(level, list) or len(level) != 2:
            raise DecodeError(f"Expected [price, size] pair at {location}", field=location)
        price, size = level
        levels.append(
            (
                parse_decimal_string(price, f"{location}[0]"),
                parse_decimal_string(size, f"{location}[1]"),
            )
        )
    return tuple(levels)


def decode_order_book(payload: Any) -> OrderBook:
    """Decode an order book response body, keeping level order."""
    body = require_object(payload, "order_book")
    return OrderBook(
        asks=_decode_levels(require_field(body, "asks"), "asks"),
        bids=_decode_levels(require_field(body, "bids"), "bids"),
    )


def decode_recent_trades(payload: Any) -> RecentTradesResponse:
    """Decode a recent trades response body, keeping trade order."""
    body = require_object(payload, "trades")

    count = require_field(body, "count")
    if isinstance(count, bool) or not isinstance(count, int):
        raise DecodeError(f"Expected integer for count, got {count!r}", field="count")

    raw_trades = require_field(body, "recentTrades")
    if raw_trades is None:
        raw_trades = []

    trades = []
    for index, raw in enumerate(require_list(raw_trades, "recentTrades")):
        location = f"recentTrades[{index}]"
        item = require_object(raw, location)

        match_number = require_field(item, "matchNumber")
        if not isinstance(match_number, str):
            raise DecodeError(
                f"Expected string for {location}.matchNumber", field=f"{location}.matchNumber"
            )

        trades.append(
            RecentTrade(
                timestamp=parse_exchange_timestamp(
                    require_field(item, "timestamp"), f"{location}.timestamp"
                ),
                match_number=match_number,
                price=parse_decimal_string(require_field(item, "price"), f"{location}.price"),
                amount=parse_decimal_string(require_field(item, "amount"), f"{location}.amount"),
            )
        )

    return RecentTradesResponse(count=count, recent_trades=tuple(trades))


class MarketService:
    """
    Client for the exchange's public market data endpoints.

    Each call performs exactly one GET against the instance's endpoint. There
    is no retry and no caching; failures surface as TransportError or
    DecodeError.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        endpoint: str | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize the service.

        Args:
            session: HTTP session used for requests; one is created (and
                owned by the service) when omitted
            endpoint: Base URL, e.g. "https://api.itbit.com/v1". Defaults to
                the configured MARKET_ENDPOINT
            timeout: Default request timeout in seconds. Defaults to the
                configured MARKET_TIMEOUT_SECONDS
        """
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self._endpoint = (endpoint or config.market.endpoint).rstrip("/")
        self.timeout = timeout if timeout is not None else config.market.timeout_seconds
        self.logger = get_logger("MarketService")

    @property
    def endpoint(self) -> str:
        """Base URL requests are sent to."""
        return self._endpoint

    def get_ticker(self, pair: str, timeout: float | None = None) -> TickerInfo:
        """
        Fetch the ticker snapshot for a pair.

        Args:
            pair: Pair symbol, e.g. "XBTUSD"
            timeout: Request timeout in seconds, overriding the service default

        Returns:
            TickerInfo for the pair
        """
        return self._fetch("ticker", pair, "ticker", decode_ticker, timeout=timeout)

    def get_order_book(self, pair: str, timeout: float | None = None) -> OrderBook:
        """Fetch the order book snapshot for a pair."""
        return self._fetch("order_book", pair, "order_book", decode_order_book, timeout=timeout)

    def get_recent_trades(
        self,
        pair: str,
        since_match_id: str = "",
        timeout: float | None = None,
    ) -> RecentTradesResponse:
        """
        Fetch recent trades for a pair.

        Args:
            pair: Pair symbol
            since_match_id: When non-empty, only trades after this match
                number are requested
            timeout: Request timeout in seconds, overriding the service default

        Returns:
            RecentTradesResponse in the order the exchange returned
        """
        params = {"since": since_match_id} if since_match_id else None
        return self._fetch(
            "recent_trades",
            pair,
            "trades",
            decode_recent_trades,
            params=params,
            timeout=timeout,
        )

    def close(self) -> None:
        """Close the HTTP session if this service created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "MarketService":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _market_url(self, pair: str, resource: str) -> str:
        if not pair:
            raise ValueError("Pair symbol cannot be empty")
        return f"{self._endpoint}/markets/{quote(pair, safe='')}/{resource}"

    def _fetch(
        self,
        operation: str,
        pair: str,
        resource: str,
        decode: Callable[[Any], T],
        params: dict[str, str] | None = None,
        timeout: float | None = None,
    ) -> T:
        url = self._market_url(pair, resource)
        context: dict[str, Any] = {
            "trace_id": get_current_trace(),
            "operation": operation,
            "pair": pair,
            "url": url,
        }
        if params:
            context["params"] = params

        self.logger.debug("Starting market data fetch", context=context)

        try:
            payload = self._get_json(url, params, timeout)
            result = decode(payload)
        except MarketDataError as e:
            self.logger.error(
                f"Error fetching {operation} for {pair}",
                context={**context, "result": "failed", "error": e.error_code},
                exception=e,
            )
            raise

        self.logger.info(
            "Successfully fetched market data",
            context={**context, "result": "success"},
        )
        return result

    def _get_json(self, url: str, params: dict[str, str] | None, timeout: float | None) -> Any:
        try:
            response = self.session.get(
                url,
                params=params,
                timeout=timeout if timeout is not None else self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else None
            raise TransportError(
                f"Unexpected HTTP status {status_code} from {url}",
                url=url,
                status_code=status_code,
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"Request to {url} failed: {e}", url=url) from e

        # raise_for_status() lets unfollowed 3xx (304, 300 without Location) through
        if not 200 <= response.status_code < 300:
            raise TransportError(
                f"Unexpected HTTP status {response.status_code} from {url}",
                url=url,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise DecodeError(
                f"Response from {url} is not valid JSON: {e}",
                error_code=MarketErrorCode.INVALID_JSON,
            ) from e
