"""Pytest configuration and fixtures."""

import copy
from unittest.mock import Mock

import pytest
import requests

from src.utils.trace_context import clear_trace

TICKER_PAYLOAD = {
    "pair": "XBTUSD",
    "bid": "622",
    "bidAmt": "0.0006",
    "ask": "641.29",
    "askAmt": "0.5",
    "lastPrice": "618.00000000",
    "lastAmt": "0.00040000",
    "volume24h": "0.00040000",
    "volumeToday": "0.00040000",
    "high24h": "618.00000000",
    "low24h": "618.00000000",
    "highToday": "618.00000000",
    "lowToday": "618.00000000",
    "openToday": "618.00000000",
    "vwapToday": "618.00000000",
    "vwap24h": "618.00000000",
    "serverTimeUTC": "2014-06-24T20:42:35.6160000Z",
}

ORDER_BOOK_PAYLOAD = {
    "asks": [
        ["219.82", "2.19"],
        ["219.83", "6.05"],
        ["220.19", "17.59"],
        ["220.52", "3.36"],
        ["220.53", "33.46"],
    ],
    "bids": [
        ["219.40", "17.46"],
        ["219.13", "53.93"],
        ["219.08", "2.20"],
        ["218.58", "98.73"],
        ["218.20", "3.37"],
    ],
}

RECENT_TRADES_PAYLOAD = {
    "count": 3,
    "recentTrades": [
        {
            "timestamp": "2015-05-22T17:45:34.7570000Z",
            "matchNumber": "5CR1JEUBBM8J",
            "price": "351.45000000",
            "amount": "0.00010000",
        },
        {
            "timestamp": "2015-05-22T17:01:08.4270000Z",
            "matchNumber": "5CR1JEUBBM8F",
            "price": "352.00000000",
            "amount": "0.00010000",
        },
        {
            "timestamp": "2015-05-22T17:01:04.8630000Z",
            "matchNumber": "5CR1JEUBBM8C",
            "price": "351.45000000",
            "amount": "0.00010000",
        },
    ],
}


def make_response(payload=None, status_code=200, json_error=None):
    """
    Build a mock requests.Response carrying `payload` as its JSON body.

    raise_for_status() behaves like requests: it raises only for 4xx/5xx,
    so 1xx and 3xx statuses reach the caller un-raised.
    """
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.ok = status_code < 400

    if 400 <= status_code < 600:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Error", response=response
        )
    else:
        response.raise_for_status.return_value = None

    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


@pytest.fixture
def session():
    """A mock HTTP session; set session.get.return_value per test."""
    return Mock(spec=requests.Session)


@pytest.fixture(autouse=True)
def reset_trace():
    """Make sure no trace leaks between tests."""
    clear_trace()
    yield
    clear_trace()


@pytest.fixture
def response_factory():
    """Factory building mock responses, see make_response()."""
    return make_response


@pytest.fixture
def ticker_payload():
    return copy.deepcopy(TICKER_PAYLOAD)


@pytest.fixture
def order_book_payload():
    return copy.deepcopy(ORDER_BOOK_PAYLOAD)


@pytest.fixture
def recent_trades_payload():
    return copy.deepcopy(RECENT_TRADES_PAYLOAD)
