"""Market data records decoded from the exchange's public REST endpoints."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any

PriceLevel = tuple[float, float]


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat().replace("+00:00", "Z")
    if isinstance(value, dict):
        return {k: _serialize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize(v) for v in value]
    return value


@dataclass(frozen=True)
class TickerInfo:
    """Point-in-time summary of best bid/ask and trading statistics for a pair."""

    pair: str
    bid: float
    bid_amt: float
    ask: float
    ask_amt: float
    last_price: float
    last_amt: float
    volume_24h: float
    volume_today: float
    high_24h: float
    low_24h: float
    high_today: float
    low_today: float
    open_today: float
    vwap_today: float
    vwap_24h: float
    server_time_utc: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return _serialize(asdict(self))


@dataclass(frozen=True)
class OrderBook:
    """
    Outstanding ask and bid levels for a pair.

    Each level is a (price, size) pair. Levels keep the order the exchange
    sent them in, best price first.
    """

    asks: tuple[PriceLevel, ...] = field(default_factory=tuple)
    bids: tuple[PriceLevel, ...] = field(default_factory=tuple)

    @property
    def best_ask(self) -> PriceLevel | None:
        return self.asks[0] if self.asks else None

    @property
    def best_bid(self) -> PriceLevel | None:
        return self.bids[0] if self.bids else None

    @property
    def spread(self) -> float | None:
        """Best ask price minus best bid price, None if either side is empty."""
        if not self.asks or not self.bids:
            return None
        return self.asks[0][0] - self.bids[0][0]

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "asks": [list(level) for level in self.asks],
            "bids": [list(level) for level in self.bids],
        }


@dataclass(frozen=True)
class RecentTrade:
    """A single executed trade."""

    timestamp: datetime
    match_number: str
    price: float
    amount: float

    def to_dict(self) -> dict[str, Any]:
        return _serialize(asdict(self))


@dataclass(frozen=True)
class RecentTradesResponse:
    """Recent trade history for a pair, in the order the exchange returned it."""

    count: int
    recent_trades: tuple[RecentTrade, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "recent_trades": [trade.to_dict() for trade in self.recent_trades],
        }
