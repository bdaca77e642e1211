"""Market snapshot model — pure dataclasses, supplied by the caller per request."""

from dataclasses import dataclass
from datetime import date, datetime

# (region_id, type_id): granularity of history and of the "book unavailable" flag
HistoryKey = tuple[int, int]


def history_key(region_id: int, type_id: int) -> HistoryKey:
    return (region_id, type_id)


@dataclass(frozen=True)
class MarketOrder:
    """One row of a regional order book."""

    order_id: int
    type_id: int
    location_id: int
    price: float
    volume_remain: int
    is_buy_order: bool
    issued: datetime | None = None


@dataclass(frozen=True)
class DailyPoint:
    """One day of market history.

    volume is the TOTAL traded volume of the day. net_volume (buy minus sell)
    is optional; the source usually omits days without trades.
    """

    date: date
    volume: float
    close_price: float = 0.0
    net_volume: float | None = None
