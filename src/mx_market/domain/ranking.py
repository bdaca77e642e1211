"""Price-time priority shared by the depth walker and the order desk.

Sell orders: lower price wins. Buy orders: higher price wins.
Equal prices: earlier issue time wins, unknown issue time ranks last,
then lower order_id wins so the order is stable regardless of input order.
"""

from collections.abc import Iterable
from datetime import datetime

from src.mx_common.datetime_utils import ensure_utc
from src.mx_market.domain.models import MarketOrder

_NO_ISSUE_TIME = float("inf")


def is_better_price(is_buy: bool, a: float, b: float) -> bool:
    """True if price a has strictly higher priority than price b on this side."""
    if is_buy:
        return a > b
    return a < b


def price_sort_key(is_buy: bool, price: float) -> float:
    return -price if is_buy else price


def _issue_ts(issued: datetime | None) -> float:
    if issued is None:
        return _NO_ISSUE_TIME
    return ensure_utc(issued).timestamp()


def priority_key(order: MarketOrder) -> tuple[float, float, int]:
    return (
        price_sort_key(order.is_buy_order, order.price),
        _issue_ts(order.issued),
        order.order_id,
    )


def rank_orders(orders: Iterable[MarketOrder]) -> list[MarketOrder]:
    """Sort one side of a book (single type/location) best first."""
    return sorted(orders, key=priority_key)
