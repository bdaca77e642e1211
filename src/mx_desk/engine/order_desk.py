"""Order desk: queue position, ETA and hold/reprice/cancel advice for resting orders.

The desk never raises on missing market data. An unavailable book, missing
history or an unknown issue date each degrade to an explicit sentinel
(book_available=False, eta_days=-1, days_to_expire=-1) and the advice
falls back to "hold". Only malformed own orders are rejected.
"""
import logging
import statistics
from collections import defaultdict
from collections.abc import Collection, Iterable, Mapping, Sequence
from dataclasses import replace
from datetime import datetime

from src.mx_common.datetime_utils import days_until, expires_at, utc_now
from src.mx_common.enums import Recommendation
from src.mx_common.errors import InternalError, InvalidOrderError
from src.mx_common.fees import clamp_percent, net_unit_price
from src.mx_desk.domain.models import (
    UNKNOWN,
    OrderDeskOptions,
    OrderDeskResult,
    OrderDeskRow,
    OrderDeskSummary,
    RestingOrder,
)
from src.mx_market.domain.history import avg_daily_volume
from src.mx_market.domain.models import DailyPoint, HistoryKey, MarketOrder, history_key
from src.mx_market.domain.ranking import is_better_price, rank_orders

logger = logging.getLogger(__name__)

DEFAULT_TARGET_ETA_DAYS = 3.0
DEFAULT_WARN_EXPIRY_DAYS = 2
DEFAULT_HISTORY_WINDOW_DAYS = 7
DEFAULT_PRICE_TICK = 0.01

# (location_id, type_id, is_buy_order)
BookKey = tuple[int, int, bool]

_ACTION_PRIORITY = {
    Recommendation.CANCEL.value: 0,
    Recommendation.REPRICE.value: 1,
    Recommendation.HOLD.value: 2,
}


def normalize_options(opt: OrderDeskOptions) -> OrderDeskOptions:
    return replace(
        opt,
        sales_tax_percent=clamp_percent(opt.sales_tax_percent),
        broker_fee_percent=clamp_percent(opt.broker_fee_percent),
        target_eta_days=opt.target_eta_days if opt.target_eta_days > 0 else DEFAULT_TARGET_ETA_DAYS,
        warn_expiry_days=opt.warn_expiry_days if opt.warn_expiry_days > 0 else DEFAULT_WARN_EXPIRY_DAYS,
        history_window_days=(
            opt.history_window_days if opt.history_window_days > 0 else DEFAULT_HISTORY_WINDOW_DAYS
        ),
        price_tick=opt.price_tick if opt.price_tick > 0 else DEFAULT_PRICE_TICK,
    )


def validate_resting_order(order: RestingOrder) -> None:
    """Raise InvalidOrderError (4002) for orders that cannot exist on a market."""
    if order.price <= 0:
        raise InvalidOrderError(order.order_id, f"price must be positive, got {order.price}")
    if order.volume_remain < 0:
        raise InvalidOrderError(
            order.order_id, f"volume_remain must be >= 0, got {order.volume_remain}"
        )
    if order.volume_total is not None and order.volume_total < order.volume_remain:
        raise InvalidOrderError(
            order.order_id,
            f"volume_total {order.volume_total} is below volume_remain {order.volume_remain}",
        )
    if order.duration_days < 0:
        raise InvalidOrderError(
            order.order_id, f"duration_days must be >= 0, got {order.duration_days}"
        )


def _tick_decimals(tick: float) -> int:
    text = f"{tick:.10f}".rstrip("0")
    return len(text.split(".")[1]) if "." in text else 0


def improve_price(best_price: float, is_buy: bool, tick: float) -> float:
    """One tick better than best_price for this side (never below one tick)."""
    decimals = _tick_decimals(tick)
    if is_buy:
        return round(best_price + tick, decimals)
    return max(round(best_price - tick, decimals), tick)


def _group_book(book_orders: Iterable[MarketOrder]) -> dict[BookKey, list[MarketOrder]]:
    book: dict[BookKey, list[MarketOrder]] = defaultdict(list)
    for o in book_orders:
        book[(o.location_id, o.type_id, o.is_buy_order)].append(o)
    return book


def _apply_book_position(
    row: OrderDeskRow, order: RestingOrder, competitors: Sequence[MarketOrder], tick: float
) -> None:
    """Fill position, queue and pricing fields from one side of the book."""
    if not competitors:
        row.position = 1
        row.total_orders = 1
        row.best_price = order.price
        row.suggested_price = order.price
        return

    group = list(competitors)
    # the snapshot may predate our order; rank it as if it were resting
    if all(o.order_id != order.order_id for o in group):
        group.append(order.as_market_order())
    ranked = rank_orders(group)

    row.best_price = ranked[0].price
    row.top_price_qty = sum(o.volume_remain for o in ranked if o.price == row.best_price)
    row.total_orders = len(ranked)
    for idx, o in enumerate(ranked):
        if o.order_id == order.order_id:
            row.position = idx + 1
            break
        row.queue_ahead_qty += o.volume_remain
    else:
        raise InternalError(f"Order {order.order_id} missing from its ranked book side")

    if is_better_price(order.is_buy_order, row.best_price, order.price):
        row.undercut_amount = abs(row.best_price - order.price)
    row.undercut_pct = row.undercut_amount / order.price * 100.0

    if row.position > 1:
        row.suggested_price = improve_price(row.best_price, order.is_buy_order, tick)
    else:
        row.suggested_price = order.price


def recommend(row: OrderDeskRow, opt: OrderDeskOptions) -> tuple[str, str]:
    """First matching rule wins."""
    if not row.book_available:
        return Recommendation.HOLD.value, "market book unavailable"

    eta_unknown = row.eta_days == UNKNOWN
    expiring = 0 <= row.days_to_expire <= opt.warn_expiry_days

    if eta_unknown and expiring:
        return Recommendation.CANCEL.value, "low liquidity near expiry"

    if row.position > 1:
        if eta_unknown:
            return Recommendation.REPRICE.value, "undercut with unknown liquidity"
        if row.eta_days > opt.target_eta_days:
            return Recommendation.REPRICE.value, "eta above target"

    if eta_unknown:
        return Recommendation.HOLD.value, "insufficient liquidity history"
    if row.position == 1 and row.eta_days > opt.target_eta_days * 2:
        return Recommendation.HOLD.value, "top of book but slow market"
    return Recommendation.HOLD.value, "on track"


def build_row(
    order: RestingOrder,
    book: Mapping[BookKey, Sequence[MarketOrder]],
    history: Mapping[HistoryKey, Sequence[DailyPoint]],
    unavailable: Collection[HistoryKey],
    opt: OrderDeskOptions,
    now: datetime,
) -> OrderDeskRow:
    row = OrderDeskRow(
        order_id=order.order_id,
        type_id=order.type_id,
        location_id=order.location_id,
        region_id=order.region_id,
        is_buy_order=order.is_buy_order,
        price=order.price,
        volume_remain=order.volume_remain,
        volume_total=order.volume_remain if order.volume_total is None else order.volume_total,
        type_name=order.type_name,
        location_name=order.location_name,
        notional=order.price * order.volume_remain,
        issued_at=order.issued,
    )
    row.net_unit_price = net_unit_price(
        order.price, order.is_buy_order, opt.broker_fee_percent, opt.sales_tax_percent
    )
    row.net_notional = row.net_unit_price * order.volume_remain

    if order.issued is not None:
        row.expires_at = expires_at(order.issued, order.duration_days)
        row.days_to_expire = days_until(row.expires_at, now)

    hk = history_key(order.region_id, order.type_id)
    if hk in unavailable:
        # never assume a favourable rank without a book
        row.book_available = False
        row.position = 0
        row.total_orders = 0
        row.suggested_price = order.price
    else:
        competitors = book.get((order.location_id, order.type_id, order.is_buy_order), [])
        _apply_book_position(row, order, competitors, opt.price_tick)

    row.avg_daily_volume = avg_daily_volume(history.get(hk, []), opt.history_window_days)
    # queue ahead is unknown without a book, so the ETA is too
    if row.book_available and row.avg_daily_volume > 0:
        row.eta_days = (row.queue_ahead_qty + row.volume_remain) / row.avg_daily_volume

    row.recommendation, row.reason = recommend(row, opt)
    return row


def summarize(rows: Sequence[OrderDeskRow]) -> OrderDeskSummary:
    summary = OrderDeskSummary(total_orders=len(rows))
    known: list[float] = []
    for row in rows:
        summary.total_notional += row.notional
        summary.total_net_notional += row.net_notional
        if row.is_buy_order:
            summary.buy_orders += 1
        else:
            summary.sell_orders += 1
        if row.recommendation == Recommendation.REPRICE.value:
            summary.needs_reprice += 1
        elif row.recommendation == Recommendation.CANCEL.value:
            summary.needs_cancel += 1
        if row.eta_days == UNKNOWN:
            summary.unknown_eta_count += 1
        else:
            known.append(row.eta_days)
    if known:
        summary.median_eta_days = statistics.median(known)
        summary.avg_eta_days = sum(known) / len(known)
        summary.worst_eta_days = max(known)
    return summary


def _row_sort_key(row: OrderDeskRow) -> tuple[int, int, float, float]:
    """Actions first; then slowest known ETA; unknown ETA last; then largest notional."""
    eta_unknown = row.eta_days == UNKNOWN
    return (
        _ACTION_PRIORITY.get(row.recommendation, len(_ACTION_PRIORITY)),
        1 if eta_unknown else 0,
        0.0 if eta_unknown else -row.eta_days,
        -row.notional,
    )


def compute_order_desk(
    own_orders: Sequence[RestingOrder],
    book_orders: Iterable[MarketOrder],
    history: Mapping[HistoryKey, Sequence[DailyPoint]] | None = None,
    unavailable: Collection[HistoryKey] | None = None,
    options: OrderDeskOptions | None = None,
    now: datetime | None = None,
) -> OrderDeskResult:
    """Annotate every resting order with market context and a recommendation."""
    opt = normalize_options(options or OrderDeskOptions())
    for order in own_orders:
        validate_resting_order(order)

    result = OrderDeskResult(settings=opt)
    if not own_orders:
        return result

    book = _group_book(book_orders)
    history = history or {}
    unavailable = unavailable or frozenset()
    now = now or utc_now()

    rows = [build_row(o, book, history, unavailable, opt, now) for o in own_orders]
    result.summary = summarize(rows)
    result.orders = sorted(rows, key=_row_sort_key)

    logger.info(
        "Order desk: %d orders, %d reprice, %d cancel, %d unknown eta",
        result.summary.total_orders,
        result.summary.needs_reprice,
        result.summary.needs_cancel,
        result.summary.unknown_eta_count,
    )
    return result
