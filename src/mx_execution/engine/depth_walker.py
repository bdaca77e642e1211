"""Order-book depth walker: fill a market order against one side of the book."""
import math
from collections import defaultdict
from collections.abc import Collection, Iterable, Sequence

from src.mx_common.validation import check_quantity
from src.mx_execution.domain.models import DepthLevel, ExecutionPlan, OrderBookLevel
from src.mx_market.domain.models import MarketOrder
from src.mx_market.domain.ranking import price_sort_key

# Untouched levels appended after the fill curve for display.
DISPLAY_EXTRA_LEVELS = 3

# Participation model: each slice takes at most 5% of visible depth.
SLICE_DEPTH_PCT = 0.05
MIN_SLICE_SIZE = 10
MAX_SLICES = 20


def build_levels(
    orders: Iterable[MarketOrder],
    is_buy: bool,
    own_order_ids: Collection[int] = (),
) -> list[OrderBookLevel]:
    """Aggregate book rows into price levels in execution-priority order.

    Buying walks sell orders from the lowest ask; selling walks buy orders
    from the highest bid. Rows on the wrong side are dropped.
    """
    volume_by_price: dict[float, int] = defaultdict(int)
    own_prices: set[float] = set()
    for o in orders:
        # buying consumes asks, selling consumes bids
        if o.is_buy_order == is_buy:
            continue
        volume_by_price[o.price] += o.volume_remain
        if o.order_id in own_order_ids:
            own_prices.add(o.price)
    # walking side is the opposite of the resting side
    prices = sorted(volume_by_price, key=lambda p: price_sort_key(not is_buy, p))
    return [
        OrderBookLevel(price=p, volume=volume_by_price[p], is_own=p in own_prices)
        for p in prices
    ]


def suggest_slices(total_depth: int, quantity: int) -> tuple[int, int]:
    """Return (slices, min_gap_minutes) from the depth participation model."""
    slice_size = max(float(MIN_SLICE_SIZE), total_depth * SLICE_DEPTH_PCT)
    n = min(max(math.ceil(quantity / slice_size), 1), MAX_SLICES)
    # more slices -> longer gaps so the book can replenish
    if n <= 1:
        gap = 0
    elif n <= 3:
        gap = 5
    elif n <= 8:
        gap = 10
    else:
        gap = 15
    return n, gap


def simulate(levels: Sequence[OrderBookLevel], quantity: int) -> ExecutionPlan:
    """Walk sorted levels until quantity is filled or the book runs out.

    An empty book is a valid "no liquidity" answer, not an error. When the
    book is too thin the plan describes the fillable part only.
    """
    check_quantity(quantity)
    plan = ExecutionPlan()
    # empty levels never fill and are not displayed
    levels = [lv for lv in levels if lv.volume > 0]
    if not levels:
        return plan

    plan.best_price = levels[0].price
    plan.total_depth = sum(lv.volume for lv in levels)

    remaining = quantity
    cost_sum = 0.0
    filled = 0
    last_touched = -1
    for i, lv in enumerate(levels):
        if remaining <= 0:
            break
        take = min(lv.volume, remaining)
        remaining -= take
        cost_sum += lv.price * take
        filled += take
        last_touched = i
        plan.depth_levels.append(
            DepthLevel(
                price=lv.price,
                volume=lv.volume,
                volume_filled=take,
                cumulative=filled,
                is_own=lv.is_own,
            )
        )

    for lv in levels[last_touched + 1:last_touched + 1 + DISPLAY_EXTRA_LEVELS]:
        plan.depth_levels.append(
            DepthLevel(
                price=lv.price,
                volume=lv.volume,
                volume_filled=0,
                cumulative=filled,
                is_own=lv.is_own,
            )
        )

    plan.can_fill = remaining <= 0
    plan.filled_quantity = filled
    if filled == 0:
        return plan

    plan.expected_price = cost_sum / filled
    if plan.best_price > 0:
        plan.slippage_percent = abs(plan.expected_price - plan.best_price) / plan.best_price * 100
    plan.total_cost = plan.expected_price * filled
    plan.optimal_slices, plan.suggested_min_gap_minutes = suggest_slices(
        plan.total_depth, quantity
    )
    return plan


def compute_execution_plan(
    orders: Iterable[MarketOrder],
    quantity: int,
    is_buy: bool,
    location_id: int | None = None,
    own_order_ids: Collection[int] = (),
) -> ExecutionPlan:
    """Plan a market order against raw book rows (location None = whole region)."""
    check_quantity(quantity)
    if location_id is not None:
        orders = [o for o in orders if o.location_id == location_id]
    return simulate(build_levels(orders, is_buy, own_order_ids), quantity)
