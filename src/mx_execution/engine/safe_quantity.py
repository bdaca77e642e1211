"""Largest round-trip quantity that is fully fillable and still profitable.

Walking deeper into either side only makes the marginal unit worse (asks get
more expensive, bids get cheaper), so profit(q) is concave with profit(0) = 0
and the profitable quantities form a prefix [1, q*]. Binary search finds q*.
"""
import logging
from collections.abc import Iterable

from src.mx_common.validation import check_quantity
from src.mx_execution.domain.models import ExecutionPlan, SafeExecution
from src.mx_execution.engine.depth_walker import build_levels, simulate
from src.mx_market.domain.models import MarketOrder

logger = logging.getLogger(__name__)


def _round_trip_profit(
    buy_plan: ExecutionPlan,
    sell_plan: ExecutionPlan,
    buy_cost_mult: float,
    sell_revenue_mult: float,
) -> float:
    return sell_plan.total_cost * sell_revenue_mult - buy_plan.total_cost * buy_cost_mult


def find_safe_execution_quantity(
    asks: Iterable[MarketOrder],
    bids: Iterable[MarketOrder],
    max_quantity: int,
    buy_cost_mult: float,
    sell_revenue_mult: float,
) -> SafeExecution:
    """Buy from asks, sell into bids: return the best quantity and both plans."""
    check_quantity(max_quantity)
    ask_levels = build_levels(asks, is_buy=True)
    bid_levels = build_levels(bids, is_buy=False)
    none = SafeExecution(
        quantity=0, buy_plan=ExecutionPlan(), sell_plan=ExecutionPlan(), expected_profit=0.0
    )

    cap = min(
        max_quantity,
        sum(lv.volume for lv in ask_levels),
        sum(lv.volume for lv in bid_levels),
    )
    if cap <= 0:
        return none

    def evaluate(q: int) -> tuple[float, ExecutionPlan, ExecutionPlan]:
        buy_plan = simulate(ask_levels, q)
        sell_plan = simulate(bid_levels, q)
        return (
            _round_trip_profit(buy_plan, sell_plan, buy_cost_mult, sell_revenue_mult),
            buy_plan,
            sell_plan,
        )

    best: SafeExecution = none
    lo, hi = 1, cap
    while lo <= hi:
        mid = (lo + hi) // 2
        profit, buy_plan, sell_plan = evaluate(mid)
        if profit > 0:
            best = SafeExecution(
                quantity=mid, buy_plan=buy_plan, sell_plan=sell_plan, expected_profit=profit
            )
            lo = mid + 1
        else:
            hi = mid - 1

    logger.debug(
        "Safe quantity: cap=%d, chosen=%d, profit=%.2f", cap, best.quantity, best.expected_profit
    )
    return best
