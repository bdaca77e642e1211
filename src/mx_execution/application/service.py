"""Execution application service — thin composition over the pure engines.

Market data arrives in the request body; nothing is fetched or cached here.
"""
import logging

from config.settings import settings
from src.mx_common.fees import trade_fee_multipliers
from src.mx_common.validation import check_lookback, check_quantity, check_urgency
from src.mx_execution.application.schemas import (
    ExecutionPlanRequest,
    ExecutionPlanResponse,
    SafeQuantityRequest,
    SafeQuantityResponse,
)
from src.mx_execution.engine.depth_walker import compute_execution_plan
from src.mx_execution.engine.safe_quantity import find_safe_execution_quantity
from src.mx_impact.engine.calibrator import calibrate, estimate_impact

logger = logging.getLogger(__name__)


def plan_execution(req: ExecutionPlanRequest) -> ExecutionPlanResponse:
    check_quantity(req.quantity)
    lookback = req.impact_days if req.impact_days is not None else settings.DEFAULT_IMPACT_DAYS
    urgency = req.urgency if req.urgency is not None else settings.DEFAULT_URGENCY
    check_lookback(lookback)
    check_urgency(urgency)
    orders = [o.to_domain() for o in req.orders if o.type_id == req.type_id]
    plan = compute_execution_plan(
        orders,
        req.quantity,
        req.is_buy,
        location_id=req.location_id,
        own_order_ids=frozenset(req.own_order_ids),
    )

    if req.history:
        params = calibrate([p.to_domain() for p in req.history], lookback)
        plan.impact = estimate_impact(params, req.quantity, urgency)

    logger.debug(
        "Execution plan: type=%d region=%d qty=%d buy=%s can_fill=%s slippage=%.2f%%",
        req.type_id, req.region_id, req.quantity, req.is_buy, plan.can_fill, plan.slippage_percent,
    )
    return ExecutionPlanResponse.from_domain(plan)


def safe_quantity(req: SafeQuantityRequest) -> SafeQuantityResponse:
    buy_mult, sell_mult = trade_fee_multipliers(req.broker_fee_percent, req.sales_tax_percent)
    result = find_safe_execution_quantity(
        [o.to_domain() for o in req.asks],
        [o.to_domain() for o in req.bids],
        req.max_quantity,
        buy_mult,
        sell_mult,
    )
    return SafeQuantityResponse.from_domain(result)
