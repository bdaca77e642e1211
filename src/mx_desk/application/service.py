"""Order desk application service.

Request options fall back to the configured defaults; the engine then
normalizes whatever it receives.
"""
from config.settings import settings
from src.mx_desk.application.schemas import OrderDeskOptionsIn, OrderDeskRequest, OrderDeskResponse
from src.mx_desk.domain.models import OrderDeskOptions
from src.mx_desk.engine.order_desk import compute_order_desk
from src.mx_market.domain.models import history_key


def _options(opt: OrderDeskOptionsIn) -> OrderDeskOptions:
    return OrderDeskOptions(
        sales_tax_percent=opt.sales_tax_percent,
        broker_fee_percent=opt.broker_fee_percent,
        target_eta_days=(
            opt.target_eta_days
            if opt.target_eta_days is not None
            else settings.DEFAULT_TARGET_ETA_DAYS
        ),
        warn_expiry_days=(
            opt.warn_expiry_days
            if opt.warn_expiry_days is not None
            else settings.DEFAULT_WARN_EXPIRY_DAYS
        ),
        history_window_days=opt.history_window_days or settings.HISTORY_WINDOW_DAYS,
        price_tick=opt.price_tick or settings.PRICE_TICK,
    )


def build_order_desk(req: OrderDeskRequest) -> OrderDeskResponse:
    history = {
        history_key(s.region_id, s.type_id): [e.to_domain() for e in s.entries]
        for s in req.history
    }
    unavailable = frozenset(history_key(p.region_id, p.type_id) for p in req.unavailable)
    result = compute_order_desk(
        [o.to_domain() for o in req.own_orders],
        [o.to_domain() for o in req.book_orders],
        history=history,
        unavailable=unavailable,
        options=_options(req.options),
    )
    return OrderDeskResponse.from_domain(result)
