"""Impact application service — maps requests onto the calibrator."""
from config.settings import settings
from src.mx_common.validation import check_urgency
from src.mx_impact.application.schemas import (
    CalibrateRequest,
    CalibrateResponse,
    ImpactEstimateResponse,
    ImpactParamsResponse,
)
from src.mx_impact.engine.calibrator import calibrate, estimate_impact


def calibrate_history(req: CalibrateRequest) -> CalibrateResponse:
    lookback = req.lookback_days if req.lookback_days is not None else settings.DEFAULT_IMPACT_DAYS
    urgency = req.urgency if req.urgency is not None else settings.DEFAULT_URGENCY
    check_urgency(urgency)
    params = calibrate([p.to_domain() for p in req.history], lookback)
    estimate = None
    if req.quantity is not None:
        est = estimate_impact(params, req.quantity, urgency)
        estimate = ImpactEstimateResponse.from_domain(est) if est else None
    return CalibrateResponse(
        params=ImpactParamsResponse.from_domain(params),
        usable=params.is_usable,
        estimate=estimate,
    )
