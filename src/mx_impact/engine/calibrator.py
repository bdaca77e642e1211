"""Market-impact calibration from daily history.

Two impact estimators are fitted over the same window:

* Kyle's lambda: OLS slope of the day-over-day price change against net
  signed flow (net_volume). Days without net_volume carry no flow direction
  and are left out of this fit; history without any flow leaves lambda at 0
  and the square-root law takes over.
* Square-root law eta: OLS slope of |price change| against sqrt(volume).

sigma_sq is the sample variance of daily log returns and drives the timing
risk side of the slicing trade-off.
"""
import logging
import math
from collections.abc import Sequence

import numpy as np
from scipy import stats

from src.mx_common.enums import ImpactModel
from src.mx_common.validation import check_lookback, check_quantity, check_urgency
from src.mx_impact.domain.models import MIN_CALIBRATION_DAYS, ImpactEstimate, ImpactParams
from src.mx_market.domain.history import window_start
from src.mx_market.domain.models import DailyPoint

logger = logging.getLogger(__name__)

LAMBDA_MIN_T_STAT = 2.0
T_STAT_CAP = 1e6  # keeps exact fits JSON-serializable

MAX_TWAP_SLICES = 50
MINUTES_PER_DAY = 1440
# Each slice is exposed to one hour of price risk.
SLICE_PERIOD_DAYS = 1.0 / 24.0
# Risk weight (in standard deviations of position value) at urgency 0 and 1.
RISK_WEIGHT_PATIENT = 0.1
RISK_WEIGHT_URGENT = 3.0


def _ols(x: np.ndarray, y: np.ndarray) -> tuple[float, float]:
    """Return (slope, t_stat). Degenerate regressors give (0, 0)."""
    if len(x) < 3 or np.ptp(x) == 0:
        return 0.0, 0.0
    fit = stats.linregress(x, y)
    slope = float(fit.slope)
    if not math.isfinite(slope):
        return 0.0, 0.0
    stderr = float(fit.stderr)
    if stderr > 0 and math.isfinite(stderr):
        t_stat = slope / stderr
    elif slope != 0:
        t_stat = math.copysign(T_STAT_CAP, slope)  # exact fit
    else:
        t_stat = 0.0
    return slope, max(-T_STAT_CAP, min(T_STAT_CAP, t_stat))


def _flow_pairs(window: Sequence[DailyPoint], dp: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """(net flow, price change) for the days that report net_volume."""
    pairs = [(p.net_volume, d) for p, d in zip(window[1:], dp) if p.net_volume is not None]
    if not pairs:
        return np.empty(0), np.empty(0)
    flow, moves = zip(*pairs)
    return np.array(flow, dtype=float), np.array(moves, dtype=float)


def calibrate(history: Sequence[DailyPoint], lookback_days: int) -> ImpactParams:
    """Fit impact coefficients over the last lookback_days calendar days.

    Returns zero-valued params (is_usable False) when fewer than
    MIN_CALIBRATION_DAYS priced points fall inside the window.
    """
    check_lookback(lookback_days)
    priced = [p for p in history if p.close_price > 0]
    if not priced:
        return ImpactParams.empty()

    latest = max(p.date for p in priced)
    first = window_start(latest, lookback_days)
    window = sorted((p for p in priced if first <= p.date <= latest), key=lambda p: p.date)
    days_used = len(window)
    if days_used < MIN_CALIBRATION_DAYS:
        logger.debug("Impact calibration skipped: %d/%d days", days_used, MIN_CALIBRATION_DAYS)
        return ImpactParams.empty(days_used)

    prices = np.array([p.close_price for p in window], dtype=float)
    volumes = np.array([max(p.volume, 0.0) for p in window], dtype=float)
    dp = np.diff(prices)
    day_volumes = volumes[1:]

    flow, flow_dp = _flow_pairs(window, dp)
    lambda_, lambda_t = _ols(flow, flow_dp)
    eta, _ = _ols(np.sqrt(day_volumes), np.abs(dp))
    sigma_sq = float(np.var(np.diff(np.log(prices)), ddof=1))

    params = ImpactParams(
        lambda_=lambda_,
        eta=max(eta, 0.0),
        sigma_sq=sigma_sq,
        days_used=days_used,
        lambda_t_stat=lambda_t,
        avg_daily_volume=float(volumes.sum()) / lookback_days,
        reference_price=float(prices[-1]),
    )
    logger.debug(
        "Impact calibrated: days=%d lambda=%.3e (t=%.2f) eta=%.4f sigma_sq=%.3e",
        days_used, params.lambda_, params.lambda_t_stat, params.eta, params.sigma_sq,
    )
    return params


def impact_model(params: ImpactParams) -> ImpactModel:
    """Linear model only when lambda is positive and significant."""
    if not params.is_usable:
        return ImpactModel.NONE
    if params.lambda_ > 0 and params.lambda_t_stat >= LAMBDA_MIN_T_STAT:
        return ImpactModel.LINEAR
    return ImpactModel.SQUARE_ROOT


def _price_move(params: ImpactParams, model: ImpactModel, quantity: float) -> float:
    if model is ImpactModel.LINEAR:
        return params.lambda_ * quantity
    if model is ImpactModel.SQUARE_ROOT:
        return params.eta * math.sqrt(quantity)
    return 0.0


def recommended_impact(params: ImpactParams, quantity: int) -> float:
    """Expected per-unit price move (currency) from executing quantity at once."""
    check_quantity(quantity)
    return _price_move(params, impact_model(params), quantity)


def _risk_weight(urgency: float) -> float:
    return RISK_WEIGHT_PATIENT + urgency * (RISK_WEIGHT_URGENT - RISK_WEIGHT_PATIENT)


def _min_gap_minutes(params: ImpactParams, slice_qty: float) -> int:
    """Time the market needs to trade one slice, so depth can refill."""
    if params.avg_daily_volume <= 0:
        return MINUTES_PER_DAY
    minutes = math.ceil(MINUTES_PER_DAY * slice_qty / params.avg_daily_volume)
    return min(max(minutes, 1), MINUTES_PER_DAY)


def optimal_slice_count(params: ImpactParams, quantity: int, urgency: float) -> tuple[int, int]:
    """Return (n*, min_gap_minutes) minimizing impact cost plus timing risk.

    cost(n) = n * impact(Q/n) * (Q/n) + z(urgency) * P * Q * sqrt(sigma_sq * n * tau)
    """
    check_quantity(quantity)
    check_urgency(urgency)
    model = impact_model(params)
    if model is ImpactModel.NONE:
        return 1, 0

    z = _risk_weight(urgency)
    notional = params.reference_price * quantity
    best_n, best_cost = 1, math.inf
    for n in range(1, min(quantity, MAX_TWAP_SLICES) + 1):
        slice_qty = quantity / n
        impact_cost = n * _price_move(params, model, slice_qty) * slice_qty
        risk = z * notional * math.sqrt(params.sigma_sq * n * SLICE_PERIOD_DAYS)
        cost = impact_cost + risk
        if cost < best_cost:
            best_n, best_cost = n, cost

    if best_n == 1:
        return 1, 0
    return best_n, _min_gap_minutes(params, quantity / best_n)


def estimate_impact(
    params: ImpactParams, quantity: int, urgency: float
) -> ImpactEstimate | None:
    """Bundle the estimate for an execution plan; None when history is too thin."""
    check_quantity(quantity)
    check_urgency(urgency)
    if not params.is_usable:
        return None
    n, gap = optimal_slice_count(params, quantity, urgency)
    return ImpactEstimate(
        params=params,
        model=impact_model(params).value,
        recommended_impact=recommended_impact(params, quantity),
        optimal_slices_twap=n,
        twap_min_gap_minutes=gap,
    )
