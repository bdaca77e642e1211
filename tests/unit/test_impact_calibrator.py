import math
from dataclasses import replace
from datetime import date, timedelta

import pytest

from src.mx_common.enums import ImpactModel
from src.mx_common.errors import AppError
from src.mx_impact.domain.models import MIN_CALIBRATION_DAYS, ImpactParams
from src.mx_impact.engine.calibrator import (
    calibrate,
    estimate_impact,
    impact_model,
    optimal_slice_count,
    recommended_impact,
)
from src.mx_market.domain.models import DailyPoint

START = date(2026, 2, 1)


def _series(prices: list[float], volumes: list[float] | None = None,
            net: list[float | None] | None = None) -> list[DailyPoint]:
    volumes = volumes or [1000.0] * len(prices)
    net = net or [None] * len(prices)
    return [
        DailyPoint(date=START + timedelta(days=i), volume=v, close_price=p, net_volume=n)
        for i, (p, v, n) in enumerate(zip(prices, volumes, net))
    ]


def _linear_history(lam: float) -> list[DailyPoint]:
    flows = [0.0, 100.0, -50.0, 200.0, -100.0, 150.0, 50.0, -25.0, 80.0]
    prices = [100.0]
    for f in flows[1:]:
        prices.append(prices[-1] + lam * f)
    return _series(prices, volumes=[abs(f) + 10 for f in flows], net=flows)


def _params(**kw: float) -> ImpactParams:
    base = dict(lambda_=0.0, eta=2.0, sigma_sq=0.01, days_used=10, lambda_t_stat=0.0,
                avg_daily_volume=1000.0, reference_price=100.0)
    base.update(kw)
    return ImpactParams(**base)


class TestCalibrateSparseHistory:
    def test_too_few_points_gives_zero_params(self) -> None:
        params = calibrate(_series([100.0, 101.0, 102.0]), lookback_days=30)
        assert params.days_used == 3
        assert params.is_usable is False
        assert (params.lambda_, params.eta, params.sigma_sq) == (0.0, 0.0, 0.0)

    def test_empty_history(self) -> None:
        params = calibrate([], lookback_days=30)
        assert params.days_used == 0
        assert params.is_usable is False

    def test_unpriced_points_are_ignored(self) -> None:
        history = _series([100.0, 0.0, 101.0, 0.0, 102.0, 103.0])
        assert calibrate(history, lookback_days=30).days_used == 4

    def test_lookback_limits_days_used(self) -> None:
        history = _series([100.0 + i for i in range(20)])
        assert calibrate(history, lookback_days=7).days_used == 7
        assert calibrate(history, lookback_days=60).days_used == 20

    def test_non_positive_lookback_raises(self) -> None:
        with pytest.raises(AppError) as exc_info:
            calibrate(_series([100.0] * 10), lookback_days=0)
        assert exc_info.value.code == 4003


class TestCalibrateCoefficients:
    def test_recovers_linear_lambda_from_net_flow(self) -> None:
        params = calibrate(_linear_history(0.01), lookback_days=30)
        assert params.is_usable
        assert params.lambda_ == pytest.approx(0.01, rel=1e-6)
        assert impact_model(params) is ImpactModel.LINEAR

    def test_history_without_net_flow_uses_square_root(self) -> None:
        # price moves unrelated to volume, side of the flow unknown
        prices = [100.0, 102.0, 99.5, 101.0, 100.2, 103.1, 101.4, 100.9, 102.6, 101.8]
        volumes = [500.0, 80.0, 900.0, 150.0, 700.0, 60.0, 400.0, 1200.0, 300.0, 650.0]
        params = calibrate(_series(prices, volumes=volumes), 30)
        assert params.is_usable
        assert (params.lambda_, params.lambda_t_stat) == (0.0, 0.0)
        assert impact_model(params) is ImpactModel.SQUARE_ROOT

    def test_lambda_ignores_days_without_net_flow(self) -> None:
        history = _linear_history(0.01)
        history[2] = replace(history[2], net_volume=None)
        history[5] = replace(history[5], net_volume=None)
        params = calibrate(history, lookback_days=30)
        assert params.lambda_ == pytest.approx(0.01, rel=1e-6)

    def test_flat_prices_have_no_impact_or_variance(self) -> None:
        params = calibrate(_series([50.0] * 8, volumes=[10, 20, 30, 40, 50, 60, 70, 80]), 30)
        assert params.lambda_ == 0.0
        assert params.eta == 0.0
        assert params.sigma_sq == 0.0

    def test_sigma_sq_is_sample_variance_of_log_returns(self) -> None:
        params = calibrate(_series([100.0, 110.0, 100.0, 110.0, 100.0]), 30)
        r = math.log(1.1)
        assert params.sigma_sq == pytest.approx(4 * r * r / 3)

    def test_context_fields(self) -> None:
        history = _series([100.0, 101.0, 102.0, 103.0, 104.0], volumes=[70.0] * 5)
        params = calibrate(history, lookback_days=7)
        assert params.reference_price == 104.0
        assert params.avg_daily_volume == pytest.approx(350.0 / 7)

    def test_eta_is_never_negative(self) -> None:
        # bigger volume days move less: raw slope would be negative
        history = _series([100.0, 110.0, 105.0, 106.0, 105.5, 105.6],
                          volumes=[1.0, 1.0, 100.0, 400.0, 900.0, 1600.0])
        assert calibrate(history, 30).eta >= 0.0


class TestRecommendedImpact:
    def test_unstable_lambda_falls_back_to_square_root(self) -> None:
        params = _params(lambda_=-0.1)
        assert impact_model(params) is ImpactModel.SQUARE_ROOT
        assert recommended_impact(params, 100) == pytest.approx(20.0)

    def test_insignificant_lambda_falls_back_to_square_root(self) -> None:
        assert recommended_impact(_params(lambda_=0.05, lambda_t_stat=1.0), 100) == pytest.approx(20.0)

    def test_stable_lambda_is_linear(self) -> None:
        assert recommended_impact(_params(lambda_=0.05, lambda_t_stat=5.0), 100) == pytest.approx(5.0)

    def test_unusable_params_give_zero(self) -> None:
        assert recommended_impact(ImpactParams.empty(3), 100) == 0.0

    def test_invalid_quantity_raises(self) -> None:
        with pytest.raises(AppError):
            recommended_impact(_params(), 0)


class TestOptimalSliceCount:
    def test_no_timing_risk_slices_to_the_cap(self) -> None:
        n, gap = optimal_slice_count(_params(sigma_sq=0.0), 100, urgency=0.5)
        assert n == 50
        # 2 units per slice at 1000/day -> ceil(2.88) minutes
        assert gap == 3

    def test_urgency_never_adds_slices(self) -> None:
        params = _params(sigma_sq=0.01)
        patient, _ = optimal_slice_count(params, 100, urgency=0.0)
        urgent, _ = optimal_slice_count(params, 100, urgency=1.0)
        assert urgent < patient
        assert urgent == 3

    def test_single_slice_has_no_gap(self) -> None:
        assert optimal_slice_count(_params(eta=0.0), 100, urgency=0.5) == (1, 0)

    def test_unusable_params_single_slice(self) -> None:
        assert optimal_slice_count(ImpactParams.empty(), 100, urgency=0.5) == (1, 0)

    def test_never_more_slices_than_units(self) -> None:
        n, _ = optimal_slice_count(_params(sigma_sq=0.0), 4, urgency=0.0)
        assert n == 4

    def test_urgency_out_of_range_raises(self) -> None:
        with pytest.raises(AppError) as exc_info:
            optimal_slice_count(_params(), 100, urgency=1.5)
        assert exc_info.value.code == 4004


class TestEstimateImpact:
    def test_absent_when_history_too_thin(self) -> None:
        assert estimate_impact(ImpactParams.empty(MIN_CALIBRATION_DAYS - 1), 10, 0.5) is None

    def test_bundles_model_and_slices(self) -> None:
        est = estimate_impact(_params(sigma_sq=0.01), 100, 1.0)
        assert est is not None
        assert est.model == ImpactModel.SQUARE_ROOT.value
        assert est.recommended_impact == pytest.approx(20.0)
        assert est.optimal_slices_twap == 3
