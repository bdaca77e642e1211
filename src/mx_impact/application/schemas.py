# src/mx_impact/application/schemas.py
from pydantic import BaseModel, Field

from src.mx_impact.domain.models import ImpactEstimate, ImpactParams
from src.mx_market.application.schemas import DailyPointIn


class ImpactParamsResponse(BaseModel):
    # "lambda" is a Python keyword, so the attribute carries an underscore
    lambda_: float = Field(serialization_alias="lambda")
    eta: float
    sigma_sq: float
    days_used: int
    lambda_t_stat: float
    avg_daily_volume: float
    reference_price: float

    @classmethod
    def from_domain(cls, p: ImpactParams) -> "ImpactParamsResponse":
        return cls(
            lambda_=p.lambda_,
            eta=p.eta,
            sigma_sq=p.sigma_sq,
            days_used=p.days_used,
            lambda_t_stat=p.lambda_t_stat,
            avg_daily_volume=p.avg_daily_volume,
            reference_price=p.reference_price,
        )


class ImpactEstimateResponse(BaseModel):
    params: ImpactParamsResponse
    model: str
    recommended_impact: float
    optimal_slices_twap: int
    twap_min_gap_minutes: int

    @classmethod
    def from_domain(cls, est: ImpactEstimate) -> "ImpactEstimateResponse":
        return cls(
            params=ImpactParamsResponse.from_domain(est.params),
            model=est.model,
            recommended_impact=est.recommended_impact,
            optimal_slices_twap=est.optimal_slices_twap,
            twap_min_gap_minutes=est.twap_min_gap_minutes,
        )


class CalibrateRequest(BaseModel):
    history: list[DailyPointIn]
    lookback_days: int | None = None
    quantity: int | None = Field(None, description="Also estimate impact for this size")
    urgency: float | None = Field(None, description="0 = patient, 1 = urgent")


class CalibrateResponse(BaseModel):
    params: ImpactParamsResponse
    usable: bool
    estimate: ImpactEstimateResponse | None = None
