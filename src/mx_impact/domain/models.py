"""Impact calibration results — immutable, discarded after the request."""

from dataclasses import dataclass

# Below this many daily points the regressions are noise.
MIN_CALIBRATION_DAYS = 5


@dataclass(frozen=True)
class ImpactParams:
    lambda_: float  # Kyle's lambda: price change per unit of net flow
    eta: float  # square-root law: |price change| per sqrt(unit)
    sigma_sq: float  # sample variance of daily log returns
    days_used: int
    lambda_t_stat: float = 0.0
    avg_daily_volume: float = 0.0  # total volume / lookback calendar days
    reference_price: float = 0.0  # latest close in the window

    @classmethod
    def empty(cls, days_used: int = 0) -> "ImpactParams":
        return cls(lambda_=0.0, eta=0.0, sigma_sq=0.0, days_used=days_used)

    @property
    def is_usable(self) -> bool:
        return self.days_used >= MIN_CALIBRATION_DAYS and self.reference_price > 0


@dataclass(frozen=True)
class ImpactEstimate:
    """Calibrated impact attached to an execution plan."""

    params: ImpactParams
    model: str  # ImpactModel value
    recommended_impact: float  # expected per-unit price move for the full quantity
    optimal_slices_twap: int
    twap_min_gap_minutes: int
