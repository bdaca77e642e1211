"""Execution planning domain model — pure dataclasses."""

from dataclasses import dataclass, field

from src.mx_impact.domain.models import ImpactEstimate


@dataclass(frozen=True)
class OrderBookLevel:
    """One aggregated price level, in execution-priority order."""

    price: float
    volume: int
    is_own: bool = False


@dataclass
class DepthLevel:
    """One row of the fill curve."""

    price: float
    volume: int  # volume resting at this level
    volume_filled: int  # how much of the requested quantity comes from here
    cumulative: int  # running total of volume_filled
    is_own: bool = False


@dataclass
class ExecutionPlan:
    best_price: float = 0.0
    expected_price: float = 0.0  # VWAP over the fillable part
    slippage_percent: float = 0.0  # always >= 0, direction implied by side
    total_cost: float = 0.0  # buy cost / sell proceeds of the fillable part
    can_fill: bool = False
    total_depth: int = 0
    filled_quantity: int = 0
    depth_levels: list[DepthLevel] = field(default_factory=list)
    optimal_slices: int = 0
    suggested_min_gap_minutes: int = 0
    impact: ImpactEstimate | None = None


@dataclass
class SafeExecution:
    """Largest quantity that fills on both sides and still makes money."""

    quantity: int
    buy_plan: ExecutionPlan
    sell_plan: ExecutionPlan
    expected_profit: float
