# src/mx_execution/application/schemas.py
from pydantic import BaseModel, Field

from src.mx_execution.domain.models import DepthLevel, ExecutionPlan, SafeExecution
from src.mx_impact.application.schemas import ImpactEstimateResponse
from src.mx_market.application.schemas import DailyPointIn, MarketOrderIn


class ExecutionPlanRequest(BaseModel):
    type_id: int
    region_id: int
    location_id: int | None = Field(None, description="None = whole region")
    quantity: int
    is_buy: bool = Field(description="True = buy into asks, False = sell into bids")
    impact_days: int | None = Field(None, description="History lookback for impact")
    urgency: float | None = Field(None, description="0 = patient, 1 = urgent")
    own_order_ids: list[int] = Field(default_factory=list)
    orders: list[MarketOrderIn] = Field(default_factory=list)
    history: list[DailyPointIn] = Field(default_factory=list)


class DepthLevelResponse(BaseModel):
    price: float
    volume: int
    volume_filled: int
    cumulative: int
    is_own: bool

    @classmethod
    def from_domain(cls, lv: DepthLevel) -> "DepthLevelResponse":
        return cls(
            price=lv.price,
            volume=lv.volume,
            volume_filled=lv.volume_filled,
            cumulative=lv.cumulative,
            is_own=lv.is_own,
        )


class ExecutionPlanResponse(BaseModel):
    best_price: float
    expected_price: float
    slippage_percent: float
    total_cost: float
    can_fill: bool
    total_depth: int
    filled_quantity: int
    depth_levels: list[DepthLevelResponse]
    optimal_slices: int
    suggested_min_gap_minutes: int
    impact: ImpactEstimateResponse | None = None

    @classmethod
    def from_domain(cls, plan: ExecutionPlan) -> "ExecutionPlanResponse":
        return cls(
            best_price=plan.best_price,
            expected_price=plan.expected_price,
            slippage_percent=plan.slippage_percent,
            total_cost=plan.total_cost,
            can_fill=plan.can_fill,
            total_depth=plan.total_depth,
            filled_quantity=plan.filled_quantity,
            depth_levels=[DepthLevelResponse.from_domain(lv) for lv in plan.depth_levels],
            optimal_slices=plan.optimal_slices,
            suggested_min_gap_minutes=plan.suggested_min_gap_minutes,
            impact=ImpactEstimateResponse.from_domain(plan.impact) if plan.impact else None,
        )


class SafeQuantityRequest(BaseModel):
    asks: list[MarketOrderIn]
    bids: list[MarketOrderIn]
    max_quantity: int
    broker_fee_percent: float = 0.0
    sales_tax_percent: float = 0.0


class SafeQuantityResponse(BaseModel):
    quantity: int
    expected_profit: float
    buy_plan: ExecutionPlanResponse
    sell_plan: ExecutionPlanResponse

    @classmethod
    def from_domain(cls, safe: SafeExecution) -> "SafeQuantityResponse":
        return cls(
            quantity=safe.quantity,
            expected_profit=safe.expected_profit,
            buy_plan=ExecutionPlanResponse.from_domain(safe.buy_plan),
            sell_plan=ExecutionPlanResponse.from_domain(safe.sell_plan),
        )
