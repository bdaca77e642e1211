"""Order desk domain model — pure dataclasses."""
from dataclasses import dataclass, field
from datetime import datetime

from src.mx_market.domain.models import MarketOrder

# ETA / expiry that cannot be determined
UNKNOWN = -1


@dataclass(frozen=True)
class RestingOrder:
    """One of the caller's own open orders."""

    order_id: int
    type_id: int
    location_id: int
    region_id: int
    is_buy_order: bool
    price: float
    volume_remain: int
    volume_total: int | None = None  # None = same as volume_remain
    issued: datetime | None = None
    duration_days: int = 90
    type_name: str = ""
    location_name: str = ""

    def as_market_order(self) -> MarketOrder:
        return MarketOrder(
            order_id=self.order_id,
            type_id=self.type_id,
            location_id=self.location_id,
            price=self.price,
            volume_remain=self.volume_remain,
            is_buy_order=self.is_buy_order,
            issued=self.issued,
        )


@dataclass(frozen=True)
class OrderDeskOptions:
    sales_tax_percent: float = 0.0
    broker_fee_percent: float = 0.0
    target_eta_days: float = 3.0
    warn_expiry_days: int = 2
    history_window_days: int = 7
    price_tick: float = 0.01


@dataclass
class OrderDeskRow:
    order_id: int
    type_id: int
    location_id: int
    region_id: int
    is_buy_order: bool
    price: float
    volume_remain: int
    volume_total: int
    type_name: str = ""
    location_name: str = ""
    notional: float = 0.0
    net_unit_price: float = 0.0  # after broker fee / sales tax
    net_notional: float = 0.0
    position: int = 0  # 0 = unknown
    total_orders: int = 0
    book_available: bool = True
    best_price: float = 0.0
    suggested_price: float = 0.0
    undercut_amount: float = 0.0
    undercut_pct: float = 0.0
    queue_ahead_qty: int = 0
    top_price_qty: int = 0
    avg_daily_volume: float = 0.0
    eta_days: float = UNKNOWN
    issued_at: datetime | None = None
    expires_at: datetime | None = None
    days_to_expire: int = UNKNOWN
    recommendation: str = "hold"
    reason: str = "on track"


@dataclass
class OrderDeskSummary:
    total_orders: int = 0
    buy_orders: int = 0
    sell_orders: int = 0
    needs_reprice: int = 0
    needs_cancel: int = 0
    total_notional: float = 0.0
    total_net_notional: float = 0.0
    median_eta_days: float = 0.0
    avg_eta_days: float = 0.0
    worst_eta_days: float = 0.0
    unknown_eta_count: int = 0


@dataclass
class OrderDeskResult:
    orders: list[OrderDeskRow] = field(default_factory=list)
    summary: OrderDeskSummary = field(default_factory=OrderDeskSummary)
    settings: OrderDeskOptions = field(default_factory=OrderDeskOptions)
