# src/mx_desk/application/schemas.py
from datetime import datetime

from pydantic import BaseModel, Field

from src.mx_desk.domain.models import (
    OrderDeskOptions,
    OrderDeskResult,
    OrderDeskRow,
    OrderDeskSummary,
    RestingOrder,
)
from src.mx_market.application.schemas import DailyPointIn, MarketOrderIn


class RestingOrderIn(BaseModel):
    order_id: int
    type_id: int
    location_id: int
    region_id: int
    is_buy_order: bool
    price: float
    volume_remain: int
    volume_total: int | None = Field(None, description="Defaults to volume_remain")
    issued: datetime | None = None
    duration: int = Field(90, description="Order duration in days")
    type_name: str = ""
    location_name: str = ""

    def to_domain(self) -> RestingOrder:
        return RestingOrder(
            order_id=self.order_id,
            type_id=self.type_id,
            location_id=self.location_id,
            region_id=self.region_id,
            is_buy_order=self.is_buy_order,
            price=self.price,
            volume_remain=self.volume_remain,
            volume_total=self.volume_total,
            issued=self.issued,
            duration_days=self.duration,
            type_name=self.type_name,
            location_name=self.location_name,
        )


class HistorySeriesIn(BaseModel):
    region_id: int
    type_id: int
    entries: list[DailyPointIn]


class PairIn(BaseModel):
    region_id: int
    type_id: int


class OrderDeskOptionsIn(BaseModel):
    sales_tax_percent: float = 0.0
    broker_fee_percent: float = 0.0
    target_eta_days: float | None = None
    warn_expiry_days: int | None = None
    history_window_days: int | None = None
    price_tick: float | None = None


class OrderDeskRequest(BaseModel):
    own_orders: list[RestingOrderIn]
    book_orders: list[MarketOrderIn] = Field(default_factory=list)
    history: list[HistorySeriesIn] = Field(default_factory=list)
    unavailable: list[PairIn] = Field(default_factory=list)
    options: OrderDeskOptionsIn = Field(default_factory=OrderDeskOptionsIn)


class OrderDeskRowResponse(BaseModel):
    order_id: int
    type_id: int
    type_name: str
    location_id: int
    location_name: str
    region_id: int
    is_buy_order: bool
    price: float
    volume_remain: int
    volume_total: int
    notional: float
    net_unit_price: float
    net_notional: float
    position: int
    total_orders: int
    book_available: bool
    best_price: float
    suggested_price: float
    undercut_amount: float
    undercut_pct: float
    queue_ahead_qty: int
    top_price_qty: int
    avg_daily_volume: float
    eta_days: float  # -1 = unknown
    issued_at: datetime | None
    expires_at: datetime | None
    days_to_expire: int  # -1 = unknown
    recommendation: str
    reason: str

    @classmethod
    def from_domain(cls, row: OrderDeskRow) -> "OrderDeskRowResponse":
        return cls(
            order_id=row.order_id,
            type_id=row.type_id,
            type_name=row.type_name,
            location_id=row.location_id,
            location_name=row.location_name,
            region_id=row.region_id,
            is_buy_order=row.is_buy_order,
            price=row.price,
            volume_remain=row.volume_remain,
            volume_total=row.volume_total,
            notional=row.notional,
            net_unit_price=row.net_unit_price,
            net_notional=row.net_notional,
            position=row.position,
            total_orders=row.total_orders,
            book_available=row.book_available,
            best_price=row.best_price,
            suggested_price=row.suggested_price,
            undercut_amount=row.undercut_amount,
            undercut_pct=row.undercut_pct,
            queue_ahead_qty=row.queue_ahead_qty,
            top_price_qty=row.top_price_qty,
            avg_daily_volume=row.avg_daily_volume,
            eta_days=row.eta_days,
            issued_at=row.issued_at,
            expires_at=row.expires_at,
            days_to_expire=row.days_to_expire,
            recommendation=row.recommendation,
            reason=row.reason,
        )


class OrderDeskSummaryResponse(BaseModel):
    total_orders: int
    buy_orders: int
    sell_orders: int
    needs_reprice: int
    needs_cancel: int
    total_notional: float
    total_net_notional: float
    median_eta_days: float
    avg_eta_days: float
    worst_eta_days: float
    unknown_eta_count: int

    @classmethod
    def from_domain(cls, s: OrderDeskSummary) -> "OrderDeskSummaryResponse":
        return cls(
            total_orders=s.total_orders,
            buy_orders=s.buy_orders,
            sell_orders=s.sell_orders,
            needs_reprice=s.needs_reprice,
            needs_cancel=s.needs_cancel,
            total_notional=s.total_notional,
            total_net_notional=s.total_net_notional,
            median_eta_days=s.median_eta_days,
            avg_eta_days=s.avg_eta_days,
            worst_eta_days=s.worst_eta_days,
            unknown_eta_count=s.unknown_eta_count,
        )


class OrderDeskSettingsResponse(BaseModel):
    sales_tax_percent: float
    broker_fee_percent: float
    target_eta_days: float
    warn_expiry_days: int
    history_window_days: int
    price_tick: float

    @classmethod
    def from_domain(cls, opt: OrderDeskOptions) -> "OrderDeskSettingsResponse":
        return cls(
            sales_tax_percent=opt.sales_tax_percent,
            broker_fee_percent=opt.broker_fee_percent,
            target_eta_days=opt.target_eta_days,
            warn_expiry_days=opt.warn_expiry_days,
            history_window_days=opt.history_window_days,
            price_tick=opt.price_tick,
        )


class OrderDeskResponse(BaseModel):
    orders: list[OrderDeskRowResponse]
    summary: OrderDeskSummaryResponse
    settings: OrderDeskSettingsResponse

    @classmethod
    def from_domain(cls, result: OrderDeskResult) -> "OrderDeskResponse":
        return cls(
            orders=[OrderDeskRowResponse.from_domain(r) for r in result.orders],
            summary=OrderDeskSummaryResponse.from_domain(result.summary),
            settings=OrderDeskSettingsResponse.from_domain(result.settings),
        )
