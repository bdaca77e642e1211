"""Pydantic input shapes for market snapshots, shared by every API package."""
import datetime as dt

from pydantic import BaseModel, Field

from src.mx_market.domain.models import DailyPoint, MarketOrder


class MarketOrderIn(BaseModel):
    order_id: int
    type_id: int
    location_id: int
    price: float = Field(gt=0)
    volume_remain: int = Field(ge=0)
    is_buy_order: bool
    issued: dt.datetime | None = None

    def to_domain(self) -> MarketOrder:
        return MarketOrder(
            order_id=self.order_id,
            type_id=self.type_id,
            location_id=self.location_id,
            price=self.price,
            volume_remain=self.volume_remain,
            is_buy_order=self.is_buy_order,
            issued=self.issued,
        )


class DailyPointIn(BaseModel):
    date: dt.date
    volume: float = Field(ge=0)
    average: float = Field(0.0, ge=0, description="Daily average / close price")
    net_volume: float | None = None

    def to_domain(self) -> DailyPoint:
        return DailyPoint(
            date=self.date,
            volume=self.volume,
            close_price=self.average,
            net_volume=self.net_volume,
        )
