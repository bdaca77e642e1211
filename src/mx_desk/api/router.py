"""mx_desk REST endpoints.

POST /order-desk — rank, time and advise on a set of resting orders
"""

from fastapi import APIRouter, Request

from src.mx_common.response import ApiResponse, success_response
from src.mx_desk.application.schemas import OrderDeskRequest
from src.mx_desk.application.service import build_order_desk

router = APIRouter(prefix="/order-desk", tags=["order-desk"])


@router.post("")
async def order_desk(req: OrderDeskRequest, request: Request) -> ApiResponse:
    result = build_order_desk(req)
    return success_response(result.model_dump(mode="json"), request)
