"""mx_execution REST endpoints.

POST /execution/plan           — walk the book for a market order (+ impact)
POST /execution/safe-quantity  — largest profitable round-trip quantity
"""

from fastapi import APIRouter, Request

from src.mx_common.response import ApiResponse, success_response
from src.mx_execution.application import service as svc
from src.mx_execution.application.schemas import ExecutionPlanRequest, SafeQuantityRequest

router = APIRouter(prefix="/execution", tags=["execution"])


@router.post("/plan")
async def plan_execution(req: ExecutionPlanRequest, request: Request) -> ApiResponse:
    result = svc.plan_execution(req)
    return success_response(result.model_dump(mode="json", by_alias=True), request)


@router.post("/safe-quantity")
async def safe_quantity(req: SafeQuantityRequest, request: Request) -> ApiResponse:
    result = svc.safe_quantity(req)
    return success_response(result.model_dump(mode="json", by_alias=True), request)
