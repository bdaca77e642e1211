"""mx_impact REST endpoints.

POST /impact/calibrate — fit lambda / eta / sigma^2 from daily history
"""

from fastapi import APIRouter, Request

from src.mx_common.response import ApiResponse, success_response
from src.mx_impact.application.schemas import CalibrateRequest
from src.mx_impact.application.service import calibrate_history

router = APIRouter(prefix="/impact", tags=["impact"])


@router.post("/calibrate")
async def calibrate(req: CalibrateRequest, request: Request) -> ApiResponse:
    result = calibrate_history(req)
    return success_response(result.model_dump(mode="json", by_alias=True), request)
