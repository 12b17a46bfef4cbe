from fastapi import APIRouter, Request

from ..schemas.comparison import ComparisonRequest, ComparisonResponse
from ..services.comparison_service import ComparisonService

router = APIRouter(prefix="/api/v1", tags=["comparison"])


@router.post("/comparison", response_model=ComparisonResponse)
async def compare(body: ComparisonRequest, request: Request):
    svc = request.app.state.comparison_service
    result = svc.compare(
        plan_a=body.plan_a.to_mapping(),
        plan_b=body.plan_b.to_mapping(),
        user_profile=body.user_profile.to_mapping() if body.user_profile else None,
        alternatives=[alt.to_mapping() for alt in body.alternatives],
        mode=body.mode,
    )
    return ComparisonResponse(mode=body.mode, result=result)


@router.get("/comparison")
async def describe():
    return ComparisonService.describe()
