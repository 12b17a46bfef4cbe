from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    state = request.app.state
    has_services = (
        getattr(state, "comparison_service", None) is not None
        and getattr(state, "addon_service", None) is not None
    )
    if not has_services:
        return {"status": "not_ready", "reason": "services not initialised"}
    return {"status": "ready"}
