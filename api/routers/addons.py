from fastapi import APIRouter, Request

from ..schemas.addons import AddOnRequest, AddOnResponse, CatalogResponse

router = APIRouter(prefix="/api/v1/add-ons", tags=["add-ons"])


@router.post("", response_model=AddOnResponse)
async def recommend(body: AddOnRequest, request: Request):
    svc = request.app.state.addon_service
    result = svc.analyze(
        ages=body.ages,
        preferences=body.preferences.to_mapping() if body.preferences else None,
        risk_factors=body.risk_factors.to_mapping() if body.risk_factors else None,
        state_adjustment_factor=body.state_adjustment_factor,
        catalog=[p.to_mapping() for p in body.catalog] if body.catalog is not None else None,
    )
    return AddOnResponse(result=result)


@router.get("/catalog", response_model=CatalogResponse)
async def catalog(request: Request):
    return CatalogResponse(products=request.app.state.addon_service.list_catalog())
