# controller/asset_controller.py
from fastapi import APIRouter
from fastapi.responses import Response
from core.rendering import NOGO_CSS
from model.api import HealthResponse
from util.constants import InternalURIs, CSS_CACHE_CONTROL

asset_router = APIRouter()


@asset_router.get(InternalURIs.CSS)
async def stylesheet() -> Response:
    return Response(
        content=NOGO_CSS.encode("utf-8"),
        media_type="text/css",
        headers={"Cache-Control": CSS_CACHE_CONTROL},
    )


@asset_router.get(InternalURIs.HEALTH, response_model=HealthResponse)
async def healthz() -> HealthResponse:
    return HealthResponse(ok=True)
