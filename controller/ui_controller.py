# controller/ui_controller.py
from typing import Optional
from urllib.parse import quote
from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import HTMLResponse, RedirectResponse
from core.rendering import render_index
from model.record import Record
from service.record_service import RecordService
from util.constants import InternalURIs
from controller.controller_dependencies import get_record_service, require_admin

ui_router = APIRouter(dependencies=[Depends(require_admin)])


@ui_router.get(InternalURIs.ROOT, response_class=HTMLResponse)
async def index(
    q: Optional[str] = None,
    p: Optional[str] = None,
    service: RecordService = Depends(get_record_service),
) -> HTMLResponse:
    data = await service.browse(q, p)
    total = await service.total()
    return HTMLResponse(render_index(data, total, q=q, p=p))


@ui_router.post(InternalURIs.ROOT)
async def create(
    key: str = Form(""),
    paused: str = Form(""),
    service: RecordService = Depends(get_record_service),
) -> RedirectResponse:
    record = Record(paused=True) if paused == "1" else None
    await service.save(key, record)
    return RedirectResponse(
        f"/{quote(key, safe='')}", status_code=status.HTTP_302_FOUND
    )


@ui_router.get(InternalURIs.RECORD, response_class=HTMLResponse)
async def read(
    key: str,
    service: RecordService = Depends(get_record_service),
) -> HTMLResponse:
    record = await service.read(key)
    total = await service.total()
    return HTMLResponse(render_index({key: record}, total))
