# controller/api_controller.py
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Request, Response, status
from pydantic import ValidationError
from model.api import RecordsResponse
from model.record import Record
from service.record_service import RecordService
from util.constants import InternalURIs
from util.enums import ErrorMessage
from util.errors import AppError
from controller.controller_dependencies import get_record_service, require_admin

logger = logging.getLogger(__name__)

api_router = APIRouter(dependencies=[Depends(require_admin)])


@api_router.get(InternalURIs.API_INDEX, response_model=RecordsResponse)
async def list_records(
    q: Optional[str] = None,
    p: Optional[str] = None,
    service: RecordService = Depends(get_record_service),
) -> RecordsResponse:
    return RecordsResponse(data=await service.query(q, p))


@api_router.get(InternalURIs.API_RECORD, response_model=RecordsResponse)
async def read_record(
    key: str,
    service: RecordService = Depends(get_record_service),
) -> RecordsResponse:
    return RecordsResponse(data={key: await service.read(key)})


@api_router.put(InternalURIs.API_RECORD, response_model=RecordsResponse)
async def put_record(
    key: str,
    request: Request,
    service: RecordService = Depends(get_record_service),
) -> RecordsResponse:
    # Checked before the body so a short key is 422 even when the body is bad
    service.validate_key(key)
    # Empty body means "create with defaults"
    body = await request.body()
    record: Optional[Record] = None
    if body.strip():
        try:
            record = Record.model_validate_json(body)
        except ValidationError as e:
            logger.warning("api.put.bad_body key=%s errors=%d", key, e.error_count())
            raise AppError.of(ErrorMessage.BAD_BODY) from e
    stored = await service.save(key, record)
    return RecordsResponse(data={key: stored})


@api_router.delete(InternalURIs.API_RECORD, status_code=status.HTTP_204_NO_CONTENT)
async def delete_record(
    key: str,
    service: RecordService = Depends(get_record_service),
) -> Response:
    await service.remove(key)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
