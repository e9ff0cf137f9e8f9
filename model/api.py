# model/api.py
from pydantic import BaseModel
from model.record import Record


class RecordsResponse(BaseModel):
    data: dict[str, Record]


class HealthResponse(BaseModel):
    ok: bool
