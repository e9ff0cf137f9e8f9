# model/record.py
from typing import Any
from pydantic import BaseModel, ConfigDict


class Record(BaseModel):
    # Flow: the key lives outside the record; the store maps key -> Record.
    model_config = ConfigDict(extra="ignore")

    paused: bool = False
    data: Any = None
