# repository/record_store.py
from abc import ABC, abstractmethod
from typing import Optional
from model.record import Record


class RecordStoreError(Exception):
    """Base class for everything a RecordStore raises."""


class RecordNotFound(RecordStoreError):
    def __init__(self, key: str) -> None:
        super().__init__(f"record not found: {key!r}")
        self.key = key


class StoreError(RecordStoreError):
    # Flow: opaque wrapper; the adapter maps any StoreError to a 500.
    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message if cause is None else f"{message}: {cause}")
        self.cause = cause


class RecordStore(ABC):
    """
    Keyed record persistence shared by every request handler.

    Contract:
    - get() returns a copy or raises RecordNotFound.
    - put() is a full overwrite; put(key, None) stores a default Record.
    - delete() is idempotent.
    - find() matches keys by case-sensitive substring; "" matches everything.
    - get_paused() returns records whose paused flag is set.
    - Mutations either apply fully or raise StoreError with no visible effect.
    """

    @abstractmethod
    async def get(self, key: str) -> Record: ...

    @abstractmethod
    async def put(self, key: str, record: Optional[Record] = None) -> None: ...

    @abstractmethod
    async def delete(self, key: str) -> None: ...

    @abstractmethod
    async def find(self, substring: str) -> dict[str, Record]: ...

    @abstractmethod
    async def get_paused(self) -> dict[str, Record]: ...

    @abstractmethod
    async def key_count(self) -> int: ...

    async def close(self) -> None:
        return None

    @staticmethod
    def _coerce(record: Optional[Record]) -> Record:
        if record is None:
            return Record()
        return record.model_copy(deep=True)
