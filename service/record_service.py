# service/record_service.py
import logging
from typing import Optional
from model.record import Record
from repository.record_store import RecordNotFound, RecordStore, StoreError
from util.constants import Limits
from util.enums import ErrorMessage
from util.errors import AppError
from util.timing import timed

logger = logging.getLogger(__name__)


class RecordService:
    """
    Validates operator input, calls the record store and translates its
    errors: RecordNotFound -> 404, StoreError -> 500 (logged with context).
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    # ---------------- Validation ----------------

    @staticmethod
    def validate_key(key: str) -> None:
        if len(key) < Limits.MIN_KEY_LENGTH:
            raise AppError.of(ErrorMessage.KEY_TOO_SHORT)

    @staticmethod
    def _query_ok(q: Optional[str]) -> bool:
        return q is not None and len(q) >= Limits.MIN_QUERY_LENGTH

    # ---------------- Listing ----------------

    async def browse(
        self, q: Optional[str], p: Optional[str]
    ) -> Optional[dict[str, Record]]:
        """HTML listing: a non-empty q must be long enough; no filter lists nothing."""
        if q:
            if not self._query_ok(q):
                raise AppError.of(ErrorMessage.QUERY_TOO_SHORT)
            return await self._find(q)
        if p == "1":
            return await self._paused()
        return None

    async def query(self, q: Optional[str], p: Optional[str]) -> dict[str, Record]:
        """API listing: exactly like browse(), but some filter is mandatory."""
        if self._query_ok(q):
            return await self._find(q)
        if p == "1":
            return await self._paused()
        raise AppError.of(ErrorMessage.MISSING_FILTER)

    async def _find(self, q: str) -> dict[str, Record]:
        try:
            with timed(logger, "records.find", q=q):
                return await self._store.find(q)
        except StoreError as e:
            logger.error("records.find.error q=%s err=%s", q, e)
            raise AppError.of(ErrorMessage.INTERNAL_ERROR) from e

    async def _paused(self) -> dict[str, Record]:
        try:
            with timed(logger, "records.paused"):
                return await self._store.get_paused()
        except StoreError as e:
            logger.error("records.paused.error err=%s", e)
            raise AppError.of(ErrorMessage.INTERNAL_ERROR) from e

    async def total(self) -> int:
        try:
            return await self._store.key_count()
        except StoreError as e:
            logger.error("records.count.error err=%s", e)
            raise AppError.of(ErrorMessage.INTERNAL_ERROR) from e

    # ---------------- Single record ----------------

    async def read(self, key: str) -> Record:
        try:
            return await self._store.get(key)
        except RecordNotFound as e:
            raise AppError.of(ErrorMessage.RECORD_NOT_FOUND) from e
        except StoreError as e:
            logger.error("records.get.error key=%s err=%s", key, e)
            raise AppError.of(ErrorMessage.INTERNAL_ERROR) from e

    async def save(self, key: str, record: Optional[Record] = None) -> Record:
        """Full overwrite; None stores a default record. Returns what was stored."""
        self.validate_key(key)
        stored = record if record is not None else Record()
        try:
            await self._store.put(key, stored)
        except StoreError as e:
            logger.error("records.put.error key=%s err=%s", key, e)
            raise AppError.of(ErrorMessage.INTERNAL_ERROR) from e
        logger.info("records.put key=%s paused=%s", key, stored.paused)
        return stored

    async def remove(self, key: str) -> None:
        try:
            await self._store.delete(key)
        except StoreError as e:
            logger.error("records.delete.error key=%s err=%s", key, e)
            raise AppError.of(ErrorMessage.INTERNAL_ERROR) from e
        logger.info("records.delete key=%s", key)
