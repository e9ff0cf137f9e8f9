# repository/memory_store.py
import threading
from typing import Any, Callable, Optional, TypeVar
from model.record import Record
from repository.record_store import RecordNotFound, RecordStore

T = TypeVar("T")


class MemoryRecordStore(RecordStore):
    """
    In-process store: a dict of records plus a paused-keys index.

    Every operation runs under one threading.Lock and never awaits while
    holding it, so the store is safe for asyncio tasks and worker threads alike.
    Subclasses hook durability in via _commit_put/_commit_delete and may move
    every locked section, reads included, off the loop by overriding _run.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[str, Record] = {}
        self._paused: set[str] = set()

    async def _run(self, fn: Callable[..., T], *args: Any) -> T:
        return fn(*args)

    # ---------------- Mutations ----------------

    async def put(self, key: str, record: Optional[Record] = None) -> None:
        await self._run(self._put_locked, key, self._coerce(record))

    async def delete(self, key: str) -> None:
        await self._run(self._delete_locked, key)

    def _put_locked(self, key: str, record: Record) -> None:
        with self._lock:
            self._commit_put(key, record)
            self._apply_put(key, record)

    def _delete_locked(self, key: str) -> None:
        with self._lock:
            if key not in self._records:
                return
            self._commit_delete(key)
            self._apply_delete(key)

    def _commit_put(self, key: str, record: Record) -> None:
        """Persist a put before it becomes visible. Raise StoreError to abort."""

    def _commit_delete(self, key: str) -> None:
        """Persist a delete before it becomes visible. Raise StoreError to abort."""

    def _apply_put(self, key: str, record: Record) -> None:
        self._records[key] = record
        if record.paused:
            self._paused.add(key)
        else:
            self._paused.discard(key)

    def _apply_delete(self, key: str) -> None:
        self._records.pop(key, None)
        self._paused.discard(key)

    # ---------------- Reads ----------------

    async def get(self, key: str) -> Record:
        return await self._run(self._get_locked, key)

    async def find(self, substring: str) -> dict[str, Record]:
        return await self._run(self._find_locked, substring)

    async def get_paused(self) -> dict[str, Record]:
        return await self._run(self._paused_locked)

    async def key_count(self) -> int:
        return await self._run(self._count_locked)

    def _get_locked(self, key: str) -> Record:
        with self._lock:
            rec = self._records.get(key)
            if rec is None:
                raise RecordNotFound(key)
            return rec.model_copy(deep=True)

    def _find_locked(self, substring: str) -> dict[str, Record]:
        with self._lock:
            return {
                k: v.model_copy(deep=True)
                for k, v in self._records.items()
                if substring in k
            }

    def _paused_locked(self) -> dict[str, Record]:
        with self._lock:
            return {k: self._records[k].model_copy(deep=True) for k in self._paused}

    def _count_locked(self) -> int:
        with self._lock:
            return len(self._records)
