# repository/log_store.py
import asyncio
import json
import logging
import os
from typing import Any, Callable, IO, Optional, TypeVar
from pydantic import ValidationError
from model.record import Record
from repository.memory_store import MemoryRecordStore
from repository.record_store import StoreError

logger = logging.getLogger(__name__)

T = TypeVar("T")

OP_PUT = "put"
OP_DELETE = "delete"


class LogRecordStore(MemoryRecordStore):
    """
    Append-only JSON-lines log in front of the in-memory store.

    Each line is one mutation: {"op": "put", "key": ..., "record": {...}} or
    {"op": "delete", "key": ...}. open() replays the log and rewrites it as a
    snapshot; every mutation is fsynced before it is applied in memory, so a
    put/delete that returns is durable and a failed one changes nothing.
    """

    def __init__(self, path: str) -> None:
        super().__init__()
        self._path = path
        self._fh: Optional[IO[bytes]] = None

    @property
    def path(self) -> str:
        return self._path

    async def _run(self, fn: Callable[..., T], *args: Any) -> T:
        return await asyncio.to_thread(fn, *args)

    # ---------------- Lifecycle ----------------

    async def open(self) -> "LogRecordStore":
        await asyncio.to_thread(self._open_sync)
        return self

    async def close(self) -> None:
        await asyncio.to_thread(self._close_sync)

    def _open_sync(self) -> None:
        with self._lock:
            if self._fh is not None:
                return
            try:
                directory = os.path.dirname(self._path)
                if directory:
                    os.makedirs(directory, exist_ok=True)
                replayed = self._replay()
                self._compact()
                # Unbuffered: a failed append leaves nothing queued to flush later
                self._fh = open(self._path, "ab", buffering=0)
            except OSError as e:
                raise StoreError(f"open {self._path}", e) from e
        logger.info(
            "store.log.opened path=%s entries=%d keys=%d",
            self._path,
            replayed,
            len(self._records),
        )

    def _close_sync(self) -> None:
        with self._lock:
            if self._fh is None:
                return
            try:
                self._fh.close()
                self._fh = None
                self._compact()
            except OSError as e:
                raise StoreError(f"close {self._path}", e) from e
        logger.info("store.log.closed path=%s keys=%d", self._path, len(self._records))

    def _replay(self) -> int:
        if not os.path.exists(self._path):
            return 0
        applied = 0
        with open(self._path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entry = json.loads(line)
                    op = entry["op"]
                    key = entry["key"]
                    if op == OP_PUT:
                        self._apply_put(key, Record.model_validate(entry["record"]))
                    elif op == OP_DELETE:
                        self._apply_delete(key)
                    else:
                        raise ValueError(f"unknown op {op!r}")
                except (ValueError, KeyError, TypeError, ValidationError) as e:
                    # Torn tail after a crash, or hand-edited garbage
                    logger.warning(
                        "store.log.skip path=%s line=%d err=%s",
                        self._path,
                        lineno,
                        type(e).__name__,
                    )
                    continue
                applied += 1
        return applied

    def _compact(self) -> None:
        tmp = f"{self._path}.tmp"
        with open(tmp, "w", encoding="utf-8") as f:
            for key, record in self._records.items():
                f.write(self._line(OP_PUT, key, record))
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, self._path)

    # ---------------- Durability hooks ----------------

    def _commit_put(self, key: str, record: Record) -> None:
        try:
            line = self._line(OP_PUT, key, record)
        except (TypeError, ValueError) as e:
            raise StoreError(f"encode record {key!r}", e) from e
        self._append(line)

    def _commit_delete(self, key: str) -> None:
        self._append(self._line(OP_DELETE, key))

    def _append(self, line: str) -> None:
        if self._fh is None:
            raise StoreError(f"log {self._path} is not open")
        fd = self._fh.fileno()
        data = line.encode("utf-8")
        try:
            # Real end of file; tell() can lag behind after a rewind
            pos = os.fstat(fd).st_size
        except OSError as e:
            raise StoreError(f"stat {self._path}", e) from e
        try:
            view = memoryview(data)
            while view:
                n = self._fh.write(view)
                view = view[n:]
            os.fsync(fd)
        except OSError as e:
            self._rewind(fd, pos)
            raise StoreError(f"append {self._path}", e) from e

    def _rewind(self, fd: int, pos: int) -> None:
        # Drop a partially written line so the next append starts clean.
        try:
            os.ftruncate(fd, pos)
            os.lseek(fd, pos, os.SEEK_SET)
        except OSError as e:
            logger.warning("store.log.rewind.error path=%s err=%s", self._path, e)

    @staticmethod
    def _line(op: str, key: str, record: Optional[Record] = None) -> str:
        entry: dict[str, Any] = {"op": op, "key": key}
        if record is not None:
            entry["record"] = record.model_dump(mode="json")
        return json.dumps(entry, separators=(",", ":")) + "\n"
