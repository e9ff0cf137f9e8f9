# repository/redis_store.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Union
from pydantic import ValidationError
from redis.asyncio import Redis
from redis.exceptions import RedisError
from model.record import Record
from repository.namespaces import ROOT, paused_key, records_key
from repository.record_store import RecordNotFound, RecordStore, StoreError

logger = logging.getLogger(__name__)


def _s(v: Union[bytes, bytearray, str]) -> str:
    return v.decode("utf-8") if isinstance(v, (bytes, bytearray)) else str(v)


class RedisRecordStore(RecordStore):
    """
    Flow:
    - All records live in one hash (<ns>:records), field = key, value = JSON.
    - Paused keys are mirrored in a set (<ns>:paused).
    - put/delete touch both inside MULTI/EXEC so readers never see them disagree.
    - find() reads the hash with HGETALL, which Redis serves atomically.
    """

    def __init__(self, client: Redis, namespace: str = ROOT) -> None:
        self._r = client
        self._records = records_key(namespace)
        self._paused = paused_key(namespace)

    @asynccontextmanager
    async def _errors(self, op: str, key: Optional[str] = None) -> AsyncIterator[None]:
        try:
            yield
        except RedisError as e:
            raise StoreError(f"redis {op} key={key!r}", e) from e

    def _decode(self, key: str, raw: Union[bytes, str]) -> Record:
        try:
            return Record.model_validate_json(raw)
        except ValidationError as e:
            raise StoreError(f"decode record {key!r}", e) from e

    # ---------------- Core CRUD ----------------

    async def get(self, key: str) -> Record:
        async with self._errors("hget", key):
            raw = await self._r.hget(self._records, key)
        if raw is None:
            raise RecordNotFound(key)
        return self._decode(key, raw)

    async def put(self, key: str, record: Optional[Record] = None) -> None:
        rec = self._coerce(record)
        try:
            payload = rec.model_dump_json().encode("utf-8")
        except (TypeError, ValueError) as e:
            raise StoreError(f"encode record {key!r}", e) from e
        async with self._errors("put", key):
            async with self._r.pipeline(transaction=True) as pipe:
                pipe.hset(self._records, key, payload)
                if rec.paused:
                    pipe.sadd(self._paused, key)
                else:
                    pipe.srem(self._paused, key)
                await pipe.execute()

    async def delete(self, key: str) -> None:
        async with self._errors("delete", key):
            async with self._r.pipeline(transaction=True) as pipe:
                pipe.hdel(self._records, key)
                pipe.srem(self._paused, key)
                await pipe.execute()

    # ---------------- Keyspace queries ----------------

    async def find(self, substring: str) -> dict[str, Record]:
        async with self._errors("hgetall"):
            h = await self._r.hgetall(self._records)
        out: dict[str, Record] = {}
        for k, raw in (h or {}).items():
            key = _s(k)
            if substring in key:
                out[key] = self._decode(key, raw)
        return out

    async def get_paused(self) -> dict[str, Record]:
        async with self._errors("smembers"):
            members = await self._r.smembers(self._paused)
            keys = sorted(_s(m) for m in members or ())
            if not keys:
                return {}
            values = await self._r.hmget(self._records, keys)
        out: dict[str, Record] = {}
        for key, raw in zip(keys, values):
            # Deleted or unpaused between SMEMBERS and HMGET
            if raw is None:
                continue
            rec = self._decode(key, raw)
            if rec.paused:
                out[key] = rec
        return out

    async def key_count(self) -> int:
        async with self._errors("hlen"):
            return int(await self._r.hlen(self._records))

    async def close(self) -> None:
        async with self._errors("close"):
            await self._r.aclose()
        logger.info("store.redis.closed")
