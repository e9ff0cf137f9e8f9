# repository/store_factory.py
import logging
from redis.exceptions import RedisError
from config.cache import create_redis
from config.settings import Settings
from repository.log_store import LogRecordStore
from repository.memory_store import MemoryRecordStore
from repository.record_store import RecordStore, StoreError
from repository.redis_store import RedisRecordStore
from util.enums import StoreBackend

logger = logging.getLogger(__name__)


async def open_store(cfg: Settings) -> RecordStore:
    """Build and open the backend selected by STORE_BACKEND."""
    backend = StoreBackend(cfg.STORE_BACKEND)

    if backend == StoreBackend.MEMORY:
        store: RecordStore = MemoryRecordStore()
    elif backend == StoreBackend.LOG:
        store = await LogRecordStore(cfg.STORE_PATH).open()
    else:
        try:
            client = await create_redis(cfg.REDIS_URL)
        except RedisError as e:
            raise StoreError("redis connect", e) from e
        store = RedisRecordStore(client, namespace=cfg.REDIS_NAMESPACE)

    logger.info("store.opened backend=%s", backend.value)
    return store
