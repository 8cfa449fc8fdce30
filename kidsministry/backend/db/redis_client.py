import logging
from typing import Optional
import redis.asyncio as redis

logger = logging.getLogger(__name__)

class RedisClient:
    """
    Redis client that owns every persisted slot of one dashboard namespace.

    A slot is a single string key holding the JSON snapshot of one value
    (a whole collection, a flag, a draft...). Writes always overwrite the slot.
    """

    def __init__(self, pool: redis.ConnectionPool, namespace: str = "ebi"):
        self._redis = redis.Redis(connection_pool=pool, decode_responses=True)
        self._namespace = namespace

    def slot_key(self, name: str) -> str:
        """Builds the namespaced key of a slot, e.g. 'ebi_children'."""
        return f"{self._namespace}_{name}"

    async def get_slot(self, name: str) -> Optional[str]:
        """Returns the raw payload of a slot, or None if the slot is absent."""
        return await self._redis.get(self.slot_key(name))

    async def set_slot(self, name: str, payload: str) -> None:
        """Overwrites a slot with a new payload."""
        await self._redis.set(self.slot_key(name), payload)

    async def delete_slot(self, name: str) -> int:
        """Removes a slot. Returns the number of deleted keys."""
        return await self._redis.delete(self.slot_key(name))

    async def ping(self) -> bool:
        try:
            return await self._redis.ping()
        except (redis.RedisError, OSError) as e:
            logger.error(f"Redis ping failed: {e}")
            return False
