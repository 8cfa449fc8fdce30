import logging
from typing import Callable, Generic, TypeVar

import redis.asyncio as redis
from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from .redis_client import RedisClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PersistentSlot(Generic[T]):
    """
    Typed view over one named slot in Redis.

    ``load`` never raises: a missing slot, an unreadable store or a payload that
    does not validate against the slot's type all fall back to the default.
    ``save`` is a full overwrite; when it fails the previously stored payload is
    left as it was and ``False`` is returned.
    """

    def __init__(self, client: RedisClient, name: str, value_type: type, default: Callable[[], T]):
        self._client = client
        self._name = name
        self._adapter = TypeAdapter(value_type)
        self._default = default

    @property
    def name(self) -> str:
        return self._name

    def default(self) -> T:
        return self._default()

    async def load(self) -> T:
        try:
            payload = await self._client.get_slot(self._name)
        except (redis.RedisError, OSError) as e:
            logger.error(f"Could not read slot '{self._name}', using default: {e}")
            return self._default()
        except UnicodeDecodeError as e:
            # Raised by the client's response decoder, not by validation.
            logger.error(f"Slot '{self._name}' holds bytes that are not UTF-8, using default: {e}")
            return self._default()

        if payload is None:
            logger.info(f"Slot '{self._name}' is empty, using default.")
            return self._default()

        try:
            return self._adapter.validate_json(payload)
        except ValidationError as e:
            logger.error(f"Slot '{self._name}' holds a malformed payload, using default: {e.error_count()} error(s).")
            return self._default()

    async def save(self, value: T) -> bool:
        try:
            payload = self._adapter.dump_json(value, by_alias=True).decode("utf-8")
        except PydanticSerializationError as e:
            logger.error(f"Could not serialize value for slot '{self._name}': {e}")
            return False

        try:
            await self._client.set_slot(self._name, payload)
        except (redis.RedisError, OSError) as e:
            logger.error(f"Could not write slot '{self._name}', stored value left untouched: {e}")
            return False
        return True

    async def clear(self) -> bool:
        try:
            await self._client.delete_slot(self._name)
        except (redis.RedisError, OSError) as e:
            logger.error(f"Could not clear slot '{self._name}': {e}")
            return False
        return True
