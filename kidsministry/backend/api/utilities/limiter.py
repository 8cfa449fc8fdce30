# kidsministry/backend/api/utilities/limiter.py

from slowapi import Limiter
from slowapi.util import get_remote_address

from ...config.config import settings

# Keyed by client address; storage defaults to in-memory, set
# RATE_LIMITER_REDIS_URL to share limits between workers.
limiter = Limiter(key_func=get_remote_address, storage_uri=settings.RATE_LIMITER_REDIS_URL)
