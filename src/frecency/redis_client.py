"""
Redis Client for Frecency History

Wraps redis-py for storing the persisted history image under a single key.
"""

import os
from typing import Optional

import redis


class RedisClient:
    """Redis client wrapper for history image storage."""

    # Default key holding the history image
    KEY_HISTORY = "frecency:history"

    def __init__(self, url: Optional[str] = None):
        """
        Initialize Redis connection.

        Args:
            url: Redis URL (defaults to REDIS_URL env var or localhost)
        """
        self.url = url or os.environ.get('REDIS_URL', 'redis://localhost:6379/0')
        self._client: Optional[redis.Redis] = None

    @property
    def client(self) -> redis.Redis:
        """Lazy-initialize Redis connection."""
        if self._client is None:
            # Raw bytes: the image is already UTF-8 encoded by the codec
            self._client = redis.from_url(self.url, decode_responses=False)
        return self._client

    def ping(self) -> bool:
        """Check if Redis is available."""
        try:
            return self.client.ping()
        except redis.ConnectionError:
            return False

    def read(self, key: str = KEY_HISTORY) -> Optional[bytes]:
        """Get the stored image, or None if the key does not exist."""
        return self.client.get(key)

    def write(self, key: str, data: bytes) -> bool:
        """Replace the stored image. A single SET is atomic in Redis."""
        return bool(self.client.set(key, data))

    def exists(self, key: str = KEY_HISTORY) -> bool:
        """Check whether an image has been stored."""
        return bool(self.client.exists(key))
