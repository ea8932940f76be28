"""
Frecency History Backends - Where the Persisted Image Lives

A backend stores one opaque byte image and replaces it all-or-nothing:
- FileBackend: temp file in the target directory, fsync, os.replace
- RedisBackend: one SET on one key

`read()` returns None when nothing has been stored yet (bootstrap case).
Underlying I/O errors surface as PersistenceIOFailure.
"""

import logging
import os
import tempfile
from typing import Optional
from urllib.parse import urldefrag

import redis

from .errors import PersistenceIOFailure
from .redis_client import RedisClient

logger = logging.getLogger(__name__)

REDIS_SCHEMES = ('redis://', 'rediss://')


class FileBackend:
    """History image stored in a single file."""

    def __init__(self, path: str):
        self.path = os.path.abspath(os.path.expanduser(path))

    @property
    def location(self) -> str:
        return self.path

    def exists(self) -> bool:
        return os.path.exists(self.path)

    def read(self) -> Optional[bytes]:
        try:
            with open(self.path, 'rb') as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceIOFailure(self.path, str(e)) from e

    def write(self, data: bytes) -> None:
        """Atomically replace the file with `data`."""
        directory = os.path.dirname(self.path)
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=directory,
                prefix=f".{os.path.basename(self.path)}-", suffix=".tmp",
            )
        except OSError as e:
            raise PersistenceIOFailure(self.path, str(e)) from e

        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except OSError as e:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise PersistenceIOFailure(self.path, str(e)) from e

        logger.debug("wrote %d bytes to %s", len(data), self.path)


class RedisBackend:
    """History image stored under one Redis key."""

    def __init__(self, url: str, key: str = RedisClient.KEY_HISTORY,
                 redis_client: Optional[RedisClient] = None):
        self.key = key
        self.redis = redis_client or RedisClient(url=url)

    @property
    def location(self) -> str:
        return f"{self.redis.url}#{self.key}"

    def exists(self) -> bool:
        try:
            return self.redis.exists(self.key)
        except redis.RedisError as e:
            raise PersistenceIOFailure(self.location, str(e)) from e

    def read(self) -> Optional[bytes]:
        try:
            return self.redis.read(self.key)
        except redis.RedisError as e:
            raise PersistenceIOFailure(self.location, str(e)) from e

    def write(self, data: bytes) -> None:
        try:
            self.redis.write(self.key, data)
        except redis.RedisError as e:
            raise PersistenceIOFailure(self.location, str(e)) from e

        logger.debug("wrote %d bytes to %s", len(data), self.location)


def open_backend(location: str):
    """
    Pick a backend for a history location.

    Args:
        location: Filesystem path, or redis://host:port/db[#key]

    Returns:
        FileBackend or RedisBackend
    """
    if location.startswith(REDIS_SCHEMES):
        url, key = urldefrag(location)
        return RedisBackend(url, key or RedisClient.KEY_HISTORY)
    return FileBackend(location)
