import os

import pytest
import redis

from frecency.backends import FileBackend, RedisBackend, open_backend
from frecency.errors import PersistenceIOFailure


class FakeRedis:
    """Minimal in-memory stand-in for redis.Redis."""

    def __init__(self):
        self.data = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise redis.ConnectionError("connection refused")

    def get(self, key):
        self._check()
        return self.data.get(key)

    def set(self, key, value):
        self._check()
        self.data[key] = value
        return True

    def exists(self, key):
        self._check()
        return int(key in self.data)


@pytest.fixture
def fake_redis(monkeypatch):
    fake = FakeRedis()
    monkeypatch.setattr(redis, "from_url", lambda url, **kwargs: fake)
    return fake


def test_file_backend_missing_file_reads_none(tmp_path):
    backend = FileBackend(str(tmp_path / "history.json"))
    assert not backend.exists()
    assert backend.read() is None


def test_file_backend_write_creates_directories(tmp_path):
    backend = FileBackend(str(tmp_path / "nested" / "dir" / "history.json"))
    backend.write(b"payload")
    assert backend.exists()
    assert backend.read() == b"payload"


def test_file_backend_replaces_whole_file(tmp_path):
    backend = FileBackend(str(tmp_path / "history.json"))
    backend.write(b"a much longer first payload")
    backend.write(b"short")
    assert backend.read() == b"short"


def test_failed_write_keeps_previous_image_and_cleans_temp(tmp_path, monkeypatch):
    backend = FileBackend(str(tmp_path / "history.json"))
    backend.write(b"original")

    def broken_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(os, "replace", broken_replace)

    with pytest.raises(PersistenceIOFailure) as exc:
        backend.write(b"new")

    monkeypatch.undo()
    assert "disk full" in str(exc.value)
    assert backend.read() == b"original"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["history.json"]


def test_unreadable_location_raises_io_failure(tmp_path):
    # A directory where the file should be
    location = tmp_path / "history.json"
    location.mkdir()
    with pytest.raises(PersistenceIOFailure):
        FileBackend(str(location)).read()


def test_file_backend_expands_user(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    backend = FileBackend("~/history.json")
    assert backend.location == str(tmp_path / "history.json")


def test_redis_backend_round_trip(fake_redis):
    backend = RedisBackend("redis://localhost:6379/0", key="test:history")
    assert backend.read() is None
    assert not backend.exists()

    backend.write(b"payload")
    assert backend.exists()
    assert backend.read() == b"payload"
    assert fake_redis.data == {"test:history": b"payload"}


def test_redis_errors_become_io_failures(fake_redis):
    backend = RedisBackend("redis://localhost:6379/0")
    fake_redis.fail = True
    with pytest.raises(PersistenceIOFailure):
        backend.read()
    with pytest.raises(PersistenceIOFailure):
        backend.write(b"payload")


def test_open_backend_picks_by_location(tmp_path, fake_redis):
    assert isinstance(open_backend(str(tmp_path / "h.json")), FileBackend)

    backend = open_backend("redis://localhost:6379/2#work:history")
    assert isinstance(backend, RedisBackend)
    assert backend.key == "work:history"
    assert backend.redis.url == "redis://localhost:6379/2"

    assert open_backend("redis://localhost:6379/0").key == "frecency:history"
