import json

import pytest

from frecency import codec
from frecency.errors import CorruptPersistedState
from frecency.scorer import AccessHistory
from frecency.store import RankingStore


def make_store():
    store = RankingStore()
    for path in ["/src/app.py", "/src/db.py", "/src/app.py", "/docs/ünïcode.md"]:
        store.record_access(path)
    return store


def test_encode_is_deterministic():
    assert codec.encode(make_store()) == codec.encode(make_store())


def test_decode_restores_order_and_scores():
    store = make_store()
    restored = codec.decode(codec.encode(store))
    assert restored.list_ranked_with_score() == store.list_ranked_with_score()


def test_fractional_ranks_survive_exactly():
    store = RankingStore.from_entries([("/a", AccessHistory(0.1 + 0.2)), ("/b", AccessHistory(1.0))])
    restored = codec.decode(codec.encode(store))
    assert restored.score_of("/a") == 0.1 + 0.2


def test_image_layout():
    image = json.loads(codec.encode(make_store()).decode("utf-8"))
    assert image["version"] == codec.FORMAT_VERSION
    assert image["entries"][0] == {"path": "/src/app.py", "rank": 2.0}
    assert [e["path"] for e in image["entries"]] == make_store().list_ranked()


def test_empty_store_round_trips():
    assert len(codec.decode(codec.encode(RankingStore()))) == 0


def test_decode_applies_store_options():
    restored = codec.decode(codec.encode(make_store()), aging_threshold=50, aging_multiplier=0.5)
    assert restored.aging_threshold == 50
    assert restored.aging_multiplier == 0.5


def test_truncated_image_is_corrupt():
    data = codec.encode(make_store())
    with pytest.raises(CorruptPersistedState):
        codec.decode(data[:len(data) // 2])


@pytest.mark.parametrize("data", [
    b"",
    b"\xff\xfe",
    b"[]",
    b'{"entries": []}',
    b'{"version": 2, "entries": []}',
    b'{"version": true, "entries": []}',
    b'{"version": 1}',
    b'{"version": 1, "entries": {}}',
    b'{"version": 1, "entries": ["/a"]}',
    b'{"version": 1, "entries": [{"rank": 1.0}]}',
    b'{"version": 1, "entries": [{"path": "", "rank": 1.0}]}',
    b'{"version": 1, "entries": [{"path": "/a"}]}',
    b'{"version": 1, "entries": [{"path": "/a", "rank": "1"}]}',
    b'{"version": 1, "entries": [{"path": "/a", "rank": true}]}',
    b'{"version": 1, "entries": [{"path": "/a", "rank": -1}]}',
    b'{"version": 1, "entries": [{"path": "/a", "rank": NaN}]}',
    b'{"version": 1, "entries": [{"path": "/a", "rank": 1}, {"path": "/a", "rank": 2}]}',
    b'{"version": 1, "entries": [{"path": "/a", "rank": 1' + b"0" * 400 + b"}]}",
    b"[" * 100000,
])
def test_malformed_images_are_corrupt(data):
    with pytest.raises(CorruptPersistedState):
        codec.decode(data)


def test_integer_ranks_are_accepted():
    store = codec.decode(b'{"version": 1, "entries": [{"path": "/a", "rank": 3}]}')
    assert store.list_ranked_with_score() == [("/a", 3.0)]
