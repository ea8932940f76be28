"""
Frecency Codec - Persisted Image Format

The whole store is written as one JSON document:

    {
      "entries": [
        {"path": "/src/api/routes.py", "rank": 12.0},
        {"path": "/src/api/auth.py", "rank": 3.97}
      ],
      "version": 1
    }

Entries appear in rank order. Encoding is deterministic: the same store
always produces the same bytes.
"""

import json
import math
from typing import Any

from .errors import CorruptPersistedState
from .scorer import AccessHistory
from .store import RankingStore

FORMAT_VERSION = 1


def encode(store: RankingStore) -> bytes:
    """Serialize a store to bytes."""
    image = {
        'version': FORMAT_VERSION,
        'entries': [
            {'path': resource_id, 'rank': history.rank}
            for resource_id, history in store.entries()
        ],
    }
    text = json.dumps(image, sort_keys=True, ensure_ascii=False, indent=2)
    return (text + '\n').encode('utf-8')


def decode(data: bytes, **store_options) -> RankingStore:
    """
    Deserialize bytes produced by `encode` into a fresh store.

    Args:
        data: Persisted image
        **store_options: aging_threshold / aging_multiplier for the new store

    Raises:
        CorruptPersistedState: data is not a valid image
    """
    # ValueError covers bad UTF-8, bad JSON and oversized integer literals
    try:
        image = json.loads(data.decode('utf-8'))
    except (ValueError, RecursionError) as e:
        raise CorruptPersistedState(f"unreadable history image: {e}") from e

    if not isinstance(image, dict):
        raise CorruptPersistedState("history image must be a JSON object")
    version = image.get('version')
    if isinstance(version, bool) or version != FORMAT_VERSION:
        raise CorruptPersistedState(f"unsupported history version: {version!r}")
    entries = image.get('entries')
    if not isinstance(entries, list):
        raise CorruptPersistedState("history image has no entry list")

    pairs = [_decode_entry(i, item) for i, item in enumerate(entries)]
    seen = set()
    for path, _ in pairs:
        if path in seen:
            raise CorruptPersistedState(f"duplicate entry for {path}")
        seen.add(path)

    return RankingStore.from_entries(pairs, **store_options)


def _decode_entry(position: int, item: Any):
    if not isinstance(item, dict):
        raise CorruptPersistedState(f"entry {position} is not an object")

    path = item.get('path')
    if not isinstance(path, str) or not path.strip():
        raise CorruptPersistedState(f"entry {position} has no valid path")

    rank = item.get('rank')
    # bool is an int subclass; reject it explicitly
    if isinstance(rank, bool) or not isinstance(rank, (int, float)):
        raise CorruptPersistedState(f"entry {position} ({path}) has no numeric rank")
    try:
        rank = float(rank)
    except OverflowError as e:
        raise CorruptPersistedState(f"entry {position} ({path}) has out-of-range rank") from e
    if not math.isfinite(rank) or rank < 0:
        raise CorruptPersistedState(f"entry {position} ({path}) has invalid rank {rank!r}")

    return path, AccessHistory(rank)
