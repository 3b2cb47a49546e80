# caches.py
import logging

from config import config

_EMPTY = object()


class ResultCache:
    """Single-slot memo for the result of one query method of one node.

    The slot holds the key a value was computed for. A query whose key equals
    the stored one is answered from the slot; any other key recomputes and
    overwrites it. Keys combine the query argument (time, true anomaly) with the
    state token of the node, i.e. the version counters its owner and ancestors
    bump on every structural change, so a mutation anywhere up the tree makes
    the stored key unreachable. `invalidate()` additionally empties the slot.

    States: uncomputed (empty slot) -> cached(key, value) -> cached(new key, new
    value) on a key mismatch; `invalidate()` returns to uncomputed.

    Attributes:
        label (str): Name used in trace logging.
        hits (int): Queries answered from the slot.
        misses (int): Queries that recomputed the value.
    """
    __slots__ = ('label', 'hits', 'misses', '_key', '_value')

    def __init__(self, label: str = "result"):
        self.label = label
        self.hits = 0
        self.misses = 0
        self._key = _EMPTY
        self._value = None

    @property
    def is_cached(self) -> bool:
        return self._key is not _EMPTY

    @property
    def key(self):
        """Key of the cached value, or None while uncomputed."""
        return None if self._key is _EMPTY else self._key

    def get_or_compute(self, key, compute):
        """Returns the cached value for `key`, calling `compute()` on a miss."""
        if self._key is not _EMPTY and self._key == key:
            self.hits += 1
            return self._value
        self.misses += 1
        if config.Debug.CACHE_TRACING:
            logging.debug(f"Recomputing {self.label} for key {key!r}")
        value = compute()
        self._key = key
        self._value = value
        return value

    def invalidate(self):
        self._key = _EMPTY
        self._value = None

    def __repr__(self):
        state = f"cached key={self._key!r}" if self.is_cached else "uncomputed"
        return f"ResultCache({self.label!r}, {state}, hits={self.hits}, misses={self.misses})"
