"""Shared pytest fixtures and in-memory doubles for dispatcher tests."""

import logging
import operator
import re
import threading
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest

from hazelcast_exchange.dispatcher.map import MapDispatcher
from hazelcast_exchange.logging import ROOT_LOGGER_NAME


_COMPARISONS = {
    "=": operator.eq,
    "!=": operator.ne,
    ">=": operator.ge,
    "<=": operator.le,
    ">": operator.gt,
    "<": operator.lt,
}

_PREDICATE_PATTERN = re.compile(r"^\s*(\w+)\s*(=|!=|>=|<=|>|<)\s*('?)([\w.-]+)\3\s*$")


class SqlLikePredicate:
    """Tiny ``attribute <op> literal`` predicate standing in for the grid's SQL dialect."""

    def __init__(self, sql: str):
        match = _PREDICATE_PATTERN.match(sql)
        if match is None:
            raise ValueError(f"Malformed predicate: {sql!r}")
        self.sql = sql
        self._attribute = match.group(1)
        self._compare = _COMPARISONS[match.group(2)]
        literal = match.group(4)
        if match.group(3):
            self._literal: Any = literal
        else:
            try:
                self._literal = int(literal)
            except ValueError:
                self._literal = float(literal)

    def matches(self, value: Any) -> bool:
        if not isinstance(value, dict) or self._attribute not in value:
            return False
        return self._compare(value[self._attribute], self._literal)


class InMemoryMap:
    """Thread-safe in-memory double of a blocking distributed map.

    Every map call is recorded in :attr:`calls` as ``(method, key)``.
    Locks are owned by the calling thread and block other lockers, as
    the grid's key locks do.
    """

    def __init__(self, entries: Optional[Dict[Any, Any]] = None):
        self._entries: Dict[Any, Any] = dict(entries or {})
        self._mutex = threading.RLock()
        self._lock_released = threading.Condition(self._mutex)
        self._lock_owners: Dict[Any, int] = {}
        self._failures: Dict[str, Exception] = {}
        self.calls: List[Tuple[str, Any]] = []

    def populate(self, entries: Dict[Any, Any]) -> None:
        with self._mutex:
            self._entries.update(entries)

    def snapshot(self) -> Dict[Any, Any]:
        with self._mutex:
            return dict(self._entries)

    def fail_on(self, method: str, error: Exception) -> None:
        self._failures[method] = error

    def is_locked(self, key: Any) -> bool:
        with self._mutex:
            return key in self._lock_owners

    def _record(self, method: str, key: Any = None) -> None:
        self.calls.append((method, key))
        error = self._failures.get(method)
        if error is not None:
            raise error

    def put(self, key: Any, value: Any) -> Any:
        with self._mutex:
            self._record("put", key)
            old = self._entries.get(key)
            self._entries[key] = value
            return old

    def get(self, key: Any) -> Any:
        with self._mutex:
            self._record("get", key)
            return self._entries.get(key)

    def get_all(self, keys: Iterable[Any]) -> Dict[Any, Any]:
        with self._mutex:
            self._record("get_all", frozenset(keys))
            return {k: self._entries[k] for k in keys if k in self._entries}

    def remove(self, key: Any) -> Any:
        with self._mutex:
            self._record("remove", key)
            return self._entries.pop(key, None)

    def replace(self, key: Any, value: Any) -> Any:
        with self._mutex:
            self._record("replace", key)
            if key not in self._entries:
                return None
            old = self._entries[key]
            self._entries[key] = value
            return old

    def replace_if_same(self, key: Any, old_value: Any, new_value: Any) -> bool:
        with self._mutex:
            self._record("replace_if_same", key)
            if key in self._entries and self._entries[key] == old_value:
                self._entries[key] = new_value
                return True
            return False

    def values(self, predicate: Any = None) -> List[Any]:
        with self._mutex:
            self._record("values")
            if predicate is None:
                return list(self._entries.values())
            return [v for v in self._entries.values() if predicate.matches(v)]

    def clear(self) -> None:
        with self._mutex:
            self._record("clear")
            self._entries.clear()

    def lock(self, key: Any, lease_time: Optional[float] = None) -> None:
        me = threading.get_ident()
        with self._lock_released:
            while self._lock_owners.get(key, me) != me:
                self._lock_released.wait()
            self._lock_owners[key] = me
            self._record("lock", key)

    def unlock(self, key: Any) -> None:
        with self._lock_released:
            self._record("unlock", key)
            if self._lock_owners.get(key) != threading.get_ident():
                raise RuntimeError(f"Current thread is not the owner of the lock on {key!r}")
            del self._lock_owners[key]
            self._lock_released.notify_all()


class MapProvider:
    """Hands out a single in-memory map whatever name is asked for."""

    def __init__(self, backing_map: InMemoryMap):
        self._map = backing_map
        self.requested: List[str] = []

    def get_map(self, name: str) -> InMemoryMap:
        self.requested.append(name)
        return self._map


@pytest.fixture
def backing_map():
    """Create an empty in-memory map."""
    return InMemoryMap()


@pytest.fixture
def map_provider(backing_map):
    """Create a map provider serving the in-memory map."""
    return MapProvider(backing_map)


@pytest.fixture
def dispatcher(map_provider):
    """Create a MapDispatcher over the in-memory map."""
    return MapDispatcher(map_provider, None, "test-map", predicate_factory=SqlLikePredicate)


@pytest.fixture(autouse=True)
def reset_logging():
    """Restore the package logger after each test."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    handlers = list(logger.handlers)
    level = logger.level
    yield
    for handler in logger.handlers[:]:
        if handler not in handlers:
            logger.removeHandler(handler)
    logger.setLevel(level)
