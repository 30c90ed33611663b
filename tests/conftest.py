"""Shared fixtures: an in-memory store and a few registered users."""

import itertools
from collections import defaultdict
from datetime import datetime, timedelta, timezone

import pytest

from coaching.db import BaseStore, StoreError, StoreResponse
from coaching.models import SessionUser


# ============================================================================
# In-memory store
# ============================================================================

class InMemoryStore(BaseStore):
    """
    BaseStore implementation over plain dicts.

    Applies eq / any_of filters with the same meaning as the real backends.
    Inserted rows get a sequential id and an increasing created_at.  Set
    fail[(operation, table)] to a StoreError to make that call fail.
    """

    _EPOCH = datetime(2026, 1, 1, tzinfo=timezone.utc)

    def __init__(self):
        self.tables: dict[str, list[dict]] = defaultdict(list)
        self.calls: list[tuple[str, str]] = []
        self.fail: dict[tuple[str, str], StoreError] = {}
        self._ids = itertools.count(1)
        self._ticks = itertools.count(1)

    # -- helpers --------------------------------------------------------------

    @staticmethod
    def _matches(row: dict, eq, any_of) -> bool:
        if any(row.get(column) != value for column, value in (eq or {}).items()):
            return False
        if any_of:
            return any(
                all(row.get(column) == value for column, value in group.items())
                for group in any_of
            )
        return True

    def _failure(self, operation: str, table: str) -> StoreResponse | None:
        self.calls.append((operation, table))
        error = self.fail.get((operation, table))
        return StoreResponse(error=error) if error else None

    def seed(self, table: str, **row) -> dict:
        """Insert a row directly, bypassing call tracking."""
        row.setdefault("id", f"{table}-{next(self._ids)}")
        row.setdefault("created_at", self._now())
        self.tables[table].append(row)
        return row

    def _now(self) -> str:
        return (self._EPOCH + timedelta(seconds=next(self._ticks))).isoformat()

    @property
    def writes(self) -> list[tuple[str, str]]:
        return [call for call in self.calls if call[0] != "select"]

    # -- BaseStore ------------------------------------------------------------

    def select(self, table, columns="*", eq=None, any_of=None, order_by=None, ascending=True):
        failed = self._failure("select", table)
        if failed:
            return failed
        rows = [dict(r) for r in self.tables[table] if self._matches(r, eq, any_of)]
        if order_by:
            rows.sort(key=lambda r: r.get(order_by) or "", reverse=not ascending)
        if columns.strip() != "*":
            wanted = [c.strip() for c in columns.split(",")]
            rows = [{c: r.get(c) for c in wanted} for r in rows]
        return StoreResponse(data=rows)

    def insert(self, table, row):
        failed = self._failure("insert", table)
        if failed:
            return failed
        stored = dict(row)
        stored.setdefault("id", f"{table}-{next(self._ids)}")
        stored.setdefault("created_at", self._now())
        self.tables[table].append(stored)
        return StoreResponse(data=[dict(stored)])

    def update(self, table, values, eq=None, any_of=None):
        failed = self._failure("update", table)
        if failed:
            return failed
        changed = []
        for row in self.tables[table]:
            if self._matches(row, eq, any_of):
                row.update(values)
                changed.append(dict(row))
        return StoreResponse(data=changed)

    def delete(self, table, eq=None, any_of=None):
        failed = self._failure("delete", table)
        if failed:
            return failed
        kept, removed = [], []
        for row in self.tables[table]:
            (removed if self._matches(row, eq, any_of) else kept).append(row)
        self.tables[table] = kept
        return StoreResponse(data=removed)


# ============================================================================
# Fixtures
# ============================================================================

def add_user(store: InMemoryStore, user_id: str, email: str, first: str, last: str) -> SessionUser:
    store.seed(
        "profiles",
        id=user_id,
        email=email,
        first_name=first,
        last_name=last,
        avatar_url="",
        tone_score=0,
        empathy_score=0,
        clarity_score=0,
        confidence_score=0,
    )
    return SessionUser(id=user_id, email=email)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def alice(store) -> SessionUser:
    return add_user(store, "u-alice", "alice@example.com", "Alice", "Johnson")


@pytest.fixture
def bob(store) -> SessionUser:
    return add_user(store, "u-bob", "bob@example.com", "Bob", "Smith")


@pytest.fixture
def carol(store) -> SessionUser:
    return add_user(store, "u-carol", "carol@example.com", "Carol", "Brown")
