import itertools
from datetime import datetime, timezone

import pytest

from catalog.library import Library
from catalog.services.supabase_service import SupabaseError, SupabaseRequestError


class InMemoryBooksTable:
    """Stands in for SupabaseTable: same coroutine methods, rows kept in a list."""

    name = "books"

    def __init__(self, rows=None):
        self.rows = [dict(r) for r in (rows or [])]
        self._ids = itertools.count(max((r["id"] for r in self.rows), default=0) + 1)
        self.calls = []

    def _find(self, id):
        return [r for r in self.rows if str(r["id"]) == str(id)]

    async def select(self, eq=None, columns="*", limit=None):
        self.calls.append(("select", eq))
        rows = self.rows
        for column, value in (eq or {}).items():
            rows = [r for r in rows if str(r.get(column)) == str(value)]
        return [dict(r) for r in rows][:limit]

    async def select_one(self, id):
        self.calls.append(("select_one", id))
        found = self._find(id)
        return dict(found[0]) if found else None

    async def insert(self, rows):
        self.calls.append(("insert", rows))
        created = []
        for row in rows:
            new = {
                "id": next(self._ids),
                "created_at": datetime.now(timezone.utc).isoformat(),
                **row,
            }
            self.rows.append(new)
            created.append(dict(new))
        return created

    async def update(self, values, id):
        self.calls.append(("update", id, values))
        found = self._find(id)
        for row in found:
            row.update(values)
        return [dict(r) for r in found]

    async def delete(self, id):
        self.calls.append(("delete", id))
        found = self._find(id)
        self.rows = [r for r in self.rows if str(r["id"]) != str(id)]
        return [dict(r) for r in found]

    async def ping(self):
        return True


class FailingBooksTable(InMemoryBooksTable):
    """Every call fails the way the backend would."""

    def __init__(self, error=None, rows=None):
        super().__init__(rows)
        self.error = error or SupabaseError("permission denied for table books", status_code=401, code="42501")

    async def select(self, eq=None, columns="*", limit=None):
        raise self.error

    async def select_one(self, id):
        raise self.error

    async def insert(self, rows):
        raise self.error

    async def update(self, values, id):
        raise self.error

    async def delete(self, id):
        raise self.error

    async def ping(self):
        return False


SAMPLE_ROWS = [
    {"id": 1, "title": "Dune", "author": "Frank Herbert", "genre": "Science Fiction",
     "status": "Available", "created_at": "2024-01-15T10:00:00+00:00"},
    {"id": 2, "title": "Emma", "author": "Jane Austen", "genre": "Classic",
     "status": "Checked Out", "created_at": "2024-03-02T08:30:00.123456+00:00"},
    {"id": 3, "title": "Persuasion", "author": "Jane Austen", "genre": "Classic",
     "status": "Available", "created_at": "2023-03-20T12:00:00+00:00"},
]


@pytest.fixture
def books_table():
    return InMemoryBooksTable(SAMPLE_ROWS)


@pytest.fixture
def lib(books_table):
    return Library(books_table)


@pytest.fixture
def failing_lib():
    return Library(FailingBooksTable())


@pytest.fixture
def offline_lib():
    return Library(FailingBooksTable(SupabaseRequestError("Request to 'books' failed: connection refused")))
