"""
Shared pytest fixtures for civic-compass unit tests.

FakeBackend mirrors the BackendClient surface over in-memory tables so query
functions can run without a hosted database.
"""

import copy

import pytest

from civic.lib import query_cache
from civic.lib.backend import BackendError


class FakeBackend:
    """In-memory stand-in for BackendClient."""

    def __init__(self, tables=None, functions=None):
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        # name -> payload, exception, or callable(body)
        self.functions = dict(functions or {})
        self.failing_tables = set()
        self.invocations = []
        self.select_calls = []

    def _check(self, table):
        if table in self.failing_tables:
            raise BackendError(f"Query on {table} failed: boom")

    @staticmethod
    def _matches(row, eq=None, in_=None):
        for column, value in (eq or {}).items():
            if row.get(column) != value:
                return False
        for column, values in (in_ or {}).items():
            if row.get(column) not in list(values):
                return False
        return True

    def select(self, table, columns="*", *, eq=None, in_=None, order=None, limit=None, offset=None):
        self._check(table)
        self.select_calls.append({"table": table, "eq": eq, "in_": in_, "limit": limit, "offset": offset})
        rows = [copy.deepcopy(r) for r in self.tables.get(table, []) if self._matches(r, eq, in_)]

        for spec in reversed(order or []):
            column, ascending = (spec, True) if isinstance(spec, str) else spec
            rows.sort(key=lambda r: (r.get(column) is None, r.get(column)), reverse=not ascending)

        start = offset or 0
        if limit is not None:
            return rows[start:start + limit]
        return rows[start:]

    def maybe_single(self, table, columns="*", *, eq=None):
        rows = self.select(table, columns, eq=eq)
        return rows[0] if rows else None

    def count(self, table, *, eq=None):
        return len(self.select(table, eq=eq))

    def insert(self, table, row):
        self._check(table)
        stored = dict(row)
        stored.setdefault("id", f"{table}-{len(self.tables.get(table, [])) + 1}")
        self.tables.setdefault(table, []).append(stored)
        return dict(stored)

    def update(self, table, values, *, eq):
        self._check(table)
        matched = [r for r in self.tables.get(table, []) if self._matches(r, eq)]
        if not matched:
            raise BackendError(f"No {table} row matched {eq}")
        for row in matched:
            row.update(values)
        return dict(matched[0])

    def delete(self, table, *, eq):
        self._check(table)
        self.tables[table] = [r for r in self.tables.get(table, []) if not self._matches(r, eq)]

    def invoke(self, function_name, body=None):
        self.invocations.append((function_name, body))
        response = self.functions.get(function_name)
        if isinstance(response, Exception):
            raise response
        if callable(response):
            return response(body)
        return copy.deepcopy(response)


@pytest.fixture(autouse=True)
def clear_query_cache(monkeypatch):
    """Start every test with an empty query cache and no retry waits."""
    query_cache.invalidate_cache()
    monkeypatch.setattr(query_cache, "DEFAULT_RETRY_WAIT", 0)
    yield
    query_cache.invalidate_cache()


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def catalog_tables():
    """Two topics, four questions, three candidates with answers."""
    return {
        "topics": [
            {"id": "economy", "name": "Economy", "icon": "dollar"},
            {"id": "health", "name": "Healthcare", "icon": "heart"},
        ],
        "questions": [
            {"id": "q1", "topic_id": "economy", "text": "Raise the minimum wage?"},
            {"id": "q2", "topic_id": "economy", "text": "Cut corporate taxes?"},
            {"id": "q3", "topic_id": "health", "text": "Public option?"},
            {"id": "q4", "topic_id": "health", "text": "Repeal the ACA?"},
        ],
        "candidates": [
            {"id": "c1", "name": "Alice Adams", "party": "Democrat", "office": "Senator",
             "state": "NJ", "overall_score": -6.5, "last_answers_sync": "2024-05-01T12:00:00Z"},
            {"id": "c2", "name": "Bob Brown", "party": "Republican", "office": "Representative",
             "state": "TX", "district": "7", "overall_score": 5.0,
             "last_answers_sync": "2024-06-15T08:30:00+00:00"},
            {"id": "c3", "name": "Carol Clark", "party": "Independent", "office": "Senator",
             "state": "VT", "overall_score": None, "last_answers_sync": None},
        ],
        "candidate_answers": [
            {"id": "a1", "candidate_id": "c1", "question_id": "q1", "answer_value": -8,
             "created_at": "2024-05-01T10:00:00Z"},
            {"id": "a2", "candidate_id": "c1", "question_id": "q2", "answer_value": -6,
             "created_at": "2024-05-02T10:00:00Z"},
            {"id": "a3", "candidate_id": "c1", "question_id": "q3", "answer_value": -4,
             "created_at": "2024-05-03T10:00:00Z"},
            {"id": "a4", "candidate_id": "c1", "question_id": "q4", "answer_value": -2,
             "created_at": "2024-05-04T10:00:00Z"},
            {"id": "a5", "candidate_id": "c2", "question_id": "q1", "answer_value": -5,
             "created_at": "2024-06-01T10:00:00Z"},
            {"id": "a6", "candidate_id": "c2", "question_id": "q3", "answer_value": -3,
             "created_at": "2024-06-02T10:00:00Z"},
        ],
    }


@pytest.fixture
def catalog_backend(catalog_tables):
    return FakeBackend(tables=catalog_tables)


@pytest.fixture
def make_backend():
    """Factory for FakeBackend(tables=..., functions=...)."""
    return FakeBackend
