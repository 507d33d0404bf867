"""Unit tests for admin queries and answer generation."""

from unittest.mock import patch

import pytest

from civic.lib.backend import BackendFunctionError
from civic.lib.query_cache import cache_response, get_cached
from civic.queries.admin import (
    batch_regenerate_candidates,
    fetch_inverted_score_candidates,
    is_admin,
    populate_candidate_answers,
    populate_candidates_batch,
    regenerate_candidate_answers,
)


@pytest.fixture
def backend(catalog_tables, make_backend):
    tables = dict(catalog_tables)
    tables["candidate_answers"] = catalog_tables["candidate_answers"] + [
        {"id": "a7", "candidate_id": "c3", "question_id": "q1", "answer_value": 3},
        {"id": "a8", "candidate_id": "c3", "question_id": "q2", "answer_value": 4},
        {"id": "a9", "candidate_id": "ghost", "question_id": "q2", "answer_value": 9},
    ]
    tables["user_roles"] = [
        {"user_id": "u-admin", "role": "admin"},
        {"user_id": "u-member", "role": "member"},
    ]
    return make_backend(tables=tables)


def failing_for(bad_id, payload):
    def respond(body):
        if body["candidateId"] == bad_id:
            raise BackendFunctionError(f"generation failed for {bad_id}")
        return payload
    return respond


class TestIsAdmin:

    def test_roles(self, backend):
        assert is_admin(backend, "u-admin") is True
        assert is_admin(backend, "u-member") is False
        assert is_admin(backend, None) is False

    def test_lookup_failure(self, backend):
        backend.failing_tables.add("user_roles")

        assert is_admin(backend, "u-admin") is False


class TestInvertedScores:

    def test_detects_inverted_candidates(self, backend):
        inverted = fetch_inverted_score_candidates(backend)

        assert [(c.candidate_id, c.calculated_score) for c in inverted] == [
            ("c2", -4.0),
            ("c3", 3.5),
        ]
        assert inverted[0].saved_score == 5.0
        assert inverted[0].answer_count == 2
        assert inverted[0].status == "INVERTED"

    def test_aligned_candidates_excluded(self, backend):
        ids = [c.candidate_id for c in fetch_inverted_score_candidates(backend)]

        assert "c1" not in ids
        assert "ghost" not in ids


class TestRegenerate:

    def test_regenerate_invalidates(self, backend):
        backend.functions["get-candidate-answers"] = {"generated": 4}
        fetch_inverted_score_candidates(backend)
        cache_response(("candidate-answers", "c2"), [], ttl=60)

        data = regenerate_candidate_answers(backend, "c2")

        assert data == {"generated": 4}
        assert backend.invocations == [
            ("get-candidate-answers", {"candidateId": "c2", "forceRegenerate": True})
        ]
        assert get_cached(("inverted-score-candidates",)) is None
        assert get_cached(("candidate-answers", "c2")) is None

    def test_regenerate_failure_raises(self, backend):
        backend.functions["get-candidate-answers"] = BackendFunctionError("quota")

        with pytest.raises(BackendFunctionError):
            regenerate_candidate_answers(backend, "c2")

    def test_batch_regenerate(self, backend):
        backend.functions["get-candidate-answers"] = failing_for("c3", {"generated": 2})

        results = batch_regenerate_candidates(backend, ["c1", "c3", "c2"], delay=0)

        assert [r["success"] for r in results] == [True, False, True]
        assert "c3" in results[1]["error"]

    def test_batch_regenerate_pauses(self, backend):
        backend.functions["get-candidate-answers"] = {"generated": 1}

        with patch("civic.queries.admin.time.sleep") as mock_sleep:
            batch_regenerate_candidates(backend, ["c1", "c2"], delay=1.0)

        assert mock_sleep.call_count == 2


class TestPopulate:

    def test_populate_single(self, backend):
        backend.functions["get-candidate-answers"] = {"generated": 5, "existing": 0}
        cache_response(("sync-stats",), "stale", ttl=60)

        result = populate_candidate_answers(backend, "c3")

        assert result.success
        assert result.generated == 5
        assert backend.invocations[0][1] == {"candidateId": "c3", "forceRegenerate": False}
        assert get_cached(("sync-stats",)) is None

    def test_populate_single_failure(self, backend):
        backend.functions["get-candidate-answers"] = BackendFunctionError("quota")

        result = populate_candidate_answers(backend, "c3", force_regenerate=True)

        assert not result.success
        assert result.candidate_id == "c3"
        assert "quota" in result.error

    def test_populate_batch(self, backend):
        backend.functions["get-candidate-answers"] = failing_for("c2", {"generated": 3})
        candidates = [
            {"id": "c1", "name": "Alice Adams"},
            {"id": "c2", "name": "Bob Brown"},
            {"id": "c3", "name": "Carol Clark"},
        ]

        with patch("civic.queries.admin.time.sleep") as mock_sleep:
            counts = populate_candidates_batch(backend, candidates, delay=0.5)

        assert counts == {"success": 2, "errors": 1}
        assert mock_sleep.call_count == 2
        assert all(body["forceRegenerate"] is False for _, body in backend.invocations)
