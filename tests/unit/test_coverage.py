"""Unit tests for answer coverage reporting."""

import pytest

from civic.queries import coverage
from civic.queries.coverage import (
    fetch_all_answer_candidate_ids,
    fetch_candidate_answer_stats,
    fetch_candidates_answer_coverage,
    fetch_sync_stats,
    fetch_unique_states,
)


class TestSyncStats:

    def test_totals(self, catalog_backend):
        stats = fetch_sync_stats(catalog_backend)

        assert stats.total_candidates == 3
        assert stats.total_questions == 4
        assert stats.total_potential_answers == 12
        assert stats.total_actual_answers == 6
        assert stats.overall_coverage_percent == 50.0

    def test_last_sync_time_is_latest(self, catalog_backend):
        stats = fetch_sync_stats(catalog_backend)

        assert stats.last_sync_time == "2024-06-15T08:30:00Z"

    def test_candidate_coverage_sorted(self, catalog_backend):
        stats = fetch_sync_stats(catalog_backend)

        assert [(c.candidate_id, c.coverage_percent) for c in stats.candidate_coverage] == [
            ("c1", 100.0),
            ("c2", 50.0),
            ("c3", 0),
        ]

    def test_topic_coverage(self, catalog_backend):
        stats = fetch_sync_stats(catalog_backend)

        economy = next(t for t in stats.topic_coverage if t.topic_id == "economy")
        assert economy.total_questions == 2
        assert economy.total_potential_answers == 6
        assert economy.total_actual_answers == 3
        assert economy.coverage_percent == 50.0
        assert economy.icon == "dollar"

    def test_empty_database(self, fake_backend):
        stats = fetch_sync_stats(fake_backend)

        assert stats.overall_coverage_percent == 0
        assert stats.last_sync_time is None
        assert stats.candidate_coverage == []


class TestAnswerCandidateIds:

    def test_reads_all_pages(self, make_backend):
        rows = [
            {"id": f"a{i:05d}", "candidate_id": f"c{i % 3}", "question_id": "q1", "answer_value": 0}
            for i in range(2500)
        ]
        backend = make_backend(tables={"candidate_answers": rows})

        ids = fetch_all_answer_candidate_ids(backend)

        assert len(ids) == 2500
        offsets = [c["offset"] for c in backend.select_calls]
        assert offsets == [0, 1000, 2000]

    def test_stops_at_row_cap(self, make_backend, monkeypatch):
        monkeypatch.setattr(coverage, "PAGE_SIZE", 2)
        monkeypatch.setattr(coverage, "MAX_ROWS", 3)
        rows = [{"id": f"a{i}", "candidate_id": "c1"} for i in range(10)]
        backend = make_backend(tables={"candidate_answers": rows})

        assert len(fetch_all_answer_candidate_ids(backend)) == 4


class TestCandidatesAnswerCoverage:

    def test_least_covered_first(self, catalog_backend):
        results = fetch_candidates_answer_coverage(catalog_backend)

        assert [(c.id, c.answer_count, c.percentage) for c in results] == [
            ("c3", 0, 0),
            ("c2", 2, 50),
            ("c1", 4, 100),
        ]

    def test_coverage_filters(self, catalog_backend):
        assert [c.id for c in fetch_candidates_answer_coverage(catalog_backend, coverage_filter="none")] == ["c3"]
        assert fetch_candidates_answer_coverage(catalog_backend, coverage_filter="low") == []
        assert [c.id for c in fetch_candidates_answer_coverage(catalog_backend, coverage_filter="full")] == ["c1"]

    def test_low_coverage(self, catalog_backend):
        catalog_backend.tables["candidate_answers"] = [
            a for a in catalog_backend.tables["candidate_answers"] if a["id"] != "a6"
        ]

        results = fetch_candidates_answer_coverage(catalog_backend, coverage_filter="low")

        assert [(c.id, c.percentage) for c in results] == [("c2", 25)]

    def test_party_and_state_filters(self, catalog_backend):
        assert [c.id for c in fetch_candidates_answer_coverage(catalog_backend, party="Democrat")] == ["c1"]
        assert [c.id for c in fetch_candidates_answer_coverage(catalog_backend, state="TX")] == ["c2"]
        assert len(fetch_candidates_answer_coverage(catalog_backend, party="all", state="all")) == 3

    def test_invalid_filter(self, catalog_backend):
        with pytest.raises(ValueError, match="coverage_filter"):
            fetch_candidates_answer_coverage(catalog_backend, coverage_filter="partial")


class TestAnswerStats:

    def test_counts(self, catalog_backend):
        stats = fetch_candidate_answer_stats(catalog_backend)

        assert stats.total_candidates == 3
        assert stats.total_questions == 4
        assert stats.no_answers == 1
        assert stats.low_coverage == 0
        assert stats.full_coverage == 1


class TestUniqueStates:

    def test_sorted_distinct(self, catalog_backend):
        catalog_backend.tables["candidates"].append(
            {"id": "c4", "name": "Dan Diaz", "party": "Democrat", "office": "Senator", "state": "NJ"}
        )
        catalog_backend.tables["candidates"].append(
            {"id": "c5", "name": "No State", "party": "Other", "office": "Mayor", "state": ""}
        )

        assert fetch_unique_states(catalog_backend) == ["NJ", "TX", "VT"]
