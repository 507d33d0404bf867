"""
Answer coverage reporting for the admin dashboard.

Coverage = candidate answers present / (candidates x questions).
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from civic.lib.backend import BackendClient
from civic.lib.models import (
    CandidateAnswerCoverage,
    CandidateAnswerStats,
    CandidateCoverage,
    SyncStats,
    TopicCoverage,
)
from civic.lib.query_cache import cached_query
from civic.lib.scoring import round_half_up

logger = logging.getLogger(__name__)

PAGE_SIZE = 1000
MAX_ROWS = 500000

COVERAGE_FILTERS = ("all", "none", "low", "full")
LOW_COVERAGE_PERCENT = 50


def _percent_1dp(part: int, whole: int) -> float:
    return round_half_up(part / whole * 100, 1) if whole > 0 else 0


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def fetch_all_answer_candidate_ids(backend: BackendClient) -> List[str]:
    """candidate_id of every candidate answer, read in pages of 1000 rows."""
    candidate_ids: List[str] = []
    offset = 0

    while True:
        rows = backend.select(
            "candidate_answers",
            "id, candidate_id",
            order=[("id", True)],
            limit=PAGE_SIZE,
            offset=offset,
        )
        candidate_ids.extend(row["candidate_id"] for row in rows)

        if len(rows) < PAGE_SIZE:
            break
        offset += PAGE_SIZE
        if offset > MAX_ROWS:
            logger.warning(f"Stopped paging candidate_answers at {offset} rows")
            break

    return candidate_ids


def _count_by_candidate(candidate_ids: List[str]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for candidate_id in candidate_ids:
        counts[candidate_id] = counts.get(candidate_id, 0) + 1
    return counts


@cached_query("sync-stats", stale_time=60)
def fetch_sync_stats(backend: BackendClient) -> SyncStats:
    """Overall, per-candidate and per-topic answer coverage plus the last sync time."""
    candidates = backend.select("candidates", "id, name, party, last_answers_sync")
    questions = backend.select("questions", "id, topic_id")
    topics = backend.select("topics", "id, name, icon")
    answers = backend.select("candidate_answers", "question_id, candidate_id")

    total_candidates = len(candidates)
    total_questions = len(questions)
    total_potential = total_candidates * total_questions
    total_actual = len(answers)

    sync_times = [
        _parse_timestamp(c["last_answers_sync"])
        for c in candidates
        if c.get("last_answers_sync")
    ]
    last_sync_time = (
        max(sync_times).astimezone(timezone.utc).isoformat().replace("+00:00", "Z")
        if sync_times
        else None
    )

    answer_counts = _count_by_candidate([a["candidate_id"] for a in answers])
    candidate_coverage = sorted(
        (
            CandidateCoverage(
                candidate_id=c["id"],
                name=c["name"],
                party=c["party"],
                answer_count=answer_counts.get(c["id"], 0),
                total_questions=total_questions,
                coverage_percent=_percent_1dp(answer_counts.get(c["id"], 0), total_questions),
            )
            for c in candidates
        ),
        key=lambda c: c.coverage_percent,
        reverse=True,
    )

    topic_coverage = []
    for topic in topics:
        topic_question_ids = {q["id"] for q in questions if q["topic_id"] == topic["id"]}
        topic_answers = sum(1 for a in answers if a["question_id"] in topic_question_ids)
        potential = total_candidates * len(topic_question_ids)
        topic_coverage.append(
            TopicCoverage(
                topic_id=topic["id"],
                topic_name=topic["name"],
                icon=topic.get("icon") or "",
                total_questions=len(topic_question_ids),
                total_candidates=total_candidates,
                total_potential_answers=potential,
                total_actual_answers=topic_answers,
                coverage_percent=_percent_1dp(topic_answers, potential),
            )
        )
    topic_coverage.sort(key=lambda t: t.coverage_percent, reverse=True)

    return SyncStats(
        total_candidates=total_candidates,
        total_questions=total_questions,
        total_potential_answers=total_potential,
        total_actual_answers=total_actual,
        overall_coverage_percent=_percent_1dp(total_actual, total_potential),
        last_sync_time=last_sync_time,
        candidate_coverage=candidate_coverage,
        topic_coverage=topic_coverage,
    )


@cached_query("candidates-answer-coverage", stale_time=30)
def fetch_candidates_answer_coverage(
    backend: BackendClient,
    party: Optional[str] = None,
    state: Optional[str] = None,
    coverage_filter: str = "all",
) -> List[CandidateAnswerCoverage]:
    """Answer coverage per candidate, least covered first.

    Args:
        party: Only this party ("all"/None = any)
        state: Only this state ("all"/None = any)
        coverage_filter: "all", "none" (no answers), "low" (some, under 50%)
            or "full" (100%)
    """
    if coverage_filter not in COVERAGE_FILTERS:
        raise ValueError(f"coverage_filter must be one of {COVERAGE_FILTERS}")

    total_questions = backend.count("questions")

    eq = {}
    if party and party != "all":
        eq["party"] = party
    if state and state != "all":
        eq["state"] = state
    candidates = backend.select(
        "candidates", "id, name, party, office, state", eq=eq, order=[("name", True)]
    )

    answer_counts = _count_by_candidate(fetch_all_answer_candidate_ids(backend))

    results = []
    for c in candidates:
        answer_count = answer_counts.get(c["id"], 0)
        results.append(
            CandidateAnswerCoverage(
                id=c["id"],
                name=c["name"],
                party=c["party"],
                office=c["office"],
                state=c["state"],
                answer_count=answer_count,
                total_questions=total_questions,
                percentage=(
                    round_half_up(answer_count / total_questions * 100)
                    if total_questions
                    else 0
                ),
            )
        )

    if coverage_filter == "none":
        results = [c for c in results if c.answer_count == 0]
    elif coverage_filter == "low":
        results = [
            c for c in results if c.answer_count > 0 and c.percentage < LOW_COVERAGE_PERCENT
        ]
    elif coverage_filter == "full":
        results = [c for c in results if c.percentage >= 100]

    return sorted(results, key=lambda c: c.answer_count)


@cached_query("candidate-answer-stats", stale_time=30)
def fetch_candidate_answer_stats(backend: BackendClient) -> CandidateAnswerStats:
    """How many candidates have no, low (<50%) and full answer coverage."""
    total_questions = backend.count("questions")
    total_candidates = backend.count("candidates")
    answer_counts = _count_by_candidate(fetch_all_answer_candidate_ids(backend))

    def percent(count: int) -> float:
        return count / total_questions * 100 if total_questions else 0

    low = sum(1 for count in answer_counts.values() if 0 < percent(count) < LOW_COVERAGE_PERCENT)
    full = sum(
        1 for count in answer_counts.values() if total_questions and count >= total_questions
    )

    return CandidateAnswerStats(
        total_candidates=total_candidates,
        no_answers=total_candidates - len(answer_counts),
        low_coverage=low,
        full_coverage=full,
        total_questions=total_questions,
    )


@cached_query("unique-states", stale_time=60)
def fetch_unique_states(backend: BackendClient) -> List[str]:
    """Distinct non-empty candidate states in alphabetical order."""
    rows = backend.select("candidates", "state", order=[("state", True)])
    states: List[str] = []
    for row in rows:
        if row.get("state") and row["state"] not in states:
            states.append(row["state"])
    return states
