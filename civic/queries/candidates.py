"""
Candidates, their answers, donors, votes and admin overrides; quiz catalog reads.
"""

import logging
from typing import Dict, Iterable, List, Optional

from civic.lib.backend import BackendClient, BackendError
from civic.lib.models import (
    Candidate,
    CandidateAnswer,
    CandidateOverride,
    Donor,
    Question,
    Topic,
    Vote,
)
from civic.lib.query_cache import cached_query, invalidate_cache

logger = logging.getLogger(__name__)

CANDIDATE_ANSWER_COLUMNS = (
    "*, question:questions (id, text, topic_id, topics (id, name))"
)


# ==========================================================================
# Candidates
# ==========================================================================


@cached_query("candidates")
def fetch_candidates(backend: BackendClient) -> List[Candidate]:
    """All candidates ordered by name, each with its topic scores."""
    candidates = backend.select("candidates", order=["name"])
    topic_scores = backend.select(
        "candidate_topic_scores", "candidate_id, topic_id, score, topics (name, icon)"
    )

    scores_by_candidate: Dict[str, List[dict]] = {}
    for row in topic_scores:
        scores_by_candidate.setdefault(row["candidate_id"], []).append(
            {"topic_id": row["topic_id"], "score": row["score"], "topics": row.get("topics")}
        )

    return [
        Candidate.model_validate(
            {**row, "topic_scores": scores_by_candidate.get(row["id"], [])}
        )
        for row in candidates
    ]


@cached_query("candidate")
def _fetch_candidate(backend: BackendClient, candidate_id: str) -> Optional[Candidate]:
    row = backend.maybe_single("candidates", eq={"id": candidate_id})
    if not row:
        return None

    topic_scores = backend.select(
        "candidate_topic_scores",
        "topic_id, score, topics (name, icon)",
        eq={"candidate_id": candidate_id},
    )
    return Candidate.model_validate({**row, "topic_scores": topic_scores})


def fetch_candidate(backend: BackendClient, candidate_id: Optional[str]) -> Optional[Candidate]:
    if not candidate_id:
        return None
    return _fetch_candidate(backend, candidate_id)


@cached_query("donors")
def _fetch_candidate_donors(backend: BackendClient, candidate_id: str) -> List[Donor]:
    rows = backend.select(
        "donors", eq={"candidate_id": candidate_id}, order=[("amount", False)]
    )
    return [Donor.model_validate(r) for r in rows]


def fetch_candidate_donors(backend: BackendClient, candidate_id: Optional[str]) -> List[Donor]:
    """Donors for a candidate, largest amount first."""
    if not candidate_id:
        return []
    return _fetch_candidate_donors(backend, candidate_id)


@cached_query("votes")
def _fetch_candidate_votes(backend: BackendClient, candidate_id: str) -> List[Vote]:
    rows = backend.select(
        "votes", eq={"candidate_id": candidate_id}, order=[("date", False)]
    )
    return [Vote.model_validate(r) for r in rows]


def fetch_candidate_votes(backend: BackendClient, candidate_id: Optional[str]) -> List[Vote]:
    """Votes cast by a candidate, most recent first."""
    if not candidate_id:
        return []
    return _fetch_candidate_votes(backend, candidate_id)


# ==========================================================================
# Quiz catalog
# ==========================================================================


@cached_query("topics")
def fetch_topics(backend: BackendClient) -> List[Topic]:
    return [Topic.model_validate(r) for r in backend.select("topics", order=["name"])]


@cached_query("questions")
def fetch_questions(backend: BackendClient) -> List[Question]:
    """All questions with their options in display order."""
    questions = backend.select("questions")
    options = backend.select("question_options", order=["display_order"])

    options_by_question: Dict[str, List[dict]] = {}
    for option in options:
        options_by_question.setdefault(option["question_id"], []).append(option)

    return [
        Question.model_validate({**q, "options": options_by_question.get(q["id"], [])})
        for q in questions
    ]


# ==========================================================================
# Candidate answers
# ==========================================================================


@cached_query("candidate-answers")
def _fetch_candidate_answers(backend: BackendClient, candidate_id: str) -> List[CandidateAnswer]:
    try:
        rows = backend.select(
            "candidate_answers",
            CANDIDATE_ANSWER_COLUMNS,
            eq={"candidate_id": candidate_id},
            order=[("created_at", False)],
        )
    except BackendError as e:
        logger.error(f"Error fetching candidate answers: {e}")
        raise
    return [CandidateAnswer.model_validate(r) for r in rows]


def fetch_candidate_answers(
    backend: BackendClient, candidate_id: Optional[str]
) -> List[CandidateAnswer]:
    """All answers for a candidate, newest first, with question and topic joined."""
    if not candidate_id:
        return []
    return _fetch_candidate_answers(backend, candidate_id)


@cached_query("candidate-answers-for-user")
def _fetch_candidate_answers_for_user(
    backend: BackendClient, candidate_id: str, question_ids: tuple
) -> List[CandidateAnswer]:
    try:
        rows = backend.select(
            "candidate_answers",
            CANDIDATE_ANSWER_COLUMNS,
            eq={"candidate_id": candidate_id},
            in_={"question_id": question_ids},
        )
    except BackendError as e:
        logger.error(f"Error fetching candidate answers for user: {e}")
        raise
    return [CandidateAnswer.model_validate(r) for r in rows]


def fetch_candidate_answers_for_user(
    backend: BackendClient,
    candidate_id: Optional[str],
    user_question_ids: Iterable[str],
) -> List[CandidateAnswer]:
    """A candidate's answers restricted to the questions the user answered."""
    question_ids = tuple(user_question_ids)
    if not candidate_id or not question_ids:
        return []
    return _fetch_candidate_answers_for_user(backend, candidate_id, question_ids)


# ==========================================================================
# Scores and overrides
# ==========================================================================


@cached_query("candidate-score-map", stale_time=2 * 60)
def _fetch_candidate_score_map(backend: BackendClient, ids_key) -> Dict[str, float]:
    ids = list(ids_key) if ids_key != "all" else []
    in_overrides = {"candidate_id": ids} if ids else None
    in_candidates = {"id": ids} if ids else None

    candidates = backend.select("candidates", "id, overall_score", in_=in_candidates)

    try:
        overrides = backend.select(
            "candidate_overrides", "candidate_id, overall_score", in_=in_overrides
        )
    except BackendError as e:
        logger.error(f"Error fetching candidate_overrides scores: {e}")
        overrides = []

    score_map: Dict[str, float] = {}
    for row in candidates:
        if row.get("overall_score") is not None:
            score_map[row["id"]] = row["overall_score"]
    for row in overrides:
        if row.get("overall_score") is not None:
            score_map[row["candidate_id"]] = row["overall_score"]
    return score_map


def fetch_candidate_score_map(
    backend: BackendClient, candidate_ids: Optional[Iterable[str]] = None
) -> Dict[str, float]:
    """Overall score per candidate; an override's score wins over the stored one.

    Args:
        candidate_ids: Restrict to these candidates (None/empty = all)
    """
    ids = sorted(i for i in (candidate_ids or []) if i)
    return _fetch_candidate_score_map(backend, tuple(ids) if ids else "all")


@cached_query("candidate_override")
def _fetch_candidate_override(
    backend: BackendClient, candidate_id: str
) -> Optional[CandidateOverride]:
    row = backend.maybe_single("candidate_overrides", eq={"candidate_id": candidate_id})
    return CandidateOverride.model_validate(row) if row else None


def fetch_candidate_override(
    backend: BackendClient, candidate_id: Optional[str]
) -> Optional[CandidateOverride]:
    if not candidate_id:
        return None
    return _fetch_candidate_override(backend, candidate_id)


@cached_query("candidate_overrides")
def fetch_candidate_overrides(backend: BackendClient) -> List[CandidateOverride]:
    """All overrides, most recently updated first."""
    rows = backend.select("candidate_overrides", order=[("updated_at", False)])
    return [CandidateOverride.model_validate(r) for r in rows]


def _invalidate_override_queries(candidate_id: str) -> None:
    invalidate_cache(("candidate_override", candidate_id))
    invalidate_cache(("candidate_overrides",))
    invalidate_cache(("candidate", candidate_id))
    invalidate_cache(("candidate-score-map",))


def upsert_candidate_override(
    backend: BackendClient, values: dict, user_id: Optional[str] = None
) -> CandidateOverride:
    """Create or update the override for values["candidate_id"].

    Raises:
        BackendError: If the write fails
    """
    candidate_id = values["candidate_id"]
    try:
        existing = backend.maybe_single(
            "candidate_overrides", "id", eq={"candidate_id": candidate_id}
        )
        if existing:
            row = backend.update(
                "candidate_overrides",
                {**values, "updated_by": user_id},
                eq={"candidate_id": candidate_id},
            )
        else:
            row = backend.insert(
                "candidate_overrides",
                {**values, "created_by": user_id, "updated_by": user_id},
            )
    except BackendError as e:
        logger.error(f"Failed to save override: {e}")
        raise

    _invalidate_override_queries(candidate_id)
    logger.info(f"Override saved for candidate {candidate_id}")
    return CandidateOverride.model_validate(row)


def delete_candidate_override(backend: BackendClient, candidate_id: str) -> None:
    """Remove an override so the candidate reverts to API data."""
    try:
        backend.delete("candidate_overrides", eq={"candidate_id": candidate_id})
    except BackendError as e:
        logger.error(f"Failed to delete override: {e}")
        raise

    _invalidate_override_queries(candidate_id)
    logger.info(f"Override removed for candidate {candidate_id}")
