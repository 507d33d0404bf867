"""
Party answer coverage, party scores on the user's questions, and party answer
generation.
"""

import logging
from typing import Dict, List, Optional

from pydantic import ValidationError

from civic.lib.backend import BackendClient, BackendFunctionError
from civic.lib.models import PartyAnswerStats, PopulateResult
from civic.lib.query_cache import cached_query, invalidate_cache
from civic.lib.scoring import calculate_average_score, round_half_up

logger = logging.getLogger(__name__)

PARTIES = [
    {"id": "democrat", "name": "Democratic Party"},
    {"id": "republican", "name": "Republican Party"},
    {"id": "green", "name": "Green Party"},
    {"id": "libertarian", "name": "Libertarian Party"},
]


@cached_query("party-answer-stats", stale_time=30)
def fetch_party_answer_stats(backend: BackendClient) -> List[PartyAnswerStats]:
    """Answered-question counts and percentage for each tracked party."""
    total_questions = backend.count("questions")
    answers = backend.select("party_answers", "party_id")

    count_by_party: Dict[str, int] = {}
    for answer in answers:
        count_by_party[answer["party_id"]] = count_by_party.get(answer["party_id"], 0) + 1

    stats = []
    for party in PARTIES:
        answer_count = count_by_party.get(party["id"], 0)
        stats.append(
            PartyAnswerStats(
                party_id=party["id"],
                party_name=party["name"],
                answer_count=answer_count,
                total_questions=total_questions,
                percentage=(
                    round_half_up(answer_count / total_questions * 100)
                    if total_questions
                    else 0
                ),
            )
        )
    return stats


def _no_party_scores() -> Dict[str, Optional[float]]:
    return {party["id"]: None for party in PARTIES}


@cached_query("party-scores-user-filtered", stale_time=5 * 60)
def _fetch_party_match_scores(
    backend: BackendClient, user_id: str
) -> Dict[str, Optional[float]]:
    user_answers = backend.select("quiz_answers", "question_id", eq={"user_id": user_id})
    user_question_ids = {a["question_id"] for a in user_answers}

    if not user_question_ids:
        return _no_party_scores()

    party_answers = backend.select("party_answers", "party_id, question_id, answer_value")

    values_by_party: Dict[str, List[float]] = {}
    for answer in party_answers:
        if answer["question_id"] in user_question_ids:
            values_by_party.setdefault(answer["party_id"], []).append(answer["answer_value"])

    return {
        party["id"]: calculate_average_score(values_by_party.get(party["id"], []))
        for party in PARTIES
    }


def fetch_party_match_scores(
    backend: BackendClient, user_id: Optional[str]
) -> Dict[str, Optional[float]]:
    """Average party answer value (-10..+10) over the questions the user answered.

    Results are cached per user. Every party maps to None when there is no
    user or the user has not answered anything.
    """
    if not user_id:
        return _no_party_scores()
    return _fetch_party_match_scores(backend, user_id)


def populate_party_answers(
    backend: BackendClient, party_id: Optional[str] = None
) -> PopulateResult:
    """Generate party answers (one party, or all when party_id is None).

    Failures are logged and returned as PopulateResult(success=False).
    """
    logger.info(
        f"Generating {party_id} answers..." if party_id else "Generating all party answers..."
    )

    try:
        data = backend.invoke("populate-party-answers", {"partyId": party_id} if party_id else {})
    except BackendFunctionError as e:
        logger.error(f"Failed to generate party answers: {e}")
        return PopulateResult(success=False, error=str(e))

    data = data or {}
    try:
        result = PopulateResult(
            success=bool(data.get("success")),
            questions_processed=data.get("questionsProcessed"),
            results=data.get("results"),
            error=data.get("error"),
        )
    except ValidationError as e:
        logger.error(f"Unexpected populate-party-answers payload: {e}")
        return PopulateResult(success=False, error=f"Unexpected response: {e}")

    if result.success:
        total_inserted = sum(r.inserted for r in result.results or [])
        logger.info(f"Generated {total_inserted} party answers successfully")
        invalidate_cache(("party-answer-stats",))
        invalidate_cache(("party-scores-user-filtered",))
    else:
        logger.warning(f"Party answer generation reported failure: {result.error}")
    return result
