"""
Admin operations: role check, inverted-score detection, and candidate answer
generation through the get-candidate-answers function.
"""

import logging
import time
from typing import Dict, Iterable, List, Optional

from civic.lib.backend import BackendClient, BackendError, BackendFunctionError
from civic.lib.models import InvertedScoreCandidate, Party, PopulateResult
from civic.lib.query_cache import cached_query, invalidate_cache
from civic.lib.scoring import round_half_up

logger = logging.getLogger(__name__)

LEFT_LEANING_PARTIES = (Party.DEMOCRAT.value, Party.INDEPENDENT.value)
RIGHT_LEANING_PARTIES = (Party.REPUBLICAN.value,)

REGENERATE_DELAY_SECONDS = 1.0
POPULATE_DELAY_SECONDS = 0.5


# ==========================================================================
# Roles
# ==========================================================================


@cached_query("admin-role", stale_time=5 * 60)
def _fetch_admin_role(backend: BackendClient, user_id: str) -> bool:
    try:
        row = backend.maybe_single(
            "user_roles", "role", eq={"user_id": user_id, "role": "admin"}
        )
    except BackendError as e:
        logger.error(f"Error checking admin role: {e}")
        return False
    return bool(row)


def is_admin(backend: BackendClient, user_id: Optional[str]) -> bool:
    """Whether the user holds the admin role; False on error or no user."""
    if not user_id:
        return False
    return _fetch_admin_role(backend, user_id)


# ==========================================================================
# Inverted scores
# ==========================================================================


def _is_inverted(party: str, score: float) -> bool:
    return (party in LEFT_LEANING_PARTIES and score > 0) or (
        party in RIGHT_LEANING_PARTIES and score < 0
    )


@cached_query("inverted-score-candidates", stale_time=5 * 60)
def fetch_inverted_score_candidates(backend: BackendClient) -> List[InvertedScoreCandidate]:
    """Candidates whose answer average leans against their party.

    Democrats and Independents averaging above 0, or Republicans below 0,
    are flagged. Sorted by absolute score, most inverted first.
    """
    answers = backend.select("candidate_answers", "candidate_id, answer_value")
    candidates = backend.select("candidates", "id, name, party, office, state, overall_score")
    candidate_map = {c["id"]: c for c in candidates}

    values_by_candidate: Dict[str, List[float]] = {}
    for answer in answers:
        values_by_candidate.setdefault(answer["candidate_id"], []).append(answer["answer_value"])

    inverted = []
    for candidate_id, values in values_by_candidate.items():
        candidate = candidate_map.get(candidate_id)
        if candidate is None:
            continue

        score = round_half_up(sum(values) / len(values), 2)
        if not _is_inverted(candidate["party"], score):
            continue

        inverted.append(
            InvertedScoreCandidate(
                candidate_id=candidate_id,
                name=candidate["name"],
                party=candidate["party"],
                office=candidate["office"],
                state=candidate["state"],
                calculated_score=score,
                answer_count=len(values),
                saved_score=candidate.get("overall_score"),
            )
        )

    return sorted(inverted, key=lambda c: abs(c.calculated_score), reverse=True)


# ==========================================================================
# Answer generation
# ==========================================================================


def _invalidate_answer_queries(candidate_id: Optional[str] = None) -> None:
    invalidate_cache(("candidates-answer-coverage",))
    invalidate_cache(("candidate-answer-stats",))
    invalidate_cache(("sync-stats",))
    invalidate_cache(("inverted-score-candidates",))
    invalidate_cache(("candidate-score-map",))
    if candidate_id:
        invalidate_cache(("candidate-answers", candidate_id))
        invalidate_cache(("candidate-answers-for-user", candidate_id))
    else:
        invalidate_cache(("candidate-answers",))
        invalidate_cache(("candidate-answers-for-user",))


def regenerate_candidate_answers(backend: BackendClient, candidate_id: str) -> dict:
    """Force-regenerate a candidate's answers with corrected scoring.

    Raises:
        BackendFunctionError: If the function invocation fails
    """
    try:
        data = backend.invoke(
            "get-candidate-answers", {"candidateId": candidate_id, "forceRegenerate": True}
        ) or {}
    except BackendFunctionError as e:
        logger.error(f"Failed to regenerate answers: {e}")
        raise

    logger.info(
        f"Regenerated {data.get('generated') or data.get('count')} answers "
        f"with corrected scoring for {candidate_id}"
    )
    _invalidate_answer_queries(candidate_id)
    return data


def batch_regenerate_candidates(
    backend: BackendClient,
    candidate_ids: Iterable[str],
    delay: float = REGENERATE_DELAY_SECONDS,
) -> List[dict]:
    """Regenerate answers for several candidates, pausing between calls.

    Per-candidate failures are logged and reported, not raised.

    Returns:
        One {"candidate_id", "success", "data" | "error"} entry per candidate
    """
    results = []
    for candidate_id in candidate_ids:
        try:
            data = backend.invoke(
                "get-candidate-answers", {"candidateId": candidate_id, "forceRegenerate": True}
            )
            results.append({"candidate_id": candidate_id, "success": True, "data": data})
        except BackendFunctionError as e:
            logger.error(f"Error regenerating {candidate_id}: {e}")
            results.append({"candidate_id": candidate_id, "success": False, "error": str(e)})

        if delay:
            time.sleep(delay)

    success_count = sum(1 for r in results if r["success"])
    logger.info(f"Regenerated answers for {success_count}/{len(results)} candidates")
    _invalidate_answer_queries()
    return results


def populate_candidate_answers(
    backend: BackendClient, candidate_id: str, force_regenerate: bool = False
) -> PopulateResult:
    """Generate answers for one candidate; failures come back as success=False."""
    try:
        data = backend.invoke(
            "get-candidate-answers",
            {"candidateId": candidate_id, "forceRegenerate": force_regenerate},
        ) or {}
    except BackendFunctionError as e:
        logger.error(f"Failed to generate answers for {candidate_id}: {e}")
        return PopulateResult(success=False, candidate_id=candidate_id, error=str(e))

    generated = data.get("generated") or 0
    existing = data.get("existing") or 0
    if generated > 0:
        logger.info(f"Generated {generated} answers for {candidate_id}")
    elif existing > 0:
        logger.info(f"{candidate_id} already has {existing} answers")

    _invalidate_answer_queries(candidate_id)
    return PopulateResult(
        success=True, candidate_id=candidate_id, generated=generated, existing=existing
    )


def populate_candidates_batch(
    backend: BackendClient,
    candidates: Iterable[dict],
    force_regenerate: bool = False,
    delay: float = POPULATE_DELAY_SECONDS,
) -> Dict[str, int]:
    """Generate answers for {"id", "name"} candidates in turn.

    Returns:
        {"success": n, "errors": m}
    """
    candidates = list(candidates)
    success_count = 0
    error_count = 0

    for index, candidate in enumerate(candidates):
        logger.info(f"[{index + 1}/{len(candidates)}] Generating answers for {candidate['name']}")
        try:
            backend.invoke(
                "get-candidate-answers",
                {"candidateId": candidate["id"], "forceRegenerate": force_regenerate},
            )
            success_count += 1
        except BackendFunctionError as e:
            error_count += 1
            logger.error(f"Error for {candidate['name']}: {e}")

        if delay and index < len(candidates) - 1:
            time.sleep(delay)

    _invalidate_answer_queries()
    suffix = f" ({error_count} errors)" if error_count else ""
    logger.info(f"Generated answers for {success_count} candidates{suffix}")
    return {"success": success_count, "errors": error_count}
