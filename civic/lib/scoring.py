"""
Quiz and alignment scoring.

Two scales are in use:
- Quiz results (calculate_quiz_score): per-topic scores are the average answer
  value scaled by 10, so -100 (left) to +100 (right); the overall score is a
  weighted mean of those, rounded to an integer.
- Unified entity scores (candidates, parties): answer averages on the
  -10 to +10 scale, rounded to 2 decimals.

Rounding follows half-up semantics (2.5 -> 3, -2.5 -> -2) rather than Python's
banker's rounding, so stored and recomputed scores agree.

Example usage:
    from civic.lib.scoring import calculate_quiz_score

    result = calculate_quiz_score(answers, questions, selected_topics, topics)
    print(result.overall, [t.score for t in result.by_topic])
"""

import math
import random
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, TypeVar

from civic.lib.models import (
    DetailedMatch,
    Question,
    QuestionComparison,
    QuizAnswer,
    ScoringResult,
    TopicInfo,
    TopicScore,
    TopicWeight,
)

T = TypeVar("T")

SCORE_MIN = -10
SCORE_MAX = 10
QUIZ_SCALE = 10

# Agreement/disagreement threshold for |value| on a single question
MODERATE_THRESHOLD = 2


def round_half_up(value: float, digits: int = 0) -> float:
    """Round with ties going toward +infinity."""
    factor = 10 ** digits
    rounded = math.floor(value * factor + 0.5) / factor
    return int(rounded) if digits == 0 else rounded


def _group_values_by_topic(
    pairs: Iterable, question_topics: Mapping[str, str]
) -> Dict[str, List[float]]:
    grouped: Dict[str, List[float]] = {}
    for question_id, value in pairs:
        topic_id = question_topics.get(question_id)
        if topic_id is None:
            continue
        grouped.setdefault(topic_id, []).append(value)
    return grouped


# ==========================================================================
# Quiz scoring
# ==========================================================================


def calculate_quiz_score(
    answers: Sequence[QuizAnswer],
    questions: Sequence[Question],
    selected_topics: Sequence[TopicWeight],
    topic_info: Sequence[TopicInfo],
) -> ScoringResult:
    """Score a quiz attempt.

    Answers are grouped by their question's topic. Each topic score is the
    group average scaled by 10 and rounded. The overall score is the mean of
    the topic scores weighted by the user's topic weights (missing or zero
    weight counts as 1), rounded to an integer. No answers -> overall 0.

    Args:
        answers: User answers (question_id, value)
        questions: Question catalog, used to map questions to topics
        selected_topics: Topics the user selected, with weights
        topic_info: Topic metadata for display names

    Returns:
        ScoringResult with overall score and per-topic scores
    """
    question_topics = {q.id: q.topic_id for q in questions}
    topic_names = {t.id: t.name for t in topic_info}

    grouped = _group_values_by_topic(
        ((a.question_id, a.value) for a in answers), question_topics
    )

    by_topic = [
        TopicScore(
            topic_id=topic_id,
            topic_name=topic_names.get(topic_id, topic_id),
            score=round_half_up(sum(values) / len(values) * QUIZ_SCALE),
        )
        for topic_id, values in grouped.items()
    ]

    weights = {t.id: t.weight for t in selected_topics}
    weighted_sum = 0.0
    total_weight = 0.0
    for topic_score in by_topic:
        weight = weights.get(topic_score.topic_id) or 1
        weighted_sum += topic_score.score * weight
        total_weight += weight

    overall = round_half_up(weighted_sum / total_weight) if total_weight else 0
    return ScoringResult(overall=overall, by_topic=by_topic)


def shuffle_array(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """Return a shuffled copy of items (Fisher-Yates); the input is untouched."""
    rng = rng or random
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


# ==========================================================================
# Unified -10..+10 scores
# ==========================================================================


def calculate_average_score(values: Sequence[float]) -> Optional[float]:
    if not values:
        return None
    return sum(values) / len(values)


def calculate_weighted_overall_score(
    topic_scores: Iterable[Mapping[str, float]],
    topic_weights: Sequence[TopicWeight],
) -> float:
    """Weighted mean of {"topic_id", "score"} entries, 2 decimals.

    Topics without a weight entry count as weight 1. Returns 0 when there are
    no topic scores.
    """
    weights = {t.id: t.weight for t in topic_weights}
    weighted_sum = 0.0
    total_weight = 0.0
    for entry in topic_scores:
        weight = weights.get(entry["topic_id"]) or 1
        weighted_sum += entry["score"] * weight
        total_weight += weight

    if total_weight == 0:
        return 0
    return round_half_up(weighted_sum / total_weight, 2)


def calculate_entity_score(answer_values: Sequence[float]) -> Optional[float]:
    """Average of a candidate's or party's answer values, 2 decimals."""
    average = calculate_average_score(answer_values)
    if average is None:
        return None
    return round_half_up(average, 2)


def calculate_weighted_party_score(
    party_answers: Iterable[Mapping[str, float]],
    user_topic_weights: Sequence[TopicWeight],
    question_topics: Mapping[str, str],
) -> Optional[float]:
    """Party score over the user's questions, weighted by the user's topics."""
    pairs = [(a["question_id"], a["answer_value"]) for a in party_answers]
    if not pairs:
        return None

    grouped = _group_values_by_topic(pairs, question_topics)
    topic_scores = [
        {"topic_id": topic_id, "score": calculate_average_score(values) or 0}
        for topic_id, values in grouped.items()
    ]
    return calculate_weighted_overall_score(topic_scores, user_topic_weights)


def calculate_match_percentage(user_score: float, entity_score: float) -> int:
    """Closeness of two -10..+10 scores as 0-100 (20 apart = 0%)."""
    max_difference = SCORE_MAX - SCORE_MIN
    difference = abs(user_score - entity_score)
    return round_half_up((max_difference - difference) / max_difference * 100)


def calculate_match_score(user_score: float, candidate_score: float) -> int:
    """Closeness of two -100..+100 quiz-scale scores, clamped to 0-100."""
    difference = abs((user_score + 100) - (candidate_score + 100))
    match = round_half_up(100 - difference / 2)
    return max(0, min(100, match))


def clamp_score(score: float) -> float:
    return max(SCORE_MIN, min(SCORE_MAX, score))


def is_valid_score(score: Optional[float]) -> bool:
    return score is not None and SCORE_MIN <= score <= SCORE_MAX


# ==========================================================================
# Per-question comparison
# ==========================================================================


def calculate_detailed_match_score(
    user_answers: Iterable[Mapping[str, float]],
    candidate_answers: Iterable,
) -> DetailedMatch:
    """Compare a user and a candidate on the questions both answered.

    Args:
        user_answers: {"question_id", "value"} entries
        candidate_answers: CandidateAnswer records

    Returns:
        DetailedMatch. Agreements share a sign (or are both moderate) and are
        sorted closest first; disagreements are strong opposite positions,
        sorted furthest first.
    """
    candidate_values = {a.question_id: a.answer_value for a in candidate_answers}

    shared: List[QuestionComparison] = []
    for answer in user_answers:
        candidate_value = candidate_values.get(answer["question_id"])
        if candidate_value is None:
            continue
        shared.append(
            QuestionComparison(
                question_id=answer["question_id"],
                user_value=answer["value"],
                candidate_value=candidate_value,
                difference=abs(answer["value"] - candidate_value),
            )
        )

    if not shared:
        return DetailedMatch(match_score=0, shared_questions=0)

    max_difference = len(shared) * (SCORE_MAX - SCORE_MIN)
    total_difference = sum(q.difference for q in shared)
    match_score = round_half_up((max_difference - total_difference) / max_difference * 100)

    agreements = [
        q
        for q in shared
        if q.user_value * q.candidate_value > 0
        or (
            abs(q.user_value) <= MODERATE_THRESHOLD
            and abs(q.candidate_value) <= MODERATE_THRESHOLD
        )
    ]
    disagreements = [
        q
        for q in shared
        if q.user_value * q.candidate_value < 0
        and abs(q.user_value) > MODERATE_THRESHOLD
        and abs(q.candidate_value) > MODERATE_THRESHOLD
    ]

    return DetailedMatch(
        match_score=match_score,
        shared_questions=len(shared),
        agreements=sorted(agreements, key=lambda q: q.difference),
        disagreements=sorted(disagreements, key=lambda q: q.difference, reverse=True),
    )


def calculate_overall_candidate_score(candidate_answers: Sequence) -> float:
    """Plain (unrounded) average of all of a candidate's answers; 0 if none."""
    if not candidate_answers:
        return 0
    return sum(a.answer_value for a in candidate_answers) / len(candidate_answers)
