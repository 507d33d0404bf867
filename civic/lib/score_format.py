"""
Display helpers for -10..+10 scores and profile metadata.

Scores render as a lean code: "C" for center, "CL2"/"CR3" inside the
center zone (|score| <= 3) and "L7"/"R6" outside it.
"""

from typing import Dict, Iterable, Mapping, Optional, Sequence

from civic.lib.models import ConfidenceLevel, CoverageTier, SourceType
from civic.lib.scoring import clamp_score, round_half_up

CENTER_ZONE = 3
RANK_WEIGHTS = [5, 4, 3, 2, 1]

COVERAGE_TIER_INFO = {
    CoverageTier.TIER_1: {
        "label": "Full Coverage",
        "description": "Complete data: stances, donors, and voting record",
        "color": "bg-green-100 text-green-800 border-green-200",
    },
    CoverageTier.TIER_2: {
        "label": "Partial Coverage",
        "description": "Limited donors or voting record available",
        "color": "bg-yellow-100 text-yellow-800 border-yellow-200",
    },
    CoverageTier.TIER_3: {
        "label": "Basic Coverage",
        "description": "Only stance data available",
        "color": "bg-gray-100 text-gray-800 border-gray-200",
    },
}

CONFIDENCE_INFO = {
    ConfidenceLevel.HIGH: {"label": "High Confidence", "color": "bg-green-100 text-green-800"},
    ConfidenceLevel.MEDIUM: {"label": "Medium Confidence", "color": "bg-yellow-100 text-yellow-800"},
    ConfidenceLevel.LOW: {"label": "Low Confidence", "color": "bg-red-100 text-red-800"},
}

SOURCE_TYPE_LABELS = {
    SourceType.VOTING_RECORD: "Voting Record",
    SourceType.PUBLIC_STATEMENT: "Public Statement",
    SourceType.CAMPAIGN_WEBSITE: "Campaign Website",
    SourceType.INTERVIEW: "Interview",
    SourceType.LEGISLATION: "Legislation",
    SourceType.OTHER: "Other Source",
}


def format_score(score: Optional[float]) -> str:
    """Format a -10..+10 score as a lean code ("NA" when missing)."""
    if score is None:
        return "NA"

    rounded = round_half_up(clamp_score(score))
    if rounded == 0:
        return "C"

    magnitude = abs(rounded)
    if -CENTER_ZONE <= rounded <= CENTER_ZONE:
        return f"CL{magnitude}" if rounded < 0 else f"CR{magnitude}"
    return f"L{magnitude}" if rounded < 0 else f"R{magnitude}"


def get_score_label(score: Optional[float]) -> str:
    if score is None:
        return "Unknown"
    if score <= -7:
        return "Far Left"
    if score <= -3:
        return "Left-Leaning"
    if score < 3:
        return "Moderate / Centrist"
    if score < 7:
        return "Right-Leaning"
    return "Far Right"


def get_coverage_tier_info(tier: str) -> Dict[str, str]:
    return dict(COVERAGE_TIER_INFO[CoverageTier(tier)])


def get_confidence_info(confidence: str) -> Dict[str, str]:
    return dict(CONFIDENCE_INFO[ConfidenceLevel(confidence)])


def get_source_type_label(source_type: Optional[str]) -> str:
    try:
        return SOURCE_TYPE_LABELS[SourceType(source_type)]
    except ValueError:
        return "Unknown"


def calculate_rank_weighted_score(
    topic_scores: Iterable[Mapping[str, float]],
    selected_topic_ids: Sequence[str],
) -> float:
    """Weighted score where the user's ranked topics get weights 5,4,3,2,1.

    Only the first five selected topics count; topics without a score are
    skipped. Returns 0 when nothing matches, otherwise 2 decimals.
    """
    scores = {entry["topic_id"]: entry["score"] for entry in topic_scores}
    weight_sum = sum(RANK_WEIGHTS)

    weighted_sum = 0.0
    total_weight = 0.0
    for rank, topic_id in enumerate(selected_topic_ids[: len(RANK_WEIGHTS)]):
        if topic_id not in scores:
            continue
        weight = RANK_WEIGHTS[rank] / weight_sum
        weighted_sum += scores[topic_id] * weight
        total_weight += weight

    if total_weight == 0:
        return 0
    return round_half_up(weighted_sum / total_weight, 2)
