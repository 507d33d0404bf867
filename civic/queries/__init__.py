"""Cached data queries against the hosted backend and the FEC API."""

from .admin import (
    batch_regenerate_candidates,
    fetch_inverted_score_candidates,
    is_admin,
    populate_candidate_answers,
    populate_candidates_batch,
    regenerate_candidate_answers,
)
from .candidates import (
    delete_candidate_override,
    fetch_candidate,
    fetch_candidate_answers,
    fetch_candidate_answers_for_user,
    fetch_candidate_donors,
    fetch_candidate_override,
    fetch_candidate_overrides,
    fetch_candidate_score_map,
    fetch_candidate_votes,
    fetch_candidates,
    fetch_questions,
    fetch_topics,
    upsert_candidate_override,
)
from .coverage import (
    fetch_candidate_answer_stats,
    fetch_candidates_answer_coverage,
    fetch_sync_stats,
    fetch_unique_states,
)
from .finance import fetch_fec_totals
from .officials import (
    create_static_official,
    delete_static_official,
    fetch_official_transitions,
    fetch_static_officials,
    find_transition_for_official,
    update_static_official,
)
from .parties import fetch_party_answer_stats, fetch_party_match_scores, populate_party_answers
from .politicians import fetch_all_politicians, fetch_representatives, get_district_from_address

__all__ = [
    "batch_regenerate_candidates",
    "fetch_inverted_score_candidates",
    "is_admin",
    "populate_candidate_answers",
    "populate_candidates_batch",
    "regenerate_candidate_answers",
    "delete_candidate_override",
    "fetch_candidate",
    "fetch_candidate_answers",
    "fetch_candidate_answers_for_user",
    "fetch_candidate_donors",
    "fetch_candidate_override",
    "fetch_candidate_overrides",
    "fetch_candidate_score_map",
    "fetch_candidate_votes",
    "fetch_candidates",
    "fetch_questions",
    "fetch_topics",
    "upsert_candidate_override",
    "fetch_candidate_answer_stats",
    "fetch_candidates_answer_coverage",
    "fetch_sync_stats",
    "fetch_unique_states",
    "fetch_fec_totals",
    "create_static_official",
    "delete_static_official",
    "fetch_official_transitions",
    "fetch_static_officials",
    "find_transition_for_official",
    "update_static_official",
    "fetch_party_answer_stats",
    "fetch_party_match_scores",
    "populate_party_answers",
    "fetch_all_politicians",
    "fetch_representatives",
    "get_district_from_address",
]
