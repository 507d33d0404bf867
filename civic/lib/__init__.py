"""Shared library: models, scoring, caching and API clients."""

from .query_cache import (
    cache_response,
    cached_query,
    cleanup_expired,
    get_cached,
    invalidate_cache,
    run_query,
)
from .score_format import format_score, get_score_label
from .scoring import calculate_quiz_score, shuffle_array

__all__ = [
    "cache_response",
    "cached_query",
    "cleanup_expired",
    "get_cached",
    "invalidate_cache",
    "run_query",
    "format_score",
    "get_score_label",
    "calculate_quiz_score",
    "shuffle_array",
]
