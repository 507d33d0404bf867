"""
Curated static officials (admin CRUD) and upcoming official transitions.
"""

import logging
from typing import List, Optional

from civic.lib.backend import BackendClient, BackendError
from civic.lib.models import OfficialTransition, StaticOfficial
from civic.lib.query_cache import cached_query, invalidate_cache

logger = logging.getLogger(__name__)

STATIC_OFFICIALS_KEY = ("static-officials",)


# ==========================================================================
# Static officials
# ==========================================================================


@cached_query("static-officials")
def fetch_static_officials(backend: BackendClient) -> List[StaticOfficial]:
    """All static officials ordered by level, office, then name."""
    rows = backend.select("static_officials", order=["level", "office", "name"])
    return [StaticOfficial.model_validate(r) for r in rows]


def create_static_official(backend: BackendClient, official: dict) -> StaticOfficial:
    """Insert an official (timestamps are set by the database).

    Raises:
        BackendError: If the insert fails
    """
    values = {k: v for k, v in official.items() if k not in ("created_at", "updated_at")}
    try:
        row = backend.insert("static_officials", values)
    except BackendError as e:
        logger.error(f"Failed to add official: {e}")
        raise

    invalidate_cache(STATIC_OFFICIALS_KEY)
    logger.info(f"Official added: {values.get('name')}")
    return StaticOfficial.model_validate(row)


def update_static_official(
    backend: BackendClient, official_id: str, **updates
) -> StaticOfficial:
    try:
        row = backend.update("static_officials", updates, eq={"id": official_id})
    except BackendError as e:
        logger.error(f"Failed to update official: {e}")
        raise

    invalidate_cache(STATIC_OFFICIALS_KEY)
    logger.info(f"Official updated: {official_id}")
    return StaticOfficial.model_validate(row)


def delete_static_official(backend: BackendClient, official_id: str) -> None:
    try:
        backend.delete("static_officials", eq={"id": official_id})
    except BackendError as e:
        logger.error(f"Failed to delete official: {e}")
        raise

    invalidate_cache(STATIC_OFFICIALS_KEY)
    logger.info(f"Official deleted: {official_id}")


# ==========================================================================
# Transitions
# ==========================================================================


@cached_query("official-transitions", stale_time=5 * 60)
def fetch_official_transitions(
    backend: BackendClient, state: Optional[str] = None
) -> List[OfficialTransition]:
    """Active transitions, earliest inauguration first, optionally for one state."""
    eq = {"is_active": True}
    if state:
        eq["state"] = state.upper()

    try:
        rows = backend.select(
            "official_transitions", eq=eq, order=[("inauguration_date", True)]
        )
    except BackendError as e:
        logger.error(f"[official_transitions] Error: {e}")
        raise
    return [OfficialTransition.model_validate(r) for r in rows]


def find_transition_for_official(
    backend: BackendClient, official_name: str, state: Optional[str] = None
) -> Optional[OfficialTransition]:
    """The active transition whose official name matches (case-insensitive)."""
    target = official_name.lower()
    for transition in fetch_official_transitions(backend, state):
        if transition.official_name.lower() == target:
            return transition
    return None
