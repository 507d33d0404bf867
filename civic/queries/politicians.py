"""
Congress members and representatives via the fetch-representatives function.
"""

import logging
from typing import Dict, List, Optional

from civic.lib.address import parse_address_for_state
from civic.lib.backend import BackendClient, BackendFunctionError
from civic.lib.models import Representative, RepresentativesResult
from civic.lib.query_cache import cached_query

logger = logging.getLogger(__name__)

ONE_HOUR = 60 * 60


@cached_query("all-politicians", stale_time=ONE_HOUR, retry=1)
def fetch_all_politicians(backend: BackendClient) -> List[Representative]:
    """All current Congress members.

    Raises:
        BackendFunctionError: If the function invocation fails. An error
            reported inside the payload degrades to an empty list.
    """
    logger.info("Fetching all Congress members...")

    data = backend.invoke("fetch-representatives", {"fetchAll": True}) or {}

    if data.get("error"):
        logger.error(f"API error: {data['error']}")
        return []

    representatives = [
        Representative.model_validate(r) for r in data.get("representatives") or []
    ]
    logger.info(f"Fetched {len(representatives)} Congress members")
    return representatives


def get_district_from_address(
    backend: BackendClient, address: str
) -> Dict[str, Optional[str]]:
    """Resolve an address to {"district", "state"} using the geocode function.

    Failures are logged and yield {"district": None, "state": None}.
    """
    logger.info(f"Geocoding address via edge function: {address}")
    try:
        data = backend.invoke("geocode-address", {"address": address}) or {}
    except BackendFunctionError as e:
        logger.error(f"Geocode edge function error: {e}")
        return {"district": None, "state": None}

    if data.get("error"):
        logger.info(f"Geocode API error: {data['error']}")

    return {"district": data.get("district"), "state": data.get("state")}


@cached_query("representatives", stale_time=ONE_HOUR, retry=1)
def _fetch_representatives(backend: BackendClient, address: str) -> RepresentativesResult:
    geocoded = get_district_from_address(backend, address)
    district = geocoded["district"]
    state = geocoded["state"] or parse_address_for_state(address)["state"]

    if not state:
        logger.info(f"Could not determine state from address: {address}")
        return RepresentativesResult()

    logger.info(f"Fetching representatives for state: {state}, district: {district}")

    data = backend.invoke(
        "fetch-representatives",
        {"state": state, "district": district, "includeExecutives": True},
    ) or {}

    if data.get("error"):
        logger.error(f"API error: {data['error']}")
        return RepresentativesResult(district=district, state=state)

    return RepresentativesResult(
        representatives=[
            Representative.model_validate(r) for r in data.get("representatives") or []
        ],
        district=district,
        state=state,
    )


def fetch_representatives(
    backend: BackendClient, address: Optional[str]
) -> RepresentativesResult:
    """Representatives (including executives) for a street address."""
    if not address:
        logger.info("No address provided")
        return RepresentativesResult()
    return _fetch_representatives(backend, address)
