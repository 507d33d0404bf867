"""
Campaign finance totals from the public FEC API.
"""

import logging
from typing import Optional

import requests

from civic.lib.fec_client import FECAPIClient, FECAPIError
from civic.lib.models import FECTotals
from civic.lib.query_cache import cached_query

logger = logging.getLogger(__name__)

DEFAULT_CYCLE = "2024"


@cached_query("fec-totals", stale_time=60 * 60, retry=1)
def _fetch_fec_totals(
    client: FECAPIClient, committee_id: str, cycle: str
) -> Optional[FECTotals]:
    try:
        rows = client.get_committee_totals(committee_id, cycle=cycle, per_page=1)
    except FECAPIError as e:
        logger.warning(f"[FEC Totals] API error: {e}")
        return None
    except requests.exceptions.RequestException as e:
        logger.error(f"[FEC Totals] Fetch error: {e}")
        return None

    if not rows:
        return None

    result = rows[0]
    return FECTotals(
        total_receipts=result.get("receipts") or 0,
        individual_itemized_contributions=result.get("individual_itemized_contributions") or 0,
        individual_unitemized_contributions=result.get("individual_unitemized_contributions") or 0,
        other_receipts=result.get("other_receipts") or 0,
        total_disbursements=result.get("disbursements") or 0,
        cash_on_hand_end_period=result.get("cash_on_hand_end_period") or 0,
        coverage_end_date=result.get("coverage_end_date") or None,
    )


def fetch_fec_totals(
    client: FECAPIClient,
    committee_id: Optional[str],
    cycle: str = DEFAULT_CYCLE,
) -> Optional[FECTotals]:
    """Financial totals for a committee in a cycle.

    Returns None when no committee ID is given, the API fails, or FEC has no
    totals for the cycle. Missing numeric fields default to 0.
    """
    if not committee_id:
        return None
    return _fetch_fec_totals(client, committee_id, cycle)
