"""OpenFEC API client with rate limiting and retry logic.

This module provides a Python client for the public OpenFEC API v1 with:
- Rate limiting (30 requests/hour on DEMO_KEY, 1000 with a real key)
- Exponential backoff retry on network errors and HTTP 429
- Comprehensive error handling

Example usage:
    from civic.lib.fec_client import FECAPIClient

    client = FECAPIClient()
    totals = client.get_committee_totals("C00401224", cycle="2024")
"""

import logging
import time
from typing import Any, Dict, List, Optional

import requests
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from civic.lib import config

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30


class FECAPIError(Exception):
    """Base exception for FEC API errors."""

    pass


class FECAPIRateLimitError(FECAPIError):
    """Raised when API rate limit is exceeded (HTTP 429)."""

    pass


class FECAPINotFoundError(FECAPIError):
    """Raised when resource not found (HTTP 404)."""

    pass


STATUS_ERRORS = {
    429: FECAPIRateLimitError,
    404: FECAPINotFoundError,
}


class FECAPIClient:
    """Client for the OpenFEC API with rate limiting and retry logic.

    Attributes:
        api_key: api.data.gov key (DEMO_KEY when unset)
        base_url: API base URL (default: https://api.open.fec.gov/v1)
        rate_limit_per_hour: Max requests per hour
        timeout: Request timeout in seconds (default: 30)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        rate_limit_per_hour: Optional[int] = None,
        timeout: int = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Initialize FEC API client.

        Args:
            api_key: API key (defaults to FEC_API_KEY env var, then DEMO_KEY)
            base_url: API base URL (defaults to FEC_API_BASE_URL env var)
            rate_limit_per_hour: Max requests/hour (defaults by key type)
            timeout: Request timeout in seconds (defaults to 30)
        """
        self.api_key = api_key or config.get_fec_api_key()
        self.base_url = base_url or config.get_fec_base_url()
        self.rate_limit_per_hour = rate_limit_per_hour or config.get_fec_rate_limit(
            self.api_key
        )
        self.timeout = timeout

        # Sliding-window rate limiting state
        self._request_timestamps: List[float] = []

        logger.info(
            f"Initialized FECAPIClient: base_url={self.base_url}, "
            f"rate_limit={self.rate_limit_per_hour}/hour"
        )

    def _enforce_rate_limit(self) -> None:
        """Sleep if the last hour already holds rate_limit_per_hour requests."""
        now = time.time()

        cutoff = now - 3600
        self._request_timestamps = [
            ts for ts in self._request_timestamps if ts > cutoff
        ]

        if len(self._request_timestamps) >= self.rate_limit_per_hour:
            oldest = self._request_timestamps[0]
            sleep_time = oldest + 3600 - now
            if sleep_time > 0:
                logger.warning(
                    f"Rate limit reached ({self.rate_limit_per_hour}/hour). "
                    f"Sleeping {sleep_time:.1f}s"
                )
                time.sleep(sleep_time)

        self._request_timestamps.append(time.time())

    @retry(
        retry=retry_if_exception_type(
            (requests.exceptions.RequestException, FECAPIRateLimitError)
        ),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    def _get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET an OpenFEC endpoint and return its JSON body.

        A status >= 400 raises the class registered for it in STATUS_ERRORS,
        or FECAPIError. Network errors and 429 are retried.
        """
        self._enforce_rate_limit()

        url = f"{self.base_url}{endpoint}"
        logger.debug(f"GET {url} params={params or {}}")
        response = requests.get(
            url, params={**(params or {}), "api_key": self.api_key}, timeout=self.timeout
        )

        if response.status_code >= 400:
            error_class = STATUS_ERRORS.get(response.status_code, FECAPIError)
            logger.warning(f"OpenFEC returned HTTP {response.status_code} for {endpoint}")
            raise error_class(f"HTTP {response.status_code} from {endpoint}")

        try:
            return response.json()
        except ValueError as e:
            raise FECAPIError(f"Invalid JSON response from {endpoint}: {e}") from e

    # ==========================================================================
    # Committee Endpoints
    # ==========================================================================

    def get_committee_totals(
        self, committee_id: str, cycle: str = "2024", per_page: int = 1
    ) -> List[Dict[str, Any]]:
        """Get financial totals for a committee.

        Args:
            committee_id: FEC committee ID (e.g., "C00401224")
            cycle: Two-year election cycle (e.g., "2024")
            per_page: Number of result rows to request

        Returns:
            List of totals rows (most recent first), possibly empty

        Example:
            >>> rows = client.get_committee_totals("C00401224", "2024")
            >>> print(rows[0]["receipts"])
        """
        endpoint = f"/committee/{committee_id}/totals/"
        data = self._get(
            endpoint, params={"cycle": cycle, "per_page": per_page}
        )
        return data.get("results") or []
