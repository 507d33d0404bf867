"""
Recent-error log for admin batch operations.

Holds the newest errors raised while syncing FEC IDs, donors, committees,
reconciliation and AI answers, so an admin can review them per candidate.
"""

import logging
import time
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from civic.lib.models import AdminError, AdminErrorType

logger = logging.getLogger(__name__)

MAX_ERRORS = 100
RECENT_WINDOW = timedelta(minutes=5)


class AdminErrorLog:
    """Bounded, newest-first list of admin errors."""

    def __init__(self, max_errors: int = MAX_ERRORS):
        self.max_errors = max_errors
        self.errors: List[AdminError] = []

    def add_error(
        self,
        error_type: str,
        candidate_id: str,
        candidate_name: str,
        message: str,
    ) -> AdminError:
        error = AdminError(
            id=f"{int(time.time() * 1000)}-{candidate_id}",
            type=AdminErrorType(error_type),
            candidate_id=candidate_id,
            candidate_name=candidate_name,
            message=message,
            timestamp=datetime.now(timezone.utc),
        )
        logger.warning(f"[{error.type.value}] {candidate_name}: {message}")
        self.errors = [error] + self.errors[: self.max_errors - 1]
        return error

    def dismiss_error(self, error_id: str) -> None:
        self.errors = [e for e in self.errors if e.id != error_id]

    def clear_errors(self) -> None:
        self.errors = []

    def get_errors_for_candidate(self, candidate_id: str) -> List[AdminError]:
        return [e for e in self.errors if e.candidate_id == candidate_id]

    def has_recent_error(
        self, candidate_id: str, error_type: Optional[str] = None
    ) -> bool:
        """True if the candidate logged an error (of error_type) in the last 5 minutes."""
        cutoff = datetime.now(timezone.utc) - RECENT_WINDOW
        return any(
            e.candidate_id == candidate_id
            and e.timestamp > cutoff
            and (error_type is None or e.type.value == error_type)
            for e in self.errors
        )
