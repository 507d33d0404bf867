"""
Free-text US address parsing (state abbreviation and ZIP code).

Used as a fallback when the geocoding function cannot resolve a state.
"""

import re
from typing import Dict, Optional

STATE_ABBREVIATIONS = [
    "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "FL", "GA",
    "HI", "ID", "IL", "IN", "IA", "KS", "KY", "LA", "ME", "MD",
    "MA", "MI", "MN", "MS", "MO", "MT", "NE", "NV", "NH", "NJ",
    "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC",
    "SD", "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY", "DC",
]

ZIP_PATTERN = re.compile(r"\b(\d{5})(-\d{4})?\b")


def _state_patterns(state: str):
    return [
        re.compile(rf"\b{state}\s+\d{{5}}", re.IGNORECASE),  # "NJ 08854"
        re.compile(rf",\s*{state}\b", re.IGNORECASE),  # ", NJ"
        re.compile(rf"\s{state}\s", re.IGNORECASE),  # " NJ "
    ]


def parse_address_for_state(address: str) -> Dict[str, Optional[str]]:
    """
    Extract a state abbreviation and 5-digit ZIP code from an address.

    States are tried in a fixed order and the first one matching any pattern
    wins.

    Args:
        address: Free-text address, e.g. "1 Main St, Edison, NJ 08817"

    Returns:
        {"state": "NJ" | None, "zip_code": "08817" | None}
    """
    upper_address = address.upper()

    found_state = None
    for state in STATE_ABBREVIATIONS:
        if any(p.search(upper_address) for p in _state_patterns(state)):
            found_state = state
            break

    zip_match = ZIP_PATTERN.search(address)
    zip_code = zip_match.group(1) if zip_match else None

    return {"state": found_state, "zip_code": zip_code}
