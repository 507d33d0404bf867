"""Unit tests for address parsing."""

import pytest

from civic.lib.address import parse_address_for_state


@pytest.mark.parametrize(
    "address,state,zip_code",
    [
        ("1 Main St, Edison, NJ 08817", "NJ", "08817"),
        ("500 Congress Ave Austin TX 78701", "TX", "78701"),
        ("123 Oak Rd, Portland, OR", "OR", None),
        ("1600 Pennsylvania Ave NW, Washington, dc 20500-0003", "DC", "20500"),
        ("somewhere nice", None, None),
    ],
)
def test_parse_address_for_state(address, state, zip_code):
    assert parse_address_for_state(address) == {"state": state, "zip_code": zip_code}
