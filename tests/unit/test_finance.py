"""Unit tests for FEC totals queries."""

from unittest.mock import Mock

import pytest
import requests

from civic.lib.fec_client import FECAPIClient, FECAPINotFoundError
from civic.queries.finance import fetch_fec_totals


@pytest.fixture
def fec_client():
    return Mock(spec=FECAPIClient)


@pytest.fixture
def totals_row():
    return {
        "receipts": 1250000.5,
        "individual_itemized_contributions": 800000,
        "individual_unitemized_contributions": 300000,
        "other_receipts": None,
        "disbursements": 900000,
        "cash_on_hand_end_period": 350000.5,
        "coverage_end_date": "2024-06-30T00:00:00",
    }


class TestFetchFECTotals:

    def test_maps_totals(self, fec_client, totals_row):
        fec_client.get_committee_totals.return_value = [totals_row]

        totals = fetch_fec_totals(fec_client, "C00401224")

        assert totals.total_receipts == 1250000.5
        assert totals.total_disbursements == 900000
        assert totals.other_receipts == 0
        assert totals.coverage_end_date == "2024-06-30T00:00:00"
        fec_client.get_committee_totals.assert_called_once_with(
            "C00401224", cycle="2024", per_page=1
        )

    def test_no_committee_id(self, fec_client):
        assert fetch_fec_totals(fec_client, None) is None
        assert fetch_fec_totals(fec_client, "") is None
        fec_client.get_committee_totals.assert_not_called()

    def test_no_rows(self, fec_client):
        fec_client.get_committee_totals.return_value = []

        assert fetch_fec_totals(fec_client, "C00401224", cycle="2022") is None

    def test_api_error_gives_none(self, fec_client):
        fec_client.get_committee_totals.side_effect = FECAPINotFoundError("Resource not found")

        assert fetch_fec_totals(fec_client, "C00000000") is None

    def test_network_error_gives_none(self, fec_client):
        fec_client.get_committee_totals.side_effect = requests.exceptions.Timeout("slow")

        assert fetch_fec_totals(fec_client, "C00401224") is None

    def test_cached_per_committee_and_cycle(self, fec_client, totals_row):
        fec_client.get_committee_totals.return_value = [totals_row]

        fetch_fec_totals(fec_client, "C00401224")
        fetch_fec_totals(fec_client, "C00401224")
        fetch_fec_totals(fec_client, "C00401224", cycle="2022")

        assert fec_client.get_committee_totals.call_count == 2
