"""Unit tests for the civic command line."""

import json
import os
from unittest.mock import patch

import pytest

from civic import cli
from civic.lib.models import FECTotals, PopulateResult


@pytest.fixture
def quiz_file(tmp_path):
    path = tmp_path / "quiz.json"
    path.write_text(json.dumps({
        "answers": [
            {"question_id": "q1", "value": 5},
            {"question_id": "q2", "value": 10},
            {"question_id": "q3", "value": -5},
        ],
        "questions": [
            {"id": "q1", "topic_id": "economy"},
            {"id": "q2", "topic_id": "economy"},
            {"id": "q3", "topic_id": "health"},
        ],
        "selected_topics": [{"id": "economy", "weight": 3}, {"id": "health", "weight": 1}],
        "topics": [{"id": "economy", "name": "Economy"}, {"id": "health", "name": "Healthcare"}],
    }))
    return path


class TestScoreCommand:

    def test_prints_result(self, quiz_file, capsys):
        assert cli.main(["score", str(quiz_file)]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["overall"] == 44
        assert {t["topic_name"]: t["score"] for t in output["by_topic"]} == {
            "Economy": 75,
            "Healthcare": -50,
        }


class TestBackendCommands:

    def test_politicians(self, make_backend, capsys):
        backend = make_backend(functions={
            "fetch-representatives": {"representatives": [
                {"id": "b1", "name": "Cory Booker", "party": "Democrat",
                 "office": "Senator", "state": "NJ"},
            ]}
        })

        with patch("civic.cli.BackendClient.from_env", return_value=backend):
            assert cli.main(["politicians"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output[0]["name"] == "Cory Booker"

    def test_sync_stats(self, catalog_backend, capsys):
        with patch("civic.cli.BackendClient.from_env", return_value=catalog_backend):
            assert cli.main(["sync-stats"]) == 0

        assert json.loads(capsys.readouterr().out)["total_actual_answers"] == 6

    def test_populate_party_answers_failure(self, make_backend):
        with patch("civic.cli.populate_party_answers") as mock_populate, \
                patch("civic.cli.BackendClient.from_env", return_value=make_backend()):
            mock_populate.return_value = PopulateResult(success=False, error="no key")

            assert cli.main(["populate-party-answers", "--party", "green"]) == 1

        assert mock_populate.call_args[0][1] == "green"

    def test_missing_credentials(self):
        with patch.dict(os.environ, {}, clear=True):
            assert cli.main(["sync-stats"]) == 1


class TestFECTotalsCommand:

    @patch("civic.cli.FECAPIClient")
    @patch("civic.cli.fetch_fec_totals")
    def test_found(self, mock_fetch, mock_client, capsys):
        mock_fetch.return_value = FECTotals(total_receipts=1000, total_disbursements=400)

        assert cli.main(["fec-totals", "C00401224", "--cycle", "2022"]) == 0

        mock_fetch.assert_called_once_with(mock_client.return_value, "C00401224", cycle="2022")
        assert json.loads(capsys.readouterr().out)["total_receipts"] == 1000

    @patch("civic.cli.FECAPIClient")
    @patch("civic.cli.fetch_fec_totals", return_value=None)
    def test_not_found(self, mock_fetch, mock_client):
        assert cli.main(["fec-totals", "C00000000"]) == 1


class TestParser:

    def test_command_required(self):
        with pytest.raises(SystemExit):
            cli.main([])
