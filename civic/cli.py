#!/usr/bin/env python3
"""
civic command line: inspect the data layer from a terminal.

Usage:
    civic politicians
    civic fec-totals C00401224 --cycle 2022
    civic sync-stats
    civic score quiz.json
    civic populate-party-answers --party democrat

The score command reads a JSON file with "answers", "questions",
"selected_topics" and "topics" lists.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from civic.lib import config
from civic.lib.backend import BackendClient, BackendError
from civic.lib.fec_client import FECAPIClient
from civic.lib.models import Question, QuizAnswer, TopicInfo, TopicWeight
from civic.lib.scoring import calculate_quiz_score
from civic.queries.coverage import fetch_sync_stats
from civic.queries.finance import DEFAULT_CYCLE, fetch_fec_totals
from civic.queries.parties import populate_party_answers
from civic.queries.politicians import fetch_all_politicians

logger = logging.getLogger(__name__)


def _emit(payload) -> None:
    print(json.dumps(payload, indent=2, default=str))


def cmd_politicians(args) -> int:
    politicians = fetch_all_politicians(BackendClient.from_env())
    _emit([p.model_dump(mode="json") for p in politicians])
    return 0


def cmd_fec_totals(args) -> int:
    totals = fetch_fec_totals(FECAPIClient(), args.committee_id, cycle=args.cycle)
    if totals is None:
        logger.error(f"No totals for committee {args.committee_id} in {args.cycle}")
        return 1
    _emit(totals.model_dump(mode="json"))
    return 0


def cmd_sync_stats(args) -> int:
    stats = fetch_sync_stats(BackendClient.from_env())
    logger.info(
        f"Coverage: {stats.total_actual_answers}/{stats.total_potential_answers} "
        f"({stats.overall_coverage_percent}%)"
    )
    _emit(stats.model_dump(mode="json"))
    return 0


def cmd_score(args) -> int:
    data = json.loads(Path(args.quiz_file).read_text())
    result = calculate_quiz_score(
        [QuizAnswer.model_validate(a) for a in data.get("answers", [])],
        [Question.model_validate(q) for q in data.get("questions", [])],
        [TopicWeight.model_validate(t) for t in data.get("selected_topics", [])],
        [TopicInfo.model_validate(t) for t in data.get("topics", [])],
    )
    _emit(result.model_dump(mode="json"))
    return 0


def cmd_populate_party_answers(args) -> int:
    result = populate_party_answers(BackendClient.from_env(), args.party)
    _emit(result.model_dump(mode="json", exclude_none=True))
    return 0 if result.success else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="civic", description="civic-compass data tools")
    parser.add_argument(
        "--log-level", default=None, help="Logging level (default: CIVIC_LOG_LEVEL or INFO)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    politicians = subparsers.add_parser("politicians", help="List all Congress members")
    politicians.set_defaults(func=cmd_politicians)

    fec = subparsers.add_parser("fec-totals", help="FEC totals for a committee")
    fec.add_argument("committee_id", help="FEC committee ID, e.g. C00401224")
    fec.add_argument("--cycle", default=DEFAULT_CYCLE, help="Election cycle year")
    fec.set_defaults(func=cmd_fec_totals)

    sync = subparsers.add_parser("sync-stats", help="Candidate answer coverage")
    sync.set_defaults(func=cmd_sync_stats)

    score = subparsers.add_parser("score", help="Score a quiz from a JSON file")
    score.add_argument("quiz_file", help="Path to quiz JSON")
    score.set_defaults(func=cmd_score)

    party = subparsers.add_parser(
        "populate-party-answers", help="Generate party answers"
    )
    party.add_argument("--party", default=None, help="Party ID (default: all parties)")
    party.set_defaults(func=cmd_populate_party_answers)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=(args.log_level or config.get_log_level()).upper(),
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    try:
        return args.func(args)
    except (BackendError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
