#!/usr/bin/env python3
"""
Matchmaking Round Runner
Pairs the active roster for the next round and carries state forward.

This script:
1. Loads ratings, the active roster, recent match history and round state
2. Runs one greedy tiered matchmaking round
3. Saves the round's matches, the updated history and the new round state
4. Prints the pairings

Run once per round; rounds for the same tournament must not run concurrently.
"""

import argparse
import logging
import sys
from typing import List, Optional

from matchmaking.config import (
    ACTIVE_PLAYERS_FILE,
    HISTORY_FILE,
    MATCHES_FILE,
    RANKS_FILE,
    ROUND_STATE_FILE,
    STRATEGIES,
    load_settings,
)
from matchmaking.engine import RoundOutcome, create_matchmaking
from matchmaking.exceptions import MatchmakingError
from matchmaking.models import MatchmakingResult
from matchmaking.storage import (
    data_path,
    load_active_players,
    load_match_history,
    load_ratings,
    load_round_state,
    save_match_history,
    save_matchmaking,
    save_round_state,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="duel-matchmaking",
        description="Create skill-tiered 1v1 pairings for the next round.",
    )
    parser.add_argument("--data-dir", help="Directory holding ratings, roster and state files")
    parser.add_argument("--strategy", choices=STRATEGIES, help="Pairing strategy")
    parser.add_argument("--lookback-rounds", type=int, help="Rounds of history used to avoid rematches")
    parser.add_argument("--strict", action="store_true",
                        help="Fail on active players without a rating instead of using the default")
    parser.add_argument("--dry-run", action="store_true", help="Print pairings without saving anything")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def print_report(result: MatchmakingResult):
    """Print the round's pairings to the console."""
    print("\n" + "=" * 60)
    print(f"MATCHMAKING RESULTS - ROUND {result.round_number} ({result.algorithm})")
    print("=" * 60)
    print(f"Total active players: {result.total_active_players}")
    print(f"Matches created: {len(result.matches)}")
    print(f"Unmatched players: {len(result.unmatched_players)}")
    if result.unmatched_players:
        print(f"Unmatched: {', '.join(result.unmatched_players)}")

    if result.tiers:
        print(f"\n{'-' * 60}")
        print("SKILL TIERS:")
        for tier in result.tiers:
            print(f"  {tier.label:12s} {tier.max_ordinal:6.2f} to {tier.min_ordinal:6.2f}  "
                  f"{', '.join(tier.player_names())}")

    print(f"\n{'-' * 60}")
    print("GENERATED MATCHES:")
    for index, match in enumerate(result.matches, start=1):
        print(f"Match {index}: {match.player1} vs {match.player2}")
        print(f"  Skill difference: {match.skill_difference:.2f}")
        print(f"  Average skill: {match.average_skill:.2f}")
        print(f"  Match confidence: {match.confidence:.2f}")

    if result.warnings:
        print(f"\n{'-' * 60}")
        print("WARNINGS:")
        for warning in result.warnings:
            print(f"  [{warning.code}] {warning.message}")


def run_round(args: argparse.Namespace) -> RoundOutcome:
    """Load state, pair the round and persist the outcome unless dry-running."""
    settings = load_settings().with_overrides(
        data_dir=args.data_dir,
        strategy=args.strategy,
        lookback_rounds=args.lookback_rounds,
        allow_unrated_players=False if args.strict else None,
    )

    skill_rating = load_ratings(data_path(settings, RANKS_FILE))
    active_players = load_active_players(data_path(settings, ACTIVE_PLAYERS_FILE))
    print(f"Found {len(active_players)} active players out of {len(skill_rating)} rated")

    history, history_warnings = load_match_history(data_path(settings, HISTORY_FILE), settings)
    round_state, state_warnings = load_round_state(data_path(settings, ROUND_STATE_FILE))

    outcome = create_matchmaking(active_players, skill_rating, history, round_state, settings)
    outcome.result.warnings[:0] = history_warnings + state_warnings

    if args.dry_run:
        print("Dry run: nothing saved")
        return outcome

    matches_path = data_path(settings, MATCHES_FILE)
    save_matchmaking(matches_path, outcome.result)
    save_match_history(data_path(settings, HISTORY_FILE), outcome.history)
    save_round_state(data_path(settings, ROUND_STATE_FILE), outcome.round_state)

    print(f"Results saved to: {matches_path}")
    print(f"Match history updated: {len(outcome.history)} recent matches tracked")
    return outcome


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        outcome = run_round(args)
    except MatchmakingError as e:
        print(f"Matchmaking failed: {e}", file=sys.stderr)
        return 1

    print_report(outcome.result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
