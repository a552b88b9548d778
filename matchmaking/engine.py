"""
Greedy round-based matchmaking.

One round runs start to finish:
1. Resolve ratings for the active roster
2. Build skill tiers from the whole roster
3. Drop one player if the roster is odd (carry-over policy)
4. Greedily pair the rest by minimum pairing cost
5. Record the round in the match history

The greedy pass never backtracks: once two players are paired they are not
reconsidered, even if a lower total cost assignment exists.
"""

import logging
import math
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from matchmaking.carry_over import select_sit_out
from matchmaking.config import SEED_SIGMA_MULTIPLIER, MatchmakingSettings
from matchmaking.cost import score_candidate
from matchmaking.exceptions import DuplicatePlayerError, InputError, UnknownPlayerError
from matchmaking.history import MatchHistory
from matchmaking.models import (
    UNRATED_PLAYER,
    Match,
    MatchmakingResult,
    MatchmakingWarning,
    PairingCandidate,
    PlayerRating,
    RoundState,
    SkillTier,
)
from matchmaking.rating import SkillRating
from matchmaking.tiers import build_skill_tiers, index_tiers

logger = logging.getLogger(__name__)


@dataclass
class RoundOutcome:
    """A finished round plus the state to carry into the next one."""

    result: MatchmakingResult
    history: MatchHistory
    round_state: RoundState


# ==============================
# Match construction
# ==============================

def conservative_skill(rating: PlayerRating) -> float:
    """Lower confidence bound on skill (mu - 3 sigma)."""
    return rating.mean - SEED_SIGMA_MULTIPLIER * rating.uncertainty


def build_match(a: PlayerRating, b: PlayerRating) -> Match:
    mean_uncertainty = (a.uncertainty + b.uncertainty) / 2
    return Match(
        player1=a.player,
        player2=b.player,
        skill_difference=abs(a.ordinal - b.ordinal),
        average_skill=(a.ordinal + b.ordinal) / 2,
        confidence=1 / mean_uncertainty if mean_uncertainty > 0 else math.inf,
    )


def pair_players(players: Sequence[PlayerRating],
                 tiers: Sequence[SkillTier],
                 history: MatchHistory,
                 skill_rating: SkillRating,
                 settings: Optional[MatchmakingSettings] = None) -> List[Match]:
    """
    Pair players greedily, strongest proven players first.

    Each unpaired player takes the cheapest unpaired partner seeded below
    them. Matches come back ordered by average ordinal, highest first.
    A leftover player (odd input) is left out.
    The tiers must cover every player being paired.
    """
    settings = settings or MatchmakingSettings()
    tier_lookup = index_tiers(tiers)

    missing = [p.player for p in players if p.player not in tier_lookup]
    if missing:
        raise InputError(f"Players missing from skill tiers: {', '.join(missing)}")

    seeded = sorted(players, key=conservative_skill, reverse=True)
    paired = [False] * len(seeded)
    matches: List[Match] = []

    for i, player in enumerate(seeded):
        if paired[i]:
            continue

        best: Optional[Tuple[int, PairingCandidate]] = None
        for j in range(i + 1, len(seeded)):
            if paired[j]:
                continue
            candidate = score_candidate(player, seeded[j], tier_lookup, history, skill_rating, settings)
            if best is None or candidate.cost < best[1].cost:
                best = (j, candidate)

        if best is None:
            logger.debug("No partner left for %s", player.player)
            continue

        j, candidate = best
        paired[i] = paired[j] = True
        matches.append(build_match(candidate.player_a, candidate.player_b))
        logger.debug("Paired %s vs %s (cost %.3f)", player.player, seeded[j].player, candidate.cost)

    matches.sort(key=lambda m: m.average_skill, reverse=True)
    return matches


# ==============================
# Round orchestration
# ==============================

def resolve_ratings(active_players: Sequence[str],
                    skill_rating: SkillRating,
                    settings: Optional[MatchmakingSettings] = None
                    ) -> Tuple[List[PlayerRating], List[MatchmakingWarning]]:
    """Look up every active player's rating, assigning the prior to unrated players if allowed."""
    settings = settings or MatchmakingSettings()

    duplicates = [name for name, count in Counter(active_players).items() if count > 1]
    if duplicates:
        raise DuplicatePlayerError(duplicates)

    ratings: List[PlayerRating] = []
    warnings: List[MatchmakingWarning] = []
    for player in active_players:
        rating = skill_rating.rating_of(player)
        if rating is None:
            if not settings.allow_unrated_players:
                raise UnknownPlayerError(player)
            rating = skill_rating.default_rating(player)
            message = f"{player} has no rating; using the default rating"
            logger.warning(message)
            warnings.append(MatchmakingWarning(UNRATED_PLAYER, message, player))
        ratings.append(rating)
    return ratings, warnings


def create_matchmaking(active_players: Sequence[str],
                       skill_rating: SkillRating,
                       history: Optional[MatchHistory] = None,
                       round_state: Optional[RoundState] = None,
                       settings: Optional[MatchmakingSettings] = None,
                       timestamp: Optional[str] = None) -> RoundOutcome:
    """
    Run one matchmaking round.

    Inputs are not modified; the updated history and round state are
    returned for the caller to persist before the next round.
    """
    settings = settings or MatchmakingSettings()
    history = history if history is not None else MatchHistory.empty(
        settings.lookback_rounds, settings.matches_per_round
    )
    round_state = round_state or RoundState()
    timestamp = timestamp or datetime.now(timezone.utc).isoformat()
    round_number = round_state.round_number + 1

    ratings, warnings = resolve_ratings(active_players, skill_rating, settings)
    logger.info("Round %d: %d active players", round_number, len(ratings))

    tiers = build_skill_tiers(ratings, settings)
    decision = select_sit_out(ratings, round_state.previously_sat_out)
    warnings.extend(decision.warnings)

    matches = pair_players(decision.players_to_pair, tiers, history, skill_rating, settings)

    result = MatchmakingResult(
        matches=matches,
        total_active_players=len(ratings),
        unmatched_players=[decision.sit_out] if decision.sit_out else [],
        algorithm=settings.strategy,
        timestamp=timestamp,
        round_number=round_number,
        tiers=tiers,
        warnings=warnings,
    )

    return RoundOutcome(
        result=result,
        history=history.record_round(matches, timestamp, round_number),
        round_state=RoundState(previously_sat_out=decision.sit_out, round_number=round_number),
    )
