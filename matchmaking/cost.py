"""
Pairing cost for a candidate match. Lower is better.

cost = (1 - draw probability) + tier gap penalty + recent match penalty
"""

import logging
from typing import Dict, Optional

from matchmaking.config import MatchmakingSettings
from matchmaking.history import MatchHistory
from matchmaking.models import PairingCandidate, PlayerRating
from matchmaking.rating import SkillRating

logger = logging.getLogger(__name__)

_DEFAULT_SETTINGS = MatchmakingSettings()


def base_cost(a: PlayerRating, b: PlayerRating, skill_rating: SkillRating) -> float:
    """Skill mismatch term: 1 - P(draw)."""
    draw_probability = min(1.0, max(0.0, skill_rating.draw_probability(a, b)))
    return 1.0 - draw_probability


def tier_gap_penalty(gap: int, settings: Optional[MatchmakingSettings] = None) -> float:
    """
    Penalty for pairing players whose tiers are gap positions apart.
    Gaps beyond the table escalate linearly, so large crossovers stay possible.
    """
    settings = settings or _DEFAULT_SETTINGS
    gap = abs(gap)
    if gap == 0:
        return 0.0
    if gap in settings.tier_gap_penalties:
        return settings.tier_gap_penalties[gap]
    if gap >= 4:
        return settings.tier_gap_escalation_base + settings.tier_gap_escalation_step * (gap - 4)
    # Partial custom tables fall back to the escalation curve
    return settings.tier_gap_escalation_base


def pairing_cost(a: PlayerRating, b: PlayerRating,
                 tier_lookup: Dict[str, int],
                 history: MatchHistory,
                 skill_rating: SkillRating,
                 settings: Optional[MatchmakingSettings] = None) -> float:
    """Combined cost of pairing a with b in the current round."""
    settings = settings or _DEFAULT_SETTINGS
    cost = base_cost(a, b, skill_rating)

    if settings.tier_aware:
        cost += tier_gap_penalty(tier_lookup[a.player] - tier_lookup[b.player], settings)

    if history.has_recent_match(a.player, b.player):
        cost += settings.active_recent_match_penalty
        logger.debug("Applied recent match penalty to %s vs %s", a.player, b.player)

    return cost


def score_candidate(a: PlayerRating, b: PlayerRating,
                    tier_lookup: Dict[str, int],
                    history: MatchHistory,
                    skill_rating: SkillRating,
                    settings: Optional[MatchmakingSettings] = None) -> PairingCandidate:
    return PairingCandidate(a, b, pairing_cost(a, b, tier_lookup, history, skill_rating, settings))
