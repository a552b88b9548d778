"""
Skill tier assembly for a matchmaking round.
Tiers are rebuilt from scratch every round from the ordinal-sorted roster.
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from matchmaking.config import OVERFLOW_TIER_LABEL, MatchmakingSettings
from matchmaking.models import PlayerRating, SkillTier

logger = logging.getLogger(__name__)

_DEFAULT_SETTINGS = MatchmakingSettings()


def adaptive_tier_width(anchor_ordinal: float, settings: Optional[MatchmakingSettings] = None) -> float:
    """Maximum ordinal spread for a tier opened by a player at anchor_ordinal."""
    settings = settings or _DEFAULT_SETTINGS
    if anchor_ordinal > settings.top_threshold:
        return settings.top_tier_width
    if anchor_ordinal > settings.upper_mid_threshold:
        return settings.upper_mid_tier_width
    return settings.default_tier_width


def tier_label(index: int, settings: Optional[MatchmakingSettings] = None) -> str:
    """Label for the tier at position index (0 = strongest)."""
    settings = settings or _DEFAULT_SETTINGS
    if index < len(settings.tier_names):
        return settings.tier_names[index]
    return OVERFLOW_TIER_LABEL.format(number=index + 1)


def _close_tier(index: int, members: List[PlayerRating], settings: MatchmakingSettings) -> SkillTier:
    return SkillTier(
        label=tier_label(index, settings),
        players=tuple(members),
        min_ordinal=members[-1].ordinal,
        max_ordinal=members[0].ordinal,
    )


def build_skill_tiers(ratings: Iterable[PlayerRating],
                      settings: Optional[MatchmakingSettings] = None) -> List[SkillTier]:
    """
    Partition ratings into contiguous tiers, highest skill first.

    A player joins the open tier unless the gap from the tier's first player
    exceeds the adaptive width, or the tier is already full.
    """
    settings = settings or _DEFAULT_SETTINGS
    ordered = sorted(ratings, key=lambda r: r.ordinal, reverse=True)

    tiers: List[SkillTier] = []
    current: List[PlayerRating] = []

    for rating in ordered:
        if current:
            anchor = current[0]
            too_wide = anchor.ordinal - rating.ordinal > adaptive_tier_width(anchor.ordinal, settings)
            full = len(current) >= settings.max_tier_size
            if too_wide or full:
                tiers.append(_close_tier(len(tiers), current, settings))
                current = []
        current.append(rating)

    if current:
        tiers.append(_close_tier(len(tiers), current, settings))

    logger.debug(
        "Built %d tiers: %s",
        len(tiers),
        ", ".join(f"{t.label}({len(t)})" for t in tiers),
    )
    return tiers


def index_tiers(tiers: Sequence[SkillTier]) -> Dict[str, int]:
    """Map each player to the index of the tier holding them."""
    return {p.player: i for i, tier in enumerate(tiers) for p in tier.players}
