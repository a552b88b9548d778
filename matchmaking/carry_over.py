"""Odd-player carry-over: choose who sits out when the roster is odd."""

import logging
from typing import List, NamedTuple, Optional, Sequence

from matchmaking.models import REPEATED_SIT_OUT, MatchmakingWarning, PlayerRating

logger = logging.getLogger(__name__)


class CarryOverDecision(NamedTuple):
    players_to_pair: List[PlayerRating]
    sit_out: Optional[str]
    warnings: List[MatchmakingWarning]


def _most_uncertain(players: Sequence[PlayerRating]) -> PlayerRating:
    # First player wins ties, keeping the choice stable for a given roster order
    chosen = players[0]
    for rating in players[1:]:
        if rating.uncertainty > chosen.uncertainty:
            chosen = rating
    return chosen


def select_sit_out(players: Sequence[PlayerRating],
                   previously_sat_out: Optional[str] = None) -> CarryOverDecision:
    """
    Drop one player from an odd roster.

    The most uncertain player other than last round's sit-out is removed, since
    they benefit most from any match later on. Last round's sit-out is only
    removed again when nobody else can be, which is reported as a warning.
    """
    if len(players) % 2 == 0:
        return CarryOverDecision(list(players), None, [])

    candidates = [p for p in players if p.player != previously_sat_out]
    warnings: List[MatchmakingWarning] = []

    if candidates:
        chosen = _most_uncertain(candidates)
    else:
        chosen = _most_uncertain(players)
        message = f"{chosen.player} sits out for the second round in a row"
        logger.warning(message)
        warnings.append(MatchmakingWarning(REPEATED_SIT_OUT, message, chosen.player))

    logger.info("Odd roster: %s sits out (sigma %.2f)", chosen.player, chosen.uncertainty)
    remaining = [p for p in players if p.player != chosen.player]
    return CarryOverDecision(remaining, chosen.player, warnings)
