"""
Round-based skill-tiered matchmaking for 1v1 competitions.
"""

from matchmaking.engine import RoundOutcome, create_matchmaking, pair_players
from matchmaking.history import MatchHistory
from matchmaking.models import Match, MatchmakingResult, PlayerRating, RoundState, SkillTier
from matchmaking.rating import OpenSkillRating, SkillRating
from matchmaking.tiers import build_skill_tiers

__all__ = [
    "Match",
    "MatchHistory",
    "MatchmakingResult",
    "OpenSkillRating",
    "PlayerRating",
    "RoundOutcome",
    "RoundState",
    "SkillRating",
    "SkillTier",
    "build_skill_tiers",
    "create_matchmaking",
    "pair_players",
]
