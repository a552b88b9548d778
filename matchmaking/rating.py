"""
Skill rating capability consumed by the matchmaking engine.
The engine only talks to SkillRating; OpenSkillRating backs it with the
OpenSkill PlackettLuce model used by the leaderboard.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional

from openskill.models import PlackettLuce

from matchmaking.config import OS_BETA, OS_MU, OS_SIGMA, OS_TAU
from matchmaking.exceptions import InputError
from matchmaking.models import PlayerRating

logger = logging.getLogger(__name__)

# ==============================
# OpenSkill Model Configuration
# ==============================

MODEL = PlackettLuce(mu=OS_MU, sigma=OS_SIGMA, beta=OS_BETA, tau=OS_TAU)


class SkillRating(ABC):
    """Narrow interface onto whatever rating model produced the roster's skills."""

    @abstractmethod
    def rating_of(self, player: str) -> Optional[PlayerRating]:
        """Return the player's rating, or None if the player is unrated."""

    @abstractmethod
    def draw_probability(self, a: PlayerRating, b: PlayerRating) -> float:
        """Probability in [0, 1] that the two ratings produce an even contest."""

    @abstractmethod
    def default_rating(self, player: str) -> PlayerRating:
        """Prior rating for a player the model has never seen."""


class OpenSkillRating(SkillRating):
    """SkillRating backed by an OpenSkill model and a table of known ratings."""

    def __init__(self, ratings: Iterable[PlayerRating] = (), model=MODEL):
        self.model = model
        self._ratings: Dict[str, PlayerRating] = {r.player: r for r in ratings}

    def __len__(self) -> int:
        return len(self._ratings)

    def __contains__(self, player: str) -> bool:
        return player in self._ratings

    def rating_of(self, player: str) -> Optional[PlayerRating]:
        return self._ratings.get(player)

    def draw_probability(self, a: PlayerRating, b: PlayerRating) -> float:
        team1 = [self.model.create_rating([a.mean, a.uncertainty], name=a.player)]
        team2 = [self.model.create_rating([b.mean, b.uncertainty], name=b.player)]
        return float(self.model.predict_draw([team1, team2]))

    def default_rating(self, player: str) -> PlayerRating:
        return self.to_player_rating(player, self.model.mu, self.model.sigma)

    def to_player_rating(self, player: str, mu: float, sigma: float,
                         ordinal: Optional[float] = None) -> PlayerRating:
        """Wrap mu/sigma as a PlayerRating, computing the ordinal when not supplied."""
        if ordinal is None:
            ordinal = self.model.create_rating([mu, sigma], name=player).ordinal()
        return PlayerRating(player=player, mean=float(mu), uncertainty=float(sigma), ordinal=float(ordinal))

    @classmethod
    def from_ranks(cls, data: Dict[str, Any], model=MODEL) -> "OpenSkillRating":
        """
        Build from a leaderboard document:
        {"players": [{"player": ..., "rating": {"mu": ..., "sigma": ...}, "ordinal": ...}]}
        Entries without a name, without a rating or with non-numeric values are skipped.
        """
        players = data.get("players", [])
        if not isinstance(players, list):
            raise InputError(f"Ratings 'players' must be a list, got {type(players).__name__}")

        adapter = cls(model=model)
        for entry in players:
            if not isinstance(entry, dict):
                logger.warning("Skipping malformed ratings entry: %r", entry)
                continue
            name = entry.get("player")
            rating = entry.get("rating")
            if not isinstance(name, str) or not name or not isinstance(rating, dict) \
                    or "mu" not in rating or "sigma" not in rating:
                logger.warning("Skipping malformed ratings entry: %r", entry)
                continue
            ordinal = entry.get("ordinal")
            try:
                mu = float(rating["mu"])
                sigma = float(rating["sigma"])
                ordinal = float(ordinal) if ordinal is not None else None
            except (TypeError, ValueError):
                logger.warning("Skipping ratings entry with non-numeric values: %r", entry)
                continue
            adapter._ratings[name] = adapter.to_player_rating(name, mu, sigma, ordinal)
        logger.info("Loaded %d player ratings", len(adapter))
        return adapter
