"""Data models shared by the matchmaking engine."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from matchmaking.exceptions import StateCorruptionError

# Warning codes surfaced to the caller
UNRATED_PLAYER = "UNRATED_PLAYER"
HISTORY_RESET = "HISTORY_RESET"
STATE_RESET = "STATE_RESET"
REPEATED_SIT_OUT = "REPEATED_SIT_OUT"


@dataclass(frozen=True)
class PlayerRating:
    """A player's skill estimate for the current round."""

    player: str
    mean: float
    uncertainty: float
    ordinal: float


@dataclass(frozen=True)
class SkillTier:
    """
    Contiguous band of players in ordinal-sorted order.

    Attributes
    ----------
    label : str
        Human-readable tier name.
    players : tuple of PlayerRating
        Members, highest ordinal first. Never empty.
    min_ordinal, max_ordinal : float
        Ordinal bounds of the members.
    """

    label: str
    players: Tuple[PlayerRating, ...]
    min_ordinal: float
    max_ordinal: float

    def __len__(self) -> int:
        return len(self.players)

    def player_names(self) -> List[str]:
        return [p.player for p in self.players]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "players": self.player_names(),
            "min_ordinal": self.min_ordinal,
            "max_ordinal": self.max_ordinal,
        }


class PairingCandidate(NamedTuple):
    player_a: PlayerRating
    player_b: PlayerRating
    cost: float


@dataclass(frozen=True)
class Match:
    """A head-to-head pairing produced for one round."""

    player1: str
    player2: str
    skill_difference: float
    average_skill: float
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player1": self.player1,
            "player2": self.player2,
            "skill_difference": self.skill_difference,
            "average_skill": self.average_skill,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class HistoricalPairing:
    """A pairing retained by the match history store."""

    player1: str
    player2: str
    timestamp: str
    round_number: Optional[int] = None

    def involves(self, player_a: str, player_b: str) -> bool:
        """True if this pairing is between the two players, in either order."""
        return {self.player1, self.player2} == {player_a, player_b}

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "player1": self.player1,
            "player2": self.player2,
            "timestamp": self.timestamp,
        }
        if self.round_number is not None:
            data["round"] = self.round_number
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoricalPairing":
        try:
            round_number = data.get("round")
            return cls(
                player1=str(data["player1"]),
                player2=str(data["player2"]),
                timestamp=str(data.get("timestamp", "")),
                round_number=int(round_number) if round_number is not None else None,
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StateCorruptionError(f"Malformed history entry {data!r}: {e}") from e


@dataclass(frozen=True)
class RoundState:
    """State carried from one round's output into the next round's input."""

    previously_sat_out: Optional[str] = None
    round_number: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "previously_sat_out": self.previously_sat_out,
            "round_number": self.round_number,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RoundState":
        if not isinstance(data, dict):
            raise StateCorruptionError(f"Round state must be an object, got {type(data).__name__}")
        sat_out = data.get("previously_sat_out")
        if sat_out is not None and not isinstance(sat_out, str):
            raise StateCorruptionError(f"Invalid previously_sat_out value: {sat_out!r}")
        try:
            round_number = int(data.get("round_number", 0))
        except (TypeError, ValueError) as e:
            raise StateCorruptionError(f"Invalid round_number: {e}") from e
        return cls(previously_sat_out=sat_out, round_number=round_number)


@dataclass(frozen=True)
class MatchmakingWarning:
    """Recoverable condition reported alongside a completed round."""

    code: str
    message: str
    player: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "player": self.player}


@dataclass
class MatchmakingResult:
    """Everything reporting needs about one round."""

    matches: List[Match]
    total_active_players: int
    unmatched_players: List[str]
    algorithm: str
    timestamp: str
    round_number: int
    tiers: List[SkillTier] = field(default_factory=list)
    warnings: List[MatchmakingWarning] = field(default_factory=list)

    @property
    def sit_out_player(self) -> Optional[str]:
        return self.unmatched_players[0] if self.unmatched_players else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matches": [m.to_dict() for m in self.matches],
            "total_active_players": self.total_active_players,
            "unmatched_players": list(self.unmatched_players),
            "algorithm": self.algorithm,
            "timestamp": self.timestamp,
            "round_number": self.round_number,
            "tiers": [t.to_dict() for t in self.tiers],
            "warnings": [w.to_dict() for w in self.warnings],
        }
