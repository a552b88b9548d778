"""
Rolling window of recent pairings.

The window holds lookback_rounds * matches_per_round entries, newest first.
Round boundaries are not tracked, so this only approximates "the last N
rounds" when rounds are roughly matches_per_round pairings in size.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from matchmaking.config import ASSUMED_MATCHES_PER_ROUND, LOOKBACK_ROUNDS
from matchmaking.exceptions import StateCorruptionError
from matchmaking.models import HistoricalPairing, Match

logger = logging.getLogger(__name__)


class MatchHistory:
    """Recent-opponent history carried across rounds."""

    def __init__(self, pairings: Iterable[HistoricalPairing] = (),
                 lookback_rounds: int = LOOKBACK_ROUNDS,
                 matches_per_round: int = ASSUMED_MATCHES_PER_ROUND):
        self.lookback_rounds = lookback_rounds
        self.matches_per_round = matches_per_round
        self.pairings: Tuple[HistoricalPairing, ...] = tuple(pairings)[:self.max_entries]

    @property
    def max_entries(self) -> int:
        return self.lookback_rounds * self.matches_per_round

    def __len__(self) -> int:
        return len(self.pairings)

    def __iter__(self):
        return iter(self.pairings)

    def has_recent_match(self, player_a: str, player_b: str) -> bool:
        """True if the two players met anywhere in the retained window."""
        return any(p.involves(player_a, player_b) for p in self.pairings)

    def record_round(self, matches: Iterable[Match], timestamp: Optional[str] = None,
                     round_number: Optional[int] = None) -> "MatchHistory":
        """Return a new history with this round's pairings prepended and the window truncated."""
        timestamp = timestamp or datetime.now(timezone.utc).isoformat()
        new_pairings = [
            HistoricalPairing(m.player1, m.player2, timestamp, round_number)
            for m in matches
        ]
        updated = MatchHistory(
            new_pairings + list(self.pairings),
            lookback_rounds=self.lookback_rounds,
            matches_per_round=self.matches_per_round,
        )
        evicted = len(new_pairings) + len(self.pairings) - len(updated)
        if evicted:
            logger.debug("Evicted %d pairings beyond the %d-entry window", evicted, self.max_entries)
        return updated

    def to_dict(self) -> Dict[str, Any]:
        return {
            "matches": [p.to_dict() for p in self.pairings],
            "lookback_rounds": self.lookback_rounds,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any],
                  lookback_rounds: Optional[int] = None,
                  matches_per_round: int = ASSUMED_MATCHES_PER_ROUND) -> "MatchHistory":
        """
        Parse a persisted history document, raising StateCorruptionError if malformed.
        An explicit lookback_rounds takes precedence over the stored one.
        """
        if not isinstance(data, dict):
            raise StateCorruptionError(f"History must be an object, got {type(data).__name__}")

        entries = data.get("matches", [])
        if not isinstance(entries, list):
            raise StateCorruptionError("History 'matches' must be a list")

        try:
            stored_lookback = int(data.get("lookback_rounds", LOOKBACK_ROUNDS))
        except (TypeError, ValueError) as e:
            raise StateCorruptionError(f"Invalid lookback_rounds: {e}") from e
        if stored_lookback < 1:
            raise StateCorruptionError(f"Invalid lookback_rounds: {stored_lookback}")
        lookback_rounds = lookback_rounds or stored_lookback

        pairings: List[HistoricalPairing] = [HistoricalPairing.from_dict(e) for e in entries]
        return cls(pairings, lookback_rounds=lookback_rounds, matches_per_round=matches_per_round)

    @classmethod
    def empty(cls, lookback_rounds: int = LOOKBACK_ROUNDS,
              matches_per_round: int = ASSUMED_MATCHES_PER_ROUND) -> "MatchHistory":
        return cls((), lookback_rounds=lookback_rounds, matches_per_round=matches_per_round)
