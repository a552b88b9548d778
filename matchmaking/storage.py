"""
JSON persistence for matchmaking inputs and carried state.

Missing or corrupt carried state (history, round state) never fails a round:
it is replaced by empty state and reported as a warning.
"""

import json
import logging
import os
from typing import Any, List, Optional, Tuple

from matchmaking.config import MatchmakingSettings
from matchmaking.exceptions import InputError, StateCorruptionError
from matchmaking.history import MatchHistory
from matchmaking.models import (
    HISTORY_RESET,
    STATE_RESET,
    MatchmakingResult,
    MatchmakingWarning,
    RoundState,
)
from matchmaking.rating import MODEL, OpenSkillRating

logger = logging.getLogger(__name__)


def data_path(settings: MatchmakingSettings, filename: str) -> str:
    return os.path.join(settings.data_dir, filename)


def _read_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _write_json(path: str, data: Any):
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


# ==============================
# Round inputs
# ==============================

def load_ratings(path: str, model=MODEL) -> OpenSkillRating:
    """Load the leaderboard ratings produced by the rating pipeline."""
    if not os.path.exists(path):
        raise InputError(f"Ratings file not found: {path}")
    try:
        data = _read_json(path)
    except (OSError, json.JSONDecodeError) as e:
        raise InputError(f"Failed to load ratings from {path}: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("players", []), list):
        raise InputError(f"Ratings file {path} must contain an object with a 'players' list")
    return OpenSkillRating.from_ranks(data, model=model)


def load_active_players(path: str) -> List[str]:
    """Load the list of player names taking part in this round."""
    if not os.path.exists(path):
        raise InputError(f"Active players file not found: {path}")
    try:
        data = _read_json(path)
    except (OSError, json.JSONDecodeError) as e:
        raise InputError(f"Failed to load active players from {path}: {e}") from e
    if not isinstance(data, list) or not all(isinstance(p, str) for p in data):
        raise InputError(f"Active players file {path} must contain a list of names")
    return data


# ==============================
# Carried state
# ==============================

def load_match_history(path: str, settings: Optional[MatchmakingSettings] = None
                       ) -> Tuple[MatchHistory, List[MatchmakingWarning]]:
    """Load recent pairings; a missing or unreadable file yields an empty history."""
    settings = settings or MatchmakingSettings()
    empty = MatchHistory.empty(settings.lookback_rounds, settings.matches_per_round)

    if not os.path.exists(path):
        logger.info("No existing match history found, starting fresh")
        return empty, []

    try:
        history = MatchHistory.from_dict(
            _read_json(path),
            lookback_rounds=settings.lookback_rounds,
            matches_per_round=settings.matches_per_round,
        )
    except (OSError, json.JSONDecodeError, StateCorruptionError) as e:
        message = f"Match history at {path} is unreadable ({e}); starting fresh"
        logger.warning(message)
        return empty, [MatchmakingWarning(HISTORY_RESET, message)]

    logger.info("Loaded %d recent pairings", len(history))
    return history, []


def save_match_history(path: str, history: MatchHistory):
    _write_json(path, history.to_dict())


def load_round_state(path: str) -> Tuple[RoundState, List[MatchmakingWarning]]:
    """Load the previous round's carry-over; a missing or unreadable file yields a fresh state."""
    if not os.path.exists(path):
        return RoundState(), []

    try:
        return RoundState.from_dict(_read_json(path)), []
    except (OSError, json.JSONDecodeError, StateCorruptionError) as e:
        message = f"Round state at {path} is unreadable ({e}); starting fresh"
        logger.warning(message)
        return RoundState(), [MatchmakingWarning(STATE_RESET, message)]


def save_round_state(path: str, state: RoundState):
    _write_json(path, state.to_dict())


# ==============================
# Round output
# ==============================

def save_matchmaking(path: str, result: MatchmakingResult):
    _write_json(path, result.to_dict())
