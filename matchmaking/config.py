"""
Configuration for the duel matchmaking engine.
Adjust these values to tune tier assembly, pairing costs and history retention.
"""

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Optional, Tuple

from dotenv import load_dotenv

from matchmaking.exceptions import ConfigurationError

# ==============================
# Skill Tier Assembly
# ==============================
# Tier width is chosen from the ordinal of the player that opens the tier.
# Elite players are scarcer, so the band narrows as skill rises.
DEFAULT_TIER_WIDTH = 3.0      # Width below the upper-mid boundary
UPPER_MID_TIER_WIDTH = 2.5    # Width above UPPER_MID_THRESHOLD
TOP_TIER_WIDTH = 2.0          # Width above TOP_THRESHOLD
UPPER_MID_THRESHOLD = 5.0
TOP_THRESHOLD = 15.0

MAX_TIER_SIZE = 6             # Hard cap on players per tier

# Labels handed out from the strongest tier down
TIER_NAMES = (
    "Grandmaster",
    "Master",
    "Diamond",
    "Platinum",
    "Gold",
    "Silver",
    "Bronze",
)
OVERFLOW_TIER_LABEL = "Tier {number}"   # number is 1-based over all tiers

# ==============================
# Pairing Cost
# ==============================
# Penalty added for pairing across tiers, keyed by tier index gap
TIER_GAP_PENALTIES = {
    1: 0.15,    # Adjacent tiers, tolerated so thin pools still fill
    2: 0.35,
    3: 0.60,
}
# Gaps of 4+ escalate linearly: base + step * (gap - 4)
TIER_GAP_ESCALATION_BASE = 0.8
TIER_GAP_ESCALATION_STEP = 0.2

RECENT_MATCH_PENALTY = 0.1            # Tier-aware strategy
TIER_NAIVE_RECENT_MATCH_PENALTY = 0.2  # Tier-naive strategy

# Conservative seeding: mu - SEED_SIGMA_MULTIPLIER * sigma (99.7% lower bound)
SEED_SIGMA_MULTIPLIER = 3.0

# ==============================
# Match History
# ==============================
LOOKBACK_ROUNDS = 3
# Rounds are not tracked explicitly; the window keeps
# LOOKBACK_ROUNDS * ASSUMED_MATCHES_PER_ROUND pairings.
ASSUMED_MATCHES_PER_ROUND = 15

# ==============================
# Strategies
# ==============================
TIERED_STRATEGY = "tiered-greedy"
TIER_NAIVE_STRATEGY = "greedy-optimal"
STRATEGIES = (TIERED_STRATEGY, TIER_NAIVE_STRATEGY)
DEFAULT_STRATEGY = TIERED_STRATEGY

# ==============================
# OpenSkill Rating Model
# ==============================
# PlackettLuce parameters; the prior is the model default so a new player has ordinal 0
OS_MU = 25.0               # Default mean skill rating
OS_SIGMA = 25.0 / 3.0      # Default uncertainty
OS_BETA = 25.0 / 6.0       # Skill difference scaling factor
OS_TAU = 25.0 / 300.0      # Dynamics factor

# Assign the prior to players missing from the ratings file instead of failing
ALLOW_UNRATED_PLAYERS = True

# ==============================
# Data Files
# ==============================
DATA_DIR = "data"
RANKS_FILE = "ranks.json"
ACTIVE_PLAYERS_FILE = "active-players.json"
HISTORY_FILE = "recent-matches.json"
ROUND_STATE_FILE = "round-state.json"
MATCHES_FILE = "matches.json"


def _default_gap_penalties() -> Dict[int, float]:
    return dict(TIER_GAP_PENALTIES)


@dataclass(frozen=True)
class MatchmakingSettings:
    """Tunable knobs for a matchmaking round, seeded from the module constants."""

    default_tier_width: float = DEFAULT_TIER_WIDTH
    upper_mid_tier_width: float = UPPER_MID_TIER_WIDTH
    top_tier_width: float = TOP_TIER_WIDTH
    upper_mid_threshold: float = UPPER_MID_THRESHOLD
    top_threshold: float = TOP_THRESHOLD
    max_tier_size: int = MAX_TIER_SIZE
    tier_names: Tuple[str, ...] = TIER_NAMES
    tier_gap_penalties: Dict[int, float] = field(default_factory=_default_gap_penalties)
    tier_gap_escalation_base: float = TIER_GAP_ESCALATION_BASE
    tier_gap_escalation_step: float = TIER_GAP_ESCALATION_STEP
    recent_match_penalty: float = RECENT_MATCH_PENALTY
    tier_naive_recent_match_penalty: float = TIER_NAIVE_RECENT_MATCH_PENALTY
    lookback_rounds: int = LOOKBACK_ROUNDS
    matches_per_round: int = ASSUMED_MATCHES_PER_ROUND
    strategy: str = DEFAULT_STRATEGY
    allow_unrated_players: bool = ALLOW_UNRATED_PLAYERS
    data_dir: str = DATA_DIR

    def __post_init__(self):
        if min(self.default_tier_width, self.upper_mid_tier_width, self.top_tier_width) <= 0:
            raise ConfigurationError("Tier widths must be positive")
        if self.top_threshold <= self.upper_mid_threshold:
            raise ConfigurationError("Top tier threshold must be above the upper-mid threshold")
        if self.max_tier_size < 1:
            raise ConfigurationError("Max tier size must be at least 1")
        if self.lookback_rounds < 1 or self.matches_per_round < 1:
            raise ConfigurationError("History window must hold at least one pairing")
        if self.strategy not in STRATEGIES:
            raise ConfigurationError(
                f"Unknown strategy '{self.strategy}' (expected one of {', '.join(STRATEGIES)})"
            )

    @property
    def tier_aware(self) -> bool:
        return self.strategy == TIERED_STRATEGY

    @property
    def history_window(self) -> int:
        """Number of pairings the history store retains."""
        return self.lookback_rounds * self.matches_per_round

    @property
    def active_recent_match_penalty(self) -> float:
        if self.tier_aware:
            return self.recent_match_penalty
        return self.tier_naive_recent_match_penalty

    def with_overrides(self, **overrides) -> "MatchmakingSettings":
        """Copy with the given fields replaced; None values are ignored."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name, "").strip()
    return float(value) if value else default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name, "").strip()
    return int(value) if value else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name, "").strip().lower()
    if not value:
        return default
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be true or false, got '{value}'")


def load_settings(dotenv_path: Optional[str] = None) -> MatchmakingSettings:
    """Build settings from the defaults above, allowing MATCHMAKING_* environment overrides."""
    load_dotenv(dotenv_path)

    try:
        return MatchmakingSettings(
            default_tier_width=_env_float("MATCHMAKING_DEFAULT_TIER_WIDTH", DEFAULT_TIER_WIDTH),
            upper_mid_tier_width=_env_float("MATCHMAKING_UPPER_MID_TIER_WIDTH", UPPER_MID_TIER_WIDTH),
            top_tier_width=_env_float("MATCHMAKING_TOP_TIER_WIDTH", TOP_TIER_WIDTH),
            max_tier_size=_env_int("MATCHMAKING_MAX_TIER_SIZE", MAX_TIER_SIZE),
            recent_match_penalty=_env_float("MATCHMAKING_RECENT_MATCH_PENALTY", RECENT_MATCH_PENALTY),
            lookback_rounds=_env_int("MATCHMAKING_LOOKBACK_ROUNDS", LOOKBACK_ROUNDS),
            strategy=os.getenv("MATCHMAKING_STRATEGY", DEFAULT_STRATEGY).strip() or DEFAULT_STRATEGY,
            allow_unrated_players=_env_bool("MATCHMAKING_ALLOW_UNRATED", ALLOW_UNRATED_PLAYERS),
            data_dir=os.getenv("MATCHMAKING_DATA_DIR", DATA_DIR).strip() or DATA_DIR,
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid matchmaking environment setting: {e}") from e
