"""Exceptions raised by the matchmaking engine."""


class MatchmakingError(Exception):
    """Base exception for all matchmaking errors."""


class ConfigurationError(MatchmakingError):
    """Raised when matchmaking settings are inconsistent."""


# ========== Input Errors ==========


class InputError(MatchmakingError):
    """Raised when the round's input cannot be paired."""


class UnknownPlayerError(InputError):
    """Raised when an active player has no rating and defaults are disabled."""

    def __init__(self, player: str):
        super().__init__(f"No rating found for active player '{player}'")
        self.player = player


class DuplicatePlayerError(InputError):
    """Raised when the active roster lists the same player more than once."""

    def __init__(self, players):
        self.players = sorted(players)
        super().__init__(f"Duplicate players in active roster: {', '.join(self.players)}")


# ========== Carried State ==========


class StateCorruptionError(MatchmakingError):
    """Raised when persisted history or round state cannot be parsed."""
