"""
Tests for the rolling match history window.
"""

import pytest

from matchmaking.exceptions import StateCorruptionError
from matchmaking.history import MatchHistory
from matchmaking.models import HistoricalPairing, Match


def _match(p1, p2):
    return Match(player1=p1, player2=p2, skill_difference=0.0, average_skill=0.0, confidence=1.0)


class TestRecentMatchLookup:
    """Test has_recent_match"""

    def test_empty_history(self):
        """Test an empty history reports no recent matches"""
        history = MatchHistory.empty()
        assert len(history) == 0
        assert history.has_recent_match("A", "B") is False

    def test_unordered_lookup(self):
        """Test lookup ignores player order"""
        history = MatchHistory.empty().record_round([_match("A", "B")])
        assert history.has_recent_match("A", "B") is True
        assert history.has_recent_match("B", "A") is True
        assert history.has_recent_match("A", "C") is False

    def test_whole_window_counts(self):
        """Test a pairing anywhere in the window counts, with no decay"""
        history = MatchHistory.empty().record_round([_match("A", "B")])
        for i in range(10):
            history = history.record_round([_match(f"x{i}", f"y{i}")])
        assert history.has_recent_match("A", "B") is True


class TestRecordRound:
    """Test record_round"""

    def test_newest_first(self):
        """Test new pairings are prepended with the round timestamp"""
        history = MatchHistory.empty().record_round([_match("A", "B")], timestamp="t1", round_number=1)
        history = history.record_round([_match("C", "D"), _match("E", "F")], timestamp="t2", round_number=2)

        entries = list(history)
        assert [(e.player1, e.player2) for e in entries] == [("C", "D"), ("E", "F"), ("A", "B")]
        assert entries[0].timestamp == "t2"
        assert entries[0].round_number == 2
        assert entries[2].timestamp == "t1"

    def test_returns_new_history(self):
        """Test recording leaves the original history untouched"""
        original = MatchHistory.empty()
        updated = original.record_round([_match("A", "B")])
        assert len(original) == 0
        assert len(updated) == 1

    def test_timestamp_defaults_to_now(self):
        """Test a missing timestamp is filled in"""
        history = MatchHistory.empty().record_round([_match("A", "B")])
        assert next(iter(history)).timestamp


class TestPruning:
    """Test eviction beyond lookback_rounds * 15 pairings"""

    def test_oldest_evicted(self):
        """Test pairings older than the window are forgotten"""
        history = MatchHistory.empty(lookback_rounds=3)
        history = history.record_round([_match("old1", "old2")])
        for i in range(45):
            history = history.record_round([_match(f"x{i}", f"y{i}")])

        assert len(history) == 45
        assert history.has_recent_match("old1", "old2") is False
        assert history.has_recent_match("x0", "y0") is True
        assert history.has_recent_match("x44", "y44") is True

    def test_window_is_entry_count_not_rounds(self):
        """
        The window approximates rounds by assuming 15 pairings per round.
        A single oversized round already pushes older rounds out, and small
        rounds are retained for more than lookback_rounds rounds.
        """
        history = MatchHistory.empty(lookback_rounds=1)
        history = history.record_round([_match("A", "B")])
        history = history.record_round([_match(f"x{i}", f"y{i}") for i in range(15)])
        assert history.has_recent_match("A", "B") is False

        history = MatchHistory.empty(lookback_rounds=1)
        history = history.record_round([_match("A", "B")])
        for i in range(5):
            history = history.record_round([_match(f"x{i}", f"y{i}")])
        assert history.has_recent_match("A", "B") is True

    def test_single_round_truncated(self):
        """Test one round larger than the window is itself truncated"""
        history = MatchHistory.empty(lookback_rounds=1).record_round(
            [_match(f"x{i}", f"y{i}") for i in range(20)]
        )
        assert len(history) == 15
        assert history.has_recent_match("x0", "y0") is True
        assert history.has_recent_match("x19", "y19") is False


class TestSerialization:
    """Test history documents"""

    def test_round_trip(self):
        """Test a saved history loads back identically"""
        history = MatchHistory.empty(lookback_rounds=2).record_round(
            [_match("A", "B")], timestamp="2025-01-01T00:00:00+00:00", round_number=4
        )
        restored = MatchHistory.from_dict(history.to_dict())
        assert restored.lookback_rounds == 2
        assert list(restored) == list(history)

    def test_missing_round_number_allowed(self):
        """Test entries without a round number load"""
        data = {"matches": [{"player1": "A", "player2": "B", "timestamp": "t"}], "lookback_rounds": 3}
        history = MatchHistory.from_dict(data)
        assert list(history) == [HistoricalPairing("A", "B", "t", None)]

    def test_lookback_override(self):
        """Test an explicit lookback takes precedence over the stored one"""
        data = {"matches": [], "lookback_rounds": 3}
        assert MatchHistory.from_dict(data, lookback_rounds=5).lookback_rounds == 5

    @pytest.mark.parametrize("data", [
        [],
        {"matches": "nope"},
        {"matches": [{"player1": "A"}]},
        {"matches": ["A vs B"]},
        {"matches": [], "lookback_rounds": "many"},
        {"matches": [], "lookback_rounds": 0},
    ])
    def test_malformed_documents(self, data):
        """Test malformed documents raise StateCorruptionError"""
        with pytest.raises(StateCorruptionError):
            MatchHistory.from_dict(data)
