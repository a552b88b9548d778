"""
Tests to verify the matchmaking defaults match the documented tuning.
Ensures settings validation rejects inconsistent configurations.
"""

import os

import pytest

from matchmaking.config import (
    ASSUMED_MATCHES_PER_ROUND,
    DEFAULT_TIER_WIDTH,
    LOOKBACK_ROUNDS,
    MAX_TIER_SIZE,
    RECENT_MATCH_PENALTY,
    TIER_GAP_PENALTIES,
    TIER_NAIVE_RECENT_MATCH_PENALTY,
    TIER_NAIVE_STRATEGY,
    TIERED_STRATEGY,
    TOP_THRESHOLD,
    TOP_TIER_WIDTH,
    UPPER_MID_THRESHOLD,
    UPPER_MID_TIER_WIDTH,
    MatchmakingSettings,
    load_settings,
)
from matchmaking.exceptions import ConfigurationError


class TestConfigCompliance:
    """Test that default configuration values are correct"""

    def test_tier_widths(self):
        """Verify tier widths tighten from 3.0 to 2.5 to 2.0"""
        assert DEFAULT_TIER_WIDTH == 3.0
        assert UPPER_MID_TIER_WIDTH == 2.5
        assert TOP_TIER_WIDTH == 2.0
        assert TOP_TIER_WIDTH < UPPER_MID_TIER_WIDTH < DEFAULT_TIER_WIDTH

    def test_tier_thresholds(self):
        """Verify tier thresholds are 5 and 15"""
        assert UPPER_MID_THRESHOLD == 5
        assert TOP_THRESHOLD == 15

    def test_max_tier_size(self):
        """Verify MAX_TIER_SIZE is 6"""
        assert MAX_TIER_SIZE == 6

    def test_tier_gap_penalties(self):
        """Verify the tier gap penalty table"""
        assert TIER_GAP_PENALTIES == {1: 0.15, 2: 0.35, 3: 0.60}

    def test_recent_match_penalties(self):
        """Verify recency penalties for both strategies"""
        assert RECENT_MATCH_PENALTY == 0.1
        assert TIER_NAIVE_RECENT_MATCH_PENALTY == 0.2

    def test_history_window(self):
        """Verify the history keeps 3 rounds of ~15 matches"""
        assert LOOKBACK_ROUNDS == 3
        assert ASSUMED_MATCHES_PER_ROUND == 15
        assert MatchmakingSettings().history_window == 45


class TestSettingsValidation:
    """Test that inconsistent settings are rejected"""

    def test_defaults_are_valid(self):
        """Test the default settings use the tiered strategy"""
        settings = MatchmakingSettings()
        assert settings.strategy == TIERED_STRATEGY
        assert settings.tier_aware is True
        assert settings.active_recent_match_penalty == RECENT_MATCH_PENALTY

    def test_tier_naive_uses_larger_penalty(self):
        """Test the tier-naive strategy switches the recency penalty"""
        settings = MatchmakingSettings(strategy=TIER_NAIVE_STRATEGY)
        assert settings.tier_aware is False
        assert settings.active_recent_match_penalty == TIER_NAIVE_RECENT_MATCH_PENALTY

    @pytest.mark.parametrize("overrides", [
        {"strategy": "hungarian"},
        {"max_tier_size": 0},
        {"top_tier_width": 0.0},
        {"lookback_rounds": 0},
        {"top_threshold": 4.0},
    ])
    def test_invalid_settings_rejected(self, overrides):
        """Test invalid settings raise ConfigurationError"""
        with pytest.raises(ConfigurationError):
            MatchmakingSettings(**overrides)

    def test_with_overrides_ignores_none(self):
        """Test None overrides leave settings untouched"""
        settings = MatchmakingSettings()
        assert settings.with_overrides(strategy=None, data_dir=None) is settings
        assert settings.with_overrides(lookback_rounds=5).lookback_rounds == 5


class TestEnvironmentOverrides:
    """Test MATCHMAKING_* environment variables"""

    def test_env_overrides_applied(self, monkeypatch, tmp_path):
        """Test environment values override defaults"""
        monkeypatch.setenv("MATCHMAKING_MAX_TIER_SIZE", "4")
        monkeypatch.setenv("MATCHMAKING_STRATEGY", TIER_NAIVE_STRATEGY)
        monkeypatch.setenv("MATCHMAKING_ALLOW_UNRATED", "false")
        monkeypatch.setenv("MATCHMAKING_DATA_DIR", str(tmp_path))

        settings = load_settings(dotenv_path=str(tmp_path / "missing.env"))

        assert settings.max_tier_size == 4
        assert settings.strategy == TIER_NAIVE_STRATEGY
        assert settings.allow_unrated_players is False
        assert settings.data_dir == str(tmp_path)

    def test_dotenv_file_read(self, monkeypatch, tmp_path):
        """Test values are picked up from a .env file"""
        monkeypatch.delenv("MATCHMAKING_LOOKBACK_ROUNDS", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("MATCHMAKING_LOOKBACK_ROUNDS=5\n")

        try:
            settings = load_settings(dotenv_path=str(env_file))
        finally:
            os.environ.pop("MATCHMAKING_LOOKBACK_ROUNDS", None)

        assert settings.lookback_rounds == 5

    def test_malformed_env_value(self, monkeypatch, tmp_path):
        """Test a non-numeric override raises ConfigurationError"""
        monkeypatch.setenv("MATCHMAKING_MAX_TIER_SIZE", "six")
        with pytest.raises(ConfigurationError):
            load_settings(dotenv_path=str(tmp_path / "missing.env"))

    @pytest.mark.parametrize("value", ["ture", "maybe", "2"])
    def test_unrecognised_boolean_rejected(self, monkeypatch, tmp_path, value):
        """Test a misspelled boolean does not silently switch on strict mode"""
        monkeypatch.setenv("MATCHMAKING_ALLOW_UNRATED", value)
        with pytest.raises(ConfigurationError):
            load_settings(dotenv_path=str(tmp_path / "missing.env"))

    @pytest.mark.parametrize("value,expected", [("No", False), ("off", False), ("1", True), ("YES", True)])
    def test_boolean_spellings(self, monkeypatch, tmp_path, value, expected):
        """Test accepted true/false spellings"""
        monkeypatch.setenv("MATCHMAKING_ALLOW_UNRATED", value)
        settings = load_settings(dotenv_path=str(tmp_path / "missing.env"))
        assert settings.allow_unrated_players is expected
