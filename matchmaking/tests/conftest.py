"""
Pytest configuration and shared fixtures for matchmaking tests.
"""

import json
import math

import pytest

from matchmaking.models import PlayerRating
from matchmaking.rating import SkillRating


def make_rating(player, ordinal, uncertainty=1.0):
    """Rating whose conservative seed (mean - 3 sigma) equals its ordinal."""
    return PlayerRating(
        player=player,
        mean=ordinal + 3 * uncertainty,
        uncertainty=uncertainty,
        ordinal=ordinal,
    )


class FakeSkillRating(SkillRating):
    """Deterministic rating model: draw probability decays with the ordinal gap."""

    def __init__(self, ratings=(), scale=4.0):
        self.ratings = {r.player: r for r in ratings}
        self.scale = scale

    def rating_of(self, player):
        return self.ratings.get(player)

    def draw_probability(self, a, b):
        return math.exp(-abs(a.ordinal - b.ordinal) / self.scale)

    def default_rating(self, player):
        return PlayerRating(player=player, mean=25.0, uncertainty=25.0 / 3.0, ordinal=0.0)


@pytest.fixture
def four_player_roster():
    """Two strong and two weak players"""
    return [
        make_rating("A", 20.0),
        make_rating("B", 18.0),
        make_rating("C", 2.0),
        make_rating("D", 0.0),
    ]


@pytest.fixture
def data_dir(tmp_path):
    """Data directory holding a small ratings file and roster"""
    ranks = {
        "players": [
            {"player": "Alpha", "rating": {"mu": 32.0, "sigma": 3.0}, "ordinal": 23.0},
            {"player": "Bravo", "rating": {"mu": 30.0, "sigma": 3.5}, "ordinal": 19.5},
            {"player": "Charlie", "rating": {"mu": 24.0, "sigma": 4.0}, "ordinal": 12.0},
            {"player": "Delta", "rating": {"mu": 22.0, "sigma": 5.0}, "ordinal": 7.0},
            {"player": "Echo", "rating": {"mu": 20.0, "sigma": 6.5}, "ordinal": 0.5},
        ],
        "total_matches": 12,
        "timestamp": "2025-01-01T00:00:00+00:00",
    }
    (tmp_path / "ranks.json").write_text(json.dumps(ranks))
    (tmp_path / "active-players.json").write_text(
        json.dumps(["Alpha", "Bravo", "Charlie", "Delta", "Echo"])
    )
    return tmp_path
