import random
from datetime import datetime, timezone

import pytest

from trivia.chessdotcom import normalize_profile, normalize_stats
from trivia.models import Question, RoundSettings


RAW_PROFILE = {
    "username": "hikaru",
    "name": "Hikaru Nakamura",
    "followers": 1_234_567,
    "country": "https://api.chess.com/pub/country/US",
    "joined": 1389043258,  # 2014-01-06
    "is_streamer": True,
    "title": "GM",
    "league": "Legend",
}

RAW_STATS = {
    "chess_bullet": {
        "last": {"rating": 3200},
        "best": {"rating": 3400},
        "record": {"win": 20000, "loss": 5000, "draw": 1500},
    },
    "chess_blitz": {
        "last": {"rating": 3100},
        "best": {"rating": 3300},
        "record": {"win": 40000, "loss": 9000, "draw": 4000},
    },
    "chess_rapid": {
        "last": {"rating": 2900},
        "best": {"rating": 2950},
        "record": {"win": 300, "loss": 40, "draw": 10},
    },
    "tactics": {"highest": {"rating": 3500}, "lowest": {"rating": 1200}},
    "puzzle_rush": {"best": {"score": 75}},
    "fide": 2800,
}


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def today():
    return datetime(2026, 10, 19, tzinfo=timezone.utc)


@pytest.fixture
def profile():
    return normalize_profile(RAW_PROFILE)


@pytest.fixture
def stats():
    return normalize_stats(RAW_STATS)


@pytest.fixture
def settings():
    """Numbers from the worked scoring examples; no countdown."""
    return RoundSettings(
        countdown_seconds=0, preview_seconds=5, open_seconds=15, reveal_seconds=10,
        base_max_points=500, points_increment=100, min_points=100,
        streak_bonus=100, streak_min_length=2,
    )


@pytest.fixture
def questions():
    return [
        Question(id=1, prompt="Q1?", options=("a1", "b1", "c1", "d1"), correct_index=0),
        Question(id=2, prompt="Q2?", options=("a2", "b2", "c2", "d2"), correct_index=2),
        Question(id=3, prompt="Q3?", options=("Yes", "No"), correct_index=1),
    ]
