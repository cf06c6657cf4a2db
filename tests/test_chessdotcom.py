import pytest
import requests

from trivia.chessdotcom import ChessComClient, normalize_profile, normalize_stats
from trivia.errors import ProfileNotFound, DataFetchFailed

from conftest import RAW_PROFILE, RAW_STATS


class FakeResponse:
    def __init__(self, status_code=200, payload=None, bad_json=False):
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


class FakeSession:
    def __init__(self, routes):
        self.routes = routes
        self.headers = {}
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        result = self.routes[url]
        if isinstance(result, Exception):
            raise result
        return result


BASE = "https://api.chess.com/pub/player"


def _session(profile=None, stats=None):
    return FakeSession({
        f"{BASE}/hikaru": profile or FakeResponse(payload=RAW_PROFILE),
        f"{BASE}/hikaru/stats": stats or FakeResponse(payload=RAW_STATS),
    })


def test_fetch_player():
    session = _session()
    profile, stats = ChessComClient(session=session).fetch_player("Hikaru")
    assert session.requested == [f"{BASE}/hikaru", f"{BASE}/hikaru/stats"]
    assert "User-Agent" in session.headers
    assert profile.username == "hikaru"
    assert profile.display_name == "Hikaru Nakamura"
    assert stats.formats["blitz"].current_rating == 3100


def test_display_name_override():
    profile, _ = ChessComClient(session=_session()).fetch_player("hikaru", "Hik")
    assert profile.display_name == "Hik"


def test_not_found():
    session = _session(profile=FakeResponse(status_code=404))
    with pytest.raises(ProfileNotFound):
        ChessComClient(session=session).fetch_player("hikaru")


def test_server_error_is_fetch_failure():
    session = _session(stats=FakeResponse(status_code=503))
    with pytest.raises(DataFetchFailed) as info:
        ChessComClient(session=session).fetch_player("hikaru")
    assert "503" in str(info.value)


def test_network_error_is_fetch_failure():
    session = _session(profile=requests.ConnectionError("boom"))
    with pytest.raises(DataFetchFailed):
        ChessComClient(session=session).fetch_player("hikaru")


def test_invalid_json_is_fetch_failure():
    session = _session(stats=FakeResponse(bad_json=True))
    with pytest.raises(DataFetchFailed):
        ChessComClient(session=session).fetch_player("hikaru")


def test_blank_username():
    with pytest.raises(ProfileNotFound):
        ChessComClient(session=FakeSession({})).fetch_player("  ")


def test_normalize_profile_fields():
    profile = normalize_profile(RAW_PROFILE)
    assert profile.country_code == "US"
    assert profile.followers == 1_234_567
    assert profile.joined_epoch_seconds == 1389043258
    assert profile.is_verified_streamer is True
    assert profile.title == "GM"
    assert profile.league == "Legend"


def test_normalize_profile_tolerates_missing_and_odd_fields():
    profile = normalize_profile({"username": "x", "followers": "many", "country": None,
                                 "is_streamer": "yes", "title": ""})
    assert profile.followers is None
    assert profile.country_code == ""
    assert profile.is_verified_streamer is None
    assert profile.title is None
    assert profile.display_name == "x"
    assert normalize_profile(None).username == ""


def test_normalize_stats_fields():
    stats = normalize_stats(RAW_STATS)
    assert set(stats.formats) == {"bullet", "blitz", "rapid"}
    bullet = stats.formats["bullet"]
    assert (bullet.current_rating, bullet.best_rating) == (3200, 3400)
    assert bullet.total_games == 26500
    assert (stats.tactics_highest, stats.tactics_lowest) == (3500, 1200)
    assert stats.puzzle_rush_best == 75
    assert stats.fide_rating == 2800


def test_normalize_stats_partial_record():
    stats = normalize_stats({"chess_daily": {"last": {"rating": 1500},
                                             "record": {"win": 10, "loss": 2}}})
    daily = stats.formats["daily"]
    assert daily.current_rating == 1500
    assert daily.best_rating is None
    assert not daily.has_record
    assert daily.total_games == 0
    assert normalize_stats("garbage").formats == {}


def test_non_finite_numbers_are_treated_as_missing():
    stats = normalize_stats({"fide": float("nan"),
                             "tactics": {"highest": {"rating": float("inf")}},
                             "chess_blitz": {"last": {"rating": float("-inf")},
                                             "best": {"rating": 2500.0}}})
    assert stats.fide_rating is None
    assert stats.tactics_highest is None
    assert stats.formats["blitz"].current_rating is None
    assert stats.formats["blitz"].best_rating == 2500
    assert normalize_profile({"username": "x", "joined": float("nan")}).joined_epoch_seconds is None
