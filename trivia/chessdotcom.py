"""
Chess Stream Trivia - Chess.com Client
Fetches a player's public profile and stats and normalizes them into
ProfileRecord / StatRecord. No retries: a failed fetch ends the setup.
"""

import math

import requests

from trivia.config import (
    CHESSCOM_API_URL, CHESSCOM_TIMEOUT, CHESSCOM_USER_AGENT, FORMATS,
)
from trivia.errors import ProfileNotFound, DataFetchFailed
from trivia.models import ProfileRecord, StatRecord, FormatRecord


def _int_or_none(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    return None


def _nested(data, *keys):
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _normalize_format(raw) -> FormatRecord | None:
    if not isinstance(raw, dict):
        return None
    record = raw.get("record") if isinstance(raw.get("record"), dict) else {}
    return FormatRecord(
        current_rating=_int_or_none(_nested(raw, "last", "rating")),
        best_rating=_int_or_none(_nested(raw, "best", "rating")),
        wins=_int_or_none(record.get("win")),
        losses=_int_or_none(record.get("loss")),
        draws=_int_or_none(record.get("draw")),
    )


def normalize_stats(raw) -> StatRecord:
    if not isinstance(raw, dict):
        return StatRecord()
    formats = {}
    for fmt in FORMATS:
        rec = _normalize_format(raw.get(f"chess_{fmt}"))
        if rec is not None:
            formats[fmt] = rec
    return StatRecord(
        formats=formats,
        tactics_highest=_int_or_none(_nested(raw, "tactics", "highest", "rating")),
        tactics_lowest=_int_or_none(_nested(raw, "tactics", "lowest", "rating")),
        puzzle_rush_best=_int_or_none(_nested(raw, "puzzle_rush", "best", "score")),
        fide_rating=_int_or_none(raw.get("fide")),
    )


def _country_code(country_url) -> str:
    # "https://api.chess.com/pub/country/US" -> "US"
    if not isinstance(country_url, str) or not country_url.strip():
        return ""
    return country_url.rstrip("/").split("/")[-1].upper()


def _league_name(league):
    if isinstance(league, str) and league:
        return league
    if isinstance(league, dict) and isinstance(league.get("name"), str):
        return league["name"]
    return None


def normalize_profile(raw, display_name: str | None = None) -> ProfileRecord:
    raw = raw if isinstance(raw, dict) else {}
    username = raw.get("username") or ""
    streamer = raw.get("is_streamer")
    title = raw.get("title")
    return ProfileRecord(
        username=username,
        display_name=display_name or raw.get("name") or username,
        followers=_int_or_none(raw.get("followers")),
        country_code=_country_code(raw.get("country")),
        joined_epoch_seconds=_int_or_none(raw.get("joined")),
        is_verified_streamer=streamer if isinstance(streamer, bool) else None,
        title=title if isinstance(title, str) and title else None,
        league=_league_name(raw.get("league")),
    )


class ChessComClient:
    def __init__(self, session: requests.Session | None = None,
                 base_url: str = CHESSCOM_API_URL, timeout: float = CHESSCOM_TIMEOUT):
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": CHESSCOM_USER_AGENT})
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    def fetch_player(self, username: str, display_name: str | None = None):
        """Returns (ProfileRecord, StatRecord) for `username`."""
        username = (username or "").strip().lower()
        if not username:
            raise ProfileNotFound(username)
        profile_raw = self._get_json(username, f"{self._base_url}/{username}")
        stats_raw = self._get_json(username, f"{self._base_url}/{username}/stats")
        profile = normalize_profile(profile_raw, display_name)
        if not profile.username:
            profile.username = username
        print(f"[ChessCom] Loaded profile and stats for {username}")
        return profile, normalize_stats(stats_raw)

    def _get_json(self, username: str, url: str):
        try:
            resp = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            print(f"[ChessCom] Request error for {url}: {e}")
            raise DataFetchFailed(username, str(e)) from e

        if resp.status_code == 404:
            raise ProfileNotFound(username)
        if resp.status_code != 200:
            print(f"[ChessCom] HTTP {resp.status_code} for {url}")
            raise DataFetchFailed(username, f"HTTP {resp.status_code}")
        try:
            return resp.json()
        except ValueError as e:
            raise DataFetchFailed(username, "invalid JSON") from e
