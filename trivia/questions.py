"""
Chess Stream Trivia - Question Builder
Turns a player's profile and stats into a shuffled set of multiple-choice
questions. Every rule is guarded: a missing field skips the rule.
"""

import random
from dataclasses import replace
from datetime import datetime, timezone

from trivia.config import (
    ROUND_SIZE, MIN_QUESTIONS, NUM_ANSWER_OPTIONS, FORMATS,
    MIN_GAMES_FOR_RATE, MIN_LOSSES_FOR_QUESTION, MIN_DRAWS_FOR_QUESTION,
    MIN_PEAK_GAP, MIN_FORMAT_GAP, MIN_TACTICS_SPREAD, FIRST_JOIN_YEAR,
    TITLES, LEAGUES, COUNTRY_NAMES,
)
from trivia.distractors import (
    numeric_distractors, formatted_distractors, spread_distractors,
    pick_from_pool, shuffle_with_correct, format_count,
)
from trivia.errors import InsufficientData
from trivia.models import Question, ProfileRecord, StatRecord, FormatRecord


WRONG_COUNT = NUM_ANSWER_OPTIONS - 1

# Offsets for percentage distractors, per format
WIN_RATE_OFFSETS = {
    "bullet": (-10, 8, -18),
    "blitz": (-8, 7, -15),
}
DEFAULT_WIN_RATE_OFFSETS = (-9, 6, -14)
DRAW_RATE_OFFSETS = (5, -3, 10)


def country_name(code: str) -> str:
    """Full country name for a 2-letter code, or the upper-cased code itself."""
    code = (code or "").strip().upper()
    return COUNTRY_NAMES.get(code, code)


def _percent(part: int, total: int) -> int:
    return int(round(part / total * 100))


class QuestionBuilder:
    def __init__(self, rng: random.Random | None = None,
                 now: datetime | None = None, round_size: int = ROUND_SIZE):
        self._rng = rng or random.Random()
        self._now = now
        self.round_size = round_size

    # ------------------------------------------
    # PUBLIC
    # ------------------------------------------
    def build(self, profile: ProfileRecord, stats: StatRecord | None,
              display_name: str | None = None) -> list[Question]:
        stats = stats or StatRecord()
        name = display_name or profile.display_name or profile.username

        candidates = []
        for fmt in FORMATS:
            record = stats.format(fmt)
            if record is None:
                continue
            for rule in self._format_rules():
                question = rule(fmt, record, name)
                if question:
                    candidates.append(question)

        for rule in self._profile_rules():
            question = rule(profile, stats, name)
            if question:
                candidates.append(question)

        self._rng.shuffle(candidates)
        chosen = candidates[:self.round_size]
        return [replace(q, id=i) for i, q in enumerate(chosen, start=1)]

    def build_round(self, profile: ProfileRecord, stats: StatRecord | None,
                    display_name: str | None = None) -> list[Question]:
        questions = self.build(profile, stats, display_name)
        if len(questions) < MIN_QUESTIONS:
            raise InsufficientData(profile.username, len(questions))
        print(f"[Questions] Built {len(questions)} questions for {profile.username}")
        return questions

    def _format_rules(self):
        return [
            self._peak_rating, self._current_rating, self._total_games,
            self._wins, self._losses, self._draws,
            self._win_rate, self._draw_rate, self._peak_gap,
        ]

    def _profile_rules(self):
        return [
            self._tactics_highest, self._tactics_lowest, self._puzzle_rush,
            self._fide, self._followers, self._join_year, self._time_active,
            self._country, self._title, self._league, self._streamer,
            self._format_gap, self._highest_format, self._combined_wins,
        ]

    # ------------------------------------------
    # QUESTION CONSTRUCTION
    # ------------------------------------------
    def _make(self, prompt: str, correct: str, wrongs, category: str) -> Question:
        options, correct_index = shuffle_with_correct(correct, wrongs, self._rng)
        return Question(
            id=0, prompt=prompt, options=tuple(options),
            correct_index=correct_index, category=category,
        )

    def _rating_question(self, prompt, correct, category):
        wrongs = numeric_distractors(correct, WRONG_COUNT, rng=self._rng)
        return self._make(prompt, str(correct), [str(w) for w in wrongs], category)

    def _count_question(self, prompt, correct, category):
        wrongs = formatted_distractors(correct, format_count, WRONG_COUNT, self._rng)
        return self._make(prompt, format_count(correct), wrongs, category)

    def _spread_question(self, prompt, correct, offsets, category,
                         low=None, high=None, step=1, suffix=""):
        wrongs = spread_distractors(correct, offsets, WRONG_COUNT, low, high, step)
        return self._make(
            prompt, f"{correct}{suffix}", [f"{w}{suffix}" for w in wrongs], category,
        )

    def _pool_question(self, prompt, correct, pool, category):
        wrongs = pick_from_pool(correct, pool, WRONG_COUNT, self._rng)
        return self._make(prompt, correct, wrongs, category)

    # ------------------------------------------
    # PER-FORMAT RULES
    # ------------------------------------------
    def _peak_rating(self, fmt: str, rec: FormatRecord, name: str):
        if not rec.best_rating:
            return None
        return self._rating_question(
            f"What is {name}'s highest {fmt} rating ever?", rec.best_rating, "Ratings",
        )

    def _current_rating(self, fmt, rec, name):
        if not rec.current_rating:
            return None
        return self._rating_question(
            f"What is {name}'s current {fmt} rating?", rec.current_rating, "Ratings",
        )

    def _total_games(self, fmt, rec, name):
        if rec.total_games <= 0:
            return None
        return self._count_question(
            f"How many {fmt} games has {name} played in total?",
            rec.total_games, "Games",
        )

    def _wins(self, fmt, rec, name):
        if not rec.wins or rec.wins <= 0:
            return None
        return self._count_question(
            f"How many {fmt} games has {name} won?", rec.wins, "Games",
        )

    def _losses(self, fmt, rec, name):
        if rec.losses is None or rec.losses <= MIN_LOSSES_FOR_QUESTION:
            return None
        return self._count_question(
            f"How many {fmt} games has {name} LOST?", rec.losses, "Games",
        )

    def _draws(self, fmt, rec, name):
        if rec.draws is None or rec.draws <= MIN_DRAWS_FOR_QUESTION:
            return None
        return self._count_question(
            f"How many {fmt} games has {name} drawn?", rec.draws, "Games",
        )

    def _win_rate(self, fmt, rec, name):
        total = rec.total_games
        if total <= MIN_GAMES_FOR_RATE:
            return None
        rate = _percent(rec.wins, total)
        offsets = WIN_RATE_OFFSETS.get(fmt, DEFAULT_WIN_RATE_OFFSETS)
        return self._spread_question(
            f"What is {name}'s {fmt} win rate?", rate, offsets, "Percentages",
            low=1, high=100, step=10, suffix="%",
        )

    def _draw_rate(self, fmt, rec, name):
        total = rec.total_games
        if total <= MIN_GAMES_FOR_RATE or not rec.draws:
            return None
        rate = _percent(rec.draws, total)
        return self._spread_question(
            f"What percentage of {name}'s {fmt} games end in a draw?",
            rate, DRAW_RATE_OFFSETS, "Percentages",
            low=0, high=100, step=10, suffix="%",
        )

    def _peak_gap(self, fmt, rec, name):
        if not rec.best_rating or not rec.current_rating:
            return None
        gap = rec.best_rating - rec.current_rating
        if gap <= MIN_PEAK_GAP:
            return None
        return self._spread_question(
            f"How many rating points below their peak is {name}'s current {fmt} rating?",
            gap, (25, -30, 50), "Comparisons", low=1, step=20,
        )

    # ------------------------------------------
    # PROFILE & OTHER STATS RULES
    # ------------------------------------------
    def _tactics_highest(self, profile, stats, name):
        if not stats.tactics_highest:
            return None
        return self._rating_question(
            f"What is {name}'s highest tactics rating?", stats.tactics_highest, "Puzzles",
        )

    def _tactics_lowest(self, profile, stats, name):
        if not stats.tactics_lowest or not stats.tactics_highest:
            return None
        if stats.tactics_highest - stats.tactics_lowest <= MIN_TACTICS_SPREAD:
            return None
        return self._rating_question(
            f"What was {name}'s LOWEST tactics rating ever?", stats.tactics_lowest, "Puzzles",
        )

    def _puzzle_rush(self, profile, stats, name):
        if not stats.puzzle_rush_best or stats.puzzle_rush_best <= 0:
            return None
        wrongs = numeric_distractors(stats.puzzle_rush_best, WRONG_COUNT,
                                     variance=max(stats.puzzle_rush_best // 3, 5),
                                     rng=self._rng)
        return self._make(
            f"What is {name}'s best Puzzle Rush score?",
            str(stats.puzzle_rush_best), [str(w) for w in wrongs], "Puzzles",
        )

    def _fide(self, profile, stats, name):
        if not stats.fide_rating or stats.fide_rating <= 0:
            return None
        return self._rating_question(
            f"What is {name}'s FIDE rating?", stats.fide_rating, "Ratings",
        )

    def _followers(self, profile, stats, name):
        if not profile.followers or profile.followers <= 0:
            return None
        return self._count_question(
            f"How many followers does {name} have on Chess.com?",
            profile.followers, "Profile",
        )

    def _joined(self, profile):
        if not profile.joined_epoch_seconds:
            return None
        try:
            return datetime.fromtimestamp(profile.joined_epoch_seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    def _today(self):
        return self._now or datetime.now(timezone.utc)

    def _join_year(self, profile, stats, name):
        joined = self._joined(profile)
        if joined is None:
            return None
        return self._spread_question(
            f"What year did {name} join Chess.com?", joined.year, (-1, 1, -2),
            "Profile", low=FIRST_JOIN_YEAR, high=max(self._today().year, joined.year),
        )

    def _time_active(self, profile, stats, name):
        joined = self._joined(profile)
        if joined is None:
            return None
        today = self._today()
        months = (today.year - joined.year) * 12 + today.month - joined.month
        if today.day < joined.day:
            months -= 1
        years = months // 12
        if years >= 2:
            return self._spread_question(
                f"For how many full years has {name} been on Chess.com?",
                years, (-1, 1, 2), "Profile", low=1,
            )
        if months >= 1:
            return self._spread_question(
                f"For how many full months has {name} been on Chess.com?",
                months, (-3, 3, 6), "Profile", low=1,
            )
        return None

    def _country(self, profile, stats, name):
        if not profile.country_code:
            return None
        return self._pool_question(
            f"What country is {name} from?", country_name(profile.country_code),
            COUNTRY_NAMES.values(), "Profile",
        )

    def _title(self, profile, stats, name):
        if not profile.title:
            return None
        return self._pool_question(
            f"What title does {name} hold?", profile.title, TITLES, "Profile",
        )

    def _league(self, profile, stats, name):
        if not profile.league:
            return None
        return self._pool_question(
            f"What Chess.com league is {name} in?", profile.league, LEAGUES, "Profile",
        )

    def _streamer(self, profile, stats, name):
        if profile.is_verified_streamer is None:
            return None
        correct = "Yes" if profile.is_verified_streamer else "No"
        wrong = "No" if profile.is_verified_streamer else "Yes"
        return self._make(
            f"Is {name} a verified Chess.com streamer?", correct, [wrong], "Profile",
        )

    # ------------------------------------------
    # CROSS-FORMAT RULES
    # ------------------------------------------
    def _current_ratings(self, stats):
        ratings = {}
        for fmt in FORMATS:
            rec = stats.format(fmt)
            if rec and rec.current_rating:
                ratings[fmt] = rec.current_rating
        return ratings

    def _format_gap(self, profile, stats, name):
        ratings = self._current_ratings(stats)
        if "blitz" not in ratings or "bullet" not in ratings:
            return None
        gap = ratings["blitz"] - ratings["bullet"]
        if abs(gap) <= MIN_FORMAT_GAP:
            return None
        higher, lower = ("blitz", "bullet") if gap > 0 else ("bullet", "blitz")
        return self._spread_question(
            f"How many points higher is {name}'s {higher} rating than their {lower} rating?",
            abs(gap), (25, -25, 50), "Comparisons", low=1, step=20,
        )

    def _highest_format(self, profile, stats, name):
        ratings = self._current_ratings(stats)
        if len(ratings) < 2:
            return None
        top = max(ratings.values())
        leaders = [fmt for fmt, rating in ratings.items() if rating == top]
        if len(leaders) != 1:
            return None
        names = [fmt.capitalize() for fmt in ratings]
        return self._pool_question(
            f"In which time control does {name} have the highest rating?",
            leaders[0].capitalize(), names, "Comparisons",
        )

    def _combined_wins(self, profile, stats, name):
        winners = []
        for fmt in FORMATS:
            rec = stats.format(fmt)
            if rec and rec.wins and rec.wins > 0:
                winners.append((fmt, rec.wins))
        if len(winners) < 2:
            return None
        fmts = [fmt for fmt, _ in winners]
        label = ", ".join(fmts[:-1]) + f" and {fmts[-1]}"
        return self._count_question(
            f"How many {label} games has {name} won combined?",
            sum(wins for _, wins in winners), "Games",
        )


def build_questions(profile: ProfileRecord, stats: StatRecord | None,
                    display_name: str | None = None,
                    rng: random.Random | None = None) -> list[Question]:
    return QuestionBuilder(rng=rng).build(profile, stats, display_name)
