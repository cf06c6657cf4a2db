"""
Chess Stream Trivia - Data Models
Enums, dataclasses, and core data structures.
"""

from enum import Enum, auto
from dataclasses import dataclass, field

from trivia.config import (
    ROUND_SIZE, COUNTDOWN_SECONDS, PREVIEW_SECONDS, OPEN_SECONDS,
    REVEAL_SECONDS, BASE_MAX_POINTS, POINTS_INCREMENT_PER_QUESTION,
    MIN_POINTS, STREAK_BONUS, STREAK_MIN_LENGTH,
)


class Phase(Enum):
    IDLE = auto()
    COUNTDOWN = auto()
    PREVIEW = auto()
    OPEN = auto()
    REVEAL = auto()
    FINISHED = auto()


@dataclass(frozen=True)
class Question:
    id: int
    prompt: str
    options: tuple  # 2-4 unique strings
    correct_index: int  # 0-based index of the correct answer in options
    category: str = ""

    @property
    def correct_answer(self) -> str:
        return self.options[self.correct_index]


@dataclass
class ScoreEntry:
    participant_id: str
    score: int = 0
    streak: int = 0
    best_streak: int = 0
    correct_answers: int = 0

    def record_correct(self, points: int):
        self.score += points
        self.streak += 1
        self.correct_answers += 1
        if self.streak > self.best_streak:
            self.best_streak = self.streak

    def record_wrong(self):
        self.streak = 0


@dataclass(frozen=True)
class RoundSettings:
    """Startup constants for one round; never changed while it runs."""
    round_size: int = ROUND_SIZE
    countdown_seconds: float = COUNTDOWN_SECONDS
    preview_seconds: float = PREVIEW_SECONDS
    open_seconds: float = OPEN_SECONDS
    reveal_seconds: float = REVEAL_SECONDS
    base_max_points: int = BASE_MAX_POINTS
    points_increment: int = POINTS_INCREMENT_PER_QUESTION
    min_points: int = MIN_POINTS
    streak_bonus: int = STREAK_BONUS
    streak_min_length: int = STREAK_MIN_LENGTH

    def max_points_for(self, question_index: int) -> int:
        return self.base_max_points + question_index * self.points_increment


@dataclass(frozen=True)
class RoundState:
    phase: Phase = Phase.IDLE
    question_index: int = 0
    question_count: int = 0
    phase_deadline: float | None = None
    open_started_at: float | None = None

    @property
    def is_last_question(self) -> bool:
        return self.question_index >= self.question_count - 1


@dataclass(frozen=True)
class RoundSnapshot:
    """Read-only view of a round for the presentation layer."""
    phase: Phase
    question_number: int  # 1-based, 0 when no question is active
    total_questions: int
    prompt: str
    options: tuple  # empty during PREVIEW
    correct_index: int | None  # only set once the answer is revealed
    seconds_remaining: float
    leaderboard: list
    answered_count: int
    category: str = ""


@dataclass
class ChatMessage:
    participant_id: str
    message: str
    timestamp: float


@dataclass
class FormatRecord:
    current_rating: int | None = None
    best_rating: int | None = None
    wins: int | None = None
    losses: int | None = None
    draws: int | None = None

    @property
    def has_record(self) -> bool:
        return None not in (self.wins, self.losses, self.draws)

    @property
    def total_games(self) -> int:
        if not self.has_record:
            return 0
        return self.wins + self.losses + self.draws


@dataclass
class StatRecord:
    formats: dict = field(default_factory=dict)  # {format name: FormatRecord}
    tactics_highest: int | None = None
    tactics_lowest: int | None = None
    puzzle_rush_best: int | None = None
    fide_rating: int | None = None

    def format(self, name: str) -> FormatRecord | None:
        return self.formats.get(name)


@dataclass
class ProfileRecord:
    username: str
    display_name: str = ""
    followers: int | None = None
    country_code: str = ""
    joined_epoch_seconds: int | None = None
    is_verified_streamer: bool | None = None
    title: str | None = None
    league: str | None = None
