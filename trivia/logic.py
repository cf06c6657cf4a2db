"""
Chess Stream Trivia - Round Logic
Deadline-driven state machine: COUNTDOWN -> (PREVIEW -> OPEN -> REVEAL) per
question -> FINISHED. Scoring happens as answers arrive during OPEN.
"""

import time
import threading
from dataclasses import replace

from trivia.config import LEADERBOARD_SIZE
from trivia.ledger import ScoreLedger, normalize_participant
from trivia.models import Phase, Question, RoundSettings, RoundState, RoundSnapshot
from trivia.parser import AnswerParser


# ------------------------------------------
# PURE TRANSITIONS
# ------------------------------------------
def advance(state: RoundState, now: float, settings: RoundSettings) -> RoundState:
    """
    Returns the state after at most one transition. The next deadline is
    measured from the previous one, so a late tick never stretches a phase.
    """
    if state.phase in (Phase.IDLE, Phase.FINISHED) or state.phase_deadline is None:
        return state
    if now < state.phase_deadline:
        return state

    deadline = state.phase_deadline
    if state.phase == Phase.COUNTDOWN:
        return replace(state, phase=Phase.PREVIEW,
                       phase_deadline=deadline + settings.preview_seconds)
    if state.phase == Phase.PREVIEW:
        return replace(state, phase=Phase.OPEN, open_started_at=deadline,
                       phase_deadline=deadline + settings.open_seconds)
    if state.phase == Phase.OPEN:
        return replace(state, phase=Phase.REVEAL,
                       phase_deadline=deadline + settings.reveal_seconds)
    # REVEAL
    if state.is_last_question:
        return replace(state, phase=Phase.FINISHED, phase_deadline=None)
    return replace(state, phase=Phase.PREVIEW,
                   question_index=state.question_index + 1,
                   open_started_at=None,
                   phase_deadline=deadline + settings.preview_seconds)


def start_state(question_count: int, now: float, settings: RoundSettings) -> RoundState:
    if settings.countdown_seconds > 0:
        return RoundState(phase=Phase.COUNTDOWN, question_index=0,
                          question_count=question_count,
                          phase_deadline=now + settings.countdown_seconds)
    return RoundState(phase=Phase.PREVIEW, question_index=0,
                      question_count=question_count,
                      phase_deadline=now + settings.preview_seconds)


def time_ratio(elapsed: float, open_seconds: float) -> float:
    if open_seconds <= 0:
        return 0.0
    return max(0.0, min(1.0, (open_seconds - elapsed) / open_seconds))


# ------------------------------------------
# ENGINE
# ------------------------------------------
class RoundEngine:
    def __init__(self, questions, settings: RoundSettings | None = None,
                 clock=time.time, parser: AnswerParser | None = None):
        self.settings = settings or RoundSettings()
        self._clock = clock
        self._parser = parser or AnswerParser()
        self._lock = threading.Lock()

        self.ledger = ScoreLedger()
        self._questions: tuple[Question, ...] = tuple(questions)
        self._state = RoundState(question_count=len(self._questions))
        self._answered: set[str] = set()

    # ------------------------------------------
    # PRESENTER ACTIONS
    # ------------------------------------------
    def start(self, now: float | None = None) -> bool:
        now = self._now(now)
        with self._lock:
            if self._state.phase != Phase.IDLE or not self._questions:
                return False
            self._answered = set()
            self._state = start_state(len(self._questions), now, self.settings)
            print(f"[Round] Started with {len(self._questions)} questions")
            self._advance_locked(now)
            return True

    def restart(self):
        """Back to IDLE with an empty ledger. Old deadlines go with the old state."""
        with self._lock:
            self._restart_locked()

    def _restart_locked(self):
        self._state = RoundState(question_count=len(self._questions))
        self._answered = set()
        self.ledger.clear()
        print("[Round] Reset to idle")

    def load(self, questions) -> bool:
        with self._lock:
            if self._state.phase not in (Phase.IDLE, Phase.FINISHED):
                return False
            self._questions = tuple(questions)
            self._restart_locked()
            return True

    def skip_phase(self, now: float | None = None) -> Phase:
        now = self._now(now)
        with self._lock:
            if self._state.phase_deadline is not None and self._state.phase_deadline > now:
                self._state = replace(self._state, phase_deadline=now)
            return self._advance_locked(now)

    # ------------------------------------------
    # TICK
    # ------------------------------------------
    def tick(self, now: float | None = None) -> Phase:
        now = self._now(now)
        with self._lock:
            return self._advance_locked(now)

    def _advance_locked(self, now: float) -> Phase:
        while True:
            previous = self._state
            nxt = advance(previous, now, self.settings)
            if nxt is previous:
                break
            self._state = nxt
            self._on_transition(previous, nxt)
        return self._state.phase

    def _on_transition(self, old: RoundState, new: RoundState):
        if old.phase == Phase.OPEN and new.phase == Phase.REVEAL:
            broken = self.ledger.reset_streaks_except(self._answered)
            print(
                f"[Round] Q{old.question_index + 1} closed: "
                f"{len(self._answered)} answers, {len(broken)} streaks broken"
            )
        elif new.phase == Phase.PREVIEW:
            self._answered = set()
            print(f"[Round] Q{new.question_index + 1}/{new.question_count} preview")
        elif new.phase == Phase.FINISHED:
            leader = self.ledger.top(1)
            if leader:
                print(f"[Round] Finished! Winner: {leader[0].participant_id} ({leader[0].score} pts)")
            else:
                print("[Round] Finished with no answers")

    # ------------------------------------------
    # ANSWERS
    # ------------------------------------------
    def submit_answer(self, participant_id: str, raw_message: str,
                      now: float | None = None) -> int | None:
        """
        Scores one chat message. Returns the points awarded (0 for a wrong
        answer), or None when the message had no effect.
        """
        now = self._now(now)
        with self._lock:
            state = self._state
            if state.phase != Phase.OPEN:
                return None
            if state.phase_deadline is not None and now > state.phase_deadline:
                return None  # late
            if state.open_started_at is not None and now < state.open_started_at:
                return None  # sent before the options were shown

            pid = normalize_participant(participant_id)
            if not pid or pid in self._answered:
                return None

            question = self._questions[state.question_index]
            choice = self._parser.parse(raw_message, len(question.options))
            if choice is None:
                return None

            settings = self.settings
            is_correct = choice == question.correct_index
            base_points = 0
            if is_correct:
                ratio = time_ratio(now - state.open_started_at, settings.open_seconds)
                max_points = settings.max_points_for(state.question_index)
                base_points = int(round(
                    settings.min_points + (max_points - settings.min_points) * ratio
                ))

            points = self.ledger.apply_answer(
                pid, is_correct, base_points,
                streak_bonus=settings.streak_bonus,
                streak_min_length=settings.streak_min_length,
            )
            self._answered.add(pid)
            print(f"[Round] {pid} answered {raw_message.strip()} "
                  f"({'correct' if is_correct else 'wrong'}, +{points})")
            return points

    # ------------------------------------------
    # ACCESSORS
    # ------------------------------------------
    def snapshot(self, now: float | None = None, top_n: int = LEADERBOARD_SIZE) -> RoundSnapshot:
        now = self._now(now)
        with self._lock:
            state = self._state
            question = self._current_question_locked()
            remaining = 0.0
            if state.phase_deadline is not None:
                remaining = max(0.0, state.phase_deadline - now)

            prompt, options, correct_index, category = "", (), None, ""
            if question and state.phase in (Phase.PREVIEW, Phase.OPEN, Phase.REVEAL):
                prompt = question.prompt
                category = question.category
                if state.phase != Phase.PREVIEW:
                    options = question.options
                if state.phase == Phase.REVEAL:
                    correct_index = question.correct_index

            active = state.phase in (Phase.PREVIEW, Phase.OPEN, Phase.REVEAL)
            return RoundSnapshot(
                phase=state.phase,
                question_number=state.question_index + 1 if active else 0,
                total_questions=len(self._questions),
                prompt=prompt,
                options=options,
                correct_index=correct_index,
                seconds_remaining=remaining,
                leaderboard=self.ledger.top(top_n),
                answered_count=len(self._answered) if active else 0,
                category=category,
            )

    def _current_question_locked(self) -> Question | None:
        if not self._questions:
            return None
        return self._questions[min(self._state.question_index, len(self._questions) - 1)]

    def _now(self, now):
        return self._clock() if now is None else now

    @property
    def state(self) -> RoundState:
        with self._lock:
            return self._state

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def questions(self) -> tuple:
        return self._questions

    @property
    def answered_count(self) -> int:
        with self._lock:
            return len(self._answered)

    def has_answered(self, participant_id: str) -> bool:
        with self._lock:
            return normalize_participant(participant_id) in self._answered
