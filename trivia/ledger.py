"""
Chess Stream Trivia - Score Ledger
In-memory scores and streaks for one round, plus the leaderboard query.
"""

import threading
from dataclasses import replace

from trivia.models import ScoreEntry


def normalize_participant(participant_id: str) -> str:
    return (participant_id or "").strip().lower()


class ScoreLedger:
    def __init__(self):
        self._lock = threading.Lock()
        self._entries: dict[str, ScoreEntry] = {}  # insertion order breaks ties

    def _get_or_create(self, pid: str) -> ScoreEntry:
        if pid not in self._entries:
            self._entries[pid] = ScoreEntry(participant_id=pid)
        return self._entries[pid]

    def get(self, participant_id: str) -> ScoreEntry | None:
        with self._lock:
            entry = self._entries.get(normalize_participant(participant_id))
            return replace(entry) if entry else None

    def apply_answer(self, participant_id: str, is_correct: bool,
                     base_points: int, streak_bonus: int = 0,
                     streak_min_length: int = 2) -> int:
        """
        Record one answer and return the points awarded. The streak bonus
        applies once the new streak reaches streak_min_length.
        """
        pid = normalize_participant(participant_id)
        with self._lock:
            entry = self._get_or_create(pid)
            if not is_correct:
                entry.record_wrong()
                return 0
            bonus = streak_bonus if entry.streak + 1 >= streak_min_length else 0
            points = max(0, base_points) + bonus
            entry.record_correct(points)
            return points

    def reset_streaks_except(self, answered) -> list[str]:
        """Break the streak of everyone who didn't answer. Scores are kept."""
        broken = []
        with self._lock:
            for pid, entry in self._entries.items():
                if entry.streak > 0 and pid not in answered:
                    entry.streak = 0
                    broken.append(pid)
        return broken

    def clear(self):
        with self._lock:
            self._entries.clear()

    def rank(self) -> list[ScoreEntry]:
        with self._lock:
            entries = [replace(e) for e in self._entries.values()]
        return sorted(entries, key=lambda e: e.score, reverse=True)

    def top(self, n: int) -> list[ScoreEntry]:
        return self.rank()[:n]

    def entries(self) -> list[ScoreEntry]:
        with self._lock:
            return [replace(e) for e in self._entries.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
