"""
Chess Stream Trivia - Distractors
Plausible wrong answers for numeric and string questions.
"""

import math
import random

from trivia.config import DISTRACTOR_MAX_ATTEMPTS


_rng = random.Random()


def _default_variance(correct: int) -> int:
    return max(math.floor(correct * 0.3), 50)


def numeric_distractors(correct: int, count: int = 3, variance: int | None = None,
                        rng: random.Random | None = None) -> list[int]:
    """
    Distinct positive integers near `correct`, none equal to it.
    Random draws inside +/- variance first; after DISTRACTOR_MAX_ATTEMPTS
    misses the remaining slots are filled with correct+1, correct+2, ...
    """
    rng = rng or _rng
    if variance is None:
        variance = _default_variance(correct)
    variance = abs(int(variance))

    chosen: list[int] = []
    attempts = 0
    while len(chosen) < count and attempts < DISTRACTOR_MAX_ATTEMPTS:
        attempts += 1
        candidate = int(round(correct + rng.randint(-variance, variance)))
        if candidate != correct and candidate > 0 and candidate not in chosen:
            chosen.append(candidate)

    k = 1
    while len(chosen) < count:
        candidate = int(correct) + k
        if candidate != correct and candidate > 0 and candidate not in chosen:
            chosen.append(candidate)
        k += 1
    return chosen


def formatted_distractors(correct: int, formatter=None, count: int = 3,
                          rng: random.Random | None = None) -> list[str]:
    """Like numeric_distractors, but unique after formatting (e.g. "12.3k")."""
    rng = rng or _rng
    formatter = formatter or format_count
    variance = _default_variance(correct)
    taken = {formatter(correct)}
    chosen: list[str] = []

    attempts = 0
    while len(chosen) < count and attempts < DISTRACTOR_MAX_ATTEMPTS:
        attempts += 1
        candidate = correct + rng.randint(-variance, variance)
        if candidate <= 0:
            continue
        label = formatter(candidate)
        if label not in taken:
            taken.add(label)
            chosen.append(label)

    # Each step is at least 15% away, wider than the coarsest format resolution
    k = 1
    while len(chosen) < count:
        candidate = max(int(correct), 1) * (1 + 0.15 * k) + k
        label = formatter(int(round(candidate)))
        if label not in taken:
            taken.add(label)
            chosen.append(label)
        k += 1
    return chosen


def spread_distractors(correct: int, offsets, count: int = 3, low: int | None = None,
                       high: int | None = None, step: int = 1) -> list[int]:
    """
    Wrong answers at fixed offsets from `correct`, kept inside [low, high].
    Missing slots are filled with correct +/- step*k, nearest first.
    """
    def _fits(value, chosen, bounded_high=True):
        if value == correct or value in chosen:
            return False
        if low is not None and value < low:
            return False
        if bounded_high and high is not None and value > high:
            return False
        return True

    chosen: list[int] = []
    for offset in offsets:
        if len(chosen) >= count:
            break
        value = correct + offset
        if _fits(value, chosen):
            chosen.append(value)

    k = 1
    while len(chosen) < count:
        up, down = correct + step * k, correct - step * k
        if low is not None and high is not None and up > high and down < low:
            break
        for value in (up, down):
            if len(chosen) < count and _fits(value, chosen):
                chosen.append(value)
        k += 1

    # Range too narrow: let the upper bound go
    k = 1
    while len(chosen) < count:
        value = correct + step * k
        if _fits(value, chosen, bounded_high=False):
            chosen.append(value)
        k += 1
    return chosen


def pick_from_pool(correct: str, pool, count: int = 3,
                   rng: random.Random | None = None) -> list[str]:
    rng = rng or _rng
    candidates = []
    for item in pool:
        if item != correct and item not in candidates:
            candidates.append(item)
    return rng.sample(candidates, min(count, len(candidates)))


def shuffle_with_correct(correct: str, wrongs, rng: random.Random | None = None):
    """Returns (options, correct_index) with the options uniformly permuted."""
    rng = rng or _rng
    options = [correct]
    for wrong in wrongs:
        if wrong not in options:
            options.append(wrong)
    rng.shuffle(options)
    return options, options.index(correct)


def format_count(n) -> str:
    n = int(n)
    if n >= 1_000_000:
        return _strip_zero(f"{n / 1_000_000:.1f}") + "M"
    if n >= 1000:
        text = f"{n / 1000:.1f}"
        if float(text) >= 1000:
            return _strip_zero(f"{n / 1_000_000:.1f}") + "M"
        return _strip_zero(text) + "k"
    return str(n)


def _strip_zero(text: str) -> str:
    return text[:-2] if text.endswith(".0") else text
