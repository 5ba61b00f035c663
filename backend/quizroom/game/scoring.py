"""Answer scoring.

Pure helpers: nothing here touches session state, callers apply the points.
"""

from __future__ import annotations

import math

FIRST_CORRECT_POINTS = 1000
MIN_CORRECT_POINTS = 500
SPEED_BONUS_POINTS = 500


def normalize_option(option: str | None) -> str:
    return (option or "").strip().casefold()


def is_correct(submitted: str | None, correct_option: str | None) -> bool:
    if correct_option is None:
        return False
    return normalize_option(submitted) == normalize_option(correct_option)


def score(is_first_correct: bool, remaining_sec: float, time_limit_sec: float) -> int:
    """Points for a correct answer.

    The first correct answer of a question earns a flat 1000. Later correct
    answers earn 500 plus up to 500 more, decaying linearly with elapsed time.
    """
    if is_first_correct:
        return FIRST_CORRECT_POINTS
    if time_limit_sec <= 0:
        return MIN_CORRECT_POINTS

    remaining = min(max(remaining_sec, 0.0), time_limit_sec)
    return math.floor(MIN_CORRECT_POINTS + (remaining / time_limit_sec) * SPEED_BONUS_POINTS)
