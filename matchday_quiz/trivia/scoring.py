# matchday_quiz/trivia/scoring.py
# The point rules shared by the live machine and the results replay.

from __future__ import annotations

from dataclasses import dataclass

from .constants import BOOST_MULTIPLIER, STREAK_BONUS, STREAK_BONUS_AT


@dataclass(frozen=True)
class Award:
    delta: int
    streak: int
    streak_bonus: int = 0


def score_regular(base_points: int, boosted: bool, streak: int, correct: bool) -> Award:
    """
    Non-final question.
    Correct: base × (2 if boosted) + 1 once the streak reaches 3 (bonus is
    never doubled). Wrong / no answer: nothing, streak back to 0.
    """
    if not correct:
        return Award(delta=0, streak=0)
    new_streak = streak + 1
    bonus = STREAK_BONUS if new_streak >= STREAK_BONUS_AT else 0
    multiplier = BOOST_MULTIPLIER if boosted else 1
    return Award(delta=base_points * multiplier + bonus, streak=new_streak, streak_bonus=bonus)


def score_final(wager: int, correct: bool) -> int:
    """Final question: the wager is won or lost. No boost, no streak."""
    return wager if correct else -wager
