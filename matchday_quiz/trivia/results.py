"""
Results ledger.

replay() rebuilds the per-question ledger from what was recorded during the
game. It runs the same scoring rules as the live machine in a single
forward pass, so its running totals must match the player's score history
exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .questions import Question
from .scoring import score_final, score_regular
from .state import BoostState, GameState, Outcome

LABEL_CORRECT = "correct"
LABEL_WRONG = "wrong"
LABEL_NONE = "—"


@dataclass(frozen=True)
class ResultRow:
    index: int
    category: str
    base_points: int
    boost_applied: bool
    streak_bonus: int
    outcome_label: str
    raw_answer: Any
    delta: int
    running_total: int
    is_final: bool

    @property
    def number(self) -> int:
        return self.index + 1

    @property
    def correct(self) -> Optional[bool]:
        if self.outcome_label == LABEL_NONE:
            return None
        return self.outcome_label == LABEL_CORRECT

    @property
    def answer_text(self) -> str:
        return answer_text(self.raw_answer)


def answer_text(raw: Any) -> str:
    if isinstance(raw, dict):
        if raw.get("home") is not None and raw.get("away") is not None:
            return f"{raw['home']} - {raw['away']}"
        if raw.get("value") is not None:
            return str(raw["value"])
        return ""
    if raw is None:
        return ""
    return str(raw)


def _as_outcome(value: Any) -> Outcome:
    try:
        return Outcome(value)
    except ValueError:
        return Outcome.UNSET


def replay(
    questions: List[Question],
    outcomes: Mapping[int, Any],
    boost: Optional[BoostState],
    wager: int,
    answers: Mapping[int, Any],
) -> List[ResultRow]:
    rows: List[ResultRow] = []
    last = len(questions) - 1
    armed = boost.armed_index if boost is not None else None

    running = 0
    streak = 0

    for i, q in enumerate(questions):
        outcome = _as_outcome(outcomes.get(i, Outcome.UNSET))
        is_final = i == last
        boosted = not is_final and armed == i

        bonus = 0
        delta = 0
        label = LABEL_NONE

        if is_final:
            if outcome == Outcome.FINAL_CORRECT:
                label, delta = LABEL_CORRECT, score_final(wager or 0, True)
            elif outcome == Outcome.FINAL_WRONG:
                label, delta = LABEL_WRONG, score_final(wager or 0, False)
        else:
            correct = outcome == Outcome.CORRECT
            award = score_regular(q.base_points, boosted, streak, correct)
            streak, bonus, delta = award.streak, award.streak_bonus, award.delta
            if correct:
                label = LABEL_CORRECT
            elif outcome == Outcome.WRONG:
                label = LABEL_WRONG

        running += delta
        rows.append(
            ResultRow(
                index=i,
                category=q.category or LABEL_NONE,
                base_points=q.base_points,
                boost_applied=boosted,
                streak_bonus=bonus,
                outcome_label=label,
                raw_answer=answers.get(i, ""),
                delta=delta,
                running_total=running,
                is_final=is_final,
            )
        )

    return rows


def summarize(state: GameState, rows: List[ResultRow]) -> Dict[str, Any]:
    return {
        "name": state.player.name,
        "score": state.player.score,
        "max_streak": state.player.max_streak,
        "questions": len(rows),
        "correct": sum(1 for r in rows if r.correct),
        "total": rows[-1].running_total if rows else 0,
    }
