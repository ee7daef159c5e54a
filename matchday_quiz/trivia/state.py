# matchday_quiz/trivia/state.py

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional


class GameStage(str, Enum):
    NAME = "name"
    INTRO = "intro"
    CATEGORY = "category"
    QUESTION = "question"
    ANSWER = "answer"
    RESULTS = "results"


class Outcome(str, Enum):
    UNSET = "unset"
    CORRECT = "correct"
    WRONG = "wrong"
    FINAL_CORRECT = "final-correct"
    FINAL_WRONG = "final-wrong"


@dataclass(frozen=True)
class PlayerState:
    name: str = ""
    score: int = 0
    streak: int = 0
    max_streak: int = 0


@dataclass(frozen=True)
class BoostState:
    available: bool = True
    armed_index: Optional[int] = None


@dataclass(frozen=True)
class GameState:
    """
    Everything that survives a restart. Replaced wholesale on every intent,
    never mutated in place.
    """

    index: int = 0
    stage: GameStage = GameStage.NAME
    player: PlayerState = field(default_factory=PlayerState)
    boost: BoostState = field(default_factory=BoostState)
    wager: int = 0
    final_resolved: bool = False
    outcomes: Dict[int, Outcome] = field(default_factory=dict)
    answers: Dict[int, Any] = field(default_factory=dict)

    @classmethod
    def new(cls, name: str = "") -> "GameState":
        return cls(player=PlayerState(name=name))

    def outcome(self, index: int) -> Outcome:
        return self.outcomes.get(index, Outcome.UNSET)

    def with_outcome(self, index: int, outcome: Outcome) -> "GameState":
        return replace(self, outcomes={**self.outcomes, index: outcome})

    def with_answer(self, index: int, value: Any) -> "GameState":
        return replace(self, answers={**self.answers, index: value})

    def boost_armed_for(self, index: int) -> bool:
        return self.boost.armed_index == index
