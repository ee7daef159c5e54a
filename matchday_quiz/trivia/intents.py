# matchday_quiz/trivia/intents.py
# Everything the presentation layer can ask the game to do.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from .validators import Verdict


@dataclass(frozen=True)
class CommitName:
    name: str


@dataclass(frozen=True)
class Start:
    pass


@dataclass(frozen=True)
class ArmBoost:
    pass


@dataclass(frozen=True)
class SetWager:
    amount: int


@dataclass(frozen=True)
class SubmitAnswer:
    value: Any
    # filled in by the session for auto-marked modes
    verdict: Optional[Verdict] = None


@dataclass(frozen=True)
class SkipAnswer:
    pass


@dataclass(frozen=True)
class MarkManual:
    correct: bool


@dataclass(frozen=True)
class ResolveFinal:
    correct: bool


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class Reset:
    pass


Intent = Union[
    CommitName,
    Start,
    ArmBoost,
    SetWager,
    SubmitAnswer,
    SkipAnswer,
    MarkManual,
    ResolveFinal,
    Advance,
    Reset,
]
