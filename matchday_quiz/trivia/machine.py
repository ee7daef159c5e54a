"""
Solo game state machine.

    NAME ─commit name─▶ INTRO ─start─▶ CATEGORY ─advance─▶ QUESTION
    QUESTION ─submit / skip─▶ ANSWER ─advance─▶ CATEGORY (next) | RESULTS
    any ─reset─▶ NAME

`reduce(state, intent, questions)` is pure: it returns a new GameState, or
the very same object when the intent is not legal right now (a no-op, not
an error). `GameSession` is the host-side wrapper that runs the validator
(which may need to load a catalog) before handing submissions to reduce().
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from ..catalog.index import CatalogItem
from .constants import MAX_WAGER, MIN_NAME_LENGTH, MIN_WAGER, SKIPPED_NUMBER, SKIPPED_TEXT
from .intents import (
    Advance,
    ArmBoost,
    CommitName,
    Intent,
    MarkManual,
    Reset,
    ResolveFinal,
    SetWager,
    SkipAnswer,
    Start,
    SubmitAnswer,
)
from .questions import MODE_CATALOG, MODE_NUMERIC, MODE_TEXT, Question
from .results import ResultRow, replay
from .scoring import score_final, score_regular
from .state import BoostState, GameStage, GameState, Outcome, PlayerState
from .validators import WRONG, validate, validate_answer

logger = logging.getLogger(__name__)


def clamp(n: int, lo: int, hi: int) -> int:
    return min(hi, max(lo, n))


def _current(state: GameState, questions: List[Question]) -> Optional[Question]:
    if 0 <= state.index < len(questions):
        return questions[state.index]
    return None


def _is_final(state: GameState, questions: List[Question]) -> bool:
    return bool(questions) and state.index == len(questions) - 1


def _enter_category(state: GameState, index: int) -> GameState:
    # a fresh category screen always starts with no wager on the table
    return replace(state, index=index, stage=GameStage.CATEGORY, wager=0, final_resolved=False)


# -----------------------------
# Scoring transitions
# -----------------------------

def _mark_regular(state: GameState, question: Question, correct: bool) -> GameState:
    player = state.player
    award = score_regular(
        question.base_points,
        state.boost_armed_for(state.index),
        player.streak,
        correct,
    )
    player = replace(
        player,
        score=player.score + award.delta,
        streak=award.streak,
        max_streak=max(player.max_streak, award.streak),
    )
    outcome = Outcome.CORRECT if correct else Outcome.WRONG
    return replace(state, player=player).with_outcome(state.index, outcome)


def _resolve_final(state: GameState, correct: bool) -> GameState:
    if state.final_resolved:
        return state
    player = replace(state.player, score=state.player.score + score_final(state.wager, correct))
    outcome = Outcome.FINAL_CORRECT if correct else Outcome.FINAL_WRONG
    return replace(state, player=player, final_resolved=True).with_outcome(state.index, outcome)


def _apply_verdict(state: GameState, questions: List[Question], correct: bool) -> GameState:
    if _is_final(state, questions):
        return _resolve_final(state, correct)
    return _mark_regular(state, questions[state.index], correct)


# -----------------------------
# Intent handlers
# -----------------------------

def _commit_name(state: GameState, intent: CommitName, questions: List[Question]) -> GameState:
    if state.stage != GameStage.NAME:
        return state
    name = (intent.name or "").strip()
    if len(name) < MIN_NAME_LENGTH:
        return state
    return replace(state, player=replace(state.player, name=name), stage=GameStage.INTRO, index=0)


def _start(state: GameState, intent: Start, questions: List[Question]) -> GameState:
    if state.stage != GameStage.INTRO:
        return state
    if not questions:
        return replace(state, index=0, stage=GameStage.RESULTS)
    return _enter_category(state, 0)


def _arm_boost(state: GameState, intent: ArmBoost, questions: List[Question]) -> GameState:
    if (
        state.stage != GameStage.CATEGORY
        or not state.boost.available
        or _current(state, questions) is None
        or _is_final(state, questions)
    ):
        return state
    return replace(state, boost=BoostState(available=False, armed_index=state.index))


def _set_wager(state: GameState, intent: SetWager, questions: List[Question]) -> GameState:
    if state.stage != GameStage.CATEGORY or not _is_final(state, questions):
        return state
    try:
        amount = int(intent.amount)
    except (TypeError, ValueError):
        return state
    return replace(state, wager=clamp(amount, MIN_WAGER, MAX_WAGER))


def _submit(state: GameState, intent: SubmitAnswer, questions: List[Question]) -> GameState:
    question = _current(state, questions)
    if state.stage != GameStage.QUESTION or question is None:
        return state

    value = intent.value
    recorded = value.name if isinstance(value, CatalogItem) else value
    state = replace(state.with_answer(state.index, recorded), stage=GameStage.ANSWER)

    if question.answer_mode == MODE_TEXT:
        # marked by hand on the answer screen
        return state

    verdict = intent.verdict if intent.verdict is not None else validate(question, value)
    return _apply_verdict(state, questions, verdict.correct)


def _skip(state: GameState, intent: SkipAnswer, questions: List[Question]) -> GameState:
    question = _current(state, questions)
    if state.stage != GameStage.QUESTION or question is None:
        return state

    recorded = dict(SKIPPED_NUMBER) if question.answer_mode == MODE_NUMERIC else SKIPPED_TEXT
    state = replace(state.with_answer(state.index, recorded), stage=GameStage.ANSWER)

    if question.answer_mode == MODE_TEXT:
        return state
    return _apply_verdict(state, questions, WRONG.correct)


def _mark_manual(state: GameState, intent: MarkManual, questions: List[Question]) -> GameState:
    question = _current(state, questions)
    if state.stage != GameStage.ANSWER or question is None or question.answer_mode != MODE_TEXT:
        return state
    if _is_final(state, questions):
        return _resolve_final(state, intent.correct)
    if state.outcome(state.index) != Outcome.UNSET:
        return state
    return _mark_regular(state, question, intent.correct)


def _resolve(state: GameState, intent: ResolveFinal, questions: List[Question]) -> GameState:
    if state.stage != GameStage.ANSWER or not _is_final(state, questions):
        return state
    return _resolve_final(state, intent.correct)


def _advance(state: GameState, intent: Advance, questions: List[Question]) -> GameState:
    if state.stage == GameStage.CATEGORY and _current(state, questions) is not None:
        return replace(state, stage=GameStage.QUESTION)

    if state.stage != GameStage.ANSWER or _current(state, questions) is None:
        return state

    if _is_final(state, questions):
        if not state.final_resolved:
            return state
        return replace(state, stage=GameStage.RESULTS)

    if state.outcome(state.index) == Outcome.UNSET:
        return state
    return _enter_category(state, state.index + 1)


def _reset(state: GameState, intent: Reset, questions: List[Question]) -> GameState:
    return GameState(player=PlayerState(name=state.player.name))


_HANDLERS: Dict[type, Callable[[GameState, Intent, List[Question]], GameState]] = {
    CommitName: _commit_name,
    Start: _start,
    ArmBoost: _arm_boost,
    SetWager: _set_wager,
    SubmitAnswer: _submit,
    SkipAnswer: _skip,
    MarkManual: _mark_manual,
    ResolveFinal: _resolve,
    Advance: _advance,
    Reset: _reset,
}


def reduce(state: GameState, intent: Intent, questions: List[Question]) -> GameState:
    """Apply one intent. Illegal intents return `state` itself."""
    handler = _HANDLERS.get(type(intent))
    if handler is None:
        logger.warning("Unknown intent %r", intent)
        return state
    return handler(state, intent, questions)


# -----------------------------
# Host-side session
# -----------------------------

class GameSession:
    """One player's game: questions, catalogs and the current state."""

    def __init__(self, questions: List[Question], registry, state: Optional[GameState] = None):
        self.questions = list(questions)
        self.registry = registry
        self.state = state if state is not None else GameState.new()

    @property
    def last_index(self) -> int:
        return len(self.questions) - 1

    @property
    def question(self) -> Optional[Question]:
        return _current(self.state, self.questions)

    @property
    def is_final(self) -> bool:
        return _is_final(self.state, self.questions)

    async def _prepare_submit(self, intent: SubmitAnswer) -> SubmitAnswer:
        question = self.question
        if (
            self.state.stage != GameStage.QUESTION
            or question is None
            or question.answer_mode == MODE_TEXT
            or intent.verdict is not None
        ):
            return intent

        value = intent.value
        if question.answer_mode == MODE_CATALOG and question.catalog and isinstance(value, str):
            # autocomplete choices carry the item id
            index = await self.registry.get_index(question.catalog)
            value = index.get(value) or value

        verdict = await validate_answer(question, value, self.registry)
        return SubmitAnswer(value=value, verdict=verdict)

    async def dispatch(self, intent: Intent) -> bool:
        """Apply an intent; returns False when it was a no-op."""
        if isinstance(intent, SubmitAnswer):
            intent = await self._prepare_submit(intent)

        new_state = reduce(self.state, intent, self.questions)
        if new_state is self.state:
            logger.debug("Ignored %r in stage %s", intent, self.state.stage.value)
            return False

        self.state = new_state
        return True

    def rows(self) -> List[ResultRow]:
        return replay(
            self.questions,
            self.state.outcomes,
            self.state.boost,
            self.state.wager,
            self.state.answers,
        )
