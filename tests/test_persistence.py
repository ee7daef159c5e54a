import asyncio
import json
import logging

from matchday_quiz.trivia.constants import STORAGE_KEY
from matchday_quiz.trivia.persistence import MemoryStore, clear_state, load_state, save_state, slice_key
from matchday_quiz.trivia.state import BoostState, GameStage, GameState, Outcome, PlayerState


def sample_state():
    return GameState(
        index=3,
        stage=GameStage.ANSWER,
        player=PlayerState(name="Άγγελος", score=-1, streak=2, max_streak=4),
        boost=BoostState(available=False, armed_index=1),
        wager=2,
        final_resolved=True,
        outcomes={0: Outcome.CORRECT, 1: Outcome.WRONG, 3: Outcome.FINAL_WRONG},
        answers={0: "Spain", 1: {"home": 2, "away": 1}, 2: {"value": None}, 3: "1986"},
    )


def test_round_trip():
    store = MemoryStore()

    async def run():
        await save_state(store, sample_state())
        return await load_state(store, question_count=4)

    assert asyncio.run(run()) == sample_state()


def test_slices_are_stored_under_prefixed_keys():
    store = MemoryStore()
    asyncio.run(save_state(store, sample_state(), prefix="room-7"))

    assert set(store.data) == {
        f"room-7:{name}"
        for name in ("index", "stage", "p1", "x2", "wager", "finalResolved", "answered", "playerAnswers")
    }
    assert json.loads(store.data["room-7:p1"]) == {"name": "Άγγελος", "score": -1, "streak": 2, "maxStreak": 4}
    assert json.loads(store.data["room-7:answered"]) == {"0": "correct", "1": "wrong", "3": "final-wrong"}


def test_empty_store_gives_initial_state():
    assert asyncio.run(load_state(MemoryStore(), question_count=5)) == GameState.new()


def test_index_is_clamped_into_range():
    store = MemoryStore()
    store.data[slice_key(STORAGE_KEY, "index")] = "12"
    assert asyncio.run(load_state(store, question_count=5)).index == 4

    store.data[slice_key(STORAGE_KEY, "index")] = "-3"
    assert asyncio.run(load_state(store, question_count=5)).index == 0

    store.data[slice_key(STORAGE_KEY, "index")] = "2"
    assert asyncio.run(load_state(store, question_count=0)).index == 0


def test_unreadable_slice_falls_back_to_default(caplog):
    store = MemoryStore()
    asyncio.run(save_state(store, sample_state()))
    store.data[slice_key(STORAGE_KEY, "stage")] = '"halftime"'
    store.data[slice_key(STORAGE_KEY, "x2")] = "{broken"
    store.data[slice_key(STORAGE_KEY, "p1")] = '"just a string"'

    with caplog.at_level(logging.WARNING):
        state = asyncio.run(load_state(store, question_count=4))

    assert state.stage == GameStage.NAME
    assert state.boost == BoostState()
    assert state.player == PlayerState()
    # the rest is restored verbatim
    assert state.wager == 2
    assert state.outcomes[3] == Outcome.FINAL_WRONG
    assert "unreadable slice" in caplog.text


def test_clear_state_only_touches_its_prefix():
    store = MemoryStore()

    async def run():
        await save_state(store, sample_state(), prefix="a")
        await save_state(store, sample_state(), prefix="b")
        await clear_state(store, prefix="a")
        return await load_state(store, 4, prefix="a"), await load_state(store, 4, prefix="b")

    cleared, kept = asyncio.run(run())
    assert cleared == GameState.new()
    assert kept == sample_state()
    assert not any(k.startswith("a:") for k in store.data)
