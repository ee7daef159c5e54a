import json
import logging
import os

from matchday_quiz.trivia.intents import Advance, CommitName, Start, SubmitAnswer
from matchday_quiz.trivia.machine import reduce
from matchday_quiz.trivia.questions import (
    MODE_NUMERIC,
    MODE_TEXT,
    Question,
    category_summary,
    final_topic,
    load_questions,
    parse_questions,
)
from matchday_quiz.trivia.state import GameState

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")


def test_from_dict_maps_feed_keys():
    q = Question.from_dict(
        {
            "order": 4,
            "category": "Numbers",
            "prompt": "Klose's World Cup goals?",
            "answerMode": "numeric",
            "acceptNumbers": [16],
            "answerNumber": 16,
            "min": 15,
            "max": 17,
            "acceptKeys": ["ES", 7],
            "unknownKey": "ignored",
        }
    )
    assert q.order == 4
    assert q.answer_mode == MODE_NUMERIC
    assert q.accept_numbers == (16,)
    assert q.answer_number == 16
    assert q.minimum == 15
    assert q.maximum == 17
    assert q.accept_keys == ("ES", "7")


def test_from_dict_defaults():
    q = Question.from_dict({"prompt": "?", "points": 0, "accept": "not a list"})
    assert q.order == 0
    assert q.points == 1
    assert q.base_points == 1
    assert q.answer_mode == MODE_TEXT
    assert q.accept == ()
    assert q.accept_keys is None


def test_parse_questions_sorts_and_skips_junk():
    questions = parse_questions(
        [
            {"order": 3, "prompt": "c"},
            "junk",
            {"prompt": "no order"},
            {"order": 1, "prompt": "a"},
        ]
    )
    assert [q.prompt for q in questions] == ["no order", "a", "c"]
    assert parse_questions({"questions": []}) == []


def test_load_questions_missing_file(tmp_path):
    assert load_questions(tmp_path / "nope.json") == []


def test_load_questions_from_disk(tmp_path):
    path = tmp_path / "feed.json"
    path.write_text(json.dumps([{"order": 2, "prompt": "b"}, {"order": 1, "prompt": "a"}]), encoding="utf-8")
    assert [q.prompt for q in load_questions(path)] == ["a", "b"]


def test_bundled_feed_loads():
    questions = load_questions(os.path.join(DATA_DIR, "questions.json"))
    assert len(questions) == 6
    assert questions[-1].answer_mode == MODE_NUMERIC
    assert final_topic(questions) == "Legends"


def test_category_summary_leaves_out_final_category():
    questions = [
        Question(category="Europe", points=1),
        Question(category="Europe", points=2),
        Question(category="", points=1),
        Question(category="Europe", points=2),
        Question(category="Final question: Legends", points=1),
    ]
    assert category_summary(questions) == [
        {"category": "Europe", "count": 3, "points": [1, 2]},
        {"category": "—", "count": 1, "points": [1]},
    ]
    assert category_summary([]) == []


def test_final_topic_strips_prefix():
    def topic(category):
        return final_topic([Question(category=category)])

    assert topic("Final question — Legends") == "Legends"
    assert topic("Τελική ερώτηση - Θρύλοι") == "Θρύλοι"
    assert topic("final question: Derbies") == "Derbies"
    assert topic("Legends") == "Legends"
    assert final_topic([]) == ""


def test_from_dict_coerces_numeric_strings():
    q = Question.from_dict({"order": "3", "points": "2", "prompt": "?"})
    assert q.order == 3
    assert q.points == 2
    assert q.base_points == 2

    junk = Question.from_dict({"order": "soon", "points": "lots"})
    assert junk.order == 0
    assert junk.points == 1
    assert Question.from_dict({"points": True}).points == 1


def test_mixed_order_types_still_sort():
    questions = parse_questions([{"order": "2", "prompt": "b"}, {"order": 1, "prompt": "a"}, {"order": "x", "prompt": "z"}])
    assert [q.prompt for q in questions] == ["z", "a", "b"]


def test_string_points_score_like_numbers():
    questions = parse_questions([{"order": 1, "points": "2", "answerMode": "numeric", "acceptNumber": 1}, {"order": 2}])
    state = reduce(reduce(GameState.new(), CommitName("Alex"), questions), Start(), questions)
    state = reduce(reduce(state, Advance(), questions), SubmitAnswer("1"), questions)
    assert state.player.score == 2


def test_unknown_answer_mode_is_kept_with_a_warning(caplog):
    with caplog.at_level(logging.WARNING):
        q = Question.from_dict({"answerMode": "riddle", "answer": "Hat-trick"})
    assert q.answer_mode == "riddle"
    assert "Unknown answer mode" in caplog.text
