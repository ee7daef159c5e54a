import os
import sys

import pytest

# Ensure the project root (containing the `matchday_quiz` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from matchday_quiz.catalog.registry import CatalogRegistry
from matchday_quiz.catalog.sources import StaticCatalogSource
from matchday_quiz.trivia.questions import Question


COUNTRIES = [
    {"key": "AR", "name": "Argentina", "aliases": ["Αργεντινή"]},
    {"key": "BR", "name": "Brazil", "aliases": ["Brasil", "Βραζιλία"]},
    {"key": "DE", "name": "Germany", "aliases": ["Deutschland"]},
    {"key": "ES", "name": "Spain", "aliases": ["España", "Ισπανία"]},
    {"key": "GR", "name": "Greece", "aliases": ["Ελλάδα", "Ellada"]},
]

PLAYERS = [
    "Lionel Messi",
    "Cristiano Ronaldo",
    {"name": "Angelos Charisteas", "aliases": ["Άγγελος Χαριστέας", "Charisteas"]},
    {"name": "Zinedine Zidane", "aliases": ["Zizou"]},
    "Ronaldo Nazário",
    "Andrés Iniesta",
]


@pytest.fixture()
def catalogs():
    return {"countries": COUNTRIES, "players": PLAYERS}


@pytest.fixture()
def registry(catalogs):
    # fresh registry per test: nothing is shared between tests
    return CatalogRegistry(StaticCatalogSource(catalogs))


def numeric_question(order, answer=1, points=1, category=None):
    return Question(
        order=order,
        category=category or f"Cat {order}",
        prompt=f"Question {order}?",
        points=points,
        answer_mode="numeric",
        accept_number=answer,
    )


def text_question(order, answer="yes", points=1):
    return Question(
        order=order,
        category=f"Text {order}",
        prompt=f"Question {order}?",
        points=points,
        answer="yes" if answer is None else answer,
    )


@pytest.fixture()
def numeric_game():
    """Four regular numeric questions (answer 1) and a numeric final (answer 1)."""
    return [numeric_question(i) for i in range(1, 6)]
