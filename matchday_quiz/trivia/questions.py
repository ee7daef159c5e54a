"""
Question feed.

Behavior:
- The feed is a JSON list of question records (camelCase keys, as exported
  by the quiz editor).
- Questions are sorted by `order` (missing order counts as 0, stable).
- The last question of the sorted feed is the final (wager) question.
"""

from __future__ import annotations

import json
import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

MODE_TEXT = "text"
MODE_CATALOG = "catalog"
MODE_SCORELINE = "scoreline"
MODE_NUMERIC = "numeric"
ANSWER_MODES = (MODE_TEXT, MODE_CATALOG, MODE_SCORELINE, MODE_NUMERIC)

_FINAL_PREFIX = re.compile(r"^\s*(Τελική\s+ερώτηση|Final\s+question)\s*[—–\-:]\s*", re.IGNORECASE)

# feed key -> Question attribute
_FIELD_MAP = {
    "order": "order",
    "category": "category",
    "prompt": "prompt",
    "points": "points",
    "answerMode": "answer_mode",
    "answer": "answer",
    "accept": "accept",
    "catalog": "catalog",
    "acceptKeys": "accept_keys",
    "acceptScores": "accept_scores",
    "teams": "teams",
    "acceptNumbers": "accept_numbers",
    "acceptNumber": "accept_number",
    "answerNumber": "answer_number",
    "tolerance": "tolerance",
    "min": "minimum",
    "max": "maximum",
    "media": "media",
    "fact": "fact",
}


def _as_number(value, kind, default):
    if value is None:
        return default
    try:
        n = float(value)
    except (TypeError, ValueError):
        n = math.nan
    if isinstance(value, bool) or not math.isfinite(n):
        logger.warning("Ignoring non-numeric feed value %r", value)
        return default
    return kind(n)


@dataclass(frozen=True)
class Question:
    order: float = 0
    category: str = ""
    prompt: str = ""
    points: int = 1
    answer_mode: str = MODE_TEXT

    # text / catalog
    answer: Any = None
    accept: Tuple[str, ...] = ()
    catalog: Optional[str] = None
    accept_keys: Optional[Tuple[str, ...]] = None

    # scoreline
    accept_scores: Tuple[Dict[str, Any], ...] = ()
    teams: Any = None

    # numeric
    accept_numbers: Tuple[Any, ...] = ()
    accept_number: Any = None
    answer_number: Any = None
    tolerance: Any = None
    minimum: Any = None
    maximum: Any = None

    media: Optional[Dict[str, Any]] = field(default=None, compare=False)
    fact: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Question":
        kwargs: Dict[str, Any] = {}
        for key, attr in _FIELD_MAP.items():
            if key in raw:
                kwargs[attr] = raw[key]
            elif attr in raw:
                kwargs[attr] = raw[attr]

        for attr in ("accept", "accept_scores", "accept_numbers"):
            if attr in kwargs:
                value = kwargs[attr]
                kwargs[attr] = tuple(value) if isinstance(value, (list, tuple)) else ()
        if kwargs.get("accept_keys") is not None:
            value = kwargs["accept_keys"]
            kwargs["accept_keys"] = tuple(str(k) for k in value) if isinstance(value, (list, tuple)) else None
        kwargs["order"] = _as_number(kwargs.get("order"), float, 0)
        kwargs["points"] = _as_number(kwargs.get("points"), int, 0) or 1
        if not kwargs.get("answer_mode"):
            kwargs["answer_mode"] = MODE_TEXT
        elif kwargs["answer_mode"] not in ANSWER_MODES:
            # still playable: validated as free text
            logger.warning("Unknown answer mode %r, treating it as text", kwargs["answer_mode"])
        return cls(**kwargs)

    @property
    def base_points(self) -> int:
        return self.points or 1


def sort_questions(questions: Iterable[Question]) -> List[Question]:
    return sorted(questions, key=lambda q: q.order or 0)


def parse_questions(raw: Any) -> List[Question]:
    if not isinstance(raw, list):
        logger.warning("Question feed is not a list, ignoring it")
        return []
    questions = []
    for entry in raw:
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed question entry: %r", entry)
            continue
        questions.append(Question.from_dict(entry))
    return sort_questions(questions)


def load_questions(path) -> List[Question]:
    """Load and order the question feed. A missing/broken file gives []."""
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as fh:
            raw = json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        logger.warning("Question feed %s could not be loaded: %s", path, e)
        return []

    questions = parse_questions(raw)
    logger.info("Loaded %d questions from %s", len(questions), path)
    return questions


# -----------------------------
# Intro helpers
# -----------------------------

def category_summary(questions: List[Question]) -> List[Dict[str, Any]]:
    """
    Per-category question count and distinct point values, in feed order.
    The final question's category is left out (it is announced separately).
    """
    if not questions:
        return []
    final_category = questions[-1].category or "—"

    summary: Dict[str, Dict[str, Any]] = {}
    for q in questions:
        key = q.category or "—"
        entry = summary.setdefault(key, {"category": key, "count": 0, "points": set()})
        entry["count"] += 1
        entry["points"].add(q.base_points)

    return [
        {"category": e["category"], "count": e["count"], "points": sorted(e["points"])}
        for e in summary.values()
        if e["category"] != final_category
    ]


def final_topic(questions: List[Question]) -> str:
    """Final question's category without the 'Final question —' prefix."""
    if not questions:
        return ""
    raw = questions[-1].category or ""
    return _FINAL_PREFIX.sub("", raw).strip() or raw
