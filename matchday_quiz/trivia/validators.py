"""
Answer validation.

validate(question, value) decides whether a submitted value is correct for
the question's answer mode:
  - catalog   → resolve a catalog item, compare keys / names / aliases
  - scoreline → "2-3", "2:3", "2 x 3" or {"home", "away"}
  - numeric   → exact value(s), ±tolerance, or [min, max]
  - text      → normalized exact match (anything else falls back here)

It never raises: anything unparseable or unresolved is simply not correct.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from ..catalog.index import CatalogIndex, CatalogItem
from ..utils.normalize import normalize
from .questions import MODE_CATALOG, MODE_NUMERIC, MODE_SCORELINE, MODE_TEXT, Question

logger = logging.getLogger(__name__)

_SCORE_SEPARATORS = re.compile(r"[–—−:x×]")
_SCORE_PATTERN = re.compile(r"(\d+)\s*-\s*(\d+)", re.ASCII)
_NUMBER_TEXT = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class Verdict:
    correct: bool
    canonical: Optional[str] = None


WRONG = Verdict(False, None)


# -----------------------------
# Parsers
# -----------------------------

def parse_score(text) -> Optional[dict]:
    """Parse "2-3", "2:3", "2×3", "2 x 3" ... into {"home": 2, "away": 3}."""
    cleaned = _SCORE_SEPARATORS.sub("-", str(text if text is not None else ""))
    m = _SCORE_PATTERN.search(cleaned)
    if not m:
        return None
    return {"home": int(m.group(1)), "away": int(m.group(2))}


def _finite(value) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    return n if math.isfinite(n) else None


def parse_score_flexible(value) -> Optional[dict]:
    """Either a {"home", "away"} mapping or a score string."""
    if isinstance(value, dict):
        home, away = _finite(value.get("home")), _finite(value.get("away"))
        if home is None or away is None:
            return None
        return {"home": home, "away": away}
    if isinstance(value, str):
        return parse_score(value)
    return None


def parse_number(value) -> Optional[float]:
    """
    Accepts numbers, numeric strings (comma or dot as decimal separator)
    and {"value": ...} wrappers.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return _finite(value)
    if isinstance(value, dict):
        if "value" not in value or value["value"] is None:
            return None
        value = value["value"]
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return _finite(value)
    if isinstance(value, str):
        text = value.strip().replace(",", ".", 1)
        if not _NUMBER_TEXT.fullmatch(text):
            return None
        return _finite(text)
    return None


def format_number(n: float) -> str:
    """2.0 -> "2", 2.5 -> "2.5"."""
    if float(n).is_integer():
        return str(int(n))
    return str(n)


def _format_score(score: dict) -> str:
    return f"{format_number(score['home'])}-{format_number(score['away'])}"


# -----------------------------
# Per-mode validation
# -----------------------------

def resolve_candidate(value, catalog: Optional[CatalogIndex]) -> Optional[CatalogItem]:
    """
    A picked suggestion is passed through as-is; a mapping with an "id"
    (e.g. an autocomplete choice) is looked up by id; free text is looked
    up by normalized name / alias.
    """
    if isinstance(value, CatalogItem):
        return value
    if catalog is None:
        return None
    if isinstance(value, dict):
        if value.get("id"):
            return catalog.get(str(value["id"]))
        return None
    if isinstance(value, str):
        return catalog.lookup(value)
    return None


def validate_catalog(question: Question, value, catalog: Optional[CatalogIndex]) -> Verdict:
    candidate = resolve_candidate(value, catalog)
    if candidate is None:
        return WRONG

    if question.accept_keys is not None and candidate.key is not None:
        if str(candidate.key) in set(question.accept_keys):
            return Verdict(True, candidate.name)

    accepted = {normalize(a) for a in question.accept}
    correct = any(token in accepted for token in candidate.fields)
    return Verdict(correct, candidate.name)


def validate_scoreline(question: Question, value) -> Verdict:
    got = parse_score_flexible(value)
    if got is None:
        return WRONG

    ordered = bool(question.teams)
    correct = False
    for entry in question.accept_scores:
        accepted = parse_score_flexible(entry)
        if accepted is None:
            continue
        same = got["home"] == accepted["home"] and got["away"] == accepted["away"]
        swapped = got["home"] == accepted["away"] and got["away"] == accepted["home"]
        if same or (swapped and not ordered):
            correct = True
            break
    return Verdict(correct, _format_score(got))


def _accepted_numbers(question: Question) -> List[float]:
    if question.accept_numbers:
        values = question.accept_numbers
    else:
        values = [question.accept_number, question.answer_number, question.answer]
    return [n for n in (parse_number(v) for v in values) if n is not None]


def validate_numeric(question: Question, value) -> Verdict:
    n = parse_number(value)
    if n is None:
        return WRONG
    canonical = format_number(n)

    candidates = _accepted_numbers(question)
    if candidates:
        tolerance = parse_number(question.tolerance)
        # tolerance only applies to a single target value
        if tolerance is not None and len(candidates) == 1:
            return Verdict(abs(n - candidates[0]) <= abs(tolerance), canonical)
        return Verdict(any(n == c for c in candidates), canonical)

    lo, hi = parse_number(question.minimum), parse_number(question.maximum)
    if lo is not None or hi is not None:
        lo = -math.inf if lo is None else lo
        hi = math.inf if hi is None else hi
        return Verdict(lo <= n <= hi, canonical)

    return Verdict(False, canonical)


def validate_text(question: Question, value) -> Verdict:
    if value is None or isinstance(value, (dict, CatalogItem)):
        submitted = ""
    else:
        submitted = normalize(value)
    accepted = [normalize(a) for a in [question.answer, *question.accept] if a is not None]
    if submitted in accepted:
        return Verdict(True, None if question.answer is None else str(question.answer))
    return WRONG


def validate(question: Question, value, catalog: Optional[CatalogIndex] = None) -> Verdict:
    """Decide correctness of `value` for `question`. Never raises."""
    mode = question.answer_mode or MODE_TEXT
    try:
        if mode == MODE_CATALOG:
            return validate_catalog(question, value, catalog)
        if mode == MODE_SCORELINE:
            return validate_scoreline(question, value)
        if mode == MODE_NUMERIC:
            return validate_numeric(question, value)
        return validate_text(question, value)
    except Exception:
        logger.exception("Validation failed for %r (mode=%s)", value, mode)
        return WRONG


async def validate_answer(question: Question, value, registry) -> Verdict:
    """validate(), loading the question's catalog first when it needs one."""
    catalog = None
    if question.answer_mode == MODE_CATALOG and question.catalog:
        catalog = await registry.get_index(question.catalog)
    return validate(question, value, catalog)
