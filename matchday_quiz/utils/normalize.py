import re
import unicodedata

_APOSTROPHES = re.compile(r"[’'`]")
_DASHES = re.compile(r"[–—−]")
_WHITESPACE = re.compile(r"\s+")
_NON_SLUG = re.compile(r"[^a-z0-9]+")


def normalize(text) -> str:
    """
    Canonical form used for every answer / catalog comparison.

    Strips diacritics, unifies apostrophes and dashes, collapses whitespace,
    lowercases and folds the Greek final sigma.
    """
    if text is None:
        return ""
    # lowercase first: some capitals ("İ") lowercase into a combining mark
    text = unicodedata.normalize("NFD", str(text).lower())
    text = "".join(ch for ch in text if not unicodedata.combining(ch))
    text = _APOSTROPHES.sub("'", text)
    text = _DASHES.sub("-", text)
    text = _WHITESPACE.sub(" ", text).strip()
    return text.replace("ς", "σ")


def slug(text) -> str:
    """URL-ish slug of the normalized text ("Lionel Messi" -> "lionel-messi")."""
    return _NON_SLUG.sub("-", normalize(text)).strip("-")
