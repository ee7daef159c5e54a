import pytest

from matchday_quiz.utils.normalize import normalize, slug


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("", ""),
        ("  Kylian   Mbappé  ", "kylian mbappe"),
        ("N’Golo Kanté", "n'golo kante"),
        ("N`Golo Kante", "n'golo kante"),
        ("Saint–Étienne", "saint-etienne"),
        ("Paris — Saint−Germain", "paris - saint-germain"),
        ("Άγγελος Χαριστέας", "αγγελοσ χαριστεασ"),
        ("ΧΑΡΙΣΤΕΑΣ", "χαριστεασ"),
        ("Tab\tand\nnewline", "tab and newline"),
    ],
)
def test_normalize_examples(raw, expected):
    assert normalize(raw) == expected


@pytest.mark.parametrize(
    "raw",
    ["", "   ", "Müller", "İstanbul", "Ελλάδα", "O’Neill – Jr.", "ǅemal", "ﬁnal", "Å"],
)
def test_normalize_is_idempotent(raw):
    once = normalize(raw)
    assert normalize(once) == once


def test_normalize_ignores_case_and_accents():
    assert normalize("JOSÉ MOURINHO") == normalize("jose mourinho")
    assert normalize("Ζαγοράκης") == normalize("ΖΑΓΟΡΑΚΗΣ")


def test_normalize_none_and_non_strings():
    assert normalize(None) == ""
    assert normalize(16) == "16"


def test_slug():
    assert slug("Kylian Mbappé") == "kylian-mbappe"
    assert slug("  -Real  Madrid C.F.- ") == "real-madrid-c-f"
