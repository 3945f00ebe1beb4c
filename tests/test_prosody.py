from lyrics_dsl.models import Line, Section, SectionKind
from lyrics_dsl.prosody import (
    estimate_syllables,
    extract_rhyme_scheme,
    line_syllables,
    match_meter,
    normalize_scheme,
)

# ---------------------------------------------------------------------------
# estimate_syllables
# ---------------------------------------------------------------------------


def test_empty_and_non_letters_are_zero():
    assert estimate_syllables("") == 0
    assert estimate_syllables("123") == 0
    assert estimate_syllables("--") == 0


def test_all_consonants_count_as_one():
    assert estimate_syllables("hmm") == 1
    assert estimate_syllables("shh") == 1


def test_vowel_groups():
    assert estimate_syllables("cat") == 1
    assert estimate_syllables("hello") == 2
    assert estimate_syllables("validation") == 4


def test_silent_e():
    assert estimate_syllables("love") == 1
    assert estimate_syllables("stone") == 1
    assert estimate_syllables("the") == 1
    # consonant + "le" keeps its syllable
    assert estimate_syllables("table") == 2


def test_es_and_ed_endings():
    assert estimate_syllables("loves") == 1
    assert estimate_syllables("wishes") == 2
    assert estimate_syllables("loved") == 1
    assert estimate_syllables("wanted") == 2


def test_hiatus():
    assert estimate_syllables("lion") == 2
    assert estimate_syllables("radio") == 3
    assert estimate_syllables("nation") == 2


def test_leading_y_is_a_consonant():
    assert estimate_syllables("you") == 1
    assert estimate_syllables("yes") == 1


def test_case_and_punctuation_ignored():
    assert estimate_syllables("Hello,") == estimate_syllables("hello")
    assert estimate_syllables("don't") == 1


def test_line_syllables():
    assert line_syllables("la la la") == 3
    assert line_syllables("Oh these validation blues") == 7
    assert line_syllables("") == 0


# ---------------------------------------------------------------------------
# Rhyme schemes
# ---------------------------------------------------------------------------


def test_normalize_scheme():
    assert normalize_scheme("CDCD") == "ABAB"
    assert normalize_scheme(["A", "B", "C", "B"]) == "ABCB"
    assert normalize_scheme("ZZYY") == "AABB"
    assert normalize_scheme("") == ""


def test_extract_rhyme_scheme():
    section = Section(
        kind=SectionKind.CHORUS,
        lines=[Line(text="x", attributes={"rhyme": letter}) for letter in "ABCB"],
    )
    assert extract_rhyme_scheme(section) == "ABCB"


def test_extract_rhyme_scheme_skips_unmarked_lines():
    section = Section(
        kind=SectionKind.VERSE,
        lines=[
            Line(text="a", attributes={"rhyme": "Q"}),
            Line(text="b"),
            Line(text="c", attributes={"rhyme": "Q"}),
        ],
    )
    assert extract_rhyme_scheme(section) == "AA"
    assert extract_rhyme_scheme(Section(kind=SectionKind.VERSE, lines=[Line(text="a")])) == ""


# ---------------------------------------------------------------------------
# Meter
# ---------------------------------------------------------------------------


def test_match_meter():
    assert match_meter("x/x/x/x/x/") == "iambic pentameter"
    assert match_meter("/x/x/x/x") == "trochaic tetrameter"
    assert match_meter("xx/xx/xx/") == "anapestic trimeter"


def test_match_meter_is_exact():
    assert match_meter("x/x/") is None
    assert match_meter("x/x/x/x/x/x") is None
