from pathlib import Path

import pytest

from lyrics_dsl.exceptions import ParseError, VocabularyError
from lyrics_dsl.grammar import parse
from lyrics_dsl.lowering import lower, parse_number
from lyrics_dsl.models import SectionKind

SONGS = Path(__file__).parent / "songs"


def _lower(text: str):
    return lower(parse(text))


# ---------------------------------------------------------------------------
# Songs
# ---------------------------------------------------------------------------


def test_validation_blues():
    song = _lower((SONGS / "validation_blues.lyr").read_text(encoding="utf-8"))
    assert song.title == "Validation Blues"
    assert list(song.metadata) == ["title", "artist", "tempo", "genre", "key", "time_sig"]
    assert song.metadata["tempo"] == 72
    assert song.metadata["time_sig"] == "4/4"
    assert [s.kind for s in song.sections] == [
        SectionKind.VERSE,
        SectionKind.CHORUS,
        SectionKind.VERSE,
        SectionKind.BRIDGE,
        SectionKind.CHORUS,
    ]
    assert [s.number for s in song.sections] == [1, None, 2, None, None]
    assert [len(s.lines) for s in song.sections] == [4, 4, 4, 2, 4]


def test_section_attributes_typed():
    song = _lower('title: x\nBRIDGE {energy: 3, tilt: 0.5, acoustic: true, mood: "dark"}\nla\n')
    assert song.sections[0].attributes == {
        "energy": 3,
        "tilt": 0.5,
        "acoustic": True,
        "mood": "dark",
    }


def test_line_attributes_typed():
    song = _lower("title: x\nVERSE\nHello {rhyme: A, stress: x/, chord: C, G/B, timing: 1:30}\n")
    line = song.sections[0].lines[0]
    assert line.text == "Hello"
    assert line.rhyme == "A"
    assert line.stress == "x/"
    assert line.chords == ("C", "G/B")
    assert line.timing == (1, 30)


def test_numbers_use_decimal_semantics():
    assert parse_number("120") == 120
    assert isinstance(parse_number("120"), int)
    assert parse_number("007") == 7
    assert parse_number("3.25") == 3.25


def test_spans_preserved():
    tree = parse("title: x\nVERSE\nla\nCHORUS\nla\n")
    song = lower(tree)
    sections = tree.children_of("section")
    assert song.sections[1].span == sections[1].span
    assert song.sections[1].lines[0].span == sections[1].child("line").span
    assert song.span == tree.span


# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------


def test_unknown_metadata_key():
    with pytest.raises(VocabularyError) as excinfo:
        _lower("titel: x\nVERSE\nla\n")
    assert excinfo.value.found == "'titel'"
    assert excinfo.value.span.line == 1


def test_vocabulary_error_is_a_parse_error():
    with pytest.raises(ParseError):
        _lower("producer: x\nVERSE\nla\n")


def test_duplicate_metadata_key():
    with pytest.raises(VocabularyError, match="duplicate 'title'"):
        _lower("title: a\ntitle: b\nVERSE\nla\n")


def test_misspelt_line_attribute():
    with pytest.raises(VocabularyError) as excinfo:
        _lower("title: x\nVERSE\nla {rhyem: A}\n")
    assert excinfo.value.found == "'rhyem'"
    assert (excinfo.value.span.line, excinfo.value.span.column) == (3, 5)


def test_duplicate_line_attribute():
    with pytest.raises(VocabularyError, match="duplicate 'rhyme'"):
        _lower("title: x\nVERSE\nla {rhyme: A, rhyme: B}\n")


def test_duplicate_section_attribute():
    with pytest.raises(VocabularyError, match="duplicate 'mood'"):
        _lower("title: x\nVERSE {mood: a, mood: b}\nla\n")
