import dataclasses

import pytest

from lyrics_dsl.models import (
    Finding,
    Grade,
    Line,
    Location,
    Section,
    SectionKind,
    Severity,
    Song,
    Span,
)


def test_line_defaults():
    line = Line(text="Hello darkness")
    assert line.text == "Hello darkness"
    assert line.attributes == {}
    assert line.rhyme is None
    assert line.stress is None
    assert line.chords == ()
    assert line.timing is None


def test_line_attribute_properties():
    line = Line(
        text="x",
        attributes={"rhyme": "A", "stress": "x/", "chord": ("C", "G"), "timing": (1, 30)},
    )
    assert line.rhyme == "A"
    assert line.stress == "x/"
    assert line.chords == ("C", "G")
    assert line.timing == (1, 30)


def test_section_lines_stored_as_tuple():
    section = Section(kind=SectionKind.VERSE, lines=[Line(text="a")])
    assert isinstance(section.lines, tuple)


def test_section_label():
    assert Section(kind=SectionKind.VERSE, number=2).label == "Verse 2"
    assert Section(kind=SectionKind.CHORUS).label == "Chorus"
    assert Section(kind=SectionKind.PRE_CHORUS).label == "Pre-Chorus"


def test_section_kind_numbered():
    assert SectionKind.VERSE.numbered
    assert SectionKind.CHORUS.numbered
    assert not SectionKind.BRIDGE.numbered


def test_song_is_frozen():
    song = Song(metadata={"title": "T"})
    with pytest.raises(dataclasses.FrozenInstanceError):
        song.sections = ()


def test_song_title_and_sections_of():
    song = Song(
        metadata={"title": "The Weight"},
        sections=[
            Section(kind=SectionKind.VERSE),
            Section(kind=SectionKind.CHORUS),
            Section(kind=SectionKind.VERSE),
        ],
    )
    assert song.title == "The Weight"
    assert [i for i, _ in song.sections_of(SectionKind.VERSE)] == [0, 2]


def test_location_renders_one_based():
    assert str(Location(section=1, line=2)) == "section 2, line 3"
    assert str(Location(section=0)) == "section 1"
    assert str(Location()) == "song"


def test_finding_layer_and_dict():
    span = Span(start=10, end=20, line=3, column=1)
    finding = Finding(
        Severity.WARNING, "prosody/meter", "msg", Location(section=0, line=1, span=span)
    )
    assert finding.layer == "prosody"
    assert finding.to_dict() == {
        "severity": "warning",
        "rule": "prosody/meter",
        "message": "msg",
        "location": {
            "section": 0,
            "line": 1,
            "span": {"start": 10, "end": 20, "line": 3, "column": 1},
        },
    }


def test_grade_breakdown():
    grade = Grade(overall=90, structure=100, prosody=95, originality=75, commerciality=90)
    assert grade.breakdown == {
        "structure": 100,
        "prosody": 95,
        "originality": 75,
        "commerciality": 90,
    }
    assert grade.to_dict()["feedback"] == []
