from pathlib import Path

import pytest

from lyrics_dsl.exceptions import ParseError, VocabularyError
from lyrics_dsl.models import SectionKind, Severity
from lyrics_dsl.pipeline import analyze, parse_song
from lyrics_dsl.registry import RuleSet

SONGS = Path(__file__).parent / "songs"
VALIDATION_BLUES = (SONGS / "validation_blues.lyr").read_text(encoding="utf-8")

ONE_SECTION = """\
title: Lonely
VERSE[1]
I only have the one verse here
It doesn't even have a chorus
I wrote it standing by the pier
And no one ever wrote it for us
"""


def test_validation_blues_is_clean():
    report = analyze(VALIDATION_BLUES, originality_baseline=75)
    assert report.valid
    assert report.findings == ()
    assert report.grade.breakdown == {
        "structure": 100,
        "prosody": 100,
        "originality": 75,
        "commerciality": 100,
    }
    assert report.grade.overall == 94


def test_parse_song_sections():
    song = parse_song(VALIDATION_BLUES)
    assert len(song.sections) == 5
    assert [s.label for s in song.sections] == ["Verse 1", "Chorus", "Verse 2", "Bridge", "Chorus"]


def test_errors_make_song_invalid_but_still_graded():
    report = analyze(ONE_SECTION)
    assert not report.valid
    rules = [f.rule for f in report.findings if f.severity is Severity.ERROR]
    assert rules == ["structure/min-section-count", "structure/missing-chorus"]
    assert report.grade.structure == 65
    assert report.song.sections[0].kind is SectionKind.VERSE


def test_warnings_do_not_affect_validity():
    text = VALIDATION_BLUES.replace("tempo: 72", "tempo: 120")
    report = analyze(text)
    assert report.valid
    assert [f.rule for f in report.findings] == ["music/tempo-range"]
    assert report.grade.commerciality == 85


def test_parse_error_stops_pipeline():
    with pytest.raises(ParseError):
        analyze("title: x\nVERSE oops\nla\n")


def test_vocabulary_error_stops_pipeline():
    with pytest.raises(VocabularyError):
        analyze(VALIDATION_BLUES.replace("{rhyme: A, chord: E, A}", "{rhyem: A}"))


def test_analysis_is_deterministic():
    first = analyze(ONE_SECTION)
    second = analyze(ONE_SECTION)
    assert first.findings == second.findings
    assert first.grade == second.grade


def test_custom_rules_and_workers():
    report = analyze(ONE_SECTION, rules=RuleSet(), max_workers=4)
    assert report.valid
    assert report.findings == ()


def test_report_projection():
    data = analyze(ONE_SECTION).to_dict()
    assert set(data) == {"valid", "findings", "grade"}
    assert data["valid"] is False
    assert data["findings"][0] == {
        "severity": "error",
        "rule": "structure/min-section-count",
        "message": "Song has 1 section(s); at least 2 are required",
        "location": None,
    }
    assert set(data["grade"]) == {"overall", "breakdown", "feedback"}
    assert set(data["grade"]["breakdown"]) == {
        "structure",
        "prosody",
        "originality",
        "commerciality",
    }
