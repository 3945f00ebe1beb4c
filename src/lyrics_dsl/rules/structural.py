"""Structural rules: the shape of the song.

Every structural violation is an ``error``; one of them is enough to make
the song invalid.

+-----------------+------------+-----------------+
| Section         | Lines      | Max occurrences |
+=================+============+=================+
| Verse           | 4-8        | 5               |
+-----------------+------------+-----------------+
| Chorus          | 2-6        | 5               |
+-----------------+------------+-----------------+
| Bridge          | 2-8        | 1               |
+-----------------+------------+-----------------+
| Pre-Chorus      | 2-4        | 3               |
+-----------------+------------+-----------------+

Intro and Outro are unconstrained.
"""

from ..models import Finding, SectionKind, Severity, Song
from .base import Rule

MIN_SECTIONS = 2
MAX_SECTIONS = 20

# kind → (min lines, max lines)
LINE_BOUNDS = {
    SectionKind.VERSE: (4, 8),
    SectionKind.CHORUS: (2, 6),
    SectionKind.BRIDGE: (2, 8),
    SectionKind.PRE_CHORUS: (2, 4),
}

MAX_OCCURRENCES = {
    SectionKind.VERSE: 5,
    SectionKind.CHORUS: 5,
    SectionKind.BRIDGE: 1,
    SectionKind.PRE_CHORUS: 3,
}


class MetadataRule(Rule):
    """The song must open with a metadata header."""

    layer = "structure"

    def check(self, song: Song) -> list[Finding]:
        if song.metadata:
            return []
        return [self.finding(Severity.ERROR, "missing-metadata", "Song has no metadata header")]


class SectionCountRule(Rule):
    layer = "structure"

    def check(self, song: Song) -> list[Finding]:
        count = len(song.sections)
        if count < MIN_SECTIONS:
            return [self.finding(
                Severity.ERROR,
                "min-section-count",
                f"Song has {count} section(s); at least {MIN_SECTIONS} are required",
            )]
        if count > MAX_SECTIONS:
            return [self.finding(
                Severity.ERROR,
                "max-section-count",
                f"Song has {count} sections; at most {MAX_SECTIONS} are allowed",
            )]
        return []


class RequiredSectionsRule(Rule):
    """At least one verse and one chorus."""

    layer = "structure"

    def check(self, song: Song) -> list[Finding]:
        findings = []
        kinds = {section.kind for section in song.sections}
        if SectionKind.VERSE not in kinds:
            findings.append(self.finding(Severity.ERROR, "missing-verse", "Song has no verse"))
        if SectionKind.CHORUS not in kinds:
            findings.append(self.finding(Severity.ERROR, "missing-chorus", "Song has no chorus"))
        return findings


class SectionLengthRule(Rule):
    layer = "structure"

    def check(self, song: Song) -> list[Finding]:
        findings = []
        for index, section in enumerate(song.sections):
            bounds = LINE_BOUNDS.get(section.kind)
            if bounds is None:
                continue
            low, high = bounds
            count = len(section.lines)
            if count < low:
                findings.append(self.finding(
                    Severity.ERROR,
                    "section-too-short",
                    f"{section.label} has {count} line(s); needs at least {low}",
                    section=index,
                    song=song,
                ))
            elif count > high:
                findings.append(self.finding(
                    Severity.ERROR,
                    "section-too-long",
                    f"{section.label} has {count} lines; allows at most {high}",
                    section=index,
                    song=song,
                ))
        return findings


class SectionOccurrenceRule(Rule):
    """Cap how often each section kind may appear.

    Reported once per kind, at the first occurrence past the limit.
    """

    layer = "structure"

    def check(self, song: Song) -> list[Finding]:
        findings = []
        for kind, limit in MAX_OCCURRENCES.items():
            occurrences = song.sections_of(kind)
            if len(occurrences) <= limit:
                continue
            first_extra = occurrences[limit][0]
            findings.append(self.finding(
                Severity.ERROR,
                "too-many-occurrences",
                f"{kind.label} appears {len(occurrences)} times; at most {limit} allowed",
                section=first_extra,
                song=song,
            ))
        return findings
