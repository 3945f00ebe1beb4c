"""Prosodic rules.

Prosody is advisory: these rules emit ``warning`` or ``info`` findings and
never make a song invalid.  Syllable counts are estimates from
:func:`lyrics_dsl.prosody.line_syllables`.
"""

from ..models import Finding, SectionKind, Severity, Song
from ..prosody import extract_rhyme_scheme, line_syllables, match_meter, METERS
from .base import Rule

# kind → (syllable ceiling, allowed variance above it)
SYLLABLE_LIMITS = {
    SectionKind.CHORUS: (8, 1),
    SectionKind.VERSE: (12, 2),
}

ACCEPTED_SCHEMES = {
    SectionKind.VERSE: ("AABB", "ABAB", "ABCB", "AAAA"),
    SectionKind.CHORUS: ("AABB", "AAAA", "ABAB"),
}


class SyllableVarianceRule(Rule):
    """Flag lines longer than the section kind's ceiling plus variance.

    A verse line of 14 syllables passes (12 + 2); 15 is flagged.
    """

    layer = "prosody"

    def check(self, song: Song) -> list[Finding]:
        findings = []
        for s_index, section in enumerate(song.sections):
            limits = SYLLABLE_LIMITS.get(section.kind)
            if limits is None:
                continue
            ceiling, variance = limits
            for l_index, line in enumerate(section.lines):
                count = line_syllables(line.text)
                if count > ceiling + variance:
                    findings.append(self.finding(
                        Severity.WARNING,
                        "syllable-variance",
                        f"{section.label} line has ~{count} syllables; "
                        f"aim for {ceiling} (at most {ceiling + variance})",
                        section=s_index,
                        line=l_index,
                        song=song,
                    ))
        return findings


class RhymeSchemeRule(Rule):
    layer = "prosody"

    def check(self, song: Song) -> list[Finding]:
        findings = []
        for index, section in enumerate(song.sections):
            accepted = ACCEPTED_SCHEMES.get(section.kind)
            if accepted is None:
                continue
            scheme = extract_rhyme_scheme(section)
            if scheme and scheme not in accepted:
                findings.append(self.finding(
                    Severity.WARNING,
                    "rhyme-scheme",
                    f"{section.label} rhymes {scheme}; expected one of {', '.join(accepted)}",
                    section=index,
                    song=song,
                ))
        return findings


class MeterRule(Rule):
    """Note stress patterns that match none of the named meters."""

    layer = "prosody"

    def check(self, song: Song) -> list[Finding]:
        findings = []
        for s_index, section in enumerate(song.sections):
            for l_index, line in enumerate(section.lines):
                if line.stress is None or match_meter(line.stress) is not None:
                    continue
                findings.append(self.finding(
                    Severity.INFO,
                    "meter",
                    f"Stress pattern {line.stress} matches no known meter "
                    f"({', '.join(METERS)})",
                    section=s_index,
                    line=l_index,
                    song=song,
                ))
        return findings
