"""Turn a song and its findings into a :class:`~lyrics_dsl.models.Grade`.

Four sub-scores start at 100, lose points for each penalty, and are clamped
to 0..100:

+-----------------+-----------------------------------------------------+
| Sub-score       | Penalties                                           |
+=================+=====================================================+
| structure       | each structural ``error`` (per-rule points)         |
+-----------------+-----------------------------------------------------+
| prosody         | each prosodic ``warning`` / ``info``                |
+-----------------+-----------------------------------------------------+
| originality     | none; fixed baseline until there is a real signal   |
+-----------------+-----------------------------------------------------+
| commerciality   | tempo warnings, uneven line lengths, no chorus hook |
+-----------------+-----------------------------------------------------+

``overall`` is the weighted mean (25% each), rounded half up.  Feedback
holds one sentence per penalty category that fired, ordered structure,
prosody, originality, commerciality, then by first occurrence.
"""

import math
import statistics
from collections import Counter

from .config import settings
from .models import Finding, Grade, SectionKind, Severity, Song
from .prosody import line_syllables

STRUCTURE_PENALTIES = {
    "structure/missing-metadata": 10,
    "structure/min-section-count": 15,
    "structure/max-section-count": 15,
    "structure/missing-verse": 20,
    "structure/missing-chorus": 20,
    "structure/section-too-short": 10,
    "structure/section-too-long": 10,
    "structure/too-many-occurrences": 10,
}
DEFAULT_STRUCTURE_PENALTY = 10

PROSODY_PENALTIES = {
    "prosody/syllable-variance": 3,
    "prosody/rhyme-scheme": 5,
    "prosody/meter": 1,
}
DEFAULT_PROSODY_PENALTY = 2

COMMERCIALITY_PENALTIES = {
    "music/tempo-range": 15,
    "music/tempo-invalid": 10,
}
DEFAULT_MUSIC_PENALTY = 5

LINE_LENGTH_CV_THRESHOLD = 0.25
LINE_LENGTH_MAX_PENALTY = 20
MISSING_HOOK_PENALTY = 10

WEIGHTS = {
    "structure": 0.25,
    "prosody": 0.25,
    "originality": 0.25,
    "commerciality": 0.25,
}

ADVICE = {
    "structure/missing-metadata": "Add a metadata header (title, artist, tempo...) before the first section",
    "structure/min-section-count": "Add sections; a song needs at least two",
    "structure/max-section-count": "Trim the arrangement to twenty sections or fewer",
    "structure/missing-verse": "Add at least one verse",
    "structure/missing-chorus": "Add a chorus",
    "structure/section-too-short": "Lengthen sections that fall short of their minimum line count",
    "structure/section-too-long": "Shorten sections that run past their maximum line count",
    "structure/too-many-occurrences": "Repeat section types less often",
    "prosody/syllable-variance": "Tighten lines that run long on syllables",
    "prosody/rhyme-scheme": "Use a conventional rhyme scheme such as AABB or ABAB",
    "prosody/meter": "Consider stress patterns that follow a named meter",
    "music/tempo-range": "Move the tempo into the usual range for the genre",
    "music/tempo-invalid": "Give the tempo in beats per minute",
    "commerciality/line-length": "Even out line lengths so the song is easier to sing",
    "commerciality/hook": "Repeat a chorus line across choruses to build a hook",
}


class _Tally:
    """Penalties for one sub-score, keyed by category in first-seen order."""

    def __init__(self, name: str):
        self.name = name
        self.items: dict[str, list[int]] = {}  # category → [count, points]

    def add(self, category: str, points: int) -> None:
        entry = self.items.setdefault(category, [0, 0])
        entry[0] += 1
        entry[1] += points

    @property
    def score(self) -> int:
        return _clamp(100 - sum(points for _, points in self.items.values()))

    def feedback(self) -> list[str]:
        sentences = []
        for category, (count, points) in self.items.items():
            advice = ADVICE.get(category, f"Address {category} findings")
            issues = "1 issue" if count == 1 else f"{count} issues"
            sentences.append(f"{advice} ({issues}, -{points} {self.name}).")
        return sentences


def grade(song: Song, findings, originality_baseline: int | None = None) -> Grade:
    """Grade *song* from its final, complete list of *findings*.

    Pure: the same song and findings always give the same grade.
    """
    baseline = settings.originality_baseline if originality_baseline is None else originality_baseline

    structure = _Tally("structure")
    prosody = _Tally("prosody")
    commerciality = _Tally("commerciality")

    for finding in findings:
        _charge(finding, structure, prosody, commerciality)

    line_penalty = line_length_penalty(song)
    if line_penalty:
        commerciality.add("commerciality/line-length", line_penalty)
    if not has_hook(song):
        commerciality.add("commerciality/hook", MISSING_HOOK_PENALTY)

    scores = {
        "structure": structure.score,
        "prosody": prosody.score,
        "originality": _clamp(baseline),
        "commerciality": commerciality.score,
    }
    overall = _round_half_up(sum(scores[name] * weight for name, weight in WEIGHTS.items()))

    return Grade(
        overall=overall,
        feedback=(*structure.feedback(), *prosody.feedback(), *commerciality.feedback()),
        **scores,
    )


def _charge(finding: Finding, structure: _Tally, prosody: _Tally, commerciality: _Tally) -> None:
    if finding.layer == "structure":
        if finding.severity is Severity.ERROR:
            structure.add(
                finding.rule, STRUCTURE_PENALTIES.get(finding.rule, DEFAULT_STRUCTURE_PENALTY)
            )
    elif finding.layer == "prosody":
        if finding.severity in (Severity.WARNING, Severity.INFO):
            prosody.add(finding.rule, PROSODY_PENALTIES.get(finding.rule, DEFAULT_PROSODY_PENALTY))
    elif finding.layer == "music":
        if finding.severity is Severity.WARNING:
            commerciality.add(
                finding.rule, COMMERCIALITY_PENALTIES.get(finding.rule, DEFAULT_MUSIC_PENALTY)
            )


# ---------------------------------------------------------------------------
# Commerciality signals
# ---------------------------------------------------------------------------


def line_length_penalty(song: Song) -> int:
    """Penalty for uneven line lengths.

    Uses the coefficient of variation of per-line syllable counts; anything
    up to 0.25 is free, beyond that one point per 0.01, capped at 20.
    """
    counts = [line_syllables(line.text) for section in song.sections for line in section.lines]
    counts = [c for c in counts if c > 0]
    if len(counts) < 2:
        return 0
    cv = statistics.pstdev(counts) / statistics.fmean(counts)
    if cv <= LINE_LENGTH_CV_THRESHOLD:
        return 0
    return min(LINE_LENGTH_MAX_PENALTY, _round_half_up((cv - LINE_LENGTH_CV_THRESHOLD) * 100))


def has_hook(song: Song) -> bool:
    """True if some chorus line recurs in at least two chorus occurrences.

    Lines are compared ignoring case and runs of whitespace.
    """
    choruses = [section for _, section in song.sections_of(SectionKind.CHORUS)]
    if len(choruses) < 2:
        return False
    seen: Counter = Counter()
    for chorus in choruses:
        seen.update({" ".join(line.text.lower().split()) for line in chorus.lines})
    return any(n >= 2 for n in seen.values())


def _clamp(score: float) -> int:
    return int(max(0, min(100, score)))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
