"""Musical rules.

Chord names are already checked by the grammar.  Harmonic checks
(progressions that resolve, parallel fifths) need real harmonic analysis
and are not implemented.
"""

from ..models import Finding, Severity, Song
from .base import Rule

# genre → inclusive BPM range
GENRE_TEMPOS = {
    "ballad": (60, 80),
    "pop": (100, 130),
    "dance": (120, 140),
}


class TempoRangeRule(Rule):
    """Check ``tempo`` against the range for the song's ``genre``.

    Songs without a tempo, or in a genre with no known range, are skipped.
    """

    layer = "music"

    def check(self, song: Song) -> list[Finding]:
        tempo = song.metadata.get("tempo")
        if tempo is None:
            return []
        if isinstance(tempo, str):
            return [self.finding(
                Severity.WARNING, "tempo-invalid", f"Tempo {tempo!r} is not a number"
            )]

        genre = str(song.metadata.get("genre", "")).strip().lower()
        if genre not in GENRE_TEMPOS:
            return []
        low, high = GENRE_TEMPOS[genre]
        if low <= tempo <= high:
            return []
        return [self.finding(
            Severity.WARNING,
            "tempo-range",
            f"Tempo {tempo} BPM is outside the {genre} range of {low}-{high} BPM",
        )]
