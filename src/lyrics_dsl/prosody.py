"""Prosody helpers: syllable estimates, rhyme schemes and meters.

Syllable counts come from a deterministic spelling heuristic, not from a
pronunciation dictionary.  It counts vowel groups and then applies the usual
English adjustments:

  1. silent final ``e`` (``love``, ``stone``) but not consonant + ``le``
     (``table``)
  2. silent ``-es`` after a non-sibilant (``loves``) and ``-ed`` after
     anything but ``t``/``d`` (``loved``, ``played``)
  3. hiatus pairs that the vowel-group count merges (``lion``, ``radio``)
     unless they sit in ``-tion``/``-cious``-style endings

Expect it to be off by one on a fair share of words.  That is acceptable
for the advisory rules that use it.
"""

import re

from .models import Section

WORD_RE = re.compile(r"[A-Za-z']+")
_VOWEL_GROUP_RE = re.compile(r"[aeiouy]+")
_HIATUS_RE = re.compile(r"(?<![cstgx])i[aou]")

# Meter name → exact stress pattern ("x" unstressed, "/" stressed).
METERS = {
    "iambic pentameter": "x/x/x/x/x/",
    "trochaic tetrameter": "/x/x/x/x",
    "anapestic trimeter": "xx/xx/xx/",
}


# ---------------------------------------------------------------------------
# Syllables
# ---------------------------------------------------------------------------


def estimate_syllables(word: str) -> int:
    """Estimate the number of syllables in *word*.

    Non-letters are ignored.  Returns 0 when nothing is left and at least 1
    otherwise, so ``"hmm"`` counts as one syllable.
    """
    w = re.sub(r"[^a-z]", "", word.lower())
    if not w:
        return 0

    # A leading "y" is a consonant: "you", "yes".
    count = len(_VOWEL_GROUP_RE.findall(w[1:] if w[0] == "y" else w))

    if count > 1:
        if w.endswith("e") and not re.search(r"[^aeiouy]le$", w):
            count -= 1
        elif w.endswith("es") and not re.search(r"(?:[sxzgc]|ch|sh)es$", w):
            count -= 1
        elif w.endswith("ed") and not re.search(r"[td]ed$", w):
            count -= 1

    count += len(_HIATUS_RE.findall(w))
    return max(count, 1)


def line_syllables(text: str) -> int:
    """Sum of :func:`estimate_syllables` over the words of *text*."""
    return sum(estimate_syllables(word) for word in WORD_RE.findall(text))


# ---------------------------------------------------------------------------
# Rhyme schemes
# ---------------------------------------------------------------------------


def normalize_scheme(letters) -> str:
    """Relabel rhyme letters in order of first appearance.

    ``"CDCD"`` → ``"ABAB"``; ``["A", "B", "C", "B"]`` → ``"ABCB"``.
    """
    mapping: dict[str, str] = {}
    out = []
    for letter in letters:
        if letter not in mapping:
            mapping[letter] = chr(ord("A") + len(mapping))
        out.append(mapping[letter])
    return "".join(out)


def extract_rhyme_scheme(section: Section) -> str:
    """Normalized scheme of the section's ``rhyme`` attributes.

    Lines without a ``rhyme`` attribute are skipped; returns ``""`` when no
    line has one.
    """
    return normalize_scheme(line.rhyme for line in section.lines if line.rhyme)


# ---------------------------------------------------------------------------
# Meter
# ---------------------------------------------------------------------------


def match_meter(pattern: str) -> str | None:
    """Return the name of the meter whose pattern equals *pattern* exactly."""
    for name, meter in METERS.items():
        if pattern == meter:
            return name
    return None
