"""Parse → Lint → Grade.

Usage::

    from lyrics_dsl.pipeline import analyze
    report = analyze(Path("song.lyr").read_text())
    print(report.valid, report.grade.overall)

A :class:`~lyrics_dsl.exceptions.ParseError` stops the pipeline before any
linting; otherwise linting and grading always run, so one report carries
every finding even for an invalid song.
"""

import logging

from .engine import lint
from .grader import grade
from .grammar import parse
from .lowering import lower
from .models import Report, Severity, Song
from .registry import RuleSet

logger = logging.getLogger(__name__)


def parse_song(text: str) -> Song:
    """Parse and lower *text*.  Raises ``ParseError`` on bad input."""
    return lower(parse(text))


def analyze(
    text: str,
    rules: RuleSet | None = None,
    max_workers: int | None = None,
    originality_baseline: int | None = None,
) -> Report:
    """Run the whole pipeline over *text* and return a :class:`Report`."""
    logger.info(f"Step 1: Parse ({len(text)} chars)")
    song = parse_song(text)
    logger.info(f"  {len(song.sections)} section(s), {len(song.metadata)} metadata key(s)")

    logger.info("Step 2: Lint")
    findings = lint(song, rules, max_workers=max_workers)

    logger.info("Step 3: Grade")
    result = grade(song, findings, originality_baseline=originality_baseline)
    logger.info(f"  Overall: {result.overall} {result.breakdown}")

    valid = not any(f.severity is Severity.ERROR for f in findings)
    return Report(valid=valid, findings=findings, grade=result, song=song)
