from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Span:
    """Source location of a grammar node.

    ``start`` and ``end`` are half-open UTF-8 byte offsets into the original
    text; ``line`` and ``column`` are 1-based and point at ``start``.
    """

    start: int
    end: int
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.line}:{self.column}"


class SectionKind(Enum):
    """The closed set of section kinds, valued by their DSL keyword."""

    VERSE = "VERSE"
    CHORUS = "CHORUS"
    BRIDGE = "BRIDGE"
    PRE_CHORUS = "PRE-CHORUS"
    OUTRO = "OUTRO"
    INTRO = "INTRO"

    @property
    def label(self) -> str:
        return "-".join(part.capitalize() for part in self.value.split("-"))

    @property
    def numbered(self) -> bool:
        return self in (SectionKind.VERSE, SectionKind.CHORUS)


@dataclass(frozen=True)
class Line:
    """A single lyric line with its optional line attributes.

    Example source: ``Hello darkness {rhyme: A, stress: x/x/, chord: Am, G}``.
    ``attributes`` only ever holds ``rhyme``, ``stress``, ``chord`` and
    ``timing``.
    """

    text: str
    attributes: dict[str, Any] = field(default_factory=dict)
    span: Span | None = None

    @property
    def rhyme(self) -> str | None:
        return self.attributes.get("rhyme")

    @property
    def stress(self) -> str | None:
        return self.attributes.get("stress")

    @property
    def chords(self) -> tuple[str, ...]:
        return self.attributes.get("chord", ())

    @property
    def timing(self) -> tuple[int | float, int | float] | None:
        return self.attributes.get("timing")


@dataclass(frozen=True)
class Section:
    """A verse, chorus, bridge, etc."""

    kind: SectionKind
    lines: tuple[Line, ...] = ()
    number: int | None = None  # only VERSE / CHORUS carry one
    attributes: dict[str, str | int | float | bool] = field(default_factory=dict)
    span: Span | None = None

    def __post_init__(self):
        object.__setattr__(self, "lines", tuple(self.lines))

    @property
    def label(self) -> str:
        if self.number is None:
            return self.kind.label
        return f"{self.kind.label} {self.number}"


@dataclass(frozen=True)
class Song:
    """Root of the AST. Built once from text and never mutated."""

    metadata: dict[str, str | int | float] = field(default_factory=dict)
    sections: tuple[Section, ...] = ()
    span: Span | None = None

    def __post_init__(self):
        object.__setattr__(self, "sections", tuple(self.sections))

    @property
    def title(self) -> str | None:
        value = self.metadata.get("title")
        return None if value is None else str(value)

    def sections_of(self, kind: SectionKind) -> list[tuple[int, Section]]:
        """Return ``(index, section)`` pairs for every section of *kind*."""
        return [(i, s) for i, s in enumerate(self.sections) if s.kind is kind]


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class Location:
    """Stable path to the part of a song a finding is about.

    Indices are 0-based; ``str()`` renders them 1-based for people.
    """

    section: int | None = None
    line: int | None = None
    span: Span | None = None

    def __str__(self) -> str:
        parts = []
        if self.section is not None:
            parts.append(f"section {self.section + 1}")
        if self.line is not None:
            parts.append(f"line {self.line + 1}")
        return ", ".join(parts) or "song"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"section": self.section, "line": self.line}
        if self.span is not None:
            out["span"] = {
                "start": self.span.start,
                "end": self.span.end,
                "line": self.span.line,
                "column": self.span.column,
            }
        return out


@dataclass(frozen=True)
class Finding:
    """One result of evaluating a rule."""

    severity: Severity
    rule: str  # "<layer>/<name>", e.g. "structure/min-section-count"
    message: str
    location: Location | None = None

    @property
    def layer(self) -> str:
        return self.rule.split("/", 1)[0]

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "rule": self.rule,
            "message": self.message,
            "location": self.location.to_dict() if self.location else None,
        }


@dataclass(frozen=True)
class Grade:
    overall: int
    structure: int
    prosody: int
    originality: int
    commerciality: int
    feedback: tuple[str, ...] = ()

    @property
    def breakdown(self) -> dict[str, int]:
        return {
            "structure": self.structure,
            "prosody": self.prosody,
            "originality": self.originality,
            "commerciality": self.commerciality,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "overall": self.overall,
            "breakdown": self.breakdown,
            "feedback": list(self.feedback),
        }


@dataclass(frozen=True)
class Report:
    """Everything one analysis run produces."""

    valid: bool
    findings: tuple[Finding, ...]
    grade: Grade
    song: Song

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "findings": [f.to_dict() for f in self.findings],
            "grade": self.grade.to_dict(),
        }
