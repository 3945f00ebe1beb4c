from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable

from ..models import Finding, Location, Severity, Song


class Rule(ABC):
    """Abstract base class for all lint rules.

    A rule is a pure function of an immutable :class:`~lyrics_dsl.models.Song`:
    it must not keep state between calls and never sees another rule's
    findings.  Rule ids take the form ``"<layer>/<name>"``; the grader uses
    the layer to decide which sub-score a finding counts against.
    """

    layer: str = ""

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def check(self, song: Song) -> list[Finding]:
        """Return the findings for *song*, in the order they were found."""

    def __call__(self, song: Song) -> list[Finding]:
        return self.check(song)

    def finding(
        self,
        severity: Severity,
        name: str,
        message: str,
        section: int | None = None,
        line: int | None = None,
        song: Song | None = None,
    ) -> Finding:
        """Build a finding for ``<layer>/<name>``.

        When *song* is given, the span of the referenced section or line is
        attached to the location.
        """
        span = None
        if song is not None and section is not None:
            target = song.sections[section]
            span = target.span if line is None else target.lines[line].span
        location = None
        if section is not None or line is not None:
            location = Location(section=section, line=line, span=span)
        return Finding(severity, f"{self.layer}/{name}", message, location)


class FunctionRule(Rule):
    """Wrap a plain ``song -> findings`` function as a :class:`Rule`.

    Custom rules that don't need the helpers above can be registered this
    way::

        def no_shouting(song):
            return [Finding(Severity.INFO, "style/shouting", "...")
                    for s in song.sections for l in s.lines if l.text.isupper()]

        rules = default_rules().register(FunctionRule("style", no_shouting))
    """

    def __init__(self, layer: str, func: Callable[[Song], Iterable[Finding]]):
        self.layer = layer
        self.func = func

    @property
    def name(self) -> str:
        return getattr(self.func, "__name__", repr(self.func))

    def check(self, song: Song) -> list[Finding]:
        return list(self.func(song))
