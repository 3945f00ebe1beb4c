from .rules.base import Rule
from .rules.musical import TempoRangeRule
from .rules.prosodic import MeterRule, RhymeSchemeRule, SyllableVarianceRule
from .rules.structural import (
    MetadataRule,
    RequiredSectionsRule,
    SectionCountRule,
    SectionLengthRule,
    SectionOccurrenceRule,
)

# Registration order is the order findings are reported in.
_BUILTIN_RULES: list[type[Rule]] = [
    MetadataRule,
    SectionCountRule,
    RequiredSectionsRule,
    SectionLengthRule,
    SectionOccurrenceRule,
    SyllableVarianceRule,
    RhymeSchemeRule,
    MeterRule,
    TempoRangeRule,
]


class RuleSet:
    """An ordered collection of rules, passed explicitly to the linter.

    There is no global registry: build one set per configuration, so
    pipelines with different rules can run side by side.
    """

    def __init__(self, rules=()):
        self._rules: list[Rule] = list(rules)

    def register(self, rule: Rule) -> "RuleSet":
        """Append *rule* and return the set, so calls can be chained."""
        self._rules.append(rule)
        return self

    def __iter__(self):
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleSet({[rule.name for rule in self._rules]!r})"


def default_rules() -> RuleSet:
    """Return a fresh :class:`RuleSet` holding every built-in rule."""
    return RuleSet(cls() for cls in _BUILTIN_RULES)
