from .models import Span


class LyricsDslError(Exception):
    """Base exception for lyrics-dsl."""


class ParseError(LyricsDslError):
    """Raised on the first syntactic failure; the pipeline stops here."""

    def __init__(self, expected: str, found: str, span: Span):
        self.expected = expected
        self.found = found
        self.span = span
        super().__init__(
            f"line {span.line}, column {span.column}: expected {expected}, found {found}"
        )


class VocabularyError(ParseError):
    """Raised when a well-formed key falls outside its closed vocabulary."""


class RuleError(LyricsDslError):
    """Raised when a lint rule itself fails."""

    def __init__(self, rule: str, reason: str):
        self.rule = rule
        self.reason = reason
        super().__init__(f"Rule {rule} failed: {reason}")
