"""Lexer and grammar for the lyrics DSL.

Turns raw text into a parse tree of :class:`Node` objects.  Every node carries
a :class:`~lyrics_dsl.models.Span` (half-open byte offsets plus 1-based
line/column of its first character).

Grammar
-------

::

    song       := metadata section+ EOF
    metadata   := meta_entry*
    meta_entry := key ":" ( '"' chars '"' | bare text ) NEWLINE
    section    := KEYWORD ( "[" digits "]" )? attrs? NEWLINE line*
    attrs      := "{" ( key ":" value ( "," key ":" value )* )? "}"
    line       := TEXT line_attrs? NEWLINE
    line_attrs := "{" key ":" value ( "," key ":" value )* "}"

``KEYWORD`` is one of ``VERSE``, ``CHORUS``, ``BRIDGE``, ``PRE-CHORUS``,
``OUTRO`` and ``INTRO`` at the start of a line; only ``VERSE`` and ``CHORUS``
take a number.  Blank lines may appear between any two entries and the last
line may end at end of input instead of a newline.

Line attribute values follow a per-key grammar:

+------------+------------------------------------------+
| Key        | Value                                    |
+============+==========================================+
| ``rhyme``  | a single uppercase letter                |
+------------+------------------------------------------+
| ``stress`` | ``x`` (unstressed) and ``/`` (stressed)  |
+------------+------------------------------------------+
| ``chord``  | chord names separated by commas/spaces   |
+------------+------------------------------------------+
| ``timing`` | ``NUMBER:NUMBER``                        |
+------------+------------------------------------------+

Other keys are kept as ``raw`` nodes; rejecting them is the job of
:mod:`lyrics_dsl.lowering`, which knows the closed vocabularies.

Parsing stops at the first error with a
:class:`~lyrics_dsl.exceptions.ParseError`.  There is no recovery.

Node kinds
----------

``song`` → ``metadata``, ``section``*

``metadata`` → ``meta_entry``* → ``key``, value

``section`` → ``keyword``, ``number``?, ``attrs``?, ``line``*

``attrs`` → ``attr``* → ``key``, value

``line`` → ``text``, ``line_attrs``? → ``line_attr``* → ``key``, value

Value nodes are ``string`` (quoted, unescaped), ``number``, ``boolean``,
``text`` (bare), ``rhyme``, ``stress``, ``chords`` (→ ``chord``*),
``timing`` (→ ``number``, ``number``) and ``raw``.
"""

import re
from bisect import bisect_right
from dataclasses import dataclass, replace

from .exceptions import ParseError
from .models import Span

# ---------------------------------------------------------------------------
# Regexes
# ---------------------------------------------------------------------------

# Section keyword at the current position.  The lookahead keeps "VERSES" or
# "CHORUS-LINE" from being read as a keyword.
SECTION_KEYWORD_RE = re.compile(r"(PRE-CHORUS|VERSE|CHORUS|BRIDGE|OUTRO|INTRO)(?![\w-])")
NUMBERED_KEYWORDS = {"VERSE", "CHORUS"}

KEY_RE = re.compile(r"[A-Za-z_][\w-]*")
NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
DIGITS_RE = re.compile(r"\d+")
HSPACE_RE = re.compile(r"[ \t\r]*")
BLANK_LINE_RE = re.compile(r"[ \t\r]*(?:\n|\Z)")

BARE_META_VALUE_RE = re.compile(r"[^\n]*")
BARE_ATTR_VALUE_RE = re.compile(r"[^,}\n]*")
LYRIC_TEXT_RE = re.compile(r"[^{\n]*")

# A line attribute value runs up to "}" or to a comma that opens the next
# "key:" pair, so chord lists can themselves be comma-separated.
RAW_LINE_VALUE_RE = re.compile(r"(?:(?!,[ \t]*[A-Za-z_][\w-]*[ \t]*:)[^}\n])*")

# Chord name: C, Am, Am7, Cmaj7, Bbsus4, F#dim, G/B
CHORD_NAME_RE = re.compile(r"[A-G][#b]?(?:m(?:aj)?|aug|dim|sus|add)?\d*(?:/[A-G][#b]?)?")
CHORD_TOKEN_RE = re.compile(r"[^,\s]+")
RHYME_RE = re.compile(r"[A-Z]")
STRESS_RE = re.compile(r"[x/]+")
TIMING_RE = re.compile(r"(\d+(?:\.\d+)?)[ \t]*:[ \t]*(\d+(?:\.\d+)?)")

# Used to describe what was found when reporting an error.
_TOKEN_RE = re.compile(r"\S{1,20}|[^\n]")


# ---------------------------------------------------------------------------
# Parse tree
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Node:
    """A parse tree node."""

    kind: str
    span: Span
    text: str = ""
    children: tuple["Node", ...] = ()

    def child(self, kind: str) -> "Node | None":
        for node in self.children:
            if node.kind == kind:
                return node
        return None

    def children_of(self, kind: str) -> list["Node"]:
        return [node for node in self.children if node.kind == kind]


def parse(text: str) -> Node:
    """Parse *text* into a ``song`` node.

    Raises:
        ParseError: on the first syntax error.
    """
    return _Parser(text).parse_song()


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class _Parser:
    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        self._line_starts = [0] + [m.end() for m in re.finditer("\n", text)]
        self._ascii = text.isascii()

    # --- positions ---------------------------------------------------------

    def _byte(self, index: int) -> int:
        if self._ascii:
            return index
        return len(self.text[:index].encode("utf-8"))

    def span(self, start: int, end: int) -> Span:
        row = bisect_right(self._line_starts, start) - 1
        return Span(
            start=self._byte(start),
            end=self._byte(end),
            line=row + 1,
            column=start - self._line_starts[row] + 1,
        )

    def _node(self, kind: str, start: int, text: str = "", children=()) -> Node:
        return Node(kind, self.span(start, self.pos), text, tuple(children))

    # --- low-level scanning ------------------------------------------------

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _peek(self) -> str:
        return self.text[self.pos:self.pos + 1]

    def _at_section(self) -> bool:
        return SECTION_KEYWORD_RE.match(self.text, self.pos) is not None

    def _skip_hspace(self) -> None:
        self.pos = HSPACE_RE.match(self.text, self.pos).end()

    def _skip_blank_lines(self) -> None:
        while not self._at_end():
            m = BLANK_LINE_RE.match(self.text, self.pos)
            if m is None:
                return
            self.pos = m.end()

    def _expect(self, regex: re.Pattern, expected: str) -> re.Match:
        m = regex.match(self.text, self.pos)
        if m is None or not m.group():
            raise self._error(expected)
        self.pos = m.end()
        return m

    def _expect_char(self, char: str) -> None:
        if self._peek() != char:
            raise self._error(f"'{char}'")
        self.pos += 1

    def _newline(self, expected: str = "newline") -> None:
        if self._at_end():
            return
        if self._peek() != "\n":
            raise self._error(expected)
        self.pos += 1

    def _error(self, expected: str) -> ParseError:
        if self._at_end():
            return ParseError(expected, "end of input", self.span(self.pos, self.pos))
        if self._peek() == "\n":
            return ParseError(expected, "newline", self.span(self.pos, self.pos + 1))
        token = _TOKEN_RE.match(self.text, self.pos).group()
        return ParseError(expected, repr(token), self.span(self.pos, self.pos + len(token)))

    def _value_error(self, expected: str, raw: str, start: int) -> ParseError:
        return ParseError(expected, repr(raw), self.span(start, start + len(raw)))

    # --- song --------------------------------------------------------------

    def parse_song(self) -> Node:
        self._skip_blank_lines()
        meta_start = meta_end = self.pos
        entries = []
        while not self._at_end() and not self._at_section():
            entries.append(self._meta_entry())
            meta_end = self.pos
            self._skip_blank_lines()
        metadata = Node("metadata", self.span(meta_start, meta_end), children=tuple(entries))

        if self._at_end():
            raise self._error("section keyword")

        sections = []
        while not self._at_end():
            sections.append(self._section())

        return Node("song", self.span(0, len(self.text)), children=(metadata, *sections))

    # --- metadata ----------------------------------------------------------

    def _meta_entry(self) -> Node:
        start = self.pos
        key = self._key("metadata entry or section keyword")
        self._skip_hspace()
        self._expect_char(":")
        self._skip_hspace()
        value = self._meta_value()
        end = self.pos
        self._skip_hspace()
        self._newline()
        return Node("meta_entry", self.span(start, end), children=(key, value))

    def _meta_value(self) -> Node:
        if self._peek() == '"':
            return self._quoted()
        start = self.pos
        raw = BARE_META_VALUE_RE.match(self.text, self.pos).group().rstrip()
        if not raw:
            raise self._error("metadata value")
        self.pos += len(raw)
        kind = "number" if NUMBER_RE.fullmatch(raw) else "text"
        return self._node(kind, start, raw)

    # --- shared pieces -----------------------------------------------------

    def _key(self, expected: str) -> Node:
        start = self.pos
        m = self._expect(KEY_RE, expected)
        return self._node("key", start, m.group())

    def _quoted(self) -> Node:
        start = self.pos
        self.pos += 1  # opening quote
        chars = []
        while True:
            ch = self._peek()
            if ch in ("", "\n"):
                found = "end of input" if ch == "" else "newline"
                raise ParseError("closing '\"'", found, self.span(start, self.pos))
            self.pos += 1
            if ch == '"':
                break
            if ch == "\\" and self._peek() in ('"', "\\"):
                ch = self._peek()
                self.pos += 1
            chars.append(ch)
        return self._node("string", start, "".join(chars))

    # --- sections ----------------------------------------------------------

    def _section(self) -> Node:
        start = self.pos
        m = self._expect(SECTION_KEYWORD_RE, "section keyword")
        keyword = m.group()
        children = [self._node("keyword", start, keyword)]

        allowed = ["'{'", "newline"]
        if keyword in NUMBERED_KEYWORDS:
            if self._peek() == "[":
                children.append(self._section_number())
            else:
                allowed.insert(0, "'['")
        self._skip_hspace()
        if self._peek() == "{":
            children.append(self._attrs())
            allowed = ["newline"]
        header_end = self.pos
        self._skip_hspace()
        self._newline(_describe(allowed))

        while True:
            self._skip_blank_lines()
            if self._at_end() or self._at_section():
                break
            children.append(self._line())

        span = self.span(start, header_end)
        if children[-1].kind == "line":
            span = replace(span, end=children[-1].span.end)
        return Node("section", span, keyword, tuple(children))

    def _section_number(self) -> Node:
        start = self.pos
        self.pos += 1  # "["
        self._skip_hspace()
        m = self._expect(DIGITS_RE, "section number")
        self._skip_hspace()
        self._expect_char("]")
        return self._node("number", start, m.group())

    def _attrs(self) -> Node:
        start = self.pos
        self.pos += 1  # "{"
        self._skip_hspace()
        if self._peek() == "}":
            self.pos += 1
            return self._node("attrs", start)

        attrs = []
        while True:
            self._skip_hspace()
            attr_start = self.pos
            key = self._key("attribute key")
            self._skip_hspace()
            self._expect_char(":")
            self._skip_hspace()
            value = self._attr_value()
            attrs.append(self._node("attr", attr_start, children=(key, value)))
            self._skip_hspace()
            if self._peek() == ",":
                self.pos += 1
                continue
            if self._peek() == "}":
                self.pos += 1
                return self._node("attrs", start, children=attrs)
            raise self._error("',' or '}'")

    def _attr_value(self) -> Node:
        if self._peek() == '"':
            return self._quoted()
        start = self.pos
        raw = BARE_ATTR_VALUE_RE.match(self.text, self.pos).group().rstrip()
        if not raw:
            raise self._error("attribute value")
        self.pos += len(raw)
        if NUMBER_RE.fullmatch(raw):
            kind = "number"
        elif raw in ("true", "false"):
            kind = "boolean"
        else:
            kind = "text"
        return self._node(kind, start, raw)

    # --- lines -------------------------------------------------------------

    def _line(self) -> Node:
        self._skip_hspace()
        start = self.pos
        text = LYRIC_TEXT_RE.match(self.text, self.pos).group().rstrip()
        if not text:
            raise self._error("lyric text")
        self.pos += len(text)
        children = [self._node("text", start, text)]
        self._skip_hspace()
        if self._peek() == "{":
            children.append(self._line_attrs())
        end = self.pos
        self._skip_hspace()
        self._newline()
        return Node("line", self.span(start, end), text, tuple(children))

    def _line_attrs(self) -> Node:
        start = self.pos
        self.pos += 1  # "{"
        attrs = []
        while True:
            self._skip_hspace()
            attr_start = self.pos
            key = self._key("line attribute key")
            self._skip_hspace()
            self._expect_char(":")
            self._skip_hspace()
            value = self._line_value(key.text)
            attrs.append(self._node("line_attr", attr_start, children=(key, value)))
            self._skip_hspace()
            if self._peek() == ",":
                self.pos += 1
                continue
            if self._peek() == "}":
                self.pos += 1
                return self._node("line_attrs", start, children=attrs)
            raise self._error("',' or '}'")

    def _line_value(self, key: str) -> Node:
        start = self.pos
        raw = RAW_LINE_VALUE_RE.match(self.text, self.pos).group().rstrip()
        if not raw:
            raise self._error(f"value for '{key}'")

        if key == "rhyme":
            if not RHYME_RE.fullmatch(raw):
                raise self._value_error("a single uppercase rhyme letter", raw, start)
            node_kind, children = "rhyme", ()
        elif key == "stress":
            if not STRESS_RE.fullmatch(raw):
                raise self._value_error("a stress pattern of 'x' and '/'", raw, start)
            node_kind, children = "stress", ()
        elif key == "timing":
            m = TIMING_RE.fullmatch(raw)
            if m is None:
                raise self._value_error("timing as NUMBER:NUMBER", raw, start)
            node_kind = "timing"
            children = tuple(
                Node("number", self.span(start + m.start(i), start + m.end(i)), m.group(i))
                for i in (1, 2)
            )
        elif key == "chord":
            node_kind, children = "chords", self._chords(raw, start)
        else:
            node_kind, children = "raw", ()

        self.pos += len(raw)
        return self._node(node_kind, start, raw, children)

    def _chords(self, raw: str, start: int) -> tuple[Node, ...]:
        chords = []
        for m in CHORD_TOKEN_RE.finditer(raw):
            token_start = start + m.start()
            if not CHORD_NAME_RE.fullmatch(m.group()):
                raise self._value_error("a chord name", m.group(), token_start)
            chords.append(Node("chord", self.span(token_start, start + m.end()), m.group()))
        return tuple(chords)


def _describe(options: list[str]) -> str:
    if len(options) == 1:
        return options[0]
    return ", ".join(options[:-1]) + " or " + options[-1]
