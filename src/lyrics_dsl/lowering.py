"""Lower a parse tree from :mod:`lyrics_dsl.grammar` into the typed AST.

The grammar only checks shape.  This module owns the closed vocabularies:
metadata keys and line attribute keys must come from fixed sets, and no key
may repeat within its map.  Violations raise
:class:`~lyrics_dsl.exceptions.VocabularyError`, which is a ``ParseError``,
because a misspelt ``rhyem`` is a structural problem rather than advice.
"""

from .exceptions import VocabularyError
from .grammar import Node
from .models import Line, Section, SectionKind, Song

METADATA_KEYS = (
    "title",
    "artist",
    "tempo",
    "key",
    "time_sig",
    "genre",
    "lang",
    "writers",
    "duration",
)

LINE_ATTRIBUTE_KEYS = ("rhyme", "stress", "chord", "timing")


def lower(tree: Node) -> Song:
    """Build a :class:`~lyrics_dsl.models.Song` from a ``song`` node."""
    metadata = _lower_metadata(tree.child("metadata"))
    sections = [_lower_section(node) for node in tree.children_of("section")]
    return Song(metadata=metadata, sections=sections, span=tree.span)


def _lower_metadata(node: Node | None) -> dict:
    metadata: dict = {}
    if node is None:
        return metadata
    for entry in node.children_of("meta_entry"):
        key_node, value_node = entry.children
        key = key_node.text
        if key not in METADATA_KEYS:
            raise VocabularyError(
                f"a metadata key ({', '.join(METADATA_KEYS)})", repr(key), key_node.span
            )
        if key in metadata:
            raise VocabularyError("a unique metadata key", f"duplicate {key!r}", key_node.span)
        metadata[key] = _scalar(value_node)
    return metadata


def _lower_section(node: Node) -> Section:
    kind = SectionKind(node.child("keyword").text)
    number_node = node.child("number")
    attributes: dict = {}
    attrs_node = node.child("attrs")
    if attrs_node is not None:
        for attr in attrs_node.children_of("attr"):
            key_node, value_node = attr.children
            if key_node.text in attributes:
                raise VocabularyError(
                    "a unique section attribute", f"duplicate {key_node.text!r}", key_node.span
                )
            attributes[key_node.text] = _scalar(value_node)

    return Section(
        kind=kind,
        number=int(number_node.text) if number_node is not None else None,
        attributes=attributes,
        lines=[_lower_line(line) for line in node.children_of("line")],
        span=node.span,
    )


def _lower_line(node: Node) -> Line:
    attributes: dict = {}
    attrs_node = node.child("line_attrs")
    if attrs_node is not None:
        for attr in attrs_node.children_of("line_attr"):
            key_node, value_node = attr.children
            key = key_node.text
            if key not in LINE_ATTRIBUTE_KEYS:
                raise VocabularyError(
                    f"a line attribute ({', '.join(LINE_ATTRIBUTE_KEYS)})",
                    repr(key),
                    key_node.span,
                )
            if key in attributes:
                raise VocabularyError(
                    "one value per line attribute", f"duplicate {key!r}", key_node.span
                )
            attributes[key] = _line_value(value_node)
    return Line(text=node.child("text").text, attributes=attributes, span=node.span)


def _line_value(node: Node):
    if node.kind == "chords":
        return tuple(chord.text for chord in node.children)
    if node.kind == "timing":
        first, second = node.children
        return (parse_number(first.text), parse_number(second.text))
    return node.text


def _scalar(node: Node):
    if node.kind == "number":
        return parse_number(node.text)
    if node.kind == "boolean":
        return node.text == "true"
    return node.text


def parse_number(text: str) -> int | float:
    """Decimal literal → ``int``, or ``float`` when it has a fraction."""
    if "." in text:
        return float(text)
    return int(text)
