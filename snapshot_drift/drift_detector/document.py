"""
Document Model Module.

Exported resource documents are parsed into a small tagged tree of
DocumentNode values. The comparators dispatch on ``node.kind`` rather than
on Python runtime types, so numbers, booleans and strings are never coerced
into one another during comparison.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from ..exceptions import ParseError
from .types import JsonValue

# Guard against pathologically nested documents; real exports stay far below this.
MAX_DOCUMENT_DEPTH = 256


class NodeKind(str, Enum):
    NULL = "null"
    SCALAR = "scalar"
    SEQUENCE = "sequence"
    MAPPING = "mapping"


class ScalarType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"


@dataclass(frozen=True)
class NullNode:
    kind: NodeKind = field(default=NodeKind.NULL, init=False)


@dataclass(frozen=True)
class ScalarNode:
    value: Union[str, int, float, bool]
    scalar_type: ScalarType
    kind: NodeKind = field(default=NodeKind.SCALAR, init=False)


@dataclass(frozen=True)
class SequenceNode:
    items: Tuple["DocumentNode", ...]
    kind: NodeKind = field(default=NodeKind.SEQUENCE, init=False)

    def __len__(self) -> int:
        return len(self.items)


@dataclass(frozen=True, eq=False)
class MappingNode:
    """
    A JSON object. Field order is kept for serialisation only; equality
    ignores it.
    """

    fields: Tuple[Tuple[str, "DocumentNode"], ...]
    kind: NodeKind = field(default=NodeKind.MAPPING, init=False)
    _index: Dict[str, "DocumentNode"] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "_index", dict(self.fields))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MappingNode):
            return NotImplemented
        return self._index == other._index

    __hash__ = None  # type: ignore[assignment]

    def names(self) -> Tuple[str, ...]:
        return tuple(self._index)

    def get(self, name: str) -> "DocumentNode":
        """Return the named field, or NULL when the field is absent."""
        return self._index.get(name, NULL)

    def __contains__(self, name: object) -> bool:
        return name in self._index


DocumentNode = Union[NullNode, ScalarNode, SequenceNode, MappingNode]

NULL = NullNode()


def _reject_constant(name: str) -> None:
    raise ValueError(f"Non-standard JSON constant {name} is not allowed")


def parse(raw_text: str, path: str = "") -> DocumentNode:
    """
    Parse raw JSON text into a DocumentNode tree.

    Args:
        raw_text: Document content as read from disk (a leading BOM is ignored)
        path: Source path, used only in error messages

    Returns:
        Root DocumentNode of the parsed document

    Raises:
        ParseError: If the text is not valid JSON or nests too deeply
    """
    try:
        value = json.loads(raw_text.lstrip("\ufeff"), parse_constant=_reject_constant)
        return from_value(value, path=path)
    except (json.JSONDecodeError, ValueError) as e:
        raise ParseError(f"Invalid JSON in {path or 'document'}: {e}", path)
    except RecursionError:
        raise ParseError(f"Document {path or ''} is nested too deeply", path)


def from_value(value: JsonValue, path: str = "", _depth: int = 0) -> DocumentNode:
    """Convert an already-decoded JSON value into a DocumentNode tree."""
    if _depth > MAX_DOCUMENT_DEPTH:
        raise ParseError(
            f"Document {path or ''} exceeds the maximum depth of {MAX_DOCUMENT_DEPTH}",
            path,
        )
    if value is None:
        return NULL
    # bool must be checked before int: bool subclasses int
    if isinstance(value, bool):
        return ScalarNode(value, ScalarType.BOOLEAN)
    if isinstance(value, (int, float)):
        return ScalarNode(value, ScalarType.NUMBER)
    if isinstance(value, str):
        return ScalarNode(value, ScalarType.STRING)
    # Plain loops keep one interpreter frame per nesting level
    if isinstance(value, list):
        items = []
        for item in value:
            items.append(from_value(item, path, _depth + 1))
        return SequenceNode(tuple(items))
    if isinstance(value, dict):
        fields = []
        for name, item in value.items():
            fields.append((str(name), from_value(item, path, _depth + 1)))
        return MappingNode(tuple(fields))
    raise ParseError(f"Unsupported JSON value type: {type(value)!r}", path)


def to_value(node: DocumentNode) -> Any:
    """Convert a DocumentNode tree back into plain JSON-compatible values."""
    if node.kind is NodeKind.NULL:
        return None
    if node.kind is NodeKind.SCALAR:
        return node.value  # type: ignore[union-attr]
    if node.kind is NodeKind.SEQUENCE:
        return [to_value(item) for item in node.items]  # type: ignore[union-attr]
    return {name: to_value(item) for name, item in node.fields}  # type: ignore[union-attr]


def serialize(node: DocumentNode) -> str:
    """
    Canonical compact serialisation of a node.

    Field order is the document's own order, so two documents that differ
    only in key order serialise differently. This is what byte-equality mode
    compares.
    """
    return json.dumps(to_value(node), separators=(",", ":"), ensure_ascii=False)


def get_field(node: DocumentNode, dotted_path: str) -> Optional[DocumentNode]:
    """
    Look up a field by dotted path (e.g. ``properties.vmId``).

    Returns None when any step is missing or is not a mapping.
    """
    current = node
    for name in dotted_path.split("."):
        if current.kind is not NodeKind.MAPPING or name not in current:  # type: ignore[operator]
            return None
        current = current.get(name)  # type: ignore[union-attr]
    return current


def normalize_identifier(text: str) -> str:
    """Cloud resource identifiers are case-insensitive; key them lower-cased."""
    return text.lower()
