"""
Tests for the document model.
"""

import unittest

from snapshot_drift.drift_detector.document import (
    MAX_DOCUMENT_DEPTH,
    NULL,
    MappingNode,
    NodeKind,
    ScalarNode,
    ScalarType,
    SequenceNode,
    from_value,
    get_field,
    normalize_identifier,
    parse,
    serialize,
    to_value,
)
from snapshot_drift.exceptions import ParseError


class TestParse(unittest.TestCase):
    """Parsing raw JSON text into document nodes."""

    def test_every_json_type_maps_to_one_variant(self) -> None:
        node = parse('{"s": "x", "n": 1.5, "b": true, "z": null, "l": [1], "m": {}}')
        self.assertIs(node.kind, NodeKind.MAPPING)
        self.assertEqual(node.get("s"), ScalarNode("x", ScalarType.STRING))
        self.assertEqual(node.get("n"), ScalarNode(1.5, ScalarType.NUMBER))
        self.assertEqual(node.get("b"), ScalarNode(True, ScalarType.BOOLEAN))
        self.assertIs(node.get("z"), NULL)
        self.assertIs(node.get("l").kind, NodeKind.SEQUENCE)
        self.assertIs(node.get("m").kind, NodeKind.MAPPING)

    def test_booleans_are_not_numbers(self) -> None:
        self.assertEqual(from_value(True).scalar_type, ScalarType.BOOLEAN)
        self.assertEqual(from_value(1).scalar_type, ScalarType.NUMBER)
        self.assertNotEqual(from_value(True), from_value(1))

    def test_leading_byte_order_mark_is_ignored(self) -> None:
        node = parse('\ufeff{"a": 1}')
        self.assertEqual(to_value(node), {"a": 1})

    def test_malformed_json_raises_parse_error(self) -> None:
        with self.assertRaises(ParseError) as context:
            parse('{"a": ', "vms/broken.json")
        self.assertEqual(context.exception.path, "vms/broken.json")
        self.assertIn("vms/broken.json", str(context.exception))

    def test_non_standard_constants_are_rejected(self) -> None:
        with self.assertRaises(ParseError):
            parse('{"a": NaN}')

    def test_excessive_nesting_raises_parse_error(self) -> None:
        deep = "[" * (MAX_DOCUMENT_DEPTH + 5) + "]" * (MAX_DOCUMENT_DEPTH + 5)
        with self.assertRaises(ParseError):
            parse(deep)


class TestNodes(unittest.TestCase):
    """Node equality, serialisation and lookups."""

    def test_mapping_equality_ignores_field_order(self) -> None:
        self.assertEqual(parse('{"a": 1, "b": 2}'), parse('{"b": 2, "a": 1}'))
        self.assertNotEqual(parse('{"a": 1}'), parse('{"a": 2}'))

    def test_missing_mapping_field_reads_as_null(self) -> None:
        node = MappingNode((("a", from_value(1)),))
        self.assertIs(node.get("missing"), NULL)
        self.assertNotIn("missing", node)

    def test_serialize_keeps_document_field_order(self) -> None:
        self.assertEqual(serialize(parse('{"b": 1, "a": [true, null]}')), '{"b":1,"a":[true,null]}')
        self.assertNotEqual(serialize(parse('{"a": 1, "b": 2}')), serialize(parse('{"b": 2, "a": 1}')))

    def test_to_value_round_trips_structure(self) -> None:
        value = {"x": [1, "two", False, None, {"y": 2.5}]}
        self.assertEqual(to_value(from_value(value)), value)

    def test_sequence_length(self) -> None:
        self.assertEqual(len(SequenceNode((NULL, NULL))), 2)

    def test_get_field_follows_dotted_path(self) -> None:
        node = parse('{"properties": {"vmId": "abc"}, "name": "vm"}')
        self.assertEqual(get_field(node, "properties.vmId"), ScalarNode("abc", ScalarType.STRING))
        self.assertIsNone(get_field(node, "properties.missing"))
        self.assertIsNone(get_field(node, "name.inner"))

    def test_normalize_identifier_lower_cases(self) -> None:
        self.assertEqual(
            normalize_identifier("/subscriptions/0000/resourceGroups/RG-Prod"),
            "/subscriptions/0000/resourcegroups/rg-prod",
        )


if __name__ == "__main__":
    unittest.main()
