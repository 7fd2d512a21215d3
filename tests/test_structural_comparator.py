"""
Tests for the structural comparator.
"""

import unittest

from snapshot_drift.drift_detector.comparators import DiffKind, structural_diff
from snapshot_drift.drift_detector.document import NULL, ScalarNode, ScalarType, parse

SAMPLES = [
    "null",
    "1",
    '"text"',
    "true",
    "[1, 2, 3]",
    '{"a": 1, "b": [1, {"c": null}], "d": {"e": "f"}}',
    '{"a": {"b": {"c": [[1], [2, 3]]}}}',
]


class TestStructuralDiff(unittest.TestCase):
    """Structural difference computation between document trees."""

    def test_identical_documents_have_no_differences(self) -> None:
        for sample in SAMPLES:
            with self.subTest(sample=sample):
                self.assertEqual(structural_diff(parse(sample), parse(sample)), [])

    def test_swapping_sides_swaps_before_and_after(self) -> None:
        before = parse('{"a": 1, "b": [1, 2], "c": {"d": "x"}, "e": true}')
        after = parse('{"a": 2, "b": [1, 2, 3], "c": {"d": "y", "f": 1}, "g": null}')
        forward = structural_diff(before, after)
        backward = structural_diff(after, before)
        self.assertEqual(len(forward), len(backward))
        for left, right in zip(forward, backward):
            self.assertEqual(left.path, right.path)
            self.assertEqual(left.kind, right.kind)
            self.assertEqual(left.before, right.after)
            self.assertEqual(left.after, right.before)

    def test_length_mismatch_is_one_entry_without_element_noise(self) -> None:
        entries = structural_diff(parse('{"x": [1, 2]}'), parse('{"x": [1, 2, 3]}'))
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].path, "x")
        self.assertEqual(entries[0].kind, DiffKind.ARRAY_LENGTH_MISMATCH)
        self.assertEqual(entries[0].before, ScalarNode(2, ScalarType.NUMBER))
        self.assertEqual(entries[0].after, ScalarNode(3, ScalarType.NUMBER))

    def test_root_length_mismatch_has_empty_path(self) -> None:
        entries = structural_diff(parse("[1, 2]"), parse("[9, 9, 9]"))
        self.assertEqual([(e.path, e.kind) for e in entries], [("", DiffKind.ARRAY_LENGTH_MISMATCH)])

    def test_field_missing_on_one_side_is_null(self) -> None:
        entries = structural_diff(parse('{"a": 1}'), parse('{"a": 1, "b": 2}'))
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].path, "b")
        self.assertEqual(entries[0].kind, DiffKind.CHANGED)
        self.assertIs(entries[0].before, NULL)
        self.assertEqual(entries[0].after, ScalarNode(2, ScalarType.NUMBER))

    def test_explicit_null_equals_missing_field(self) -> None:
        self.assertEqual(structural_diff(parse('{"a": null}'), parse("{}")), [])

    def test_nested_paths_use_dots_and_brackets(self) -> None:
        before = parse('{"storageProfile": {"dataDisks": [{"diskSizeGB": 128}]}}')
        after = parse('{"storageProfile": {"dataDisks": [{"diskSizeGB": 256}]}}')
        entries = structural_diff(before, after)
        self.assertEqual([e.path for e in entries], ["storageProfile.dataDisks[0].diskSizeGB"])

    def test_path_prefix_is_extended(self) -> None:
        entries = structural_diff(parse('{"a": 1}'), parse('{"a": 2}'), path="root")
        self.assertEqual(entries[0].path, "root.a")

    def test_numbers_compare_numerically(self) -> None:
        self.assertEqual(structural_diff(parse('{"a": 4}'), parse('{"a": 4.0}')), [])

    def test_scalar_types_are_never_coerced(self) -> None:
        cases = [('"1"', "1"), ("true", "1"), ('"true"', "true"), ("false", "0")]
        for before, after in cases:
            with self.subTest(before=before, after=after):
                entries = structural_diff(parse(before), parse(after))
                self.assertEqual(len(entries), 1)
                self.assertEqual(entries[0].kind, DiffKind.CHANGED)

    def test_variant_mismatch_is_a_leaf_change(self) -> None:
        entries = structural_diff(parse('{"a": {"b": 1}}'), parse('{"a": "b"}'))
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].path, "a")
        self.assertEqual(entries[0].before, parse('{"b": 1}'))
        self.assertEqual(entries[0].after, ScalarNode("b", ScalarType.STRING))

    def test_output_follows_traversal_order(self) -> None:
        before = parse('{"z": 1, "a": [1, 2], "m": {"y": 1, "b": 1}}')
        after = parse('{"z": 2, "a": [3, 4], "m": {"y": 2, "b": 2}}')
        paths = [e.path for e in structural_diff(before, after)]
        self.assertEqual(paths, ["a[0]", "a[1]", "m.b", "m.y", "z"])

    def test_key_order_does_not_matter(self) -> None:
        self.assertEqual(
            structural_diff(parse('{"a": 1, "b": {"c": 2, "d": 3}}'), parse('{"b": {"d": 3, "c": 2}, "a": 1}')),
            [],
        )

    def test_deep_nesting_does_not_exhaust_the_stack(self) -> None:
        depth = 200
        before = parse('{"a": ' * depth + "1" + "}" * depth)
        after = parse('{"a": ' * depth + "2" + "}" * depth)
        entries = structural_diff(before, after)
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].path, ".".join(["a"] * depth))

    def test_repeated_runs_are_identical(self) -> None:
        before = parse('{"b": [1, {"x": 1}], "a": "s", "c": {"k": true}}')
        after = parse('{"b": [1, {"x": 2}], "a": "t", "c": {"k": false}}')
        self.assertEqual(structural_diff(before, after), structural_diff(before, after))


if __name__ == "__main__":
    unittest.main()
