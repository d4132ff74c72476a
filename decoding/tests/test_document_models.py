"""Tests for DocumentNode helpers."""

import unittest

from decoding.models import (
    DocumentNode,
    NodeKind,
    create_mapping_node,
    create_scalar_node,
    long_tag,
    short_tag,
)


class TestTags(unittest.TestCase):
    """Test tag shortening and expansion."""

    def test_short_tag(self):
        """Test shortening of core and custom tags."""
        self.assertEqual(short_tag("tag:yaml.org,2002:str"), "!!str")
        self.assertEqual(short_tag("!custom"), "!custom")
        self.assertEqual(short_tag(None), "")

    def test_long_tag(self):
        """Test expansion of short core tags."""
        self.assertEqual(long_tag("!!int"), "tag:yaml.org,2002:int")
        self.assertEqual(long_tag("!custom"), "!custom")


class TestDocumentNode(unittest.TestCase):
    """Test DocumentNode helpers."""

    def test_scalar_conversion_follows_tag(self):
        """Test that scalars convert according to their tag."""
        self.assertEqual(create_scalar_node("12", "!!int").to_python(), 12)
        self.assertEqual(create_scalar_node("0.5", "!!float").to_python(), 0.5)
        self.assertIs(create_scalar_node("true", "!!bool").to_python(), True)
        self.assertEqual(create_scalar_node("12").to_python(), "12")
        self.assertIsNone(create_scalar_node(None).to_python())

    def test_unknown_tag_keeps_text(self):
        """Test that an unknown tag leaves the text unchanged."""
        node = create_scalar_node("raw", "!unity")
        self.assertEqual(node.to_python(), "raw")

    def test_mapping_keys_and_get(self):
        """Test mapping key listing and lookup."""
        mapping = create_mapping_node(
            [
                (create_scalar_node("a"), create_scalar_node("1", "!!int")),
                (create_scalar_node("b"), create_scalar_node("x")),
            ]
        )
        self.assertEqual([k.value for k in mapping.keys()], ["a", "b"])
        self.assertEqual(mapping.get("b").value, "x")
        self.assertIsNone(mapping.get("missing"))
        self.assertEqual(mapping.to_python(), {"a": 1, "b": "x"})

    def test_keys_on_scalar_is_empty(self):
        """Test that scalars have no keys."""
        self.assertEqual(create_scalar_node("x").keys(), [])
        self.assertIsNone(create_scalar_node("x").get("x"))

    def test_alias_resolves_to_target(self):
        """Test that an alias resolves to its anchored node."""
        target = create_mapping_node([(create_scalar_node("k"), create_scalar_node("v"))])
        alias = DocumentNode(kind=NodeKind.ALIAS, value="t", alias=target)

        self.assertIs(alias.resolved(), target)
        self.assertEqual(alias.to_python(), {"k": "v"})
        self.assertEqual([k.value for k in alias.keys()], ["k"])

    def test_sequence(self):
        """Test sequence conversion."""
        seq = DocumentNode(
            kind=NodeKind.SEQUENCE,
            tag="!!seq",
            content=[create_scalar_node("1", "!!int"), create_scalar_node(None)],
        )
        self.assertEqual(seq.to_python(), [1, None])


if __name__ == "__main__":
    unittest.main()
