"""
Integration tests for decoder.py

Tests the decode session: leading content, document indexing, anchors
across documents and error propagation.
"""

import io
import unittest
from pathlib import Path

import yaml

from decoding.decoder import DocumentDecoder, decode_bytes, decode_file
from decoding.models import NodeKind

FIXTURES_DIR = Path(__file__).resolve().parents[2] / "extraction" / "tests" / "fixtures"


class TestDecodeUnityAsset(unittest.TestCase):
    """Test decoding the Unity fixture graph."""

    def setUp(self):
        self.path = FIXTURES_DIR / "forest_graph.asset"
        self.documents = decode_file(str(self.path))

    def test_document_count_and_index(self):
        """Test the number of documents and their indexes."""
        self.assertEqual(len(self.documents), 4)
        self.assertEqual([d.document for d in self.documents], [0, 1, 2, 3])

    def test_anchor_from_typed_separator(self):
        """Test that separator anchors land on the document roots."""
        self.assertEqual(self.documents[0].anchor, "11400000")
        self.assertEqual(self.documents[1].anchor, "-8676750429411634268")

    def test_values(self):
        """Test scalar values and resolved tags."""
        behaviour = self.documents[1].get("MonoBehaviour")
        self.assertEqual(behaviour.get("m_Name").value, "Grid Spawner")
        self.assertEqual(behaviour.get("GridCellSize").value, "5")
        self.assertEqual(behaviour.get("GridCellSize").tag, "!!int")

    def test_cross_references_become_null(self):
        """Test that cross-references decode as null."""
        behaviour = self.documents[0].get("MonoBehaviour")
        self.assertIsNone(behaviour.get("m_Script").to_python())
        self.assertEqual(behaviour.get("nodes").to_python(), [None, None, None])

    def test_leading_content_on_first_document_only(self):
        """Test that leading content is attached once."""
        self.assertEqual(
            self.documents[0].leading_content,
            "%YAML 1.1\n%TAG !u! tag:unity3d.com,2011:\n--- !u!114 &11400000\n",
        )
        self.assertTrue(all(d.leading_content == "" for d in self.documents[1:]))

    def test_filename_stamped(self):
        """Test that nodes carry the source filename."""
        self.assertEqual(self.documents[2].filename, str(self.path))

    def test_payload_kept_as_string(self):
        """Test that the quoted payload stays a string."""
        behaviour = self.documents[2].get("MonoBehaviour")
        self.assertEqual(behaviour.get("serializedData").value, '{"version":2,"poses":[]}')


class TestDecodePlainYaml(unittest.TestCase):
    """Test decoding standard multi-document YAML."""

    def test_placeholder_separators_restored(self):
        """Test that placeholder separators split documents again."""
        documents = decode_file(str(FIXTURES_DIR / "plain_multi.yaml"))

        self.assertEqual(len(documents), 2)
        self.assertEqual(documents[0].to_python(), {"name": "first", "items": [1, 2]})
        self.assertEqual(documents[1].to_python(), {"name": "second"})
        self.assertEqual(
            documents[0].leading_content,
            "# Plain multi-document YAML, no dialect markers\n---\n",
        )

    def test_alias_across_documents_shares_node(self):
        """Test that an alias resolves to a node anchored in an earlier document."""
        documents = decode_bytes(b"a: &shared\n  x: 1\n---\nb: *shared\n")

        anchored = documents[0].get("a")
        alias = documents[1].get("b")
        self.assertEqual(alias.kind, NodeKind.ALIAS)
        self.assertIs(alias.alias, anchored)
        self.assertIs(alias.resolved(), anchored)
        self.assertEqual(documents[1].to_python(), {"b": {"x": 1}})

    def test_alias_within_document(self):
        """Test aliases inside one document."""
        documents = decode_bytes(b"base: &b {k: 1}\nother: *b\n")
        self.assertEqual(documents[0].to_python(), {"base": {"k": 1}, "other": {"k": 1}})

    def test_undefined_alias_raises(self):
        """Test that an undefined alias is a YAML error."""
        with self.assertRaises(yaml.YAMLError):
            decode_bytes(b"a: *missing\n")


class TestDecodeComments(unittest.TestCase):
    """Test that body comments are attached to decoded nodes."""

    def test_head_line_and_foot_comments(self):
        """Test each comment position lands on the expected node."""
        root = decode_bytes(b"a: 1\n# head of b\nb: 2  # trailing\n# foot\n")[0]
        key_b, value_b = root.content[1]

        self.assertEqual(key_b.head_comment, "# head of b")
        self.assertEqual(value_b.line_comment, "# trailing")
        self.assertEqual(root.foot_comment, "# foot")
        self.assertEqual(root.content[0][0].head_comment, "")

    def test_consecutive_head_comments_joined(self):
        """Test that a run of comment lines becomes one head comment."""
        root = decode_bytes(b"first: 0\n# one\n#two\n\nkey: value\n")[0]
        self.assertEqual(root.content[1][0].head_comment, "# one\n#two")

    def test_hash_inside_scalars_is_not_a_comment(self):
        """Test that '#' in quoted and block scalars stays scalar text."""
        data = b"url: 'a # b'\ntext: |\n  keep # this\nnext: 1 # done\n"
        root = decode_bytes(data)[0]

        self.assertEqual(root.get("url").value, "a # b")
        self.assertEqual(root.get("text").value, "keep # this\n")
        self.assertEqual(root.get("url").line_comment, "")
        self.assertEqual(root.get("text").line_comment, "")
        self.assertEqual(root.get("next").line_comment, "# done")

    def test_comments_stay_in_their_document(self):
        """Test that a comment before a separator belongs to the earlier document."""
        first, second = decode_bytes(b"a: 1\n# end of first\n---\nb: 2 # in second\n")

        self.assertEqual(first.foot_comment, "# end of first")
        self.assertEqual(second.foot_comment, "")
        self.assertEqual(second.get("b").line_comment, "# in second")

    def test_sequence_item_comment(self):
        """Test that a comment on a sequence item attaches to that item."""
        root = decode_bytes(b"items:\n  # first item\n  - 1\n  - 2 # second\n")[0]
        items = root.get("items").content

        self.assertEqual(items[0].head_comment, "# first item")
        self.assertEqual(items[1].line_comment, "# second")

    def test_leading_comment_not_duplicated(self):
        """Test that header comments stay leading content only."""
        documents = decode_file(str(FIXTURES_DIR / "plain_multi.yaml"))
        self.assertEqual(documents[0].content[0][0].head_comment, "")
        self.assertEqual(documents[0].foot_comment, "")

    def test_dialect_document_comment(self):
        """Test comments inside a Unity document after normalization."""
        data = (
            b"%YAML 1.1\n"
            b"%TAG !u! tag:unity3d.com,2011:\n"
            b"--- !u!114 &5\n"
            b"MonoBehaviour:\n"
            b"  m_Name: Rock # display name\n"
            b"  link: {fileID: 7}\n"
        )
        root = decode_bytes(data)[0]
        behaviour = root.get("MonoBehaviour")

        self.assertEqual(behaviour.get("m_Name").line_comment, "# display name")
        self.assertIsNone(behaviour.get("link").to_python())


class TestDecoderSession(unittest.TestCase):
    """Test session lifecycle semantics."""

    def test_leading_content_without_body(self):
        """Test the single blank node for a header-only source."""
        decoder = DocumentDecoder()
        decoder.init(io.BytesIO(b"# only a comment\n%YAML 1.1\n"))

        first = decoder.decode_next()
        self.assertIsNotNone(first)
        self.assertEqual(first.kind, NodeKind.SCALAR)
        self.assertEqual(first.tag, "!!null")
        self.assertEqual(first.leading_content, "# only a comment\n%YAML 1.1\n")
        self.assertIsNone(decoder.decode_next())
        self.assertIsNone(decoder.decode_next())

    def test_empty_source_exhausted(self):
        """Test that an empty source is exhausted at once."""
        decoder = DocumentDecoder()
        decoder.init(io.BytesIO(b""))
        self.assertIsNone(decoder.decode_next())

    def test_document_index_increments(self):
        """Test that the index advances per decoded document."""
        decoder = DocumentDecoder()
        decoder.init(io.BytesIO(b"a: 1\n---\nb: 2\n"))

        self.assertEqual(decoder.document_index, 0)
        decoder.decode_next()
        self.assertEqual(decoder.document_index, 1)
        decoder.decode_next()
        self.assertEqual(decoder.document_index, 2)
        self.assertIsNone(decoder.decode_next())

    def test_parse_error_propagates_and_ends_session(self):
        """Test that a parse error is raised and ends the session."""
        decoder = DocumentDecoder()
        decoder.init(io.BytesIO(b"# header\na: [1, 2\n"))

        with self.assertRaises(yaml.YAMLError):
            decoder.decode_next()
        self.assertIsNone(decoder.decode_next())

    def test_init_resets_session(self):
        """Test that init clears anchors and the document index."""
        decoder = DocumentDecoder()
        decoder.init(io.BytesIO(b"a: &x 1\n"))
        list(decoder)
        self.assertIn("x", decoder.anchor_map)

        decoder.init(io.BytesIO(b"b: 2\n"))
        self.assertEqual(decoder.anchor_map, {})
        self.assertEqual(decoder.document_index, 0)
        self.assertEqual(len(list(decoder)), 1)

    def test_missing_file_raises(self):
        """Test that a missing file raises FileNotFoundError."""
        with self.assertRaises(FileNotFoundError):
            decode_file("/definitely/missing.asset")


if __name__ == "__main__":
    unittest.main()
