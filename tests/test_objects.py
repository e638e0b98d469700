# test_objects.py -- tests for objects.py
# Copyright (C) 2026 The wyag authors
#
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later
# wyag is dual-licensed under the Apache License, Version 2.0 and the GNU
# General Public License as published by the Free Software Foundation; version 2.0
# or (at your option) any later version. You can redistribute it and/or
# modify it under the terms of either of these two licenses.
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# You should have received a copy of the licenses; if not, see
# <http://www.gnu.org/licenses/> for a copy of the GNU General Public License
# and <http://www.apache.org/licenses/LICENSE-2.0> for a copy of the Apache
# License, Version 2.0.
#


"""Tests for git base objects."""

import os
import zlib
from io import BytesIO

from wyag.errors import (
    DecompressionError,
    InvalidLeaf,
    InvalidSha,
    MalformedLength,
    ObjectFormatException,
    UnknownObjectType,
)
from wyag.objects import (
    Blob,
    Commit,
    Kvlm,
    ShaFile,
    Tag,
    Tree,
    TreeEntry,
    filename_to_hex,
    hex_to_filename,
    hex_to_sha,
    object_class,
    parse_kvlm,
    parse_tree,
    serialize_kvlm,
    serialize_tree,
    sha_to_hex,
    valid_hexsha,
)

from . import TestCase

a_sha = b"6f670c0fb53f9463760b7295fbb814e965fb20c8"
b_sha = b"2969be3e8ee1c0222396a5611407e4769f14e54b"
c_sha = b"4c9b5c1c0f6e2d7e8e0c6b2f7d8b1f4e3e9f5a6b"
tree_sha = b"70c190eb48fa8bbb50ddc692a17b44cb781af7f6"

_COMMIT_TEXT = (
    b"tree " + tree_sha + b"\n"
    b"parent " + a_sha + b"\n"
    b"parent " + b_sha + b"\n"
    b"author James Westby <jw+debian@jameswestby.net> 1174773719 +0000\n"
    b"committer James Westby <jw+debian@jameswestby.net> 1174773719 +0000\n"
    b"\n"
    b"Merge ../b\n"
)


class TestHexToSha(TestCase):
    def test_simple(self) -> None:
        self.assertEqual(b"\xab\xcd" * 10, hex_to_sha(b"abcd" * 10))

    def test_reverse(self) -> None:
        self.assertEqual(b"abcd" * 10, sha_to_hex(b"\xab\xcd" * 10))

    def test_invalid(self) -> None:
        self.assertRaises(InvalidSha, hex_to_sha, b"abcd")
        self.assertRaises(InvalidSha, hex_to_sha, b"zz" * 20)

    def test_valid_hexsha(self) -> None:
        self.assertTrue(valid_hexsha(a_sha))
        self.assertFalse(valid_hexsha(a_sha[:-1]))
        self.assertFalse(valid_hexsha(b"g" * 40))

    def test_filename_roundtrip(self) -> None:
        path = hex_to_filename("objects", a_sha)
        self.assertEqual(os.path.join("objects", "6f", a_sha[2:].decode()), path)
        self.assertEqual(a_sha, filename_to_hex(path))

    def test_filename_invalid(self) -> None:
        self.assertRaises(
            InvalidSha, filename_to_hex, os.path.join("objects", "zz", "yy")
        )


class ObjectClassTests(TestCase):
    def test_known(self) -> None:
        self.assertIs(Blob, object_class(b"blob"))
        self.assertIs(Tree, object_class("tree"))
        self.assertIs(Commit, object_class(b"commit"))
        self.assertIs(Tag, object_class(b"tag"))

    def test_unknown(self) -> None:
        self.assertRaises(UnknownObjectType, object_class, b"bogus")

    def test_tag_not_implemented(self) -> None:
        self.assertRaises(NotImplementedError, Tag)


class BlobReadTests(TestCase):
    def test_hello(self) -> None:
        b = Blob(b"hello\n")
        self.assertEqual(b"blob 6\x00hello\n", b.as_framed_string())
        self.assertEqual(b"ce013625030ba8dba906f756967f9e9ca394464a", b.id)

    def test_empty(self) -> None:
        self.assertEqual(b"e69de29bb2d1d6434b8b29ae775ad8c2e48c5391", Blob().id)

    def test_deterministic(self) -> None:
        self.assertEqual(Blob(b"same bytes").id, Blob(b"same bytes").id)
        self.assertNotEqual(Blob(b"same bytes").id, Blob(b"other bytes").id)

    def test_eq(self) -> None:
        self.assertEqual(Blob(b"a"), Blob(b"a"))
        self.assertNotEqual(Blob(b"a"), Blob(b"b"))

    def test_from_raw_string(self) -> None:
        b = ShaFile.from_raw_string(b"blob", b"data")
        self.assertIsInstance(b, Blob)
        self.assertEqual(b"data", b.data)

    def test_from_file(self) -> None:
        f = BytesIO(zlib.compress(b"blob 6\x00hello\n"))
        b = ShaFile.from_file(f)
        self.assertEqual(b"hello\n", b.as_raw_string())


class FramingTests(TestCase):
    def test_length_mismatch(self) -> None:
        self.assertRaises(MalformedLength, ShaFile.from_framed, b"blob 5\x00hello\n")

    def test_length_not_decimal(self) -> None:
        self.assertRaises(MalformedLength, ShaFile.from_framed, b"blob x\x00hello\n")

    def test_unknown_type(self) -> None:
        self.assertRaises(UnknownObjectType, ShaFile.from_framed, b"bogus 2\x00hi")

    def test_no_space(self) -> None:
        self.assertRaises(ObjectFormatException, ShaFile.from_framed, b"blob")

    def test_no_nul(self) -> None:
        self.assertRaises(ObjectFormatException, ShaFile.from_framed, b"blob 6")

    def test_not_compressed(self) -> None:
        self.assertRaises(
            DecompressionError, ShaFile.from_file, BytesIO(b"not zlib data")
        )


class KvlmTests(TestCase):
    def test_parse(self) -> None:
        kvlm = parse_kvlm(_COMMIT_TEXT)
        self.assertEqual(
            [b"tree", b"parent", b"author", b"committer", b""], kvlm.keys()
        )
        self.assertEqual([a_sha, b_sha], kvlm[b"parent"])
        self.assertEqual(b"Merge ../b\n", kvlm.message)

    def test_roundtrip_two_parents(self) -> None:
        self.assertEqual(_COMMIT_TEXT, serialize_kvlm(parse_kvlm(_COMMIT_TEXT)))

    def test_continuation(self) -> None:
        text = b"gpgsig line one\n line two\n line three\nauthor x\n\nmsg"
        kvlm = parse_kvlm(text)
        self.assertEqual([b"line one\nline two\nline three"], kvlm[b"gpgsig"])
        self.assertEqual([b"x"], kvlm[b"author"])
        self.assertEqual(text, serialize_kvlm(kvlm))

    def test_message_only(self) -> None:
        kvlm = parse_kvlm(b"\nJust a message\n")
        self.assertEqual([b""], kvlm.keys())
        self.assertEqual(b"Just a message\n", kvlm.message)

    def test_message_last(self) -> None:
        kvlm = Kvlm()
        kvlm.message = b"msg\n"
        kvlm.add(b"tree", tree_sha)
        self.assertEqual(b"tree " + tree_sha + b"\n\nmsg\n", serialize_kvlm(kvlm))

    def test_built_roundtrip_message_first(self) -> None:
        kvlm = Kvlm()
        kvlm.message = b"msg\n"
        kvlm.add(b"tree", tree_sha)
        kvlm.add(b"parent", a_sha)
        kvlm.add(b"parent", b_sha)
        kvlm.add(b"author", b"A U Thor <a@example.com> 0 +0000")
        self.assertEqual(kvlm, parse_kvlm(serialize_kvlm(kvlm)))

    def test_built_roundtrip_no_message(self) -> None:
        kvlm = Kvlm()
        kvlm.add(b"tree", tree_sha)
        self.assertEqual(kvlm, parse_kvlm(serialize_kvlm(kvlm)))

    def test_header_order_matters(self) -> None:
        first = Kvlm()
        first.add(b"tree", tree_sha)
        first.add(b"author", b"x")
        second = Kvlm()
        second.add(b"author", b"x")
        second.add(b"tree", tree_sha)
        self.assertNotEqual(first, second)

    def test_set_empty_removes(self) -> None:
        kvlm = parse_kvlm(_COMMIT_TEXT)
        kvlm.set(b"parent", [])
        self.assertNotIn(b"parent", kvlm)
        self.assertIsNone(kvlm.get(b"parent"))

    def test_repeated_keys_keep_position(self) -> None:
        kvlm = Kvlm()
        kvlm.add(b"a", b"1")
        kvlm.add(b"b", b"2")
        kvlm.add(b"a", b"3")
        self.assertEqual([b"a", b"b"], kvlm.keys())
        self.assertEqual(b"a 1\na 3\nb 2\n\n", serialize_kvlm(kvlm))


class CommitTests(TestCase):
    def test_accessors(self) -> None:
        c = Commit.from_string(_COMMIT_TEXT)
        self.assertEqual(tree_sha, c.tree)
        self.assertEqual([a_sha, b_sha], c.parents)
        self.assertEqual(
            b"James Westby <jw+debian@jameswestby.net> 1174773719 +0000", c.author
        )
        self.assertEqual(b"Merge ../b\n", c.message)

    def test_serialize(self) -> None:
        c = Commit()
        c.tree = tree_sha
        c.parents = [a_sha, b_sha]
        c.author = c.committer = (
            b"James Westby <jw+debian@jameswestby.net> 1174773719 +0000"
        )
        c.message = b"Merge ../b\n"
        self.assertEqual(_COMMIT_TEXT, c.as_raw_string())

    def test_no_parents(self) -> None:
        c = Commit.from_string(b"tree " + tree_sha + b"\n\ninitial\n")
        self.assertEqual([], c.parents)

    def test_id_stable(self) -> None:
        self.assertEqual(
            Commit.from_string(_COMMIT_TEXT).id, Commit.from_string(_COMMIT_TEXT).id
        )


class TreeTests(TestCase):
    def test_empty(self) -> None:
        t = Tree()
        self.assertEqual(b"", t.as_raw_string())
        self.assertEqual(b"4b825dc642cb6eb9a060e54bf8d69288fbee4904", t.id)
        self.assertEqual([], parse_tree(b""))

    def test_roundtrip_keeps_order(self) -> None:
        entries = [
            TreeEntry(b"100644", b"zeta", a_sha),
            TreeEntry(b"40000", b"alpha", b_sha),
            TreeEntry(b"100755", b"middle", c_sha),
        ]
        text = b"".join(serialize_tree(entries))
        self.assertEqual(entries, parse_tree(text))

    def test_binary_layout(self) -> None:
        text = b"".join(serialize_tree([TreeEntry(b"100644", b"a", a_sha)]))
        self.assertEqual(b"100644 a\x00" + hex_to_sha(a_sha), text)

    def test_add(self) -> None:
        t = Tree()
        t.add(b"sub", 0o40000, a_sha)
        t.add(b"file", b"100644", b_sha)
        self.assertEqual([b"sub", b"file"], [e.path for e in t])
        self.assertTrue(t[b"sub"].is_tree())
        self.assertFalse(t[b"file"].is_tree())
        self.assertIn(b"file", t)
        self.assertEqual(2, len(t))

    def test_invalid_mode_length(self) -> None:
        self.assertRaises(
            InvalidLeaf, parse_tree, b"1006440 a\x00" + hex_to_sha(a_sha)
        )
        self.assertRaises(InvalidLeaf, parse_tree, b"1006 a\x00" + hex_to_sha(a_sha))

    def test_non_octal_mode(self) -> None:
        self.assertRaises(InvalidLeaf, parse_tree, b"99999 f\x00" + hex_to_sha(a_sha))
        self.assertRaises(
            InvalidLeaf, parse_tree, b"100648 f\x00" + hex_to_sha(a_sha)
        )

    def test_truncated_sha(self) -> None:
        self.assertRaises(InvalidLeaf, parse_tree, b"100644 a\x00" + b"\x01" * 19)

    def test_missing_nul(self) -> None:
        self.assertRaises(InvalidLeaf, parse_tree, b"100644 a")

    def test_invalid_sha(self) -> None:
        t = Tree([TreeEntry(b"100644", b"a", b"not a sha")])
        self.assertRaises(InvalidSha, t.as_raw_string)

    def test_from_raw_string(self) -> None:
        text = b"".join(serialize_tree([TreeEntry(b"100644", b"a", a_sha)]))
        t = ShaFile.from_raw_string(b"tree", text)
        self.assertIsInstance(t, Tree)
        self.assertEqual(a_sha, t[b"a"].sha)
