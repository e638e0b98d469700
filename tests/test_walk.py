# test_walk.py -- Tests for commit and tree walking
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


"""Tests for commit and tree walking functionality."""

import os
import shutil
import tempfile

from wyag.errors import InvalidLeaf, NotCommitError, ObjectMissing
from wyag.layout import ControlDir
from wyag.object_store import DiskObjectStore
from wyag.objects import Blob, Tree, TreeEntry
from wyag.walk import (
    checkout_tree,
    format_graphviz,
    iter_ancestry_edges,
    walk_ancestry,
)

from . import TestCase, build_commit_graph, make_commit


class _StoreTestCase(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.tmp_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmp_dir)
        self.store = DiskObjectStore(ControlDir(os.path.join(self.tmp_dir, "store")))


class AncestryTests(_StoreTestCase):
    def test_root_commit(self) -> None:
        (c1,) = build_commit_graph(self.store, [[1]])
        self.assertEqual([], walk_ancestry(self.store, c1.id))

    def test_linear(self) -> None:
        c1, c2, c3 = build_commit_graph(self.store, [[1], [2, 1], [3, 2]])
        self.assertEqual(
            [(c3.id, c2.id), (c2.id, c1.id)], walk_ancestry(self.store, c3.id)
        )

    def test_diamond(self) -> None:
        # A has parents B and C, which both have parent D.
        d, b, c, a = build_commit_graph(self.store, [[1], [2, 1], [3, 1], [4, 2, 3]])
        edges = walk_ancestry(self.store, a.id)
        self.assertEqual(
            [(a.id, b.id), (b.id, d.id), (a.id, c.id), (c.id, d.id)], edges
        )
        # D has no parents, so its subtree contributes nothing twice.
        self.assertEqual(1, sum(1 for child, _ in edges if child == b.id))

    def test_diamond_with_shared_history(self) -> None:
        # The shared ancestor's own parent edge must only be emitted once.
        r, d, b, c, a = build_commit_graph(
            self.store, [[1], [2, 1], [3, 2], [4, 2], [5, 3, 4]]
        )
        edges = walk_ancestry(self.store, a.id)
        self.assertEqual(1, edges.count((d.id, r.id)))
        self.assertEqual(
            [
                (a.id, b.id),
                (b.id, d.id),
                (d.id, r.id),
                (a.id, c.id),
                (c.id, d.id),
            ],
            edges,
        )

    def test_seen_is_updated(self) -> None:
        c1, c2 = build_commit_graph(self.store, [[1], [2, 1]])
        seen: set[bytes] = set()
        walk_ancestry(self.store, c2.id, seen)
        self.assertEqual({c1.id, c2.id}, seen)
        self.assertEqual([], list(iter_ancestry_edges(self.store, c2.id, seen)))

    def test_long_history(self) -> None:
        spec = [[1]] + [[i, i - 1] for i in range(2, 1101)]
        commits = build_commit_graph(self.store, spec)
        self.assertEqual(1099, len(walk_ancestry(self.store, commits[-1].id)))

    def test_not_a_commit(self) -> None:
        blob = Blob(b"not a commit")
        self.store.add_object(blob)
        self.assertRaises(NotCommitError, walk_ancestry, self.store, blob.id)

    def test_parent_not_a_commit(self) -> None:
        blob = Blob(b"not a commit")
        self.store.add_object(blob)
        c = make_commit(blob.id, [blob.id])
        self.store.add_object(c)
        edges = iter_ancestry_edges(self.store, c.id)
        self.assertEqual((c.id, blob.id), next(edges))
        self.assertRaises(NotCommitError, next, edges)

    def test_missing_parent(self) -> None:
        c = make_commit(b"1" * 40, [b"2" * 40])
        self.store.add_object(c)
        self.assertRaises(ObjectMissing, walk_ancestry, self.store, c.id)


class FormatGraphvizTests(TestCase):
    def test_empty(self) -> None:
        self.assertEqual(["digraph wyaglog{", "}"], list(format_graphviz([])))

    def test_edges(self) -> None:
        edges = [(b"a" * 40, b"b" * 40)]
        self.assertEqual(
            ["digraph wyaglog{", f"c_{'a' * 40} -> c_{'b' * 40}", "}"],
            list(format_graphviz(edges)),
        )

    def test_name(self) -> None:
        self.assertEqual("digraph history{", next(format_graphviz([], name="history")))


class CheckoutTreeTests(_StoreTestCase):
    def _add(self, obj):
        self.store.add_object(obj)
        return obj

    def setUp(self) -> None:
        super().setUp()
        self.target = os.path.join(self.tmp_dir, "checkout")
        os.mkdir(self.target)

    def _read(self, *path: str) -> bytes:
        with open(os.path.join(self.target, *path), "rb") as f:
            return f.read()

    def test_nested(self) -> None:
        readme = self._add(Blob(b"readme\n"))
        code = self._add(Blob(b"print('hi')\n"))
        inner = self._add(Tree([TreeEntry(b"100644", b"main.py", code.id)]))
        src = self._add(Tree([TreeEntry(b"40000", b"pkg", inner.id)]))
        root = self._add(
            Tree(
                [
                    TreeEntry(b"100644", b"README", readme.id),
                    TreeEntry(b"40000", b"src", src.id),
                ]
            )
        )
        checkout_tree(self.store, root, self.target)
        self.assertEqual(b"readme\n", self._read("README"))
        self.assertEqual(b"print('hi')\n", self._read("src", "pkg", "main.py"))
        self.assertEqual(["README", "src"], sorted(os.listdir(self.target)))

    def test_siblings_after_subtree(self) -> None:
        a = self._add(Blob(b"a"))
        sub = self._add(Tree([TreeEntry(b"100644", b"inner", a.id)]))
        root = self._add(
            Tree(
                [
                    TreeEntry(b"40000", b"dir", sub.id),
                    TreeEntry(b"100644", b"after", a.id),
                ]
            )
        )
        checkout_tree(self.store, root, self.target)
        self.assertEqual(b"a", self._read("dir", "inner"))
        self.assertEqual(b"a", self._read("after"))

    def test_overwrites(self) -> None:
        blob = self._add(Blob(b"new"))
        with open(os.path.join(self.target, "file"), "wb") as f:
            f.write(b"old contents")
        checkout_tree(
            self.store, Tree([TreeEntry(b"100644", b"file", blob.id)]), self.target
        )
        self.assertEqual(b"new", self._read("file"))

    def test_skips_submodule(self) -> None:
        blob = self._add(Blob(b"x"))
        root = Tree(
            [
                TreeEntry(b"160000", b"module", b"5" * 40),
                TreeEntry(b"100644", b"file", blob.id),
            ]
        )
        checkout_tree(self.store, root, self.target)
        self.assertEqual(["file"], os.listdir(self.target))

    def test_missing_object(self) -> None:
        root = Tree([TreeEntry(b"100644", b"file", b"5" * 40)])
        self.assertRaises(ObjectMissing, checkout_tree, self.store, root, self.target)

    def test_unsafe_path(self) -> None:
        blob = self._add(Blob(b"x"))
        root = Tree([TreeEntry(b"100644", b"..", blob.id)])
        self.assertRaises(InvalidLeaf, checkout_tree, self.store, root, self.target)
