# __init__.py -- The tests for wyag
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


"""Tests for wyag."""

__all__ = [
    "SkipTest",
    "TestCase",
    "build_commit_graph",
    "make_commit",
]

import os
import shutil
import tempfile
import unittest
from unittest import SkipTest  # noqa: F401

from wyag.object_store import DiskObjectStore
from wyag.objects import Blob, Commit, ObjectID, Tree


class TestCase(unittest.TestCase):
    """Base class for wyag tests.

    Points HOME at an empty temporary directory so that nothing in the
    user's environment leaks into a test.
    """

    def setUp(self) -> None:
        super().setUp()
        self._old_home = os.environ.get("HOME")
        self._home = tempfile.mkdtemp()
        os.environ["HOME"] = self._home

    def tearDown(self) -> None:
        super().tearDown()
        shutil.rmtree(self._home, ignore_errors=True)
        if self._old_home:
            os.environ["HOME"] = self._old_home
        else:
            del os.environ["HOME"]


def make_commit(
    tree: ObjectID,
    parents: list[ObjectID] | None = None,
    message: bytes = b"Test message\n",
) -> Commit:
    """Build a commit with fixed author metadata."""
    c = Commit()
    c.tree = tree
    if parents:
        c.parents = parents
    c.author = b"Test Author <test@nodomain.com> 1174773719 +0000"
    c.committer = b"Test Committer <test@nodomain.com> 1174773719 +0000"
    c.message = message
    return c


def build_commit_graph(
    store: DiskObjectStore, commit_spec: list[list[int]]
) -> list[Commit]:
    """Build a commit graph from a concise description.

    Each entry is ``[n, p1, p2, ...]``: commit number ``n`` with the given
    parent numbers, which must appear earlier in the list. Every commit gets
    its own tree holding a single file.

    Returns: The commits, in the order they were specified
    """
    nums: dict[int, ObjectID] = {}
    commits = []
    for commit in commit_spec:
        num, parent_nums = commit[0], commit[1:]
        blob = Blob(b"contents of " + str(num).encode("ascii") + b"\n")
        store.add_object(blob)
        tree = Tree()
        tree.add(b"file", 0o100644, blob.id)
        store.add_object(tree)
        c = make_commit(
            tree.id,
            [nums[p] for p in parent_nums],
            message=b"Commit " + str(num).encode("ascii") + b"\n",
        )
        store.add_object(c)
        nums[num] = c.id
        commits.append(c)
    return commits
