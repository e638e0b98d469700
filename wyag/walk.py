# walk.py -- General implementation of walking commits and trees.
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


"""General implementation of walking commits and their contents.

Both walkers keep an explicit stack rather than recursing, so arbitrarily
deep histories and trees do not hit the interpreter's recursion limit. The
order in which they visit objects is the same as a plain depth-first
recursion would produce.
"""

__all__ = [
    "checkout_tree",
    "format_graphviz",
    "iter_ancestry_edges",
    "walk_ancestry",
]

import logging
import os
from collections.abc import Iterable, Iterator

from .errors import InvalidLeaf, NotCommitError
from .object_store import DiskObjectStore
from .objects import S_IFGITLINK, Blob, Commit, ObjectID, Tree

logger = logging.getLogger(__name__)

Edge = tuple[ObjectID, ObjectID]


def _read_commit(store: DiskObjectStore, sha: ObjectID) -> Commit:
    obj = store[sha]
    if not isinstance(obj, Commit):
        raise NotCommitError(sha)
    return obj


def iter_ancestry_edges(
    store: DiskObjectStore, sha: ObjectID, seen: set[ObjectID] | None = None
) -> Iterator[Edge]:
    """Iterate over the (child, parent) edges reachable from a commit.

    Every commit is read once. For each commit its parents are taken in
    stored order: the edge to a parent is yielded, then that parent's own
    ancestry is walked before moving on to the next parent.

    Args:
      store: Object store to read commits from
      sha: Commit to start from
      seen: Commits already visited; updated in place
    Raises:
      NotCommitError: if a visited object is not a commit
      ObjectMissing: if a commit is not in the store
    """
    if seen is None:
        seen = set()
    if sha in seen:
        return
    seen.add(sha)
    stack = [(sha, iter(_read_commit(store, sha).parents))]
    while stack:
        child, parents = stack[-1]
        parent = next(parents, None)
        if parent is None:
            stack.pop()
            continue
        yield child, parent
        if parent in seen:
            continue
        seen.add(parent)
        stack.append((parent, iter(_read_commit(store, parent).parents)))


def walk_ancestry(
    store: DiskObjectStore, sha: ObjectID, seen: set[ObjectID] | None = None
) -> list[Edge]:
    """Return the (child, parent) edges reachable from a commit.

    See iter_ancestry_edges.
    """
    return list(iter_ancestry_edges(store, sha, seen))


def format_graphviz(edges: Iterable[Edge], name: bytes | str = b"wyaglog") -> Iterator[str]:
    """Render ancestry edges as the lines of a graphviz digraph."""
    if isinstance(name, bytes):
        name = name.decode("utf-8")
    yield f"digraph {name}{{"
    for child, parent in edges:
        yield f"c_{child.decode('ascii')} -> c_{parent.decode('ascii')}"
    yield "}"


def _entry_path(target: str, path: bytes) -> str:
    if not path or b"/" in path or path in (b".", b".."):
        raise InvalidLeaf(f"refusing to check out tree entry {path!r}")
    return os.path.join(target, os.fsdecode(path))


def checkout_tree(store: DiskObjectStore, tree: Tree, target: str | os.PathLike[str]) -> None:
    """Materialize a tree into a directory.

    Subtrees become directories and blobs become files holding the blob's
    bytes; existing files are overwritten. Submodule entries are skipped.

    Args:
      store: Object store to read entries from
      tree: Tree to check out
      target: Existing directory to write into
    Raises:
      ObjectMissing: if an entry's object is not in the store
      InvalidLeaf: if an entry name would escape the target directory
    """
    stack = [(iter(tree), os.fspath(target))]
    while stack:
        entries, directory = stack[-1]
        entry = next(entries, None)
        if entry is None:
            stack.pop()
            continue
        path = _entry_path(directory, entry.path)
        if int(entry.mode, 8) == S_IFGITLINK:
            logger.debug("skipping submodule %s", path)
            continue
        obj = store[entry.sha]
        if isinstance(obj, Tree):
            if not os.path.isdir(path):
                os.mkdir(path)
            stack.append((iter(obj), path))
        elif isinstance(obj, Blob):
            with open(path, "wb") as f:
                f.write(obj.data)
            logger.debug("checked out %s", path)
        else:
            logger.debug(
                "skipping %s entry %s", obj.type_name.decode("ascii"), path
            )
