# porcelain.py -- Porcelain-like layer on top of wyag
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


"""Simple wrapper that provides porcelain-like functions on top of wyag.

Currently implemented:
 * init
 * cat_file
 * hash_object
 * log
 * ls_tree
 * checkout
 * show_ref

These functions are meant to behave similarly to the git subcommands.
Differences in behaviour are considered bugs.

Functions should generally accept both unicode strings and bytestrings
"""

__all__ = [
    "cat_file",
    "checkout",
    "hash_object",
    "init",
    "log",
    "ls_tree",
    "open_repo_closing",
    "show_ref",
]

import logging
import os
import sys
from collections.abc import Iterator
from contextlib import AbstractContextManager, closing, contextmanager
from typing import IO, BinaryIO, TextIO, TypeVar

from . import object_store
from .errors import NotTreeError
from .layout import NotADirectory
from .objects import S_IFGITLINK, Commit, ObjectID, ShaFile, Tree
from .objectspec import find_object
from .refs import Ref
from .repo import Repo
from .walk import checkout_tree, format_graphviz, iter_ancestry_edges

T = TypeVar("T", bound=Repo)
RepoPath = str | os.PathLike[str] | Repo

logger = logging.getLogger(__name__)


@contextmanager
def _noop_context_manager(obj: T) -> Iterator[T]:
    """Context manager that has the same api as closing but does nothing."""
    yield obj


def open_repo_closing(path_or_repo: RepoPath) -> AbstractContextManager[Repo]:
    """Open an argument that can be a repository or a path for a repository.

    returns a context manager that will close the repo on exit if the argument
    is a path, else does nothing if the argument is a repo.
    """
    if isinstance(path_or_repo, Repo):
        return _noop_context_manager(path_or_repo)
    return closing(Repo.discover(path_or_repo))


def _binary_stdout() -> BinaryIO:
    return getattr(sys.stdout, "buffer", sys.stdout)


def init(path: str | os.PathLike[str] = ".") -> Repo:
    """Create a new git repository.

    Args:
      path: Path to repository.
    Returns: A Repo instance
    """
    return Repo.init(path)


def cat_file(
    repo: RepoPath,
    type_name: str | bytes,
    name: str | bytes,
    outstream: BinaryIO | None = None,
) -> ShaFile:
    """Write the payload of an object.

    Args:
      repo: Path to the repository
      type_name: Kind of object expected
      name: Name of the object
      outstream: Binary stream to write to (defaults to stdout)
    Returns: The object
    """
    if outstream is None:
        outstream = _binary_stdout()
    with open_repo_closing(repo) as r:
        obj = r.object_store[find_object(r, name, type_name, follow=False)]
    outstream.write(obj.as_raw_string())
    return obj


def hash_object(
    path_or_file: str | os.PathLike[str] | IO[bytes],
    type_name: str | bytes = b"blob",
    write: bool = False,
    repo: RepoPath = ".",
) -> ObjectID:
    """Compute the object id of a file, optionally writing it.

    Args:
      path_or_file: File to hash
      type_name: Kind of object to build from the file contents
      write: Whether to write the object into ``repo``
      repo: Repository to write to; only opened when ``write`` is set
    Returns: The object id
    """
    if not write:
        return object_store.hash_object(None, path_or_file, type_name, write=False)
    with open_repo_closing(repo) as r:
        return object_store.hash_object(r, path_or_file, type_name, write=True)


def log(repo: RepoPath, name: str | bytes = b"HEAD", outstream: TextIO = sys.stdout) -> None:
    """Write the history of a commit as a graphviz digraph.

    Args:
      repo: Path to the repository
      name: Commit to start from
      outstream: Stream to write to
    """
    with open_repo_closing(repo) as r:
        sha = find_object(r, name, b"commit", follow=False)
        for line in format_graphviz(iter_ancestry_edges(r.object_store, sha)):
            outstream.write(line + "\n")


def _entry_type(store: object_store.DiskObjectStore, mode: bytes, sha: ObjectID) -> str:
    if int(mode, 8) == S_IFGITLINK:
        return "commit"
    return store[sha].type_name.decode("ascii")


def ls_tree(
    repo: RepoPath, treeish: str | bytes = b"HEAD", outstream: TextIO = sys.stdout
) -> None:
    """List contents of a tree.

    Each line has the form ``<mode> <type> <sha>\\t<path>`` with the mode
    zero-padded to six digits.

    Args:
      repo: Path to the repository
      treeish: Tree id to list; a commit lists its tree
      outstream: Output stream (defaults to stdout)
    """
    with open_repo_closing(repo) as r:
        tree = r.object_store[find_object(r, treeish, b"tree")]
        for mode, path, sha in tree:
            outstream.write(
                "{} {} {}\t{}\n".format(
                    mode.decode("ascii").rjust(6, "0"),
                    _entry_type(r.object_store, mode, sha),
                    sha.decode("ascii"),
                    path.decode("utf-8", "replace"),
                )
            )


def checkout(repo: RepoPath, name: str | bytes, target: str | os.PathLike[str]) -> None:
    """Check out a commit or tree into a directory.

    Args:
      repo: Path to the repository
      name: Commit or tree to check out
      target: Directory to write into; must be missing or empty
    Raises:
      NotTreeError: if ``name`` is neither a commit nor a tree
      NotADirectory: if ``target`` exists and is not a directory
      ValueError: if ``target`` is a directory that is not empty
    """
    target = os.fspath(target)
    with open_repo_closing(repo) as r:
        obj = r.object_store[find_object(r, name)]
        if isinstance(obj, Commit):
            obj = r.object_store[obj.tree]
        if not isinstance(obj, Tree):
            raise NotTreeError(obj.id)
        if os.path.exists(target):
            if not os.path.isdir(target):
                raise NotADirectory(target)
            if os.listdir(target):
                raise ValueError(f"{target} is not empty")
        else:
            os.makedirs(target)
        checkout_tree(r.object_store, obj, target)
        logger.info("checked out %s into %s", obj.id.decode("ascii"), target)


def show_ref(repo: RepoPath = ".", outstream: TextIO = sys.stdout) -> list[Ref]:
    """List references in a local repository.

    Args:
      repo: Path to the repository
      outstream: Stream to write ``<sha> <path>`` lines to
    Returns: List of Ref(sha, path)
    """
    with open_repo_closing(repo) as r:
        refs = r.refs.list_refs()
    for sha, path in refs:
        outstream.write(f"{sha.decode('ascii')} {path.decode('utf-8', 'replace')}\n")
    return refs
