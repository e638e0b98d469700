# refs.py -- Ref handling
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

"""Ref handling.

A ref is a file under the control directory holding either a hex sha or
``ref: <name>``, a pointer to another ref.
"""

__all__ = [
    "HEADREF",
    "LOCAL_BRANCH_PREFIX",
    "LOCAL_TAG_PREFIX",
    "MAX_SYMREF_DEPTH",
    "SYMREF",
    "DiskRefsContainer",
    "Ref",
    "RefMissing",
    "SymrefLoop",
    "local_branch_name",
    "local_tag_name",
    "parse_symref_value",
]

import logging
import os
from typing import NamedTuple

from .file import GitFile
from .layout import ControlDir
from .objects import ObjectID, valid_hexsha

HEADREF = b"HEAD"
SYMREF = b"ref: "
REFSDIR = b"refs"
LOCAL_BRANCH_PREFIX = b"refs/heads/"
LOCAL_TAG_PREFIX = b"refs/tags/"

# Same limit as git's resolve_ref_unsafe().
MAX_SYMREF_DEPTH = 5

logger = logging.getLogger(__name__)


class SymrefLoop(Exception):
    """There is a loop between one or more symrefs."""

    def __init__(self, ref: bytes, depth: int) -> None:
        """Initialize SymrefLoop exception."""
        self.ref = ref
        self.depth = depth
        super().__init__(
            f"too many levels of symbolic refs resolving {ref.decode('utf-8', 'replace')}"
        )


class RefMissing(Exception):
    """A ref file does not exist."""

    def __init__(self, ref: bytes) -> None:
        self.ref = ref
        super().__init__(f"ref {ref.decode('utf-8', 'replace')} does not exist")


class Ref(NamedTuple):
    """A resolved ref: the object it points at and its name."""

    sha: ObjectID
    path: bytes


def parse_symref_value(contents: bytes) -> bytes:
    """Parse a symref value.

    Args:
      contents: Contents to parse
    Returns: Destination
    """
    if contents.startswith(SYMREF):
        return contents[len(SYMREF) :].rstrip(b"\r\n")
    raise ValueError(contents)


def local_branch_name(name: bytes) -> bytes:
    """Build a full branch ref from a short name."""
    if name.startswith(LOCAL_BRANCH_PREFIX):
        return name
    return LOCAL_BRANCH_PREFIX + name


def local_tag_name(name: bytes) -> bytes:
    """Build a full tag ref from a short name."""
    if name.startswith(LOCAL_TAG_PREFIX):
        return name
    return LOCAL_TAG_PREFIX + name


def _to_bytes(name: bytes | str) -> bytes:
    if isinstance(name, str):
        return name.encode("utf-8")
    return name


class DiskRefsContainer:
    """Refs container that reads refs from disk."""

    def __init__(self, controldir: ControlDir) -> None:
        self.controldir = controldir

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.controldir.root!r})"

    def refpath(self, name: bytes) -> str:
        """Return the disk path of a ref."""
        return self.controldir.path(os.fsdecode(name))

    def read_ref(self, name: bytes | str) -> bytes:
        """Read a ref file without following symbolic refs.

        Returns: The contents of the ref file, without the trailing newline
        Raises:
          RefMissing: if the ref file does not exist
        """
        name = _to_bytes(name)
        f = self.controldir.open_file(os.fsdecode(name))
        if f is None:
            raise RefMissing(name)
        with f:
            contents = f.read()
        if contents.endswith(b"\n"):
            contents = contents[:-1]
        return contents.rstrip(b"\r")

    def follow(self, name: bytes | str) -> tuple[list[bytes], ObjectID]:
        """Follow a reference name.

        Returns: a tuple of (refnames, sha), where refnames are the names of
            references in the chain
        Raises:
          RefMissing: if a ref in the chain does not exist
          SymrefLoop: if more than MAX_SYMREF_DEPTH symbolic refs are followed
        """
        name = _to_bytes(name)
        refnames = [name]
        contents = self.read_ref(name)
        while contents.startswith(SYMREF):
            if len(refnames) > MAX_SYMREF_DEPTH:
                raise SymrefLoop(name, len(refnames) - 1)
            refname = contents[len(SYMREF) :]
            refnames.append(refname)
            contents = self.read_ref(refname)
        return refnames, contents

    def resolve(self, name: bytes | str) -> ObjectID:
        """Resolve a ref to the object id it ultimately points at."""
        refnames, sha = self.follow(name)
        logger.debug(
            "resolved %s to %s",
            b" -> ".join(refnames).decode("utf-8", "replace"),
            sha.decode("ascii", "replace"),
        )
        return sha

    def __getitem__(self, name: bytes | str) -> ObjectID:
        """Get the SHA1 for a reference name, following symbolic refs.

        Raises:
          KeyError: if the ref (or a ref it points to) does not exist
        """
        try:
            return self.resolve(name)
        except RefMissing as e:
            raise KeyError(name) from e

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, (bytes, str)):
            return False
        return os.path.isfile(self.refpath(_to_bytes(name)))

    def list_refs(self, base: bytes | str = REFSDIR) -> list[Ref]:
        """Resolve every ref under ``base``, depth first.

        Entries of a directory are visited in sorted order; subdirectories
        are descended into where they occur.

        Returns: list of Ref(sha, path), with paths relative to the control
            directory
        """
        base = _to_bytes(base).strip(b"/")
        refs: list[Ref] = []
        path = self.refpath(base)
        for entry in sorted(os.listdir(path)):
            name = base + b"/" + os.fsencode(entry)
            if os.path.isdir(os.path.join(path, entry)):
                refs.extend(self.list_refs(name))
            elif not entry.endswith(".lock"):
                refs.append(Ref(self.resolve(name), name))
        return refs

    def set_ref(self, name: bytes | str, sha: ObjectID) -> None:
        """Point a ref directly at an object.

        Raises:
          ValueError: if sha is not a 40 character hex sha
        """
        name = _to_bytes(name)
        if not valid_hexsha(sha):
            raise ValueError(f"invalid sha {sha!r}")
        self._write(name, sha + b"\n")

    def set_symbolic_ref(self, name: bytes | str, other: bytes | str) -> None:
        """Make a ref point at another ref."""
        name = _to_bytes(name)
        self._write(name, SYMREF + _to_bytes(other) + b"\n")

    def _write(self, name: bytes, contents: bytes) -> None:
        relative = os.fsdecode(name)
        self.controldir.ensure_dirs(os.path.dirname(relative).replace(os.sep, "/"))
        with GitFile(self.controldir.path(relative), "wb") as f:
            f.write(contents)
        logger.debug("updated %s", relative)
