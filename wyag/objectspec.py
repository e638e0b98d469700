# objectspec.py -- Object specification
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


"""Object specification."""

__all__ = [
    "AmbiguousShortId",
    "MIN_SHORT_ID_LENGTH",
    "find_object",
    "parse_ref",
    "scan_for_short_id",
    "to_bytes",
]

import logging
from typing import TYPE_CHECKING

from .errors import (
    NotBlobError,
    NotCommitError,
    NotTagError,
    NotTreeError,
    WrongObjectException,
)
from .objects import Commit, ObjectID, ShaFile, object_class, valid_hexsha
from .refs import HEADREF, local_branch_name, local_tag_name

if TYPE_CHECKING:
    from .object_store import DiskObjectStore
    from .refs import DiskRefsContainer
    from .repo import Repo

MIN_SHORT_ID_LENGTH = 4

logger = logging.getLogger(__name__)

_WRONG_TYPE_ERRORS: dict[bytes, type[WrongObjectException]] = {
    b"blob": NotBlobError,
    b"commit": NotCommitError,
    b"tag": NotTagError,
    b"tree": NotTreeError,
}


def to_bytes(text: str | bytes) -> bytes:
    """Convert text to bytes.

    Args:
      text: Text to convert (str or bytes)
    Returns: Bytes representation of text
    """
    if getattr(text, "encode", None) is not None:
        text = text.encode("ascii")  # type: ignore
    return text  # type: ignore


class AmbiguousShortId(Exception):
    """The short id is ambiguous."""

    def __init__(self, prefix: bytes, options: list[ObjectID]) -> None:
        """Initialize AmbiguousShortId.

        Args:
          prefix: The ambiguous prefix
          options: List of matching object ids
        """
        self.prefix = prefix
        self.options = options
        super().__init__(
            f"short id {prefix.decode('ascii', 'replace')} is ambiguous: "
            + ", ".join(o.decode("ascii") for o in options)
        )


def parse_ref(container: "DiskRefsContainer", refspec: str | bytes) -> bytes:
    """Parse a string referring to a reference.

    Args:
      container: A DiskRefsContainer object
      refspec: A string referring to a ref
    Returns: The full name of the ref
    Raises:
      KeyError: If the ref can not be found
    """
    refspec = to_bytes(refspec)
    possible_refs = [
        refspec,
        b"refs/" + refspec,
        local_tag_name(refspec),
        local_branch_name(refspec),
    ]
    for ref in possible_refs:
        if ref in container:
            return ref
    raise KeyError(refspec)


def scan_for_short_id(object_store: "DiskObjectStore", prefix: bytes) -> ObjectID:
    """Scan an object store for a short id.

    Raises:
      KeyError: if no object matches
      AmbiguousShortId: if more than one object matches
    """
    ret = list(object_store.iter_prefix(prefix))
    if not ret:
        raise KeyError(prefix)
    if len(ret) == 1:
        return ret[0]
    raise AmbiguousShortId(prefix, ret)


def _is_hex(name: bytes) -> bool:
    return all(c in b"0123456789abcdefABCDEF" for c in name)


def _resolve_name(repo: "Repo", name: bytes) -> ObjectID:
    if valid_hexsha(name) and name.lower() in repo.object_store:
        return name.lower()
    try:
        ref = parse_ref(repo.refs, name)
    except KeyError:
        pass
    else:
        return repo.refs[ref]
    if len(name) >= MIN_SHORT_ID_LENGTH and _is_hex(name):
        return scan_for_short_id(repo.object_store, name.lower())
    raise KeyError(name)


def find_object(
    repo: "Repo",
    name: str | bytes,
    type_name: str | bytes | None = None,
    follow: bool = True,
) -> ObjectID:
    """Resolve a name to an object id.

    ``name`` may be ``HEAD``, a ref name (``refs/heads/master``,
    ``master``, ``v1.0``), a full hex sha or a hex prefix of at least
    MIN_SHORT_ID_LENGTH characters.

    Args:
      repo: Repository to look in
      name: Name to resolve
      type_name: Kind of object wanted, or None for any
      follow: Whether to follow a commit to its tree when a tree is wanted
    Returns: The id of the object
    Raises:
      KeyError: if the name does not resolve to anything
      AmbiguousShortId: if a short id matches more than one object
      WrongObjectException: if the object is not of the requested kind
    """
    name = to_bytes(name)
    if name == HEADREF:
        sha = repo.refs[HEADREF]
    else:
        sha = _resolve_name(repo, name)
    if type_name is None:
        return sha
    wanted = object_class(to_bytes(type_name)).type_name
    obj: ShaFile = repo.object_store[sha]
    if obj.type_name == wanted:
        return sha
    if follow and isinstance(obj, Commit) and wanted == b"tree":
        logger.debug("following commit %s to its tree", sha.decode("ascii"))
        return obj.tree
    raise _WRONG_TYPE_ERRORS[wanted](sha)
