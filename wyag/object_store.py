# object_store.py -- Loose object storage
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

"""Git object store interfaces and implementation.

Only loose objects are supported: every object lives compressed in its own
file under ``objects/``. Packfiles are not read or written.
"""

__all__ = [
    "OBJECTDIR",
    "DiskObjectStore",
    "hash_object",
    "object_path",
    "read_object",
    "write_object",
]

import logging
import os
from collections.abc import Iterator
from typing import IO, TYPE_CHECKING

from .errors import ObjectMissing
from .file import GitFile
from .layout import ControlDir
from .objects import ObjectID, ShaFile, hex_to_filename, valid_hexsha

if TYPE_CHECKING:
    from .repo import Repo

OBJECTDIR = "objects"

logger = logging.getLogger(__name__)


def object_path(sha: ObjectID | str) -> str:
    """Return the control-directory-relative path of a loose object."""
    if isinstance(sha, bytes):
        sha = sha.decode("ascii")
    return f"{OBJECTDIR}/{sha[:2]}/{sha[2:]}"


class DiskObjectStore:
    """Git-style loose object store that exists on disk."""

    def __init__(self, controldir: ControlDir, *, compression_level: int = -1) -> None:
        """Open an object store.

        Args:
          controldir: Control directory of the repository
          compression_level: zlib compression level for new objects
        """
        self.controldir = controldir
        self.path = controldir.path(OBJECTDIR)
        self.compression_level = compression_level

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.path!r})>"

    def _get_shafile_path(self, sha: ObjectID) -> str:
        return hex_to_filename(self.path, sha)

    def __contains__(self, sha: object) -> bool:
        """Check if a particular object is present by SHA1."""
        if not isinstance(sha, bytes) or not valid_hexsha(sha):
            return False
        return os.path.isfile(self._get_shafile_path(sha))

    def __getitem__(self, sha: ObjectID) -> ShaFile:
        """Obtain an object by SHA1.

        Raises:
          ObjectMissing: if there is no loose object with this sha
        """
        return self.read_object(sha)

    def read_object(self, sha: ObjectID) -> ShaFile:
        """Read and parse a loose object.

        Raises:
          ObjectMissing: if there is no loose object with this sha
          DecompressionError: if the object file is not a zlib stream
          UnknownObjectType: if the stored type is not known
          MalformedLength: if the stored length does not match the payload
        """
        if not valid_hexsha(sha):
            raise ObjectMissing(sha)
        f = self.controldir.open_file(object_path(sha))
        if f is None:
            raise ObjectMissing(sha)
        with f:
            return ShaFile.from_file(f, sha)

    def write_object(self, obj: ShaFile, persist: bool = True) -> ObjectID:
        """Compute the id of an object, and optionally store it.

        Args:
          obj: Object to store
          persist: Whether to write the object to disk
        Returns: The hex sha of the object
        """
        sha = obj.id
        if not persist:
            return sha
        path = object_path(sha)
        data = obj.as_legacy_object(self.compression_level)
        self.controldir.ensure_dirs(os.path.dirname(path))
        # Same id means same content, so an existing file is simply replaced.
        with GitFile(self.controldir.path(path), "wb") as f:
            f.write(data)
        logger.debug("wrote %s %s", obj.type_name.decode("ascii"), sha.decode("ascii"))
        return sha

    def add_object(self, obj: ShaFile) -> None:
        """Add a single object to this object store."""
        self.write_object(obj, persist=True)

    def iter_loose_objects(self) -> Iterator[ObjectID]:
        """Iterate over the ids of all loose objects."""
        try:
            bases = sorted(os.listdir(self.path))
        except FileNotFoundError:
            return
        for base in bases:
            if len(base) != 2 or not os.path.isdir(os.path.join(self.path, base)):
                continue
            for rest in sorted(os.listdir(os.path.join(self.path, base))):
                sha = os.fsencode(base + rest)
                if valid_hexsha(sha):
                    yield sha

    def __iter__(self) -> Iterator[ObjectID]:
        return self.iter_loose_objects()

    def iter_prefix(self, prefix: bytes) -> Iterator[ObjectID]:
        """Iterate over all object SHAs with the given hex prefix."""
        prefix = prefix.lower()
        if len(prefix) < 2:
            for sha in self.iter_loose_objects():
                if sha.startswith(prefix):
                    yield sha
            return
        subdir = os.path.join(self.path, os.fsdecode(prefix[:2]))
        try:
            names = sorted(os.listdir(subdir))
        except (FileNotFoundError, NotADirectoryError):
            return
        for name in names:
            sha = prefix[:2] + os.fsencode(name)
            if sha.startswith(prefix) and valid_hexsha(sha):
                yield sha


def write_object(repo: "Repo | None", obj: ShaFile, persist: bool = True) -> ObjectID:
    """Compute the id of an object and, if ``persist``, store it in ``repo``.

    No repository is needed when not persisting.
    """
    if repo is None:
        if persist:
            raise ValueError("a repository is required to persist objects")
        return obj.id
    return repo.object_store.write_object(obj, persist=persist)


def read_object(repo: "Repo", sha: ObjectID) -> ShaFile:
    """Read an object from a repository's object store."""
    return repo.object_store.read_object(sha)


def hash_object(
    repo: "Repo | None",
    path_or_file: str | os.PathLike[str] | IO[bytes],
    type_name: bytes | str = b"blob",
    write: bool = False,
) -> ObjectID:
    """Build an object of the given kind from a file's contents.

    Args:
      repo: Repository to write to; may be None when not writing
      path_or_file: Path of the file, or a binary file-like object
      type_name: Kind of object to construct
      write: Whether to store the object
    Returns: The id of the object
    Raises:
      UnknownObjectType: if ``type_name`` is not a known kind
    """
    if isinstance(path_or_file, (str, os.PathLike)):
        with open(path_or_file, "rb") as f:
            payload = f.read()
    else:
        payload = path_or_file.read()
    obj = ShaFile.from_raw_string(type_name, payload)
    return write_object(repo, obj, persist=write)
