# layout.py -- Mapping of repository-relative paths onto the control directory
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

"""Layout of the repository control directory.

Everything under ``.git`` is addressed by a ``/``-separated path relative to
the control directory. :class:`ControlDir` maps those paths onto the
filesystem and creates directories and files on demand, telling callers
whether a file was freshly created or already existed.
"""

__all__ = [
    "ControlDir",
    "LayoutConflict",
    "NotADirectory",
    "NotAFile",
]

import logging
import os
from typing import BinaryIO

logger = logging.getLogger(__name__)


class LayoutConflict(Exception):
    """A path exists but is the wrong kind of filesystem entry."""

    kind: str

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"{path} is not a {self.kind}")


class NotADirectory(LayoutConflict):
    """A directory was expected but something else exists at the path."""

    kind = "directory"


class NotAFile(LayoutConflict):
    """A file was expected but a directory exists at the path."""

    kind = "file"


def _split(relative: str) -> list[str]:
    return [segment for segment in relative.split("/") if segment]


class ControlDir:
    """A repository control directory on disk.

    Attributes:
      root: Absolute path of the control directory.
    """

    def __init__(self, root: str | os.PathLike[str]) -> None:
        self.root = os.fspath(root)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.root!r})"

    def path(self, *relative: str) -> str:
        """Return the filesystem path of a repository-relative path.

        Pure; does not touch the filesystem.
        """
        segments: list[str] = []
        for part in relative:
            segments.extend(_split(part))
        return os.path.join(self.root, *segments)

    def ensure_dirs(self, relative: str, create: bool = True) -> str:
        """Make sure every directory along ``relative`` exists.

        Walks the path one segment at a time starting at the control
        directory itself. Missing segments are created when ``create`` is
        true and tolerated otherwise.

        Args:
          relative: Directory path relative to the control directory
          create: Whether to create missing directories
        Returns: The filesystem path of ``relative``
        Raises:
          NotADirectory: if a segment exists but is not a directory
        """
        segments = _split(relative)
        for i in range(len(segments) + 1):
            path = os.path.join(self.root, *segments[:i])
            if os.path.isdir(path):
                continue
            if os.path.exists(path):
                raise NotADirectory(path)
            if not create:
                # Everything below a missing directory is missing too.
                break
            os.mkdir(path)
            logger.debug("created directory %s", path)
        return os.path.join(self.root, *segments)

    def open_or_create_file(self, relative: str, create: bool = True) -> BinaryIO | None:
        """Create a file, unless it already exists.

        Parent directories are ensured first (and created if ``create``).

        Args:
          relative: File path relative to the control directory
          create: Whether to create the file and its parents
        Returns: A handle open for reading and writing on the newly created
            file, or None if the file already existed (or was not created).
            Callers must open an existing file themselves, in whatever mode
            they need.
        Raises:
          NotADirectory: if a parent exists but is not a directory
          NotAFile: if the target is a directory
        """
        segments = _split(relative)
        self.ensure_dirs("/".join(segments[:-1]), create)
        path = os.path.join(self.root, *segments)
        if os.path.isdir(path):
            raise NotAFile(path)
        if not create:
            return None
        try:
            fd = os.open(
                path, os.O_RDWR | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0),
                0o644,
            )
        except FileExistsError:
            return None
        logger.debug("created file %s", path)
        return os.fdopen(fd, "w+b")

    def open_file(self, relative: str) -> BinaryIO | None:
        """Open an existing file for reading.

        Returns: An open file object, or None if the file does not exist.
        Raises:
          NotAFile: if the target is a directory
        """
        path = self.path(relative)
        if os.path.isdir(path):
            raise NotAFile(path)
        try:
            return open(path, "rb")
        except FileNotFoundError:
            return None
