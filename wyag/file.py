# file.py -- Safe writes to repository files
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

"""Safe writes to repository files.

Files under the control directory that may already exist (refs, the config,
loose objects being rewritten) are replaced through a lock file: the new
contents go to ``<name>.lock`` and are renamed over ``<name>`` on close, so a
reader never observes a half-written file.
"""

__all__ = [
    "FileLocked",
    "GitFile",
]

import os
import warnings
from types import TracebackType
from typing import IO


def GitFile(
    filename: str | os.PathLike[str], mode: str = "rb", mask: int = 0o644
) -> "IO[bytes] | _GitFile":
    """Open a file, using the lock file protocol for writes.

    Only ``rb`` and ``wb`` are supported.

    Args:
      filename: Path to the file
      mode: ``rb`` or ``wb``
      mask: Permission bits for a newly created lock file
    Returns: a builtin file object for reads, a _GitFile for writes
    """
    if "a" in mode:
        raise OSError("append mode not supported for Git files")
    if "+" in mode:
        raise OSError("read/write mode not supported for Git files")
    if "b" not in mode:
        raise OSError("text mode not supported for Git files")
    if "w" in mode:
        return _GitFile(filename, mode, mask)
    return open(filename, mode)


class FileLocked(Exception):
    """File is already locked."""

    def __init__(self, filename: str, lockfilename: str) -> None:
        """Initialize FileLocked.

        Args:
          filename: Name of the file that is locked
          lockfilename: Name of the lock file
        """
        self.filename = filename
        self.lockfilename = lockfilename
        super().__init__(filename, lockfilename)


class _GitFile:
    """File that follows the git locking protocol for writes.

    All writes to a file foo go to foo.lock in the same directory; the lock
    file is renamed over the original on close().

    Note: You *must* call close() or abort() for the lock to be released.
        Using the object as a context manager does this for you.
    """

    def __init__(self, filename: str | os.PathLike[str], mode: str, mask: int) -> None:
        self._filename = os.fspath(filename)
        self._lockfilename = self._filename + ".lock"
        try:
            fd = os.open(
                self._lockfilename,
                os.O_RDWR | os.O_CREAT | os.O_EXCL | getattr(os, "O_BINARY", 0),
                mask,
            )
        except FileExistsError as exc:
            raise FileLocked(self._filename, self._lockfilename) from exc
        self._file = os.fdopen(fd, mode)
        self._closed = False

    @property
    def name(self) -> str:
        return self._filename

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, data: bytes) -> int:
        return self._file.write(data)

    def abort(self) -> None:
        """Close and discard the lockfile without overwriting the target.

        If the file is already closed, this is a no-op.
        """
        if self._closed:
            return
        self._file.close()
        try:
            os.remove(self._lockfilename)
        except FileNotFoundError:
            pass
        self._closed = True

    def close(self) -> None:
        """Close this file, saving the lockfile over the original.

        Raises:
          OSError: if the original file could not be overwritten. The lock
            file is removed in that case.
        """
        if self._closed:
            return
        self._file.flush()
        os.fsync(self._file.fileno())
        self._file.close()
        try:
            os.replace(self._lockfilename, self._filename)
        finally:
            self.abort()

    def __del__(self) -> None:
        if not getattr(self, "_closed", True):
            warnings.warn(f"unclosed {self!r}", ResourceWarning, stacklevel=2)
            self.abort()

    def __enter__(self) -> "_GitFile":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            self.abort()
        else:
            self.close()

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self._filename!r}>"
