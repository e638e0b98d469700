# errors.py -- errors for wyag
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

"""wyag-related exception classes."""

# Please do not add more errors here, but instead add them close to the code
# that raises the error.

__all__ = [
    "DecompressionError",
    "FileFormatException",
    "InvalidLeaf",
    "InvalidSha",
    "MalformedLength",
    "NotBlobError",
    "NotCommitError",
    "NotGitRepository",
    "NotTagError",
    "NotTreeError",
    "ObjectFormatException",
    "ObjectMissing",
    "UnknownObjectType",
    "WrongObjectException",
]


def _display(sha: bytes | str) -> str:
    if isinstance(sha, bytes):
        return sha.decode("ascii", "replace")
    return sha


class WrongObjectException(Exception):
    """Baseclass for all the _ is not a _ exceptions on objects.

    Do not instantiate directly.

    Subclasses should define a type_name attribute that indicates what
    was expected if they were raised.
    """

    type_name: str

    def __init__(self, sha: bytes | str, *args: object, **kwargs: object) -> None:
        """Initialize a WrongObjectException.

        Args:
            sha: The SHA of the object that was not of the expected type.
            *args: Additional positional arguments.
            **kwargs: Additional keyword arguments.
        """
        self.sha = sha
        Exception.__init__(self, f"{_display(sha)} is not a {self.type_name}")


class NotCommitError(WrongObjectException):
    """Indicates that the sha requested does not point to a commit."""

    type_name = "commit"


class NotTreeError(WrongObjectException):
    """Indicates that the sha requested does not point to a tree."""

    type_name = "tree"


class NotBlobError(WrongObjectException):
    """Indicates that the sha requested does not point to a blob."""

    type_name = "blob"


class NotTagError(WrongObjectException):
    """Indicates that the sha requested does not point to a tag."""

    type_name = "tag"


class ObjectMissing(Exception):
    """Indicates that a requested object is missing."""

    def __init__(self, sha: bytes | str, *args: object, **kwargs: object) -> None:
        """Initialize an ObjectMissing exception.

        Args:
            sha: The SHA of the missing object.
            *args: Additional positional arguments.
            **kwargs: Additional keyword arguments.
        """
        self.sha = sha
        Exception.__init__(self, f"{_display(sha)} is not in the object store")


class FileFormatException(Exception):
    """Base class for exceptions relating to reading git file formats."""


class ObjectFormatException(FileFormatException):
    """Indicates an error parsing an object."""


class UnknownObjectType(ObjectFormatException):
    """The type tag of a stored object is not a known object type."""

    def __init__(self, type_name: bytes, sha: bytes | str | None = None) -> None:
        self.type_name = type_name
        self.sha = sha
        message = f"unknown type tag {type_name!r}"
        if sha is not None:
            message += f" in {_display(sha)}"
        super().__init__(message)


class MalformedLength(ObjectFormatException):
    """The length recorded in an object header does not match its payload."""

    def __init__(
        self, declared: bytes, actual: int, sha: bytes | str | None = None
    ) -> None:
        self.declared = declared
        self.actual = actual
        self.sha = sha
        message = f"malformed object: bad length {declared!r} (payload is {actual} bytes)"
        if sha is not None:
            message += f" in {_display(sha)}"
        super().__init__(message)


class DecompressionError(ObjectFormatException):
    """A loose object file does not hold a valid zlib stream."""


class InvalidLeaf(ObjectFormatException):
    """A tree entry does not follow the ``mode SP path NUL sha`` grammar."""


class InvalidSha(ObjectFormatException):
    """An object id is not 40 hexadecimal characters."""


class NotGitRepository(Exception):
    """Indicates that no Git repository was found."""

    def __init__(self, *args: object, **kwargs: object) -> None:
        """Initialize a NotGitRepository exception.

        Args:
            *args: Arguments to pass to the parent Exception.
            **kwargs: Additional keyword arguments.
        """
        Exception.__init__(self, *args, **kwargs)
