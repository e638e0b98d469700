# objects.py -- Access to base git objects
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

"""Access to base git objects.

Every object is stored as a frame ``<type> <length>\\0<payload>``; the SHA-1
of the frame is the object's id. The payload format depends on the type:

* blob: opaque bytes
* tree: a sequence of ``<mode> <path>\\0<20-byte sha>`` entries
* commit: a key-value list with message (see :class:`Kvlm`)

Tags are a known type, but reading or creating one is not supported.
"""

__all__ = [
    "OBJECT_CLASSES",
    "Blob",
    "Commit",
    "Kvlm",
    "ObjectID",
    "ShaFile",
    "Tag",
    "Tree",
    "TreeEntry",
    "filename_to_hex",
    "hex_to_filename",
    "hex_to_sha",
    "object_class",
    "parse_kvlm",
    "parse_tree",
    "serialize_kvlm",
    "serialize_tree",
    "sha_to_hex",
    "valid_hexsha",
]

import binascii
import hashlib
import os
import zlib
from collections.abc import Iterable, Iterator
from typing import IO, NamedTuple

from .errors import (
    DecompressionError,
    InvalidLeaf,
    InvalidSha,
    MalformedLength,
    ObjectFormatException,
    UnknownObjectType,
)

# A 40 character lowercase hex sha, as bytes.
ObjectID = bytes

# Header fields for commits
_TREE_HEADER = b"tree"
_PARENT_HEADER = b"parent"
_AUTHOR_HEADER = b"author"
_COMMITTER_HEADER = b"committer"

MESSAGE_KEY = b""

S_IFGITLINK = 0o160000


def sha_to_hex(sha: bytes) -> ObjectID:
    """Takes a binary sha and returns its 40 character hex representation."""
    if len(sha) != 20:
        raise InvalidSha(f"Incorrect length of binary sha: {len(sha)}")
    return binascii.hexlify(sha)


def hex_to_sha(hex: bytes | str) -> bytes:
    """Takes a hex sha and returns a binary sha."""
    if isinstance(hex, str):
        hex = hex.encode("ascii")
    if not valid_hexsha(hex):
        raise InvalidSha(f"Invalid hexsha: {hex!r}")
    return binascii.unhexlify(hex)


def valid_hexsha(hex: bytes | str) -> bool:
    """Check whether ``hex`` is a 40 character hexadecimal sha."""
    if len(hex) != 40:
        return False
    try:
        binascii.unhexlify(hex)
    except (TypeError, binascii.Error):
        return False
    return True


def hex_to_filename(path: str, hex: bytes | str) -> str:
    """Return the loose object path for a hex sha.

    The first two characters name a subdirectory, the other 38 the file.
    """
    if isinstance(hex, bytes):
        hex = hex.decode("ascii")
    return os.path.join(path, hex[:2], hex[2:])


def filename_to_hex(filename: str) -> ObjectID:
    """Takes an object filename and returns its corresponding hex sha."""
    names = filename.rsplit(os.path.sep, 2)[-2:]
    hex = (names[0] + names[1]).encode("ascii")
    if not valid_hexsha(hex):
        raise InvalidSha(f"Invalid object filename: {filename}")
    return hex


def object_header(type_name: bytes, length: int) -> bytes:
    """Return the frame header for an object of the given type and length."""
    return type_name + b" " + str(length).encode("ascii") + b"\0"


def object_class(type_name: bytes | str) -> type["ShaFile"]:
    """Get the object class corresponding to the given type name.

    Raises:
      UnknownObjectType: if the type name is not one of the known types
    """
    if isinstance(type_name, str):
        type_name = type_name.encode("ascii")
    try:
        return _TYPE_MAP[type_name]
    except KeyError:
        raise UnknownObjectType(type_name) from None


class ShaFile:
    """A git SHA file."""

    type_name: bytes

    def _deserialize(self, payload: bytes) -> None:
        raise NotImplementedError(self._deserialize)

    def _serialize(self) -> bytes:
        raise NotImplementedError(self._serialize)

    @staticmethod
    def from_raw_string(type_name: bytes | str, payload: bytes) -> "ShaFile":
        """Creates an object of the indicated type from the raw payload given.

        Args:
          type_name: The type name of the object
          payload: The raw uncompressed payload, without header
        """
        obj = object_class(type_name)()
        obj._deserialize(payload)
        return obj

    @classmethod
    def from_string(cls, payload: bytes) -> "ShaFile":
        """Create an object of this class from its raw payload."""
        obj = cls()
        obj._deserialize(payload)
        return obj

    @classmethod
    def from_framed(cls, text: bytes, sha: ObjectID | None = None) -> "ShaFile":
        """Parse an uncompressed ``<type> <length>\\0<payload>`` frame.

        Args:
          text: The framed object
          sha: Object id, only used in error messages
        Raises:
          UnknownObjectType: if the type is not known
          MalformedLength: if the length is not the length of the payload
          ObjectFormatException: if the frame has no header
        """
        space = text.find(b" ")
        if space == -1:
            raise ObjectFormatException(f"object {sha!r} has no type header")
        type_name = text[:space]
        if type_name not in _TYPE_MAP:
            raise UnknownObjectType(type_name, sha)
        nul = text.find(b"\0", space)
        if nul == -1:
            raise ObjectFormatException(f"object {sha!r} has no length header")
        size = text[space + 1 : nul]
        payload = text[nul + 1 :]
        if not size.isdigit() or int(size) != len(payload):
            raise MalformedLength(size, len(payload), sha)
        return cls.from_raw_string(type_name, payload)

    @classmethod
    def from_file(cls, f: IO[bytes], sha: ObjectID | None = None) -> "ShaFile":
        """Read a zlib-compressed loose object from a file.

        Raises:
          DecompressionError: if the contents are not a valid zlib stream
        """
        try:
            text = zlib.decompress(f.read())
        except zlib.error as e:
            raise DecompressionError(f"unable to decompress object {sha!r}: {e}") from e
        return cls.from_framed(text, sha)

    def as_raw_string(self) -> bytes:
        """Return the serialized payload of this object."""
        return self._serialize()

    def as_framed_string(self) -> bytes:
        """Return the header and payload, as hashed and stored."""
        payload = self.as_raw_string()
        return object_header(self.type_name, len(payload)) + payload

    def as_legacy_object(self, compression_level: int = -1) -> bytes:
        """Return the compressed frame, as written to a loose object file."""
        return zlib.compress(self.as_framed_string(), compression_level)

    def sha(self) -> "hashlib._Hash":
        """The SHA1 object that is the name of this object."""
        return hashlib.sha1(self.as_framed_string())

    @property
    def id(self) -> ObjectID:
        """The hex SHA of this object."""
        return self.sha().hexdigest().encode("ascii")

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.id.decode('ascii')}>"

    def __eq__(self, other: object) -> bool:
        """Return true if the sha of the two objects match."""
        return isinstance(other, ShaFile) and self.id == other.id

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash(self.id)


class Blob(ShaFile):
    """A Git Blob object."""

    type_name = b"blob"

    def __init__(self, data: bytes = b"") -> None:
        self.data = data

    def _deserialize(self, payload: bytes) -> None:
        self.data = payload

    def _serialize(self) -> bytes:
        return self.data


class Tag(ShaFile):
    """A Git Tag object.

    Tags are a known object type, but their payload is not implemented.
    """

    type_name = b"tag"

    def __init__(self) -> None:
        raise NotImplementedError("tag objects are not supported")


class Kvlm:
    """Key-value list with message.

    An ordered mapping from keys to lists of values. Keys may repeat (as in
    multiple ``parent`` lines); they keep the order in which they were first
    added. The free-text message is held under the empty key and is always
    serialized last.
    """

    def __init__(self) -> None:
        self._keys: list[bytes] = []
        self._values: dict[bytes, list[bytes]] = {}

    def add(self, key: bytes, value: bytes) -> None:
        """Append a value for ``key``."""
        if key not in self._values:
            self._keys.append(key)
            self._values[key] = []
        self._values[key].append(value)

    def get(self, key: bytes) -> list[bytes] | None:
        """Return the values for ``key``, or None if it is not present."""
        return self._values.get(key)

    def set(self, key: bytes, values: list[bytes]) -> None:
        """Replace all values for ``key``; an empty list removes it."""
        if not values:
            if key in self._values:
                del self._values[key]
                self._keys.remove(key)
            return
        if key not in self._values:
            self._keys.append(key)
        self._values[key] = list(values)

    def keys(self) -> list[bytes]:
        """Keys in insertion order, including the message key if set."""
        return list(self._keys)

    def items(self) -> Iterator[tuple[bytes, list[bytes]]]:
        for key in self._keys:
            yield key, self._values[key]

    @property
    def message(self) -> bytes:
        return b"".join(self._values.get(MESSAGE_KEY, []))

    @message.setter
    def message(self, value: bytes) -> None:
        self.set(MESSAGE_KEY, [value])

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __getitem__(self, key: bytes) -> list[bytes]:
        return self._values[key]

    def __len__(self) -> int:
        return len(self._keys)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Kvlm):
            return NotImplemented
        return (
            self._headers() == other._headers() and self.message == other.message
        )

    def _headers(self) -> list[tuple[bytes, list[bytes]]]:
        return [(key, values) for key, values in self.items() if key != MESSAGE_KEY]

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self.items())!r})"


def parse_kvlm(raw: bytes, kvlm: Kvlm | None = None) -> Kvlm:
    """Parse a key-value list with message.

    Each header line is ``key SP value LF``; a line starting with a space
    continues the previous value. The first line with no space before its
    end (normally the blank separator line) starts the message, which runs to
    the end of ``raw``.

    Args:
      raw: The serialized text
      kvlm: Optional Kvlm to add the parsed fields to
    Returns: The Kvlm holding the parsed fields
    """
    if kvlm is None:
        kvlm = Kvlm()
    start = 0
    while True:
        spc = raw.find(b" ", start)
        nl = raw.find(b"\n", start)

        # No "key value" header here: the rest is the message. A blank
        # separator line is not part of it.
        if spc < 0 or (nl >= 0 and nl < spc):
            if nl == start:
                start += 1
            kvlm.add(MESSAGE_KEY, raw[start:])
            return kvlm

        key = raw[start:spc]

        # Find the end of the value: the first newline not followed by a space.
        end = spc
        while True:
            end = raw.find(b"\n", end + 1)
            if end < 0:
                end = len(raw)
                break
            if raw[end + 1 : end + 2] != b" ":
                break

        kvlm.add(key, raw[spc + 1 : end].replace(b"\n ", b"\n"))
        start = end + 1
        if start >= len(raw):
            return kvlm


def serialize_kvlm(kvlm: Kvlm) -> bytes:
    """Serialize a Kvlm; the inverse of parse_kvlm."""
    chunks = []
    for key, values in kvlm.items():
        if key == MESSAGE_KEY:
            continue
        for value in values:
            chunks.append(key + b" " + value.replace(b"\n", b"\n ") + b"\n")
    chunks.append(b"\n")
    chunks.append(kvlm.message)
    return b"".join(chunks)


class TreeEntry(NamedTuple):
    """Named tuple encapsulating a single tree entry."""

    mode: bytes
    path: bytes
    sha: ObjectID

    def is_tree(self) -> bool:
        return self.mode.lstrip(b"0") == b"40000"


def _parse_tree_entry(text: bytes, start: int) -> tuple[int, TreeEntry]:
    mode_end = text.find(b" ", start)
    if mode_end - start not in (5, 6):
        raise InvalidLeaf(f"invalid tree entry mode at offset {start}")
    mode = text[start:mode_end]
    if mode.strip(b"01234567"):
        raise InvalidLeaf(f"invalid tree entry mode {mode!r}")
    name_end = text.find(b"\0", mode_end)
    if name_end < 0:
        raise InvalidLeaf(f"unterminated tree entry path at offset {mode_end + 1}")
    end = name_end + 21
    if end > len(text):
        raise InvalidLeaf(f"truncated tree entry sha at offset {name_end + 1}")
    sha = binascii.hexlify(text[name_end + 1 : end])
    return end, TreeEntry(mode, text[mode_end + 1 : name_end], sha)


def parse_tree(text: bytes) -> list[TreeEntry]:
    """Parse a tree text.

    Args:
      text: Serialized text to parse
    Returns: list of TreeEntry, in the order they were stored
    Raises:
      InvalidLeaf: if an entry is malformed
    """
    entries = []
    pos = 0
    while pos < len(text):
        pos, entry = _parse_tree_entry(text, pos)
        entries.append(entry)
    return entries


def serialize_tree(items: Iterable[TreeEntry]) -> Iterator[bytes]:
    """Serialize tree entries, in the order given.

    Raises:
      InvalidSha: if an entry's sha is not 40 hex characters
    """
    for mode, path, hexsha in items:
        yield mode + b" " + path + b"\0" + hex_to_sha(hexsha)


class Tree(ShaFile):
    """A Git tree object.

    Entries keep the order in which they were parsed or added.
    """

    type_name = b"tree"

    def __init__(self, entries: Iterable[TreeEntry] | None = None) -> None:
        self._entries: list[TreeEntry] = list(entries or [])

    def _deserialize(self, payload: bytes) -> None:
        self._entries = parse_tree(payload)

    def _serialize(self) -> bytes:
        return b"".join(serialize_tree(self._entries))

    def add(self, path: bytes, mode: bytes | int, hexsha: ObjectID) -> None:
        """Append an entry.

        Args:
          path: Name of the entry
          mode: Mode as ASCII digits, or as an integer (rendered in octal)
          hexsha: Hex sha of the entry's object
        """
        if isinstance(mode, int):
            mode = b"%o" % mode
        self._entries.append(TreeEntry(mode, path, hexsha))

    def entries(self) -> list[TreeEntry]:
        """Return the entries, in stored order."""
        return list(self._entries)

    def __iter__(self) -> Iterator[TreeEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, path: bytes) -> TreeEntry:
        for entry in self._entries:
            if entry.path == path:
                return entry
        raise KeyError(path)

    def __contains__(self, path: object) -> bool:
        return any(entry.path == path for entry in self._entries)


def _kvlm_property(key: bytes, docstring: str | None = None) -> property:
    def get(obj: "Commit") -> bytes | None:
        values = obj.kvlm.get(key)
        return values[0] if values else None

    def set(obj: "Commit", value: bytes) -> None:
        obj.kvlm.set(key, [value])

    return property(get, set, doc=docstring)


class Commit(ShaFile):
    """A git commit object, backed by a Kvlm."""

    type_name = b"commit"

    def __init__(self) -> None:
        self.kvlm = Kvlm()

    def _deserialize(self, payload: bytes) -> None:
        self.kvlm = parse_kvlm(payload)

    def _serialize(self) -> bytes:
        return serialize_kvlm(self.kvlm)

    tree = _kvlm_property(_TREE_HEADER, "Tree that is the state of this commit")

    author = _kvlm_property(_AUTHOR_HEADER, "The name of the author of the commit")

    committer = _kvlm_property(
        _COMMITTER_HEADER, "The name of the committer of the commit"
    )

    def _get_parents(self) -> list[ObjectID]:
        """Return a list of parents of this commit."""
        return list(self.kvlm.get(_PARENT_HEADER) or [])

    def _set_parents(self, value: list[ObjectID]) -> None:
        """Set a list of parents of this commit."""
        self.kvlm.set(_PARENT_HEADER, value)

    parents = property(_get_parents, _set_parents)

    def _get_message(self) -> bytes:
        return self.kvlm.message

    def _set_message(self, value: bytes) -> None:
        self.kvlm.message = value

    message = property(_get_message, _set_message, doc="The commit message")


OBJECT_CLASSES: tuple[type[ShaFile], ...] = (
    Commit,
    Tree,
    Blob,
    Tag,
)

_TYPE_MAP: dict[bytes, type[ShaFile]] = {cls.type_name: cls for cls in OBJECT_CLASSES}
