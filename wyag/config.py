# config.py -- Reading and writing repository configuration files
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

"""Reading and writing repository configuration files.

Only the subset of the git config syntax a repository's own ``config`` file
needs is supported: ``[section]`` and ``[section "subsection"]`` headers,
``name = value`` settings, bare ``name`` settings (meaning ``true``),
comments starting with ``#`` or ``;`` and double-quoted values.
"""

__all__ = [
    "ConfigDict",
    "ConfigFile",
    "default_config",
]

import os
from collections.abc import Iterator
from typing import IO

from .file import GitFile

Section = tuple[bytes, ...]
Name = bytes
Value = bytes
SectionLike = bytes | str | tuple[bytes | str, ...]
NameLike = bytes | str


class ConfigDict:
    """Configuration stored in memory.

    Sections and names are compared case-insensitively and kept in insertion
    order. Subsection names are case-sensitive.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding
        # (section key, original section, {lowered name: (name, value)})
        self._values: dict[Section, tuple[Section, dict[bytes, tuple[Name, Value]]]] = {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self.sections())!r})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ConfigDict) and other._values == self._values

    def _check_section_and_name(
        self, section: SectionLike, name: NameLike
    ) -> tuple[Section, Name]:
        if not isinstance(section, tuple):
            section = (section,)
        checked = tuple(
            s if isinstance(s, bytes) else s.encode(self.encoding) for s in section
        )
        if not isinstance(name, bytes):
            name = name.encode(self.encoding)
        return checked, name

    @staticmethod
    def _key(section: Section) -> Section:
        return (section[0].lower(), *section[1:])

    def get(self, section: SectionLike, name: NameLike) -> Value:
        """Retrieve the contents of a configuration setting.

        Raises:
          KeyError: if the value is not set
        """
        section, name = self._check_section_and_name(section, name)
        _, values = self._values[self._key(section)]
        return values[name.lower()][1]

    def get_boolean(
        self, section: SectionLike, name: NameLike, default: bool | None = None
    ) -> bool | None:
        """Retrieve a configuration setting as boolean."""
        try:
            value = self.get(section, name)
        except KeyError:
            return default
        if value.lower() in (b"true", b"yes", b"on", b"1"):
            return True
        elif value.lower() in (b"false", b"no", b"off", b"0", b""):
            return False
        raise ValueError(f"not a valid boolean string: {value!r}")

    def get_int(
        self, section: SectionLike, name: NameLike, default: int | None = None
    ) -> int | None:
        """Retrieve a configuration setting as an integer.

        Raises:
          ValueError: if the value is not a decimal integer
        """
        try:
            value = self.get(section, name)
        except KeyError:
            return default
        return int(value)

    def set(
        self, section: SectionLike, name: NameLike, value: bytes | str | bool | int
    ) -> None:
        """Set a configuration value."""
        section, name = self._check_section_and_name(section, name)
        if isinstance(value, bool):
            value = b"true" if value else b"false"
        elif isinstance(value, int):
            value = str(value).encode("ascii")
        elif not isinstance(value, bytes):
            value = value.encode(self.encoding)
        _, values = self._values.setdefault(self._key(section), (section, {}))
        values[name.lower()] = (name, value)

    def items(self, section: SectionLike) -> Iterator[tuple[Name, Value]]:
        """Iterate over the (name, value) pairs of a section."""
        section, _ = self._check_section_and_name(section, b"")
        try:
            _, values = self._values[self._key(section)]
        except KeyError:
            return iter([])
        return iter(list(values.values()))

    def sections(self) -> Iterator[Section]:
        """Iterate over the sections."""
        return iter([original for original, _ in self._values.values()])

    def has_section(self, section: SectionLike) -> bool:
        section, _ = self._check_section_and_name(section, b"")
        return self._key(section) in self._values


def _strip_comments(line: bytes) -> bytes:
    in_quotes = False
    for i, c in enumerate(line):
        if c == ord(b'"'):
            in_quotes = not in_quotes
        elif not in_quotes and c in (ord(b"#"), ord(b";")):
            return line[:i]
    return line


_ESCAPE_TABLE = {
    ord(b"\\"): b"\\",
    ord(b'"'): b'"',
    ord(b"n"): b"\n",
    ord(b"t"): b"\t",
    ord(b"b"): b"\b",
}


def _parse_string(value: bytes) -> bytes:
    ret = bytearray()
    in_quotes = False
    i = 0
    value = _strip_comments(value).strip()
    while i < len(value):
        c = value[i]
        if c == ord(b"\\") and i + 1 < len(value):
            i += 1
            ret.extend(_ESCAPE_TABLE.get(value[i], bytes([ord(b"\\"), value[i]])))
        elif c == ord(b'"'):
            in_quotes = not in_quotes
        else:
            ret.append(c)
        i += 1
    if in_quotes:
        raise ValueError("missing end quote")
    return bytes(ret)


def _format_string(value: bytes) -> bytes:
    escaped = (
        value.replace(b"\\", b"\\\\")
        .replace(b"\n", b"\\n")
        .replace(b"\t", b"\\t")
        .replace(b'"', b'\\"')
    )
    if (
        value.startswith((b" ", b"\t"))
        or value.endswith((b" ", b"\t"))
        or b"#" in value
        or b";" in value
    ):
        return b'"' + escaped + b'"'
    return escaped


def _check_variable_name(name: bytes) -> bool:
    for i in range(len(name)):
        c = name[i : i + 1]
        if not c.isalnum() and c != b"-":
            return False
    return bool(name)


def _check_section_name(name: bytes) -> bool:
    for i in range(len(name)):
        c = name[i : i + 1]
        if not c.isalnum() and c not in (b"-", b"."):
            return False
    return bool(name)


def _parse_section_header(line: bytes) -> tuple[Section, bytes]:
    end = line.find(b"]")
    if end == -1:
        raise ValueError("expected trailing ]")
    parts = line[1:end].split(b" ", 1)
    rest = line[end + 1 :]
    if not _check_section_name(parts[0]):
        raise ValueError(f"invalid section name {parts[0]!r}")
    if len(parts) == 2:
        subsection = parts[1].strip()
        if not (subsection[:1] == b'"' and subsection[-1:] == b'"'):
            raise ValueError(f"invalid subsection {parts[1]!r}")
        return (parts[0], subsection[1:-1]), rest
    return (parts[0],), rest


class ConfigFile(ConfigDict):
    """A repository configuration file, like .git/config."""

    def __init__(self, encoding: str = "utf-8") -> None:
        super().__init__(encoding=encoding)
        self.path: str | None = None

    @classmethod
    def from_file(cls, f: IO[bytes]) -> "ConfigFile":
        """Read configuration from a file-like object.

        Raises:
          ValueError: on a syntax error
        """
        ret = cls()
        section: Section | None = None
        for lineno, line in enumerate(f.readlines()):
            if lineno == 0 and line.startswith(b"\xef\xbb\xbf"):
                line = line[3:]
            line = line.strip()
            if line[:1] == b"[":
                section, line = _parse_section_header(line)
                ret._values.setdefault(ret._key(section), (section, {}))
            if _strip_comments(line).strip() == b"":
                continue
            if section is None:
                raise ValueError(f"setting {line!r} without section")
            try:
                setting, value = line.split(b"=", 1)
            except ValueError:
                setting, value = _strip_comments(line), b"true"
            setting = setting.strip()
            if not _check_variable_name(setting):
                raise ValueError(f"invalid variable name {setting!r}")
            ret.set(section, setting, _parse_string(value))
        return ret

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> "ConfigFile":
        """Read configuration from a file on disk."""
        abs_path = os.fspath(path)
        with GitFile(abs_path, "rb") as f:
            ret = cls.from_file(f)
        ret.path = abs_path
        return ret

    def write_to_path(self, path: str | os.PathLike[str] | None = None) -> None:
        """Write configuration to a file on disk."""
        if path is None:
            if self.path is None:
                raise ValueError("No path specified and no default path available")
            path = self.path
        with GitFile(path, "wb") as f:
            self.write_to_file(f)

    def write_to_file(self, f: IO[bytes]) -> None:
        """Write configuration to a file-like object."""
        for section, values in self._values.values():
            if len(section) == 1:
                f.write(b"[" + section[0] + b"]\n")
            else:
                f.write(b"[" + section[0] + b' "' + section[1] + b'"]\n')
            for name, value in values.values():
                f.write(b"\t" + name + b" = " + _format_string(value) + b"\n")


def default_config() -> ConfigFile:
    """Return the configuration written into a freshly initialized repository."""
    cf = ConfigFile()
    cf.set("core", "repositoryformatversion", 0)
    cf.set("core", "filemode", False)
    cf.set("core", "bare", False)
    return cf
