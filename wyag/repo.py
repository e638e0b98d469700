# repo.py -- For dealing with git repositories.
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


"""Repository access.

A repository is a working tree with a ``.git`` control directory holding
the object store, the refs and the repository configuration.
"""

__all__ = [
    "BASE_DIRECTORIES",
    "CONTROLDIR",
    "DEFAULT_BRANCH",
    "DESCRIPTION",
    "InvalidConfiguration",
    "MissingConfiguration",
    "Repo",
    "UnsupportedVersion",
    "find_repository",
]

import logging
import os
from io import BytesIO
from types import TracebackType

from .config import ConfigFile, default_config
from .errors import NotGitRepository
from .layout import ControlDir, NotADirectory
from .object_store import OBJECTDIR, DiskObjectStore
from .objects import ObjectID, ShaFile
from .refs import HEADREF, SYMREF, DiskRefsContainer, local_branch_name

CONTROLDIR = ".git"
REFSDIR = "refs"
REFSDIR_TAGS = "tags"
REFSDIR_HEADS = "heads"
CONFIG_FILENAME = "config"
DESCRIPTION_FILENAME = "description"

BASE_DIRECTORIES = [
    ["branches"],
    [OBJECTDIR],
    [REFSDIR],
    [REFSDIR, REFSDIR_TAGS],
    [REFSDIR, REFSDIR_HEADS],
]

DEFAULT_BRANCH = b"master"

DESCRIPTION = b"Unnamed repository; edit this file 'description' to name the repository.\n"

logger = logging.getLogger(__name__)


class InvalidConfiguration(Exception):
    """The repository configuration cannot be used."""


class MissingConfiguration(InvalidConfiguration):
    """The repository has no readable configuration file."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"configuration file missing or unreadable: {path}")


class UnsupportedVersion(InvalidConfiguration):
    """Unsupported repository version."""

    def __init__(self, version: int | bytes) -> None:
        """Initialize UnsupportedVersion exception.

        Args:
            version: The unsupported repository version
        """
        self.version = version
        super().__init__(f"unsupported repositoryformatversion {version!r}")


class Repo:
    """A git repository backed by local disk.

    To open an existing repository, call the constructor with
    the path of the working tree. To create a new repository,
    use the Repo.init class method.

    Attributes:
      path: Path to the working tree
      controldir: ControlDir for the ``.git`` directory
      config: The repository configuration
      object_store: Loose object store
      refs: Refs container
    """

    def __init__(self, root: str | bytes | os.PathLike[str], force: bool = False) -> None:
        """Open a repository on disk.

        Args:
          root: Path to the repository's working tree.
          force: Skip the control directory and configuration checks.
        Raises:
          NotGitRepository: if there is no ``.git`` directory
          MissingConfiguration: if the configuration file cannot be read
          UnsupportedVersion: if core.repositoryformatversion is not 0
        """
        root = os.fspath(root)
        if isinstance(root, bytes):
            root = os.fsdecode(root)
        self.path = os.path.abspath(root)
        self.controldir = ControlDir(os.path.join(self.path, CONTROLDIR))
        if not force and not os.path.isdir(self.controldir.root):
            raise NotGitRepository(f"No git repository was found at {root}")

        self.config = ConfigFile()
        config_path = self.controldir.path(CONFIG_FILENAME)
        try:
            self.config = ConfigFile.from_path(config_path)
        except (OSError, ValueError) as e:
            if not force:
                raise MissingConfiguration(config_path) from e

        if not force:
            try:
                version = self.config.get_int("core", "repositoryformatversion")
            except ValueError as e:
                raise UnsupportedVersion(
                    self.config.get("core", "repositoryformatversion")
                ) from e
            if version != 0:
                raise UnsupportedVersion(version if version is not None else b"")

        self.object_store = DiskObjectStore(self.controldir)
        self.refs = DiskRefsContainer(self.controldir)

    def __repr__(self) -> str:
        return f"<Repo at {self.path!r}>"

    def controldir_path(self) -> str:
        """Return the path of the control directory."""
        return self.controldir.root

    def __getitem__(self, name: ObjectID | bytes) -> ShaFile:
        """Retrieve an object by sha, or a ref's target by ref name.

        Raises:
          KeyError: if neither an object nor a ref matches
        """
        if name in self.object_store:
            return self.object_store[name]
        try:
            return self.object_store[self.refs[name]]
        except KeyError:
            raise KeyError(name) from None

    def head(self) -> ObjectID:
        """Return the SHA1 pointed at by HEAD."""
        return self.refs[HEADREF]

    def close(self) -> None:
        """Close any files opened by this repository."""

    def __enter__(self) -> "Repo":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    @classmethod
    def discover(
        cls, start: str | bytes | os.PathLike[str] = ".", required: bool = True
    ) -> "Repo | None":
        """Iterate parent directories to discover a repository.

        Return a Repo object for the first parent directory that looks like a
        Git repository.

        Args:
          start: The directory to start discovery from (defaults to '.')
          required: Whether to raise if no repository is found
        Returns: The repository, or None if none was found and not required
        Raises:
          NotGitRepository: if no repository was found and ``required``
        """
        path = os.path.abspath(os.fsdecode(os.fspath(start)))
        while True:
            try:
                return cls(path)
            except NotGitRepository:
                new_path, _tail = os.path.split(path)
                if new_path == path:  # Root reached
                    break
                path = new_path
        if not required:
            return None
        start_str = os.fsdecode(os.fspath(start))
        raise NotGitRepository(f"No git repository was found at {start_str}")

    @classmethod
    def init(cls, path: str | bytes | os.PathLike[str]) -> "Repo":
        """Create a new repository.

        The working tree is created if it does not exist. An existing, empty
        ``.git`` directory is reused.

        Args:
          path: Path in which to create the repository
        Returns: `Repo` instance
        Raises:
          NotADirectory: if ``path`` (or ``.git``) exists but is not a directory
          FileExistsError: if ``.git`` exists and is not empty
        """
        path = os.path.abspath(os.fsdecode(os.fspath(path)))
        if os.path.exists(path) and not os.path.isdir(path):
            raise NotADirectory(path)
        os.makedirs(path, exist_ok=True)

        controldir = ControlDir(os.path.join(path, CONTROLDIR))
        controldir.ensure_dirs("")
        if os.listdir(controldir.root):
            raise FileExistsError(f"{controldir.root} is not empty")

        for d in BASE_DIRECTORIES:
            controldir.ensure_dirs("/".join(d))

        cls._init_file(controldir, DESCRIPTION_FILENAME, DESCRIPTION)
        cls._init_file(
            controldir, "HEAD", SYMREF + local_branch_name(DEFAULT_BRANCH) + b"\n"
        )
        config = BytesIO()
        default_config().write_to_file(config)
        cls._init_file(controldir, CONFIG_FILENAME, config.getvalue())

        logger.info("initialized empty repository in %s", controldir.root)
        return cls(path)

    @staticmethod
    def _init_file(controldir: ControlDir, relative: str, contents: bytes) -> None:
        f = controldir.open_or_create_file(relative)
        if f is None:
            raise FileExistsError(controldir.path(relative))
        with f:
            f.write(contents)


def find_repository(
    start: str | bytes | os.PathLike[str] = ".", required: bool = True
) -> Repo | None:
    """Find the repository containing ``start``.

    See Repo.discover.
    """
    return Repo.discover(start, required=required)
