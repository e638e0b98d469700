# cli.py -- Command-line interface for wyag
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


"""Simple command-line interface to wyag.

The repository is looked up starting at the current directory, or at
``$WYAG_WORKDIR`` when that is set.
"""

__all__ = [
    "WORKDIR_ENV",
    "Command",
    "commands",
    "main",
    "signal_int",
]

import argparse
import logging
import os
import signal
import sys
import types
from collections.abc import Sequence

from . import porcelain
from .errors import (
    FileFormatException,
    NotGitRepository,
    ObjectMissing,
    WrongObjectException,
)
from .file import FileLocked
from .layout import LayoutConflict
from .log_utils import default_logging_config
from .objects import OBJECT_CLASSES
from .objectspec import AmbiguousShortId
from .refs import RefMissing, SymrefLoop
from .repo import InvalidConfiguration

WORKDIR_ENV = "WYAG_WORKDIR"

# Failures reported to the user as an error message and exit status 1.
_USER_ERRORS = (
    AmbiguousShortId,
    FileFormatException,
    FileLocked,
    InvalidConfiguration,
    KeyError,
    LayoutConflict,
    NotGitRepository,
    NotImplementedError,
    ObjectMissing,
    OSError,
    RefMissing,
    SymrefLoop,
    ValueError,
    WrongObjectException,
)

_TYPE_NAMES = sorted(cls.type_name.decode("ascii") for cls in OBJECT_CLASSES)

logger = logging.getLogger(__name__)


def signal_int(signal: int, frame: types.FrameType | None) -> None:
    """Handle interrupt signal by exiting.

    Args:
        signal: Signal number
        frame: Current stack frame
    """
    sys.exit(1)


def _workdir() -> str:
    return os.environ.get(WORKDIR_ENV) or "."


class Command:
    """A wyag subcommand."""

    def run(self, args: Sequence[str]) -> int | None:
        """Run the command."""
        raise NotImplementedError(self.run)


class cmd_init(Command):
    """Create an empty Git repository."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(
            prog="wyag init", description="Initialize a new, empty repository."
        )
        parser.add_argument("path", help="Where to create the repository")
        parsed_args = parser.parse_args(args)
        porcelain.init(os.path.abspath(parsed_args.path))


class cmd_cat_file(Command):
    """Provide content of repository objects."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(
            prog="wyag cat-file", description="Provide content of repository objects."
        )
        parser.add_argument("type", choices=_TYPE_NAMES, help="Specify the type")
        parser.add_argument("object", help="The object to display")
        parsed_args = parser.parse_args(args)
        porcelain.cat_file(
            _workdir(), parsed_args.type, parsed_args.object, sys.stdout.buffer
        )
        sys.stdout.buffer.flush()


class cmd_hash_object(Command):
    """Compute object ID and optionally create an object from a file."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(
            prog="wyag hash-object",
            description="Compute object ID and optionally creates a blob from a file.",
        )
        parser.add_argument(
            "-t",
            dest="type",
            choices=_TYPE_NAMES,
            default="blob",
            help="Specify the type",
        )
        parser.add_argument(
            "-w",
            dest="write",
            action="store_true",
            help="Actually write the object into the database",
        )
        parser.add_argument("path", help="Read object from <file>")
        parsed_args = parser.parse_args(args)
        sha = porcelain.hash_object(
            os.path.abspath(parsed_args.path),
            parsed_args.type,
            write=parsed_args.write,
            repo=_workdir(),
        )
        sys.stdout.write(sha.decode("ascii") + "\n")


class cmd_log(Command):
    """Display history of a given commit."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(
            prog="wyag log", description="Display history of a given commit."
        )
        parser.add_argument("commit", nargs="?", default="HEAD", help="Commit to start at")
        parsed_args = parser.parse_args(args)
        porcelain.log(_workdir(), parsed_args.commit, outstream=sys.stdout)


class cmd_ls_tree(Command):
    """Pretty-print a tree object."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(
            prog="wyag ls-tree", description="Pretty-print a tree object."
        )
        parser.add_argument("treeish", help="Tree (or commit) to list")
        parsed_args = parser.parse_args(args)
        porcelain.ls_tree(_workdir(), parsed_args.treeish, outstream=sys.stdout)


class cmd_checkout(Command):
    """Checkout a commit inside of a directory."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(
            prog="wyag checkout",
            description="Checkout a commit inside of a directory.",
        )
        parser.add_argument("commit", help="The commit or tree to checkout")
        parser.add_argument("path", help="The EMPTY directory to checkout on")
        parsed_args = parser.parse_args(args)
        porcelain.checkout(
            _workdir(), parsed_args.commit, os.path.abspath(parsed_args.path)
        )


class cmd_show_ref(Command):
    """List references."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(prog="wyag show-ref", description="List references.")
        parser.parse_args(args)
        porcelain.show_ref(_workdir(), outstream=sys.stdout)


commands = {
    "cat-file": cmd_cat_file,
    "checkout": cmd_checkout,
    "hash-object": cmd_hash_object,
    "init": cmd_init,
    "log": cmd_log,
    "ls-tree": cmd_ls_tree,
    "show-ref": cmd_show_ref,
}


def main(argv: Sequence[str] | None = None) -> int | None:
    """Main entry point for the wyag CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code or None
    """
    if argv is None:
        argv = sys.argv[1:]

    if not argv or argv[0] in ("-h", "--help"):
        parser = argparse.ArgumentParser(
            prog="wyag", description="Simple command-line interface to wyag"
        )
        parser.add_argument(
            "command",
            nargs="?",
            help=f"Command to run. Available: {', '.join(sorted(commands.keys()))}",
        )
        parser.print_help()
        return 1

    default_logging_config()

    cmd = argv[0]
    cmd_args = argv[1:]

    try:
        cmd_kls = commands[cmd]
    except KeyError:
        logger.fatal("No such subcommand: %s", cmd)
        return 1
    try:
        return cmd_kls().run(cmd_args)
    except _USER_ERRORS as e:
        logger.error("%s", e)
        logger.debug("%s failed", cmd, exc_info=True)
        return 1


def _main() -> None:
    signal.signal(signal.SIGINT, signal_int)

    sys.exit(main())


if __name__ == "__main__":
    _main()
