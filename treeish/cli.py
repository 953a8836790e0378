#!/usr/bin/python3 -u
#
# treeish - Read-only access to git commits, trees and branches
# Copyright (C) 2026 The treeish contributors
#
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later
# treeish is dual-licensed under the Apache License, Version 2.0 and the GNU
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

"""Simple command-line interface to treeish.

This is a way to poke at a repository with treeish, not a replacement for
git itself.
"""

import argparse
import logging
import signal
import sys
import types
from collections.abc import Sequence
from typing import Optional

from .errors import FileFormatException, HashParseError, NotGitRepository
from .hash import Hash
from .log_utils import default_logging_config, getLogger
from .refs import Branch
from .repo import Repo, RepositoryCache

__all__ = ["Command", "commands", "main"]

logger = getLogger(__name__)


def signal_int(signal: int, frame: Optional[types.FrameType]) -> None:
    """Handle interrupt signal by exiting."""
    sys.exit(1)


def _open_repo(path: str) -> Repo:
    return Repo.from_path(path)


def _branch_name(branch: Branch) -> str:
    return branch.name.decode("utf-8", "replace")


class Command:
    """A treeish subcommand."""

    def run(self, args: Sequence[str]) -> Optional[int]:
        """Run the command."""
        raise NotImplementedError(self.run)


class cmd_branches(Command):
    """List local and remote branches."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(prog="treeish branches")
        parser.add_argument("path", nargs="?", default=".")
        parsed_args = parser.parse_args(args)
        repo = _open_repo(parsed_args.path)

        logger.info("Local Branches:")
        for branch in repo.local_branches():
            logger.info("* %s => %s", _branch_name(branch), branch.commit)
        logger.info("")
        logger.info("Remote Branches:")
        for branch in repo.remote_branches():
            logger.info("* %s => %s", _branch_name(branch), branch.commit)


class cmd_ls_tree(Command):
    """List the entries of a tree."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(prog="treeish ls-tree")
        parser.add_argument("tree", help="Full hex hash of the tree")
        parser.add_argument("--path", default=".")
        parsed_args = parser.parse_args(args)
        cache = RepositoryCache(_open_repo(parsed_args.path))
        tree = cache.tree(Hash.from_hex(parsed_args.tree))
        for entry in tree.values():
            logger.info("%s %s\t%s", entry.permissions, entry.hash, entry.name)


class cmd_show_commit(Command):
    """Show the tree and parents of a commit."""

    def run(self, args: Sequence[str]) -> None:
        parser = argparse.ArgumentParser(prog="treeish show-commit")
        parser.add_argument("commit", help="Full hex hash of the commit")
        parser.add_argument("--path", default=".")
        parsed_args = parser.parse_args(args)
        cache = RepositoryCache(_open_repo(parsed_args.path))
        commit = cache.commit(Hash.from_hex(parsed_args.commit))
        logger.info("tree %s", commit.tree)
        for parent in commit.parents:
            logger.info("parent %s", parent)


commands = {
    "branches": cmd_branches,
    "ls-tree": cmd_ls_tree,
    "show-commit": cmd_show_commit,
}


def main(argv: Optional[Sequence[str]] = None) -> Optional[int]:
    """Main entry point for the treeish CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code or None
    """
    if argv is None:
        argv = sys.argv[1:]

    if not argv or argv[0] in ("-h", "--help"):
        parser = argparse.ArgumentParser(
            prog="treeish", description="Simple command-line interface to treeish"
        )
        parser.add_argument(
            "command",
            nargs="?",
            help=f"Command to run. Available: {', '.join(sorted(commands))}",
        )
        parser.print_help()
        return 1

    default_logging_config()

    cmd = argv[0]
    try:
        cmd_kls = commands[cmd]
    except KeyError:
        logging.fatal("No such subcommand: %s", cmd)
        return 1
    try:
        return cmd_kls().run(argv[1:])
    except (FileFormatException, HashParseError, NotGitRepository, OSError) as e:
        logging.fatal("%s", e)
        return 1


def _main() -> None:
    signal.signal(signal.SIGINT, signal_int)
    sys.exit(main())


if __name__ == "__main__":
    _main()
