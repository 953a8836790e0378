# test_cli.py -- tests for cli.py
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

"""Tests for treeish.cli."""

import logging
from unittest.mock import patch

from treeish import cli
from treeish.hash import Hash

from . import GitTestCase, TestCase


class CliTestCase(TestCase):
    """Base class for CLI tests."""

    def setUp(self) -> None:
        super().setUp()
        root_logger = logging.getLogger()
        original_handlers = list(root_logger.handlers)
        original_level = root_logger.level

        def restore() -> None:
            root_logger.handlers = original_handlers
            root_logger.level = original_level

        self.addCleanup(restore)
        # Keep main() from installing a stderr handler
        patcher = patch.object(cli, "default_logging_config")
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_cli(self, *args: str) -> tuple[object, list[str]]:
        with self.assertLogs(level=logging.INFO) as cm:
            logging.getLogger("treeish").info("start")
            result = cli.main(list(args))
        return result, [r.getMessage() for r in cm.records[1:]]


class MainTests(CliTestCase):
    """Tests for cli.main."""

    def test_help(self) -> None:
        with patch("sys.stdout"):
            self.assertEqual(1, cli.main([]))
            self.assertEqual(1, cli.main(["--help"]))

    def test_unknown_command(self) -> None:
        result, messages = self.run_cli("frobnicate")
        self.assertEqual(1, result)
        self.assertEqual(["No such subcommand: frobnicate"], messages)

    def test_not_a_repository(self) -> None:
        with patch.object(cli.Repo, "from_path", side_effect=cli.NotGitRepository("nope")):
            result, messages = self.run_cli("branches", "/nonexistent")
        self.assertEqual(1, result)
        self.assertEqual(["nope"], messages)

    def test_bad_hash(self) -> None:
        with patch.object(cli.Repo, "from_path"):
            result, messages = self.run_cli("ls-tree", "abc")
        self.assertEqual(1, result)
        self.assertEqual(["Hash length mismatch: 3"], messages)

    def test_commands(self) -> None:
        self.assertEqual({"branches", "ls-tree", "show-commit"}, set(cli.commands))
        for kls in cli.commands.values():
            self.assertTrue(issubclass(kls, cli.Command))


class CommandTests(GitTestCase, CliTestCase):
    """Tests for the subcommands against a repository made by git."""

    def setUp(self) -> None:
        super().setUp()
        self.repo_path = self.make_repo()
        self.commit_hex = self.commit_file(self.repo_path, "hello.txt", b"hello\n", "Add hello")
        self.run_git(["branch", "-M", "master"], cwd=self.repo_path)
        self.tree_hex = self.run_git(
            ["rev-parse", "HEAD^{tree}"], cwd=self.repo_path
        ).decode("ascii")

    def test_branches(self) -> None:
        result, messages = self.run_cli("branches", self.repo_path)
        self.assertIsNone(result)
        self.assertEqual(
            [
                "Local Branches:",
                f"* master => {self.commit_hex}",
                "",
                "Remote Branches:",
            ],
            messages,
        )

    def test_ls_tree(self) -> None:
        result, messages = self.run_cli("ls-tree", self.tree_hex, "--path", self.repo_path)
        self.assertIsNone(result)
        self.assertEqual(
            ["100644 ce013625030ba8dba906f756967f9e9ca394464a\thello.txt"], messages
        )

    def test_show_commit(self) -> None:
        result, messages = self.run_cli(
            "show-commit", self.commit_hex, "--path", self.repo_path
        )
        self.assertIsNone(result)
        self.assertEqual([f"tree {self.tree_hex}"], messages)

    def test_missing_object(self) -> None:
        missing = Hash.from_hex("0123456789abcdef0123456789abcdef01234567")
        result, messages = self.run_cli(
            "show-commit", missing.hex(), "--path", self.repo_path
        )
        self.assertEqual(1, result)
        self.assertEqual(1, len(messages))
        self.assertIn(missing.hex(), messages[0])
