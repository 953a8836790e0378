# __init__.py -- The tests for treeish
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

"""Tests for treeish."""

__all__ = [
    "SkipTest",
    "TestCase",
    "GitTestCase",
    "test_suite",
]

import os
import shutil
import subprocess
import tempfile
import unittest
from typing import ClassVar, Optional
from unittest import SkipTest
from unittest import TestCase as _TestCase


class TestCase(_TestCase):
    """Base test case that keeps the user's configuration out of tests."""

    def setUp(self) -> None:
        super().setUp()
        self.overrideEnv("HOME", "/nonexistent")
        self.overrideEnv("GIT_CONFIG_NOSYSTEM", "1")
        self.overrideEnv("GIT_TRACE", None)

    def overrideEnv(self, name: str, value: Optional[str]) -> None:
        """Set or unset an environment variable for the duration of a test."""

        def restore() -> None:
            if oldval is not None:
                os.environ[name] = oldval
            else:
                os.environ.pop(name, None)

        oldval = os.environ.get(name)
        if value is not None:
            os.environ[name] = value
        else:
            os.environ.pop(name, None)
        self.addCleanup(restore)


class GitTestCase(TestCase):
    """Test case that builds throwaway repositories with the git binary."""

    git_env: ClassVar[dict[str, str]] = {
        "GIT_AUTHOR_NAME": "Test Author",
        "GIT_AUTHOR_EMAIL": "test@example.com",
        "GIT_AUTHOR_DATE": "1700000000 +0000",
        "GIT_COMMITTER_NAME": "Test Committer",
        "GIT_COMMITTER_EMAIL": "test@example.com",
        "GIT_COMMITTER_DATE": "1700000000 +0000",
    }

    def setUp(self) -> None:
        super().setUp()
        if shutil.which("git") is None:
            raise SkipTest("git is not installed")
        for name, value in self.git_env.items():
            self.overrideEnv(name, value)
        self.test_dir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.test_dir)

    def run_git(self, args: list[str], cwd: str, input: Optional[bytes] = None) -> bytes:
        """Run git and return its stripped standard output."""
        return subprocess.run(
            ["git", *args],
            cwd=cwd,
            input=input,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=True,
        ).stdout.strip()

    def make_repo(self, name: str = "repo", bare: bool = False) -> str:
        """Create an empty repository below the test directory."""
        path = os.path.join(self.test_dir, name)
        args = ["init", "-q"]
        if bare:
            args.append("--bare")
        self.run_git([*args, path], cwd=self.test_dir)
        return path

    def commit_file(self, repo_path: str, filename: str, contents: bytes, message: str) -> str:
        """Write a file into the work tree, commit it and return the commit hex."""
        with open(os.path.join(repo_path, filename), "wb") as f:
            f.write(contents)
        self.run_git(["add", filename], cwd=repo_path)
        self.run_git(["commit", "-q", "-m", message], cwd=repo_path)
        return self.run_git(["rev-parse", "HEAD"], cwd=repo_path).decode("ascii")


def test_suite() -> unittest.TestSuite:
    names = [
        "cli",
        "errors",
        "hash",
        "log_utils",
        "object_store",
        "objects",
        "refs",
        "repo",
        "sharded_cache",
    ]
    module_names = ["tests.test_" + name for name in names]
    loader = unittest.TestLoader()
    return loader.loadTestsFromNames(module_names)
