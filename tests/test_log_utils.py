# test_log_utils.py -- tests for log_utils.py
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

"""Tests for treeish.log_utils."""

import logging
import os
import tempfile

from treeish.log_utils import (
    _NULL_HANDLER,
    _TREEISH_LOGGER,
    _configure_logging_from_trace,
    _get_trace_target,
    _NullHandler,
    default_logging_config,
    getLogger,
    remove_null_handler,
)

from . import TestCase


class LogUtilsTests(TestCase):
    """Tests for log_utils."""

    def setUp(self) -> None:
        super().setUp()
        original_handlers = list(_TREEISH_LOGGER.handlers)
        root_logger = logging.getLogger()
        original_root_handlers = list(root_logger.handlers)
        original_root_level = root_logger.level

        def restore() -> None:
            _TREEISH_LOGGER.handlers = original_handlers
            root_logger.handlers = original_root_handlers
            root_logger.level = original_root_level

        self.addCleanup(restore)
        root_logger.handlers = []
        root_logger.level = logging.WARNING

    def test_null_handler(self) -> None:
        record = logging.LogRecord(
            name="test",
            level=logging.INFO,
            pathname="test_log_utils.py",
            lineno=1,
            msg="Test message",
            args=(),
            exc_info=None,
        )
        _NullHandler().emit(record)

    def test_package_logger_starts_silent(self) -> None:
        self.assertIn(_NULL_HANDLER, _TREEISH_LOGGER.handlers)

    def test_get_logger(self) -> None:
        logger = getLogger("treeish.test")
        self.assertIsInstance(logger, logging.Logger)
        self.assertEqual("treeish.test", logger.name)

    def test_remove_null_handler(self) -> None:
        remove_null_handler()
        self.assertNotIn(_NULL_HANDLER, _TREEISH_LOGGER.handlers)

    def test_default_logging_config(self) -> None:
        default_logging_config()
        self.assertNotIn(_NULL_HANDLER, _TREEISH_LOGGER.handlers)
        root_logger = logging.getLogger()
        self.assertTrue(root_logger.handlers)
        self.assertEqual(logging.INFO, root_logger.level)

    def test_default_logging_config_with_trace(self) -> None:
        self.overrideEnv("GIT_TRACE", "1")
        default_logging_config()
        root_logger = logging.getLogger()
        self.assertTrue(root_logger.handlers)
        self.assertEqual(logging.DEBUG, root_logger.level)

    def test_trace_disabled(self) -> None:
        for value in ("", "0", "false", "FALSE"):
            self.assertIsNone(_get_trace_target({"GIT_TRACE": value}))
        self.assertIsNone(_get_trace_target({}))
        self.assertFalse(_configure_logging_from_trace({}))

    def test_trace_stderr(self) -> None:
        for value in ("1", "2", "true", "TRUE"):
            self.assertEqual(2, _get_trace_target({"GIT_TRACE": value}))

    def test_trace_other_values_ignored(self) -> None:
        for value in ("3", "10", "relative/path"):
            self.assertIsNone(_get_trace_target({"GIT_TRACE": value}))
        with tempfile.TemporaryDirectory() as tmpdir:
            self.assertIsNone(_get_trace_target({"GIT_TRACE": tmpdir}))

    def test_trace_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "trace.log")
            self.assertEqual(path, _get_trace_target({"GIT_TRACE": path}))

    def test_trace_to_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "trace.log")
            self.assertTrue(_configure_logging_from_trace({"GIT_TRACE": path}))
            getLogger("treeish.test").debug("traced")
            for handler in logging.getLogger().handlers:
                handler.close()
            with open(path) as f:
                self.assertIn("treeish.test DEBUG: traced", f.read())
