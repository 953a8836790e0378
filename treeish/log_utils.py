# log_utils.py -- Logging utilities for treeish
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

"""Logging utilities for treeish.

treeish is a library, and library users may not want any log output at
all. The package logger therefore starts out with a handler that drops
every record, which keeps the logging module from complaining about
missing handlers. Applications that want output call
:func:`default_logging_config` or configure logging themselves after
calling :func:`remove_null_handler`.

Setting ``GIT_TRACE`` to ``1`` or ``true`` in the environment sends debug
output to stderr; setting it to an absolute path appends it to that file.
"""

import logging
import os
import sys
from typing import Optional, Union

getLogger = logging.getLogger

TRACE_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"


class _NullHandler(logging.Handler):
    """No-op logging handler to avoid unexpected logging warnings."""

    def emit(self, record: logging.LogRecord) -> None:
        pass


_NULL_HANDLER = _NullHandler()
_TREEISH_LOGGER = getLogger("treeish")
_TREEISH_LOGGER.addHandler(_NULL_HANDLER)


def _get_trace_target(
    environ: Optional[dict[str, str]] = None,
) -> Optional[Union[str, int]]:
    """Get the trace target from the GIT_TRACE environment variable.

    Returns:
        - None if tracing is disabled
        - 2 for stderr output (values "1", "2", "true")
        - str for an absolute file path to append to
    """
    if environ is None:
        environ = dict(os.environ)
    trace_value = environ.get("GIT_TRACE", "")

    if not trace_value or trace_value.lower() in ("0", "false"):
        return None

    if trace_value.lower() in ("1", "2", "true"):
        return 2

    if os.path.isabs(trace_value) and not os.path.isdir(trace_value):
        return trace_value

    return None


def _configure_logging_from_trace(environ: Optional[dict[str, str]] = None) -> bool:
    """Configure logging from GIT_TRACE.

    Returns True if tracing was set up, False otherwise.
    """
    trace_target = _get_trace_target(environ)
    if trace_target is None:
        return False

    if trace_target == 2:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr, format=TRACE_FORMAT)
        return True

    try:
        logging.basicConfig(
            level=logging.DEBUG, filename=trace_target, filemode="a", format=TRACE_FORMAT
        )
    except OSError as e:
        sys.stderr.write(f"Warning: Failed to open GIT_TRACE file {trace_target}: {e}\n")
        return False
    return True


def default_logging_config(level: int = logging.INFO) -> None:
    """Set up the default treeish loggers.

    GIT_TRACE takes precedence; without it, records at level or above go
    to stderr.
    """
    remove_null_handler()
    if not _configure_logging_from_trace():
        logging.basicConfig(
            level=level,
            stream=sys.stderr,
            format="%(message)s",
        )


def remove_null_handler() -> None:
    """Remove the null handler from the treeish loggers."""
    _TREEISH_LOGGER.removeHandler(_NULL_HANDLER)
