# refs.py -- Branch references
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

"""Ref handling."""

import os
from collections.abc import Callable, Sequence
from functools import partial
from typing import NamedTuple, Optional, Union

from .errors import HashParseError, RefDepthExceeded, RefFormatError
from .hash import Hash
from .log_utils import getLogger
from .objects import CommitHash

__all__ = [
    "MAX_REF_DEPTH",
    "SYMREF",
    "Branch",
    "DiskRefWalker",
    "RefEntry",
    "RefWalker",
    "gather_branches",
    "list_branches",
]

logger = getLogger(__name__)

SYMREF = b"ref: "

# Directory levels walked below a ref root, counting the root itself.
# Anything deeper is treated as corrupt.
MAX_REF_DEPTH = 64


class Branch(NamedTuple):
    """A named reference to a commit (e.g. b"master" => 074d881e...)."""

    name: bytes
    commit: CommitHash

    def __repr__(self) -> str:
        return f"Branch({self.name!r} => {self.commit})"


class RefEntry(NamedTuple):
    """One entry of a ref directory listing.

    ``path`` is what the walker needs to list the entry again if it is a
    directory. ``read`` returns the contents of a regular file and is None
    for anything else.
    """

    name: bytes
    path: bytes
    is_dir: bool
    read: Optional[Callable[[], bytes]] = None


class RefWalker:
    """Lists the entries of ref directories."""

    def list(self, path: bytes) -> Sequence[RefEntry]:
        """List a directory.

        Raises:
          FileNotFoundError: if path does not exist
        """
        raise NotImplementedError(self.list)


def _read_file(path: bytes) -> bytes:
    with open(path, "rb") as f:
        return f.read()


class DiskRefWalker(RefWalker):
    """Lists ref directories on the local filesystem."""

    def list(self, path: Union[bytes, str]) -> list[RefEntry]:  # type: ignore[override]
        entries = []
        with os.scandir(os.fsencode(path)) as it:
            for e in it:
                if e.is_dir():
                    entries.append(RefEntry(e.name, e.path, True))
                elif e.is_file():
                    entries.append(
                        RefEntry(e.name, e.path, False, partial(_read_file, e.path))
                    )
        return entries


def _parse_ref_contents(name: bytes, contents: bytes) -> CommitHash:
    try:
        return Hash.from_hex(contents.strip())
    except HashParseError as e:
        raise RefFormatError(
            f"Invalid ref {name.decode('utf-8', 'replace')}: {e}"
        ) from e


def _gather(
    walker: RefWalker,
    path: bytes,
    name: bytes,
    branches: dict[bytes, CommitHash],
    depth: int,
) -> None:
    if depth >= MAX_REF_DEPTH:
        raise RefDepthExceeded(name, MAX_REF_DEPTH)
    try:
        entries = list(walker.list(path))
    except FileNotFoundError:
        if name:
            raise
        # A repository without e.g. refs/remotes simply has no such refs
        return

    for entry in entries:
        child = name + b"/" + entry.name if name else entry.name
        if entry.is_dir:
            _gather(walker, entry.path, child, branches, depth + 1)
        elif entry.read is not None:
            contents = entry.read()
            if contents.startswith(SYMREF):
                # e.g. refs/remotes/origin/HEAD: "ref: refs/remotes/origin/master"
                logger.debug("skipping symbolic ref %r", child)
                continue
            branches[child] = _parse_ref_contents(child, contents)


def gather_branches(
    path: Union[bytes, str], walker: Optional[RefWalker] = None
) -> dict[bytes, CommitHash]:
    """Collect the branches below a ref directory.

    Names are the ``/``-joined paths relative to ``path``. Symbolic refs
    are skipped. A missing ``path`` yields no branches; a directory that
    disappears further down is an error.

    Args:
      path: Ref directory to walk, e.g. ``.git/refs/heads``
      walker: RefWalker to list directories with; defaults to the filesystem
    Returns: Dictionary mapping branch names to commit hashes, in name order
    Raises:
      RefFormatError: if a ref file does not hold a hash or symref
      RefDepthExceeded: if there are more than MAX_REF_DEPTH directory levels
      OSError: if listing or reading fails
    """
    if walker is None:
        walker = DiskRefWalker()
    branches: dict[bytes, CommitHash] = {}
    _gather(walker, os.fsencode(path), b"", branches, 0)
    return dict(sorted(branches.items()))


def list_branches(
    path: Union[bytes, str], walker: Optional[RefWalker] = None
) -> list[Branch]:
    """Return the branches below a ref directory, sorted by name."""
    return [Branch(name, commit) for name, commit in gather_branches(path, walker).items()]
