# errors.py -- errors for treeish
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

"""treeish-related exception classes."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .hash import Hash


def _describe(sha: "Optional[Hash]") -> str:
    return "<unknown>" if sha is None else str(sha)


class HashParseError(ValueError):
    """A hash could not be parsed from its hex or binary form."""


class LengthMismatch(HashParseError):
    """A hash was not 20/32 bytes long, or 40/64 hex characters long."""

    def __init__(self, length: int) -> None:
        """Initialize a LengthMismatch exception.

        Args:
            length: The length that was rejected
        """
        self.length = length
        super().__init__(f"Hash length mismatch: {length}")


class BadCharacter(HashParseError):
    """A hex hash contained a character that is not a hexadecimal digit."""

    def __init__(self, character: str) -> None:
        """Initialize a BadCharacter exception.

        Args:
            character: The first offending character
        """
        self.character = character
        super().__init__(f"Invalid character {character!r} in hash")


class FileFormatException(Exception):
    """Base class for exceptions relating to reading git file formats."""


class MalformedTree(FileFormatException):
    """A tree object did not match the tree grammar.

    Do not instantiate directly.
    """

    reason: str

    def __init__(self, sha: "Optional[Hash]" = None) -> None:
        """Initialize a MalformedTree exception.

        Args:
            sha: Hash of the tree that was being parsed
        """
        self.sha = sha
        super().__init__(f"Malformed tree {_describe(sha)}: {self.reason}")


class MissingPermissionTerminator(MalformedTree):
    """Entry permissions were not terminated by a space."""

    reason = "file permissions not space terminated"


class MissingNameTerminator(MalformedTree):
    """An entry name was not terminated by a NUL byte."""

    reason = "file name not nul terminated"


class TruncatedTreeEntry(MalformedTree):
    """The stream ended in the middle of an entry hash."""

    reason = "entry hash truncated"


class MalformedCommit(FileFormatException):
    """A commit object did not match the commit grammar.

    Do not instantiate directly.
    """

    reason: str

    def __init__(self, sha: "Optional[Hash]" = None) -> None:
        """Initialize a MalformedCommit exception.

        Args:
            sha: Hash of the commit that was being parsed
        """
        self.sha = sha
        super().__init__(f"Malformed commit {_describe(sha)}: {self.reason}")


class DuplicateTree(MalformedCommit):
    """A commit named more than one tree."""

    reason = "multiple trees specified"


class MissingTree(MalformedCommit):
    """A commit did not name a tree."""

    reason = "treeless commit"


class RefFormatError(FileFormatException):
    """A ref file could not be interpreted."""


class RefDepthExceeded(RefFormatError):
    """A ref directory was nested deeper than the walker allows."""

    def __init__(self, name: bytes, limit: int) -> None:
        """Initialize a RefDepthExceeded exception.

        Args:
            name: Relative name of the directory that was too deep
            limit: The depth limit that was hit
        """
        self.name = name
        self.limit = limit
        super().__init__(
            f"Ref directory {name.decode('utf-8', 'replace')} nested deeper "
            f"than {limit} levels"
        )


class ObjectStoreError(OSError):
    """Reading an object from the object store failed."""

    def __init__(self, kind: object, sha: "Optional[Hash]", message: str) -> None:
        """Initialize an ObjectStoreError.

        Args:
            kind: The kind of object that was requested
            sha: Hash of the object that was requested
            message: Description of the failure
        """
        self.kind = kind
        self.sha = sha
        super().__init__(f"Unable to read {kind} {_describe(sha)}: {message}")


class ObjectMissing(ObjectStoreError):
    """Indicates that a requested object is missing."""

    def __init__(self, kind: object, sha: "Optional[Hash]") -> None:
        """Initialize an ObjectMissing exception.

        Args:
            kind: The kind of object that was requested
            sha: Hash of the missing object
        """
        super().__init__(kind, sha, "not in the object store")


class NotGitRepository(Exception):
    """Indicates that no Git repository was found."""

    def __init__(self, *args: object, **kwargs: object) -> None:
        """Initialize a NotGitRepository exception.

        Args:
            *args: Error message and additional positional arguments.
            **kwargs: Additional keyword arguments.
        """
        Exception.__init__(self, *args, **kwargs)
