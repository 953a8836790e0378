# hash.py -- Typed content hashes for git objects
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

"""Content hashes identifying git objects.

A :class:`Hash` is a SHA-1 (20 byte) or SHA-256 (32 byte) digest. It is
generic over the kind of object it refers to, so that type checkers can
tell a commit hash from a tree hash::

    tree: Hash[Tree] = Hash[Tree].from_hex("88824f5315abd219d2f6f5f68fe69f32386ffc00")

The kind parameter only exists for the type checker; at runtime every
hash is the same class, and equality, ordering, hashing and formatting
look at the digest bytes alone. Moving between a tagged hash and the
kind-erased ``Hash[Unknown]`` is explicit, via :meth:`Hash.typeless` and
:meth:`Hash.cast`.
"""

import string
from functools import total_ordering
from typing import BinaryIO, Generic, TypeVar, Union

from .errors import BadCharacter, LengthMismatch

__all__ = [
    "SHA1",
    "SHA256",
    "AnyHash",
    "Hash",
    "ObjectFormat",
    "Unknown",
    "object_format_for_length",
]


class ObjectFormat:
    """Digest width used to name git objects."""

    def __init__(self, name: str, oid_length: int) -> None:
        """Initialize an object format.

        Args:
            name: Name of the format (e.g., "sha1", "sha256")
            oid_length: Length of the binary object ID in bytes
        """
        self.name = name
        self.oid_length = oid_length
        self.hex_length = oid_length * 2

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"ObjectFormat({self.name!r})"


SHA1 = ObjectFormat("sha1", 20)
SHA256 = ObjectFormat("sha256", 32)

_BY_OID_LENGTH = {f.oid_length: f for f in (SHA1, SHA256)}
_BY_HEX_LENGTH = {f.hex_length: f for f in (SHA1, SHA256)}
_HEXDIGITS = frozenset(string.hexdigits)


def object_format_for_length(oid_length: int) -> ObjectFormat:
    """Return the object format whose binary digests are oid_length long.

    Raises:
        LengthMismatch: if no supported format has that length
    """
    try:
        return _BY_OID_LENGTH[oid_length]
    except KeyError:
        raise LengthMismatch(oid_length)


def _read_exactly(f: BinaryIO, size: int) -> bytes:
    chunks = []
    remaining = size
    while remaining:
        chunk = f.read(remaining)
        if not chunk:
            raise EOFError(
                f"Expected {size} bytes of hash, got {size - remaining} before end of stream"
            )
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


class Unknown:
    """Kind marker for hashes whose referent may be any kind of object."""


K = TypeVar("K")
T = TypeVar("T")


@total_ordering
class Hash(Generic[K]):
    """A SHA-1 or SHA-256 reference to a git commit, tree or blob."""

    __slots__ = ("_sha",)

    def __init__(self, sha: bytes) -> None:
        """Create a hash from its binary digest.

        Args:
            sha: 20 or 32 raw digest bytes

        Raises:
            LengthMismatch: if sha is not 20 or 32 bytes long
        """
        if len(sha) not in _BY_OID_LENGTH:
            raise LengthMismatch(len(sha))
        self._sha = bytes(sha)

    @classmethod
    def from_hex(cls, hexsha: Union[str, bytes]) -> "Hash[K]":
        """Parse a full hexadecimal hash (40 or 64 characters, any case).

        Raises:
            LengthMismatch: if hexsha is not 40 or 64 characters long
            BadCharacter: at the first character that is not a hex digit
        """
        if isinstance(hexsha, bytes):
            hexsha = hexsha.decode("latin-1")
        if len(hexsha) not in _BY_HEX_LENGTH:
            raise LengthMismatch(len(hexsha))
        for c in hexsha:
            if c not in _HEXDIGITS:
                raise BadCharacter(c)
        return cls(bytes.fromhex(hexsha))

    @classmethod
    def from_bytes(cls, sha: bytes) -> "Hash[K]":
        """Construct a hash from a 20 or 32 byte binary digest."""
        return cls(sha)

    @classmethod
    def read_fixed(cls, f: BinaryIO, length: int) -> "Hash[K]":
        """Read exactly length bytes from f and treat them as a digest.

        Raises:
            LengthMismatch: if length is not 20 or 32
            EOFError: if f ends before length bytes were read
        """
        object_format_for_length(length)
        return cls(_read_exactly(f, length))

    @classmethod
    def read_sha1(cls, f: BinaryIO) -> "Hash[K]":
        """Read a 20 byte SHA-1 digest from f."""
        return cls.read_fixed(f, SHA1.oid_length)

    @classmethod
    def read_sha256(cls, f: BinaryIO) -> "Hash[K]":
        """Read a 32 byte SHA-256 digest from f."""
        return cls.read_fixed(f, SHA256.oid_length)

    @classmethod
    def default(cls) -> "Hash[K]":
        """The all-zero SHA-1 hash."""
        return cls(b"\x00" * SHA1.oid_length)

    @property
    def raw(self) -> bytes:
        """The binary digest (20 or 32 bytes)."""
        return self._sha

    @property
    def object_format(self) -> ObjectFormat:
        return _BY_OID_LENGTH[len(self._sha)]

    def first_byte(self) -> int:
        return self._sha[0]

    def hex(self) -> str:
        """Return the digest as 40 or 64 lowercase hex characters."""
        return self._sha.hex()

    def typeless(self) -> "Hash[Unknown]":
        """Discard kind information for this hash."""
        return Hash(self._sha)

    def cast(self, kind: "type[T]") -> "Hash[T]":
        """Acquire kind information for this hash.

        Args:
            kind: The object class the hash is known to refer to
        """
        return Hash(self._sha)

    def __len__(self) -> int:
        return len(self._sha)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Hash):
            return NotImplemented
        return self._sha == other._sha

    def __lt__(self, other: "Hash") -> bool:
        if not isinstance(other, Hash):
            return NotImplemented
        return self._sha < other._sha

    def __hash__(self) -> int:
        return hash(self._sha)

    def __str__(self) -> str:
        return self.hex()

    def __repr__(self) -> str:
        return f"Hash({self.hex()!r})"


AnyHash = Hash[Unknown]
