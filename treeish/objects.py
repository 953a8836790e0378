# objects.py -- Parsed git objects
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

"""Access to base git objects."""

from collections.abc import Iterable, Iterator, Mapping
from functools import total_ordering
from types import MappingProxyType
from typing import BinaryIO, ClassVar, NamedTuple, Optional, Union

from .errors import (
    DuplicateTree,
    MissingNameTerminator,
    MissingPermissionTerminator,
    MissingTree,
    TruncatedTreeEntry,
)
from .hash import SHA1, AnyHash, Hash

__all__ = [
    "BlobHash",
    "Blob",
    "Commit",
    "CommitHash",
    "Entry",
    "Name",
    "ObjectKind",
    "Permissions",
    "Tree",
    "TreeHash",
    "parse_commit",
    "parse_tree",
    "serialize_tree",
]

# Header fields for commits
_TREE_HEADER = b"tree "
_PARENT_HEADER = b"parent "

# Tree entries always carry a SHA-1 sized hash, whatever the object format.
TREE_ENTRY_HASH_LENGTH = SHA1.oid_length


@total_ordering
class Name:
    """A file or tree name (e.g. ".gitignore").

    Names are typically UTF-8 but git does not guarantee it. A name built
    from bytes that are not valid UTF-8 keeps the original bytes alongside
    a lossy rendering; equality with other names and with str, ordering
    and hashing use the lossy text.
    """

    __slots__ = ("_raw", "_text")

    def __init__(self, value: Union[str, bytes] = "") -> None:
        if isinstance(value, str):
            self._text = value
            self._raw: Optional[bytes] = None
        elif isinstance(value, (bytes, bytearray, memoryview)):
            raw = bytes(value)
            try:
                self._text = raw.decode("utf-8")
                self._raw = None
            except UnicodeDecodeError:
                self._text = raw.decode("utf-8", "replace")
                self._raw = raw
        else:
            raise TypeError(f"Name requires str or bytes, not {type(value).__name__}")

    def as_str(self) -> Optional[str]:
        """Return the name as text, or None if it was not valid UTF-8."""
        if self._raw is not None:
            return None
        return self._text

    def as_str_lossy(self) -> str:
        """Return the name as text, replacing undecodable bytes."""
        return self._text

    def as_bytes(self) -> Optional[bytes]:
        """Return the name as bytes.

        Returns None for a name built from a str that has no UTF-8 encoding
        (e.g. one containing lone surrogates).
        """
        if self._raw is not None:
            return self._raw
        try:
            return self._text.encode("utf-8")
        except UnicodeEncodeError:
            return None

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Name):
            return self._text == other._text
        if isinstance(other, str):
            return self._text == other
        if isinstance(other, bytes):
            return self.as_bytes() == other
        return NotImplemented

    def __lt__(self, other: "Name") -> bool:
        if not isinstance(other, Name):
            return NotImplemented
        return self._text < other._text

    def __hash__(self) -> int:
        return hash(self._text)

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Name({self._text!r})"


@total_ordering
class Permissions:
    """Tree entry permissions, kept verbatim (e.g. "100644" or "40000")."""

    __slots__ = ("_name",)

    def __init__(self, value: Union[str, bytes, Name]) -> None:
        self._name = value if isinstance(value, Name) else Name(value)

    def as_str(self) -> str:
        return self._name.as_str_lossy()

    def as_bytes(self) -> Optional[bytes]:
        return self._name.as_bytes()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Permissions):
            return self._name == other._name
        if isinstance(other, (str, bytes)):
            return self._name == other
        return NotImplemented

    def __lt__(self, other: "Permissions") -> bool:
        if not isinstance(other, Permissions):
            return NotImplemented
        return self._name < other._name

    def __hash__(self) -> int:
        return hash(self._name)

    def __str__(self) -> str:
        return self.as_str()

    def __repr__(self) -> str:
        return f"Permissions({self.as_str()!r})"


class ObjectKind:
    """Kind of a git object as reported by the object store.

    The well known kinds are available as ``ObjectKind.BLOB``,
    ``ObjectKind.COMMIT`` and ``ObjectKind.TREE``; any other type name is
    kept verbatim as an unknown kind.
    """

    __slots__ = ("name",)

    BLOB: ClassVar["ObjectKind"]
    COMMIT: ClassVar["ObjectKind"]
    TREE: ClassVar["ObjectKind"]

    def __init__(self, name: str) -> None:
        self.name = name

    @classmethod
    def from_str(cls, name: Union[str, bytes]) -> "ObjectKind":
        if isinstance(name, bytes):
            name = name.decode("ascii", "replace")
        return _KNOWN_KINDS.get(name) or cls(name)

    @property
    def is_known(self) -> bool:
        return self.name in _KNOWN_KINDS

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ObjectKind):
            return self.name == other.name
        if isinstance(other, str):
            return self.name == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"ObjectKind({self.name!r})"


ObjectKind.BLOB = ObjectKind("blob")
ObjectKind.COMMIT = ObjectKind("commit")
ObjectKind.TREE = ObjectKind("tree")

_KNOWN_KINDS = {k.name: k for k in (ObjectKind.BLOB, ObjectKind.COMMIT, ObjectKind.TREE)}


class Blob:
    """Kind marker for hashes that refer to file contents."""


class Entry(NamedTuple):
    """A tree entry: permissions, the referenced object and its name."""

    permissions: Permissions
    hash: AnyHash
    name: Name


class Tree(Mapping[Name, Entry]):
    """A parsed git tree (~directory).

    A tree is a read-only mapping from entry name to :class:`Entry`;
    iteration yields names in ascending order. Entries can be looked up by
    :class:`Name` or by plain ``str``::

        tree[".gitignore"].hash
    """

    __slots__ = ("_entries", "hash")

    def __init__(self, sha: "TreeHash", entries: Iterable[Entry] = ()) -> None:
        self.hash = sha
        by_name = {}
        for entry in entries:
            by_name[entry.name] = entry
        self._entries = MappingProxyType(dict(sorted(by_name.items())))

    @property
    def entries(self) -> Mapping[Name, Entry]:
        return self._entries

    def __getitem__(self, name: Union[Name, str, bytes]) -> Entry:
        if isinstance(name, bytes):
            name = Name(name)
        return self._entries[name]  # type: ignore[index]

    def __iter__(self) -> Iterator[Name]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"<Tree {self.hash} with {len(self._entries)} entries>"


class Commit:
    """A parsed git commit; only the structural links are kept.

    Root commits have no parents, merge commits have more than one.
    """

    __slots__ = ("hash", "parents", "tree")

    def __init__(
        self, sha: "CommitHash", tree: "TreeHash", parents: Iterable["CommitHash"] = ()
    ) -> None:
        self.hash = sha
        self.tree = tree
        self.parents = tuple(parents)

    @property
    def is_root(self) -> bool:
        return not self.parents

    @property
    def is_merge(self) -> bool:
        return len(self.parents) > 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Commit):
            return NotImplemented
        return (self.hash, self.tree, self.parents) == (
            other.hash,
            other.tree,
            other.parents,
        )

    def __hash__(self) -> int:
        return hash(self.hash)

    def __repr__(self) -> str:
        parents = ", ".join(str(p) for p in self.parents)
        return f"<Commit {self.hash} tree={self.tree} parents=[{parents}]>"


CommitHash = Hash[Commit]
TreeHash = Hash[Tree]
BlobHash = Hash[Blob]


def _parse_tree_entries(text: bytes, sha: Optional[TreeHash]) -> Iterator[Entry]:
    count = 0
    length = len(text)
    while count < length:
        mode_end = text.find(b" ", count)
        if mode_end == -1:
            raise MissingPermissionTerminator(sha)
        name_end = text.find(b"\0", mode_end + 1)
        if name_end == -1:
            raise MissingNameTerminator(sha)
        entry_end = name_end + 1 + TREE_ENTRY_HASH_LENGTH
        if entry_end > length:
            raise TruncatedTreeEntry(sha)
        yield Entry(
            Permissions(text[count:mode_end]),
            Hash(text[name_end + 1 : entry_end]),
            Name(text[mode_end + 1 : name_end]),
        )
        count = entry_end


def parse_tree(f: BinaryIO, sha: TreeHash) -> Tree:
    """Parse a binary tree object.

    Each entry is ``<permissions> SP <name> NUL <20 byte hash>``. The hash
    of the tree itself is taken on trust from the caller.

    Args:
      f: Stream with the raw tree contents
      sha: Hash of the tree being parsed
    Returns: A Tree whose entries iterate in name order
    Raises:
      MalformedTree: if the stream does not follow the tree grammar
    """
    return Tree(sha, _parse_tree_entries(f.read(), sha))


def serialize_tree(entries: Iterable[Entry]) -> bytes:
    """Serialize tree entries in name order.

    Names and permissions built from text that has no UTF-8 encoding are
    written with surrogateescape.
    """
    chunks = []
    for entry in sorted(entries, key=lambda e: e.name):
        mode = entry.permissions.as_bytes()
        if mode is None:
            mode = str(entry.permissions).encode("utf-8", "surrogateescape")
        name = entry.name.as_bytes()
        if name is None:
            name = str(entry.name).encode("utf-8", "surrogateescape")
        chunks.append(mode + b" " + name + b"\0" + entry.hash.raw)
    return b"".join(chunks)


def parse_commit(f: BinaryIO, sha: CommitHash) -> Commit:
    """Parse the headers of a commit object.

    Only the tree and parent headers are interpreted; other headers and
    the commit message are skipped.

    Args:
      f: Line-iterable stream with the raw commit contents
      sha: Hash of the commit being parsed
    Returns: A Commit with parents in declaration order
    Raises:
      DuplicateTree: if more than one tree header is present
      MissingTree: if no tree header is present
      HashParseError: if a tree or parent hash is not a valid hex hash
    """
    tree: Optional[TreeHash] = None
    parents: list[CommitHash] = []
    for line in f:
        if line.startswith(b" "):
            # Continuation of a multi-line header such as gpgsig
            continue
        line = line.strip()
        if not line:
            break
        if line.startswith(_TREE_HEADER):
            if tree is not None:
                raise DuplicateTree(sha)
            tree = Hash.from_hex(line[len(_TREE_HEADER) :])
        elif line.startswith(_PARENT_HEADER):
            parents.append(Hash.from_hex(line[len(_PARENT_HEADER) :]))
    if tree is None:
        raise MissingTree(sha)
    return Commit(sha, tree, parents)
