# repo.py -- For dealing with git repositories.
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

"""Repository access.

:class:`Repo` locates a repository on disk and reads objects through an
object store. :class:`RepositoryCache` sits on top of an object store and
parses each commit and tree at most once per cache, handing the same
immutable object to every caller that asks for the same hash.
"""

import os
from collections.abc import Callable
from typing import BinaryIO, Optional, TypeVar, Union

from .errors import NotGitRepository, ObjectStoreError
from .hash import Hash
from .log_utils import getLogger
from .object_store import BaseObjectStore, CatFileObjectStore
from .objects import (
    Commit,
    CommitHash,
    ObjectKind,
    Tree,
    TreeHash,
    parse_commit,
    parse_tree,
)
from .refs import Branch, RefWalker, list_branches
from .sharded_cache import DEFAULT_SHARDS, ShardedCache

__all__ = [
    "CONTROLDIR",
    "Repo",
    "RepositoryCache",
    "open_cache",
    "read_gitfile",
]

logger = getLogger(__name__)

CONTROLDIR = ".git"
OBJECTDIR = "objects"
REFSDIR = "refs"
REFSDIR_HEADS = "heads"
REFSDIR_REMOTES = "remotes"
COMMONDIR = "commondir"

PathLike = Union[str, bytes, "os.PathLike[str]"]

ObjT = TypeVar("ObjT")


def read_gitfile(f: BinaryIO) -> str:
    """Read a ``.git`` file.

    The first line of the file should start with "gitdir: "

    Args:
      f: File-like object to read from
    Returns: A path
    """
    cs = f.read()
    if not cs.startswith(b"gitdir: "):
        raise NotGitRepository("Expected .git file to start with 'gitdir: '")
    return cs[len(b"gitdir: ") :].rstrip(b"\r\n").decode("utf-8")


def _fspath(path: PathLike) -> str:
    path = os.fspath(path)
    if isinstance(path, bytes):
        path = os.fsdecode(path)
    return path


class Repo:
    """A git repository on local disk.

    Objects are read through ``object_store``, by default a
    :class:`CatFileObjectStore` running in the control directory. Branches
    are read straight from the ``refs`` directory.
    """

    def __init__(
        self,
        controldir: PathLike,
        object_store: Optional[BaseObjectStore] = None,
        ref_walker: Optional[RefWalker] = None,
    ) -> None:
        """Open a repository given its control directory.

        Args:
          controldir: Path of the .git directory, or of a bare repository
          object_store: Store to read objects from
          ref_walker: Walker used to list ref directories
        """
        self._controldir = _fspath(controldir)
        commondir = os.path.join(self._controldir, COMMONDIR)
        if os.path.isfile(commondir):
            with open(commondir, "rb") as f:
                self._commondir = os.path.join(
                    self._controldir, os.fsdecode(f.read().rstrip(b"\r\n"))
                )
        else:
            self._commondir = self._controldir
        if object_store is None:
            object_store = CatFileObjectStore(self._controldir)
        self.object_store = object_store
        self.ref_walker = ref_walker

    @classmethod
    def from_bare_repository(cls, path: PathLike, **kwargs) -> "Repo":
        """Open a bare repository (e.g. ``project.git``)."""
        path = _fspath(path)
        if os.path.exists(os.path.join(path, CONTROLDIR)):
            raise NotGitRepository(f"{path} is not a bare repository")
        if not (
            os.path.isdir(os.path.join(path, OBJECTDIR))
            and os.path.isdir(os.path.join(path, REFSDIR))
        ):
            raise NotGitRepository(f"No git repository was found at {path}")
        return cls(path, **kwargs)

    @classmethod
    def from_regular_repository(cls, path: PathLike, **kwargs) -> "Repo":
        """Open a repository with a working tree and a ``.git`` directory or file."""
        path = _fspath(path)
        hidden_path = os.path.join(path, CONTROLDIR)
        if os.path.isfile(hidden_path):
            with open(hidden_path, "rb") as f:
                return cls(os.path.join(path, read_gitfile(f)), **kwargs)
        if os.path.isdir(hidden_path):
            return cls(hidden_path, **kwargs)
        raise NotGitRepository(f"{path} is not a regular repository")

    @classmethod
    def from_path(cls, path: PathLike, **kwargs) -> "Repo":
        """Open either a regular or a bare repository at path."""
        path = _fspath(path)
        if os.path.exists(os.path.join(path, CONTROLDIR)):
            return cls.from_regular_repository(path, **kwargs)
        return cls.from_bare_repository(path, **kwargs)

    def controldir(self) -> str:
        """Return the path of the control directory."""
        return self._controldir

    def commondir(self) -> str:
        """Return the path of the directory shared between worktrees."""
        return self._commondir

    def _branches(self, kind: str) -> list[Branch]:
        path = os.path.join(self._commondir, REFSDIR, kind)
        return list_branches(path, self.ref_walker)

    def local_branches(self) -> list[Branch]:
        """Return the branches below ``refs/heads``, sorted by name."""
        return self._branches(REFSDIR_HEADS)

    def remote_branches(self) -> list[Branch]:
        """Return the branches below ``refs/remotes``, sorted by name.

        Names include the remote, e.g. ``b"origin/main"``.
        """
        return self._branches(REFSDIR_REMOTES)

    def cat_file_size(self, sha: Hash) -> int:
        return self.object_store.size(sha)

    def cat_file_type(self, sha: Hash) -> ObjectKind:
        return self.object_store.kind(sha)

    def cat_file(self, kind: Union[ObjectKind, str], sha: Hash) -> BinaryIO:
        return self.object_store.read(kind, sha)

    def cat_file_commit(self, sha: Hash) -> BinaryIO:
        return self.cat_file(ObjectKind.COMMIT, sha)

    def cat_file_tree(self, sha: Hash) -> BinaryIO:
        return self.cat_file(ObjectKind.TREE, sha)

    def cat_file_blob(self, sha: Hash) -> BinaryIO:
        return self.cat_file(ObjectKind.BLOB, sha)

    def __repr__(self) -> str:
        return f"<Repo at {self._controldir!r}>"


class RepositoryCache:
    """Object store plus in-memory caches of parsed commits and trees.

    Safe to share between threads. Lookups return the cached object
    itself, so every caller asking for a hash after it was cached gets the
    same instance.
    """

    def __init__(
        self,
        source: Union[BaseObjectStore, Repo],
        shards: int = DEFAULT_SHARDS,
    ) -> None:
        """Create a cache.

        Args:
          source: Repo or object store to read objects from
          shards: Number of shards in each of the commit and tree caches
        """
        if isinstance(source, Repo):
            self.repo: Optional[Repo] = source
            self.object_store = source.object_store
        else:
            self.repo = None
            self.object_store = source
        self.commits: ShardedCache[Commit] = ShardedCache(shards)
        self.trees: ShardedCache[Tree] = ShardedCache(shards)

    def _load(
        self,
        kind: ObjectKind,
        sha: Hash,
        parse: Callable[[BinaryIO, Hash], ObjT],
    ) -> ObjT:
        try:
            with self.object_store.read(kind, sha) as f:
                obj = parse(f, sha)
        except ObjectStoreError:
            raise
        except OSError as e:
            raise ObjectStoreError(kind, sha, str(e)) from e
        logger.debug("parsed %s %s", kind, sha)
        return obj

    def commit(self, sha: CommitHash) -> Commit:
        """Return the commit with the given hash, reading it on first use."""
        return self.commits.get_or_insert_with(
            sha, lambda: self._load(ObjectKind.COMMIT, sha, parse_commit)
        )

    def tree(self, sha: TreeHash) -> Tree:
        """Return the tree with the given hash, reading it on first use."""
        return self.trees.get_or_insert_with(
            sha, lambda: self._load(ObjectKind.TREE, sha, parse_tree)
        )

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} for {self.repo or self.object_store!r}>"


def open_cache(
    source: Union[RepositoryCache, Repo, BaseObjectStore, PathLike],
) -> RepositoryCache:
    """Get a RepositoryCache for source.

    An existing cache is returned as is; a repo or object store gets a new
    cache; anything else is taken as the path of a repository.

    Raises:
      NotGitRepository: if source is a path without a repository
    """
    if isinstance(source, RepositoryCache):
        return source
    if isinstance(source, (Repo, BaseObjectStore)):
        return RepositoryCache(source)
    return RepositoryCache(Repo.from_path(source))
