# object_store.py -- Sources of raw git object contents
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

"""Object stores hand out the raw, uninterpreted bytes of git objects."""

import io
import os
import subprocess
import sys
from typing import BinaryIO, Optional, Union

from .errors import ObjectMissing, ObjectStoreError
from .hash import Hash
from .log_utils import getLogger
from .objects import ObjectKind

__all__ = [
    "BaseObjectStore",
    "CatFileObjectStore",
    "MemoryObjectStore",
    "find_git_command",
]

logger = getLogger(__name__)

KindLike = Union[ObjectKind, str]


def _kind(kind: KindLike) -> ObjectKind:
    return kind if isinstance(kind, ObjectKind) else ObjectKind.from_str(kind)


class BaseObjectStore:
    """Object store interface."""

    def read(self, kind: KindLike, sha: Hash) -> BinaryIO:
        """Open the contents of an object for reading.

        Args:
          kind: Kind of object the caller expects
          sha: Hash of the object
        Returns: A binary stream; callers should close it when done
        Raises:
          ObjectMissing: if the object is not present
          ObjectStoreError: if reading fails for any other reason
        """
        raise NotImplementedError(self.read)

    def size(self, sha: Hash) -> int:
        """Return the size in bytes of an object's contents."""
        raise NotImplementedError(self.size)

    def kind(self, sha: Hash) -> ObjectKind:
        """Return the kind of an object."""
        raise NotImplementedError(self.kind)

    def contains(self, sha: Hash) -> bool:
        """Check if an object is present."""
        raise NotImplementedError(self.contains)

    def __contains__(self, sha: Hash) -> bool:
        return self.contains(sha)


class MemoryObjectStore(BaseObjectStore):
    """Object store that keeps raw objects in memory."""

    def __init__(self) -> None:
        self._data: dict[Hash, tuple[ObjectKind, bytes]] = {}

    def add(self, kind: KindLike, sha: Hash, data: bytes) -> None:
        """Add a raw object to the store under the given hash.

        The hash is taken as given; it is not checked against data.
        """
        self._data[sha.typeless()] = (_kind(kind), bytes(data))

    def _get(self, kind: KindLike, sha: Hash) -> tuple[ObjectKind, bytes]:
        try:
            return self._data[sha]
        except KeyError:
            raise ObjectMissing(kind, sha)

    def read(self, kind: KindLike, sha: Hash) -> BinaryIO:
        actual, data = self._get(kind, sha)
        if actual != _kind(kind):
            raise ObjectStoreError(kind, sha, f"object is a {actual}")
        return io.BytesIO(data)

    def size(self, sha: Hash) -> int:
        return len(self._get("object", sha)[1])

    def kind(self, sha: Hash) -> ObjectKind:
        return self._get("object", sha)[0]

    def contains(self, sha: Hash) -> bool:
        return sha in self._data

    def __len__(self) -> int:
        return len(self._data)


def find_git_command() -> list[str]:
    """Find command to run for system Git (usually C Git)."""
    if sys.platform == "win32":
        return ["cmd", "/c", "git"]
    return ["git"]


class _CatFileReader(io.RawIOBase):
    """Raw stream over the stdout of a running ``git cat-file``.

    The exit status of the process is checked once its output is
    exhausted; a failure is raised from the read that hits end-of-stream,
    as ObjectMissing if the object is not in the repository.
    """

    def __init__(
        self,
        store: "CatFileObjectStore",
        proc: "subprocess.Popen[bytes]",
        kind: ObjectKind,
        sha: Hash,
    ) -> None:
        super().__init__()
        self.store = store
        self.proc = proc
        self.kind = kind
        self.sha = sha

    def readable(self) -> bool:
        return True

    def readinto(self, b: Union[bytearray, memoryview]) -> int:  # type: ignore[override]
        assert self.proc.stdout is not None
        read = self.proc.stdout.readinto(b)  # type: ignore[attr-defined]
        if read:
            return read
        returncode = self.proc.wait()
        if returncode < 0:
            raise ObjectStoreError(
                self.kind, self.sha, f"git cat-file died by signal {-returncode}"
            )
        if returncode != 0:
            if self.store.is_missing(self.sha):
                raise ObjectMissing(self.kind, self.sha)
            raise ObjectStoreError(
                self.kind, self.sha, f"git cat-file exited with status {returncode}"
            )
        return 0

    def close(self, timeout: Optional[int] = 60) -> None:
        if self.closed:
            return
        if self.proc.stdout:
            self.proc.stdout.close()
        try:
            self.proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            self.proc.kill()
            self.proc.wait()
        super().close()


class CatFileObjectStore(BaseObjectStore):
    """Object store that asks ``git cat-file`` for objects.

    Every read spawns one git process in the repository's control
    directory.
    """

    def __init__(
        self,
        controldir: Union[str, os.PathLike[str]],
        git_command: Optional[list[str]] = None,
    ) -> None:
        """Initialize a CatFileObjectStore.

        Args:
          controldir: Path of the .git directory (or bare repository)
          git_command: Command used to run git; defaults to find_git_command()
        """
        self.controldir = os.fspath(controldir)
        if git_command is None:
            git_command = find_git_command()
        self.git_command = list(git_command)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.controldir!r})"

    def _argv(self, *args: str) -> list[str]:
        return [*self.git_command, "cat-file", *args]

    def _run(self, kind: KindLike, sha: Hash, *args: str) -> "subprocess.CompletedProcess[bytes]":
        argv = self._argv(*args)
        logger.debug("running %s in %s", argv, self.controldir)
        try:
            result = subprocess.run(
                argv,
                cwd=self.controldir,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as e:
            raise ObjectStoreError(kind, sha, str(e)) from e
        if result.returncode < 0:
            raise ObjectStoreError(
                kind, sha, f"git cat-file died by signal {-result.returncode}"
            )
        if result.returncode != 0:
            if self.is_missing(sha):
                raise ObjectMissing(kind, sha)
            message = result.stderr.decode("utf-8", "replace").strip()
            raise ObjectStoreError(
                kind,
                sha,
                message or f"git cat-file exited with status {result.returncode}",
            )
        return result

    def read(self, kind: KindLike, sha: Hash) -> BinaryIO:
        kind = _kind(kind)
        argv = self._argv(str(kind), sha.hex())
        logger.debug("running %s in %s", argv, self.controldir)
        try:
            proc = subprocess.Popen(
                argv,
                cwd=self.controldir,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise ObjectStoreError(kind, sha, str(e)) from e
        return io.BufferedReader(_CatFileReader(self, proc, kind, sha))  # type: ignore[return-value]

    def size(self, sha: Hash) -> int:
        out = self._run("object", sha, "-s", sha.hex()).stdout
        try:
            return int(out.strip())
        except ValueError:
            raise ObjectStoreError("object", sha, f"git cat-file -s returned {out!r}")

    def kind(self, sha: Hash) -> ObjectKind:
        out = self._run("object", sha, "-t", sha.hex()).stdout
        try:
            return ObjectKind.from_str(out.strip().decode("ascii"))
        except UnicodeDecodeError:
            raise ObjectStoreError("object", sha, f"git cat-file -t returned {out!r}")

    def _check_exists(self, sha: Hash) -> int:
        # git cat-file -e exits with 1 for a missing object, 128 for other failures
        argv = self._argv("-e", sha.hex())
        logger.debug("running %s in %s", argv, self.controldir)
        try:
            returncode = subprocess.call(
                argv,
                cwd=self.controldir,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise ObjectStoreError("object", sha, str(e)) from e
        return returncode

    def is_missing(self, sha: Hash) -> bool:
        """Check if git positively reports an object as absent."""
        return self._check_exists(sha) == 1

    def contains(self, sha: Hash) -> bool:
        return self._check_exists(sha) == 0
