# sharded_cache.py -- Concurrent hash-keyed cache split across locked shards
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

"""Concurrent mapping from object hashes to values.

The mapping is split into a fixed number of shards, each a plain dict
guarded by its own lock. The shard for a hash is picked from its first
byte, so lookups of unrelated hashes rarely contend.

Values are computed outside of any lock. Two threads missing on the same
hash at the same time may both compute a value; only the first one to be
inserted is kept, and both callers get that one back.
"""

import threading
from collections.abc import Callable
from typing import Generic, Optional, TypeVar

from .hash import Hash
from .log_utils import getLogger

__all__ = ["DEFAULT_SHARDS", "ShardedCache"]

logger = getLogger(__name__)

DEFAULT_SHARDS = 256

V = TypeVar("V")


class ShardedCache(Generic[V]):
    """Fixed set of independently locked dicts keyed by :class:`Hash`."""

    def __init__(self, shards: int = DEFAULT_SHARDS) -> None:
        """Initialize a ShardedCache.

        Args:
          shards: Number of shards; a power of two between 1 and 256
        """
        if shards < 1 or shards > 256 or shards & (shards - 1):
            raise ValueError(f"shard count must be a power of two <= 256, not {shards}")
        self._mask = shards - 1
        self._locks = tuple(threading.Lock() for _ in range(shards))
        self._maps: tuple[dict[Hash, V], ...] = tuple({} for _ in range(shards))

    @property
    def shards(self) -> int:
        return len(self._maps)

    def _shard(self, sha: Hash) -> int:
        return sha.first_byte() & self._mask

    def get(self, sha: Hash) -> Optional[V]:
        """Return the value cached for sha, or None."""
        i = self._shard(sha)
        with self._locks[i]:
            return self._maps[i].get(sha)

    def get_or_insert_with(self, sha: Hash, compute: Callable[[], V]) -> V:
        """Return the value cached for sha, computing and caching it if absent.

        compute is called without holding any lock, so it may run more than
        once for the same hash under contention. Exceptions raised by compute
        propagate and nothing is cached.

        Args:
          sha: Key to look up
          compute: Callable producing the value on a miss
        Returns: The value stored for sha
        """
        i = self._shard(sha)
        lock = self._locks[i]
        shard = self._maps[i]
        with lock:
            try:
                return shard[sha]
            except KeyError:
                pass
        logger.debug("cache miss for %s", sha)
        value = compute()
        with lock:
            existing = shard.setdefault(sha, value)
        if existing is not value:
            logger.debug("discarding duplicate value computed for %s", sha)
        return existing

    def insert(self, sha: Hash, value: V) -> Optional[V]:
        """Store value for sha, returning the value it replaced, if any."""
        i = self._shard(sha)
        with self._locks[i]:
            previous = self._maps[i].get(sha)
            self._maps[i][sha] = value
        return previous

    def remove(self, sha: Hash) -> Optional[V]:
        """Remove sha from the cache, returning its value, if any."""
        i = self._shard(sha)
        with self._locks[i]:
            return self._maps[i].pop(sha, None)

    def contains(self, sha: Hash) -> bool:
        i = self._shard(sha)
        with self._locks[i]:
            return sha in self._maps[i]

    __contains__ = contains

    def approximate_len(self) -> int:
        """Sum of the shard sizes.

        Shards are counted one at a time, so the result may not correspond
        to any single moment when other threads are writing.
        """
        total = 0
        for lock, shard in zip(self._locks, self._maps):
            with lock:
                total += len(shard)
        return total

    def retain(self, predicate: Callable[[Hash, V], bool]) -> None:
        """Drop every entry for which predicate returns False.

        Each shard is filtered under its own lock; there is no snapshot
        across shards.
        """
        for lock, shard in zip(self._locks, self._maps):
            with lock:
                for sha in [k for k, v in shard.items() if not predicate(k, v)]:
                    del shard[sha]

    def clear(self) -> None:
        for lock, shard in zip(self._locks, self._maps):
            with lock:
                shard.clear()
