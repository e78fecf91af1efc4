"""No-repeat random ordering over the quiz ids of one round."""

from __future__ import annotations

import random
from collections.abc import Iterable

from .errors import InvalidPrecondition


class SessionSampler:
    """Draw ids uniformly from a shrinking pool, one elimination per call.

    The sequence of draws over a full round is a uniformly random permutation
    of the ids the sampler was built with.
    """

    def __init__(self, ids: Iterable[int], rng: random.Random) -> None:
        pool = list(dict.fromkeys(ids))
        if not pool:
            raise ValueError("sampler requires at least one identifier")
        self._pool = pool
        self._rng = rng

    def __len__(self) -> int:
        return len(self._pool)

    @property
    def exhausted(self) -> bool:
        return not self._pool

    def draw(self) -> int:
        if not self._pool:
            raise InvalidPrecondition("sampler exhausted: every id has already been drawn")
        if len(self._pool) == 1:
            return self._pool.pop()
        index = self._rng.randrange(len(self._pool))
        # Swap-remove keeps the draw O(1); pool order carries no meaning.
        self._pool[index], self._pool[-1] = self._pool[-1], self._pool[index]
        return self._pool.pop()
