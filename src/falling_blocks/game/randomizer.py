from __future__ import annotations

import random
from collections import deque
from typing import Deque, List, Optional, Sequence, Tuple

from .pieces import PieceKind


class NextQueue:
    """Bag randomizer with a fixed-length preview.

    The pool starts with one of each kind; every draw removes a random entry
    and the pool refills once it is empty, so each aligned run of
    `len(kinds)` pieces is a permutation of the set.
    """

    def __init__(
        self,
        kinds: Sequence[PieceKind] = tuple(PieceKind),
        size: int = 3,
        rng: Optional[random.Random] = None,
    ) -> None:
        if not kinds:
            raise ValueError("randomizer needs at least one piece kind")
        self.kinds: Tuple[PieceKind, ...] = tuple(kinds)
        self.size = int(size)
        self.rng = rng or random.Random()
        self.pool: List[PieceKind] = []
        self.queue: Deque[PieceKind] = deque()
        self.reset()

    def reset(self) -> None:
        self.pool = list(self.kinds)
        self.queue.clear()
        while len(self.queue) < self.size:
            self.queue.append(self._draw_from_pool())

    def _draw_from_pool(self) -> PieceKind:
        if not self.pool:
            self.pool = list(self.kinds)
        return self.pool.pop(self.rng.randrange(len(self.pool)))

    def draw(self) -> PieceKind:
        kind = self.queue.popleft()
        self.queue.append(self._draw_from_pool())
        return kind

    def peek(self) -> Tuple[PieceKind, ...]:
        return tuple(self.queue)

    def __len__(self) -> int:
        return len(self.queue)
