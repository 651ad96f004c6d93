"""Anki id generation.

Deck and model ids are epoch milliseconds with random jitter. Note and card
ids are derived from one captured timestamp plus a running index, which keeps
them strictly increasing in insertion order.
"""

import random
import time
from collections.abc import Callable

CARD_ID_OFFSET = 1_000_000
JITTER_MS = 1000


class IdGenerator:
    """Hands out ids for one export. The clock is read once, at construction."""

    def __init__(
        self,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ):
        self._clock = clock
        self._rng = rng or random.Random()
        self.now = clock()
        self.now_ms = int(self.now * 1000)
        self.now_seconds = int(self.now)
        self._issued: set[int] = set()

    def generate_id(self, reserved: set[int] | None = None) -> int:
        """Return a fresh jittered millisecond id not issued before by this generator."""
        reserved = reserved or set()
        while True:
            candidate = int(self._clock() * 1000) + self._rng.randrange(JITTER_MS)
            if candidate not in self._issued and candidate not in reserved:
                self._issued.add(candidate)
                return candidate

    def note_id(self, index: int) -> int:
        return self.now_seconds * 1000 + index

    def card_id(self, index: int) -> int:
        return self.now_seconds * 1000 + index + CARD_ID_OFFSET
