"""
Sentence Pool

Prefetched queue of practice sentences at one difficulty. Hides generation
latency: taking a sentence that drops the queue below the low-water mark
starts a background refill. At most one refill is in flight at a time.
"""

import asyncio
import json
import logging
from collections import deque
from typing import Iterable, Optional, Protocol

from dgp.exceptions import SentenceGenerationError
from dgp.models.stages import Difficulty

logger = logging.getLogger("dgp.pool")

# Used whenever generation fails and nothing is queued
FALLBACK_SENTENCES: tuple[str, ...] = (
    "the quick brown fox jumps over the lazy dog",
    "my sister baked delicious cookies for the school fair",
)


class SentenceSource(Protocol):
    async def generate_batch(self, difficulty: Difficulty, count: int) -> list[str]:
        ...


class SentencePool:
    """FIFO buffer of upcoming sentences with single-flight refills."""

    def __init__(
        self,
        source: SentenceSource,
        difficulty: Difficulty = Difficulty.EASY,
        batch_size: int = 5,
        low_water_mark: int = 2,
    ):
        self.source = source
        self.difficulty = difficulty
        self.batch_size = batch_size
        self.low_water_mark = low_water_mark
        self._queue: deque[str] = deque()
        self._refill_task: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def pending(self) -> list[str]:
        return list(self._queue)

    @property
    def is_refilling(self) -> bool:
        return self._refill_task is not None and not self._refill_task.done()

    async def _fetch(self, difficulty: Difficulty) -> int:
        batch = await self.source.generate_batch(difficulty, self.batch_size)
        self._queue.extend(batch)
        logger.info(json.dumps({
            "step": "POOL_REFILL",
            "status": "complete",
            "difficulty": difficulty.value,
            "added": len(batch),
            "queue_length": len(self._queue),
        }))
        return len(batch)

    async def refill(self, difficulty: Optional[Difficulty] = None) -> int:
        """
        Request one batch and append it to the tail of the queue.

        Returns the number of sentences added, or 0 without making a request
        when a refill is already in flight. Failures propagate to the caller
        and leave the queue untouched.
        """
        if self.is_refilling:
            logger.debug("Refill already in flight; skipping")
            return 0
        self._refill_task = asyncio.ensure_future(self._fetch(difficulty or self.difficulty))
        return await self._refill_task

    def _schedule_refill(self) -> None:
        if self.is_refilling:
            return
        self._refill_task = asyncio.ensure_future(self._fetch(self.difficulty))
        self._refill_task.add_done_callback(self._log_background_failure)

    @staticmethod
    def _log_background_failure(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Background pool refill failed: {error}")

    def take_next(self) -> Optional[str]:
        """
        Pop the head of the queue (None when exhausted).

        Starts a background refill, without waiting for it, when fewer than
        `low_water_mark` sentences remain.
        """
        sentence = self._queue.popleft() if self._queue else None
        if len(self._queue) < self.low_water_mark:
            self._schedule_refill()
        return sentence

    async def draw(self) -> str:
        """
        Take the next sentence, fetching one synchronously-style when empty.

        Waits for an in-flight refill first; if the queue is still empty a
        refill is awaited directly, and a failed or empty refill falls back
        to FALLBACK_SENTENCES.
        """
        if not self._queue:
            await self.wait_idle()
        if not self._queue:
            try:
                await self.refill()
            except SentenceGenerationError as e:
                logger.warning(f"Sentence generation failed, using fallback pair: {e}")
        if not self._queue:
            self.extend(FALLBACK_SENTENCES)
        return self.take_next()

    async def wait_idle(self) -> None:
        """Wait for an in-flight refill to settle (success or failure)."""
        task = self._refill_task
        if task is not None and not task.done():
            await asyncio.wait({task})

    def extend(self, sentences: Iterable[str]) -> None:
        self._queue.extend(sentences)

    async def reset(self, difficulty: Difficulty) -> None:
        """Discard every queued sentence and switch difficulty."""
        await self.wait_idle()
        self._queue.clear()
        self.difficulty = difficulty

    def close(self) -> None:
        if self.is_refilling:
            self._refill_task.cancel()
