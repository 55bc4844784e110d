"""
Sliding Statistics Buffer Module

This module keeps the rolling history of counter samples that feeds the
statistics chart. A timer polls the module's stats endpoint every
:data:`~syslogview.constants.POLL_INTERVAL_MS` milliseconds and appends each
response, timestamped on arrival, to a bounded FIFO.

Classes:
    HistoryBuffer: Bounded, time-ordered FIFO of (timestamp, sample) pairs
    SlidingStatsBuffer: Polling component owning a HistoryBuffer and its timer
"""

import asyncio
import logging
from collections import deque
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional, Set, Tuple

from syslogview.constants import POLL_INTERVAL_MS, WINDOW_SAMPLES

logger = logging.getLogger(__name__)

Sample = Dict[str, float]
Entry = Tuple[datetime, Sample]


class HistoryBuffer:
    """
    Bounded FIFO of ``(timestamp, sample)`` pairs in arrival order.

    Appending to a full buffer evicts the oldest pair in the same operation,
    so readers never observe more than ``maxlen`` entries.
    """

    def __init__(self, maxlen: int = WINDOW_SAMPLES):
        if maxlen < 1:
            raise ValueError(f"maxlen must be positive, got {maxlen}")
        self.maxlen = maxlen
        self._entries: deque = deque(maxlen=maxlen)

    def append(self, timestamp: datetime, sample: Sample) -> Optional[Entry]:
        """
        Append a pair, returning the evicted pair if the buffer was full.
        """
        evicted = self._entries[0] if len(self._entries) == self.maxlen else None
        self._entries.append((timestamp, dict(sample)))
        return evicted

    def timestamps(self) -> List[datetime]:
        return [ts for ts, _ in self._entries]

    def samples(self) -> List[Sample]:
        return [sample for _, sample in self._entries]

    def snapshot(self) -> List[Entry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Entry:
        return self._entries[index]


class SlidingStatsBuffer:
    """
    Polls the stats endpoint on a fixed timer and keeps the rolling history.

    Every tick issues exactly one fetch. Earlier fetches still in flight are
    neither cancelled nor de-duplicated, so a slow response may be applied
    after a faster, more recent one. Each fetch carries a monotonic sequence
    number; with ``discard_stale`` enabled, responses older than the last
    applied one are dropped instead.

    After :meth:`stop` the component is inactive: the timer is gone, the
    history is discarded and responses still in flight are ignored when they
    arrive.

    Attributes:
        client: Object exposing ``async stats() -> Optional[dict]``
        history (HistoryBuffer): The rolling window of samples
        interval (float): Poll interval in seconds
        discard_stale (bool): Drop out-of-order responses
        active (bool): Whether responses may still mutate the history
        last_error (Optional[str]): Reason of the most recent failed poll
        failures (int): Number of failed polls
    """

    def __init__(
        self,
        client: Any,
        interval_ms: int = POLL_INTERVAL_MS,
        maxlen: int = WINDOW_SAMPLES,
        clock: Callable[[], datetime] = datetime.now,
        discard_stale: bool = False,
    ):
        self.client = client
        self.history = HistoryBuffer(maxlen)
        self.interval = interval_ms / 1000.0
        self.discard_stale = discard_stale
        self.active = False
        self.last_error: Optional[str] = None
        self.failures = 0
        self._clock = clock
        self._listeners: List[Callable[["SlidingStatsBuffer"], None]] = []
        self._timer_task: Optional[asyncio.Task] = None
        self._fetches: Set[asyncio.Task] = set()
        self._seq = 0
        self._applied_seq = 0

    def add_listener(self, callback: Callable[["SlidingStatsBuffer"], None]) -> None:
        """Register a callback fired synchronously after every applied sample."""
        self._listeners.append(callback)

    # -----------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------
    async def start(self) -> None:
        """
        Activate the component and start the poll timer. Idempotent.
        """
        if self._timer_task is not None:
            logger.debug("SlidingStatsBuffer.start() called but timer already running")
            return

        logger.info(f"Starting stats polling every {self.interval:.1f}s")
        self.active = True
        self._timer_task = asyncio.create_task(self._timer_loop())

    async def stop(self) -> None:
        """
        Cancel the timer, deactivate and discard the history.

        Fetches already in flight are not cancelled; they find the component
        inactive when they resolve and leave it untouched.
        """
        self.active = False
        if self._timer_task is not None:
            logger.info("Stopping stats polling")
            self._timer_task.cancel()
            try:
                await self._timer_task
            except asyncio.CancelledError:
                pass
            finally:
                self._timer_task = None
        self.history.clear()

    @property
    def in_flight(self) -> int:
        return len(self._fetches)

    # -----------------------------------------------------------------
    # Polling
    # -----------------------------------------------------------------
    async def _timer_loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                self.tick()
            except Exception as exc:  # pragma: no cover
                logger.error(f"Unexpected error scheduling stats poll: {exc}")

    def tick(self) -> asyncio.Task:
        """
        Issue one stats fetch without waiting for it.

        Returns:
            asyncio.Task: The fetch, resolving to True if its sample was applied
        """
        self._seq += 1
        task = asyncio.ensure_future(self._fetch(self._seq))
        self._fetches.add(task)
        task.add_done_callback(self._fetches.discard)
        return task

    async def _fetch(self, seq: int) -> bool:
        try:
            sample = await self.client.stats()
        except Exception as exc:
            logger.exception(f"Unexpected error in poll #{seq}")
            if self.active:
                self.failures += 1
                self.last_error = f"stats: {exc.__class__.__name__}: {exc}"
            return False
        if sample is None:
            if self.active:
                self.failures += 1
                self.last_error = getattr(self.client, "last_error", None) or "stats request failed"
                logger.debug(f"Poll #{seq} produced no sample; retrying next tick")
            return False
        return self.apply(seq, self._clock(), sample)

    def apply(self, seq: int, timestamp: datetime, sample: Sample) -> bool:
        """
        Apply the response of fetch ``seq`` and signal listeners.

        Returns:
            bool: True if the sample was appended to the history
        """
        if not self.active:
            logger.debug(f"Dropping poll #{seq}: polling stopped")
            return False
        if self.discard_stale and seq <= self._applied_seq:
            logger.debug(f"Dropping stale poll #{seq} (already applied #{self._applied_seq})")
            return False

        self.history.append(timestamp, sample)
        self._applied_seq = max(self._applied_seq, seq)
        self.last_error = None

        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception:
                logger.exception("Stats listener failed")
        return True
