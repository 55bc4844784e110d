"""
Scrolling time axis for the statistics chart.

The x axis always spans the last :data:`~syslogview.constants.WINDOW_MS`
milliseconds, so its left edge moves on every redraw. The stock minute
locator keeps emitting a tick pinned to that moving edge, which makes the
leftmost tick jitter; :class:`RightTimeLocator` drops it.
"""

from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence, Tuple

import matplotlib.dates as mdates

from syslogview.constants import WINDOW_MS


class RightTimeLocator(mdates.MinuteLocator):
    """Minute locator that discards the earliest generated tick."""

    def tick_values(self, vmin, vmax):
        ticks = super().tick_values(vmin, vmax)
        if len(ticks) == 0:
            return ticks
        # remove the first tick
        return ticks[1:]


class TimeAxisAligner:
    """
    Computes the visible time window and the chart labels for one redraw.

    Attributes:
        window_ms (int): Width of the visible window in milliseconds
    """

    def __init__(self, window_ms: int = WINDOW_MS,
                 clock: Callable[[], datetime] = datetime.now):
        self.window_ms = window_ms
        self._clock = clock

    def now(self) -> datetime:
        return self._clock()

    def window(self, now: Optional[datetime] = None) -> Tuple[datetime, datetime]:
        """Return ``(now - window, now)``."""
        if now is None:
            now = self._clock()
        return now - timedelta(milliseconds=self.window_ms), now

    def labels(self, timestamps: Sequence[datetime], now: Optional[datetime] = None) -> List[datetime]:
        """
        Shift the history timestamps by one position and close with ``now``.

        The result has exactly ``len(timestamps)`` elements, matching the
        length of every rate series computed from the same history.
        """
        if not timestamps:
            return []
        if now is None:
            now = self._clock()
        labels = list(timestamps[1:])
        labels.append(now)
        return labels

    def locator(self) -> RightTimeLocator:
        return RightTimeLocator()

    def formatter(self) -> mdates.DateFormatter:
        return mdates.DateFormatter("%H:%M")
