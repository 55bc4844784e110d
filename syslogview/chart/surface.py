"""
Chart Surface Module

This module binds the statistics chart to a drawing surface. The chart is
never updated in place: every redraw tears down the previous figure and
builds a new one from the current history snapshot, then keeps the rendered
PNG for the dashboard to serve.

Classes:
    ChartDataError: Raised for inconsistent chart input or a released surface
    ChartSurface: Owner of the single matplotlib figure behind the chart
"""

import io
import logging
import re
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence, Tuple

import matplotlib.dates as mdates
from matplotlib.figure import Figure
from matplotlib.ticker import Locator

logger = logging.getLogger(__name__)

_RGBA = re.compile(r"rgba?\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)")


class ChartDataError(ValueError):
    """Raised when a chart cannot be drawn from the given input."""


def css_color(color: str) -> Any:
    """
    Convert a CSS ``rgb()``/``rgba()`` colour to a matplotlib RGBA tuple.

    Any other string (``"#fff"``, ``"teal"``) is passed through unchanged.
    """
    match = _RGBA.fullmatch(color.strip())
    if not match:
        return color
    r, g, b, a = match.groups()
    return (float(r) / 255, float(g) / 255, float(b) / 255, float(a) if a is not None else 1.0)


class ChartSurface:
    """
    Owns exactly one chart figure at a time.

    Attributes:
        width (int): Surface width in pixels
        height (int): Surface height in pixels
        dpi (int): Resolution used to size the figure
        available (bool): False once :meth:`release` has been called
        renders (int): Number of figures constructed so far
    """

    def __init__(self, width: int = 600, height: int = 250, dpi: int = 100):
        self.width = width
        self.height = height
        self.dpi = dpi
        self.available = True
        self.renders = 0
        self._figure: Optional[Figure] = None
        self._png: Optional[bytes] = None

    @property
    def figure(self) -> Optional[Figure]:
        return self._figure

    def render(
        self,
        labels: Sequence[datetime],
        datasets: Sequence[Mapping[str, Any]],
        window: Tuple[datetime, datetime],
        locator: Optional[Locator] = None,
        formatter: Optional[mdates.DateFormatter] = None,
    ) -> bytes:
        """
        Draw a fresh line chart, replacing the previous one.

        Args:
            labels: One timestamp per data point
            datasets: Mappings with ``label``, ``color`` and ``data`` keys
            window: ``(start, end)`` of the visible time range
            locator: Tick locator for the x axis
            formatter: Tick label formatter for the x axis

        Returns:
            bytes: The rendered PNG image

        Raises:
            ChartDataError: If the surface was released or a dataset length
                            differs from the number of labels
        """
        if not self.available:
            raise ChartDataError("chart surface has been released")
        for dataset in datasets:
            if len(dataset["data"]) != len(labels):
                raise ChartDataError(
                    f"dataset {dataset.get('label')!r} has {len(dataset['data'])} points "
                    f"for {len(labels)} labels"
                )

        self.destroy()
        figure = self._build(labels, datasets, window, locator, formatter)
        self._figure = figure
        self.renders += 1

        buf = io.BytesIO()
        figure.savefig(buf, format="png")
        self._png = buf.getvalue()
        return self._png

    def _build(self, labels, datasets, window, locator, formatter) -> Figure:
        figure = Figure(figsize=(self.width / self.dpi, self.height / self.dpi), dpi=self.dpi)
        ax = figure.add_subplot()

        for dataset in datasets:
            color = css_color(dataset["color"])
            ax.plot(
                labels,
                dataset["data"],
                label=dataset["label"],
                color=color,
                linewidth=1.5,
                marker="o",
                markersize=2,
                markerfacecolor="#fff",
                markeredgecolor=color,
                markeredgewidth=1,
            )

        ax.set_xlim(mdates.date2num(window[0]), mdates.date2num(window[1]))
        ax.xaxis.set_major_locator(locator or mdates.MinuteLocator())
        ax.xaxis.set_major_formatter(formatter or mdates.DateFormatter("%H:%M"))
        ax.yaxis.tick_right()
        ax.grid(color=(0, 0, 0, 0.1))
        if datasets:
            ax.legend(loc="upper left", fontsize="small")
        figure.tight_layout()
        return figure

    def png(self) -> Optional[bytes]:
        """The last rendered image, or None before the first render."""
        return self._png

    def destroy(self) -> None:
        """Tear down the current figure, if any."""
        if self._figure is not None:
            self._figure.clear()
            self._figure = None

    def release(self) -> None:
        """Destroy the figure and make the surface unavailable for further renders."""
        self.destroy()
        self._png = None
        self.available = False
        logger.debug("Chart surface released")
