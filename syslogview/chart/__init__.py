"""
Chart Module

Rendering of the scrolling statistics chart.

Classes:
    ChartSurface: Owner of the chart figure, recreated on every redraw
    TimeAxisAligner: Visible window and labels for the scrolling time axis
    RightTimeLocator: Minute locator without the tick at the moving left edge
"""

import matplotlib

# Figures are rendered off-screen into PNG images
matplotlib.use("Agg")

from .axis import RightTimeLocator, TimeAxisAligner
from .surface import ChartDataError, ChartSurface, css_color

__all__ = ['ChartSurface', 'ChartDataError', 'TimeAxisAligner', 'RightTimeLocator', 'css_color']
