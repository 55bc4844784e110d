"""Tests for the scrolling time axis."""

from datetime import datetime, timedelta, timezone

import matplotlib.dates as mdates
import pytest

from syslogview.chart.axis import RightTimeLocator, TimeAxisAligner
from syslogview.stats.rates import deltas

START = datetime(2024, 1, 1, 12, 0, 0)


@pytest.mark.parametrize("offset_s", [0, 1, 17, 59, 60, 123, 299])
def test_locator_drops_exactly_the_first_tick(offset_s):
    vmax = datetime(2024, 1, 1, 12, 10, 0, tzinfo=timezone.utc) + timedelta(seconds=offset_s)
    vmin = vmax - timedelta(minutes=5)

    stock = list(mdates.MinuteLocator().tick_values(vmin, vmax))
    aligned = list(RightTimeLocator().tick_values(vmin, vmax))

    assert len(stock) > 0
    assert aligned == stock[1:]


def test_aligner_window_spans_five_minutes():
    aligner = TimeAxisAligner(clock=lambda: START)
    assert aligner.window() == (START - timedelta(minutes=5), START)
    assert aligner.window(START + timedelta(seconds=2))[1] == START + timedelta(seconds=2)


def test_labels_shift_by_one_and_end_with_now():
    timestamps = [START + timedelta(seconds=2 * i) for i in range(4)]
    now = START + timedelta(seconds=9)
    aligner = TimeAxisAligner()

    labels = aligner.labels(timestamps, now)

    assert labels == timestamps[1:] + [now]
    assert aligner.labels([], now) == []
    assert aligner.labels(timestamps[:1], now) == [now]


def test_label_count_matches_series_length():
    aligner = TimeAxisAligner(clock=lambda: START)
    history = []
    for i in range(12):
        history.append((START + timedelta(seconds=2 * i), {"X": i * i}))
        labels = aligner.labels([ts for ts, _ in history])
        assert len(labels) == len(deltas(history, "X"))


def test_locator_factory_returns_fresh_instances():
    aligner = TimeAxisAligner()
    assert isinstance(aligner.locator(), RightTimeLocator)
    assert aligner.locator() is not aligner.locator()
