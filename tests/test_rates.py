"""Tests for the per-interval rate series."""

from datetime import datetime, timedelta

from syslogview.stats.rates import DatasetSpec, deltas, make_dataset


def _history(values, key="X"):
    start = datetime(2024, 1, 1, 12, 0, 0)
    return [(start + timedelta(seconds=2 * i), {key: v}) for i, v in enumerate(values)]


def test_rate_scenario_repeats_last_delta():
    assert deltas(_history([10, 15, 19]), "X") == [5, 4, 4]


def test_empty_history_gives_empty_series():
    assert deltas([], "X") == []


def test_single_sample_gives_zero():
    assert deltas(_history([42]), "X") == [0]


def test_two_samples():
    assert deltas(_history([3, 10]), "X") == [7, 7]


def test_length_matches_history_and_tail_is_padded():
    values = [0, 3, 3, 10, 11, 30, 31, 31, 50]
    for n in range(1, len(values) + 1):
        series = deltas(_history(values[:n]), "X")
        assert len(series) == n
        if n >= 2:
            assert series[-1] == series[-2]


def test_missing_key_counts_as_zero():
    history = [(None, {"X": 5}), (None, {}), (None, {"X": 9})]
    assert deltas(history, "X") == [-5, 9, 9]


def test_bare_samples_are_accepted():
    assert deltas([{"X": 1}, {"X": 4}], "X") == [3, 3]


def test_dataset_spec_renders_series_with_metadata():
    spec = make_dataset("Incoming bytes/s", "rgba(75,192,192,1)", "X")
    assert isinstance(spec, DatasetSpec)

    rendered = spec.render(_history([1, 2, 4]))
    assert rendered == {
        "label": "Incoming bytes/s",
        "color": "rgba(75,192,192,1)",
        "data": [1, 2, 2],
    }


def test_series_is_recomputed_each_call():
    spec = make_dataset("x", "red", "X")
    history = _history([1, 2])
    first = spec.series(history)
    history.append((None, {"X": 10}))
    assert spec.series(history) == [1, 8, 8]
    assert first == [1, 1]
