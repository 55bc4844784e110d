"""
Rate series derived from the counter history.

The module reports monotonically increasing counters; the chart shows how
much each counter moved between two consecutive polls.
"""

from dataclasses import dataclass
from typing import Any, List, Mapping, Sequence


def _value(entry: Any, key: str) -> float:
    # History entries are (timestamp, sample) pairs; bare samples are accepted too
    sample = entry[1] if isinstance(entry, tuple) else entry
    return sample.get(key, 0)


def deltas(buffer: Sequence[Any], key: str) -> List[float]:
    """
    Per-interval differences of ``key`` over ``buffer``.

    The result has one element per history entry so it lines up with the
    chart labels: element ``i`` is ``buffer[i+1][key] - buffer[i][key]`` and
    the last element repeats the previous difference. A single-entry history
    has no interval yet and yields ``[0]``.
    """
    length = len(buffer)
    if length == 0:
        return []
    if length == 1:
        return [0]

    result = [_value(buffer[i + 1], key) - _value(buffer[i], key) for i in range(length - 1)]
    result.append(result[-1])
    return result


@dataclass(frozen=True)
class DatasetSpec:
    """
    One line of the statistics chart.

    Attributes:
        label (str): Legend text
        color (str): CSS ``rgba(...)`` colour of the line
        key (str): Counter whose rate is plotted
    """

    label: str
    color: str
    key: str

    def series(self, buffer: Sequence[Any]) -> List[float]:
        return deltas(buffer, self.key)

    def render(self, buffer: Sequence[Any]) -> Mapping[str, Any]:
        """Series plus display metadata, as handed to the chart surface."""
        return {"label": self.label, "color": self.color, "data": self.series(buffer)}


def make_dataset(label: str, color: str, key: str) -> DatasetSpec:
    return DatasetSpec(label=label, color=color, key=key)
