"""
Statistics Module

Rolling counter history and the rate series derived from it.

Classes:
    HistoryBuffer: Bounded FIFO of (timestamp, sample) pairs
    SlidingStatsBuffer: Timer-driven poller feeding a HistoryBuffer
    DatasetSpec: One chart line derived from the history
"""

from .buffer import HistoryBuffer, SlidingStatsBuffer
from .rates import DatasetSpec, deltas, make_dataset

__all__ = ['HistoryBuffer', 'SlidingStatsBuffer', 'DatasetSpec', 'deltas', 'make_dataset']
