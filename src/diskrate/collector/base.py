"""
Base counter source interface.

A source is anything that can produce a CounterSnapshot. This keeps the
pipeline decoupled from where the counters come from.
"""

from abc import ABC, abstractmethod

from diskrate.metrics import CounterSnapshot


class CounterSource(ABC):
    """Interface for all counter sources."""

    @abstractmethod
    def collect(self) -> CounterSnapshot:
        """Read one snapshot of the current counters."""
        ...

    @abstractmethod
    def name(self) -> str:
        """Human-readable name for this source."""
        ...
