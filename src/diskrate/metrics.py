"""
Data model for the disk collector.

A CounterSnapshot is the flat `name -> cumulative value` namespace read
from the kernel in one run. GraphSpec/MetricSpec describe what to emit
and how to graph it; ResolvedMetric is one concrete line to evaluate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class CounterSnapshot:
    """All counters from one read, plus the unix time they were captured."""

    values: Dict[str, float]
    captured_at: int

    def get(self, name: str) -> Optional[float]:
        """Returns None when the counter is absent (never 0)."""
        return self.values.get(name)

    def keys(self) -> List[str]:
        return sorted(self.values)

    def items(self) -> Iterator[Tuple[str, float]]:
        for key in self.keys():
            yield key, self.values[key]

    def __len__(self) -> int:
        return len(self.values)

    def __contains__(self, name: str) -> bool:
        return name in self.values


@dataclass(frozen=True)
class MetricSpec:
    name: str
    label: str = ""
    diff: bool = False
    per_second: bool = False
    scale: Optional[float] = None
    stacked: bool = False


@dataclass(frozen=True)
class GraphSpec:
    name: str                # may contain "#" / "*", e.g. "throughput.#"
    label: str = ""
    unit: str = "float"
    metrics: Tuple[MetricSpec, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ResolvedMetric:
    key: str          # lookup key in the snapshot
    name: str         # rendered metric name segment
    group: str        # group segment between the root prefix and name ("" for wildcard matches)
    diff: bool
    per_second: bool
    scale: Optional[float]
