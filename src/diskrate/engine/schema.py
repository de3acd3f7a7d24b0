"""
Graph/metric schema and its expansion against a snapshot's key set.

Group and metric names may contain "#" or "*", each standing for one
namespace segment discovered at runtime (usually a device name), e.g.
"throughput.#" + "read" matches "throughput.sda.read".
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from diskrate.metrics import CounterSnapshot, GraphSpec, MetricSpec, ResolvedMetric

log = logging.getLogger(__name__)

UNIT_FLOAT = "float"
UNIT_BYTES_PER_SECOND = "bytes/sec"

WILDCARD_CHARS = "*#"

_SEGMENT_RE = "[-a-zA-Z0-9_]+"

_WORD_START_RE = re.compile(r"(^|\s)(\S)")


def has_wildcard(name: str) -> bool:
    return any(c in name for c in WILDCARD_CHARS)


def title(s: str) -> str:
    """Label from a key: "disk.time.#" becomes "Disk Time".

    Only the first letter of each word changes, so "ioWeighted" becomes
    "IoWeighted" rather than "Ioweighted". Inner spacing is kept as is;
    only the ends are trimmed.
    """
    for old, new in ((".", " "), ("_", " "), ("*", ""), ("#", "")):
        s = s.replace(old, new)
    return _WORD_START_RE.sub(lambda m: m.group(1) + m.group(2).upper(), s).strip()


def disk_graphs(prefix: str) -> Tuple[GraphSpec, ...]:
    label_prefix = title(prefix)
    return (
        GraphSpec(
            name="throughput.#",
            label=f"{label_prefix} Throughput",
            unit=UNIT_BYTES_PER_SECOND,
            metrics=(
                MetricSpec(name="read", label="read", diff=True, per_second=True),
                MetricSpec(name="write", label="write", diff=True, per_second=True),
            ),
        ),
        GraphSpec(
            name="time.#",
            label=f"{label_prefix} Time (ms)",
            unit=UNIT_FLOAT,
            metrics=(
                MetricSpec(name="read", label="read", diff=True),
                MetricSpec(name="write", label="write", diff=True),
                MetricSpec(name="io", label="io", diff=True),
                MetricSpec(name="ioWeighted", label="io weighted", diff=True),
            ),
        ),
    )


class WildcardMatcher:
    """Compiled form of a wildcard name. Matches whole keys only."""

    def __init__(self, pattern: str):
        self.pattern = pattern
        parts = [re.escape(p) for p in re.split(r"[*#]", pattern)]
        self._re = re.compile(_SEGMENT_RE.join(parts))

    def matches(self, key: str) -> bool:
        return self._re.fullmatch(key) is not None

    def filter(self, keys: Iterable[str]) -> List[str]:
        return sorted(k for k in keys if self.matches(k))

    def __repr__(self) -> str:
        return f"WildcardMatcher({self.pattern!r})"


def _full_name(group: str, metric: str) -> str:
    return f"{group}.{metric}" if group else metric


class SchemaExpander:
    """Expands a graph schema into concrete metrics.

    Wildcard names are compiled once when the expander is built; expand()
    can then be called against any snapshot.
    """

    def __init__(self, graphs: Sequence[GraphSpec]):
        self._entries: List[Tuple[GraphSpec, MetricSpec, Optional[WildcardMatcher]]] = []
        for graph in graphs:
            for metric in graph.metrics:
                matcher = None
                if has_wildcard(graph.name + metric.name):
                    matcher = WildcardMatcher(_full_name(graph.name, metric.name))
                self._entries.append((graph, metric, matcher))

    def expand(self, snapshot: CounterSnapshot) -> List[ResolvedMetric]:
        resolved: List[ResolvedMetric] = []
        keys = snapshot.keys()

        for graph, metric, matcher in self._entries:
            if matcher is None:
                if metric.name not in snapshot:
                    log.debug("%s not present this run", metric.name)
                    continue
                resolved.append(_resolve(metric, key=metric.name, group=graph.name))
                continue

            for key in matcher.filter(keys):
                resolved.append(_resolve(metric, key=key, group=""))

        return resolved


def _resolve(metric: MetricSpec, key: str, group: str) -> ResolvedMetric:
    return ResolvedMetric(
        key=key,
        name=key,
        group=group,
        diff=metric.diff,
        per_second=metric.per_second,
        scale=metric.scale,
    )


def expand(graphs: Sequence[GraphSpec], snapshot: CounterSnapshot) -> List[ResolvedMetric]:
    return SchemaExpander(graphs).expand(snapshot)


def definitions(graphs: Sequence[GraphSpec], prefix: str) -> Dict[str, dict]:
    """Graph definitions keyed by prefix-qualified group name, with labels filled in."""
    result: Dict[str, dict] = {}
    for graph in graphs:
        key = f"{prefix}.{graph.name}" if graph.name else prefix
        result[key] = {
            "label": graph.label or title(key),
            "unit": graph.unit,
            "metrics": [
                {
                    "name": m.name,
                    "label": m.label or title(m.name),
                    "stacked": m.stacked,
                }
                for m in graph.metrics
            ],
        }
    return result
