"""
One collection run, start to finish:

    read counters -> load previous snapshot -> expand schema
    -> compute rates -> write lines -> save new snapshot

A failed read aborts before anything is saved, so the previous snapshot
survives for the next run. Per-metric problems only drop that metric.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, TextIO

from diskrate.collector.base import CounterSource
from diskrate.engine.rate import rate
from diskrate.engine.schema import SchemaExpander, disk_graphs
from diskrate.errors import MetricSkipped, StoreError
from diskrate.metrics import CounterSnapshot, GraphSpec, ResolvedMetric
from diskrate.output.formatter import format_line, metric_key, write_definitions
from diskrate.storage.snapshot_store import SnapshotStore

log = logging.getLogger(__name__)


@dataclass
class RunResult:
    emitted: int = 0
    skipped: List[str] = field(default_factory=list)
    had_baseline: bool = False


class DiskPlugin:

    def __init__(
        self,
        source: CounterSource,
        store: SnapshotStore,
        prefix: str,
        graphs: Optional[Sequence[GraphSpec]] = None,
        out: Optional[TextIO] = None,
    ):
        self._source = source
        self._store = store
        self._prefix = prefix
        self._graphs = tuple(graphs) if graphs is not None else disk_graphs(prefix)
        self._out = out if out is not None else sys.stdout

    @property
    def graphs(self) -> Sequence[GraphSpec]:
        return self._graphs

    def output_definitions(self):
        write_definitions(self._out, self._graphs, self._prefix)

    def output_values(self) -> RunResult:
        """Run once. Raises ParseError/CollectionError before touching state,
        and StoreError if the new snapshot can't be saved."""
        current = self._source.collect()

        try:
            previous = self._store.load()
        except StoreError as e:
            log.warning("Ignoring previous snapshot: %s", e)
            previous = None

        result = RunResult(had_baseline=previous is not None)

        # Compile wildcard names once per run.
        expander = SchemaExpander(self._graphs)
        for metric in expander.expand(current):
            key = metric_key(self._prefix, metric.group, metric.name)
            try:
                value = self._evaluate(metric, current, previous)
                if value is None:
                    result.skipped.append(key)
                    continue
                line = format_line(key, value, current.captured_at)
            except MetricSkipped as e:
                log.warning("Skipping %s: %s", key, e)
                result.skipped.append(key)
                continue
            self._out.write(line + "\n")
            result.emitted += 1

        self._store.save(current)
        log.info("Emitted %d metrics, skipped %d", result.emitted, len(result.skipped))
        return result

    def _evaluate(
        self,
        metric: ResolvedMetric,
        current: CounterSnapshot,
        previous: Optional[CounterSnapshot],
    ) -> Optional[float]:
        value = current.get(metric.key)
        if value is None:
            return None

        if metric.diff:
            last_value = previous.get(metric.key) if previous is not None else None
            if last_value is None:
                log.info("%s does not exist at last fetch", metric.key)
                return None
            elapsed = current.captured_at - previous.captured_at
            value = rate(value, last_value, elapsed, metric.per_second)

        if metric.scale:
            value *= metric.scale
        return value
