"""Tests for the graph schema, wildcard matching and expansion."""

from diskrate.engine.schema import (
    SchemaExpander,
    WildcardMatcher,
    definitions,
    disk_graphs,
    expand,
    has_wildcard,
    title,
)
from diskrate.metrics import CounterSnapshot, GraphSpec, MetricSpec


def _snap(*keys) -> CounterSnapshot:
    return CounterSnapshot(values={k: 1.0 for k in keys}, captured_at=0)


def test_disk_graphs_has_two_groups():
    graphs = disk_graphs("disk")
    assert [g.name for g in graphs] == ["throughput.#", "time.#"]
    assert graphs[0].label == "Disk Throughput"
    assert graphs[1].label == "Disk Time (ms)"
    assert all(m.diff for g in graphs for m in g.metrics)
    assert all(m.per_second for m in graphs[0].metrics)
    assert not any(m.per_second for m in graphs[1].metrics)


def test_has_wildcard():
    assert has_wildcard("throughput.#")
    assert has_wildcard("time.*.read")
    assert not has_wildcard("time.vda.read")


def test_matcher_is_segment_bounded():
    matcher = WildcardMatcher("throughput.#.read")
    assert matcher.matches("throughput.sda.read")
    assert matcher.matches("throughput.dm-0.read")
    assert not matcher.matches("throughput.sda.write")
    assert not matcher.matches("throughput.sda.readx")
    assert not matcher.matches("xthroughput.sda.read")
    assert not matcher.matches("throughput.a.b.read")
    assert not matcher.matches("throughput..read")


def test_matcher_dots_are_literal():
    matcher = WildcardMatcher("time.#.io")
    assert not matcher.matches("timeXsdaXio")


def test_wildcard_expansion():
    snap = _snap("throughput.sda.read", "throughput.sda.write", "throughput.sdb.read")
    graphs = [GraphSpec(name="throughput.#", metrics=(MetricSpec(name="read", diff=True),))]

    resolved = expand(graphs, snap)
    assert [r.key for r in resolved] == ["throughput.sda.read", "throughput.sdb.read"]
    assert all(r.name == r.key and r.group == "" for r in resolved)
    assert all(r.diff for r in resolved)


def test_wildcard_order_is_sorted():
    snap = _snap("time.vdb.io", "time.sda.io", "time.nvme0n1.io")
    graphs = [GraphSpec(name="time.#", metrics=(MetricSpec(name="io"),))]
    assert [r.key for r in expand(graphs, snap)] == [
        "time.nvme0n1.io", "time.sda.io", "time.vdb.io",
    ]


def test_plain_metric_present():
    snap = _snap("uptime")
    graphs = [GraphSpec(name="system", metrics=(MetricSpec(name="uptime", scale=2.0),))]

    resolved = expand(graphs, snap)
    assert len(resolved) == 1
    assert resolved[0].key == "uptime"
    assert resolved[0].group == "system"
    assert resolved[0].scale == 2.0
    assert resolved[0].diff is False


def test_plain_metric_absent_is_dropped():
    graphs = [GraphSpec(name="system", metrics=(MetricSpec(name="uptime"),))]
    assert expand(graphs, _snap("other")) == []


def test_disk_graphs_expand_against_parsed_counters():
    keys = []
    for dev in ("vda", "vda1"):
        keys += [f"throughput.{dev}.read", f"throughput.{dev}.write"]
        keys += [f"time.{dev}.{m}" for m in ("read", "write", "io", "ioWeighted")]

    resolved = SchemaExpander(disk_graphs("disk")).expand(_snap(*keys))
    assert len(resolved) == 12
    assert resolved[0].key == "throughput.vda.read"
    assert resolved[0].per_second is True
    assert resolved[-1].key == "time.vda1.ioWeighted"
    assert resolved[-1].per_second is False


def test_expander_reusable_across_snapshots():
    expander = SchemaExpander(disk_graphs("disk"))
    assert expander.expand(_snap("throughput.sda.read")) != []
    assert expander.expand(_snap()) == []


def test_title():
    assert title("disk.time.#") == "Disk Time"
    assert title("read_bytes") == "Read Bytes"
    assert title("ioWeighted") == "IoWeighted"
    assert title("*") == ""
    assert title("disk.time.#.x") == "Disk Time  X"
    assert title("_io__wait_") == "Io  Wait"


def test_definitions_prefixes_and_labels():
    graphs = [
        GraphSpec(name="time.#", label="", unit="float",
                  metrics=(MetricSpec(name="io_weighted"), MetricSpec(name="read", label="r", stacked=True))),
        GraphSpec(name="", unit="integer", metrics=()),
    ]
    defs = definitions(graphs, "disk")

    assert list(defs) == ["disk.time.#", "disk"]
    time_graph = defs["disk.time.#"]
    assert time_graph["label"] == "Disk Time"
    assert time_graph["unit"] == "float"
    assert time_graph["metrics"] == [
        {"name": "io_weighted", "label": "Io Weighted", "stacked": False},
        {"name": "read", "label": "r", "stacked": True},
    ]
    assert defs["disk"]["label"] == "Disk"
