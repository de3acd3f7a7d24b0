"""Tests for output formatting."""

import io
import json

import pytest

from diskrate.engine.schema import disk_graphs
from diskrate.errors import InvalidValue
from diskrate.output.formatter import (
    DEFINITIONS_MARKER,
    format_line,
    format_value,
    metric_key,
    write_definitions,
)


def test_integral_values_render_as_int():
    assert format_value(42.0) == "42"
    assert format_value(0.0) == "0"
    assert format_value(34805026 * 512.0) == "17820173312"


def test_fractional_values_keep_precision():
    assert format_value(2.5) == "2.5"
    assert format_value(1 / 3) == repr(1 / 3)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_invalid_values_raise(value):
    with pytest.raises(InvalidValue):
        format_value(value)


def test_metric_key():
    assert metric_key("disk", "", "throughput.vda.read") == "disk.throughput.vda.read"
    assert metric_key("disk", "system", "uptime") == "disk.system.uptime"


def test_format_line():
    assert format_line("disk.time.vda.io", 12.0, 1700000000) == "disk.time.vda.io\t12\t1700000000"


def test_definitions_document():
    out = io.StringIO()
    write_definitions(out, disk_graphs("disk"), "disk")

    marker, body = out.getvalue().splitlines()
    assert marker == DEFINITIONS_MARKER
    graphs = json.loads(body)["graphs"]
    assert set(graphs) == {"disk.throughput.#", "disk.time.#"}
    assert graphs["disk.throughput.#"]["unit"] == "bytes/sec"
    assert graphs["disk.time.#"]["label"] == "Disk Time (ms)"
    assert graphs["disk.time.#"]["metrics"][3] == {
        "name": "ioWeighted", "label": "io weighted", "stacked": False,
    }


def test_definitions_use_custom_prefix():
    out = io.StringIO()
    write_definitions(out, disk_graphs("storage"), "storage")
    graphs = json.loads(out.getvalue().splitlines()[1])["graphs"]
    assert graphs["storage.throughput.#"]["label"] == "Storage Throughput"
