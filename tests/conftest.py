"""Shared fixtures: the diskstats tables used across the test modules."""

import pytest

from diskrate.collector.diskstats_parser import parse_diskstats
from diskrate.metrics import CounterSnapshot

_FOUR_DEVICES = """\
   7       0 loop0 12330 0 26704 960 0 0 0 0 0 68 720
   7       1 loop1 278 0 2590 48 0 0 0 0 0 8 28
 253       0 vda 568978 150 13872551 9214932 702789 28973 27693174 39969124 0 483933 49191357
 253       1 vda1 568892 150 13868407 9214909 702123 28973 27693166 39969007 0 483777 49187590
"""

_VDB_LINE = (
    " 253      16 vdb 1357367 2080 34805026 10439061 1561480 21147 57531600 "
    "35716520 0 464104 46206065\n"
)


@pytest.fixture
def diskstats_four():
    return _FOUR_DEVICES


@pytest.fixture
def diskstats_five():
    return _FOUR_DEVICES + _VDB_LINE


@pytest.fixture
def physical_only():
    return {
        "loop0": False,
        "loop1": False,
        "vda": True,
        "vda1": True,
    }


@pytest.fixture
def table_snapshot(diskstats_four, physical_only):
    """Factory: the four-device table, parsed with loop devices filtered out."""

    def _make(captured_at: int) -> CounterSnapshot:
        values = parse_diskstats(physical_only, diskstats_four.splitlines())
        return CounterSnapshot(values=values, captured_at=captured_at)

    return _make


@pytest.fixture
def diskstats_file(tmp_path, diskstats_four):
    path = tmp_path / "diskstats"
    path.write_text(diskstats_four)
    return path
