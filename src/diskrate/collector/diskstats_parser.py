"""
Parser for the /proc/diskstats counter table. No external deps.

Each line looks like:
    major minor name rd_ios rd_merges rd_sectors rd_ticks
                     wr_ios wr_merges wr_sectors wr_ticks
                     ios_in_progress io_ticks weighted_ticks
"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Mapping, Optional

from diskrate.errors import ParseError

# 1 sector is fixed to 512 bytes on Linux, regardless of the device's
# physical sector size. See Documentation/block/stat.txt.
SECTOR_SIZE = 512

_DEVICE_FIELD = 2

# (field index, description used in errors)
_SECTORS_READ = (5, "sectors read")
_TIME_READ = (6, "time spent read")
_SECTORS_WRITTEN = (9, "sectors write")
_TIME_WRITE = (10, "time spent write")
_TIME_IO = (12, "time spent doing I/Os")
_TIME_IO_WEIGHTED = (13, "weighted time spent doing I/Os")

_MIN_FIELDS = _TIME_IO_WEIGHTED[0] + 1

_UNSAFE_CHARS_RE = re.compile(r"[^0-9A-Za-z_-]")

# Plain ASCII decimal only: no sign, exponent, underscores or unicode digits.
_COUNTER_RE = re.compile(r"[0-9]+(\.[0-9]+)?")


def sanitize_device_name(name: str) -> str:
    return _UNSAFE_CHARS_RE.sub("", name)


def _parse_counter(fields: List[str], spec, device: str) -> float:
    index, description = spec
    if _COUNTER_RE.fullmatch(fields[index]) is None:
        raise ParseError(
            f"failed to parse {description}: {device} (got {fields[index]!r})",
            field=description,
            device=device,
        )
    return float(fields[index])


def parse_diskstats(
    device_filter: Mapping[str, bool],
    lines: Iterable[str],
) -> Dict[str, float]:
    """Turn diskstats lines into a flat `name -> counter` dict.

    Devices mapped to False in device_filter are skipped. Devices not in
    the filter at all are kept, so an empty filter means "everything".
    Raises ParseError on the first malformed line.
    """
    stats: Dict[str, float] = {}

    for line_no, line in enumerate(lines, start=1):
        fields = line.split()
        if not fields:
            continue

        if len(fields) < _MIN_FIELDS:
            device = fields[_DEVICE_FIELD] if len(fields) > _DEVICE_FIELD else ""
            raise ParseError(
                f"line {line_no}: expected at least {_MIN_FIELDS} fields, got {len(fields)}",
                field="line",
                device=device,
            )

        raw_device = fields[_DEVICE_FIELD]
        included: Optional[bool] = device_filter.get(raw_device)
        if included is False:
            continue

        name = sanitize_device_name(raw_device)
        sectors_read = _parse_counter(fields, _SECTORS_READ, name)
        read_time = _parse_counter(fields, _TIME_READ, name)
        sectors_written = _parse_counter(fields, _SECTORS_WRITTEN, name)
        write_time = _parse_counter(fields, _TIME_WRITE, name)
        io_time = _parse_counter(fields, _TIME_IO, name)
        weighted_time = _parse_counter(fields, _TIME_IO_WEIGHTED, name)

        stats[f"throughput.{name}.read"] = sectors_read * SECTOR_SIZE
        stats[f"throughput.{name}.write"] = sectors_written * SECTOR_SIZE
        stats[f"time.{name}.read"] = read_time
        stats[f"time.{name}.write"] = write_time
        stats[f"time.{name}.io"] = io_time
        stats[f"time.{name}.ioWeighted"] = weighted_time

    return stats


def device_names(stats: Mapping[str, float]) -> List[str]:
    """Sorted device segments present in a parsed counter dict."""
    return sorted({key.split(".")[1] for key in stats if key.count(".") >= 2})
