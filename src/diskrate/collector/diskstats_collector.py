"""
Collector for local block devices. Reads /sys/block to decide which
devices are physical, then parses /proc/diskstats.
"""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable, Dict

from diskrate.collector.base import CounterSource
from diskrate.collector.block_devices import list_block_devices
from diskrate.collector.diskstats_parser import parse_diskstats
from diskrate.config import PluginConfig
from diskrate.errors import CollectionError, ParseError
from diskrate.metrics import CounterSnapshot

log = logging.getLogger(__name__)


class DiskstatsCollector(CounterSource):

    def __init__(
        self,
        include_virtual_disk: bool = False,
        sys_block_path: Path = Path("/sys/block"),
        diskstats_path: Path = Path("/proc/diskstats"),
        clock: Callable[[], float] = time.time,
    ):
        self._include_virtual_disk = include_virtual_disk
        self._sys_block_path = Path(sys_block_path)
        self._diskstats_path = Path(diskstats_path)
        self._clock = clock

    @classmethod
    def from_config(cls, config: PluginConfig, clock: Callable[[], float] = time.time):
        return cls(
            include_virtual_disk=config.include_virtual_disk,
            sys_block_path=config.sys_block_path,
            diskstats_path=config.diskstats_path,
            clock=clock,
        )

    def device_filter(self) -> Dict[str, bool]:
        if self._include_virtual_disk:
            return {}
        return list_block_devices(self._sys_block_path)

    def collect(self) -> CounterSnapshot:
        """Read the device list and counter table. Raises ParseError or CollectionError."""
        captured_at = int(self._clock())
        devices = self.device_filter()

        try:
            with open(self._diskstats_path, "r", encoding="utf-8") as f:
                values = parse_diskstats(devices, f)
        except UnicodeDecodeError as e:
            raise ParseError(
                f"{self._diskstats_path} is not valid UTF-8: {e}", field="line"
            ) from e
        except OSError as e:
            raise CollectionError(f"cannot read {self._diskstats_path}: {e}") from e

        log.debug("Parsed %d counters from %s", len(values), self._diskstats_path)
        return CounterSnapshot(values=values, captured_at=captured_at)

    def name(self) -> str:
        return f"diskstats ({self._diskstats_path})"
