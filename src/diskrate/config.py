"""
Runtime configuration. Every default is resolved once, in
PluginConfig.resolve(), so nothing downstream has to guess.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from diskrate.errors import StoreError

log = logging.getLogger(__name__)

DEFAULT_PREFIX = "disk"
WORKDIR_ENV = "MACKEREL_PLUGIN_WORKDIR"
META_ENV = "MACKEREL_AGENT_PLUGIN_META"

SYS_BLOCK_PATH = "/sys/block"
DISKSTATS_PATH = "/proc/diskstats"


def plugin_work_dir() -> Path:
    """Directory for plugin state: $MACKEREL_PLUGIN_WORKDIR or the system temp dir."""
    configured = os.environ.get(WORKDIR_ENV)
    if configured:
        path = Path(configured)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreError(f"cannot create work dir {path}: {e}") from e
        return path
    return Path(tempfile.gettempdir())


def definitions_requested() -> bool:
    return os.environ.get(META_ENV, "") != ""


@dataclass(frozen=True)
class PluginConfig:
    include_virtual_disk: bool
    prefix: str
    snapshot_path: Path
    sys_block_path: Path = Path(SYS_BLOCK_PATH)
    diskstats_path: Path = Path(DISKSTATS_PATH)

    @classmethod
    def resolve(
        cls,
        include_virtual_disk: bool = False,
        prefix: Optional[str] = None,
        tempfile_name: Optional[str] = None,
        work_dir: Optional[Path] = None,
        sys_block_path: str = SYS_BLOCK_PATH,
        diskstats_path: str = DISKSTATS_PATH,
    ) -> "PluginConfig":
        prefix = prefix or DEFAULT_PREFIX
        base = Path(work_dir) if work_dir is not None else plugin_work_dir()
        name = tempfile_name or f"mackerel-plugin-{prefix}"
        config = cls(
            include_virtual_disk=include_virtual_disk,
            prefix=prefix,
            snapshot_path=base / name,
            sys_block_path=Path(sys_block_path),
            diskstats_path=Path(diskstats_path),
        )
        log.debug("Resolved config: %s", config)
        return config
