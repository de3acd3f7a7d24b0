"""
Physical vs virtual block device enumeration from /sys/block.

Entries under /sys/block are symlinks into the device tree. Anything
that resolves under devices/virtual/block (loop, ram, dm-, zram...) is
virtual. Non-symlink entries are treated as virtual too.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Dict

from diskrate.errors import CollectionError

log = logging.getLogger(__name__)

_VIRTUAL_LINK_PREFIX = "../devices/virtual/block/"


def list_block_devices(sys_block_path: Path) -> Dict[str, bool]:
    """Returns {device name: is_physical} for every entry in sys_block_path."""
    try:
        entries = sorted(os.scandir(sys_block_path), key=lambda e: e.name)
    except OSError as e:
        raise CollectionError(f"cannot read from directory {sys_block_path}: {e}") from e

    devices: Dict[str, bool] = {}
    for entry in entries:
        devices[entry.name] = False

        if not entry.is_symlink():
            continue

        try:
            link = os.readlink(entry.path)
        except OSError as e:
            raise CollectionError(f"cannot read link {entry.path}: {e}") from e

        if link.startswith(_VIRTUAL_LINK_PREFIX):
            continue
        devices[entry.name] = True

    log.debug("Block devices: %s", devices)
    return devices
