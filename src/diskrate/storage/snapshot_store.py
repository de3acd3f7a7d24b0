"""
JSON file storage for the previous run's counters. One flat object per
plugin instance; the capture time rides along under a reserved key so
the counters and their timestamp can never drift apart.
"""

from __future__ import annotations

import json
import logging
import math
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from diskrate.errors import StoreError
from diskrate.metrics import CounterSnapshot

log = logging.getLogger(__name__)

LAST_TIME_KEY = "_lastTime"


class SnapshotStore:

    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[CounterSnapshot]:
        """Return the last saved snapshot, or None on the first run.

        Raises StoreError when the file exists but can't be read or decoded.
        """
        try:
            with open(self._path, "r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            log.debug("No previous snapshot at %s", self._path)
            return None
        except (OSError, ValueError) as e:
            raise StoreError(f"cannot load snapshot {self._path}: {e}") from e

        if not isinstance(raw, dict):
            raise StoreError(f"snapshot {self._path} is not a JSON object")

        values: Dict[str, float] = {}
        for key, value in raw.items():
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise StoreError(f"snapshot {self._path}: non-numeric value for {key!r}")
            values[key] = float(value)

        last_time = values.pop(LAST_TIME_KEY, None)
        if last_time is None or not math.isfinite(last_time):
            raise StoreError(f"snapshot {self._path} has no valid {LAST_TIME_KEY}")

        return CounterSnapshot(values=values, captured_at=int(last_time))

    def save(self, snapshot: CounterSnapshot):
        """Replace the stored snapshot. The rename is atomic, so a reader
        sees either the old file or the new one, never a partial write."""
        if LAST_TIME_KEY in snapshot.values:
            raise StoreError(f"counter name {LAST_TIME_KEY!r} is reserved")

        payload = dict(snapshot.values)
        payload[LAST_TIME_KEY] = snapshot.captured_at

        tmp_path = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", delete=False, dir=str(self._path.parent),
                prefix=f".{self._path.name}.",
            ) as tmp:
                json.dump(payload, tmp)
                tmp_path = Path(tmp.name)
            os.replace(tmp_path, self._path)
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(f"cannot save snapshot {self._path}: {e}") from e
        finally:
            if tmp_path is not None and tmp_path.exists():
                try:
                    tmp_path.unlink()
                except OSError:
                    pass

        log.debug("Saved %d counters to %s", len(snapshot), self._path)
