"""
Output formatting: `key<TAB>value<TAB>unix_seconds` metric lines, and the
JSON graph definitions document.
"""

from __future__ import annotations

import json
import math
from typing import Sequence, TextIO

from diskrate.engine.schema import definitions
from diskrate.errors import InvalidValue
from diskrate.metrics import GraphSpec

DEFINITIONS_MARKER = "# mackerel-agent-plugin"


def format_value(value: float) -> str:
    """Integral values render as integers, anything else at full precision."""
    if math.isnan(value) or math.isinf(value):
        raise InvalidValue(f"invalid value: {value}")
    if value == int(value):
        return str(int(value))
    return repr(float(value))


def metric_key(prefix: str, group: str, name: str) -> str:
    parts = [prefix]
    if group:
        parts.append(group)
    parts.append(name)
    return ".".join(parts)


def format_line(key: str, value: float, timestamp: int) -> str:
    return f"{key}\t{format_value(value)}\t{timestamp}"


def definitions_document(graphs: Sequence[GraphSpec], prefix: str) -> str:
    return json.dumps({"graphs": definitions(graphs, prefix)})


def write_definitions(out: TextIO, graphs: Sequence[GraphSpec], prefix: str):
    out.write(DEFINITIONS_MARKER + "\n")
    out.write(definitions_document(graphs, prefix) + "\n")
