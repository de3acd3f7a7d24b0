"""One-shot terminal view of the current raw counters, one row per device."""

from __future__ import annotations

from rich.console import Console
from rich.table import Table

from diskrate.collector.diskstats_parser import device_names
from diskrate.metrics import CounterSnapshot

# (counter suffix, column header)
_COLUMNS = [
    ("throughput.{}.read", "Read (bytes)"),
    ("throughput.{}.write", "Written (bytes)"),
    ("time.{}.read", "Read (ms)"),
    ("time.{}.write", "Write (ms)"),
    ("time.{}.io", "I/O (ms)"),
    ("time.{}.ioWeighted", "Weighted I/O (ms)"),
]


def _fmt(value) -> str:
    if value is None:
        return "[dim]-[/dim]"
    return f"{value:,.0f}"


def build_counter_table(snapshot: CounterSnapshot, title: str = "") -> Table:
    table = Table(title=title or None, show_header=True, header_style="bold")
    table.add_column("Device", style="cyan", no_wrap=True)
    for _, header in _COLUMNS:
        table.add_column(header, justify="right")

    for device in device_names(snapshot.values):
        table.add_row(device, *[_fmt(snapshot.get(pattern.format(device))) for pattern, _ in _COLUMNS])
    return table


def show_counters(snapshot: CounterSnapshot, source_name: str, console: Console = None):
    console = console or Console()
    if not len(snapshot):
        console.print("[dim]No block devices found.[/dim]")
        return
    console.print(build_counter_table(snapshot, title=source_name))
