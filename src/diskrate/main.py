"""
diskrate entry point.

Usage:
    diskrate                              Print metric lines (run from the agent)
    diskrate --include-virtual-disk       Also report loop/ram/dm devices
    MACKEREL_AGENT_PLUGIN_META=1 diskrate Print graph definitions
    diskrate show                         One-shot table of raw counters
"""

from __future__ import annotations

import logging

import click

from diskrate import __version__
from diskrate.collector.diskstats_collector import DiskstatsCollector
from diskrate.config import PluginConfig, definitions_requested
from diskrate.engine.plugin import DiskPlugin
from diskrate.errors import DiskRateError
from diskrate.storage.snapshot_store import SnapshotStore


log = logging.getLogger("diskrate")


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="diskrate")
@click.option("--include-virtual-disk", is_flag=True, default=False, help="Include virtual disk")
@click.option("--metric-key-prefix", default=None, help="Metric key prefix (default: disk)")
@click.option("--tempfile", "tempfile_name", default=None, help="Temp file name")
@click.option("--definitions", is_flag=True, default=False,
              help="Print graph definitions instead of values")
@click.option("--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.option("--diskstats-path", default="/proc/diskstats", hidden=True)
@click.option("--sys-block-path", default="/sys/block", hidden=True)
@click.pass_context
def cli(ctx, include_virtual_disk: bool, metric_key_prefix: str, tempfile_name: str,
        definitions: bool, verbose: bool, diskstats_path: str, sys_block_path: str):
    """diskrate - block device throughput and I/O time collector."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    try:
        config = PluginConfig.resolve(
            include_virtual_disk=include_virtual_disk,
            prefix=metric_key_prefix,
            tempfile_name=tempfile_name,
            diskstats_path=diskstats_path,
            sys_block_path=sys_block_path,
        )
    except DiskRateError as e:
        log.error("Config: %s", e)
        raise SystemExit(1)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is not None:
        return

    plugin = DiskPlugin(
        source=DiskstatsCollector.from_config(config),
        store=SnapshotStore(config.snapshot_path),
        prefix=config.prefix,
    )

    if definitions or definitions_requested():
        plugin.output_definitions()
        return

    try:
        plugin.output_values()
    except DiskRateError as e:
        log.error("OutputValues: %s", e)
        raise SystemExit(1)


@cli.command()
@click.pass_context
def show(ctx):
    """Read the counters once and print them as a table. Saves nothing."""
    from diskrate.output.terminal import show_counters

    config = ctx.obj["config"]
    collector = DiskstatsCollector.from_config(config)

    try:
        snapshot = collector.collect()
    except DiskRateError as e:
        click.echo(f"Failed to read counters: {e}", err=True)
        raise SystemExit(1)

    show_counters(snapshot, collector.name())


if __name__ == "__main__":
    cli()
