"""
diskagent CLI Main Entry Point.

Command-line access to partition reconciliation and capacity reporting.
"""

from __future__ import annotations

import json
import re
import sys
from pathlib import Path
from typing import NoReturn

import click
import humanize
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from diskagent import __version__
from diskagent.core.config import DiskAgentConfig, load_config
from diskagent.core.errors import DiskAgentError
from diskagent.core.session import Session

console = Console()


def get_session(ctx: click.Context) -> Session:
    """Get or create session from context."""
    if "session" not in ctx.obj:
        config = ctx.obj.get("config") or load_config()
        session = Session(config=config)
        ctx.call_on_close(session.close)
        ctx.obj["session"] = session
    return ctx.obj["session"]


def parse_size(size_str: str) -> int | None:
    """Parse size string like '10G' to bytes. Only whole numbers are accepted."""
    match = re.match(r"^(\d+)\s*([KMGT]?)(?:I?B)?$", size_str.strip().upper())
    if not match:
        return None

    multipliers = {
        "": 1,
        "K": 1024,
        "M": 1024**2,
        "G": 1024**3,
        "T": 1024**4,
    }

    return int(match.group(1)) * multipliers[match.group(2)]


def fail(message: str) -> NoReturn:
    console.print(f"[red]✗ {message}[/red]")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="diskagent")
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.option("--json", "json_output", is_flag=True, help="Output in JSON format")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.pass_context
def cli(ctx: click.Context, config: Path | None, json_output: bool, quiet: bool) -> None:
    """
    diskagent - Partition reconciliation for node agents.

    Converges a disk's partitions after partition 1 onto a list of sizes.
    """
    ctx.ensure_object(dict)

    if config:
        ctx.obj["config"] = DiskAgentConfig.load(config)
    elif "config" not in ctx.obj:
        ctx.obj["config"] = load_config()

    ctx.obj["json_output"] = json_output
    ctx.obj["quiet"] = quiet


@cli.command("show")
@click.argument("device")
@click.pass_context
def show_layout(ctx: click.Context, device: str) -> None:
    """Show the current partition table of a disk."""
    session = get_session(ctx)

    try:
        layout = session.layout(device)
    except DiskAgentError as e:
        fail(str(e))

    if ctx.obj.get("json_output", False):
        click.echo(json.dumps(layout.to_dict(), indent=2))
        return

    table = Table(title=f"Partitions on {layout.device.path}")
    table.add_column("#", style="dim")
    table.add_column("Start", style="cyan")
    table.add_column("End", style="cyan")
    table.add_column("Size", style="green")
    table.add_column("FS", style="yellow")

    for part in layout.partitions:
        table.add_row(
            str(part.number),
            str(part.start_byte),
            str(part.end_byte),
            humanize.naturalsize(part.size_bytes, binary=True),
            part.filesystem,
        )

    console.print(
        f"[cyan]{layout.device.path}[/cyan] {layout.device.model} "
        f"({humanize.naturalsize(layout.device.size_bytes, binary=True)}, "
        f"{layout.device.table_type or 'no table'})"
    )
    console.print(table)


@cli.command("size")
@click.argument("device")
@click.pass_context
def device_size(ctx: click.Context, device: str) -> None:
    """Show the capacity available after partition 1."""
    session = get_session(ctx)

    try:
        size_bytes = session.device_size(device)
    except DiskAgentError as e:
        fail(str(e))

    if ctx.obj.get("json_output", False):
        click.echo(json.dumps({"device": device, "size_bytes": size_bytes}))
    elif ctx.obj.get("quiet", False):
        click.echo(str(size_bytes))
    else:
        console.print(
            f"{device}: {size_bytes} bytes "
            f"({humanize.naturalsize(size_bytes, binary=True)}) available"
        )


@cli.command("partition")
@click.argument("device")
@click.argument("sizes", nargs=-1, required=True)
@click.option("--delta", type=int, help="Size tolerance in bytes (overrides config)")
@click.option("--dry-run", is_flag=True, help="Show what would be done")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def partition_disk(
    ctx: click.Context,
    device: str,
    sizes: tuple[str, ...],
    delta: int | None,
    dry_run: bool,
    yes: bool,
) -> None:
    """Converge DEVICE so partitions after partition 1 have SIZES (e.g. 512M 10G)."""
    config: DiskAgentConfig = ctx.obj["config"]
    if delta is not None:
        if delta < 0:
            fail(f"Invalid delta: {delta}")
        config.partitioner.delta_bytes = delta

    size_bytes: list[int] = []
    for size in sizes:
        parsed = parse_size(size)
        if parsed is None:
            fail(f"Invalid size format: {size}")
        size_bytes.append(parsed)

    session = get_session(ctx)
    json_output = ctx.obj.get("json_output", False)

    try:
        plan = session.plan(device, size_bytes)
    except DiskAgentError as e:
        fail(str(e))

    if json_output:
        click.echo(json.dumps(plan.to_dict(), indent=2))
    elif not ctx.obj.get("quiet", False):
        title = "Partition Plan (DRY RUN)" if dry_run else "Partition Plan"
        console.print(Panel(plan.get_plan_text(device), title=title))

    if dry_run or plan.is_converged:
        return

    if config.safety.require_confirmation and not yes:
        console.print(f"[red]⚠️  This will modify the partition table on {device}[/red]")
        if not click.confirm("Proceed?", default=False):
            fail("Confirmation failed - operation cancelled")

    try:
        with console.status("Partitioning..."):
            session.partition(device, size_bytes)
    except DiskAgentError as e:
        fail(str(e))

    if not json_output:
        console.print(f"[green]✓ Partitioned {device}[/green]")


def main() -> None:
    """Main entry point."""
    try:
        cli(obj={})
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
