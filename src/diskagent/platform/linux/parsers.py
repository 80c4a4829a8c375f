"""
Linux output parsers.

Parser for the machine readable listing printed by
``parted -m <device> unit B print``.
"""

from __future__ import annotations

import re

from diskagent.core.errors import LayoutParseError
from diskagent.core.models import DeviceDescriptor, DiskLayout, ExistingPartition

BYTE_UNIT_MARKER = "BYT"
BYTE_SUFFIX = "B"

_DIGITS_RE = re.compile(r"[0-9]+")


def parse_unsigned(value: str, field_name: str) -> int:
    """Parse a plain non-negative integer; anything else is rejected."""
    if not _DIGITS_RE.fullmatch(value):
        raise LayoutParseError(f"Invalid {field_name} '{value}': expected an integer")
    return int(value)


def parse_bytes(value: str, field_name: str) -> int:
    """
    Parse a byte quantity such as ``33B``.

    Example: ``parse_bytes("4096B", "start")`` returns 4096, while ``0.2B``,
    ``-1B`` and ``12KB`` all raise LayoutParseError.
    """
    number = value.removesuffix(BYTE_SUFFIX)
    if number == value or not _DIGITS_RE.fullmatch(number):
        raise LayoutParseError(f"Invalid {field_name} '{value}': expected integer bytes")
    return int(number)


def _fields(line: str) -> list[str]:
    return line.removesuffix(";").split(":")


def parse_device_line(line: str) -> DeviceDescriptor:
    """
    Parse the device summary line.

    Example input:
    /dev/sda:128B:virtblk:512:512:msdos:Virtio Block Device;
    """
    parts = line.removesuffix(";").split(":", 6)
    if len(parts) < 7:
        raise LayoutParseError(f"Malformed device line: '{line}'")

    path, size, transport, logical_sector, physical_sector, table_type, model = parts
    if not path:
        raise LayoutParseError(f"Malformed device line: '{line}'")

    return DeviceDescriptor(
        path=path,
        size_bytes=parse_bytes(size, "device size"),
        transport=transport,
        logical_sector_size=parse_unsigned(logical_sector, "logical sector size"),
        physical_sector_size=parse_unsigned(physical_sector, "physical sector size"),
        table_type=table_type,
        model=model,
    )


def parse_partition_line(line: str) -> ExistingPartition:
    """
    Parse a single partition line.

    Example input:
    1:1048576B:537919487B:536870912B:ext4::boot;
    """
    parts = _fields(line)
    if len(parts) < 5:
        raise LayoutParseError(f"Malformed partition line: '{line}'")

    number = parse_unsigned(parts[0], "partition number")
    if number == 0:
        raise LayoutParseError(f"Invalid partition number in line: '{line}'")

    return ExistingPartition(
        number=number,
        start_byte=parse_bytes(parts[1], "start"),
        end_byte=parse_bytes(parts[2], "end"),
        size_bytes=parse_bytes(parts[3], "size"),
        filesystem=parts[4],
    )


def parse_parted_output(output: str) -> DiskLayout:
    """
    Parse ``parted -m <device> unit B print`` output.

    Example input:
    BYT;
    /dev/sda:128B:virtblk:512:512:msdos:Virtio Block Device;
    1:1B:33B:32B:ext4::;

    A listing with no partition lines is valid and yields an empty
    partition list.
    """
    lines = [line.strip() for line in output.strip().split("\n") if line.strip()]
    if len(lines) < 2:
        raise LayoutParseError(
            f"Expected at least 2 lines of parted output, got {len(lines)}"
        )

    unit = lines[0].removesuffix(";")
    if unit != BYTE_UNIT_MARKER:
        raise LayoutParseError(f"Unexpected unit marker '{lines[0]}'")

    device = parse_device_line(lines[1])

    partitions: list[ExistingPartition] = []
    for line in lines[2:]:
        partition = parse_partition_line(line)
        if partitions and partition.number <= partitions[-1].number:
            raise LayoutParseError(
                f"Partition numbers out of order: {partition.number} "
                f"after {partitions[-1].number}"
            )
        partitions.append(partition)

    return DiskLayout(device=device, partitions=partitions)
