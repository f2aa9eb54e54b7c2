"""Master boot record partition table."""

from __future__ import annotations

import struct
from dataclasses import dataclass

from rvfat.disk import DiskImage
from rvfat.fat32 import Fat32Volume, is_fat32
from rvfat.fmt import printk

MBR_MAX_PARTITIONS = 4
PARTITION_TABLE_OFFSET = 446
LINUX_PARTITION_TYPE = 0x83

_ENTRY = struct.Struct("<B3sB3sII")


@dataclass
class PartitionEntry:
    status: int
    chs_first_sector: bytes
    type: int
    chs_last_sector: bytes
    lba_first_sector: int
    sector_count: int

    @classmethod
    def parse(cls, data: bytes) -> "PartitionEntry":
        if len(data) < _ENTRY.size:
            raise ValueError("partition entry too short")
        return cls(*_ENTRY.unpack_from(data))


def parse_partition_table(sector: bytes) -> list[PartitionEntry]:
    """The four primary partition entries of an MBR sector."""
    return [
        PartitionEntry.parse(sector[PARTITION_TABLE_OFFSET + i * _ENTRY.size:])
        for i in range(MBR_MAX_PARTITIONS)
    ]


def partition_init(device: DiskImage, number: int, start_lba: int, sector_count: int) -> Fat32Volume | None:
    """Mount the partition if it holds FAT32."""
    if not is_fat32(device, start_lba):
        return None
    volume = Fat32Volume(device, start_lba, sector_count)
    printk("...fat32 partition #%d init done!\n", number)
    return volume


def mbr_init(device: DiskImage) -> dict[int, Fat32Volume]:
    """Mount every type-0x83 FAT32 partition, keyed by partition number."""
    volumes = {}
    for number, entry in enumerate(parse_partition_table(device.read_sector(0)), start=1):
        if entry.type == LINUX_PARTITION_TYPE:
            volume = partition_init(device, number, entry.lba_first_sector, entry.sector_count)
            if volume is not None:
                volumes[number] = volume
    return volumes