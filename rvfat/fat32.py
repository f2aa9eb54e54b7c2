"""Reading and writing files on a FAT32 volume."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Any, Iterator

from rvfat.disk import SECTOR_SIZE, DiskImage

SEEK_SET = 0
SEEK_CUR = 1
SEEK_END = 2

DIR_ENTRY_SIZE = 32
ENTRY_PER_SECTOR = SECTOR_SIZE // DIR_ENTRY_SIZE
_END_OF_CHAIN = 0x0FFFFFF8
_CLUSTER_MASK = 0x0FFFFFFF

_BPB = struct.Struct("<3s8sHBHBHHBHHHIIIHHIHH12sBBBI11s8s420sH")
_DIR = struct.Struct("<8s3sBBBHHHHHHHI")


@dataclass
class BootSector:
    jmp_boot: bytes
    oem_name: bytes
    bytes_per_sec: int
    sec_per_clus: int
    rsvd_sec_cnt: int
    num_fats: int
    root_ent_cnt: int
    tot_sec16: int
    media: int
    fat_sz16: int
    sec_per_trk: int
    num_heads: int
    hidd_sec: int
    tot_sec32: int
    fat_sz32: int
    ext_flags: int
    fs_ver: int
    root_clus: int
    fs_info: int
    bk_boot_sec: int
    reserved: bytes
    drv_num: int
    reserved1: int
    boot_sig: int
    vol_id: int
    vol_lab: bytes
    fil_sys_type: bytes
    boot_code: bytes
    boot_sector_signature: int

    @classmethod
    def parse(cls, data: bytes) -> "BootSector":
        if len(data) < _BPB.size:
            raise ValueError("boot sector too short")
        return cls(*_BPB.unpack_from(data))


@dataclass
class DirEntry:
    name: bytes
    ext: bytes
    attr: int
    lcase: int
    ctime_cs: int
    ctime: int
    cdate: int
    adate: int
    starthi: int
    time: int
    date: int
    startlow: int
    size: int

    @classmethod
    def parse(cls, data: bytes) -> "DirEntry":
        if len(data) < _DIR.size:
            raise ValueError("directory entry too short")
        return cls(*_DIR.unpack_from(data))

    @property
    def cluster(self) -> int:
        return (self.starthi << 16) | self.startlow


@dataclass
class Fat32File:
    cluster: int
    dir_cluster: int
    dir_index: int


def is_fat32(device: DiskImage, lba: int) -> bool:
    """True if the sector at ``lba`` carries the boot-sector signature."""
    return BootSector.parse(device.read_sector(lba)).boot_sector_signature == 0xAA55


def next_slash(path: str) -> int:
    """Index of the first '/' in ``path``, or -1 if there is none."""
    return path.find("/")


def to_upper_case(text: str) -> str:
    """Upper-case ASCII letters only."""
    return "".join(chr(ord(c) - 32) if "a" <= c <= "z" else c for c in text)


class Fat32Volume:
    """A mounted FAT32 partition starting at ``lba``."""

    def __init__(self, device: DiskImage, lba: int, size: int = 0) -> None:
        self.device = device
        self.lba = lba
        self.size = size
        self.header = BootSector.parse(device.read_sector(lba))
        self.first_fat_sec = lba + self.header.rsvd_sec_cnt
        self.sec_per_cluster = self.header.sec_per_clus
        self.fat_sz = self.header.fat_sz32
        self.first_data_sec = self.first_fat_sec + self.header.num_fats * self.fat_sz

    @property
    def cluster_bytes(self) -> int:
        return self.sec_per_cluster * SECTOR_SIZE

    def cluster_to_sector(self, cluster: int) -> int:
        return (cluster - 2) * self.sec_per_cluster + self.first_data_sec

    def table_sector_of_cluster(self, cluster: int) -> int:
        return self.first_fat_sec + cluster // (SECTOR_SIZE // 4)

    def next_cluster(self, cluster: int) -> int:
        """Raw FAT entry for ``cluster``."""
        offset = cluster * 4
        sector = self.device.read_sector(self.first_fat_sec + offset // SECTOR_SIZE)
        return int.from_bytes(sector[offset % SECTOR_SIZE:offset % SECTOR_SIZE + 4], "little")

    def _chain(self, start: int) -> Iterator[int]:
        cluster = start
        seen = set()
        while 2 <= cluster < _END_OF_CHAIN and cluster not in seen:
            seen.add(cluster)
            yield cluster
            cluster = self.next_cluster(cluster) & _CLUSTER_MASK

    def _spans(self, start: int, pos: int, length: int) -> Iterator[tuple[int, int, int]]:
        chain = list(self._chain(start))
        while length > 0:
            index, offset = divmod(pos, self.cluster_bytes)
            if index >= len(chain):
                return
            sector = self.cluster_to_sector(chain[index]) + offset // SECTOR_SIZE
            sec_off = offset % SECTOR_SIZE
            n = min(length, SECTOR_SIZE - sec_off)
            yield sector, sec_off, n
            pos += n
            length -= n

    def _capacity(self, start: int) -> int:
        return sum(1 for _ in self._chain(start)) * self.cluster_bytes

    def _entry_location(self, f: Fat32File) -> tuple[int, int]:
        for sector, offset, _ in self._spans(f.dir_cluster, f.dir_index * DIR_ENTRY_SIZE, DIR_ENTRY_SIZE):
            return sector, offset
        raise OSError("directory entry lies outside its directory")

    def _entry(self, f: Fat32File) -> DirEntry:
        sector, offset = self._entry_location(f)
        return DirEntry.parse(self.device.read_sector(sector)[offset:offset + DIR_ENTRY_SIZE])

    def file_size(self, f: Fat32File) -> int:
        return self._entry(f).size

    def open_file(self, path: str) -> Fat32File:
        """Find the root-directory entry whose 8-character name matches ``path``."""
        wanted = to_upper_case(path[7:15].ljust(8))
        root = self.header.root_clus or 2
        count = self._capacity(root) // DIR_ENTRY_SIZE
        for index in range(count):
            sector, offset, _ = next(self._spans(root, index * DIR_ENTRY_SIZE, DIR_ENTRY_SIZE))
            raw = self.device.read_sector(sector)[offset:offset + DIR_ENTRY_SIZE]
            entry = DirEntry.parse(raw)
            if to_upper_case(entry.name.decode("latin-1")) == wanted:
                return Fat32File(entry.cluster, root, index)
        raise FileNotFoundError(path)

    def lseek(self, file: Any, offset: int, whence: int) -> int:
        """Move ``file.cfo`` and return the new position."""
        if whence == SEEK_SET:
            position = offset
        elif whence == SEEK_CUR:
            position = file.cfo + offset
        elif whence == SEEK_END:
            position = self.file_size(file.fat32_file) + offset
        else:
            raise ValueError(f"unsupported whence: {whence}")
        if position < 0:
            raise ValueError("negative file position")
        file.cfo = position
        return position

    def read(self, file: Any, size: int) -> bytes:
        """Read up to ``size`` bytes at ``file.cfo`` and advance it."""
        f = file.fat32_file
        remaining = max(0, min(size, self.file_size(f) - file.cfo))
        chunks = []
        for sector, offset, n in self._spans(f.cluster, file.cfo, remaining):
            chunks.append(self.device.read_sector(sector)[offset:offset + n])
        data = b"".join(chunks)
        file.cfo += len(data)
        return data

    def write(self, file: Any, data: bytes) -> int:
        """Write ``data`` at ``file.cfo`` within the allocated clusters."""
        f = file.fat32_file
        written = 0
        for sector, offset, n in self._spans(f.cluster, file.cfo, len(data)):
            buf = bytearray(self.device.read_sector(sector))
            buf[offset:offset + n] = data[written:written + n]
            self.device.write_sector(sector, bytes(buf))
            written += n
        file.cfo += written
        sector, offset = self._entry_location(f)
        buf = bytearray(self.device.read_sector(sector))
        size = int.from_bytes(buf[offset + 28:offset + 32], "little")
        if file.cfo > size:
            buf[offset + 28:offset + 32] = file.cfo.to_bytes(4, "little")
            self.device.write_sector(sector, bytes(buf))
        return written