"""A block device backed by an in-memory disk image, addressed in 512-byte sectors."""

from __future__ import annotations

from pathlib import Path

SECTOR_SIZE = 512

DEVICE_ACKNOWLEDGE = 1
DEVICE_DRIVER = 2
DEVICE_DRIVER_OK = 4
DEVICE_FEATURES_OK = 8
DEVICE_NEEDS_RESET = 64
DEVICE_FAILED = 128

ID_VIRTIO_BLK = 2

BLK_T_IN = 0
BLK_T_OUT = 1


class DiskImage:
    """Sector-addressed storage over a mutable byte buffer."""

    def __init__(self, data: bytes | bytearray | int = 0) -> None:
        if isinstance(data, int):
            self.data = bytearray(data * SECTOR_SIZE)
        else:
            self.data = bytearray(data)
        if len(self.data) % SECTOR_SIZE:
            raise ValueError("image size is not a whole number of sectors")

    @classmethod
    def from_file(cls, path: str | Path) -> "DiskImage":
        """Load an image from a file."""
        return cls(Path(path).read_bytes())

    @property
    def sector_count(self) -> int:
        return len(self.data) // SECTOR_SIZE

    def _check(self, sector: int) -> int:
        if not 0 <= sector < self.sector_count:
            raise IndexError(f"sector {sector} out of range")
        return sector * SECTOR_SIZE

    def read_sector(self, sector: int) -> bytes:
        """Return the 512 bytes of ``sector``."""
        start = self._check(sector)
        return bytes(self.data[start:start + SECTOR_SIZE])

    def write_sector(self, sector: int, data: bytes) -> None:
        """Replace ``sector`` with exactly 512 bytes."""
        if len(data) != SECTOR_SIZE:
            raise ValueError("sector data must be 512 bytes")
        start = self._check(sector)
        self.data[start:start + SECTOR_SIZE] = data

    def has_boot_signature(self) -> bool:
        """True if sector 0 ends with the 0x55 0xAA boot signature."""
        if not self.sector_count:
            return False
        return self.read_sector(0)[510:512] == b"\x55\xaa"