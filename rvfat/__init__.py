"""FAT32 disk-image access, MBR parsing, printk-style formatting, a random generator and a minimal shell."""

__version__ = "0.1.0"
__all__ = ["disk", "fat32", "fmt", "fs", "mbr", "rand", "shell", "vfs"]