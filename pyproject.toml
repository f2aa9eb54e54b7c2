[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rvfat"
version = "0.1.0"
description = "FAT32 disk-image access, MBR partition scanning, printk-style formatting and a small command shell"
requires-python = ">=3.10"
dependencies = []
keywords = ["fat32", "mbr", "filesystem", "disk image", "printf", "shell"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
rvfat-shell = "rvfat.shell:main"

[tool.hatch.build.targets.wheel]
packages = ["rvfat"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
