"""Mount table parsing for /proc/mounts style files."""

import logging
import os
import posixpath
import re
from typing import List, Optional

import aiofiles

from ...models import MountEntry

_logger = logging.getLogger("mount_supervisor.mount_table")

# The kernel escapes space, tab, newline and backslash as \ooo octal sequences
_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")


def unescape_field(value: str) -> str:
    """Decode octal escapes such as \\040 used in /proc/mounts fields."""
    return _OCTAL_ESCAPE.sub(lambda match: chr(int(match.group(1), 8)), value)


def canonical_mount_point(path: str) -> str:
    """
    Mount point in the form the kernel writes to the mount table.

    Duplicate slashes are collapsed and symlinks in the parent directories are
    resolved. The last component is left alone: stat on a hung share blocks.
    """
    path = "/" + posixpath.normpath(path).lstrip("/")
    parent, name = posixpath.split(path)
    if not name:
        return path
    return posixpath.join(os.path.realpath(parent), name)


def parse_mount_line(line: str) -> Optional[MountEntry]:
    """Parse one mount table line. Returns None for blank or malformed lines."""
    parts = line.strip().split()
    if len(parts) < 4:
        return None

    device, mount_point, fs_type, options = parts[:4]
    mount_point = unescape_field(mount_point)
    if mount_point != "/":
        mount_point = posixpath.normpath(mount_point)

    return MountEntry(
        device=unescape_field(device),
        mount_point=mount_point,
        fs_type=fs_type,
        options=options.split(","),
    )


def parse_mount_table(content: str) -> List[MountEntry]:
    """Parse a whole mount table, skipping lines that cannot be read."""
    entries = []
    for line in content.splitlines():
        entry = parse_mount_line(line)
        if entry is None:
            if line.strip():
                _logger.debug(f"Skipping malformed mount table line: {line!r}")
            continue
        entries.append(entry)
    return entries


async def read_mount_table(path: str = "/proc/self/mounts") -> List[MountEntry]:
    """Read and parse the mount table file."""
    async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as f:
        content = await f.read()
    return parse_mount_table(content)
