"""
Directory size calculation.

Sums the sizes of all regular files under a directory tree. Symbolic links
are never followed and count for nothing, as do sockets, fifos and devices.
Failures are logged and skipped so that one unreadable subtree degrades the
total instead of failing the whole report.
"""

import logging
from pathlib import Path

import aiofiles.os

from .walk import EntryKind, list_directory

logger = logging.getLogger(__name__)


async def directory_size(path: Path) -> int:
    """
    Recursively compute the total size of regular files under a path.

    Args:
        path: Directory to measure; may not exist

    Returns:
        Size in bytes (0 for a missing path, a partial sum on errors)
    """
    if not await aiofiles.os.path.exists(path):
        return 0

    total = 0
    stack = [Path(path)]

    while stack:
        current = stack.pop()
        try:
            entries = await list_directory(current)
        except OSError as e:
            logger.warning(f"Error calculating directory size of {current}: {e}")
            continue

        for entry in entries:
            if entry.kind is EntryKind.DIRECTORY:
                stack.append(entry.path)
            elif entry.kind is EntryKind.FILE:
                if entry.size is None:
                    logger.warning(f"Could not stat {entry.path}, excluding it from size")
                    continue
                total += entry.size

    return total
