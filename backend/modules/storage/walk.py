"""
Directory listing primitive shared by the size calculator and the auditor.

Listings run in the default executor so the event loop only suspends at
filesystem calls. Symbolic links are classified without being followed.
"""

import asyncio
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class EntryKind(str, Enum):
    """Filesystem object classes the walkers distinguish."""

    DIRECTORY = "directory"
    FILE = "file"
    OTHER = "other"  # symlinks, sockets, devices, fifos


@dataclass
class DirectoryEntry:
    """One entry of a directory listing."""

    name: str
    path: Path
    kind: EntryKind
    size: Optional[int] = None  # None when the file could not be stat'ed


def _classify(entry: os.DirEntry) -> tuple[EntryKind, Optional[int]]:
    if entry.is_symlink():
        return EntryKind.OTHER, None
    if entry.is_dir(follow_symlinks=False):
        return EntryKind.DIRECTORY, None
    if entry.is_file(follow_symlinks=False):
        try:
            return EntryKind.FILE, entry.stat(follow_symlinks=False).st_size
        except OSError:
            return EntryKind.FILE, None
    return EntryKind.OTHER, None


def _scan(path: Path) -> list[DirectoryEntry]:
    entries = []
    with os.scandir(path) as it:
        for entry in it:
            kind, size = _classify(entry)
            entries.append(DirectoryEntry(entry.name, Path(entry.path), kind, size))
    return entries


async def list_directory(path: Path) -> list[DirectoryEntry]:
    """
    List a directory without following symbolic links.

    Raises:
        OSError: If the directory itself cannot be listed
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, _scan, Path(path))
