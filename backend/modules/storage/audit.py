"""
Baseline diff audit.

Decides whether a user is "unused": every content directory either empty or
identical, by relative path and file size, to the template user's tree.

Every ambiguous case resolves to "has extra content". Wrongly calling a
user unused leads to irreversible deletion; wrongly calling them used only
keeps an account around for longer.
"""

import logging
import stat
from pathlib import Path, PurePosixPath
from typing import Optional, Union

import aiofiles.os

from .models import (
    AuditResult,
    BaselineDirectories,
    CategoryAudit,
    UserDirectories,
)
from .walk import EntryKind, list_directory

logger = logging.getLogger(__name__)

# OS artifacts that never count as user content
IGNORED_ENTRY_NAMES = frozenset({".DS_Store", "Thumbs.db", "desktop.ini"})

# Checked in this order; the first category with extra content ends the audit
AUDIT_CATEGORIES: tuple[str, ...] = (
    # User content
    "chats",
    "group_chats",
    "characters",
    "worlds",
    "groups",
    "files",
    "comfy_workflows",
    "user_images",
    # Presets and settings that indicate usage
    "instruct",
    "context",
    "sysprompt",
    "reasoning",
    "quick_replies",
    "openai_settings",
    "koboldai_settings",
    "novelai_settings",
    "textgen_settings",
)

DirectorySet = Union[UserDirectories, BaselineDirectories]


def _extra(relative: PurePosixPath) -> CategoryAudit:
    return CategoryAudit(has_extra=True, example=str(relative))


async def _differs_from_baseline(
    size: Optional[int],
    baseline_path: Path,
) -> bool:
    try:
        baseline_stat = await aiofiles.os.stat(baseline_path)
    except OSError:
        return True
    if not stat.S_ISREG(baseline_stat.st_mode):
        return True
    return size is None or size != baseline_stat.st_size


async def dir_has_extra_content(
    user_dir: Optional[Path],
    baseline_dir: Optional[Path],
) -> CategoryAudit:
    """
    Check whether a user directory holds anything beyond its baseline.

    Walks the tree with an explicit stack and stops at the first extra
    entry. A missing directory has no extra content; a directory that is
    itself a symbolic link always does.

    Args:
        user_dir: The user's directory for one category
        baseline_dir: The template's directory for the same category, or
            None when the template provides nothing for it

    Returns:
        CategoryAudit with the first offending relative path as example
    """
    try:
        if user_dir is None:
            return CategoryAudit(has_extra=False)
        if await aiofiles.os.path.islink(user_dir):
            return _extra(PurePosixPath(user_dir.name))
        if not await aiofiles.os.path.exists(user_dir):
            return CategoryAudit(has_extra=False)

        stack: list[tuple[Path, PurePosixPath]] = [(Path(user_dir), PurePosixPath())]

        while stack:
            current, current_relative = stack.pop()
            for entry in await list_directory(current):
                if entry.name in IGNORED_ENTRY_NAMES:
                    continue

                relative = current_relative / entry.name

                if entry.kind is EntryKind.DIRECTORY:
                    stack.append((entry.path, relative))
                    continue

                # Never follow symlinks or special files
                if entry.kind is not EntryKind.FILE:
                    return _extra(relative)

                if baseline_dir is None:
                    return _extra(relative)

                baseline_path = Path(baseline_dir).joinpath(*relative.parts)
                if await _differs_from_baseline(entry.size, baseline_path):
                    return _extra(relative)

        return CategoryAudit(has_extra=False)
    except Exception as e:
        logger.warning(f"Audit of {user_dir} failed, assuming user content: {e}")
        return CategoryAudit(has_extra=True, example="unknown")


async def check_user_is_unused(
    user_directories: Optional[DirectorySet],
    baseline_directories: Optional[BaselineDirectories],
) -> AuditResult:
    """
    Check whether a user appears unused.

    A user is unused only if every audited category has no extra content.
    Details cover the categories checked up to and including the first
    offending one.
    """
    details: dict[str, CategoryAudit] = {}

    for category in AUDIT_CATEGORIES:
        user_dir = user_directories.get(category) if user_directories else None
        baseline_dir = baseline_directories.get(category) if baseline_directories else None
        details[category] = await dir_has_extra_content(user_dir, baseline_dir)
        if details[category].has_extra:
            return AuditResult(is_unused=False, details=details)

    return AuditResult(is_unused=True, details=details)
