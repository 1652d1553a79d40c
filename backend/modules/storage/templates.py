"""
Default template info provider.

The template is the directory tree of a designated template user. Only the
categories it actually populates become audit baselines; every other
category is explicitly absent so the audit compares strictly there.
"""

import asyncio
import logging
import shutil
from functools import partial
from pathlib import Path
from typing import Optional

import aiofiles.os

from .audit import IGNORED_ENTRY_NAMES
from .directories import UserDirectoryResolver
from .models import BaselineDirectories, TemplateInfo, UserDirectories
from .walk import list_directory

logger = logging.getLogger(__name__)

# Categories a default template can ship content for
TEMPLATE_CATEGORIES: tuple[str, ...] = (
    "characters",
    "worlds",
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


async def _has_content(path: Path) -> bool:
    try:
        entries = await list_directory(path)
    except OSError:
        return False
    return any(entry.name not in IGNORED_ENTRY_NAMES for entry in entries)


class DefaultTemplateProvider:
    """Reports which categories the default template populates."""

    def __init__(self, resolver: UserDirectoryResolver, template_handle: str):
        self._resolver = resolver
        self._template_handle = template_handle

    async def active_template(self) -> TemplateInfo:
        """Inspect the template user's tree."""
        directories = self._resolver.directories_for(self._template_handle)
        if not await aiofiles.os.path.isdir(directories.root):
            return TemplateInfo(exists=False)

        populated = [
            category
            for category in TEMPLATE_CATEGORIES
            if await _has_content(directories.categories[category])
        ]
        return TemplateInfo(exists=True, populated_categories=populated)

    async def baseline_directories(self) -> Optional[BaselineDirectories]:
        """
        Build the audit baseline from the active template.

        Returns:
            Baseline with only populated categories set, or None when there
            is no template or it populates nothing
        """
        info = await self.active_template()
        if not info.exists or not info.populated_categories:
            return None

        # Fresh resolver result; never reuse a directory set across callers
        directories = self._resolver.directories_for(self._template_handle)
        active = set(info.populated_categories)
        return BaselineDirectories(
            handle=self._template_handle,
            categories={
                category: path if category in active else None
                for category, path in directories.categories.items()
            },
        )

    async def apply_to(self, target: UserDirectories) -> list[str]:
        """
        Copy the template's populated categories into a user's tree.

        Existing user files are overwritten by template files of the same
        name; other user files are kept.

        Returns:
            The categories that were copied
        """
        info = await self.active_template()
        if not info.exists:
            return []

        template = self._resolver.directories_for(self._template_handle)
        loop = asyncio.get_running_loop()
        for category in info.populated_categories:
            copy = partial(
                shutil.copytree,
                template.categories[category],
                target.categories[category],
                dirs_exist_ok=True,
                ignore=shutil.ignore_patterns(*IGNORED_ENTRY_NAMES),
            )
            await loop.run_in_executor(None, copy)
        logger.info(f"Applied default template to {target.handle}: {', '.join(info.populated_categories)}")
        return info.populated_categories
