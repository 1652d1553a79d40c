"""
User directory resolution.

Maps a handle to the fixed set of content directories under
``<data_root>/<handle>``.
"""

import asyncio
import os
import shutil
from pathlib import Path

import aiofiles.os

from modules.accounts.exceptions import InvalidHandleError
from modules.accounts.keys import normalize_handle

from .models import UserDirectories

# Category name -> path relative to the user root
CATEGORY_PATHS: dict[str, str] = {
    "chats": "chats",
    "group_chats": "group chats",
    "characters": "characters",
    "worlds": "worlds",
    "groups": "groups",
    "files": "user/files",
    "comfy_workflows": "user/workflows",
    "user_images": "user/images",
    "instruct": "instruct",
    "context": "context",
    "sysprompt": "sysprompt",
    "reasoning": "reasoning",
    "quick_replies": "QuickReplies",
    "openai_settings": "OpenAI Settings",
    "koboldai_settings": "KoboldAI Settings",
    "novelai_settings": "NovelAI Settings",
    "textgen_settings": "TextGen Settings",
    "backups": "backups",
    "avatars": "User Avatars",
    "thumbnails": "thumbnails",
    "backgrounds": "backgrounds",
    "themes": "themes",
    "extensions": "extensions",
    "assets": "assets",
    "vectors": "vectors",
}


def _is_within(path: Path, parent: Path) -> bool:
    return path != parent and path.is_relative_to(parent)


class UserDirectoryResolver:
    """
    Resolves per-user directory sets under a data root.

    Each call builds a new UserDirectories, so callers can never corrupt
    another caller's view by mutating the result.
    """

    def __init__(self, data_root: Path):
        self._data_root = Path(os.path.abspath(data_root))

    @property
    def data_root(self) -> Path:
        return self._data_root

    def directories_for(self, handle: str) -> UserDirectories:
        """
        Get the directory set of a user.

        Raises:
            InvalidHandleError: If the handle is not normalized or its
                directories would fall outside the user's own root
        """
        if not handle or normalize_handle(handle) != handle:
            raise InvalidHandleError(handle)

        root = Path(os.path.normpath(self._data_root / handle))
        if not _is_within(root, self._data_root):
            raise InvalidHandleError(handle)

        categories = {}
        for category, relative in CATEGORY_PATHS.items():
            path = Path(os.path.normpath(root / relative))
            if not _is_within(path, root):
                raise InvalidHandleError(handle)
            categories[category] = path

        return UserDirectories(handle=handle, root=root, categories=categories)

    async def ensure_exists(self, directories: UserDirectories) -> None:
        """Create the root and every category directory of a user."""
        await aiofiles.os.makedirs(directories.root, exist_ok=True)
        for path in directories.categories.values():
            await aiofiles.os.makedirs(path, exist_ok=True)


async def remove_tree(path: Path) -> bool:
    """
    Delete a directory tree.

    Returns:
        False if there was nothing to delete

    Raises:
        OSError: If the tree exists but could not be removed
    """
    if not await aiofiles.os.path.exists(path) and not await aiofiles.os.path.islink(path):
        return False
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(None, shutil.rmtree, path)
    return True
