"""
Handle normalization and account store key derivation.
"""

import re
import unicodedata
from typing import Optional

KEY_PREFIX = "user:"
AVATAR_PREFIX = "avatar:"

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def normalize_handle(text: Optional[str]) -> Optional[str]:
    """
    Normalize free text into a handle.

    Lowercases, folds accents to ASCII and collapses every run of other
    characters into a single dash. Returns None when nothing usable remains.
    """
    if not text:
        return None
    folded = unicodedata.normalize("NFKD", str(text)).encode("ascii", "ignore").decode("ascii")
    handle = _NON_SLUG_CHARS.sub("-", folded.lower()).strip("-")
    return handle or None


def to_key(handle: str) -> str:
    """Account store key of a user record."""
    return f"{KEY_PREFIX}{handle}"


def to_avatar_key(handle: str) -> str:
    """Account store key of a user's avatar."""
    return f"{AVATAR_PREFIX}{handle}"


def is_user_key(key: str) -> bool:
    return key.startswith(KEY_PREFIX)
