"""
Storage module data models.
"""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field


class UserDirectories(BaseModel):
    """
    The on-disk directory set of one user.

    Derived from the handle on demand and never persisted. Every category
    path lies under ``root``. Each resolver call returns a new instance, so
    callers may derive modified copies without affecting anyone else.
    """

    handle: str = Field(..., description="Owner handle")
    root: Path = Field(..., description="User root directory")
    categories: dict[str, Path] = Field(
        default_factory=dict,
        description="Content category name to absolute directory",
    )

    def get(self, category: str) -> Optional[Path]:
        return self.categories.get(category)


class BaselineDirectories(BaseModel):
    """
    Directory set of the template user used as the audit baseline.

    Categories the active template does not populate are present with a
    value of None, which means "no baseline" for that category.
    """

    handle: str = Field(..., description="Template user handle")
    categories: dict[str, Optional[Path]] = Field(default_factory=dict)

    def get(self, category: str) -> Optional[Path]:
        return self.categories.get(category)


class TemplateInfo(BaseModel):
    """State of the default template user."""

    exists: bool = Field(..., description="Whether the template root exists")
    populated_categories: list[str] = Field(
        default_factory=list,
        description="Template-capable categories with at least one entry",
    )


class CategoryAudit(BaseModel):
    """Audit outcome for one content category."""

    has_extra: bool = Field(..., description="Whether user content beyond the baseline exists")
    example: Optional[str] = Field(
        None,
        description="Relative path of the first offending entry",
    )


class AuditResult(BaseModel):
    """
    Outcome of auditing a user's content against the baseline.

    Computed fresh on every call; content may change between audits.
    """

    is_unused: bool = Field(..., description="True only if no category has extra content")
    details: dict[str, CategoryAudit] = Field(default_factory=dict)
