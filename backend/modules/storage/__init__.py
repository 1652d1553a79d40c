"""
Storage module.

Everything that inspects users' on-disk content: directory resolution,
size calculation, the baseline diff audit and the default template.

Public API:
- UserDirectoryResolver: handle -> UserDirectories
- directory_size: recursive regular-file byte total
- check_user_is_unused: baseline diff audit
- DefaultTemplateProvider: active template info and audit baseline
"""

from .models import (
    UserDirectories,
    BaselineDirectories,
    TemplateInfo,
    CategoryAudit,
    AuditResult,
)
from .directories import CATEGORY_PATHS, UserDirectoryResolver, remove_tree
from .sizing import directory_size
from .audit import (
    AUDIT_CATEGORIES,
    IGNORED_ENTRY_NAMES,
    check_user_is_unused,
    dir_has_extra_content,
)
from .templates import TEMPLATE_CATEGORIES, DefaultTemplateProvider

__all__ = [
    # Models
    "UserDirectories",
    "BaselineDirectories",
    "TemplateInfo",
    "CategoryAudit",
    "AuditResult",
    # Directories
    "CATEGORY_PATHS",
    "UserDirectoryResolver",
    "remove_tree",
    # Sizing
    "directory_size",
    # Audit
    "AUDIT_CATEGORIES",
    "IGNORED_ENTRY_NAMES",
    "check_user_is_unused",
    "dir_has_extra_content",
    # Templates
    "TEMPLATE_CATEGORIES",
    "DefaultTemplateProvider",
]
