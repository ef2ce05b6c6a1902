"""
Core exports for orgresolve.
"""

from .contracts import (
    LocalOrgRecord,
    OrgMatch,
    PageResult,
    RawRegistryItem,
    RegistryPage,
    SearchResult,
)
from .interfaces import OrgStore

__all__ = [
    "SearchResult",
    "LocalOrgRecord",
    "RawRegistryItem",
    "RegistryPage",
    "PageResult",
    "OrgMatch",
    "OrgStore",
]
