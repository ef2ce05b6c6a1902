"""
orgresolve: resolve free-text organization names against a ROR-style
registry, with a local org-store fallback.

Typical usage:
    from orgresolve import OrgResolver
    hits = OrgResolver(app_email="helpdesk@example.org").search("example univ")
"""

__version__ = "0.1.0"

from .client import OrgResolver  # noqa: E402
from .config import RegistryConfig  # noqa: E402
from .core.contracts import LocalOrgRecord, SearchResult  # noqa: E402

__all__ = [
    "__version__",
    "OrgResolver",
    "RegistryConfig",
    "SearchResult",
    "LocalOrgRecord",
]
