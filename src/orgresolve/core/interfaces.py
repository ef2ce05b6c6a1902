from __future__ import annotations

from typing import List, Protocol

from .contracts import LocalOrgRecord


class OrgStore(Protocol):
    """
    Local organization table used when the registry is unavailable.

    find_by_substring() matches `term` case-insensitively against the name OR
    the abbreviation, returns records ordered by name, and skips the sentinel
    "other" organization when `exclude_other` is set. An empty term matches
    every record.
    """

    def find_by_substring(
        self, term: str, exclude_other: bool = True
    ) -> List[LocalOrgRecord]: ...
