from __future__ import annotations

from typing import List, Optional

from ..core.contracts import LocalOrgRecord
from ..core.interfaces import OrgStore
from .http import log_error


def local_org_search(store: OrgStore, name: Optional[str]) -> List[LocalOrgRecord]:
    """
    Substring search of the local org table on name or abbreviation, skipping
    the "other" org. A blank name lists every org. Never raises.
    """
    term = name if name and name.strip() else ""
    try:
        return list(store.find_by_substring(term, exclude_other=True))
    except Exception as e:
        log_error(where="local_org_search", error=e)
        return []
