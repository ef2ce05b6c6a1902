from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from ..config import ORG_DB_PATH
from ..core.interfaces import OrgStore
from .memory import InMemoryOrgStore
from .sqlite import SqliteOrgStore

log = logging.getLogger(__name__)


def make_store(
    *,
    orgs_json: Optional[Union[str, Path]] = None,
    org_db: Optional[Union[str, Path]] = None,
) -> OrgStore:
    """
    Pick the local org store: an explicit JSON file, then an explicit SQLite
    file, then ORGRESOLVE_ORG_DB, else an empty in-memory store.
    """
    if orgs_json:
        store = InMemoryOrgStore.from_json(orgs_json)
        log.debug("loaded %d local orgs from %s", len(store), orgs_json)
        return store
    db = org_db or ORG_DB_PATH
    if db:
        return SqliteOrgStore(db)
    return InMemoryOrgStore()
