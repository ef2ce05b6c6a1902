from __future__ import annotations

from typing import Any, List, Optional

from .config import RegistryConfig
from .core.contracts import LocalOrgRecord, OrgMatch
from .core.interfaces import OrgStore
from .registry.search import RegistrySearch
from .stores.factory import make_store


class OrgResolver:
    """
    Public façade. Does not implement lookup logic itself.
    Wires a RegistryConfig and a local OrgStore into a RegistrySearch.
    """

    def __init__(
        self,
        config: Optional[RegistryConfig] = None,
        store: Optional[OrgStore] = None,
        **config_overrides: Any,
    ) -> None:
        self._config = config or RegistryConfig.from_env(**config_overrides)
        self._store = store if store is not None else make_store()
        self._search = RegistrySearch(self._config, self._store)

    @property
    def config(self) -> RegistryConfig:
        return self._config

    def ping(self) -> bool:
        return self._search.ping()

    def search(self, name: Optional[str]) -> List[OrgMatch]:
        return self._search.search(name)

    def local_search(self, name: Optional[str]) -> List[LocalOrgRecord]:
        return self._search.local_search(name)
