from __future__ import annotations

import logging
import math
from typing import List, Optional
from urllib.parse import urlencode

from ..config import RegistryConfig
from ..core.contracts import (
    LocalOrgRecord,
    OrgMatch,
    PageResult,
    RegistryPage,
    SearchResult,
)
from ..core.interfaces import OrgStore
from .http import RegistryHttpClient, handle_http_failure, is_success, log_error
from .local import local_org_search
from .match import resort
from .parse import parse_results, preview_first_item

log = logging.getLogger(__name__)


class RegistrySearch:
    """
    Registry lookup with a local fallback.

    search() pings the heartbeat endpoint, walks the result pages (never past
    `config.max_pages`), disambiguates and ranks the hits. When the registry
    is down, or the first page is not parseable, the local org store answers
    instead. Nothing raises out of search().
    """

    def __init__(
        self,
        config: RegistryConfig,
        store: OrgStore,
        *,
        http: Optional[RegistryHttpClient] = None,
    ) -> None:
        self._config = config
        self._store = store
        self._http = http or RegistryHttpClient(config)

    def ping(self) -> bool:
        """True iff the heartbeat endpoint answers with a 2xx."""
        resp = self._http.get(self._config.heartbeat_url)
        return is_success(resp)

    def search(self, name: Optional[str]) -> List[OrgMatch]:
        """
        Search the registry (name, acronyms, aliases) for `name`.

        Returns ranked SearchResult items, or the store's LocalOrgRecord
        items (store order) when the local fallback answered.
        """
        if not name or not name.strip():
            return []
        if not self.ping():
            log.info("registry heartbeat failed; local search for %r", name)
            return list(self.local_search(name))

        first = self._fetch_page(name, page=1)
        if not first.is_ok:
            log_error(where="RegistrySearch.search", error=first.parse_error)
            return list(self.local_search(name))

        results = self._process_pages(name, first.page or RegistryPage.empty())
        return list(resort(results, name))

    def local_search(self, name: Optional[str]) -> List[LocalOrgRecord]:
        return local_org_search(self._store, name)

    # helpers ------------------------------------------------------------
    def _fetch_page(self, name: str, page: int = 1) -> PageResult:
        """
        GET one search page. A non-2xx answer is logged and treated as an
        empty page; an unparseable body comes back as a parse failure.
        """
        query = urlencode({"query": name, "page": page})
        resp = self._http.get(f"{self._config.search_url}?{query}")
        if not is_success(resp):
            handle_http_failure(where="RegistrySearch.search", response=resp)
            return PageResult.ok(RegistryPage.empty())

        try:
            parsed = RegistryPage.from_json(resp.json())
        except ValueError as e:
            return PageResult.failed(f"page {page} for {name!r}: {e}")

        log.debug(
            "page %d: %d items of %d | first: %s",
            page,
            len(parsed.items),
            parsed.number_of_results,
            preview_first_item(parsed),
        )
        return PageResult.ok(parsed)

    def _page_count(self, number_of_results: int) -> int:
        return math.ceil(number_of_results / self._config.max_results_per_page)

    def _process_pages(
        self, name: str, first: RegistryPage
    ) -> List[SearchResult]:
        results = parse_results(first)

        pages = self._page_count(first.number_of_results)
        if pages <= 1:
            return results

        last = min(pages, self._config.max_pages)
        for page in range(2, last + 1):
            fetched = self._fetch_page(name, page=page)
            if not fetched.is_ok:
                # keep what earlier pages produced
                log_error(
                    where="RegistrySearch.search", error=fetched.parse_error
                )
                break
            results.extend(parse_results(fetched.page or RegistryPage.empty()))

        if pages > last:
            log.debug(
                "registry reported %d pages for %r; stopped at %d",
                pages,
                name,
                last,
            )
        return results
