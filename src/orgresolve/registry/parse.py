from __future__ import annotations

import json
import re
from typing import List, Sequence

from ..core.contracts import RawRegistryItem, RegistryPage, SearchResult

# scheme or leading "www." followed by the host part of the URL
DOMAIN_RE = re.compile(r"^(?:http://|www\.|https://)([^/?#]+)", re.IGNORECASE)


def website_from_links(links: Sequence[str]) -> str:
    """
    Bare hostname of the first link, e.g. 'https://example.edu/about' ->
    'example.edu'. Empty when there are no links.
    """
    if not links:
        return ""
    first = (links[0] or "").strip()
    if not first:
        return ""
    m = DOMAIN_RE.match(first)
    if m:
        return m.group(1)
    return re.split(r"[/?#]", first, maxsplit=1)[0]


def display_name(item: RawRegistryItem) -> str:
    """
    Registry names are not unique, so qualify them with the website when
    there is one, else the country:
        "Example College (example.edu)"
        "Example College (Brazil)"
    """
    if not item.name:
        return ""
    qualifier = website_from_links(item.links) or (
        item.country_name or ""
    ).strip()
    if not qualifier:
        return item.name
    return f"{item.name} ({qualifier})"


def parse_results(page: RegistryPage) -> List[SearchResult]:
    """Drop items without an id or name, then disambiguate the rest."""
    return [
        SearchResult(id=item.id, name=display_name(item))  # type: ignore[arg-type]
        for item in page.items
        if item.is_valid
    ]


def preview_first_item(page: RegistryPage) -> str:
    if not page.items:
        return "(no items)"
    it = page.items[0]
    sample = {
        "id": it.id,
        "name": it.name,
        "links": it.links[:1],
        "country": it.country_name,
    }
    return json.dumps(sample, ensure_ascii=False)[:600]
