from __future__ import annotations

from typing import List, Sequence, Tuple

from ..core.contracts import SearchResult

# ---------- ranking ----------
STARTS_WITH = "starts_with"  # name begins with the query (strongest)
CONTAINS = "contains"  # query occurs later in the name
NO_MATCH = "no_match"  # matched upstream on an alias/acronym only


def rule_for(query: str, name: str) -> Tuple[str, int]:
    """Return (tier, position of the first occurrence or -1)."""
    q = (query or "").lower()
    if not q:
        return NO_MATCH, -1
    pos = (name or "").lower().find(q)
    if pos == 0:
        return STARTS_WITH, 0
    if pos > 0:
        return CONTAINS, pos
    return NO_MATCH, -1


def _alpha(r: SearchResult) -> Tuple[str, str]:
    return (r.name.lower(), r.name)


def resort(results: Sequence[SearchResult], query: str) -> List[SearchResult]:
    """
    Reorder `results` for autocomplete, comparing case-insensitively:
      1) names starting with `query`, alphabetically
      2) names containing `query`, earliest occurrence first (stable)
      3) everything else, alphabetically
    Nothing is added or removed.
    """
    starts: List[SearchResult] = []
    contains: List[Tuple[int, SearchResult]] = []
    rest: List[SearchResult] = []

    for r in results:
        tier, pos = rule_for(query, r.name)
        if tier == STARTS_WITH:
            starts.append(r)
        elif tier == CONTAINS:
            contains.append((pos, r))
        else:
            rest.append(r)

    starts.sort(key=_alpha)
    contains.sort(key=lambda c: c[0])
    rest.sort(key=_alpha)

    return starts + [r for _, r in contains] + rest
