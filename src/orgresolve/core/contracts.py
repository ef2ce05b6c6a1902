from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class SearchResult:
    id: str  # canonical registry URI, e.g. https://ror.org/03yrm5c26
    name: str  # disambiguated display name


@dataclass(frozen=True)
class LocalOrgRecord:
    name: str
    abbreviation: str = ""
    is_other: bool = False
    id: Optional[str] = None


def _opt_str(val: Any) -> Optional[str]:
    if isinstance(val, str) and val.strip():
        return val
    return None


@dataclass(frozen=True)
class RawRegistryItem:
    """
    One entry of a registry search page. Every field is optional; values of
    the wrong JSON type are treated as absent.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    links: List[str] = field(default_factory=list)
    country_name: Optional[str] = None

    @classmethod
    def from_json(cls, obj: Any) -> "RawRegistryItem":
        if not isinstance(obj, dict):
            return cls()
        links = obj.get("links")
        country = obj.get("country")
        return cls(
            id=_opt_str(obj.get("id")),
            name=_opt_str(obj.get("name")),
            links=[x for x in links if isinstance(x, str)]
            if isinstance(links, list)
            else [],
            country_name=_opt_str(country.get("country_name"))
            if isinstance(country, dict)
            else None,
        )

    @property
    def is_valid(self) -> bool:
        return bool(self.id and self.name)


@dataclass(frozen=True)
class RegistryPage:
    number_of_results: int = 0
    items: List[RawRegistryItem] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "RegistryPage":
        return cls(number_of_results=0, items=[])

    @classmethod
    def from_json(cls, data: Any) -> "RegistryPage":
        """
        Raise ValueError when `data` does not have the shape of a search page.
        A missing count defaults to 1 (single page).
        """
        if not isinstance(data, dict):
            raise ValueError(
                f"expected a JSON object, got {type(data).__name__}"
            )
        raw_items = data.get("items") or []
        if not isinstance(raw_items, list):
            raise ValueError("'items' is not a list")
        try:
            total = int(data.get("number_of_results", 1) or 0)
        except (TypeError, ValueError, OverflowError) as e:
            raise ValueError(f"bad 'number_of_results': {e}") from e
        return cls(
            number_of_results=total,
            items=[RawRegistryItem.from_json(x) for x in raw_items],
        )


@dataclass(frozen=True)
class PageResult:
    """
    Tagged outcome of fetching one search page: either a parsed page
    (`page` set) or a parse failure (`parse_error` set).
    """

    page: Optional[RegistryPage] = None
    parse_error: Optional[str] = None

    @classmethod
    def ok(cls, page: RegistryPage) -> "PageResult":
        return cls(page=page)

    @classmethod
    def failed(cls, message: str) -> "PageResult":
        return cls(parse_error=message)

    @property
    def is_ok(self) -> bool:
        return self.parse_error is None


# What RegistrySearch.search() hands back: ranked registry hits, or the
# store's own records when it fell back to the local search.
OrgMatch = Union[SearchResult, LocalOrgRecord]


def as_dict(match: OrgMatch) -> Dict[str, Any]:
    if isinstance(match, SearchResult):
        return {"id": match.id, "name": match.name}
    return {
        "id": match.id,
        "name": match.name,
        "abbreviation": match.abbreviation,
    }
