"""
Registry (ROR-style organization API) integration utilities.

This subpackage provides:
- HTTP client with bounded redirect following (`http.py`)
- Typed parsing and display-name disambiguation of search pages (`parse.py`)
- Autocomplete ranking of candidates (`match.py`)
- Local org-store fallback search (`local.py`)
- High-level search orchestration (`search.py`)

Typical usage:
    from orgresolve.registry.search import RegistrySearch
    from orgresolve.registry.match import resort
"""
