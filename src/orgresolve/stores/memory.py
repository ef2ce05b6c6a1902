from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List, Optional, Union

from ..core.contracts import LocalOrgRecord


def record_from_json(obj: Any) -> Optional[LocalOrgRecord]:
    if not isinstance(obj, dict):
        return None
    name = str(obj.get("name", "") or "").strip()
    if not name:
        return None
    org_id = obj.get("id")
    return LocalOrgRecord(
        name=name,
        abbreviation=str(obj.get("abbreviation", "") or "").strip(),
        is_other=bool(obj.get("is_other", False)),
        id=str(org_id) if org_id not in (None, "") else None,
    )


class InMemoryOrgStore:
    """
    List-backed org table. Good for tests, fixtures and small deployments
    that ship their org list as a JSON file.
    """

    def __init__(self, records: Iterable[LocalOrgRecord] = ()) -> None:
        self._records: List[LocalOrgRecord] = list(records)

    def __len__(self) -> int:
        return len(self._records)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "InMemoryOrgStore":
        """
        Load a JSON array of {name, abbreviation, is_other, id} objects, or
        one object per line for *.jsonl files. Malformed lines are skipped.
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".jsonl":
            rows: List[Any] = []
            for line in text.splitlines():
                line = line.strip()
                if not line:
                    continue
                try:
                    rows.append(json.loads(line))
                except ValueError:
                    continue
        else:
            rows = json.loads(text)
            if not isinstance(rows, list):
                raise ValueError(f"{path}: expected a JSON array of orgs")

        records = [r for r in (record_from_json(x) for x in rows) if r]
        return cls(records)

    def find_by_substring(
        self, term: str, exclude_other: bool = True
    ) -> List[LocalOrgRecord]:
        t = (term or "").lower()
        out = [
            r
            for r in self._records
            if not (exclude_other and r.is_other)
            and (
                not t
                or t in r.name.lower()
                or t in (r.abbreviation or "").lower()
            )
        ]
        return sorted(out, key=lambda r: r.name)
