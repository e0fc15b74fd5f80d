from __future__ import annotations

from typing import Any, Dict, List, Mapping

from pydantic import BaseModel

from .config import UNKNOWN_ACTOR, UNKNOWN_GENRE, MovieRecord
from .normalize import clean_whitespace

SCALAR_FIELDS = ["title", "year", "rating", "poster", "summary"]
LIST_FIELDS = ["genres", "cast"]
REQUIRED_FIELDS = ["title", "year", "rating", "genres", "cast", "poster", "summary"]

_LIST_SENTINELS = {"genres": UNKNOWN_GENRE, "cast": UNKNOWN_ACTOR}


def _as_mapping(record: Any) -> Mapping[str, Any] | None:
    if isinstance(record, BaseModel):
        return record.model_dump()
    if isinstance(record, Mapping):
        return record
    return None


def validate_record(record: Any) -> bool:
    """
    Shape check only: all seven fields present, list fields are lists,
    scalar fields are strings. Content is not re-checked.
    """
    data = _as_mapping(record)
    if data is None:
        return False
    if any(f not in data for f in REQUIRED_FIELDS):
        return False
    if any(not isinstance(data[f], list) for f in LIST_FIELDS):
        return False
    return all(isinstance(data[f], str) for f in SCALAR_FIELDS)


def _clean_list(values: List[Any]) -> List[str]:
    out: List[str] = []
    for v in values:
        c = clean_whitespace(v)
        if c:
            out.append(c)
    return out


def clean_record(record: Any) -> MovieRecord:
    """Re-normalise whitespace everywhere; trim list items, drop empty ones.

    A list emptied by trimming gets its sentinel back so the record keeps
    its non-empty-list shape. clean_record(clean_record(r)) == clean_record(r).
    """
    data = _as_mapping(record)
    if data is None:
        raise TypeError(f"Cannot clean {type(record).__name__}")

    cleaned: Dict[str, Any] = {f: clean_whitespace(data[f]) for f in SCALAR_FIELDS}
    for f in LIST_FIELDS:
        cleaned[f] = _clean_list(data[f]) or [_LIST_SENTINELS[f]]
    return MovieRecord(**cleaned)
