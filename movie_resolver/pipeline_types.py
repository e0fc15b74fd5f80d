"""Typed containers shared across pipeline modules."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict


@dataclass(frozen=True)
class Candidate:
    """Lightweight search hit: catalog id, absolute detail URL, display title."""

    id: str
    url: str
    title: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)
