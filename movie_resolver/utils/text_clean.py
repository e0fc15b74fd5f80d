# movie_resolver/utils/text_clean.py
from __future__ import annotations
import re

def clean_query_text(q: str | None, max_len: int = 200) -> str:
    """
    Query normaliser used before searching:
    - collapse whitespace/newlines
    - trim
    - hard cap
    """
    q = "" if q is None else str(q)
    q = re.sub(r"\s+", " ", q).strip()
    if len(q) > max_len:
        q = q[:max_len].rstrip()
    return q
