# movie_resolver/utils/urls.py
from __future__ import annotations
import re
from typing import Optional
from urllib.parse import urlsplit
from ..config import CATALOG_BASE_URL

_SUBJECT_RE = re.compile(r"/subject/(\d+)/")
_QUERY_RE = re.compile(r"[?#].*$")
__all__ = ["absolute_url", "extract_subject_id", "strip_query", "is_absolute_http", "is_fetchable_url"]


def absolute_url(u: str, base: str = CATALOG_BASE_URL) -> str:
    """
    Turn a catalog link into an absolute https URL.

    - '//img9.doubanio.com/x.jpg'  -> 'https://img9.doubanio.com/x.jpg'
    - '/subject/30329536/'         -> 'https://movie.douban.com/subject/30329536/'
    - absolute URLs are returned unchanged
    - anything else (relative paths, data: URIs) is returned as-is;
      callers decide whether it is usable
    """
    if not u:
        return ""
    u = str(u).strip()
    if u.startswith("//"):
        return "https:" + u
    if u.startswith("/"):
        return base.rstrip("/") + u
    return u


def extract_subject_id(u: str) -> Optional[str]:
    if not isinstance(u, str) or not u:
        return None
    m = _SUBJECT_RE.search(u)
    return m.group(1) if m else None


def strip_query(u: str) -> str:
    """Drop query-string / fragment suffixes (resize hints, cache busters)."""
    if not u:
        return ""
    return _QUERY_RE.sub("", u.strip())


def is_absolute_http(u: str) -> bool:
    return isinstance(u, str) and (u.startswith("http://") or u.startswith("https://"))


def is_fetchable_url(u: str) -> bool:
    """Absolute http(s) URL with a host and a port in range; anything else can never succeed."""
    if not is_absolute_http(u):
        return False
    try:
        parts = urlsplit(u)
        parts.port
    except ValueError:
        return False
    return bool(parts.hostname)
