from __future__ import annotations

"""
Text normalisation helpers shared by the search resolver, the detail
parser and the record cleaner.

The catalog pages deliver titles, names and synopses wrapped in markup,
HTML entities and irregular whitespace; everything that leaves the
pipeline goes through one of these.

Public helpers:

* strip_html(text) -> str
    Drop tags and decode entities.

* clean_whitespace(text) -> str
    Collapse any whitespace run (including full-width / nbsp) to one space.

* basic_clean(text) -> str
    strip_html + unicode tidy + clean_whitespace.

* truncate(text, max_chars, suffix) -> str
    Hard cap with an ellipsis marker; total length never exceeds max_chars.
"""

import html
import re
import warnings
from typing import Iterable, List

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning

from .config import TRUNCATE_SUFFIX

_WS_RE = re.compile(r"\s+")
_TAG_RE = re.compile(r"<[^>]*>")

# ---------------------------------------------------------------------------
# Low-level helpers
# ---------------------------------------------------------------------------


def strip_html(text: str | None) -> str:
    if not text:
        return ""
    if "<" not in text and "&" not in text:
        return text.strip()
    try:
        with warnings.catch_warnings():
            # short fragments that look like paths/URLs trip a bs4 heuristic
            warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
            soup = BeautifulSoup(text, "html.parser")
        return soup.get_text().strip()
    except Exception:
        # If bs4 misbehaves, fall back to a crude strip
        return html.unescape(_TAG_RE.sub("", text)).strip()


def _normalise_unicode(text: str) -> str:
    text = text.replace("\u00a0", " ").replace("\u3000", " ")
    text = text.replace("\u200b", "")
    return text


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def clean_whitespace(text: str | None) -> str:
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    return _WS_RE.sub(" ", text).strip()


def basic_clean(text: str | None) -> str:
    """Light-weight clean for any extracted field.

    * strips HTML and decodes entities
    * normalises unicode spaces
    * collapses whitespace
    """
    if text is None:
        return ""
    if not isinstance(text, str):
        text = str(text)
    text = strip_html(text)
    text = _normalise_unicode(text)
    return clean_whitespace(text)


def truncate(text: str, max_chars: int, suffix: str = TRUNCATE_SUFFIX) -> str:
    if len(text) <= max_chars:
        return text
    keep = max(max_chars - len(suffix), 0)
    return text[:keep] + suffix


def strip_patterns(text: str, patterns: Iterable[str]) -> str:
    """Remove every regex in `patterns` from `text`, in order."""
    out = text
    for pat in patterns:
        out = re.sub(pat, "", out)
    return out


def unique_nonempty(values: Iterable[str]) -> List[str]:
    """Clean each value, drop empties, de-dup keeping first-seen order."""
    seen = set()
    out: List[str] = []
    for v in values:
        c = basic_clean(v)
        if c and c not in seen:
            seen.add(c)
            out.append(c)
    return out
