from __future__ import annotations

import re
from typing import Any, Callable, List, Optional
from urllib.parse import quote

from loguru import logger

from .config import SEARCH_PAGE_URL, SUGGEST_URL
from .errors import InvalidArgsError, NetworkError, ParseError
from .http_fetch import Fetcher
from .normalize import basic_clean
from .pipeline_types import Candidate
from .utils.text_clean import clean_query_text
from .utils.urls import absolute_url, extract_subject_id

# One search-page hit: detail link (with its numeric id) and the title span
RESULT_BLOCK_RE = re.compile(
    r'<div class="item-root">[\s\S]*?'
    r'<a[^>]*href="([^"]*subject/(\d+)/[^"]*)"[^>]*>[\s\S]*?'
    r'<span[^>]*class="[^"]*title[^"]*"[^>]*>([^<]+)</span>'
)


def parse_suggest_payload(data: Any) -> List[Candidate]:
    """Map a suggestion-endpoint payload to candidates, skipping malformed entries."""
    if not isinstance(data, list):
        logger.warning("Suggest payload is not a list (got {})", type(data).__name__)
        return []

    out: List[Candidate] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        title = basic_clean(item.get("title"))
        raw_url = item.get("url")
        if not title or not isinstance(raw_url, str) or not raw_url.strip():
            continue

        cid = extract_subject_id(raw_url) or str(item.get("id") or "").strip()
        if not cid:
            continue
        out.append(Candidate(id=cid, url=absolute_url(raw_url), title=title))

    logger.info("Suggest payload parsed: {} usable of {} entries", len(out), len(data))
    return out


def parse_search_page(html: str) -> List[Candidate]:
    """Scan full-text search HTML for result blocks, in page order."""
    out: List[Candidate] = []
    for m in RESULT_BLOCK_RE.finditer(html or ""):
        href, cid, raw_title = m.group(1), m.group(2), m.group(3)
        title = basic_clean(raw_title)
        if not cid or not href or not title:
            continue
        out.append(Candidate(id=cid, url=absolute_url(href), title=title))

    logger.info("Search page parsed: {} result blocks", len(out))
    return out


class SearchResolver:
    """
    Query -> candidates, via the suggestion endpoint then the search page.

    The two strategies never run together: the page is only scanned once
    the endpoint has come back (or failed) with nothing usable.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        suggest_url: str = SUGGEST_URL,
        search_page_url: str = SEARCH_PAGE_URL,
    ) -> None:
        self.fetcher = fetcher
        self.suggest_url = suggest_url
        self.search_page_url = search_page_url

    def _run_strategy(
        self, name: str, call: Callable[[], List[Candidate]]
    ) -> tuple[List[Candidate], Optional[NetworkError]]:
        try:
            return call(), None
        except NetworkError as e:
            logger.warning("{} search failed: {}", name, e)
            return [], e

    def search_primary(self, query: str) -> List[Candidate]:
        url = f"{self.suggest_url}?q={quote(query)}"
        logger.info("Querying suggest endpoint: {}", url)
        return parse_suggest_payload(self.fetcher.fetch_json(url))

    def search_backup(self, query: str) -> List[Candidate]:
        url = f"{self.search_page_url}?q={quote(query)}"
        logger.info("Querying search page: {}", url)
        return parse_search_page(self.fetcher.fetch_text(url))

    def search(self, query: str) -> List[Candidate]:
        q = clean_query_text(query)
        if not q:
            raise InvalidArgsError("Movie name must be non-empty")

        logger.info('Searching for "{}"', q)
        results, primary_err = self._run_strategy("Primary", lambda: self.search_primary(q))
        if results:
            logger.info("Search complete: {} candidates (primary)", len(results))
            return self._checked(results)

        logger.info("Primary search empty; trying search page")
        results, backup_err = self._run_strategy("Backup", lambda: self.search_backup(q))

        if not results and primary_err is not None and backup_err is not None:
            raise NetworkError(f'Both search strategies failed for "{q}"', cause=backup_err)

        logger.info("Search complete: {} candidates (backup)", len(results))
        return self._checked(results)

    @staticmethod
    def _checked(results: List[Candidate]) -> List[Candidate]:
        if not validate_candidates(results):
            raise ParseError("Search produced malformed candidates")
        return results


def validate_candidates(results: Any) -> bool:
    if not isinstance(results, list):
        return False
    return all(
        isinstance(c, Candidate)
        and isinstance(c.id, str) and bool(c.id)
        and isinstance(c.url, str) and bool(c.url)
        and isinstance(c.title, str) and bool(c.title)
        for c in results
    )
