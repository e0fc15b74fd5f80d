from __future__ import annotations

"""
Resolution pipeline: query -> candidates -> best match -> detail record.

    resolver = MovieResolver(Fetcher(FetcherConfig(timeout_ms=5000)))
    resolver.resolve_candidates("阳光普照")   # [Candidate, ...]
    resolver.fetch_detail(candidate.url)      # MovieRecord
    resolver.resolve("阳光普照")              # both, plus best-match selection

No process-wide state: two resolvers built from two configs never
interfere, and one resolver can serve independent queries.
"""

from typing import List, Optional

from loguru import logger

from .config import MovieRecord
from .detail_parser import DetailParser
from .errors import InvalidArgsError, NoResultsError, ParseError
from .http_fetch import Fetcher
from .match import select_best
from .pipeline_types import Candidate
from .record_clean import clean_record, validate_record
from .search import SearchResolver
from .utils.urls import is_fetchable_url


class MovieResolver:
    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        search: Optional[SearchResolver] = None,
        parser: Optional[DetailParser] = None,
    ) -> None:
        self.fetcher = fetcher or Fetcher()
        self.search = search or SearchResolver(self.fetcher)
        self.parser = parser or DetailParser()

    def resolve_candidates(self, query: str) -> List[Candidate]:
        if not isinstance(query, str) or not query.strip():
            raise InvalidArgsError("Movie name must be non-empty")
        return self.search.search(query)

    def fetch_detail(self, url: str) -> MovieRecord:
        if not isinstance(url, str) or not url.strip():
            raise InvalidArgsError("Movie URL must be non-empty")
        if not is_fetchable_url(url.strip()):
            raise InvalidArgsError(f"Movie URL must be an absolute http(s) URL: {url!r}")

        logger.info("Fetching detail page: {}", url)
        html = self.fetcher.fetch_text(url.strip())
        record = self.parser.parse(html)
        if not validate_record(record):
            raise ParseError(f"Detail record from {url} failed shape validation")
        return clean_record(record)

    def resolve(self, query: str) -> MovieRecord:
        candidates = self.resolve_candidates(query)
        if not candidates:
            raise NoResultsError(query.strip())

        best = select_best(candidates, query)
        logger.info('Selected "{}" -> {}', best.title, best.url)
        record = self.fetch_detail(best.url)
        logger.info('Resolved "{}" to "{}"', query, record.title)
        return record
