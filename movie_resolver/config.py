from __future__ import annotations

import os
from typing import Dict, List, Optional

from loguru import logger
from pydantic import BaseModel, Field


APP_NAME = "movie-resolver"
APP_VERSION = "2.0.0"


# ---------------------------
# Catalog endpoints
# ---------------------------

CATALOG_BASE_URL = "https://movie.douban.com"
SUGGEST_URL = f"{CATALOG_BASE_URL}/j/subject_suggest"
SEARCH_PAGE_URL = f"{CATALOG_BASE_URL}/search"


# ---------------------------
# HTTP defaults
# ---------------------------

DEFAULT_TIMEOUT_MS = 10_000
DEFAULT_MAX_RETRIES = 3
DEFAULT_RETRY_BASE_DELAY_MS = 1_000

HTTP_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

BROWSER_HEADERS: Dict[str, str] = {
    "User-Agent": HTTP_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "zh-CN,zh;q=0.9,en;q=0.8",
    "Accept-Encoding": "gzip, deflate",
    "DNT": "1",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}

ENV_TIMEOUT_MS = "MOVIE_RESOLVER_TIMEOUT_MS"
ENV_MAX_RETRIES = "MOVIE_RESOLVER_MAX_RETRIES"
ENV_RETRY_DELAY_MS = "MOVIE_RESOLVER_RETRY_DELAY_MS"


# ---------------------------
# Detail page policy
# ---------------------------

SUMMARY_MAX_CHARS = 500
SUMMARY_MIN_CHARS = 10
TRUNCATE_SUFFIX = "..."

UNKNOWN_TITLE = "unknown title"
UNKNOWN_YEAR = "unknown"
NO_RATING = "no rating"
UNKNOWN_GENRE = "unknown genre"
UNKNOWN_ACTOR = "unknown actor"
NO_POSTER = "no poster"
NO_SUMMARY = "no summary"

# Site branding appended to page titles
TITLE_SUFFIXES: List[str] = [
    r"\s*\(豆瓣\)$",
    r"\s*-\s*豆瓣电影$",
]

# Copyright marker and "show more" link texts around synopses
SUMMARY_BOILERPLATE: List[str] = [
    r"^\s*©豆瓣\s*",
    r"\s*\(展开全部\)\s*$",
    r"\s*显示全部\s*$",
]


# ---------------------------
# Image proxy
# ---------------------------

IMAGE_REFERER = f"{CATALOG_BASE_URL}/"
IMAGE_CACHE_SECONDS = 86_400


# ---------------------------
# Explicit fetch configuration
# ---------------------------

def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer {}={!r}; using {}", name, raw, default)
        return default


class FetcherConfig(BaseModel):
    """
    Timeout / retry settings for one Fetcher.

    Built once by the caller and handed to the Fetcher; nothing in the
    resolution pipeline reads the process environment.
    """

    timeout_ms: int = Field(DEFAULT_TIMEOUT_MS, gt=0)
    max_retries: int = Field(DEFAULT_MAX_RETRIES, ge=0)
    retry_base_delay_ms: int = Field(DEFAULT_RETRY_BASE_DELAY_MS, ge=0)
    headers: Dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls) -> "FetcherConfig":
        return cls(
            timeout_ms=_env_int(ENV_TIMEOUT_MS, DEFAULT_TIMEOUT_MS),
            max_retries=_env_int(ENV_MAX_RETRIES, DEFAULT_MAX_RETRIES),
            retry_base_delay_ms=_env_int(ENV_RETRY_DELAY_MS, DEFAULT_RETRY_BASE_DELAY_MS),
        )


# ---------------------------
# Pydantic models shared around the app
# ---------------------------

class MovieRecord(BaseModel):
    """
    Canonical schema for one resolved movie.
    This is what the CLI prints and what the API returns under `data`.
    """

    title: str
    year: str = UNKNOWN_YEAR
    rating: str = NO_RATING
    genres: List[str] = Field(default_factory=lambda: [UNKNOWN_GENRE])
    cast: List[str] = Field(default_factory=lambda: [UNKNOWN_ACTOR])
    poster: str = NO_POSTER
    summary: str = NO_SUMMARY


class SearchRequest(BaseModel):
    """
    Request body for POST /api/search.
    """

    movieName: str


class SearchResponse(BaseModel):
    """
    Response body for POST /api/search.
    """

    success: bool
    data: Optional[MovieRecord] = None
    error: Optional[str] = None


class CandidateItem(BaseModel):
    id: str
    url: str
    title: str


class CandidatesResponse(BaseModel):
    """
    Response body for GET /api/candidates.
    """

    query: str
    candidates: List[CandidateItem]


class HealthResponse(BaseModel):
    """
    Response body for GET /health.
    """

    status: str
    version: str = APP_VERSION
