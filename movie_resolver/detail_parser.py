from __future__ import annotations

"""
Detail-page extraction.

Each of the seven record fields owns a prioritized table of ExtractionRule
objects. Scalar fields take the first rule whose match survives cleaning
and the field's shape check; list fields (genres, cast) take *all* matches
of the first rule that yields at least one, de-duplicated. When a table is
exhausted the field falls back to its sentinel, except for the title,
whose absence makes the whole page unusable (ParseError).

Rule order inside a table is part of the contract: tests pin it, and
adding a rule means choosing its priority explicitly.
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Pattern

from loguru import logger

from .config import (
    NO_POSTER,
    NO_RATING,
    NO_SUMMARY,
    SUMMARY_BOILERPLATE,
    SUMMARY_MAX_CHARS,
    SUMMARY_MIN_CHARS,
    TITLE_SUFFIXES,
    UNKNOWN_ACTOR,
    UNKNOWN_GENRE,
    UNKNOWN_TITLE,
    UNKNOWN_YEAR,
    MovieRecord,
)
from .errors import ParseError
from .normalize import basic_clean, clean_whitespace, strip_patterns, truncate, unique_nonempty
from .utils.urls import absolute_url, is_absolute_http, strip_query

_YEAR_RE = re.compile(r"\d{4}")
_RATING_RE = re.compile(r"\d+\.\d+")


@dataclass(frozen=True)
class ExtractionRule:
    """One named pattern for one field; group 1 carries the raw value."""

    name: str
    field: str
    pattern: Pattern[str]

    def first(self, html: str) -> Optional[str]:
        m = self.pattern.search(html)
        return m.group(1) if m else None

    def all(self, html: str) -> List[str]:
        return [m.group(1) for m in self.pattern.finditer(html)]


def _rule(name: str, field_name: str, pattern: str) -> ExtractionRule:
    return ExtractionRule(name=name, field=field_name, pattern=re.compile(pattern))


# ---------------------------------------------------------------------------
# Rule tables (highest priority first)
# ---------------------------------------------------------------------------

TITLE_RULES: List[ExtractionRule] = [
    _rule("schema_heading", "title",
          r'<h1[^>]*>(?:(?!</h1>)[\s\S])*?<span[^>]*property="v:itemreviewed"[^>]*>([^<]+)</span>'),
    _rule("heading_span", "title", r"<h1[^>]*>(?:(?!</h1>)[\s\S])*?<span[^>]*>([^<]+)</span>"),
    _rule("page_title", "title", r"<title[^>]*>([^<]+)</title>"),
    _rule("bare_heading", "title", r"<h1[^>]*>([^<]+)</h1>"),
]

YEAR_RULES: List[ExtractionRule] = [
    _rule("release_date_attr", "year",
          r'<span(?=[^>]*property="v:initialReleaseDate")[^>]*content="(\d{4})[^"]*"'),
    _rule("year_span", "year", r'<span[^>]*class="year"[^>]*>\s*\((\d{4})\)\s*</span>'),
    _rule("release_label", "year", r"上映日期[^>]*>[\s\S]*?(\d{4})"),
    _rule("year_label", "year", r"年份[^>]*>[\s\S]*?(\d{4})"),
    _rule("parenthesized_year", "year", r"\((\d{4})\)"),
]

RATING_RULES: List[ExtractionRule] = [
    _rule("schema_average", "rating",
          r'<strong(?=[^>]*property="v:average")[^>]*class="[^"]*rating_num[^"]*"[^>]*>([^<]+)</strong>'),
    _rule("schema_average_span", "rating", r'<span[^>]*property="v:average"[^>]*>([^<]+)</span>'),
    _rule("rating_block", "rating",
          r'<div[^>]*class="rating_self[^"]*"[^>]*>[\s\S]*?<strong[^>]*>([^<]+)</strong>'),
    _rule("rating_label", "rating", r"评分[\s\S]*?(\d+\.\d+)"),
]

GENRE_RULES: List[ExtractionRule] = [
    _rule("schema_genre", "genres", r'<span[^>]*property="v:genre"[^>]*>([^<]+)</span>'),
    _rule("genre_label", "genres", r"类型[^>]*>[\s\S]*?<span[^>]*>([^<]+)</span>"),
    _rule("genre_class", "genres", r'class="[^"]*genre[^"]*"[^>]*>([^<]+)<'),
]

CAST_RULES: List[ExtractionRule] = [
    _rule("schema_starring", "cast", r'<a[^>]*rel="v:starring"[^>]*>([^<]+)</a>'),
    _rule("actor_block", "cast", r'<span[^>]*class="actor"[^>]*>[\s\S]*?<a[^>]*>([^<]+)</a>'),
    _rule("cast_label", "cast", r"主演[^>]*>[\s\S]*?<a[^>]*>([^<]+)</a>"),
]

POSTER_RULES: List[ExtractionRule] = [
    _rule("poster_link", "poster", r'<a[^>]*class="nbgnbg"[^>]*>[\s\S]*?<img[^>]*src="([^"]+)"'),
    _rule("schema_image", "poster", r'<img(?=[^>]*rel="v:image")[^>]*src="([^"]+)"'),
    _rule("mainpic", "poster", r'<div[^>]*id="mainpic"[^>]*>[\s\S]*?<img[^>]*src="([^"]+)"'),
    _rule("poster_class", "poster", r'<img(?=[^>]*class="[^"]*poster[^"]*")[^>]*src="([^"]+)"'),
]

SUMMARY_RULES: List[ExtractionRule] = [
    _rule("schema_summary", "summary", r'<span[^>]*property="v:summary"[^>]*>([\s\S]*?)</span>'),
    _rule("report_hidden", "summary",
          r'<div(?=[^>]*id="link-report")[^>]*>[\s\S]*?<span[^>]*class="all hidden"[^>]*>([\s\S]*?)</span>'),
    _rule("report_span", "summary",
          r'<div(?=[^>]*id="link-report")[^>]*>[\s\S]*?<span[^>]*>([\s\S]*?)</span>'),
    _rule("synopsis_label", "summary", r"剧情简介[\s\S]*?<div[^>]*>([\s\S]*?)</div>"),
]


# ---------------------------------------------------------------------------
# Per-field cleaning / shape checks
# ---------------------------------------------------------------------------


def _clean_title(raw: str) -> str:
    return clean_whitespace(strip_patterns(basic_clean(raw), TITLE_SUFFIXES))


def _clean_poster(raw: str) -> str:
    return absolute_url(strip_query(basic_clean(raw)))


def _clean_summary(raw: str) -> str:
    return clean_whitespace(strip_patterns(basic_clean(raw), SUMMARY_BOILERPLATE))


@dataclass
class FieldSpec:
    rules: List[ExtractionRule]
    clean: Callable[[str], str] = basic_clean
    accept: Callable[[str], bool] = bool
    finish: Callable[[str], str] = lambda v: v
    multi: bool = False

    def apply(self, rule: ExtractionRule, html: str) -> Optional[str]:
        """What `rule` alone yields for this field (scalar fields)."""
        raw = rule.first(html)
        if raw is None:
            return None
        value = self.clean(raw)
        if not value or not self.accept(value):
            return None
        return self.finish(value)

    def apply_all(self, rule: ExtractionRule, html: str) -> List[str]:
        """What `rule` alone yields for this field (list fields)."""
        return unique_nonempty(rule.all(html))


FIELD_SPECS: Dict[str, FieldSpec] = {
    "title": FieldSpec(TITLE_RULES, clean=_clean_title),
    "year": FieldSpec(YEAR_RULES, clean=lambda s: s.strip(), accept=lambda v: bool(_YEAR_RE.fullmatch(v))),
    "rating": FieldSpec(RATING_RULES, clean=basic_clean, accept=lambda v: bool(_RATING_RE.fullmatch(v))),
    "genres": FieldSpec(GENRE_RULES, multi=True),
    "cast": FieldSpec(CAST_RULES, multi=True),
    "poster": FieldSpec(POSTER_RULES, clean=_clean_poster, accept=is_absolute_http),
    "summary": FieldSpec(
        SUMMARY_RULES,
        clean=_clean_summary,
        accept=lambda v: len(v) > SUMMARY_MIN_CHARS,
        finish=lambda v: truncate(v, SUMMARY_MAX_CHARS),
    ),
}

SENTINELS: Dict[str, object] = {
    "title": UNKNOWN_TITLE,
    "year": UNKNOWN_YEAR,
    "rating": NO_RATING,
    "genres": [UNKNOWN_GENRE],
    "cast": [UNKNOWN_ACTOR],
    "poster": NO_POSTER,
    "summary": NO_SUMMARY,
}


class DetailParser:
    """Detail-page HTML -> MovieRecord using the rule tables above."""

    def __init__(self, specs: Optional[Dict[str, FieldSpec]] = None) -> None:
        self.specs = specs or FIELD_SPECS

    def extract_scalar(self, name: str, html: str) -> Optional[str]:
        spec = self.specs[name]
        for rule in spec.rules:
            value = spec.apply(rule, html)
            if value is not None:
                logger.debug("{}: matched rule '{}'", name, rule.name)
                return value
        return None

    def extract_list(self, name: str, html: str) -> List[str]:
        spec = self.specs[name]
        for rule in spec.rules:
            values = spec.apply_all(rule, html)
            if values:
                logger.debug("{}: rule '{}' matched {} values", name, rule.name, len(values))
                return values
        return []

    def extract_field(self, name: str, html: str):
        """Field value after the whole chain, sentinel included."""
        if self.specs[name].multi:
            values = self.extract_list(name, html)
            if not values:
                logger.warning("No {} found; using sentinel", name)
                return list(SENTINELS[name])  # type: ignore[arg-type]
            return values
        value = self.extract_scalar(name, html)
        if value is None:
            logger.warning("No {} found; using sentinel", name)
            return SENTINELS[name]
        return value

    def parse(self, html: str) -> MovieRecord:
        html = html or ""
        title = self.extract_scalar("title", html)
        if title is None:
            raise ParseError("Could not extract the movie title from the detail page")

        record = MovieRecord(
            title=title,
            year=self.extract_field("year", html),
            rating=self.extract_field("rating", html),
            genres=self.extract_field("genres", html),
            cast=self.extract_field("cast", html),
            poster=self.extract_field("poster", html),
            summary=self.extract_field("summary", html),
        )
        logger.info('Parsed detail page: "{}" ({})', record.title, record.year)
        return record


def parse_detail(html: str) -> MovieRecord:
    return DetailParser().parse(html)
