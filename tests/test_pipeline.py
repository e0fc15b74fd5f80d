import httpx
import pytest

from movie_resolver.errors import InvalidArgsError, NetworkError, NoResultsError, ParseError
from movie_resolver.pipeline import MovieResolver
from movie_resolver.pipeline_types import Candidate

from conftest import DETAIL_HTML, make_fetcher


def _catalog(suggest_payload, detail=DETAIL_HTML, page="<html></html>"):
    def handler(request):
        path = request.url.path
        if path == "/j/subject_suggest":
            return httpx.Response(200, json=suggest_payload)
        if path == "/search":
            return httpx.Response(200, text=page)
        if path.startswith("/subject/"):
            return httpx.Response(200, text=detail)
        return httpx.Response(404)

    return handler


def test_resolve_candidates_end_to_end():
    resolver = MovieResolver(make_fetcher(_catalog([{"title": "阳光普照", "url": "/subject/30329536/"}])))
    out = resolver.resolve_candidates("阳光普照")
    assert out == [
        Candidate(id="30329536", url="https://movie.douban.com/subject/30329536/", title="阳光普照")
    ]


def test_fetch_detail_end_to_end():
    resolver = MovieResolver(make_fetcher(_catalog([])))
    record = resolver.fetch_detail("https://movie.douban.com/subject/30329536/")
    assert record.year == "2019"
    assert record.rating == "8.9"
    assert record.title == "阳光普照"


def test_resolve_picks_best_match_and_parses():
    payload = [
        {"title": "阳光普照的日子", "url": "/subject/1/"},
        {"title": "阳光普照", "url": "/subject/30329536/"},
    ]
    requested = []
    base = _catalog(payload)

    def handler(request):
        requested.append(request.url.path)
        return base(request)

    record = MovieResolver(make_fetcher(handler)).resolve("阳光普照")
    assert record.title == "阳光普照"
    assert requested[-1] == "/subject/30329536/"


def test_resolve_without_candidates_raises_no_results():
    resolver = MovieResolver(make_fetcher(_catalog([])))
    with pytest.raises(NoResultsError):
        resolver.resolve("不存在的电影")


def test_blank_inputs_are_invalid_args():
    resolver = MovieResolver(make_fetcher(_catalog([])))
    with pytest.raises(InvalidArgsError):
        resolver.resolve_candidates("  ")
    with pytest.raises(InvalidArgsError):
        resolver.fetch_detail("")


def test_fetch_detail_without_title_is_parse_error():
    resolver = MovieResolver(make_fetcher(_catalog([], detail="<html><body>blocked</body></html>")))
    with pytest.raises(ParseError):
        resolver.fetch_detail("https://movie.douban.com/subject/1/")


def test_fetch_detail_network_failure():
    resolver = MovieResolver(make_fetcher(lambda r: httpx.Response(502), max_retries=1))
    with pytest.raises(NetworkError):
        resolver.fetch_detail("https://movie.douban.com/subject/1/")


def test_fetch_detail_rejects_unusable_url_without_fetching():
    calls = []

    def handler(request):
        calls.append(1)
        return httpx.Response(200, text=DETAIL_HTML)

    resolver = MovieResolver(make_fetcher(handler))
    for url in ("ftp://movie.douban.com/subject/1/", "https://movie.douban.com:99999/subject/1/"):
        with pytest.raises(InvalidArgsError):
            resolver.fetch_detail(url)
    assert calls == []
    assert resolver.fetcher.sleeps == []
