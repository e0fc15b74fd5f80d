import json

from movie_resolver import cli
from movie_resolver.config import MovieRecord
from movie_resolver.errors import NetworkError, NoResultsError


class DummyResolver:
    """Stand-in for MovieResolver; behaviour chosen per test via `outcome`."""

    outcome = None

    def __init__(self, fetcher):
        self.fetcher = fetcher

    def resolve(self, query):
        if isinstance(DummyResolver.outcome, Exception):
            raise DummyResolver.outcome
        return DummyResolver.outcome


def test_json_output(monkeypatch, capsys):
    DummyResolver.outcome = MovieRecord(title="阳光普照", year="2019", rating="8.9")
    monkeypatch.setattr(cli, "MovieResolver", DummyResolver)

    assert cli.main(["--movie", "阳光普照", "--format", "json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["title"] == "阳光普照"
    assert data["year"] == "2019"


def test_text_output(monkeypatch, capsys):
    DummyResolver.outcome = MovieRecord(title="阳光普照", genres=["剧情", "家庭"])
    monkeypatch.setattr(cli, "MovieResolver", DummyResolver)

    assert cli.main(["-m", "阳光普照"]) == 0
    out = capsys.readouterr().out
    assert "Title:   阳光普照" in out
    assert "剧情, 家庭" in out


def test_missing_movie_exits_2(capsys):
    assert cli.main([]) == 2
    assert "--movie" in capsys.readouterr().err


def test_invalid_timeout_exits_2():
    assert cli.main(["-m", "x", "--timeout-ms", "0"]) == 2


def test_resolver_errors_map_to_exit_codes(monkeypatch):
    monkeypatch.setattr(cli, "MovieResolver", DummyResolver)

    DummyResolver.outcome = NoResultsError("x")
    assert cli.main(["-m", "x"]) == 3

    DummyResolver.outcome = NetworkError("down")
    assert cli.main(["-m", "x"]) == 4
