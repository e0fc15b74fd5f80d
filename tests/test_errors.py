from movie_resolver.errors import (
    ErrorKind,
    InvalidArgsError,
    NetworkError,
    NoResultsError,
    ParseError,
    ResolverError,
)


def test_status_mapping():
    assert NoResultsError("x").http_status == 404
    assert InvalidArgsError("x").http_status == 400
    assert NetworkError("x").http_status == 503
    assert ParseError("x").http_status == 502


def test_exit_codes_are_distinct():
    codes = {cls("x").exit_code for cls in (InvalidArgsError, NetworkError, ParseError, NoResultsError)}
    assert len(codes) == 4
    assert 0 not in codes


def test_cause_and_details():
    cause = TimeoutError("slow")
    err = NetworkError("fetch failed", cause=cause)
    assert isinstance(err, ResolverError)
    assert err.kind is ErrorKind.NETWORK_ERROR
    assert err.details() == {"type": "NETWORK_ERROR", "message": "fetch failed", "cause": "slow"}
    assert "slow" in str(err)


def test_no_results_mentions_query():
    err = NoResultsError("阳光普照")
    assert err.query == "阳光普照"
    assert "阳光普照" in err.message
