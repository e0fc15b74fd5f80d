import pytest

from movie_resolver.errors import NoResultsError
from movie_resolver.match import levenshtein, score_candidates, select_best, similarity
from movie_resolver.pipeline_types import Candidate


def _c(i, title):
    return Candidate(id=str(i), url=f"https://movie.douban.com/subject/{i}/", title=title)


def test_levenshtein_classic_cases():
    assert levenshtein("kitten", "sitting") == 3
    assert levenshtein("", "abc") == 3
    assert levenshtein("abc", "abc") == 0
    assert levenshtein("flaw", "lawn") == 2


def test_similarity_tiers():
    assert similarity("", "") == 1.0
    assert similarity("abc", "abc") == 1.0
    assert similarity("abc", "abd") == pytest.approx(1 - 1 / 3)
    assert similarity("matrix", "the matrix") == 0.8


def test_similarity_containment_is_symmetric():
    assert similarity("阳光普照", "阳光普照 a sun") == similarity("阳光普照 a sun", "阳光普照")


def test_select_best_singleton_returned_without_scoring():
    only = _c(1, "Completely Different")
    assert select_best([only], "阳光普照") is only


def test_select_best_empty_raises_no_results():
    with pytest.raises(NoResultsError):
        select_best([], "anything")


def test_select_best_is_case_and_whitespace_insensitive():
    cands = [_c(1, "The Matrix Reloaded"), _c(2, "The  MATRIX")]
    assert select_best(cands, "the matrix").id == "2"


def test_select_best_ties_keep_source_order():
    cands = [_c(1, "abx"), _c(2, "aby"), _c(3, "zzz")]
    assert select_best(cands, "abz").id == "1"


def test_score_candidates_sorted_descending():
    cands = [_c(1, "zzz"), _c(2, "阳光普照"), _c(3, "阳光普照 续集")]
    ranked = score_candidates(cands, "阳光普照")
    assert [c.id for c, _ in ranked] == ["2", "3", "1"]
    scores = [s for _, s in ranked]
    assert scores == sorted(scores, reverse=True)
