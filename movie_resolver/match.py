from __future__ import annotations

from typing import List, Sequence, Tuple

from loguru import logger

from .errors import NoResultsError
from .normalize import clean_whitespace
from .pipeline_types import Candidate


EXACT_SCORE = 1.0
CONTAINS_SCORE = 0.8


def normalize_title(text: str) -> str:
    return clean_whitespace(text).lower()


def levenshtein(a: str, b: str) -> int:
    """Classic unit-cost insert / delete / substitute distance."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    if len(a) < len(b):
        a, b = b, a

    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        cur = [i] + [0] * len(b)
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            cur[j] = min(
                prev[j] + 1,         # deletion
                cur[j - 1] + 1,      # insertion
                prev[j - 1] + cost,  # substitution
            )
        prev = cur
    return prev[len(b)]


def similarity(a: str, b: str) -> float:
    """
    Three-tier score in [0, 1] over already-normalised strings:
      exact -> 1.0, containment either way -> 0.8,
      otherwise 1 - levenshtein / max length.
    """
    if a == b:
        return EXACT_SCORE
    if a in b or b in a:
        return CONTAINS_SCORE
    longest = max(len(a), len(b))
    if longest == 0:
        return EXACT_SCORE
    return 1.0 - levenshtein(a, b) / float(longest)


def score_candidates(candidates: Sequence[Candidate], query: str) -> List[Tuple[Candidate, float]]:
    """Score each candidate against `query`; sorted desc, ties keep input order."""
    q = normalize_title(query)
    scored = [(c, similarity(q, normalize_title(c.title))) for c in candidates]
    # sorted() is stable, so equal scores stay in source order
    return sorted(scored, key=lambda cs: cs[1], reverse=True)


def select_best(candidates: Sequence[Candidate], query: str) -> Candidate:
    if not candidates:
        raise NoResultsError(query)
    if len(candidates) == 1:
        return candidates[0]

    ranked = score_candidates(candidates, query)
    best, score = ranked[0]
    logger.info('Best match: "{}" (similarity {:.2f})', best.title, score)
    return best
