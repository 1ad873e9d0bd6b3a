"""Fuzzy ranking for command search and prefix lookup for ghost text"""

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional


@dataclass
class MatchResult:
    record: Any
    score: float


def fuzzy_score(candidate: str, query: str) -> Optional[float]:
    """
    Score `candidate` against `query` with ordered-subsequence matching

    Each query character is looked up left to right from just after the
    previous match. Per matched character:
    - +10 base
    - +5 * run length when it sits exactly where the scan started, so
      consecutive characters snowball; a gap resets the run
    - +20 when it lands on the first character of the candidate
    - -0.1 * its index in the candidate

    Returns None when any query character cannot be found (no match),
    which is different from a low score.
    """
    if len(query) > len(candidate):
        return None
    if not query:
        return 1.0

    candidate = candidate.lower()
    query = query.lower()

    score = 0.0
    position = 0
    run_length = 0

    for char in query:
        index = candidate.find(char, position)
        if index < 0:
            return None

        score += 10.0
        if index == position:
            run_length += 1
            score += run_length * 5.0
        else:
            run_length = 0
        if index == 0:
            score += 20.0
        score -= index * 0.1

        position = index + 1

    return score


def rank(records: Iterable[Any], query: str, key=lambda record: record.text) -> List[MatchResult]:
    """Return matching records by descending score, ties kept in input order"""
    results = []
    for record in records:
        score = fuzzy_score(key(record), query)
        if score is not None:
            results.append(MatchResult(record, score))
    # list.sort is stable, so equal scores keep their recency order
    results.sort(key=lambda result: -result.score)
    return results


def suggest(query: str, texts: Iterable[str]) -> Optional[str]:
    """Return the first text, in the given order, that starts with `query`

    Plain case-insensitive prefix search: ghost text may only ever propose
    a literal continuation of what was typed.
    """
    if not query:
        return None
    query = query.lower()
    for text in texts:
        if text.lower().startswith(query):
            return text
    return None
