"""Fuzzy ranking of stop names for autocomplete."""

import re
from collections.abc import Sequence

EXACT_MATCH_SCORE = 1000
PREFIX_BONUS = 500
CONTAINS_BONUS = 300
WORD_PREFIX_BONUS = 200
WORD_CONTAINS_BONUS = 50
SEQUENCE_STEP_BONUS = 10
FULL_SEQUENCE_BONUS = 100
LENGTH_PENALTY_PER_CHAR = 2

DEFAULT_SUGGESTION_LIMIT = 10

CANDIDATE_WORD_SEPARATORS = re.compile(r"[\s\-,./()]")


def _sequence_score(query: str, candidate: str) -> tuple[int, bool]:
    """Score in-order character matches, rewarding consecutive runs.

    Returns (score, whether every query character was found in order).
    """
    score = 0
    query_index = 0
    run_length = 0

    for char in candidate:
        if query_index >= len(query):
            break
        if char == query[query_index]:
            run_length += 1
            score += run_length * SEQUENCE_STEP_BONUS
            query_index += 1
        else:
            run_length = 0

    return score, query_index == len(query)


def fuzzy_score(query: str, candidate: str) -> int:
    """Compute the relevance of candidate for a partial query.

    Both arguments are expected lowercase, with the query trimmed.

    Scoring (higher is better):
    - Exact match: 1000, nothing else is added
    - Candidate starts with query: +500
    - Candidate contains query: +300
    - Per word of candidate: +200 if it starts with query, else +50 if it contains it
    - In-order character scan: +10 x current run length per matched character
    - All query characters found in order: +100
    - -2 per character candidate is longer than query

    The result is never negative.

    Examples:
        fuzzy_score("gab", "gabtoli") -> 1152
        fuzzy_score("gab", "gabtoli bus stand") -> 1132
        fuzzy_score("gab", "mohakhali") -> 0
    """
    if candidate == query:
        return EXACT_MATCH_SCORE

    score = 0

    if candidate.startswith(query):
        score += PREFIX_BONUS
    if query in candidate:
        score += CONTAINS_BONUS

    for word in CANDIDATE_WORD_SEPARATORS.split(candidate):
        if word.startswith(query):
            score += WORD_PREFIX_BONUS
        elif query in word:
            score += WORD_CONTAINS_BONUS

    sequence_score, all_found = _sequence_score(query, candidate)
    score += sequence_score
    if all_found:
        score += FULL_SEQUENCE_BONUS

    extra_length = len(candidate) - len(query)
    if extra_length > 0:
        score -= extra_length * LENGTH_PENALTY_PER_CHAR

    return max(score, 0)


def suggest(
    query: str,
    candidates: Sequence[str],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> list[str]:
    """Rank candidate stop names against a partial query.

    Args:
        query: What the user has typed so far
        candidates: Flattened, deduplicated stop names
        limit: Maximum number of suggestions

    Returns:
        Candidates with a positive score, best first. Ties keep input order.
    """
    if not query.strip() or not candidates or limit <= 0:
        return []

    query_normalized = query.strip().lower()

    scored: list[tuple[str, int]] = []
    for candidate in candidates:
        score = fuzzy_score(query_normalized, candidate.lower())
        if score > 0:
            scored.append((candidate, score))

    # sorted() is stable, so equal scores stay in input order
    scored = sorted(scored, key=lambda item: -item[1])
    return [candidate for candidate, _ in scored[:limit]]
