from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum

from busfinder_mcp.matching.normalizers import normalize_stop_name, split_stop_words


class MatchTier(str, Enum):
    """How a query matched a stop, strongest first."""

    EXACT = "exact"  # Normalized names are equal
    CONTAINS = "contains"  # One normalized name contains the other
    WORD_SUBSET = "word_subset"  # Every query word overlaps some stop word


@dataclass(frozen=True)
class StopMatchResult:
    """Position of a matched stop within a stop sequence."""

    index: int
    tier: MatchTier


def _contains_match(stop_normalized: str, query_normalized: str) -> bool:
    return stop_normalized in query_normalized or query_normalized in stop_normalized


def _word_subset_match(stop_normalized: str, query_normalized: str) -> bool:
    stop_words = split_stop_words(stop_normalized)
    query_words = split_stop_words(query_normalized)
    if not stop_words or not query_words:
        return False

    return all(
        any(query_word in stop_word or stop_word in query_word for stop_word in stop_words)
        for query_word in query_words
    )


def match_stop(stops: Sequence[str], query: str) -> StopMatchResult | None:
    """Find where a query matches in an ordered stop list.

    Tiers are tried in order (exact, containment, word-subset) and each tier
    scans the whole list before the next one starts, so an exact match later
    in the list beats a containment match earlier on. Within a tier the
    lowest index wins.

    Args:
        stops: Ordered stop names of one route direction
        query: Stop name typed by the user (normalized here)

    Returns:
        StopMatchResult, or None if no tier matches any stop
    """
    if not stops:
        return None

    query_normalized = normalize_stop_name(query)
    stops_normalized = [normalize_stop_name(stop) for stop in stops]

    for index, stop_normalized in enumerate(stops_normalized):
        if stop_normalized == query_normalized:
            return StopMatchResult(index=index, tier=MatchTier.EXACT)

    # An empty query only ever matches an empty stop name
    if not query_normalized:
        return None

    for index, stop_normalized in enumerate(stops_normalized):
        if stop_normalized and _contains_match(stop_normalized, query_normalized):
            return StopMatchResult(index=index, tier=MatchTier.CONTAINS)

    for index, stop_normalized in enumerate(stops_normalized):
        if stop_normalized and _word_subset_match(stop_normalized, query_normalized):
            return StopMatchResult(index=index, tier=MatchTier.WORD_SUBSET)

    return None


def find_stop_index(stops: Sequence[str], query: str) -> int | None:
    """Return the index of the stop matching query, or None if not found."""
    result = match_stop(stops, query)
    return result.index if result else None


def stop_in_sequences(sequences: Iterable[Sequence[str] | None], query: str) -> bool:
    """Check whether any of the given stop sequences serves the queried stop."""
    return any(
        find_stop_index(stops, query) is not None for stops in sequences if stops
    )
