"""Stop matching, route connectivity and autocomplete ranking."""

from busfinder_mcp.matching.connectivity import can_travel, travel_direction, travel_sequences
from busfinder_mcp.matching.normalizers import (
    clean_stop_label,
    normalize_stop_name,
    split_stop_words,
)
from busfinder_mcp.matching.stop_matcher import (
    MatchTier,
    StopMatchResult,
    find_stop_index,
    match_stop,
    stop_in_sequences,
)
from busfinder_mcp.matching.suggestions import fuzzy_score, suggest

__all__ = [
    # Matchers
    "find_stop_index",
    "match_stop",
    "stop_in_sequences",
    "MatchTier",
    "StopMatchResult",
    # Connectivity
    "can_travel",
    "travel_direction",
    "travel_sequences",
    # Suggestions
    "fuzzy_score",
    "suggest",
    # Normalizers
    "normalize_stop_name",
    "split_stop_words",
    "clean_stop_label",
]
