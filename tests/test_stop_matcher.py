"""Tests for matching a query against a route's stop list."""

from busfinder_mcp.matching.stop_matcher import (
    MatchTier,
    find_stop_index,
    match_stop,
    stop_in_sequences,
)


class TestExactMatch:
    """Tests for exact-tier matching."""

    def test_exact_beats_containment(self) -> None:
        """Test an exact match wins over a containment match."""
        assert find_stop_index(["Gabtoli", "Gabtoli Bus Stand"], "gabtoli") == 0

    def test_exact_later_in_list_beats_earlier_containment(self) -> None:
        """Test the exact tier scans the whole list before weaker tiers."""
        result = match_stop(["Gabtoli Bus Stand", "Gabtoli"], "gabtoli")

        assert result is not None
        assert result.index == 1
        assert result.tier == MatchTier.EXACT

    def test_exact_ignores_surface_differences(self) -> None:
        """Test case, dashes and punctuation do not prevent an exact match."""
        assert find_stop_index(["Farmgate", "Mirpur–10"], "mirpur-10") == 1
        assert find_stop_index(["Shahbag.", "Motijheel"], "  SHAHBAG ") == 0


class TestContainmentMatch:
    """Tests for containment-tier matching."""

    def test_stop_contains_query(self) -> None:
        """Test a partial query matches a longer stop name."""
        result = match_stop(["Farmgate", "Mirpur 10 Circle"], "mirpur 10")

        assert result is not None
        assert result.index == 1
        assert result.tier == MatchTier.CONTAINS

    def test_query_contains_stop(self) -> None:
        """Test a longer query matches a shorter stop name."""
        result = match_stop(["Shahbag", "Motijheel"], "Motijheel Bank Colony")

        assert result is not None
        assert result.index == 1
        assert result.tier == MatchTier.CONTAINS

    def test_containment_beats_word_subset(self) -> None:
        """Test a containment match later wins over a word match earlier."""
        result = match_stop(["Kazi Para Road", "Kazipara Bus Stop"], "kazipara")

        assert result is not None
        assert result.index == 1
        assert result.tier == MatchTier.CONTAINS


class TestWordSubsetMatch:
    """Tests for word-subset matching."""

    def test_words_in_any_order(self) -> None:
        """Test every query word overlapping some stop word is a match."""
        result = match_stop(["Mohakhali", "Jatrabari Chowrasta"], "chowrasta jatra")

        assert result is not None
        assert result.index == 1
        assert result.tier == MatchTier.WORD_SUBSET

    def test_separator_only_words_do_not_match(self) -> None:
        """Test " - " in a stop name does not make it match everything."""
        assert find_stop_index(["Gulistan - Motijheel"], "uttara") is None


class TestNoMatch:
    """Tests for queries that match nothing."""

    def test_unknown_stop(self) -> None:
        """Test an unrelated query is not found."""
        assert find_stop_index(["Gulistan", "Farmgate"], "Uttara") is None

    def test_empty_stops(self) -> None:
        """Test an empty stop list."""
        assert find_stop_index([], "Gulistan") is None

    def test_empty_query_only_matches_empty_stop(self) -> None:
        """Test an empty query matches only a stop that normalizes to empty."""
        assert find_stop_index(["Gulistan"], "   ") is None
        assert find_stop_index(["Gulistan", "..."], "") == 1


class TestStopInSequences:
    """Tests for checking several sequences at once."""

    def test_found_in_backward(self) -> None:
        """Test a stop only present in the second sequence."""
        assert stop_in_sequences([["Gulistan"], ["Sadarghat"]], "sadarghat") is True

    def test_none_sequences_skipped(self) -> None:
        """Test missing sequences are ignored."""
        assert stop_in_sequences([["Gulistan"], None], "gulistan") is True
        assert stop_in_sequences([["Gulistan"], None], "uttara") is False
