"""Tests for the search history store."""

import asyncio
from pathlib import Path

import pytest

from busfinder_mcp.data.history_store import SearchHistoryStore


@pytest.fixture
def store(tmp_path: Path) -> SearchHistoryStore:
    """History store on a temporary database in a not-yet-created directory."""
    return SearchHistoryStore(tmp_path / "nested" / "history.db")


class TestRecordSearch:
    """Tests for saving searches."""

    @pytest.mark.asyncio
    async def test_record_and_list(self, store: SearchHistoryStore) -> None:
        """Test a recorded search is listed."""
        entry = await store.record_search("Gabtoli", "Gulistan")

        recent = await store.get_recent()
        assert len(recent) == 1
        assert recent[0].id == entry.id
        assert (recent[0].from_location, recent[0].to_location) == ("Gabtoli", "Gulistan")
        assert recent[0].timestamp > 0

    @pytest.mark.asyncio
    async def test_values_trimmed(self, store: SearchHistoryStore) -> None:
        """Test surrounding whitespace is not stored."""
        await store.record_search("  Gabtoli ", "Gulistan  ")

        recent = await store.get_recent()
        assert (recent[0].from_location, recent[0].to_location) == ("Gabtoli", "Gulistan")

    @pytest.mark.asyncio
    async def test_duplicate_pair_case_insensitive(self, store: SearchHistoryStore) -> None:
        """Test the same pair in another case refreshes instead of adding."""
        first = await store.record_search("Gabtoli", "Gulistan")
        second = await store.record_search("GABTOLI", " gulistan")

        recent = await store.get_recent()
        assert len(recent) == 1
        assert second.id == first.id
        assert second.timestamp > first.timestamp
        # Original spelling is kept
        assert recent[0].from_location == "Gabtoli"

    @pytest.mark.asyncio
    async def test_concurrent_duplicates_saved_once(self, store: SearchHistoryStore) -> None:
        """Test the same pair recorded concurrently leaves a single entry."""
        await asyncio.gather(
            store.record_search("Uttara", "Motijheel"),
            store.record_search("uttara", "MOTIJHEEL"),
            store.record_search(" Uttara ", "motijheel"),
        )

        recent = await store.get_recent()
        assert len(recent) == 1
        assert recent[0].from_location.casefold() == "uttara"
        assert recent[0].to_location.casefold() == "motijheel"

    @pytest.mark.asyncio
    async def test_concurrent_recordings_respect_limit(self, tmp_path: Path) -> None:
        """Test pruning still caps history when many searches land at once."""
        store = SearchHistoryStore(tmp_path / "history.db", limit=3)

        await asyncio.gather(*(store.record_search(f"Stop {i}", "Gulistan") for i in range(8)))

        assert len(await store.get_recent(limit=50)) == 3

    @pytest.mark.asyncio
    async def test_reverse_pair_is_distinct(self, store: SearchHistoryStore) -> None:
        """Test (to, from) is a different search from (from, to)."""
        await store.record_search("Gabtoli", "Gulistan")
        await store.record_search("Gulistan", "Gabtoli")

        assert len(await store.get_recent()) == 2

    @pytest.mark.asyncio
    async def test_most_recent_first(self, store: SearchHistoryStore) -> None:
        """Test ordering and that re-recording moves a search to the top."""
        await store.record_search("Gabtoli", "Gulistan")
        await store.record_search("Uttara", "Motijheel")
        await store.record_search("Farmgate", "Shahbag")
        await store.record_search("gabtoli", "gulistan")

        recent = await store.get_recent()
        assert [entry.from_location for entry in recent] == ["Gabtoli", "Farmgate", "Uttara"]

    @pytest.mark.asyncio
    async def test_capped_at_limit(self, store: SearchHistoryStore) -> None:
        """Test only the newest ten searches are kept."""
        for i in range(12):
            await store.record_search(f"Stop {i}", "Gulistan")

        recent = await store.get_recent(limit=50)
        assert len(recent) == 10
        assert recent[0].from_location == "Stop 11"
        assert recent[-1].from_location == "Stop 2"

    @pytest.mark.asyncio
    async def test_custom_limit(self, tmp_path: Path) -> None:
        """Test a smaller cap."""
        store = SearchHistoryStore(tmp_path / "history.db", limit=2)
        for stop in ("Gabtoli", "Uttara", "Farmgate"):
            await store.record_search(stop, "Gulistan")

        assert [entry.from_location for entry in await store.get_recent()] == [
            "Farmgate",
            "Uttara",
        ]


class TestDeleteAndClear:
    """Tests for removing history."""

    @pytest.mark.asyncio
    async def test_delete(self, store: SearchHistoryStore) -> None:
        """Test deleting one entry leaves the others."""
        first = await store.record_search("Gabtoli", "Gulistan")
        await store.record_search("Uttara", "Motijheel")

        await store.delete(first)

        recent = await store.get_recent()
        assert [entry.from_location for entry in recent] == ["Uttara"]

    @pytest.mark.asyncio
    async def test_clear_all(self, store: SearchHistoryStore) -> None:
        """Test clearing every entry."""
        await store.record_search("Gabtoli", "Gulistan")
        await store.record_search("Uttara", "Motijheel")

        await store.clear_all()

        assert await store.get_recent() == []

    @pytest.mark.asyncio
    async def test_empty_store(self, store: SearchHistoryStore) -> None:
        """Test reading before anything is saved."""
        assert await store.get_recent() == []
