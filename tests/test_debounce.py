"""Tests for debouncing and suggestion feeds."""

import asyncio

import pytest

from busfinder_mcp.services.debounce import Debouncer, SuggestionFeed


class TestDebouncer:
    """Tests for the debouncer."""

    @pytest.mark.asyncio
    async def test_only_last_callback_runs(self) -> None:
        """Test rapid submissions collapse into the last one."""
        debouncer = Debouncer(delay=0.01)
        calls: list[str] = []

        for text in ("g", "ga", "gab"):
            debouncer.submit(lambda text=text: calls.append(text))
        await debouncer.wait()

        assert calls == ["gab"]
        assert debouncer.pending is False

    @pytest.mark.asyncio
    async def test_callback_waits_for_delay(self) -> None:
        """Test nothing runs before the quiet period ends."""
        debouncer = Debouncer(delay=0.05)
        calls: list[str] = []

        debouncer.submit(lambda: calls.append("gab"))
        await asyncio.sleep(0)

        assert calls == []
        assert debouncer.pending is True
        await debouncer.wait()
        assert calls == ["gab"]

    @pytest.mark.asyncio
    async def test_spaced_submissions_all_run(self) -> None:
        """Test submissions further apart than the delay each run."""
        debouncer = Debouncer(delay=0.01)
        calls: list[int] = []

        debouncer.submit(lambda: calls.append(1))
        await debouncer.wait()
        debouncer.submit(lambda: calls.append(2))
        await debouncer.wait()

        assert calls == [1, 2]

    @pytest.mark.asyncio
    async def test_cancel(self) -> None:
        """Test a cancelled callback never runs."""
        debouncer = Debouncer(delay=0.01)
        calls: list[int] = []

        debouncer.submit(lambda: calls.append(1))
        debouncer.cancel()
        await debouncer.wait()
        await asyncio.sleep(0.02)

        assert calls == []

    @pytest.mark.asyncio
    async def test_failing_callback_is_contained(self) -> None:
        """Test a raising callback does not break the debouncer."""
        debouncer = Debouncer(delay=0)

        def boom() -> None:
            raise RuntimeError("boom")

        task = debouncer.submit(boom)
        await debouncer.wait()

        assert task.exception() is None

    def test_submit_without_event_loop(self) -> None:
        """Test the callback runs immediately when no event loop is running."""
        debouncer = Debouncer(delay=10)
        calls: list[str] = []

        assert debouncer.submit(lambda: calls.append("gab")) is None
        assert calls == ["gab"]
        assert debouncer.pending is False

    def test_failing_callback_without_event_loop(self) -> None:
        """Test a raising callback is contained outside an event loop too."""

        def boom() -> None:
            raise RuntimeError("boom")

        assert Debouncer().submit(boom) is None

    @pytest.mark.asyncio
    async def test_wait_without_submission(self) -> None:
        """Test waiting when nothing was submitted returns immediately."""
        await Debouncer().wait()


class TestSuggestionFeed:
    """Tests for the observable suggestion value."""

    def test_initial_value(self) -> None:
        """Test the initial value."""
        assert SuggestionFeed(["Gabtoli"]).value == ["Gabtoli"]

    def test_subscribers_notified(self) -> None:
        """Test subscribers receive every new value until unsubscribed."""
        feed: SuggestionFeed[list[str]] = SuggestionFeed([])
        received: list[list[str]] = []

        unsubscribe = feed.subscribe(received.append)
        feed.set(["Gabtoli"])
        unsubscribe()
        feed.set(["Gulistan"])

        assert received == [["Gabtoli"]]
        assert feed.value == ["Gulistan"]

    def test_failing_subscriber_does_not_block_others(self) -> None:
        """Test one raising subscriber does not stop the rest."""
        feed: SuggestionFeed[int] = SuggestionFeed(0)
        received: list[int] = []

        def boom(value: int) -> None:
            raise ValueError(value)

        feed.subscribe(boom)
        feed.subscribe(received.append)
        feed.set(1)

        assert received == [1]
