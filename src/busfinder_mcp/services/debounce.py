"""Per-field debouncing of suggestion refreshes."""

import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Debouncer:
    """Runs only the last callback submitted within a quiet period.

    Each submit() cancels the pending, not-yet-fired callback and arms a new
    timer, so at most one callback per debouncer is ever in flight.
    """

    def __init__(self, delay: float = 0.3):
        """Initialize the debouncer.

        Args:
            delay: Quiet period in seconds before the callback fires.
        """
        self._delay = delay
        self._task: asyncio.Task[None] | None = None

    @staticmethod
    def _run(callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception as e:
            logger.warning(f"Debounced callback failed: {e}")

    async def _fire(self, callback: Callable[[], None]) -> None:
        await asyncio.sleep(self._delay)
        self._run(callback)

    def submit(self, callback: Callable[[], None]) -> asyncio.Task[None] | None:
        """Arm a new timer for callback, cancelling any pending one.

        Outside a running event loop there is nothing to wait on, so the
        callback runs immediately and None is returned.
        """
        self.cancel()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop, running callback without debounce")
            self._task = None
            self._run(callback)
            return None

        self._task = loop.create_task(self._fire(callback))
        return self._task

    def cancel(self) -> None:
        """Cancel the pending callback, if any."""
        if self._task is not None and not self._task.done():
            self._task.cancel()

    @property
    def pending(self) -> bool:
        """True while a callback is armed but has not fired."""
        return self._task is not None and not self._task.done()

    async def wait(self) -> None:
        """Wait until the most recently armed callback has run or been cancelled.

        If a newer callback is armed while waiting, waits for that one instead.
        """
        while self._task is not None:
            task = self._task
            await asyncio.wait({task})
            if task is self._task:
                return


class SuggestionFeed(Generic[T]):
    """Observable value for a suggestion list.

    Subscribers are called with the new value every time it is set.
    """

    def __init__(self, initial: T):
        self._value = initial
        self._subscribers: list[Callable[[T], None]] = []

    @property
    def value(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        for subscriber in list(self._subscribers):
            try:
                subscriber(value)
            except Exception as e:
                logger.warning(f"Suggestion subscriber failed: {e}")

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register callback; returns a function that unsubscribes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe
