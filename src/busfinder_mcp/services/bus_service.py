"""Presentation-facing bus search service.

Wraps the route planner, suggestion ranker and history store behind
operations that never raise: failures are logged and degrade to empty
results or None.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from busfinder_mcp.data.config import BusFinderConfig, get_config
from busfinder_mcp.data.history_store import SearchHistoryStore
from busfinder_mcp.data.route_catalog import RouteCatalog
from busfinder_mcp.matching.suggestions import suggest
from busfinder_mcp.models.route import JourneyPlan, Route, SearchHistoryEntry
from busfinder_mcp.services.debounce import Debouncer, SuggestionFeed
from busfinder_mcp.services.route_search import PlannerLimits, RouteSearchPlanner

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Search type labels shown with results
SEARCH_TYPE_DIRECT = "Direct routes"
SEARCH_TYPE_MULTI_HOP = "Connecting routes (multi-hop)"
SEARCH_TYPE_NONE = "No routes found"


class SearchField(str, Enum):
    """The two stop inputs of a search."""

    FROM = "from"
    TO = "to"


@dataclass(frozen=True)
class SearchOutcome:
    """Routes found by a search and how they were found."""

    routes: list[Route]
    search_type: str


class BusFinderService:
    """Search, suggestions and history for one user session.

    The route catalog is replaced only wholesale (see replace_catalog); all
    searches read it without modifying it.

    Usage:
        service = BusFinderService.from_config()
        routes = await service.search_buses("Gulistan", "Mirpur 10")
        service.update_from_query("gab")
        suggestions = await service.wait_for_suggestions(SearchField.FROM)
    """

    def __init__(
        self,
        catalog: RouteCatalog,
        history: SearchHistoryStore | None = None,
        config: BusFinderConfig | None = None,
    ) -> None:
        self._config = config or get_config()
        self._limits = PlannerLimits.from_config(self._config)
        self._catalog = catalog
        self._planner = RouteSearchPlanner(catalog.routes, self._limits)
        self._history = history

        # Search state
        self._active_searches = 0
        self.search_type = ""

        # Suggestion state
        self.from_query = ""
        self.to_query = ""
        self.from_suggestions: SuggestionFeed[list[str]] = SuggestionFeed([])
        self.to_suggestions: SuggestionFeed[list[str]] = SuggestionFeed([])
        delay = self._config.debounce_ms / 1000
        self._debouncers = {
            SearchField.FROM: Debouncer(delay),
            SearchField.TO: Debouncer(delay),
        }

        # Fire-and-forget history writes
        self._background_tasks: set[asyncio.Task[None]] = set()

    @classmethod
    def from_config(cls, config: BusFinderConfig | None = None) -> "BusFinderService":
        """Build a service from the configured dataset and history database."""
        config = config or get_config()
        catalog = RouteCatalog.from_path(config.dataset_path)
        history = SearchHistoryStore(config.history_db_path, limit=config.history_limit)
        return cls(catalog, history=history, config=config)

    @property
    def catalog(self) -> RouteCatalog:
        return self._catalog

    @property
    def is_loading(self) -> bool:
        """True while at least one search is running."""
        return self._active_searches > 0

    def replace_catalog(self, catalog: RouteCatalog) -> None:
        """Swap in a freshly loaded dataset."""
        self._catalog = catalog
        self._planner = RouteSearchPlanner(catalog.routes, self._limits)
        logger.info(f"Route catalog replaced ({len(catalog)} routes)")

    def _guard(self, operation: str, func: Callable[[], T], default: T) -> T:
        try:
            return func()
        except Exception as e:
            logger.error(f"{operation} failed: {e}", exc_info=True)
            return default

    async def _offload(self, operation: str, func: Callable[[], T], default: T) -> T:
        """Run blocking planner work in a worker thread, degrading like _guard."""
        try:
            return await asyncio.to_thread(func)
        except Exception as e:
            logger.error(f"{operation} failed: {e}", exc_info=True)
            return default

    # --- searches ---------------------------------------------------------

    async def search_buses(self, from_stop: str, to_stop: str) -> list[Route]:
        """Direct routes between two stops.

        Every non-blank search is saved to history, with or without results.
        """
        if not from_stop.strip() or not to_stop.strip():
            self.search_type = ""
            return []

        planner = self._planner
        self._active_searches += 1
        try:
            routes = await self._offload(
                "Direct search", lambda: planner.search_direct(from_stop, to_stop), []
            )
        finally:
            self._active_searches -= 1

        self.search_type = SEARCH_TYPE_DIRECT
        logger.info(f"Search {from_stop!r} -> {to_stop!r} found {len(routes)} direct routes")
        self._schedule_history_write(from_stop, to_stop)
        return routes

    async def search_buses_with_connections(self, from_stop: str, to_stop: str) -> SearchOutcome:
        """Direct routes, or failing that a multi-hop connection.

        Only searches that find routes are saved to history.
        """
        if not from_stop.strip() or not to_stop.strip():
            self.search_type = ""
            return SearchOutcome(routes=[], search_type="")

        planner = self._planner
        self._active_searches += 1
        try:
            direct = await self._offload(
                "Direct search", lambda: planner.search_direct(from_stop, to_stop), []
            )
            if direct:
                outcome = SearchOutcome(routes=direct, search_type=SEARCH_TYPE_DIRECT)
            else:
                logger.debug("No direct buses found, searching for multi-hop journey")
                multi_hop = await self._offload(
                    "Multi-hop search",
                    lambda: planner.find_multi_hop_journey(from_stop, to_stop),
                    [],
                )
                search_type = SEARCH_TYPE_MULTI_HOP if multi_hop else SEARCH_TYPE_NONE
                outcome = SearchOutcome(routes=multi_hop, search_type=search_type)
        finally:
            self._active_searches -= 1

        self.search_type = outcome.search_type
        logger.info(
            f"Search {from_stop!r} -> {to_stop!r}: {outcome.search_type} "
            f"({len(outcome.routes)} routes)"
        )
        if outcome.routes:
            self._schedule_history_write(from_stop, to_stop)
        return outcome

    async def search_with_transfers(self, from_stop: str, to_stop: str) -> list[Route]:
        """Route pairs connecting through a shared stop or interchange hub."""
        planner = self._planner
        return await self._offload(
            "Transfer search",
            lambda: planner.search_with_transfers(from_stop, to_stop),
            [],
        )

    async def create_journey_plan(self, from_stop: str, to_stop: str) -> JourneyPlan | None:
        """Ride-by-ride plan for the first connection found, if any."""
        planner = self._planner
        return await self._offload(
            "Journey planning",
            lambda: planner.create_journey_plan(from_stop, to_stop),
            None,
        )

    def get_bus_route(self, route_id: str) -> Route | None:
        route = self._catalog.get_route(route_id)
        if route is None:
            logger.debug(f"No route found for id {route_id!r}")
        return route

    def get_service_types(self) -> list[str]:
        return self._guard("Service type lookup", self._catalog.service_types, [])

    def get_buses_at_stop(self, stop_name: str) -> list[Route]:
        return self._guard(
            "Stop lookup", lambda: self._planner.buses_at_stop(stop_name), []
        )

    def get_all_stop_names(self) -> list[str]:
        return list(self._catalog.stop_names)

    # --- suggestions ------------------------------------------------------

    def suggest_stops(self, query: str, limit: int | None = None) -> list[str]:
        """Rank stop names for query immediately, without debouncing."""
        limit = self._config.suggestion_limit if limit is None else limit
        return self._guard(
            "Suggestion ranking", lambda: suggest(query, self._catalog.stop_names, limit), []
        )

    def _feed(self, field: SearchField) -> SuggestionFeed[list[str]]:
        return self.from_suggestions if field == SearchField.FROM else self.to_suggestions

    def _refresh_suggestions(self, field: SearchField, query: str) -> None:
        suggestions = self.suggest_stops(query)
        self._feed(field).set(suggestions)
        logger.debug(f"{field.value} query {query!r} -> {len(suggestions)} suggestions")

    def _update_query(self, field: SearchField, text: str) -> None:
        if field == SearchField.FROM:
            self.from_query = text
            other = SearchField.TO
        else:
            self.to_query = text
            other = SearchField.FROM

        # Only the field being typed in shows suggestions
        if text:
            self._feed(other).set([])

        self._debouncers[field].submit(lambda: self._refresh_suggestions(field, text))

    def update_from_query(self, text: str) -> None:
        """Record a keystroke in the 'from' field and schedule a suggestion refresh."""
        self._update_query(SearchField.FROM, text)

    def update_to_query(self, text: str) -> None:
        """Record a keystroke in the 'to' field and schedule a suggestion refresh."""
        self._update_query(SearchField.TO, text)

    async def wait_for_suggestions(self, field: SearchField) -> list[str]:
        """Wait for the field's pending refresh to settle and return its suggestions."""
        await self._debouncers[field].wait()
        return self._feed(field).value

    def clear_searches(self) -> None:
        """Reset both queries and suggestion lists."""
        for debouncer in self._debouncers.values():
            debouncer.cancel()
        self.from_query = ""
        self.to_query = ""
        self.from_suggestions.set([])
        self.to_suggestions.set([])

    # --- history ----------------------------------------------------------

    def _schedule_history_write(self, from_stop: str, to_stop: str) -> None:
        if self._history is None:
            return
        task = asyncio.get_running_loop().create_task(self._save_search(from_stop, to_stop))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _save_search(self, from_stop: str, to_stop: str) -> None:
        try:
            await self._history.record_search(from_stop, to_stop)
        except Exception as e:
            logger.warning(f"Failed to save search {from_stop!r} -> {to_stop!r}: {e}")

    async def flush_history_writes(self) -> None:
        """Wait for scheduled history writes to finish."""
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)

    async def get_recent_searches(self) -> list[SearchHistoryEntry]:
        if self._history is None:
            return []
        try:
            return await self._history.get_recent()
        except Exception as e:
            logger.warning(f"Failed to load recent searches: {e}")
            return []

    async def clear_search_history(self) -> bool:
        if self._history is None:
            return False
        try:
            await self._history.clear_all()
        except Exception as e:
            logger.warning(f"Failed to clear search history: {e}")
            return False
        logger.info("Cleared search history")
        return True

    async def delete_search_history_item(self, entry: SearchHistoryEntry) -> bool:
        if self._history is None:
            return False
        try:
            await self._history.delete(entry)
        except Exception as e:
            logger.warning(f"Failed to delete search history item {entry.id}: {e}")
            return False
        return True

    async def close(self) -> None:
        """Cancel pending suggestion refreshes and finish history writes."""
        for debouncer in self._debouncers.values():
            debouncer.cancel()
        await self.flush_history_writes()
