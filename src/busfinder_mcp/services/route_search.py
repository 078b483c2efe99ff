"""Direct, transfer and multi-hop route search over the static dataset.

Connection finding is greedy: candidates are explored in dataset order and
the first ones found win, with fixed caps on how many routes are returned.
"""

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from functools import lru_cache

from busfinder_mcp.data.config import DEFAULT_INTERCHANGE_HUBS, BusFinderConfig
from busfinder_mcp.matching.connectivity import travel_direction, travel_sequences
from busfinder_mcp.matching.normalizers import normalize_stop_name
from busfinder_mcp.matching.stop_matcher import find_stop_index, stop_in_sequences
from busfinder_mcp.models.route import Direction, JourneyPlan, JourneySegment, Route

logger = logging.getLogger(__name__)

DIRECTION_CACHE_SIZE = 16384
SERVING_CACHE_SIZE = 1024


@dataclass(frozen=True)
class PlannerLimits:
    """Caps and hub list used by the connection heuristics."""

    max_transfer_results: int = 5
    max_hub_results: int = 3
    max_multi_hop_results: int = 10
    max_connections_per_stop: int = 3
    interchange_hubs: tuple[str, ...] = tuple(DEFAULT_INTERCHANGE_HUBS)

    @classmethod
    def from_config(cls, config: BusFinderConfig) -> "PlannerLimits":
        return cls(
            max_transfer_results=config.max_transfer_results,
            max_hub_results=config.max_hub_results,
            max_multi_hop_results=config.max_multi_hop_results,
            max_connections_per_stop=config.max_connections_per_stop,
            interchange_hubs=tuple(config.interchange_hubs),
        )


@dataclass(frozen=True)
class TransferConnection:
    """Two routes sharing a stop where the traveller changes bus."""

    first_route: Route
    second_route: Route
    transfer_stop: str  # Stop label as written on the first route


@dataclass
class _RouteAccumulator:
    """Routes in first-found order, deduplicated by id, up to a cap."""

    cap: int
    routes: list[Route] = field(default_factory=list)
    _seen: set[str] = field(default_factory=set, init=False, repr=False)

    def add(self, route: Route) -> None:
        if self.full or route.id in self._seen:
            return
        self._seen.add(route.id)
        self.routes.append(route)

    @property
    def full(self) -> bool:
        return len(self.routes) >= self.cap

    def __len__(self) -> int:
        return len(self.routes)


def _is_blank(*queries: str) -> bool:
    return any(not query or not query.strip() for query in queries)


def _route_stops(route: Route) -> list[str]:
    """Forward stops followed by the authored backward stops."""
    if route.has_backward_sequence:
        return [*route.stop_sequence, *route.reverse_stop_sequence]
    return list(route.stop_sequence)


class RouteSearchPlanner:
    """Finds routes between two free-text stop names.

    The planner only reads the route collection it was given. Direction and
    stop-serving lookups are memoized per planner in bounded LRU caches; the
    collection never changes, and the caches are safe to share between the
    worker threads searches run in.
    """

    def __init__(self, routes: Sequence[Route], limits: PlannerLimits | None = None) -> None:
        self.routes: tuple[Route, ...] = tuple(routes)
        self.limits = limits or PlannerLimits()
        # Bounded, thread-safe memos keyed by normalized stop names
        self._cached_direction = lru_cache(maxsize=DIRECTION_CACHE_SIZE)(travel_direction)
        self._cached_serving = lru_cache(maxsize=SERVING_CACHE_SIZE)(self._find_serving)

    # --- primitives -------------------------------------------------------

    def _direction(self, route: Route, from_stop: str, to_stop: str) -> Direction | None:
        return self._cached_direction(
            route, normalize_stop_name(from_stop), normalize_stop_name(to_stop)
        )

    def _can_travel(self, route: Route, from_stop: str, to_stop: str) -> bool:
        return self._direction(route, from_stop, to_stop) is not None

    def _find_serving(self, normalized_stop: str) -> tuple[Route, ...]:
        return tuple(
            route
            for route in self.routes
            if stop_in_sequences(
                (route.stop_sequence, route.reverse_stop_sequence), normalized_stop
            )
        )

    def routes_serving(self, stop: str) -> tuple[Route, ...]:
        """Routes whose forward or backward stops match stop, in dataset order."""
        return self._cached_serving(normalize_stop_name(stop))

    def _downstream_stops(self, route: Route, stop: str) -> Iterator[str]:
        """Stops after stop in each direction of route that serves it."""
        for _, stops in travel_sequences(route):
            index = find_stop_index(stops, stop)
            if index is not None:
                yield from stops[index + 1:]

    def _stop_label(self, route: Route, direction: Direction, query: str) -> str:
        """The route's own spelling of the stop matched by query."""
        for sequence_direction, stops in travel_sequences(route):
            if sequence_direction == direction:
                index = find_stop_index(stops, query)
                if index is not None:
                    return stops[index]
        return query.strip()

    # --- direct -----------------------------------------------------------

    def search_direct(self, from_stop: str, to_stop: str) -> list[Route]:
        """Routes that carry a traveller from from_stop to to_stop without changing.

        Results keep dataset order.
        """
        if _is_blank(from_stop, to_stop):
            return []

        results = [route for route in self.routes if self._can_travel(route, from_stop, to_stop)]
        logger.debug(
            f"Direct search {from_stop!r} -> {to_stop!r} "
            f"(normalized {normalize_stop_name(from_stop)!r} -> {normalize_stop_name(to_stop)!r}) "
            f"found {len(results)} routes"
        )
        return results

    # --- one transfer -----------------------------------------------------

    def transfer_connections(self, from_stop: str, to_stop: str) -> Iterator[TransferConnection]:
        """Yield route pairs joined by a shared stop, in discovery order.

        For each (start route, end route) pair the shared stops are tried in
        the start route's stop order and the first workable one is used.
        """
        if _is_blank(from_stop, to_stop):
            return

        excluded = {normalize_stop_name(from_stop), normalize_stop_name(to_stop)}
        start_routes = self.routes_serving(from_stop)
        end_routes = self.routes_serving(to_stop)

        for start_route in start_routes:
            start_stops = _route_stops(start_route)
            for end_route in end_routes:
                if end_route.id == start_route.id:
                    continue

                end_normalized = {normalize_stop_name(stop) for stop in _route_stops(end_route)}
                tried: set[str] = set()
                for stop in start_stops:
                    normalized = normalize_stop_name(stop)
                    if normalized in tried or normalized in excluded:
                        continue
                    if normalized not in end_normalized:
                        continue
                    tried.add(normalized)

                    if self._can_travel(start_route, from_stop, stop) and self._can_travel(
                        end_route, stop, to_stop
                    ):
                        yield TransferConnection(start_route, end_route, stop)
                        break

    def _hub_routes(self, from_stop: str, to_stop: str) -> list[Route]:
        """Routes that pass through a major interchange between from and to.

        At most one route is taken per hub, hubs in priority order.
        """
        found = _RouteAccumulator(cap=self.limits.max_hub_results)
        for hub in self.limits.interchange_hubs:
            if found.full:
                break
            for route in self.routes_serving(hub):
                if self._can_travel(route, from_stop, hub) and self._can_travel(
                    route, hub, to_stop
                ):
                    found.add(route)
                    break
        return found.routes

    def search_with_transfers(self, from_stop: str, to_stop: str) -> list[Route]:
        """Routes forming one-transfer connections, falling back to interchange hubs.

        Intended for when search_direct finds nothing. Both routes of every
        connection are returned, first found first, capped at
        max_transfer_results.
        """
        if _is_blank(from_stop, to_stop):
            return []

        cap = self.limits.max_transfer_results
        found = _RouteAccumulator(cap=cap)
        for connection in self.transfer_connections(from_stop, to_stop):
            found.add(connection.first_route)
            found.add(connection.second_route)
            if found.full:
                break

        if found:
            logger.debug(f"Transfer search {from_stop!r} -> {to_stop!r} found {len(found)} routes")
            return found.routes

        hub_routes = self._hub_routes(from_stop, to_stop)
        logger.debug(
            f"Transfer search {from_stop!r} -> {to_stop!r} fell back to hubs, "
            f"found {len(hub_routes)} routes"
        )
        return hub_routes[:cap]

    # --- multi-hop --------------------------------------------------------

    def _routes_reaching(self, stop: str, to_stop: str, exclude: set[str]) -> list[Route]:
        """Up to max_connections_per_stop routes that ride from stop to to_stop."""
        connecting: list[Route] = []
        for route in self.routes:
            if route.id in exclude:
                continue
            if self._can_travel(route, stop, to_stop):
                connecting.append(route)
                if len(connecting) >= self.limits.max_connections_per_stop:
                    break
        return connecting

    def _collect_one_transfer(self, from_stop: str, to_stop: str, found: _RouteAccumulator) -> None:
        for first_route in self.routes_serving(from_stop):
            for transfer in self._downstream_stops(first_route, from_stop):
                connecting = self._routes_reaching(transfer, to_stop, {first_route.id})
                if not connecting:
                    continue
                found.add(first_route)
                for route in connecting:
                    found.add(route)
                if found.full:
                    return

    def _collect_two_transfers(
        self, from_stop: str, to_stop: str, found: _RouteAccumulator
    ) -> None:
        explored: set[tuple[str, str]] = set()  # (second route id, normalized first transfer)

        for first_route in self.routes_serving(from_stop):
            for first_transfer in self._downstream_stops(first_route, from_stop):
                for second_route in self.routes_serving(first_transfer):
                    if second_route.id == first_route.id:
                        continue
                    key = (second_route.id, normalize_stop_name(first_transfer))
                    if key in explored:
                        continue
                    explored.add(key)

                    for second_transfer in self._downstream_stops(second_route, first_transfer):
                        connecting = self._routes_reaching(
                            second_transfer, to_stop, {first_route.id, second_route.id}
                        )
                        if not connecting:
                            continue
                        found.add(first_route)
                        found.add(second_route)
                        for route in connecting:
                            found.add(route)
                        if found.full:
                            return

    def find_multi_hop_journey(self, from_stop: str, to_stop: str) -> list[Route]:
        """Routes for a journey with up to two transfers.

        Tries direct routes first, then walks every route serving from_stop
        stop by stop looking for routes that reach to_stop, and finally
        allows one more intermediate change. Results are deduplicated by id
        and capped at max_multi_hop_results.
        """
        if _is_blank(from_stop, to_stop):
            return []

        cap = self.limits.max_multi_hop_results
        direct = self.search_direct(from_stop, to_stop)
        if direct:
            return direct[:cap]

        found = _RouteAccumulator(cap=cap)
        self._collect_one_transfer(from_stop, to_stop, found)
        if not found:
            self._collect_two_transfers(from_stop, to_stop, found)

        logger.debug(f"Multi-hop search {from_stop!r} -> {to_stop!r} found {len(found)} routes")
        return found.routes

    # --- journey plans ----------------------------------------------------

    def _segment(self, route: Route, from_stop: str, to_stop: str) -> JourneySegment | None:
        direction = self._direction(route, from_stop, to_stop)
        if direction is None:
            return None
        return JourneySegment(
            route_id=route.id,
            route_name=route.display_name,
            from_stop=self._stop_label(route, direction, from_stop),
            to_stop=self._stop_label(route, direction, to_stop),
            direction=direction,
        )

    def create_journey_plan(self, from_stop: str, to_stop: str) -> JourneyPlan | None:
        """Build a ride-by-ride plan for the first connection found.

        A direct route gives a single segment. Otherwise the first transfer
        connection gives two segments meeting at the shared stop. Returns
        None when neither exists.
        """
        if _is_blank(from_stop, to_stop):
            return None

        direct = self.search_direct(from_stop, to_stop)
        if direct:
            segment = self._segment(direct[0], from_stop, to_stop)
            if segment is not None:
                return JourneyPlan(segments=[segment], estimated_time="Direct route, no transfers")

        connection = next(self.transfer_connections(from_stop, to_stop), None)
        if connection is None:
            return None

        first = self._segment(connection.first_route, from_stop, connection.transfer_stop)
        second = self._segment(connection.second_route, connection.transfer_stop, to_stop)
        if first is None or second is None:
            return None

        return JourneyPlan(
            segments=[first, second],
            estimated_time=f"1 transfer at {connection.transfer_stop}",
        )

    # --- lookups ----------------------------------------------------------

    def buses_at_stop(self, stop_name: str) -> list[Route]:
        """Routes with a stop equal to, containing, or contained in stop_name."""
        if _is_blank(stop_name):
            return []

        normalized = normalize_stop_name(stop_name)
        results = []
        for route in self.routes:
            for stop in _route_stops(route):
                stop_normalized = normalize_stop_name(stop)
                if stop_normalized and (
                    stop_normalized == normalized
                    or normalized in stop_normalized
                    or stop_normalized in normalized
                ):
                    results.append(route)
                    break
        return results
