"""MCP tools for finding buses and planning journeys."""

from busfinder_mcp.app import mcp
from busfinder_mcp.models.responses import (
    BusesAtStopResponse,
    JourneyPlanResponse,
    SearchBusesResponse,
    ServiceTypesResponse,
)
from busfinder_mcp.models.route import Route
from busfinder_mcp.services.bus_service import SEARCH_TYPE_DIRECT
from busfinder_mcp.services.session import get_service


@mcp.tool()
async def search_buses(from_stop: str, to_stop: str) -> SearchBusesResponse:
    """Find buses that run directly between two stops.

    Stop names are matched loosely: case, punctuation, dash variants and
    partial names are tolerated (e.g. "mirpur10" or "Gabtoli" for
    "Gabtoli Bus Stand"). A route matches if it reaches the destination after
    the origin in its forward direction or in its backward direction.

    Args:
        from_stop: Origin stop name (free text)
        to_stop: Destination stop name (free text)

    Returns:
        SearchBusesResponse with the matching routes in dataset order.
    """
    routes = await get_service().search_buses(from_stop, to_stop)
    blank = not from_stop.strip() or not to_stop.strip()
    return SearchBusesResponse(
        from_query=from_stop,
        to_query=to_stop,
        routes=routes,
        count=len(routes),
        search_type="" if blank else SEARCH_TYPE_DIRECT,
    )


@mcp.tool()
async def search_buses_with_connections(from_stop: str, to_stop: str) -> SearchBusesResponse:
    """Find buses between two stops, including journeys with transfers.

    Direct routes are returned when any exist. Otherwise up to 10 routes that
    together connect the stops with one or two changes are returned.

    Args:
        from_stop: Origin stop name (free text)
        to_stop: Destination stop name (free text)

    Returns:
        SearchBusesResponse with routes and a search_type of "Direct routes",
        "Connecting routes (multi-hop)" or "No routes found".
    """
    outcome = await get_service().search_buses_with_connections(from_stop, to_stop)
    return SearchBusesResponse(
        from_query=from_stop,
        to_query=to_stop,
        routes=outcome.routes,
        count=len(outcome.routes),
        search_type=outcome.search_type,
    )


@mcp.tool()
async def create_journey_plan(from_stop: str, to_stop: str) -> JourneyPlanResponse:
    """Plan a journey as an ordered list of bus rides.

    Returns a single ride when a direct bus exists, otherwise two rides
    meeting at a shared stop.

    Args:
        from_stop: Origin stop name (free text)
        to_stop: Destination stop name (free text)

    Returns:
        JourneyPlanResponse with the plan, or found=False if no connection exists.
    """
    plan = await get_service().create_journey_plan(from_stop, to_stop)
    return JourneyPlanResponse(
        from_query=from_stop,
        to_query=to_stop,
        plan=plan,
        found=plan is not None,
    )


@mcp.tool()
def get_bus_route(route_id: str) -> Route | None:
    """Get a bus route with its full forward and backward stop lists.

    Args:
        route_id: Route id from a search result.

    Returns:
        The route, or None if no route has this id.
    """
    return get_service().get_bus_route(route_id)


@mcp.tool()
def get_buses_at_stop(stop_name: str) -> BusesAtStopResponse:
    """List every bus that stops at (or near the name of) a stop.

    Args:
        stop_name: Stop name (free text, partial names allowed)

    Returns:
        BusesAtStopResponse with matching routes.
    """
    routes = get_service().get_buses_at_stop(stop_name)
    return BusesAtStopResponse(stop_name=stop_name, routes=routes, count=len(routes))


@mcp.tool()
def get_service_types() -> ServiceTypesResponse:
    """List the distinct bus service types in the dataset, sorted."""
    service_types = get_service().get_service_types()
    return ServiceTypesResponse(service_types=service_types, count=len(service_types))
