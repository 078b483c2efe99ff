from collections.abc import Iterator, Sequence

from busfinder_mcp.matching.stop_matcher import find_stop_index
from busfinder_mcp.models.route import Direction, Route


def travel_sequences(route: Route) -> Iterator[tuple[Direction, Sequence[str]]]:
    """Yield the stop orders a traveller can ride on this route.

    The forward list always comes first. The backward sense is the authored
    backward list when present, otherwise the forward list reversed.
    """
    yield Direction.FORWARD, route.stop_sequence
    if route.has_backward_sequence:
        yield Direction.BACKWARD, route.reverse_stop_sequence
    else:
        yield Direction.BACKWARD, route.stop_sequence[::-1]


def _ordered_in(stops: Sequence[str], from_stop: str, to_stop: str) -> bool:
    from_index = find_stop_index(stops, from_stop)
    if from_index is None:
        return False
    to_index = find_stop_index(stops, to_stop)
    return to_index is not None and from_index < to_index


def travel_direction(route: Route, from_stop: str, to_stop: str) -> Direction | None:
    """Return the direction in which route carries a traveller from -> to.

    Forward is preferred when both senses work. Returns None when the route
    cannot be used for this leg.
    """
    for direction, stops in travel_sequences(route):
        if _ordered_in(stops, from_stop, to_stop):
            return direction
    return None


def can_travel(route: Route, from_stop: str, to_stop: str) -> bool:
    """Check whether route connects from_stop to to_stop in some direction."""
    return travel_direction(route, from_stop, to_stop) is not None
