"""Read-only in-memory collection of routes and their stop names."""

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from busfinder_mcp.data.dataset_loader import load_routes
from busfinder_mcp.matching.normalizers import clean_stop_label
from busfinder_mcp.models.route import Route

logger = logging.getLogger(__name__)


class RouteCatalog:
    """Load-once route collection with lookup indexes.

    The catalog is never mutated after construction. Reloading the dataset
    means building a new catalog and swapping it in.

    Usage:
        catalog = RouteCatalog.from_path(Path("data/bus_routes.json"))
        catalog.routes, catalog.get_route("1"), catalog.stop_names
    """

    def __init__(self, routes: Iterable[Route]) -> None:
        self.routes: tuple[Route, ...] = tuple(routes)
        self.routes_by_id: dict[str, Route] = {}  # route_id -> route
        for route in self.routes:
            self.routes_by_id.setdefault(route.id, route)
        self.stop_names: list[str] = _collect_stop_names(self.routes)

    @classmethod
    def from_path(cls, dataset_path: Path) -> "RouteCatalog":
        """Build a catalog from the JSON dataset (empty if it cannot be read)."""
        catalog = cls(load_routes(dataset_path))
        logger.info(
            f"RouteCatalog loaded: {len(catalog.routes)} routes, "
            f"{len(catalog.stop_names)} unique stops"
        )
        return catalog

    @classmethod
    def empty(cls) -> "RouteCatalog":
        return cls(())

    def __len__(self) -> int:
        return len(self.routes)

    def get_route(self, route_id: str) -> Route | None:
        """Look up a route by id."""
        return self.routes_by_id.get(route_id)

    def service_types(self) -> list[str]:
        """Sorted distinct non-blank service types."""
        types = {
            route.service_type
            for route in self.routes
            if route.service_type and route.service_type.strip()
        }
        return sorted(types)


def _collect_stop_names(routes: Sequence[Route]) -> list[str]:
    """Flatten forward and backward stops of all routes into sorted unique labels.

    Reverse-of-forward directions add no new names, so only authored lists
    are read.
    """
    labels: set[str] = set()
    for route in routes:
        for stops in (route.stop_sequence, route.reverse_stop_sequence or []):
            for stop in stops:
                if stop.strip():
                    labels.add(clean_stop_label(stop))
    return sorted(labels)
