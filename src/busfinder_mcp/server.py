import argparse
import asyncio
import logging
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel

from busfinder_mcp.app import mcp


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    timestamp: str
    routes_loaded: int


@mcp.tool()
def health() -> HealthResponse:
    """Check if the BusFinder MCP server is running and healthy.

    Returns the server status, version, number of loaded routes and current timestamp.
    """
    from busfinder_mcp import __version__
    from busfinder_mcp.services.session import get_service

    return HealthResponse(
        status="ok",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
        routes_loaded=len(get_service().catalog),
    )


def run_check(dataset_path: Path) -> int:
    """Load the dataset and print a summary. Returns the process exit code."""
    from busfinder_mcp.data.route_catalog import RouteCatalog

    catalog = RouteCatalog.from_path(dataset_path)

    print("\nDataset check complete:")
    print(f"  routes: {len(catalog):,}")
    print(f"  unique stops: {len(catalog.stop_names):,}")
    print(f"  service types: {', '.join(catalog.service_types()) or '-'}")
    return 0 if len(catalog) else 1


async def run_search(dataset_path: Path, from_stop: str, to_stop: str) -> None:
    """Run one connection search against the dataset and print the result."""
    from busfinder_mcp.data.route_catalog import RouteCatalog
    from busfinder_mcp.services.bus_service import BusFinderService

    service = BusFinderService(RouteCatalog.from_path(dataset_path))
    outcome = await service.search_buses_with_connections(from_stop, to_stop)

    print(f"\n{outcome.search_type or 'Nothing to search'}:")
    for route in outcome.routes:
        print(f"  [{route.id}] {route.display_name}")

    plan = await service.create_journey_plan(from_stop, to_stop)
    if plan is not None:
        print("\nJourney plan:")
        for segment in plan.segments:
            print(f"  {segment.route_name}: {segment.from_stop} -> {segment.to_stop}")
        if plan.estimated_time:
            print(f"  ({plan.estimated_time})")


def main() -> None:
    from busfinder_mcp.data.config import get_config

    config = get_config()

    parser = argparse.ArgumentParser(
        prog="busfinder-mcp",
        description="BusFinder Transit MCP Server",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    subparsers = parser.add_subparsers(dest="command")

    # check command
    check_parser = subparsers.add_parser(
        "check",
        help="Load the bus route dataset and print a summary",
    )
    check_parser.add_argument(
        "--dataset",
        type=Path,
        default=config.dataset_path,
        help="Dataset JSON path (default: BUSFINDER_DATASET_PATH or data/bus_routes.json)",
    )

    # search command
    search_parser = subparsers.add_parser(
        "search",
        help="Find buses between two stops",
    )
    search_parser.add_argument("from_stop", help="Origin stop name")
    search_parser.add_argument("to_stop", help="Destination stop name")
    search_parser.add_argument(
        "--dataset",
        type=Path,
        default=config.dataset_path,
        help="Dataset JSON path (default: BUSFINDER_DATASET_PATH or data/bus_routes.json)",
    )

    args = parser.parse_args()

    # Configure logging
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "check":
        raise SystemExit(run_check(args.dataset))
    elif args.command == "search":
        asyncio.run(run_search(args.dataset, args.from_stop, args.to_stop))
    else:
        # Default: run MCP server with every tool registered
        import busfinder_mcp.tools  # noqa: F401

        mcp.run()


if __name__ == "__main__":
    main()
