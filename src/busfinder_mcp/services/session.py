"""Lazily created service shared by the MCP tools."""

import logging

from busfinder_mcp.services.bus_service import BusFinderService

logger = logging.getLogger(__name__)

# Module-level service (lazy-initialized)
_service: BusFinderService | None = None


def get_service() -> BusFinderService:
    """Get or create the service for this server process."""
    global _service
    if _service is None:
        _service = BusFinderService.from_config()
        logger.info(f"BusFinder service ready with {len(_service.catalog)} routes")
    return _service


def set_service(service: BusFinderService | None) -> None:
    """Install a specific service (or reset with None), e.g. in tests."""
    global _service
    _service = service
