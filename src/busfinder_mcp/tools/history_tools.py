"""MCP tools for recent searches."""

from busfinder_mcp.app import mcp
from busfinder_mcp.models.responses import HistoryActionResponse, RecentSearchesResponse
from busfinder_mcp.services.session import get_service


@mcp.tool()
async def get_recent_searches() -> RecentSearchesResponse:
    """List the 10 most recent successful searches, newest first."""
    searches = await get_service().get_recent_searches()
    return RecentSearchesResponse(searches=searches, count=len(searches))


@mcp.tool()
async def clear_search_history() -> HistoryActionResponse:
    """Delete all recent searches."""
    success = await get_service().clear_search_history()
    message = "Search history cleared" if success else "Search history could not be cleared"
    return HistoryActionResponse(success=success, message=message)


@mcp.tool()
async def delete_search_history_item(entry_id: int) -> HistoryActionResponse:
    """Delete one recent search.

    Args:
        entry_id: The `id` of an entry returned by get_recent_searches.
    """
    service = get_service()
    searches = await service.get_recent_searches()
    entry = next((search for search in searches if search.id == entry_id), None)
    if entry is None:
        return HistoryActionResponse(success=False, message=f"No recent search with id {entry_id}")

    success = await service.delete_search_history_item(entry)
    message = "Search deleted" if success else "Search could not be deleted"
    return HistoryActionResponse(success=success, message=message)
