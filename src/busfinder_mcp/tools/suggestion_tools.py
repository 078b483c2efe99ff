"""MCP tools for stop name autocomplete."""

from busfinder_mcp.app import mcp
from busfinder_mcp.models.responses import StopSuggestionsResponse
from busfinder_mcp.services.bus_service import SearchField
from busfinder_mcp.services.session import get_service


@mcp.tool()
async def suggest_stops(query: str, field: str = "from") -> StopSuggestionsResponse:
    """Suggest stop names for a partially typed, possibly misspelled query.

    Keystrokes for the same field are debounced: if another call for that
    field arrives within the quiet period, only the latest query is ranked
    and every waiting call returns its suggestions.

    Examples:
        suggest_stops("gab")  # ["Gabtoli", "Gabtoli Bus Stand", ...]
        suggest_stops("motjheel", field="to")  # typo tolerant

    Args:
        query: Text typed so far.
        field: Which input is being typed in, "from" or "to" (default "from").

    Returns:
        StopSuggestionsResponse with stop names, best match first. `query`
        is the text the suggestions were ranked for.
    """
    try:
        search_field = SearchField(field.strip().lower())
    except ValueError:
        search_field = SearchField.FROM

    service = get_service()
    if search_field == SearchField.FROM:
        service.update_from_query(query)
    else:
        service.update_to_query(query)

    suggestions = await service.wait_for_suggestions(search_field)
    ranked_query = service.from_query if search_field == SearchField.FROM else service.to_query

    return StopSuggestionsResponse(
        query=ranked_query,
        field=search_field.value,
        suggestions=suggestions,
        count=len(suggestions),
    )
