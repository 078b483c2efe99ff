from pydantic import BaseModel, Field

from busfinder_mcp.models.route import JourneyPlan, Route, SearchHistoryEntry


class SearchBusesResponse(BaseModel):
    from_query: str
    to_query: str
    routes: list[Route]
    count: int = Field(description="Number of routes returned")
    search_type: str = Field(
        description="'Direct routes', 'Connecting routes (multi-hop)', 'No routes found', "
        "or empty for a blank query"
    )


class JourneyPlanResponse(BaseModel):
    from_query: str
    to_query: str
    plan: JourneyPlan | None = Field(
        default=None, description="Ride-by-ride plan, None when no connection exists"
    )
    found: bool


class BusesAtStopResponse(BaseModel):
    stop_name: str
    routes: list[Route]
    count: int


class StopSuggestionsResponse(BaseModel):
    query: str
    field: str = Field(description="'from' or 'to'")
    suggestions: list[str] = Field(description="Stop names, best match first")
    count: int


class ServiceTypesResponse(BaseModel):
    service_types: list[str] = Field(description="Sorted distinct service types")
    count: int


class RecentSearchesResponse(BaseModel):
    searches: list[SearchHistoryEntry] = Field(description="Most recent first")
    count: int


class HistoryActionResponse(BaseModel):
    success: bool
    message: str
