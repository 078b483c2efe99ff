from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Direction(str, Enum):
    """Sense in which a route is ridden."""

    FORWARD = "forward"
    BACKWARD = "backward"


class Route(BaseModel):
    """A bus line with its ordered stops.

    Routes are read-only once loaded; the whole collection is replaced on
    reload rather than mutated.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable route identifier, used for lookups and dedup")
    name: str = Field(default="", description="Legacy display name")
    name_en: str | None = None
    name_bn: str | None = None
    service_type: str | None = Field(default=None, description="Free-text service category")
    stop_sequence: list[str] = Field(min_length=1, description="Stops in forward order")
    reverse_stop_sequence: list[str] | None = Field(
        default=None,
        description="Stops in backward order; when absent the forward list is ridden in reverse",
    )

    @property
    def display_name(self) -> str:
        """English name, falling back to the legacy name and then the id."""
        return self.name_en or self.name or self.id

    @property
    def has_backward_sequence(self) -> bool:
        return bool(self.reverse_stop_sequence)

    def __hash__(self) -> int:
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return self.id == other.id


class JourneySegment(BaseModel):
    """One ride on one route between two stops."""

    route_id: str
    route_name: str
    from_stop: str
    to_stop: str
    direction: Direction


class JourneyPlan(BaseModel):
    """A full trip as an ordered list of rides."""

    segments: list[JourneySegment] = Field(min_length=1)
    estimated_time: str | None = Field(
        default=None, description="Human-readable transfer/time estimate"
    )

    @computed_field
    @property
    def total_stops(self) -> int:
        """Number of segments in the plan."""
        return len(self.segments)

    @computed_field
    @property
    def num_transfers(self) -> int:
        return len(self.segments) - 1


class SearchHistoryEntry(BaseModel):
    """A saved (from, to) search."""

    id: int
    from_location: str
    to_location: str
    timestamp: int = Field(description="Milliseconds since the epoch")
