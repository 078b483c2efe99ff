from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Major interchange terminals, highest priority first
DEFAULT_INTERCHANGE_HUBS = [
    "Gulistan",
    "Farmgate",
    "Mohakhali",
    "Motijheel",
    "Sayedabad",
    "Gabtoli",
    "Mirpur 10",
    "Jatrabari",
    "Shahbag",
    "Abdullahpur",
]


class BusFinderConfig(BaseSettings):
    """Configuration for the dataset, history store and search limits.

    Automatically loads from environment variables and .env file.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)

    dataset_path: Path = Field(default=Path("data/bus_routes.json"), alias="BUSFINDER_DATASET_PATH")
    history_db_path: Path = Field(default=Path("data/history.db"), alias="BUSFINDER_HISTORY_DB")

    # Suggestions
    debounce_ms: int = Field(default=300, alias="BUSFINDER_DEBOUNCE_MS")
    suggestion_limit: int = Field(default=5, alias="BUSFINDER_SUGGESTION_LIMIT")

    # History
    history_limit: int = Field(default=10, alias="BUSFINDER_HISTORY_LIMIT")

    # Planner caps
    max_transfer_results: int = Field(default=5, alias="BUSFINDER_MAX_TRANSFER_RESULTS")
    max_hub_results: int = Field(default=3, alias="BUSFINDER_MAX_HUB_RESULTS")
    max_multi_hop_results: int = Field(default=10, alias="BUSFINDER_MAX_MULTI_HOP_RESULTS")
    max_connections_per_stop: int = Field(default=3, alias="BUSFINDER_MAX_CONNECTIONS_PER_STOP")
    interchange_hubs: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INTERCHANGE_HUBS),
        alias="BUSFINDER_INTERCHANGE_HUBS",
    )


@lru_cache
def get_config() -> BusFinderConfig:
    """Get BusFinder configuration (cached singleton).

    Returns:
        BusFinderConfig with values from .env file or environment variables.
    """
    return BusFinderConfig()
