"""Shared fixtures: a small Dhaka route dataset and services built on it."""

import copy
from pathlib import Path
from typing import Any

import pytest

from busfinder_mcp.data.config import BusFinderConfig
from busfinder_mcp.data.dataset_loader import parse_routes
from busfinder_mcp.data.history_store import SearchHistoryStore
from busfinder_mcp.data.route_catalog import RouteCatalog
from busfinder_mcp.services.bus_service import BusFinderService

SAMPLE_DATASET: dict[str, Any] = {
    "buses": [
        {
            "id": "1",
            "name": "Gabtoli Express",
            "name_en": "Gabtoli Express",
            "name_bn": "গাবতলী এক্সপ্রেস",
            "routes": {"forward": ["Gabtoli", "Shyamoli", "Farmgate", "Shahbag", "Gulistan"]},
            "service_type": "Sitting",
        },
        {
            "id": "2",
            "name": "Airport Link",
            "routes": {
                "forward": ["Uttara", "Airport", "Mohakhali"],
                "backward": ["Mohakhali", "Banani", "Airport", "Uttara"],
            },
            "service_type": "Local",
        },
        {
            "id": "3",
            "name_en": "Mohakhali Shuttle",
            "routes": {"forward": ["Mohakhali", "Farmgate", "Motijheel"]},
            "service_type": "Sitting",
        },
        {
            "id": "4",
            "name": "Sadarghat Rider",
            "routes": {"forward": ["Motijheel", "Sadarghat"]},
        },
    ]
}


@pytest.fixture
def sample_dataset() -> dict[str, Any]:
    """The sample dataset document."""
    return copy.deepcopy(SAMPLE_DATASET)


@pytest.fixture
def sample_catalog() -> RouteCatalog:
    """Catalog built from the sample dataset."""
    return RouteCatalog(parse_routes(SAMPLE_DATASET))


@pytest.fixture
def test_config(tmp_path: Path) -> BusFinderConfig:
    """Config pointing at temporary files with a short debounce."""
    return BusFinderConfig(
        dataset_path=tmp_path / "bus_routes.json",
        history_db_path=tmp_path / "history.db",
        debounce_ms=10,
    )


@pytest.fixture
def history_store(test_config: BusFinderConfig) -> SearchHistoryStore:
    """History store backed by a temporary database."""
    return SearchHistoryStore(test_config.history_db_path, limit=test_config.history_limit)


@pytest.fixture
def bus_service(
    sample_catalog: RouteCatalog,
    history_store: SearchHistoryStore,
    test_config: BusFinderConfig,
) -> BusFinderService:
    """Service over the sample catalog with a temporary history database."""
    return BusFinderService(sample_catalog, history=history_store, config=test_config)
