"""Loader for the static bus route JSON dataset."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from busfinder_mcp.models.route import Route

logger = logging.getLogger(__name__)


class RouteStops(BaseModel):
    """The `routes` object of a dataset entry."""

    forward: list[str] = Field(min_length=1)
    backward: list[str] | None = None


class BusRecord(BaseModel):
    """One entry of the dataset's `buses` array."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str
    name: str = ""
    name_en: str | None = None
    name_bn: str | None = None
    routes: RouteStops
    service_type: str | None = None

    def to_route(self) -> Route:
        return Route(
            id=self.id,
            name=self.name,
            name_en=self.name_en,
            name_bn=self.name_bn,
            service_type=self.service_type,
            stop_sequence=self.routes.forward,
            reverse_stop_sequence=self.routes.backward or None,
        )


def parse_routes(document: Any) -> list[Route]:
    """Convert a deserialized dataset document into routes.

    Entries that fail validation are skipped with a warning. When an id
    appears more than once only the first entry is kept.
    """
    if not isinstance(document, dict) or not isinstance(document.get("buses"), list):
        logger.error("Dataset has no 'buses' array")
        return []

    routes: list[Route] = []
    seen_ids: set[str] = set()

    for position, entry in enumerate(document["buses"]):
        try:
            record = BusRecord.model_validate(entry)
        except ValidationError as e:
            logger.warning(f"Skipping malformed bus entry at position {position}: {e}")
            continue

        if record.id in seen_ids:
            logger.warning(f"Skipping duplicate bus id {record.id!r}")
            continue
        seen_ids.add(record.id)
        routes.append(record.to_route())

    return routes


def load_routes(dataset_path: Path) -> list[Route]:
    """Load all routes from the dataset file.

    A missing or unparseable file degrades to an empty list so that every
    downstream search returns empty results instead of failing.

    Args:
        dataset_path: Path to the JSON dataset

    Returns:
        Routes in dataset order
    """
    try:
        document = json.loads(dataset_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load bus routes from {dataset_path}: {e}")
        return []

    routes = parse_routes(document)
    logger.info(f"Loaded {len(routes)} bus routes from {dataset_path}")
    if routes:
        sample = ", ".join(route.display_name for route in routes[:3])
        logger.debug(f"Sample buses: {sample}")
    return routes
