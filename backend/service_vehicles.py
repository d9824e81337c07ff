"""
Service / facade layer for vehicles, trips and daily stats.

Thin rules on top of `TelemetryRepo`: turn "not found" results into
`NotFound`, clamp caller-supplied limits, and log writes.
"""

import logging
from datetime import timezone
from typing import List

from pydantic.alias_generators import to_camel

from errors import InvalidArgument, NotFound
from models import (
    ConnectivityStatus,
    Trip,
    TripUpdate,
    Vehicle,
    VehicleIn,
    VehicleStats,
)
from repo_telemetry import TelemetryRepo
from settings import settings

logger = logging.getLogger(__name__)

DEFAULT_TRIP_LIMIT = 10
REQUIRED_TRIP_FIELDS = ("vehicle_id", "start_time")


class VehicleService:
    def __init__(self, repo: TelemetryRepo):
        self.repo = repo

    def list_vehicles(self) -> List[Vehicle]:
        return self.repo.get_all_vehicles()

    def get_vehicle(self, vehicle_id: str) -> Vehicle:
        vehicle = self.repo.get_vehicle_by_id(vehicle_id)
        if vehicle is None:
            raise NotFound("Vehicle not found")
        return vehicle

    def create_vehicle(self, vehicle: VehicleIn) -> Vehicle:
        created = self.repo.create_vehicle(vehicle)
        logger.info("Created vehicle %s (id=%d)", created.vehicle_id, created.id)
        return created

    def update_status(self, vehicle_id: str, status: ConnectivityStatus) -> Vehicle:
        vehicle = self.repo.update_vehicle_status(vehicle_id, status)
        if vehicle is None:
            raise NotFound("Vehicle not found")
        logger.info("Vehicle %s is now %s", vehicle_id, status.value)
        return vehicle

    def get_stats(self, vehicle_id: str) -> List[VehicleStats]:
        return self.repo.get_vehicle_stats_by_vehicle_id(vehicle_id)

    def get_recent_trips(self, vehicle_id: str, limit: int = DEFAULT_TRIP_LIMIT) -> List[Trip]:
        """Return newest-first trips for `vehicle_id` capped by configured limits."""

        limit = max(0, min(limit, settings.max_trip_limit))
        return self.repo.get_recent_trips_by_vehicle_id(vehicle_id, limit)

    def update_trip(self, trip_id: int, changes: TripUpdate) -> Trip:
        """Correct a stored trip. Times must carry an offset and are stored in UTC."""

        trip = self.repo.update_trip(trip_id, _normalize_trip_update(changes))
        if trip is None:
            raise NotFound("Trip not found")
        return trip


def _normalize_trip_update(changes: TripUpdate) -> TripUpdate:
    set_fields = changes.model_fields_set
    for field in REQUIRED_TRIP_FIELDS:
        if field in set_fields and getattr(changes, field) is None:
            raise InvalidArgument(f"{to_camel(field)} cannot be null")

    normalized = {}
    for field in ("start_time", "end_time"):
        value = getattr(changes, field)
        if field not in set_fields or value is None:
            continue
        if value.tzinfo is None:
            raise InvalidArgument(
                f"{to_camel(field)} must include timezone info (e.g., 2026-02-20T10:00:00Z)"
            )
        normalized[field] = value.astimezone(timezone.utc)
    return changes.model_copy(update=normalized)
