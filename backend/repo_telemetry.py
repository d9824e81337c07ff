"""
Repository: in-memory storage for vehicles, events, trips and daily stats.

This file contains only storage code: collections, surrogate-id counters
and primitive accessors keyed by simple equality. Filtering policy,
ordering rules and derived views live in `query_events.py` and the
`service_*` modules. Keep business rules out of this module.

Important notes:
- Every entity type has its own id counter starting at 1; ids are not
    unique across entity types.
- Reads hand out deep copies, so callers cannot mutate stored records
    through a returned reference.
- All access goes through one lock. FastAPI runs sync routes in a
    thread pool, so counters and appends must not interleave.
"""

import threading
from typing import Dict, List, Optional, TypeVar

from pydantic import BaseModel

from errors import DuplicateKey
from models import (
    ConnectivityStatus,
    Trip,
    TripIn,
    TripUpdate,
    Vehicle,
    VehicleEvent,
    VehicleEventIn,
    VehicleIn,
    VehicleStats,
    VehicleStatsIn,
)

M = TypeVar("M", bound=BaseModel)


def _copy(record: M) -> M:
    return record.model_copy(deep=True)


class TelemetryRepo:
    """Storage only. No business logic here.

    Responsibilities:
    - Map `*In` models -> stored models with an assigned `id`
    - Keep per-entity id counters and insertion-ordered collections
    - Return snapshots (copies), never live records
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._vehicles: Dict[str, Vehicle] = {}
        self._events: List[VehicleEvent] = []
        self._trips: List[Trip] = []
        self._stats: List[VehicleStats] = []

        self._next_vehicle_id = 1
        self._next_event_id = 1
        self._next_trip_id = 1
        self._next_stats_id = 1

    # Vehicle operations

    def get_all_vehicles(self) -> List[Vehicle]:
        with self._lock:
            return [_copy(v) for v in self._vehicles.values()]

    def get_vehicle_by_id(self, vehicle_id: str) -> Optional[Vehicle]:
        with self._lock:
            vehicle = self._vehicles.get(vehicle_id)
            return _copy(vehicle) if vehicle else None

    def create_vehicle(self, vehicle: VehicleIn) -> Vehicle:
        """Insert a vehicle. Raises `DuplicateKey` if `vehicle_id` is taken."""

        with self._lock:
            if vehicle.vehicle_id in self._vehicles:
                raise DuplicateKey(f"Vehicle already exists: {vehicle.vehicle_id}")
            stored = Vehicle(id=self._next_vehicle_id, **vehicle.model_dump())
            self._next_vehicle_id += 1
            self._vehicles[stored.vehicle_id] = stored
            return _copy(stored)

    def update_vehicle_status(
        self, vehicle_id: str, status: ConnectivityStatus
    ) -> Optional[Vehicle]:
        with self._lock:
            vehicle = self._vehicles.get(vehicle_id)
            if vehicle is None:
                return None
            updated = vehicle.model_copy(update={"status": status})
            self._vehicles[vehicle_id] = updated
            return _copy(updated)

    # Vehicle event operations

    def get_all_vehicle_events(self) -> List[VehicleEvent]:
        with self._lock:
            return [_copy(e) for e in self._events]

    def get_vehicle_events_by_vehicle_id(self, vehicle_id: str) -> List[VehicleEvent]:
        with self._lock:
            return [_copy(e) for e in self._events if e.vehicle_id == vehicle_id]

    def create_vehicle_event(self, event: VehicleEventIn) -> VehicleEvent:
        with self._lock:
            stored = VehicleEvent(id=self._next_event_id, **event.model_dump())
            self._next_event_id += 1
            self._events.append(stored)
            return _copy(stored)

    # Vehicle stats operations

    def get_vehicle_stats_by_vehicle_id(self, vehicle_id: str) -> List[VehicleStats]:
        with self._lock:
            return [_copy(s) for s in self._stats if s.vehicle_id == vehicle_id]

    def create_vehicle_stats(self, stats: VehicleStatsIn) -> VehicleStats:
        with self._lock:
            stored = VehicleStats(id=self._next_stats_id, **stats.model_dump())
            self._next_stats_id += 1
            self._stats.append(stored)
            return _copy(stored)

    # Trip operations

    def get_trips_by_vehicle_id(self, vehicle_id: str) -> List[Trip]:
        with self._lock:
            return [_copy(t) for t in self._trips if t.vehicle_id == vehicle_id]

    def get_recent_trips_by_vehicle_id(self, vehicle_id: str, limit: int) -> List[Trip]:
        """Return up to `limit` trips for `vehicle_id`, newest start time first."""

        trips = self.get_trips_by_vehicle_id(vehicle_id)
        trips.sort(key=lambda t: (t.start_time, t.id), reverse=True)
        return trips[: max(0, limit)]

    def create_trip(self, trip: TripIn) -> Trip:
        with self._lock:
            stored = Trip(id=self._next_trip_id, **trip.model_dump())
            self._next_trip_id += 1
            self._trips.append(stored)
            return _copy(stored)

    def update_trip(self, trip_id: int, changes: TripUpdate) -> Optional[Trip]:
        """Apply the explicitly set fields of `changes` to trip `trip_id`."""

        update_data = changes.model_dump(exclude_unset=True)
        with self._lock:
            for index, trip in enumerate(self._trips):
                if trip.id == trip_id:
                    updated = Trip.model_validate({**trip.model_dump(), **update_data})
                    self._trips[index] = updated
                    return _copy(updated)
            return None

    def counts(self) -> Dict[str, int]:
        """Row count per collection. Used by the `/health` endpoint."""

        with self._lock:
            return {
                "vehicles": len(self._vehicles),
                "events": len(self._events),
                "trips": len(self._trips),
                "stats": len(self._stats),
            }
