"""
Service / facade layer for vehicle events.

This module implements the event read paths (list and filter) and the
ingest write path. It is intentionally free of storage details: it calls
`TelemetryRepo` for primitive reads and writes and `query_events` for
filtering. All event writes should go through this service so trips are
derived consistently.

Key responsibilities:
- protect the system (max batch sizes)
- enforce timestamp rules (timezone-awareness + UTC normalization)
- enforce the ignition-off speed rule
- derive a `Trip` whenever an IGNITION_OFF closes an open IGNITION_ON
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from errors import InvalidArgument
from models import EventType, TripIn, VehicleEvent, VehicleEventIn
from query_events import (
    EventFilter,
    apply_filter,
    latest_event,
    parse_event_type,
    parse_timestamp,
)
from repo_telemetry import TelemetryRepo
from settings import settings

logger = logging.getLogger(__name__)

IGNITION_TYPES = {EventType.IGNITION_ON, EventType.IGNITION_OFF}


class EventService:
    """Event queries + ingest validation + trip derivation.

    Example usage:
        repo = TelemetryRepo()
        svc = EventService(repo)
        svc.ingest_events(events)
        svc.filter_events(vehicle_id="V001", event_type="IGNITION_ON")
    """

    def __init__(self, repo: TelemetryRepo):
        self.repo = repo

    # Reads

    def list_events(self) -> List[VehicleEvent]:
        return self.repo.get_all_vehicle_events()

    def list_events_by_vehicle(self, vehicle_id: str) -> List[VehicleEvent]:
        return self.repo.get_vehicle_events_by_vehicle_id(vehicle_id)

    def list_events_by_type(self, event_type: str) -> List[VehicleEvent]:
        """Events of one type. "ALL" returns every event."""

        flt = EventFilter(event_type=parse_event_type(event_type))
        return apply_filter(self.repo.get_all_vehicle_events(), flt)

    def list_events_by_time_range(self, start_time: str, end_time: str) -> List[VehicleEvent]:
        """Events with `start_time <= timestamp <= end_time`. Both bounds required."""

        flt = EventFilter(
            start_time=parse_timestamp(start_time, "startTime"),
            end_time=parse_timestamp(end_time, "endTime"),
        )
        return apply_filter(self.repo.get_all_vehicle_events(), flt)

    def filter_events(
        self,
        vehicle_id: Optional[str] = None,
        event_type: Optional[str] = None,
        start_time: Optional[str] = None,
        end_time: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[VehicleEvent]:
        """Combine the optional filters with AND semantics.

        Time strings are validated even when only one bound is given, but
        the range only applies once both are present.
        """

        flt = EventFilter(
            vehicle_id=vehicle_id or None,
            event_type=parse_event_type(event_type),
            start_time=parse_timestamp(start_time, "startTime") if start_time else None,
            end_time=parse_timestamp(end_time, "endTime") if end_time else None,
            search=search or None,
        )
        return apply_filter(self.repo.get_all_vehicle_events(), flt)

    # Writes

    def ingest_events(self, events: List[VehicleEventIn]) -> int:
        """Validate and store a batch of events, deriving trips on the way.

        Steps:
        1. Quick guards (empty list, batch size limit).
        2. Validate and normalize every event before writing any of them.
        3. Insert in timestamp order and close open trips on IGNITION_OFF.

        Raises:
        - `InvalidArgument` for oversized batches, naive timestamps, or an
          IGNITION_OFF event reporting non-zero speed
        """

        # 1) protect the system
        if len(events) == 0:
            return 0
        if len(events) > settings.max_batch_size:
            raise InvalidArgument(
                f"Too many events in one request: {len(events)} (max {settings.max_batch_size})"
            )

        # 2) validate/normalize each event
        normalized = [self._normalize(e) for e in events]

        # 3) write, oldest first, so trips close against earlier ignitions
        normalized.sort(key=lambda e: e.timestamp)
        trips = 0
        for e in normalized:
            stored = self.repo.create_vehicle_event(e)
            if stored.event_type == EventType.IGNITION_OFF and self._close_trip(stored):
                trips += 1

        logger.info("Ingested %d events (%d trips derived)", len(normalized), trips)
        return len(normalized)

    def _normalize(self, event: VehicleEventIn) -> VehicleEventIn:
        # Must be timezone-aware
        if event.timestamp.tzinfo is None:
            raise InvalidArgument(
                "Timestamp must include timezone info (e.g., 2026-02-20T10:00:00Z)"
            )
        if event.event_type == EventType.IGNITION_OFF and event.speed:
            raise InvalidArgument(
                f"Speed must be 0 when ignition is off (vehicle {event.vehicle_id}, speed {event.speed})"
            )
        # Normalize to UTC; the store compares timestamps directly.
        return event.model_copy(update={"timestamp": event.timestamp.astimezone(timezone.utc)})

    def _close_trip(self, off_event: VehicleEvent) -> bool:
        """Create a trip if the previous ignition event was an IGNITION_ON."""

        key = (off_event.timestamp, off_event.id)
        earlier = [
            e
            for e in self.repo.get_vehicle_events_by_vehicle_id(off_event.vehicle_id)
            if e.event_type in IGNITION_TYPES and (e.timestamp, e.id) < key
        ]
        on_event = latest_event(earlier)
        if on_event is None or on_event.event_type != EventType.IGNITION_ON:
            return False

        # A later OFF already closed this ignition cycle
        trips = self.repo.get_trips_by_vehicle_id(off_event.vehicle_id)
        if any(t.start_time == on_event.timestamp for t in trips):
            return False

        self.repo.create_trip(build_trip(on_event, off_event))
        return True


def build_trip(on_event: VehicleEvent, off_event: VehicleEvent) -> TripIn:
    """Summarize one IGNITION_ON -> IGNITION_OFF cycle as a trip."""

    duration = _minutes_between(on_event.timestamp, off_event.timestamp)

    distance = None
    if on_event.odometer is not None and off_event.odometer is not None:
        distance = max(0, off_event.odometer - on_event.odometer)

    avg_speed = None
    if distance is not None:
        avg_speed = round(distance / (duration / 60)) if duration > 0 else 0

    energy_used = None
    if on_event.battery_level is not None and off_event.battery_level is not None:
        energy_used = max(0, on_event.battery_level - off_event.battery_level)

    return TripIn(
        vehicle_id=off_event.vehicle_id,
        start_time=on_event.timestamp,
        end_time=off_event.timestamp,
        start_location=on_event.location,
        end_location=off_event.location,
        distance=distance,
        duration=duration,
        avg_speed=avg_speed,
        energy_used=energy_used,
    )


def _minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)
