"""
Status reducer: derive a vehicle's current status from its event stream.

The current status always comes from the event with the greatest
timestamp, never from insertion order. Ignition is ON only when that
event is itself an IGNITION_ON; a TIME_INTERVAL event reports OFF.
"""

from typing import List, Tuple

from errors import NotFound
from models import CurrentStatus, EventType, IgnitionStatus, VehicleEvent
from query_events import latest_event
from repo_telemetry import TelemetryRepo


def ignition_status_of(event: VehicleEvent) -> IgnitionStatus:
    if event.event_type == EventType.IGNITION_ON:
        return IgnitionStatus.ON
    return IgnitionStatus.OFF


class StatusService:
    def __init__(self, repo: TelemetryRepo):
        self.repo = repo

    def get_latest_event(self, vehicle_id: str) -> Tuple[VehicleEvent, List[VehicleEvent]]:
        """Return the latest event and the full event list for `vehicle_id`.

        Raises `NotFound` when the vehicle has no events.
        """

        events = self.repo.get_vehicle_events_by_vehicle_id(vehicle_id)
        latest = latest_event(events)
        if latest is None:
            raise NotFound("No events found for this vehicle")
        return latest, events

    def get_current_status(self, vehicle_id: str) -> CurrentStatus:
        latest, _ = self.get_latest_event(vehicle_id)
        trips = self.repo.get_recent_trips_by_vehicle_id(vehicle_id, 1)

        return CurrentStatus(
            vehicle=self.repo.get_vehicle_by_id(vehicle_id),
            latest_event=latest,
            latest_trip=trips[0] if trips else None,
            ignition_status=ignition_status_of(latest),
            timestamp=latest.timestamp,
        )
