"""
Dashboard aggregator: one composed read-model per vehicle.

Pure read composition over the store. Missing vehicle or missing events
abort the aggregation with `NotFound`; trips, stats and the event
timeline fall back to empty lists.

The weekly stats are the most recent rows by date, capped by row count.
Rows are not deduplicated per day, so duplicate dates shrink the number
of distinct days shown.
"""

from models import Dashboard, DashboardStatus
from query_events import sort_newest_first
from repo_telemetry import TelemetryRepo
from service_status import StatusService, ignition_status_of
from service_vehicles import VehicleService
from settings import settings


class DashboardService:
    def __init__(self, repo: TelemetryRepo):
        self.repo = repo
        self.vehicles = VehicleService(repo)
        self.status = StatusService(repo)

    def get_dashboard(self, vehicle_id: str) -> Dashboard:
        # 1) vehicle, 2) latest event: both terminal when missing
        vehicle = self.vehicles.get_vehicle(vehicle_id)
        latest, events = self.status.get_latest_event(vehicle_id)

        # 3) most recent trips
        trips = self.repo.get_recent_trips_by_vehicle_id(
            vehicle_id, settings.dashboard_trip_limit
        )

        # 4) most recent stats rows
        stats = self.repo.get_vehicle_stats_by_vehicle_id(vehicle_id)
        stats.sort(key=lambda s: (s.date, s.id), reverse=True)
        weekly_stats = stats[: settings.dashboard_stats_rows]

        # 5) event timeline
        recent_events = sort_newest_first(events)[: settings.dashboard_event_limit]

        return Dashboard(
            vehicle=vehicle,
            current_status=DashboardStatus(
                battery_level=latest.battery_level,
                speed=latest.speed,
                odometer=latest.odometer,
                location=latest.location,
                ignition_status=ignition_status_of(latest),
                timestamp=latest.timestamp,
                temperature=latest.temperature,
                efficiency=latest.efficiency,
                data=latest.data,
            ),
            recent_trips=trips,
            weekly_stats=weekly_stats,
            recent_events=recent_events,
        )
