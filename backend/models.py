"""
Pydantic models used across the backend.

Input shapes (`*In`) validate payloads at the FastAPI route boundary;
stored shapes add the surrogate `id` assigned by the repository; read
models (`CurrentStatus`, `Dashboard`) are assembled by the services.

Guidelines:
- Python attributes are snake_case; JSON uses the camelCase names the
    dashboard client expects (`vehicleId`, `batteryLevel`, ...). The
    alias generator on `CamelModel` maps between the two, so always
    serialize with `by_alias=True`.
- Enum fields serialize to their exact string values.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ConnectivityStatus(str, Enum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


class EventType(str, Enum):
    IGNITION_ON = "IGNITION_ON"
    IGNITION_OFF = "IGNITION_OFF"
    TIME_INTERVAL = "TIME_INTERVAL"


class IgnitionStatus(str, Enum):
    ON = "ON"
    OFF = "OFF"


# --- vehicles ---------------------------------------------------------------

class VehicleIn(CamelModel):
    vehicle_id: str = Field(min_length=1)
    name: str
    model: str
    year: int
    status: ConnectivityStatus


class Vehicle(VehicleIn):
    id: int


class StatusUpdate(CamelModel):
    status: ConnectivityStatus


# --- events -----------------------------------------------------------------

class EventData(CamelModel):
    """Health and alerts snapshot carried in the event's `data` field."""

    motor_health: Optional[str] = None
    brake_health: Optional[str] = None
    tires_pressure: Optional[str] = None
    estimated_range: Optional[int] = None
    alerts: List[str] = Field(default_factory=list)


class VehicleEventIn(CamelModel):
    """Input shape for a telemetry event.

    Fields:
    - `vehicle_id`: owning vehicle (not checked against the store).
    - `timestamp`: ISO-8601 timestamp. The service enforces timezone-awareness.
    - `event_type`: one of the three `EventType` values.
    - telemetry snapshot: nullable, as in the original table layout.
    """

    vehicle_id: str
    timestamp: datetime
    event_type: EventType
    location: Optional[str] = None
    speed: Optional[int] = Field(default=None, ge=0)
    battery_level: Optional[int] = Field(default=None, ge=0, le=100)
    odometer: Optional[int] = Field(default=None, ge=0)
    efficiency: Optional[int] = None
    temperature: Optional[int] = None
    data: Optional[EventData] = None


class VehicleEvent(VehicleEventIn):
    id: int


# --- trips ------------------------------------------------------------------

class TripIn(CamelModel):
    vehicle_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    distance: Optional[int] = None
    duration: Optional[int] = None
    avg_speed: Optional[int] = None
    energy_used: Optional[int] = None


class Trip(TripIn):
    id: int


class TripUpdate(CamelModel):
    """Partial trip correction. Only explicitly set fields are applied."""

    vehicle_id: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    start_location: Optional[str] = None
    end_location: Optional[str] = None
    distance: Optional[int] = None
    duration: Optional[int] = None
    avg_speed: Optional[int] = None
    energy_used: Optional[int] = None


# --- daily stats ------------------------------------------------------------

class VehicleStatsIn(CamelModel):
    vehicle_id: str
    date: datetime
    total_distance: Optional[int] = None
    avg_speed: Optional[int] = None
    avg_efficiency: Optional[int] = None
    trip_count: Optional[int] = None


class VehicleStats(VehicleStatsIn):
    id: int


# --- read models ------------------------------------------------------------

class CurrentStatus(CamelModel):
    """Point-in-time view served by `/api/status/{vehicleId}`."""

    vehicle: Optional[Vehicle] = None
    latest_event: VehicleEvent
    latest_trip: Optional[Trip] = None
    ignition_status: IgnitionStatus
    timestamp: datetime


class DashboardStatus(CamelModel):
    battery_level: Optional[int] = None
    speed: Optional[int] = None
    odometer: Optional[int] = None
    location: Optional[str] = None
    ignition_status: IgnitionStatus
    timestamp: datetime
    temperature: Optional[int] = None
    efficiency: Optional[int] = None
    data: Optional[EventData] = None


class Dashboard(CamelModel):
    vehicle: Vehicle
    current_status: DashboardStatus
    recent_trips: List[Trip]
    weekly_stats: List[VehicleStats]
    recent_events: List[VehicleEvent]
