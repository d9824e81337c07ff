"""Shared fixtures: a fresh in-memory store per test and event builders."""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from db import get_repo
from main import app
from models import (
    ConnectivityStatus,
    EventData,
    EventType,
    TripIn,
    VehicleEventIn,
    VehicleIn,
    VehicleStatsIn,
)
from repo_telemetry import TelemetryRepo
from settings import settings

T0 = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)


def at(hours: float) -> datetime:
    """Timestamp `hours` after the fixed test origin T0."""
    return T0 + timedelta(hours=hours)


def make_vehicle(vehicle_id="V001", status=ConnectivityStatus.ONLINE, **overrides) -> VehicleIn:
    fields = dict(vehicle_id=vehicle_id, name="TATA Nexon", model="Nexon", year=2022, status=status)
    fields.update(overrides)
    return VehicleIn(**fields)


def make_event(vehicle_id="V001", hours=0.0, event_type=EventType.TIME_INTERVAL, **overrides) -> VehicleEventIn:
    fields = dict(
        vehicle_id=vehicle_id,
        timestamp=at(hours),
        event_type=event_type,
        location="Oakland, CA",
        speed=0,
        battery_level=80,
        odometer=12000,
        efficiency=85,
        temperature=22,
        data=EventData(
            motor_health="Good",
            brake_health="Excellent",
            tires_pressure="Optimal",
            estimated_range=304,
            alerts=[],
        ),
    )
    fields.update(overrides)
    return VehicleEventIn(**fields)


def make_trip(vehicle_id="V001", hours=0.0, **overrides) -> TripIn:
    fields = dict(
        vehicle_id=vehicle_id,
        start_time=at(hours),
        end_time=at(hours + 1),
        start_location="Oakland, CA",
        end_location="Berkeley, CA",
        distance=12,
        duration=60,
        avg_speed=12,
        energy_used=4,
    )
    fields.update(overrides)
    return TripIn(**fields)


def make_stats(vehicle_id="V001", days_ago=0, **overrides) -> VehicleStatsIn:
    fields = dict(
        vehicle_id=vehicle_id,
        date=T0 - timedelta(days=days_ago),
        total_distance=80,
        avg_speed=45,
        avg_efficiency=88,
        trip_count=3,
    )
    fields.update(overrides)
    return VehicleStatsIn(**fields)


@pytest.fixture
def repo():
    return TelemetryRepo()


@pytest.fixture
def api_client(repo, monkeypatch):
    """TestClient with the store dependency overridden to a fresh repo."""
    monkeypatch.setattr(settings, "seed_on_startup", False)
    app.dependency_overrides[get_repo] = lambda: repo
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
