"""
Synthetic demo data for the in-memory store.

Creates five demo vehicles, walks each one through an ignition state
machine to produce a chronological event stream, and adds one stats row
per day for the last week. Events are written through `EventService`, so
trips are derived from the IGNITION_ON/IGNITION_OFF pairs exactly as they
would be for ingested data.

Pass a seeded `random.Random` for reproducible output.
"""

import logging
import random
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from errors import DuplicateKey
from models import (
    ConnectivityStatus,
    EventData,
    EventType,
    VehicleEventIn,
    VehicleIn,
    VehicleStatsIn,
)
from repo_telemetry import TelemetryRepo
from service_events import EventService

logger = logging.getLogger(__name__)

LOCATIONS = [
    "San Francisco, CA",
    "Oakland, CA",
    "Berkeley, CA",
    "Palo Alto, CA",
    "San Jose, CA",
    "Mountain View, CA",
    "Sunnyvale, CA",
    "Redwood City, CA",
    "Santa Clara, CA",
    "Fremont, CA",
]

DEMO_VEHICLES = [
    VehicleIn(vehicle_id="V001", name="TATA Nexon", model="Nexon", year=2022, status=ConnectivityStatus.ONLINE),
    VehicleIn(vehicle_id="V002", name="BMW i4", model="i4", year=2023, status=ConnectivityStatus.OFFLINE),
    VehicleIn(vehicle_id="V003", name="Audi Q1", model="Q1", year=2022, status=ConnectivityStatus.ONLINE),
    VehicleIn(vehicle_id="V004", name="Ford Mustang", model="Mustang", year=2023, status=ConnectivityStatus.OFFLINE),
    VehicleIn(vehicle_id="V005", name="Chevrolet Bolt", model="Bolt", year=2022, status=ConnectivityStatus.ONLINE),
]

HEALTH_LEVELS = ["Excellent", "Good", "Normal"]
TIRE_LEVELS = ["Optimal", "Normal", "Low"]


def generate_events(
    vehicle_id: str, start: datetime, rng: random.Random, end: Optional[datetime] = None
) -> List[VehicleEventIn]:
    """Simulate up to 30-50 events for one vehicle, 1-4 hours apart.

    The stream stops early once it would pass `end`.
    """

    battery = rng.randint(60, 95)
    odometer = rng.randint(10000, 50000)
    ignition_on = False
    location = rng.choice(LOCATIONS)

    events: List[VehicleEventIn] = []
    ts = start

    for _ in range(rng.randint(30, 50)):
        ts += timedelta(hours=rng.randint(1, 4))
        if end is not None and ts > end:
            break

        if not ignition_on and rng.random() > 0.3:
            event_type = EventType.IGNITION_ON
            ignition_on = True
        elif ignition_on and rng.random() > 0.6:
            event_type = EventType.IGNITION_OFF
            ignition_on = False
            odometer += rng.randint(5, 30)
            battery = max(30, battery - rng.randint(1, 10))
            location = rng.choice(LOCATIONS)
        else:
            event_type = EventType.TIME_INTERVAL
            if ignition_on:
                odometer += rng.randint(1, 5)
                battery = max(30, battery - rng.randint(0, 2))
            elif rng.random() > 0.7:
                # parked and charging
                battery = min(100, battery + rng.randint(1, 5))

        events.append(VehicleEventIn(
            vehicle_id=vehicle_id,
            timestamp=ts,
            event_type=event_type,
            location=location,
            speed=rng.randint(0, 120) if ignition_on else 0,
            battery_level=battery,
            odometer=odometer,
            efficiency=rng.randint(75, 95),
            temperature=rng.randint(18, 28),
            data=EventData(
                motor_health=rng.choice(HEALTH_LEVELS),
                brake_health=rng.choice(HEALTH_LEVELS),
                tires_pressure=rng.choice(TIRE_LEVELS),
                estimated_range=round(battery * 3.8),
                alerts=[],
            ),
        ))

    return events


def generate_stats(
    vehicle_id: str, now: datetime, rng: random.Random, days: int = 7
) -> List[VehicleStatsIn]:
    return [
        VehicleStatsIn(
            vehicle_id=vehicle_id,
            date=now - timedelta(days=day),
            total_distance=rng.randint(20, 150),
            avg_speed=rng.randint(30, 70),
            avg_efficiency=rng.randint(75, 95),
            trip_count=rng.randint(1, 6),
        )
        for day in range(days)
    ]


def seed_demo_data(
    repo: TelemetryRepo,
    days: int = 14,
    rng: Optional[random.Random] = None,
    now: Optional[datetime] = None,
) -> Dict[str, int]:
    """Populate `repo` with demo vehicles, events, trips and stats.

    Vehicles that already exist are skipped along with their events.
    Returns how many rows of each kind were added.
    """

    rng = rng or random.Random()
    now = now or datetime.now(timezone.utc)
    svc = EventService(repo)
    before = repo.counts()

    for vehicle in DEMO_VEHICLES:
        try:
            repo.create_vehicle(vehicle)
        except DuplicateKey:
            logger.warning("Skipping seed for existing vehicle %s", vehicle.vehicle_id)
            continue

        svc.ingest_events(
            generate_events(vehicle.vehicle_id, now - timedelta(days=days), rng, end=now)
        )
        for stats in generate_stats(vehicle.vehicle_id, now, rng):
            repo.create_vehicle_stats(stats)

    after = repo.counts()
    added = {k: after[k] - before[k] for k in after}
    logger.info("Seeded demo data: %s", added)
    return added
