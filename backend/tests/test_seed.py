"""Tests for the synthetic demo data seeder."""
import random
from datetime import datetime, timedelta, timezone

from conftest import make_vehicle
from models import EventType
from query_events import sort_newest_first
from repo_telemetry import TelemetryRepo
from seed import DEMO_VEHICLES, generate_events, seed_demo_data

NOW = datetime(2025, 3, 15, 12, 0, tzinfo=timezone.utc)


def test_generated_events_are_chronological_and_consistent():
    events = generate_events("V001", NOW - timedelta(days=14), random.Random(3))

    assert 30 <= len(events) <= 50
    stamps = [e.timestamp for e in events]
    assert stamps == sorted(stamps)
    odometers = [e.odometer for e in events]
    assert odometers == sorted(odometers)
    assert all(0 <= e.battery_level <= 100 for e in events)
    assert all(e.speed == 0 for e in events if e.event_type == EventType.IGNITION_OFF)


def test_seed_is_reproducible(repo):
    other = TelemetryRepo()
    seed_demo_data(repo, rng=random.Random(42), now=NOW)
    seed_demo_data(other, rng=random.Random(42), now=NOW)

    assert repo.get_all_vehicle_events() == other.get_all_vehicle_events()
    assert repo.counts() == other.counts()


def test_seed_derives_one_trip_per_ignition_cycle(repo):
    seed_demo_data(repo, rng=random.Random(1), now=NOW)

    for vehicle in DEMO_VEHICLES:
        events = repo.get_vehicle_events_by_vehicle_id(vehicle.vehicle_id)
        offs = [e for e in events if e.event_type == EventType.IGNITION_OFF]
        assert len(repo.get_trips_by_vehicle_id(vehicle.vehicle_id)) == len(offs)
        assert len(repo.get_vehicle_stats_by_vehicle_id(vehicle.vehicle_id)) == 7
        assert sort_newest_first(events)[0].timestamp <= NOW


def test_seed_skips_existing_vehicles(repo):
    repo.create_vehicle(make_vehicle("V001"))
    added = seed_demo_data(repo, rng=random.Random(5), now=NOW)

    assert added["vehicles"] == 4
    assert repo.get_vehicle_events_by_vehicle_id("V001") == []


def test_short_seed_window_never_runs_past_now(repo):
    seed_demo_data(repo, days=1, rng=random.Random(9), now=NOW)

    events = repo.get_all_vehicle_events()
    assert events
    assert all(NOW - timedelta(days=1) < e.timestamp <= NOW for e in events)
    assert all(t.end_time <= NOW for t in repo.get_trips_by_vehicle_id("V001"))


def test_generate_events_stops_at_end():
    start = NOW - timedelta(hours=6)
    events = generate_events("V001", start, random.Random(2), end=NOW)
    assert len(events) <= 6
    assert all(e.timestamp <= NOW for e in events)
