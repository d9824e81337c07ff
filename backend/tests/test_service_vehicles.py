"""Tests for VehicleService."""
from datetime import datetime, timedelta, timezone

import pytest

from conftest import at, make_trip, make_vehicle
from errors import DuplicateKey, InvalidArgument, NotFound
from models import ConnectivityStatus, TripUpdate
from service_vehicles import VehicleService
from settings import settings


@pytest.fixture
def svc(repo):
    return VehicleService(repo)


def test_get_vehicle_not_found(svc):
    with pytest.raises(NotFound):
        svc.get_vehicle("V404")


def test_create_and_list(svc):
    svc.create_vehicle(make_vehicle("V001"))
    svc.create_vehicle(make_vehicle("V002"))
    assert [v.vehicle_id for v in svc.list_vehicles()] == ["V001", "V002"]


def test_duplicate_propagates(svc):
    svc.create_vehicle(make_vehicle("V001"))
    with pytest.raises(DuplicateKey):
        svc.create_vehicle(make_vehicle("V001"))


def test_update_status_unknown(svc):
    with pytest.raises(NotFound):
        svc.update_status("V404", ConnectivityStatus.ONLINE)


def test_recent_trips_default_limit(svc, repo):
    for hours in range(12):
        repo.create_trip(make_trip(hours=hours))
    assert len(svc.get_recent_trips("V001")) == 10


def test_recent_trips_limit_clamped(svc, repo, monkeypatch):
    monkeypatch.setattr(settings, "max_trip_limit", 3)
    for hours in range(5):
        repo.create_trip(make_trip(hours=hours))
    assert len(svc.get_recent_trips("V001", 100)) == 3
    assert svc.get_recent_trips("V001", -1) == []


def test_update_trip_not_found(svc):
    with pytest.raises(NotFound, match="Trip not found"):
        svc.update_trip(1, TripUpdate(distance=3))


def test_update_trip_naive_time_rejected_and_trip_unchanged(svc, repo):
    trip = repo.create_trip(make_trip())
    with pytest.raises(InvalidArgument, match="endTime must include timezone"):
        svc.update_trip(trip.id, TripUpdate(end_time=datetime(2025, 3, 1, 12, 0)))
    assert repo.get_trips_by_vehicle_id("V001") == [trip]


def test_update_trip_null_vehicle_rejected(svc, repo):
    trip = repo.create_trip(make_trip())
    with pytest.raises(InvalidArgument, match="vehicleId cannot be null"):
        svc.update_trip(trip.id, TripUpdate(vehicle_id=None))


def test_update_trip_converts_offset_to_utc(svc, repo):
    trip = repo.create_trip(make_trip())
    minus_five = timezone(timedelta(hours=-5))
    updated = svc.update_trip(trip.id, TripUpdate(start_time=datetime(2025, 3, 1, 3, 0, tzinfo=minus_five)))

    assert updated.start_time == at(0)
    assert updated.start_time.tzinfo == timezone.utc
    assert updated.distance == trip.distance
