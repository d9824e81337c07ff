import logging
import random
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Query

from db import get_repo
from errors import DuplicateKey, InvalidArgument, NotFound
from models import StatusUpdate, TripUpdate, VehicleEventIn, VehicleIn
from repo_telemetry import TelemetryRepo
from seed import seed_demo_data
from service_dashboard import DashboardService
from service_events import EventService
from service_status import StatusService
from service_vehicles import DEFAULT_TRIP_LIMIT, VehicleService
from settings import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _seed_rng() -> random.Random:
    return random.Random(settings.seed_random_seed)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Seed the in-memory store once, before the first request
    if settings.seed_on_startup:
        seed_demo_data(get_repo(), days=settings.seed_days, rng=_seed_rng())
    yield


app = FastAPI(title="Vehicle Telemetry Backend", lifespan=lifespan)

# Services are built per request around the injected store so routes stay
# thin and tests can swap the store with `app.dependency_overrides`.


def event_service(repo: TelemetryRepo = Depends(get_repo)) -> EventService:
    return EventService(repo)


def vehicle_service(repo: TelemetryRepo = Depends(get_repo)) -> VehicleService:
    return VehicleService(repo)


def status_service(repo: TelemetryRepo = Depends(get_repo)) -> StatusService:
    return StatusService(repo)


def dashboard_service(repo: TelemetryRepo = Depends(get_repo)) -> DashboardService:
    return DashboardService(repo)


@app.get("/health")
def health(repo: TelemetryRepo = Depends(get_repo)):
    return {"ok": True, "counts": repo.counts()}


# Vehicles

@app.get("/api/vehicles")
def list_vehicles(svc: VehicleService = Depends(vehicle_service)):
    return {"vehicles": svc.list_vehicles()}


@app.get("/api/vehicles/{vehicle_id}")
def get_vehicle(vehicle_id: str, svc: VehicleService = Depends(vehicle_service)):
    try:
        return {"vehicle": svc.get_vehicle(vehicle_id)}
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/api/vehicles", status_code=201)
def create_vehicle(vehicle: VehicleIn, svc: VehicleService = Depends(vehicle_service)):
    try:
        return {"vehicle": svc.create_vehicle(vehicle)}
    except DuplicateKey as e:
        raise HTTPException(status_code=409, detail=str(e))


@app.patch("/api/vehicles/{vehicle_id}/status")
def update_vehicle_status(
    vehicle_id: str, update: StatusUpdate, svc: VehicleService = Depends(vehicle_service)
):
    try:
        return {"vehicle": svc.update_status(vehicle_id, update.status)}
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


# Events

@app.get("/api/events")
def list_events(svc: EventService = Depends(event_service)):
    return {"events": svc.list_events()}


@app.post("/api/events")
def ingest(events: List[VehicleEventIn], svc: EventService = Depends(event_service)):
    try:
        return {"inserted": svc.ingest_events(events)}
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/events/vehicle/{vehicle_id}")
def list_events_by_vehicle(vehicle_id: str, svc: EventService = Depends(event_service)):
    return {"events": svc.list_events_by_vehicle(vehicle_id)}


@app.get("/api/events/type/{event_type}")
def list_events_by_type(event_type: str, svc: EventService = Depends(event_service)):
    try:
        return {"events": svc.list_events_by_type(event_type)}
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/events/timeframe")
def list_events_by_timeframe(
    start_time: str = Query(..., alias="startTime"),
    end_time: str = Query(..., alias="endTime"),
    svc: EventService = Depends(event_service),
):
    try:
        return {"events": svc.list_events_by_time_range(start_time, end_time)}
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/events/filter")
def filter_events(
    vehicle_id: Optional[str] = Query(None, alias="vehicleId"),
    event_type: Optional[str] = Query(None, alias="eventType"),
    start_time: Optional[str] = Query(None, alias="startTime"),
    end_time: Optional[str] = Query(None, alias="endTime"),
    search: Optional[str] = None,
    svc: EventService = Depends(event_service),
):
    try:
        events = svc.filter_events(vehicle_id, event_type, start_time, end_time, search)
        return {"events": events}
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))


# Stats, trips, status, dashboard

@app.get("/api/stats/{vehicle_id}")
def get_stats(vehicle_id: str, svc: VehicleService = Depends(vehicle_service)):
    return {"stats": svc.get_stats(vehicle_id)}


@app.get("/api/trips/{vehicle_id}")
def get_recent_trips(
    vehicle_id: str,
    limit: int = DEFAULT_TRIP_LIMIT,
    svc: VehicleService = Depends(vehicle_service),
):
    return {"trips": svc.get_recent_trips(vehicle_id, limit)}


@app.patch("/api/trips/{trip_id}")
def update_trip(trip_id: int, changes: TripUpdate, svc: VehicleService = Depends(vehicle_service)):
    try:
        return {"trip": svc.update_trip(trip_id, changes)}
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidArgument as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/api/status/{vehicle_id}")
def get_status(vehicle_id: str, svc: StatusService = Depends(status_service)):
    try:
        return {"status": svc.get_current_status(vehicle_id)}
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/api/dashboard/{vehicle_id}")
def get_dashboard(vehicle_id: str, svc: DashboardService = Depends(dashboard_service)):
    try:
        return svc.get_dashboard(vehicle_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/api/seed")
def seed(days: int = settings.seed_days, repo: TelemetryRepo = Depends(get_repo)):
    # NOTE: goes through the seeder, which writes events via EventService
    return {"added": seed_demo_data(repo, days=days, rng=_seed_rng())}
