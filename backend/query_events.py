"""
Query engine: predicate filters over vehicle events.

Pure functions over lists of `VehicleEvent`; nothing here touches the
store. Services fetch candidates from `TelemetryRepo` and narrow them
with `apply_filter`.

Filter rules:
- `vehicle_id`: exact string match.
- `event_type`: exact enum match; `None` (or "ALL" when parsed with
    `parse_event_type`) means no type filter.
- `start_time` / `end_time`: inclusive on both ends, and only applied
    when *both* bounds are present.
- `search`: case-insensitive substring match (see `matches_search`),
    applied after the structured filters.
All supplied filters are ANDed. `apply_filter` keeps input order;
callers that need newest-first use `sort_newest_first`.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from errors import InvalidArgument
from models import EventType, VehicleEvent

ALL_EVENT_TYPES = "ALL"


@dataclass(frozen=True)
class EventFilter:
    vehicle_id: Optional[str] = None
    event_type: Optional[EventType] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    search: Optional[str] = None

    @property
    def has_time_range(self) -> bool:
        return self.start_time is not None and self.end_time is not None


def parse_timestamp(value: str, field: str) -> datetime:
    """Parse an ISO-8601 query value into an aware UTC datetime.

    A trailing `Z` is accepted; values without an offset are read as UTC.
    Raises `InvalidArgument` naming `field` when the value is unparseable.
    """

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        raise InvalidArgument(f"{field} must be a valid date string") from None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_event_type(value: Optional[str]) -> Optional[EventType]:
    """Map a query value to an `EventType`; empty or "ALL" means no filter."""

    if not value or value == ALL_EVENT_TYPES:
        return None
    try:
        return EventType(value)
    except ValueError:
        allowed = ", ".join([t.value for t in EventType] + [ALL_EVENT_TYPES])
        raise InvalidArgument(
            f"Unsupported event type: {value} (expected one of {allowed})"
        ) from None


def matches_search(event: VehicleEvent, search: str) -> bool:
    """Loose free-text match used by the events page search box.

    Checks the location and health fields first, then falls back to the
    full JSON serialization of the event, so any visible value matches.
    """

    needle = search.lower()
    data = event.data
    fields = [
        event.location,
        data.motor_health if data else None,
        data.brake_health if data else None,
        data.tires_pressure if data else None,
    ]
    if any(f and needle in f.lower() for f in fields):
        return True
    return needle in event.model_dump_json(by_alias=True).lower()


def apply_filter(events: Iterable[VehicleEvent], flt: EventFilter) -> List[VehicleEvent]:
    """Return the events matching every supplied predicate in `flt`."""

    result = list(events)

    if flt.vehicle_id:
        result = [e for e in result if e.vehicle_id == flt.vehicle_id]

    if flt.event_type is not None:
        result = [e for e in result if e.event_type == flt.event_type]

    if flt.has_time_range:
        result = [e for e in result if flt.start_time <= e.timestamp <= flt.end_time]

    # Free-text search runs last, on the already narrowed set
    if flt.search:
        result = [e for e in result if matches_search(e, flt.search)]

    return result


def sort_newest_first(events: Iterable[VehicleEvent]) -> List[VehicleEvent]:
    """Timestamp descending; equal timestamps fall back to insertion id."""

    return sorted(events, key=lambda e: (e.timestamp, e.id), reverse=True)


def latest_event(events: Iterable[VehicleEvent]) -> Optional[VehicleEvent]:
    """The event with the greatest timestamp (highest id wins a tie)."""

    return max(events, key=lambda e: (e.timestamp, e.id), default=None)
