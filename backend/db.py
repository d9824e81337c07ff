"""
Store provider.

This module centralizes how the telemetry store is obtained. Right now
there is a single process-wide `TelemetryRepo` living in memory; nothing
is written to disk and a restart starts from an empty (or re-seeded)
store.

Why this exists:
- Single place to swap storage strategy (a real database, a shared cache).
- Routes depend on `get_repo` through FastAPI's `Depends`, so tests can
    replace it with `app.dependency_overrides[get_repo]`.

Usage:
    from db import get_repo
    repo = get_repo()
    repo.get_all_vehicles()
"""

from repo_telemetry import TelemetryRepo

_repo = TelemetryRepo()


def get_repo() -> TelemetryRepo:
    """Return the process-wide in-memory store."""

    return _repo
