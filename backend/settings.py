"""
Runtime knobs for the telemetry backend: demo seeding, request limits,
dashboard sizes and log level.

Values come from the process environment, with a local `.env` file
loaded first via `python-dotenv`. Defaults are chosen so the service
starts with demo data and no configuration at all.

Environment variables used:
- `SEED_ON_STARTUP` — seed the in-memory store with demo data at startup.
- `SEED_DAYS` — how many days back the synthetic event stream starts.
- `SEED_RANDOM_SEED` — optional integer seed for reproducible demo data.
- `MAX_BATCH_SIZE` — safety limit for ingest batch sizes.
- `MAX_TRIP_LIMIT` — maximum `limit` allowed for recent-trip queries.
- `LOG_LEVEL` — root log level configured by `main.py`.

Example `.env`:
SEED_ON_STARTUP=true
SEED_RANDOM_SEED=42
LOG_LEVEL=DEBUG

"""

from pydantic import BaseModel
from typing import Optional
import os
from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_optional_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    return int(raw) if raw else None


class Settings(BaseModel):
    """Telemetry backend settings, read once at import.

    Services read `settings.<field>` at call time, which lets tests
    monkeypatch a single field without reloading the module.
    """

    seed_on_startup: bool = _env_bool("SEED_ON_STARTUP", "true")
    seed_days: int = int(os.getenv("SEED_DAYS", "14"))
    seed_random_seed: Optional[int] = _env_optional_int("SEED_RANDOM_SEED")
    max_batch_size: int = int(os.getenv("MAX_BATCH_SIZE", "5000"))
    max_trip_limit: int = int(os.getenv("MAX_TRIP_LIMIT", "1000"))

    # Dashboard read-model sizes
    dashboard_trip_limit: int = 5
    dashboard_stats_rows: int = 7
    dashboard_event_limit: int = 10

    log_level: str = os.getenv("LOG_LEVEL", "INFO")


settings = Settings()
