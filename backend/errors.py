"""
Error taxonomy shared by the store, services and routes.

Services raise these; `main.py` translates them into HTTP responses.
They subclass the built-in exceptions the service layer already raised
(`ValueError`, `LookupError`) so existing `except ValueError` handlers
keep working.
"""


class TelemetryError(Exception):
    """Base class for all expected, request-scoped failures."""


class NotFound(TelemetryError, LookupError):
    """A referenced vehicle or required dependent data is absent."""


class InvalidArgument(TelemetryError, ValueError):
    """Malformed time strings, filter parameters or ingest payloads."""


class DuplicateKey(TelemetryError, ValueError):
    """A vehicle with the same `vehicleId` already exists."""
