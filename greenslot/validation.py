"""
Input validation for job requests and location reference data.
"""

import math
from dataclasses import replace
from typing import Optional

from .models import JobRequest, Location, Priority

MIN_DURATION_HOURS = 1
MAX_DURATION_HOURS = 168


class InvalidJobRequest(ValueError):
    """Raised when a job request cannot be scheduled at all."""


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_job(job: JobRequest) -> JobRequest:
    """
    Check a job request before any computation happens.

    Returns the job with its priority normalised to a Priority member,
    so callers may pass plain strings such as "carbon".

    Raises:
        InvalidJobRequest: device count, duration or priority is unusable
    """
    if not _is_int(job.device_count) or job.device_count <= 0:
        raise InvalidJobRequest(
            f"device_count must be a positive integer, got {job.device_count!r}"
        )

    if not _is_int(job.duration_hours) or not (
        MIN_DURATION_HOURS <= job.duration_hours <= MAX_DURATION_HOURS
    ):
        raise InvalidJobRequest(
            f"duration_hours must be an integer in [{MIN_DURATION_HOURS}, "
            f"{MAX_DURATION_HOURS}], got {job.duration_hours!r}"
        )

    try:
        priority = Priority(job.priority)
    except ValueError as exc:
        choices = ", ".join(p.value for p in Priority)
        raise InvalidJobRequest(
            f"priority must be one of {choices}, got {job.priority!r}"
        ) from exc

    if priority is not job.priority:
        job = replace(job, priority=priority)
    return job


def _finite(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def location_problem(location: Optional[Location]) -> Optional[str]:
    """Return why a location can't be scored, or None when it is usable."""
    if location is None:
        return "missing location"
    if not isinstance(location, Location):
        return f"not a Location: {type(location).__name__}"
    if not location.id:
        return "missing identifier"

    for name in ("pue", "wue_l_per_kwh", "grid_co2_kg_per_kwh", "renewable_pct"):
        if not _finite(getattr(location, name)):
            return f"{name} is missing or not a finite number"

    if location.pue < 1:
        return f"pue must be >= 1, got {location.pue}"
    if location.wue_l_per_kwh < 0:
        return f"wue_l_per_kwh must be >= 0, got {location.wue_l_per_kwh}"
    if location.grid_co2_kg_per_kwh < 0:
        return f"grid_co2_kg_per_kwh must be >= 0, got {location.grid_co2_kg_per_kwh}"
    if not 0 <= location.renewable_pct <= 100:
        return f"renewable_pct must be in [0, 100], got {location.renewable_pct}"
    return None
