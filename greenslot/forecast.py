"""
Forecast Module - Synthetic 24-hour carbon intensity / spot price forecasts.

Each hour falls into one of five diurnal bands with fixed multipliers for
carbon intensity, spot price and renewable share. Measurement noise is
emulated with a small jitter drawn from a caller-supplied random generator,
so the same seed always yields the same forecast.
"""

import random
from dataclasses import dataclass
from typing import List, Union

from .models import Location, SlotRating, TimeSlot
from .rounding import round_half_up

HOURS_PER_DAY = 24
NOMINAL_PRICE = 1.0
JITTER_SPAN = 0.1   # multipliers move by at most +/- JITTER_SPAN / 2

RngLike = Union[int, random.Random]


@dataclass(frozen=True)
class DiurnalBand:
    """Multipliers applied to every hour in [start_hour, end_hour)."""
    name: str
    start_hour: int
    end_hour: int
    carbon: float
    price: float
    renewable: float


DIURNAL_BANDS = (
    DiurnalBand("night", 0, 6, carbon=0.90, price=0.70, renewable=0.30),         # no solar
    DiurnalBand("morning_ramp", 6, 10, carbon=1.10, price=1.20, renewable=0.50),
    DiurnalBand("solar_peak", 10, 16, carbon=0.60, price=1.00, renewable=1.20),
    DiurnalBand("evening_peak", 16, 20, carbon=1.30, price=1.50, renewable=0.40),
    DiurnalBand("late_night", 20, 24, carbon=0.85, price=0.75, renewable=0.20),
)


def band_for_hour(hour: int) -> DiurnalBand:
    """Return the diurnal band covering the given hour of day."""
    for band in DIURNAL_BANDS:
        if band.start_hour <= hour < band.end_hour:
            return band
    raise ValueError(f"hour must be in [0, {HOURS_PER_DAY}), got {hour}")


def rate_slot(carbon_multiplier: float, price_multiplier: float) -> SlotRating:
    """
    Classify an hour by combined desirability.

    score = (1 / carbon) * (1 / price); cheaper and cleaner hours score higher.
    """
    score = (1 / carbon_multiplier) * (1 / price_multiplier)
    if score > 1.4:
        return SlotRating.EXCELLENT
    if score > 1.1:
        return SlotRating.GOOD
    if score < 0.7:
        return SlotRating.AVOID
    return SlotRating.FAIR


def _as_rng(rng: RngLike) -> random.Random:
    if isinstance(rng, random.Random):
        return rng
    return random.Random(rng)


def generate_forecast(
    base_co2: float,
    renewable_pct: float,
    rng: RngLike,
) -> List[TimeSlot]:
    """
    Generate a 24-hour forecast for one location.

    Args:
        base_co2: Baseline grid carbon intensity (kg CO2/kWh)
        renewable_pct: Baseline renewable share (0-100)
        rng: Integer seed or a random.Random instance to draw jitter from

    Returns:
        24 TimeSlot objects, one per hour, hours 0..23 in order

    Example:
        >>> slots = generate_forecast(0.3, 40, rng=7)
        >>> [s.hour for s in slots] == list(range(24))
        True
    """
    generator = _as_rng(rng)
    slots = []

    for hour in range(HOURS_PER_DAY):
        band = band_for_hour(hour)

        # Carbon is always drawn before price so a seed maps to one forecast
        carbon_multiplier = band.carbon + (generator.random() - 0.5) * JITTER_SPAN
        price_multiplier = band.price + (generator.random() - 0.5) * JITTER_SPAN

        effective_renewable = round_half_up(renewable_pct * band.renewable)

        slots.append(TimeSlot(
            hour=hour,
            label=f"{hour:02d}:00",
            carbon_intensity=round_half_up(base_co2 * carbon_multiplier, 3),
            spot_price_multiplier=round_half_up(NOMINAL_PRICE * price_multiplier, 2),
            renewable_pct=int(min(100, max(0, effective_renewable))),
            recommendation=rate_slot(carbon_multiplier, price_multiplier),
        ))

    return slots


def forecast_for_location(location: Location, seed: RngLike) -> List[TimeSlot]:
    """Forecast for a single location, e.g. for a 24-hour chart."""
    return generate_forecast(
        location.grid_co2_kg_per_kwh,
        location.renewable_pct,
        seed,
    )
