"""
Slot Scorer - Rank the hours of a forecast for a job's optimization priority.
"""

import math
from typing import List, NamedTuple, Sequence, Tuple

from .models import Priority, TimeSlot


class SlotSelection(NamedTuple):
    """Best and worst placements of a job inside one forecast."""
    optimal: Tuple[TimeSlot, ...]
    worst: Tuple[TimeSlot, ...]


def _inverse(value: float) -> float:
    # Zero-carbon grids score as infinitely attractive; ties fall back to hour order
    return 1 / value if value > 0 else math.inf


def score_slot(slot: TimeSlot, priority: Priority) -> float:
    """
    Score one hour; higher is better.

    The balanced score averages inverse price and inverse carbon intensity
    without normalising their ranges.
    """
    priority = Priority(priority)
    if priority is Priority.COST:
        return _inverse(slot.spot_price_multiplier)
    if priority is Priority.CARBON:
        return _inverse(slot.carbon_intensity)
    return 0.5 * _inverse(slot.spot_price_multiplier) + 0.5 * _inverse(slot.carbon_intensity)


def rank_slots(forecast: Sequence[TimeSlot], priority: Priority) -> List[TimeSlot]:
    """All slots ordered best first; equal scores keep ascending hour order."""
    return sorted(forecast, key=lambda slot: (-score_slot(slot, priority), slot.hour))


def score_and_select(
    forecast: Sequence[TimeSlot],
    priority: Priority,
    window_size: int,
) -> SlotSelection:
    """
    Pick the best and worst `window_size` hours of a forecast.

    The worst set is the tail of the best-first ordering, listed worst first.
    With window_size == len(forecast) both sets hold the whole day.
    """
    if window_size < 1:
        raise ValueError(f"window_size must be >= 1, got {window_size}")
    window_size = min(window_size, len(forecast))

    ranked = rank_slots(forecast, priority)
    optimal = tuple(ranked[:window_size])
    worst = tuple(reversed(ranked[-window_size:]))
    return SlotSelection(optimal=optimal, worst=worst)
