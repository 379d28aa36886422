"""
Savings Estimator - Absolute and relative savings of the optimal placement.
"""

import logging
import math
from typing import Dict, Optional, Sequence, Tuple

from .models import AcceleratorProfile, EstimatedSavings, JobRequest, Location, TimeSlot
from .rounding import round_half_up

logger = logging.getLogger(__name__)

# USD per device-hour, keyed by exact accelerator model name
GPU_HOUR_COSTS: Dict[str, float] = {
    "A100-40GB": 2.5,
    "A100-80GB": 3.0,
    "H100-80GB": 4.5,
    "H200": 6.0,
    "B200": 8.0,
    "TPU v4": 3.2,
    "TPU v5e": 2.8,
    "TPU v5p": 4.0,
    "MI300X": 5.0,
}
DEFAULT_GPU_HOUR_COST = 3.0

# Whole-job draw assumed when the accelerator profile is unknown
DEFAULT_POWER_KW = 2.4


def hourly_rate(model: Optional[str]) -> Tuple[float, bool]:
    """
    Look up the device-hour price for an accelerator model.

    Returns:
        (rate, is_default) where is_default is True when the model was
        not in GPU_HOUR_COSTS and DEFAULT_GPU_HOUR_COST was used instead
    """
    if model in GPU_HOUR_COSTS:
        return GPU_HOUR_COSTS[model], False
    return DEFAULT_GPU_HOUR_COST, True


def job_power_kw(job: JobRequest, accelerator: Optional[AcceleratorProfile]) -> float:
    """IT power draw of the whole job in kW."""
    if accelerator is None:
        return DEFAULT_POWER_KW
    return accelerator.tdp_w * job.device_count / 1000


def _mean(values) -> float:
    # fsum is order independent, so identical multisets give identical means
    values = list(values)
    return math.fsum(values) / len(values)


def _pct_saved(optimal: float, worst: float) -> int:
    if worst == 0:
        return 0
    return round_half_up(100 * (1 - optimal / worst))


def estimate_savings(
    job: JobRequest,
    location: Location,
    accelerator: Optional[AcceleratorProfile],
    optimal_slots: Sequence[TimeSlot],
    worst_slots: Sequence[TimeSlot],
    rate: Optional[float] = None,
) -> EstimatedSavings:
    """
    Compare the optimal placement against the worst placement in the same day.

    Cost:   base_job_cost * (mean_price_worst - mean_price_optimal)
            where base_job_cost = rate * device_count * duration_hours
    Carbon: (mean_ci_worst - mean_ci_optimal) * power_kw * PUE * duration_hours

    Args:
        job: Validated job request
        location: Location the forecast was generated for
        accelerator: Profile of the job's accelerator, or None if unknown
        optimal_slots: Best hours from the slot scorer
        worst_slots: Worst hours from the same forecast
        rate: Device-hour price; looked up from the accelerator model if omitted
    """
    if not optimal_slots or not worst_slots:
        raise ValueError("optimal_slots and worst_slots must not be empty")

    if rate is None:
        rate, _ = hourly_rate(accelerator.model if accelerator else None)

    price_optimal = _mean(s.spot_price_multiplier for s in optimal_slots)
    price_worst = _mean(s.spot_price_multiplier for s in worst_slots)
    carbon_optimal = _mean(s.carbon_intensity for s in optimal_slots)
    carbon_worst = _mean(s.carbon_intensity for s in worst_slots)

    base_job_cost = rate * job.device_count * job.duration_hours
    cost_usd = base_job_cost * (price_worst - price_optimal)

    power_kw = job_power_kw(job, accelerator)
    carbon_kg = (carbon_worst - carbon_optimal) * power_kw * location.pue * job.duration_hours

    savings = EstimatedSavings(
        cost_pct=_pct_saved(price_optimal, price_worst),
        carbon_pct=_pct_saved(carbon_optimal, carbon_worst),
        cost_usd=round_half_up(cost_usd, 2),
        carbon_kg=round_half_up(carbon_kg, 2),
    )
    logger.debug("Savings for %s in %s: %s", job.name, location.region_code, savings)
    return savings
