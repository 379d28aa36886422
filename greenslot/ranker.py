"""
Region Ranker - Run the forecast / scoring / savings pipeline for every
candidate location and order the results by sustainability score.
"""

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional, Sequence, Tuple

from .forecast import generate_forecast
from .models import AcceleratorProfile, JobRequest, Location, ScheduleRecommendation
from .rounding import round_half_up
from .savings import DEFAULT_POWER_KW, estimate_savings, hourly_rate
from .slot_scorer import score_and_select
from .validation import location_problem, validate_job

logger = logging.getLogger(__name__)


def location_score(location: Location) -> float:
    """
    Overall sustainability score of a location (higher is better).

    0.3 * (100 - grid_co2 * 150) + 0.3 * renewable_pct
    + 0.2 * ((2 - PUE) * 50) + 0.2 * ((2 - WUE) * 25)

    The terms are not normalised, so the result is not bounded to 0-100.
    """
    return (
        (100 - location.grid_co2_kg_per_kwh * 150) * 0.3
        + location.renewable_pct * 0.3
        + ((2 - location.pue) * 50) * 0.2
        + ((2 - location.wue_l_per_kwh) * 25) * 0.2
    )


def find_accelerator(
    reference: str,
    accelerators: Sequence[AcceleratorProfile],
) -> Optional[AcceleratorProfile]:
    """Match a job's accelerator reference against profile ids first, then models."""
    for accelerator in accelerators:
        if accelerator.id == reference:
            return accelerator
    for accelerator in accelerators:
        if accelerator.model == reference:
            return accelerator
    return None


def _accelerator_warnings(
    job: JobRequest,
    accelerator: Optional[AcceleratorProfile],
) -> Tuple[float, Tuple[str, ...]]:
    warnings = []
    if accelerator is None:
        warnings.append(
            f"Accelerator {job.accelerator!r} not found; assuming a total draw "
            f"of {DEFAULT_POWER_KW} kW and the default hourly rate"
        )
        rate, _ = hourly_rate(None)
    else:
        rate, is_default = hourly_rate(accelerator.model)
        if is_default:
            warnings.append(
                f"No hourly price for {accelerator.model!r}; using default rate ${rate:.2f}"
            )
    for message in warnings:
        logger.warning(message)
    return rate, tuple(warnings)


def recommend_location(
    job: JobRequest,
    location: Location,
    accelerator: Optional[AcceleratorProfile],
    rng: random.Random,
    rate: float,
    warnings: Tuple[str, ...] = (),
) -> ScheduleRecommendation:
    """Forecast, score and estimate savings for a single location."""
    forecast = generate_forecast(location.grid_co2_kg_per_kwh, location.renewable_pct, rng)
    selection = score_and_select(forecast, job.priority, job.window_size)
    savings = estimate_savings(
        job, location, accelerator, selection.optimal, selection.worst, rate=rate
    )
    return ScheduleRecommendation(
        location=location,
        optimal_slots=selection.optimal,
        estimated_savings=savings,
        score=location_score(location),
        hourly_rate=rate,
        warnings=warnings,
    )


def rank_locations(
    job: JobRequest,
    locations: Sequence[Location],
    accelerators: Sequence[AcceleratorProfile],
    seed: int = 42,
    max_workers: Optional[int] = None,
) -> List[ScheduleRecommendation]:
    """
    Recommend when and where to run a job.

    Every location gets its own generator seeded with ``seed ^ index``
    (index in input order), so results are identical whether the locations
    are processed sequentially or in parallel.

    Args:
        job: Job to place
        locations: Candidate locations; unusable ones are skipped
        accelerators: Accelerator catalog used to resolve job.accelerator
        seed: Seed driving all forecast jitter
        max_workers: Fan out over a thread pool when greater than 1

    Returns:
        One recommendation per usable location, best score first,
        ties broken by ascending location id

    Raises:
        InvalidJobRequest: the job fails validation
    """
    job = validate_job(job)
    locations = list(locations)

    accelerator = find_accelerator(job.accelerator, accelerators)
    rate, warnings = _accelerator_warnings(job, accelerator)

    tasks = []
    for index, location in enumerate(locations):
        problem = location_problem(location)
        if problem:
            logger.warning(
                "Skipping location %s: %s", getattr(location, "id", "?"), problem
            )
            continue
        tasks.append((location, random.Random(seed ^ index)))

    def run(task):
        location, rng = task
        return recommend_location(job, location, accelerator, rng, rate, warnings)

    if max_workers and max_workers > 1 and len(tasks) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            recommendations = list(executor.map(run, tasks))
    else:
        recommendations = [run(task) for task in tasks]

    recommendations.sort(key=lambda rec: (-rec.score, rec.location.id))

    logger.info(
        "Ranked %d of %d locations for job %r (priority=%s, seed=%d)",
        len(recommendations), len(locations), job.name, job.priority.value, seed,
    )
    return recommendations


def summarize(recommendations: Sequence[ScheduleRecommendation]) -> Optional[Dict]:
    """Headline figures of the best-ranked location, or None if nothing ranked."""
    if not recommendations:
        return None

    best = recommendations[0]
    first_slot = best.optimal_slots[0] if best.optimal_slots else None
    return {
        'region_code': best.location.region_code,
        'region_name': best.location.region_name,
        'score': round_half_up(best.score),
        'cost_usd': best.estimated_savings.cost_usd,
        'cost_pct': best.estimated_savings.cost_pct,
        'carbon_kg': best.estimated_savings.carbon_kg,
        'carbon_pct': best.estimated_savings.carbon_pct,
        'optimal_start': first_slot.label if first_slot else None,
        'optimal_rating': first_slot.recommendation.value if first_slot else None,
    }
