"""
GreenSlot - Carbon/cost-aware job scheduling optimizer.
Recommends when and where to run a fixed-size compute job.
"""

from .models import (
    AcceleratorProfile,
    EstimatedSavings,
    JobRequest,
    Location,
    Priority,
    ScheduleRecommendation,
    SlotRating,
    TimeSlot,
)
from .validation import InvalidJobRequest, validate_job
from .forecast import generate_forecast, forecast_for_location
from .slot_scorer import score_and_select, SlotSelection
from .savings import estimate_savings, hourly_rate
from .ranker import rank_locations, location_score, summarize
from .catalog import CatalogProvider

__version__ = "1.0.0"

__all__ = [
    'AcceleratorProfile',
    'EstimatedSavings',
    'JobRequest',
    'Location',
    'Priority',
    'ScheduleRecommendation',
    'SlotRating',
    'TimeSlot',
    'InvalidJobRequest',
    'validate_job',
    'generate_forecast',
    'forecast_for_location',
    'score_and_select',
    'SlotSelection',
    'estimate_savings',
    'hourly_rate',
    'rank_locations',
    'location_score',
    'summarize',
    'CatalogProvider',
]
