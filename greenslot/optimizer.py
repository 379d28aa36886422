"""
Scheduling Optimizer - Entry point combining the reference catalog with
the ranking pipeline.
"""

from typing import Dict, List, Optional

from .catalog import CatalogProvider
from .config import Settings, get_settings
from .forecast import forecast_for_location
from .models import JobRequest, ScheduleRecommendation, TimeSlot
from .ranker import rank_locations, summarize


class SchedulingOptimizer:
    """Recommends time slots and regions for jobs using the configured catalog."""

    def __init__(self, catalog: Optional[CatalogProvider] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.catalog = catalog or CatalogProvider(self.settings)

    def _seed(self, seed: Optional[int]) -> int:
        return self.settings.default_seed if seed is None else seed

    def analyze(self, job: JobRequest, seed: Optional[int] = None) -> List[ScheduleRecommendation]:
        """Rank every catalog location for the job."""
        return rank_locations(
            job,
            self.catalog.get_locations(),
            self.catalog.get_accelerators(),
            seed=self._seed(seed),
            max_workers=self.settings.max_workers,
        )

    def analyze_with_summary(self, job: JobRequest, seed: Optional[int] = None) -> Dict:
        """Ranking plus the headline figures of the best location."""
        recommendations = self.analyze(job, seed)
        return {
            'recommendations': recommendations,
            'summary': summarize(recommendations),
        }

    def get_forecast(self, region_code: str, seed: Optional[int] = None) -> List[TimeSlot]:
        """
        24-hour forecast for one catalog region, for charting.

        Uses the same per-location generator as analyze(), so the chart shows
        the hours the ranking was computed from.

        Raises:
            KeyError: region_code is not in the catalog
        """
        for index, location in enumerate(self.catalog.get_locations()):
            if location.region_code == region_code:
                return forecast_for_location(location, self._seed(seed) ^ index)
        raise KeyError(f"Unknown region: {region_code}")
