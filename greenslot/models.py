"""
Domain Models - Reference data, job requests and optimizer results.
"""

from dataclasses import dataclass, asdict, field
from enum import Enum
from typing import Dict, Optional, Tuple


class Priority(str, Enum):
    """What the job owner wants to minimise."""
    COST = "cost"
    CARBON = "carbon"
    BALANCED = "balanced"


class SlotRating(str, Enum):
    """Recommendation tier shown for a single forecast hour."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    AVOID = "avoid"


@dataclass(frozen=True)
class Location:
    """A candidate execution site (cloud region / facility)."""
    id: str
    region_code: str
    region_name: str
    provider: str
    pue: float                      # Power Usage Effectiveness, >= 1
    wue_l_per_kwh: float            # Water Usage Effectiveness, L/kWh
    grid_co2_kg_per_kwh: float      # Baseline grid carbon intensity
    renewable_pct: float            # 0-100

    @classmethod
    def from_record(cls, record: Dict) -> "Location":
        """Build a Location from a facility_coefficients row.

        Rows without an ``id`` use their ``region_code`` as identifier.
        Raises KeyError/TypeError/ValueError on malformed rows.
        """
        region_code = str(record["region_code"])
        return cls(
            id=str(record.get("id") or region_code),
            region_code=region_code,
            region_name=str(record.get("region_name") or region_code),
            provider=str(record.get("provider") or "unknown"),
            pue=float(record["pue"]),
            wue_l_per_kwh=float(record["wue_l_per_kwh"]),
            grid_co2_kg_per_kwh=float(record["grid_co2_kg_per_kwh"]),
            renewable_pct=float(record["renewable_pct"]),
        )

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class AcceleratorProfile:
    """A compute device class. Throughput is for display only."""
    id: str
    vendor: str
    model: str
    tdp_w: float                    # Thermal design power per device
    peak_fp16_tflops: float = 0.0
    memory_gb: Optional[float] = None
    arch: Optional[str] = None

    @classmethod
    def from_record(cls, record: Dict) -> "AcceleratorProfile":
        """Build an AcceleratorProfile from an accelerator_specs row."""
        model = str(record["model"])
        memory = record.get("memory_gb")
        return cls(
            id=str(record.get("id") or model),
            vendor=str(record.get("vendor") or "unknown"),
            model=model,
            tdp_w=float(record["tdp_w"]),
            peak_fp16_tflops=float(record.get("peak_fp16_tflops") or 0.0),
            memory_gb=float(memory) if memory is not None else None,
            arch=record.get("arch"),
        )

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class JobRequest:
    """A fixed-size compute job waiting for a placement."""
    name: str
    accelerator: str                # AcceleratorProfile id or model name
    device_count: int
    duration_hours: int             # 1-168
    priority: Priority = Priority.BALANCED

    @property
    def window_size(self) -> int:
        """Number of forecast hours the job can occupy within one day."""
        return min(self.duration_hours, 24)


@dataclass(frozen=True)
class TimeSlot:
    """One synthesized hour of a 24-hour forecast."""
    hour: int                       # 0-23
    label: str                      # "HH:00"
    carbon_intensity: float         # kg CO2/kWh
    spot_price_multiplier: float    # relative to a nominal price of 1.0
    renewable_pct: int              # 0-100
    recommendation: SlotRating

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["recommendation"] = self.recommendation.value
        return data


@dataclass(frozen=True)
class EstimatedSavings:
    """Savings of the optimal placement over the worst one in the same day."""
    cost_pct: int
    carbon_pct: int
    cost_usd: float
    carbon_kg: float

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class ScheduleRecommendation:
    """Optimizer output for one location."""
    location: Location
    optimal_slots: Tuple[TimeSlot, ...]
    estimated_savings: EstimatedSavings
    score: float
    hourly_rate: float              # USD per device-hour used for cost savings
    warnings: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict:
        return {
            "location": self.location.to_dict(),
            "optimal_slots": [slot.to_dict() for slot in self.optimal_slots],
            "estimated_savings": self.estimated_savings.to_dict(),
            "score": self.score,
            "hourly_rate": self.hourly_rate,
            "warnings": list(self.warnings),
        }
