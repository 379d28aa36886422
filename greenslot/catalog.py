"""
Reference Catalog - Candidate locations and accelerator specs.

Loads facility coefficients and accelerator specs from a PostgREST-style
endpoint when one is configured, with the built-in catalog as fallback.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional, TypeVar

import requests

from .config import Settings, get_settings
from .models import AcceleratorProfile, Location

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CatalogError(Exception):
    """The reference-data endpoint returned something unusable."""


# Regional facility coefficients (grid CO2 in kg/kWh, WUE in L/kWh)
DEFAULT_LOCATION_RECORDS: List[Dict] = [
    # GCP regions
    {"region_code": "us-central1", "region_name": "Iowa, USA", "provider": "gcp", "pue": 1.10, "wue_l_per_kwh": 1.8, "grid_co2_kg_per_kwh": 0.385, "renewable_pct": 36},
    {"region_code": "us-west1", "region_name": "Oregon, USA", "provider": "gcp", "pue": 1.08, "wue_l_per_kwh": 0.5, "grid_co2_kg_per_kwh": 0.089, "renewable_pct": 89},
    {"region_code": "us-east1", "region_name": "South Carolina, USA", "provider": "gcp", "pue": 1.11, "wue_l_per_kwh": 2.1, "grid_co2_kg_per_kwh": 0.371, "renewable_pct": 12},
    {"region_code": "europe-west1", "region_name": "Belgium", "provider": "gcp", "pue": 1.08, "wue_l_per_kwh": 0.8, "grid_co2_kg_per_kwh": 0.167, "renewable_pct": 42},
    {"region_code": "europe-west4", "region_name": "Netherlands", "provider": "gcp", "pue": 1.09, "wue_l_per_kwh": 0.6, "grid_co2_kg_per_kwh": 0.328, "renewable_pct": 28},
    {"region_code": "europe-north1", "region_name": "Finland", "provider": "gcp", "pue": 1.07, "wue_l_per_kwh": 0.3, "grid_co2_kg_per_kwh": 0.081, "renewable_pct": 83},
    {"region_code": "asia-east1", "region_name": "Taiwan", "provider": "gcp", "pue": 1.12, "wue_l_per_kwh": 2.2, "grid_co2_kg_per_kwh": 0.509, "renewable_pct": 8},
    {"region_code": "asia-northeast1", "region_name": "Tokyo, Japan", "provider": "gcp", "pue": 1.11, "wue_l_per_kwh": 1.9, "grid_co2_kg_per_kwh": 0.471, "renewable_pct": 22},
    {"region_code": "asia-south1", "region_name": "Mumbai, India", "provider": "gcp", "pue": 1.18, "wue_l_per_kwh": 2.8, "grid_co2_kg_per_kwh": 0.708, "renewable_pct": 18},
    {"region_code": "australia-southeast1", "region_name": "Sydney, Australia", "provider": "gcp", "pue": 1.12, "wue_l_per_kwh": 1.5, "grid_co2_kg_per_kwh": 0.680, "renewable_pct": 24},
    # AWS regions
    {"region_code": "us-east-1", "region_name": "N. Virginia, USA", "provider": "aws", "pue": 1.10, "wue_l_per_kwh": 1.9, "grid_co2_kg_per_kwh": 0.347, "renewable_pct": 18},
    {"region_code": "us-west-2", "region_name": "Oregon, USA", "provider": "aws", "pue": 1.09, "wue_l_per_kwh": 0.6, "grid_co2_kg_per_kwh": 0.089, "renewable_pct": 88},
    {"region_code": "eu-west-1", "region_name": "Ireland", "provider": "aws", "pue": 1.11, "wue_l_per_kwh": 0.9, "grid_co2_kg_per_kwh": 0.296, "renewable_pct": 42},
    {"region_code": "eu-north-1", "region_name": "Stockholm, Sweden", "provider": "aws", "pue": 1.06, "wue_l_per_kwh": 0.2, "grid_co2_kg_per_kwh": 0.008, "renewable_pct": 98},
    {"region_code": "ap-northeast-1", "region_name": "Tokyo, Japan", "provider": "aws", "pue": 1.12, "wue_l_per_kwh": 2.0, "grid_co2_kg_per_kwh": 0.471, "renewable_pct": 22},
    # Azure regions
    {"region_code": "eastus", "region_name": "Virginia, USA", "provider": "azure", "pue": 1.11, "wue_l_per_kwh": 1.8, "grid_co2_kg_per_kwh": 0.347, "renewable_pct": 18},
    {"region_code": "westeurope", "region_name": "Netherlands", "provider": "azure", "pue": 1.09, "wue_l_per_kwh": 0.7, "grid_co2_kg_per_kwh": 0.328, "renewable_pct": 28},
    {"region_code": "northeurope", "region_name": "Ireland", "provider": "azure", "pue": 1.10, "wue_l_per_kwh": 0.8, "grid_co2_kg_per_kwh": 0.296, "renewable_pct": 42},
    {"region_code": "swedencentral", "region_name": "Gävle, Sweden", "provider": "azure", "pue": 1.06, "wue_l_per_kwh": 0.1, "grid_co2_kg_per_kwh": 0.008, "renewable_pct": 99},
]

DEFAULT_ACCELERATOR_RECORDS: List[Dict] = [
    {"vendor": "NVIDIA", "model": "H100 SXM", "memory_gb": 80, "tdp_w": 700, "peak_fp16_tflops": 1979, "arch": "Hopper"},
    {"vendor": "NVIDIA", "model": "H100 PCIe", "memory_gb": 80, "tdp_w": 350, "peak_fp16_tflops": 1513, "arch": "Hopper"},
    {"vendor": "NVIDIA", "model": "A100 80GB", "memory_gb": 80, "tdp_w": 400, "peak_fp16_tflops": 624, "arch": "Ampere"},
    {"vendor": "NVIDIA", "model": "A100 40GB", "memory_gb": 40, "tdp_w": 400, "peak_fp16_tflops": 624, "arch": "Ampere"},
    {"vendor": "NVIDIA", "model": "L40S", "memory_gb": 48, "tdp_w": 350, "peak_fp16_tflops": 733, "arch": "Ada Lovelace"},
    {"vendor": "NVIDIA", "model": "RTX 4090", "memory_gb": 24, "tdp_w": 450, "peak_fp16_tflops": 330, "arch": "Ada Lovelace"},
    {"vendor": "NVIDIA", "model": "RTX 4080", "memory_gb": 16, "tdp_w": 320, "peak_fp16_tflops": 242, "arch": "Ada Lovelace"},
    {"vendor": "Google", "model": "TPU v5p", "memory_gb": 95, "tdp_w": 250, "peak_fp16_tflops": 459, "arch": "TPU v5p"},
    {"vendor": "Google", "model": "TPU v5e", "memory_gb": 16, "tdp_w": 170, "peak_fp16_tflops": 197, "arch": "TPU v5e"},
    {"vendor": "Google", "model": "TPU v4", "memory_gb": 32, "tdp_w": 175, "peak_fp16_tflops": 275, "arch": "TPU v4"},
    {"vendor": "AMD", "model": "MI300X", "memory_gb": 192, "tdp_w": 750, "peak_fp16_tflops": 1307, "arch": "CDNA 3"},
    {"vendor": "AMD", "model": "MI250X", "memory_gb": 128, "tdp_w": 560, "peak_fp16_tflops": 766, "arch": "CDNA 2"},
    {"vendor": "AMD", "model": "MI210", "memory_gb": 64, "tdp_w": 300, "peak_fp16_tflops": 383, "arch": "CDNA 2"},
    {"vendor": "LightRail", "model": "Photonic-1", "memory_gb": 128, "tdp_w": 5, "peak_fp16_tflops": 500, "arch": "Photonic"},
]


def parse_records(records: Iterable[Dict], factory: Callable[[Dict], T], kind: str) -> List[T]:
    """Convert raw rows with `factory`, skipping the malformed ones."""
    parsed = []
    for record in records:
        try:
            parsed.append(factory(record))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Skipping malformed %s record %r: %s", kind, record, e)
    return parsed


def sort_locations(locations: Iterable[Location]) -> List[Location]:
    """Cleanest grid first."""
    return sorted(locations, key=lambda loc: (loc.grid_co2_kg_per_kwh, loc.id))


def sort_accelerators(accelerators: Iterable[AcceleratorProfile]) -> List[AcceleratorProfile]:
    """Highest peak FP16 throughput first."""
    return sorted(accelerators, key=lambda acc: (-acc.peak_fp16_tflops, acc.model))


def default_locations() -> List[Location]:
    return sort_locations(parse_records(DEFAULT_LOCATION_RECORDS, Location.from_record, "location"))


def default_accelerators() -> List[AcceleratorProfile]:
    return sort_accelerators(
        parse_records(DEFAULT_ACCELERATOR_RECORDS, AcceleratorProfile.from_record, "accelerator")
    )


class CatalogProvider:
    """Fetches reference data from the configured store, or serves the built-in catalog."""

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.base_url = settings.catalog_url
        self.token = settings.catalog_token
        self.timeout = settings.catalog_timeout

    @property
    def is_remote(self) -> bool:
        return bool(self.base_url) and self.token != "demo"

    def _fetch_table(self, table: str) -> List[Dict]:
        """GET all rows of a table; raises CatalogError on any failure."""
        url = f"{self.base_url}/{table}"
        headers = {
            "apikey": self.token,
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/json",
        }
        try:
            response = requests.get(url, headers=headers, params={"select": "*"}, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            raise CatalogError(f"Could not load {table}: {e}") from e

        if not isinstance(data, list):
            raise CatalogError(f"Expected a list of rows from {table}, got {type(data).__name__}")
        return data

    def get_locations(self) -> List[Location]:
        """Candidate locations, cleanest grid first."""
        if self.is_remote:
            try:
                rows = self._fetch_table("facility_coefficients")
                return sort_locations(parse_records(rows, Location.from_record, "location"))
            except CatalogError as e:
                logger.warning("%s; falling back to built-in locations", e)
        return default_locations()

    def get_accelerators(self) -> List[AcceleratorProfile]:
        """Accelerator specs, fastest first."""
        if self.is_remote:
            try:
                rows = self._fetch_table("accelerator_specs")
                return sort_accelerators(parse_records(rows, AcceleratorProfile.from_record, "accelerator"))
            except CatalogError as e:
                logger.warning("%s; falling back to built-in accelerators", e)
        return default_accelerators()

    def get_location(self, region_code: str) -> Optional[Location]:
        return next((loc for loc in self.get_locations() if loc.region_code == region_code), None)
