"""Shared fixtures for the scheduling optimizer tests."""

from __future__ import annotations

import pytest

from greenslot.models import AcceleratorProfile, Location

from tests.factories import make_location


@pytest.fixture
def location_x() -> Location:
    """Dirty, inefficient site."""
    return make_location(
        id="loc-x", region_code="x", pue=1.6, wue_l_per_kwh=1.8,
        grid_co2_kg_per_kwh=0.40, renewable_pct=20,
    )


@pytest.fixture
def location_y() -> Location:
    """Clean, efficient site."""
    return make_location(
        id="loc-y", region_code="y", pue=1.1, wue_l_per_kwh=0.2,
        grid_co2_kg_per_kwh=0.05, renewable_pct=90,
    )


@pytest.fixture
def h200() -> AcceleratorProfile:
    return AcceleratorProfile(id="acc-h200", vendor="NVIDIA", model="H200", tdp_w=700, peak_fp16_tflops=1979)


@pytest.fixture
def accelerators(h200) -> list[AcceleratorProfile]:
    return [
        h200,
        AcceleratorProfile(id="acc-v5e", vendor="Google", model="TPU v5e", tdp_w=170, peak_fp16_tflops=197),
    ]
