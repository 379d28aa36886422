"""Tests for cost and carbon savings estimation."""

from __future__ import annotations

import pytest

from greenslot.models import AcceleratorProfile, Priority
from greenslot.savings import (
    DEFAULT_GPU_HOUR_COST,
    DEFAULT_POWER_KW,
    estimate_savings,
    hourly_rate,
    job_power_kw,
)

from tests.factories import make_job, make_location, make_slot


def _pair(optimal_price, optimal_carbon, worst_price, worst_carbon, hours=2):
    optimal = [make_slot(h, carbon=optimal_carbon, price=optimal_price) for h in range(hours)]
    worst = [make_slot(12 + h, carbon=worst_carbon, price=worst_price) for h in range(hours)]
    return optimal, worst


def test_known_model_rate() -> None:
    assert hourly_rate("MI300X") == (5.0, False)
    assert hourly_rate("TPU v5e") == (2.8, False)


def test_unknown_model_falls_back_to_default_rate() -> None:
    assert hourly_rate("Photonic-1") == (DEFAULT_GPU_HOUR_COST, True)
    assert hourly_rate(None) == (3.0, True)


def test_power_uses_tdp_and_device_count(h200: AcceleratorProfile) -> None:
    assert job_power_kw(make_job(device_count=4), h200) == pytest.approx(2.8)


def test_power_without_profile_uses_flat_default() -> None:
    assert job_power_kw(make_job(device_count=64), None) == DEFAULT_POWER_KW


def test_savings_formulas(h200: AcceleratorProfile) -> None:
    job = make_job(device_count=8, duration_hours=2)
    location = make_location(pue=1.5)
    optimal, worst = _pair(0.7, 0.2, 1.4, 0.4)

    savings = estimate_savings(job, location, h200, optimal, worst)

    assert savings.cost_pct == 50
    assert savings.carbon_pct == 50
    # 6.0 $/h * 8 devices * 2 h * (1.4 - 0.7)
    assert savings.cost_usd == pytest.approx(67.2)
    # (0.4 - 0.2) * 5.6 kW * 1.5 * 2 h
    assert savings.carbon_kg == pytest.approx(3.36)


def test_explicit_rate_overrides_lookup(h200: AcceleratorProfile) -> None:
    job = make_job(device_count=1, duration_hours=1)
    optimal, worst = _pair(0.5, 0.2, 1.5, 0.2, hours=1)

    savings = estimate_savings(job, make_location(), h200, optimal, worst, rate=10.0)

    assert savings.cost_usd == pytest.approx(10.0)
    assert savings.carbon_kg == 0


def test_zero_worst_means_report_zero_percent(h200: AcceleratorProfile) -> None:
    optimal, worst = _pair(0.0, 0.0, 0.0, 0.0)

    savings = estimate_savings(make_job(), make_location(), h200, optimal, worst)

    assert savings.cost_pct == 0
    assert savings.carbon_pct == 0
    assert savings.cost_usd == 0
    assert savings.carbon_kg == 0


def test_identical_sets_in_any_order_give_exact_zero(h200: AcceleratorProfile) -> None:
    slots = [make_slot(h, carbon=0.1 + h * 0.013, price=0.7 + h * 0.031) for h in range(24)]

    savings = estimate_savings(
        make_job(duration_hours=24, priority=Priority.BALANCED),
        make_location(),
        h200,
        slots,
        list(reversed(slots)),
    )

    assert savings.cost_pct == 0
    assert savings.carbon_pct == 0
    assert savings.cost_usd == 0.0
    assert savings.carbon_kg == 0.0


def test_empty_selection_is_rejected(h200: AcceleratorProfile) -> None:
    with pytest.raises(ValueError):
        estimate_savings(make_job(), make_location(), h200, [], [make_slot(0)])


def test_half_percent_rounds_up(h200: AcceleratorProfile) -> None:
    optimal = [make_slot(0, price=0.87), make_slot(1, price=0.88)]
    worst = [make_slot(17, price=1.0), make_slot(18, price=1.0)]

    savings = estimate_savings(make_job(duration_hours=2), make_location(), h200, optimal, worst)

    # mean price 0.875 against 1.0 is a 12.5% saving
    assert savings.cost_pct == 13
    assert savings.carbon_pct == 0
