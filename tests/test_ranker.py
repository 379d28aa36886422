"""Tests for multi-location ranking."""

from __future__ import annotations

import logging

import pytest

from greenslot.models import AcceleratorProfile, Priority
from greenslot.ranker import find_accelerator, location_score, rank_locations, summarize
from greenslot.savings import DEFAULT_GPU_HOUR_COST
from greenslot.validation import InvalidJobRequest

from tests.factories import make_job, make_location


def test_location_score_formula(location_x, location_y) -> None:
    assert location_score(location_x) == pytest.approx(12 + 6 + 4 + 1)
    assert location_score(location_y) == pytest.approx(27.75 + 27 + 9 + 9)


def test_location_score_is_not_clamped() -> None:
    dirty = make_location(grid_co2_kg_per_kwh=1.0, renewable_pct=0, pue=2.0, wue_l_per_kwh=4.0)
    assert location_score(dirty) < 0


@pytest.mark.parametrize("priority", list(Priority))
@pytest.mark.parametrize("duration", [1, 8, 24, 72])
def test_clean_site_ranks_ahead(location_x, location_y, accelerators, priority, duration) -> None:
    job = make_job(priority=priority, duration_hours=duration)

    ranked = rank_locations(job, [location_x, location_y], accelerators, seed=5)

    assert [rec.location.id for rec in ranked] == ["loc-y", "loc-x"]
    assert ranked[0].score > ranked[1].score


def test_output_is_sorted_by_score_descending(accelerators) -> None:
    locations = [
        make_location(id=f"loc-{i}", grid_co2_kg_per_kwh=0.05 * i, renewable_pct=10 * i)
        for i in range(1, 8)
    ]

    ranked = rank_locations(make_job(), locations, accelerators, seed=1)

    scores = [rec.score for rec in ranked]
    assert scores == sorted(scores, reverse=True)


def test_equal_scores_are_ordered_by_location_id(accelerators) -> None:
    locations = [make_location(id="b"), make_location(id="c"), make_location(id="a")]

    ranked = rank_locations(make_job(), locations, accelerators, seed=1)

    assert [rec.location.id for rec in ranked] == ["a", "b", "c"]


@pytest.mark.parametrize("duration", [1, 7, 8, 23])
def test_carbon_savings_positive_for_partial_day(accelerators, duration) -> None:
    job = make_job(device_count=8, duration_hours=duration, priority=Priority.CARBON)
    location = make_location(grid_co2_kg_per_kwh=0.3)

    for seed in range(10):
        rec = rank_locations(job, [location], accelerators, seed=seed)[0]
        assert rec.estimated_savings.carbon_kg > 0


@pytest.mark.parametrize("duration", [24, 48, 168])
@pytest.mark.parametrize("priority", list(Priority))
def test_full_day_window_has_zero_savings(accelerators, duration, priority) -> None:
    job = make_job(duration_hours=duration, priority=priority)

    rec = rank_locations(job, [make_location(grid_co2_kg_per_kwh=0.3)], accelerators, seed=3)[0]

    assert len(rec.optimal_slots) == 24
    assert rec.estimated_savings.cost_pct == 0
    assert rec.estimated_savings.carbon_pct == 0
    assert rec.estimated_savings.cost_usd == 0
    assert rec.estimated_savings.carbon_kg == 0


@pytest.mark.parametrize("duration", [1, 5, 12, 23, 24, 100])
def test_optimal_slot_count(accelerators, duration) -> None:
    rec = rank_locations(make_job(duration_hours=duration), [make_location()], accelerators, seed=2)[0]
    assert len(rec.optimal_slots) == min(duration, 24)


def test_unknown_accelerator_still_recommends(location_x, accelerators) -> None:
    job = make_job(accelerator="QuantumBrick-9000")

    ranked = rank_locations(job, [location_x], accelerators, seed=4)

    assert len(ranked) == 1
    rec = ranked[0]
    assert rec.hourly_rate == DEFAULT_GPU_HOUR_COST
    assert len(rec.optimal_slots) == 8
    assert rec.warnings
    assert "QuantumBrick-9000" in rec.warnings[0]


def test_profile_without_price_warns(location_x, accelerators) -> None:
    rec = rank_locations(make_job(accelerator="acc-v5e"), [location_x], accelerators, seed=4)[0]
    assert rec.hourly_rate == 2.8
    assert rec.warnings == ()

    accelerators = accelerators + [
        AcceleratorProfile(id="acc-new", vendor="X", model="Mystery", tdp_w=300),
    ]
    rec = rank_locations(make_job(accelerator="Mystery"), [location_x], accelerators, seed=4)[0]
    assert rec.hourly_rate == DEFAULT_GPU_HOUR_COST
    assert len(rec.warnings) == 1


def test_find_accelerator_prefers_id_then_model(h200, accelerators) -> None:
    assert find_accelerator("acc-h200", accelerators) is h200
    assert find_accelerator("H200", accelerators) is h200
    assert find_accelerator("nope", accelerators) is None


def test_invalid_locations_are_skipped(location_x, location_y, accelerators) -> None:
    broken = [
        make_location(id="bad-pue", pue=0.8),
        make_location(id="bad-co2", grid_co2_kg_per_kwh=float("nan")),
        make_location(id="bad-renewable", renewable_pct=120),
        None,
    ]

    ranked = rank_locations(make_job(), [location_x, *broken, location_y], accelerators, seed=1)

    assert [rec.location.id for rec in ranked] == ["loc-y", "loc-x"]


def test_empty_location_set_gives_empty_list(accelerators) -> None:
    assert rank_locations(make_job(), [], accelerators, seed=1) == []


def test_invalid_job_raises_before_any_work(location_x, accelerators) -> None:
    with pytest.raises(InvalidJobRequest):
        rank_locations(make_job(device_count=0), [location_x], accelerators, seed=1)


def test_ranking_is_deterministic_for_a_seed(location_x, location_y, accelerators) -> None:
    job = make_job(priority=Priority.BALANCED)

    first = rank_locations(job, [location_x, location_y], accelerators, seed=99)
    second = rank_locations(job, [location_x, location_y], accelerators, seed=99)

    assert first == second


def test_parallel_matches_sequential(accelerators) -> None:
    locations = [make_location(id=f"loc-{i}", renewable_pct=5 * i) for i in range(12)]
    job = make_job(priority=Priority.BALANCED, duration_hours=6)

    sequential = rank_locations(job, locations, accelerators, seed=17)
    parallel = rank_locations(job, locations, accelerators, seed=17, max_workers=4)

    assert sequential == parallel


def test_locations_get_independent_jitter(accelerators) -> None:
    twins = [make_location(id="a"), make_location(id="b")]

    ranked = rank_locations(make_job(duration_hours=24), twins, accelerators, seed=8)

    assert ranked[0].optimal_slots != ranked[1].optimal_slots


def test_string_priority_is_accepted(location_x, accelerators) -> None:
    ranked = rank_locations(make_job(priority="cost"), [location_x], accelerators, seed=1)
    assert len(ranked) == 1


def test_summarize_best_location(location_x, location_y, accelerators) -> None:
    ranked = rank_locations(make_job(), [location_x, location_y], accelerators, seed=1)

    summary = summarize(ranked)

    assert summary["region_code"] == "y"
    assert summary["score"] == round(ranked[0].score)
    assert summary["optimal_start"] == ranked[0].optimal_slots[0].label
    assert summary["optimal_rating"] == ranked[0].optimal_slots[0].recommendation.value


def test_summarize_empty() -> None:
    assert summarize([]) is None


def test_raw_records_are_skipped_not_fatal(location_x, accelerators, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="greenslot.ranker"):
        ranked = rank_locations(make_job(), [location_x, {"id": "raw"}], accelerators, seed=1)

    assert [rec.location.id for rec in ranked] == ["loc-x"]
    assert any("not a Location" in record.getMessage() for record in caplog.records)


def test_package_leaves_logging_unconfigured() -> None:
    assert logging.getLogger("greenslot").handlers == []
    assert logging.getLogger("greenslot.ranker").handlers == []
