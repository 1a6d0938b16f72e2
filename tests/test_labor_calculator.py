"""
Tests for the deterministic task breakdown (labor_calculator.py).

Tests:
1-3.  Rate lookup: exact names, nearest installation size
4-7.  Building, cutting, installation, mixing line items
8-10. Transport line items and ordering
"""

import pytest

from stair_estimator.calculators.labor_calculator import (
    calculate_task_breakdown,
    find_installation_rate,
    find_rate,
    total_hours,
)


# --- Fixtures ---

def _rates():
    return [
        {"name": "building steps with 4-inch blocks", "unit": "pieces", "estimated_hours": 0.1},
        {"name": "building steps with 7-inch blocks", "unit": "pieces", "estimated_hours": 0.2},
        {"name": "mixing mortar", "unit": "batch", "estimated_hours": 0.5},
        {"name": "cutting 30cm porcelain slab", "unit": "piece", "estimated_hours": 0.1},
        {"name": "cutting 60cm porcelain slab", "unit": "piece", "estimated_hours": 0.2},
        {"name": "tile installation 90 x 60", "unit": "piece", "estimated_hours": 0.5},
        {"name": "tile installation 30 x 30", "unit": "piece", "estimated_hours": 0.25},
    ]


def _quantities():
    return {
        "blocks": [
            {"material_id": "blocks4", "name": "4-inch Blocks", "amount": 96, "unit": "pieces"},
            {"material_id": "blocks7", "name": "7-inch Blocks", "amount": 36, "unit": "pieces"},
        ],
        "mortar_kg": 300.0,
        "slab_type": "porcelain",
        "length_cuts": {30: 2},
        "width_cuts": {30: 1, 60: 1},
        "slab_sizes": {"90x30": 4, "30x30": 2},
        "new_slabs": 5,
        "adhesive_bags": 2,
        "hand_carried": [],
    }


def _task(tasks, name):
    for task in tasks:
        if task["task"] == name:
            return task
    return None


# ============================================================
# Rate lookup
# ============================================================

def test_find_rate_is_case_insensitive():
    assert find_rate(_rates(), "Mixing Mortar")["name"] == "mixing mortar"
    assert find_rate(_rates(), "mixing") is None
    assert find_rate([], "mixing mortar") is None


def test_installation_rate_nearest_size():
    """60x60 is 30 cm from 90x60 and 42 cm from 30x30."""
    assert find_installation_rate(_rates(), 60, 60)["name"] == "tile installation 90 x 60"
    assert find_installation_rate(_rates(), 30, 20)["name"] == "tile installation 30 x 30"


def test_installation_rate_without_sizes_uses_first():
    rates = [{"name": "tile installation", "unit": "piece", "estimated_hours": 0.3}]
    assert find_installation_rate(rates, 60, 60)["name"] == "tile installation"
    assert find_installation_rate([], 60, 60) is None


# ============================================================
# Line items
# ============================================================

def test_building_hours_per_material():
    tasks = calculate_task_breakdown(_quantities(), _rates())
    blocks4 = _task(tasks, "building steps with 4-inch blocks")
    assert blocks4["amount"] == 96
    assert blocks4["hours"] == pytest.approx(9.6)
    assert _task(tasks, "building steps with 7-inch blocks")["hours"] == pytest.approx(7.2)


def test_cutting_merges_length_and_width_cuts():
    tasks = calculate_task_breakdown(_quantities(), _rates())
    cut30 = _task(tasks, "cutting 30cm porcelain slab")
    assert cut30["amount"] == 3
    assert cut30["hours"] == pytest.approx(0.3)
    assert _task(tasks, "cutting 60cm porcelain slab")["amount"] == 1


def test_installation_groups_by_matched_rate():
    tasks = calculate_task_breakdown(_quantities(), _rates())
    # 90x30 matches 90 x 60, 30x30 matches itself
    assert _task(tasks, "tile installation 90 x 60")["amount"] == 4
    assert _task(tasks, "tile installation 30 x 30")["hours"] == pytest.approx(0.5)


def test_mixing_in_125kg_batches():
    tasks = calculate_task_breakdown(_quantities(), _rates())
    mixing = _task(tasks, "mixing mortar")
    assert mixing["amount"] == 3
    assert mixing["unit"] == "batch"
    assert mixing["hours"] == pytest.approx(1.5)


def test_missing_rates_are_skipped():
    tasks = calculate_task_breakdown(_quantities(), [])
    assert tasks == []


# ============================================================
# Transport
# ============================================================

def test_no_transport_without_request():
    tasks = calculate_task_breakdown(_quantities(), _rates())
    assert not [t for t in tasks if t["task"].startswith("transport")]


def test_transport_with_carrier():
    carrier = {"name": "wheelbarrow", "size_tonnes": 0.125, "speed_m_per_hour": None}
    tasks = calculate_task_breakdown(_quantities(), _rates(),
                                     {"carrier": carrier, "distance_m": 30.0})
    # 96 blocks / 8 per load = 12 trips x 60 m / 1500 m/h
    assert _task(tasks, "transport 4-inch blocks")["hours"] == pytest.approx(0.48)
    assert _task(tasks, "transport slabs")["hours"] == pytest.approx(0.5)
    assert _task(tasks, "transport tile adhesive")["amount"] == 2
    assert tasks[-1]["task"].startswith("transport")


def test_hand_carried_items_without_carrier():
    quantities = _quantities()
    quantities["hand_carried"] = [{"name": "Posts", "amount": 4, "unit": "pieces", "per_trip": 2}]
    tasks = calculate_task_breakdown(quantities, _rates(), {"carrier": None, "distance_m": 15.0})
    posts = _task(tasks, "transport posts")
    assert posts["hours"] == pytest.approx(0.04)
    assert _task(tasks, "transport slabs") is None


def test_total_hours():
    tasks = calculate_task_breakdown(_quantities(), _rates())
    assert total_hours(tasks) == pytest.approx(sum(t["hours"] for t in tasks))
