"""
Course fitting tests (course_fitting.py).

Tests:
1-4.  Direct fits: exact standard joints, solved joints, preference order
5-6.  Burying fallback: depth chosen, targets shared by the flight
7-8.  Cutting fallback when no depth works
"""

from stair_estimator.calculators.course_fitting import (
    PREFERRED_BURYING_DEPTH,
    buried_targets,
    fit_courses,
    fit_step,
    stack_height,
)
from stair_estimator.calculators.step_geometry import StairMeasurements, derive_step_geometry

DEFAULT = ["blocks4", "blocks7"]


def _geometry(total_height, step_height, slab_top=1.0):
    return derive_step_geometry(StairMeasurements(
        total_height=total_height,
        step_height=step_height,
        tread=30.0,
        arm_a_length=600.0,
        arm_b_length=300.0,
        slab_thickness_top=slab_top,
        slab_thickness_front=2.0,
        overhang_front=2.0,
    ))


# ============================================================
# Direct fits
# ============================================================

def test_stack_height_includes_bed_and_joints():
    assert stack_height(1, 10.0) == 12.0
    assert stack_height(3, 10.0) == 34.0
    assert stack_height(3, 10.0, joint=2.0) == 36.0


def test_exact_standard_fit():
    """3 x 10 cm + 2 cm bed + 2 x 1 cm joints = 34 cm."""
    fit = fit_step(1, 34.0, DEFAULT)
    assert fit.material_id == "blocks4"
    assert fit.blocks == 3
    assert fit.mortar_height == 1.0
    assert not fit.needs_cutting


def test_solved_joint_within_window():
    """50 cm from 4 x 10 cm blocks needs 2.67 cm joints."""
    fit = fit_step(1, 50.0, DEFAULT)
    assert fit.material_id == "blocks4"
    assert fit.blocks == 4
    assert abs(fit.mortar_height - 8.0 / 3) < 1e-9
    assert fit.stack_height == 50.0


def test_falls_through_to_next_material():
    """16 cm is out of reach for 10 cm blocks but one 14 cm block is exact."""
    fit = fit_step(1, 16.0, DEFAULT)
    assert fit.material_id == "blocks7"
    assert fit.blocks == 1


def test_no_fit_returns_none():
    assert fit_step(1, 52.0, DEFAULT) is None
    assert fit_step(1, 0.0, DEFAULT) is None


def test_whole_flight_fits_directly():
    fits = fit_courses(_geometry(85.0, 17.0), DEFAULT)
    assert [(f.material_id, f.blocks) for f in fits] == [
        ("blocks7", 1), ("blocks7", 2), ("blocks4", 4), ("blocks4", 6), ("blocks4", 7),
    ]
    assert all(f.buried_depth is None for f in fits)
    assert all(not f.needs_cutting for f in fits)


# ============================================================
# Burying
# ============================================================

def test_burying_picks_feasible_depth_nearest_preferred():
    """A single 15 cm step only fits once buried 3 cm (one 10 cm block on the bed)."""
    geometry = _geometry(15.0, 15.0, slab_top=0.0)
    fits = fit_courses(geometry, DEFAULT)
    assert len(fits) == 1
    assert fits[0].buried_depth == 3
    assert fits[0].target_height == 12.0
    assert fits[0].material_id == "blocks4"
    assert fits[0].blocks == 1
    assert PREFERRED_BURYING_DEPTH == 5


def test_short_stack_step_also_tries_burying():
    """14 cm is 2 cm over one 10 cm block; burying 2 cm makes that block exact."""
    fits = fit_courses(_geometry(14.0, 14.0, slab_top=0.0), ["blocks4"])
    assert fits[0].buried_depth == 2
    assert fits[0].blocks == 1
    assert fits[0].target_height == 12.0
    assert not fits[0].needs_cutting


def test_buried_targets_spread_depth_over_all_steps():
    geometry = _geometry(85.0, 17.0)
    targets = buried_targets(geometry, 5)
    assert targets == [15.0, 31.0, 47.0, 63.0, 79.0]


# ============================================================
# Cutting fallback
# ============================================================

def test_unfittable_step_flagged_for_cutting():
    """Targets 16/34/52/70/88: 52 cm has no fit at any depth, the rest stay as fitted."""
    fits = fit_courses(_geometry(90.0, 18.0, slab_top=2.0), DEFAULT)
    flagged = [f for f in fits if f.needs_cutting]
    assert [f.step for f in flagged] == [3]
    assert flagged[0].material_id == "blocks4"
    assert flagged[0].blocks == 6
    assert fits[3].blocks == 6 and abs(fits[3].mortar_height - 1.6) < 1e-9
    assert all(f.buried_depth is None for f in fits)


def test_every_step_gets_a_fit_record():
    fits = fit_courses(_geometry(90.0, 18.0, slab_top=2.0), DEFAULT)
    assert [f.step for f in fits] == [1, 2, 3, 4, 5]
    assert fits[0].as_dict()["needs_cutting"] is False
