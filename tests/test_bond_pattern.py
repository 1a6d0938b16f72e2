"""
Bond-pattern block counter tests (bond_pattern.py).
"""

from stair_estimator.calculators.bond_pattern import blocks_per_row, count_blocks, count_step_blocks
from stair_estimator.calculators.course_fitting import CourseFit, fit_courses
from stair_estimator.calculators.step_geometry import StairMeasurements, derive_step_geometry


def _geometry():
    return derive_step_geometry(StairMeasurements(
        total_height=85.0, step_height=17.0, tread=30.0,
        arm_a_length=300.0, arm_b_length=150.0,
        slab_thickness_top=1.0, slab_thickness_front=2.0, overhang_front=2.0,
    ))


def test_blocks_per_row_includes_head_joint():
    """44 cm blocks with a 1 cm joint take 45 cm each."""
    assert blocks_per_row(300.0, 44.0) == 7
    assert blocks_per_row(45.0, 44.0) == 1
    assert blocks_per_row(46.0, 44.0) == 2


def test_blocks_per_row_never_negative():
    assert blocks_per_row(0.0, 44.0) == 0
    assert blocks_per_row(-20.0, 44.0) == 0


def test_rows_alternate_corner_ownership():
    """Step 3 of the flight: 188 cm arm A, 94 cm arm B, four rows of 4-inch blocks."""
    step = _geometry().steps[2]
    fit = CourseFit(3, "blocks4", 4, 1.0, 50.0, 50.0)
    count = count_step_blocks(step, fit)
    # odd rows: A 5, B 2 each side; even rows: A 4, B 3 each side
    assert count.arm_a_blocks == 18
    assert count.arm_b_blocks == 10
    assert count.total == 38


def test_single_row_is_an_odd_row():
    step = _geometry().steps[0]
    count = count_step_blocks(step, CourseFit(1, "blocks7", 1, 1.0, 16.0, 16.0))
    assert (count.arm_a_blocks, count.arm_b_blocks, count.total) == (7, 3, 13)


def test_flight_totals_per_material():
    geometry = _geometry()
    fits = fit_courses(geometry, ["blocks4", "blocks7"])
    totals = count_blocks(list(geometry.steps), fits)
    assert totals["blocks7"]["total"] == 36
    assert totals["blocks4"]["total"] == 96
    assert [d["step"] for d in totals["blocks4"]["course_details"]] == [3, 4, 5]


def test_course_details_report_both_b_arms():
    geometry = _geometry()
    fits = fit_courses(geometry, ["blocks4", "blocks7"])
    detail = count_blocks(list(geometry.steps), fits)["blocks7"]["course_details"][1]
    assert detail["step"] == 2
    assert detail["rows"] == 2
    assert detail["arm_bl_blocks"] == detail["arm_br_blocks"] == 6
    assert detail["blocks"] == detail["arm_a_blocks"] + 2 * detail["arm_bl_blocks"]
