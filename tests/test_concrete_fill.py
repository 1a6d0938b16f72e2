"""
Concrete fill and mortar tests (concrete_fill.py).
"""

import pytest

from stair_estimator.calculators.concrete_fill import fill_volume_m3, mortar_mass_kg, step_fill_volume_cm3
from stair_estimator.calculators.step_geometry import StairMeasurements, derive_step_geometry


def _steps():
    geometry = derive_step_geometry(StairMeasurements(
        total_height=85.0, step_height=17.0, tread=30.0,
        arm_a_length=300.0, arm_b_length=150.0,
        slab_thickness_top=1.0, slab_thickness_front=2.0, overhang_front=2.0,
    ))
    return list(geometry.steps)


def test_step_volume_removes_two_corners():
    """Step 1: (244 + 2 x 122 - 2 x 9) x 9 cm deep x 16 cm high."""
    step = _steps()[0]
    assert step_fill_volume_cm3(step, 30.0, 21.0) == pytest.approx(470 * 9 * 16)


def test_no_fill_when_blocks_take_the_tread():
    step = _steps()[0]
    assert step_fill_volume_cm3(step, 21.0, 21.0) == 0.0
    assert step_fill_volume_cm3(step, 20.0, 21.0) == 0.0


def test_flight_fill_volume_in_m3():
    assert fill_volume_m3(_steps(), 30.0, 21.0) == pytest.approx(0.388188)


def test_mortar_mass():
    """0.5 kg x 3 per block plus 1600 kg/m3 of fill."""
    assert mortar_mass_kg(132, 0.388188) == pytest.approx(198 + 0.388188 * 1600)
    assert mortar_mass_kg(0, 0.0) == 0.0
