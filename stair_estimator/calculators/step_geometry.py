"""
Step geometry for a U-shaped flight.

Arm A is the rear leg; the two B arms run forward from its ends. Every
step's tread eats into arm A from both ends (one per B arm) and into
each B arm once, so arm A shrinks twice as fast as arm B.

Heights are cumulative from the ground: step i's block course has to
reach actual_step_height * i minus the top slab thickness.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .errors import GeometryError, StairInputError

logger = logging.getLogger(__name__)

ADJUSTMENT_TOLERANCE = 0.01   # cm


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (builtin round() is banker's)."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class StairMeasurements:
    """Raw measurements in cm."""
    total_height: float
    step_height: float
    tread: float
    arm_a_length: float
    arm_b_length: float
    slab_thickness_top: float = 0.0
    slab_thickness_front: float = 0.0
    overhang_front: float = 0.0


@dataclass(frozen=True)
class StepDimension:
    index: int                  # 1..N
    cumulative_height: float
    individual_height: float
    target_height: float        # height the block course must reach
    tread: float
    tread_consumption: float
    is_platform: bool
    arm_a_outer: float
    arm_b_outer: float          # same for both B arms
    arm_a_inner: float
    arm_b_inner: float
    buried_depth: Optional[float] = None

    @property
    def is_first(self) -> bool:
        return self.index == 1

    def with_buried_depth(self, depth: float) -> "StepDimension":
        return replace(self, buried_depth=depth)

    def as_dict(self) -> dict:
        return {
            "step": self.index,
            "cumulative_height": round(self.cumulative_height, 2),
            "individual_height": round(self.individual_height, 2),
            "target_height": round(self.target_height, 2),
            "tread": round(self.tread, 2),
            "tread_consumption": round(self.tread_consumption, 2),
            "is_platform": self.is_platform,
            "arm_a_outer": round(self.arm_a_outer, 2),
            "arm_b_outer": round(self.arm_b_outer, 2),
            "arm_a_inner": round(self.arm_a_inner, 2),
            "arm_b_inner": round(self.arm_b_inner, 2),
            "buried_depth": self.buried_depth,
        }


@dataclass(frozen=True)
class StepGeometry:
    step_count: int
    requested_step_height: float
    actual_step_height: float
    total_height: float
    slab_thickness_top: float
    total_consumption: float
    steps: Tuple[StepDimension, ...]
    adjustment_note: Optional[str] = None


def step_reduction(measurements: StairMeasurements) -> float:
    return measurements.tread - measurements.overhang_front


def tread_consumptions(measurements: StairMeasurements, step_count: int) -> list:
    """Per-step tread consumption. The platform also loses the front slab thickness."""
    reduction = step_reduction(measurements)
    consumptions = [reduction] * step_count
    consumptions[-1] = reduction - measurements.slab_thickness_front
    return consumptions


def total_tread_consumption(measurements: StairMeasurements, step_count: int) -> float:
    """Sum of tread_consumptions() without building the per-step list."""
    reduction = step_reduction(measurements)
    return (step_count - 1) * reduction + (reduction - measurements.slab_thickness_front)


def derive_step_geometry(measurements: StairMeasurements) -> StepGeometry:
    """
    Derive step count and per-step arm/height geometry.

    Raises StairInputError when no whole step fits or the tread is used up
    by the overhang, GeometryError when an arm is too short for the run.
    """
    m = measurements
    step_count = round_half_up(m.total_height / m.step_height)
    if step_count <= 0:
        raise StairInputError(
            "Total height %.1f cm is too low for a %.1f cm step"
            % (m.total_height, m.step_height),
            field="total_height",
        )

    actual_step_height = m.total_height / step_count
    adjustment_note = None
    if abs(actual_step_height - m.step_height) > ADJUSTMENT_TOLERANCE:
        adjustment_note = (
            "Step height adjusted from %.2f cm to %.2f cm to fit %d steps in %.1f cm"
            % (m.step_height, actual_step_height, step_count, m.total_height)
        )

    reduction = step_reduction(m)
    if reduction - m.slab_thickness_front <= 0:
        raise StairInputError(
            "Tread %.1f cm leaves no run after overhang and front slab" % m.tread,
            field="tread",
        )

    # Feasibility over the whole run before any per-step record is built
    total_consumption = total_tread_consumption(m, step_count)
    if m.arm_a_length - 2 * total_consumption <= 0:
        raise GeometryError("A", 2 * total_consumption, m.arm_a_length)
    if m.arm_b_length - total_consumption <= 0:
        raise GeometryError("B", total_consumption, m.arm_b_length)

    consumptions = tread_consumptions(m, step_count)

    steps = []
    consumed = 0.0
    for i, consumption in enumerate(consumptions):
        index = i + 1
        arm_a_outer = m.arm_a_length - 2 * consumed
        arm_b_outer = m.arm_b_length - consumed
        consumed += consumption
        cumulative = actual_step_height * index
        steps.append(StepDimension(
            index=index,
            cumulative_height=cumulative,
            individual_height=actual_step_height,
            target_height=cumulative - m.slab_thickness_top,
            tread=m.tread,
            tread_consumption=consumption,
            is_platform=index == step_count,
            arm_a_outer=arm_a_outer,
            arm_b_outer=arm_b_outer,
            arm_a_inner=m.arm_a_length - 2 * consumed,
            arm_b_inner=m.arm_b_length - consumed,
        ))

    logger.info(
        "Step geometry: %d steps at %.2f cm, tread consumption %.1f cm (arm A inner %.1f, arm B inner %.1f)",
        step_count, actual_step_height, total_consumption,
        steps[-1].arm_a_inner, steps[-1].arm_b_inner,
    )

    return StepGeometry(
        step_count=step_count,
        requested_step_height=m.step_height,
        actual_step_height=actual_step_height,
        total_height=m.total_height,
        slab_thickness_top=m.slab_thickness_top,
        total_consumption=total_consumption,
        steps=tuple(steps),
        adjustment_note=adjustment_note,
    )
