"""
Course fitting: how many rows of which block make each step's height.

A course stack is: 2 cm bed + n blocks + (n-1) joints. A step fits when
the stack with standard 1 cm joints lands within 0.5 cm under the target,
or when a joint between 0.5 and 3 cm closes the gap exactly.

When some step cannot fit, the whole flight may be buried 2..8 cm into
the ground: the block work then only has to make (total height - depth),
spread evenly over the same number of steps. One depth is chosen for the
flight, the feasible depth closest to PREFERRED_BURYING_DEPTH.

Steps that still do not fit are flagged needs_cutting; the run completes.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from .materials import (
    BASE_GAP,
    EXACT_FIT_TOLERANCE,
    MORTAR_JOINT_MAX,
    MORTAR_JOINT_MIN,
    STANDARD_JOINT,
    block_height_flat,
    get_block_material,
)
from .step_geometry import StepGeometry

logger = logging.getLogger(__name__)

BURYING_DEPTHS = range(2, 9)        # cm, inclusive 2..8
PREFERRED_BURYING_DEPTH = 5         # cm
_EPS = 1e-9


@dataclass(frozen=True)
class CourseFit:
    step: int
    material_id: str
    blocks: int                 # rows of blocks in the course
    mortar_height: float        # joint between rows
    target_height: float
    stack_height: float
    needs_cutting: bool = False
    buried_depth: Optional[int] = None

    def as_dict(self) -> dict:
        return {
            "step": self.step,
            "material_id": self.material_id,
            "blocks": self.blocks,
            "mortar_height": round(self.mortar_height, 2),
            "target_height": round(self.target_height, 2),
            "stack_height": round(self.stack_height, 2),
            "needs_cutting": self.needs_cutting,
            "buried_depth": self.buried_depth,
        }


def stack_height(blocks: int, block_height: float, joint: float = STANDARD_JOINT) -> float:
    """Height of a course of `blocks` rows on the base bed."""
    return blocks * block_height + BASE_GAP + (blocks - 1) * joint


def fit_step(step: int, target: float, material_ids: List[str],
             brick_orientation: str = "flat") -> Optional[CourseFit]:
    """
    First material (in preference order) and block count that fits `target`.
    Returns None when nothing fits.
    """
    if target <= 0:
        return None
    for material_id in material_ids:
        block_height = block_height_flat(get_block_material(material_id), brick_orientation)
        max_blocks = math.ceil(target / block_height)
        for n in range(1, max_blocks + 2):
            standard = stack_height(n, block_height)
            if target - EXACT_FIT_TOLERANCE - _EPS <= standard <= target + _EPS:
                return CourseFit(step, material_id, n, STANDARD_JOINT, target, standard)
            if standard < target and n > 1:
                joint = (target - n * block_height - BASE_GAP) / (n - 1)
                if MORTAR_JOINT_MIN - _EPS <= joint <= MORTAR_JOINT_MAX + _EPS:
                    return CourseFit(step, material_id, n, joint, target, target)
    return None


def buried_targets(geometry: StepGeometry, depth: float) -> List[float]:
    """Per-step course targets when the flight is buried `depth` cm."""
    adjusted_total = geometry.total_height - depth
    adjusted_step = adjusted_total / geometry.step_count
    return [
        adjusted_step * step.index - geometry.slab_thickness_top
        for step in geometry.steps
    ]


def find_burying_depth(geometry: StepGeometry, material_ids: List[str],
                       brick_orientation: str = "flat"):
    """
    Feasible burying depth closest to PREFERRED_BURYING_DEPTH, with its fits.
    Ties keep the shallower depth. Returns (None, None) if no depth works.
    """
    best_depth = None
    best_fits = None
    best_diff = None
    for depth in BURYING_DEPTHS:
        if geometry.total_height - depth <= 0:
            continue
        fits = []
        for step, target in zip(geometry.steps, buried_targets(geometry, depth)):
            fit = fit_step(step.index, target, material_ids, brick_orientation)
            if fit is None:
                break
            fits.append(fit)
        else:
            diff = abs(depth - PREFERRED_BURYING_DEPTH)
            if best_diff is None or diff < best_diff:
                best_depth, best_fits, best_diff = depth, fits, diff
    return best_depth, best_fits


def _cutting_fallback(step: int, target: float, material_id: str,
                      brick_orientation: str) -> CourseFit:
    block_height = block_height_flat(get_block_material(material_id), brick_orientation)
    blocks = max(0, math.ceil(target / block_height))
    return CourseFit(
        step=step,
        material_id=material_id,
        blocks=blocks,
        mortar_height=STANDARD_JOINT,
        target_height=target,
        stack_height=stack_height(blocks, block_height) if blocks else 0.0,
        needs_cutting=True,
    )


def fit_courses(geometry: StepGeometry, material_ids: List[str],
                brick_orientation: str = "flat") -> List[CourseFit]:
    """Course fit for every step of the flight, burying or flagging as needed."""
    direct = [
        fit_step(step.index, step.target_height, material_ids, brick_orientation)
        for step in geometry.steps
    ]
    failing = [step for step, fit in zip(geometry.steps, direct) if fit is None]
    if not failing:
        return direct

    depth, fits = find_burying_depth(geometry, material_ids, brick_orientation)
    if depth is not None:
        logger.info("Burying flight %d cm to fit %d step(s)", depth, len(failing))
        return [
            CourseFit(f.step, f.material_id, f.blocks, f.mortar_height,
                      f.target_height, f.stack_height, buried_depth=depth)
            for f in fits
        ]

    logger.warning(
        "No course fit for steps %s even with burying, flagging for cutting",
        [step.index for step in failing],
    )
    return [
        fit if fit is not None else _cutting_fallback(
            step.index, step.target_height, material_ids[0], brick_orientation)
        for step, fit in zip(geometry.steps, direct)
    ]
