"""
Bond-pattern block counter for U-shaped steps.

Rows alternate which arm owns the two inside corners:
  odd rows:  arm A full outer length, each B arm shorter by one block width
  even rows: both B arms full outer length, arm A shorter by two block widths
Blocks are laid on the outside line, so outer lengths are used.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List

from .course_fitting import CourseFit
from .materials import BOND_JOINT, block_plan_width, get_block_material
from .step_geometry import StepDimension

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepBlockCount:
    step: int
    material_id: str
    rows: int
    arm_a_blocks: int
    arm_b_blocks: int       # one B side

    @property
    def total(self) -> int:
        return self.arm_a_blocks + 2 * self.arm_b_blocks


def blocks_per_row(length: float, block_length: float) -> int:
    """Blocks to run `length` with a 1 cm head joint per block. Never negative."""
    return max(0, math.ceil(length / (block_length + BOND_JOINT)))


def count_step_blocks(step: StepDimension, fit: CourseFit,
                      brick_orientation: str = "flat") -> StepBlockCount:
    material = get_block_material(fit.material_id)
    block_width = block_plan_width(material, brick_orientation)
    block_length = material["length"]

    arm_a = 0
    arm_b = 0
    for row in range(1, fit.blocks + 1):
        if row % 2 == 1:
            arm_a += blocks_per_row(step.arm_a_outer, block_length)
            arm_b += blocks_per_row(step.arm_b_outer - block_width, block_length)
        else:
            arm_a += blocks_per_row(step.arm_a_outer - 2 * block_width, block_length)
            arm_b += blocks_per_row(step.arm_b_outer, block_length)

    return StepBlockCount(step.index, fit.material_id, fit.blocks, arm_a, arm_b)


def count_blocks(steps: List[StepDimension], fits: List[CourseFit],
                 brick_orientation: str = "flat") -> Dict[str, dict]:
    """
    Block totals per material, in the order materials are first used.

    Returns {material_id: {"total": int, "course_details": [...]}}.
    """
    totals = {}
    for step, fit in zip(steps, fits):
        count = count_step_blocks(step, fit, brick_orientation)
        material = get_block_material(fit.material_id)
        entry = totals.setdefault(fit.material_id, {"total": 0, "course_details": []})
        entry["total"] += count.total
        entry["course_details"].append({
            "step": step.index,
            "blocks": count.total,
            "rows": count.rows,
            "material": material["name"],
            "mortar_height": round(fit.mortar_height, 2),
            "needs_cutting": fit.needs_cutting,
            "arm_a_blocks": count.arm_a_blocks,
            "arm_bl_blocks": count.arm_b_blocks,
            "arm_br_blocks": count.arm_b_blocks,
            "buried_depth": fit.buried_depth,
        })

    logger.info(
        "Bond pattern: %s",
        ", ".join("%s=%d" % (mid, data["total"]) for mid, data in totals.items()),
    )
    return totals
