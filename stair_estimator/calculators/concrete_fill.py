"""
Concrete fill behind the block courses of a U-shaped flight.

The fill runs along arm A and both B arms at the step's inner lengths.
Where arm A meets each B arm the fill block would be counted twice, so
two corner volumes (depth × depth × height) come off.
"""

import math

from .materials import FILL_DENSITY_KG_M3, MORTAR_BLOCK_FACTOR, MORTAR_KG_PER_BLOCK
from .step_geometry import StepDimension


def step_fill_volume_cm3(step: StepDimension, tread: float, primary_block_width: float) -> float:
    """Fill volume for one step in cm³. Zero when the blocks take the whole tread."""
    fill_depth = tread - primary_block_width
    fill_height = step.target_height
    if fill_depth <= 0 or fill_height <= 0:
        return 0.0
    arm_a = step.arm_a_inner * fill_depth * fill_height
    arm_b = step.arm_b_inner * fill_depth * fill_height
    corner = fill_depth * fill_depth * fill_height
    return arm_a + 2 * arm_b - 2 * corner


def fill_volume_m3(steps, tread: float, primary_block_width: float) -> float:
    return math.fsum(
        step_fill_volume_cm3(step, tread, primary_block_width) for step in steps
    ) / 1000000.0


def mortar_mass_kg(total_blocks: int, fill_m3: float) -> float:
    """Bedding mortar allowance per block plus the fill mass."""
    return total_blocks * MORTAR_KG_PER_BLOCK * MORTAR_BLOCK_FACTOR + fill_m3 * FILL_DENSITY_KG_M3
