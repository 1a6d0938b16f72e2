"""
Calculator registry. Maps job_type strings to calculator classes.
"""

from .u_shape_stair import UShapeStairCalculator
from .base import BaseCalculator

CALCULATOR_REGISTRY: dict[str, type] = {
    "u_shape_stair": UShapeStairCalculator,
}


def get_calculator(job_type: str) -> BaseCalculator:
    """Returns an instance of the calculator for a job type, or raises ValueError."""
    if job_type not in CALCULATOR_REGISTRY:
        raise ValueError(
            f"No calculator registered for job type: {job_type}. "
            f"Available: {list(CALCULATOR_REGISTRY.keys())}"
        )
    return CALCULATOR_REGISTRY[job_type]()


def has_calculator(job_type: str) -> bool:
    """Check if a calculator exists for a job type."""
    return job_type in CALCULATOR_REGISTRY


def list_calculators() -> list[str]:
    """List all registered calculator job types."""
    return list(CALCULATOR_REGISTRY.keys())
