"""
Abstract base class for all stair calculators.

Input: fields dict (measurements in cm plus option strings)
Output: result dict with materials, task_breakdown, summary, assumptions
"""

import math
from abc import ABC, abstractmethod

from .errors import StairInputError


class BaseCalculator(ABC):
    """All stair calculators inherit from this."""

    @abstractmethod
    def calculate(self, fields: dict, task_rates: list = None, carrier: dict = None) -> dict:
        """
        Takes the measured fields, the task-rate table and the selected carrier.
        Returns the result dict (materials, task_breakdown, summary, ...).
        """
        pass

    # --- Helper methods for all calculators ---

    def parse_number(self, value, default: float = 0.0) -> float:
        """Parse a numeric value from user input. Handles strings like '12', '12.5cm'."""
        if value is None or value == "":
            return default
        try:
            return float(str(value).strip().rstrip("cm").strip())
        except (ValueError, TypeError):
            return default

    def parse_int(self, value, default: int = 0) -> int:
        """Parse an integer from user input."""
        if value is None or value == "":
            return default
        try:
            return int(float(str(value).strip()))
        except (ValueError, TypeError):
            return default

    def require_number(self, fields: dict, key: str, allow_zero: bool = False) -> float:
        """
        Parse a required measurement. Missing or non-numeric → StairInputError.
        Lengths must be > 0; thicknesses/overhangs pass allow_zero=True and only reject negatives.
        """
        value = fields.get(key)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise StairInputError("Missing required field: %s" % key, field=key)
        try:
            number = float(str(value).strip().rstrip("cm").strip())
        except (ValueError, TypeError):
            raise StairInputError("Field %s must be a number, got %r" % (key, value), field=key)
        if math.isnan(number) or math.isinf(number):
            raise StairInputError("Field %s must be a finite number" % key, field=key)
        if allow_zero and number < 0:
            raise StairInputError("Field %s cannot be negative" % key, field=key)
        if not allow_zero and number <= 0:
            raise StairInputError("Field %s must be greater than zero" % key, field=key)
        return number

    def parse_choice(self, value, choices, default: str, key: str) -> str:
        """Parse an option string. Blank → default, unknown → StairInputError."""
        if value is None or value == "":
            return default
        choice = str(value).strip()
        if choice not in choices:
            raise StairInputError(
                "Invalid %s: %s. Expected one of %s" % (key, choice, list(choices)),
                field=key,
            )
        return choice

    def parse_bool(self, value, default: bool = False) -> bool:
        if value is None or value == "":
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in ("1", "true", "yes", "y", "on")

    def make_material(self, name: str, amount: float, unit: str,
                      course_details: list = None) -> dict:
        """Build a Material output dict."""
        material = {
            "name": name,
            "amount": round(amount, 2) if isinstance(amount, float) else amount,
            "unit": unit,
        }
        if course_details is not None:
            material["course_details"] = course_details
        return material
