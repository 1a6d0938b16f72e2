"""Errors raised by the stair calculators. Routers map these to HTTP 400 / 422."""


class StairInputError(ValueError):
    """A required field is missing, non-numeric, out of range, or an option is unknown."""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field


class GeometryError(ValueError):
    """The flight does not fit: an arm runs out of length before the last step."""

    def __init__(self, arm, required, available):
        self.arm = arm
        self.required = required
        self.available = available
        super().__init__(
            "arm %s too short: needs %.1f cm, only %.1f cm available"
            % (arm, required, available)
        )

    def as_detail(self) -> dict:
        return {
            "error": str(self),
            "arm": self.arm,
            "required": round(self.required, 2),
            "available": round(self.available, 2),
        }
