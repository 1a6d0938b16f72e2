"""
Material transport time on site.

Carrier loads: trips = ceil(quantity / capacity), each trip is there and
back at the carrier's speed. Capacity comes from MATERIAL_CAPACITY by
material kind and carrier size; sizes missing from the table use the
nearest listed size.

Hand-carried items (posts, rails) skip the carrier and move a fixed
number of units per trip at walking pace.

Times are hours; distances metres; speeds metres per hour.
"""

import logging
import math

from .materials import (
    CARRIER_SPEEDS,
    DEFAULT_CARRIER_SPEED,
    FOOT_CARRY_SPEED,
    MATERIAL_CAPACITY,
    SLAB_TRIP_MINUTES,
    SLABS_PER_TRIP,
)

logger = logging.getLogger(__name__)


def carrier_speed(size_tonnes: float, speed: float = None) -> float:
    """Explicit speed wins, else the speed table by carrier size, else 4000 m/h."""
    if speed:
        return float(speed)
    return CARRIER_SPEEDS.get(float(size_tonnes), DEFAULT_CARRIER_SPEED)


def material_capacity(material_kind: str, size_tonnes: float) -> float:
    """Units of `material_kind` one carrier load holds."""
    table = MATERIAL_CAPACITY.get(material_kind)
    if table is None:
        logger.warning("No carrier capacity data for material %s, assuming 1 per trip", material_kind)
        return 1.0
    size = float(size_tonnes)
    if size in table:
        return float(table[size])
    closest = min(sorted(table.keys()), key=lambda s: abs(s - size))
    logger.warning("Carrier size %st not listed for %s, using %st", size, material_kind, closest)
    return float(table[closest])


def transport_time(quantity: float, material_kind: str, size_tonnes: float,
                   distance_m: float, speed: float = None) -> dict:
    """Trips and hours to move `quantity` with one carrier."""
    if quantity <= 0 or distance_m <= 0:
        return {"trips": 0, "hours": 0.0}
    capacity = material_capacity(material_kind, size_tonnes)
    trips = math.ceil(quantity / capacity)
    hours_per_trip = (distance_m * 2) / carrier_speed(size_tonnes, speed)
    return {"trips": trips, "hours": trips * hours_per_trip}


def hand_carry_time(quantity: float, distance_m: float, units_per_trip: int = 1) -> dict:
    """Trips and hours to carry `quantity` items on foot."""
    if quantity <= 0 or distance_m <= 0:
        return {"trips": 0, "hours": 0.0}
    trips = math.ceil(quantity / max(1, units_per_trip))
    hours_per_trip = (distance_m * 2) / FOOT_CARRY_SPEED
    return {"trips": trips, "hours": trips * hours_per_trip}


def slab_transport_hours(total_slabs: int) -> float:
    """Slabs go two at a time, 10 minutes a trip, whatever the carrier."""
    if total_slabs <= 0:
        return 0.0
    return math.ceil(total_slabs / SLABS_PER_TRIP) * SLAB_TRIP_MINUTES / 60.0
