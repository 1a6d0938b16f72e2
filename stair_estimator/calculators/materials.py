"""
Static catalogs for the stair calculators.

All dimensions in cm. Block catalog entries are height × width × length
as the unit stands on the pallet; when laid flat in a course the catalog
width becomes the course height (see block_height_flat).

Carrier tables are keyed by carrier size in tonnes.
"""

from .errors import StairInputError


# --- Masonry units ---
BLOCK_MATERIALS = {
    "blocks4": {
        "name": "4-inch Blocks",
        "height": 21.0,
        "width": 10.0,   # course height when laid flat
        "length": 44.0,
        "is_inches": True,
        "orientation_sensitive": False,
    },
    "blocks7": {
        "name": "7-inch Blocks",
        "height": 21.0,
        "width": 14.0,
        "length": 44.0,
        "is_inches": True,
        "orientation_sensitive": False,
    },
    "bricks": {
        "name": "Standard Bricks (9x6x21)",
        "height": 6.0,
        "width": 9.0,
        "length": 21.0,
        "is_inches": False,
        "orientation_sensitive": True,
    },
}

DEFAULT_MATERIALS = ["blocks4", "blocks7"]
BRICK_ORIENTATIONS = ("flat", "side")

# Mortar joint window for a fitted course
MORTAR_JOINT_MIN = 0.5
MORTAR_JOINT_MAX = 3.0
STANDARD_JOINT = 1.0
BASE_GAP = 2.0          # bed under the first course
EXACT_FIT_TOLERANCE = 0.5
BOND_JOINT = 1.0        # head joint between blocks along a row

# Fill and mortar
FILL_DENSITY_KG_M3 = 1600.0
MORTAR_KG_PER_BLOCK = 0.5
MORTAR_BLOCK_FACTOR = 3
MORTAR_BATCH_KG = 125.0

# --- Slabs ---
SLAB_SIZES = {
    "90x60": {"width": 90.0, "length": 60.0},
    "60x60": {"width": 60.0, "length": 60.0},
    "60x30": {"width": 60.0, "length": 30.0},
    "30x30": {"width": 30.0, "length": 30.0},
}

SLAB_PLACEMENTS = ("long_way", "side_ways")
CUT_POLICIES = ("one_cut", "two_cuts")
CORNER_JOINTS = ("butt", "mitre45")
STEP_CONFIGS = ("fronts_on_top", "steps_to_fronts")

CUT_BUCKETS = (30, 60, 90, 120)
CUT_TOLERANCE = 0.1     # cm; closer than this is not a cut

ADHESIVE_KG_PER_M2_PER_CM = 12.0
ADHESIVE_BAG_KG = 20.0
DEFAULT_ADHESIVE_THICKNESS = 0.5
DEFAULT_GAP_MM = 2.0

# --- Transport ---
# Carrier speeds in metres per hour by carrier size (tonnes)
CARRIER_SPEEDS = {
    0.1: 1500.0,
    0.125: 1500.0,
    0.15: 1500.0,
    0.3: 2500.0,
    0.5: 1000.0,
    1.0: 4000.0,
    3.0: 6000.0,
    5.0: 7000.0,
    10.0: 8000.0,
}
DEFAULT_CARRIER_SPEED = 4000.0
FOOT_CARRY_SPEED = 1500.0

_CARRIER_SIZES = (0.1, 0.125, 0.15, 0.3, 0.5, 1.0, 3.0, 5.0, 10.0)


def _by_size(values):
    return dict(zip(_CARRIER_SIZES, values))


# Units one carrier load holds, per material kind and carrier size
MATERIAL_CAPACITY = {
    "blocks": _by_size([6, 8, 10, 20, 33, 66, 133, 200, 200]),
    "bricks": _by_size([33, 41, 50, 100, 166, 333, 666, 1000, 1000]),
    "monoblocks": _by_size([33, 41, 50, 100, 166, 333, 666, 1000, 1000]),
    "slabs": _by_size([2, 2.5, 3, 6, 10, 20, 40, 60, 60]),
    "cement": _by_size([4, 5, 6, 12, 20, 40, 80, 120, 120]),   # bags
    "sand": _by_size(list(_CARRIER_SIZES)),                    # tonnes
    "type1": _by_size(list(_CARRIER_SIZES)),
    "soil": _by_size(list(_CARRIER_SIZES)),
}

SLAB_TRIP_MINUTES = 10.0
SLABS_PER_TRIP = 2


def get_block_material(material_id: str) -> dict:
    """Return the catalog entry for a block material id, or raise StairInputError."""
    material = BLOCK_MATERIALS.get(material_id)
    if material is None:
        raise StairInputError(
            "Unknown block material: %s. Available: %s"
            % (material_id, list(BLOCK_MATERIALS.keys())),
            field="materials",
        )
    return material


def block_height_flat(material: dict, brick_orientation: str = "flat") -> float:
    """Course height of one unit laid flat. Bricks depend on orientation."""
    if material["orientation_sensitive"]:
        return material["height"] if brick_orientation == "flat" else material["width"]
    return material["width"]


def block_plan_width(material: dict, brick_orientation: str = "flat") -> float:
    """Depth of the course in plan: how far a corner block eats into the next arm."""
    if material["orientation_sensitive"]:
        return material["width"] if brick_orientation == "flat" else material["height"]
    return material["height"]


def get_slab_size(size_key: str) -> dict:
    slab = SLAB_SIZES.get(size_key)
    if slab is None:
        raise StairInputError(
            "Unknown slab size: %s. Available: %s" % (size_key, list(SLAB_SIZES.keys())),
            field="slab_size",
        )
    return slab
