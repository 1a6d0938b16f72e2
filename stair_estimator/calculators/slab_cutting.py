"""
Slab cutting plan for the tops and fronts of a U-shaped flight.

Each step has four logical surfaces processed in a fixed order:
top A, front A, top B, front B. Arm B stands for both B sides, so it
is computed once and every count it produces is doubled.

All surfaces of one pass share a WastePool. Offcuts from a surface go
into the pool and later surfaces try the pool before cutting a new slab,
so results depend on the processing order.

Orientation convention for stored pieces: a piece "fits as stored" when
its width covers the surface depth and its length covers the piece width
along the arm; a rotatable piece may also be used the other way round.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .materials import (
    ADHESIVE_BAG_KG,
    ADHESIVE_KG_PER_M2_PER_CM,
    CORNER_JOINTS,
    CUT_BUCKETS,
    CUT_POLICIES,
    CUT_TOLERANCE,
    DEFAULT_ADHESIVE_THICKNESS,
    DEFAULT_GAP_MM,
    SLAB_PLACEMENTS,
    STEP_CONFIGS,
    get_slab_size,
)
from .errors import StairInputError
from .step_geometry import StepDimension, round_half_up

logger = logging.getLogger(__name__)

ARM_A = "A"
ARM_B = "B"
TOP = "top"
FRONT = "front"
LENGTH_CUT = "length"
WIDTH_CUT = "width"

MIN_WASTE_DIMENSION = 1.0     # cm; anything this small or smaller is thrown away
TOP_OVER_FRONT_CLEARANCE = 0.5
MITRE_CUTS_PER_STEP = 4       # 2 corners × 2 slabs
_EPS = 1e-9


def needs_cut(actual: float, required: float) -> bool:
    return abs(actual - required) > CUT_TOLERANCE


def nearest_cut_bucket(dimension: float) -> int:
    """Nearest of 30/60/90/120 cm. Ties go to the smaller size."""
    return min(CUT_BUCKETS, key=lambda size: abs(size - dimension))


def slab_size_key(width: float, depth: float) -> str:
    return "%dx%d" % (round_half_up(width), round_half_up(depth))


# --- Waste pool ---

@dataclass(frozen=True)
class WasteSource:
    """Where an offcut came from. Compared by equality, never by label text."""
    step: int
    arm: str
    surface: str

    def label(self) -> str:
        return "step %d arm %s %s" % (self.step, self.arm, self.surface)


@dataclass
class WastePiece:
    width: float
    length: float
    source: WasteSource
    derived: int = 0        # 0 = fresh offcut, n = n-th remainder of one
    rotatable: bool = True

    @property
    def area(self) -> float:
        return self.width * self.length

    def fits_as_stored(self, width: float, depth: float) -> bool:
        return self.width >= depth - _EPS and self.length >= width - _EPS

    def fits_rotated(self, width: float, depth: float) -> bool:
        return self.rotatable and self.length >= depth - _EPS and self.width >= width - _EPS

    def fits(self, width: float, depth: float) -> bool:
        return self.fits_as_stored(width, depth) or self.fits_rotated(width, depth)

    def as_dict(self) -> dict:
        return {
            "width": round(self.width, 2),
            "length": round(self.length, 2),
            "source": self.source.label(),
            "derived": self.derived,
        }


class WastePool:
    """
    Offcuts available for reuse within one calculation pass.

    Create one per pass and hand it to every surface in processing order.
    Pieces with a dimension of MIN_WASTE_DIMENSION or less are discarded
    on insertion.
    """

    def __init__(self):
        self.pieces: List[WastePiece] = []
        self.discarded = 0

    def __len__(self):
        return len(self.pieces)

    def __iter__(self):
        return iter(list(self.pieces))

    @property
    def total_area(self) -> float:
        return sum(piece.area for piece in self.pieces)

    def add(self, width: float, length: float, source: WasteSource,
            derived: int = 0, rotatable: bool = True) -> Optional[WastePiece]:
        if width <= MIN_WASTE_DIMENSION or length <= MIN_WASTE_DIMENSION:
            self.discarded += 1
            return None
        piece = WastePiece(width, length, source, derived, rotatable)
        self.pieces.append(piece)
        return piece

    def find_best(self, width: float, depth: float,
                  accept: Callable[[WastePiece], bool] = None) -> Optional[WastePiece]:
        """Smallest-area piece that covers width × depth in either orientation."""
        best = None
        for piece in self.pieces:
            if accept is not None and not accept(piece):
                continue
            if not piece.fits(width, depth):
                continue
            if best is None or piece.area < best.area:
                best = piece
        return best

    def consume(self, piece: WastePiece, used_width: float, used_depth: float) -> Optional[WastePiece]:
        """
        Take `piece` out of the pool for a used_width × used_depth cut and put
        back the more useful of the two guillotine strips left over. The strip
        along the depth wins when it is at least as large as the other one.
        Returns the re-inserted remainder, if any.
        """
        self.pieces.remove(piece)
        if piece.fits_as_stored(used_width, used_depth):
            depth_left = piece.width - used_depth
            width_left = piece.length - used_width
            depth_strip = (depth_left, piece.length)
            width_strip = (piece.width, width_left)
        else:
            depth_left = piece.length - used_depth
            width_left = piece.width - used_width
            depth_strip = (piece.width, depth_left)
            width_strip = (width_left, piece.length)

        if depth_left > MIN_WASTE_DIMENSION and \
                depth_strip[0] * depth_strip[1] >= width_strip[0] * width_strip[1]:
            strip = depth_strip
        elif width_left > MIN_WASTE_DIMENSION:
            strip = width_strip
        elif depth_left > MIN_WASTE_DIMENSION:
            strip = depth_strip
        else:
            return None
        return self.add(strip[0], strip[1], piece.source,
                        derived=piece.derived + 1, rotatable=piece.rotatable)

    def claim(self, accept: Callable[[WastePiece], bool]) -> List[WastePiece]:
        """Remove and return every piece `accept` matches."""
        claimed = [piece for piece in self.pieces if accept(piece)]
        self.pieces = [piece for piece in self.pieces if not accept(piece)]
        return claimed


# --- Per-surface results ---

@dataclass(frozen=True)
class PlacedPiece:
    width: float
    depth: float
    from_waste: bool = False
    source: Optional[WasteSource] = None
    rotated: bool = False


@dataclass
class SurfacePlan:
    step: int
    arm: str
    surface: str
    width: float
    depth: float
    pieces: List[PlacedPiece] = field(default_factory=list)
    cuts: List[Tuple[str, float]] = field(default_factory=list)
    multiplier: int = 1

    @property
    def new_slabs(self) -> int:
        return sum(1 for piece in self.pieces if not piece.from_waste)

    @property
    def from_waste(self) -> int:
        return sum(1 for piece in self.pieces if piece.from_waste)

    @property
    def total_slabs(self) -> int:
        return self.new_slabs + self.from_waste

    def describe(self) -> str:
        """e.g. '2x(90.0x30.0cm) + 1x(12.5x30.0cm) [waste: step 1 arm A top]'"""
        if not self.pieces:
            return "-"
        parts = []
        i = 0
        while i < len(self.pieces):
            piece = self.pieces[i]
            if piece.from_waste:
                parts.append("1x(%.1fx%.1fcm) [waste%s: %s]" % (
                    piece.width, piece.depth, " rotated" if piece.rotated else "",
                    piece.source.label()))
                i += 1
                continue
            run = 1
            while i + run < len(self.pieces):
                nxt = self.pieces[i + run]
                if nxt.from_waste or nxt.width != piece.width or nxt.depth != piece.depth:
                    break
                run += 1
            parts.append("%dx(%.1fx%.1fcm)" % (run, piece.width, piece.depth))
            i += run
        return " + ".join(parts)

    def as_dict(self) -> dict:
        return {
            "step": self.step,
            "arm": self.arm,
            "surface": self.surface,
            "width": round(self.width, 2),
            "depth": round(self.depth, 2),
            "sides": self.multiplier,
            "new_slabs": self.new_slabs * self.multiplier,
            "slabs_from_waste": self.from_waste * self.multiplier,
            "cuts": len(self.cuts) * self.multiplier,
            "dimensions": self.describe(),
            "waste_sources": sorted({p.source.label() for p in self.pieces if p.from_waste}),
        }


@dataclass
class CutTally:
    """Running totals for one pass: cuts, cut histograms, areas, slab sizes."""
    total_cuts: int = 0
    length_cuts: Dict[int, int] = field(default_factory=dict)
    width_cuts: Dict[int, int] = field(default_factory=dict)
    top_area_m2: float = 0.0
    front_area_m2: float = 0.0
    slab_sizes: Dict[str, int] = field(default_factory=dict)

    def add_cut(self, kind: str, dimension: float, count: int = 1):
        histogram = self.length_cuts if kind == LENGTH_CUT else self.width_cuts
        bucket = nearest_cut_bucket(dimension)
        histogram[bucket] = histogram.get(bucket, 0) + count
        self.total_cuts += count

    def add_piece(self, surface: str, width: float, depth: float, count: int = 1):
        area = width * depth / 10000.0 * count
        if surface == TOP:
            self.top_area_m2 += area
        else:
            self.front_area_m2 += area
        key = slab_size_key(width, depth)
        self.slab_sizes[key] = self.slab_sizes.get(key, 0) + count

    def record(self, plan: SurfacePlan):
        for kind, dimension in plan.cuts:
            self.add_cut(kind, dimension, plan.multiplier)
        for piece in plan.pieces:
            self.add_piece(plan.surface, piece.width, piece.depth, plan.multiplier)


# --- Options and plan ---

@dataclass(frozen=True)
class SlabOptions:
    slab_size: str = "90x60"
    placement: str = "long_way"
    cut_policy: str = "one_cut"
    gap_mm: float = DEFAULT_GAP_MM
    adhesive_thickness: float = DEFAULT_ADHESIVE_THICKNESS
    corner_joint: str = "butt"
    step_config: str = "fronts_on_top"

    def __post_init__(self):
        get_slab_size(self.slab_size)
        for key, value, choices in (
            ("placement", self.placement, SLAB_PLACEMENTS),
            ("cut_policy", self.cut_policy, CUT_POLICIES),
            ("corner_joint", self.corner_joint, CORNER_JOINTS),
            ("step_config", self.step_config, STEP_CONFIGS),
        ):
            if value not in choices:
                raise StairInputError(
                    "Invalid %s: %s. Expected one of %s" % (key, value, list(choices)),
                    field=key,
                )
        if self.gap_mm < 0:
            raise StairInputError("gap_mm cannot be negative", field="gap_mm")
        if self.adhesive_thickness < 0:
            raise StairInputError("adhesive_thickness cannot be negative", field="adhesive_thickness")

    @property
    def gap_cm(self) -> float:
        return self.gap_mm / 10.0

    def slab_dimensions(self) -> Tuple[float, float]:
        """(width along the arm, length across the surface depth)."""
        slab = get_slab_size(self.slab_size)
        longer = max(slab["width"], slab["length"])
        shorter = min(slab["width"], slab["length"])
        if self.placement == "long_way":
            return longer, shorter
        return shorter, longer


@dataclass
class SlabPlan:
    surfaces: List[SurfacePlan]
    tally: CutTally
    remaining_waste: List[WastePiece]
    adhesive_thickness: float
    mitre_cuts: int = 0

    def _new_slabs(self, surface: str) -> int:
        return sum(s.new_slabs * s.multiplier for s in self.surfaces if s.surface == surface)

    @property
    def new_top_slabs(self) -> int:
        return self._new_slabs(TOP)

    @property
    def new_front_slabs(self) -> int:
        return self._new_slabs(FRONT)

    @property
    def new_slabs(self) -> int:
        """Slabs to buy and carry to site."""
        return self.new_top_slabs + self.new_front_slabs

    @property
    def slabs_from_waste(self) -> int:
        return sum(s.from_waste * s.multiplier for s in self.surfaces)

    @property
    def total_slabs(self) -> int:
        """Every placed piece: new slabs plus pieces cut from offcuts."""
        return self.new_slabs + self.slabs_from_waste

    @property
    def total_cuts(self) -> int:
        return self.tally.total_cuts

    @property
    def top_adhesive_kg(self) -> float:
        return self.tally.top_area_m2 * self.adhesive_thickness * ADHESIVE_KG_PER_M2_PER_CM

    @property
    def front_adhesive_kg(self) -> float:
        return self.tally.front_area_m2 * self.adhesive_thickness * ADHESIVE_KG_PER_M2_PER_CM

    @property
    def total_adhesive_kg(self) -> float:
        return self.top_adhesive_kg + self.front_adhesive_kg

    @property
    def adhesive_bags(self) -> int:
        if self.total_adhesive_kg <= 0:
            return 0
        return max(1, math.ceil(self.total_adhesive_kg / ADHESIVE_BAG_KG))

    def as_dict(self) -> dict:
        return {
            "surfaces": [s.as_dict() for s in self.surfaces],
            "new_top_slabs": self.new_top_slabs,
            "new_front_slabs": self.new_front_slabs,
            "new_slabs": self.new_slabs,
            "total_slabs": self.total_slabs,
            "slabs_from_waste": self.slabs_from_waste,
            "total_cuts": self.total_cuts,
            "mitre_cuts": self.mitre_cuts,
            "length_cuts": [{"dimension": d, "count": c} for d, c in sorted(self.tally.length_cuts.items())],
            "width_cuts": [{"dimension": d, "count": c} for d, c in sorted(self.tally.width_cuts.items())],
            "slab_sizes": [{"dim": k, "count": c} for k, c in self.tally.slab_sizes.items()],
            "top_surface_area_m2": round(self.tally.top_area_m2, 4),
            "front_surface_area_m2": round(self.tally.front_area_m2, 4),
            "top_adhesive_kg": round(self.top_adhesive_kg, 2),
            "front_adhesive_kg": round(self.front_adhesive_kg, 2),
            "total_adhesive_kg": round(self.total_adhesive_kg, 2),
            "adhesive_bags": self.adhesive_bags,
            "remaining_waste": [p.as_dict() for p in self.remaining_waste],
        }


class SlabCuttingOptimizer:
    """
    Plans slabs for every step surface of one flight.

    Usage:
        optimizer = SlabCuttingOptimizer(options, tread=30, slab_thickness_top=2,
                                         slab_thickness_front=2, overhang_front=1)
        plan = optimizer.plan(geometry.steps)
    """

    def __init__(self, options: SlabOptions, tread: float, slab_thickness_top: float = 0.0,
                 slab_thickness_front: float = 0.0, overhang_front: float = 0.0):
        self.options = options
        self.tread = tread
        self.slab_thickness_top = slab_thickness_top
        self.slab_thickness_front = slab_thickness_front
        self.overhang_front = overhang_front
        self.slab_width, self.slab_length = options.slab_dimensions()
        self.gap = options.gap_cm

    # --- width layout ---

    def split_width(self, width: float):
        """
        Piece widths covering a surface of `width`.

        Returns (pieces, split) where pieces is a list of (width, is_remainder)
        and split is False when whole slabs cover the width without a width cut.
        """
        slab, gap = self.slab_width, self.gap
        count = max(1, math.ceil((width + gap) / (slab + gap) - _EPS))
        if width >= count * slab + (count - 1) * gap - _EPS:
            return [(slab, False)] * count, False

        remaining = width - (count - 1) * (slab + gap)
        if remaining <= CUT_TOLERANCE:
            return [(slab, False)] * max(1, count - 1), False

        if self.options.cut_policy == "one_cut":
            return [(slab, False)] * (count - 1) + [(remaining, True)], True
        if count == 1:
            return [(width, True)], True
        half = (width - (count - 2) * slab - (count - 1) * gap) / 2.0
        return [(slab, False)] * (count - 2) + [(half, True), (half, True)], True

    # --- surface routines ---

    def cover_surface(self, pool: WastePool, step: int, arm: str, surface: str,
                      width: float, depth: float, subtract_gap: bool = False) -> SurfacePlan:
        """General routine: whole slabs, remainders, waste first for every split piece."""
        plan = SurfacePlan(step, arm, surface, width, depth)
        if width <= 0 or depth <= 0:
            return plan

        layout, split = self.split_width(width)
        source = WasteSource(step, arm, surface)

        if not split:
            for piece_width, _ in layout:
                if needs_cut(self.slab_length, depth):
                    plan.cuts.append((LENGTH_CUT, depth))
                plan.pieces.append(PlacedPiece(piece_width, depth))
        else:
            for piece_width, is_remainder in layout:
                plan.pieces.append(
                    self._place_piece(pool, plan, source, piece_width, depth, is_remainder))

        if subtract_gap and plan.pieces:
            last = plan.pieces[-1]
            plan.pieces[-1] = PlacedPiece(max(0.0, last.width - self.gap), last.depth,
                                          last.from_waste, last.source, last.rotated)
        return plan

    def _place_piece(self, pool: WastePool, plan: SurfacePlan, source: WasteSource,
                     piece_width: float, depth: float, is_remainder: bool) -> PlacedPiece:
        waste = pool.find_best(piece_width, depth)
        if waste is not None:
            return self._take_waste(pool, plan, waste, piece_width, depth)

        if is_remainder:
            plan.cuts.append((WIDTH_CUT, piece_width))
            if piece_width < self.slab_width:
                pool.add(self.slab_width - piece_width, self.slab_length, source)
        if needs_cut(self.slab_length, depth):
            plan.cuts.append((LENGTH_CUT, depth))
            if self.slab_length > depth:
                pool.add(piece_width, self.slab_length - depth, source)
        return PlacedPiece(piece_width, depth)

    def _take_waste(self, pool: WastePool, plan: SurfacePlan, waste: WastePiece,
                    width: float, depth: float) -> PlacedPiece:
        rotated = not waste.fits_as_stored(width, depth)
        depth_side = waste.length if rotated else waste.width
        width_side = waste.width if rotated else waste.length
        if needs_cut(depth_side, depth):
            plan.cuts.append((LENGTH_CUT, depth))
        if needs_cut(width_side, width):
            plan.cuts.append((WIDTH_CUT, width))
        pool.consume(waste, width, depth)
        return PlacedPiece(width, depth, True, waste.source, rotated)

    def reuse_whole_surface(self, pool: WastePool, step: int, arm: str, width: float,
                            depth: float, subtract_gap: bool = False) -> Optional[SurfacePlan]:
        """Cover a top surface with one offcut from the same arm, if one is big enough."""
        if width <= 0 or depth <= 0:
            return None
        waste = pool.find_best(width, depth, accept=lambda piece: piece.source.arm == arm)
        if waste is None:
            return None
        plan = SurfacePlan(step, arm, TOP, width, depth)
        placed = self._take_waste(pool, plan, waste, width, depth)
        if subtract_gap:
            placed = PlacedPiece(max(0.0, width - self.gap), depth, True, placed.source, placed.rotated)
        plan.pieces.append(placed)
        return plan

    def front_from_top_waste(self, pool: WastePool, step: int, arm: str,
                             width: float, height: float) -> Optional[SurfacePlan]:
        """
        Cut a front from the offcuts its own top surface just produced.
        Claims every same-step, same-arm top offcut when at least one is tall enough.
        """
        if width <= 0 or height <= 0:
            return None

        def same_top(piece):
            return piece.source.step == step and piece.source.arm == arm and piece.source.surface == TOP

        usable = [p for p in pool if same_top(p) and (p.width >= height or p.length >= height)]
        if not usable:
            return None

        source = usable[0].source
        plan = SurfacePlan(step, arm, FRONT, width, height)
        layout, _ = self.split_width(width)
        for piece_width, is_remainder in layout:
            if is_remainder:
                plan.cuts.append((WIDTH_CUT, piece_width))
            if needs_cut(self.slab_length, height):
                plan.cuts.append((LENGTH_CUT, height))
            plan.pieces.append(PlacedPiece(piece_width, height, True, source))
        pool.claim(same_top)
        return plan

    # --- whole flight ---

    def top_depth(self, step: StepDimension) -> float:
        if self.options.step_config == "fronts_on_top" and not step.is_platform:
            return self.tread + self.slab_thickness_front - TOP_OVER_FRONT_CLEARANCE
        return self.tread - self.gap

    def front_height(self, step: StepDimension, previous_target: float) -> float:
        rise = step.target_height - previous_target
        if self.options.step_config == "fronts_on_top" and not step.is_first:
            return max(0.0, rise - self.slab_thickness_top)
        return rise

    def plan(self, steps: List[StepDimension]) -> SlabPlan:
        pool = WastePool()
        tally = CutTally()
        surfaces = []
        mitre_cuts = 0
        butt = self.options.corner_joint == "butt"

        previous_target = 0.0
        for step in steps:
            depth = self.top_depth(step)
            top_a_width = step.arm_a_outer
            if butt:
                top_b_width = step.arm_b_outer - depth - self.gap
            else:
                top_b_width = step.arm_b_outer
                if not step.is_platform:
                    tally.add_cut(LENGTH_CUT, depth, MITRE_CUTS_PER_STEP)
                    mitre_cuts += MITRE_CUTS_PER_STEP

            front_h = self.front_height(step, previous_target)
            front_a_width = step.arm_a_outer - self.overhang_front
            front_b_width = (step.arm_b_outer - self.overhang_front
                             - self.slab_thickness_front - self.gap)

            top_a = (self.reuse_whole_surface(pool, step.index, ARM_A, top_a_width, depth)
                     or self.cover_surface(pool, step.index, ARM_A, TOP, top_a_width, depth))
            front_a = (self.front_from_top_waste(pool, step.index, ARM_A, front_a_width, front_h)
                       or self.cover_surface(pool, step.index, ARM_A, FRONT, front_a_width, front_h))
            top_b = (self.reuse_whole_surface(pool, step.index, ARM_B, top_b_width, depth, butt)
                     or self.cover_surface(pool, step.index, ARM_B, TOP, top_b_width, depth, butt))
            front_b = (self.front_from_top_waste(pool, step.index, ARM_B, front_b_width, front_h)
                       or self.cover_surface(pool, step.index, ARM_B, FRONT, front_b_width, front_h))
            top_b.multiplier = 2
            front_b.multiplier = 2

            for surface_plan in (top_a, front_a, top_b, front_b):
                tally.record(surface_plan)
                surfaces.append(surface_plan)
            previous_target = step.target_height

        plan = SlabPlan(
            surfaces=surfaces,
            tally=tally,
            remaining_waste=list(pool),
            adhesive_thickness=self.options.adhesive_thickness,
            mitre_cuts=mitre_cuts,
        )
        logger.info(
            "Slab plan (%s %s, %s): %d new slabs, %d from waste, %d cuts, %d offcuts left",
            self.options.slab_size, self.options.placement, self.options.cut_policy,
            plan.new_slabs, plan.slabs_from_waste, plan.total_cuts, len(plan.remaining_waste),
        )
        return plan
