"""
U-shaped stair calculator: block courses, fill, slabs, labor and transport.

One calculate() call is one pass: geometry → course fit → bond pattern →
fill → slab plan (with its own waste pool) → task breakdown. Nothing is
kept between calls.
"""

import logging

from ..config import settings
from .base import BaseCalculator
from .bond_pattern import count_blocks
from .concrete_fill import fill_volume_m3, mortar_mass_kg
from .course_fitting import fit_courses
from .errors import StairInputError
from .labor_calculator import calculate_task_breakdown, total_hours
from .materials import (
    BRICK_ORIENTATIONS,
    CORNER_JOINTS,
    CUT_POLICIES,
    DEFAULT_ADHESIVE_THICKNESS,
    DEFAULT_GAP_MM,
    DEFAULT_MATERIALS,
    SLAB_PLACEMENTS,
    SLAB_SIZES,
    STEP_CONFIGS,
    get_block_material,
)
from .slab_cutting import SlabCuttingOptimizer, SlabOptions
from .step_geometry import StairMeasurements, derive_step_geometry

logger = logging.getLogger(__name__)


class UShapeStairCalculator(BaseCalculator):

    JOB_TYPE = "u_shape_stair"

    def calculate(self, fields: dict, task_rates: list = None, carrier: dict = None) -> dict:
        assumptions = [
            "Arm B dimensions apply to both side arms.",
            "Blocks are laid on the outer line; fill uses inner arm lengths.",
        ]

        # --- Parse inputs (all validation before any geometry) ---
        measurements = StairMeasurements(
            total_height=self.require_number(fields, "total_height"),
            step_height=self.require_number(fields, "step_height"),
            tread=self.require_number(fields, "tread"),
            arm_a_length=self.require_number(fields, "arm_a_length"),
            arm_b_length=self.require_number(fields, "arm_b_length"),
            slab_thickness_top=self.require_number(fields, "slab_thickness_top", allow_zero=True),
            slab_thickness_front=self.require_number(fields, "slab_thickness_front", allow_zero=True),
            overhang_front=self.require_number(fields, "overhang_front", allow_zero=True),
        )
        material_ids = self._parse_materials(fields.get("materials"))
        brick_orientation = self.parse_choice(
            fields.get("brick_orientation"), BRICK_ORIENTATIONS, "flat", "brick_orientation")
        options = SlabOptions(
            slab_size=self.parse_choice(fields.get("slab_size"), SLAB_SIZES, "90x60", "slab_size"),
            placement=self.parse_choice(fields.get("placement"), SLAB_PLACEMENTS, "long_way", "placement"),
            cut_policy=self.parse_choice(fields.get("cut_policy"), CUT_POLICIES, "one_cut", "cut_policy"),
            gap_mm=self.parse_number(fields.get("gap_mm"), DEFAULT_GAP_MM),
            adhesive_thickness=self.parse_number(fields.get("adhesive_thickness"),
                                                 DEFAULT_ADHESIVE_THICKNESS) or DEFAULT_ADHESIVE_THICKNESS,
            corner_joint=self.parse_choice(fields.get("corner_joint"), CORNER_JOINTS, "butt", "corner_joint"),
            step_config=self.parse_choice(fields.get("step_config"), STEP_CONFIGS,
                                          "fronts_on_top", "step_config"),
        )
        slab_type = str(fields.get("slab_type") or settings.DEFAULT_SLAB_TYPE).strip()
        calculate_transport = self.parse_bool(fields.get("calculate_transport"), default=carrier is not None)
        distance_m = self.parse_number(fields.get("transport_distance_m"),
                                       settings.DEFAULT_TRANSPORT_DISTANCE_M) \
            or settings.DEFAULT_TRANSPORT_DISTANCE_M
        hand_carried = self._parse_hand_carried(fields.get("hand_carried"))

        # --- Geometry and courses ---
        geometry = derive_step_geometry(measurements)
        if geometry.adjustment_note:
            assumptions.append(geometry.adjustment_note)

        fits = fit_courses(geometry, material_ids, brick_orientation)
        steps = list(geometry.steps)
        if fits and fits[0].buried_depth:
            steps = [step.with_buried_depth(fit.buried_depth) for step, fit in zip(steps, fits)]
            assumptions.append("Block courses buried %d cm below the base to fit the step height."
                               % fits[0].buried_depth)
        if any(fit.needs_cutting for fit in fits):
            assumptions.append("Some courses need cut blocks; see course details.")

        block_totals = count_blocks(steps, fits, brick_orientation)
        materials = []
        blocks = []
        total_blocks = 0
        for material_id in material_ids:
            data = block_totals.get(material_id)
            if not data or data["total"] <= 0:
                continue
            name = get_block_material(material_id)["name"]
            materials.append(self.make_material(name, data["total"], "pieces", data["course_details"]))
            blocks.append({"material_id": material_id, "name": name,
                           "amount": data["total"], "unit": "pieces"})
            total_blocks += data["total"]

        primary = get_block_material(material_ids[0])
        fill_m3 = fill_volume_m3(steps, measurements.tread, primary["height"])
        mortar_kg = mortar_mass_kg(total_blocks, fill_m3)
        materials.append(self.make_material("Mortar", mortar_kg, "kg"))

        # --- Slabs ---
        optimizer = SlabCuttingOptimizer(
            options,
            tread=measurements.tread,
            slab_thickness_top=measurements.slab_thickness_top,
            slab_thickness_front=measurements.slab_thickness_front,
            overhang_front=measurements.overhang_front,
        )
        slab_plan = optimizer.plan(steps)
        if slab_plan.adhesive_bags > 0:
            materials.append(self.make_material("Tile Adhesive", slab_plan.adhesive_bags, "20kg bags"))

        # --- Labor and transport ---
        quantities = {
            "blocks": blocks,
            "mortar_kg": mortar_kg,
            "slab_type": slab_type,
            "length_cuts": slab_plan.tally.length_cuts,
            "width_cuts": slab_plan.tally.width_cuts,
            "slab_sizes": slab_plan.tally.slab_sizes,
            "new_slabs": slab_plan.new_slabs,
            "adhesive_bags": slab_plan.adhesive_bags,
            "hand_carried": hand_carried,
        }
        transport = None
        if calculate_transport:
            transport = {"carrier": carrier, "distance_m": distance_m}
        tasks = calculate_task_breakdown(quantities, task_rates or [], transport)

        summary = {
            "step_count": geometry.step_count,
            "actual_step_height": round(geometry.actual_step_height, 4),
            "adjustment_note": geometry.adjustment_note,
            "buried_depth": fits[0].buried_depth if fits else None,
            "total_blocks": total_blocks,
            "fill_volume_m3": round(fill_m3, 4),
            "mortar_kg": round(mortar_kg, 2),
            "total_slabs": slab_plan.total_slabs,
            "new_slabs": slab_plan.new_slabs,
            "new_top_slabs": slab_plan.new_top_slabs,
            "new_front_slabs": slab_plan.new_front_slabs,
            "slabs_from_waste": slab_plan.slabs_from_waste,
            "total_cuts": slab_plan.total_cuts,
            "total_adhesive_kg": round(slab_plan.total_adhesive_kg, 2),
            "remaining_waste_pieces": len(slab_plan.remaining_waste),
            "total_labor_hours": total_hours(tasks),
        }

        logger.info(
            "U-shape stair: %d steps, %d blocks, %.0f kg mortar, %d new slabs, %d cuts, %.2f hrs",
            geometry.step_count, total_blocks, mortar_kg, slab_plan.new_slabs,
            slab_plan.total_cuts, summary["total_labor_hours"],
        )

        return {
            "job_type": self.JOB_TYPE,
            "materials": materials,
            "task_breakdown": tasks,
            "step_dimensions": [step.as_dict() for step in steps],
            "course_fits": [fit.as_dict() for fit in fits],
            "slab_plan": slab_plan.as_dict(),
            "summary": summary,
            "assumptions": assumptions,
        }

    def _parse_materials(self, value) -> list:
        """List or comma-separated ids, preference order kept. None → default pair."""
        if value is None:
            return list(DEFAULT_MATERIALS)
        if isinstance(value, str):
            value = value.split(",")
        if not isinstance(value, (list, tuple)):
            raise StairInputError("materials must be a list of material ids", field="materials")
        material_ids = []
        for item in value:
            if not isinstance(item, str):
                raise StairInputError("Material ids must be strings, got %r" % (item,), field="materials")
            material_id = item.strip()
            if material_id and material_id not in material_ids:
                get_block_material(material_id)
                material_ids.append(material_id)
        if not material_ids:
            raise StairInputError("Select at least one block material", field="materials")
        return material_ids

    def _parse_hand_carried(self, value) -> list:
        if value is None or value == "":
            return []
        if not isinstance(value, (list, tuple)):
            raise StairInputError("hand_carried must be a list of items", field="hand_carried")
        items = []
        for item in value:
            if not isinstance(item, dict):
                raise StairInputError(
                    "hand_carried items need name and amount, got %r" % (item,),
                    field="hand_carried",
                )
            amount = self.parse_number(item.get("amount"), 0.0)
            if not item.get("name") or amount <= 0:
                continue
            items.append({
                "name": str(item["name"]),
                "amount": amount,
                "unit": item.get("unit") or "pieces",
                "per_trip": max(1, self.parse_int(item.get("per_trip"), 1)),
            })
        return items
