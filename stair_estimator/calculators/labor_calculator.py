"""
Deterministic labor and transport task breakdown for a stair build.

Every hour is a quantity times an externally supplied rate. Rates come
from the task-rate table ({name, unit, estimated_hours}) and are matched
by exact task name, case-insensitive. Tasks with no rate are skipped.

Input: quantities dict (blocks, mortar, cuts, slab sizes, slabs, adhesive)
Output: list of TaskBreakdownEntry dicts {task, hours, amount, unit}
"""

import logging
import math
import re
from typing import Dict, List, Optional

from ..config import settings
from .materials import MORTAR_BATCH_KG
from .transport import hand_carry_time, slab_transport_hours, transport_time

logger = logging.getLogger(__name__)

BUILDING_TASKS = {
    "blocks4": "building steps with 4-inch blocks",
    "blocks7": "building steps with 7-inch blocks",
    "bricks": "building steps with bricks",
}

MIXING_TASK = "mixing mortar"
INSTALLATION_PREFIX = "tile installation"
CUTTING_TASK = "cutting %dcm %s slab"

_DIMENSIONS_RE = re.compile(r"(\d+)\s*x\s*(\d+)", re.IGNORECASE)


def _make_task(task, hours, amount, unit):
    # type: (str, float, float, str) -> Dict
    return {
        "task": task,
        "hours": round(hours, 3),
        "amount": round(amount, 2) if isinstance(amount, float) else amount,
        "unit": unit,
    }


def find_rate(task_rates, name):
    # type: (List[Dict], str) -> Optional[Dict]
    """Exact, case-insensitive name match."""
    wanted = name.strip().lower()
    for rate in task_rates or []:
        if str(rate.get("name", "")).strip().lower() == wanted:
            return rate
    return None


def find_installation_rate(task_rates, width, length):
    # type: (List[Dict], float, float) -> Optional[Dict]
    """
    Installation task for a slab size: the 'tile installation ...' task whose
    declared 'W x L' is nearest (Euclidean). If no such task declares a size,
    the first one is used.
    """
    candidates = [
        rate for rate in task_rates or []
        if str(rate.get("name", "")).lower().startswith(INSTALLATION_PREFIX)
    ]
    if not candidates:
        return None

    best = None
    best_distance = None
    for rate in candidates:
        match = _DIMENSIONS_RE.search(rate["name"])
        if not match:
            continue
        distance = math.hypot(int(match.group(1)) - width, int(match.group(2)) - length)
        if best_distance is None or distance < best_distance:
            best, best_distance = rate, distance
    return best if best is not None else candidates[0]


def _building_tasks(blocks, task_rates):
    tasks = []
    for block in blocks:
        name = BUILDING_TASKS.get(block["material_id"])
        rate = find_rate(task_rates, name) if name else None
        if rate is None:
            continue
        hours = block["amount"] * (rate.get("estimated_hours") or 0.0)
        if hours > 0:
            tasks.append(_make_task(rate["name"], hours, block["amount"],
                                    rate.get("unit") or block.get("unit", "pieces")))
    return tasks


def _cutting_tasks(length_cuts, width_cuts, slab_type, task_rates):
    counts = {}
    for histogram in (length_cuts or {}, width_cuts or {}):
        for dimension, count in histogram.items():
            counts[dimension] = counts.get(dimension, 0) + count

    tasks = []
    for dimension in sorted(counts):
        rate = find_rate(task_rates, CUTTING_TASK % (dimension, slab_type))
        if rate is None:
            logger.debug("No cutting rate for %dcm %s slab", dimension, slab_type)
            continue
        count = counts[dimension]
        tasks.append(_make_task(rate["name"], (rate.get("estimated_hours") or 0.0) * count,
                                count, rate.get("unit") or "piece"))
    return tasks


def _installation_tasks(slab_sizes, task_rates):
    groups = {}
    for key, count in (slab_sizes or {}).items():
        parts = key.split("x")
        if len(parts) != 2:
            continue
        rate = find_installation_rate(task_rates, float(parts[0]), float(parts[1]))
        if rate is None:
            continue
        group = groups.setdefault(rate["name"], {"rate": rate, "count": 0})
        group["count"] += count

    return [
        _make_task(name, group["count"] * (group["rate"].get("estimated_hours") or 0.0),
                   group["count"], group["rate"].get("unit") or "piece")
        for name, group in groups.items()
    ]


def _mixing_task(mortar_kg, task_rates):
    rate = find_rate(task_rates, MIXING_TASK)
    if rate is None or mortar_kg <= 0:
        return []
    batches = math.ceil(mortar_kg / MORTAR_BATCH_KG)
    return [_make_task(rate["name"], batches * (rate.get("estimated_hours") or 0.0), batches, "batch")]


def _transport_tasks(quantities, transport):
    carrier = transport.get("carrier")
    distance = transport.get("distance_m") or settings.DEFAULT_TRANSPORT_DISTANCE_M
    tasks = []

    if carrier:
        size = carrier.get("size_tonnes") or settings.DEFAULT_CARRIER_SIZE_TONNES
        speed = carrier.get("speed_m_per_hour")

        for block in quantities.get("blocks", []):
            kind = "bricks" if block["material_id"] == "bricks" else "blocks"
            result = transport_time(block["amount"], kind, size, distance, speed)
            if result["hours"] > 0:
                tasks.append(_make_task("transport %s" % block["name"].lower(),
                                        result["hours"], block["amount"], block.get("unit", "pieces")))

        slab_hours = slab_transport_hours(quantities.get("new_slabs", 0))
        if slab_hours > 0:
            tasks.append(_make_task("transport slabs", slab_hours,
                                    quantities["new_slabs"], "pieces"))

        bags = quantities.get("adhesive_bags", 0)
        result = transport_time(bags, "cement", size, distance, speed)
        if result["hours"] > 0:
            tasks.append(_make_task("transport tile adhesive", result["hours"], bags, "20kg bags"))

    for item in quantities.get("hand_carried", []):
        result = hand_carry_time(item["amount"], distance, item.get("per_trip", 1))
        if result["hours"] > 0:
            tasks.append(_make_task("transport %s" % item["name"].lower(), result["hours"],
                                    item["amount"], item.get("unit", "pieces")))
    return tasks


def calculate_task_breakdown(quantities, task_rates, transport=None):
    # type: (Dict, List[Dict], Optional[Dict]) -> List[Dict]
    """
    Labor and transport line items for one stair calculation.

    Args:
        quantities: {
            "blocks": [{"material_id", "name", "amount", "unit"}],
            "mortar_kg": float,
            "slab_type": str,               # e.g. "porcelain"
            "length_cuts": {bucket_cm: count},
            "width_cuts": {bucket_cm: count},
            "slab_sizes": {"WxD": count},
            "new_slabs": int,               # slabs carried to site
            "adhesive_bags": int,
            "hand_carried": [{"name", "amount", "unit", "per_trip"}],
        }
        task_rates: [{"name", "unit", "estimated_hours"}]
        transport: None to skip transport, else
                   {"carrier": {"name", "size_tonnes", "speed_m_per_hour"} or None,
                    "distance_m": float}

    Returns:
        List of {task, hours, amount, unit} in a fixed order: building,
        cutting, installation, mixing, transport.
    """
    tasks = []
    tasks.extend(_building_tasks(quantities.get("blocks", []), task_rates))
    tasks.extend(_cutting_tasks(quantities.get("length_cuts"), quantities.get("width_cuts"),
                                quantities.get("slab_type", ""), task_rates))
    tasks.extend(_installation_tasks(quantities.get("slab_sizes"), task_rates))
    tasks.extend(_mixing_task(quantities.get("mortar_kg", 0.0), task_rates))
    if transport is not None:
        tasks.extend(_transport_tasks(quantities, transport))

    logger.info(
        "Task breakdown: %d tasks, %.2f total hrs (%s)",
        len(tasks), total_hours(tasks),
        "with transport" if transport is not None else "no transport",
    )
    return tasks


def total_hours(tasks):
    # type: (List[Dict]) -> float
    return round(sum(task["hours"] for task in tasks), 3)
