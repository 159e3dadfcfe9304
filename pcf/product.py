from __future__ import annotations

import logging
from typing import Dict, List, Optional

from pcf.factors import find_factor
from pcf.model import downstream_legs, to_number
from pcf.reference import MANUFACTURING_ELECTRICITY_FACTOR, find_transport_factor

logger = logging.getLogger(__name__)

STAGE_KEYS = ("A", "B", "C", "D")
STAGE_LABELS = {
    "A": "Materials",
    "B": "Upstream Transport",
    "C": "Manufacturing",
    "D": "Downstream Transport",
}


def _empty_result(total: float = 0.0) -> Dict[str, float]:
    return {"A": 0.0, "B": 0.0, "C": 0.0, "D": 0.0, "total": total}


def is_overridden(product: Dict[str, object]) -> bool:
    """True when a declared total replaces the stage calculation."""
    return bool(product.get("has_full_data")) or to_number(product.get("total_override")) > 0


def effective_material_factor(item: Dict[str, object], material_factors: Optional[List[Dict[str, object]]]) -> float:
    """Factor applied to a material: the database entry when ``use_db`` is set, else the custom factor."""
    if not item.get("use_db"):
        return to_number(item.get("custom_factor"))

    entry = find_factor(material_factors, item.get("factor_id"))
    if entry is None:
        logger.debug("Material factor '%s' not found; using 0.", item.get("factor_id"))
        return 0.0
    return to_number(entry.get("factor"))


def material_emission(item: Dict[str, object], material_factors: Optional[List[Dict[str, object]]]) -> float:
    """Stage A contribution of one material (kg x kgCO2e/kg)."""
    return to_number(item.get("weight")) * effective_material_factor(item, material_factors)


def transport_leg_emission(
    leg: Dict[str, object],
    transport_factors: Optional[List[Dict[str, object]]] = None,
) -> float:
    """Emissions of one leg: tonnes carried x km travelled x vehicle factor per tonne-km."""
    vehicle = find_transport_factor(leg.get("vehicle_id"), transport_factors)
    if vehicle is None:
        logger.debug("Vehicle '%s' not found; using 0.", leg.get("vehicle_id"))
        factor = 0.0
    else:
        factor = to_number(vehicle.get("factor"))
    return (to_number(leg.get("weight")) / 1000) * to_number(leg.get("distance")) * factor


def resolve_manufacturing_factor(
    manufacturing: Optional[Dict[str, object]],
    electricity_factor: float,
    manufacturing_factor: Optional[float] = MANUFACTURING_ELECTRICITY_FACTOR,
) -> float:
    """Pick the grid factor for stage C.

    The fixed manufacturing factor wins unless the caller passes ``None``, in which
    case the product's own ``electricity_factor`` is used, then the caller's
    year-based factor.
    """
    if manufacturing_factor is not None:
        return to_number(manufacturing_factor)
    own = to_number((manufacturing or {}).get("electricity_factor"))
    return own if own > 0 else to_number(electricity_factor)


def manufacturing_usage_per_unit(manufacturing: Optional[Dict[str, object]]) -> float:
    """Electricity (kWh) attributed to one unit; 0 when an allocated run has no output."""
    if not manufacturing:
        return 0.0

    usage = to_number(manufacturing.get("electricity_usage"))
    if manufacturing.get("mode", "perUnit") == "perUnit":
        return usage

    total_output = to_number(manufacturing.get("total_output"))
    if total_output <= 0:
        return 0.0
    return usage / total_output


def manufacturing_emission(
    manufacturing: Optional[Dict[str, object]],
    electricity_factor: float,
    manufacturing_factor: Optional[float] = MANUFACTURING_ELECTRICITY_FACTOR,
) -> float:
    if not manufacturing:
        return 0.0

    factor = resolve_manufacturing_factor(manufacturing, electricity_factor, manufacturing_factor)
    usage = to_number(manufacturing.get("electricity_usage"))
    if manufacturing.get("mode", "perUnit") == "perUnit":
        return usage * factor

    total_output = to_number(manufacturing.get("total_output"))
    if total_output <= 0:
        return 0.0
    return (usage * factor) / total_output


def compute_product_total(
    product: Optional[Dict[str, object]],
    material_factors: Optional[List[Dict[str, object]]],
    electricity_factor: float,
    manufacturing_factor: Optional[float] = MANUFACTURING_ELECTRICITY_FACTOR,
    transport_factors: Optional[List[Dict[str, object]]] = None,
) -> Dict[str, float]:
    """Compute stage A-D emissions (kgCO2e) and their total for one product unit."""
    if not product:
        return _empty_result()

    if is_overridden(product):
        return _empty_result(to_number(product.get("total_override")))

    a = sum((material_emission(item, material_factors) for item in product.get("materials") or []), 0.0)
    b = sum(
        (transport_leg_emission(leg, transport_factors) for leg in product.get("upstream_transport") or []),
        0.0,
    )
    c = manufacturing_emission(product.get("manufacturing"), electricity_factor, manufacturing_factor)
    d = sum((transport_leg_emission(leg, transport_factors) for leg in downstream_legs(product)), 0.0)

    return {"A": a, "B": b, "C": c, "D": d, "total": a + b + c + d}
