from __future__ import annotations

from typing import Dict, List, Optional

from pcf.factors import find_factor
from pcf.model import downstream_legs, id_key, to_number
from pcf.reference import find_transport_factor

# Transported weight must reach at least 99.9% of the declared material weight.
TRANSPORT_WEIGHT_TOLERANCE = 0.999


def validate_transport_coverage(
    product: Optional[Dict[str, object]],
    tolerance: float = TRANSPORT_WEIGHT_TOLERANCE,
) -> Dict[object, Dict[str, object]]:
    """Reconcile each material's declared weight against the upstream legs that carry it."""
    if not product:
        return {}

    legs = product.get("upstream_transport") or []
    status: Dict[object, Dict[str, object]] = {}

    for material in product.get("materials") or []:
        material_key = id_key(material.get("id"))
        related = [leg for leg in legs if material_key and id_key(leg.get("material_id")) == material_key]
        original_weight = to_number(material.get("weight"))
        total_weight = sum((to_number(leg.get("weight")) for leg in related), 0.0)

        status[material.get("id")] = {
            "name": material.get("name", ""),
            "original_weight": original_weight,
            "total_transport_weight": total_weight,
            "is_valid": total_weight >= original_weight * tolerance,
            "is_missing": not related,
        }

    return status


def lookup_warnings(
    product: Optional[Dict[str, object]],
    material_factors: Optional[List[Dict[str, object]]],
    transport_factors: Optional[List[Dict[str, object]]] = None,
) -> List[str]:
    """List reference lookups that silently default to a zero factor."""
    if not product:
        return []

    warnings: List[str] = []
    for material in product.get("materials") or []:
        if not material.get("use_db"):
            continue
        factor_id = material.get("factor_id")
        if find_factor(material_factors, factor_id) is None:
            label = material.get("name") or material.get("id")
            warnings.append(f"Material '{label}' references unknown factor '{factor_id}'; counted as 0.")

    legs = [("Upstream", leg) for leg in product.get("upstream_transport") or []]
    legs += [("Downstream", leg) for leg in downstream_legs(product)]
    for stage, leg in legs:
        vehicle_id = leg.get("vehicle_id")
        if find_transport_factor(vehicle_id, transport_factors) is None:
            warnings.append(f"{stage} leg uses unknown vehicle '{vehicle_id}'; counted as 0.")

    return warnings
