from __future__ import annotations

import itertools
import math
from typing import Dict, List, Optional

MANUFACTURING_MODES = ("perUnit", "totalAllocated")
LABOR_MODES = ("A", "B")

_ids = itertools.count(1)


def _next_id() -> int:
    return next(_ids)


def to_number(value: object) -> float:
    """Coerce form values to float; blanks, text, NaN and infinities become 0."""
    if value is None or isinstance(value, bool):
        return float(value or 0)
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(number) or math.isinf(number):
        return 0.0
    return number


def id_key(value: object) -> str:
    """Normalize a record id for matching, so 3, 3.0 and "3" compare equal."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def new_material(
    name: str = "",
    weight: float = 0.0,
    factor_id: str = "",
    custom_factor: float = 0.0,
    use_db: bool = True,
    custom_unit: Optional[str] = None,
) -> Dict[str, object]:
    material: Dict[str, object] = {
        "id": _next_id(),
        "name": name,
        "weight": weight,
        "factor_id": factor_id,
        "custom_factor": custom_factor,
        "use_db": use_db,
    }
    if custom_unit is not None:
        material["custom_unit"] = custom_unit
    return material


def new_transport_leg(
    material_id: object = "",
    weight: float = 0.0,
    distance: float = 0.0,
    vehicle_id: str = "t1",
) -> Dict[str, object]:
    return {
        "id": _next_id(),
        "material_id": material_id,
        "weight": weight,
        "distance": distance,
        "vehicle_id": vehicle_id,
    }


def new_downstream_leg(weight: float = 0.0, distance: float = 0.0, vehicle_id: str = "t1") -> Dict[str, object]:
    return {"weight": weight, "distance": distance, "vehicle_id": vehicle_id}


def new_product(name: str, year: int = 2024) -> Dict[str, object]:
    """Build a product record with the defaults a freshly added product starts from."""
    return {
        "id": _next_id(),
        "name": name,
        "year": year,
        "has_full_data": False,
        "total_override": 0.0,
        "materials": [new_material()],
        "upstream_transport": [],
        "manufacturing": {"mode": "perUnit", "electricity_usage": 0.0, "total_output": 1000.0},
        "downstream_transport": [new_downstream_leg()],
    }


def new_contract(name: str, products: Optional[List[Dict[str, object]]] = None) -> Dict[str, object]:
    return {"id": _next_id(), "name": name, "products": list(products or [])}


def new_labor_inputs(mode: str = "A") -> Dict[str, object]:
    if mode not in LABOR_MODES:
        raise ValueError(f"Unsupported labor mode '{mode}'. Expected one of: {', '.join(LABOR_MODES)}.")

    return {
        "contract_hours": 0.0,
        "total_company_hours": 0.0,
        "mode": mode,
        "total_emissions_a": 0.0,
        "elec_usage": 0.0,
        "gasoline_usage": 0.0,
        "diesel_usage": 0.0,
        "diesel_mobile_usage": 0.0,
    }


def downstream_legs(product: Optional[Dict[str, object]]) -> List[Dict[str, object]]:
    """Return downstream transport as a list, accepting the legacy single-leg form."""
    if not product:
        return []

    downstream = product.get("downstream_transport")
    if downstream is None:
        return []
    if isinstance(downstream, dict):
        return [downstream]
    if isinstance(downstream, (list, tuple)):
        return list(downstream)

    raise ValueError("downstream_transport must be a leg dict or a list of legs.")
