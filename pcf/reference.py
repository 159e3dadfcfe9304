from __future__ import annotations

from typing import Dict, List, Optional

GWP = {"CO2": 1, "CH4": 27, "N2O": 273}

# kcal -> TJ
CONVERSION_FACTOR = 4.1868e-9

FUEL_DATA: Dict[str, Dict[str, object]] = {
    "gasoline": {
        "name": "Gasoline",
        "kcal": 7609,
        "ef": {"CO2": 69300, "CH4": 25, "N2O": 8},
    },
    "diesel": {
        "name": "Diesel (stationary)",
        "kcal": 8642,
        "ef": {"CO2": 74100, "CH4": 3, "N2O": 0.6},
    },
    "diesel_mobile": {
        "name": "Diesel (mobile)",
        "kcal": 8642,
        "ef": {"CO2": 74100, "CH4": 3.9, "N2O": 3.9},
    },
}

TRANSPORT_FACTORS: List[Dict[str, object]] = [
    {"id": "t1", "name": "Heavy truck (diesel)", "factor": 0.131, "unit": "kgCO2e/t-km"},
    {"id": "t2", "name": "Light truck (diesel)", "factor": 0.587, "unit": "kgCO2e/t-km"},
    {"id": "t3", "name": "Light truck (gasoline)", "factor": 0.683, "unit": "kgCO2e/t-km"},
    {"id": "t4", "name": "International sea freight", "factor": 1.98, "unit": "kgCO2e/t-km"},
    {"id": "t5", "name": "International air freight", "factor": 1.16, "unit": "kgCO2e/t-km"},
]

ELECTRICITY_FACTORS: Dict[int, float] = {
    2022: 0.495,
    2023: 0.494,
    2024: 0.474,
}
DEFAULT_ELECTRICITY_FACTOR = 0.495

# Manufacturing electricity is billed at a fixed grid factor unless the caller opts out.
MANUFACTURING_ELECTRICITY_FACTOR = 0.606

INITIAL_MATERIAL_DB: List[Dict[str, object]] = [
    {"id": "m1", "name": "Aluminum alloy", "factor": 6.7, "unit1": "kgCO2e", "unit2": "kg"},
    {"id": "m2", "name": "Stainless steel", "factor": 6.1, "unit1": "kgCO2e", "unit2": "kg"},
    {"id": "m3", "name": "Copper", "factor": 3.8, "unit1": "kgCO2e", "unit2": "kg"},
    {"id": "m4", "name": "ABS resin", "factor": 3.1, "unit1": "kgCO2e", "unit2": "kg"},
    {"id": "m5", "name": "PVC", "factor": 2.5, "unit1": "kgCO2e", "unit2": "kg"},
    {"id": "m6", "name": "Corrugated board", "factor": 0.9, "unit1": "kgCO2e", "unit2": "kg"},
    {"id": "m7", "name": "Printed circuit board (PCB)", "factor": 18.5, "unit1": "kgCO2e", "unit2": "kg"},
]


def electricity_factor_for_year(year: Optional[int]) -> float:
    """Return the grid electricity factor (kgCO2e/kWh) published for a reporting year."""
    try:
        return ELECTRICITY_FACTORS.get(int(year), DEFAULT_ELECTRICITY_FACTOR)
    except (TypeError, ValueError):
        return DEFAULT_ELECTRICITY_FACTOR


def find_transport_factor(
    vehicle_id: object,
    transport_factors: Optional[List[Dict[str, object]]] = None,
) -> Optional[Dict[str, object]]:
    """Look up a vehicle by id in the given table (the built-in table by default)."""
    table = TRANSPORT_FACTORS if transport_factors is None else transport_factors
    for vehicle in table:
        if vehicle.get("id") == vehicle_id:
            return vehicle
    return None
