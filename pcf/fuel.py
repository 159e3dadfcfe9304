from __future__ import annotations

from typing import Dict

from pcf.model import to_number
from pcf.reference import CONVERSION_FACTOR, FUEL_DATA, GWP


def _fuel_profile(fuel_type: str) -> Dict[str, object]:
    profile = FUEL_DATA.get(fuel_type)
    if profile is None:
        raise ValueError(f"Unknown fuel type '{fuel_type}'. Expected one of: {', '.join(sorted(FUEL_DATA))}.")
    return profile


def fuel_emission_by_gas(amount_liters: object, fuel_type: str) -> Dict[str, float]:
    """Split fuel combustion emissions (kgCO2e) into CO2, CH4 and N2O contributions."""
    profile = _fuel_profile(fuel_type)
    amount = to_number(amount_liters)
    if amount <= 0:
        return {"CO2": 0.0, "CH4": 0.0, "N2O": 0.0, "total": 0.0}

    energy_tj = amount * profile["kcal"] * CONVERSION_FACTOR
    factors = profile["ef"]

    co2 = energy_tj * factors["CO2"] * GWP["CO2"]
    ch4 = energy_tj * factors["CH4"] * GWP["CH4"]
    n2o = energy_tj * factors["N2O"] * GWP["N2O"]

    return {"CO2": co2, "CH4": ch4, "N2O": n2o, "total": co2 + ch4 + n2o}


def compute_fuel_emission(amount_liters: object, fuel_type: str) -> float:
    """Convert litres of fuel burned into kgCO2e; no activity yields 0."""
    return fuel_emission_by_gas(amount_liters, fuel_type)["total"]
