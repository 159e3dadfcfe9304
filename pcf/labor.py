from __future__ import annotations

from typing import Dict, Optional

from pcf.fuel import compute_fuel_emission
from pcf.model import to_number


def hours_ratio(contract_hours: object, total_company_hours: object) -> float:
    """Contract share of company hours; 0 when company hours are not positive."""
    total = to_number(total_company_hours)
    if total <= 0:
        return 0.0
    return to_number(contract_hours) / total


def compute_labor_allocation(inputs: Optional[Dict[str, object]], electricity_factor: float) -> Dict[str, object]:
    """Allocate company-wide emissions to a contract by its share of hours worked.

    Mode ``A`` takes the company total as entered. Any other mode, or none, builds the total
    from electricity, gasoline and diesel activity data; ``details`` keeps those
    components (kgCO2e) for reporting, with stationary and mobile diesel combined.
    """
    inputs = inputs or {}
    ratio = hours_ratio(inputs.get("contract_hours"), inputs.get("total_company_hours"))
    details = {"elec": 0.0, "gas": 0.0, "die": 0.0}

    if inputs.get("mode") == "A":
        total_company_emissions = to_number(inputs.get("total_emissions_a"))
    else:
        details["elec"] = to_number(inputs.get("elec_usage")) * to_number(electricity_factor)
        details["gas"] = compute_fuel_emission(inputs.get("gasoline_usage"), "gasoline")
        details["die"] = compute_fuel_emission(inputs.get("diesel_usage"), "diesel") + compute_fuel_emission(
            inputs.get("diesel_mobile_usage"), "diesel_mobile"
        )
        total_company_emissions = details["elec"] + details["gas"] + details["die"]

    return {
        "ratio": ratio,
        "total_company_emissions": total_company_emissions,
        "final_result": total_company_emissions * ratio,
        "details": details,
    }
