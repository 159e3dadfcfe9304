from __future__ import annotations

from typing import Dict, Iterable, List, Optional

import pandas as pd

from pcf.labor import compute_labor_allocation
from pcf.product import STAGE_KEYS, compute_product_total

SUMMARY_COLUMNS = ["product_id", "product_name", "A", "B", "C", "D", "total"]


def aggregate_products(
    products: Optional[Iterable[Dict[str, object]]],
    material_factors: Optional[List[Dict[str, object]]],
    electricity_factor: float,
    **calc_options,
) -> Dict[str, object]:
    """Sum stage results across products and tabulate each product's breakdown."""
    totals = {key: 0.0 for key in (*STAGE_KEYS, "total")}
    product_totals: Dict[object, float] = {}
    rows = []

    for product in products or []:
        if not product:
            continue
        calc = compute_product_total(product, material_factors, electricity_factor, **calc_options)
        for key in totals:
            totals[key] += calc[key]
        product_totals[product.get("id")] = calc["total"]
        rows.append({"product_id": product.get("id"), "product_name": product.get("name", ""), **calc})

    summary_df = pd.DataFrame(rows, columns=SUMMARY_COLUMNS)

    return {
        **totals,
        "product_totals": product_totals,
        "summary_df": summary_df,
    }


def aggregate_contract(
    contract: Optional[Dict[str, object]],
    material_factors: Optional[List[Dict[str, object]]],
    electricity_factor: float,
    **calc_options,
) -> Dict[str, object]:
    """Aggregate the products owned by a contract."""
    products = (contract or {}).get("products") or []
    return aggregate_products(products, material_factors, electricity_factor, **calc_options)


def contract_grand_total(
    contract: Optional[Dict[str, object]],
    labor_inputs: Optional[Dict[str, object]],
    material_factors: Optional[List[Dict[str, object]]],
    electricity_factor: float,
    **calc_options,
) -> Dict[str, object]:
    """Combine the contract's product footprint with its allocated labor emissions."""
    aggregate = aggregate_contract(contract, material_factors, electricity_factor, **calc_options)
    labor = compute_labor_allocation(labor_inputs, electricity_factor)

    return {
        "aggregate": aggregate,
        "labor": labor,
        "grand_total": aggregate["total"] + labor["final_result"],
    }
