from __future__ import annotations

import re
from datetime import datetime
from io import BytesIO, StringIO
from typing import Dict, List, Optional

import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from pcf.factors import find_factor
from pcf.labor import compute_labor_allocation
from pcf.model import downstream_legs, id_key, to_number
from pcf.product import (
    STAGE_KEYS,
    compute_product_total,
    effective_material_factor,
    is_overridden,
    manufacturing_usage_per_unit,
    material_emission,
    resolve_manufacturing_factor,
    transport_leg_emission,
)
from pcf.reference import MANUFACTURING_ELECTRICITY_FACTOR, find_transport_factor

DISPLAY_PLACES = 4
BREAKDOWN_COLUMNS = [
    "product",
    "stage",
    "item",
    "weight_kg",
    "distance_km",
    "factor",
    "emission_unit",
    "declared_unit",
    "emission_kgco2e",
]
LABOR_COLUMNS = ["item", "activity", "unit", "emission_kgco2e"]
SUMMARY_COLUMNS = ["category", "name", *STAGE_KEYS, "total"]


def round_display(value: object, places: int = DISPLAY_PLACES) -> float:
    """Round a full-precision result for display; never feed the result back into a calculation."""
    return round(to_number(value), places)


def _breakdown_row(product_name: str, stage: str, item: str, **values) -> Dict[str, object]:
    row = {column: None for column in BREAKDOWN_COLUMNS}
    row.update({"product": product_name, "stage": stage, "item": item})
    row.update(values)
    for column in ("factor", "emission_kgco2e"):
        if row[column] is not None:
            row[column] = round_display(row[column])
    return row


def _leg_row(
    product_name: str,
    stage: str,
    label: str,
    leg: Dict[str, object],
    transport_factors: Optional[List[Dict[str, object]]],
) -> Dict[str, object]:
    vehicle = find_transport_factor(leg.get("vehicle_id"), transport_factors)
    vehicle_name = vehicle.get("name") if vehicle else "unknown vehicle"
    return _breakdown_row(
        product_name,
        stage,
        f"{label} ({vehicle_name})",
        weight_kg=to_number(leg.get("weight")),
        distance_km=to_number(leg.get("distance")),
        factor=to_number(vehicle.get("factor")) if vehicle else 0.0,
        emission_unit="kgCO2e",
        declared_unit="t*km",
        emission_kgco2e=transport_leg_emission(leg, transport_factors),
    )


def _product_rows(
    product: Dict[str, object],
    material_factors: Optional[List[Dict[str, object]]],
    electricity_factor: float,
    manufacturing_factor: Optional[float],
    transport_factors: Optional[List[Dict[str, object]]],
) -> List[Dict[str, object]]:
    name = str(product.get("name") or "(unnamed)")
    calc = compute_product_total(
        product,
        material_factors,
        electricity_factor,
        manufacturing_factor=manufacturing_factor,
        transport_factors=transport_factors,
    )
    rows = [_breakdown_row(name, "Subtotal", name, emission_kgco2e=calc["total"])]

    if is_overridden(product):
        rows.append(_breakdown_row(name, "Declared", "Declared product footprint", emission_kgco2e=calc["total"]))
        return rows

    materials = product.get("materials") or []
    for item in materials:
        entry = find_factor(material_factors, item.get("factor_id")) if item.get("use_db") else None
        custom_unit = item.get("custom_unit")
        rows.append(
            _breakdown_row(
                name,
                "A",
                str(item.get("name") or "(unnamed)"),
                weight_kg=to_number(item.get("weight")),
                factor=effective_material_factor(item, material_factors),
                emission_unit=entry.get("unit1") if entry else (custom_unit or "kgCO2e"),
                declared_unit=entry.get("unit2") if entry else (custom_unit or "kg"),
                emission_kgco2e=material_emission(item, material_factors),
            )
        )

    names_by_id = {id_key(item.get("id")): str(item.get("name") or "(unnamed)") for item in materials}
    for leg in product.get("upstream_transport") or []:
        material_name = names_by_id.get(id_key(leg.get("material_id")), "(unknown material)")
        rows.append(_leg_row(name, "B", f"{material_name} inbound", leg, transport_factors))

    manufacturing = product.get("manufacturing") or {}
    usage = manufacturing_usage_per_unit(manufacturing)
    rows.append(
        _breakdown_row(
            name,
            "C",
            f"{name} production electricity ({round_display(usage)} kWh/unit)",
            factor=resolve_manufacturing_factor(manufacturing, electricity_factor, manufacturing_factor),
            emission_unit="kgCO2e",
            declared_unit="kWh",
            emission_kgco2e=calc["C"],
        )
    )

    for leg in downstream_legs(product):
        rows.append(_leg_row(name, "D", f"{name} delivery", leg, transport_factors))

    return rows


def _labor_table(labor_inputs: Optional[Dict[str, object]], labor: Dict[str, object]) -> pd.DataFrame:
    inputs = labor_inputs or {}
    details = labor["details"]

    if inputs.get("mode") == "A":
        rows = [
            ["Company total (direct entry)", to_number(inputs.get("total_emissions_a")), "kgCO2e", labor["total_company_emissions"]],
        ]
    else:
        diesel = to_number(inputs.get("diesel_usage")) + to_number(inputs.get("diesel_mobile_usage"))
        rows = [
            ["Electricity", to_number(inputs.get("elec_usage")), "kWh", details["elec"]],
            ["Gasoline", to_number(inputs.get("gasoline_usage")), "L", details["gas"]],
            ["Diesel", diesel, "L", details["die"]],
            ["Company total", None, "kgCO2e", labor["total_company_emissions"]],
        ]

    rows.append(["Hours ratio (%)", round_display(labor["ratio"] * 100), "%", None])
    rows.append(["Allocated to contract", None, "kgCO2e", labor["final_result"]])

    table = pd.DataFrame(rows, columns=LABOR_COLUMNS)
    table["emission_kgco2e"] = table["emission_kgco2e"].map(lambda v: None if v is None or pd.isna(v) else round_display(v))
    return table


def build_contract_report(
    contract: Dict[str, object],
    labor_inputs: Optional[Dict[str, object]],
    material_factors: Optional[List[Dict[str, object]]],
    electricity_factor: float,
    year: Optional[int] = None,
    manufacturing_factor: Optional[float] = MANUFACTURING_ELECTRICITY_FACTOR,
    transport_factors: Optional[List[Dict[str, object]]] = None,
    generated_at: Optional[datetime] = None,
) -> Dict[str, pd.DataFrame]:
    """Build the contract footprint report tables (product lines, labor share, summary)."""
    generated_at = generated_at or datetime.now()
    products = contract.get("products") or []

    info_df = pd.DataFrame(
        [
            {"field": "Generated At", "value": generated_at.isoformat(timespec="seconds")},
            {"field": "Contract ID", "value": str(contract.get("id") or "Unknown_ID")},
            {"field": "Contract Name", "value": str(contract.get("name") or "(unnamed contract)")},
            {"field": "Assessment Year", "value": "" if year is None else str(year)},
            {"field": "Electricity Factor", "value": f"{round_display(electricity_factor):.4f} kgCO2e/kWh"},
        ]
    )

    breakdown_rows: List[Dict[str, object]] = []
    summary_rows: List[Dict[str, object]] = []
    products_total = 0.0

    for product in products:
        breakdown_rows.extend(
            _product_rows(product, material_factors, electricity_factor, manufacturing_factor, transport_factors)
        )
        calc = compute_product_total(
            product,
            material_factors,
            electricity_factor,
            manufacturing_factor=manufacturing_factor,
            transport_factors=transport_factors,
        )
        products_total += calc["total"]
        summary_rows.append(
            {
                "category": "Product",
                "name": product.get("name", ""),
                **{key: round_display(calc[key]) for key in (*STAGE_KEYS, "total")},
            }
        )

    labor = compute_labor_allocation(labor_inputs, electricity_factor)
    summary_rows.append(
        {"category": "Labor", "name": "Installation and labor share", "total": round_display(labor["final_result"])}
    )
    summary_rows.append({"category": "Grand Total", "name": "", "total": round_display(products_total + labor["final_result"])})

    return {
        "Contract Info": info_df,
        "Product Breakdown": pd.DataFrame(breakdown_rows, columns=BREAKDOWN_COLUMNS),
        "Labor Allocation": _labor_table(labor_inputs, labor),
        "Summary": pd.DataFrame(summary_rows, columns=SUMMARY_COLUMNS),
    }


def export_csv(tables: Dict[str, pd.DataFrame]) -> bytes:
    """Write report tables as one CSV document, UTF-8 with BOM so spreadsheets detect the encoding."""
    buffer = StringIO()
    for name, table in tables.items():
        buffer.write(f"[{name}]\n")
        if table is not None and not table.empty:
            table.to_csv(buffer, index=False, lineterminator="\n")
        buffer.write("\n")
    return buffer.getvalue().encode("utf-8-sig")


# Excel number formats by report column; anything unlisted keeps the default.
COLUMN_FORMATS = {
    "weight_kg": "#,##0.###",
    "distance_km": "#,##0.###",
    "activity": "#,##0.###",
    "factor": "0.0000",
    "emission_kgco2e": "0.0000",
    **{key: "0.0000" for key in (*STAGE_KEYS, "total")},
}
MAX_COLUMN_WIDTH = 60
SHEET_NAME_LIMIT = 31
_INVALID_SHEET_CHARS = re.compile(r"[\[\]\*\?/\\:]")


def _sheet_title(name: str, taken: set) -> str:
    """Excel-safe, unique sheet title for a report section."""
    base = _INVALID_SHEET_CHARS.sub(" ", str(name)).strip()[:SHEET_NAME_LIMIT] or "Report"
    title, suffix = base, 2
    while title.lower() in taken:
        tag = f" ({suffix})"
        title = base[: SHEET_NAME_LIMIT - len(tag)] + tag
        suffix += 1
    taken.add(title.lower())
    return title


def _format_report_sheet(worksheet, table: pd.DataFrame) -> None:
    worksheet.freeze_panes = "A2"

    for position, column in enumerate(table.columns, start=1):
        letter = get_column_letter(position)
        worksheet[f"{letter}1"].font = Font(bold=True)

        number_format = COLUMN_FORMATS.get(str(column))
        cells = worksheet[letter][1:]
        if number_format:
            for cell in cells:
                if isinstance(cell.value, (int, float)):
                    cell.number_format = number_format

        longest = max([len(str(column))] + [len(str(cell.value)) for cell in cells if cell.value is not None])
        worksheet.column_dimensions[letter].width = min(MAX_COLUMN_WIDTH, longest + 2)


def export_excel(tables: Dict[str, pd.DataFrame]) -> BytesIO:
    """Export report tables to an Excel workbook, one formatted sheet per table."""
    if not tables:
        raise ValueError("No report tables to export.")

    buffer = BytesIO()
    taken: set = set()

    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for name, table in tables.items():
            if table is None:
                continue
            sheet_name = _sheet_title(name, taken)
            table.to_excel(writer, sheet_name=sheet_name, index=False)
            _format_report_sheet(writer.sheets[sheet_name], table)

    buffer.seek(0)
    return buffer
