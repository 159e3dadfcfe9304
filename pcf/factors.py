from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, IO, List, Optional, Union

import pandas as pd

from pcf.reference import INITIAL_MATERIAL_DB

logger = logging.getLogger(__name__)

# Sheet layout: B name, C factor, D emission unit, F declared unit.
NAME_COL = 1
FACTOR_COL = 2
UNIT1_COL = 3
UNIT2_COL = 5


def _cell(row: pd.Series, position: int) -> str:
    if position >= len(row):
        return ""
    value = row.iloc[position]
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def load_material_factors(source: Union[str, Path, IO]) -> List[Dict[str, object]]:
    """Parse a material factor sheet export into MaterialFactor records."""
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Material factor file not found: {path}")
        source = path

    sheet = pd.read_csv(source, header=0, dtype=str, keep_default_na=False, skip_blank_lines=True)
    if sheet.shape[1] <= FACTOR_COL:
        raise ValueError("Material factor file needs at least name and factor columns (B and C).")

    factors: List[Dict[str, object]] = []
    skipped = 0
    for index, (_, row) in enumerate(sheet.iterrows()):
        name = _cell(row, NAME_COL)
        factor = pd.to_numeric(_cell(row, FACTOR_COL), errors="coerce")
        if not name or pd.isna(factor):
            skipped += 1
            continue

        factors.append(
            {
                "id": f"sheet_{index}",
                "name": name,
                "factor": float(factor),
                "unit1": _cell(row, UNIT1_COL) or "kgCO2e",
                "unit2": _cell(row, UNIT2_COL) or "kg",
            }
        )

    if skipped:
        logger.debug("Skipped %d material factor row(s) without a name or numeric factor.", skipped)
    logger.info("Loaded %d material factor(s).", len(factors))
    return factors


def material_factor_table(factors: Optional[List[Dict[str, object]]] = None) -> List[Dict[str, object]]:
    """Return the supplied factor table, or the built-in starter table when it is empty."""
    if factors:
        return list(factors)
    return [dict(item) for item in INITIAL_MATERIAL_DB]


def find_factor(table: Optional[List[Dict[str, object]]], factor_id: object) -> Optional[Dict[str, object]]:
    """Return the material factor record with ``factor_id``, or None."""
    for entry in table or []:
        if entry.get("id") == factor_id:
            return entry
    return None
