from __future__ import annotations

import pytest

from pcf.reference import INITIAL_MATERIAL_DB


@pytest.fixture
def material_db() -> list:
    return [dict(item) for item in INITIAL_MATERIAL_DB]


@pytest.fixture
def reference_product() -> dict:
    return {
        "id": 1,
        "name": "Router",
        "year": 2024,
        "has_full_data": False,
        "total_override": 0,
        "materials": [
            {"id": 11, "name": "Housing", "weight": 10, "factor_id": "m1", "custom_factor": 0, "use_db": True},
        ],
        "upstream_transport": [
            {"id": 21, "material_id": 11, "weight": 10, "distance": 500, "vehicle_id": "t1"},
        ],
        "manufacturing": {"mode": "perUnit", "electricity_usage": 50, "total_output": 1000},
        "downstream_transport": [{"weight": 10, "distance": 200, "vehicle_id": "t1"}],
    }
