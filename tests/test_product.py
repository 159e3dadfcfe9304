from __future__ import annotations

import copy

import pytest

from pcf.product import compute_product_total, manufacturing_emission, transport_leg_emission


def test_end_to_end_product_total(reference_product, material_db) -> None:
    result = compute_product_total(reference_product, material_db, 0.474)

    assert result["A"] == pytest.approx(67.0)
    assert result["B"] == pytest.approx(0.655)
    assert result["C"] == pytest.approx(30.3)
    assert result["D"] == pytest.approx(0.262)
    assert result["total"] == pytest.approx(98.217)


def test_total_is_sum_of_stages(reference_product, material_db) -> None:
    result = compute_product_total(reference_product, material_db, 0.474)

    assert result["total"] == result["A"] + result["B"] + result["C"] + result["D"]


def test_override_bypasses_stages(reference_product, material_db) -> None:
    product = copy.deepcopy(reference_product)
    product["total_override"] = 42.5

    assert compute_product_total(product, material_db, 0.474) == {"A": 0, "B": 0, "C": 0, "D": 0, "total": 42.5}


def test_full_data_flag_without_override_reports_zero(reference_product, material_db) -> None:
    product = copy.deepcopy(reference_product)
    product["has_full_data"] = True

    assert compute_product_total(product, material_db, 0.474)["total"] == 0


def test_missing_product_yields_zero_result(material_db) -> None:
    assert compute_product_total(None, material_db, 0.474) == {"A": 0, "B": 0, "C": 0, "D": 0, "total": 0}


def test_unknown_material_factor_contributes_zero(reference_product, material_db) -> None:
    product = copy.deepcopy(reference_product)
    product["materials"][0]["factor_id"] = "does-not-exist"

    assert compute_product_total(product, material_db, 0.474)["A"] == 0


def test_custom_factor_used_when_not_db_backed(reference_product, material_db) -> None:
    product = copy.deepcopy(reference_product)
    product["materials"][0].update({"use_db": False, "custom_factor": 2.0, "weight": "3"})

    assert compute_product_total(product, material_db, 0.474)["A"] == pytest.approx(6.0)


def test_tonne_km_formula() -> None:
    leg = {"weight": 2000, "distance": 100, "vehicle_id": "t1"}

    assert transport_leg_emission(leg) == pytest.approx(26.2)
    assert transport_leg_emission({"weight": 2000, "distance": 100, "vehicle_id": "zz"}) == 0


def test_unmatched_legs_still_count_toward_stage_b(reference_product, material_db) -> None:
    product = copy.deepcopy(reference_product)
    product["upstream_transport"].append({"id": 22, "material_id": "", "weight": 2000, "distance": 100, "vehicle_id": "t1"})

    assert compute_product_total(product, material_db, 0.474)["B"] == pytest.approx(0.655 + 26.2)


def test_allocated_mode_with_single_unit_matches_per_unit() -> None:
    per_unit = manufacturing_emission({"mode": "perUnit", "electricity_usage": 80}, 0.474)
    allocated = manufacturing_emission({"mode": "totalAllocated", "electricity_usage": 80, "total_output": 1}, 0.474)

    assert per_unit == allocated


def test_allocated_mode_guards_zero_output() -> None:
    config = {"mode": "totalAllocated", "electricity_usage": 80, "total_output": 0}

    assert manufacturing_emission(config, 0.474) == 0


def test_allocated_mode_divides_by_output() -> None:
    config = {"mode": "totalAllocated", "electricity_usage": 1000, "total_output": 500}

    assert manufacturing_emission(config, 0.474) == pytest.approx(1000 * 0.606 / 500)


def test_manufacturing_factor_can_follow_year_factor() -> None:
    config = {"mode": "perUnit", "electricity_usage": 100}

    assert manufacturing_emission(config, 0.474) == pytest.approx(60.6)
    assert manufacturing_emission(config, 0.474, manufacturing_factor=None) == pytest.approx(47.4)
    assert manufacturing_emission(
        {**config, "electricity_factor": 0.5}, 0.474, manufacturing_factor=None
    ) == pytest.approx(50.0)


def test_single_downstream_leg_matches_list_form(reference_product, material_db) -> None:
    product = copy.deepcopy(reference_product)
    product["downstream_transport"] = product["downstream_transport"][0]

    assert compute_product_total(product, material_db, 0.474) == compute_product_total(
        reference_product, material_db, 0.474
    )


def test_repeated_calls_are_identical_and_do_not_mutate(reference_product, material_db) -> None:
    snapshot = copy.deepcopy(reference_product)

    first = compute_product_total(reference_product, material_db, 0.474)
    second = compute_product_total(reference_product, material_db, 0.474)

    assert first == second
    assert reference_product == snapshot
