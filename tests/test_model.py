from __future__ import annotations

import math

import pytest

from pcf.model import downstream_legs, new_contract, new_labor_inputs, new_product, new_transport_leg, id_key, to_number


@pytest.mark.parametrize(
    "value, expected",
    [(None, 0.0), ("", 0.0), ("abc", 0.0), (math.nan, 0.0), (math.inf, 0.0), ("12.5", 12.5), (3, 3.0)],
)
def test_to_number_coerces_form_values(value, expected) -> None:
    assert to_number(value) == expected


def test_new_product_defaults() -> None:
    product = new_product("Switch")

    assert product["year"] == 2024
    assert product["total_override"] == 0
    assert len(product["materials"]) == 1
    assert product["materials"][0]["use_db"] is True
    assert product["upstream_transport"] == []
    assert product["manufacturing"]["mode"] == "perUnit"
    assert product["manufacturing"]["total_output"] == 1000
    assert downstream_legs(product) == [{"weight": 0.0, "distance": 0.0, "vehicle_id": "t1"}]


def test_new_contract_owns_its_product_list() -> None:
    products = [new_product("A")]
    contract = new_contract("Purchase", products)
    products.append(new_product("B"))

    assert len(contract["products"]) == 1


def test_new_labor_inputs_rejects_unknown_mode() -> None:
    with pytest.raises(ValueError):
        new_labor_inputs(mode="C")


def test_downstream_legs_accepts_single_leg() -> None:
    leg = {"weight": 5, "distance": 10, "vehicle_id": "t2"}

    assert downstream_legs({"downstream_transport": leg}) == [leg]
    assert downstream_legs({"downstream_transport": None}) == []
    assert downstream_legs(None) == []


def test_new_transport_leg_links_material() -> None:
    leg = new_transport_leg(material_id=5, weight=40, distance=12)

    assert leg["material_id"] == 5
    assert leg["vehicle_id"] == "t1"


def test_id_key_normalizes_numeric_ids() -> None:
    assert id_key(3) == id_key(3.0) == id_key(" 3 ") == "3"
    assert id_key(2.5) == "2.5"
    assert id_key(None) == ""
