from __future__ import annotations

import math

import pytest

from pcf.fuel import compute_fuel_emission, fuel_emission_by_gas


def test_gasoline_emission_sums_three_gases() -> None:
    energy = 100 * 7609 * 4.1868e-9
    expected = energy * 69300 * 1 + energy * 25 * 27 + energy * 8 * 273

    assert compute_fuel_emission(100, "gasoline") == pytest.approx(expected)


@pytest.mark.parametrize("amount", [0, -5, math.nan, None, "", "abc"])
def test_no_activity_returns_zero(amount) -> None:
    assert compute_fuel_emission(amount, "diesel") == 0


def test_by_gas_total_matches_calculator() -> None:
    split = fuel_emission_by_gas(250, "diesel_mobile")

    assert split["total"] == compute_fuel_emission(250, "diesel_mobile")
    assert split["CO2"] > split["N2O"] > split["CH4"] > 0


def test_mobile_diesel_exceeds_stationary() -> None:
    assert compute_fuel_emission(100, "diesel_mobile") > compute_fuel_emission(100, "diesel")


def test_unknown_fuel_type_rejected() -> None:
    with pytest.raises(ValueError):
        compute_fuel_emission(10, "kerosene")
