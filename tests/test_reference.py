from __future__ import annotations

from pcf.reference import electricity_factor_for_year, find_transport_factor


def test_electricity_factor_for_known_and_unknown_years() -> None:
    assert electricity_factor_for_year(2024) == 0.474
    assert electricity_factor_for_year("2023") == 0.494
    assert electricity_factor_for_year(1999) == 0.495
    assert electricity_factor_for_year(None) == 0.495


def test_find_transport_factor() -> None:
    assert find_transport_factor("t1")["factor"] == 0.131
    assert find_transport_factor("t9") is None
    assert find_transport_factor("x", [{"id": "x", "factor": 2.0}])["factor"] == 2.0
