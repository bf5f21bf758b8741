from decimal import Decimal

import pytest

from models.unit import SolarOrientation
from services.exceptions import InvalidUnitError
from services.valuation_engine import PricingParameters, UnitAttributes, compute_value


def studio(**overrides):
    values = {"identifier": "S-01", "unit_type": "studio", "private_area": Decimal("40"), "floor": 0}
    values.update(overrides)
    return UnitAttributes(**values)


@pytest.fixture
def params():
    return PricingParameters(
        rate_studio=Decimal("5000"),
        rate_apartment=Decimal("6000"),
        additional_suite=Decimal("15000"),
        additional_simple_parking=Decimal("8000"),
        factor_north=Decimal("1.05"),
    )


def test_plain_studio_is_area_times_rate(params):
    assert compute_value(studio(), params, {0: 0}) == Decimal("200000.00")


def test_apartment_with_add_ons_floor_and_adjustment(params):
    unit = UnitAttributes(
        identifier="A-1002",
        unit_type="apartamento",
        private_area=Decimal("70"),
        suites=1,
        parking_simple=2,
        solar_orientation="norte",
        floor=10,
        manual_adjustment_percentage=-5,
    )

    value = compute_value(unit, params, {10: 8})

    # ((70*6000)+15000+16000)*1.05*1.08*0.95
    assert value == Decimal("485862.30")


def test_floor_curve_accepts_rows():
    class Row:
        def __init__(self, floor, percentage):
            self.floor = floor
            self.percentage = percentage

    params = PricingParameters(rate_studio=Decimal("5000"))
    value = compute_value(studio(floor=3), params, [Row(0, 0), Row(3, 10)])
    assert value == Decimal("220000.00")


def test_missing_orientation_is_neutral(params):
    assert compute_value(studio(solar_orientation=None), params) == Decimal("200000.00")
    assert compute_value(studio(solar_orientation="  "), params) == Decimal("200000.00")


def test_zero_orientation_factor_gives_zero():
    params = PricingParameters(rate_studio=Decimal("5000"), factor_south=Decimal("0"))
    assert compute_value(studio(solar_orientation=SolarOrientation.SOUTH), params) == Decimal("0.00")


def test_unpriced_type_keeps_add_ons(params):
    unit = studio(unit_type="garden", suites=1)
    assert compute_value(unit, params) == Decimal("15000.00")

    unknown = studio(unit_type="cobertura")
    assert compute_value(unknown, params) == Decimal("0.00")


def test_unit_type_lookup_ignores_case(params):
    assert compute_value(studio(unit_type="Studio "), params) == Decimal("200000.00")


def test_missing_floor_or_floor_row_means_zero_percent(params):
    assert compute_value(studio(floor=None), params, {0: 50}) == Decimal("200000.00")
    assert compute_value(studio(floor=7), params, {0: 50}) == Decimal("200000.00")


def test_missing_add_on_counts_are_zero():
    params = PricingParameters(
        rate_studio=Decimal("5000"),
        additional_suite=None,
        additional_storage_box=Decimal("3000"),
    )
    assert compute_value(studio(suites=None, storage_boxes=2), params) == Decimal("206000.00")


def test_adjustment_applies_after_floor(params):
    unit = studio(floor=1, manual_adjustment_percentage=10)
    # 200000 * 1.10 * 1.10
    assert compute_value(unit, params, {1: 10}) == Decimal("242000.00")


def test_rounds_half_up_to_cents():
    params = PricingParameters(rate_studio=Decimal("0.01"))
    unit = studio(private_area=Decimal("0.5"))
    assert compute_value(unit, params) == Decimal("0.01")


def test_same_inputs_same_value(params):
    unit = studio(floor=4, suites=2, solar_orientation="norte", manual_adjustment_percentage=3.5)
    curve = {4: 2.25}
    values = {compute_value(unit, params, curve) for _ in range(20)}
    assert len(values) == 1


@pytest.mark.parametrize("area", [Decimal("0"), Decimal("-1")])
def test_non_positive_area_is_rejected(params, area):
    with pytest.raises(InvalidUnitError) as exc_info:
        compute_value(studio(identifier="U3", private_area=area), params)
    assert exc_info.value.identifier == "U3"
