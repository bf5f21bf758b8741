from decimal import Decimal

import pytest

from models import Unit
from schemas.unit import UnitCreate
from services.development_service import DevelopmentService
from services.recalculation_service import activate_and_recalculate
from services.unit_service import UnitService


def test_total_area_defaults_to_private_area(db_session, development):
    unit = UnitService.create(
        db_session,
        development.id,
        UnitCreate(identifier="A-101", unit_type="apartamento", private_area=Decimal("70.00")),
    )
    assert unit.total_area == Decimal("70.00")
    assert unit.computed_value is None


def test_duplicate_identifier_is_rejected(db_session, development, make_unit):
    make_unit("A-101")
    with pytest.raises(ValueError):
        UnitService.create(
            db_session,
            development.id,
            UnitCreate(identifier="A-101", unit_type="studio", private_area=Decimal("30.00")),
        )


def test_update_keeps_total_area_covering_private_area(db_session, make_unit):
    unit = make_unit("A-101", total_area=Decimal("45.00"))

    with pytest.raises(ValueError):
        UnitService.update(db_session, unit.id, {"private_area": Decimal("50.00")})

    db_session.rollback()
    UnitService.update(db_session, unit.id, {"private_area": Decimal("42.00"), "solar_orientation": "leste"})
    assert unit.private_area == Decimal("42.00")
    assert unit.total_area == Decimal("45.00")
    assert unit.solar_orientation == "leste"


def test_import_reports_bad_rows_and_prices_good_ones(db_session, development, make_unit, make_parameter_set):
    make_unit("S-01")
    parameter_set = make_parameter_set()
    activate_and_recalculate(db_session, development.id, parameter_set.id, "op-1")

    outcome = UnitService.import_units(
        db_session,
        development.id,
        [
            {"identifier": "S-02", "unit_type": "studio", "private_area": "40"},
            {"identifier": "S-03", "unit_type": "studio", "private_area": 0},
            {"identifier": "S-01", "unit_type": "studio", "private_area": "40"},
            {"identifier": "S-02", "unit_type": "studio", "private_area": "41"},
            {"identifier": "S-04", "unit_type": "studio", "private_area": "40", "solar_orientation": ""},
        ],
    )

    assert outcome["created"] == 2
    assert [(error["row"], error["identifier"]) for error in outcome["errors"]] == [
        (2, "S-03"),
        (3, "S-01"),
        (4, "S-02"),
    ]
    assert outcome["recalculation"].updated == 3
    values = {unit.identifier: unit.computed_value for unit in db_session.query(Unit).all()}
    assert values == {
        "S-01": Decimal("200000.00"),
        "S-02": Decimal("200000.00"),
        "S-04": Decimal("200000.00"),
    }


def test_import_without_active_set_skips_recalculation(db_session, development):
    outcome = UnitService.import_units(
        db_session,
        development.id,
        [{"identifier": "S-01", "unit_type": "studio", "private_area": "40"}],
    )
    assert outcome["created"] == 1
    assert outcome["recalculation"] is None


def test_development_with_units_cannot_be_deleted(db_session, development, make_unit):
    unit = make_unit("S-01")

    with pytest.raises(ValueError):
        DevelopmentService.delete(db_session, development.id)

    UnitService.delete(db_session, unit.id)
    DevelopmentService.delete(db_session, development.id)
    db_session.commit()
    assert DevelopmentService.list_all(db_session) == []
