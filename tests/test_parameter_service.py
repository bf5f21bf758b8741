from decimal import Decimal

import pytest

from models import FloorValorization, PricingParameterSet
from services.exceptions import NotFoundError
from services.parameter_service import ParameterSetService, regenerate_floor_curve
from services.recalculation_service import activate_and_recalculate


def curve_of(db_session, parameter_set_id):
    return {
        row.floor: row.percentage
        for row in ParameterSetService.floor_curve(db_session, parameter_set_id)
    }


def test_new_set_is_inactive_with_full_curve(db_session, make_parameter_set):
    parameter_set = make_parameter_set(floor_overrides={10: 8, 20: 15})

    curve = curve_of(db_session, parameter_set.id)
    assert parameter_set.active is False
    assert sorted(curve) == list(range(0, 21))
    assert curve[10] == 8
    assert curve[20] == 15
    assert curve[5] == 0


def test_regenerate_is_idempotent(db_session, make_parameter_set):
    parameter_set = make_parameter_set()

    regenerate_floor_curve(db_session, parameter_set.id, {3: 2.5})
    db_session.commit()
    first = curve_of(db_session, parameter_set.id)
    regenerate_floor_curve(db_session, parameter_set.id, {3: 2.5})
    db_session.commit()

    rows = db_session.query(FloorValorization).filter_by(parameter_set_id=parameter_set.id).count()
    assert rows == 21
    assert curve_of(db_session, parameter_set.id) == first


def test_regenerate_with_no_overrides_zeroes_curve(db_session, make_parameter_set):
    parameter_set = make_parameter_set(floor_overrides={1: 4})

    regenerate_floor_curve(db_session, parameter_set.id, {})
    db_session.commit()

    assert set(curve_of(db_session, parameter_set.id).values()) == {0}


@pytest.mark.parametrize("floor", [-1, 21])
def test_out_of_range_floor_is_rejected(db_session, make_parameter_set, floor):
    parameter_set = make_parameter_set(floor_overrides={2: 1})

    with pytest.raises(ValueError):
        regenerate_floor_curve(db_session, parameter_set.id, {floor: 5})
    db_session.rollback()

    assert curve_of(db_session, parameter_set.id)[2] == 1


def test_regenerate_unknown_set(db_session):
    with pytest.raises(NotFoundError):
        regenerate_floor_curve(db_session, 999, {})


def test_name_must_have_three_characters(db_session, development):
    with pytest.raises(ValueError):
        ParameterSetService.create(db_session, development.id, {"name": "ab"})


def test_update_changes_rates_and_keeps_curve(db_session, make_parameter_set):
    parameter_set = make_parameter_set(floor_overrides={4: 3})

    ParameterSetService.update(db_session, parameter_set.id, {"rate_studio": Decimal("5500.00")})
    db_session.commit()

    assert parameter_set.rate_studio == Decimal("5500.00")
    assert curve_of(db_session, parameter_set.id)[4] == 3


def test_clone_copies_values_and_curve(db_session, make_parameter_set):
    original = make_parameter_set(floor_overrides={10: 8}, factor_north=Decimal("1.05"))

    copy = ParameterSetService.clone(db_session, original.id, "Tabela A (cópia)")
    db_session.commit()

    assert copy.id != original.id
    assert copy.active is False
    assert copy.name == "Tabela A (cópia)"
    assert copy.rate_studio == original.rate_studio
    assert copy.factor_north == Decimal("1.05")
    assert curve_of(db_session, copy.id) == curve_of(db_session, original.id)


def test_active_set_cannot_be_deleted(db_session, development, make_parameter_set):
    active = make_parameter_set("Tabela A")
    spare = make_parameter_set("Tabela B")
    activate_and_recalculate(db_session, development.id, active.id, "op-1")

    with pytest.raises(ValueError):
        ParameterSetService.delete(db_session, active.id)

    ParameterSetService.delete(db_session, spare.id)
    db_session.commit()

    assert db_session.get(PricingParameterSet, spare.id) is None
    assert db_session.query(FloorValorization).filter_by(parameter_set_id=spare.id).count() == 0
