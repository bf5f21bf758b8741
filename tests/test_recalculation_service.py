import threading
from decimal import Decimal

import pytest
from sqlalchemy import Update, text
from sqlalchemy.exc import OperationalError

import services.recalculation_service as recalculation_service
from models import PricingParameterSet, Unit
from services.exceptions import (
    ActivationTransactionError,
    NoActiveParameterError,
    NotFoundError,
)
from services.recalculation_service import activate_and_recalculate, recalculate_development


def active_ids(db_session, development_id):
    db_session.expire_all()
    return [
        parameter_set.id
        for parameter_set in db_session.query(PricingParameterSet)
        .filter_by(development_id=development_id, active=True)
        .all()
    ]


def test_activation_leaves_exactly_one_active(db_session, development, make_parameter_set):
    set_a = make_parameter_set("Tabela A")
    set_b = make_parameter_set("Tabela B")

    activate_and_recalculate(db_session, development.id, set_a.id, "op-1")
    assert active_ids(db_session, development.id) == [set_a.id]

    activate_and_recalculate(db_session, development.id, set_b.id, "op-1")
    assert active_ids(db_session, development.id) == [set_b.id]


def test_activation_reprices_every_unit(db_session, development, make_unit, make_parameter_set):
    make_unit("S-01")
    make_unit("S-02", floor=10)
    parameter_set = make_parameter_set(floor_overrides={10: 8})

    result = activate_and_recalculate(db_session, development.id, parameter_set.id, "op-1")

    assert result.updated == 2
    assert result.failed == 0
    assert result.has_warnings is False
    values = {unit.identifier: unit.computed_value for unit in db_session.query(Unit).all()}
    assert values == {"S-01": Decimal("200000.00"), "S-02": Decimal("216000.00")}


def test_failed_swap_keeps_previous_active_set(db_session, development, make_unit, make_parameter_set, monkeypatch):
    unit = make_unit("S-01")
    set_a = make_parameter_set("Tabela A")
    set_b = make_parameter_set("Tabela B", rate_studio=Decimal("9000.00"))
    activate_and_recalculate(db_session, development.id, set_a.id, "op-1")

    original_execute = db_session.execute
    updates = {"count": 0}

    def flaky_execute(statement, *args, **kwargs):
        if isinstance(statement, Update):
            updates["count"] += 1
            if updates["count"] == 2:
                raise OperationalError(str(statement), {}, Exception("connection lost"))
        return original_execute(statement, *args, **kwargs)

    monkeypatch.setattr(db_session, "execute", flaky_execute)

    with pytest.raises(ActivationTransactionError):
        activate_and_recalculate(db_session, development.id, set_b.id, "op-1")

    monkeypatch.undo()
    assert active_ids(db_session, development.id) == [set_a.id]
    assert db_session.get(Unit, unit.id).computed_value == Decimal("200000.00")


def test_activation_requires_operator(db_session, development, make_parameter_set):
    parameter_set = make_parameter_set()
    with pytest.raises(ValueError):
        activate_and_recalculate(db_session, development.id, parameter_set.id, " ")


def test_activation_rejects_set_of_other_development(db_session, development, make_parameter_set):
    parameter_set = make_parameter_set()
    with pytest.raises(NotFoundError):
        activate_and_recalculate(db_session, development.id + 1, parameter_set.id, "op-1")


def test_corrupted_unit_does_not_stop_the_batch(db_session, development, make_unit, make_parameter_set):
    make_unit("U1")
    make_unit("U2")
    db_session.execute(text("PRAGMA ignore_check_constraints = ON"))
    try:
        make_unit("U3", private_area=Decimal("0"))
    finally:
        db_session.execute(text("PRAGMA ignore_check_constraints = OFF"))
    make_unit("U4")
    parameter_set = make_parameter_set()

    result = activate_and_recalculate(db_session, development.id, parameter_set.id, "op-1")

    assert result.updated == 3
    assert result.failed == 1
    assert result.has_warnings is True
    assert [error.identifier for error in result.errors] == ["U3"]
    values = {unit.identifier: unit.computed_value for unit in db_session.query(Unit).all()}
    assert values["U3"] is None
    assert values["U1"] == values["U2"] == values["U4"] == Decimal("200000.00")


def test_timeout_keeps_finished_units(db_session, development, make_unit, make_parameter_set, monkeypatch):
    make_unit("U1")
    make_unit("U2")
    make_unit("SLOW")
    parameter_set = make_parameter_set()
    release = threading.Event()
    slow_finished = threading.Event()
    real_compute_value = recalculation_service.compute_value

    def compute_value(unit, params, curve):
        if unit.identifier == "SLOW":
            release.wait(5)
            try:
                return real_compute_value(unit, params, curve)
            finally:
                slow_finished.set()
        return real_compute_value(unit, params, curve)

    monkeypatch.setattr(recalculation_service, "compute_value", compute_value)
    try:
        result = activate_and_recalculate(
            db_session, development.id, parameter_set.id, "op-1", max_workers=3, timeout=0.5
        )
    finally:
        release.set()

    assert result.timed_out is True
    assert result.skipped == 1
    assert result.updated == 2
    assert result.has_warnings is True
    values = {unit.identifier: unit.computed_value for unit in db_session.query(Unit).all()}
    assert values["SLOW"] is None
    assert values["U1"] == Decimal("200000.00")

    # The abandoned worker finishes later without writing anything
    assert slow_finished.wait(5)
    db_session.expire_all()
    assert db_session.query(Unit).filter_by(identifier="SLOW").one().computed_value is None


def test_recalculate_needs_active_set(db_session, development, make_unit):
    make_unit("S-01")
    with pytest.raises(NoActiveParameterError):
        recalculate_development(db_session, development.id)


def test_recalculate_picks_up_edited_rates(db_session, development, make_unit, make_parameter_set):
    unit = make_unit("S-01")
    parameter_set = make_parameter_set()
    activate_and_recalculate(db_session, development.id, parameter_set.id, "op-1")

    parameter_set.rate_studio = Decimal("6000.00")
    db_session.commit()
    assert db_session.get(Unit, unit.id).computed_value == Decimal("200000.00")

    result = recalculate_development(db_session, development.id)

    assert result.updated == 1
    assert db_session.get(Unit, unit.id).computed_value == Decimal("240000.00")


def test_manual_adjustment_survives_activation(db_session, development, make_unit, make_parameter_set):
    make_unit("S-01", manual_adjustment_percentage=-5)
    set_a = make_parameter_set("Tabela A")
    set_b = make_parameter_set("Tabela B", rate_studio=Decimal("6000.00"))

    activate_and_recalculate(db_session, development.id, set_a.id, "op-1")
    assert db_session.query(Unit).one().computed_value == Decimal("190000.00")

    activate_and_recalculate(db_session, development.id, set_b.id, "op-1")
    unit = db_session.query(Unit).one()
    assert unit.manual_adjustment_percentage == -5
    assert unit.computed_value == Decimal("228000.00")
