from decimal import Decimal

import pytest

from models import AdjustmentHistoryEntry, Unit
from services.adjustment_ledger_service import apply_adjustment, list_history
from services.exceptions import NoActiveParameterError, NotFoundError
from services.recalculation_service import activate_and_recalculate


@pytest.fixture
def priced_unit(db_session, development, make_unit, make_parameter_set):
    unit = make_unit("S-01")
    parameter_set = make_parameter_set()
    activate_and_recalculate(db_session, development.id, parameter_set.id, "op-1")
    return db_session.get(Unit, unit.id)


def test_adjustment_returns_before_and_after(db_session, priced_unit):
    result = apply_adjustment(db_session, priced_unit.id, -5, "Vista obstruída", "op-7")
    db_session.commit()

    assert result.value_before == Decimal("200000.00")
    assert result.value_after == Decimal("190000.00")
    assert priced_unit.computed_value == Decimal("190000.00")
    assert priced_unit.manual_adjustment_percentage == -5
    assert priced_unit.manual_adjustment_reason == "Vista obstruída"


def test_each_adjustment_appends_history(db_session, priced_unit):
    apply_adjustment(db_session, priced_unit.id, -5, "Vista obstruída", "op-7")
    apply_adjustment(db_session, priced_unit.id, 2.5, None, "op-8")
    db_session.commit()

    history = list_history(db_session, priced_unit.id)

    assert len(history) == 2
    latest, first = history
    assert (first.previous_percentage, first.new_percentage) == (None, -5)
    assert (latest.previous_percentage, latest.new_percentage) == (-5, 2.5)
    assert latest.operator_id == "op-8"
    assert latest.value_before == Decimal("190000.00")
    assert latest.value_after == Decimal("205000.00")
    assert latest.reason is None


def test_adjustment_needs_active_set(db_session, make_unit):
    unit = make_unit("S-01")

    with pytest.raises(NoActiveParameterError):
        apply_adjustment(db_session, unit.id, 3, "teste", "op-7")

    assert db_session.query(AdjustmentHistoryEntry).count() == 0
    assert db_session.get(Unit, unit.id).manual_adjustment_percentage is None


def test_adjustment_needs_operator(db_session, priced_unit):
    with pytest.raises(ValueError):
        apply_adjustment(db_session, priced_unit.id, 3, "teste", "")


def test_adjustment_unknown_unit(db_session):
    with pytest.raises(NotFoundError):
        apply_adjustment(db_session, 404, 3, "teste", "op-7")


def test_history_unknown_unit(db_session):
    with pytest.raises(NotFoundError):
        list_history(db_session, 404)
