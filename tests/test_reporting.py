from decimal import Decimal

from models import Unit, UnitStatus
from services.recalculation_service import activate_and_recalculate
from services.reporting_service import calculate_vgv, simulate_parameter_set


def test_vgv_groups_stored_values_by_status(db_session, development, make_unit, make_parameter_set):
    make_unit("S-01")
    make_unit("S-02", status=UnitStatus.SOLD)
    make_unit("S-03", status=UnitStatus.RESERVED, private_area=Decimal("50.00"))
    make_unit("S-04", status=UnitStatus.SOLD)
    parameter_set = make_parameter_set()
    activate_and_recalculate(db_session, development.id, parameter_set.id, "op-1")

    vgv = calculate_vgv(db_session, development.id)

    assert vgv["vgv_total"] == Decimal("850000.00")
    assert vgv["vgv_available"] == Decimal("200000.00")
    assert vgv["vgv_sold"] == Decimal("400000.00")
    assert vgv["vgv_reserved"] == Decimal("250000.00")
    assert vgv["vgv_unavailable"] == 0
    assert vgv["units_total"] == 4
    assert vgv["units_sold"] == 2
    assert vgv["units_unavailable"] == 0
    assert vgv["target_gross_vgv"] == Decimal("1000000.00")


def test_vgv_reads_stored_values_only(db_session, development, make_unit, make_parameter_set):
    make_unit("S-01")
    parameter_set = make_parameter_set()
    activate_and_recalculate(db_session, development.id, parameter_set.id, "op-1")

    parameter_set.rate_studio = Decimal("9000.00")
    db_session.commit()

    assert calculate_vgv(db_session, development.id)["vgv_total"] == Decimal("200000.00")


def test_vgv_counts_units_never_valued(db_session, development, make_unit):
    make_unit("S-01")

    vgv = calculate_vgv(db_session, development.id)

    assert vgv["units_total"] == 1
    assert vgv["vgv_total"] == 0


def test_impact_simulation_does_not_write(db_session, development, make_unit, make_parameter_set):
    make_unit("S-01")
    make_unit("S-02", floor=5)
    current = make_parameter_set("Tabela A")
    activate_and_recalculate(db_session, development.id, current.id, "op-1")
    candidate = make_parameter_set("Tabela B", floor_overrides={0: -10, 5: 20})

    impact = simulate_parameter_set(db_session, candidate.id)

    assert impact["total_current"] == Decimal("400000.00")
    assert impact["total_simulated"] == Decimal("420000.00")
    assert impact["difference"] == Decimal("20000.00")
    assert impact["difference_percentage"] == Decimal("5.00")
    assert impact["biggest_increase"] == {"identifier": "S-02", "difference_percentage": Decimal("20.00")}
    assert impact["biggest_reduction"] == {"identifier": "S-01", "difference_percentage": Decimal("-10.00")}

    db_session.expire_all()
    assert {unit.computed_value for unit in db_session.query(Unit).all()} == {Decimal("200000.00")}


def test_impact_keeps_never_valued_units_out_of_rankings(db_session, development, make_unit, make_parameter_set):
    make_unit("S-01")
    current = make_parameter_set("Tabela A")
    activate_and_recalculate(db_session, development.id, current.id, "op-1")
    make_unit("S-02")
    candidate = make_parameter_set("Tabela B", rate_studio=Decimal("4500.00"))

    impact = simulate_parameter_set(db_session, candidate.id)

    rows = {row["identifier"]: row for row in impact["units"]}
    assert rows["S-02"]["current_value"] is None
    assert rows["S-02"]["difference_percentage"] is None
    assert rows["S-02"]["difference"] == Decimal("180000.00")
    assert impact["unvalued_units"] == 1
    assert impact["total_current"] == Decimal("200000.00")
    assert impact["total_simulated"] == Decimal("360000.00")
    assert impact["biggest_increase"] is None
    assert impact["biggest_reduction"] == {"identifier": "S-01", "difference_percentage": Decimal("-10.00")}
