# services/reporting_service.py
"""
Reporting Service - VGV aggregation and parameter-set impact simulation.

VGV figures are read from the persisted Unit.computed_value only; changing the
engine or the parameters requires an explicit recalculation before reports move.
The impact simulation values units in memory and never writes.
"""
from decimal import Decimal

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.orm import Session

from models import Development, Unit, UnitStatus
from services.exceptions import NotFoundError, PricingError
from services.parameter_service import ParameterSetService
from services.valuation_engine import (
     ZERO,
     compute_value,
     floor_curve_map,
     round_money,
     snapshot_parameters,
     snapshot_unit,
     to_decimal,
)


def calculate_vgv(db: Session, development_id: int) -> dict:
     """
     Gross sales value of a development, overall and by unit status.

     Units never valued count towards the unit totals with a value of 0.

     Returns:
          Dictionary with VGV totals and unit counts per status
     """
     development = db.get(Development, development_id)
     if development is None:
          raise NotFoundError(f"Development with ID {development_id} not found")

     rows = (
          db.query(
               Unit.status,
               func.count(Unit.id),
               func.coalesce(func.sum(Unit.computed_value), 0),
          )
          .filter(Unit.development_id == development_id)
          .group_by(Unit.status)
          .all()
     )

     by_status = {status: {"count": 0, "vgv": ZERO} for status in UnitStatus}
     for status, count, total in rows:
          by_status[UnitStatus(status)] = {"count": count, "vgv": round_money(to_decimal(total))}

     vgv_total = round_money(sum((entry["vgv"] for entry in by_status.values()), ZERO))
     units_total = sum(entry["count"] for entry in by_status.values())

     return {
          "development_id": development_id,
          "target_gross_vgv": development.target_gross_vgv,
          "vgv_total": vgv_total,
          "vgv_available": by_status[UnitStatus.AVAILABLE]["vgv"],
          "vgv_reserved": by_status[UnitStatus.RESERVED]["vgv"],
          "vgv_sold": by_status[UnitStatus.SOLD]["vgv"],
          "vgv_unavailable": by_status[UnitStatus.UNAVAILABLE]["vgv"],
          "units_total": units_total,
          "units_available": by_status[UnitStatus.AVAILABLE]["count"],
          "units_reserved": by_status[UnitStatus.RESERVED]["count"],
          "units_sold": by_status[UnitStatus.SOLD]["count"],
          "units_unavailable": by_status[UnitStatus.UNAVAILABLE]["count"],
     }


def simulate_parameter_set(db: Session, parameter_set_id: int) -> dict:
     """
     Compare every unit's stored value with the value it would get under a parameter set.

     Nothing is persisted. Units that cannot be valued are listed under
     "errors" and excluded from the totals. Units never valued have no
     current value; their whole simulated value counts as difference and
     they are left out of the biggest increase/reduction.
     """
     parameter_set = ParameterSetService.get(db, parameter_set_id)
     params = snapshot_parameters(parameter_set)
     curve = floor_curve_map(ParameterSetService.floor_curve(db, parameter_set.id))

     units = (
          db.query(Unit)
          .filter(Unit.development_id == parameter_set.development_id)
          .order_by(Unit.identifier)
          .all()
     )

     rows = []
     errors = []
     for unit in units:
          try:
               simulated = compute_value(snapshot_unit(unit), params, curve)
          except (PricingError, ValidationError) as exc:
               errors.append({"unit_id": unit.id, "identifier": unit.identifier, "reason": str(exc)})
               continue
          if unit.computed_value is None:
               # Never valued: shown as new value, kept out of the percentage rankings
               rows.append({
                    "unit_id": unit.id,
                    "identifier": unit.identifier,
                    "current_value": None,
                    "simulated_value": simulated,
                    "difference": simulated,
                    "difference_percentage": None,
               })
               continue
          current = to_decimal(unit.computed_value)
          difference = simulated - current
          rows.append({
               "unit_id": unit.id,
               "identifier": unit.identifier,
               "current_value": current,
               "simulated_value": simulated,
               "difference": difference,
               "difference_percentage": _percentage(difference, current),
          })

     total_current = sum((row["current_value"] for row in rows if row["current_value"] is not None), ZERO)
     total_simulated = sum((row["simulated_value"] for row in rows), ZERO)
     total_difference = total_simulated - total_current

     compared = [row for row in rows if row["difference_percentage"] is not None]
     increases = [row for row in compared if row["difference_percentage"] > 0]
     reductions = [row for row in compared if row["difference_percentage"] < 0]
     biggest_increase = max(increases, key=lambda row: row["difference_percentage"], default=None)
     biggest_reduction = min(reductions, key=lambda row: row["difference_percentage"], default=None)

     return {
          "parameter_set_id": parameter_set.id,
          "development_id": parameter_set.development_id,
          "units": rows,
          "errors": errors,
          "unvalued_units": len(rows) - len(compared),
          "total_current": total_current,
          "total_simulated": total_simulated,
          "difference": total_difference,
          "difference_percentage": _percentage(total_difference, total_current),
          "biggest_increase": _highlight(biggest_increase),
          "biggest_reduction": _highlight(biggest_reduction),
     }


def _percentage(difference: Decimal, base: Decimal) -> Decimal:
     if base <= 0:
          return ZERO
     return round_money(difference / base * 100)


def _highlight(row):
     if row is None:
          return None
     return {"identifier": row["identifier"], "difference_percentage": row["difference_percentage"]}
