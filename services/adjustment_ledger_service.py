# services/adjustment_ledger_service.py
"""
Manual Adjustment Ledger - per-unit fine-tuning with an append-only history.

When an operator applies a fine-tuning percentage to a unit:
1. The development must have an active parameter set (the adjustment is
   relative to the parameterized value)
2. The new percentage and reason are written on the unit
3. The unit is revalued; the adjustment is the last step of the engine
4. One AdjustmentHistoryEntry is appended with both percentages and both values

Unit update and history entry are flushed together and committed by the
caller, so either both land or neither does. History rows are never updated
or deleted.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from sqlalchemy import desc
from sqlalchemy.orm import Session

from models import AdjustmentHistoryEntry, Unit
from services.exceptions import NoActiveParameterError, NotFoundError
from services.parameter_service import ParameterSetService
from services.valuation_engine import compute_value, snapshot_parameters, snapshot_unit

logger = logging.getLogger(__name__)


@dataclass
class AdjustmentResult:
     value_before: Optional[Decimal]
     value_after: Decimal
     entry: AdjustmentHistoryEntry


def apply_adjustment(
     db: Session,
     unit_id: int,
     new_percentage: float,
     reason: Optional[str],
     operator_id: str
) -> AdjustmentResult:
     """
     Apply a manual adjustment percentage to a unit and record it.

     Args:
          db: SQLAlchemy database session
          unit_id: Unit to fine-tune
          new_percentage: Signed percentage applied on top of the parameterized value
          reason: Free-text justification (optional)
          operator_id: Authenticated operator applying the change

     Returns:
          AdjustmentResult with the value before and after the change

     Raises:
          ValueError: If operator_id is empty
          NotFoundError: If the unit doesn't exist
          NoActiveParameterError: If the unit's development has no active set
          InvalidUnitError: If the unit cannot be valued (e.g. non-positive area)
     """
     if not operator_id or not str(operator_id).strip():
          raise ValueError("An operator id is required to apply an adjustment")

     unit = db.get(Unit, unit_id)
     if unit is None:
          raise NotFoundError(f"Unit with ID {unit_id} not found")

     parameter_set = ParameterSetService.get_active(db, unit.development_id)
     if parameter_set is None:
          raise NoActiveParameterError(unit.development_id)

     previous_percentage = unit.manual_adjustment_percentage
     value_before = unit.computed_value

     # Value first so a failing unit is left untouched
     snapshot = snapshot_unit(unit).model_copy(
          update={"manual_adjustment_percentage": new_percentage}
     )
     value_after = compute_value(
          snapshot,
          snapshot_parameters(parameter_set),
          ParameterSetService.floor_curve(db, parameter_set.id),
     )

     unit.manual_adjustment_percentage = new_percentage
     unit.manual_adjustment_reason = reason or None
     unit.computed_value = value_after

     entry = AdjustmentHistoryEntry(
          unit_id=unit.id,
          operator_id=str(operator_id),
          previous_percentage=previous_percentage,
          new_percentage=new_percentage,
          reason=reason or None,
          value_before=value_before,
          value_after=value_after,
     )
     db.add(entry)
     db.flush()

     logger.info(
          "Operator %s adjusted unit %s from %s%% to %s%%: %s -> %s",
          operator_id,
          unit.identifier,
          previous_percentage,
          new_percentage,
          value_before,
          value_after,
     )
     return AdjustmentResult(value_before=value_before, value_after=value_after, entry=entry)


def list_history(db: Session, unit_id: int) -> list[AdjustmentHistoryEntry]:
     """Adjustment history of a unit, newest first."""
     if db.get(Unit, unit_id) is None:
          raise NotFoundError(f"Unit with ID {unit_id} not found")
     return (
          db.query(AdjustmentHistoryEntry)
          .filter(AdjustmentHistoryEntry.unit_id == unit_id)
          .order_by(desc(AdjustmentHistoryEntry.id))
          .all()
     )
