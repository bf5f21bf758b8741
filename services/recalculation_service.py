# services/recalculation_service.py
"""
Recalculation Orchestrator - activate a parameter set and reprice a development.

Activation:
1. Lock the development row, set active=false on every parameter set of the
   development, then active=true on the chosen one; commit both as ONE
   transaction. On failure everything is rolled back and
   ActivationTransactionError is raised; no unit is touched.
2. Load the development's units and the new set's floor curve.
3. Value each unit on a thread pool. A unit that fails is reported and
   skipped; the rest of the batch carries on.
4. Write every successful value in a single flush/commit.

The batch is bounded by a timeout. Units still running at the deadline are
reported as skipped and the result is flagged as timed out.
"""
import logging
import os
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from pydantic import ValidationError
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import Development, PricingParameterSet, Unit
from services.exceptions import (
     ActivationTransactionError,
     NoActiveParameterError,
     NotFoundError,
     PerUnitComputationError,
)
from services.parameter_service import ParameterSetService
from services.valuation_engine import (
     compute_value,
     floor_curve_map,
     snapshot_parameters,
     snapshot_unit,
)

logger = logging.getLogger(__name__)

RECALC_MAX_WORKERS = int(os.getenv("RECALC_MAX_WORKERS", "4"))
RECALC_TIMEOUT_SECONDS = float(os.getenv("RECALC_TIMEOUT_SECONDS", "60"))


@dataclass
class RecalcResult:
     """Outcome of a batch recalculation."""
     parameter_set_id: Optional[int] = None
     updated: int = 0
     skipped: int = 0
     timed_out: bool = False
     errors: list[PerUnitComputationError] = field(default_factory=list)

     @property
     def failed(self) -> int:
          return len(self.errors)

     @property
     def has_warnings(self) -> bool:
          """Partial completion is a warning for the operator, not an error."""
          return self.failed > 0 or self.timed_out


def activate_and_recalculate(
     db: Session,
     development_id: int,
     parameter_set_id: int,
     operator_id: str,
     max_workers: Optional[int] = None,
     timeout: Optional[float] = None
) -> RecalcResult:
     """
     Make parameter_set_id the only active set of the development and reprice its units.

     Raises:
          ValueError: If operator_id is empty
          NotFoundError: If the set doesn't exist or belongs to another development
          ActivationTransactionError: If the active-flag swap could not be committed
     """
     if not operator_id or not str(operator_id).strip():
          raise ValueError("An operator id is required to activate a parameter set")

     parameter_set = db.get(PricingParameterSet, parameter_set_id)
     if parameter_set is None or parameter_set.development_id != development_id:
          raise NotFoundError(
               f"Parameter set with ID {parameter_set_id} not found for development {development_id}"
          )

     try:
          _swap_active_parameter_set(db, development_id, parameter_set_id)
          db.commit()
     except ActivationTransactionError:
          db.rollback()
          raise
     except SQLAlchemyError as exc:
          db.rollback()
          logger.error(
               "Activation of parameter set %s for development %s rolled back: %s",
               parameter_set_id,
               development_id,
               exc,
          )
          raise ActivationTransactionError(
               f"Could not activate parameter set {parameter_set_id}; the previous active set was kept"
          ) from exc

     logger.info(
          "Operator %s activated parameter set %s for development %s",
          operator_id,
          parameter_set_id,
          development_id,
     )
     return _recalculate(db, development_id, parameter_set, max_workers, timeout)


def recalculate_development(
     db: Session,
     development_id: int,
     max_workers: Optional[int] = None,
     timeout: Optional[float] = None
) -> RecalcResult:
     """
     Reprice every unit of a development under its current active set.

     Raises:
          NotFoundError: If the development doesn't exist
          NoActiveParameterError: If the development has no active set
     """
     development = db.get(Development, development_id)
     if development is None:
          raise NotFoundError(f"Development with ID {development_id} not found")

     parameter_set = ParameterSetService.get_active(db, development_id)
     if parameter_set is None:
          raise NoActiveParameterError(development_id)
     return _recalculate(db, development_id, parameter_set, max_workers, timeout)


def _swap_active_parameter_set(db: Session, development_id: int, parameter_set_id: int) -> None:
     """Deactivate every set of the development and activate one; caller commits."""
     # Per-development lock: concurrent activations of the same development queue here
     db.execute(
          select(Development.id)
          .where(Development.id == development_id)
          .with_for_update()
     )
     db.execute(
          update(PricingParameterSet)
          .where(PricingParameterSet.development_id == development_id)
          .values(active=False)
     )
     result = db.execute(
          update(PricingParameterSet)
          .where(
               PricingParameterSet.id == parameter_set_id,
               PricingParameterSet.development_id == development_id
          )
          .values(active=True)
     )
     if result.rowcount != 1:
          raise ActivationTransactionError(
               f"Parameter set {parameter_set_id} could not be marked active"
          )


def _recalculate(
     db: Session,
     development_id: int,
     parameter_set: PricingParameterSet,
     max_workers: Optional[int],
     timeout: Optional[float]
) -> RecalcResult:
     result = RecalcResult(parameter_set_id=parameter_set.id)

     units = (
          db.query(Unit)
          .filter(Unit.development_id == development_id)
          .order_by(Unit.id)
          .all()
     )
     params = snapshot_parameters(parameter_set)
     curve = floor_curve_map(ParameterSetService.floor_curve(db, parameter_set.id))

     snapshots = []
     for unit in units:
          try:
               snapshots.append(snapshot_unit(unit))
          except ValidationError as exc:
               result.errors.append(
                    PerUnitComputationError(unit.id, unit.identifier, _first_error(exc))
               )

     values = _value_units(snapshots, params, curve, max_workers, timeout, result)

     units_by_id = {unit.id: unit for unit in units}
     for unit_id, value in values.items():
          units_by_id[unit_id].computed_value = value
     result.updated = len(values)

     try:
          db.commit()
     except SQLAlchemyError:
          db.rollback()
          logger.exception("Failed to persist recalculated values for development %s", development_id)
          raise

     result.errors.sort(key=lambda error: error.identifier or "")
     for error in result.errors:
          logger.warning("Recalculation of development %s skipped unit: %s", development_id, error)
     logger.info(
          "Recalculated development %s with parameter set %s: updated=%d failed=%d skipped=%d%s",
          development_id,
          parameter_set.id,
          result.updated,
          result.failed,
          result.skipped,
          " (timed out)" if result.timed_out else "",
     )
     return result


def _value_units(
     snapshots: list,
     params,
     curve: dict,
     max_workers: Optional[int],
     timeout: Optional[float],
     result: RecalcResult
) -> dict[int, Decimal]:
     """Run the engine for every snapshot; record failures and timeouts on result."""
     values: dict[int, Decimal] = {}
     if not snapshots:
          return values

     executor = ThreadPoolExecutor(
          max_workers=max_workers or RECALC_MAX_WORKERS,
          thread_name_prefix="recalc"
     )
     futures = {
          executor.submit(compute_value, snapshot, params, curve): snapshot
          for snapshot in snapshots
     }
     try:
          done, not_done = wait(futures, timeout=timeout if timeout is not None else RECALC_TIMEOUT_SECONDS)
     finally:
          # Workers still running past the deadline are abandoned, not joined. They only
          # hold snapshots and compute_value has no side effects, so their late results
          # are dropped and can never reach the session.
          executor.shutdown(wait=False, cancel_futures=True)

     for future in done:
          snapshot = futures[future]
          try:
               values[snapshot.id] = future.result()
          except Exception as exc:
               result.errors.append(PerUnitComputationError(snapshot.id, snapshot.identifier, str(exc)))

     if not_done:
          result.skipped = len(not_done)
          result.timed_out = True
     return values


def _first_error(exc: ValidationError) -> str:
     error = exc.errors()[0]
     location = ".".join(str(part) for part in error.get("loc", ()))
     return f"{location}: {error.get('msg')}" if location else error.get("msg", str(exc))
