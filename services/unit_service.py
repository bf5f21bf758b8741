# services/unit_service.py
"""
Unit Service - unit records and the bulk import hand-off.

Importers (CSV/Excel parsing lives outside this service) pass already-parsed
rows; each row is validated against UnitCreate, identifiers must be unique
within the development, and valid rows are inserted. When the development has
an active parameter set the normal recalculation path prices the new units.
"""
import logging
from typing import Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from models import Development, Unit
from schemas.unit import UnitCreate
from services.exceptions import NotFoundError
from services.parameter_service import ParameterSetService
from services.recalculation_service import RecalcResult, recalculate_development

logger = logging.getLogger(__name__)


UNIT_FIELDS = (
     "identifier",
     "unit_type",
     "private_area",
     "total_area",
     "floor",
     "bedrooms",
     "suites",
     "parking_simple",
     "parking_double",
     "parking_moto",
     "storage_boxes",
     "solar_orientation",
     "status",
)


class UnitService:
     """Service class for unit-related business logic."""

     @staticmethod
     def get(db: Session, unit_id: int) -> Unit:
          unit = db.get(Unit, unit_id)
          if unit is None:
               raise NotFoundError(f"Unit with ID {unit_id} not found")
          return unit

     @staticmethod
     def list_for_development(db: Session, development_id: int, status=None) -> list[Unit]:
          query = db.query(Unit).filter(Unit.development_id == development_id)
          if status is not None:
               query = query.filter(Unit.status == status)
          return query.order_by(Unit.identifier).all()

     @staticmethod
     def create(db: Session, development_id: int, data: UnitCreate) -> Unit:
          """
          Create one unit. Its value stays empty until the next recalculation.

          Raises:
               NotFoundError: If the development doesn't exist
               ValueError: If the identifier is already used in the development
          """
          _require_development(db, development_id)
          if _identifier_taken(db, development_id, data.identifier):
               raise ValueError(
                    f"A unit with identifier {data.identifier} already exists in this development"
               )
          unit = Unit(development_id=development_id, **_column_values(data))
          db.add(unit)
          db.flush()
          return unit

     @staticmethod
     def update(db: Session, unit_id: int, data: dict) -> Unit:
          """
          Update unit attributes. computed_value is left as is; reports only
          move after a recalculation.

          Raises:
               ValueError: On duplicate identifier or an area invariant violation
          """
          unit = UnitService.get(db, unit_id)

          identifier = data.get("identifier")
          if identifier and identifier != unit.identifier:
               if _identifier_taken(db, unit.development_id, identifier):
                    raise ValueError(
                         f"A unit with identifier {identifier} already exists in this development"
                    )

          private_area = data.get("private_area") or unit.private_area
          total_area = data.get("total_area") or unit.total_area
          if "private_area" in data and "total_area" not in data and unit.total_area == unit.private_area:
               total_area = private_area  # total area was defaulted; keep following private area
          if total_area < private_area:
               raise ValueError("total_area must be greater than or equal to private_area")

          for key, value in data.items():
               if key in UNIT_FIELDS:
                    setattr(unit, key, _enum_value(value) if key == "solar_orientation" else value)
          unit.total_area = total_area
          db.flush()
          return unit

     @staticmethod
     def delete(db: Session, unit_id: int) -> None:
          unit = UnitService.get(db, unit_id)
          db.delete(unit)
          db.flush()
          logger.info("Deleted unit %s (%s)", unit_id, unit.identifier)

     @staticmethod
     def import_units(db: Session, development_id: int, rows: list[dict]) -> dict:
          """
          Insert a batch of parsed rows, then reprice the development if it has an active set.

          Invalid rows are reported and skipped; valid rows are inserted.

          Returns:
               Dictionary with created count, per-row errors and the recalculation result (or None)
          """
          _require_development(db, development_id)

          created = []
          errors = []
          seen = set()
          for index, row in enumerate(rows, start=1):
               identifier = row.get("identifier") if isinstance(row, dict) else None
               try:
                    data = UnitCreate.model_validate(row)
               except ValidationError as exc:
                    errors.append({"row": index, "identifier": identifier, "message": _validation_message(exc)})
                    continue

               if data.identifier in seen or _identifier_taken(db, development_id, data.identifier):
                    errors.append({
                         "row": index,
                         "identifier": data.identifier,
                         "message": f"A unit with identifier {data.identifier} already exists in this development",
                    })
                    continue

               seen.add(data.identifier)
               unit = Unit(development_id=development_id, **_column_values(data))
               db.add(unit)
               created.append(unit)

          db.flush()
          logger.info(
               "Imported %d unit(s) into development %s (%d rejected)",
               len(created),
               development_id,
               len(errors),
          )

          recalculation: Optional[RecalcResult] = None
          if created and ParameterSetService.get_active(db, development_id) is not None:
               db.commit()
               recalculation = recalculate_development(db, development_id)

          return {"created": len(created), "errors": errors, "recalculation": recalculation}


def _require_development(db: Session, development_id: int) -> None:
     if db.get(Development, development_id) is None:
          raise NotFoundError(f"Development with ID {development_id} not found")


def _identifier_taken(db: Session, development_id: int, identifier: str) -> bool:
     return (
          db.query(Unit.id)
          .filter(Unit.development_id == development_id, Unit.identifier == identifier)
          .first()
          is not None
     )


def _enum_value(value):
     return getattr(value, "value", value)


def _column_values(data: UnitCreate) -> dict:
     values = data.model_dump(include=set(UNIT_FIELDS))
     values["solar_orientation"] = _enum_value(values.get("solar_orientation"))
     return values


def _validation_message(exc: ValidationError) -> str:
     parts = []
     for error in exc.errors():
          location = ".".join(str(part) for part in error.get("loc", ()))
          parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
     return "; ".join(parts)
