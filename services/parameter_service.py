# services/parameter_service.py
"""
Parameter Set Service - lifecycle of pricing parameter sets and their floor curves.

Activation is not handled here; it lives in the recalculation service because
it must be followed by repricing every unit of the development.
"""
import logging
from typing import Mapping, Optional

from sqlalchemy import delete
from sqlalchemy.orm import Session

from models import Development, PricingParameterSet, FloorValorization
from models.floor_valorization import MIN_FLOOR, MAX_FLOOR
from services.exceptions import NotFoundError

logger = logging.getLogger(__name__)


# Columns an operator may set through create/update/clone
PARAMETER_FIELDS = (
     "name",
     "description",
     "rate_studio",
     "rate_apartment",
     "rate_commercial",
     "rate_garden",
     "additional_suite",
     "additional_simple_parking",
     "additional_double_parking",
     "additional_moto_parking",
     "additional_storage_box",
     "factor_north",
     "factor_south",
     "factor_east",
     "factor_west",
     "factor_northeast",
     "factor_northwest",
     "factor_southeast",
     "factor_southwest",
)

MIN_NAME_LENGTH = 3


def regenerate_floor_curve(
     db: Session,
     parameter_set_id: int,
     overrides: Optional[Mapping[int, float]] = None
) -> list[FloorValorization]:
     """
     Replace the floor curve of a parameter set with exactly 21 rows (floors 0..20).

     Every existing row is deleted, then one row per floor is inserted with the
     override percentage or 0. Runs in the caller's transaction so the delete
     and the insert are committed together.

     Raises:
          NotFoundError: If the parameter set doesn't exist
          ValueError: If an override targets a floor outside 0..20
     """
     parameter_set = db.get(PricingParameterSet, parameter_set_id)
     if parameter_set is None:
          raise NotFoundError(f"Parameter set with ID {parameter_set_id} not found")

     overrides = {int(floor): percentage for floor, percentage in (overrides or {}).items()}
     out_of_range = sorted(f for f in overrides if f < MIN_FLOOR or f > MAX_FLOOR)
     if out_of_range:
          raise ValueError(
               f"Floors must be between {MIN_FLOOR} and {MAX_FLOOR}; got {out_of_range}"
          )

     db.execute(
          delete(FloorValorization)
          .where(FloorValorization.parameter_set_id == parameter_set_id)
     )

     rows = [
          FloorValorization(
               parameter_set_id=parameter_set_id,
               floor=floor,
               percentage=float(overrides.get(floor) or 0),
          )
          for floor in range(MIN_FLOOR, MAX_FLOOR + 1)
     ]
     db.add_all(rows)
     db.flush()
     db.expire(parameter_set, ["floor_valorizations"])

     logger.info(
          "Regenerated floor curve for parameter set %s (%d overrides)",
          parameter_set_id,
          len(overrides),
     )
     return rows


class ParameterSetService:
     """Service class for parameter-set business logic."""

     @staticmethod
     def get(db: Session, parameter_set_id: int) -> PricingParameterSet:
          """
          Fetch a parameter set.

          Raises:
               NotFoundError: If the parameter set doesn't exist
          """
          parameter_set = db.get(PricingParameterSet, parameter_set_id)
          if parameter_set is None:
               raise NotFoundError(f"Parameter set with ID {parameter_set_id} not found")
          return parameter_set

     @staticmethod
     def get_active(db: Session, development_id: int) -> Optional[PricingParameterSet]:
          """The active parameter set of a development, or None."""
          return (
               db.query(PricingParameterSet)
               .filter(
                    PricingParameterSet.development_id == development_id,
                    PricingParameterSet.active.is_(True)
               )
               .first()
          )

     @staticmethod
     def list_for_development(db: Session, development_id: int) -> list[PricingParameterSet]:
          return (
               db.query(PricingParameterSet)
               .filter(PricingParameterSet.development_id == development_id)
               .order_by(PricingParameterSet.created_at.desc(), PricingParameterSet.id.desc())
               .all()
          )

     @staticmethod
     def create(
          db: Session,
          development_id: int,
          data: dict,
          floor_overrides: Optional[Mapping[int, float]] = None
     ) -> PricingParameterSet:
          """
          Create an inactive parameter set with a full 21-floor curve.

          Args:
               db: SQLAlchemy database session
               development_id: Owning development
               data: Column values (see PARAMETER_FIELDS)
               floor_overrides: {floor: percentage}; unlisted floors get 0%

          Raises:
               NotFoundError: If the development doesn't exist
               ValueError: If the name is too short
          """
          if db.get(Development, development_id) is None:
               raise NotFoundError(f"Development with ID {development_id} not found")
          _validate_name(data.get("name"))

          parameter_set = PricingParameterSet(
               development_id=development_id,
               active=False,
               **{key: value for key, value in data.items() if key in PARAMETER_FIELDS},
          )
          db.add(parameter_set)
          db.flush()  # Flush to get the ID without committing

          regenerate_floor_curve(db, parameter_set.id, floor_overrides)
          logger.info("Created parameter set %s for development %s", parameter_set.id, development_id)
          return parameter_set

     @staticmethod
     def update(
          db: Session,
          parameter_set_id: int,
          data: dict,
          floor_overrides: Optional[Mapping[int, float]] = None
     ) -> PricingParameterSet:
          """
          Update rates/add-ons/factors. When floor_overrides is given the whole
          floor curve is regenerated from it.

          Stored unit values are not touched; they change only through an
          explicit recalculation.
          """
          parameter_set = ParameterSetService.get(db, parameter_set_id)
          if "name" in data:
               _validate_name(data["name"])

          for key, value in data.items():
               if key in PARAMETER_FIELDS:
                    setattr(parameter_set, key, value)
          db.flush()

          if floor_overrides is not None:
               regenerate_floor_curve(db, parameter_set.id, floor_overrides)
          return parameter_set

     @staticmethod
     def delete(db: Session, parameter_set_id: int) -> None:
          """
          Delete an inactive parameter set (its floor curve goes with it).

          Raises:
               ValueError: If the set is active; another set must be activated first
          """
          parameter_set = ParameterSetService.get(db, parameter_set_id)
          if parameter_set.active:
               raise ValueError(
                    "The active parameter set cannot be deleted; activate another set first"
               )
          db.delete(parameter_set)
          db.flush()
          logger.info("Deleted parameter set %s", parameter_set_id)

     @staticmethod
     def clone(db: Session, parameter_set_id: int, new_name: str) -> PricingParameterSet:
          """
          Copy a parameter set (rates, add-ons, factors and floor curve) under a new name.
          The copy is always inactive.
          """
          original = ParameterSetService.get(db, parameter_set_id)
          _validate_name(new_name)

          data = {field: getattr(original, field) for field in PARAMETER_FIELDS}
          data["name"] = new_name
          overrides = {row.floor: row.percentage for row in original.floor_valorizations}
          return ParameterSetService.create(db, original.development_id, data, overrides)

     @staticmethod
     def floor_curve(db: Session, parameter_set_id: int) -> list[FloorValorization]:
          return (
               db.query(FloorValorization)
               .filter(FloorValorization.parameter_set_id == parameter_set_id)
               .order_by(FloorValorization.floor)
               .all()
          )


def _validate_name(name: Optional[str]) -> None:
     if not name or len(name.strip()) < MIN_NAME_LENGTH:
          raise ValueError(f"Name must have at least {MIN_NAME_LENGTH} characters")
