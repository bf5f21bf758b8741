# services/development_service.py
"""
Development Service - business rules for development records.
"""
import logging

from sqlalchemy.orm import Session

from models import Development, Unit
from services.exceptions import NotFoundError

logger = logging.getLogger(__name__)


DEVELOPMENT_FIELDS = (
     "name",
     "address",
     "registration",
     "development_type",
     "description",
     "target_gross_vgv",
     "swap_percentage",
     "active",
)


class DevelopmentService:
     """Service class for development-related business logic."""

     @staticmethod
     def get(db: Session, development_id: int) -> Development:
          development = db.get(Development, development_id)
          if development is None:
               raise NotFoundError(f"Development with ID {development_id} not found")
          return development

     @staticmethod
     def list_all(db: Session) -> list[Development]:
          return db.query(Development).order_by(Development.name).all()

     @staticmethod
     def create(db: Session, data: dict) -> Development:
          development = Development(
               **{key: value for key, value in data.items() if key in DEVELOPMENT_FIELDS}
          )
          db.add(development)
          db.flush()
          logger.info("Created development %s (%s)", development.id, development.name)
          return development

     @staticmethod
     def update(db: Session, development_id: int, data: dict) -> Development:
          development = DevelopmentService.get(db, development_id)
          for key, value in data.items():
               if key in DEVELOPMENT_FIELDS:
                    setattr(development, key, value)
          db.flush()
          return development

     @staticmethod
     def delete(db: Session, development_id: int) -> None:
          """
          Delete a development and its parameter sets.

          Raises:
               ValueError: If the development still has units
          """
          development = DevelopmentService.get(db, development_id)
          unit_count = db.query(Unit).filter(Unit.development_id == development_id).count()
          if unit_count:
               raise ValueError(
                    f"Development has {unit_count} unit(s); delete them before deleting the development"
               )
          db.delete(development)
          db.flush()
          logger.info("Deleted development %s", development_id)
