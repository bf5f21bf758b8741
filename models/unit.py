# models/unit.py
import enum
from sqlalchemy import (
     Column, Integer, String, Numeric, Float, Text, DateTime, ForeignKey, Enum,
     CheckConstraint, UniqueConstraint, func
)
from sqlalchemy.orm import relationship
from .base import Base, enum_values


class UnitStatus(str, enum.Enum):
     """Commercial lifecycle of a unit."""
     AVAILABLE = "disponivel"
     RESERVED = "reservado"
     SOLD = "vendido"
     UNAVAILABLE = "indisponivel"


class UnitType(str, enum.Enum):
     """Unit types that carry a per-m² rate in a parameter set."""
     STUDIO = "studio"
     APARTMENT = "apartamento"
     COMMERCIAL = "comercial"
     GARDEN = "garden"


class SolarOrientation(str, enum.Enum):
     """The eight compass points a unit can face."""
     NORTH = "norte"
     SOUTH = "sul"
     EAST = "leste"
     WEST = "oeste"
     NORTHEAST = "nordeste"
     NORTHWEST = "noroeste"
     SOUTHEAST = "sudeste"
     SOUTHWEST = "sudoeste"


class Unit(Base):
     """
     Unit model - physical and commercial attributes of one sellable unit.

     unit_type and solar_orientation are stored as plain strings so that
     rows written by importers with unexpected values still load; the
     valuation snapshot validates them.
     """
     __tablename__ = "units"
     __table_args__ = (
          UniqueConstraint("development_id", "identifier", name="uq_units_development_identifier"),
          CheckConstraint("private_area > 0", name="ck_units_private_area_positive"),
          CheckConstraint("total_area >= private_area", name="ck_units_total_area_min"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     development_id = Column(
          Integer,
          ForeignKey("developments.id", ondelete="RESTRICT"),  # Units block development deletion
          nullable=False,
          index=True
     )
     identifier = Column(String(50), nullable=False)
     unit_type = Column(String(50), nullable=False)

     # Areas (m²)
     private_area = Column(Numeric(10, 2), nullable=False)
     total_area = Column(Numeric(10, 2), nullable=False)

     floor = Column(Integer, nullable=True)
     bedrooms = Column(Integer, nullable=True)
     suites = Column(Integer, nullable=True)

     # Parking slots and storage
     parking_simple = Column(Integer, nullable=True)
     parking_double = Column(Integer, nullable=True)
     parking_moto = Column(Integer, nullable=True)
     storage_boxes = Column(Integer, nullable=True)

     solar_orientation = Column(String(20), nullable=True)
     status = Column(
          Enum(UnitStatus, name="unit_status", create_constraint=True, values_callable=enum_values),
          default=UnitStatus.AVAILABLE,
          nullable=False,
          index=True
     )

     # Fine-tuning
     manual_adjustment_percentage = Column(Float, nullable=True)
     manual_adjustment_reason = Column(Text, nullable=True)

     # Last value written by the recalculation path
     computed_value = Column(Numeric(15, 2), nullable=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     development = relationship("Development", back_populates="units")
     adjustment_history = relationship(
          "AdjustmentHistoryEntry",
          back_populates="unit",
          cascade="all, delete-orphan",
          order_by="AdjustmentHistoryEntry.id"
     )

     def __repr__(self):
          return f"<Unit(id={self.id}, identifier='{self.identifier}', status='{self.status.value}')>"
