# models/pricing_parameter_set.py
"""
PricingParameterSet model - a named bundle of rates, add-ons and orientation
factors used to value every unit of a development.

At most one set per development is active. The swap is done by the
recalculation service inside one transaction; the partial unique index below
backs it up on engines that support filtered indexes.
"""
from decimal import Decimal

from sqlalchemy import (
     Column, Integer, String, Numeric, Text, Boolean, DateTime, ForeignKey, Index,
     text, func
)
from sqlalchemy.orm import relationship
from .base import Base


ORIENTATION_FACTOR_COLUMNS = {
     "norte": "factor_north",
     "sul": "factor_south",
     "leste": "factor_east",
     "oeste": "factor_west",
     "nordeste": "factor_northeast",
     "noroeste": "factor_northwest",
     "sudeste": "factor_southeast",
     "sudoeste": "factor_southwest",
}

RATE_COLUMNS = {
     "studio": "rate_studio",
     "apartamento": "rate_apartment",
     "apartment": "rate_apartment",
     "comercial": "rate_commercial",
     "commercial": "rate_commercial",
     "garden": "rate_garden",
}


class PricingParameterSet(Base):
     """
     Pricing parameters for one development.
     A set that is not active is simply inactive and stays editable and clonable.
     """
     __tablename__ = "pricing_parameter_sets"
     __table_args__ = (
          Index(
               "uq_pricing_parameter_sets_one_active",
               "development_id",
               unique=True,
               sqlite_where=text("active = 1"),
               postgresql_where=text("active"),
          ).ddl_if(dialect=("sqlite", "postgresql")),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     development_id = Column(
          Integer,
          ForeignKey("developments.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     name = Column(String(255), nullable=False)
     description = Column(Text, nullable=True)

     # Per-m² rates by unit type (NULL = type not priced)
     rate_studio = Column(Numeric(12, 2), nullable=True)
     rate_apartment = Column(Numeric(12, 2), nullable=True)
     rate_commercial = Column(Numeric(12, 2), nullable=True)
     rate_garden = Column(Numeric(12, 2), nullable=True)

     # Flat add-ons
     additional_suite = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
     additional_simple_parking = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
     additional_double_parking = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
     additional_moto_parking = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)
     additional_storage_box = Column(Numeric(12, 2), default=Decimal("0"), nullable=False)

     # Solar orientation multipliers (1.0 = neutral)
     factor_north = Column(Numeric(6, 4), default=Decimal("1"), nullable=False)
     factor_south = Column(Numeric(6, 4), default=Decimal("1"), nullable=False)
     factor_east = Column(Numeric(6, 4), default=Decimal("1"), nullable=False)
     factor_west = Column(Numeric(6, 4), default=Decimal("1"), nullable=False)
     factor_northeast = Column(Numeric(6, 4), default=Decimal("1"), nullable=False)
     factor_northwest = Column(Numeric(6, 4), default=Decimal("1"), nullable=False)
     factor_southeast = Column(Numeric(6, 4), default=Decimal("1"), nullable=False)
     factor_southwest = Column(Numeric(6, 4), default=Decimal("1"), nullable=False)

     active = Column(Boolean, default=False, nullable=False, index=True)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     development = relationship("Development", back_populates="parameter_sets")
     floor_valorizations = relationship(
          "FloorValorization",
          back_populates="parameter_set",
          cascade="all, delete-orphan",
          order_by="FloorValorization.floor"
     )

     def __repr__(self):
          return f"<PricingParameterSet(id={self.id}, name='{self.name}', active={self.active})>"
