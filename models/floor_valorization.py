# models/floor_valorization.py
from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from .base import Base


# Floors covered by every parameter set's curve (inclusive)
MIN_FLOOR = 0
MAX_FLOOR = 20


class FloorValorization(Base):
     """
     Percentage premium/discount for one floor under one parameter set.
     Rows are regenerated wholesale (21 per set), never edited one by one.
     """
     __tablename__ = "floor_valorizations"
     __table_args__ = (
          UniqueConstraint("parameter_set_id", "floor", name="uq_floor_valorizations_set_floor"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     parameter_set_id = Column(
          Integer,
          ForeignKey("pricing_parameter_sets.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     floor = Column(Integer, nullable=False)
     percentage = Column(Float, default=0.0, nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     parameter_set = relationship("PricingParameterSet", back_populates="floor_valorizations")

     def __repr__(self):
          return f"<FloorValorization(parameter_set_id={self.parameter_set_id}, floor={self.floor}, percentage={self.percentage})>"
