# models/adjustment_history.py
"""
AdjustmentHistoryEntry model - append-only record of manual fine-tuning.

One row is written each time an operator applies a manual adjustment to a
unit. Rows are never updated or deleted by the application.
"""
from sqlalchemy import Column, Integer, String, Numeric, Float, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from .base import Base


class AdjustmentHistoryEntry(Base):
     """Immutable fine-tuning record: who changed what, and the value it produced."""
     __tablename__ = "adjustment_history"

     id = Column(Integer, primary_key=True, autoincrement=True)
     unit_id = Column(
          Integer,
          ForeignKey("units.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )
     operator_id = Column(String(100), nullable=False)
     previous_percentage = Column(Float, nullable=True)
     new_percentage = Column(Float, nullable=False)
     reason = Column(Text, nullable=True)
     value_before = Column(Numeric(15, 2), nullable=True)  # NULL if the unit was never valued
     value_after = Column(Numeric(15, 2), nullable=False)
     created_at = Column(DateTime, server_default=func.now(), nullable=False)

     # Relationships
     unit = relationship("Unit", back_populates="adjustment_history")

     def __repr__(self):
          return (
               f"<AdjustmentHistoryEntry(id={self.id}, unit_id={self.unit_id}, "
               f"{self.previous_percentage} -> {self.new_percentage})>"
          )
