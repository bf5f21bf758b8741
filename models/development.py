# models/development.py
from sqlalchemy import Column, Integer, String, Numeric, Text, Boolean, DateTime, func
from sqlalchemy.orm import relationship
from .base import Base


class Development(Base):
     """
     Development model - a real-estate project whose units are priced together.
     Owns its units and its pricing parameter sets.
     """
     __tablename__ = "developments"

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(String(255), nullable=False)
     address = Column(String(500), nullable=True)
     registration = Column(String(100), nullable=True)
     development_type = Column(String(100), nullable=True)
     description = Column(Text, nullable=True)

     # Commercial targets
     target_gross_vgv = Column(Numeric(15, 2), nullable=True)
     swap_percentage = Column(Numeric(5, 2), nullable=True)

     active = Column(Boolean, default=True, nullable=False)

     # Timestamps
     created_at = Column(DateTime, server_default=func.now(), nullable=False)
     updated_at = Column(DateTime, onupdate=func.now(), nullable=True)

     # Relationships
     units = relationship("Unit", back_populates="development")
     parameter_sets = relationship(
          "PricingParameterSet",
          back_populates="development",
          cascade="all, delete-orphan"
     )

     def __repr__(self):
          return f"<Development(id={self.id}, name='{self.name}')>"
