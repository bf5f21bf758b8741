# schemas/development.py
"""
Pydantic schemas for Development API request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator


class DevelopmentCreate(BaseModel):
     """Schema for creating a development."""
     name: str = Field(..., min_length=3, max_length=255, description="Development name")
     address: Optional[str] = Field(None, max_length=500)
     registration: Optional[str] = Field(None, max_length=100, description="Land registry reference")
     development_type: Optional[str] = Field(None, max_length=100)
     description: Optional[str] = None
     target_gross_vgv: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
     swap_percentage: Optional[Decimal] = Field(None, ge=0, le=100, description="Land swap percentage")

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Residencial Aurora",
                    "address": "Rua das Flores, 100",
                    "development_type": "residencial",
                    "target_gross_vgv": 25000000.00,
                    "swap_percentage": 12.5
               }
          }
     )


class DevelopmentUpdate(BaseModel):
     """Schema for updating a development; only provided fields change."""
     name: Optional[str] = Field(None, min_length=3, max_length=255)
     address: Optional[str] = Field(None, max_length=500)
     registration: Optional[str] = Field(None, max_length=100)
     development_type: Optional[str] = Field(None, max_length=100)
     description: Optional[str] = None
     target_gross_vgv: Optional[Decimal] = Field(None, ge=0, max_digits=15, decimal_places=2)
     swap_percentage: Optional[Decimal] = Field(None, ge=0, le=100)
     active: Optional[bool] = None

     @field_validator("name", "active")
     @classmethod
     def _not_null(cls, value):
          if value is None:
               raise ValueError("may be omitted but not null")
          return value


class DevelopmentResponse(BaseModel):
     """Schema for development response."""
     id: int
     name: str
     address: Optional[str] = None
     registration: Optional[str] = None
     development_type: Optional[str] = None
     description: Optional[str] = None
     target_gross_vgv: Optional[Decimal] = None
     swap_percentage: Optional[Decimal] = None
     active: bool
     created_at: datetime
     updated_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)


class VgvSummaryResponse(BaseModel):
     """Gross sales value of a development, read from stored unit values."""
     development_id: int
     target_gross_vgv: Optional[Decimal] = None
     vgv_total: Decimal
     vgv_available: Decimal
     vgv_reserved: Decimal
     vgv_sold: Decimal
     vgv_unavailable: Decimal
     units_total: int
     units_available: int
     units_reserved: int
     units_sold: int
     units_unavailable: int
