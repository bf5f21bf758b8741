# schemas/unit.py
"""
Pydantic schemas for Unit API request/response validation.

UnitCreate is also the contract for bulk imports: importers map external
rows onto it before handing them to UnitService.import_units.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from models.unit import SolarOrientation, UnitStatus


class UnitBase(BaseModel):
     floor: Optional[int] = Field(None, description="Floor index (0 = ground)")
     bedrooms: Optional[int] = Field(None, ge=0)
     suites: Optional[int] = Field(None, ge=0)
     parking_simple: Optional[int] = Field(None, ge=0)
     parking_double: Optional[int] = Field(None, ge=0)
     parking_moto: Optional[int] = Field(None, ge=0)
     storage_boxes: Optional[int] = Field(None, ge=0)
     solar_orientation: Optional[SolarOrientation] = None

     @field_validator("solar_orientation", mode="before")
     @classmethod
     def _blank_orientation_is_unset(cls, value):
          if isinstance(value, str):
               value = value.strip().lower()
               return value or None
          return value


class UnitCreate(UnitBase):
     """Schema for creating a unit (form or import row)."""
     identifier: str = Field(..., min_length=1, max_length=50, description="Unique within the development")
     unit_type: str = Field(..., min_length=1, max_length=50, description="studio, apartamento, comercial, garden, ...")
     private_area: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2, description="Private area in m²")
     total_area: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2, description="Defaults to private area")
     status: UnitStatus = Field(default=UnitStatus.AVAILABLE)

     @field_validator("identifier", "unit_type")
     @classmethod
     def _strip(cls, value: str) -> str:
          value = value.strip()
          if not value:
               raise ValueError("must not be blank")
          return value

     @model_validator(mode="after")
     def _total_area_covers_private_area(self):
          if self.total_area is None:
               self.total_area = self.private_area
          elif self.total_area < self.private_area:
               raise ValueError("total_area must be greater than or equal to private_area")
          return self

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "identifier": "A-1002",
                    "unit_type": "apartamento",
                    "private_area": 70.0,
                    "floor": 10,
                    "bedrooms": 2,
                    "suites": 1,
                    "parking_simple": 2,
                    "solar_orientation": "norte",
                    "status": "disponivel"
               }
          }
     )


class UnitUpdate(UnitBase):
     """Schema for updating a unit; only provided fields change. Values are repriced on recalculation."""
     identifier: Optional[str] = Field(None, min_length=1, max_length=50)
     unit_type: Optional[str] = Field(None, min_length=1, max_length=50)
     private_area: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
     total_area: Optional[Decimal] = Field(None, gt=0, max_digits=10, decimal_places=2)
     status: Optional[UnitStatus] = None

     @field_validator("identifier", "unit_type", "private_area", "total_area", "status")
     @classmethod
     def _not_null(cls, value):
          if value is None:
               raise ValueError("may be omitted but not null")
          return value


class UnitImportRequest(BaseModel):
     """Already-parsed rows handed over by an importer."""
     rows: list[dict] = Field(..., min_length=1)


class UnitImportError(BaseModel):
     row: int
     identifier: Optional[str] = None
     message: str


class UnitResponse(BaseModel):
     """Schema for unit response."""
     id: int
     development_id: int
     identifier: str
     unit_type: str
     private_area: Decimal
     total_area: Decimal
     floor: Optional[int] = None
     bedrooms: Optional[int] = None
     suites: Optional[int] = None
     parking_simple: Optional[int] = None
     parking_double: Optional[int] = None
     parking_moto: Optional[int] = None
     storage_boxes: Optional[int] = None
     solar_orientation: Optional[str] = None
     status: UnitStatus
     manual_adjustment_percentage: Optional[float] = None
     manual_adjustment_reason: Optional[str] = None
     computed_value: Optional[Decimal] = None
     created_at: datetime
     updated_at: Optional[datetime] = None

     model_config = ConfigDict(from_attributes=True)
