# schemas/parameter_set.py
"""
Pydantic schemas for pricing parameter sets and floor curves.
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

from models.floor_valorization import MIN_FLOOR, MAX_FLOOR


class FloorPercentage(BaseModel):
     """Percentage premium (positive) or discount (negative) for a floor."""
     floor: int = Field(..., ge=MIN_FLOOR, le=MAX_FLOOR)
     percentage: float = Field(0.0, description="Signed percentage, e.g. 8 for +8%")


def floor_overrides(curve: Optional[list[FloorPercentage]]) -> Optional[dict[int, float]]:
     """Turn a request curve into {floor: percentage}; None means 'leave the curve alone'."""
     if curve is None:
          return None
     return {item.floor: item.percentage for item in curve}


class ParameterSetFields(BaseModel):
     description: Optional[str] = None

     # Per-m² rates (None = type not priced)
     rate_studio: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     rate_apartment: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     rate_commercial: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     rate_garden: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)


class ParameterSetCreate(ParameterSetFields):
     """Schema for creating a parameter set. New sets start inactive."""
     name: str = Field(..., min_length=3, max_length=255)

     # Flat add-ons (signed)
     additional_suite: Decimal = Field(Decimal("0"), max_digits=12, decimal_places=2)
     additional_simple_parking: Decimal = Field(Decimal("0"), max_digits=12, decimal_places=2)
     additional_double_parking: Decimal = Field(Decimal("0"), max_digits=12, decimal_places=2)
     additional_moto_parking: Decimal = Field(Decimal("0"), max_digits=12, decimal_places=2)
     additional_storage_box: Decimal = Field(Decimal("0"), max_digits=12, decimal_places=2)

     # Orientation factors (1.0 = neutral, 0 allowed)
     factor_north: Decimal = Field(Decimal("1"), ge=0, max_digits=6, decimal_places=4)
     factor_south: Decimal = Field(Decimal("1"), ge=0, max_digits=6, decimal_places=4)
     factor_east: Decimal = Field(Decimal("1"), ge=0, max_digits=6, decimal_places=4)
     factor_west: Decimal = Field(Decimal("1"), ge=0, max_digits=6, decimal_places=4)
     factor_northeast: Decimal = Field(Decimal("1"), ge=0, max_digits=6, decimal_places=4)
     factor_northwest: Decimal = Field(Decimal("1"), ge=0, max_digits=6, decimal_places=4)
     factor_southeast: Decimal = Field(Decimal("1"), ge=0, max_digits=6, decimal_places=4)
     factor_southwest: Decimal = Field(Decimal("1"), ge=0, max_digits=6, decimal_places=4)

     floor_curve: Optional[list[FloorPercentage]] = Field(
          None, description="Floor valorizations; unlisted floors get 0%"
     )

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "name": "Tabela Lançamento",
                    "rate_studio": 5000.00,
                    "rate_apartment": 6000.00,
                    "additional_suite": 15000.00,
                    "additional_simple_parking": 8000.00,
                    "factor_north": 1.05,
                    "floor_curve": [{"floor": 10, "percentage": 8}]
               }
          }
     )


class ParameterSetUpdate(ParameterSetFields):
     """Schema for updating a parameter set; a floor_curve regenerates all 21 floors."""
     name: Optional[str] = Field(None, min_length=3, max_length=255)

     additional_suite: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
     additional_simple_parking: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
     additional_double_parking: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
     additional_moto_parking: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)
     additional_storage_box: Optional[Decimal] = Field(None, max_digits=12, decimal_places=2)

     factor_north: Optional[Decimal] = Field(None, ge=0, max_digits=6, decimal_places=4)
     factor_south: Optional[Decimal] = Field(None, ge=0, max_digits=6, decimal_places=4)
     factor_east: Optional[Decimal] = Field(None, ge=0, max_digits=6, decimal_places=4)
     factor_west: Optional[Decimal] = Field(None, ge=0, max_digits=6, decimal_places=4)
     factor_northeast: Optional[Decimal] = Field(None, ge=0, max_digits=6, decimal_places=4)
     factor_northwest: Optional[Decimal] = Field(None, ge=0, max_digits=6, decimal_places=4)
     factor_southeast: Optional[Decimal] = Field(None, ge=0, max_digits=6, decimal_places=4)
     factor_southwest: Optional[Decimal] = Field(None, ge=0, max_digits=6, decimal_places=4)

     floor_curve: Optional[list[FloorPercentage]] = None

     @field_validator(
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
     @classmethod
     def _not_null(cls, value):
          if value is None:
               raise ValueError("may be omitted but not null")
          return value


class CloneRequest(BaseModel):
     name: str = Field(..., min_length=3, max_length=255, description="Name of the copy")


class FloorCurveRequest(BaseModel):
     """Full replacement of a floor curve."""
     floors: list[FloorPercentage] = Field(default_factory=list)


class FloorValorizationResponse(BaseModel):
     floor: int
     percentage: float

     model_config = ConfigDict(from_attributes=True)


class ParameterSetResponse(BaseModel):
     """Schema for parameter set response."""
     id: int
     development_id: int
     name: str
     description: Optional[str] = None
     rate_studio: Optional[Decimal] = None
     rate_apartment: Optional[Decimal] = None
     rate_commercial: Optional[Decimal] = None
     rate_garden: Optional[Decimal] = None
     additional_suite: Decimal
     additional_simple_parking: Decimal
     additional_double_parking: Decimal
     additional_moto_parking: Decimal
     additional_storage_box: Decimal
     factor_north: Decimal
     factor_south: Decimal
     factor_east: Decimal
     factor_west: Decimal
     factor_northeast: Decimal
     factor_northwest: Decimal
     factor_southeast: Decimal
     factor_southwest: Decimal
     active: bool
     created_at: datetime
     updated_at: Optional[datetime] = None
     floor_valorizations: list[FloorValorizationResponse] = Field(default_factory=list)

     model_config = ConfigDict(from_attributes=True)
