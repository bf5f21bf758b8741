# schemas/adjustment.py
"""
Pydantic schemas for manual adjustments (fine-tuning).
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class AdjustmentRequest(BaseModel):
     """Request body for POST /units/{id}/adjustment."""
     percentage: float = Field(..., gt=-100, description="Signed percentage on top of the parameterized value")
     reason: Optional[str] = Field(None, max_length=1000)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "percentage": -5,
                    "reason": "Vista parcialmente obstruída"
               }
          }
     )


class AdjustmentResponse(BaseModel):
     """Before/after values so the operator can sanity-check the effect."""
     unit_id: int
     previous_percentage: Optional[float] = None
     new_percentage: float
     value_before: Optional[Decimal] = None
     value_after: Decimal


class AdjustmentHistoryResponse(BaseModel):
     id: int
     unit_id: int
     operator_id: str
     previous_percentage: Optional[float] = None
     new_percentage: float
     reason: Optional[str] = None
     value_before: Optional[Decimal] = None
     value_after: Decimal
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)
