# schemas/recalculation.py
"""
Pydantic schemas for activation/recalculation results and impact simulation.
"""
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field


class UnitError(BaseModel):
     unit_id: Optional[int] = None
     identifier: Optional[str] = None
     reason: str


class RecalcResultResponse(BaseModel):
     """
     Outcome of an activation or recalculation.

     failed > 0 or timed_out is a warning: the other units were repriced.
     """
     parameter_set_id: Optional[int] = None
     updated: int
     failed: int
     skipped: int = 0
     timed_out: bool = False
     warning: bool = False
     errors: list[UnitError] = Field(default_factory=list)

     @classmethod
     def from_result(cls, result) -> "RecalcResultResponse":
          return cls(
               parameter_set_id=result.parameter_set_id,
               updated=result.updated,
               failed=result.failed,
               skipped=result.skipped,
               timed_out=result.timed_out,
               warning=result.has_warnings,
               errors=[UnitError(**error.as_dict()) for error in result.errors],
          )


class UnitImpact(BaseModel):
     unit_id: int
     identifier: str
     current_value: Optional[Decimal] = None  # None = never valued
     simulated_value: Decimal
     difference: Decimal
     difference_percentage: Optional[Decimal] = None


class ImpactHighlight(BaseModel):
     identifier: str
     difference_percentage: Decimal


class ImpactResponse(BaseModel):
     """What-if comparison of stored values against a parameter set."""
     parameter_set_id: int
     development_id: int
     units: list[UnitImpact]
     errors: list[UnitError] = Field(default_factory=list)
     unvalued_units: int = 0
     total_current: Decimal
     total_simulated: Decimal
     difference: Decimal
     difference_percentage: Decimal
     biggest_increase: Optional[ImpactHighlight] = None
     biggest_reduction: Optional[ImpactHighlight] = None
