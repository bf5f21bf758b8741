# routers/units.py
"""
Unit API routes: unit records, bulk import hand-off and manual adjustments.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_operator_id, verify_token
from models.unit import UnitStatus
from schemas.adjustment import AdjustmentRequest, AdjustmentResponse, AdjustmentHistoryResponse
from schemas.recalculation import RecalcResultResponse
from schemas.unit import UnitCreate, UnitImportRequest, UnitResponse, UnitUpdate
from services.adjustment_ledger_service import apply_adjustment, list_history
from services.development_service import DevelopmentService
from services.unit_service import UnitService

router = APIRouter(prefix="/api", tags=["units"])


@router.get(
     "/developments/{development_id}/units",
     response_model=List[UnitResponse],
     summary="List units of a development"
)
def list_units(
     development_id: int,
     status: Optional[UnitStatus] = Query(None, description="Filter by status"),
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     DevelopmentService.get(db, development_id)
     return UnitService.list_for_development(db, development_id, status)


@router.post(
     "/developments/{development_id}/units",
     response_model=UnitResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a unit"
)
def create_unit(
     development_id: int,
     body: UnitCreate,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """
     Create a unit. Its value is filled in by the next activation or recalculation.
     """
     try:
          unit = UnitService.create(db, development_id, body)
     except ValueError as exc:
          db.rollback()
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
     db.commit()
     db.refresh(unit)
     return unit


@router.post(
     "/developments/{development_id}/units/import",
     summary="Import already-parsed unit rows"
)
def import_units(
     development_id: int,
     body: UnitImportRequest,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """
     Insert a batch of unit rows. Invalid or duplicate rows are reported and
     skipped. If the development has an active parameter set, all its units
     are repriced afterwards.
     """
     outcome = UnitService.import_units(db, development_id, body.rows)
     db.commit()
     recalculation = outcome["recalculation"]
     return {
          "created": outcome["created"],
          "errors": outcome["errors"],
          "recalculation": RecalcResultResponse.from_result(recalculation) if recalculation else None,
     }


@router.get(
     "/units/{unit_id}",
     response_model=UnitResponse,
     summary="Get unit by ID"
)
def get_unit(
     unit_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return UnitService.get(db, unit_id)


@router.put(
     "/units/{unit_id}",
     response_model=UnitResponse,
     summary="Update unit"
)
def update_unit(
     unit_id: int,
     body: UnitUpdate,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """Only provided fields are updated. The stored value is refreshed by the next recalculation."""
     try:
          unit = UnitService.update(db, unit_id, body.model_dump(exclude_unset=True))
     except ValueError as exc:
          db.rollback()
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
     db.commit()
     db.refresh(unit)
     return unit


@router.delete(
     "/units/{unit_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete unit"
)
def delete_unit(
     unit_id: int,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     UnitService.delete(db, unit_id)
     db.commit()
     return None


@router.post(
     "/units/{unit_id}/adjustment",
     response_model=AdjustmentResponse,
     summary="Apply a manual adjustment"
)
def post_adjustment(
     unit_id: int,
     body: AdjustmentRequest,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """
     Fine-tune a unit by a signed percentage on top of its parameterized value.

     Requires an active parameter set. Returns the value before and after so the
     change can be checked; the change is recorded in the adjustment history.
     """
     result = apply_adjustment(db, unit_id, body.percentage, body.reason, operator_id)
     db.commit()
     return AdjustmentResponse(
          unit_id=unit_id,
          previous_percentage=result.entry.previous_percentage,
          new_percentage=result.entry.new_percentage,
          value_before=result.value_before,
          value_after=result.value_after,
     )


@router.get(
     "/units/{unit_id}/adjustments",
     response_model=List[AdjustmentHistoryResponse],
     summary="Adjustment history of a unit"
)
def get_adjustment_history(
     unit_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """Newest first."""
     return list_history(db, unit_id)
