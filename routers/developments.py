# routers/developments.py
"""
Development API routes.

CRUD for developments plus the two development-wide operations:
- GET  /{id}/vgv          gross sales value from stored unit values
- POST /{id}/recalculate  reprice every unit under the active parameter set
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_operator_id, verify_token
from schemas.development import (
     DevelopmentCreate,
     DevelopmentUpdate,
     DevelopmentResponse,
     VgvSummaryResponse,
)
from schemas.recalculation import RecalcResultResponse
from services.development_service import DevelopmentService
from services.recalculation_service import recalculate_development
from services.reporting_service import calculate_vgv

router = APIRouter(prefix="/api/developments", tags=["developments"])


@router.post(
     "",
     response_model=DevelopmentResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a development"
)
def create_development(
     body: DevelopmentCreate,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     development = DevelopmentService.create(db, body.model_dump())
     db.commit()
     db.refresh(development)
     return development


@router.get(
     "",
     response_model=List[DevelopmentResponse],
     summary="List developments"
)
def list_developments(
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return DevelopmentService.list_all(db)


@router.get(
     "/{development_id}",
     response_model=DevelopmentResponse,
     summary="Get development by ID"
)
def get_development(
     development_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return DevelopmentService.get(db, development_id)


@router.put(
     "/{development_id}",
     response_model=DevelopmentResponse,
     summary="Update development"
)
def update_development(
     development_id: int,
     body: DevelopmentUpdate,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """Only provided fields are updated."""
     development = DevelopmentService.update(db, development_id, body.model_dump(exclude_unset=True))
     db.commit()
     db.refresh(development)
     return development


@router.delete(
     "/{development_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete development"
)
def delete_development(
     development_id: int,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """
     Delete a development and its parameter sets.
     Refused while the development still has units.
     """
     try:
          DevelopmentService.delete(db, development_id)
     except ValueError as exc:
          db.rollback()
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
     db.commit()
     return None


@router.get(
     "/{development_id}/vgv",
     response_model=VgvSummaryResponse,
     summary="Gross sales value (VGV) summary"
)
def get_development_vgv(
     development_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """
     Total VGV and VGV / unit counts by status.
     Reads stored unit values only; run a recalculation to refresh them.
     """
     return calculate_vgv(db, development_id)


@router.post(
     "/{development_id}/recalculate",
     response_model=RecalcResultResponse,
     summary="Reprice all units under the active parameter set"
)
def recalculate(
     development_id: int,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """
     Revalue every unit of the development with its active parameter set.

     Units that fail are listed in **errors**; the rest are still repriced
     (**warning** is true in that case).
     """
     result = recalculate_development(db, development_id)
     return RecalcResultResponse.from_result(result)
