# routers/parameters.py
"""
Pricing parameter set API routes.

- Sets are listed/created under their development
- Activation makes a set the only active one of its development and reprices
  every unit; per-unit failures come back as a warning, not an error
- The impact endpoint simulates a set against the stored values without writing
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_session
from dependencies import get_operator_id, verify_token
from schemas.parameter_set import (
     CloneRequest,
     FloorCurveRequest,
     FloorValorizationResponse,
     ParameterSetCreate,
     ParameterSetResponse,
     ParameterSetUpdate,
     floor_overrides,
)
from schemas.recalculation import ImpactResponse, RecalcResultResponse
from services.development_service import DevelopmentService
from services.parameter_service import ParameterSetService, regenerate_floor_curve
from services.recalculation_service import activate_and_recalculate
from services.reporting_service import simulate_parameter_set

router = APIRouter(prefix="/api", tags=["parameters"])


@router.get(
     "/developments/{development_id}/parameters",
     response_model=List[ParameterSetResponse],
     summary="List parameter sets of a development"
)
def list_parameter_sets(
     development_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     DevelopmentService.get(db, development_id)
     return ParameterSetService.list_for_development(db, development_id)


@router.get(
     "/developments/{development_id}/parameters/active",
     response_model=ParameterSetResponse,
     summary="Get the active parameter set of a development"
)
def get_active_parameter_set(
     development_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     DevelopmentService.get(db, development_id)
     parameter_set = ParameterSetService.get_active(db, development_id)
     if parameter_set is None:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail="No active pricing parameter set for this development"
          )
     return parameter_set


@router.post(
     "/developments/{development_id}/parameters",
     response_model=ParameterSetResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a parameter set"
)
def create_parameter_set(
     development_id: int,
     body: ParameterSetCreate,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """
     Create an inactive parameter set. The floor curve always holds floors 0-20;
     floors missing from **floor_curve** get 0%.
     """
     try:
          parameter_set = ParameterSetService.create(
               db,
               development_id,
               body.model_dump(exclude={"floor_curve"}),
               floor_overrides(body.floor_curve),
          )
     except ValueError as exc:
          db.rollback()
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
     db.commit()
     return parameter_set


@router.get(
     "/parameters/{parameter_set_id}",
     response_model=ParameterSetResponse,
     summary="Get parameter set by ID"
)
def get_parameter_set(
     parameter_set_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     return ParameterSetService.get(db, parameter_set_id)


@router.put(
     "/parameters/{parameter_set_id}",
     response_model=ParameterSetResponse,
     summary="Update parameter set"
)
def update_parameter_set(
     parameter_set_id: int,
     body: ParameterSetUpdate,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """
     Update rates, add-ons and factors. Sending **floor_curve** regenerates all
     21 floors. Stored unit values change only when the set is (re)activated or
     the development is recalculated.
     """
     try:
          parameter_set = ParameterSetService.update(
               db,
               parameter_set_id,
               body.model_dump(exclude_unset=True, exclude={"floor_curve"}),
               floor_overrides(body.floor_curve),
          )
     except ValueError as exc:
          db.rollback()
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
     db.commit()
     return parameter_set


@router.delete(
     "/parameters/{parameter_set_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete parameter set"
)
def delete_parameter_set(
     parameter_set_id: int,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """Delete an inactive parameter set. The active set must be replaced first."""
     try:
          ParameterSetService.delete(db, parameter_set_id)
     except ValueError as exc:
          db.rollback()
          raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
     db.commit()
     return None


@router.post(
     "/parameters/{parameter_set_id}/clone",
     response_model=ParameterSetResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Clone parameter set"
)
def clone_parameter_set(
     parameter_set_id: int,
     body: CloneRequest,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """Copy rates, add-ons, factors and floor curve into a new inactive set."""
     try:
          parameter_set = ParameterSetService.clone(db, parameter_set_id, body.name)
     except ValueError as exc:
          db.rollback()
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
     db.commit()
     return parameter_set


@router.put(
     "/parameters/{parameter_set_id}/floor-curve",
     response_model=List[FloorValorizationResponse],
     summary="Regenerate the floor curve"
)
def put_floor_curve(
     parameter_set_id: int,
     body: FloorCurveRequest,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """
     Replace the floor curve: all rows are deleted and floors 0-20 re-inserted
     (listed floors take their percentage, the others 0%).
     """
     try:
          rows = regenerate_floor_curve(db, parameter_set_id, floor_overrides(body.floors))
     except ValueError as exc:
          db.rollback()
          raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
     db.commit()
     return rows


@router.post(
     "/parameters/{parameter_set_id}/activate",
     response_model=RecalcResultResponse,
     summary="Activate parameter set and reprice all units"
)
def activate_parameter_set(
     parameter_set_id: int,
     db: Session = Depends(get_session),
     operator_id: str = Depends(get_operator_id)
):
     """
     Make this the only active set of its development, then revalue every unit.

     - **updated**: units repriced
     - **failed** / **errors**: units that could not be valued (the rest are still saved)
     - **warning**: true when anything failed or the batch timed out
     """
     parameter_set = ParameterSetService.get(db, parameter_set_id)
     result = activate_and_recalculate(
          db,
          parameter_set.development_id,
          parameter_set.id,
          operator_id,
     )
     return RecalcResultResponse.from_result(result)


@router.get(
     "/parameters/{parameter_set_id}/impact",
     response_model=ImpactResponse,
     summary="Simulate the impact of a parameter set"
)
def get_parameter_set_impact(
     parameter_set_id: int,
     db: Session = Depends(get_session),
     token: dict = Depends(verify_token)
):
     """Compare stored unit values with the values this set would produce. Read-only."""
     return simulate_parameter_set(db, parameter_set_id)
