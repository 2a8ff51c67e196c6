"""Registration wizard helper routes."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ..registration import REGISTRATION_STEPS, TOTAL_STEPS, validate_step
from ..schemas import RegistrationStepResponse, StepValidationRequest, StepValidationResponse

router = APIRouter(prefix="/registration", tags=["registration"])


@router.get("/steps", response_model=list[RegistrationStepResponse])
async def list_steps_endpoint() -> list[RegistrationStepResponse]:
    return [
        RegistrationStepResponse(number=step.number, title=step.title, description=step.description)
        for step in REGISTRATION_STEPS
    ]


@router.post("/steps/{step}/validate", response_model=StepValidationResponse)
async def validate_step_endpoint(step: int, payload: StepValidationRequest) -> StepValidationResponse:
    """Check one wizard step; ``next_step`` is set only when the step passes."""

    try:
        errors = validate_step(step, payload.data)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc

    valid = not errors
    next_step = min(step + 1, TOTAL_STEPS) if valid and step < TOTAL_STEPS else None
    return StepValidationResponse(step=step, valid=valid, errors=errors, next_step=next_step)


__all__ = ["router"]
