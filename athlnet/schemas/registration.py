"""Schemas for the registration wizard helper endpoints."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class RegistrationStepResponse(BaseModel):
    number: int
    title: str
    description: str


class StepValidationRequest(BaseModel):
    data: dict[str, Any] = Field(default_factory=dict)


class StepValidationResponse(BaseModel):
    step: int
    valid: bool
    errors: dict[str, str] = Field(default_factory=dict)
    next_step: int | None = None


__all__ = ["RegistrationStepResponse", "StepValidationRequest", "StepValidationResponse"]
