"""Pydantic schemas for error responses."""

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Generic error body."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Human-readable error message")
    redirect: str | None = Field(None, description="Where an interactive client should go next")


class ConflictErrorResponse(ErrorResponse):
    """Response for uniqueness conflicts."""

    field: str | None = Field(None, description="Field that caused the conflict")


class ValidationErrorResponse(ErrorResponse):
    """Response for validation errors."""

    field: str | None = Field(None, description="Field that failed validation")
    code: str | None = Field(None, description="Machine-readable error code")


class BatchFailureDetail(BaseModel):
    id: str
    reason: str


class BatchErrorResponse(ErrorResponse):
    """Response for partially applied batch updates."""

    failed_ids: list[str] = Field(default_factory=list)
    failures: list[BatchFailureDetail] = Field(default_factory=list)
