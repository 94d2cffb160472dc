"""Shared response envelopes."""

from typing import List

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str
    message: str
    fields: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    success: bool = False
    error: ErrorDetail


class HealthResponse(BaseModel):
    success: bool = True
    status: str = "OK"


class SeedResponse(BaseModel):
    success: bool = True
    seeded: bool
    count: int
