"""
Pydantic models for the Timesense API.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from timesense.constraints import ConstraintReport, Constraints
from timesense.models import AnalysisResult
from timesense.render import Annotation

from .config import settings


class AnalyzeRequest(BaseModel):
    """Request payload for code analysis."""
    code: str = Field(..., min_length=1, description="Source code to analyze")
    filename: str = Field(default="untitled", max_length=255, description="Current filename")
    language: str = Field(default="auto", max_length=50, description="Programming language (auto for detection)")
    constraints: Optional[Constraints] = Field(default=None, description="Problem size and limits")

    @field_validator("code")
    @classmethod
    def validate_code(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Code cannot be empty or whitespace only")
        if len(v) > settings.MAX_CODE_LENGTH:
            raise ValueError(f"Code exceeds {settings.MAX_CODE_LENGTH} characters")
        return v

    @field_validator("filename")
    @classmethod
    def validate_filename(cls, v: str) -> str:
        v = v.strip().replace("\x00", "")
        return v or "untitled"


class AnalyzeResponse(BaseModel):
    """API response wrapper."""
    success: bool = Field(default=True)
    language: str = Field(..., description="Detected language")
    result: AnalysisResult
    summary: str = Field(..., description="One-line notification text")
    annotations: list[Annotation] = Field(default_factory=list)
    constraints: Optional[ConstraintReport] = Field(default=None)
    warnings: list[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    """Error response."""
    success: bool = Field(default=False)
    error: str = Field(..., description="Error message")
    details: Optional[str] = Field(default=None, description="Additional error details")
