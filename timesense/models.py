"""
Data models for complexity analysis results.

Frozen Pydantic models; a result is owned by the analysis call that built it.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .lattice import Complexity, ComplexityClass


class LoopRecord(BaseModel):
    """A recognised loop header."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(..., ge=1, description="1-indexed source line")
    kind: Literal["for", "while", "do"]
    base: Complexity = Field(..., description="Complexity of this loop alone")
    effective: Complexity = Field(..., description="Complexity after nesting multiplication")
    nesting_level: int = Field(..., ge=0)


class CallRecord(BaseModel):
    """A recognised library or algorithm call."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(..., ge=1)
    name: str
    base: Complexity
    effective: Complexity
    nesting_level: int = Field(..., ge=0)


class FunctionScope(BaseModel):
    """Per-function summary, finalised when its braces close."""

    model_config = ConfigDict(frozen=True)

    name: str
    line: int = Field(..., ge=1, description="Header line")
    entry_depth: int = Field(..., ge=0, description="Brace depth inside the body")
    end_line: int = Field(..., ge=1)
    time: Complexity = ComplexityClass.CONST
    space: Complexity = ComplexityClass.CONST


class SpaceItem(BaseModel):
    """One container or array allocation."""

    model_config = ConfigDict(frozen=True)

    line: int = Field(..., ge=1)
    name: str
    structure: Literal["container", "array"]
    complexity: Complexity


class AnalysisResult(BaseModel):
    """Everything one analysis pass found."""

    model_config = ConfigDict(frozen=True)

    loops: tuple[LoopRecord, ...] = ()
    calls: tuple[CallRecord, ...] = ()
    functions: tuple[FunctionScope, ...] = ()
    space_items: tuple[SpaceItem, ...] = ()
    overall_time: Complexity = ComplexityClass.CONST
    overall_space: Complexity = ComplexityClass.CONST

    @property
    def loop_count(self) -> int:
        return len(self.loops)

    def summary(self) -> str:
        return (
            f"Time: {self.overall_time} | Space: {self.overall_space} | "
            f"{self.loop_count} loops analyzed"
        )
