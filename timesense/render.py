"""
Annotation rendering.

Maps an AnalysisResult onto end-of-line annotations for an editor or any
other front end. Rendering never re-runs analysis and never mutates the
result; visibility is a property of the renderer only.
"""
from __future__ import annotations

import re
from typing import Sequence

from pydantic import BaseModel, Field

from .models import AnalysisResult

PRIORITY_OVERALL = 1000
PRIORITY_FUNCTION = 900
PRIORITY_OPERATION = 100

_HEADER_PATTERNS = tuple(re.compile(p) for p in (
    r"^#\s*define",
    r"^using\s+namespace",
    r"\bint\s+main\s*\(",
    r"\bvoid\s+main\s*\(",
    r"\bvoid\s+solve\s*\(",
    r"\bint\s+solve\s*\(",
    r"^class\s+\w+",
    r"^struct\s+\w+",
))


class DisplayConfig(BaseModel):
    """Look of the annotations."""

    icon: str = Field(default="🧠")
    highlight_group: str = Field(default="Comment")
    overall_group: str = Field(default="DiagnosticInfo")
    function_group: str = Field(default="DiagnosticHint")
    header_scan_limit: int = Field(default=100, ge=1)


class Annotation(BaseModel):
    """Virtual text attached to the end of a source line."""

    line: int = Field(..., ge=1, description="1-indexed source line")
    text: str
    group: str
    priority: int = PRIORITY_OPERATION


def _is_comment_or_empty(trimmed: str) -> bool:
    return trimmed == "" or trimmed.startswith(("//", "/*"))


def find_display_line(lines: Sequence[str], limit: int = 100) -> int:
    """
    Pick the line that carries the overall summary.

    The first ``#include`` wins; otherwise the first header-like line
    (define, using namespace, main/solve, class/struct); otherwise the first
    line of code. Only the first ``limit`` lines are looked at.

    Returns:
        1-indexed line number
    """
    target = 0
    for number, line in enumerate(lines[:limit], start=1):
        trimmed = line.strip()
        if _is_comment_or_empty(trimmed):
            continue
        if re.match(r"^#\s*include", trimmed):
            return number
        if any(p.search(trimmed) for p in _HEADER_PATTERNS):
            return number
        if target == 0:
            target = number
    return target or 1


class Renderer:
    """Builds annotations from a result and tracks whether they are shown."""

    def __init__(self, config: DisplayConfig | None = None):
        self.config = config or DisplayConfig()
        self.visible = True

    def _format(self, complexity) -> str:
        return f"{self.config.icon} {complexity}"

    def _summary(self, time, space) -> str:
        return f"{self.config.icon} Time: {time} | Space: {space}"

    def render(self, result: AnalysisResult, lines: Sequence[str]) -> list[Annotation]:
        """
        Annotations for ``result``; empty while hidden.

        Args:
            result: A finished analysis
            lines: The buffer the result was computed from

        Returns:
            Overall summary, then function summaries, loops and calls
        """
        if not self.visible:
            return []

        lines = list(lines)
        annotations = [
            Annotation(
                line=find_display_line(lines, self.config.header_scan_limit),
                text=self._summary(result.overall_time, result.overall_space),
                group=self.config.overall_group,
                priority=PRIORITY_OVERALL,
            )
        ]

        for function in result.functions:
            annotations.append(Annotation(
                line=function.line,
                text=self._summary(function.time, function.space),
                group=self.config.function_group,
                priority=PRIORITY_FUNCTION,
            ))

        for record in (*result.loops, *result.calls):
            annotations.append(Annotation(
                line=record.line,
                text=self._format(record.effective),
                group=self.config.highlight_group,
                priority=PRIORITY_OPERATION,
            ))

        return annotations

    def toggle(self) -> bool:
        """Flip visibility and return the new state."""
        self.visible = not self.visible
        return self.visible

    def hide(self) -> None:
        self.visible = False

    def show(self) -> None:
        self.visible = True
