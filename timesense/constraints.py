"""
Constraint checking.

Turns the overall complexity classes into rough operation and memory
estimates for a concrete problem size and flags results that will not fit
the time or memory limit.
"""
from __future__ import annotations

import math
from typing import Callable, Optional

from pydantic import BaseModel, Field

from .lattice import Complexity, ComplexityClass, CompoundClass

C = ComplexityClass

_GROWTH: dict[ComplexityClass, Callable[[float], float]] = {
    C.CONST: lambda n: 1.0,
    C.INVERSE_ACKERMANN: lambda n: 4.0,
    C.LOG: lambda n: math.log2(n),
    C.LOG_SQUARED: lambda n: math.log2(n) ** 2,
    C.SQRT: lambda n: math.sqrt(n),
    C.STRING_LENGTH: lambda n: n,
    C.LINEAR: lambda n: n,
    C.V_PLUS_E: lambda n: 2 * n,
    C.N_LOG_LOG_N: lambda n: n * math.log2(max(math.log2(n), 2.0)),
    C.LINEARITHMIC: lambda n: n * math.log2(n),
    C.E_LOG_V: lambda n: n * math.log2(n),
    C.N_SQRT_N: lambda n: n * math.sqrt(n),
    C.QUADRATIC: lambda n: n ** 2,
    C.V_TIMES_E: lambda n: n ** 2,
    C.QUADRATIC_LOG: lambda n: n ** 2 * math.log2(n),
    C.CUBIC: lambda n: n ** 3,
    C.EXPONENTIAL: lambda n: math.ldexp(1.0, int(n)),
    C.FACTORIAL: lambda n: math.exp(math.lgamma(n + 1)),
}


class Constraints(BaseModel):
    """Problem constraints supplied by the user."""

    n: int = Field(..., ge=1, description="Problem size")
    time_limit_ms: Optional[float] = Field(default=None, gt=0)
    memory_limit_mb: Optional[float] = Field(default=None, gt=0)


class Thresholds(BaseModel):
    """Throughput and element size used by the estimates."""

    time_warning_ops: float = Field(default=1e8, gt=0, description="Operations per second")
    bytes_per_element: int = Field(default=4, ge=1)


class ConstraintReport(BaseModel):
    operations: float
    max_operations: Optional[float] = None
    memory_mb: float
    memory_limit_mb: Optional[float] = None
    warnings: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings


def estimate_operations(cls: Complexity, n: int) -> float:
    """
    Evaluate the growth function of ``cls`` at ``n``.

    Graph classes take V = E = n. Compound classes multiply their parts.
    Results too large for a float saturate to infinity.
    """
    size = float(max(n, 2))
    try:
        if isinstance(cls, CompoundClass):
            return estimate_operations(cls.left, n) * estimate_operations(cls.right, n)
        return float(_GROWTH[cls](size))
    except OverflowError:
        return math.inf


def check_constraints(
    time: Complexity,
    space: Complexity,
    constraints: Constraints,
    thresholds: Optional[Thresholds] = None,
) -> ConstraintReport:
    """
    Compare the overall classes against the problem limits.

    Args:
        time: Overall time class
        space: Overall space class
        constraints: Problem size and limits
        thresholds: Throughput and element size

    Returns:
        ConstraintReport with estimates and any warnings
    """
    thresholds = thresholds or Thresholds()
    warnings = []

    operations = estimate_operations(time, constraints.n)
    max_operations = None
    if constraints.time_limit_ms is not None:
        max_operations = (constraints.time_limit_ms / 1000) * thresholds.time_warning_ops
        if operations > max_operations:
            warnings.append(f"Time: ~{operations:.2e} ops (limit ~{max_operations:.2e})")

    elements = estimate_operations(space, constraints.n)
    memory_mb = elements * thresholds.bytes_per_element / (1024 * 1024)
    memory_limit = constraints.memory_limit_mb
    if memory_limit is not None and memory_mb > memory_limit:
        warnings.append(f"Space: ~{memory_mb:.0f} MB (limit {memory_limit:.0f} MB)")

    return ConstraintReport(
        operations=operations,
        max_operations=max_operations,
        memory_mb=memory_mb,
        memory_limit_mb=memory_limit,
        warnings=warnings,
    )
