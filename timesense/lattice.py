"""
Complexity lattice.

Symbolic asymptotic classes, their rank order, and the multiplication
algebra used to compose nested operations.
"""
from __future__ import annotations

from enum import Enum
from typing import Iterable, Sequence, Union

from pydantic import BaseModel, ConfigDict, model_serializer


class ComplexityClass(str, Enum):
    """Known complexity classes, declared from best to worst."""

    CONST = "O(1)"
    INVERSE_ACKERMANN = "O(α(n))"
    LOG = "O(log n)"
    LOG_SQUARED = "O(log² n)"
    SQRT = "O(√n)"
    LINEAR = "O(n)"
    STRING_LENGTH = "O(L)"
    LINEARITHMIC = "O(n log n)"
    N_LOG_LOG_N = "O(n log log n)"
    N_SQRT_N = "O(n√n)"
    QUADRATIC = "O(n²)"
    QUADRATIC_LOG = "O(n² log n)"
    CUBIC = "O(n³)"
    V_PLUS_E = "O(V + E)"
    V_TIMES_E = "O(V × E)"
    E_LOG_V = "O(E log V)"
    EXPONENTIAL = "O(2ⁿ)"
    FACTORIAL = "O(n!)"

    @property
    def label(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


class CompoundClass(BaseModel):
    """
    Product of two classes with no closed form, rendered as ``O(a × b)``.

    Chains of three or more classes nest to the right and are not
    normalised, so ``O(a × b × c)`` may have several structural forms.
    """

    model_config = ConfigDict(frozen=True)

    left: "Complexity"
    right: "Complexity"

    @property
    def label(self) -> str:
        return f"O({_factor(self.left)} × {_factor(self.right)})"

    def __str__(self) -> str:
        return self.label

    @model_serializer(when_used="json")
    def serialize_label(self) -> str:
        return self.label


Complexity = Union[ComplexityClass, CompoundClass]

CompoundClass.model_rebuild()


C = ComplexityClass

# Graph classes rank above the polynomial ones; O(L) and O(n) tie.
_RANK_TABLE = (
    (C.CONST,),
    (C.INVERSE_ACKERMANN,),
    (C.LOG,),
    (C.LOG_SQUARED,),
    (C.SQRT,),
    (C.LINEAR, C.STRING_LENGTH),
    (C.LINEARITHMIC,),
    (C.N_LOG_LOG_N,),
    (C.N_SQRT_N,),
    (C.QUADRATIC,),
    (C.QUADRATIC_LOG,),
    (C.CUBIC,),
    (C.V_PLUS_E,),
    (C.V_TIMES_E,),
    (C.E_LOG_V,),
    (C.EXPONENTIAL,),
    (C.FACTORIAL,),
)

_RANKS = {cls: index for index, tier in enumerate(_RANK_TABLE) for cls in tier}

# Anything the table does not know about is assumed worse than every known class.
UNKNOWN_RANK = len(_RANK_TABLE)

_PRODUCTS = {
    (C.LINEAR, C.LINEAR): C.QUADRATIC,
    (C.LINEAR, C.LOG): C.LINEARITHMIC,
    (C.LINEAR, C.LINEARITHMIC): C.QUADRATIC_LOG,
    (C.QUADRATIC, C.LINEAR): C.CUBIC,
    (C.QUADRATIC, C.LOG): C.QUADRATIC_LOG,
    (C.LOG, C.LOG): C.LOG_SQUARED,
    (C.SQRT, C.LINEAR): C.N_SQRT_N,
}
_PRODUCTS.update({(b, a): product for (a, b), product in list(_PRODUCTS.items())})


def inner_text(cls: Complexity) -> str:
    """Return the label without its ``O(...)`` wrapper."""
    label = cls.label
    if label.startswith("O(") and label.endswith(")"):
        return label[2:-1]
    return label


def _factor(cls: Complexity) -> str:
    """Inner text of one side of a product; sums are bracketed."""
    text = inner_text(cls)
    # a nested product already brackets its own factors
    if isinstance(cls, ComplexityClass) and " + " in text:
        return f"({text})"
    return text


def rank(cls: Complexity) -> int:
    """Position of ``cls`` in the lattice; higher is worse."""
    if isinstance(cls, ComplexityClass):
        return _RANKS[cls]
    return UNKNOWN_RANK


def dominant(a: Complexity, b: Complexity) -> Complexity:
    """Return the worse of two classes, keeping ``a`` on ties."""
    if rank(b) > rank(a):
        return b
    return a


def maximum(classes: Iterable[Complexity]) -> Complexity:
    """Fold a sequence of classes with :func:`dominant`, starting from O(1)."""
    result: Complexity = ComplexityClass.CONST
    for cls in classes:
        result = dominant(result, cls)
    return result


def multiply(a: Complexity, b: Complexity) -> Complexity:
    """
    Compose two classes, e.g. an inner operation repeated by an outer loop.

    Args:
        a: Multiplier (the enclosing operation)
        b: Multiplicand

    Returns:
        The closed-form product when one is known, otherwise a CompoundClass
    """
    if a == ComplexityClass.CONST:
        return b
    if b == ComplexityClass.CONST:
        return a

    product = _PRODUCTS.get((a, b))
    if product is not None:
        return product

    return CompoundClass(left=a, right=b)


def compose(stack: Sequence[Complexity], base: Complexity) -> Complexity:
    """
    Effective class of ``base`` under the enclosing loops in ``stack``.

    The stack is ordered outermost first; each enclosing class multiplies the
    running result in turn, so the innermost multiplier is applied last.
    """
    effective = base
    for enclosing in stack:
        effective = multiply(enclosing, effective)
    return effective
