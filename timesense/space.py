"""
Space estimator.

Independent pass over declarations: each container or array allocation is
bucketed by its size tokens and shape, then reduced by dominance.
"""
from __future__ import annotations

import re
from typing import Optional, Sequence, Tuple

from .lattice import Complexity, ComplexityClass, maximum
from .models import SpaceItem
from .patterns import Declaration, match_declaration, match_function_header, split_statements
from .scanner import Fragment, iter_fragments

_LITERAL_SIZE = re.compile(r"^\d+[uUlL]*$")

_ADJACENCY_NAMES = frozenset({"g", "gr", "graph", "tree", "edges", "children"})
_LINEAR_STRUCTURE_NAMES = frozenset({
    "tree", "st", "bit", "ft", "fen", "fenwick",
    "parent", "par", "rank", "rnk", "sz",
})


def _is_adjacency(name: str) -> bool:
    lowered = name.lower()
    return lowered.startswith("adj") or lowered in _ADJACENCY_NAMES


def _is_linear_structure(name: str) -> bool:
    """Segment/Fenwick tree storage and DSU parent/rank arrays."""
    lowered = name.lower()
    return (
        lowered in _LINEAR_STRUCTURE_NAMES
        or lowered.startswith(("seg", "fenw", "parent"))
        or lowered.endswith("rank")
    )


def estimate_declaration(declaration: Declaration) -> Complexity:
    """Space class of one declaration."""
    if declaration.structure == "container":
        if declaration.dims >= 1:
            # vector<int> adj[N]: one list per vertex
            return ComplexityClass.V_PLUS_E
        if declaration.nested:
            if _is_adjacency(declaration.name):
                return ComplexityClass.V_PLUS_E
            return ComplexityClass.QUADRATIC
    elif declaration.dims >= 2:
        return ComplexityClass.QUADRATIC

    if _is_linear_structure(declaration.name):
        return ComplexityClass.LINEAR

    if declaration.sizes and all(_LITERAL_SIZE.match(size) for size in declaration.sizes):
        return ComplexityClass.CONST
    return ComplexityClass.LINEAR


def estimate_space(
    lines: Sequence[str],
    fragments: Optional[Sequence[Fragment]] = None,
) -> Tuple[list[SpaceItem], Complexity]:
    """
    Classify every allocation in ``lines``.

    Every statement is checked for a declaration, including statements that
    share a line with a loop header or a recognised call.

    Args:
        lines: Full buffer contents
        fragments: Already-scanned fragments of ``lines``, if available

    Returns:
        Tuple of (space items in source order, overall space class)
    """
    if fragments is None:
        fragments = list(iter_fragments(lines))

    items = []
    for fragment in fragments:
        # vector<int> build(int n) { ... } returns a vector, it does not allocate one
        if match_function_header(fragment.text) is not None:
            continue
        for statement in split_statements(fragment.text):
            declaration = match_declaration(statement)
            if declaration is None:
                continue
            items.append(
                SpaceItem(
                    line=fragment.line,
                    name=declaration.name,
                    structure=declaration.structure,
                    complexity=estimate_declaration(declaration),
                )
            )

    return items, maximum(item.complexity for item in items)
