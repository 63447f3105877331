"""
Composition engine.

One pass over the fragments of a buffer: classify each, multiply loops and
calls by the enclosing nesting stack, and fold the effective classes into
the overall and per-function summaries by dominance.
"""
from __future__ import annotations

import logging
from typing import Sequence

from .lattice import Complexity, ComplexityClass, compose, dominant, maximum
from .models import AnalysisResult, CallRecord, FunctionScope, LoopRecord, SpaceItem
from .patterns import Kind, classify, collect_receivers
from .scanner import iter_fragments
from .scopes import OpenFunction, ScopeTracker
from .space import estimate_space

logger = logging.getLogger(__name__)


def _function_space(function: OpenFunction, items: Sequence[SpaceItem]) -> Complexity:
    return maximum(
        item.complexity
        for item in items
        if function.line <= item.line <= function.end_line
    )


def analyze_lines(lines: Sequence[str]) -> AnalysisResult:
    """
    Infer time and space complexity for one buffer.

    Args:
        lines: Full buffer contents, one string per line

    Returns:
        A fresh AnalysisResult; nothing is retained between calls
    """
    lines = list(lines)
    fragments = list(iter_fragments(lines))
    space_items, overall_space = estimate_space(lines, fragments)
    receivers = collect_receivers(lines, fragments)

    tracker = ScopeTracker()
    loops: list[LoopRecord] = []
    calls: list[CallRecord] = []
    overall_time = ComplexityClass.CONST

    for fragment in fragments:
        kind = classify(fragment.text, receivers, allow_function=tracker.can_open_function())

        if kind.kind is Kind.FUNCTION:
            tracker.open_function(kind.name, fragment.line)

        elif kind.kind is Kind.LOOP:
            effective = compose(tracker.loop_bases, kind.base)
            loops.append(
                LoopRecord(
                    line=fragment.line,
                    kind=kind.name,
                    base=kind.base,
                    effective=effective,
                    nesting_level=tracker.loop_depth,
                )
            )
            tracker.push_loop(kind.base)
            overall_time = dominant(overall_time, effective)
            tracker.fold_time(effective)

        elif kind.kind is Kind.CALL:
            effective = compose(tracker.loop_bases, kind.base)
            calls.append(
                CallRecord(
                    line=fragment.line,
                    name=kind.name,
                    base=kind.base,
                    effective=effective,
                    nesting_level=tracker.loop_depth,
                )
            )
            overall_time = dominant(overall_time, effective)
            tracker.fold_time(effective)

        tracker.advance(fragment)

    finished = tracker.flush(max(len(lines), 1))
    functions = tuple(
        FunctionScope(
            name=function.name,
            line=function.line,
            entry_depth=function.entry_depth,
            end_line=function.end_line,
            time=function.time,
            space=_function_space(function, space_items),
        )
        for function in finished
    )

    logger.debug(
        f"Analyzed {len(lines)} lines: {len(loops)} loops, {len(calls)} calls, "
        f"{len(functions)} functions, time {overall_time}, space {overall_space}"
    )

    return AnalysisResult(
        loops=tuple(loops),
        calls=tuple(calls),
        functions=functions,
        space_items=tuple(space_items),
        overall_time=overall_time,
        overall_space=overall_space,
    )
