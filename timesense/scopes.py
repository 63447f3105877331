"""
Scope tracking.

Brace-depth bookkeeping for the loops and functions that are open at the
current point of a single pass. This is a heuristic, not block parsing: it
only knows the depth at which each construct started.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .lattice import Complexity, ComplexityClass, dominant
from .scanner import Fragment

logger = logging.getLogger(__name__)


@dataclass
class LoopEntry:
    base: Complexity
    depth: int
    opened: bool = False


@dataclass
class OpenFunction:
    """A function scope that is still collecting time observations."""

    name: str
    line: int
    depth: int
    opened: bool = False
    time: Complexity = ComplexityClass.CONST
    end_line: int = 0

    @property
    def entry_depth(self) -> int:
        return self.depth + 1


class ScopeTracker:
    """
    Nesting stack of loop bases and stack of function scopes.

    Entries remember the brace depth of their header. An entry is opened once
    depth rises above that, and popped when depth falls back to it, so every
    push is popped exactly once and in LIFO order. A construct whose body is a
    single unbraced statement is popped at the first fragment ending in ``;``.
    """

    def __init__(self) -> None:
        self.depth = 0
        self.loops: list[LoopEntry] = []
        self.functions: list[OpenFunction] = []
        self.finished: list[OpenFunction] = []

    @property
    def loop_bases(self) -> list[Complexity]:
        """Bases of open loops, outermost first."""
        return [entry.base for entry in self.loops]

    @property
    def loop_depth(self) -> int:
        return len(self.loops)

    @property
    def current_function(self) -> Optional[OpenFunction]:
        return self.functions[-1] if self.functions else None

    def can_open_function(self) -> bool:
        if self.loops:
            return False
        return not (self.functions and not self.functions[-1].opened)

    def open_function(self, name: str, line: int) -> None:
        self.functions.append(OpenFunction(name=name, line=line, depth=self.depth))

    def push_loop(self, base: Complexity) -> None:
        self.loops.append(LoopEntry(base=base, depth=self.depth))

    def fold_time(self, cls: Complexity) -> None:
        """Raise the innermost function's time class; never lowers it."""
        function = self.current_function
        if function is not None:
            function.time = dominant(function.time, cls)

    def advance(self, fragment: Fragment) -> None:
        """Apply the fragment's braces and close whatever they ended."""
        peak = self.depth + fragment.opens
        for entry in (*self.loops, *self.functions):
            if not entry.opened and peak > entry.depth:
                entry.opened = True

        depth = self.depth + fragment.delta
        if depth < 0:
            logger.debug(f"Unbalanced closing brace on line {fragment.line}")
            depth = 0
        self.depth = depth

        self._close_loops(fragment)
        self._close_functions(fragment)

    def _close_loops(self, fragment: Fragment) -> None:
        while self.loops:
            top = self.loops[-1]
            if top.depth > self.depth or (top.opened and top.depth >= self.depth):
                self.loops.pop()
            elif not top.opened and fragment.ends_statement:
                self.loops.pop()
            else:
                break

    def _close_functions(self, fragment: Fragment) -> None:
        while self.functions:
            top = self.functions[-1]
            if not top.opened:
                if fragment.ends_statement or top.depth > self.depth:
                    # declaration without a body
                    self.functions.pop()
                    continue
                break
            if top.entry_depth > self.depth:
                top.end_line = fragment.line
                self.finished.append(self.functions.pop())
                continue
            break

    def flush(self, last_line: int) -> list[OpenFunction]:
        """
        Close everything still open at end of input.

        Returns:
            All finalised functions, in the order they closed
        """
        if self.loops:
            logger.debug(f"Dropping {len(self.loops)} unclosed loop scope(s)")
            self.loops.clear()

        if self.functions:
            logger.debug(f"Flushing {len(self.functions)} unclosed function scope(s)")
        while self.functions:
            function = self.functions.pop()
            if function.opened:
                function.end_line = last_line
                self.finished.append(function)

        return self.finished
