"""
Line scanning.

Cleans raw source lines (comments, literals, preprocessor directives) and
splits them into brace-delimited fragments that the pattern matcher and the
scope tracker consume one at a time.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple


@dataclass(frozen=True)
class Fragment:
    """A piece of one physical line, split at top-level braces."""

    line: int
    text: str
    opens: int = 0
    closes: int = 0

    @property
    def delta(self) -> int:
        return self.opens - self.closes

    @property
    def ends_statement(self) -> bool:
        return self.text.endswith(";")


def clean_line(line: str, in_comment: bool = False) -> Tuple[str, bool]:
    """
    Strip comments and literal contents from one line.

    Args:
        line: Raw source line
        in_comment: Whether a ``/* ... */`` comment is open from a previous line

    Returns:
        Tuple of (cleaned text, whether a block comment is still open)
    """
    out = []
    quote = None
    i = 0
    length = len(line)

    while i < length:
        ch = line[i]
        nxt = line[i + 1] if i + 1 < length else ""

        if in_comment:
            if ch == "*" and nxt == "/":
                in_comment = False
                i += 2
                continue
            i += 1
            continue

        if quote:
            if ch == "\\":
                i += 2
                continue
            if ch == quote:
                out.append(ch)
                quote = None
            i += 1
            continue

        if ch == "/" and nxt == "/":
            break
        if ch == "/" and nxt == "*":
            in_comment = True
            out.append(" ")
            i += 2
            continue
        if ch in "\"'":
            quote = ch
            out.append(ch)
            i += 1
            continue

        out.append(ch)
        i += 1

    cleaned = "".join(out).strip()
    if cleaned.startswith("#"):
        cleaned = ""
    return cleaned, in_comment


def split_fragments(text: str, line: int) -> list[Fragment]:
    """Split a cleaned line at braces that sit outside any parentheses."""
    fragments: list[Fragment] = []
    buffer: list[str] = []
    opens = closes = 0
    parens = 0

    def emit(chunk: str, o: int, c: int) -> None:
        chunk = chunk.strip()
        if chunk and chunk != ";":
            fragments.append(Fragment(line=line, text=chunk, opens=o, closes=c))

    for ch in text:
        if ch == "(":
            parens += 1
        elif ch == ")":
            parens = max(0, parens - 1)

        if ch == "{":
            buffer.append(ch)
            opens += 1
            if parens == 0:
                emit("".join(buffer), opens, closes)
                buffer, opens, closes = [], 0, 0
            continue

        if ch == "}":
            if parens == 0:
                emit("".join(buffer), opens, closes)
                fragments.append(Fragment(line=line, text="}", opens=0, closes=1))
                buffer, opens, closes = [], 0, 0
            else:
                buffer.append(ch)
                closes += 1
            continue

        buffer.append(ch)

    emit("".join(buffer), opens, closes)
    return fragments


def iter_fragments(lines: Sequence[str]) -> Iterator[Fragment]:
    """Yield the fragments of every line in order, 1-indexed by line."""
    in_comment = False
    for number, raw in enumerate(lines, start=1):
        cleaned, in_comment = clean_line(raw, in_comment)
        if not cleaned:
            continue
        yield from split_fragments(cleaned, number)
