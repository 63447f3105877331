"""
Pattern matcher.

Heuristic classification of a single C/C++ source fragment as a function
header, loop header, library/algorithm call, memory declaration, or nothing.
Every other component goes through :func:`classify`, so the regex scanning
here can be replaced without touching composition.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional, Sequence, Tuple

from .lattice import Complexity, ComplexityClass, rank
from .scanner import Fragment, iter_fragments

C = ComplexityClass


class Kind(str, Enum):
    FUNCTION = "function"
    LOOP = "loop"
    CALL = "call"
    DECLARATION = "declaration"
    NONE = "none"


class ReceiverKind(str, Enum):
    """What a variable used as a method-call receiver was declared as."""

    ORDERED = "ordered"
    UNORDERED = "unordered"
    STRING = "string"
    HEAP = "heap"
    SEQUENCE = "sequence"
    QUEUE = "queue"
    TRIE = "trie"
    RANGE_TREE = "range_tree"
    DSU = "dsu"


@dataclass(frozen=True)
class Declaration:
    """A container or array declaration found on one fragment."""

    names: Tuple[str, ...]
    structure: str
    container: Optional[str] = None
    sizes: Tuple[str, ...] = ()
    dims: int = 0
    nested: bool = False

    @property
    def name(self) -> str:
        return self.names[0]


@dataclass(frozen=True)
class LineKind:
    """Result of classifying one fragment."""

    kind: Kind
    base: Complexity = ComplexityClass.CONST
    name: str = ""
    declaration: Optional[Declaration] = None


NOTHING = LineKind(Kind.NONE)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

_CONTROL_WORDS = frozenset({
    "if", "else", "while", "for", "do", "switch", "case", "default", "return",
    "catch", "try", "sizeof", "new", "delete", "throw", "goto", "using",
    "typedef", "namespace", "break", "continue", "operator",
})


def _matching(text: str, start: int, open_ch: str = "(", close_ch: str = ")") -> int:
    """Index of the bracket closing the one at ``start``, or -1."""
    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return i
    return -1


def _split_top_level(text: str, sep: str) -> list[str]:
    """Split on ``sep`` outside (), [] and {} nesting."""
    parts = []
    depth = 0
    current = []
    for ch in text:
        if ch in "([{":
            depth += 1
        elif ch in ")]}" and depth > 0:
            depth -= 1
        if ch == sep and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return parts


def _parenthesized(text: str, keyword: str) -> Optional[Tuple[str, str]]:
    """Return (inside, after) for ``keyword ( inside ) after``."""
    match = re.match(rf"{keyword}\s*\(", text)
    if not match:
        return None
    start = match.end() - 1
    end = _matching(text, start)
    if end < 0:
        return text[start + 1:], ""
    return text[start + 1:end], text[end + 1:].strip()


# ---------------------------------------------------------------------------
# Function headers
# ---------------------------------------------------------------------------

_FUNCTION_HEADER = re.compile(
    r"^(?P<prefix>.+?)\b(?P<name>~?[A-Za-z_]\w*(?:::~?[A-Za-z_]\w*)*)\s*"
    r"\((?P<params>[^;]*)\)\s*"
    r"(?:(?:const|noexcept|override|final)\b\s*)*"
    r"\{?$"
)
_TYPE_PREFIX = re.compile(r"^[\w\s:<>,*&]+$")


def match_function_header(text: str) -> Optional[str]:
    """Return the function name if ``text`` opens a function definition."""
    if text.endswith(";") or "(" not in text:
        return None
    match = _FUNCTION_HEADER.match(text)
    if not match:
        return None

    prefix = match.group("prefix").strip()
    name = match.group("name")
    if not prefix or "<<" in prefix or not _TYPE_PREFIX.match(prefix):
        return None

    first_word = re.match(r"\w+", prefix)
    if first_word is None or first_word.group(0) in _CONTROL_WORDS:
        return None
    if name.split("::")[-1] in _CONTROL_WORDS:
        return None
    return name


# ---------------------------------------------------------------------------
# Loops
# ---------------------------------------------------------------------------

_POWER = r"(?:[2-9]|[1-9]\d+)\b"

_LOG_INCREMENTS = tuple(re.compile(p) for p in (
    rf"\b\w+\s*(?:\*=|/=)\s*{_POWER}",
    r"\b\w+\s*(?:<<=|>>=)\s*\w+",
    rf"\b(\w+)\s*=\s*\1\s*[*/]\s*{_POWER}",
    rf"\b(\w+)\s*=\s*{_POWER}\s*\*\s*\1\b",
    r"\b(\w+)\s*=\s*\1\s*(?:<<|>>)\s*\w+",
    r"\b(\w+)\s*\+=\s*\(?\s*\1\b",
    r"\b(\w+)\s*-=\s*\(?\s*\1\s*&",
    r"\b(\w+)\s*\^=\s*\(?\s*\1\s*&",
    r"\b(\w+)\s*&=\s*\(?\s*\1\s*-\s*1\b",
    r"\b(\w+)\s*\|=\s*\(?\s*\1\s*\+\s*1\b",
    r"\b(\w+)\s*=\s*\(?\s*\1\s*&\s*\(?\s*\1\s*[-+]\s*1\b",
))

_SQRT_CONDITIONS = tuple(re.compile(p) for p in (
    r"\b(\w+)\s*\*\s*\1\b\s*[<>]=?",
    r"[<>]=?\s*(?:\(\s*[\w\s]+\)\s*)?(\w+)\s*\*\s*\1\b",
    r"\bsqrtl?\s*\(",
))


def classify_for(text: str) -> Complexity:
    """Base class of a ``for`` header."""
    parsed = _parenthesized(text, "for")
    if parsed is None:
        return C.LINEAR
    header, _ = parsed

    clauses = _split_top_level(header, ";")
    if len(clauses) != 3:
        # range-based for (x : container) or unparseable header
        return C.LINEAR

    _, condition, increment = clauses
    if any(p.search(increment) for p in _LOG_INCREMENTS):
        return C.LOG
    if any(p.search(condition) for p in _SQRT_CONDITIONS):
        return C.SQRT
    return C.LINEAR


def classify_while(text: str) -> Complexity:
    """Base class of a ``while`` header."""
    parsed = _parenthesized(text, "while")
    if parsed is None:
        return C.LINEAR
    condition, _ = parsed
    if re.search(r"[A-Za-z_]\w*", condition) and re.search(r"[*/]", condition):
        return C.LOG
    return C.LINEAR


_GUARD = re.compile(r"(?:else\b|if\s*\()\s*")


def _strip_guards(text: str) -> str:
    """Drop leading ``else`` and ``if (...)`` so ``if (x) for (...)`` reads as a loop."""
    while True:
        match = _GUARD.match(text)
        if match is None:
            return text
        if match.group(0).startswith("else"):
            text = text[match.end():]
            continue
        end = _matching(text, text.index("("))
        if end < 0:
            return text
        text = text[end + 1:].lstrip()


def match_loop(text: str) -> Optional[LineKind]:
    text = _strip_guards(text)

    if re.match(r"for\s*\(", text):
        return LineKind(Kind.LOOP, classify_for(text), "for")

    if re.match(r"while\s*\(", text):
        parsed = _parenthesized(text, "while")
        if parsed is not None and parsed[1] == ";":
            # tail of a do { ... } while (cond);
            return None
        return LineKind(Kind.LOOP, classify_while(text), "while")

    if re.match(r"do\s*(?:\{\s*)?$", text):
        return LineKind(Kind.LOOP, C.LINEAR, "do")

    return None


# ---------------------------------------------------------------------------
# Library and algorithm calls
# ---------------------------------------------------------------------------

_FREE_CALL = re.compile(r"(?<![\w.>])(?:\w+::)*(?P<name>\w+)\s*\(")

_FREE_CALL_NAMES = {
    **dict.fromkeys(
        ("stable_sort", "partial_sort", "sort", "make_heap", "sort_heap"), C.LINEARITHMIC
    ),
    **dict.fromkeys(("push_heap", "pop_heap"), C.LOG),
    **dict.fromkeys(("binary_search", "lower_bound", "upper_bound", "equal_range"), C.LOG),
    **dict.fromkeys(
        (
            "next_permutation", "prev_permutation", "reverse", "fill_n", "fill", "copy",
            "accumulate", "find_if", "find", "count_if", "count", "memset", "memcpy",
            "iota", "unique", "nth_element", "max_element", "min_element", "rotate",
            "partial_sum",
        ),
        C.LINEAR,
    ),
    **dict.fromkeys(("__gcd", "gcd", "lcm"), C.LOG),
    **dict.fromkeys(("find_set", "union_set", "unite"), C.INVERSE_ACKERMANN),
    **dict.fromkeys(("query", "update"), C.LOG),
}

# dfs_visit, dijkstra_pq, sieve_of_eratosthenes, ...
_FREE_CALL_PREFIXES = (
    ("dfs", C.V_PLUS_E),
    ("bfs", C.V_PLUS_E),
    ("dijkstra", C.E_LOG_V),
    ("floyd", C.CUBIC),
    ("warshall", C.CUBIC),
    ("bellman", C.V_TIMES_E),
    ("sieve", C.N_LOG_LOG_N),
)


def _free_call_class(name: str) -> Optional[Complexity]:
    cls = _FREE_CALL_NAMES.get(name)
    if cls is not None:
        return cls
    for prefix, cls in _FREE_CALL_PREFIXES:
        if name.startswith(prefix):
            return cls
    return None

_METHOD_CALL = re.compile(
    r"(?P<receiver>[A-Za-z_]\w*)\s*(?:\[[^\]]*\]\s*)*(?:\.|->)\s*(?P<method>\w+)\s*\("
)

_SET_METHODS = ("insert", "erase", "find", "count", "lower_bound", "upper_bound")

_METHODS = {
    ReceiverKind.ORDERED: {m: C.LOG for m in _SET_METHODS},
    ReceiverKind.UNORDERED: {m: C.CONST for m in _SET_METHODS},
    ReceiverKind.STRING: {
        "substr": C.LINEAR, "compare": C.LINEAR, "find": C.LINEAR, "rfind": C.LINEAR,
    },
    ReceiverKind.HEAP: {"push": C.LOG, "pop": C.LOG, "emplace": C.LOG},
    ReceiverKind.SEQUENCE: {"insert": C.LINEAR, "erase": C.LINEAR},
    ReceiverKind.QUEUE: {},
    ReceiverKind.TRIE: {"insert": C.STRING_LENGTH, "search": C.STRING_LENGTH},
    ReceiverKind.RANGE_TREE: {"query": C.LOG, "update": C.LOG},
    ReceiverKind.DSU: {
        "find": C.INVERSE_ACKERMANN,
        "find_set": C.INVERSE_ACKERMANN,
        "union_set": C.INVERSE_ACKERMANN,
        "unite": C.INVERSE_ACKERMANN,
    },
}

# receivers nobody declared: assume an ordered container for set-style methods
_FALLBACK_METHODS = {
    **{m: C.LOG for m in _SET_METHODS},
    "substr": C.LINEAR,
    "compare": C.LINEAR,
    "query": C.LOG,
    "update": C.LOG,
    "find_set": C.INVERSE_ACKERMANN,
    "union_set": C.INVERSE_ACKERMANN,
    "unite": C.INVERSE_ACKERMANN,
}


def receiver_hint(name: str) -> Optional[ReceiverKind]:
    """Guess a receiver kind from a type or variable name."""
    lowered = name.lower()
    if "trie" in lowered:
        return ReceiverKind.TRIE
    if lowered.startswith(("seg", "fen")) or lowered in ("bit", "ft", "st", "fenwick"):
        return ReceiverKind.RANGE_TREE
    if "dsu" in lowered or "unionfind" in lowered or "union_find" in lowered or "disjoint" in lowered:
        return ReceiverKind.DSU
    if "heap" in lowered or lowered == "pq":
        return ReceiverKind.HEAP
    return None


def _method_class(
    receiver: str,
    method: str,
    text: str,
    receivers: Mapping[str, ReceiverKind],
) -> Optional[Complexity]:
    if "unordered_" in text and method in _SET_METHODS:
        return C.CONST

    kind = receivers.get(receiver) or receiver_hint(receiver)
    if kind is not None:
        return _METHODS[kind].get(method)
    return _FALLBACK_METHODS.get(method)


def match_call(
    text: str,
    receivers: Optional[Mapping[str, ReceiverKind]] = None,
) -> Optional[LineKind]:
    """
    Find the dominant recognised call in ``text``.

    Args:
        text: Cleaned fragment text
        receivers: Declared variable name -> receiver kind

    Returns:
        A CALL LineKind, or None when no call in the table is present
    """
    if "(" not in text:
        return None

    receivers = receivers or {}
    found = []

    for match in _FREE_CALL.finditer(text):
        cls = _free_call_class(match.group("name"))
        if cls is not None:
            found.append((match.start("name"), match.group("name"), cls))

    for match in _METHOD_CALL.finditer(text):
        cls = _method_class(match.group("receiver"), match.group("method"), text, receivers)
        if cls is not None:
            found.append((match.start("method"), match.group("method"), cls))

    if not found:
        return None

    found.sort(key=lambda item: item[0])
    _, best_name, best = found[0]
    for _, name, cls in found[1:]:
        if rank(cls) > rank(best):
            best_name, best = name, cls
    return LineKind(Kind.CALL, best, best_name)


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

CONTAINERS = (
    "unordered_multiset", "unordered_multimap", "unordered_set", "unordered_map",
    "priority_queue", "multiset", "multimap", "set", "map",
    "queue", "stack", "deque", "vector",
)

_CONTAINER_RECEIVERS = {
    "set": ReceiverKind.ORDERED,
    "map": ReceiverKind.ORDERED,
    "multiset": ReceiverKind.ORDERED,
    "multimap": ReceiverKind.ORDERED,
    "unordered_set": ReceiverKind.UNORDERED,
    "unordered_map": ReceiverKind.UNORDERED,
    "unordered_multiset": ReceiverKind.UNORDERED,
    "unordered_multimap": ReceiverKind.UNORDERED,
    "priority_queue": ReceiverKind.HEAP,
    "vector": ReceiverKind.SEQUENCE,
    "deque": ReceiverKind.SEQUENCE,
    "queue": ReceiverKind.QUEUE,
    "stack": ReceiverKind.QUEUE,
}

_QUALIFIERS = r"(?:(?:static|const|constexpr|mutable|thread_local|volatile)\s+)*"

_CONTAINER_DECL = re.compile(
    rf"^{_QUALIFIERS}(?:std::)?(?P<container>{'|'.join(CONTAINERS)})\s*<"
)
_NESTED_CONTAINER = re.compile(rf"\b(?:{'|'.join(CONTAINERS)})\s*<")

_ARRAY_DECL = re.compile(
    rf"^{_QUALIFIERS}(?:(?:unsigned|signed)\s+)?"
    r"(?P<type>[A-Za-z_][\w:]*(?:\s*<[^;=]*?>)?(?:\s+(?:long|int|double|char))*)"
    r"(?:\s+\**|\s*\*+)\s*(?P<name>[A-Za-z_]\w*)\s*"
    r"(?P<dims>(?:\[[^\]]*\]\s*)+)"
)
_BRACKETS = re.compile(r"\[([^\]]*)\]")

_OBJECT_DECL = re.compile(
    r"^(?:std::)?(?P<type>string|[A-Z]\w*)(?:\s*\*\s*|\s+)"
    r"(?P<names>[A-Za-z_]\w*(?:\s*(?:\([^;]*\))?\s*,\s*[A-Za-z_]\w*)*)"
    r"\s*(?:\([^;]*\)|=[^;]*)?\s*;$"
)


def _declarators(rest: str) -> list[Tuple[str, str]]:
    """Split ``a(n), b[m]`` into (name, tail) pairs."""
    out = []
    for part in _split_top_level(rest, ","):
        match = re.match(r"\s*(?:\*|&)*\s*([A-Za-z_]\w*)\s*(.*)$", part)
        if match:
            out.append((match.group(1), match.group(2).strip()))
    return out


def _match_container(text: str) -> Optional[Declaration]:
    match = _CONTAINER_DECL.match(text)
    if not match:
        return None

    open_at = match.end() - 1
    close_at = _matching(text, open_at, "<", ">")
    if close_at < 0:
        return None

    args = text[open_at + 1:close_at]
    rest = text[close_at + 1:]
    if not rest[:1].isspace() and not rest[:1].isalpha():
        # references, pointers, ::iterator and temporaries are not allocations
        return None

    declarators = _declarators(rest)
    if not declarators:
        return None

    name, tail = declarators[0]
    sizes: Tuple[str, ...] = ()
    dims = 0
    if tail.startswith("["):
        sizes = tuple(s.strip() for s in _BRACKETS.findall(tail))
        dims = len(sizes)
    elif tail.startswith("("):
        end = _matching(tail, 0)
        inside = tail[1:end] if end > 0 else tail[1:]
        first = _split_top_level(inside, ",")[0].strip()
        if first:
            sizes = (first,)

    return Declaration(
        names=tuple(n for n, _ in declarators),
        structure="container",
        container=match.group("container"),
        sizes=sizes,
        dims=dims,
        nested=bool(_NESTED_CONTAINER.search(args)),
    )


def _match_array(text: str) -> Optional[Declaration]:
    match = _ARRAY_DECL.match(text)
    if not match:
        return None
    type_word = match.group("type").split()[0]
    if type_word in _CONTROL_WORDS:
        return None

    sizes = tuple(s.strip() for s in _BRACKETS.findall(match.group("dims")))
    return Declaration(
        names=(match.group("name"),),
        structure="array",
        sizes=sizes,
        dims=len(sizes),
    )


def match_declaration(text: str) -> Optional[Declaration]:
    """Recognise a container or fixed-array declaration."""
    return _match_container(text) or _match_array(text)


def split_statements(text: str) -> list[str]:
    """Split a fragment at top-level ``;`` into non-empty statements."""
    return [part.strip() for part in _split_top_level(text, ";") if part.strip()]


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def classify(
    text: str,
    receivers: Optional[Mapping[str, ReceiverKind]] = None,
    allow_function: bool = True,
) -> LineKind:
    """
    Classify one fragment. Only the first matching category fires, in order:
    function header, loop header, call, declaration.

    Args:
        text: A trimmed source fragment
        receivers: Declared variable name -> receiver kind, for method calls
        allow_function: Whether a function header may open here

    Returns:
        LineKind describing the fragment
    """
    text = text.strip()
    if not text:
        return NOTHING

    if allow_function:
        name = match_function_header(text)
        if name is not None:
            return LineKind(Kind.FUNCTION, name=name)

    loop = match_loop(text)
    if loop is not None:
        return loop

    declaration = match_declaration(text)
    call = match_call(text, receivers)
    # vector<int> count(n) declares a variable, it does not call count()
    if call is not None and not (declaration and call.name in declaration.names):
        return call

    if declaration is not None:
        return LineKind(Kind.DECLARATION, name=declaration.name, declaration=declaration)

    return NOTHING


def collect_receivers(
    lines: Sequence[str],
    fragments: Optional[Sequence[Fragment]] = None,
) -> dict[str, ReceiverKind]:
    """
    Map declared variable names to the kind of object they hold.

    Pass ``fragments`` when the buffer has already been scanned.
    """
    if fragments is None:
        fragments = list(iter_fragments(lines))
    receivers: dict[str, ReceiverKind] = {}

    for fragment in fragments:
        text = fragment.text
        declaration = _match_container(text)
        if declaration is not None and declaration.dims == 0:
            kind = _CONTAINER_RECEIVERS[declaration.container]
            for name in declaration.names:
                receivers[name] = kind
            continue

        match = _OBJECT_DECL.match(text)
        if match is None:
            continue
        type_name = match.group("type")
        if type_name == "string":
            kind = ReceiverKind.STRING
        else:
            kind = receiver_hint(type_name)
        if kind is None:
            continue
        for name in re.findall(r"(?:^|,)\s*([A-Za-z_]\w*)", re.sub(r"\([^)]*\)", "", match.group("names"))):
            receivers[name] = kind

    return receivers
