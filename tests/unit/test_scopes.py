from timesense.lattice import ComplexityClass as C
from timesense.scanner import Fragment
from timesense.scopes import ScopeTracker


def frag(text: str, line: int = 1) -> Fragment:
    return Fragment(line=line, text=text, opens=text.count("{"), closes=text.count("}"))


def test_braced_loop_pops_on_matching_brace():
    tracker = ScopeTracker()
    tracker.push_loop(C.LINEAR)
    tracker.advance(frag("for (int i = 0; i < n; i++) {"))
    assert tracker.loop_bases == [C.LINEAR]

    tracker.advance(frag("x++;"))
    assert tracker.loop_depth == 1

    tracker.advance(frag("}"))
    assert tracker.loop_depth == 0
    assert tracker.depth == 0


def test_inner_brace_does_not_pop_loop():
    tracker = ScopeTracker()
    tracker.push_loop(C.LINEAR)
    tracker.advance(frag("for (int i = 0; i < n; i++) {"))
    tracker.advance(frag("if (a[i]) {"))
    tracker.advance(frag("}"))
    assert tracker.loop_bases == [C.LINEAR]


def test_braceless_body_pops_at_statement():
    tracker = ScopeTracker()
    tracker.push_loop(C.LINEAR)
    tracker.advance(frag("for (int i = 0; i < n; i++)"))
    assert tracker.loop_depth == 1

    tracker.advance(frag("sum += a[i];"))
    assert tracker.loop_depth == 0


def test_function_scope_lifecycle():
    tracker = ScopeTracker()
    assert tracker.can_open_function()

    tracker.open_function("main", 1)
    tracker.advance(frag("int main() {", 1))
    assert tracker.current_function.entry_depth == 1

    tracker.fold_time(C.QUADRATIC)
    tracker.fold_time(C.LINEAR)
    tracker.advance(frag("}", 5))

    assert tracker.current_function is None
    [main] = tracker.finished
    assert main.time == C.QUADRATIC
    assert main.end_line == 5


def test_allman_header_waits_for_brace():
    tracker = ScopeTracker()
    tracker.open_function("solve", 1)
    tracker.advance(frag("void solve()", 1))
    assert not tracker.can_open_function()

    tracker.advance(frag("{", 2))
    assert tracker.current_function.opened
    assert tracker.can_open_function()


def test_no_function_opens_inside_loop():
    tracker = ScopeTracker()
    tracker.push_loop(C.LINEAR)
    assert not tracker.can_open_function()


def test_stray_closing_brace_clamps_depth():
    tracker = ScopeTracker()
    tracker.advance(frag("}"))
    assert tracker.depth == 0


def test_flush_finalises_open_functions():
    tracker = ScopeTracker()
    tracker.open_function("main", 1)
    tracker.advance(frag("int main() {", 1))
    tracker.push_loop(C.LINEAR)
    tracker.advance(frag("for (;;) {", 2))

    finished = tracker.flush(3)
    assert [f.name for f in finished] == ["main"]
    assert finished[0].end_line == 3
    assert tracker.loop_depth == 0


def test_flush_drops_unopened_header():
    tracker = ScopeTracker()
    tracker.open_function("f", 1)
    tracker.advance(frag("int f()", 1))
    assert tracker.flush(1) == []
