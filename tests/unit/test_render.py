from timesense.engine import analyze_lines
from timesense.render import (
    PRIORITY_FUNCTION,
    PRIORITY_OPERATION,
    PRIORITY_OVERALL,
    DisplayConfig,
    Renderer,
    find_display_line,
)


LINES = [
    "// solution",
    "#include <vector>",
    "using namespace std;",
    "int main() {",
    "    for (int i = 0; i < n; i++) {",
    "        sort(a.begin(), a.end());",
    "    }",
    "}",
]


def test_display_line_prefers_include():
    assert find_display_line(LINES) == 2


def test_display_line_falls_back_to_header_pattern():
    assert find_display_line(["", "int x;", "int main() {", "}"]) == 3


def test_display_line_falls_back_to_first_code():
    assert find_display_line(["// c", "x = 1;", "y = 2;"]) == 2
    assert find_display_line([]) == 1


def test_render_order_and_priorities():
    result = analyze_lines(LINES)
    annotations = Renderer().render(result, LINES)

    assert [a.priority for a in annotations] == [
        PRIORITY_OVERALL,
        PRIORITY_FUNCTION,
        PRIORITY_OPERATION,
        PRIORITY_OPERATION,
    ]
    overall, function, loop, call = annotations
    assert overall.line == 2
    assert overall.text == "🧠 Time: O(n² log n) | Space: O(1)"
    assert function.line == 4
    assert (loop.line, loop.text) == (5, "🧠 O(n)")
    assert (call.line, call.text) == (6, "🧠 O(n² log n)")


def test_config_changes_look():
    config = DisplayConfig(icon="⏱", highlight_group="NonText")
    annotations = Renderer(config).render(analyze_lines(LINES), LINES)
    assert annotations[-1].text == "⏱ O(n² log n)"
    assert annotations[-1].group == "NonText"


def test_toggle_hides_and_restores():
    result = analyze_lines(LINES)
    renderer = Renderer()
    shown = renderer.render(result, LINES)

    assert renderer.toggle() is False
    assert renderer.render(result, LINES) == []

    assert renderer.toggle() is True
    assert renderer.render(result, LINES) == shown


def test_render_does_not_change_result():
    result = analyze_lines(LINES)
    before = result.model_dump_json()
    renderer = Renderer()
    renderer.render(result, LINES)
    renderer.hide()
    renderer.render(result, LINES)
    assert result.model_dump_json() == before
