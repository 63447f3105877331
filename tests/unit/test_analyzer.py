import pytest

from timesense.analyzer import CodeComplexityAnalyzer, UnsupportedLanguageError, detect_language
from timesense.lattice import ComplexityClass as C


SOURCE = """#include <bits/stdc++.h>
using namespace std;

int main() {
    int n;
    cin >> n;
    vector<int> a(n);
    for (int i = 0; i < n; i++) cin >> a[i];
    sort(a.begin(), a.end());
    return 0;
}
"""


@pytest.fixture
def analyzer() -> CodeComplexityAnalyzer:
    return CodeComplexityAnalyzer()


@pytest.mark.parametrize("filename,language,expected", [
    ("main.cpp", "auto", "cpp"),
    ("main.c", "auto", "c"),
    ("solution.hpp", "auto", "cpp"),
    ("main.py", "auto", None),
    ("main.py", "c++", "cpp"),
    ("anything", "C", "c"),
    ("main.cpp", "python", None),
])
def test_detect_language(filename, language, expected):
    assert detect_language("x = 1", filename, language) == expected


def test_detect_language_from_source():
    assert detect_language(SOURCE, "untitled") == "cpp"
    assert detect_language("print('hi')", "untitled") is None


def test_analyze_cpp_source(analyzer):
    result = analyzer.analyze(SOURCE, "main.cpp")
    assert result.overall_time == C.LINEARITHMIC
    assert result.overall_space == C.LINEAR
    assert result.loop_count == 1
    assert [f.name for f in result.functions] == ["main"]


def test_unsupported_language_raises(analyzer):
    with pytest.raises(UnsupportedLanguageError) as excinfo:
        analyzer.analyze("def f(): pass", "script.py")
    assert excinfo.value.filename == "script.py"
    assert "Only C/C++" in str(excinfo.value)


def test_analyze_lines_skips_language_check(analyzer):
    result = analyzer.analyze_lines(["for (int i = 0; i < n; i++) {", "}"])
    assert result.overall_time == C.LINEAR
