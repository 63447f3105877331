"""
Core Code Complexity Analyzer.

Rule-based analyzer for C/C++ sources: checks the input belongs to the
supported grammar family, then runs the space and time passes.
"""
from __future__ import annotations

import logging
import re
from pathlib import PurePath
from typing import Optional, Sequence

from .engine import analyze_lines
from .models import AnalysisResult

logger = logging.getLogger(__name__)

SUPPORTED_LANGUAGES = ("c", "cpp")

_LANGUAGE_ALIASES = {
    "c": "c",
    "cpp": "cpp",
    "c++": "cpp",
    "cxx": "cpp",
    "cc": "cpp",
}

_EXTENSIONS = {
    ".c": "c",
    ".h": "cpp",
    ".cc": "cpp",
    ".cpp": "cpp",
    ".cxx": "cpp",
    ".hpp": "cpp",
    ".hh": "cpp",
}

_C_FAMILY_MARKERS = re.compile(
    r"^\s*#\s*include\b|\busing\s+namespace\b|\bint\s+main\s*\(|\bstd::",
    re.MULTILINE,
)


class UnsupportedLanguageError(ValueError):
    """Input does not belong to the C/C++ grammar family."""

    def __init__(self, language: str, filename: str = "untitled"):
        self.language = language
        self.filename = filename
        super().__init__(
            f"Only C/C++ files are currently supported (got {language!r} for {filename!r})"
        )


def detect_language(
    code: str,
    filename: str = "untitled",
    language: str = "auto",
) -> Optional[str]:
    """
    Work out whether ``code`` is C or C++.

    An explicit language wins, then the filename extension, then a look at
    the source itself.

    Returns:
        "c", "cpp" or None when the input is something else
    """
    language = (language or "auto").strip().lower()
    if language != "auto":
        return _LANGUAGE_ALIASES.get(language)

    suffix = PurePath(filename or "").suffix.lower()
    if suffix:
        return _EXTENSIONS.get(suffix)

    if _C_FAMILY_MARKERS.search(code):
        return "cpp"
    return None


class CodeComplexityAnalyzer:
    """
    Code complexity analyzer for C-family sources.

    Stateless: every call analyses the full text it is given and returns a
    fresh result, so one instance may serve any number of buffers.
    """

    def analyze(
        self,
        code: str,
        filename: str = "untitled",
        language: str = "auto",
    ) -> AnalysisResult:
        """
        Analyze code complexity.

        Args:
            code: Full source text of one buffer
            filename: Buffer name, used for language detection
            language: Explicit language, or "auto"

        Returns:
            AnalysisResult with per-construct records and overall classes

        Raises:
            UnsupportedLanguageError: If the input is not C or C++
        """
        detected = detect_language(code, filename, language)
        if detected is None:
            logger.debug(f"Skipping {filename}: language {language!r} not supported")
            raise UnsupportedLanguageError(language, filename)

        return self.analyze_lines(code.splitlines())

    def analyze_lines(self, lines: Sequence[str]) -> AnalysisResult:
        """Analyze an already-split buffer without any language check."""
        return analyze_lines(lines)
