"""Static complexity inference for C/C++ sources."""

from .analyzer import CodeComplexityAnalyzer, UnsupportedLanguageError, detect_language
from .constraints import ConstraintReport, Constraints, Thresholds, check_constraints, estimate_operations
from .engine import analyze_lines
from .lattice import Complexity, ComplexityClass, CompoundClass, dominant, multiply, rank
from .models import AnalysisResult, CallRecord, FunctionScope, LoopRecord, SpaceItem
from .patterns import Kind, LineKind, classify
from .render import Annotation, DisplayConfig, Renderer

__version__ = "1.0.0"

__all__ = [
    "AnalysisResult",
    "Annotation",
    "CallRecord",
    "CodeComplexityAnalyzer",
    "Complexity",
    "ComplexityClass",
    "CompoundClass",
    "ConstraintReport",
    "Constraints",
    "DisplayConfig",
    "FunctionScope",
    "Kind",
    "LineKind",
    "LoopRecord",
    "Renderer",
    "SpaceItem",
    "Thresholds",
    "UnsupportedLanguageError",
    "analyze_lines",
    "check_constraints",
    "classify",
    "detect_language",
    "dominant",
    "estimate_operations",
    "multiply",
    "rank",
]
