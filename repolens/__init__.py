"""repolens: best-effort single-file static analysis for many languages."""

from .analysis import FileAnalysis, analyze_file
from .call_graph import find_calls
from .complexity import calc_complexity, complexity_level
from .extractor import extract, extract_variables
from .imports import detect_imports
from .languages import LanguageFamily, detect_family, is_code
from .models import CallEdge, CallSite, FunctionDef, SecurityIssue, UsageEntry, VariableDef
from .sanitizer import strip_typescript
from .security import detect_security
from .syntax import ContentTooLargeError, ParseError, ParseFailure, parse_strict
from .usages import find_variable_usages

__version__ = "0.1.0"

__all__ = [
    "CallEdge",
    "CallSite",
    "ContentTooLargeError",
    "FileAnalysis",
    "FunctionDef",
    "LanguageFamily",
    "ParseError",
    "ParseFailure",
    "SecurityIssue",
    "UsageEntry",
    "VariableDef",
    "analyze_file",
    "calc_complexity",
    "complexity_level",
    "detect_family",
    "detect_imports",
    "detect_security",
    "extract",
    "extract_variables",
    "find_calls",
    "find_variable_usages",
    "is_code",
    "parse_strict",
    "strip_typescript",
]
