"""
Whole-file analysis.

analyze_file() runs every pass over one (content, filename) pair, parsing
the content once and sharing the result. Call and usage counts are written
back onto the extracted definitions.
"""

import logging
from dataclasses import dataclass, field

from .call_graph import resolve_calls
from .complexity import calc_complexity, complexity_level
from .extractor import extract_functions, extract_variable_defs
from .imports import detect_imports
from .languages import detect_family, is_code
from .models import PATTERN, STRUCTURAL, CallEdge, FunctionDef, SecurityIssue, UsageEntry, VariableDef
from .security import detect_security
from .syntax import ParseFailure, parse_source
from .usages import find_variable_usages

logger = logging.getLogger(__name__)


@dataclass
class FileAnalysis:
    """
    Everything the rendering layer needs about one file.

    parse_source is "structural" when the syntax tree was used, "pattern"
    when a structural parse was attempted but failed (parse_error says why),
    and None for languages that only have the pattern stage.
    """

    file: str
    is_code: bool
    language: str
    functions: list[FunctionDef] = field(default_factory=list)
    variables: list[VariableDef] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)
    calls: dict[str, CallEdge] = field(default_factory=dict)
    usages: dict[str, UsageEntry] = field(default_factory=dict)
    complexity: int = 0
    security_issues: list[SecurityIssue] = field(default_factory=list)
    parse_source: str | None = None
    parse_error: str | None = None

    @property
    def complexity_level(self) -> str:
        return complexity_level(self.complexity)

    def to_dict(self) -> dict:
        return {
            "file": self.file,
            "isCode": self.is_code,
            "language": self.language,
            "functions": [fn.to_dict() for fn in self.functions],
            "variables": [var.to_dict() for var in self.variables],
            "imports": list(self.imports),
            "calls": {name: edge.to_dict() for name, edge in self.calls.items()},
            "usages": {name: entry.to_dict() for name, entry in self.usages.items()},
            "complexity": {"score": self.complexity, "level": self.complexity_level},
            "securityIssues": [issue.to_dict() for issue in self.security_issues],
            "parseSource": self.parse_source,
            "parseError": self.parse_error,
        }


def apply_calls(functions: list[FunctionDef], calls: dict[str, CallEdge]):
    """Fill total_calls/call_sites on every definition, zero when uncalled."""
    for fn in functions:
        edge = calls.get(fn.name)
        fn.total_calls = edge.total_calls if edge else 0
        fn.call_sites = list(edge.call_sites) if edge else []


def apply_usages(variables: list[VariableDef], usages: dict[str, UsageEntry]):
    """Fill total_usages/usage_lines on every variable, zero when unused."""
    for var in variables:
        entry = usages.get(var.name)
        var.total_usages = entry.total if entry else 0
        var.usage_lines = list(entry.lines) if entry else []


def analyze_file(content: str, filename: str) -> FileAnalysis:
    """
    Analyze one file.

    Args:
        content: Full source text
        filename: Path-like name used for classification and in results

    Returns:
        FileAnalysis; for non-code files only file, is_code and language are set.
    """
    family = detect_family(filename)
    if not is_code(filename):
        logger.debug(f"Skipping non-code file {filename}")
        return FileAnalysis(file=filename, is_code=False, language=family.value)

    tree = parse_source(content, filename)
    analysis = FileAnalysis(file=filename, is_code=True, language=family.value)
    if isinstance(tree, ParseFailure):
        analysis.parse_source = PATTERN
        analysis.parse_error = str(tree.error)
    elif tree is not None:
        analysis.parse_source = STRUCTURAL

    analysis.functions = extract_functions(content, filename, tree)
    analysis.variables = extract_variable_defs(content, filename, tree)

    # A walker that gave up on a parsed tree fell back to patterns.
    if analysis.parse_source == STRUCTURAL and any(
        entity.source == PATTERN for entity in (*analysis.functions, *analysis.variables)
    ):
        analysis.parse_source = PATTERN
        analysis.parse_error = "syntax tree nested too deeply for structural extraction"

    analysis.calls = resolve_calls(content, filename, analysis.functions, tree)
    apply_calls(analysis.functions, analysis.calls)

    analysis.usages = find_variable_usages(content, analysis.variables)
    apply_usages(analysis.variables, analysis.usages)

    analysis.imports = detect_imports(content, filename)
    analysis.complexity = calc_complexity(content)
    analysis.security_issues = detect_security(content, filename)

    return analysis
