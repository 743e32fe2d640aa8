"""
Function and variable extraction.

Two stages, tried in order:
1. Structural: ECMAScript sources are strict-parsed (see syntax.py) and the
   lowered tree is walked with a scope-depth counter.
2. Pattern: a per-family regex table for every other language, and for
   ECMAScript sources the structural stage could not handle.

Neither stage raises; a file nothing matches yields an empty list.
"""

import logging
import os

from .languages import LanguageFamily, detect_family
from .models import PATTERN, STRUCTURAL, FunctionDef, VariableDef
from .patterns import (
    CONTROL_KEYWORDS,
    FUNCTION_PATTERNS,
    INDENTATION_INSENSITIVE,
    JS_FUNCTION_PATTERN,
    METHOD_FAMILIES,
    VARIABLE_PATTERN,
)
from .syntax import FUNCTION_KINDS, NodeKind, ParseFailure, SyntaxNode, parse_source

logger = logging.getLogger(__name__)

# Lines after the definition line captured for `code` when its end line is unknown.
CODE_CONTEXT_LINES = int(os.environ.get("REPOLENS_CODE_CONTEXT_LINES", 10))


def extract_code(lines: list[str], start_line: int, end_line: int | None = None) -> str:
    """Source lines start_line..end_line (1-indexed, inclusive), clamped to the file."""
    start = max(0, start_line - 1)
    end = min(len(lines), end_line or start_line + CODE_CONTEXT_LINES)
    return "\n".join(lines[start:max(end, start + 1)])


def line_of_offset(content: str, offset: int) -> int:
    return content.count("\n", 0, offset) + 1


# =============================================================================
# Structural extraction
# =============================================================================


def render_param(param: SyntaxNode | None) -> str:
    """Short human-readable form of one parameter."""
    if param is None:
        return "unknown"
    if param.kind is NodeKind.IDENTIFIER:
        return param.name or "param"
    if param.kind is NodeKind.DEFAULT:
        return f"{render_param(param.target)}=?"
    if param.kind is NodeKind.REST:
        return f"...{render_param(param.target)}"
    if param.kind is NodeKind.OBJECT_PATTERN:
        return "{...}"
    if param.kind is NodeKind.ARRAY_PATTERN:
        return "[...]"
    return "param"


def returns_value(func: SyntaxNode) -> bool:
    """
    True for concise-body arrows, or when any `return <expr>` appears in the body.

    The scan descends into nested functions too, so an inner function's
    return counts for the outer one.
    """
    if func.kind is NodeKind.ARROW and func.body is not None and func.body.kind is not NodeKind.BLOCK:
        return True

    stack = [func.body if func.body is not None else func]
    while stack:
        node = stack.pop()
        if node.kind is NodeKind.RETURN and node.value is not None:
            return True
        stack.extend(node.children)
    return False


class _FunctionCollector:
    """Walks a lowered program and records function-shaped definitions."""

    def __init__(self, lines: list[str], filename: str):
        self.lines = lines
        self.filename = filename
        self.functions: list[FunctionDef] = []

    def collect(self, root: SyntaxNode) -> list[FunctionDef]:
        self._visit(root, 0)
        return self.functions

    def _add(self, name: str, site: SyntaxNode, func: SyntaxNode, func_type: str, is_top_level: bool, is_method: bool = False):
        self.functions.append(FunctionDef(
            name=name,
            file=self.filename,
            line=site.start_line,
            code=extract_code(self.lines, site.start_line, site.end_line or site.start_line),
            type=func_type,
            is_top_level=is_top_level,
            params=[render_param(p) for p in func.params],
            returns_value=returns_value(func),
            is_class_method=True if is_method else None,
            source=STRUCTURAL,
        ))

    def _visit(self, node: SyntaxNode, scope: int):
        if node.kind is NodeKind.FUNCTION and node.name:
            self._add(node.name, node, node, "function", scope == 0)

        elif node.kind is NodeKind.DECLARATION:
            for decl in node.declarators:
                init = decl.value
                if decl.name and init is not None and init.kind in (NodeKind.ARROW, NodeKind.FUNCTION_EXPR):
                    func_type = "arrow" if init.kind is NodeKind.ARROW else "function"
                    self._add(decl.name, decl, init, func_type, scope == 0)

        elif node.kind is NodeKind.METHOD and node.name:
            self._add(node.name, node, node, "method", False, is_method=True)

        child_scope = scope + 1 if node.kind in FUNCTION_KINDS else scope
        for child in node.children:
            self._visit(child, child_scope)


def _infer_value_type(init: SyntaxNode | None) -> str | None:
    if init is None:
        return None
    if init.kind is NodeKind.LITERAL:
        return init.literal_type
    if init.kind is NodeKind.ARRAY:
        return "array"
    if init.kind is NodeKind.OBJECT:
        return "object"
    if init.kind in (NodeKind.ARROW, NodeKind.FUNCTION_EXPR):
        return "function"
    if init.kind is NodeKind.CALL:
        return "call"
    if init.kind is NodeKind.NEW:
        return "instance"
    return None


def _collect_variables(root: SyntaxNode, filename: str) -> list[VariableDef]:
    variables = []

    def walk(node: SyntaxNode, scope: int):
        if node.kind is NodeKind.DECLARATION:
            for decl in node.declarators:
                if decl.name:
                    variables.append(VariableDef(
                        name=decl.name,
                        file=filename,
                        line=decl.start_line,
                        kind=node.keyword or "unknown",
                        value_type=_infer_value_type(decl.value),
                        is_top_level=scope == 0,
                        source=STRUCTURAL,
                    ))

        child_scope = scope + 1 if node.kind in FUNCTION_KINDS else scope
        for child in node.children:
            walk(child, child_scope)

    walk(root, 0)
    return variables


# =============================================================================
# Pattern fallback
# =============================================================================


def _extract_functions_by_pattern(content: str, filename: str, family: LanguageFamily) -> list[FunctionDef]:
    if family is LanguageFamily.ECMASCRIPT:
        pattern = JS_FUNCTION_PATTERN
    else:
        pattern = FUNCTION_PATTERNS.get(family)
    if pattern is None:
        return []

    lines = content.split("\n")
    functions = []
    for match in pattern.finditer(content):
        name = next((g for g in match.groups() if g), None)
        if not name or name in CONTROL_KEYWORDS:
            continue
        line = line_of_offset(content, match.start())
        raw = match.group(0)
        functions.append(FunctionDef(
            name=name,
            file=filename,
            line=line,
            code=extract_code(lines, line),
            type="method" if family in METHOD_FAMILIES else "function",
            is_top_level=family in INDENTATION_INSENSITIVE or not raw[:1].isspace(),
            source=PATTERN,
        ))
    return functions


def _extract_variables_by_pattern(content: str, filename: str) -> list[VariableDef]:
    variables = []
    for match in VARIABLE_PATTERN.finditer(content):
        variables.append(VariableDef(
            name=match.group(2),
            file=filename,
            line=line_of_offset(content, match.start(1)),
            kind=match.group(1),
            is_top_level=True,
            source=PATTERN,
        ))
    return variables


# =============================================================================
# Public entry points
# =============================================================================


def _structural_or_none(tree, filename: str, collect, what: str):
    """Run a structural collector, or return None if the pattern stage must take over."""
    if tree is None:
        return None
    if isinstance(tree, ParseFailure):
        logger.warning(f"Structural {what} extraction failed for {filename}, falling back to patterns: {tree.reason}")
        return None
    try:
        return collect(tree)
    except RecursionError:
        logger.warning(f"Syntax tree of {filename} too deep for {what} extraction, falling back to patterns")
        return None


def extract_functions(content: str, filename: str, tree: SyntaxNode | ParseFailure | None) -> list[FunctionDef]:
    """extract() over an already computed parse_source() result."""
    lines = content.split("\n")
    result = _structural_or_none(
        tree, filename, lambda root: _FunctionCollector(lines, filename).collect(root), "function"
    )
    if result is not None:
        return result
    return _extract_functions_by_pattern(content, filename, detect_family(filename))


def extract_variable_defs(content: str, filename: str, tree: SyntaxNode | ParseFailure | None) -> list[VariableDef]:
    """extract_variables() over an already computed parse_source() result."""
    result = _structural_or_none(
        tree, filename, lambda root: _collect_variables(root, filename), "variable"
    )
    if result is not None:
        return result
    return _extract_variables_by_pattern(content, filename)


def extract(content: str, filename: str) -> list[FunctionDef]:
    """
    Extract function, arrow-function and method definitions from one file.

    Args:
        content: Full source text
        filename: Path-like name; its extension selects the strategy

    Returns:
        FunctionDefs in source order. Each one's source field says whether
        the structural or the pattern stage produced it.
    """
    return extract_functions(content, filename, parse_source(content, filename))


def extract_variables(content: str, filename: str) -> list[VariableDef]:
    """Extract const/let/var declarations from one file."""
    return extract_variable_defs(content, filename, parse_source(content, filename))
