"""
Intra-file call graph resolution.

find_calls() matches call sites against a set of already extracted function
names from the same file. Edges never leave the file: imports are not
followed and unknown callees are ignored.

- ECMAScript: the lowered syntax tree is walked, tracking the innermost
  enclosing named function so every call site carries its caller.
- Everything else (and unparseable ECMAScript): each line is scanned for
  `name(`; lines that define the name are skipped. No caller attribution.
"""

import logging
from typing import Iterable

from .models import CallEdge, FunctionDef
from .patterns import call_pattern, definition_line_pattern
from .syntax import NodeKind, ParseFailure, SyntaxNode, parse_source

logger = logging.getLogger(__name__)

_FUNCTION_VALUES = (NodeKind.ARROW, NodeKind.FUNCTION_EXPR)


def _callee_name(callee: SyntaxNode | None) -> str | None:
    """name for name(...), property for obj.name(...) / obj["name"](...)."""
    if callee is None:
        return None
    if callee.kind in (NodeKind.IDENTIFIER, NodeKind.MEMBER):
        return callee.name
    return None


def _structural_calls(root: SyntaxNode, known: set[str]) -> dict[str, CallEdge]:
    call_map: dict[str, CallEdge] = {}

    def walk_tree(node: SyntaxNode, current: str | None):
        context = current
        if node.kind is NodeKind.FUNCTION and node.name:
            context = node.name
        elif node.kind is NodeKind.DECLARATION:
            for decl in node.declarators:
                if decl.name and decl.value is not None and decl.value.kind in _FUNCTION_VALUES:
                    context = decl.name

        if node.kind is NodeKind.CALL:
            name = _callee_name(node.callee)
            if name in known:
                call_map.setdefault(name, CallEdge()).add(node.start_line, context)

        for child in node.children:
            walk_tree(child, context)

    walk_tree(root, None)
    return call_map


def _pattern_calls(content: str, known: set[str]) -> dict[str, CallEdge]:
    call_map: dict[str, CallEdge] = {}
    lines = content.split("\n")

    # Sorted so the map is deterministic for a given input.
    for name in sorted(known):
        calls = call_pattern(name)
        definition = definition_line_pattern(name)
        for idx, line in enumerate(lines):
            if definition.search(line):
                continue
            for _ in calls.finditer(line):
                call_map.setdefault(name, CallEdge()).add(idx + 1)

    return call_map


def resolve_calls(
    content: str,
    filename: str,
    known_defs: Iterable[FunctionDef],
    tree: SyntaxNode | ParseFailure | None,
) -> dict[str, CallEdge]:
    """find_calls() over an already computed parse_source() result."""
    known = {fn.name for fn in known_defs if fn.name}
    if not known:
        return {}

    if isinstance(tree, SyntaxNode):
        try:
            return _structural_calls(tree, known)
        except RecursionError:
            logger.warning(f"Syntax tree of {filename} too deep for call resolution, falling back to patterns")
    elif isinstance(tree, ParseFailure):
        logger.warning(f"Structural call resolution failed for {filename}, falling back to patterns: {tree.reason}")

    return _pattern_calls(content, known)


def find_calls(content: str, filename: str, known_defs: Iterable[FunctionDef]) -> dict[str, CallEdge]:
    """
    Find every call to a known function within one file.

    Args:
        content: Full source text
        filename: Path-like name; its extension selects the strategy
        known_defs: Definitions whose names count as call targets

    Returns:
        Map of callee name to CallEdge. Names that are never called are absent.
    """
    return resolve_calls(content, filename, known_defs, parse_source(content, filename))
