"""
Type-annotation erasure for TypeScript sources.

strip_typescript() rewrites annotated ECMAScript into something a plain
JavaScript grammar can parse. It is an ordered list of regex substitutions,
not a parser: multi-line interfaces, nested generics and template-literal
types can survive it. Whatever survives shows up as a parse error in the
structural stage, which then falls back to pattern extraction.

Every substitution keeps the newlines of the text it removes, so line
numbers computed on the sanitized text are line numbers of the input.
"""

import re

_TYPE_EXPR = r"[A-Za-z_$][\w$<>,\s|&\[\]]*"

# Applied in this order.
_SUBSTITUTIONS = (
    # (a) `: Type` before = , ) } ] ;
    re.compile(rf":\s*{_TYPE_EXPR}(?=\s*[=,)}}\];])"),
    # (b) `as Type` casts, same trailing context minus `=`
    re.compile(rf"\bas\s+{_TYPE_EXPR}(?=\s*[,)}}\];])"),
    # (c) explicit generic arguments right before a call's `(`
    re.compile(rf"<{_TYPE_EXPR}>(?=\s*\()"),
    # (d) whole-line type-only statements
    re.compile(r"^import\s+type\s+.*", re.MULTILINE),
    re.compile(r"^export\s+type\s+.*", re.MULTILINE),
    re.compile(r"^export\s+interface\s+.*", re.MULTILINE),
    # (e) interface blocks without nested braces
    re.compile(r"\binterface\s+[A-Za-z_$][\w$]*\s*\{[^}]*\}"),
    # (f) type aliases
    re.compile(r"\btype\s+[A-Za-z_$][\w$]*\s*=\s*[^;]+;"),
)


def _keep_newlines(match: re.Match) -> str:
    return "\n" * match.group(0).count("\n")


def strip_typescript(content: str) -> str:
    """Erase type syntax from TypeScript source, preserving line structure."""
    for pattern in _SUBSTITUTIONS:
        content = pattern.sub(_keep_newlines, content)
    return content
