"""
Heuristic cyclomatic complexity.

A McCabe-style score counted over raw text, not a syntax tree: 1 plus one
per branch construct. Language agnostic, so keywords inside strings and
comments count too.
"""

import re

# `else if(` is matched by the `if(` pattern and counts once.
_BRANCH_PATTERNS = (
    re.compile(r"\bif\s*\("),
    re.compile(r"\bwhile\s*\("),
    re.compile(r"\bfor\s*\("),
    re.compile(r"\bcase\s+"),
    re.compile(r"\bcatch\s*\("),
    re.compile(r"(?<!\?)\?(?![.?])[^:\n]+:"),  # ternary, not ?. or ??
    re.compile(r"&&"),
    re.compile(r"\|\|"),
)

HIGH_COMPLEXITY = 20
MEDIUM_COMPLEXITY = 10


def calc_complexity(content: str) -> int:
    """Score a file: 0 when empty, otherwise 1 + branch constructs."""
    if not content:
        return 0

    score = 1
    for pattern in _BRANCH_PATTERNS:
        score += len(pattern.findall(content))
    return score


def complexity_level(score: int) -> str:
    """Bucket a score; above HIGH_COMPLEXITY is a hotspot."""
    if score > HIGH_COMPLEXITY:
        return "high"
    if score > MEDIUM_COMPLEXITY:
        return "medium"
    return "low"
