"""
Import target extraction.

Targets are returned as raw strings exactly as written; nothing is resolved
to files or definitions.
"""

import re

from .languages import LanguageFamily, detect_family

_JS_IMPORT = re.compile(r"(?:import|from)\s+['\"]([^'\"]+)['\"]")
_JS_REQUIRE = re.compile(r"require\(['\"]([^'\"]+)['\"]\)")

_PY_IMPORT = re.compile(r"^(?:from|import)\s+([a-zA-Z0-9_.]+)", re.MULTILINE)

_GO_IMPORT = re.compile(r"\bimport\s+(?:[\w.]+\s+)?['\"`]([^'\"`]+)['\"`]")
_GO_IMPORT_BLOCK = re.compile(r"\bimport\s*\(([^)]*)\)")
_GO_BLOCK_ENTRY = re.compile(r"['\"`]([^'\"`]+)['\"`]")


def _go_imports(content: str) -> list[str]:
    targets = [m.group(1) for m in _GO_IMPORT.finditer(content)]
    for block in _GO_IMPORT_BLOCK.finditer(content):
        targets.extend(m.group(1) for m in _GO_BLOCK_ENTRY.finditer(block.group(1)))
    return targets


def detect_imports(content: str, filename: str) -> list[str]:
    """Return de-duplicated raw import targets for ECMAScript, Python and Go files."""
    family = detect_family(filename)

    if family is LanguageFamily.ECMASCRIPT:
        targets = [m.group(1) for m in _JS_IMPORT.finditer(content)]
        targets.extend(m.group(1) for m in _JS_REQUIRE.finditer(content))
    elif family is LanguageFamily.PYTHON:
        targets = [m.group(1) for m in _PY_IMPORT.finditer(content)]
    elif family is LanguageFamily.GO:
        targets = _go_imports(content)
    else:
        targets = []

    return list(dict.fromkeys(targets))
