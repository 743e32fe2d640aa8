"""
Pattern tables for regex-based extraction.

These tables drive every non-structural pass: function and variable fallback
extraction, definition-line detection for the call and usage resolvers.
They are module constants; nothing mutates them after import.
"""

import re
from types import MappingProxyType

from .languages import LanguageFamily

_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
_JS_IDENT = r"[A-Za-z_$][\w$]*"

FUNCTION_PATTERNS = MappingProxyType({
    LanguageFamily.PYTHON: re.compile(
        rf"^[ \t]*(?:async[ \t]+)?def[ \t]+({_IDENT})[ \t]*\(", re.MULTILINE
    ),
    # Optional method receiver: func (s *Server) Handle(
    LanguageFamily.GO: re.compile(
        rf"^func[ \t]+(?:\([^)]+\)[ \t]*)?({_IDENT})[ \t]*\(", re.MULTILINE
    ),
    # Return type, name, parameter list, opening brace. Deliberately loose.
    LanguageFamily.JAVA: re.compile(
        rf"(?:public|private|protected|static|[ \t])[ \t]+[\w<>\[\]]+[ \t]+({_IDENT})[ \t]*\([^)]*\)\s*\{{",
        re.MULTILINE,
    ),
    LanguageFamily.RUST: re.compile(
        rf"^[ \t]*(?:pub(?:\([^)]*\))?[ \t]+)?(?:async[ \t]+)?fn[ \t]+({_IDENT})", re.MULTILINE
    ),
    LanguageFamily.RUBY: re.compile(rf"^[ \t]*def[ \t]+({_IDENT})", re.MULTILINE),
    LanguageFamily.PHP: re.compile(
        rf"^[ \t]*(?:(?:public|private|protected|static|abstract|final)[ \t]+)*function[ \t]+&?({_IDENT})",
        re.MULTILINE,
    ),
    LanguageFamily.C: re.compile(rf"^{_IDENT}[ \t]+({_IDENT})[ \t]*\(", re.MULTILINE),
})

# Named function, or const/let/var bound to a function or arrow.
JS_FUNCTION_PATTERN = re.compile(
    rf"(?:function[ \t]+({_JS_IDENT})"
    rf"|(?:const|let|var)[ \t]+({_JS_IDENT})[ \t]*=[ \t]*(?:async[ \t]*)?(?:function|\([^)]*\)[ \t]*=>))"
)

# Names the permissive C-family pattern picks up from control statements.
CONTROL_KEYWORDS = frozenset({"if", "for", "while", "switch"})

# Families whose indentation says nothing about nesting.
INDENTATION_INSENSITIVE = frozenset({LanguageFamily.GO, LanguageFamily.C})

METHOD_FAMILIES = frozenset({LanguageFamily.JAVA, LanguageFamily.C})

VARIABLE_PATTERN = re.compile(rf"^[ \t]*(const|let|var)[ \t]+({_JS_IDENT})", re.MULTILINE)

DECLARATION_KEYWORDS = ("const", "let", "var")


def word_pattern(name: str) -> re.Pattern:
    """Match name as a whole identifier (``$`` counts as an identifier char)."""
    return re.compile(rf"(?<![\w$]){re.escape(name)}(?![\w$])")


def call_pattern(name: str) -> re.Pattern:
    return re.compile(rf"(?<![\w$]){re.escape(name)}\s*\(")


def definition_line_pattern(name: str) -> re.Pattern:
    """A line that defines name rather than calling it."""
    escaped = re.escape(name)
    return re.compile(
        rf"(?:(?:function|def|fn)\s+{escaped}\s*\("
        rf"|func\s+(?:\([^)]*\)\s*)?{escaped}\s*\("
        rf"|(?:const|let|var)\s+{escaped}\s*=)"
    )


def declaration_line_pattern(name: str) -> re.Pattern:
    """A line that declares name with const/let/var."""
    return re.compile(rf"(?<![\w$])(?:const|let|var)\s+{re.escape(name)}(?![\w$])")
