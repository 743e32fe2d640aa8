"""
Language classification by file extension.

Two questions are answered from the filename alone:
- is_code(filename): is this a source file worth analysing at all?
- detect_family(filename): which extraction strategy applies?
"""

from enum import Enum

# Lowercase; matched case-insensitively against the end of the filename.
CODE_EXTENSIONS = (
    ".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs",
    ".py", ".java", ".go", ".rb", ".php",
    ".vue", ".svelte", ".rs", ".c", ".cpp", ".cc", ".h", ".hpp",
    ".cs", ".swift", ".kt", ".kts", ".scala", ".clj",
    ".ex", ".exs", ".erl", ".hs", ".lua", ".r",
    ".jl", ".dart", ".elm", ".fs", ".fsx", ".ml",
    ".pl", ".pm", ".sh", ".bash", ".zsh", ".fish",
    ".ps1", ".psm1", ".groovy", ".gradle",
)

TYPE_ANNOTATED_EXTENSIONS = (".ts", ".tsx")


class LanguageFamily(Enum):
    ECMASCRIPT = "ecmascript"
    PYTHON = "python"
    GO = "go"
    JAVA = "java"  # Java and C#
    RUST = "rust"
    RUBY = "ruby"
    PHP = "php"
    C = "c"  # C and C++
    OTHER = "other"


_FAMILY_BY_EXTENSION = (
    (".js", LanguageFamily.ECMASCRIPT),
    (".jsx", LanguageFamily.ECMASCRIPT),
    (".mjs", LanguageFamily.ECMASCRIPT),
    (".cjs", LanguageFamily.ECMASCRIPT),
    (".ts", LanguageFamily.ECMASCRIPT),
    (".tsx", LanguageFamily.ECMASCRIPT),
    (".py", LanguageFamily.PYTHON),
    (".go", LanguageFamily.GO),
    (".java", LanguageFamily.JAVA),
    (".cs", LanguageFamily.JAVA),
    (".rs", LanguageFamily.RUST),
    (".rb", LanguageFamily.RUBY),
    (".php", LanguageFamily.PHP),
    (".c", LanguageFamily.C),
    (".cpp", LanguageFamily.C),
    (".cc", LanguageFamily.C),
    (".h", LanguageFamily.C),
    (".hpp", LanguageFamily.C),
)


def is_code(filename: str) -> bool:
    """Return True if the filename ends with a known source extension."""
    lowered = filename.lower()
    return lowered.endswith(CODE_EXTENSIONS)


def detect_family(filename: str) -> LanguageFamily:
    """Map a filename to the language family that selects its extractors."""
    lowered = filename.lower()
    for ext, family in _FAMILY_BY_EXTENSION:
        if lowered.endswith(ext):
            return family
    return LanguageFamily.OTHER


def is_type_annotated(filename: str) -> bool:
    """ECMAScript files that need type syntax erased before parsing."""
    return filename.lower().endswith(TYPE_ANNOTATED_EXTENSIONS)
