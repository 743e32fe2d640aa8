"""
Structural parsing for ECMAScript sources.

Source text is parsed with tree-sitter's JavaScript grammar (TypeScript is
run through the annotation sanitizer first) and the resulting tree is
lowered into SyntaxNode values tagged with a NodeKind. The walkers in the
extractor and call-graph modules dispatch on that tag only.

Tree-sitter recovers from syntax errors instead of rejecting the input. A
strict parse treats any ERROR or MISSING node as a failure, so malformed
files are handed to the pattern stage rather than walked half-parsed.

Key pieces:
- parse_strict(content, filename) -> SyntaxNode | ParseFailure
- parse_source(content, filename) -> same, or None for non-ECMAScript files
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum, auto
from functools import lru_cache
from types import MappingProxyType

import tree_sitter_javascript
from tree_sitter import Language, Parser

from .languages import LanguageFamily, detect_family, is_type_annotated
from .sanitizer import strip_typescript

logger = logging.getLogger(__name__)

# Tree-sitter memory usage grows with input size; above this limit the
# structural stage is skipped. Override with REPOLENS_MAX_PARSE_SIZE.
DEFAULT_MAX_PARSE_SIZE = 5_000_000  # 5MB
MAX_PARSE_SIZE = int(os.environ.get("REPOLENS_MAX_PARSE_SIZE", DEFAULT_MAX_PARSE_SIZE))


class ParseError(Exception):
    """Raised when a source cannot be parsed strictly."""
    def __init__(self, filename: str, language: str, reason: str):
        self.filename = filename
        self.language = language
        self.reason = reason
        super().__init__(f"Failed to parse {filename} as {language}: {reason}")


class ContentTooLargeError(ParseError):
    """Raised when content exceeds MAX_PARSE_SIZE."""
    def __init__(self, filename: str, language: str, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            filename,
            language,
            f"content is {size:,} bytes, exceeds limit of {limit:,} bytes "
            f"(set REPOLENS_MAX_PARSE_SIZE to increase it)",
        )


@dataclass
class ParseFailure:
    """Typed result of a strict parse that did not produce a tree."""

    filename: str
    error: ParseError

    @property
    def reason(self) -> str:
        return self.error.reason


class NodeKind(Enum):
    FUNCTION = auto()  # function declaration
    FUNCTION_EXPR = auto()
    ARROW = auto()
    METHOD = auto()  # class method
    DECLARATION = auto()  # const/let/var statement
    DECLARATOR = auto()
    CALL = auto()
    NEW = auto()
    IDENTIFIER = auto()
    MEMBER = auto()  # obj.name or obj["name"]
    LITERAL = auto()
    ARRAY = auto()
    OBJECT = auto()
    RETURN = auto()
    BLOCK = auto()
    REST = auto()
    DEFAULT = auto()  # parameter with a default value
    OBJECT_PATTERN = auto()
    ARRAY_PATTERN = auto()
    OTHER = auto()


FUNCTION_KINDS = frozenset({NodeKind.FUNCTION, NodeKind.FUNCTION_EXPR, NodeKind.ARROW, NodeKind.METHOD})


@dataclass
class SyntaxNode:
    """
    One lowered syntax-tree node.

    children holds every lowered child in source order and is what generic
    traversal follows. The remaining slots are shortcuts into children that
    are only meaningful for some kinds:

    - name: IDENTIFIER text, FUNCTION/METHOD name, DECLARATOR binding name,
      MEMBER property name
    - params, body: FUNCTION, FUNCTION_EXPR, ARROW, METHOD
    - keyword: DECLARATION ("const", "let", "var")
    - declarators: DECLARATION
    - target: DECLARATOR binding, DEFAULT left side, REST argument
    - value: DECLARATOR initializer, RETURN argument
    - callee: CALL
    - literal_type: LITERAL ("string", "number", "bigint", "boolean", "object")
    """

    kind: NodeKind
    start_line: int
    end_line: int | None = None
    children: list["SyntaxNode"] = field(default_factory=list)
    name: str | None = None
    params: list["SyntaxNode"] = field(default_factory=list)
    body: "SyntaxNode | None" = None
    keyword: str | None = None
    declarators: list["SyntaxNode"] = field(default_factory=list)
    target: "SyntaxNode | None" = None
    value: "SyntaxNode | None" = None
    callee: "SyntaxNode | None" = None
    literal_type: str | None = None


_KIND_BY_TYPE = MappingProxyType({
    "function_declaration": NodeKind.FUNCTION,
    "generator_function_declaration": NodeKind.FUNCTION,
    "function_expression": NodeKind.FUNCTION_EXPR,
    "function": NodeKind.FUNCTION_EXPR,  # grammar versions before 0.21
    "generator_function": NodeKind.FUNCTION_EXPR,
    "arrow_function": NodeKind.ARROW,
    "method_definition": NodeKind.METHOD,
    "lexical_declaration": NodeKind.DECLARATION,
    "variable_declaration": NodeKind.DECLARATION,
    "variable_declarator": NodeKind.DECLARATOR,
    "call_expression": NodeKind.CALL,
    "new_expression": NodeKind.NEW,
    "identifier": NodeKind.IDENTIFIER,
    "member_expression": NodeKind.MEMBER,
    "subscript_expression": NodeKind.MEMBER,
    "string": NodeKind.LITERAL,
    "number": NodeKind.LITERAL,
    "true": NodeKind.LITERAL,
    "false": NodeKind.LITERAL,
    "null": NodeKind.LITERAL,
    "regex": NodeKind.LITERAL,
    "array": NodeKind.ARRAY,
    "object": NodeKind.OBJECT,
    "return_statement": NodeKind.RETURN,
    "statement_block": NodeKind.BLOCK,
    "rest_pattern": NodeKind.REST,
    "assignment_pattern": NodeKind.DEFAULT,
    "object_pattern": NodeKind.OBJECT_PATTERN,
    "array_pattern": NodeKind.ARRAY_PATTERN,
})

# typeof of the literal's runtime value
_LITERAL_TYPES = MappingProxyType({
    "string": "string",
    "number": "number",
    "true": "boolean",
    "false": "boolean",
    "null": "object",
    "regex": "object",
})


@lru_cache(maxsize=1)
def _javascript_language() -> Language:
    return Language(tree_sitter_javascript.language())


def _new_parser() -> Parser:
    # Parsers hold mutable state; a fresh one per parse keeps calls independent.
    return Parser(_javascript_language())


def _text(node, source: bytes) -> str:
    return source[node.start_byte:node.end_byte].decode("utf-8", errors="replace")


def _key(node) -> tuple[int, int, str]:
    return (node.start_byte, node.end_byte, node.type)


def _member_name(node, source: bytes) -> str | None:
    """Property name of obj.name / obj["name"] / obj[0], else None."""
    if node.type == "member_expression":
        prop = node.child_by_field_name("property")
        if prop is not None and prop.type == "property_identifier":
            return _text(prop, source)
        return None
    index = node.child_by_field_name("index")
    if index is None:
        return None
    if index.type == "string":
        return _text(index, source)[1:-1]
    if index.type == "number":
        return _text(index, source)
    return None


def _definition_name(node, source: bytes) -> str | None:
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    if name_node.type in ("identifier", "property_identifier"):
        return _text(name_node, source)
    if name_node.type == "private_property_identifier":
        return _text(name_node, source).lstrip("#")
    return None


def _loop_declaration(node, source: bytes, target: SyntaxNode) -> SyntaxNode | None:
    """
    The binding of `for (const x of xs)` / `for (let k in o)` as a DECLARATION.

    Tree-sitter puts the keyword and binding directly on the for_in_statement
    instead of nesting a lexical_declaration, so one is synthesized here.
    """
    keyword = node.child_by_field_name("kind")
    if keyword is None:
        return None
    declarator = SyntaxNode(
        kind=NodeKind.DECLARATOR,
        start_line=target.start_line,
        end_line=target.end_line,
        children=[target],
        target=target,
        name=target.name if target.kind is NodeKind.IDENTIFIER else None,
    )
    return SyntaxNode(
        kind=NodeKind.DECLARATION,
        start_line=target.start_line,
        end_line=target.end_line,
        children=[declarator],
        keyword=_text(keyword, source),
        declarators=[declarator],
    )


def _lower(node, source: bytes) -> SyntaxNode:
    """Convert a tree-sitter node (and its subtree) into a SyntaxNode."""
    kind = _KIND_BY_TYPE.get(node.type, NodeKind.OTHER)

    # Only class bodies hold methods; object-literal shorthand methods
    # behave like function expressions.
    if kind is NodeKind.METHOD and (node.parent is None or node.parent.type != "class_body"):
        kind = NodeKind.FUNCTION_EXPR

    children = []
    by_key = {}
    for child in node.named_children:
        if child.type == "comment":
            continue
        lowered = _lower(child, source)
        by_key[_key(child)] = lowered
        children.append(lowered)

    def field_node(field_name: str) -> SyntaxNode | None:
        ts_child = node.child_by_field_name(field_name)
        if ts_child is None:
            return None
        return by_key.get(_key(ts_child))

    if node.type == "for_in_statement":
        binding = field_node("left")
        declaration = _loop_declaration(node, source, binding) if binding is not None else None
        if declaration is not None:
            children = [declaration if child is binding else child for child in children]

    result = SyntaxNode(
        kind=kind,
        start_line=node.start_point[0] + 1,
        end_line=node.end_point[0] + 1,
        children=children,
    )

    if kind in (NodeKind.FUNCTION, NodeKind.FUNCTION_EXPR, NodeKind.METHOD):
        result.name = _definition_name(node, source)
        params = field_node("parameters")
        result.params = params.children if params else []
        result.body = field_node("body")
    elif kind is NodeKind.ARROW:
        single = field_node("parameter")
        if single is not None:
            result.params = [single]
        else:
            params = field_node("parameters")
            result.params = params.children if params else []
        result.body = field_node("body")
    elif kind is NodeKind.DECLARATION:
        if node.type == "variable_declaration":
            result.keyword = "var"
        else:
            keyword = node.child_by_field_name("kind")
            result.keyword = _text(keyword, source) if keyword is not None else None
        result.declarators = [c for c in children if c.kind is NodeKind.DECLARATOR]
    elif kind is NodeKind.DECLARATOR:
        result.target = field_node("name")
        result.value = field_node("value")
        if result.target is not None and result.target.kind is NodeKind.IDENTIFIER:
            result.name = result.target.name
    elif kind is NodeKind.CALL:
        result.callee = field_node("function")
    elif kind is NodeKind.IDENTIFIER:
        result.name = _text(node, source)
    elif kind is NodeKind.MEMBER:
        result.name = _member_name(node, source)
    elif kind is NodeKind.LITERAL:
        literal_type = _LITERAL_TYPES[node.type]
        if node.type == "number" and _text(node, source).endswith("n"):
            literal_type = "bigint"
        result.literal_type = literal_type
    elif kind is NodeKind.RETURN:
        result.value = children[0] if children else None
    elif kind is NodeKind.REST:
        result.target = children[0] if children else None
    elif kind is NodeKind.DEFAULT:
        result.target = field_node("left")

    return result


def _first_error_line(root) -> int:
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node.start_point[0] + 1
        if node.has_error:
            stack.extend(reversed(node.children))
    return root.start_point[0] + 1


def _parse(content: str, filename: str) -> SyntaxNode:
    annotated = is_type_annotated(filename)
    language = "typescript" if annotated else "javascript"
    text = strip_typescript(content) if annotated else content
    source = text.encode("utf-8")

    if len(source) > MAX_PARSE_SIZE:
        raise ContentTooLargeError(filename, language, len(source), MAX_PARSE_SIZE)

    try:
        tree = _new_parser().parse(source)
    except Exception as e:
        raise ParseError(filename, language, str(e)) from e

    root = tree.root_node
    if root.has_error:
        raise ParseError(filename, language, f"syntax error near line {_first_error_line(root)}")

    try:
        return _lower(root, source)
    except RecursionError as e:
        raise ParseError(filename, language, "syntax tree nested too deeply") from e


def parse_strict(content: str, filename: str) -> SyntaxNode | ParseFailure:
    """
    Parse ECMAScript content without tolerating syntax errors.

    Returns the lowered program node, or a ParseFailure describing why the
    structural stage cannot be used. Never raises.
    """
    try:
        return _parse(content, filename)
    except ContentTooLargeError as e:
        logger.debug(f"Skipping structural parse of {filename}: {e.reason}")
        return ParseFailure(filename=filename, error=e)
    except ParseError as e:
        return ParseFailure(filename=filename, error=e)


def parse_source(content: str, filename: str) -> SyntaxNode | ParseFailure | None:
    """Strict-parse ECMAScript files; None for families without a structural stage."""
    if detect_family(filename) is not LanguageFamily.ECMASCRIPT:
        return None
    return parse_strict(content, filename)
