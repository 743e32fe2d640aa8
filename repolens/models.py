"""
Result types produced by single-file analysis.

Every entity is created fresh per analysis call. The resolver passes fill in
the optional call/usage fields afterwards, in place. to_dict() renders the
camelCase shapes consumed by the rendering layer; unset optional fields are
left out.
"""

from dataclasses import dataclass, field

STRUCTURAL = "structural"
PATTERN = "pattern"


@dataclass
class CallSite:
    """One invocation of a known function."""

    line: int
    caller: str | None = None  # Enclosing function, structural resolution only

    def to_dict(self) -> dict:
        d = {"line": self.line}
        if self.caller:
            d["caller"] = self.caller
        return d


@dataclass
class CallEdge:
    """All call sites of one callee within a file."""

    total_calls: int = 0
    call_sites: list[CallSite] = field(default_factory=list)

    def add(self, line: int, caller: str | None = None):
        self.total_calls += 1
        self.call_sites.append(CallSite(line=line, caller=caller))

    def to_dict(self) -> dict:
        return {
            "totalCalls": self.total_calls,
            "callSites": [site.to_dict() for site in self.call_sites],
        }


@dataclass
class UsageEntry:
    """Reference count of one variable and the distinct lines it appears on."""

    total: int = 0
    lines: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"total": self.total, "lines": list(self.lines)}


@dataclass
class FunctionDef:
    """
    A function, arrow function or method found in a file.

    Structural extraction fills params and returns_value; pattern extraction
    cannot recover them, so to_dict() leaves them out for pattern matches.
    source records which stage produced the definition.
    """

    name: str
    file: str
    line: int
    code: str
    type: str  # "function", "arrow" or "method"
    is_top_level: bool
    params: list[str] = field(default_factory=list)
    returns_value: bool = False
    is_class_method: bool | None = None
    total_calls: int | None = None
    call_sites: list[CallSite] | None = None
    source: str = STRUCTURAL

    @property
    def return_type(self) -> str:
        return "value" if self.returns_value else "void"

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "file": self.file,
            "line": self.line,
            "code": self.code,
            "type": self.type,
            "isTopLevel": self.is_top_level,
            "source": self.source,
        }
        if self.source == STRUCTURAL:
            d["params"] = list(self.params)
            d["returnsValue"] = self.returns_value
            d["returnType"] = self.return_type
        if self.is_class_method is not None:
            d["isClassMethod"] = self.is_class_method
        if self.total_calls is not None:
            d["totalCalls"] = self.total_calls
        if self.call_sites is not None:
            d["callSites"] = [site.to_dict() for site in self.call_sites]
        return d


@dataclass
class VariableDef:
    """A const/let/var declaration."""

    name: str
    file: str
    line: int
    kind: str  # "const", "let", "var" or "unknown"
    is_top_level: bool
    value_type: str | None = None
    total_usages: int | None = None
    usage_lines: list[int] | None = None
    source: str = STRUCTURAL

    def to_dict(self) -> dict:
        d = {
            "name": self.name,
            "file": self.file,
            "line": self.line,
            "kind": self.kind,
            "isTopLevel": self.is_top_level,
            "source": self.source,
        }
        if self.value_type is not None:
            d["valueType"] = self.value_type
        if self.total_usages is not None:
            d["totalUsages"] = self.total_usages
        if self.usage_lines is not None:
            d["usageLines"] = list(self.usage_lines)
        return d


@dataclass
class SecurityIssue:
    severity: str  # "high", "medium" or "low"
    title: str
    file: str
    line: int
    desc: str
    code: str

    @property
    def path(self) -> str:
        return self.file

    def to_dict(self) -> dict:
        return {
            "severity": self.severity,
            "title": self.title,
            "file": self.file,
            "path": self.path,
            "line": self.line,
            "desc": self.desc,
            "code": self.code,
        }
