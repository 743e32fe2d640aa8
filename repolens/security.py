"""
Line-level security heuristics.

Each physical line goes through four independent checks, so one line can
produce several issues. Matches are textual; expect false positives and
negatives.
"""

import re

from .models import SecurityIssue

_SECRET = re.compile(
    r"(?:password|passwd|pwd|secret|api_key|apikey|token|auth)\s*[=:]\s*['\"][^'\"]{8,}['\"]",
    re.IGNORECASE,
)
# A line that reads the value from the environment or config is not hardcoded.
_SECRET_EXEMPT = ("process.env", "import.meta.env", "os.environ", "getenv(", "config.")

_SQL = re.compile(r"(?:query|execute|SELECT|INSERT|UPDATE|DELETE).*(?:\+|\$\{)", re.IGNORECASE)

_RAW_HTML_MARKERS = ("dangerouslySetInnerHTML", "v-html", "{@html")

_DYNAMIC_CODE = re.compile(r"\beval\(|\bnew Function\(")


def _issue(severity: str, title: str, filename: str, line: int, desc: str, text: str) -> SecurityIssue:
    return SecurityIssue(
        severity=severity,
        title=title,
        file=filename,
        line=line,
        desc=desc,
        code=text.strip(),
    )


def detect_security(content: str, filename: str) -> list[SecurityIssue]:
    """Scan one file for hardcoded secrets, SQL/XSS injection risks and eval."""
    issues = []

    for idx, line in enumerate(content.split("\n")):
        line_number = idx + 1

        if _SECRET.search(line) and not any(marker in line for marker in _SECRET_EXEMPT):
            issues.append(_issue(
                "high", "Hardcoded Secret", filename, line_number,
                "Potential hardcoded credential detected.", line,
            ))

        if _SQL.search(line):
            issues.append(_issue(
                "high", "SQL Injection Risk", filename, line_number,
                "Potential SQL injection via string concatenation.", line,
            ))

        marker = next((m for m in _RAW_HTML_MARKERS if m in line), None)
        if marker:
            issues.append(_issue(
                "medium", "XSS Risk", filename, line_number,
                f"Usage of {marker} can lead to XSS.", line,
            ))

        if _DYNAMIC_CODE.search(line):
            issues.append(_issue(
                "high", "Dynamic Code Execution", filename, line_number,
                "Use of eval() or new Function() is dangerous.", line,
            ))

    return issues
