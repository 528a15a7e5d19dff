"""Data structures for Java defect reports."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Severity level of a finding."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class CheckCategory(str, Enum):
    """Category of checks the caller can request."""

    SECURITY = "security"
    PERFORMANCE = "performance"
    BUGS = "bugs"
    STYLE = "style"


@dataclass
class AnalysisOptions:
    """Check categories requested for one analysis."""

    security: bool = True
    performance: bool = True
    bugs: bool = True
    style: bool = True

    def enabled(self) -> list[CheckCategory]:
        """Return enabled categories, or all of them when none is enabled."""
        selected = [c for c in CheckCategory if getattr(self, c.value)]
        return selected or list(CheckCategory)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "AnalysisOptions":
        if not data:
            return cls()
        return cls(
            **{
                c.value: bool(data.get(c.value, True))
                for c in CheckCategory
            }
        )


@dataclass
class Issue:
    """A single finding in a defect report."""

    title: str
    severity: Severity
    line: int
    description: str
    code_snippet: str | None = None
    solution: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "title": self.title,
            "severity": self.severity.value,
            "line": self.line,
            "description": self.description,
        }
        if self.code_snippet is not None:
            data["codeSnippet"] = self.code_snippet
        if self.solution is not None:
            data["solution"] = self.solution
        return data


@dataclass
class Summary:
    """Finding counts per severity.

    Always derived from the issue list via :meth:`from_issues`, so ``total``
    equals both the sum of the severity counts and the number of issues.
    """

    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @property
    def total(self) -> int:
        return self.critical + self.high + self.medium + self.low

    @classmethod
    def from_issues(cls, issues: list[Issue]) -> "Summary":
        summary = cls()
        for issue in issues:
            key = issue.severity.value
            setattr(summary, key, getattr(summary, key) + 1)
        return summary

    def to_dict(self) -> dict[str, int]:
        return {
            "critical": self.critical,
            "high": self.high,
            "medium": self.medium,
            "low": self.low,
            "total": self.total,
        }


@dataclass
class Metrics:
    """Code metrics shown next to the findings.

    Attributes:
        complexity: Cyclomatic complexity estimate (>= 1)
        lines: Number of source lines
        maintainability: Maintainability score (0-100)
        security: Security score (0-100)
    """

    complexity: int
    lines: int
    maintainability: int
    security: int

    def to_dict(self) -> dict[str, int]:
        return {
            "complexity": self.complexity,
            "lines": self.lines,
            "maintainability": self.maintainability,
            "security": self.security,
        }


@dataclass
class AnalysisResult:
    """Complete defect report for one submitted snippet."""

    issues: list[Issue]
    metrics: Metrics
    suggestions: list[str] = field(default_factory=list)

    @property
    def summary(self) -> Summary:
        return Summary.from_issues(self.issues)

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary.to_dict(),
            "issues": [issue.to_dict() for issue in self.issues],
            "suggestions": list(self.suggestions),
            "metrics": self.metrics.to_dict(),
        }


@dataclass
class AnalysisOutcome:
    """Analysis result plus the metadata returned alongside it."""

    result: AnalysisResult
    demo: bool = False
    model: str | None = None
    usage: dict[str, Any] | None = None
    note: str | None = None
    attempts: int = 0
