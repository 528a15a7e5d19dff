"""Local metric estimates used when the model omits them."""

from __future__ import annotations

import re

from ..config import defaults
from .models import Issue, Metrics, Summary

# Decision points counted by the complexity heuristic
_KEYWORD_PATTERN = re.compile(r"\b(?:if|for|while|catch|case)\b")
_OPERATOR_PATTERN = re.compile(r"&&|\|\||\?")


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def count_lines(code: str) -> int:
    """Number of lines as seen by a newline split (empty text is one line)."""
    return len(code.split("\n"))


def estimate_complexity(code: str) -> int:
    """Estimate cyclomatic complexity by counting decision points.

    Counts ``if``, ``for``, ``while``, ``catch`` and ``case`` as whole words,
    plus ``&&``, ``||`` and ``?``, starting from 1. The result is clamped to
    [1, 50]. Comments and string literals are not excluded.

    Args:
        code: Java source text

    Returns:
        Complexity estimate in [1, 50]
    """
    decisions = len(_KEYWORD_PATTERN.findall(code)) + len(
        _OPERATOR_PATTERN.findall(code)
    )
    return clamp(1 + decisions, defaults.MIN_COMPLEXITY, defaults.MAX_COMPLEXITY)


def _weighted_penalty(summary: Summary, weights: dict[str, int]) -> int:
    return sum(getattr(summary, level) * weight for level, weight in weights.items())


def maintainability_score(issues: list[Issue], complexity: int) -> int:
    """100 minus weighted issue penalties minus excess complexity, in [0, 100]."""
    summary = Summary.from_issues(issues)
    penalty = _weighted_penalty(summary, defaults.MAINTAINABILITY_WEIGHTS)
    penalty += max(0, complexity - defaults.COMPLEXITY_PENALTY_THRESHOLD)
    return clamp(100 - penalty, 0, 100)


def security_score(issues: list[Issue]) -> int:
    """100 minus weighted issue penalties, in [0, 100]."""
    summary = Summary.from_issues(issues)
    return clamp(100 - _weighted_penalty(summary, defaults.SECURITY_WEIGHTS), 0, 100)


def estimate_metrics(code: str, issues: list[Issue]) -> Metrics:
    """Compute every metric locally."""
    complexity = estimate_complexity(code)
    return Metrics(
        complexity=complexity,
        lines=count_lines(code),
        maintainability=maintainability_score(issues, complexity),
        security=security_score(issues),
    )
