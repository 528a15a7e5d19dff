"""Turn raw model output into a well-formed AnalysisResult."""

import json
import math
import re
from typing import Any

from loguru import logger

from ..config import defaults
from ..core.exceptions import ResponseFormatError
from .metrics import (
    clamp,
    count_lines,
    estimate_complexity,
    estimate_metrics,
    maintainability_score,
    security_score,
)
from .models import AnalysisResult, Issue, Metrics, Severity

PARSE_FAILURE_TITLE = "Unstructured analysis output"
PARSE_FAILURE_SOLUTION = (
    "The model did not return a structured report; the description holds "
    "the beginning of its raw answer."
)

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*\n(.*?)\n\s*```", re.DOTALL)
_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


def normalize_response(raw: str, code: str) -> AnalysisResult:
    """Build an AnalysisResult from model output. Never raises.

    Args:
        raw: Message content returned by the model
        code: The submitted source, used for metric backfill

    Returns:
        AnalysisResult whose summary always matches its issues
    """
    try:
        report = parse_model_output(raw)
    except ResponseFormatError as e:
        logger.warning(f"Falling back to raw-text report: {e}")
        return parse_failure_result(raw, code)

    issues = _coerce_issues(report.get("issues", report.get("findings")))
    suggestions = _coerce_suggestions(report.get("suggestions"))
    metrics = _coerce_metrics(report.get("metrics"), code, issues)

    claimed = report.get("summary")
    if isinstance(claimed, dict) and claimed.get("total") != len(issues):
        logger.debug(
            f"Model summary claimed total={claimed.get('total')!r}, "
            f"recomputed {len(issues)} from issues"
        )

    return AnalysisResult(issues=issues, metrics=metrics, suggestions=suggestions)


def parse_model_output(raw: str) -> dict[str, Any]:
    """Parse model output as a JSON report.

    Tries, in order: the whole text, the first fenced code block, and the
    first balanced ``{...}`` substring (with trailing commas removed on a
    second try). A top-level JSON array is treated as the issue list.

    Raises:
        ResponseFormatError: If no candidate parses into an object or array
    """
    text = (raw or "").strip()
    if not text:
        raise ResponseFormatError("Model returned an empty response")

    candidates = [text]
    fenced = _FENCED_BLOCK.search(text)
    if fenced:
        candidates.append(fenced.group(1).strip())
    balanced = find_balanced_object(text)
    if balanced:
        candidates.append(balanced)
        candidates.append(_clean_json_string(balanced))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
        if isinstance(data, list):
            return {"issues": data}

    raise ResponseFormatError(
        "Model output is not a JSON report", context={"length": len(text)}
    )


def find_balanced_object(text: str) -> str | None:
    """Return the first balanced ``{...}`` substring, ignoring braces in strings."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]
    return None


def parse_failure_result(raw: str, code: str) -> AnalysisResult:
    """Single low-severity issue carrying an excerpt of the raw output."""
    excerpt = (raw or "")[: defaults.RAW_EXCERPT_LENGTH]
    issues = [
        Issue(
            title=PARSE_FAILURE_TITLE,
            severity=Severity.LOW,
            line=1,
            description=excerpt,
            solution=PARSE_FAILURE_SOLUTION,
        )
    ]
    return AnalysisResult(
        issues=issues,
        metrics=estimate_metrics(code, issues),
        suggestions=list(defaults.DEFAULT_SUGGESTIONS),
    )


def _clean_json_string(json_str: str) -> str:
    """Remove trailing commas before closing brackets (common LLM mistake)."""
    return re.sub(r",(\s*[}\]])", r"\1", json_str.strip())


def normalize_severity(value: Any) -> Severity:
    """Map model severity labels onto the four canonical levels."""
    if not isinstance(value, str):
        return Severity.LOW
    label = value.strip().lower()
    label = defaults.SEVERITY_ALIASES.get(label, label)
    try:
        return Severity(label)
    except ValueError:
        return Severity.LOW


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        match = _NUMBER.search(value)
        if not match:
            return None
        value = float(match.group(0))
    if isinstance(value, float):
        # NaN, Infinity and overflowing literals such as 1e999
        return round(value) if math.isfinite(value) else None
    return None


def _first_text(item: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = item.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _coerce_issues(value: Any) -> list[Issue]:
    if not isinstance(value, list):
        return []

    issues = []
    for item in value:
        if not isinstance(item, dict):
            logger.debug(f"Dropping non-object issue entry: {item!r:.80}")
            continue
        line = _coerce_int(
            item.get("line", item.get("lineNumber", item.get("line_number")))
        )
        issues.append(
            Issue(
                title=_first_text(item, "title", "name", "type") or "Untitled issue",
                severity=normalize_severity(item.get("severity")),
                line=max(1, line) if line is not None else 1,
                description=_first_text(item, "description", "message", "detail")
                or "",
                code_snippet=_first_text(item, "codeSnippet", "code_snippet", "code"),
                solution=_first_text(
                    item, "solution", "fix", "recommendation", "remediation"
                ),
            )
        )
    return issues


def _coerce_suggestions(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, list):
        return []

    suggestions = []
    for item in value:
        if isinstance(item, str) and item.strip():
            suggestions.append(item)
        elif isinstance(item, dict):
            text = _first_text(item, "text", "description", "title", "suggestion")
            if text:
                suggestions.append(text)
    return suggestions


def _coerce_metrics(value: Any, code: str, issues: list[Issue]) -> Metrics:
    reported = value if isinstance(value, dict) else {}

    complexity = _coerce_int(reported.get("complexity"))
    if complexity is None:
        complexity = estimate_complexity(code)
    complexity = clamp(complexity, defaults.MIN_COMPLEXITY, defaults.MAX_COMPLEXITY)

    lines = _coerce_int(reported.get("lines"))
    if lines is None or lines < 1:
        lines = count_lines(code)

    maintainability = _coerce_int(reported.get("maintainability"))
    if maintainability is None:
        maintainability = maintainability_score(issues, complexity)

    security = _coerce_int(reported.get("security"))
    if security is None:
        security = security_score(issues)

    return Metrics(
        complexity=complexity,
        lines=lines,
        maintainability=clamp(maintainability, 0, 100),
        security=clamp(security, 0, 100),
    )
