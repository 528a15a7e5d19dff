"""Demo analysis used when no API key is configured.

Findings are derived from simple line-level patterns over the submitted
source, so the report points at real lines. When nothing matches, a few
sample findings are picked with a generator seeded from the code's hash:
the same code always produces the same demo report. No network I/O.
"""

import hashlib
import random
import re
from dataclasses import dataclass

from .metrics import count_lines, estimate_metrics
from .models import AnalysisOptions, AnalysisResult, CheckCategory, Issue, Severity

# Lines inspected above a match when a rule only applies inside loops
LOOP_LOOKBACK = 5
MAX_SNIPPET_LENGTH = 200

_LOOP_PATTERN = re.compile(r"\b(?:for|while)\b")


@dataclass(frozen=True)
class DemoRule:
    """Line pattern that produces one demo finding."""

    category: CheckCategory
    severity: Severity
    title: str
    pattern: re.Pattern[str]
    description: str
    solution: str
    inside_loop: bool = False
    skip_if: re.Pattern[str] | None = None


DEMO_RULES = [
    DemoRule(
        category=CheckCategory.SECURITY,
        severity=Severity.CRITICAL,
        title="SQL query built by string concatenation",
        pattern=re.compile(r'(?i)"\s*(?:select|insert|update|delete)\b[^"]*"\s*\+'),
        description="User-controlled values concatenated into SQL allow injection.",
        solution="Use a PreparedStatement with ? placeholders.",
    ),
    DemoRule(
        category=CheckCategory.SECURITY,
        severity=Severity.HIGH,
        title="Hardcoded credential",
        pattern=re.compile(
            r'(?i)\b(?:password|passwd|secret|api_?key|token)\w*\s*=\s*"[^"]+"'
        ),
        description="Secrets in source code leak through version control.",
        solution="Load credentials from the environment or a secret store.",
    ),
    DemoRule(
        category=CheckCategory.BUGS,
        severity=Severity.HIGH,
        title="String compared with ==",
        pattern=re.compile(r'==\s*"|"\s*=='),
        description="== compares references, not string contents.",
        solution='Use "literal".equals(value) or Objects.equals(a, b).',
    ),
    DemoRule(
        category=CheckCategory.BUGS,
        severity=Severity.MEDIUM,
        title="Empty catch block",
        pattern=re.compile(r"catch\s*\([^)]*\)\s*\{\s*\}"),
        description="The exception is silently swallowed.",
        solution="Log the exception or rethrow it wrapped in a meaningful type.",
    ),
    DemoRule(
        category=CheckCategory.BUGS,
        severity=Severity.MEDIUM,
        title="Overly broad catch",
        pattern=re.compile(r"catch\s*\(\s*(?:Exception|Throwable)\s+\w+\s*\)"),
        description="Catching Exception hides programming errors.",
        solution="Catch the specific checked exceptions this block can throw.",
    ),
    DemoRule(
        category=CheckCategory.PERFORMANCE,
        severity=Severity.MEDIUM,
        title="String concatenation inside loop",
        pattern=re.compile(r"\w+\s*\+=\s*"),
        description="Each += on a String allocates a new object per iteration.",
        solution="Accumulate into a StringBuilder and call toString() once.",
        inside_loop=True,
        skip_if=re.compile(r"\+=\s*\d+\s*;"),
    ),
    DemoRule(
        category=CheckCategory.PERFORMANCE,
        severity=Severity.MEDIUM,
        title="Stream may not be closed",
        pattern=re.compile(
            r"new\s+(?:FileInputStream|FileOutputStream|FileReader|FileWriter"
            r"|BufferedReader|BufferedWriter|Scanner)\b"
        ),
        description="The resource leaks if an exception is thrown before close().",
        solution="Open the resource in a try-with-resources statement.",
        skip_if=re.compile(r"\btry\s*\("),
    ),
    DemoRule(
        category=CheckCategory.STYLE,
        severity=Severity.LOW,
        title="printStackTrace() used for error reporting",
        pattern=re.compile(r"\.printStackTrace\s*\(\s*\)"),
        description="Stack traces on stderr bypass the application's logging.",
        solution="Log the exception with a logger such as SLF4J.",
    ),
    DemoRule(
        category=CheckCategory.STYLE,
        severity=Severity.LOW,
        title="Console output instead of logger",
        pattern=re.compile(r"System\.(?:out|err)\.print"),
        description="System.out cannot be filtered or routed like log output.",
        solution="Replace console output with a logger call.",
    ),
]

# (category, severity, title, description, snippet, solution)
SAMPLE_FINDINGS = [
    (
        CheckCategory.BUGS,
        Severity.HIGH,
        "Potential NullPointerException",
        "A value that may be null is dereferenced without a check.",
        "String result = user.getName();",
        "Add a null check: if (user != null) { ... }",
    ),
    (
        CheckCategory.PERFORMANCE,
        Severity.MEDIUM,
        "Inefficient string building",
        "Repeated string concatenation creates many temporary objects.",
        "result += item;",
        "Use StringBuilder: StringBuilder sb = new StringBuilder();",
    ),
    (
        CheckCategory.SECURITY,
        Severity.MEDIUM,
        "Missing input validation",
        "External input is used without validating its range or format.",
        None,
        "Validate arguments at the public API boundary.",
    ),
    (
        CheckCategory.STYLE,
        Severity.LOW,
        "Magic number",
        "A numeric literal without a name obscures its meaning.",
        None,
        "Extract the literal into a named static final constant.",
    ),
    (
        CheckCategory.STYLE,
        Severity.LOW,
        "Missing Javadoc on public method",
        "Public methods without documentation are harder to use correctly.",
        None,
        "Document parameters, return value and thrown exceptions.",
    ),
]

CATEGORY_SUGGESTIONS = {
    CheckCategory.SECURITY: "Add input validation at every public entry point",
    CheckCategory.PERFORMANCE: "Use try-with-resources to manage streams and connections",
    CheckCategory.BUGS: "Add unit tests for null and boundary inputs",
    CheckCategory.STYLE: "Adopt a logger and a consistent naming convention",
}


def _seeded_random(code: str) -> random.Random:
    digest = hashlib.sha256(code.encode("utf-8")).hexdigest()
    return random.Random(int(digest[:16], 16))


def _near_loop(lines: list[str], index: int) -> bool:
    start = max(0, index - LOOP_LOOKBACK)
    return any(_LOOP_PATTERN.search(line) for line in lines[start : index + 1])


def _rule_findings(lines: list[str], categories: set[CheckCategory]) -> list[Issue]:
    issues = []
    for rule in DEMO_RULES:
        if rule.category not in categories:
            continue
        for index, line in enumerate(lines):
            if not rule.pattern.search(line):
                continue
            if rule.skip_if is not None and rule.skip_if.search(line):
                continue
            if rule.inside_loop and not _near_loop(lines, index):
                continue
            issues.append(
                Issue(
                    title=rule.title,
                    severity=rule.severity,
                    line=index + 1,
                    description=f"Line {index + 1}: {rule.description}",
                    code_snippet=line.strip()[:MAX_SNIPPET_LENGTH],
                    solution=rule.solution,
                )
            )
            break
    return issues


def _sample_findings(
    code: str, categories: set[CheckCategory], line_count: int
) -> list[Issue]:
    rng = _seeded_random(code)
    pool = [s for s in SAMPLE_FINDINGS if s[0] in categories] or SAMPLE_FINDINGS
    picks = rng.sample(pool, k=rng.randint(1, min(3, len(pool))))
    return [
        Issue(
            title=f"Example: {title}",
            severity=severity,
            line=rng.randint(1, line_count),
            description=description,
            code_snippet=snippet,
            solution=solution,
        )
        for _, severity, title, description, snippet, solution in picks
    ]


def generate_demo_result(
    code: str, options: AnalysisOptions | None = None
) -> AnalysisResult:
    """Build a demo report for ``code`` without calling any external service.

    Args:
        code: Java source (already validated)
        options: Requested check categories (all when None)

    Returns:
        AnalysisResult with findings, suggestions and locally computed metrics
    """
    categories = set((options or AnalysisOptions()).enabled())
    lines = code.split("\n")

    issues = _rule_findings(lines, categories)
    if not issues:
        issues = _sample_findings(code, categories, count_lines(code))
    issues.sort(key=lambda issue: issue.line)

    suggestions = [
        CATEGORY_SUGGESTIONS[category]
        for category in CheckCategory
        if category in categories
    ]

    return AnalysisResult(
        issues=issues,
        metrics=estimate_metrics(code, issues),
        suggestions=suggestions,
    )
