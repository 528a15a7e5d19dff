"""Prompt templates for Java defect analysis.

The system prompt fixes the JSON shape the normalizer expects; the user
prompt carries the requested focus areas and the numbered source.
"""

from .models import AnalysisOptions, CheckCategory

SYSTEM_PROMPT = """You are a senior Java static-analysis reviewer.

Your task is to analyze the Java code you are given and report concrete defects.

## Severity Criteria

- **critical**: Exploitable vulnerability or guaranteed crash/data loss
- **high**: Likely bug or security weakness with significant impact
- **medium**: Performance problem or bug that needs specific conditions
- **low**: Style issue, readability problem or minor best-practice violation

## Output Format

Return ONLY a JSON object, without markdown fences or commentary, matching this schema:

{
  "summary": {"critical": 0, "high": 1, "medium": 0, "low": 0, "total": 1},
  "issues": [
    {
      "title": "Possible NullPointerException",
      "severity": "high",
      "line": 15,
      "description": "user may be null when getName() is called.",
      "codeSnippet": "String name = user.getName();",
      "solution": "Check user for null or use Optional<User>."
    }
  ],
  "suggestions": ["Use try-with-resources for streams"],
  "metrics": {"complexity": 4, "lines": 30, "maintainability": 80, "security": 90}
}

Rules:
1. "severity" must be one of: critical, high, medium, low
2. "line" is the 1-based line number in the submitted code
3. "maintainability" and "security" are scores from 0 to 100
4. Report an empty "issues" list if the code has no defects"""

FOCUS_DESCRIPTIONS = {
    CheckCategory.SECURITY: (
        "Security: injection, unsafe deserialization, hardcoded secrets, "
        "weak cryptography, missing input validation"
    ),
    CheckCategory.PERFORMANCE: (
        "Performance: string concatenation in loops, needless allocation, "
        "inefficient collections, unclosed resources"
    ),
    CheckCategory.BUGS: (
        "Bugs: null dereference, wrong equality checks, swallowed exceptions, "
        "off-by-one errors, concurrency mistakes"
    ),
    CheckCategory.STYLE: (
        "Style: naming, magic numbers, long methods, dead code, "
        "missing documentation"
    ),
}

USER_PROMPT = """Analyze the following Java code{file_label}.

## Focus Areas

{focus_areas}

## Code

{numbered_code}

Return the JSON defect report now."""


def number_lines(code: str) -> str:
    """Prefix each line with its 1-based number so the model can cite lines."""
    lines = code.split("\n")
    width = len(str(len(lines)))
    return "\n".join(f"{i:>{width}} | {line}" for i, line in enumerate(lines, 1))


def build_user_prompt(
    code: str, options: AnalysisOptions, file_name: str | None = None
) -> str:
    focus_areas = "\n".join(
        f"- {FOCUS_DESCRIPTIONS[category]}" for category in options.enabled()
    )
    file_label = f" from `{file_name}`" if file_name else ""
    return USER_PROMPT.format(
        file_label=file_label,
        focus_areas=focus_areas,
        numbered_code=number_lines(code),
    )


def build_messages(
    code: str, options: AnalysisOptions | None = None, file_name: str | None = None
) -> list[dict[str, str]]:
    """Build chat messages for one analysis request.

    Args:
        code: Java source to analyze
        options: Requested check categories (all when None)
        file_name: Optional file name shown to the model

    Returns:
        System and user messages for the chat-completion API
    """
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": build_user_prompt(code, options or AnalysisOptions(), file_name),
        },
    ]
