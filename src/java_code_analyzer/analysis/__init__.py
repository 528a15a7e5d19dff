"""Defect analysis: prompts, normalization, demo data and orchestration."""

from .demo import generate_demo_result
from .engine import AnalysisEngine
from .models import (
    AnalysisOptions,
    AnalysisOutcome,
    AnalysisResult,
    CheckCategory,
    Issue,
    Metrics,
    Severity,
    Summary,
)
from .normalizer import normalize_response

__all__ = [
    "AnalysisEngine",
    "AnalysisOptions",
    "AnalysisOutcome",
    "AnalysisResult",
    "CheckCategory",
    "Issue",
    "Metrics",
    "Severity",
    "Summary",
    "generate_demo_result",
    "normalize_response",
]
