"""Java Code Analyzer - LLM-backed defect reports for Java snippets."""

__version__ = "1.2.0"
__author__ = "Java Code Analyzer contributors"

from .core.exceptions import CodeAnalyzerError

__all__ = ["CodeAnalyzerError", "__version__"]
