"""Configuration for Java Code Analyzer."""

from .settings import AnalyzerSettings, load_settings

__all__ = ["AnalyzerSettings", "load_settings"]
