"""HTTP server for Java Code Analyzer."""

from .app import create_app

__all__ = ["create_app"]
