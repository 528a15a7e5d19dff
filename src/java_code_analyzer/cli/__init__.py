"""Command-line interface for Java Code Analyzer."""
