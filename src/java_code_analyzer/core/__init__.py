"""Core functionality for Java Code Analyzer."""
