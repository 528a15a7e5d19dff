"""Allow ``python -m java_code_analyzer``."""

from .cli.main import app

app()
