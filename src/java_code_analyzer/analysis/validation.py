"""Request validation for submitted source text."""

from typing import Any

from ..config import defaults
from ..core.exceptions import InputValidationError


def validate_code(code: Any, max_length: int = defaults.MAX_CODE_LENGTH) -> str:
    """Return ``code`` unchanged if it is acceptable for analysis.

    Raises:
        InputValidationError: If code is missing, blank or longer than
            ``max_length`` characters
    """
    if not isinstance(code, str) or not code.strip():
        raise InputValidationError("Code must not be empty")

    if len(code) > max_length:
        raise InputValidationError(
            f"Code is too long; please limit it to {max_length} characters",
            context={"length": len(code), "max_length": max_length},
        )

    return code
