"""
Exceptions raised by the string calculator.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from .rules import NEGATIVES_MESSAGE_PREFIX, NEGATIVES_SEPARATOR, Number, format_number


class CalculatorError(Exception):
    """Base exception for string calculator errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class NegativeNumberError(CalculatorError, ValueError):
    """Input contained one or more negative values.

    The message lists every negative in input order, e.g.
    ``Negatives not allowed: -2, -5``.
    """

    def __init__(self, negatives: List[Number]) -> None:
        message = NEGATIVES_MESSAGE_PREFIX + NEGATIVES_SEPARATOR.join(format_number(v) for v in negatives)
        super().__init__(message, {"negatives": list(negatives)})
        self.negatives = list(negatives)
