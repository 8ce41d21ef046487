"""Validation outcomes: FailureRecord and the ValidationOutcome variants."""

from __future__ import annotations

from .result import (
    FailureRecord,
    ValidationFailed,
    ValidationOutcome,
    ValidationPassed,
    ValidatorCrashed,
)

__all__ = [
    "FailureRecord",
    "ValidationFailed",
    "ValidationOutcome",
    "ValidationPassed",
    "ValidatorCrashed",
]
