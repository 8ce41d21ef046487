"""Primitives — lowest-level building blocks (exceptions)."""

from __future__ import annotations

from .exceptions import (
    RuleNotFoundError,
    RuleSyntaxError,
    SessionAlreadyExecutedError,
    ValidationSessionError,
    ValidatorError,
)

__all__ = [
    "RuleNotFoundError",
    "RuleSyntaxError",
    "SessionAlreadyExecutedError",
    "ValidationSessionError",
    "ValidatorError",
]
