"""Exception hierarchy for validation-session.

All exceptions inherit from ``ValidationSessionError`` and provide
``to_dict()`` for API-friendly error responses.

Validation *failures* are never raised: they are data, carried by
:class:`~validation_session.validation.result.ValidationFailed`.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class ValidationSessionError(Exception):
    """Root exception for the entire validation-session package."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class SessionAlreadyExecutedError(ValidationSessionError):
    """Raised when ``run()`` / ``run_all()`` is called on a consumed session.

    Usage: A :class:`~validation_session.session.ValidationSession` is
    single-use. Create a new session for every validation request.
    """

    def __init__(self) -> None:
        super().__init__("Cannot re-run validations on same data and rules")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "SESSION_ALREADY_EXECUTED",
            "message": str(self),
        }


class ValidatorError(ValidationSessionError):
    """Base class for internal validator errors (not validation failures)."""


class RuleNotFoundError(ValidatorError):
    """
    Unknown rule named in a rules schema.

    Provides fuzzy-matched suggestions for likely intended rules.
    """

    def __init__(self, rule: str, valid_rules: list[str]) -> None:
        self.rule = rule
        self.valid_rules = valid_rules
        self.suggestions = get_close_matches(rule, valid_rules, n=3, cutoff=0.6)

        message = f"Unknown rule: '{rule}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Valid rules: {', '.join(sorted(valid_rules))}"
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "RULE_NOT_FOUND",
            "rule": self.rule,
            "suggestions": self.suggestions,
            "valid_rules": sorted(self.valid_rules),
        }


class RuleSyntaxError(ValidatorError):
    """Rule expression could not be parsed, or its arguments are invalid."""

    def __init__(self, expression: str, reason: str, field: str | None = None) -> None:
        self.expression = expression
        self.reason = reason
        self.field = field
        where = f" on field '{field}'" if field else ""
        super().__init__(f"Invalid rule '{expression}'{where}: {reason}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "RULE_SYNTAX_ERROR",
            "expression": self.expression,
            "field": self.field,
            "message": self.reason,
        }
