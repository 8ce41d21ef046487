"""Failure records and the tagged outcome returned by validators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True)
class FailureRecord:
    """A single failing field: the rule it violated and the rendered message."""

    field: str
    validation: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {
            "field": self.field,
            "validation": self.validation,
            "message": self.message,
        }


@dataclass(frozen=True)
class ValidationPassed:
    """Every field satisfied its rules."""

    @property
    def is_valid(self) -> bool:
        return True


@dataclass(frozen=True)
class ValidationFailed:
    """One or more fields failed.

    Usage::

        outcome = ValidationFailed.of([FailureRecord("email", "email", "...")])
        outcome.errors_by_field()  # {"email": ["..."]}
    """

    failures: tuple[FailureRecord, ...]

    def __post_init__(self) -> None:
        if not self.failures:
            raise ValueError("ValidationFailed requires at least one failure")

    @classmethod
    def of(cls, failures: Iterable[FailureRecord]) -> ValidationFailed:
        return cls(failures=tuple(failures))

    @property
    def is_valid(self) -> bool:
        return False

    def errors_by_field(self) -> dict[str, list[str]]:
        """Group messages by field, preserving failure order."""
        errors: dict[str, list[str]] = {}
        for failure in self.failures:
            errors.setdefault(failure.field, []).append(failure.message)
        return errors


@dataclass(frozen=True)
class ValidatorCrashed:
    """The validator hit an internal error; *error* must be re-raised."""

    error: Exception

    @property
    def is_valid(self) -> bool:
        return False


ValidationOutcome = ValidationPassed | ValidationFailed | ValidatorCrashed
