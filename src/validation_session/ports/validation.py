"""IAsyncValidator — pluggable rule-validation protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ..validation.result import ValidationOutcome


@runtime_checkable
class IAsyncValidator(Protocol):
    """Protocol for validators that evaluate a rules schema against data.

    The rule language and message interpolation belong to the
    implementation. Neither method raises for validation failures or
    internal errors; both are reported through the returned
    :data:`~validation_session.validation.result.ValidationOutcome`.
    """

    async def validate(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, Any],
        messages: Mapping[str, Any],
    ) -> ValidationOutcome:
        """Validate *data*, stopping at the first failing field.

        Must return ``ValidationPassed()``, ``ValidationFailed(...)`` holding
        exactly one field's failure, or ``ValidatorCrashed(error)``.
        """
        ...

    async def validate_all(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, Any],
        messages: Mapping[str, Any],
    ) -> ValidationOutcome:
        """Validate every field in *rules* and collect all failures."""
        ...
