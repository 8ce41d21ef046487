"""ValidationSession — binds data, rules and messages for a single run."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .instrumentation import get_hook_registry
from .primitives.exceptions import SessionAlreadyExecutedError
from .validation.result import ValidationFailed, ValidationPassed, ValidatorCrashed

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from .ports.validation import IAsyncValidator
    from .validation.result import FailureRecord, ValidationOutcome

logger = logging.getLogger("validation_session.session")


def _default_validator() -> IAsyncValidator:
    from .adapters.pydantic import PydanticRuleValidator

    return PydanticRuleValidator()


class ValidationSession:
    """Validates *data* against a *rules* schema exactly once.

    Validation failures are stored on the session and exposed through
    :meth:`messages` / :meth:`fails`. Internal validator errors and second
    runs raise.

    Usage::

        session = await ValidationSession(
            {"email": "not-an-email"},
            {"email": "required|email"},
        ).run()
        if session.fails():
            return session.messages()
    """

    def __init__(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, Any],
        messages: Mapping[str, Any] | None = None,
        *,
        validator: IAsyncValidator | None = None,
    ) -> None:
        self._data = data
        self._rules = rules
        self._messages: Mapping[str, Any] = messages if messages is not None else {}
        self._validator = validator if validator is not None else _default_validator()
        self._error_messages: tuple[FailureRecord, ...] | None = None
        self._outcome: ValidationOutcome | None = None
        self._executed = False

    @property
    def data(self) -> Mapping[str, Any]:
        return self._data

    @property
    def rules(self) -> Mapping[str, Any]:
        return self._rules

    @property
    def executed(self) -> bool:
        """True once ``run()`` or ``run_all()`` has been called."""
        return self._executed

    @property
    def outcome(self) -> ValidationOutcome | None:
        """The outcome of the single run, or ``None`` before it completes."""
        return self._outcome

    # ── Running ──────────────────────────────────────────────────

    async def run(self) -> ValidationSession:
        """Validate, stopping at the first failing field."""
        return await self._run("validation.run", self._validator.validate)

    async def run_all(self) -> ValidationSession:
        """Validate every field, regardless of earlier failures."""
        return await self._run("validation.run_all", self._validator.validate_all)

    async def _run(
        self,
        operation: str,
        validate: Callable[..., Awaitable[ValidationOutcome]],
    ) -> ValidationSession:
        self._mark_as_executed(operation)

        async def _call() -> ValidationOutcome:
            return await validate(self._data, self._rules, self._messages)

        attributes: dict[str, Any] = {
            "fields": list(self._rules),
            "validator": type(self._validator).__name__,
        }
        logger.debug("Running %s on %d field(s)", operation, len(self._rules))
        outcome = await get_hook_registry().execute_all(operation, attributes, _call)
        self._use_outcome(outcome)
        return self

    def _mark_as_executed(self, operation: str) -> None:
        if self._executed:
            logger.warning("Rejected %s on an already executed session", operation)
            raise SessionAlreadyExecutedError
        self._executed = True

    def _use_outcome(self, outcome: ValidationOutcome) -> None:
        if isinstance(outcome, ValidationPassed):
            self._outcome = outcome
            logger.debug("Validation passed")
        elif isinstance(outcome, ValidationFailed):
            self._outcome = outcome
            self._error_messages = tuple(outcome.failures)
        elif isinstance(outcome, ValidatorCrashed):
            self._outcome = outcome
            logger.error(
                "Validator %s raised an internal error",
                type(self._validator).__name__,
                exc_info=outcome.error,
            )
            raise outcome.error
        else:
            raise TypeError(
                f"{type(self._validator).__name__} returned "
                f"{type(outcome).__name__}, expected a ValidationOutcome"
            )

    # ── Results ──────────────────────────────────────────────────

    def messages(self) -> list[FailureRecord] | None:
        """Failure records, or ``None`` if there are no errors.

        Returns a new list on every call.
        """
        if self._error_messages is None:
            return None
        return list(self._error_messages)

    def fails(self) -> bool:
        """True if the run recorded validation failures."""
        return bool(self._error_messages)
