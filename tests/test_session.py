from __future__ import annotations

import logging
import math
from typing import Any
from unittest.mock import AsyncMock

import pytest

from validation_session import (
    FailureRecord,
    HookRegistry,
    IAsyncValidator,
    PydanticRuleValidator,
    RuleNotFoundError,
    SessionAlreadyExecutedError,
    ValidationFailed,
    ValidationPassed,
    ValidationSession,
    ValidatorCrashed,
    set_hook_registry,
)

# --- Helpers ---


def _mock_validator(outcome: Any) -> AsyncMock:
    validator = AsyncMock(spec=IAsyncValidator)
    validator.validate.return_value = outcome
    validator.validate_all.return_value = outcome
    return validator


EMAIL_FAILURE = FailureRecord(
    field="email", validation="email", message="email validation failed on email"
)


# --- Run with the default validator ---


@pytest.mark.asyncio
async def test_run_records_email_failure() -> None:
    session = ValidationSession(
        {"email": "not-an-email"}, {"email": "required|email"}, {}
    )

    result = await session.run()

    assert result is session
    assert session.fails() is True
    messages = session.messages()
    assert messages is not None
    assert len(messages) == 1
    assert messages[0].field == "email"
    assert messages[0].validation == "email"


@pytest.mark.asyncio
async def test_run_passes_valid_number() -> None:
    session = await ValidationSession({"age": 30}, {"age": "required|number"}).run()

    assert session.fails() is False
    assert session.messages() is None
    assert isinstance(session.outcome, ValidationPassed)


@pytest.mark.asyncio
async def test_run_stops_at_first_failing_field() -> None:
    session = ValidationSession(
        {"email": "nope", "age": "old"},
        {"email": "required|email", "age": "required|number"},
    )

    await session.run()

    messages = session.messages()
    assert messages is not None
    assert [m.field for m in messages] == ["email"]


@pytest.mark.asyncio
async def test_run_all_collects_every_failing_field() -> None:
    session = ValidationSession(
        {"email": "nope", "age": "old", "name": "Ada"},
        {"email": "required|email", "age": "required|number", "name": "required"},
    )

    await session.run_all()

    messages = session.messages()
    assert messages is not None
    assert {m.field for m in messages} == {"email", "age"}
    assert session.fails()


@pytest.mark.asyncio
async def test_custom_messages_are_used() -> None:
    session = await ValidationSession(
        {"email": ""},
        {"email": "required|email"},
        {"email.required": "Please enter your {field}"},
    ).run()

    messages = session.messages()
    assert messages is not None
    assert messages[0].message == "Please enter your email"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "value", ["nan", "NaN", "inf", "-Infinity", math.nan, math.inf]
)
async def test_non_finite_numbers_fail(value: Any) -> None:
    session = await ValidationSession({"age": value}, {"age": "required|number"}).run()

    assert session.fails()
    messages = session.messages()
    assert messages is not None
    assert messages[0].validation == "number"


# --- Single-use contract ---


@pytest.mark.asyncio
async def test_run_twice_raises() -> None:
    session = ValidationSession({"age": 30}, {"age": "number"})
    await session.run()

    with pytest.raises(SessionAlreadyExecutedError):
        await session.run()


@pytest.mark.asyncio
async def test_run_then_run_all_raises_and_keeps_results() -> None:
    validator = _mock_validator(ValidationFailed.of([EMAIL_FAILURE]))
    session = ValidationSession({}, {"email": "email"}, validator=validator)
    await session.run()

    with pytest.raises(SessionAlreadyExecutedError):
        await session.run_all()

    assert session.messages() == [EMAIL_FAILURE]
    validator.validate_all.assert_not_called()


@pytest.mark.asyncio
async def test_rerun_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    session = ValidationSession({}, {}, validator=_mock_validator(ValidationPassed()))
    await session.run_all()

    with (
        caplog.at_level(logging.WARNING, logger="validation_session.session"),
        pytest.raises(SessionAlreadyExecutedError),
    ):
        await session.run()

    assert "already executed" in caplog.text


@pytest.mark.asyncio
async def test_executed_flag_distinguishes_not_run_from_passed() -> None:
    session = ValidationSession({}, {}, validator=_mock_validator(ValidationPassed()))
    assert session.executed is False
    assert session.outcome is None
    assert session.messages() is None

    await session.run()

    assert session.executed is True
    assert session.outcome == ValidationPassed()
    assert session.messages() is None


# --- Delegation ---


@pytest.mark.asyncio
async def test_run_delegates_to_validate() -> None:
    validator = _mock_validator(ValidationPassed())
    data, rules, messages = {"a": 1}, {"a": "required"}, {"required": "!"}

    await ValidationSession(data, rules, messages, validator=validator).run()

    validator.validate.assert_awaited_once_with(data, rules, messages)
    validator.validate_all.assert_not_called()


@pytest.mark.asyncio
async def test_run_all_delegates_to_validate_all() -> None:
    validator = _mock_validator(ValidationPassed())

    await ValidationSession({"a": 1}, {"a": "required"}, validator=validator).run_all()

    validator.validate_all.assert_awaited_once_with({"a": 1}, {"a": "required"}, {})
    validator.validate.assert_not_called()


@pytest.mark.asyncio
async def test_failure_records_are_passed_through() -> None:
    records = [
        EMAIL_FAILURE,
        FailureRecord(field="age", validation="number", message="custom"),
    ]
    validator = _mock_validator(ValidationFailed.of(records))

    session = await ValidationSession({}, {}, validator=validator).run_all()

    assert session.messages() == records


# --- Unexpected errors ---


@pytest.mark.asyncio
async def test_crashed_outcome_is_reraised() -> None:
    error = RuntimeError("rule blew up")
    session = ValidationSession(
        {}, {}, validator=_mock_validator(ValidatorCrashed(error))
    )

    with pytest.raises(RuntimeError, match="rule blew up"):
        await session.run()

    assert session.messages() is None
    assert session.fails() is False
    assert session.executed is True


@pytest.mark.asyncio
async def test_unknown_rule_propagates_from_default_validator() -> None:
    session = ValidationSession({"email": "a"}, {"email": "required|emial"})

    with pytest.raises(RuleNotFoundError) as exc_info:
        await session.run()

    assert "email" in exc_info.value.suggestions
    assert session.messages() is None


@pytest.mark.asyncio
async def test_validator_exception_is_not_absorbed() -> None:
    validator = AsyncMock(spec=IAsyncValidator)
    validator.validate.side_effect = ConnectionError("remote validator down")

    session = ValidationSession({}, {}, validator=validator)

    with pytest.raises(ConnectionError):
        await session.run()
    assert session.messages() is None


@pytest.mark.asyncio
async def test_non_outcome_return_raises_type_error() -> None:
    session = ValidationSession({}, {}, validator=_mock_validator([EMAIL_FAILURE]))

    with pytest.raises(TypeError, match="expected a ValidationOutcome"):
        await session.run()
    assert session.messages() is None
    assert session.outcome is None


# --- Instrumentation ---


class RecordingHook:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def __call__(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Any,
    ) -> Any:
        self.calls.append((operation, dict(attributes)))
        return await next_handler()


@pytest.mark.asyncio
async def test_runs_are_wrapped_by_hooks() -> None:
    registry = HookRegistry()
    hook = RecordingHook()
    registry.register(hook, operations=["validation.*"])
    set_hook_registry(registry)

    await ValidationSession(
        {"age": 30},
        {"age": "number"},
        validator=PydanticRuleValidator(),
    ).run()
    await ValidationSession({"age": 30}, {"age": "number"}).run_all()

    assert [op for op, _ in hook.calls] == ["validation.run", "validation.run_all"]
    assert hook.calls[0][1] == {
        "fields": ["age"],
        "validator": "PydanticRuleValidator",
    }


@pytest.mark.asyncio
async def test_messages_returns_a_copy() -> None:
    validator = _mock_validator(ValidationFailed.of([EMAIL_FAILURE]))
    session = await ValidationSession({}, {}, validator=validator).run()

    returned = session.messages()
    assert returned is not None
    returned.clear()

    assert session.fails() is True
    assert session.messages() == [EMAIL_FAILURE]


@pytest.mark.asyncio
async def test_hooks_see_outcome_after_validation() -> None:
    seen: dict[str, Any] = {}

    async def capture(
        operation: str, attributes: dict[str, Any], next_handler: Any
    ) -> Any:
        outcome = await next_handler()
        seen.update(attributes)
        return outcome

    registry = HookRegistry()
    registry.register(capture)
    set_hook_registry(registry)

    await ValidationSession(
        {"email": "nope", "age": 30},
        {"email": "required|email", "age": "number"},
    ).run_all()

    assert seen["outcome"] == "ValidationFailed"
    assert seen["failed_fields"] == ["email"]
