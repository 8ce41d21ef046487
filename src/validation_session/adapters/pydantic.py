"""PydanticRuleValidator — rule-string validation backed by pydantic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from ..validation.result import (
    FailureRecord,
    ValidationFailed,
    ValidationPassed,
    ValidatorCrashed,
)
from .builtin_rules import build_default_registry

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from ..validation.result import ValidationOutcome
    from .rules import Rule, RuleRegistry

logger = logging.getLogger("validation_session.adapters")

DEFAULT_MESSAGE = "{validation} validation failed on {field}"

_MISSING = object()


def resolve_field(data: Mapping[str, Any], field: str) -> Any:
    """Look up *field* in *data*, following dotted paths into nested mappings.

    Returns ``None`` when any segment is missing.
    """
    if field in data:
        return data[field]
    current: Any = data
    for part in field.split("."):
        if not hasattr(current, "get"):
            return None
        current = current.get(part, _MISSING)
        if current is _MISSING:
            return None
    return current


def render_message(template: str, field: str, rule: Rule) -> str:
    """Interpolate ``{field}``, ``{validation}`` and ``{argument}``."""
    return (
        template.replace("{field}", field)
        .replace("{validation}", rule.name)
        .replace("{argument}", rule.argument)
    )


class PydanticRuleValidator:
    """Validates data against a rules schema, one rule string per field.

    Implements :class:`~validation_session.ports.validation.IAsyncValidator`.
    Rule checks come from a :class:`~validation_session.adapters.rules.RuleRegistry`
    (the built-in rules delegate typing and coercion to pydantic).

    Message lookup order for a failing rule is ``messages["<field>.<rule>"]``,
    then ``messages["<rule>"]``, then *default_message*. A message may be a
    template string or a callable ``(field, validation, args) -> str``.

    Usage::

        validator = PydanticRuleValidator()
        outcome = await validator.validate_all(
            {"email": "nope"}, {"email": "required|email"}, {}
        )
    """

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        *,
        default_message: str = DEFAULT_MESSAGE,
    ) -> None:
        self._registry = registry if registry is not None else build_default_registry()
        self._default_message = default_message

    @property
    def registry(self) -> RuleRegistry:
        return self._registry

    async def validate(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, Any],
        messages: Mapping[str, Any],
    ) -> ValidationOutcome:
        """Validate *data*, stopping at the first failing field."""
        return self._evaluate(data, rules, messages, bail=True)

    async def validate_all(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, Any],
        messages: Mapping[str, Any],
    ) -> ValidationOutcome:
        """Validate every field and collect all failures."""
        return self._evaluate(data, rules, messages, bail=False)

    def _evaluate(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, Any],
        messages: Mapping[str, Any],
        *,
        bail: bool,
    ) -> ValidationOutcome:
        try:
            failures = list(self._failures(data, rules, messages, bail=bail))
        except Exception as exc:  # noqa: BLE001
            logger.debug("Validator crashed: %s", exc)
            return ValidatorCrashed(exc)

        if failures:
            logger.debug(
                "Validation failed on %d field(s): %s",
                len(failures),
                ", ".join(f.field for f in failures),
            )
            return ValidationFailed.of(failures)
        return ValidationPassed()

    def _failures(
        self,
        data: Mapping[str, Any],
        rules: Mapping[str, Any],
        messages: Mapping[str, Any],
        *,
        bail: bool,
    ) -> Iterator[FailureRecord]:
        schema = self._registry.compile(rules)
        for field, field_rules in schema.items():
            value = resolve_field(data, field)
            for rule in field_rules:
                check = self._registry.get(rule.name)
                if value is None and not check.implicit:
                    continue
                if check.check(value, rule):
                    continue
                yield FailureRecord(
                    field=field,
                    validation=rule.name,
                    message=self._message(messages, field, rule),
                )
                if bail:
                    return
                # Only the first failing rule of a field is reported.
                break

    def _message(self, messages: Mapping[str, Any], field: str, rule: Rule) -> str:
        custom = messages.get(f"{field}.{rule.name}", messages.get(rule.name))
        if custom is None:
            return render_message(self._default_message, field, rule)
        if callable(custom):
            return str(custom(field, rule.name, rule.args))
        return render_message(str(custom), field, rule)
