"""Built-in rules: required, string, number, integer, boolean, email, url, etc.

Type checks and coercion are delegated to pydantic ``TypeAdapter`` instances
running in lax mode, so ``"30"`` satisfies ``number`` and ``"yes"``
satisfies ``boolean``.
"""

from __future__ import annotations

import math
import re
from typing import Annotated, Any

from pydantic import AnyUrl, EmailStr, Field, StrictStr, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..primitives.exceptions import RuleSyntaxError
from .rules import Rule, RuleCheck, RuleRegistry

_STRING: TypeAdapter[str] = TypeAdapter(StrictStr)
_NUMBER: TypeAdapter[float] = TypeAdapter(
    Annotated[float, Field(allow_inf_nan=False)]
)
_INTEGER: TypeAdapter[int] = TypeAdapter(int)
_BOOLEAN: TypeAdapter[bool] = TypeAdapter(bool)
_EMAIL: TypeAdapter[str] = TypeAdapter(EmailStr)
_URL: TypeAdapter[AnyUrl] = TypeAdapter(AnyUrl)

_ACCEPTED = frozenset({"yes", "on", "1", "true"})


def _conforms(adapter: TypeAdapter[Any], value: Any) -> bool:
    try:
        adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def _number_arg(rule: Rule) -> float:
    if len(rule.args) != 1:
        raise RuleSyntaxError(str(rule), "expects exactly one numeric argument")
    try:
        limit = float(rule.args[0])
    except ValueError as exc:
        raise RuleSyntaxError(str(rule), f"'{rule.args[0]}' is not a number") from exc
    if not math.isfinite(limit):
        raise RuleSyntaxError(str(rule), f"'{rule.args[0]}' is not a finite number")
    return limit


def _measure(value: Any) -> float | None:
    """Length for strings and collections, numeric value otherwise."""
    if isinstance(value, (str, list, tuple, dict, set, frozenset)):
        return float(len(value))
    if isinstance(value, bool):
        return None
    try:
        return _NUMBER.validate_python(value)
    except PydanticValidationError:
        return None


class RequiredRule(RuleCheck):
    implicit = True

    @property
    def name(self) -> str:
        return "required"

    def check(self, value: Any, rule: Rule) -> bool:
        if value is None:
            return False
        if isinstance(value, str):
            return value.strip() != ""
        if isinstance(value, (list, tuple, dict, set, frozenset)):
            return len(value) > 0
        return True


class StringRule(RuleCheck):
    @property
    def name(self) -> str:
        return "string"

    def check(self, value: Any, rule: Rule) -> bool:
        return _conforms(_STRING, value)


class NumberRule(RuleCheck):
    @property
    def name(self) -> str:
        return "number"

    def check(self, value: Any, rule: Rule) -> bool:
        if isinstance(value, bool):
            return False
        return _conforms(_NUMBER, value)


class IntegerRule(RuleCheck):
    @property
    def name(self) -> str:
        return "integer"

    def check(self, value: Any, rule: Rule) -> bool:
        if isinstance(value, bool):
            return False
        return _conforms(_INTEGER, value)


class BooleanRule(RuleCheck):
    @property
    def name(self) -> str:
        return "boolean"

    def check(self, value: Any, rule: Rule) -> bool:
        return _conforms(_BOOLEAN, value)


class EmailRule(RuleCheck):
    @property
    def name(self) -> str:
        return "email"

    def check(self, value: Any, rule: Rule) -> bool:
        return _conforms(_EMAIL, value)


class UrlRule(RuleCheck):
    @property
    def name(self) -> str:
        return "url"

    def check(self, value: Any, rule: Rule) -> bool:
        return isinstance(value, str) and _conforms(_URL, value)


class MinRule(RuleCheck):
    @property
    def name(self) -> str:
        return "min"

    def check(self, value: Any, rule: Rule) -> bool:
        limit = _number_arg(rule)
        measured = _measure(value)
        return measured is not None and measured >= limit


class MaxRule(RuleCheck):
    @property
    def name(self) -> str:
        return "max"

    def check(self, value: Any, rule: Rule) -> bool:
        limit = _number_arg(rule)
        measured = _measure(value)
        return measured is not None and measured <= limit


class InRule(RuleCheck):
    @property
    def name(self) -> str:
        return "in"

    def check(self, value: Any, rule: Rule) -> bool:
        if not rule.args:
            raise RuleSyntaxError(str(rule), "expects at least one allowed value")
        return str(value) in rule.args


class RegexRule(RuleCheck):
    @property
    def name(self) -> str:
        return "regex"

    def check(self, value: Any, rule: Rule) -> bool:
        if not rule.args:
            raise RuleSyntaxError(str(rule), "expects a pattern")
        try:
            pattern = re.compile(rule.argument)
        except re.error as exc:
            raise RuleSyntaxError(str(rule), f"invalid pattern: {exc}") from exc
        return bool(pattern.search(str(value)))


class AcceptedRule(RuleCheck):
    implicit = True

    @property
    def name(self) -> str:
        return "accepted"

    def check(self, value: Any, rule: Rule) -> bool:
        if value is True:
            return True
        if isinstance(value, (int, str)) and not isinstance(value, bool):
            return str(value).strip().lower() in _ACCEPTED
        return False


def build_default_registry() -> RuleRegistry:
    """
    Create a registry with all built-in rules.

    Returns a fresh :class:`RuleRegistry`; register custom rules on it
    before handing it to a validator.

    Example:
        >>> registry = build_default_registry()
        >>> registry.has("email")
        True
    """
    registry = RuleRegistry()
    registry.register_all(
        # Presence
        RequiredRule(),
        AcceptedRule(),
        # Types
        StringRule(),
        NumberRule(),
        IntegerRule(),
        BooleanRule(),
        # Formats
        EmailRule(),
        UrlRule(),
        RegexRule(),
        # Bounds and sets
        MinRule(),
        MaxRule(),
        InRule(),
    )
    return registry
