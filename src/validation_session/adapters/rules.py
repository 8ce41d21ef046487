"""
Rule expressions and the rule registry.

A rules schema maps field names to rule expressions::

    {"email": "required|email", "tags": ["required", "min:1"]}

Each expression is a ``|``-separated list of ``name`` or ``name:arg1,arg2``
segments (or a list of such segments). Segments are parsed into
:class:`Rule` instances and evaluated by :class:`RuleCheck` strategies
looked up in a :class:`RuleRegistry`.

Use the list form for ``regex`` rules whose pattern contains ``|``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..primitives.exceptions import RuleNotFoundError, RuleSyntaxError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping


@dataclass(frozen=True)
class Rule:
    """A parsed rule segment, e.g. ``min:3`` → ``Rule("min", ("3",))``."""

    name: str
    args: tuple[str, ...] = ()

    @property
    def argument(self) -> str:
        """Arguments joined back with commas, as used in messages."""
        return ",".join(self.args)

    def __str__(self) -> str:
        if not self.args:
            return self.name
        return f"{self.name}:{self.argument}"


def parse_rule(segment: str) -> Rule:
    """Parse a single ``name[:args]`` segment."""
    name, sep, raw_args = segment.strip().partition(":")
    name = name.strip()
    if not name:
        raise RuleSyntaxError(segment, "missing rule name")
    if not sep:
        return Rule(name)
    if not raw_args:
        raise RuleSyntaxError(segment, "missing arguments after ':'")
    return Rule(name, tuple(arg.strip() for arg in raw_args.split(",")))


def parse_rules(expression: str | list[str] | tuple[str, ...]) -> list[Rule]:
    """Parse a field's rule expression into an ordered list of rules.

    Empty segments (``"required||email"``) are ignored.
    """
    if isinstance(expression, str):
        segments = expression.split("|")
    elif isinstance(expression, (list, tuple)):
        segments = list(expression)
    else:
        raise RuleSyntaxError(
            repr(expression),
            f"expected a string or list of strings, got {type(expression).__name__}",
        )

    rules: list[Rule] = []
    for segment in segments:
        if not isinstance(segment, str):
            raise RuleSyntaxError(repr(segment), "rule segments must be strings")
        if not segment.strip():
            continue
        rules.append(parse_rule(segment))
    return rules


class RuleCheck(ABC):
    """
    Strategy interface for a single validation rule.

    Each rule is an isolated class with a single ``check`` method.
    """

    #: When False the rule is skipped for missing/None values.
    implicit: bool = False

    @property
    @abstractmethod
    def name(self) -> str:
        """The rule name used in expressions."""
        ...

    @abstractmethod
    def check(self, value: Any, rule: Rule) -> bool:
        """
        Evaluate the rule against a field value.

        Args:
            value: The field value resolved from the data.
            rule: The parsed rule, carrying its arguments.

        Returns:
            True if the value satisfies the rule.

        Raises:
            RuleSyntaxError: If the rule arguments are invalid.
        """
        ...


class FunctionRuleCheck(RuleCheck):
    """Adapts a plain ``(value, args) -> bool`` callable to :class:`RuleCheck`."""

    def __init__(
        self,
        name: str,
        func: Callable[[Any, tuple[str, ...]], bool],
        *,
        implicit: bool = False,
    ) -> None:
        self._name = name
        self._func = func
        self.implicit = implicit

    @property
    def name(self) -> str:
        return self._name

    def check(self, value: Any, rule: Rule) -> bool:
        return bool(self._func(value, rule.args))


class RuleRegistry:
    """
    Registry of RuleCheck instances keyed by rule name.

    Usage::

        registry = RuleRegistry()
        registry.register(RequiredRule())
        registry.register_func("even", lambda value, args: value % 2 == 0)

        schema = registry.compile({"age": "required|even"})
    """

    def __init__(self) -> None:
        self._checks: dict[str, RuleCheck] = {}

    # -- registration --------------------------------------------------------

    def register(self, check: RuleCheck) -> None:
        """Register a rule strategy instance."""
        self._checks[check.name] = check

    def register_all(self, *checks: RuleCheck) -> None:
        """Register multiple rule strategy instances at once."""
        for check in checks:
            self.register(check)

    def register_func(
        self,
        name: str,
        func: Callable[[Any, tuple[str, ...]], bool],
        *,
        implicit: bool = False,
    ) -> None:
        """Register a plain callable as a rule."""
        self.register(FunctionRuleCheck(name, func, implicit=implicit))

    def unregister(self, name: str) -> None:
        """Remove a rule from the registry."""
        self._checks.pop(name, None)

    # -- look-up -------------------------------------------------------------

    def get(self, name: str) -> RuleCheck:
        """Return the registered rule.

        Raises:
            RuleNotFoundError: If no rule is registered under *name*.
        """
        check = self._checks.get(name)
        if check is None:
            raise RuleNotFoundError(name, list(self._checks))
        return check

    def has(self, name: str) -> bool:
        return name in self._checks

    @property
    def supported_rules(self) -> set[str]:
        return set(self._checks.keys())

    # -- compilation ---------------------------------------------------------

    def compile(self, rules: Mapping[str, Any]) -> dict[str, list[Rule]]:
        """Parse every field's expression and verify all rule names exist.

        Raises:
            RuleSyntaxError: If an expression cannot be parsed.
            RuleNotFoundError: If an expression names an unknown rule.
        """
        schema: dict[str, list[Rule]] = {}
        for field, expression in rules.items():
            try:
                parsed = parse_rules(expression)
            except RuleSyntaxError as exc:
                raise RuleSyntaxError(exc.expression, exc.reason, field=field) from exc
            for rule in parsed:
                self.get(rule.name)
            schema[field] = parsed
        return schema
