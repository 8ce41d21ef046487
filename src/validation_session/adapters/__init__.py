"""Adapters — concrete IAsyncValidator implementations and rule strategies."""

from __future__ import annotations

from .builtin_rules import build_default_registry
from .pydantic import DEFAULT_MESSAGE, PydanticRuleValidator
from .rules import FunctionRuleCheck, Rule, RuleCheck, RuleRegistry, parse_rules

__all__ = [
    "DEFAULT_MESSAGE",
    "FunctionRuleCheck",
    "PydanticRuleValidator",
    "Rule",
    "RuleCheck",
    "RuleRegistry",
    "build_default_registry",
    "parse_rules",
]
