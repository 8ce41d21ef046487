"""validation-session — run rule-schema validation once and inspect the result.

Depends on pydantic for the default rule validator.
"""

from __future__ import annotations

# ── Adapters ────────────────────────────────────────────────────
from .adapters import (
    DEFAULT_MESSAGE,
    FunctionRuleCheck,
    PydanticRuleValidator,
    Rule,
    RuleCheck,
    RuleRegistry,
    build_default_registry,
    parse_rules,
)

# ── Instrumentation ─────────────────────────────────────────────
from .instrumentation import (
    HookRegistration,
    HookRegistry,
    InstrumentationHook,
    describe_outcome,
    get_hook_registry,
    set_hook_registry,
)

# ── Ports ───────────────────────────────────────────────────────
from .ports import IAsyncValidator

# ── Primitives ──────────────────────────────────────────────────
from .primitives import (
    RuleNotFoundError,
    RuleSyntaxError,
    SessionAlreadyExecutedError,
    ValidationSessionError,
    ValidatorError,
)

# ── Session ─────────────────────────────────────────────────────
from .session import ValidationSession

# ── Outcomes ────────────────────────────────────────────────────
from .validation import (
    FailureRecord,
    ValidationFailed,
    ValidationOutcome,
    ValidationPassed,
    ValidatorCrashed,
)

__all__ = [
    # Adapters
    "DEFAULT_MESSAGE",
    "FunctionRuleCheck",
    "PydanticRuleValidator",
    "Rule",
    "RuleCheck",
    "RuleRegistry",
    "build_default_registry",
    "parse_rules",
    # Instrumentation
    "HookRegistration",
    "HookRegistry",
    "InstrumentationHook",
    "describe_outcome",
    "get_hook_registry",
    "set_hook_registry",
    # Ports
    "IAsyncValidator",
    # Primitives
    "RuleNotFoundError",
    "RuleSyntaxError",
    "SessionAlreadyExecutedError",
    "ValidationSessionError",
    "ValidatorError",
    # Session
    "ValidationSession",
    # Outcomes
    "FailureRecord",
    "ValidationFailed",
    "ValidationOutcome",
    "ValidationPassed",
    "ValidatorCrashed",
]
