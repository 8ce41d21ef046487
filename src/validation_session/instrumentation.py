"""Instrumentation hooks around validation runs.

Hooks wrap ``validation.run`` / ``validation.run_all``. Before the validator
is called the attributes hold ``fields`` and ``validator``; once
``next_handler()`` returns they also hold ``outcome`` (the outcome class
name) and ``failed_fields``, so a hook can time the run and report the
result in one place::

    class Timing:
        async def __call__(self, operation, attributes, next_handler):
            start = time.perf_counter()
            outcome = await next_handler()
            elapsed = time.perf_counter() - start
            metrics.observe(operation, attributes["outcome"], elapsed)
            return outcome
"""

from __future__ import annotations

import fnmatch
import logging
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from .validation.result import ValidationFailed

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .validation.result import ValidationOutcome

logger = logging.getLogger("validation_session.instrumentation")


@runtime_checkable
class InstrumentationHook(Protocol):
    """Protocol for hooks wrapping a validation run (tracing, metrics, etc.)."""

    async def __call__(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Callable[[], Awaitable[ValidationOutcome]],
    ) -> ValidationOutcome:
        """Wrap the run; must return the outcome produced by *next_handler*."""
        ...


@dataclass(frozen=True)
class HookRegistration:
    """A hook, its priority and the operation patterns it applies to."""

    hook: InstrumentationHook
    priority: int = 0
    operations: tuple[str, ...] = ()

    def applies_to(self, operation: str) -> bool:
        if not self.operations:
            return True
        return any(fnmatch.fnmatch(operation, pattern) for pattern in self.operations)


def describe_outcome(outcome: ValidationOutcome) -> dict[str, Any]:
    """Attributes recorded after the validator returns."""
    failed: list[str] = []
    if isinstance(outcome, ValidationFailed):
        failed = [failure.field for failure in outcome.failures]
    return {"outcome": type(outcome).__name__, "failed_fields": failed}


class HookRegistry:
    """Ordered hooks for validation runs.

    The lowest ``priority`` is the outermost wrapper.
    """

    def __init__(self) -> None:
        self._registrations: list[HookRegistration] = []

    def register(
        self,
        hook: InstrumentationHook,
        *,
        priority: int = 0,
        operations: list[str] | None = None,
    ) -> HookRegistration:
        """Register *hook* for operations matching any of *operations*."""
        registration = HookRegistration(hook, priority, tuple(operations or ()))
        self._registrations.append(registration)
        self._registrations.sort(key=lambda r: r.priority)
        logger.debug(
            "Registered hook %s (priority=%d)", type(hook).__name__, priority
        )
        return registration

    def unregister(self, registration: HookRegistration) -> None:
        """Remove a registration returned by :meth:`register`."""
        if registration in self._registrations:
            self._registrations.remove(registration)

    async def execute_all(
        self,
        operation: str,
        attributes: dict[str, Any],
        validate: Callable[[], Awaitable[ValidationOutcome]],
    ) -> ValidationOutcome:
        """Run *validate* inside every hook that applies to *operation*."""
        hooks = [r.hook for r in self._registrations if r.applies_to(operation)]

        async def innermost() -> ValidationOutcome:
            outcome = await validate()
            attributes.update(describe_outcome(outcome))
            return outcome

        async def call(index: int) -> ValidationOutcome:
            if index == len(hooks):
                return await innermost()
            return await hooks[index](operation, attributes, lambda: call(index + 1))

        return await call(0)

    def clear(self) -> None:
        """Remove all registrations."""
        self._registrations.clear()


_hook_registry_var: ContextVar[HookRegistry | None] = ContextVar(
    "validation_hook_registry", default=None
)


def get_hook_registry() -> HookRegistry:
    """Return the registry for the current context, creating it on first use."""
    registry = _hook_registry_var.get()
    if registry is None:
        registry = HookRegistry()
        _hook_registry_var.set(registry)
    return registry


def set_hook_registry(registry: HookRegistry) -> None:
    """Set a custom hook registry in the current context."""
    _hook_registry_var.set(registry)
