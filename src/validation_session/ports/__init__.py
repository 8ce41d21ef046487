"""Ports — protocols the session depends on."""

from __future__ import annotations

from .validation import IAsyncValidator

__all__ = ["IAsyncValidator"]
