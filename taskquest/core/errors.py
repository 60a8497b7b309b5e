"""Domain errors raised by the progress engine.

StoreUnavailableError lives with the store port; TemplateFetchError with the
template port. Both are re-exported here so callers can import every engine
failure from one place.
"""

from __future__ import annotations

from taskquest.ports.store_port import StoreUnavailableError
from taskquest.ports.template_port import TemplateFetchError

__all__ = [
    "EngineError",
    "NotFoundError",
    "StoreUnavailableError",
    "TemplateFetchError",
    "ValidationError",
]


class EngineError(Exception):
    """Base class for engine failures reported to the presentation layer."""


class ValidationError(EngineError):
    """Bad input (empty title, unknown category, negative points).

    Raised before any mutation; the store is untouched.
    """


class NotFoundError(EngineError):
    """The target task or suggestion is missing or already terminal."""
