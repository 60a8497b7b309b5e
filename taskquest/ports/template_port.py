"""Template port — abstract interface for static task template catalogues.

Fetching is best-effort: the coordinator swallows TemplateFetchError so that
missing templates never block dashboard initialization.
"""

from __future__ import annotations

from typing import Protocol

from taskquest.data.models import TaskTemplate


class TemplateFetchError(Exception):
    """Raised when a template source cannot produce templates for a category."""


class TemplateSourcePort(Protocol):
    """Abstract template catalogue used by the coordinator."""

    async def fetch(self, category: str) -> list[TaskTemplate]: ...
