"""HTTP template source — fetches static template JSON files.

Each category lives at ``{base_url}/{category}.json``; the body is either a
single template object or a list of them. Any failure (timeout, HTTP error,
malformed JSON) is raised as TemplateFetchError for the caller to swallow.
"""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from taskquest.data.models import TaskTemplate, templates_from_json
from taskquest.ports.template_port import TemplateFetchError

logger = logging.getLogger(__name__)

_TIMEOUT_SECONDS = 5


class HttpTemplateSource:
    """HTTP implementation of TemplateSourcePort."""

    def __init__(self, base_url: str) -> None:
        self._base_url = base_url.rstrip("/")

    async def fetch(self, category: str) -> list[TaskTemplate]:
        url = f"{self._base_url}/{category}.json"
        try:
            async with httpx.AsyncClient(timeout=_TIMEOUT_SECONDS) as client:
                resp = await client.get(url)
                resp.raise_for_status()
                payload = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise TemplateFetchError(f"Failed to fetch {url}: {exc}") from exc

        try:
            templates = templates_from_json(payload, category)
        except (ValidationError, TypeError) as exc:
            raise TemplateFetchError(f"Malformed templates at {url}: {exc}") from exc

        logger.debug("Fetched %d '%s' templates from %s", len(templates), category, url)
        return templates
