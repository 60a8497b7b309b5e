"""Directory template source — reads ``<root>/<category>/*.json`` files."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from taskquest.data.models import TaskTemplate, templates_from_json
from taskquest.ports.template_port import TemplateFetchError

logger = logging.getLogger(__name__)


class DirectoryTemplateSource:
    """Filesystem implementation of TemplateSourcePort."""

    def __init__(self, root: str) -> None:
        self._root = Path(root)

    async def fetch(self, category: str) -> list[TaskTemplate]:
        folder = self._root / category
        if not folder.is_dir():
            raise TemplateFetchError(f"No template folder for '{category}' at {folder}")

        templates: list[TaskTemplate] = []
        for path in sorted(folder.glob("*.json")):
            try:
                payload = json.loads(path.read_text(encoding="utf-8"))
                templates.extend(templates_from_json(payload, category))
            except (OSError, json.JSONDecodeError, ValidationError, TypeError) as exc:
                raise TemplateFetchError(f"Failed to load {path}: {exc}") from exc

        logger.debug("Loaded %d '%s' templates from %s", len(templates), category, folder)
        return templates
