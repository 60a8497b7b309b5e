"""Template source factory — picks HTTP, directory, or no source from config."""

from __future__ import annotations

from taskquest.config import settings
from taskquest.ports.template_port import TemplateSourcePort


def create_template_source() -> TemplateSourcePort | None:
    """Return a template source, or None when none is configured.

    TEMPLATE_BASE_URL wins over TEMPLATE_DIR when both are set.
    """
    if settings.TEMPLATE_BASE_URL:
        from taskquest.adapters.http_templates import HttpTemplateSource

        return HttpTemplateSource(base_url=settings.TEMPLATE_BASE_URL)

    if settings.TEMPLATE_DIR:
        from taskquest.adapters.file_templates import DirectoryTemplateSource

        return DirectoryTemplateSource(root=settings.TEMPLATE_DIR)

    return None
