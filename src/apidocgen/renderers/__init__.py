"""Documentation renderers (Markdown, HTML, JSON)."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

import structlog

from apidocgen.core.models import DocumentationUnit
from apidocgen.renderers.base import BaseRenderer, MarkupRenderer, OutputFormat
from apidocgen.renderers.html import HtmlRenderer
from apidocgen.renderers.json import JsonRenderer, load_units
from apidocgen.renderers.markdown import MarkdownRenderer

logger = structlog.get_logger(__name__)

_RENDERERS: dict[OutputFormat, type[BaseRenderer]] = {
    OutputFormat.MARKDOWN: MarkdownRenderer,
    OutputFormat.HTML: HtmlRenderer,
    OutputFormat.JSON: JsonRenderer,
}


def get_renderer(output_format: str | OutputFormat) -> BaseRenderer:
    """Return the renderer for a format identifier.

    Unknown identifiers fall back to Markdown; this never fails.

    Args:
        output_format: Format identifier

    Returns:
        Renderer instance
    """
    if isinstance(output_format, OutputFormat):
        return _RENDERERS[output_format]()

    try:
        fmt = OutputFormat(str(output_format).strip().lower())
    except ValueError:
        logger.warning("unknown_output_format", output_format=str(output_format))
        fmt = OutputFormat.MARKDOWN
    return _RENDERERS[fmt]()


def render_documentation(
    units: Sequence[DocumentationUnit],
    output_format: str | OutputFormat = OutputFormat.MARKDOWN,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render documentation units in the requested format.

    Args:
        units: Units to render, in output order
        output_format: Format identifier (Markdown if unknown)
        generated_at: Generation timestamp (now if not specified)

    Returns:
        Rendered document
    """
    return get_renderer(output_format).render(units, generated_at=generated_at)


__all__ = [
    "BaseRenderer",
    "MarkupRenderer",
    "OutputFormat",
    "MarkdownRenderer",
    "HtmlRenderer",
    "JsonRenderer",
    "get_renderer",
    "load_units",
    "render_documentation",
]
