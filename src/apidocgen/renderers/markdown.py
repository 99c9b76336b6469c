"""Markdown renderer.

Produces GitHub-flavored Markdown: one ``##`` heading per file, ``###``
sections, ``####`` entries, ``#####`` methods, fenced examples and a
``---`` rule between entries.
"""

from __future__ import annotations

import re
from typing import Sequence

from apidocgen.renderers.base import MarkupRenderer, OutputFormat

_BACKTICK_RUN = re.compile(r"`+")


def _longest_backtick_run(text: str) -> int:
    return max((len(run) for run in _BACKTICK_RUN.findall(text)), default=0)


class MarkdownRenderer(MarkupRenderer):
    """Renderer for Markdown documents.

    Example:
        ```markdown
        # API Documentation

        Generated on: 2024-05-01T12:00:00.000Z

        ## File: math.ts

        ### Functions

        #### add

        Adds two numbers.

        **Parameters:**

        - `a` (number): First operand

        **Returns:** `number`

        ---
        ```
    """

    output_format = OutputFormat.MARKDOWN

    def document_start(self, title: str, timestamp: str) -> str:
        return f"# {title}\n\nGenerated on: {timestamp}\n\n"

    def document_end(self) -> str:
        return ""

    def heading(self, level: int, text: str) -> str:
        return f"{'#' * level} {text}\n\n"

    def paragraph(self, inline: str) -> str:
        return f"{inline}\n\n"

    def label(self, name: str) -> str:
        return f"**{name}:**\n\n"

    def field(self, name: str, inline: str) -> str:
        return f"**{name}:** {inline}\n\n"

    def bullets(self, items: Sequence[str]) -> str:
        return "".join(f"- {item}\n" for item in items) + "\n"

    def code_block(self, code: str, language: str) -> str:
        # The fence must outlast any backtick run inside the example
        fence = "`" * max(3, _longest_backtick_run(code) + 1)
        return f"{fence}{language}\n{code.rstrip()}\n{fence}\n\n"

    def separator(self) -> str:
        return "---\n\n"

    def code(self, text: str) -> str:
        longest = _longest_backtick_run(text)
        if longest:
            ticks = "`" * (longest + 1)
            return f"{ticks} {text} {ticks}"
        return f"`{text}`"

    def text(self, text: str) -> str:
        return text
