"""HTML renderer.

Produces a self-contained HTML page with an embedded stylesheet. All text
coming from the model is escaped.
"""

from __future__ import annotations

from html import escape
from typing import Sequence

from apidocgen.renderers.base import MarkupRenderer, OutputFormat

STYLESHEET = """\
        body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; margin: 40px; }
        h1, h2, h3 { color: #2c3e50; }
        section.file { margin-bottom: 48px; }
        .function, .class, .interface, .constant, .type { border: 1px solid #ddd; padding: 20px; margin: 20px 0; border-radius: 5px; }
        .function .function { border-style: dashed; }
        ul { background: #f8f9fa; padding: 15px 15px 15px 35px; border-radius: 3px; }
        p { white-space: pre-line; }
        code { background: #f1f2f6; padding: 2px 4px; border-radius: 3px; }
        pre { background: #2f3542; color: #f1f2f6; padding: 15px; border-radius: 5px; overflow-x: auto; }
        pre code { background: none; padding: 0; }"""


class HtmlRenderer(MarkupRenderer):
    """Renderer for standalone HTML documents.

    Each file becomes a ``<section class="file">`` and each entry a
    ``<div>`` whose class names its kind (function, class, interface,
    constant, type).
    """

    output_format = OutputFormat.HTML

    def document_start(self, title: str, timestamp: str) -> str:
        title = escape(title)
        return (
            "<!DOCTYPE html>\n"
            "<html>\n"
            "<head>\n"
            '    <meta charset="utf-8">\n'
            f"    <title>{title}</title>\n"
            "    <style>\n"
            f"{STYLESHEET}\n"
            "    </style>\n"
            "</head>\n"
            "<body>\n"
            f"<h1>{title}</h1>\n"
            f"<p><em>Generated on: {escape(timestamp)}</em></p>\n"
        )

    def document_end(self) -> str:
        return "</body>\n</html>\n"

    def unit_start(self) -> str:
        return '<section class="file">\n'

    def unit_end(self) -> str:
        return "</section>\n"

    def group_start(self, kind: str) -> str:
        return f'<div class="{escape(kind)}">\n'

    def group_end(self) -> str:
        return "</div>\n"

    def heading(self, level: int, text: str) -> str:
        return f"<h{level}>{escape(text)}</h{level}>\n"

    def paragraph(self, inline: str) -> str:
        return f"<p>{inline}</p>\n"

    def label(self, name: str) -> str:
        return f"<p><strong>{escape(name)}:</strong></p>\n"

    def field(self, name: str, inline: str) -> str:
        return f"<p><strong>{escape(name)}:</strong> {inline}</p>\n"

    def bullets(self, items: Sequence[str]) -> str:
        lines = "".join(f"    <li>{item}</li>\n" for item in items)
        return f"<ul>\n{lines}</ul>\n"

    def code_block(self, code: str, language: str) -> str:
        return (
            f'<pre><code class="language-{escape(language)}">'
            f"{escape(code.rstrip())}</code></pre>\n"
        )

    def separator(self) -> str:
        return ""

    def code(self, text: str) -> str:
        return f"<code>{escape(text)}</code>"

    def text(self, text: str) -> str:
        return escape(text)
