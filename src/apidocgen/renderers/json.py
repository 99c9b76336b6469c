"""JSON renderer.

Dumps the units exactly as they were generated, with camelCase keys, for
machine consumption or debugging. The output can be read back with
:func:`load_units`.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional, Sequence

from pydantic import TypeAdapter

from apidocgen.core.models import DocumentationUnit
from apidocgen.renderers.base import BaseRenderer, OutputFormat

_UNITS_ADAPTER = TypeAdapter(list[DocumentationUnit])


class JsonRenderer(BaseRenderer):
    """Renderer for raw JSON output. The timestamp is not used."""

    output_format = OutputFormat.JSON

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def render(
        self,
        units: Sequence[DocumentationUnit],
        generated_at: Optional[datetime] = None,
    ) -> str:
        data = [
            unit.model_dump(mode="json", by_alias=True, exclude_none=True)
            for unit in units
        ]
        return json.dumps(data, indent=self.indent, ensure_ascii=False)


def load_units(text: str) -> list[DocumentationUnit]:
    """Load units from a JSON rendering.

    Args:
        text: Output of :class:`JsonRenderer`

    Returns:
        Documentation units

    Raises:
        pydantic.ValidationError: If the text is not a list of units
    """
    return _UNITS_ADAPTER.validate_json(text)
