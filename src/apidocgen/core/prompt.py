"""Prompt construction for documentation generation.

The prompt asks the model for a single JSON object whose shape is derived
from the documentation models in :mod:`apidocgen.core.models`, so adding a
field to a model is enough to request it.
"""

from __future__ import annotations

import json
import types
from functools import lru_cache
from typing import Any, Union, get_args, get_origin

from pydantic import BaseModel

from apidocgen.core.models import DocumentationUnit, GenerationOptions

SYSTEM_PROMPT = "You are a professional API documentation generator."

EXAMPLES_ON = "- Include practical code examples"
EXAMPLES_OFF = "- Skip code examples"


def describe_schema(model: type[BaseModel] = DocumentationUnit) -> dict[str, Any]:
    """Build the JSON skeleton that describes a documentation model.

    Scalar fields become their description, list fields a one-element list
    and nested models their own skeleton. A model that appears again further
    down is referenced by the key where it was first spelled out.

    Args:
        model: Root model to describe

    Returns:
        JSON-serializable skeleton keyed by wire (camelCase) names
    """
    return _describe_model(model, seen={})


@lru_cache(maxsize=None)
def schema_text() -> str:
    """Return the documentation schema skeleton as indented JSON."""
    return json.dumps(describe_schema(), indent=2)


def _describe_model(model: type[BaseModel], seen: dict[type, str]) -> dict[str, Any]:
    skipped = getattr(model, "SOURCE_FIELDS", ())
    shape: dict[str, Any] = {}
    for name, field in model.model_fields.items():
        if name in skipped:
            continue
        key = field.alias or name
        shape[key] = _describe_annotation(
            field.annotation, field.description or key, key, seen
        )
    return shape


def _describe_annotation(
    annotation: Any, description: str, key: str, seen: dict[type, str]
) -> Any:
    origin = get_origin(annotation)

    if origin is list:
        (item,) = get_args(annotation)
        return [_describe_annotation(item, description, key, seen)]

    if origin is Union or origin is types.UnionType:
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        return _describe_annotation(members[0], description, key, seen)

    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        if annotation in seen:
            return f"...same structure as {seen[annotation]}..."
        seen[annotation] = key
        return _describe_model(annotation, seen)

    return description


class PromptBuilder:
    """Builds the instruction text sent to an LLM provider.

    The output is a pure function of its inputs: no timestamps, no
    randomness. The source code is embedded verbatim inside a fenced block;
    fence delimiters inside the code are not escaped.
    """

    system_prompt = SYSTEM_PROMPT

    def build(self, code: str, language: str, options: GenerationOptions) -> str:
        """Build the documentation prompt.

        Args:
            code: Source text to document
            language: Language label used for the code fence
            options: Generation options

        Returns:
            Prompt text
        """
        examples_line = EXAMPLES_ON if options.include_examples else EXAMPLES_OFF

        lines = [
            "You are a professional API documentation generator. "
            f"Analyze the following {language} code and generate comprehensive "
            "API documentation.",
            "",
            "Code to analyze:",
            f"```{language}",
            code,
            "```",
            "",
            "Please provide a JSON response with the following structure:",
            schema_text(),
            "",
            "Requirements:",
            "- Be thorough and professional",
            "- Include clear descriptions for all elements",
            examples_line,
            "- Focus on public APIs and interfaces",
            "- Use proper technical terminology",
            "- Explain complex concepts clearly",
            "- Use empty lists for categories with no entries",
            "",
            "Respond only with valid JSON.",
        ]
        return "\n".join(lines)
