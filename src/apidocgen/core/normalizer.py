"""Extraction of structured documentation from free-text LLM replies.

Models rarely answer with bare JSON: replies are wrapped in prose, fenced
in code blocks, or contain stray braces. The normalizer locates the JSON
object, enforces the top-level shape and loads it into
:class:`~apidocgen.core.models.DocumentationUnit`.
"""

from __future__ import annotations

import json
from typing import Any, Optional

import structlog
from pydantic import ValidationError

from apidocgen.core.models import DocumentationUnit

logger = structlog.get_logger(__name__)

_EXCERPT_CHARS = 200


class MalformedResponseError(Exception):
    """Exception raised when a reply holds no usable documentation payload.

    Attributes:
        response_excerpt: Beginning of the offending reply
        original_error: Underlying parse or validation error, if any
    """

    def __init__(
        self,
        message: str,
        response_excerpt: str = "",
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(message)
        self.response_excerpt = response_excerpt
        self.original_error = original_error


def extract_payload(text: str) -> dict[str, Any]:
    """Locate and decode the JSON object embedded in a reply.

    Each ``{`` is tried in order and a single JSON value is decoded from
    that position; the first one that decodes to an object wins, so prose,
    code fences and braces before the payload are skipped. When nothing
    decodes, the span from the first ``{`` to the last ``}`` is reported as
    the failing candidate.

    Args:
        text: Raw reply text

    Returns:
        Decoded JSON object

    Raises:
        MalformedResponseError: If no brace-delimited region exists or none
            of the candidates parses as a JSON object
    """
    excerpt = text[:_EXCERPT_CHARS]
    first = text.find("{")
    last = text.rfind("}")

    if first == -1 or last < first:
        raise MalformedResponseError(
            "No structured payload located in AI response",
            response_excerpt=excerpt,
        )

    decoder = json.JSONDecoder()
    start = first
    while start != -1 and start < last:
        try:
            value, _ = decoder.raw_decode(text, start)
        except json.JSONDecodeError:
            pass
        else:
            if isinstance(value, dict):
                return value
        start = text.find("{", start + 1)

    try:
        payload: dict[str, Any] = json.loads(text[first : last + 1])
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"Failed to parse AI response: {e}",
            response_excerpt=excerpt,
            original_error=e,
        ) from e
    return payload


def coerce_payload(payload: dict[str, Any]) -> dict[str, Any]:
    """Force the top-level documentation shape onto a decoded payload.

    Missing or non-list category fields become empty lists and a missing or
    non-string overview becomes an empty string. Nested records are coerced
    leaf by leaf when the unit is built, never rejected.

    Args:
        payload: Decoded JSON object

    Returns:
        New dictionary satisfying the top-level invariants
    """
    coerced = dict(payload)
    for name in DocumentationUnit.SECTION_FIELDS:
        if not isinstance(coerced.get(name), list):
            coerced[name] = []
    if not isinstance(coerced.get("overview"), str):
        coerced["overview"] = ""
    return coerced


class ResponseNormalizer:
    """Turns raw reply text into a :class:`DocumentationUnit`.

    The normalizer holds no state; one instance can serve concurrent calls.
    """

    def __init__(self) -> None:
        self._log = logger.bind(component="normalizer")

    def normalize(self, text: str) -> DocumentationUnit:
        """Extract, coerce and load the documentation payload.

        Args:
            text: Raw reply text

        Returns:
            Documentation unit with every category list present

        Raises:
            MalformedResponseError: If the payload is missing or unparsable
        """
        payload = extract_payload(text)
        self._log.debug("payload_extracted", keys=sorted(payload))

        coerced = coerce_payload(payload)
        for name in (*DocumentationUnit.SOURCE_FIELDS, "fileName", "filePath"):
            coerced.pop(name, None)

        try:
            unit = DocumentationUnit.model_validate(coerced)
        except ValidationError as e:
            self._log.warning("payload_rejected", errors=e.error_count())
            raise MalformedResponseError(
                f"AI response does not match the documentation schema: {e}",
                response_excerpt=text[:_EXCERPT_CHARS],
                original_error=e,
            ) from e

        self._log.debug(
            "payload_normalized",
            functions=len(unit.functions),
            classes=len(unit.classes),
            interfaces=len(unit.interfaces),
            constants=len(unit.constants),
            types=len(unit.types),
        )
        return unit
