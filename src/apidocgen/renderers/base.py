"""Base renderer interface and the shared markup traversal.

This module defines the abstract base class that all renderers implement,
plus :class:`MarkupRenderer`, which walks the documentation schema in a
fixed order and emits output through a small set of markup primitives.
Markdown and HTML only supply the primitives, so both always present the
same content in the same order.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Sequence

from apidocgen.core.models import (
    ClassDoc,
    ConstantDoc,
    DocumentationUnit,
    FunctionDoc,
    InterfaceDoc,
    ParameterDoc,
    PropertyAccess,
    PropertyDoc,
    TypeDoc,
)
from apidocgen.utils.file_ops import FALLBACK_LANGUAGE, language_for_path


class OutputFormat(str, Enum):
    """Supported output formats."""

    MARKDOWN = "markdown"
    HTML = "html"
    JSON = "json"


DOCUMENT_TITLE = "API Documentation"


def format_timestamp(generated_at: Optional[datetime] = None) -> str:
    """Format a generation timestamp as ISO 8601 in UTC with milliseconds.

    Args:
        generated_at: Moment to format (now if not specified)

    Returns:
        Timestamp such as ``2024-05-01T12:00:00.000Z``
    """
    moment = generated_at or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class BaseRenderer(ABC):
    """Abstract base class for documentation renderers.

    Renderers are pure: the only non-deterministic input is the generation
    timestamp, which callers can pin through ``generated_at``.
    """

    output_format: OutputFormat

    @abstractmethod
    def render(
        self,
        units: Sequence[DocumentationUnit],
        generated_at: Optional[datetime] = None,
    ) -> str:
        """Render documentation units into one document.

        Args:
            units: Units to render, in output order
            generated_at: Generation timestamp (now if not specified)

        Returns:
            Rendered document
        """
        pass


class MarkupRenderer(BaseRenderer):
    """Renders the documentation schema through markup primitives.

    Per unit the sections come in a fixed order: Overview, Functions,
    Classes, Interfaces, Constants, Types. Empty sections are omitted.
    Text passed to the primitives is raw; escaping is up to the subclass.
    """

    def render(
        self,
        units: Sequence[DocumentationUnit],
        generated_at: Optional[datetime] = None,
    ) -> str:
        parts = [self.document_start(DOCUMENT_TITLE, format_timestamp(generated_at))]
        for unit in units:
            parts.extend(self.render_unit(unit))
        parts.append(self.document_end())
        return "".join(parts)

    def render_unit(self, unit: DocumentationUnit) -> list[str]:
        """Render all sections of one unit.

        Args:
            unit: Documentation unit

        Returns:
            Rendered blocks
        """
        language = self.example_language(unit)
        blocks = [self.unit_start(), self.heading(2, f"File: {unit.display_name}")]

        if unit.overview:
            blocks.append(self.heading(3, "Overview"))
            blocks.append(self.paragraph(self.text(unit.overview)))

        if unit.functions:
            blocks.append(self.heading(3, "Functions"))
            for function in unit.functions:
                blocks.extend(self.render_function(function, 4, language))
                blocks.append(self.separator())

        if unit.classes:
            blocks.append(self.heading(3, "Classes"))
            for cls in unit.classes:
                blocks.extend(self.render_class(cls, language))
                blocks.append(self.separator())

        if unit.interfaces:
            blocks.append(self.heading(3, "Interfaces"))
            for interface in unit.interfaces:
                blocks.extend(self.render_interface(interface, language))
                blocks.append(self.separator())

        if unit.constants:
            blocks.append(self.heading(3, "Constants"))
            for constant in unit.constants:
                blocks.extend(self.render_constant(constant))
                blocks.append(self.separator())

        if unit.types:
            blocks.append(self.heading(3, "Types"))
            for type_doc in unit.types:
                blocks.extend(self.render_type(type_doc, language))
                blocks.append(self.separator())

        blocks.append(self.unit_end())
        return blocks

    def render_function(
        self, function: FunctionDoc, level: int, language: str
    ) -> list[str]:
        """Render a function or method.

        Field order: name, description, parameters, return type and
        description, examples, complexity.
        """
        blocks = [self.group_start("function"), self.heading(level, function.name)]

        if function.description:
            blocks.append(self.paragraph(self.text(function.description)))

        if function.parameters:
            blocks.append(self.label("Parameters"))
            blocks.append(self.bullets([self.parameter_item(p) for p in function.parameters]))

        if function.return_type:
            blocks.append(self.field("Returns", self.code(function.return_type)))
        if function.return_description:
            if not function.return_type:
                blocks.append(self.label("Returns"))
            blocks.append(self.paragraph(self.text(function.return_description)))

        blocks.extend(self.render_examples(function.examples, language))

        if function.complexity:
            blocks.append(self.field("Complexity", self.text(function.complexity)))

        blocks.append(self.group_end())
        return blocks

    def render_class(self, cls: ClassDoc, language: str) -> list[str]:
        """Render a class with its constructor, properties and methods."""
        blocks = [self.group_start("class"), self.heading(4, cls.name)]

        if cls.description:
            blocks.append(self.paragraph(self.text(cls.description)))

        if cls.inheritance:
            blocks.append(
                self.field("Extends", ", ".join(self.text(name) for name in cls.inheritance))
            )

        if cls.constructor:
            constructor = cls.constructor
            blocks.append(self.label("Constructor"))
            if constructor.description:
                blocks.append(self.paragraph(self.text(constructor.description)))
            if constructor.parameters:
                blocks.append(self.label("Parameters"))
                blocks.append(
                    self.bullets([self.parameter_item(p) for p in constructor.parameters])
                )
            blocks.extend(self.render_examples(constructor.examples, language))

        blocks.extend(self.render_members(cls.properties, cls.methods, language))
        blocks.append(self.group_end())
        return blocks

    def render_interface(self, interface: InterfaceDoc, language: str) -> list[str]:
        """Render an interface with its properties and methods."""
        blocks = [self.group_start("interface"), self.heading(4, interface.name)]

        if interface.description:
            blocks.append(self.paragraph(self.text(interface.description)))

        blocks.extend(self.render_members(interface.properties, interface.methods, language))
        blocks.append(self.group_end())
        return blocks

    def render_members(
        self,
        properties: Sequence[PropertyDoc],
        methods: Sequence[FunctionDoc],
        language: str,
    ) -> list[str]:
        """Render the property list and the methods of a class or interface."""
        blocks: list[str] = []

        if properties:
            blocks.append(self.label("Properties"))
            blocks.append(self.bullets([self.property_item(p) for p in properties]))

        if methods:
            blocks.append(self.label("Methods"))
            for method in methods:
                blocks.extend(self.render_function(method, 5, language))

        return blocks

    def render_constant(self, constant: ConstantDoc) -> list[str]:
        """Render a constant."""
        blocks = [self.group_start("constant"), self.heading(4, constant.name)]

        if constant.description:
            blocks.append(self.paragraph(self.text(constant.description)))
        if constant.type:
            blocks.append(self.field("Type", self.code(constant.type)))
        if constant.value:
            blocks.append(self.field("Value", self.code(constant.value)))

        blocks.append(self.group_end())
        return blocks

    def render_type(self, type_doc: TypeDoc, language: str) -> list[str]:
        """Render a type definition."""
        blocks = [self.group_start("type"), self.heading(4, type_doc.name)]

        if type_doc.description:
            blocks.append(self.paragraph(self.text(type_doc.description)))
        if type_doc.definition:
            blocks.append(self.label("Definition"))
            blocks.append(self.code_block(type_doc.definition, language))

        blocks.extend(self.render_examples(type_doc.examples, language))
        blocks.append(self.group_end())
        return blocks

    def render_examples(self, examples: Sequence[str], language: str) -> list[str]:
        """Render a labeled list of fenced examples, or nothing."""
        if not examples:
            return []
        return [self.label("Examples")] + [
            self.code_block(example, language) for example in examples
        ]

    def parameter_item(self, param: ParameterDoc) -> str:
        """Format ``name (type[, optional][, = default]): description``."""
        details = [self.text(param.type)] if param.type else []
        if param.optional:
            details.append("optional")
        if param.default_value:
            details.append(f"= {self.text(param.default_value)}")

        item = self.code(param.name)
        if details:
            item += f" ({', '.join(details)})"
        if param.description:
            item += f": {self.text(param.description)}"
        return item

    def property_item(self, prop: PropertyDoc) -> str:
        """Format ``[access ][readonly ]name (type): description``."""
        prefix = ""
        if prop.access != PropertyAccess.PUBLIC:
            prefix += f"{prop.access.value} "
        if prop.readonly:
            prefix += "readonly "

        item = prefix + self.code(prop.name)
        if prop.type:
            item += f" ({self.text(prop.type)})"
        if prop.description:
            item += f": {self.text(prop.description)}"
        return item

    @staticmethod
    def example_language(unit: DocumentationUnit) -> str:
        """Language tag for fenced examples, taken from the unit's file."""
        source = unit.file_path or unit.file_name
        return language_for_path(source) if source else FALLBACK_LANGUAGE

    # Markup primitives

    @abstractmethod
    def document_start(self, title: str, timestamp: str) -> str:
        """Open the document with its title and timestamp."""

    @abstractmethod
    def document_end(self) -> str:
        """Close the document."""

    def unit_start(self) -> str:
        """Open the output of one unit."""
        return ""

    def unit_end(self) -> str:
        """Close the output of one unit."""
        return ""

    def group_start(self, kind: str) -> str:
        """Open the output of one entry (function, class, ...)."""
        return ""

    def group_end(self) -> str:
        """Close the output of one entry."""
        return ""

    @abstractmethod
    def heading(self, level: int, text: str) -> str:
        """Block heading from raw text."""

    @abstractmethod
    def paragraph(self, inline: str) -> str:
        """Block paragraph from formatted inline content."""

    @abstractmethod
    def label(self, name: str) -> str:
        """Block holding only a bold field label."""

    @abstractmethod
    def field(self, name: str, inline: str) -> str:
        """Block with a bold field label followed by inline content."""

    @abstractmethod
    def bullets(self, items: Sequence[str]) -> str:
        """Block list from formatted inline items."""

    @abstractmethod
    def code_block(self, code: str, language: str) -> str:
        """Fenced or preformatted block from raw code."""

    @abstractmethod
    def separator(self) -> str:
        """Separator between entries."""

    @abstractmethod
    def code(self, text: str) -> str:
        """Inline code from raw text."""

    @abstractmethod
    def text(self, text: str) -> str:
        """Inline text from raw text."""
