"""Pydantic models for representing generated API documentation.

This module defines the canonical documentation schema used throughout
apidocgen: the records the Response Normalizer builds from an LLM reply and
the Renderers consume. Field descriptions double as the schema description
embedded in the generation prompt, so the requested JSON shape and the parsed
shape cannot drift apart.

All models use Pydantic v2 and are immutable once constructed. Python
attributes are snake_case; the JSON wire names are camelCase aliases.
"""

from __future__ import annotations

import json
from enum import Enum
from pathlib import Path
from types import UnionType
from typing import Any, ClassVar, Optional, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


class PropertyAccess(str, Enum):
    """Visibility of a documented property."""

    PUBLIC = "public"
    PRIVATE = "private"
    PROTECTED = "protected"


_FALSE_WORDS = frozenset({"", "false", "no", "n", "off", "0", "none", "null"})


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) in (Union, UnionType):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)


def _as_flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_WORDS
    return bool(value)


def _as_record(model: type[BaseModel], value: Any) -> Any:
    """Return something ``model`` can be built from, or None to drop the value.

    A bare string becomes the record's name, or its description when the
    record has no name.
    """
    if isinstance(value, (dict, model)):
        return value
    if isinstance(value, str) and value.strip():
        for key in ("name", "description"):
            if key in model.model_fields:
                return {key: value}
    return None


def _is_record_type(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _coerce_leaf(annotation: Any, value: Any) -> Any:
    target = _unwrap_optional(annotation)

    if get_origin(target) is list:
        (item_type,) = get_args(target) or (Any,)
        if not isinstance(value, (list, tuple)):
            if isinstance(value, str) and item_type is str:
                value = [value]
            elif isinstance(value, dict) and _is_record_type(item_type):
                value = [value]
            else:
                return []
        items = [item for item in value if item is not None]
        if item_type is str:
            return [_as_text(item) for item in items]
        if _is_record_type(item_type):
            records = (_as_record(item_type, item) for item in items)
            return [record for record in records if record is not None]
        return items

    if target is str:
        return _as_text(value)
    if target is bool:
        return _as_flag(value)
    if _is_record_type(target):
        return _as_record(target, value)
    return value


class DocRecord(BaseModel):
    """Base class for every documentation record.

    Records are frozen, accept both camelCase and snake_case keys, and ignore
    keys they do not know. The upstream model is not guaranteed to respect
    the requested shape, so leaves are coerced instead of rejected:

    - ``null`` falls back to the field default
    - non-string values for text fields are kept as their JSON text
    - text flags such as ``"no"`` are read as booleans, anything else by truthiness
    - a scalar where a list is expected is wrapped or dropped
    - a string where a record is expected becomes its name (or description)
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )

    @model_validator(mode="before")
    @classmethod
    def coerce_loose_values(cls, data: Any) -> Any:
        """Coerce every known field towards its declared type."""
        if not isinstance(data, dict):
            return data

        cleaned = {key: value for key, value in data.items() if value is not None}

        for name, field in cls.model_fields.items():
            for key in {field.alias or name, name}:
                if key not in cleaned:
                    continue
                value = _coerce_leaf(field.annotation, cleaned[key])
                if value is None:
                    del cleaned[key]
                else:
                    cleaned[key] = value

        return cleaned


class ParameterDoc(DocRecord):
    """A single parameter of a function, method or constructor."""

    name: str = Field(default="", description="param name")
    type: str = Field(default="", description="param type")
    description: str = Field(default="", description="param description")
    optional: bool = Field(default=False, description="true if the parameter is optional")
    default_value: Optional[str] = Field(
        default=None, description="default value if any"
    )


class FunctionDoc(DocRecord):
    """One callable signature: a free function or a method.

    Attributes:
        name: Function name
        description: What the function does
        parameters: Documented parameters in declaration order
        return_type: Return type as written by the model
        return_description: What the return value means
        examples: Code examples (possibly empty)
        complexity: Time/space complexity note, if any
    """

    name: str = Field(default="", description="function name")
    description: str = Field(default="", description="detailed description")
    parameters: list[ParameterDoc] = Field(default_factory=list)
    return_type: str = Field(default="", description="return type")
    return_description: str = Field(
        default="", description="description of return value"
    )
    examples: list[str] = Field(default_factory=list, description="code example")
    complexity: str = Field(
        default="", description="time/space complexity if applicable"
    )


class ConstructorDoc(DocRecord):
    """Constructor of a documented class."""

    description: str = Field(default="", description="constructor description")
    parameters: list[ParameterDoc] = Field(default_factory=list)
    examples: list[str] = Field(default_factory=list, description="example usage")


class PropertyDoc(DocRecord):
    """A property or field of a class or interface."""

    name: str = Field(default="", description="property name")
    type: str = Field(default="", description="property type")
    description: str = Field(default="", description="property description")
    access: PropertyAccess = Field(
        default=PropertyAccess.PUBLIC, description="public|private|protected"
    )
    readonly: bool = Field(default=False, description="true if the property is read-only")

    @field_validator("access", mode="before")
    @classmethod
    def normalize_access(cls, v: Any) -> Any:
        """Map unknown access modifiers to public."""
        if isinstance(v, PropertyAccess):
            return v
        value = str(v).strip().lower()
        if value in {access.value for access in PropertyAccess}:
            return value
        return PropertyAccess.PUBLIC


class ClassDoc(DocRecord):
    """A documented class.

    Attributes:
        name: Class name
        description: Class description
        constructor: Constructor documentation, if the model returned one
        methods: Methods in declaration order
        properties: Properties and fields
        inheritance: Parent classes and implemented interfaces
    """

    name: str = Field(default="", description="class name")
    description: str = Field(default="", description="class description")
    constructor: Optional[ConstructorDoc] = None
    methods: list[FunctionDoc] = Field(default_factory=list)
    properties: list[PropertyDoc] = Field(default_factory=list)
    inheritance: list[str] = Field(
        default_factory=list, description="parent classes/interfaces"
    )


class InterfaceDoc(DocRecord):
    """A documented interface, protocol or trait."""

    name: str = Field(default="", description="interface name")
    description: str = Field(default="", description="interface description")
    properties: list[PropertyDoc] = Field(default_factory=list)
    methods: list[FunctionDoc] = Field(default_factory=list)


class ConstantDoc(DocRecord):
    """A documented module-level constant."""

    name: str = Field(default="", description="constant name")
    type: str = Field(default="", description="constant type")
    value: str = Field(default="", description="constant value")
    description: str = Field(default="", description="constant description")


class TypeDoc(DocRecord):
    """A documented type alias or type definition."""

    name: str = Field(default="", description="type name")
    definition: str = Field(default="", description="type definition")
    description: str = Field(default="", description="type description")
    examples: list[str] = Field(default_factory=list, description="usage example")


class DocumentationUnit(DocRecord):
    """Canonical documentation for one analyzed source file.

    Every list field is always present (possibly empty) so that renderers
    never need more than a length check. ``file_name`` and ``file_path`` are
    attached by the caller after generation via :meth:`with_source`.

    Attributes:
        overview: Brief overview of the file's purpose
        functions: Free functions
        classes: Classes
        interfaces: Interfaces, protocols and traits
        constants: Module-level constants
        types: Type aliases and definitions
        file_name: Base name of the source file
        file_path: Locator of the source file
    """

    SECTION_FIELDS: ClassVar[tuple[str, ...]] = (
        "functions",
        "classes",
        "interfaces",
        "constants",
        "types",
    )
    SOURCE_FIELDS: ClassVar[tuple[str, ...]] = ("file_name", "file_path")

    overview: str = Field(
        default="",
        description="Brief overview of the code's purpose and functionality",
    )
    functions: list[FunctionDoc] = Field(default_factory=list)
    classes: list[ClassDoc] = Field(default_factory=list)
    interfaces: list[InterfaceDoc] = Field(default_factory=list)
    constants: list[ConstantDoc] = Field(default_factory=list)
    types: list[TypeDoc] = Field(default_factory=list)

    file_name: Optional[str] = None
    file_path: Optional[str] = None

    def with_source(self, file_path: str | Path) -> DocumentationUnit:
        """Return a copy labeled with the source file it documents.

        Args:
            file_path: Path of the documented source file

        Returns:
            New unit with ``file_name`` and ``file_path`` set
        """
        path = Path(file_path)
        return self.model_copy(
            update={"file_name": path.name, "file_path": str(file_path)}
        )

    @property
    def display_name(self) -> str:
        """Name used for headings: file name, else path base name."""
        if self.file_name:
            return self.file_name
        if self.file_path:
            return Path(self.file_path).name
        return "untitled"

    @property
    def is_empty(self) -> bool:
        """Check if the unit documents nothing at all."""
        return not self.overview and not any(
            getattr(self, name) for name in self.SECTION_FIELDS
        )


class GenerationOptions(BaseModel):
    """Options for a single generation call.

    Attributes:
        include_examples: Ask the model for code examples
        file_path: Locator of the source, used for labeling and logging only
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    include_examples: bool = True
    file_path: str

    @field_validator("file_path")
    @classmethod
    def validate_file_path(cls, v: str) -> str:
        """Validate that the file path is not empty."""
        if not v or not v.strip():
            raise ValueError("File path cannot be empty")
        return v
