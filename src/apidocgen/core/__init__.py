"""Core functionality for prompt building, reply normalization, and generation."""

from apidocgen.core.models import (
    ClassDoc,
    ConstantDoc,
    ConstructorDoc,
    DocumentationUnit,
    FunctionDoc,
    GenerationOptions,
    InterfaceDoc,
    ParameterDoc,
    PropertyAccess,
    PropertyDoc,
    TypeDoc,
)
from apidocgen.core.prompt import PromptBuilder, describe_schema
from apidocgen.core.normalizer import (
    MalformedResponseError,
    ResponseNormalizer,
    extract_payload,
)
from apidocgen.core.generator import (
    DocumentationGenerator,
    GenerationError,
    GenerationReport,
)

__all__ = [
    "ClassDoc",
    "ConstantDoc",
    "ConstructorDoc",
    "DocumentationUnit",
    "FunctionDoc",
    "GenerationOptions",
    "InterfaceDoc",
    "ParameterDoc",
    "PropertyAccess",
    "PropertyDoc",
    "TypeDoc",
    "PromptBuilder",
    "describe_schema",
    "MalformedResponseError",
    "ResponseNormalizer",
    "extract_payload",
    "DocumentationGenerator",
    "GenerationError",
    "GenerationReport",
]
