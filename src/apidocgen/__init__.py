"""apidocgen - AI-powered API documentation generator."""

__version__ = "0.1.0"
__author__ = "apidocgen contributors"
__license__ = "MIT"

from apidocgen.core.generator import DocumentationGenerator, GenerationError
from apidocgen.core.models import DocumentationUnit, GenerationOptions
from apidocgen.core.normalizer import MalformedResponseError, ResponseNormalizer
from apidocgen.core.prompt import PromptBuilder
from apidocgen.renderers import render_documentation

__all__ = [
    "__version__",
    "__author__",
    "__license__",
    "DocumentationGenerator",
    "GenerationError",
    "DocumentationUnit",
    "GenerationOptions",
    "MalformedResponseError",
    "ResponseNormalizer",
    "PromptBuilder",
    "render_documentation",
]
