"""Utility functions and helpers for apidocgen."""

from apidocgen.utils.config import (
    ApiDocConfig,
    create_default_config,
    find_config_file,
    load_config,
    load_config_file,
    resolve_api_key,
)
from apidocgen.utils.file_ops import (
    FileOperations,
    find_source_files,
    language_for_path,
    output_filename,
)

__all__ = [
    "ApiDocConfig",
    "load_config",
    "load_config_file",
    "find_config_file",
    "create_default_config",
    "resolve_api_key",
    "FileOperations",
    "find_source_files",
    "language_for_path",
    "output_filename",
]
