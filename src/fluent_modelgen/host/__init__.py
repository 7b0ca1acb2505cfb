# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Host-facing services: options, file writers and the generator environment."""

from fluent_modelgen.host.environment import HostEnvironment, SourceReader
from fluent_modelgen.host.filer import DirectoryFiler, Filer, FilerError, MemoryFiler, source_path
from fluent_modelgen.host.options import (
    DEFAULT_API_PACKAGE,
    DEFAULT_QUERY_PACKAGE,
    GeneratorOptions,
    OptionsError,
)

__all__ = [
    "HostEnvironment",
    "SourceReader",
    "Filer",
    "DirectoryFiler",
    "MemoryFiler",
    "FilerError",
    "source_path",
    "GeneratorOptions",
    "OptionsError",
    "DEFAULT_API_PACKAGE",
    "DEFAULT_QUERY_PACKAGE",
]
