# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Java source writers: imports, templates, the API package, models, repositories and mappers."""

from fluent_modelgen.writer.api import API_TYPES, ApiWriter
from fluent_modelgen.writer.imports import ImportBuilder, to_dialect
from fluent_modelgen.writer.mappers import MappersWriter, common_package
from fluent_modelgen.writer.model import ModelWriter, SourceRole, path_class
from fluent_modelgen.writer.repository import RepositoryWriter, trait_clause
from fluent_modelgen.writer.source import GENERATOR_NAME, compose, write_source
from fluent_modelgen.writer.template import Template

__all__ = [
    "ApiWriter",
    "API_TYPES",
    "ImportBuilder",
    "to_dialect",
    "MappersWriter",
    "common_package",
    "ModelWriter",
    "SourceRole",
    "path_class",
    "RepositoryWriter",
    "trait_clause",
    "GENERATOR_NAME",
    "compose",
    "write_source",
    "Template",
]
