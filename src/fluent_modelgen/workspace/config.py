# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML loader for the optional ``.modelgen.yaml`` workspace file."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".modelgen.yaml"
DEFAULT_OUTPUT_DIRECTORY = "build/generated-sources"


class WorkspaceConfigError(Exception):
    """A ``.modelgen.yaml`` file is missing, unreadable or malformed."""


class WorkspaceConfig(BaseModel):
    """The parsed workspace configuration.

    Attributes:
        source_directories: Directories (relative to the workspace root) holding
            the Java sources to read.
        output_directory: Directory (relative to the workspace root) receiving
            the generated sources.
        dialect: Persistence namespace of the generated code; ``auto`` detects
            it from the sources.
        options: Generator options, as given to an annotation processor.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    source_directories: list[str] = Field(alias="source-directories", default_factory=lambda: ["."])
    output_directory: str = Field(alias="output-directory", default=DEFAULT_OUTPUT_DIRECTORY)
    dialect: Literal["auto", "jakarta", "javax"] = "auto"
    options: dict[str, str] = Field(default_factory=dict)

    @field_validator("options", mode="before")
    @classmethod
    def _stringify_options(cls, value: object) -> object:
        # YAML turns `true` and `1` into native values; options are strings.
        if isinstance(value, dict):
            return {key: str(val).lower() if isinstance(val, bool) else str(val) for key, val in value.items()}
        return value


def find_workspace_config(directory: Path) -> Path | None:
    """Return the workspace file in *directory*, or None if there is none."""
    candidate = directory / CONFIG_FILE_NAME
    return candidate if candidate.is_file() else None


def load_workspace_config(path: Path) -> WorkspaceConfig:
    """Read *path* and validate it; an empty file gives the defaults.

    Raises:
        WorkspaceConfigError: On a missing or unreadable file, broken YAML,
            or keys and values the configuration does not accept.
    """
    if not path.exists():
        raise WorkspaceConfigError(f"Workspace config {path} not found")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise WorkspaceConfigError(f"Workspace config {path} is unreadable: {exc}") from exc
    return _validate(content, str(path))


# ################
# Implementation
# ################


def _validate(content: str, label: str) -> WorkspaceConfig:
    try:
        document = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Invalid YAML in {label}: {exc}") from exc
    if document is None:
        return WorkspaceConfig()
    if not isinstance(document, dict):
        raise WorkspaceConfigError(f"{label}: the workspace config must be a YAML mapping")
    try:
        return WorkspaceConfig.model_validate(document)
    except ValidationError as exc:
        raise WorkspaceConfigError(f"Invalid workspace config {label}: {exc}") from exc
