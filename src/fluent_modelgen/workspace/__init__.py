# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Workspace configuration for fluent-modelgen."""

from fluent_modelgen.workspace.config import (
    CONFIG_FILE_NAME,
    DEFAULT_OUTPUT_DIRECTORY,
    WorkspaceConfig,
    WorkspaceConfigError,
    find_workspace_config,
    load_workspace_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_OUTPUT_DIRECTORY",
    "WorkspaceConfig",
    "WorkspaceConfigError",
    "find_workspace_config",
    "load_workspace_config",
]
