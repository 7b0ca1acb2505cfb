# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for loading .modelgen.yaml."""

from pathlib import Path

import pytest

from fluent_modelgen.workspace import (
    CONFIG_FILE_NAME,
    DEFAULT_OUTPUT_DIRECTORY,
    WorkspaceConfig,
    WorkspaceConfigError,
    find_workspace_config,
    load_workspace_config,
)

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    path = tmp_path / CONFIG_FILE_NAME
    path.write_text(content, encoding="utf-8")
    return path


# ###############
# Normal Cases
# ###############


def test_defaults() -> None:
    config = WorkspaceConfig()
    assert config.source_directories == ["."]
    assert config.output_directory == DEFAULT_OUTPUT_DIRECTORY
    assert config.dialect == "auto"
    assert config.options == {}


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    assert load_workspace_config(_write_config(tmp_path, "")) == WorkspaceConfig()


def test_full_config(tmp_path: Path) -> None:
    content = """\
source-directories:
  - src/main/java
  - src/generated/java
output-directory: target/generated-sources
dialect: javax
options:
  apiPackage: com.example.query
  addRepository: false
  debug: true
"""
    config = load_workspace_config(_write_config(tmp_path, content))

    assert config.source_directories == ["src/main/java", "src/generated/java"]
    assert config.output_directory == "target/generated-sources"
    assert config.dialect == "javax"
    assert config.options == {"apiPackage": "com.example.query", "addRepository": "false", "debug": "true"}


def test_numeric_option_values_become_strings(tmp_path: Path) -> None:
    config = load_workspace_config(_write_config(tmp_path, "options:\n  level: 3\n"))
    assert config.options == {"level": "3"}


def test_find_workspace_config(tmp_path: Path) -> None:
    assert find_workspace_config(tmp_path) is None
    path = _write_config(tmp_path, "dialect: jakarta\n")
    assert find_workspace_config(tmp_path) == path


# ###############
# Error Cases
# ###############


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(WorkspaceConfigError, match="not found"):
        load_workspace_config(tmp_path / CONFIG_FILE_NAME)


def test_invalid_yaml(tmp_path: Path) -> None:
    with pytest.raises(WorkspaceConfigError, match="Invalid YAML"):
        load_workspace_config(_write_config(tmp_path, "options: [unclosed\n"))


def test_top_level_must_be_a_mapping(tmp_path: Path) -> None:
    with pytest.raises(WorkspaceConfigError, match="must be a YAML mapping"):
        load_workspace_config(_write_config(tmp_path, "- src\n- out\n"))


@pytest.mark.parametrize(
    "content",
    [
        "output-dir: out\n",
        "dialect: hibernate\n",
        "source-directories: src\n",
        "options: [a, b]\n",
    ],
)
def test_schema_violations(tmp_path: Path, content: str) -> None:
    with pytest.raises(WorkspaceConfigError, match="Invalid workspace config"):
        load_workspace_config(_write_config(tmp_path, content))
