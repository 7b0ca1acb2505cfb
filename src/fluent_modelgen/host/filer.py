# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""File writers for generated sources.

A filer hands out one binary sink per qualified type name and refuses to
create the same name twice within a session.
"""

from __future__ import annotations

import io
from abc import ABC, abstractmethod
from pathlib import Path
from typing import BinaryIO

# ###############
# Public Interface
# ###############


class FilerError(Exception):
    """Raised when a source file cannot be created."""


def source_path(qualified_name: str) -> Path:
    """Return the relative path of the source file for *qualified_name*.

    >>> source_path("com.example.CustomerModel").as_posix()
    'com/example/CustomerModel.java'
    """
    *packages, name = qualified_name.split(".")
    return Path(*packages, f"{name}.java")


class Filer(ABC):
    """Base class for file writers.

    Attributes:
        created: Qualified names created in this session, mapped to the
            source path of the declaration that caused the file (if any).
    """

    def __init__(self) -> None:
        self.created: dict[str, str | None] = {}

    def create(self, qualified_name: str, originating: str | None = None) -> BinaryIO:
        """Create the source file for *qualified_name* and return a binary sink.

        Raises:
            FilerError: If the name was already created in this session or
                the target cannot be opened.
        """
        if qualified_name in self.created:
            raise FilerError(f"Attempt to recreate a file for type '{qualified_name}'")
        sink = self._open(qualified_name)
        self.created[qualified_name] = originating
        return sink

    @abstractmethod
    def _open(self, qualified_name: str) -> BinaryIO:
        """Open the sink for *qualified_name*; raise FilerError if it cannot be opened."""


class DirectoryFiler(Filer):
    """Writes sources below an output directory, one package directory per segment."""

    def __init__(self, root: Path) -> None:
        super().__init__()
        self.root = root

    def path_of(self, qualified_name: str) -> Path:
        return self.root / source_path(qualified_name)

    def _open(self, qualified_name: str) -> BinaryIO:
        target = self.path_of(qualified_name)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            return target.open("wb")
        except OSError as exc:
            raise FilerError(f"Cannot create '{target}': {exc}") from exc


class MemoryFiler(Filer):
    """Keeps generated sources in memory, keyed by qualified name."""

    def __init__(self) -> None:
        super().__init__()
        self.files: dict[str, bytes] = {}

    def text(self, qualified_name: str) -> str:
        """Return the decoded content of a generated file."""
        return self.files[qualified_name].decode("utf-8")

    def _open(self, qualified_name: str) -> BinaryIO:
        return _MemorySink(self.files, qualified_name)


# ################
# Implementation
# ################


class _MemorySink(io.BytesIO):
    """Stores its content in the owning filer when closed."""

    def __init__(self, files: dict[str, bytes], qualified_name: str) -> None:
        super().__init__()
        self._files = files
        self._qualified_name = qualified_name

    def close(self) -> None:
        if not self.closed:
            self._files[self._qualified_name] = self.getvalue()
        super().close()
