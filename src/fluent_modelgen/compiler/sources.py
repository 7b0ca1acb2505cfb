# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""The source reader: Java declarations loaded from files or strings.

A SourceSet parses ``.java`` sources, resolves their names against every
declaration it knows, and serves them per round. Files that fail to lex or
parse are logged and skipped.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from enum import Enum
from pathlib import Path

from fluent_modelgen.compiler.resolution import resolve_unit
from fluent_modelgen.gen_logging import get_logger
from fluent_modelgen.model.declarations import CompilationUnit, TypeDecl
from fluent_modelgen.parser.lexer import LexerError
from fluent_modelgen.parser.parser import ParseError, parse

logger = get_logger(__name__)

# ###############
# Public Interface
# ###############

JAVA_SUFFIX = ".java"


class Dialect(Enum):
    """Namespace of the persistence API the host compiles against."""

    JAKARTA = "jakarta"
    JAVAX = "javax"

    @property
    def is_legacy(self) -> bool:
        return self is Dialect.JAVAX


class SourceSet:
    """Declarations known to the generator, grouped by round.

    Attributes:
        errors: Messages for sources that could not be read or parsed.
    """

    def __init__(self) -> None:
        self.errors: list[str] = []
        self._units: list[tuple[int, CompilationUnit]] = []
        self._declarations: dict[str, TypeDecl] = {}
        self._pending: list[CompilationUnit] = []

    @classmethod
    def from_directories(cls, directories: list[Path], exclude: Sequence[Path] = ()) -> SourceSet:
        """Load every ``.java`` file below *directories* into round 0, skipping files below *exclude*."""
        sources = cls()
        for directory in directories:
            sources.add_directory(directory, exclude=exclude)
        return sources

    @classmethod
    def from_mapping(cls, sources: Mapping[str, str]) -> SourceSet:
        """Load sources from a ``{path: text}`` mapping into round 0."""
        source_set = cls()
        for path, text in sources.items():
            source_set.add_source(text, path)
        return source_set

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def add_directory(self, directory: Path, round_number: int = 0, exclude: Sequence[Path] = ()) -> None:
        """Add every ``.java`` file below *directory*, in sorted path order."""
        if not directory.is_dir():
            message = f"Source directory not found: {directory}"
            logger.error(message)
            self.errors.append(message)
            return
        excluded = [path.resolve() for path in exclude]
        for path in sorted(directory.rglob(f"*{JAVA_SUFFIX}")):
            resolved = path.resolve()
            if any(root == resolved or root in resolved.parents for root in excluded):
                continue
            self.add_file(path, round_number)

    def add_file(self, path: Path, round_number: int = 0) -> CompilationUnit | None:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            message = f"Cannot read source file '{path}': {exc}"
            logger.error(message)
            self.errors.append(message)
            return None
        return self.add_source(text, str(path), round_number)

    def add_source(self, text: str, path: str | None = None, round_number: int = 0) -> CompilationUnit | None:
        """Parse *text* and register its declarations for *round_number*.

        Returns:
            The parsed unit, or None when the source could not be parsed.
        """
        label = path or "<string>"
        try:
            unit = parse(text, path)
        except (LexerError, ParseError) as exc:
            message = f"{label}: {exc}"
            logger.error(message)
            self.errors.append(message)
            return None
        self._units.append((round_number, unit))
        self._pending.append(unit)
        for decl in unit.declarations():
            self._declarations[decl.qualified_name] = decl
        logger.debug("Loaded %s (%d declarations)", label, len(list(unit.declarations())))
        return unit

    # ------------------------------------------------------------------
    # Source reader
    # ------------------------------------------------------------------

    def root_declarations(self, round_number: int) -> list[TypeDecl]:
        """Return the top-level declarations of *round_number*, in load order."""
        self._resolve_pending()
        return [decl for rnd, unit in self._units if rnd == round_number for decl in unit.types]

    def resolve(self, qualified_name: str) -> TypeDecl | None:
        """Return the declaration named *qualified_name* (nested ones included), or None."""
        self._resolve_pending()
        return self._declarations.get(qualified_name)

    @property
    def units(self) -> list[CompilationUnit]:
        self._resolve_pending()
        return [unit for _, unit in self._units]

    def declarations(self) -> Iterator[TypeDecl]:
        """Yield every known declaration, nested ones included."""
        self._resolve_pending()
        yield from self._declarations.values()

    def _resolve_pending(self) -> None:
        while self._pending:
            resolve_unit(self._pending.pop(0), self._declarations)


def detect_dialect(sources: SourceSet) -> Dialect:
    """Return JAVAX if the sources reference ``javax.persistence`` and never ``jakarta.persistence``."""
    uses_jakarta = False
    uses_javax = False
    for unit in sources.units:
        names = [imp.name for imp in unit.imports]
        names.extend(annotation.name for decl in unit.declarations() for annotation in decl.annotations)
        for name in names:
            if name.startswith("jakarta.persistence"):
                uses_jakarta = True
            elif name.startswith("javax.persistence"):
                uses_javax = True
    return Dialect.JAVAX if uses_javax and not uses_jakarta else Dialect.JAKARTA
