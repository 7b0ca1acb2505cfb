# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""The environment a host hands to the generator.

Bundles the source reader, the file writer, the options, the dialect flag and
the log sink.
"""

from __future__ import annotations

import logging
from typing import Protocol

from fluent_modelgen.gen_logging import get_logger
from fluent_modelgen.host.filer import Filer
from fluent_modelgen.host.options import GeneratorOptions
from fluent_modelgen.model.declarations import TypeDecl

# ###############
# Public Interface
# ###############


class SourceReader(Protocol):
    """Read access to the declarations known to the host."""

    def root_declarations(self, round_number: int) -> list[TypeDecl]:
        """Return the declarations offered in round *round_number*."""
        ...

    def resolve(self, qualified_name: str) -> TypeDecl | None:
        """Return the declaration named *qualified_name*, from any round."""
        ...


class HostEnvironment:
    """Host services used by the generator.

    Attributes:
        reader: The source reader.
        filer: The file writer.
        options: Generator options.
        legacy: True when the host uses the ``javax`` persistence namespace.
        error_count: Number of error-level records logged so far.
        warning_count: Number of warning-level records logged so far.
    """

    def __init__(
        self,
        reader: SourceReader,
        filer: Filer,
        options: GeneratorOptions | None = None,
        legacy: bool = False,
        logger: logging.Logger | None = None,
    ) -> None:
        self.reader = reader
        self.filer = filer
        self.options = options if options is not None else GeneratorOptions()
        self.legacy = legacy
        self.error_count = 0
        self.warning_count = 0
        self._logger = logger if logger is not None else get_logger("fluent_modelgen.processor")
        if self.options.debug:
            self._logger.setLevel(logging.DEBUG)

    def log(self, level: int, message: str, *args: object) -> None:
        """Log *message* with ``%``-style *args* and count errors and warnings."""
        if level >= logging.ERROR:
            self.error_count += 1
        elif level >= logging.WARNING:
            self.warning_count += 1
        self._logger.log(level, message, *args)

    def debug(self, message: str, *args: object) -> None:
        self.log(logging.DEBUG, message, *args)

    def info(self, message: str, *args: object) -> None:
        self.log(logging.INFO, message, *args)

    def warning(self, message: str, *args: object) -> None:
        self.log(logging.WARNING, message, *args)

    def error(self, message: str, *args: object) -> None:
        self.log(logging.ERROR, message, *args)
