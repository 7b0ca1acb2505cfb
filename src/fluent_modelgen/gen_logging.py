# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Diagnostics for the model generator.

Every module logs through ``get_logger(__name__)``; records end up on one
stderr handler owned by the ``fluent_modelgen`` logger and are printed the
way a Java compiler prints processor messages, e.g.
``warning: No id found on p.Customer; repository not generated``.
"""

import logging
import sys

# ###############
# Public Interface
# ###############

LOGGER_NAME = "fluent_modelgen"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the generator logger for a module.

    Modules of this package keep their dotted name; any other name is hung
    below ``fluent_modelgen`` by its last component.
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name.rsplit('.', 1)[-1]}")


def configure_logging(debug: bool = False, quiet: bool = False) -> None:
    """Set the diagnostic level and install the stderr handler once.

    ``debug`` wins over ``quiet``: DEBUG shows every skipped member and
    emitted file, WARNING hides notes. Later calls only move the level.
    """
    level = _level(debug, quiet)
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(_DiagnosticFormatter())
        logger.addHandler(handler)
    for handler in logger.handlers:
        handler.setLevel(level)


# ################
# Implementation
# ################

_DIAGNOSTIC_KINDS = {
    logging.DEBUG: "debug",
    logging.INFO: "note",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def _level(debug: bool, quiet: bool) -> int:
    if debug:
        return logging.DEBUG
    return logging.WARNING if quiet else logging.INFO


class _DiagnosticFormatter(logging.Formatter):
    """Prefixes each message with its compiler diagnostic kind."""

    def format(self, record: logging.LogRecord) -> str:
        kind = _DIAGNOSTIC_KINDS.get(record.levelno, record.levelname.lower())
        return f"{kind}: {record.getMessage()}"
