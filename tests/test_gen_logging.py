# Copyright 2026 Fluent Modelgen Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the logging helpers."""

import logging

import pytest

from fluent_modelgen.gen_logging import LOGGER_NAME, configure_logging, get_logger


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        (None, "fluent_modelgen"),
        ("fluent_modelgen", "fluent_modelgen"),
        ("fluent_modelgen.compiler.scanner", "fluent_modelgen.compiler.scanner"),
        ("plugins.custom_writer", "fluent_modelgen.custom_writer"),
    ],
)
def test_get_logger(name: str | None, expected: str) -> None:
    assert get_logger(name).name == expected


@pytest.mark.parametrize(
    ("debug", "quiet", "level"),
    [(False, False, logging.INFO), (True, False, logging.DEBUG), (False, True, logging.WARNING), (True, True, logging.DEBUG)],
)
def test_configure_logging_levels(debug: bool, quiet: bool, level: int) -> None:
    configure_logging(debug=debug, quiet=quiet)
    root = logging.getLogger(LOGGER_NAME)
    assert root.level == level
    assert len(root.handlers) == 1
    assert root.handlers[0].level == level
    assert not root.propagate


def test_configure_logging_twice_keeps_one_handler() -> None:
    configure_logging()
    configure_logging(quiet=True)
    root = logging.getLogger(LOGGER_NAME)
    assert len(root.handlers) == 1
    assert root.handlers[0].level == logging.WARNING


def test_format(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging()
    get_logger("fluent_modelgen.processor").warning("No id found on %s", "p.A")
    assert capsys.readouterr().err == "warning: No id found on p.A\n"


@pytest.mark.parametrize(
    ("level", "kind"),
    [(logging.DEBUG, "debug"), (logging.INFO, "note"), (logging.ERROR, "error"), (logging.CRITICAL, "error")],
)
def test_diagnostic_kinds(capsys: pytest.CaptureFixture[str], level: int, kind: str) -> None:
    configure_logging(debug=True)
    get_logger().log(level, "Cyclic inheritance: %s", "p.A -> p.A")
    assert capsys.readouterr().err == f"{kind}: Cyclic inheritance: p.A -> p.A\n"
